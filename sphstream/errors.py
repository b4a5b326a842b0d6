"""Exception types raised by the SPH core."""


class SPHError(Exception):
    """Base class for all sphstream errors."""


class ConfigurationError(SPHError, ValueError):
    """Invalid simulation setup (masses, smoothing radius, particle count, ...).

    Raised at construction time; no partial state is created.
    """


class ChannelClosed(SPHError):
    """The other end of a snapshot channel is gone.

    Terminal: the producer should stop simulating, the consumer should stop
    waiting for snapshots.
    """

"""Headless consumer that logs density statistics for each snapshot."""

import logging
from typing import Optional

from ..core.channel import SnapshotChannel
from ..physics.density_vectorized import density_statistics

logger = logging.getLogger(__name__)


class DensityLogger:
    """Drain a channel and report min/mean/max density every few ticks."""

    def __init__(self, channel: SnapshotChannel, log_every: int = 10):
        self.channel = channel
        self.log_every = max(1, log_every)
        self.snapshots_seen = 0
        self.last_tick = 0

    def run(self, max_snapshots: Optional[int] = None) -> int:
        """Consume until the producer stops or max_snapshots are seen.

        Reaching max_snapshots closes the receiver, which stops the
        producer on its next send.

        Returns:
            Number of snapshots consumed
        """
        for snapshot in self.channel:
            self.snapshots_seen += 1
            self.last_tick = snapshot.tick
            if self.snapshots_seen % self.log_every == 0:
                stats = density_statistics(snapshot.density)
                logger.info("tick %d: %d particles, density min=%.4f mean=%.4f max=%.4f",
                            snapshot.tick, len(snapshot), stats['min'], stats['mean'], stats['max'])
            if max_snapshots is not None and self.snapshots_seen >= max_snapshots:
                self.channel.close_receiver()
                break
        return self.snapshots_seen

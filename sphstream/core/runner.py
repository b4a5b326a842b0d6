"""
Producer loop: step the simulation and push snapshots into a channel.

Runs until the receiver closes (or max_ticks snapshots have been delivered).
Particle state stays inside this loop; only snapshots leave it.
"""

import logging
import threading
from typing import Optional

from ..errors import ChannelClosed
from .channel import SnapshotChannel

logger = logging.getLogger(__name__)


def run_simulation_loop(simulation, channel: SnapshotChannel,
                        max_ticks: Optional[int] = None) -> int:
    """Step and send until the consumer goes away.

    The sender is always closed on exit so a waiting consumer wakes up.

    Args:
        simulation: Object with a step() -> RenderSnapshot method
        channel: Snapshot channel to send on
        max_ticks: Stop after this many delivered snapshots (None: forever)

    Returns:
        Number of snapshots delivered
    """
    delivered = 0
    logger.info("Simulation loop started (%d particles, capacity=%d, overflow=%s)",
                simulation.n_particles, channel.capacity, channel.overflow.value)
    try:
        while max_ticks is None or delivered < max_ticks:
            snapshot = simulation.step()
            try:
                channel.send(snapshot)
            except ChannelClosed:
                logger.info("Consumer closed the channel at tick %d, stopping", snapshot.tick)
                break
            delivered += 1
    finally:
        channel.close_sender()

    logger.info("Simulation loop finished after %d snapshots", delivered)
    return delivered


class SimulationThread(threading.Thread):
    """Background thread running run_simulation_loop.

    Daemonic, so an interpreter exit does not wait on an unbounded run.
    """

    def __init__(self, simulation, channel: SnapshotChannel,
                 max_ticks: Optional[int] = None, name: str = "simulation"):
        super().__init__(name=name, daemon=True)
        self.simulation = simulation
        self.channel = channel
        self.max_ticks = max_ticks
        self.delivered = 0

    def run(self):
        self.delivered = run_simulation_loop(self.simulation, self.channel, self.max_ticks)

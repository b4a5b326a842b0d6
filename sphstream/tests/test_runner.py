"""
Producer loop tests.

The simulation thread and a consumer thread communicate only through the
channel; closing the receiver must stop the simulation.
"""

import pytest
from sphstream import Simulation, SimulationConfig
from sphstream.core.channel import SnapshotChannel, OverflowPolicy
from sphstream.core.runner import SimulationThread, run_simulation_loop
from sphstream.visualization import DensityLogger
from sphstream.scenarios import create_random_cube


@pytest.fixture
def simulation():
    return Simulation(create_random_cube(64, seed=2), SimulationConfig(backend='cpu'))


class TestLoop:
    def test_closed_consumer_stops_loop(self, simulation):
        """Once the receiver is gone the next send fails and no more ticks run."""
        channel = SnapshotChannel(capacity=0)
        channel.close_receiver()

        delivered = run_simulation_loop(simulation, channel)

        assert delivered == 0
        assert simulation.tick == 1
        assert channel.sender_closed

    def test_max_ticks(self, simulation):
        channel = SnapshotChannel(capacity=0)
        delivered = run_simulation_loop(simulation, channel, max_ticks=5)

        assert delivered == 5
        assert channel.sender_closed
        assert [s.tick for s in channel] == [1, 2, 3, 4, 5]


class TestThreads:
    @pytest.mark.parametrize("capacity,overflow", [
        (4, OverflowPolicy.BLOCK),
        (0, OverflowPolicy.BLOCK),
        (2, OverflowPolicy.DROP_OLDEST),
    ])
    def test_consumer_close_stops_producer(self, simulation, capacity, overflow):
        """Unbounded producer thread terminates after the consumer leaves."""
        channel = SnapshotChannel(capacity=capacity, overflow=overflow)
        consumer = DensityLogger(channel, log_every=5)

        producer = SimulationThread(simulation, channel)
        producer.start()
        consumed = consumer.run(max_snapshots=10)
        producer.join(timeout=5.0)

        assert not producer.is_alive()
        assert consumed == 10
        assert producer.delivered >= 10
        # Exactly one tick was computed after the last successful send
        assert simulation.tick == producer.delivered + 1
        assert channel.qsize() == 0

    def test_block_policy_delivers_in_order(self, simulation):
        channel = SnapshotChannel(capacity=3, overflow=OverflowPolicy.BLOCK)
        producer = SimulationThread(simulation, channel, max_ticks=25)
        producer.start()
        ticks = [s.tick for s in channel]
        producer.join(timeout=5.0)

        assert ticks == list(range(1, 26))
        assert producer.delivered == 25

    def test_snapshots_have_all_particles(self, simulation):
        channel = SnapshotChannel()
        producer = SimulationThread(simulation, channel, max_ticks=3)
        producer.start()
        sizes = [len(s) for s in channel]
        producer.join(timeout=5.0)
        assert sizes == [64, 64, 64]

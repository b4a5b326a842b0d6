#!/usr/bin/env python3
"""
Headless SPH run: same producer thread as main.py, with a consumer that
logs density statistics instead of drawing.
"""

import logging
import time

from .core.channel import OverflowPolicy, SnapshotChannel
from .core.runner import SimulationThread
from .logging_utils import configure_logging
from .main import build_parser, build_simulation
from .visualization.density_logger import DensityLogger

logger = logging.getLogger(__name__)


def main(argv=None):
    parser = build_parser("SPH Simulation (Headless)")
    parser.add_argument("--log-every", type=int, default=10, help="Log every N snapshots")
    parser.set_defaults(ticks=100)
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    simulation = build_simulation(args)
    channel = SnapshotChannel(capacity=args.capacity, overflow=OverflowPolicy(args.overflow))
    consumer = DensityLogger(channel, log_every=args.log_every)

    t0 = time.perf_counter()
    producer = SimulationThread(simulation, channel, max_ticks=args.ticks)
    producer.start()
    try:
        consumed = consumer.run()
    finally:
        channel.close_receiver()
        producer.join()
    elapsed = time.perf_counter() - t0

    logger.info("Consumed %d snapshots in %.2f s (%.1f ticks/s, %d dropped)",
                consumed, elapsed, consumed / elapsed if elapsed > 0 else 0.0, channel.dropped)
    return consumed


if __name__ == "__main__":
    main()

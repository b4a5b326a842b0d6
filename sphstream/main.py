#!/usr/bin/env python3
"""
Windowed SPH run: simulation in a background thread, Pygame window in the
main thread, connected by a snapshot channel.
"""

import argparse
import logging

from . import scenarios
from .config import SimulationConfig
from .core.channel import OverflowPolicy, SnapshotChannel
from .core.runner import SimulationThread
from .logging_utils import configure_logging
from .simulation import Simulation

logger = logging.getLogger(__name__)


def build_parser(description: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument("--particles", type=int, default=1000, help="Number of particles")
    parser.add_argument("--dt", type=float, default=0.01, help="Time step")
    parser.add_argument("--smoothing-h", type=float, default=1.0, help="Kernel support radius")
    parser.add_argument("--kernel", choices=["poly6", "spiky"], default="poly6",
                        help="Kernel used for density")
    parser.add_argument("--stiffness", type=float, default=0.1, help="Restoring force constant")
    parser.add_argument("--capacity", type=int, default=16,
                        help="Snapshot queue capacity (0 = unbounded)")
    parser.add_argument("--overflow", choices=[p.value for p in OverflowPolicy],
                        default=OverflowPolicy.BLOCK.value, help="Policy when the queue is full")
    parser.add_argument("--backend", choices=["cpu", "numba", "auto"], default="auto")
    parser.add_argument("--spatial-index", action="store_true",
                        help="Evaluate density through a uniform grid")
    parser.add_argument("--seed", type=int, default=None, help="Seed for initial positions")
    parser.add_argument("--ticks", type=int, default=None, help="Stop after this many ticks")
    parser.add_argument("--log-level", default="INFO")
    return parser


def build_simulation(args) -> Simulation:
    """Create particles and the simulation described by parsed arguments."""
    config = SimulationConfig(
        dt=args.dt,
        smoothing_h=args.smoothing_h,
        density_kernel=args.kernel,
        backend=args.backend,
        use_spatial_index=args.spatial_index,
    )
    particles = scenarios.create_random_cube(args.particles, stiffness=args.stiffness,
                                             seed=args.seed)
    simulation = Simulation(particles, config)
    logger.info("Particles: %d, dt=%g, h=%g, kernel=%s, backend=%s",
                simulation.n_particles, config.dt, config.smoothing_h,
                config.density_kernel.value, simulation.backend.value)
    return simulation


def main(argv=None):
    args = build_parser("SPH Simulation").parse_args(argv)
    configure_logging(args.log_level)

    # Imported here so headless entry points do not need a display library
    from .visualization.pygame_renderer import PygameRenderer

    simulation = build_simulation(args)
    channel = SnapshotChannel(capacity=args.capacity, overflow=OverflowPolicy(args.overflow))
    renderer = PygameRenderer()

    producer = SimulationThread(simulation, channel, max_ticks=args.ticks)
    producer.start()
    try:
        renderer.run(channel)
    finally:
        channel.close_receiver()
        producer.join()
        renderer.close()
    logger.info("Delivered %d snapshots, drew %d frames", producer.delivered, renderer.frames_drawn)


if __name__ == "__main__":
    main()

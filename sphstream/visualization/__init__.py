"""Snapshot consumers.

PygameRenderer lives in visualization.pygame_renderer and is not imported
here so headless use does not require pygame.
"""

from .density_logger import DensityLogger

__all__ = ['DensityLogger']

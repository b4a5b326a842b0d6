"""
Particle window using Pygame.

Draws the x/y projection of each snapshot. Snapshot colors are unclamped
(density / D can exceed 1), so they are clipped to [0, 1] before display.
Closing the window closes the channel's receiver, which stops the
simulation thread.
"""

import logging

import numpy as np
import pygame
from typing import Optional, Tuple

from ..core.channel import SnapshotChannel
from ..core.snapshot import RenderSnapshot
from ..errors import ChannelClosed

logger = logging.getLogger(__name__)


class PygameRenderer:
    """Render RenderSnapshot objects received from a channel."""

    def __init__(self, extent: float = 1.5,
                 window_size: Tuple[int, int] = (800, 800),
                 title: str = "SPH Simulation",
                 particle_size: int = 2,
                 fps: int = 60):
        """Initialize Pygame renderer.

        Args:
            extent: Half width of the visible square [-extent, extent]²
            window_size: Window size in pixels
            title: Window title
            particle_size: Circle radius in pixels
            fps: Frame rate cap
        """
        self.extent = extent
        self.window_size = window_size
        self.particle_size = particle_size
        self.fps = fps

        pygame.init()
        self.screen = pygame.display.set_mode(window_size)
        pygame.display.set_caption(title)
        self.clock = pygame.time.Clock()

        self.scale_x = window_size[0] / (2.0 * extent)
        self.scale_y = window_size[1] / (2.0 * extent)
        self.bg_color = (20, 20, 20)
        self.is_running = True
        self.frames_drawn = 0
        self.last_tick = 0

    def to_screen(self, positions: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """Project (N, 3) positions to integer pixel coordinates (y up)."""
        screen_x = ((positions[:, 0] + self.extent) * self.scale_x).astype(int)
        screen_y = (self.window_size[1] - (positions[:, 1] + self.extent) * self.scale_y).astype(int)
        return screen_x, screen_y

    @staticmethod
    def to_rgb(colors: np.ndarray) -> np.ndarray:
        """Clip float colors to [0, 1] and convert to uint8 RGB."""
        return (np.clip(colors, 0.0, 1.0) * 255).astype(np.uint8)

    def render(self, snapshot: RenderSnapshot):
        """Draw one snapshot and flip the display."""
        self.screen.fill(self.bg_color)
        screen_x, screen_y = self.to_screen(snapshot.positions)
        rgb = self.to_rgb(snapshot.colors)

        width, height = self.window_size
        visible = (screen_x >= 0) & (screen_x < width) & (screen_y >= 0) & (screen_y < height)
        for x, y, color in zip(screen_x[visible], screen_y[visible], rgb[visible]):
            pygame.draw.circle(self.screen, tuple(int(c) for c in color), (int(x), int(y)),
                               self.particle_size)

        pygame.display.flip()
        self.frames_drawn += 1
        self.last_tick = snapshot.tick

    def handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.is_running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                self.is_running = False

    def run(self, channel: SnapshotChannel, max_frames: Optional[int] = None):
        """Receive and draw until the window closes or the producer stops."""
        try:
            while self.is_running:
                self.handle_events()
                if not self.is_running:
                    break
                try:
                    snapshot = channel.receive(timeout=1.0 / self.fps)
                except TimeoutError:
                    continue
                except ChannelClosed:
                    logger.info("Simulation stopped after tick %d", self.last_tick)
                    break
                self.render(snapshot)
                pygame.display.set_caption(f"SPH Simulation - tick {snapshot.tick} - "
                                           f"{self.clock.get_fps():.0f} fps")
                self.clock.tick(self.fps)
                if max_frames is not None and self.frames_drawn >= max_frames:
                    break
        finally:
            channel.close_receiver()

    def close(self):
        pygame.quit()

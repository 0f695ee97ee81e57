import logging
from typing import Callable, List, Sequence, Tuple

import pygame

from camera import PerspectiveCamera

logger = logging.getLogger(__name__)


class HitMarkers:
    """Short-lived "HIT!" labels drawn where a shot landed."""

    def __init__(
        self,
        camera: PerspectiveCamera,
        screen_size: Callable[[], Tuple[int, int]],
        life_ms: int = 800,
        rise_px: float = 40.0,
    ):
        self.camera = camera
        self.screen_size = screen_size
        self.life_ms = life_ms
        self.rise_px = rise_px
        self.markers: List[dict] = []

    def notify_hit(self, world_point: Sequence[float]) -> None:
        ndc = self.camera.project(world_point)
        if ndc is None:
            logger.debug("hit point %s is behind the camera, no marker", world_point)
            return
        w, h = self.screen_size()
        x, y = self.camera.to_pixels(ndc, w, h)
        self.markers.append({
            "x": x,
            "y": y,
            "life": self.life_ms,
            "max_life": float(self.life_ms),
        })

    def update(self, dt_ms: int):
        for m in self.markers[:]:
            m["life"] -= dt_ms
            if m["life"] <= 0:
                self.markers.remove(m)

    def draw(self, screen, font):
        for m in self.markers:
            frac = max(0.0, min(1.0, m["life"] / m["max_life"]))
            txt = font.render("HIT!", True, (255, 230, 0))
            txt.set_alpha(int(255 * frac))
            rise = int(self.rise_px * (1.0 - frac))
            rect = txt.get_rect(center=(m["x"], m["y"] - rise))
            screen.blit(txt, rect)

import logging
import random
import time
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pygame

from camera import PerspectiveCamera, resolve_ray
from effects import HitMarkers
from events import EventChannel, HandsDetected
from gestures import INDEX_FINGER_TIP, GunGestureClassifier, MalformedHandError, to_hand
from settings import GameSettings
from targets import Hit, TargetRegistry

logger = logging.getLogger(__name__)


class GameEngine:
    """Frame driver: owns the camera, the live targets and the hit effects,
    and turns every HandsDetected event into shots.
    """

    def __init__(self, settings: Optional[GameSettings] = None, channel: Optional[EventChannel] = None, emitter=None):
        self.settings = settings if settings is not None else GameSettings()
        s = self.settings

        pygame.init()
        self.screen_width = s.screen_width
        self.screen_height = s.screen_height
        self.screen = pygame.display.set_mode((self.screen_width, self.screen_height), pygame.RESIZABLE)
        pygame.display.set_caption("Finger Gun")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.Font(None, 36)

        self.running = True
        self.paused = False

        self.shots = 0
        self.hits = 0
        self.last_shot_time: Optional[float] = None
        self.aim_points: List[Tuple[int, int]] = []
        self.background: Optional[np.ndarray] = None
        self.source = None

        self.camera = PerspectiveCamera(
            fov=s.fov,
            aspect=s.aspect,
            near=s.near,
            far=s.far,
            position=s.camera_position,
        )
        self.classifier = GunGestureClassifier(index_reach=s.index_reach, middle_bend=s.middle_bend)
        self.targets = TargetRegistry(
            radius=s.target_radius,
            x_range=s.x_range,
            y_range=s.y_range,
            z_range=s.z_range,
            rng=random.Random(s.seed),
        )
        self.hit_markers = HitMarkers(self.camera, lambda: (self.screen_width, self.screen_height))
        self.emitter = emitter if emitter is not None else self.hit_markers

        self.channel = channel if channel is not None else EventChannel()
        self._unsubscribe = self.channel.subscribe(self.on_hands_detected)

        self.targets.spawn(s.target_count)

    def on_hands_detected(self, event: HandsDetected):
        if self.paused:
            return
        self.aim_points = []
        for raw in event.hands:
            try:
                hand = to_hand(raw)
            except MalformedHandError as e:
                logger.warning("frame %d: skipping malformed hand: %s", event.frame_index, e)
                continue
            tip = hand[INDEX_FINGER_TIP]
            self.aim_points.append((int(tip.x * self.screen_width), int(tip.y * self.screen_height)))
            if self.classifier.classify(hand):
                self.shoot(tip)

    def _cooling_down(self, now_ms: float) -> bool:
        cooldown = self.settings.shot_cooldown_ms
        if not cooldown or self.last_shot_time is None:
            return False
        return now_ms - self.last_shot_time < cooldown

    def shoot(self, index_tip, now_ms: Optional[float] = None) -> Optional[Hit]:
        now = time.time() * 1000.0 if now_ms is None else now_ms
        if self._cooling_down(now):
            return None
        ray = resolve_ray(index_tip, self.camera)
        with self.targets.lock:
            self.last_shot_time = now
            self.shots += 1
            hit = self.targets.intersect(ray)
            if hit is None:
                return None
            self.targets.remove(hit.target)
            self._respawn()
            self.hits += 1
        logger.debug("hit %r at distance %.2f", hit.target, hit.distance)
        self.emitter.notify_hit(hit.point)
        return hit

    def _respawn(self):
        if self.settings.respawn == "refresh":
            self.targets.clear()
            self.targets.spawn(self.settings.target_count)
        else:
            self.targets.spawn(1)

    def resize(self, width: int, height: int):
        if width <= 0 or height <= 0:
            return
        self.screen_width = width
        self.screen_height = height
        self.camera.set_aspect(width / height)
        self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)
        if self.source is not None:
            self.source.resize(width, height)

    def _toggle_pause(self):
        self.paused = not self.paused

    def _handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.VIDEORESIZE:
                self.resize(event.w, event.h)
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_p:
                    self._toggle_pause()

    def _draw_background(self):
        self.screen.fill((15, 15, 18))
        if self.background is None:
            return
        surf = pygame.surfarray.make_surface(np.swapaxes(self.background, 0, 1))
        surf = pygame.transform.scale(surf, (self.screen_width, self.screen_height))
        self.screen.blit(surf, (0, 0))

    def _draw_crosshairs(self, points: Sequence[Tuple[int, int]]):
        for x, y in points:
            pygame.draw.circle(self.screen, (0, 255, 0), (x, y), 12, 2)
            pygame.draw.line(self.screen, (0, 255, 0), (x - 20, y), (x + 20, y), 1)
            pygame.draw.line(self.screen, (0, 255, 0), (x, y - 20), (x, y + 20), 1)

    def _draw_hud(self):
        hits_text = self.font.render(f"Hits: {self.hits}", True, (255, 255, 255))
        self.screen.blit(hits_text, (20, 20))
        if self.paused:
            paused_text = self.font.render("PAUSED", True, (255, 255, 0))
            rect = paused_text.get_rect(center=(self.screen_width // 2, 40))
            self.screen.blit(paused_text, rect)

    def draw(self):
        self._draw_background()
        # far to near so closer targets cover farther ones
        for t in sorted(self.targets, key=lambda t: -np.linalg.norm(t.position - self.camera.position)):
            t.draw(self.screen, self.camera)
        self._draw_crosshairs(self.aim_points)
        self.hit_markers.draw(self.screen, self.font)
        self._draw_hud()

    def run(self, source):
        self.source = source
        try:
            while self.running:
                dt_ms = self.clock.tick(self.settings.fps)
                self._handle_events()

                # publishes HandsDetected on the channel, handled synchronously
                frame = source.poll()
                if frame is not None:
                    self.background = frame

                if not self.paused:
                    self.targets.update()
                self.hit_markers.update(dt_ms)

                self.draw()
                pygame.display.flip()
        finally:
            self._unsubscribe()
            pygame.quit()

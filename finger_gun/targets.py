import itertools
import logging
import math
import random
import threading
from typing import Iterator, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np
import pygame

from camera import PerspectiveCamera, Ray

logger = logging.getLogger(__name__)

_ids = itertools.count(1)


class TargetNotFoundError(LookupError):
    pass


class Target:
    def __init__(
        self,
        position: Sequence[float],
        radius: float = 0.5,
        color: Tuple[int, int, int] = (255, 0, 0),
    ):
        self.id = next(_ids)
        self.position = np.asarray(position, dtype=float)
        self.radius = float(radius)
        self.color = color
        # cosmetic spin, not used for hit testing
        self.rotation_x = 0.0
        self.rotation_y = 0.0

    def __repr__(self) -> str:
        x, y, z = self.position
        return f"Target(id={self.id}, position=({x:.2f}, {y:.2f}, {z:.2f}))"

    def update(self, step: float = 0.01):
        self.rotation_x += step
        self.rotation_y += step

    def ray_distance(self, ray: Ray) -> Optional[float]:
        """Distance along `ray` to the first point on the bounding sphere, or None."""
        oc = ray.origin - self.position
        b = float(np.dot(oc, ray.direction))
        c = float(np.dot(oc, oc)) - self.radius * self.radius
        disc = b * b - c
        if disc < 0.0:
            return None
        sq = math.sqrt(disc)
        t = -b - sq
        if t < 0.0:
            # ray starts inside the sphere
            t = -b + sq
        if t < 0.0:
            return None
        return t

    def draw(self, screen, camera: PerspectiveCamera):
        ndc = camera.project(self.position)
        if ndc is None:
            return
        w, h = screen.get_size()
        cx, cy = camera.to_pixels(ndc, w, h)
        r = int(round(camera.pixel_radius(self.position, self.radius, h)))
        if r <= 0:
            return
        pygame.draw.circle(screen, self.color, (cx, cy), r)
        pygame.draw.circle(screen, (0, 0, 0), (cx, cy), r, 2)
        # spin marker: a meridian line tilted by the current rotation
        dx = int(math.cos(self.rotation_y) * r)
        dy = int(math.sin(self.rotation_x) * r)
        pygame.draw.line(screen, (255, 200, 200), (cx - dx, cy - dy), (cx + dx, cy + dy), 2)


class Hit(NamedTuple):
    target: Target
    point: np.ndarray
    distance: float


class TargetRegistry:
    """Live set of shootable targets.

    The registry only tracks what it is told to track; keeping the population
    constant is up to the caller. Hold `lock` across intersect/remove/spawn
    when more than one thread can mutate it.
    """

    def __init__(
        self,
        radius: float = 0.5,
        x_range: Tuple[float, float] = (-3.0, 3.0),
        y_range: Tuple[float, float] = (-2.0, 2.0),
        z_range: Tuple[float, float] = (-10.0, -5.0),
        rng: Optional[random.Random] = None,
    ):
        self.radius = float(radius)
        self.x_range = x_range
        self.y_range = y_range
        self.z_range = z_range
        self.rng = rng if rng is not None else random.Random()
        self.lock = threading.RLock()
        self._targets: List[Target] = []

    def __len__(self) -> int:
        return len(self._targets)

    def __iter__(self) -> Iterator[Target]:
        return iter(list(self._targets))

    def __contains__(self, target) -> bool:
        return any(t is target for t in self._targets)

    def _random_position(self) -> Tuple[float, float, float]:
        return (
            self.rng.uniform(*self.x_range),
            self.rng.uniform(*self.y_range),
            self.rng.uniform(*self.z_range),
        )

    def add(self, target: Target) -> Target:
        with self.lock:
            self._targets.append(target)
        return target

    def spawn(self, count: int) -> List[Target]:
        if count < 0:
            raise ValueError(f"cannot spawn a negative number of targets: {count}")
        created = []
        with self.lock:
            for _ in range(count):
                t = Target(self._random_position(), radius=self.radius)
                self._targets.append(t)
                created.append(t)
        logger.debug("spawned %s", created)
        return created

    def remove(self, target: Target) -> None:
        with self.lock:
            for i, t in enumerate(self._targets):
                if t is target:
                    del self._targets[i]
                    return
        raise TargetNotFoundError(f"{target!r} is not a live target")

    def clear(self) -> None:
        with self.lock:
            self._targets.clear()

    def intersect(self, ray: Ray) -> Optional[Hit]:
        best: Optional[Hit] = None
        with self.lock:
            for t in self._targets:
                d = t.ray_distance(ray)
                if d is None:
                    continue
                # strict comparison keeps the first of equally distant targets
                if best is None or d < best.distance:
                    best = Hit(t, ray.at(d), d)
        return best

    def update(self):
        with self.lock:
            for t in self._targets:
                t.update()

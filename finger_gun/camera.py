import math
from typing import NamedTuple, Optional, Sequence, Tuple

import numpy as np


class CameraError(ValueError):
    pass


class Ray(NamedTuple):
    origin: np.ndarray
    direction: np.ndarray

    def at(self, distance: float) -> np.ndarray:
        return self.origin + self.direction * distance


class PerspectiveCamera:
    """Perspective camera with three.js conventions: looks down -z in its own
    frame, NDC x/y in [-1, 1] with y up, vertical field of view in degrees.
    """

    def __init__(
        self,
        fov: float = 75.0,
        aspect: float = 16 / 9,
        near: float = 0.1,
        far: float = 1000.0,
        position: Sequence[float] = (0.0, 0.0, 5.0),
        orientation: Optional[np.ndarray] = None,
    ):
        self.fov = float(fov)
        self.aspect = float(aspect)
        self.near = float(near)
        self.far = float(far)
        self.position = np.asarray(position, dtype=float)
        self.orientation = np.eye(3) if orientation is None else np.asarray(orientation, dtype=float)

    def set_aspect(self, aspect: float) -> None:
        self.aspect = float(aspect)

    def _check(self) -> None:
        if not (0.0 < self.fov < 180.0):
            raise CameraError(f"field of view must be in (0, 180) degrees, got {self.fov}")
        if not (math.isfinite(self.aspect) and self.aspect > 0.0):
            raise CameraError(f"aspect ratio must be positive, got {self.aspect}")
        if not (0.0 < self.near < self.far and math.isfinite(self.far)):
            raise CameraError(f"invalid clip planes near={self.near} far={self.far}")
        if self.position.shape != (3,) or not np.all(np.isfinite(self.position)):
            raise CameraError(f"invalid camera position {self.position!r}")
        if self.orientation.shape != (3, 3):
            raise CameraError("orientation must be a 3x3 matrix")

    def projection_matrix(self) -> np.ndarray:
        self._check()
        top = self.near * math.tan(math.radians(self.fov) / 2.0)
        height = 2.0 * top
        width = self.aspect * height
        n, f = self.near, self.far
        return np.array([
            [2.0 * n / width, 0.0, 0.0, 0.0],
            [0.0, 2.0 * n / height, 0.0, 0.0],
            [0.0, 0.0, -(f + n) / (f - n), -2.0 * f * n / (f - n)],
            [0.0, 0.0, -1.0, 0.0],
        ])

    def world_matrix(self) -> np.ndarray:
        self._check()
        m = np.eye(4)
        m[:3, :3] = self.orientation
        m[:3, 3] = self.position
        return m

    def unproject(self, nx: float, ny: float, nz: float = 0.5) -> np.ndarray:
        """NDC point -> world point."""
        try:
            inv_proj = np.linalg.inv(self.projection_matrix())
        except np.linalg.LinAlgError as e:
            raise CameraError(f"projection matrix is singular: {e}") from e
        p = self.world_matrix() @ inv_proj @ np.array([nx, ny, nz, 1.0])
        if p[3] == 0.0 or not np.all(np.isfinite(p)):
            raise CameraError(f"cannot unproject ({nx}, {ny}, {nz})")
        return p[:3] / p[3]

    def project(self, point: Sequence[float]) -> Optional[np.ndarray]:
        """World point -> NDC (x, y, depth), or None when behind the camera."""
        try:
            view = np.linalg.inv(self.world_matrix())
        except np.linalg.LinAlgError as e:
            raise CameraError(f"camera orientation is singular: {e}") from e
        p = self.projection_matrix() @ view @ np.append(np.asarray(point, dtype=float), 1.0)
        if p[3] <= 0.0:
            return None
        return p[:3] / p[3]

    def to_pixels(self, ndc: Sequence[float], width: int, height: int) -> Tuple[int, int]:
        x = (ndc[0] * 0.5 + 0.5) * width
        y = (-ndc[1] * 0.5 + 0.5) * height
        return int(round(x)), int(round(y))

    def pixel_radius(self, point: Sequence[float], radius: float, height: int) -> float:
        """Approximate on-screen radius of a sphere centred at `point`."""
        local = self.orientation.T @ (np.asarray(point, dtype=float) - self.position)
        depth = -local[2]
        if depth <= 0.0:
            return 0.0
        half_h = depth * math.tan(math.radians(self.fov) / 2.0)
        return radius / half_h * height / 2.0


def screen_coords(point) -> Tuple[float, float]:
    # image y grows downward, NDC y grows upward
    return 2.0 * point.x - 1.0, 1.0 - 2.0 * point.y


def resolve_ray(index_tip, camera: PerspectiveCamera) -> Ray:
    """Cast a ray from the camera through the fingertip's screen position.

    Depth (z) of the landmark is ignored: aiming is the 2D screen position of
    the fingertip, like a mouse pointer.
    """
    nx, ny = screen_coords(index_tip)
    origin = camera.position.astype(float)
    direction = camera.unproject(nx, ny, 0.5) - origin
    norm = float(np.linalg.norm(direction))
    if norm == 0.0 or not math.isfinite(norm):
        raise CameraError(f"degenerate ray direction for ({nx}, {ny})")
    return Ray(origin, direction / norm)

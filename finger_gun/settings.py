from dataclasses import dataclass, fields, replace
from typing import Any, Mapping, Optional, Tuple

RESPAWN_POLICIES = ("replace", "refresh")


@dataclass(frozen=True)
class GameSettings:
    # Window / loop
    screen_width: int = 1280
    screen_height: int = 720
    fps: int = 60

    # Targets
    target_count: int = 3
    target_radius: float = 0.5
    x_range: Tuple[float, float] = (-3.0, 3.0)
    y_range: Tuple[float, float] = (-2.0, 2.0)
    z_range: Tuple[float, float] = (-10.0, -5.0)
    respawn: str = "replace"
    seed: Optional[int] = None

    # Gesture
    index_reach: float = 0.3
    middle_bend: float = 0.1
    shot_cooldown_ms: int = 0  # 0 = fire on every qualifying frame

    # Camera
    fov: float = 75.0
    near: float = 0.1
    far: float = 1000.0
    camera_position: Tuple[float, float, float] = (0.0, 0.0, 5.0)

    # Detector
    camera_id: int = 0
    max_num_hands: int = 2
    min_detection_confidence: float = 0.7
    min_tracking_confidence: float = 0.7

    def __post_init__(self):
        if self.respawn not in RESPAWN_POLICIES:
            raise ValueError(f"respawn must be one of {RESPAWN_POLICIES}, got {self.respawn!r}")
        if self.target_count < 0:
            raise ValueError(f"target_count must be >= 0, got {self.target_count}")
        if self.target_radius <= 0:
            raise ValueError(f"target_radius must be > 0, got {self.target_radius}")
        if self.shot_cooldown_ms < 0:
            raise ValueError(f"shot_cooldown_ms must be >= 0, got {self.shot_cooldown_ms}")
        if self.screen_width <= 0 or self.screen_height <= 0:
            raise ValueError("screen size must be positive")
        for name in ("x_range", "y_range", "z_range"):
            lo, hi = getattr(self, name)
            if lo > hi:
                raise ValueError(f"{name} is empty: {lo} > {hi}")

    @property
    def aspect(self) -> float:
        return self.screen_width / self.screen_height

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "GameSettings":
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise ValueError(f"unknown settings: {', '.join(sorted(unknown))}")
        return cls(**values)

    def with_overrides(self, **overrides) -> "GameSettings":
        # None means "not given" (e.g. an unset CLI flag)
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

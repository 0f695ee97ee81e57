import math
from numbers import Real
from typing import NamedTuple, Sequence, Tuple

NUM_LANDMARKS = 21

# MediaPipe Hands numbering
WRIST = 0
INDEX_FINGER_TIP = 8
MIDDLE_FINGER_MCP = 9
MIDDLE_FINGER_TIP = 12


class MalformedHandError(ValueError):
    pass


class LandmarkPoint(NamedTuple):
    x: float
    y: float
    z: float = 0.0


Hand = Tuple[LandmarkPoint, ...]


def _as_point(raw, idx: int) -> LandmarkPoint:
    if hasattr(raw, "x") and hasattr(raw, "y"):
        coords = (raw.x, raw.y, getattr(raw, "z", 0.0))
    else:
        try:
            coords = tuple(raw)
        except TypeError:
            raise MalformedHandError(f"landmark {idx} is not a point: {raw!r}") from None
        if len(coords) == 2:
            coords = (coords[0], coords[1], 0.0)
        elif len(coords) != 3:
            raise MalformedHandError(f"landmark {idx} has {len(coords)} coordinates")
    for c in coords:
        if isinstance(c, bool) or not isinstance(c, Real) or not math.isfinite(c):
            raise MalformedHandError(f"landmark {idx} has a non-numeric coordinate: {c!r}")
    return LandmarkPoint(float(coords[0]), float(coords[1]), float(coords[2]))


def to_hand(landmarks) -> Hand:
    """Normalise one detected hand into a tuple of 21 LandmarkPoints.

    Accepts LandmarkPoints, MediaPipe landmark objects (anything with x/y/z
    attributes) or plain (x, y[, z]) sequences. Raises MalformedHandError for
    anything else, including a hand that is not exactly 21 points long.
    """
    if landmarks is None:
        raise MalformedHandError("hand is None")
    try:
        pts = list(landmarks)
    except TypeError:
        raise MalformedHandError(f"hand is not a sequence of points: {landmarks!r}") from None
    if len(pts) != NUM_LANDMARKS:
        raise MalformedHandError(f"expected {NUM_LANDMARKS} landmarks, got {len(pts)}")
    return tuple(_as_point(p, i) for i, p in enumerate(pts))


def distance(a: LandmarkPoint, b: LandmarkPoint) -> float:
    return math.dist(a, b)


class GunGestureClassifier:
    """Finger-gun heuristic: index finger stretched away from the wrist while
    the middle finger is curled onto its own base.

    This is a placeholder heuristic, not a robust classifier. Thresholds are
    in normalized image units.
    """

    def __init__(self, index_reach: float = 0.3, middle_bend: float = 0.1):
        self.index_reach = float(index_reach)
        self.middle_bend = float(middle_bend)

    def measure(self, hand: Sequence) -> Tuple[float, float]:
        pts = to_hand(hand)
        index_dist = distance(pts[INDEX_FINGER_TIP], pts[WRIST])
        middle_dist = distance(pts[MIDDLE_FINGER_TIP], pts[MIDDLE_FINGER_MCP])
        return index_dist, middle_dist

    def classify(self, hand: Sequence) -> bool:
        index_dist, middle_dist = self.measure(hand)
        return index_dist > self.index_reach and middle_dist < self.middle_bend

    __call__ = classify


_default_classifier = GunGestureClassifier()


def is_gun_gesture(hand: Sequence) -> bool:
    return _default_classifier.classify(hand)

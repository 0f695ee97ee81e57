from typing import List, Optional, Tuple

import numpy as np

from events import EventChannel, HandsDetected
from gestures import NUM_LANDMARKS, WRIST, INDEX_FINGER_TIP, LandmarkPoint


def hands_from_results(results) -> List[list]:
    """MediaPipe Hands results -> list of raw landmark lists, one per hand."""
    multi = getattr(results, "multi_hand_landmarks", None)
    if not multi:
        return []
    return [list(h.landmark) for h in multi]


class LandmarkSource:
    """Base for anything that turns captured frames into HandsDetected events."""

    def __init__(self, channel: Optional[EventChannel] = None):
        self.channel = channel if channel is not None else EventChannel()
        self.frame_index = 0

    def read(self) -> Tuple[bool, Optional[np.ndarray], list]:
        """Return (captured, rgb_frame, hands)."""
        raise NotImplementedError

    def poll(self) -> Optional[np.ndarray]:
        captured, frame, hands = self.read()
        if not captured:
            return None
        self.frame_index += 1
        self.channel.publish(HandsDetected(tuple(hands), self.frame_index))
        return frame

    def resize(self, width: int, height: int) -> None:
        pass

    def shutdown(self) -> None:
        pass


def gun_hand(x: float, y: float, reach: float = 0.35) -> List[LandmarkPoint]:
    """Synthetic finger-gun hand with its index tip at (x, y)."""
    knuckles = LandmarkPoint(x, y + reach * 0.6)
    pts = [knuckles] * NUM_LANDMARKS
    pts[WRIST] = LandmarkPoint(x, y + reach)
    pts[INDEX_FINGER_TIP] = LandmarkPoint(x, y)
    return pts


# Debug fallback: mouse-based source for testing without webcam
class MouseTracker(LandmarkSource):
    def __init__(self, screen_width: int = 1280, screen_height: int = 720, channel: Optional[EventChannel] = None):
        super().__init__(channel)
        self.screen_width = screen_width
        self.screen_height = screen_height

    def resize(self, width: int, height: int) -> None:
        # pointer positions are normalized against the current window size
        self.screen_width = width
        self.screen_height = height

    def read(self) -> Tuple[bool, Optional[np.ndarray], list]:
        # Left mouse button held -> one gun-shaped hand under the pointer
        import pygame
        if not pygame.mouse.get_pressed()[0]:
            return True, None, []
        x, y = pygame.mouse.get_pos()
        x = max(0, min(self.screen_width - 1, int(x)))
        y = max(0, min(self.screen_height - 1, int(y)))
        return True, None, [gun_hand(x / self.screen_width, y / self.screen_height)]

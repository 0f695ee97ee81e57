import logging
from typing import Optional, Tuple

import cv2
import mediapipe as mp
import numpy as np

from events import EventChannel
from landmark_source import LandmarkSource, hands_from_results

logger = logging.getLogger(__name__)


class HandTracker(LandmarkSource):
    """Webcam + MediaPipe Hands landmark source."""

    def __init__(
        self,
        camera_id: int = 0,
        frame_width: int = 1280,
        frame_height: int = 720,
        max_num_hands: int = 2,
        min_detection_confidence: float = 0.7,
        min_tracking_confidence: float = 0.7,
        model_complexity: int = 1,
        mirror: bool = True,
        channel: Optional[EventChannel] = None,
    ):
        super().__init__(channel)
        self.mirror = mirror

        self.cap = cv2.VideoCapture(camera_id)
        # Request camera resolution similar to the window for direct mapping
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, frame_width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, frame_height)

        if not self.cap.isOpened():
            self.cap.release()
            raise RuntimeError(f"Cannot open webcam {camera_id}. Check the connection and permissions.")

        self.mp_hands = mp.solutions.hands
        self.hands = self.mp_hands.Hands(
            static_image_mode=False,
            max_num_hands=max_num_hands,
            model_complexity=model_complexity,
            min_detection_confidence=min_detection_confidence,
            min_tracking_confidence=min_tracking_confidence,
        )
        logger.info("webcam %s opened, tracking up to %d hand(s)", camera_id, max_num_hands)

    def shutdown(self) -> None:
        if self.cap is not None:
            self.cap.release()
            self.cap = None
        if getattr(self, "hands", None) is not None:
            self.hands.close()
            self.hands = None

    def read(self) -> Tuple[bool, Optional[np.ndarray], list]:
        success, img = self.cap.read()
        if not success or img is None:
            return False, None, []

        # Mirror for natural interaction
        if self.mirror:
            img = cv2.flip(img, 1)
        img_rgb = cv2.cvtColor(img, cv2.COLOR_BGR2RGB)
        img_rgb.flags.writeable = False
        results = self.hands.process(img_rgb)
        return True, img_rgb, hands_from_results(results)

import os
import sys
from pathlib import Path

# Headless drivers for CI/testing
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

# Ensure absolute imports like `from targets import TargetRegistry` work when importing package modules
PROJECT_ROOT = Path(__file__).resolve().parents[1]
MODULE_DIR = PROJECT_ROOT / "finger_gun"
if str(MODULE_DIR) not in sys.path:
    sys.path.insert(0, str(MODULE_DIR))

import pytest
from gestures import LandmarkPoint


def make_hand(
    index_tip=(0.5, 0.5, 0.0),
    wrist=(0.5, 0.82, 0.0),
    middle_tip=(0.5, 0.65, 0.0),
    middle_base=(0.5, 0.6, 0.0),
):
    """21-point hand with the four landmarks the gun gesture looks at set explicitly."""
    filler = LandmarkPoint(0.5, 0.7, 0.0)
    pts = [filler] * 21
    pts[0] = LandmarkPoint(*wrist)
    pts[8] = LandmarkPoint(*index_tip)
    pts[9] = LandmarkPoint(*middle_base)
    pts[12] = LandmarkPoint(*middle_tip)
    return pts


@pytest.fixture
def hand_factory():
    return make_hand

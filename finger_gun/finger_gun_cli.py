import argparse
import logging
import sys

from events import EventChannel
from game_engine import GameEngine
from hand_tracker import HandTracker
from landmark_source import MouseTracker
from settings import RESPAWN_POLICIES, GameSettings

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="finger-gun",
        description="Shoot floating targets by pointing a finger gun at the webcam",
    )
    parser.add_argument("--camera", type=int, default=None, help="Webcam index (default: 0)")
    parser.add_argument("--width", type=int, default=None, help="Window width in pixels")
    parser.add_argument("--height", type=int, default=None, help="Window height in pixels")
    parser.add_argument("--targets", type=int, default=None, help="Number of live targets (default: 3)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for target placement")
    parser.add_argument(
        "--cooldown-ms",
        type=int,
        default=None,
        help="Minimum time between shots; 0 fires on every frame (default: 0)",
    )
    parser.add_argument(
        "--respawn",
        choices=RESPAWN_POLICIES,
        default=None,
        help="replace: one new target per hit; refresh: new batch per hit",
    )
    parser.add_argument("--mouse", action="store_true", help="Aim with the mouse instead of the webcam")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    return parser


def settings_from_args(args: argparse.Namespace) -> GameSettings:
    return GameSettings().with_overrides(
        camera_id=args.camera,
        screen_width=args.width,
        screen_height=args.height,
        target_count=args.targets,
        seed=args.seed,
        shot_cooldown_ms=args.cooldown_ms,
        respawn=args.respawn,
    )


def _open_tracker(settings: GameSettings, channel: EventChannel, use_mouse: bool):
    if not use_mouse:
        try:
            return HandTracker(
                camera_id=settings.camera_id,
                frame_width=settings.screen_width,
                frame_height=settings.screen_height,
                max_num_hands=settings.max_num_hands,
                min_detection_confidence=settings.min_detection_confidence,
                min_tracking_confidence=settings.min_tracking_confidence,
                channel=channel,
            )
        except RuntimeError as cam_err:
            logger.warning("Webcam unavailable (%s). Falling back to mouse mode.", cam_err)
    logger.info("Aim with the mouse, hold the left button to shoot")
    return MouseTracker(settings.screen_width, settings.screen_height, channel=channel)


def main(argv=None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = settings_from_args(args)
    except ValueError as e:
        logger.error("Invalid settings: %s", e)
        return 2

    tracker = None
    try:
        channel = EventChannel()
        tracker = _open_tracker(settings, channel, args.mouse)
        engine = GameEngine(settings, channel=channel)
        engine.run(tracker)
    except Exception:
        logger.exception("The game stopped on an error")
        return 1
    finally:
        if tracker is not None:
            tracker.shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(main())

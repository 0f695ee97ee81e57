import pytest
from settings import GameSettings


def test_defaults_match_reference_game():
    s = GameSettings()
    assert s.target_count == 3
    assert s.target_radius == 0.5
    assert (s.x_range, s.y_range, s.z_range) == ((-3.0, 3.0), (-2.0, 2.0), (-10.0, -5.0))
    assert (s.index_reach, s.middle_bend) == (0.3, 0.1)
    assert s.fov == 75.0
    assert s.camera_position == (0.0, 0.0, 5.0)
    assert s.respawn == "replace"
    assert s.shot_cooldown_ms == 0


def test_from_dict_rejects_unknown_keys():
    s = GameSettings.from_dict({"target_count": 5, "respawn": "refresh"})
    assert s.target_count == 5
    assert s.respawn == "refresh"
    with pytest.raises(ValueError, match="unknown settings: colour"):
        GameSettings.from_dict({"colour": "red"})


@pytest.mark.parametrize(
    "values",
    [
        {"respawn": "grow"},
        {"target_count": -1},
        {"target_radius": 0.0},
        {"shot_cooldown_ms": -5},
        {"screen_height": 0},
        {"z_range": (-5.0, -10.0)},
    ],
)
def test_invalid_values_raise(values):
    with pytest.raises(ValueError):
        GameSettings.from_dict(values)


def test_overrides_skip_unset_values():
    s = GameSettings().with_overrides(target_count=4, seed=None, respawn=None)
    assert s.target_count == 4
    assert s.seed is None
    assert s.respawn == "replace"


def test_cli_flags_map_onto_settings():
    pytest.importorskip("cv2")
    pytest.importorskip("mediapipe")
    from finger_gun_cli import _build_parser, settings_from_args

    args = _build_parser().parse_args(["--targets", "5", "--cooldown-ms", "200", "--respawn", "refresh", "--seed", "9"])
    s = settings_from_args(args)
    assert (s.target_count, s.shot_cooldown_ms, s.respawn, s.seed) == (5, 200, "refresh", 9)
    assert s.screen_width == 1280

import random

import numpy as np
import pytest
from camera import Ray
from targets import Target, TargetNotFoundError, TargetRegistry


def z_ray(x=0.0, y=0.0):
    return Ray(np.array([x, y, 5.0]), np.array([0.0, 0.0, -1.0]))


def test_spawn_positions_within_ranges():
    reg = TargetRegistry(rng=random.Random(7))
    created = reg.spawn(200)
    assert len(reg) == 200
    assert len(created) == 200
    assert len({t.id for t in created}) == 200
    for t in created:
        x, y, z = t.position
        assert -3.0 <= x <= 3.0
        assert -2.0 <= y <= 2.0
        assert -10.0 <= z <= -5.0
        assert t.radius == 0.5


def test_spawn_is_reproducible_with_seed():
    a = TargetRegistry(rng=random.Random(42)).spawn(3)
    b = TargetRegistry(rng=random.Random(42)).spawn(3)
    for ta, tb in zip(a, b):
        np.testing.assert_allclose(ta.position, tb.position)


def test_spawn_negative_count_raises():
    with pytest.raises(ValueError):
        TargetRegistry().spawn(-1)


def test_intersect_returns_nearest_target():
    reg = TargetRegistry()
    far = reg.add(Target([0.0, 0.0, -9.0]))
    near = reg.add(Target([0.0, 0.0, -6.0]))
    reg.add(Target([2.0, 0.0, -6.0]))

    hit = reg.intersect(z_ray())
    assert hit.target is near
    assert hit.target is not far
    # front surface of the sphere: z = -6 + 0.5
    np.testing.assert_allclose(hit.point, [0.0, 0.0, -5.5])
    assert hit.distance == pytest.approx(10.5)


def test_intersect_tie_keeps_registry_order():
    reg = TargetRegistry()
    first = reg.add(Target([0.0, 0.0, -6.0]))
    reg.add(Target([0.0, 0.0, -6.0]))
    assert reg.intersect(z_ray()).target is first


def test_grazing_ray_hits_sphere_edge():
    reg = TargetRegistry()
    t = reg.add(Target([0.5, 0.0, -6.0]))
    hit = reg.intersect(z_ray())
    assert hit.target is t
    np.testing.assert_allclose(hit.point, [0.0, 0.0, -6.0], atol=1e-9)


def test_miss_returns_none_without_side_effects():
    reg = TargetRegistry()
    targets = [reg.add(Target([2.0, 1.0, -7.0])), reg.add(Target([-2.0, -1.0, -8.0]))]
    assert reg.intersect(z_ray()) is None
    assert list(reg) == targets


def test_target_behind_ray_origin_is_not_hit():
    reg = TargetRegistry()
    reg.add(Target([0.0, 0.0, 8.0]))
    assert reg.intersect(z_ray()) is None


def test_ray_starting_inside_target_hits_exit_point():
    reg = TargetRegistry()
    t = reg.add(Target([0.0, 0.0, 5.0]))
    hit = reg.intersect(z_ray())
    assert hit.target is t
    assert hit.distance == pytest.approx(0.5)


def test_intersect_empty_registry():
    assert TargetRegistry().intersect(z_ray()) is None


def test_remove_by_identity():
    reg = TargetRegistry()
    a, b, c = reg.spawn(3)
    reg.remove(b)
    assert len(reg) == 2
    assert b not in reg
    assert a in reg and c in reg


def test_remove_absent_target_raises():
    reg = TargetRegistry()
    (t,) = reg.spawn(1)
    reg.remove(t)
    with pytest.raises(TargetNotFoundError):
        reg.remove(t)
    assert len(reg) == 0


def test_hit_and_replace_keeps_population():
    reg = TargetRegistry(rng=random.Random(3))
    reg.spawn(3)
    for _ in range(50):
        victim = random.Random(len(reg)).choice(list(reg))
        reg.remove(victim)
        reg.spawn(1)
        assert len(reg) == 3


def test_update_spins_targets():
    reg = TargetRegistry()
    (t,) = reg.spawn(1)
    reg.update()
    reg.update()
    assert t.rotation_x == pytest.approx(0.02)
    assert t.rotation_y == pytest.approx(0.02)

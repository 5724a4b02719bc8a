import numpy as np

from contagion.spatial import (
    distance_squared,
    normalize,
    polar_to_cartesian,
    reflect_into_bounds,
    within_bounds,
)


LO = np.array([0.0, 0.0])
HI = np.array([640.0, 480.0])


def test_distance_squared_matches_manual():
    a = np.array([1.0, 2.0])
    b = np.array([4.0, 6.0])
    assert np.isclose(distance_squared(a, b), 25.0)


def test_normalize_unit_and_zero():
    v, length = normalize(np.array([3.0, 4.0]))
    assert np.isclose(length, 5.0)
    assert np.allclose(v, [0.6, 0.8])

    z, zero_len = normalize(np.zeros(2))
    assert zero_len == 0.0
    assert np.allclose(z, [0.0, 0.0])


def test_polar_to_cartesian():
    v = polar_to_cartesian(2.0, np.pi / 2)
    assert np.allclose(v, [0.0, 2.0])


def test_reflect_clamps_and_inverts_high_side():
    pos = np.array([650.0, 100.0])
    vel = np.array([3.0, -1.0])
    assert reflect_into_bounds(pos, vel, LO, HI)
    assert np.allclose(pos, [640.0, 100.0])
    assert np.allclose(vel, [-3.0, -1.0])


def test_reflect_clamps_and_inverts_low_side_both_axes():
    pos = np.array([-2.0, -0.5])
    vel = np.array([-1.0, -4.0])
    assert reflect_into_bounds(pos, vel, LO, HI)
    assert np.allclose(pos, [0.0, 0.0])
    assert np.allclose(vel, [1.0, 4.0])


def test_reflect_noop_inside():
    pos = np.array([320.0, 240.0])
    vel = np.array([1.0, 1.0])
    assert not reflect_into_bounds(pos, vel, LO, HI)
    assert np.allclose(pos, [320.0, 240.0])
    assert np.allclose(vel, [1.0, 1.0])


def test_within_bounds_inclusive_edges():
    assert within_bounds(np.array([0.0, 480.0]), LO, HI)
    assert not within_bounds(np.array([640.1, 10.0]), LO, HI)

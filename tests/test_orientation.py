import numpy as np
import pytest

from ik.chain import IkChain
from ik.orientation import KNEE_EPSILON, OrientationConstraint, constrain_middle_joint, knee_pitch
from ik.rotations import FORWARD, looking_towards


def _segment_lengths(chain):
    return np.linalg.norm(np.diff(chain.points, axis=0), axis=1)


def test_inverted_knee_is_mirrored_above_leg_line():
    chain = IkChain([(0, 0, 0), (1, -1, 0), (2, 0, 0)])
    assert knee_pitch(chain) == pytest.approx(-np.pi / 4)

    correction = constrain_middle_joint(chain)

    assert correction == pytest.approx(np.pi / 2)
    assert np.allclose(chain.points[1], [1.0, 1.0, 0.0], atol=1e-9)
    assert np.allclose(chain.points[0], [0, 0, 0])
    assert np.allclose(chain.points[2], [2, 0, 0])
    assert knee_pitch(chain) == pytest.approx(np.pi / 4)


def test_upward_knee_is_left_alone():
    points = [(0, 0, 0), (1, 3, 0), (2, 0, 0)]
    chain = IkChain(points)
    assert constrain_middle_joint(chain) == 0.0
    assert np.allclose(chain.points, points)


def test_straight_leg_is_left_alone():
    points = [(0, 0, 0), (1, 0, 0), (2, 0, 0)]
    chain = IkChain(points)
    assert constrain_middle_joint(chain) == 0.0
    assert np.allclose(chain.points, points)


def test_knee_within_epsilon_of_leg_line_is_not_mirrored():
    # half an epsilon below and above the hip-foot line
    d = float(np.tan(KNEE_EPSILON / 2.0))
    for points in ([(0, 0, 0), (1, -d, 0), (2, 0, 0)], [(0, 0, 0), (1, d, 0), (2, 0, 0)]):
        chain = IkChain(points)
        assert abs(knee_pitch(chain)) < KNEE_EPSILON
        assert constrain_middle_joint(chain) == 0.0
        assert np.allclose(chain.points, points)

    # just past epsilon below is mirrored
    d = float(np.tan(2.0 * KNEE_EPSILON))
    chain = IkChain([(0, 0, 0), (1, -d, 0), (2, 0, 0)])
    assert constrain_middle_joint(chain) == pytest.approx(4.0 * KNEE_EPSILON)
    assert chain.points[1][1] == pytest.approx(d)


def test_mirroring_keeps_segment_lengths_in_3d():
    rng = np.random.default_rng(3)
    for _ in range(25):
        first = rng.uniform(-2, 2, size=3)
        last = first + rng.uniform(-3, 3, size=3)
        middle = (first + last) / 2.0 + rng.uniform(-1.5, 1.5, size=3)
        chain = IkChain([first, middle, last])
        rest = chain.lengths.copy()

        constrain_middle_joint(chain)

        assert np.allclose(_segment_lengths(chain), rest, atol=1e-6)
        assert np.allclose(chain.points[0], first)
        assert np.allclose(chain.points[2], last)
        assert knee_pitch(chain) > -KNEE_EPSILON - 1e-9


def test_only_three_point_chains():
    chain = IkChain([(0, 0, 0), (1, 0, 0), (2, 0, 0), (3, 0, 0)])
    with pytest.raises(ValueError):
        constrain_middle_joint(chain)
    with pytest.raises(ValueError):
        knee_pitch(chain)
    with pytest.raises(ValueError):
        OrientationConstraint()(IkChain([(0, 0, 0), (1, 0, 0)]))


def test_coincident_hip_and_foot_stays_finite():
    chain = IkChain([(0, 0, 0), (0, 1, 0), (0, 0, 0)])
    constrain_middle_joint(chain)
    assert np.all(np.isfinite(chain.points))


def test_looking_towards_maps_forward_axis():
    for direction in ([1, 0, 0], [0, 0, -1], [0.3, -0.5, 0.8], [0, 1, 0], [0, -2, 0]):
        d = np.asarray(direction, dtype=float)
        rot = looking_towards(d)
        assert np.allclose(rot.apply(FORWARD), d / np.linalg.norm(d), atol=1e-9)


def test_looking_towards_zero_direction_is_identity():
    rot = looking_towards(np.zeros(3))
    assert np.allclose(rot.as_quat(), [0, 0, 0, 1])

import math

import numpy as np
import pytest

from ik.chain import IkChain
from ik.fabrik import solve_chain_towards_target
from ik.orientation import OrientationConstraint

TOL = 1e-4


def _segment_lengths(chain):
    return np.linalg.norm(np.diff(chain.points, axis=0), axis=1)


def test_segment_lengths_and_anchor_hold_for_random_targets():
    rng = np.random.default_rng(0)
    for _ in range(50):
        n = int(rng.integers(2, 6))
        points = rng.uniform(-3.0, 3.0, size=(n, 3))
        chain = IkChain(points)
        rest = chain.lengths.copy()
        target = rng.uniform(-10.0, 10.0, size=3)
        iterations = int(rng.integers(1, 12))

        solve_chain_towards_target(chain, target, iterations)

        assert np.allclose(_segment_lengths(chain), rest, atol=TOL)
        assert np.allclose(chain.points[0], chain.start)


def test_anchor_follows_moved_start():
    chain = IkChain([(0, 0, 0), (1, 1, 0), (2, 0, 0)])
    chain.move_start((0.5, 0.0, 0.0))
    solve_chain_towards_target(chain, (2.0, 0.5, 0.0), 4)
    assert np.allclose(chain.points[0], [0.5, 0.0, 0.0])
    assert np.allclose(_segment_lengths(chain), chain.lengths, atol=TOL)


def test_reachable_target_error_never_grows_and_converges():
    target = (1.0, 0.0, 1.0)
    errors = []
    for iterations in range(1, 31):
        chain = IkChain([(0, 0, 0), (1, 1, 0), (2, 0, 0)])
        result = solve_chain_towards_target(chain, target, iterations)
        errors.append(result.error)

    for before, after in zip(errors, errors[1:]):
        assert after <= before + 1e-9
    assert errors[-1] < 1e-5


def test_reachable_result_flags():
    chain = IkChain([(0, 0, 0), (1, 1, 0), (2, 0, 0)])
    result = solve_chain_towards_target(chain, (1.0, 0.0, 1.0), 30)
    assert result.reached
    assert result.iterations == 30
    assert np.allclose(chain.effector, [1.0, 0.0, 1.0], atol=1e-4)


def test_unreachable_target_straightens_chain():
    chain = IkChain([(0, 0, 0), (1, 1, 0), (2, 0, 0)])
    reach = chain.total_length
    result = solve_chain_towards_target(chain, (0.0, 10.0, 0.0), 3)

    assert not result.reached
    assert np.allclose(chain.effector, [0.0, reach, 0.0], atol=1e-9)
    assert np.allclose(chain.points[:, 0], 0.0)
    assert np.allclose(chain.points[:, 2], 0.0)
    assert np.allclose(chain.points[1], [0.0, chain.lengths[0], 0.0])


def test_spider_leg_scenario_reaches_straight_along_x():
    chain = IkChain([(0, 0, 0), (2, 3, 0), (4, 0, 0)])
    assert np.allclose(chain.lengths, [math.sqrt(13.0)] * 2)

    solve_chain_towards_target(chain, (10.0, 0.0, 0.0), 6, constraint=OrientationConstraint())

    reach = 2.0 * math.sqrt(13.0)  # ~7.211
    assert np.linalg.norm(chain.effector - np.array([reach, 0.0, 0.0])) < 1e-3
    assert np.linalg.norm(chain.effector - np.array([7.21, 0.0, 0.0])) < 2e-3
    # collinear along +X
    assert np.allclose(chain.points[:, 1:], 0.0, atol=1e-9)
    assert np.all(np.diff(chain.points[:, 0]) > 0.0)


def test_iteration_count_reported_on_both_paths():
    reachable = IkChain([(0, 0, 0), (1, 1, 0), (2, 0, 0)])
    unreachable = IkChain([(0, 0, 0), (1, 1, 0), (2, 0, 0)])
    assert solve_chain_towards_target(reachable, (1.5, 0.5, 0.0), 7).iterations == 7
    assert solve_chain_towards_target(unreachable, (0.0, 10.0, 0.0), 7).iterations == 7


def test_zero_iterations_leaves_chain_untouched():
    points = [(0, 0, 0), (1, 1, 0), (2, 0, 0)]
    chain = IkChain(points)
    result = solve_chain_towards_target(chain, (5.0, 5.0, 5.0), 0)
    assert result.iterations == 0
    assert np.allclose(chain.points, points)


def test_degenerate_geometry_stays_finite():
    chain = IkChain([(0, 0, 0), (0, 0, 0), (1, 0, 0)])
    solve_chain_towards_target(chain, (0.5, 0.5, 0.0), 5)
    assert np.all(np.isfinite(chain.points))

    chain = IkChain([(0, 0, 0), (1, 1, 0), (2, 0, 0)])
    solve_chain_towards_target(chain, chain.start.copy(), 5)
    assert np.all(np.isfinite(chain.points))
    assert np.allclose(chain.points[0], chain.start)


def test_constraint_runs_after_every_iteration():
    calls = []

    def record(chain):
        calls.append(chain.points.copy())

    chain = IkChain([(0, 0, 0), (1, 1, 0), (2, 0, 0)])
    solve_chain_towards_target(chain, (1.0, 0.0, 1.0), 4, constraint=record)
    assert len(calls) == 4


def test_target_shape_is_checked():
    chain = IkChain([(0, 0, 0), (1, 0, 0)])
    with pytest.raises(ValueError):
        solve_chain_towards_target(chain, (1.0, 2.0), 3)

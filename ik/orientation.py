# -*- coding: utf-8 -*-
"""
Knee orientation constraint for three-point (two-segment) leg chains.

After a FABRIK iteration the middle joint may end up on either side of the
line from the hip (first point) to the foot (last point). This pass measures
the middle joint's rotation relative to the leg's overall facing and, when
the bend points below the leg line, mirrors it back above. Mirroring around
the hip-foot line keeps both segment lengths intact.

Only the single-middle-joint case is handled; longer chains are rejected.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from scipy.spatial.transform import Rotation

from .chain import IkChain
from .rotations import FORWARD, UP, looking_towards

# radians; only a bend below -KNEE_EPSILON is mirrored, a slightly raised
# or straight knee is left alone
KNEE_EPSILON = 1e-3
EULER_ORDER = "YXZ"  # yaw, pitch, roll (intrinsic)


def knee_pitch(chain: IkChain, up: np.ndarray = UP) -> float:
    """Bend of the middle joint above the hip-foot line, in radians."""
    _check_three_points(chain)
    first, middle, last = chain.points
    reference = looking_towards(last - first, up)
    joint = looking_towards(middle - first, up)
    delta = reference.inv() * joint
    _, pitch, _ = delta.as_euler(EULER_ORDER)
    return float(pitch)


def constrain_middle_joint(
    chain: IkChain,
    epsilon: float = KNEE_EPSILON,
    up: np.ndarray = UP,
) -> float:
    """
    Push the middle joint of a 3-point chain onto the upward bending side.

    Returns the pitch correction that was applied (0.0 when none).
    """
    _check_three_points(chain)
    first, middle, last = chain.points

    reference = looking_towards(last - first, up)
    joint = looking_towards(middle - first, up)
    delta = reference.inv() * joint
    yaw, pitch, roll = delta.as_euler(EULER_ORDER)

    # within epsilon of the leg line counts as straight
    if pitch > -epsilon:
        return 0.0

    correction = -2.0 * pitch

    adjusted = reference * Rotation.from_euler(EULER_ORDER, [yaw, pitch + correction, roll])
    chain.points[1] = first + adjusted.apply(FORWARD * chain.lengths[0])
    return float(correction)


def _check_three_points(chain: IkChain) -> None:
    if chain.n_points != 3:
        raise ValueError(
            f"orientation constraint needs exactly 3 points, chain has {chain.n_points}"
        )


@dataclass
class OrientationConstraint:
    """Callable form of `constrain_middle_joint` for the solver's `constraint=` hook."""
    epsilon: float = KNEE_EPSILON
    up: np.ndarray = field(default_factory=lambda: UP.copy())

    def __call__(self, chain: IkChain) -> None:
        constrain_middle_joint(chain, self.epsilon, self.up)

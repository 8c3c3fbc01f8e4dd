# -*- coding: utf-8 -*-
"""FABRIK (Forward And Backward Reaching IK) solver for IkChain."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

import numpy as np

from .chain import IkChain
from .rotations import as_vec3, normalize_or_zero

logger = logging.getLogger(__name__)

ChainConstraint = Callable[[IkChain], None]


@dataclass
class SolveResult:
    reached: bool
    iterations: int
    error: float


def _backward_pass(chain: IkChain, target: np.ndarray) -> None:
    pos = chain.points
    lengths = chain.lengths
    pos[-1] = target
    for i in range(chain.n_points - 2, -1, -1):
        direction = normalize_or_zero(pos[i] - pos[i + 1])
        pos[i] = pos[i + 1] + direction * lengths[i]


def _forward_pass(chain: IkChain) -> None:
    pos = chain.points
    lengths = chain.lengths
    pos[0] = chain.start
    for i in range(chain.n_points - 1):
        direction = normalize_or_zero(pos[i + 1] - pos[i])
        pos[i + 1] = pos[i] + direction * lengths[i]


def _straighten_towards(chain: IkChain, target: np.ndarray) -> None:
    """Lay the chain out on the line from `start` toward `target`."""
    pos = chain.points
    direction = normalize_or_zero(target - chain.start)
    pos[0] = chain.start
    for i in range(chain.n_points - 1):
        pos[i + 1] = pos[i] + direction * chain.lengths[i]


def solve_chain_towards_target(
    chain: IkChain,
    target: Sequence[float],
    iterations: int,
    *,
    constraint: Optional[ChainConstraint] = None,
    tolerance: float = 1e-3,
) -> SolveResult:
    """
    Move `chain.points` toward `target` in place.

    Each iteration runs a backward pass (effector pinned to the target) and a
    forward pass (first point re-anchored to `chain.start`), then applies
    `constraint` if one is given. Targets beyond the chain's reach are handled
    by stretching the chain straight toward them, which is the pose the passes
    converge to anyway.

    `tolerance` only decides `SolveResult.reached`. `SolveResult.iterations`
    is the requested count on both paths, 0 when nothing ran.
    """
    target = as_vec3(target)
    if iterations <= 0:
        error = float(np.linalg.norm(chain.effector - target))
        return SolveResult(error <= tolerance, 0, error)

    reach = chain.total_length
    if float(np.linalg.norm(target - chain.start)) >= reach:
        logger.debug("target %s out of reach (%.3f), straightening chain", target, reach)
        _straighten_towards(chain, target)
        if constraint is not None:
            constraint(chain)
        error = float(np.linalg.norm(chain.effector - target))
        return SolveResult(error <= tolerance, int(iterations), error)

    for _ in range(iterations):
        _backward_pass(chain, target)
        _forward_pass(chain)
        if constraint is not None:
            constraint(chain)

    error = float(np.linalg.norm(chain.effector - target))
    return SolveResult(error <= tolerance, int(iterations), error)

# -*- coding: utf-8 -*-
# 向量 / 旋转方面的小工具 (numpy + scipy Rotation)
from __future__ import annotations

from typing import Sequence

import numpy as np
from scipy.spatial.transform import Rotation

DTYPE = np.float64

# Axis conventions: +Y up, local forward is -Z, local back is +Z.
UP = np.array([0.0, 1.0, 0.0], dtype=DTYPE)
FORWARD = np.array([0.0, 0.0, -1.0], dtype=DTYPE)
BACK = np.array([0.0, 0.0, 1.0], dtype=DTYPE)

_DEGENERATE_LENGTH = 1e-12


# -----------------------
# Vector helpers
# -----------------------

def vec3(x: float, y: float, z: float) -> np.ndarray:
    return np.array([x, y, z], dtype=DTYPE)


def as_vec3(value: Sequence[float]) -> np.ndarray:
    """Copy `value` into a float64 (3,) array."""
    v = np.array(value, dtype=DTYPE)
    if v.shape != (3,):
        raise ValueError(f"expected a 3D vector, got shape {v.shape}")
    return v


def as_points(points: Sequence[Sequence[float]]) -> np.ndarray:
    """Copy `points` into a float64 (N,3) array."""
    pts = np.array(points, dtype=DTYPE)
    if pts.ndim != 2 or pts.shape[1] != 3:
        raise ValueError(f"points must be (N,3), got shape {pts.shape}")
    return pts


def normalize_or_zero(v: np.ndarray) -> np.ndarray:
    """Unit vector along `v`, or the zero vector when `v` is degenerate."""
    v = np.asarray(v, dtype=DTYPE)
    n = float(np.linalg.norm(v))
    if not np.isfinite(n) or n <= _DEGENERATE_LENGTH:
        return np.zeros(3, dtype=DTYPE)
    return v / n


def lerp(a: np.ndarray, b: np.ndarray, t: float) -> np.ndarray:
    return (1.0 - t) * np.asarray(a, dtype=DTYPE) + t * np.asarray(b, dtype=DTYPE)


def distance(a: np.ndarray, b: np.ndarray) -> float:
    return float(np.linalg.norm(np.asarray(b, dtype=DTYPE) - np.asarray(a, dtype=DTYPE)))


# -----------------------
# Rotation helpers
# -----------------------

def rotation_about_y(angle_degrees: float) -> Rotation:
    return Rotation.from_euler("y", float(angle_degrees), degrees=True)


def looking_towards(direction: np.ndarray, up: np.ndarray = UP) -> Rotation:
    """
    Rotation whose local FORWARD (-Z) axis points along `direction`.

    The local up axis is kept as close to `up` as possible. A zero direction
    gives the identity; a direction parallel to `up` picks another up axis so
    the basis stays orthonormal.
    """
    forward = normalize_or_zero(direction)
    if not forward.any():
        return Rotation.identity()

    back = -forward
    right = normalize_or_zero(np.cross(up, back))
    if not right.any():
        # direction is parallel to `up`
        alt_up = BACK if abs(float(np.dot(UP, forward))) > 0.5 else UP
        right = normalize_or_zero(np.cross(alt_up, back))
    local_up = np.cross(back, right)

    basis = np.column_stack([right, local_up, back])
    return Rotation.from_matrix(basis)

# -*- coding: utf-8 -*-
"""Point-chain model used by the FABRIK solver."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

import numpy as np

from .rotations import DTYPE, as_points, as_vec3, normalize_or_zero


@dataclass(frozen=True)
class ChainSegment:
    """Read-only view of one segment: (start point, end point, rest length)."""
    start: np.ndarray
    end: np.ndarray
    length: float

    @property
    def direction(self) -> np.ndarray:
        return normalize_or_zero(self.end - self.start)

    @property
    def midpoint(self) -> np.ndarray:
        return self.start + self.direction * (self.length / 2.0)


def calculate_distances_between_points(points: np.ndarray) -> np.ndarray:
    """(N-1,) Euclidean distances between consecutive points."""
    pts = np.asarray(points, dtype=DTYPE)
    return np.linalg.norm(pts[1:] - pts[:-1], axis=1)


class IkChain:
    """
    Ordered joint positions anchored at `start`.

    Segment rest lengths are measured once from the construction points and
    never change afterwards; the solver moves points along directions instead
    of stretching segments.
    """

    def __init__(self, points: Sequence[Sequence[float]]):
        pts = as_points(points)
        if pts.shape[0] < 2:
            raise ValueError(
                f"Invalid points! IK chain can't be made from {pts.shape[0]} points"
            )

        self.points: np.ndarray = pts
        self.start: np.ndarray = pts[0].copy()

        lengths = calculate_distances_between_points(pts)
        lengths.setflags(write=False)
        self._lengths = lengths

    # -------- basic props --------
    @property
    def lengths(self) -> np.ndarray:
        return self._lengths

    @property
    def n_points(self) -> int:
        return int(self.points.shape[0])

    @property
    def n_segments(self) -> int:
        return self.n_points - 1

    @property
    def total_length(self) -> float:
        return float(np.sum(self._lengths))

    @property
    def effector(self) -> np.ndarray:
        return self.points[-1]

    # -------- segments --------
    def get_segment(self, index: int) -> ChainSegment:
        if index < 0 or index >= self.n_segments:
            raise IndexError(
                f"Invalid index! get_segment called with index: {index}, "
                f"but only {self.n_points} points"
            )
        return ChainSegment(
            start=self.points[index].copy(),
            end=self.points[index + 1].copy(),
            length=float(self._lengths[index]),
        )

    def segments(self) -> Iterator[ChainSegment]:
        for i in range(self.n_segments):
            yield self.get_segment(i)

    # -------- anchor --------
    def move_start(self, delta: Sequence[float]) -> None:
        """Translate the anchor only; other points stay put until the next solve."""
        self.start = self.start + as_vec3(delta)

    def __repr__(self) -> str:
        return f"IkChain(n_points={self.n_points}, start={self.start.tolist()})"

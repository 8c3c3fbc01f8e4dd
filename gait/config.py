# -*- coding: utf-8 -*-
"""Spawn-time configuration for the spider body and its legs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np

from ik.rotations import as_points, as_vec3, vec3

SPAWN_POSITION = (-2.0, 1.0, 2.0)
MOVE_SPEED = 6.0

LEG_TARGET_OFFSET = (4.0, -0.5, 0.0)
LEG_ERROR_THRESHOLD = 12.0
SOLVE_ITERATIONS = 6

# Leg chain in leg space, pointing along +X before the per-leg rotation.
BASE_LEG_POINTS: Tuple[Tuple[float, float, float], ...] = (
    (0.0, 0.0, 0.0),
    (1.0, 3.0, 0.0),
    (2.0, 0.0, 0.0),
)

CONTROLLER_KINDS = ("animated", "basic")
MOVEMENT_GROUPS = (1, 2)


@dataclass
class LegSpawnInfo:
    """Where a leg attaches to the body, which way it points, and its gait group."""
    position_offset: np.ndarray
    angle_offset: float  # degrees about +Y
    movement_group: int
    name: str = ""

    def __post_init__(self):
        self.position_offset = as_vec3(self.position_offset)
        self.angle_offset = float(self.angle_offset)
        if self.movement_group not in MOVEMENT_GROUPS:
            raise ValueError(
                f"movement_group must be one of {MOVEMENT_GROUPS}, got {self.movement_group}"
            )


def _default_legs() -> List[LegSpawnInfo]:
    return [
        LegSpawnInfo(vec3(0.5, 0.0, -0.8), 40.0, 1, "R1"),
        LegSpawnInfo(vec3(0.5, 0.0, -0.4), 10.0, 2, "R2"),
        LegSpawnInfo(vec3(0.5, 0.0, 0.4), -10.0, 1, "R3"),
        LegSpawnInfo(vec3(0.5, 0.0, 0.8), -40.0, 2, "R4"),
        LegSpawnInfo(vec3(-0.5, 0.0, -0.8), 140.0, 2, "L1"),
        LegSpawnInfo(vec3(-0.5, 0.0, -0.4), 170.0, 1, "L2"),
        LegSpawnInfo(vec3(-0.5, 0.0, 0.4), 190.0, 2, "L3"),
        LegSpawnInfo(vec3(-0.5, 0.0, 0.8), 220.0, 1, "L4"),
    ]


@dataclass
class SpiderConfig:
    spawn_position: np.ndarray = field(default_factory=lambda: as_vec3(SPAWN_POSITION))
    move_speed: float = MOVE_SPEED
    leg_target_offset: np.ndarray = field(default_factory=lambda: as_vec3(LEG_TARGET_OFFSET))
    leg_error_threshold: float = LEG_ERROR_THRESHOLD
    solve_iterations: int = SOLVE_ITERATIONS
    base_leg_points: np.ndarray = field(default_factory=lambda: as_points(BASE_LEG_POINTS))
    legs: List[LegSpawnInfo] = field(default_factory=_default_legs)
    controller: str = "animated"
    initial_movement_group: int = 2

    def __post_init__(self):
        self.spawn_position = as_vec3(self.spawn_position)
        self.leg_target_offset = as_vec3(self.leg_target_offset)
        self.base_leg_points = as_points(self.base_leg_points)

        if self.move_speed <= 0.0:
            raise ValueError(f"move_speed must be > 0, got {self.move_speed}")
        if self.leg_error_threshold <= 0.0:
            raise ValueError(
                f"leg_error_threshold must be > 0, got {self.leg_error_threshold}"
            )
        if int(self.solve_iterations) < 1:
            raise ValueError(f"solve_iterations must be >= 1, got {self.solve_iterations}")
        self.solve_iterations = int(self.solve_iterations)
        if self.base_leg_points.shape[0] < 2:
            raise ValueError("base_leg_points needs at least 2 points")
        if self.controller not in CONTROLLER_KINDS:
            raise ValueError(
                f"controller must be one of {CONTROLLER_KINDS}, got {self.controller!r}"
            )
        if self.initial_movement_group not in MOVEMENT_GROUPS:
            raise ValueError(
                f"initial_movement_group must be one of {MOVEMENT_GROUPS}, "
                f"got {self.initial_movement_group}"
            )


# -*- coding: utf-8 -*-
"""
Spider body: owns its legs and runs the per-tick gait update.

Tick order (see `Spider.tick`):
  1) translate the body from the movement input
  2) recompute the combined leg error from last tick's state
  3) retarget one movement group if the error crossed the threshold
  4) step every leg's target controller and solve its chain
  5) place leg pieces along the solved chains

Legs are split into two movement groups; only the group that was just
switched to gets new targets, so half the legs stay planted while the other
half step.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from ik.chain import IkChain
from ik.fabrik import SolveResult, solve_chain_towards_target
from ik.orientation import OrientationConstraint
from ik.rotations import UP, as_vec3, looking_towards, normalize_or_zero, rotation_about_y

from .config import SpiderConfig
from .legs import LegController, make_controller, rest_point, step_target

logger = logging.getLogger(__name__)


@dataclass
class SpiderLeg:
    chain: IkChain
    controller: LegController
    movement_group: int
    name: str = ""
    last_target: Optional[np.ndarray] = None  # effective target used by the last solve

    @property
    def rest_point(self) -> np.ndarray:
        return rest_point(self.chain, self.controller)

    @property
    def position_error(self) -> float:
        return float(np.linalg.norm(self.rest_point - self.controller.current_target))


@dataclass
class LegPiecePlacement:
    """Where a rigid leg-piece visual sits on a solved chain segment."""
    leg_index: int
    segment_index: int
    direction: np.ndarray
    midpoint: np.ndarray
    length: float
    orientation: np.ndarray     # quaternion (x, y, z, w)
    local_position: np.ndarray  # midpoint relative to the body position


@dataclass
class TickReport:
    combined_leg_position_error: float
    movement_group: int
    retargeted: List[int]
    solves: List[SolveResult]
    placements: List[LegPiecePlacement]


class Spider:
    """A body with a fixed set of IK legs."""

    def __init__(
        self,
        position: Sequence[float],
        legs: Sequence[SpiderLeg],
        config: Optional[SpiderConfig] = None,
    ):
        self.config = config if config is not None else SpiderConfig()
        self.position = as_vec3(position)
        self.legs: List[SpiderLeg] = list(legs)
        self.combined_leg_position_error = 0.0
        self.movement_group = self.config.initial_movement_group
        self._knee_constraint = OrientationConstraint()

    # -------- gait state --------
    def switch_movement_group(self) -> None:
        self.movement_group = 2 if self.movement_group == 1 else 1

    def move(self, delta: Sequence[float]) -> None:
        """Translate the body; leg anchors follow, the rest of each chain waits for the solve."""
        delta = as_vec3(delta)
        self.position = self.position + delta
        for leg in self.legs:
            leg.chain.move_start(delta)

    def update_leg_error(self) -> float:
        self.combined_leg_position_error = float(
            sum(leg.position_error for leg in self.legs)
        )
        return self.combined_leg_position_error

    def retarget_if_threshold_reached(self) -> List[int]:
        """Switch movement group and replant its legs. Returns the retargeted leg indices."""
        if self.combined_leg_position_error <= self.config.leg_error_threshold:
            return []

        self.switch_movement_group()
        retargeted: List[int] = []
        for i, leg in enumerate(self.legs):
            if leg.movement_group == self.movement_group:
                leg.controller.set_new_target(leg.rest_point)
                retargeted.append(i)

        logger.debug(
            "leg error %.3f > %.3f, group %d retargets legs %s",
            self.combined_leg_position_error,
            self.config.leg_error_threshold,
            self.movement_group,
            retargeted,
        )
        return retargeted

    # -------- solving --------
    def solve_legs(self, dt: float) -> List[SolveResult]:
        results: List[SolveResult] = []
        for leg in self.legs:
            target = step_target(leg.controller, dt)
            leg.last_target = target
            constraint = self._knee_constraint if leg.chain.n_points == 3 else None
            results.append(
                solve_chain_towards_target(
                    leg.chain,
                    target,
                    self.config.solve_iterations,
                    constraint=constraint,
                )
            )
        return results

    def leg_piece_placements(self) -> List[LegPiecePlacement]:
        placements: List[LegPiecePlacement] = []
        for leg_index, leg in enumerate(self.legs):
            for segment_index, segment in enumerate(leg.chain.segments()):
                direction = segment.direction
                midpoint = segment.midpoint
                orientation = looking_towards(direction, UP).as_quat()
                placements.append(
                    LegPiecePlacement(
                        leg_index=leg_index,
                        segment_index=segment_index,
                        direction=direction,
                        midpoint=midpoint,
                        length=segment.length,
                        orientation=orientation,
                        local_position=midpoint - self.position,
                    )
                )
        return placements

    # -------- tick --------
    def tick(self, dt: float, move_input: Sequence[float] = (0.0, 0.0, 0.0)) -> TickReport:
        move = as_vec3(move_input)
        if float(np.linalg.norm(move)) > 1.0:
            move = normalize_or_zero(move)

        self.move(move * float(dt) * self.config.move_speed)
        error = self.update_leg_error()
        retargeted = self.retarget_if_threshold_reached()
        solves = self.solve_legs(dt)
        placements = self.leg_piece_placements()

        return TickReport(
            combined_leg_position_error=error,
            movement_group=self.movement_group,
            retargeted=retargeted,
            solves=solves,
            placements=placements,
        )


def spawn_spider(config: Optional[SpiderConfig] = None) -> Spider:
    """Build a spider at `config.spawn_position` with one chain per leg entry."""
    config = config if config is not None else SpiderConfig()
    legs: List[SpiderLeg] = []

    for info in config.legs:
        rotation = rotation_about_y(info.angle_offset)
        anchor = config.spawn_position + info.position_offset
        points = anchor + rotation.apply(config.base_leg_points)

        chain = IkChain(points)
        offset = rotation.apply(config.leg_target_offset)
        target = chain.start + offset

        legs.append(
            SpiderLeg(
                chain=chain,
                controller=make_controller(config.controller, offset, target),
                movement_group=info.movement_group,
                name=info.name,
            )
        )

    logger.info(
        "spawned spider at %s with %d %s legs",
        config.spawn_position.tolist(),
        len(legs),
        config.controller,
    )
    return Spider(config.spawn_position, legs, config)

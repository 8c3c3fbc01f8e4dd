# -*- coding: utf-8 -*-
"""
腿部目标控制器.

两种变体:

- BasicLeg: 目标点被步态策略整体替换, 每帧直接使用 current_target
- AnimatedLeg: 在 previous_target -> current_target 之间沿抛物弧线插值,
  lerp_fraction 以固定速率增长并在 1 处饱和

Spider 每帧通过 step_target() 得到本帧的有效目标, 再交给 FABRIK 求解.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence, Union

import numpy as np

from ik.chain import IkChain
from ik.rotations import UP, as_vec3, distance, lerp

LERP_SPEED = 4.0   # fraction per second
ARC_HEIGHT = 0.5   # arc rise per unit of travel distance


@dataclass
class BasicLeg:
    """固定目标. reposition_target_offset 相对于链的 start."""
    reposition_target_offset: np.ndarray
    current_target: np.ndarray

    def __post_init__(self):
        self.reposition_target_offset = as_vec3(self.reposition_target_offset)
        self.current_target = as_vec3(self.current_target)

    def set_new_target(self, target: Sequence[float]) -> None:
        self.current_target = as_vec3(target)


@dataclass
class AnimatedLeg:
    """带弧线过渡的目标.

    状态:
    - Settled: lerp_fraction == 1
    - Transitioning: lerp_fraction < 1
    set_new_target() 是唯一进入 Transitioning 的方式 (飞行途中调用会重新开始),
    advance() 是唯一回到 Settled 的方式.
    """
    reposition_target_offset: np.ndarray
    current_target: np.ndarray
    previous_target: Optional[np.ndarray] = None
    lerp_fraction: float = 1.0
    speed: float = LERP_SPEED
    arc_height: float = ARC_HEIGHT
    up: np.ndarray = field(default_factory=lambda: UP.copy())

    def __post_init__(self):
        self.reposition_target_offset = as_vec3(self.reposition_target_offset)
        self.current_target = as_vec3(self.current_target)
        if self.previous_target is None:
            self.previous_target = self.current_target.copy()
        else:
            self.previous_target = as_vec3(self.previous_target)
        self.up = as_vec3(self.up)
        if self.speed <= 0.0:
            raise ValueError(f"speed must be > 0, got {self.speed}")
        self.lerp_fraction = min(1.0, max(0.0, float(self.lerp_fraction)))

    @property
    def is_settled(self) -> bool:
        return self.lerp_fraction >= 1.0

    def set_new_target(self, target: Sequence[float]) -> None:
        self.previous_target = self.current_target
        self.current_target = as_vec3(target)
        self.lerp_fraction = 0.0

    def advance(self, dt: float) -> None:
        step = max(0.0, float(dt)) * self.speed
        self.lerp_fraction = min(1.0, self.lerp_fraction + step)

    def arc_midpoint(self) -> np.ndarray:
        """previous/current 的中点, 按移动距离沿 up 方向抬高."""
        travel = distance(self.previous_target, self.current_target)
        middle = lerp(self.previous_target, self.current_target, 0.5)
        return middle + self.up * (travel * self.arc_height)

    def sample(self) -> np.ndarray:
        """当前 lerp_fraction 下的弧线点 (二次 Bezier)."""
        f = self.lerp_fraction
        raised = self.arc_midpoint()
        a = lerp(self.previous_target, raised, f)
        b = lerp(raised, self.current_target, f)
        return lerp(a, b, f)


LegController = Union[BasicLeg, AnimatedLeg]


def step_target(controller: LegController, dt: float) -> np.ndarray:
    """推进控制器一帧并返回本帧的有效目标."""
    if isinstance(controller, AnimatedLeg):
        controller.advance(dt)
        return controller.sample()
    if isinstance(controller, BasicLeg):
        return controller.current_target.copy()
    raise TypeError(f"unknown leg controller: {type(controller)!r}")


def rest_point(chain: IkChain, controller: LegController) -> np.ndarray:
    """脚在身体正下方理想站立时的位置."""
    return chain.start + controller.reposition_target_offset


def make_controller(kind: str, offset: Sequence[float], target: Sequence[float]) -> LegController:
    if kind == "animated":
        return AnimatedLeg(reposition_target_offset=offset, current_target=target)
    if kind == "basic":
        return BasicLeg(reposition_target_offset=offset, current_target=target)
    raise ValueError(f"unknown controller kind: {kind!r}")

# -*- coding: utf-8 -*-
"""
render/gizmos.py

用途：
- 从蜘蛛的腿链中读取点 / 段 / 目标，生成调试绘制用的图元；
- 只读，不修改任何仿真状态；
- 绘制开关通过 DebugDrawConfig 显式传入。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple, Union

import numpy as np

from gait.spider import Spider
from ik.rotations import UP

Color = Tuple[float, float, float]

PURPLE: Color = (0.63, 0.13, 0.94)
BLUE: Color = (0.0, 0.0, 1.0)
LIME_GREEN: Color = (0.2, 0.8, 0.2)
ORANGE: Color = (1.0, 0.65, 0.0)


@dataclass
class DebugDrawConfig:
    draw_points: bool = True
    draw_segments: bool = True
    draw_targets: bool = True
    draw_rest_points: bool = False
    point_radius: float = 0.5
    target_radius: float = 0.7
    target_inner_radius: float = 0.1
    point_color: Color = PURPLE
    segment_color: Color = BLUE
    target_color: Color = LIME_GREEN
    rest_point_color: Color = ORANGE


@dataclass
class Sphere:
    center: np.ndarray
    radius: float
    color: Color


@dataclass
class Line:
    start: np.ndarray
    end: np.ndarray
    color: Color


@dataclass
class Circle:
    center: np.ndarray
    normal: np.ndarray
    radius: float
    color: Color


Gizmo = Union[Sphere, Line, Circle]


def collect_gizmos(spider: Spider, config: DebugDrawConfig) -> List[Gizmo]:
    """按 config 收集所有腿链的调试图元."""
    gizmos: List[Gizmo] = []
    for leg in spider.legs:
        chain = leg.chain
        if config.draw_points:
            for point in chain.points:
                gizmos.append(Sphere(point.copy(), config.point_radius, config.point_color))

        if config.draw_segments:
            for segment in chain.segments():
                gizmos.append(Line(segment.start, segment.end, config.segment_color))

        if config.draw_targets and leg.last_target is not None:
            target = np.array(leg.last_target, dtype=np.float64)
            gizmos.append(Circle(target, UP.copy(), config.target_inner_radius, config.target_color))
            gizmos.append(Circle(target.copy(), UP.copy(), config.target_radius, config.target_color))

        if config.draw_rest_points:
            gizmos.append(
                Circle(leg.rest_point, UP.copy(), config.target_radius, config.rest_point_color)
            )
    return gizmos

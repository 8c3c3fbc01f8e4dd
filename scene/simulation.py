# -*- coding: utf-8 -*-
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional

import numpy as np

from gait.spider import LegPiecePlacement, Spider
from .timeline import MoveTrack


@dataclass
class SpiderFrame:
    """某一 tick 结束后, 蜘蛛状态的只读快照 (供渲染 / 导出)."""

    time: float
    body_position: np.ndarray        # (3,)
    chain_points: List[np.ndarray]   # 每条腿 (N, 3)
    effective_targets: np.ndarray    # (L, 3) 本帧求解使用的目标
    current_targets: np.ndarray      # (L, 3) 控制器的落脚目标
    combined_leg_position_error: float
    movement_group: int
    retargeted: List[int]
    placements: List[LegPiecePlacement]


@dataclass
class Simulation:
    """单个蜘蛛 + 一条移动输入轨道的 tick 驱动容器.

    每次 step(dt):
    - 推进时间, 在新时间点采样 MoveTrack 得到移动方向
    - 调用 Spider.tick(), 按固定顺序完成移动 / 误差 / 重定目标 / 求解 / 摆放
    - 返回 SpiderFrame 快照
    """

    spider: Spider
    track: MoveTrack = field(default_factory=MoveTrack)
    fps: int = 60
    time: float = 0.0

    def __post_init__(self):
        if self.fps <= 0:
            raise ValueError(f"fps must be > 0, got {self.fps}")

    @property
    def dt(self) -> float:
        return 1.0 / float(self.fps)

    def step(self, dt: Optional[float] = None) -> SpiderFrame:
        dt = self.dt if dt is None else float(dt)
        if dt < 0.0:
            raise ValueError(f"dt must be >= 0, got {dt}")

        self.time += dt
        move_input = self.track.sample(self.time)
        report = self.spider.tick(dt, move_input)

        legs = self.spider.legs
        return SpiderFrame(
            time=self.time,
            body_position=self.spider.position.copy(),
            chain_points=[leg.chain.points.copy() for leg in legs],
            effective_targets=np.array(
                [leg.last_target for leg in legs], dtype=np.float64
            ).reshape(len(legs), 3),
            current_targets=np.array(
                [leg.controller.current_target for leg in legs], dtype=np.float64
            ).reshape(len(legs), 3),
            combined_leg_position_error=report.combined_leg_position_error,
            movement_group=report.movement_group,
            retargeted=list(report.retargeted),
            placements=report.placements,
        )

    def run(self, duration: float) -> Iterator[SpiderFrame]:
        """以 1/fps 为步长推进 duration 秒, 逐帧产出快照."""
        total_frames = max(1, int(round(duration * self.fps)))
        for _ in range(total_frames):
            yield self.step()

# -*- coding: utf-8 -*-
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence

import numpy as np

from ik.rotations import as_vec3, normalize_or_zero

# WASD -> 方向 (W 朝 -Z 前进)
KEY_DIRECTIONS = {
    "W": (0.0, 0.0, -1.0),
    "S": (0.0, 0.0, 1.0),
    "A": (-1.0, 0.0, 0.0),
    "D": (1.0, 0.0, 0.0),
}


def keys_to_vector(keys: Iterable[str]) -> np.ndarray:
    """把按下的按键集合转换为单位移动向量 (相反按键抵消为 0)."""
    result = np.zeros(3, dtype=np.float64)
    for key in set(k.upper() for k in keys):
        direction = KEY_DIRECTIONS.get(key)
        if direction is None:
            raise ValueError(f"unknown movement key: {key!r}")
        result += direction
    return normalize_or_zero(result)


@dataclass
class MoveKeyframe:
    """单个移动输入关键帧.

    Parameters
    ----------
    time:
        时间(秒).
    direction:
        该时刻的移动方向, 长度不超过 1.
    """
    time: float
    direction: np.ndarray


@dataclass
class MoveTrack:
    """一条移动输入轨道, 代替实时的键盘输入."""
    keyframes: List[MoveKeyframe] = field(default_factory=list)

    @property
    def duration(self) -> float:
        if not self.keyframes:
            return 0.0
        return float(self.keyframes[-1].time)

    def add_keyframe(self, time: float, direction: Sequence[float]) -> None:
        self.keyframes.append(MoveKeyframe(time=float(time), direction=as_vec3(direction)))
        # 保证时间有序, 便于后续插值
        self.keyframes.sort(key=lambda k: k.time)

    def add_keys(self, time: float, keys: str) -> None:
        """以按键字符串添加关键帧, 例如 "WD"; 空字符串表示静止."""
        self.add_keyframe(time, keys_to_vector(keys))

    def sample(self, t: float) -> np.ndarray:
        """在时间 t 处采样移动向量.

        插值策略:
        - 若 t 落在首帧之前, 返回首帧值
        - 若 t 落在末帧之后, 返回末帧值
        - 否则在邻近两个关键帧之间做线性插值
        结果长度被限制在 1 以内.
        """
        if not self.keyframes:
            return np.zeros(3, dtype=np.float64)

        kfs = self.keyframes
        if t <= kfs[0].time:
            value = kfs[0].direction
        elif t >= kfs[-1].time:
            value = kfs[-1].direction
        else:
            prev_kf, next_kf = kfs[0], kfs[-1]
            for i in range(len(kfs) - 1):
                k0, k1 = kfs[i], kfs[i + 1]
                if k0.time <= t <= k1.time:
                    prev_kf, next_kf = k0, k1
                    break

            if np.isclose(prev_kf.time, next_kf.time):
                value = prev_kf.direction
            else:
                alpha = float((t - prev_kf.time) / (next_kf.time - prev_kf.time))
                value = (1.0 - alpha) * prev_kf.direction + alpha * next_kf.direction

        value = np.array(value, dtype=np.float64)
        if float(np.linalg.norm(value)) > 1.0:
            value = normalize_or_zero(value)
        return value

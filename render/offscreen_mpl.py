# -*- coding: utf-8 -*-
"""
render/offscreen_mpl.py

用途：
- 使用 matplotlib (Figure + FigureCanvasAgg, 不经过 pyplot) 进行离屏绘制，将调试图元保存为 PNG。
- API 尽量简单，只暴露一个 `OffscreenPlotter.render_gizmos(...)`。

注意：
- 球体画成散点，圆画成折线，只用于调试观察；
- 坐标系为 +Y 向上，绘制时映射到 matplotlib 的 Z 轴。
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

# Figure + FigureCanvasAgg directly, so importing this module never touches
# the global pyplot backend of the host process.
try:
    from matplotlib.backends.backend_agg import FigureCanvasAgg  # type: ignore
    from matplotlib.figure import Figure  # type: ignore
    from mpl_toolkits.mplot3d import Axes3D  # type: ignore  # noqa: F401
except ImportError:
    Figure = None
    FigureCanvasAgg = None

from .gizmos import Circle, Gizmo, Line, Sphere


@dataclass
class Camera:
    """极简视角参数 (matplotlib 3D 视角)."""

    elev: float = 25.0
    azim: float = -60.0
    center: Optional[Tuple[float, float, float]] = None  # None 时跟随图元中心
    half_extent: float = 8.0


def _to_plot(p: np.ndarray) -> Tuple[float, float, float]:
    # (x, y_up, z) -> (x, z, y_up)
    return float(p[0]), float(p[2]), float(p[1])


def _circle_points(circle: Circle, segments: int = 24) -> np.ndarray:
    normal = circle.normal / max(float(np.linalg.norm(circle.normal)), 1e-12)
    helper = np.array([1.0, 0.0, 0.0]) if abs(normal[0]) < 0.9 else np.array([0.0, 0.0, 1.0])
    u = np.cross(normal, helper)
    u /= np.linalg.norm(u)
    v = np.cross(normal, u)
    angles = np.linspace(0.0, 2.0 * np.pi, segments + 1)
    return circle.center + circle.radius * (
        np.outer(np.cos(angles), u) + np.outer(np.sin(angles), v)
    )


class OffscreenPlotter:
    """使用 matplotlib 进行离屏绘制的简单封装."""

    def __init__(
        self,
        width: int = 1024,
        height: int = 1024,
        camera: Optional[Camera] = None,
        dpi: int = 100,
    ) -> None:
        if Figure is None:
            raise ImportError(
                "OffscreenPlotter 需要 matplotlib，请先安装：`pip install matplotlib`"
            )
        self.width = int(width)
        self.height = int(height)
        self.dpi = int(dpi)
        self.camera = camera or Camera()

    def _center(self, gizmos: Sequence[Gizmo]) -> np.ndarray:
        if self.camera.center is not None:
            return np.asarray(self.camera.center, dtype=np.float64)
        pts = []
        for g in gizmos:
            if isinstance(g, Line):
                pts.extend([g.start, g.end])
            else:
                pts.append(g.center)
        if not pts:
            return np.zeros(3)
        return np.mean(np.stack(pts, axis=0), axis=0)

    def render_gizmos(
        self,
        gizmos: Sequence[Gizmo],
        out_path: str,
        title: Optional[str] = None,
    ) -> None:
        """把图元画到 out_path (PNG)。"""
        dir_path = os.path.dirname(out_path)
        if dir_path:
            os.makedirs(dir_path, exist_ok=True)

        fig = Figure(figsize=(self.width / self.dpi, self.height / self.dpi), dpi=self.dpi)
        FigureCanvasAgg(fig)
        ax = fig.add_subplot(111, projection="3d")
        for g in gizmos:
            if isinstance(g, Line):
                xs, ys, zs = zip(_to_plot(g.start), _to_plot(g.end))
                ax.plot(xs, ys, zs, color=g.color, linewidth=1.5)
            elif isinstance(g, Sphere):
                x, y, z = _to_plot(g.center)
                ax.scatter([x], [y], [z], color=g.color, s=(g.radius * 40.0) ** 2 / 10.0)
            elif isinstance(g, Circle):
                ring = np.array([_to_plot(p) for p in _circle_points(g)])
                ax.plot(ring[:, 0], ring[:, 1], ring[:, 2], color=g.color, linewidth=1.0)

        cx, cy, cz = _to_plot(self._center(gizmos))
        r = self.camera.half_extent
        ax.set_xlim(cx - r, cx + r)
        ax.set_ylim(cy - r, cy + r)
        ax.set_zlim(cz - r, cz + r)
        ax.set_xlabel("x")
        ax.set_ylabel("z")
        ax.set_zlabel("y")
        ax.view_init(elev=self.camera.elev, azim=self.camera.azim)
        if title:
            ax.set_title(title)
        fig.savefig(out_path)

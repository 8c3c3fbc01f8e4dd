# -*- coding: utf-8 -*-
"""
render 包：负责把求解后的腿链变成可以看的东西。

当前提供：
- collect_gizmos / DebugDrawConfig: 从 Spider 读取点、段、目标，生成调试图元。
- OffscreenPlotter: 使用 matplotlib 做离屏绘制，输出 PNG。

上层只需要关心：
- 先用 collect_gizmos(spider, config) 得到图元；
- 再交给 OffscreenPlotter.render_gizmos(...) 或自己的绘制后端。
"""

from .gizmos import DebugDrawConfig, collect_gizmos  # noqa: F401
from .offscreen_mpl import OffscreenPlotter  # noqa: F401

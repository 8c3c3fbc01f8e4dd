# -*- coding: utf-8 -*-
"""
tools/bake_frames.py

用途：
- 运行一个 Simulation，在给定时间段内逐帧求解蜘蛛腿链；
- 将调试图元离屏绘制为 PNG 帧序列，和/或把整段轨迹导出为 .npz；
- 依赖 render.offscreen_mpl.OffscreenPlotter 和 scene.simulation.Simulation。

典型用法（Python 内部调用）::

    from scene.demo import build_simulation
    from tools.bake_frames import bake_simulation_frames

    sim, duration = build_simulation()
    bake_simulation_frames(sim, out_dir="out/frames/spider", duration=duration)

命令行用法::

    python -m tools.bake_frames --out out/frames/spider --trace out/spider.npz
    python -m tools.bake_frames --trace out/spider.npz --no-frames --fps 30
"""

from __future__ import annotations

import argparse
import importlib
import os
from typing import Callable, List, Optional, Tuple

from render.gizmos import DebugDrawConfig, collect_gizmos
from scene.simulation import Simulation, SpiderFrame
from scene.trace_io import save_trace_npz


def bake_simulation_frames(
    sim: Simulation,
    out_dir: Optional[str],
    duration: float,
    width: int = 1024,
    height: int = 1024,
    every: int = 1,
    draw_config: Optional[DebugDrawConfig] = None,
) -> List[SpiderFrame]:
    """推进 Simulation 并(可选地)逐帧离屏绘制.

    Parameters
    ----------
    sim:
        已构建好的 Simulation（包含 Spider + MoveTrack）。
    out_dir:
        帧输出目录；为 None 时只求解不绘制。文件名为 frame_0000.png, ...
    duration:
        仿真时长（秒）。
    every:
        每隔多少个 tick 输出一帧 PNG。
    draw_config:
        调试绘制开关，默认全部打开。

    Returns
    -------
    所有 tick 的 SpiderFrame 列表（用于导出轨迹）。
    """
    if every < 1:
        raise ValueError(f"every must be >= 1, got {every}")

    plotter = None
    if out_dir is not None:
        from render.offscreen_mpl import OffscreenPlotter

        os.makedirs(out_dir, exist_ok=True)
        plotter = OffscreenPlotter(width=width, height=height)
    draw_config = draw_config or DebugDrawConfig()

    frames: List[SpiderFrame] = []
    total = max(1, int(round(duration * sim.fps)))
    print(f"🎬 开始仿真: {total} 帧, 时长 {duration:.3f}s, fps={sim.fps}")
    if out_dir is not None:
        print(f"    输出目录: {out_dir}")

    for idx, frame in enumerate(sim.run(duration)):
        frames.append(frame)
        if frame.retargeted:
            print(
                f"  ▶ t={frame.time:.3f}s group {frame.movement_group} steps, "
                f"legs {frame.retargeted} (error {frame.combined_leg_position_error:.2f})"
            )
        if plotter is None or idx % every != 0:
            continue

        gizmos = collect_gizmos(sim.spider, draw_config)
        out_path = os.path.join(out_dir, f"frame_{idx // every:04d}.png")
        plotter.render_gizmos(gizmos, out_path, title=f"t={frame.time:.2f}s")

    print("✅ 仿真完成。")
    return frames


def _load_simulation_from_entrypoint(
    module_name: str,
    func_name: str,
) -> Tuple[Simulation, float]:
    """从 module:function 入口构建 Simulation.

    约定：
    - 函数签名为 `def build_simulation() -> Simulation | (Simulation, float)`；
    - 若只返回 Simulation，则 duration 由 MoveTrack 推断。
    """
    module = importlib.import_module(module_name)
    func: Callable[..., object] = getattr(module, func_name)

    result = func()
    if isinstance(result, Simulation):
        sim = result
        duration = sim.track.duration or 1.0
    else:
        sim, duration = result  # type: ignore[misc]

    if not isinstance(sim, Simulation):
        raise TypeError(
            f"入口函数 {module_name}.{func_name} 返回值类型错误: {type(sim)!r}"
        )
    return sim, float(duration)


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="运行蜘蛛 IK 仿真, 输出 PNG 帧序列和/或 .npz 轨迹")
    parser.add_argument(
        "--scene-module",
        type=str,
        default="scene.demo",
        help="包含构建仿真函数的模块名，默认 scene.demo",
    )
    parser.add_argument(
        "--scene-func",
        type=str,
        default="build_simulation",
        help="构建 Simulation 的函数名，默认 build_simulation",
    )
    parser.add_argument("--out", type=str, default=None, help="帧输出目录，例如 out/frames/spider")
    parser.add_argument("--trace", type=str, default=None, help="轨迹 .npz 输出路径")
    parser.add_argument(
        "--duration",
        type=float,
        default=None,
        help="仿真时长（秒）。若不指定则由入口函数给出。",
    )
    parser.add_argument("--fps", type=int, default=None, help="仿真帧率，覆盖入口函数给出的 fps")
    parser.add_argument("--every", type=int, default=1, help="每隔多少 tick 输出一帧，默认 1")
    parser.add_argument("--width", type=int, default=1024, help="输出图像宽度，默认 1024")
    parser.add_argument("--height", type=int, default=1024, help="输出图像高度，默认 1024")
    parser.add_argument(
        "--no-frames",
        action="store_true",
        help="不输出 PNG 帧（仍可写 --trace）",
    )

    args = parser.parse_args(argv)
    out_dir = None if args.no_frames else args.out
    if out_dir is None and args.trace is None:
        parser.error("至少需要 --out 或 --trace 之一 (--no-frames 时必须给 --trace)")
    if args.fps is not None and args.fps <= 0:
        parser.error(f"--fps 必须 > 0, got {args.fps}")
    if args.no_frames and args.out is not None:
        print(f"[WARN] --no-frames 已指定, 忽略 --out {args.out}")

    sim, inferred_duration = _load_simulation_from_entrypoint(args.scene_module, args.scene_func)
    duration = float(args.duration) if args.duration is not None else inferred_duration
    if args.fps is not None:
        sim.fps = int(args.fps)

    frames = bake_simulation_frames(
        sim,
        out_dir=out_dir,
        duration=duration,
        width=int(args.width),
        height=int(args.height),
        every=int(args.every),
    )

    if args.trace:
        save_trace_npz(args.trace, frames)
        print(f"[INFO] 轨迹已保存: {args.trace}")


if __name__ == "__main__":
    main()

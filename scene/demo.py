# -*- coding: utf-8 -*-
"""Eight-legged spider walking a square; default entry point of tools.bake_frames."""

from __future__ import annotations

from gait.config import SpiderConfig
from gait.spider import spawn_spider
from .simulation import Simulation
from .timeline import MoveTrack

SIDE_SECONDS = 1.5


def build_track(side_seconds: float = SIDE_SECONDS) -> MoveTrack:
    track = MoveTrack()
    t = 0.0
    for keys in ("W", "D", "S", "A"):
        track.add_keys(t, keys)
        track.add_keys(t + side_seconds - 1e-3, keys)
        t += side_seconds
    track.add_keys(t, "")
    return track


def build_simulation(controller: str = "animated", fps: int = 60) -> tuple[Simulation, float]:
    spider = spawn_spider(SpiderConfig(controller=controller))
    track = build_track()
    sim = Simulation(spider=spider, track=track, fps=fps)
    # one extra second to let the last step settle
    return sim, track.duration + 1.0


if __name__ == "__main__":
    sim, duration = build_simulation()
    frames = list(sim.run(duration))
    steps = sum(1 for f in frames if f.retargeted)
    print(f"Simulation done. Duration={duration:.2f}s, frames={len(frames)}, steps={steps}")

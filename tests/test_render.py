import numpy as np
import pytest

from gait.spider import spawn_spider
from render.gizmos import Circle, DebugDrawConfig, Line, Sphere, collect_gizmos


def _count(gizmos, kind):
    return sum(1 for g in gizmos if isinstance(g, kind))


def test_gizmos_cover_points_segments_and_targets():
    spider = spawn_spider()
    before = collect_gizmos(spider, DebugDrawConfig())
    # no solve yet, so no targets to draw
    assert _count(before, Sphere) == 24
    assert _count(before, Line) == 16
    assert _count(before, Circle) == 0

    spider.tick(1.0 / 60.0, (0.0, 0.0, -1.0))
    gizmos = collect_gizmos(spider, DebugDrawConfig())
    assert _count(gizmos, Circle) == 16
    radii = sorted({g.radius for g in gizmos if isinstance(g, Circle)})
    assert radii == [0.1, 0.7]


def test_gizmo_toggles_are_explicit():
    spider = spawn_spider()
    spider.tick(1.0 / 60.0)
    off = DebugDrawConfig(draw_points=False, draw_segments=False, draw_targets=False)
    assert collect_gizmos(spider, off) == []

    rest_only = DebugDrawConfig(
        draw_points=False, draw_segments=False, draw_targets=False, draw_rest_points=True
    )
    gizmos = collect_gizmos(spider, rest_only)
    assert len(gizmos) == 8
    assert np.allclose(gizmos[0].center, spider.legs[0].rest_point)


def test_gizmos_do_not_alias_simulation_state():
    spider = spawn_spider()
    spider.tick(1.0 / 60.0)
    points = [leg.chain.points.copy() for leg in spider.legs]
    for g in collect_gizmos(spider, DebugDrawConfig()):
        if isinstance(g, Line):
            g.start[:] = 0.0
        else:
            g.center[:] = 0.0
    for leg, pts in zip(spider.legs, points):
        assert np.allclose(leg.chain.points, pts)
        assert not np.allclose(leg.last_target, 0.0)


def test_offscreen_plotter_writes_png(tmp_path):
    pytest.importorskip("matplotlib")
    from render.offscreen_mpl import OffscreenPlotter

    spider = spawn_spider()
    spider.tick(1.0 / 60.0)
    out = tmp_path / "frames" / "frame_0000.png"
    OffscreenPlotter(width=200, height=200).render_gizmos(
        collect_gizmos(spider, DebugDrawConfig()), str(out), title="t=0"
    )
    assert out.exists()
    assert out.stat().st_size > 0


def test_bake_frames_cli_writes_trace(tmp_path):
    from tools.bake_frames import main

    trace = tmp_path / "spider.npz"
    main(["--trace", str(trace), "--duration", "0.5"])
    assert trace.exists()

    with pytest.raises(SystemExit):
        main([])


def test_bake_frames_cli_fps_overrides_entry_point(tmp_path):
    from scene.trace_io import load_trace_npz
    from tools.bake_frames import main

    trace = tmp_path / "spider.npz"
    main(["--trace", str(trace), "--duration", "0.5", "--fps", "10"])
    times = load_trace_npz(str(trace))["times"]
    assert len(times) == 5
    assert np.allclose(np.diff(times), 0.1)

    with pytest.raises(SystemExit):
        main(["--trace", str(trace), "--fps", "0"])


def test_bake_frames_cli_no_frames_still_writes_trace(tmp_path):
    from tools.bake_frames import main

    out = tmp_path / "frames"
    trace = tmp_path / "spider.npz"
    main(["--out", str(out), "--trace", str(trace), "--duration", "0.1", "--no-frames"])
    assert trace.exists()
    assert not out.exists()

    # nothing left to write
    with pytest.raises(SystemExit):
        main(["--out", str(out), "--no-frames"])


def test_importing_plotter_keeps_host_backend():
    matplotlib = pytest.importorskip("matplotlib")
    import importlib

    import render.offscreen_mpl as offscreen_mpl

    before = matplotlib.get_backend()
    importlib.reload(offscreen_mpl)
    assert matplotlib.get_backend() == before

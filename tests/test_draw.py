from swingby.core.config import SimulationConfig, TrailCfg
from swingby.core.model import TrailPoint
from swingby.core.session import SimulationSession
from swingby.render.camera import Camera
from swingby.render.draw import hud_lines, trail_pixels


def test_trail_pixels_drop_consecutive_duplicates():
    camera = Camera((100, 100), 1e-3)
    points = [TrailPoint(0.0, 0.0, 0.0), TrailPoint(1.0, 10.0, 0.0), TrailPoint(2.0, 1000.0, 0.0)]
    assert trail_pixels(points, camera) == [(50, 50), (51, 50)]


def test_hud_reports_fault():
    session = SimulationSession.create(SimulationConfig(), TrailCfg(policy="ring"))
    session.start()
    session.tick()
    session.fault = "SingularStateError: test"
    lines = hud_lines(session.frame())
    assert lines[0].startswith("t ")
    assert "running  10x  [ring]" in lines
    assert lines[-1] == "fault: SingularStateError: test"

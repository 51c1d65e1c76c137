import numpy as np
import pytest

from swingby.core.config import ViewCfg
from swingby.render.camera import Camera


@pytest.fixture
def camera():
    return Camera((800, 600), 1e-5, cfg=ViewCfg(padding=1.3, smoothing=0.08))


def test_frame_targets_fit_padded_bounding_box(camera):
    center, ppm = camera.frame_targets([(0.0, 0.0), (1.0e7, 0.0)], (800, 600))
    np.testing.assert_allclose(center, [5.0e6, 0.0])
    assert ppm == pytest.approx(600 / (1.0e7 * 1.3))


def test_update_moves_a_fraction_toward_target(camera):
    camera.update([(0.0, 0.0), (1.0e7, 0.0)], (800, 600))
    target_ppm = 600 / (1.0e7 * 1.3)
    assert camera.ppm == pytest.approx(1e-5 + (target_ppm - 1e-5) * 0.08)
    np.testing.assert_allclose(camera.center, [5.0e6 * 0.08, 0.0])


def test_update_converges_without_overshoot(camera):
    focus = [(0.0, 0.0), (-4.0e6, 6.0e6)]
    previous = float(np.linalg.norm(camera.center - np.array([-2.0e6, 3.0e6])))
    for _ in range(200):
        camera.update(focus, (800, 600))
        distance = float(np.linalg.norm(camera.center - np.array([-2.0e6, 3.0e6])))
        assert distance <= previous
        previous = distance
    assert previous < 1.0
    assert camera.ppm == pytest.approx(600 / (6.0e6 * 1.3), rel=1e-6)


def test_world_to_screen_flips_vertical_axis(camera):
    sx, sy = camera.world_to_screen(0.0, 0.0)
    assert (sx, sy) == (400.0, 300.0)
    _, sy_up = camera.world_to_screen(0.0, 1.0e6)
    assert sy_up < 300.0
    sx_right, _ = camera.world_to_screen(1.0e6, 0.0)
    assert sx_right > 400.0


@pytest.mark.parametrize("point", [(0.0, 0.0), (7.0e6, -3.0e6), (-1.234e7, 9.87e6)])
def test_screen_to_world_inverts_world_to_screen(camera, point):
    camera.reset((1.5e6, -2.0e6), 3.3e-5)
    x, y = camera.screen_to_world(*camera.world_to_screen(*point))
    assert x == pytest.approx(point[0], rel=1e-12, abs=1e-6)
    assert y == pytest.approx(point[1], rel=1e-12, abs=1e-6)


def test_reset_snaps_immediately(camera):
    camera.update([(0.0, 0.0), (1.0e7, 1.0e7)], (800, 600))
    camera.reset((2.0, 3.0), 2e-5)
    np.testing.assert_array_equal(camera.center, [2.0, 3.0])
    np.testing.assert_array_equal(camera.target, [2.0, 3.0])
    assert camera.ppm == camera.ppm_target == 2e-5


def test_scale_is_clamped():
    camera = Camera((800, 600), 1.0, cfg=ViewCfg(max_pixels_per_meter=1e-3))
    assert camera.ppm == 1e-3
    camera.update([(0.0, 0.0)], (800, 600))
    assert camera.ppm == 1e-3


def test_smoothing_must_be_in_unit_interval():
    with pytest.raises(ValueError):
        Camera((800, 600), 1e-5, cfg=ViewCfg(smoothing=0.0))

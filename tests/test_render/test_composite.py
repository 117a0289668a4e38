"""Tests for the indicator composite pass."""
import numpy as np
import pytest

from ppisim.interfaces import CaptureFrame
from ppisim.render import alpha_over, circular_mask, composite_indicator, premultiply, sweep_line_mask


@pytest.fixture
def white_capture(make_snapshot):
    return CaptureFrame(rgba=np.ones((32, 32, 4), dtype=np.float32), snapshot=make_snapshot(), targets=[])


class TestMasks:

    def test_circular_mask(self):
        mask = circular_mask(32)
        assert mask[16, 16]
        assert not mask[0, 0]
        assert not mask[0, 31]
        # Pixel centre at radius 15.5 is inside, edge centres are not
        assert mask[0, 16]

    def test_smaller_display_radius(self):
        assert not circular_mask(32, 8.0)[2, 16]

    def test_sweep_line_trails_rotation(self):
        weight = sweep_line_mask(16, 0.0, 10.0)
        # Just west of north has been swept, just east has not
        assert weight[0, 7] > 0
        assert weight[0, 8] == 0
        assert weight.max() <= 1.0

    def test_sweep_line_disabled(self):
        assert not np.any(sweep_line_mask(16, 0.0, 0.0))


class TestComposite:

    def test_outside_circle_transparent(self, white_capture):
        out = composite_indicator(white_capture)
        assert np.all(out[0, 0] == 0.0)
        assert np.all(out[16, 16] == 1.0)

    def test_capture_not_modified(self, white_capture):
        composite_indicator(white_capture)
        assert np.all(white_capture.rgba == 1.0)

    def test_sweep_line_blend(self, make_snapshot):
        capture = CaptureFrame(rgba=np.zeros((16, 16, 4), dtype=np.float32), snapshot=make_snapshot(), targets=[])
        out = composite_indicator(capture, rotation_deg=0.0, sweep_line_width_deg=10.0,
                                  sweep_line_color=(1.0, 0.0, 0.0, 0.5))
        assert out[1, 7, 0] > 0
        assert out[1, 7, 1] == 0
        assert not np.any(out[1, 8])


class TestLayering:

    def test_premultiply(self):
        px = np.array([[[1.0, 0.5, 0.0, 0.5]]])
        assert np.allclose(premultiply(px), [[[0.5, 0.25, 0.0, 0.5]]])

    def test_alpha_over(self):
        top = np.array([[[0.25, 0.0, 0.0, 0.25]]])
        bottom = np.array([[[0.0, 0.0, 1.0, 1.0]]])
        assert np.allclose(alpha_over(top, bottom), [[[0.25, 0.0, 0.75, 1.0]]])

    def test_transparent_top_keeps_bottom(self):
        bottom = np.random.default_rng(0).uniform(size=(4, 4, 4))
        assert np.allclose(alpha_over(np.zeros((4, 4, 4)), bottom), bottom)

    def test_shape_mismatch(self):
        with pytest.raises(ValueError):
            alpha_over(np.zeros((2, 2, 4)), np.zeros((3, 3, 4)))

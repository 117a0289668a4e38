"""Tests for the two-pass render pipeline."""
import numpy as np
import pytest

from ppisim.config import RadarConfig
from ppisim.render import SweepRenderPipeline
from ppisim.render.pipeline import RENDER_TASK, ROTATION_TASK
from ppisim.timing import FrameScheduler

SIZE = 48


@pytest.fixture
def pipeline(scenario_world):
    return SweepRenderPipeline(scenario_world, size_px=SIZE)


@pytest.fixture
def scheduler(clock):
    return FrameScheduler(clock=clock)


class TestRender:

    def test_render_produces_frame(self, pipeline):
        frame = pipeline.render()
        assert frame.rgba.shape == (SIZE, SIZE, 4)
        assert pipeline.latest is frame
        assert pipeline.updates == 1

    def test_both_passes_share_snapshot(self, pipeline, scenario_world):
        scenario_world.sensor.sweep_angle_deg = 45.0
        frame = pipeline.render()
        assert frame.capture.snapshot is frame.snapshot
        assert frame.snapshot.sweep_angle_deg == 45.0

    def test_later_sensor_changes_do_not_touch_frame(self, pipeline, scenario_world):
        scenario_world.sensor.sweep_angle_deg = 45.0
        frame = pipeline.render()
        before = frame.rgba.copy()
        scenario_world.sensor.advance(90.0)
        assert frame.snapshot.sweep_angle_deg == 45.0
        assert np.array_equal(frame.rgba, before)

    def test_outside_indicator_transparent(self, pipeline, scenario_world):
        scenario_world.sensor.sweep_angle_deg = 45.0
        frame = pipeline.render()
        assert np.all(frame.rgba[0, 0] == 0.0)
        assert np.count_nonzero(frame.rgba[..., 3]) == 1

    def test_rotation_wraps(self, pipeline):
        pipeline.rotation_ppi = 359.0
        assert pipeline.advance_rotation() == 0.0

    @pytest.mark.parametrize("step", [360.0, 720.0, 725.0])
    def test_rotation_wraps_large_steps(self, scenario_world, step):
        pipeline = SweepRenderPipeline(scenario_world, size_px=SIZE, rotation_step_deg=step)
        for _ in range(3):
            assert 0.0 <= pipeline.advance_rotation() < 360.0
        assert pipeline.rotation_ppi == pytest.approx((3 * step) % 360.0)

    def test_from_config(self, scenario_world):
        config = RadarConfig(indicator_size_px=32, sweep_line_width_deg=15.0, terrain_resample="nearest")
        pipeline = SweepRenderPipeline.from_config(config, scenario_world)
        assert pipeline.size_px == 32
        assert pipeline.display_radius_px == 16.0
        assert pipeline.sweep_line_width_deg == 15.0


class TestScheduling:

    def test_attach_every_tick(self, pipeline, scheduler):
        pipeline.attach(scheduler)
        assert scheduler.task_names == [ROTATION_TASK, RENDER_TASK]
        for _ in range(3):
            scheduler.advance(0.02)
        assert pipeline.updates == 3
        assert pipeline.rotation_ppi == 3.0
        assert pipeline.latest.rotation_deg == 3.0

    def test_attach_fixed_interval(self, pipeline, scheduler):
        pipeline.attach(scheduler, interval_s=0.05)
        for _ in range(10):
            scheduler.advance(0.02)
        assert pipeline.updates == 4
        # Rotation still advances every tick
        assert pipeline.rotation_ppi == 10.0

    def test_zero_elapsed_holds_rotation(self, pipeline, scheduler):
        pipeline.attach(scheduler)
        scheduler.advance(0.0)
        assert pipeline.rotation_ppi == 0.0
        assert pipeline.updates == 1

    def test_detach(self, pipeline, scheduler):
        pipeline.attach(scheduler)
        pipeline.detach(scheduler)
        assert len(scheduler) == 0

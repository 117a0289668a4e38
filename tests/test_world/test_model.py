"""Tests for the world model."""
import numpy as np
import pytest

from ppisim.config import RadarConfig, ConfigurationError
from ppisim.timing import FrameScheduler
from ppisim.world import PeriodicStep, WorldModel


class TestConstruction:

    def test_from_config(self, flat_world, flat_grid):
        assert flat_world.map_size_m == 1000.0
        assert flat_world.terrain.shape == (flat_grid.height, flat_grid.width)
        assert flat_world.sensor.max_range_m == 500.0

    def test_invalid_config_rejected(self, flat_grid):
        with pytest.raises(ConfigurationError):
            WorldModel.from_config(RadarConfig(gain=3.0), flat_grid)


class TestTargets:

    def test_add_and_lookup(self, flat_world):
        e = flat_world.add_target("A", (1.0, 2.0, 3.0), visibility_weight=0.5)
        assert flat_world.target("A") is e
        assert [t.name for t in flat_world.targets] == ["A"]

    def test_duplicate_name(self, flat_world):
        flat_world.add_target("A", (0.0, 0.0, 0.0))
        with pytest.raises(ValueError):
            flat_world.add_target("A", (1.0, 1.0, 1.0))

    def test_schedule_motion(self, flat_world, clock):
        flat_world.add_target("still", (0.0, 0.0, 0.0))
        flat_world.add_target("moving", (0.0, 0.0, 0.0), motion=PeriodicStep((1.0, 0.0, 0.0), 1.0))
        scheduler = FrameScheduler(clock=clock)
        assert flat_world.schedule_motion(scheduler) == 1
        assert scheduler.task_names == ["moving"]


class TestReturns:

    def test_target_returns_order_and_values(self, scenario_world):
        scenario_world.add_target("Far", (0.0, 900.0, 35.0))
        scenario_world.sensor.sweep_angle_deg = 45.0
        returns = scenario_world.target_returns()

        assert [r.name for r in returns] == ["T1", "Far"]
        assert returns[0].illumination == pytest.approx(25.0 / 35.0 * 0.8)
        assert returns[0].detected
        assert not returns[1].in_range
        assert not returns[1].detected

    def test_no_targets(self, flat_world):
        assert flat_world.target_returns() == []

    def test_explicit_snapshot_wins(self, scenario_world):
        snap = scenario_world.snapshot()
        scenario_world.sensor.sweep_angle_deg = 45.0
        # Snapshot still at bearing 0: target lies 315 degrees behind
        returns = scenario_world.target_returns(snap)
        assert returns[0].illumination == pytest.approx(25.0 / 35.0 * 0.8 * (45.0 / 360.0))

    def test_terrain_returns_ridge(self, ridge_grid):
        """Rising ground east of the sensor lights up when the sweep points east."""
        world = WorldModel.from_config(RadarConfig(gain=1.0), ridge_grid)
        world.sensor.sweep_angle_deg = 90.0
        returns = world.terrain_returns()
        illum = returns.illumination.reshape(ridge_grid.height, ridge_grid.width)

        east = illum[10, 11:]
        west = illum[10, :10]
        assert np.all(east > 0)
        assert np.all(west == 0)
        assert returns.detected.reshape(illum.shape)[10, 12]

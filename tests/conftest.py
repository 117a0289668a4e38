"""Shared pytest fixtures for all test modules."""
import pytest
import numpy as np

from ppisim.config import RadarConfig
from ppisim.interfaces import ElevationGrid, SensorSnapshot
from ppisim.terrain.heightmap import flat_heightmap
from ppisim.world.model import WorldModel


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def tick(self, seconds: float) -> float:
        self.now += seconds
        return self.now


# === Configuration Fixtures ===

@pytest.fixture
def default_config():
    """Standard 1000-unit map, antenna 35, gain 0.9."""
    return RadarConfig()


@pytest.fixture
def small_config():
    """Reduced indicator size for faster render tests."""
    return RadarConfig(indicator_size_px=64)


# === Clock Fixtures ===

@pytest.fixture
def clock():
    return FakeClock()


# === Terrain Fixtures ===

@pytest.fixture
def flat_grid():
    """Flat terrain, elevation 0 everywhere."""
    return flat_heightmap(11, 11)


@pytest.fixture
def ridge_grid():
    """North-south ridge: elevation rises towards the east edge."""
    x = np.linspace(0.0, 20.0, 21)
    heights = np.tile(x, (21, 1))
    return ElevationGrid(elevations=heights.ravel(), width=21, height=21)


# === Sensor Fixtures ===

@pytest.fixture
def make_snapshot():
    """Factory for frozen sensor states."""
    def _make(sweep_angle_deg=0.0, antenna_height_m=35.0, gain=0.9, max_range_m=500.0, origin=(0.0, 0.0)):
        return SensorSnapshot(
            sweep_angle_deg=sweep_angle_deg,
            antenna_height_m=antenna_height_m,
            gain=gain,
            max_range_m=max_range_m,
            origin=origin,
        )
    return _make


# === World Fixtures ===

@pytest.fixture
def flat_world(default_config, flat_grid):
    """Flat world with the default sensor."""
    return WorldModel.from_config(default_config, flat_grid)


@pytest.fixture
def scenario_world(flat_world):
    """Flat world with one target at (300, 300, 25), weight 0.8."""
    flat_world.add_target("T1", (300.0, 300.0, 25.0), visibility_weight=0.8)
    return flat_world

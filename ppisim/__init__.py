"""Sweep-synchronized PPI radar display simulation."""
from .config import RadarConfig, ConfigurationError
from .interfaces import (
    ElevationGrid,
    SensorSnapshot,
    SweepReturns,
    TargetReturn,
    CaptureFrame,
    IndicatorFrame,
)
from .timing import FrameScheduler
from .world import SensorState, WorldModel, illumination
from .render import SweepRenderPipeline, IndicatorOverlay
from .app import RadarApp, TargetSpec, DEFAULT_TARGETS

__all__ = [
    "RadarConfig",
    "ConfigurationError",
    "ElevationGrid",
    "SensorSnapshot",
    "SweepReturns",
    "TargetReturn",
    "CaptureFrame",
    "IndicatorFrame",
    "FrameScheduler",
    "SensorState",
    "WorldModel",
    "illumination",
    "SweepRenderPipeline",
    "IndicatorOverlay",
    "RadarApp",
    "TargetSpec",
    "DEFAULT_TARGETS",
]

"""World model: sensor state, targets and sweep visibility."""
from .sensor import SensorState
from .entities import Entity, ConstantVelocity, PeriodicStep
from .visibility import (
    evaluate_returns,
    illumination,
    is_detected,
    reveal_colors,
    sweep_direction,
    sweep_offset_deg,
)
from .model import WorldModel

__all__ = [
    'SensorState',
    'Entity',
    'ConstantVelocity',
    'PeriodicStep',
    'evaluate_returns',
    'illumination',
    'is_detected',
    'reveal_colors',
    'sweep_direction',
    'sweep_offset_deg',
    'WorldModel',
]

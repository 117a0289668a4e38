"""
Target Entities

Point targets in world space and the motion rules that move them:
- ConstantVelocity: continuous motion, scaled by each tick's elapsed time
- PeriodicStep: fixed displacement every interval
"""
import numpy as np
from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass
class ConstantVelocity:
    """Move by ``velocity`` world units per second."""
    velocity: Tuple[float, float, float]

    def register(self, scheduler, entity: "Entity") -> None:
        velocity = np.asarray(self.velocity, dtype=np.float64)

        def move(elapsed_s: float) -> None:
            entity.translate(velocity * elapsed_s)

        scheduler.register_continuous(entity.name, move)


@dataclass
class PeriodicStep:
    """Jump by ``step`` each time ``interval_s`` of simulation time elapses."""
    step: Tuple[float, float, float]
    interval_s: float

    def __post_init__(self):
        if not self.interval_s > 0:
            raise ValueError(f"interval_s must be positive, got {self.interval_s}")

    def register(self, scheduler, entity: "Entity") -> None:
        step = np.asarray(self.step, dtype=np.float64)

        def move() -> None:
            entity.translate(step)

        scheduler.register_fixed(entity.name, self.interval_s, move)


@dataclass
class Entity:
    """A named point target.

    Attributes:
        name: Unique target name (also its scheduler task name)
        position: (x, y, z) world position
        visibility_weight: A priori reflectivity/size factor, clamped to [0, 1]
        radius: Footprint radius drawn by the capture pass
        motion: Optional motion rule
    """
    name: str
    position: np.ndarray
    visibility_weight: float = 1.0
    radius: float = 3.0
    motion: Optional[object] = field(default=None, repr=False)

    def __post_init__(self):
        self.position = np.array(self.position, dtype=np.float64).reshape(3)

    def __setattr__(self, key, value):
        if key == "visibility_weight":
            value = min(max(float(value), 0.0), 1.0)
        super().__setattr__(key, value)

    def translate(self, offset) -> None:
        self.position = self.position + np.asarray(offset, dtype=np.float64)

    @property
    def xyz(self) -> Tuple[float, float, float]:
        return tuple(float(c) for c in self.position)

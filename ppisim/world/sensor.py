"""Process-wide sweep sensor state."""
from typing import Tuple

from ..interfaces import SensorSnapshot


class SensorState:
    """Mutable radar parameters read by both render passes.

    Written once per scheduler tick (sweep advance) and by external knobs;
    renderers read it through ``snapshot()`` only.

    Args:
        antenna_height_m: Sensor mount height, must be positive
        gain: Detection sensitivity, clamped to [0, 1]
        max_range_m: Range gate, must be positive
        sweep_angle_deg: Initial bearing, wrapped into [0, 360)
        origin: Sensor (x, y) position
    """

    def __init__(
        self,
        antenna_height_m: float,
        gain: float,
        max_range_m: float,
        sweep_angle_deg: float = 0.0,
        origin: Tuple[float, float] = (0.0, 0.0),
    ):
        self.antenna_height_m = antenna_height_m
        self.gain = gain
        self.max_range_m = max_range_m
        self.sweep_angle_deg = sweep_angle_deg
        self.origin = origin

    @classmethod
    def from_config(cls, config) -> "SensorState":
        return cls(
            antenna_height_m=config.antenna_height_m,
            gain=config.gain,
            max_range_m=config.effective_max_range_m,
            origin=config.sensor_origin,
        )

    @property
    def sweep_angle_deg(self) -> float:
        return self._sweep_angle_deg

    @sweep_angle_deg.setter
    def sweep_angle_deg(self, value: float):
        angle = float(value) % 360.0
        # -1e-17 % 360 rounds to 360.0
        self._sweep_angle_deg = 0.0 if angle >= 360.0 else angle

    @property
    def antenna_height_m(self) -> float:
        return self._antenna_height_m

    @antenna_height_m.setter
    def antenna_height_m(self, value: float):
        if not value > 0:
            raise ValueError(f"antenna_height_m must be positive, got {value}")
        self._antenna_height_m = float(value)

    @property
    def gain(self) -> float:
        return self._gain

    @gain.setter
    def gain(self, value: float):
        self._gain = min(max(float(value), 0.0), 1.0)

    @property
    def max_range_m(self) -> float:
        return self._max_range_m

    @max_range_m.setter
    def max_range_m(self, value: float):
        if not value > 0:
            raise ValueError(f"max_range_m must be positive, got {value}")
        self._max_range_m = float(value)

    @property
    def origin(self) -> Tuple[float, float]:
        return self._origin

    @origin.setter
    def origin(self, value):
        x, y = value
        self._origin = (float(x), float(y))

    def advance(self, step_deg: float) -> float:
        """Rotate the sweep by ``step_deg`` and return the new bearing."""
        self.sweep_angle_deg = self._sweep_angle_deg + step_deg
        return self._sweep_angle_deg

    def snapshot(self) -> SensorSnapshot:
        """Freeze the current state for one render update."""
        return SensorSnapshot(
            sweep_angle_deg=self._sweep_angle_deg,
            antenna_height_m=self._antenna_height_m,
            gain=self._gain,
            max_range_m=self._max_range_m,
            origin=self._origin,
        )

    def __repr__(self) -> str:
        return (
            f"SensorState(sweep={self._sweep_angle_deg:.1f}deg, "
            f"antenna={self._antenna_height_m:g}, gain={self._gain:g}, "
            f"range={self._max_range_m:g}, origin={self._origin})"
        )

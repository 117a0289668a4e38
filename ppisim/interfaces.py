"""Shared interface dataclasses for inter-module communication."""
from dataclasses import dataclass
from typing import List, Tuple
import numpy as np
from numpy.typing import NDArray


@dataclass
class ElevationGrid:
    """Decoded elevation samples (heightmap source → terrain input).

    Attributes:
        elevations: Flat row-major elevations, row 0 at the north edge
        width: Samples per row (west → east)
        height: Number of rows (north → south)
    """
    elevations: NDArray[np.float64]
    width: int
    height: int

    def __post_init__(self):
        self.elevations = np.asarray(self.elevations, dtype=np.float64).ravel()
        if self.width < 2 or self.height < 2:
            raise ValueError(
                f"Elevation grid needs at least 2x2 samples, got {self.width}x{self.height}"
            )
        if self.elevations.size != self.width * self.height:
            raise ValueError(
                f"Elevation grid has {self.elevations.size} samples, "
                f"expected {self.width}x{self.height}"
            )

    def as_array(self) -> NDArray[np.float64]:
        """Return elevations as a (height, width) array."""
        return self.elevations.reshape(self.height, self.width)


@dataclass(frozen=True)
class SensorSnapshot:
    """Immutable copy of the sensor state used by one render update.

    Attributes:
        sweep_angle_deg: Sweep bearing, 0 = +y (north), clockwise
        antenna_height_m: Sensor mount height
        gain: Detection sensitivity in [0, 1]
        max_range_m: Range gate
        origin: Sensor (x, y) position
    """
    sweep_angle_deg: float
    antenna_height_m: float
    gain: float
    max_range_m: float
    origin: Tuple[float, float] = (0.0, 0.0)

    @property
    def threshold(self) -> float:
        """Illumination at or below which a return is suppressed."""
        return 1.0 - self.gain


@dataclass
class SweepReturns:
    """Per-point visibility evaluation (visibility model → render passes).

    Attributes:
        range_m: Horizontal distance from the sensor (N,)
        in_range: Inside the range gate (N,)
        offset_deg: Angle swept since the sweep last crossed the point (N,)
        height_coef: Geometric exposure to the sensor (N,)
        angle_coef: Sweep decay coefficient, 1 - offset/360 (N,)
        illumination: Combined illumination clipped to [0, 1] (N,)
        detected: In range and above the gain threshold (N,)
    """
    range_m: NDArray[np.float64]
    in_range: NDArray[np.bool_]
    offset_deg: NDArray[np.float64]
    height_coef: NDArray[np.float64]
    angle_coef: NDArray[np.float64]
    illumination: NDArray[np.float64]
    detected: NDArray[np.bool_]

    def __len__(self) -> int:
        return len(self.illumination)


@dataclass
class TargetReturn:
    """Visibility of one target in a capture pass."""
    name: str
    position: Tuple[float, float, float]
    illumination: float
    in_range: bool
    detected: bool


@dataclass
class CaptureFrame:
    """Pass 1 output: top-down illuminated snapshot (pass 1 → pass 2).

    Attributes:
        rgba: Off-screen buffer (size, size, 4), row 0 at the north edge
        snapshot: Sensor state the buffer was rendered with
        targets: Per-target returns in insertion order
    """
    rgba: NDArray[np.float32]
    snapshot: SensorSnapshot
    targets: List[TargetReturn]

    @property
    def size(self) -> int:
        return self.rgba.shape[0]


@dataclass
class IndicatorFrame:
    """Pass 2 output: the composited indicator image.

    Attributes:
        rgba: Indicator image (size, size, 4), transparent outside the circle
        snapshot: Sensor state shared by both passes
        rotation_deg: Cosmetic sweep-line rotation used by the composite
        capture: The pass 1 frame this image was composited from
    """
    rgba: NDArray[np.float32]
    snapshot: SensorSnapshot
    rotation_deg: float
    capture: CaptureFrame

"""Radar display configuration management."""
from dataclasses import dataclass, asdict
from typing import Optional, Tuple, Union, List
from pathlib import Path
import yaml


RESAMPLE_MODES = ("bilinear", "nearest")


class ConfigurationError(ValueError):
    """Raised when a configuration is rejected before the display starts."""


@dataclass
class RadarConfig:
    """Configuration for the PPI sweep display.

    Attributes:
        map_size_m: Side of the square world extent, centred on the origin
        antenna_height_m: Sensor mount height above the ground plane
        gain: Detection sensitivity in [0, 1]; returns need illumination
            above 1 - gain to be displayed
        max_range_m: Instrumented range; None means half the map size
        sensor_origin: Sensor (x, y) position in the plane
        indicator_size_px: Side of the square indicator image
        tick_rate_hz: Maximum simulation tick rate
        max_delta_s: Largest time step a single tick may carry
        time_scale: Initial simulation speed factor (<= 0 pauses)
        sweep_step_deg: Sweep advance per simulation tick
        render_interval_s: Re-render interval; None renders every tick
        reveal_color: RGBA colour of a fully illuminated return
        terrain_max_height_m: Elevation of a white heightmap pixel
        terrain_resample: Terrain rasterisation, "bilinear" or "nearest"
        sweep_line_width_deg: Cosmetic sweep line width (0 disables)
        sweep_line_color: RGBA colour of the cosmetic sweep line
        bearing_ticks: Number of bearing ticks on the bezel
        range_rings: Number of range rings on the bezel
    """

    # World
    map_size_m: float = 1000.0

    # Sensor
    antenna_height_m: float = 35.0
    gain: float = 0.9
    max_range_m: Optional[float] = None
    sensor_origin: Tuple[float, float] = (0.0, 0.0)

    # Display
    indicator_size_px: int = 800
    reveal_color: Tuple[float, float, float, float] = (1.0, 1.0, 0.0, 1.0)
    terrain_resample: str = "bilinear"
    sweep_line_width_deg: float = 0.0
    sweep_line_color: Tuple[float, float, float, float] = (1.0, 1.0, 0.6, 0.5)
    bearing_ticks: int = 36
    range_rings: int = 10

    # Timing
    tick_rate_hz: float = 75.0
    max_delta_s: float = 0.1
    time_scale: float = 1.0
    sweep_step_deg: float = 1.0
    render_interval_s: Optional[float] = None

    # Terrain
    terrain_max_height_m: float = 28.0

    def __post_init__(self):
        # YAML hands sequences back as lists
        self.sensor_origin = tuple(self.sensor_origin)
        self.reveal_color = tuple(self.reveal_color)
        self.sweep_line_color = tuple(self.sweep_line_color)

    @property
    def effective_max_range_m(self) -> float:
        """Instrumented range, defaulting to half the map size."""
        if self.max_range_m is None:
            return self.map_size_m / 2
        return self.max_range_m

    @property
    def min_tick_s(self) -> float:
        """Shortest time step accepted by the scheduler."""
        return 1.0 / self.tick_rate_hz

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "RadarConfig":
        """Load configuration from YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def to_yaml(self, path: Union[str, Path]) -> None:
        """Save configuration to YAML file."""
        data = asdict(self)
        for key in ("sensor_origin", "reveal_color", "sweep_line_color"):
            data[key] = list(data[key])
        with open(path, 'w') as f:
            yaml.safe_dump(data, f, default_flow_style=False)

    def validate(self) -> List[str]:
        """Validate configuration parameters.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not self.map_size_m > 0:
            errors.append("map_size_m must be positive")

        if not self.antenna_height_m > 0:
            errors.append("antenna_height_m must be positive")

        if not (0.0 <= self.gain <= 1.0):
            errors.append("gain must be within [0, 1]")

        if self.max_range_m is not None and not self.max_range_m > 0:
            errors.append("max_range_m must be positive")

        if len(self.sensor_origin) != 2:
            errors.append("sensor_origin must be an (x, y) pair")

        if not self.indicator_size_px > 0:
            errors.append("indicator_size_px must be positive")

        if len(self.reveal_color) != 4 or any(not (0.0 <= c <= 1.0) for c in self.reveal_color):
            errors.append("reveal_color must be four components within [0, 1]")

        if len(self.sweep_line_color) != 4 or any(not (0.0 <= c <= 1.0) for c in self.sweep_line_color):
            errors.append("sweep_line_color must be four components within [0, 1]")

        if self.terrain_resample not in RESAMPLE_MODES:
            errors.append(f"terrain_resample must be one of {', '.join(RESAMPLE_MODES)}")

        if self.sweep_line_width_deg < 0:
            errors.append("sweep_line_width_deg must not be negative")

        if self.bearing_ticks < 0 or self.range_rings < 0:
            errors.append("bearing_ticks and range_rings must not be negative")

        if not self.tick_rate_hz > 0:
            errors.append("tick_rate_hz must be positive")

        if not self.max_delta_s > 0:
            errors.append("max_delta_s must be positive")

        if not self.sweep_step_deg > 0:
            errors.append("sweep_step_deg must be positive")

        if self.render_interval_s is not None and not self.render_interval_s > 0:
            errors.append("render_interval_s must be positive")

        if self.terrain_max_height_m < 0:
            errors.append("terrain_max_height_m must not be negative")

        return errors

    def ensure_valid(self) -> "RadarConfig":
        """Raise ConfigurationError listing every problem, else return self."""
        errors = self.validate()
        if errors:
            raise ConfigurationError("Invalid radar configuration: " + "; ".join(errors))
        return self

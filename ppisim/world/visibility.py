"""
Sweep Visibility Model

Computes how strongly the sweeping sensor currently reveals each point:
- Range gate (points beyond max range are never drawn)
- Height coefficient (target elevation, or terrain incidence cosine)
- Angular coefficient (linear afterglow decay behind the sweep line)
- Gain threshold (returns at or below 1 - gain are suppressed)

Bearings follow the indicator convention: 0 deg along +y (north), 90 deg
along +x (east), increasing clockwise. Every function works on arrays of
points so a whole terrain grid is evaluated in one call.
"""
import numpy as np
from typing import Optional, Sequence

from ..interfaces import SensorSnapshot, SweepReturns

DEG_TO_RAD = np.pi / 180.0
RAD_TO_DEG = 180.0 / np.pi

# Cross products within rounding of zero mean the point is on the sweep line
FOLD_TOLERANCE = 1e-12


def sweep_direction(sweep_angle_deg: float) -> np.ndarray:
    """Unit vector (x, y) the sweep currently points along."""
    angle_rad = sweep_angle_deg * DEG_TO_RAD
    return np.array([np.sin(angle_rad), np.cos(angle_rad)])


def ray_directions(points_xy: np.ndarray, origin: Sequence[float]):
    """Horizontal unit directions from the sensor to each point.

    Args:
        points_xy: (N, 2) point positions
        origin: Sensor (x, y)

    Returns:
        Tuple of (directions (N, 2), ranges (N,)); zero-length rays get a
        zero direction
    """
    offsets = np.asarray(points_xy, dtype=np.float64) - np.asarray(origin, dtype=np.float64)
    ranges = np.hypot(offsets[:, 0], offsets[:, 1])
    safe = np.where(ranges > 0, ranges, 1.0)
    directions = np.where((ranges > 0)[:, None], offsets / safe[:, None], 0.0)
    return directions, ranges


def sweep_offset_deg(directions: np.ndarray, sweep_angle_deg: float) -> np.ndarray:
    """Angle swept since the sweep line last crossed each direction.

    The unsigned angle between sweep and ray comes from acos of their dot
    product and is folded into [0, 360) with the sign of the z component of
    cross(sweep, ray): a negative z means the point still lies ahead of the
    sweep, so its offset is 360 minus the unsigned angle.

    Args:
        directions: (N, 2) unit rays; zero rows are treated as offset 0
        sweep_angle_deg: Current sweep bearing

    Returns:
        Offsets in degrees, [0, 360)
    """
    sx, sy = sweep_direction(sweep_angle_deg)
    px = directions[:, 0]
    py = directions[:, 1]

    cosine = np.clip(sx * px + sy * py, -1.0, 1.0)
    offset = np.arccos(cosine) * RAD_TO_DEG
    cross_z = sx * py - sy * px
    offset = np.where(cross_z < -FOLD_TOLERANCE, 360.0 - offset, offset)

    degenerate = (px == 0.0) & (py == 0.0)
    offset = np.where(degenerate, 0.0, offset)
    # Keep the result inside [0, 360)
    return np.where(offset >= 360.0, 0.0, offset)


def angle_coefficient(offset_deg: np.ndarray) -> np.ndarray:
    """Linear afterglow decay: 1 on the sweep line, approaching 0 just ahead of it."""
    return 1.0 - offset_deg / 360.0


def target_height_coefficient(z: np.ndarray, antenna_height_m: float) -> np.ndarray:
    """Elevation relative to the antenna mount, clamped to [0, 1]."""
    return np.clip(np.asarray(z, dtype=np.float64) / antenna_height_m, 0.0, 1.0)


def terrain_height_coefficient(normals: np.ndarray, directions: np.ndarray) -> np.ndarray:
    """Cosine of incidence between the sensor ray and the surface.

    ``-dot(normal, ray)`` with the ray horizontal: positive on slopes facing
    the sensor, negative on slopes facing away.
    """
    normals = np.asarray(normals, dtype=np.float64)
    return -(normals[:, 0] * directions[:, 0] + normals[:, 1] * directions[:, 1])


def evaluate_returns(
    points: np.ndarray,
    snapshot: SensorSnapshot,
    weights: Optional[np.ndarray] = None,
    normals: Optional[np.ndarray] = None
) -> SweepReturns:
    """Evaluate sweep visibility for a batch of points.

    Target-style points use the clamped elevation ratio as their height
    coefficient and are scaled by their visibility weight; terrain-style
    points (``normals`` given) use the incidence cosine and carry no weight.

    Args:
        points: (N, 3) world positions
        snapshot: Frozen sensor state
        weights: Per-point visibility weights in [0, 1] (targets only)
        normals: (N, 3) unit surface normals (terrain only)

    Returns:
        SweepReturns for every point
    """
    points = np.atleast_2d(np.asarray(points, dtype=np.float64))
    directions, ranges = ray_directions(points[:, :2], snapshot.origin)
    in_range = ranges <= snapshot.max_range_m

    if normals is not None:
        height_coef = terrain_height_coefficient(np.atleast_2d(normals), directions)
    else:
        height_coef = target_height_coefficient(points[:, 2], snapshot.antenna_height_m)

    offset = sweep_offset_deg(directions, snapshot.sweep_angle_deg)
    angle_coef = angle_coefficient(offset)

    with np.errstate(invalid='ignore', over='ignore'):
        illumination = height_coef * angle_coef
        if normals is None and weights is not None:
            illumination = illumination * np.clip(np.asarray(weights, dtype=np.float64), 0.0, 1.0)

    illumination = np.clip(np.nan_to_num(illumination, nan=0.0), 0.0, 1.0)
    detected = in_range & (illumination > snapshot.threshold)

    return SweepReturns(
        range_m=ranges,
        in_range=in_range,
        offset_deg=offset,
        height_coef=height_coef,
        angle_coef=angle_coef,
        illumination=illumination,
        detected=detected,
    )


def illumination(
    point: Sequence[float],
    snapshot: SensorSnapshot,
    visibility_weight: float = 1.0,
    normal: Optional[Sequence[float]] = None
) -> float:
    """Illumination of a single point, ignoring the range gate.

    Args:
        point: (x, y, z) world position
        snapshot: Frozen sensor state
        visibility_weight: Target weight (ignored for terrain points)
        normal: Surface normal; selects the terrain form when given

    Returns:
        Illumination in [0, 1]
    """
    returns = evaluate_returns(
        np.asarray(point, dtype=np.float64).reshape(1, 3),
        snapshot,
        weights=np.array([visibility_weight]),
        normals=None if normal is None else np.asarray(normal, dtype=np.float64).reshape(1, 3),
    )
    return float(returns.illumination[0])


def is_detected(illum, gain: float):
    """Gain threshold: returns must exceed 1 - gain; equality is suppressed."""
    return np.asarray(illum) > 1.0 - gain


def reveal_colors(
    illum: np.ndarray,
    detected: np.ndarray,
    reveal_color: Sequence[float]
) -> np.ndarray:
    """Display colour for each return.

    Detected returns get ``reveal_color * illumination`` (alpha included);
    suppressed returns are dark.

    Returns:
        (N, 4) RGBA in [0, 1]
    """
    color = np.asarray(reveal_color, dtype=np.float64)
    shaded = np.asarray(illum, dtype=np.float64)[:, None] * color[None, :]
    return np.where(np.asarray(detected)[:, None], shaded, 0.0)

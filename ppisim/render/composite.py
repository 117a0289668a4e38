"""
Indicator Composite Pass

Full-frame pass over the capture buffer:
- Circular indicator mask (transparent outside the display radius)
- Optional cosmetic sweep line driven by an independent rotation
- Alpha layering of the indicator over the static bezel
"""
import numpy as np
from typing import Optional, Sequence

from ..interfaces import CaptureFrame
from ..world.visibility import ray_directions, sweep_offset_deg


def pixel_polar(size_px: int):
    """Radius (pixels) and screen bearing (degrees) of every pixel centre.

    Bearing 0 points to the top of the image and increases clockwise.

    Returns:
        radius, bearing arrays of shape (size_px, size_px)
    """
    centre = size_px / 2
    coords = np.arange(size_px) + 0.5 - centre
    X, Y = np.meshgrid(coords, -coords)
    radius = np.hypot(X, Y)
    bearing = np.degrees(np.arctan2(X, Y)) % 360.0
    return radius, bearing


def circular_mask(size_px: int, display_radius_px: Optional[float] = None) -> np.ndarray:
    """True where the pixel centre is strictly inside the display radius."""
    if display_radius_px is None:
        display_radius_px = size_px / 2
    radius, _ = pixel_polar(size_px)
    return radius < display_radius_px


def sweep_line_mask(size_px: int, rotation_deg: float, width_deg: float) -> np.ndarray:
    """Weight in [0, 1] of a sweep line at ``rotation_deg`` fading over ``width_deg``.

    Uses the same angular fold as the visibility model, so the line trails
    behind the rotation in the sweep direction.
    """
    if width_deg <= 0:
        return np.zeros((size_px, size_px))

    centre = size_px / 2
    coords = np.arange(size_px) + 0.5 - centre
    X, Y = np.meshgrid(coords, -coords)
    directions, _ = ray_directions(np.column_stack([X.ravel(), Y.ravel()]), (0.0, 0.0))
    offset = sweep_offset_deg(directions, rotation_deg).reshape(size_px, size_px)
    return np.clip(1.0 - offset / width_deg, 0.0, 1.0)


def composite_indicator(
    capture: CaptureFrame,
    display_radius_px: Optional[float] = None,
    rotation_deg: float = 0.0,
    sweep_line_width_deg: float = 0.0,
    sweep_line_color: Sequence[float] = (1.0, 1.0, 0.6, 0.5),
    mask: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Composite the capture buffer into the indicator image.

    Args:
        capture: Pass 1 output
        display_radius_px: Indicator radius; defaults to half the buffer size
        rotation_deg: Cosmetic sweep-line rotation
        sweep_line_width_deg: Sweep line trail width (0 disables the line)
        sweep_line_color: Straight RGBA of the line, blended over the radar video
        mask: Precomputed ``circular_mask`` for this size and radius

    Returns:
        RGBA image (size, size, 4), alpha 0 outside the circle
    """
    size = capture.size
    if mask is None:
        mask = circular_mask(size, display_radius_px)

    out = np.array(capture.rgba, dtype=np.float32, copy=True)

    if sweep_line_width_deg > 0:
        weight = sweep_line_mask(size, rotation_deg, sweep_line_width_deg)
        line = np.asarray(sweep_line_color, dtype=np.float32)
        alpha = (weight * line[3]).astype(np.float32)[..., None]
        line_rgba = np.concatenate([line[:3], [1.0]]).astype(np.float32)
        out = out * (1.0 - alpha) + line_rgba * alpha

    out[~mask] = 0.0
    return out


def premultiply(rgba: np.ndarray) -> np.ndarray:
    """Convert straight-alpha RGBA (as matplotlib renders it) to premultiplied."""
    rgba = np.asarray(rgba, dtype=np.float32)
    return np.concatenate([rgba[..., :3] * rgba[..., 3:4], rgba[..., 3:4]], axis=-1)


def alpha_over(top: np.ndarray, bottom: np.ndarray) -> np.ndarray:
    """Porter-Duff "over" of two premultiplied RGBA images.

    Radar video is premultiplied already: its colour and alpha both scale
    with illumination.
    """
    top = np.asarray(top, dtype=np.float32)
    bottom = np.asarray(bottom, dtype=np.float32)
    if top.shape != bottom.shape:
        raise ValueError(f"Layer shapes differ: {top.shape} vs {bottom.shape}")
    return top + bottom * (1.0 - top[..., 3:4])

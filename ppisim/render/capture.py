"""
Capture Pass

Orthographic top-down render of the world into an off-screen RGBA buffer.
Terrain illumination is evaluated per sample, resampled onto the pixel grid
and gain-thresholded per pixel; targets are drawn as discs over the
terrain. Because the angular term already encodes the sweep decay, the
buffer is sweep-aware.
"""
import logging
from typing import Sequence, Tuple

import numpy as np
from scipy.interpolate import RegularGridInterpolator

from ..interfaces import CaptureFrame, SensorSnapshot
from ..world.model import WorldModel
from ..world.visibility import reveal_colors

logger = logging.getLogger(__name__)

RESAMPLE_METHODS = {"nearest": "nearest", "bilinear": "linear"}


def pixel_centers(size_px: int, map_size_m: float) -> Tuple[np.ndarray, np.ndarray]:
    """World (x, y) of every pixel centre of a top-down view of the map.

    Row 0 is the north edge and column 0 the west edge.

    Returns:
        X, Y arrays of shape (size_px, size_px)
    """
    half = map_size_m / 2
    pixel = map_size_m / size_px
    coords = -half + (np.arange(size_px) + 0.5) * pixel
    X, Y = np.meshgrid(coords, -coords)
    return X, Y


def world_to_pixel(x: float, y: float, size_px: int, map_size_m: float) -> Tuple[float, float]:
    """Fractional (row, col) of a world position in the capture buffer."""
    pixel = map_size_m / size_px
    half = map_size_m / 2
    return (half - y) / pixel - 0.5, (x + half) / pixel - 0.5


class TopDownCapture:
    """Pass 1 renderer bound to one world and buffer size.

    Args:
        world: World to capture
        size_px: Buffer side in pixels
        reveal_color: RGBA of a fully illuminated return
        resample: Terrain rasterisation, "bilinear" or "nearest"
    """

    def __init__(
        self,
        world: WorldModel,
        size_px: int,
        reveal_color: Sequence[float] = (1.0, 1.0, 0.0, 1.0),
        resample: str = "bilinear",
    ):
        if resample not in RESAMPLE_METHODS:
            raise ValueError(f"Unknown resample mode: {resample}")
        if size_px <= 0:
            raise ValueError("size_px must be positive")

        self.world = world
        self.size_px = int(size_px)
        self.reveal_color = np.asarray(reveal_color, dtype=np.float64)
        self.method = RESAMPLE_METHODS[resample]

        # The camera never moves: pixel geometry is computed once
        self._X, self._Y = pixel_centers(self.size_px, world.map_size_m)
        ny, nx = world.terrain.shape
        row, col = world.terrain.fractional_index(self._X, self._Y)
        # Pixels beyond the grid take the nearest edge sample
        self._grid_axes = (np.arange(ny, dtype=np.float64), np.arange(nx, dtype=np.float64))
        self._terrain_points = np.column_stack([
            np.clip(row, 0, ny - 1).ravel(),
            np.clip(col, 0, nx - 1).ravel(),
        ])
        self._pixel_m = world.map_size_m / self.size_px
        logger.debug(
            "Capture buffer %dpx at %.2f units/pixel (%s resample)",
            self.size_px, self._pixel_m, resample
        )

    def render(self, snapshot: SensorSnapshot) -> CaptureFrame:
        """Render the world as seen with ``snapshot``.

        Args:
            snapshot: Frozen sensor state

        Returns:
            CaptureFrame with a fresh buffer
        """
        rgba = self._render_terrain(snapshot)
        targets = self.world.target_returns(snapshot)

        for entity, ret in zip(self.world.targets, targets):
            if ret.detected:
                color = self.reveal_color * ret.illumination
                self._draw_disc(rgba, entity.position[0], entity.position[1], entity.radius, color)

        return CaptureFrame(rgba=rgba.astype(np.float32), snapshot=snapshot, targets=targets)

    def _render_terrain(self, snapshot: SensorSnapshot) -> np.ndarray:
        terrain = self.world.terrain
        returns = self.world.terrain_returns(snapshot)

        # Resample illumination, then gate and threshold per pixel so no
        # blended pixel at or below 1 - gain is ever lit
        illum_grid = returns.illumination.reshape(terrain.shape)
        interp = RegularGridInterpolator(self._grid_axes, illum_grid, method=self.method)
        illum = np.clip(interp(self._terrain_points), 0.0, 1.0)

        ox, oy = snapshot.origin
        in_range = (np.hypot(self._X - ox, self._Y - oy) <= snapshot.max_range_m).ravel()
        detected = in_range & (illum > snapshot.threshold)

        rgba = reveal_colors(illum, detected, self.reveal_color)
        return np.clip(rgba, 0.0, 1.0).reshape(self.size_px, self.size_px, 4)

    def _draw_disc(self, rgba: np.ndarray, x: float, y: float, radius: float, color: np.ndarray) -> None:
        """Overwrite the pixels covered by a disc; always at least the centre pixel."""
        row_f, col_f = world_to_pixel(x, y, self.size_px, self.world.map_size_m)
        reach = int(np.ceil(radius / self._pixel_m)) + 1

        r0 = max(int(np.floor(row_f)) - reach, 0)
        r1 = min(int(np.ceil(row_f)) + reach + 1, self.size_px)
        c0 = max(int(np.floor(col_f)) - reach, 0)
        c1 = min(int(np.ceil(col_f)) + reach + 1, self.size_px)
        if r0 >= r1 or c0 >= c1:
            return

        window_x = self._X[r0:r1, c0:c1]
        window_y = self._Y[r0:r1, c0:c1]
        mask = (window_x - x) ** 2 + (window_y - y) ** 2 <= radius ** 2

        centre_r = int(round(row_f))
        centre_c = int(round(col_f))
        if r0 <= centre_r < r1 and c0 <= centre_c < c1:
            mask[centre_r - r0, centre_c - c0] = True

        rgba[r0:r1, c0:c1][mask] = color

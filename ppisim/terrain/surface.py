"""
Terrain Surface

Places an elevation grid in world coordinates and derives surface normals.
The grid spans a square of side map_size centred on the origin, with row 0
on the north edge (y = +map_size/2) and column 0 on the west edge.
"""
import numpy as np
from dataclasses import dataclass, field
from typing import Tuple

from ..interfaces import ElevationGrid


def compute_terrain_normals(
    heightmap: np.ndarray,
    x_coords: np.ndarray,
    y_coords: np.ndarray
) -> np.ndarray:
    """Compute unit surface normals from a heightmap.

    Args:
        heightmap: 2D elevation array [ny, nx]
        x_coords: X coordinate of each column
        y_coords: Y coordinate of each row (may be descending)

    Returns:
        Normal vectors [ny, nx, 3]
    """
    # Normal = (-dz/dx, -dz/dy, 1) normalized; np.gradient respects signed spacing
    dz_dx = np.gradient(heightmap, x_coords, axis=1)
    dz_dy = np.gradient(heightmap, y_coords, axis=0)

    normals = np.stack([-dz_dx, -dz_dy, np.ones_like(heightmap)], axis=-1)
    norms = np.linalg.norm(normals, axis=-1, keepdims=True)
    return normals / norms


@dataclass
class TerrainSurface:
    """Height-sampled terrain in world coordinates."""
    heightmap: np.ndarray          # [ny, nx] elevation values
    map_size_m: float
    x_coords: np.ndarray = field(init=False)  # [nx] west → east
    y_coords: np.ndarray = field(init=False)  # [ny] north → south
    normals: np.ndarray = field(init=False)   # [ny, nx, 3]

    def __post_init__(self):
        self.heightmap = np.array(self.heightmap, dtype=np.float64)
        if self.heightmap.ndim != 2 or min(self.heightmap.shape) < 2:
            raise ValueError(f"Terrain needs a 2D grid of at least 2x2, got {self.heightmap.shape}")
        if not self.map_size_m > 0:
            raise ValueError("map_size_m must be positive")

        # Elevations are fixed from here on
        self.heightmap.setflags(write=False)

        half = self.map_size_m / 2
        ny, nx = self.heightmap.shape
        self.x_coords = np.linspace(-half, half, nx)
        self.y_coords = np.linspace(half, -half, ny)
        self.normals = compute_terrain_normals(self.heightmap, self.x_coords, self.y_coords)
        self.normals.setflags(write=False)

    @classmethod
    def from_grid(cls, grid: ElevationGrid, map_size_m: float) -> "TerrainSurface":
        return cls(heightmap=grid.as_array(), map_size_m=map_size_m)

    @property
    def shape(self) -> Tuple[int, int]:
        return self.heightmap.shape

    @property
    def spacing(self) -> Tuple[float, float]:
        """Sample spacing (dx, dy) in world units."""
        ny, nx = self.heightmap.shape
        return self.map_size_m / (nx - 1), self.map_size_m / (ny - 1)

    def points(self) -> np.ndarray:
        """All samples as an (ny * nx, 3) array of world positions."""
        X, Y = np.meshgrid(self.x_coords, self.y_coords)
        return np.stack([X.ravel(), Y.ravel(), self.heightmap.ravel()], axis=1)

    def flat_normals(self) -> np.ndarray:
        """Normals as an (ny * nx, 3) array matching ``points()``."""
        return self.normals.reshape(-1, 3)

    def fractional_index(self, x, y) -> Tuple[np.ndarray, np.ndarray]:
        """Map world coordinates to fractional (row, col) grid indices."""
        dx, dy = self.spacing
        half = self.map_size_m / 2
        col = (np.asarray(x, dtype=np.float64) + half) / dx
        row = (half - np.asarray(y, dtype=np.float64)) / dy
        return row, col


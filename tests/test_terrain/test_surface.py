"""Tests for terrain placement and normals."""
import numpy as np
import pytest

from ppisim.interfaces import ElevationGrid
from ppisim.terrain import TerrainSurface, compute_terrain_normals


class TestNormals:

    def test_flat_terrain_points_up(self):
        hm = np.zeros((5, 5))
        coords = np.linspace(-2, 2, 5)
        normals = compute_terrain_normals(hm, coords, coords[::-1])
        assert np.allclose(normals, [0.0, 0.0, 1.0])

    def test_eastward_rise_tilts_west(self, ridge_grid):
        surface = TerrainSurface.from_grid(ridge_grid, map_size_m=1000.0)
        n = surface.normals[10, 10]
        assert n[0] < 0
        assert abs(n[1]) < 1e-12
        assert np.linalg.norm(n) == pytest.approx(1.0)

    def test_northward_rise_tilts_south(self):
        # Row 0 is north: heights decrease with row index
        hm = np.tile(np.arange(5, 0, -1, dtype=float)[:, None], (1, 5))
        surface = TerrainSurface(heightmap=hm, map_size_m=4.0)
        assert surface.normals[2, 2, 1] < 0


class TestPlacement:

    def test_coordinates_centred(self, flat_grid):
        surface = TerrainSurface.from_grid(flat_grid, map_size_m=1000.0)
        assert surface.x_coords[0] == -500.0
        assert surface.x_coords[-1] == 500.0
        assert surface.y_coords[0] == 500.0
        assert surface.y_coords[-1] == -500.0
        assert surface.spacing == (100.0, 100.0)

    def test_points_layout(self):
        grid = ElevationGrid(elevations=np.arange(4.0), width=2, height=2)
        surface = TerrainSurface.from_grid(grid, map_size_m=10.0)
        pts = surface.points()
        assert pts.shape == (4, 3)
        # Row 0 is north-west first
        assert tuple(pts[0]) == (-5.0, 5.0, 0.0)
        assert tuple(pts[1]) == (5.0, 5.0, 1.0)
        assert tuple(pts[2]) == (-5.0, -5.0, 2.0)
        assert surface.flat_normals().shape == (4, 3)

    def test_heightmap_is_readonly_copy(self):
        hm = np.zeros((3, 3))
        surface = TerrainSurface(heightmap=hm, map_size_m=10.0)
        hm[0, 0] = 9.0
        assert surface.heightmap[0, 0] == 0.0
        with pytest.raises(ValueError):
            surface.heightmap[0, 0] = 1.0

    def test_rejects_bad_input(self):
        with pytest.raises(ValueError):
            TerrainSurface(heightmap=np.zeros((1, 5)), map_size_m=10.0)
        with pytest.raises(ValueError):
            TerrainSurface(heightmap=np.zeros((3, 3)), map_size_m=0.0)


    def test_fractional_index(self, flat_grid):
        """North-west corner is (0, 0); centre maps to the middle sample."""
        surface = TerrainSurface.from_grid(flat_grid, map_size_m=1000.0)
        assert surface.fractional_index(-500.0, 500.0) == (0.0, 0.0)
        row, col = surface.fractional_index(np.array([0.0, 25.0]), np.array([0.0, -50.0]))
        assert np.allclose(row, [5.0, 5.5])
        assert np.allclose(col, [5.0, 5.25])

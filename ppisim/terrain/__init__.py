"""Elevation acquisition and terrain surface modules."""
from .heightmap import (
    ElevationSourceError,
    TileRequest,
    decode_heightmap,
    load_image_heightmap,
    fetch_tile_heightmap,
    synthetic_heightmap,
    flat_heightmap,
)
from .surface import (
    TerrainSurface,
    compute_terrain_normals,
)

__all__ = [
    'ElevationSourceError',
    'TileRequest',
    'decode_heightmap',
    'load_image_heightmap',
    'fetch_tile_heightmap',
    'synthetic_heightmap',
    'flat_heightmap',
    'TerrainSurface',
    'compute_terrain_normals',
]

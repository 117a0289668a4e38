"""
Heightmap Acquisition

Decode elevation grids from various sources:
- Image files (local), intensity = elevation
- Static map tiles (remote)
- Synthetic smoothed noise (offline runs)
"""
import io
import logging
import urllib.parse
import urllib.request
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple, Union

import numpy as np
from PIL import Image, UnidentifiedImageError
from scipy.ndimage import gaussian_filter

from ..interfaces import ElevationGrid

logger = logging.getLogger(__name__)


class ElevationSourceError(RuntimeError):
    """Elevation data could not be acquired or decoded."""


@dataclass
class TileRequest:
    """Static terrain map tile request.

    Attributes:
        center: (latitude, longitude) of the tile centre
        zoom: Map zoom level
        size_px: (width, height) of the requested image
        api_key: Map service key
        maptype: Map rendering style
        styles: Style rules; the defaults blacken geometry and hide labels
            so that only relief shading remains
        base_url: Static map endpoint
    """
    center: Tuple[float, float] = (46.4775, 30.7326)
    zoom: int = 10
    size_px: Tuple[int, int] = (600, 600)
    api_key: str = ""
    maptype: str = "terrain"
    styles: List[str] = field(default_factory=lambda: [
        "element:geometry|color:0x000000",
        "element:labels|visibility:off",
        "element:labels.icon|visibility:off",
    ])
    base_url: str = "https://maps.googleapis.com/maps/api/staticmap"

    def url(self) -> str:
        """Build the request URL."""
        params = [
            ("size", f"{self.size_px[0]}x{self.size_px[1]}"),
            ("center", f"{self.center[0]},{self.center[1]}"),
            ("key", self.api_key),
            ("zoom", str(self.zoom)),
            ("maptype", self.maptype),
        ]
        params.extend(("style", s) for s in self.styles)
        return f"{self.base_url}?{urllib.parse.urlencode(params)}"


def decode_heightmap(image: Image.Image, max_height: float) -> ElevationGrid:
    """Decode an image into elevations: avg(R, G, B) / 255 * max_height.

    Args:
        image: Pillow image in any mode
        max_height: Elevation of a white pixel

    Returns:
        ElevationGrid with row 0 at the top of the image
    """
    rgb = np.asarray(image.convert("RGB"), dtype=np.float64)
    elevations = rgb.sum(axis=-1) / (3 * 255.0) * max_height
    height, width = elevations.shape
    return ElevationGrid(elevations=elevations.ravel(), width=width, height=height)


def load_image_heightmap(path: Union[str, Path], max_height: float) -> ElevationGrid:
    """Load a local image file as a heightmap.

    Args:
        path: Image file (PNG, JPG, ...)
        max_height: Elevation of a white pixel

    Returns:
        Decoded ElevationGrid

    Raises:
        ElevationSourceError: File is missing or not a decodable image
    """
    try:
        with Image.open(path) as img:
            grid = decode_heightmap(img, max_height)
    except (OSError, UnidentifiedImageError) as e:
        raise ElevationSourceError(f"Cannot decode heightmap image {path}: {e}") from e

    logger.info("Loaded heightmap %s (%dx%d, max %.1f)", path, grid.width, grid.height, max_height)
    return grid


def fetch_tile_heightmap(
    request: TileRequest,
    max_height: float,
    timeout: float = 30.0
) -> ElevationGrid:
    """Download a static map tile and decode it as a heightmap.

    Args:
        request: Tile request parameters
        max_height: Elevation of a white pixel
        timeout: Network timeout in seconds

    Returns:
        Decoded ElevationGrid

    Raises:
        ElevationSourceError: Network failure or undecodable response
    """
    url = request.url()
    try:
        with urllib.request.urlopen(url, timeout=timeout) as response:
            payload = response.read()
    except OSError as e:  # URLError and socket timeouts
        raise ElevationSourceError(f"Tile request failed: {e}") from e

    try:
        with Image.open(io.BytesIO(payload)) as img:
            grid = decode_heightmap(img, max_height)
    except (OSError, UnidentifiedImageError) as e:
        raise ElevationSourceError(f"Tile response is not a decodable image: {e}") from e

    logger.info(
        "Fetched heightmap tile at %s zoom %d (%dx%d)",
        request.center, request.zoom, grid.width, grid.height
    )
    return grid


def synthetic_heightmap(
    width: int = 128,
    height: int = 128,
    max_height: float = 28.0,
    seed: int = 42,
    smoothing: float = 6.0
) -> ElevationGrid:
    """Generate smooth random relief.

    White noise is low-pass filtered and rescaled to [0, max_height].

    Args:
        width: Samples per row
        height: Number of rows
        max_height: Highest elevation
        seed: Random seed
        smoothing: Gaussian filter sigma in samples

    Returns:
        ElevationGrid
    """
    rng = np.random.default_rng(seed)
    noise = rng.standard_normal((height, width))
    relief = gaussian_filter(noise, sigma=smoothing, mode='wrap')

    span = relief.max() - relief.min()
    if span > 0:
        relief = (relief - relief.min()) / span
    else:
        relief = np.zeros_like(relief)

    return ElevationGrid(elevations=relief * max_height, width=width, height=height)


def flat_heightmap(width: int = 2, height: int = 2, elevation: float = 0.0) -> ElevationGrid:
    """Constant-elevation grid."""
    return ElevationGrid(
        elevations=np.full(width * height, elevation, dtype=np.float64),
        width=width,
        height=height
    )

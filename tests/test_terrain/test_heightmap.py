"""Tests for heightmap sources."""
import io
import urllib.error
import urllib.parse

import numpy as np
import pytest
from PIL import Image

from ppisim.terrain import heightmap
from ppisim.terrain.heightmap import (
    ElevationSourceError,
    TileRequest,
    decode_heightmap,
    fetch_tile_heightmap,
    flat_heightmap,
    load_image_heightmap,
    synthetic_heightmap,
)


def _png_bytes(pixels: np.ndarray) -> bytes:
    buf = io.BytesIO()
    Image.fromarray(pixels.astype(np.uint8)).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def gradient_pixels():
    """3 rows x 4 columns: black, grey, white, mixed colour."""
    pixels = np.zeros((3, 4, 3), dtype=np.uint8)
    pixels[:, 1] = 51
    pixels[:, 2] = 255
    pixels[:, 3] = (255, 0, 0)
    return pixels


class TestDecode:

    def test_average_rgb_scaled(self, gradient_pixels):
        grid = decode_heightmap(Image.fromarray(gradient_pixels), max_height=30.0)
        arr = grid.as_array()
        assert (grid.width, grid.height) == (4, 3)
        assert arr[0, 0] == 0.0
        assert arr[0, 1] == pytest.approx(6.0)
        assert arr[0, 2] == pytest.approx(30.0)
        assert arr[0, 3] == pytest.approx(10.0)

    def test_greyscale_and_alpha_modes(self):
        grey = Image.new("L", (2, 2), color=255)
        assert np.allclose(decode_heightmap(grey, 10.0).elevations, 10.0)
        rgba = Image.new("RGBA", (2, 2), color=(255, 255, 255, 0))
        assert np.allclose(decode_heightmap(rgba, 10.0).elevations, 10.0)


class TestLoadImage:

    def test_load_png(self, tmp_path, gradient_pixels):
        path = tmp_path / "relief.png"
        path.write_bytes(_png_bytes(gradient_pixels))
        grid = load_image_heightmap(path, max_height=28.0)
        assert grid.as_array()[2, 2] == pytest.approx(28.0)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ElevationSourceError):
            load_image_heightmap(tmp_path / "nope.png", 28.0)

    def test_not_an_image(self, tmp_path):
        path = tmp_path / "junk.png"
        path.write_bytes(b"not an image")
        with pytest.raises(ElevationSourceError):
            load_image_heightmap(path, 28.0)


class _FakeResponse:

    def __init__(self, payload):
        self._payload = payload

    def read(self):
        return self._payload

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class TestTileRequest:

    def test_url_contains_parameters(self):
        request = TileRequest(center=(32.78, -79.93), zoom=12, size_px=(300, 200), api_key="k")
        query = urllib.parse.parse_qs(urllib.parse.urlsplit(request.url()).query)
        assert query["size"] == ["300x200"]
        assert query["center"] == ["32.78,-79.93"]
        assert query["zoom"] == ["12"]
        assert query["maptype"] == ["terrain"]
        assert len(query["style"]) == 3

    def test_fetch_decodes_response(self, monkeypatch, gradient_pixels):
        requested = []

        def fake_urlopen(url, timeout):
            requested.append(url)
            return _FakeResponse(_png_bytes(gradient_pixels))

        monkeypatch.setattr(heightmap.urllib.request, "urlopen", fake_urlopen)
        grid = fetch_tile_heightmap(TileRequest(api_key="k"), max_height=30.0)
        assert requested and requested[0].startswith(TileRequest.base_url)
        assert grid.as_array()[0, 2] == pytest.approx(30.0)

    def test_fetch_network_failure(self, monkeypatch):
        def fake_urlopen(url, timeout):
            raise urllib.error.URLError("offline")

        monkeypatch.setattr(heightmap.urllib.request, "urlopen", fake_urlopen)
        with pytest.raises(ElevationSourceError):
            fetch_tile_heightmap(TileRequest(), max_height=30.0)

    def test_fetch_bad_payload(self, monkeypatch):
        monkeypatch.setattr(
            heightmap.urllib.request, "urlopen",
            lambda url, timeout: _FakeResponse(b"<html>quota exceeded</html>")
        )
        with pytest.raises(ElevationSourceError):
            fetch_tile_heightmap(TileRequest(), max_height=30.0)


class TestGenerated:

    def test_synthetic_range_and_seed(self):
        a = synthetic_heightmap(32, 24, max_height=28.0, seed=7)
        b = synthetic_heightmap(32, 24, max_height=28.0, seed=7)
        assert (a.width, a.height) == (32, 24)
        assert a.elevations.min() == pytest.approx(0.0)
        assert a.elevations.max() == pytest.approx(28.0)
        assert np.array_equal(a.elevations, b.elevations)

    def test_flat(self):
        grid = flat_heightmap(3, 4, elevation=5.0)
        assert grid.as_array().shape == (4, 3)
        assert np.all(grid.elevations == 5.0)

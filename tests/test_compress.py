import numpy as np
import pytest
from PIL import Image

from sprite_atlas.operators.compress import compress_image, compress_png, get_image_size, quality_to_colors
from sprite_atlas.utils.images import decode_base64, encode_data_url, to_rgba

from .conftest import png_bytes, solid


@pytest.fixture
def noisy():
    rng = np.random.default_rng(0)
    return Image.fromarray(rng.integers(0, 256, (64, 64, 4), dtype=np.uint8), "RGBA")


@pytest.mark.parametrize("quality, colors", [(0, 2), (1, 3), (50, 128), (80, 205), (100, 256), (150, 256)])
def test_quality_to_colors(quality, colors):
    assert quality_to_colors(quality) == colors


def test_compress_png_limits_the_palette(noisy):
    compressed = compress_png(noisy, quality=10)

    assert compressed.mode == "P"
    assert len(compressed.getcolors(256)) <= quality_to_colors(10)


def test_compress_image_downscales(noisy):
    result = compress_image(png_bytes(noisy), quality=60, scale=50)

    assert (result["width"], result["height"]) == (32, 32)
    assert result["base64"].startswith("data:image/png;base64,")
    assert result["size_bytes"] == len(decode_base64(result["base64"]))
    assert to_rgba(result["base64"]).size == (32, 32)


def test_compress_image_never_grows_at_full_scale(noisy):
    original = png_bytes(noisy)
    result = compress_image(original, quality=100)

    assert result["size_bytes"] <= len(original)
    assert (result["width"], result["height"]) == (64, 64)


def test_compress_image_keeps_tiny_originals():
    original = png_bytes(solid(1, 1))
    result = compress_image(original)

    assert result["size_bytes"] <= len(original)


@pytest.mark.parametrize("scale", [0, 101])
def test_compress_image_rejects_bad_scale(scale):
    with pytest.raises(ValueError):
        compress_image(png_bytes(solid(4, 4)), scale=scale)


def test_get_image_size():
    raw = png_bytes(solid(8, 8))
    url = encode_data_url(solid(8, 8))

    assert get_image_size(raw) == len(raw)
    assert get_image_size(url) == len(decode_base64(url))

import io

import pytest
from PIL import Image

from sprite_atlas.errors import DecodeError
from sprite_atlas.operators.files import load_image, save_file, save_image
from sprite_atlas.utils.images import decode_base64, encode_data_url, to_rgba

from .conftest import solid


def test_load_image(tmp_path):
    path = tmp_path / "hero.png"
    solid(12, 7, (1, 2, 3, 4)).save(path)

    loaded = load_image(path)

    assert (loaded["width"], loaded["height"]) == (12, 7)
    assert to_rgba(loaded["base64"]).getpixel((0, 0)) == (1, 2, 3, 4)


def test_load_image_converts_other_formats(tmp_path):
    path = tmp_path / "photo.bmp"
    Image.new("RGB", (3, 3), (10, 20, 30)).save(path)

    assert to_rgba(load_image(path)["base64"]).getpixel((1, 1)) == (10, 20, 30, 255)


def test_load_missing_image(tmp_path):
    with pytest.raises(DecodeError):
        load_image(tmp_path / "nope.png")


def test_save_image_writes_decoded_bytes(tmp_path):
    url = encode_data_url(solid(5, 5))
    path = save_image(url, tmp_path / "nested" / "dir" / "out.png")

    assert path.read_bytes() == decode_base64(url)


def test_save_image_from_pil(tmp_path):
    path = save_image(solid(3, 2), tmp_path / "out.png")

    with Image.open(path) as img:
        assert img.format == "PNG"
        assert img.size == (3, 2)


def test_save_file_utf8(tmp_path):
    path = save_file('{"name": "héros"}', tmp_path / "a" / "atlas.json")

    assert path.read_text(encoding="utf-8") == '{"name": "héros"}'


@pytest.mark.parametrize("mode", ["L", "P"])
def test_load_image_keeps_the_file_mode(tmp_path, mode):
    path = tmp_path / "sprite.png"
    solid(16, 16, (40, 40, 40, 255)).convert("RGB").convert(mode).save(path)

    loaded = load_image(path)
    data = decode_base64(loaded["base64"])

    with Image.open(io.BytesIO(data)) as img:
        assert img.mode == mode

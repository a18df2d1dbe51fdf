import io

import pytest
from PIL import Image


def solid(width, height, color=(200, 40, 40, 255)):
    return Image.new("RGBA", (width, height), color)


def png_bytes(img):
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def boxes_overlap(a, b):
    ax, ay, aw, ah = a
    bx, by, bw, bh = b
    return ax < bx + bw and bx < ax + aw and ay < by + bh and by < ay + ah


@pytest.fixture
def make_image():
    return solid


@pytest.fixture
def sprite_dir(tmp_path):
    folder = tmp_path / "sprites"
    folder.mkdir()
    solid(40, 30, (255, 0, 0, 255)).save(folder / "walk_1.png")
    solid(20, 20, (0, 255, 0, 255)).save(folder / "walk_2.png")
    solid(10, 50, (0, 0, 255, 128)).save(folder / "walk_10.png")
    return folder

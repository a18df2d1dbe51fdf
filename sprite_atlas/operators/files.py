"""File operators: loading images and saving images or text."""

import os
from pathlib import Path
from typing import Dict, Union

from ..type_annotations import ImageSource
from ..utils.images import decode_base64, encode_png, open_image, to_data_url, to_png_mode

PathLike = Union[str, os.PathLike]


def load_image(path: PathLike) -> Dict[str, Union[int, str]]:
    """Load an image file and re-encode it as a PNG data URL.

    The image keeps its own mode (grayscale, palette...) where PNG can
    store it.

    Returns:
        {'width', 'height', 'base64'}.
    """
    img = to_png_mode(open_image(path, mode=None))
    return {
        "width": img.width,
        "height": img.height,
        "base64": to_data_url(encode_png(img)),
    }


def save_image(image: ImageSource, path: PathLike) -> Path:
    """Write an image to ``path``.

    Base64 text and data URLs are written as their decoded bytes, so the
    encoding chosen upstream is kept; PIL images are saved as PNG.
    """
    if isinstance(image, str):
        data = decode_base64(image)
    elif isinstance(image, (bytes, bytearray)):
        data = bytes(image)
    else:
        data = encode_png(image)
    return _write(Path(path), data)


def save_file(content: str, path: PathLike) -> Path:
    """Write text to ``path`` as UTF-8."""
    return _write(Path(path), content.encode("utf-8"))


def _write(path: Path, data: bytes) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path

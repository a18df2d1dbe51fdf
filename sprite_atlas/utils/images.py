"""Image handling utilities for sprite-atlas.

This module is the codec adapter of the package: it turns every accepted
image representation (PIL images, raw encoded bytes, base64 strings and
``data:image/png;base64,`` URLs) into RGBA Pillow images, and encodes
images back to PNG bytes or data URLs.
"""

import base64
import binascii
import io
import logging
import os
from typing import Optional, Union

from PIL import Image, UnidentifiedImageError

from .. import globs
from ..errors import DecodeError, EncodeError
from ..type_annotations import ImageSource, Size

logger = logging.getLogger(__name__)

PNG_MODES = ("1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA")


def strip_data_url(data: str) -> str:
    """Remove a ``data:<mime>;base64,`` prefix from a base64 payload.

    Args:
        data: Base64 text, with or without a data URL prefix.

    Returns:
        The bare base64 payload.
    """
    if data.startswith(globs.DATA_URL_PREFIX):
        return data[len(globs.DATA_URL_PREFIX):]
    if data.startswith("data:") and ";base64," in data:
        return data.split(";base64,", 1)[1]
    return data


def decode_base64(data: str) -> bytes:
    """Decode a base64 string or data URL into raw bytes.

    Raises:
        DecodeError: If the payload is not valid base64.
    """
    try:
        return base64.b64decode(strip_data_url(data.strip()), validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError("Invalid base64 image data: {}".format(e)) from e


def to_rgba(source: ImageSource) -> Image.Image:
    """Decode any accepted image representation into an RGBA image.

    PIL images are converted (a copy is returned, the caller's image is never
    modified); bytes are decoded with Pillow; strings are treated as base64
    or data URLs.

    Args:
        source: PIL image, encoded bytes, base64 text or data URL.

    Returns:
        A fully loaded RGBA image.

    Raises:
        DecodeError: If the data cannot be decoded as an image.
    """
    if isinstance(source, Image.Image):
        return source.convert("RGBA")

    if isinstance(source, str):
        raw = decode_base64(source)
    elif isinstance(source, (bytes, bytearray)):
        raw = bytes(source)
    else:
        raise DecodeError("Unsupported image source type: {}".format(type(source).__name__))

    try:
        with Image.open(io.BytesIO(raw)) as img:
            img.load()
            return img.convert("RGBA")
    except (UnidentifiedImageError, OSError, ValueError, SyntaxError) as e:
        raise DecodeError("Cannot decode image: {}".format(e)) from e


def open_image(path: Union[str, os.PathLike], mode: Optional[str] = "RGBA") -> Image.Image:
    """Load an image file from disk.

    Args:
        path: Image file.
        mode: Mode to convert to, or None to keep the file's own mode.

    Raises:
        DecodeError: If the file is missing or is not a readable image.
    """
    try:
        with Image.open(path) as img:
            img.load()
            return img.convert(mode) if mode else img.copy()
    except FileNotFoundError as e:
        raise DecodeError("Image file not found: {}".format(path)) from e
    except (UnidentifiedImageError, OSError, ValueError, SyntaxError) as e:
        raise DecodeError("Cannot decode image {}: {}".format(path, e)) from e


def encode_png(img: Image.Image, optimize: bool = False) -> bytes:
    """Encode an image as PNG bytes.

    Raises:
        EncodeError: If Pillow fails to serialize the image.
    """
    buf = io.BytesIO()
    try:
        img.save(buf, format="PNG", optimize=optimize)
    except (OSError, ValueError) as e:
        raise EncodeError("Cannot encode PNG: {}".format(e)) from e
    return buf.getvalue()


def to_png_mode(img: Image.Image) -> Image.Image:
    """Convert only images PNG cannot store as they are (CMYK, YCbCr...)."""
    if img.mode in PNG_MODES:
        return img
    return img.convert("RGBA")


def to_data_url(png_bytes: bytes) -> str:
    return globs.DATA_URL_PREFIX + base64.b64encode(png_bytes).decode("ascii")


def encode_data_url(img: Image.Image) -> str:
    """Encode an image as a PNG ``data:`` URL."""
    return to_data_url(encode_png(img))


def scaled_size(size: Size, scale: float) -> Size:
    """Scale a size, rounding to the nearest pixel and keeping each axis >= 1.

    Args:
        size: Original (width, height).
        scale: Uniform scale factor.

    Returns:
        The scaled (width, height).
    """
    width, height = size
    return max(1, round_half_away(width * scale)), max(1, round_half_away(height * scale))


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    rounded = int(abs(value) + 0.5)
    return rounded if value >= 0 else -rounded


def resize(img: Image.Image, size: Size) -> Image.Image:
    """Resize with the high quality Lanczos filter, skipping no-op resizes."""
    if img.size == tuple(size):
        return img
    logger.debug("Resizing %dx%d -> %dx%d", img.width, img.height, size[0], size[1])
    return img.resize(size, globs.resampling)

"""Sprite sheet preprocessing operators.

This module provides the two cleanup steps applied to raw sprite sheets
before packing: making chroma-keyed background colors transparent, and
cutting a sheet into cells along grid lines.

Typical usage example:
    cleaned = remove_colors(sheet_png, [{'r': 255, 'g': 0, 'b': 255, 'tolerance': 10}])
    cells = split_image(cleaned, horizontal_lines=[64], vertical_lines=[64, 128])
"""

import logging
from typing import Iterable, List, Mapping, Sequence, Union

import numpy as np
from PIL import Image

from .. import globs
from ..type_annotations import ColorToRemove, ImageSource
from ..utils.images import encode_data_url, to_rgba
from ..utils.pixel_buffer import get_pixel_buffer, pixel_buffer_to_image

logger = logging.getLogger(__name__)

SplitLine = Union[int, Mapping[str, int]]


def remove_colors_image(img: Image.Image, colors: Sequence[ColorToRemove]) -> Image.Image:
    """Make every pixel close to one of the colors fully transparent.

    A pixel matches a color when the Euclidean distance between their RGB
    values is at most ``tolerance * 4.42``, tolerance being 0-100.

    Args:
        img: Image to clean, left unmodified.
        colors: Colors as {'r', 'g', 'b', 'tolerance'} mappings.

    Returns:
        A new RGBA image.
    """
    buffer = get_pixel_buffer(img)
    rgb = buffer[..., :3].astype(np.int32)
    matched = np.zeros(buffer.shape[:2], dtype=bool)

    for color in colors:
        target = np.array(_color_channels(color), dtype=np.int32)
        max_distance = float(color.get("tolerance", 0)) * globs.TOLERANCE_SCALE
        distance = np.sqrt(((rgb - target) ** 2).sum(axis=-1))
        matched |= distance <= max_distance

    logger.debug("Clearing %d of %d pixels", int(matched.sum()), matched.size)
    buffer[matched, 3] = 0
    return pixel_buffer_to_image(buffer)


def remove_colors(image: ImageSource, colors: Sequence[ColorToRemove]) -> str:
    """Remove chroma-keyed colors, returning a PNG data URL."""
    return encode_data_url(remove_colors_image(to_rgba(image), colors))


def _color_channels(color: ColorToRemove) -> List[int]:
    try:
        channels = [int(color["r"]), int(color["g"]), int(color["b"])]
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError("Invalid color {!r}: {}".format(color, e)) from e
    if any(not 0 <= c <= 255 for c in channels):
        raise ValueError("Color channels must be 0-255: {!r}".format(color))
    return channels


def get_split_points(lines: Iterable[SplitLine], length: int) -> List[int]:
    """Build the cut points along one axis, edges included.

    Lines may be plain ints or {'position': int} mappings. They are sorted
    and de-duplicated; lines on or outside the edges are ignored.
    """
    positions = set()
    for line in lines:
        try:
            position = int(line["position"]) if isinstance(line, Mapping) else int(line)
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError("Invalid split line {!r}: {}".format(line, e)) from e
        if 0 < position < length:
            positions.add(position)
    return [0] + sorted(positions) + [length]


def split_image_cells(img: Image.Image, horizontal_lines: Iterable[SplitLine] = (),
                      vertical_lines: Iterable[SplitLine] = ()) -> List[List[Image.Image]]:
    """Cut an image along horizontal (y) and vertical (x) lines.

    Returns:
        Rows of cells, top to bottom, each row left to right.
    """
    y_points = get_split_points(horizontal_lines, img.height)
    x_points = get_split_points(vertical_lines, img.width)

    return [
        [img.crop((left, upper, right, lower)) for left, right in zip(x_points, x_points[1:])]
        for upper, lower in zip(y_points, y_points[1:])
    ]


def split_image(image: ImageSource, horizontal_lines: Iterable[SplitLine] = (),
                vertical_lines: Iterable[SplitLine] = ()) -> List[str]:
    """Cut an image into cells, returned row by row as PNG data URLs."""
    rows = split_image_cells(to_rgba(image), horizontal_lines, vertical_lines)
    return [encode_data_url(cell) for row in rows for cell in row]

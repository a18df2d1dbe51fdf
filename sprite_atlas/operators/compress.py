"""Lossy PNG compression through palette quantization."""

import logging
from typing import Dict, Union

from PIL import Image

from .. import globs
from ..type_annotations import ImageSource
from ..utils.images import decode_base64, encode_png, resize, scaled_size, to_data_url, to_rgba

logger = logging.getLogger(__name__)


def quality_to_colors(quality: int) -> int:
    """Map a 0-100 quality to a palette size between 2 and 256 colors."""
    quality = max(0, min(100, int(quality)))
    return max(2, min(256, round(256 * quality / 100)))


def compress_png(img: Image.Image, quality: int = globs.DEFAULT_COMPRESS_QUALITY,
                 scale: int = globs.DEFAULT_COMPRESS_SCALE) -> Image.Image:
    """Downscale to ``scale`` percent and quantize to a quality-sized palette."""
    if scale != 100:
        img = resize(img, scaled_size(img.size, scale / 100))
    colors = quality_to_colors(quality)
    logger.debug("Quantizing %dx%d image to %d colors", img.width, img.height, colors)
    return img.quantize(colors=colors, method=Image.Quantize.FASTOCTREE, dither=Image.Dither.FLOYDSTEINBERG)


def compress_image(image: ImageSource, quality: int = globs.DEFAULT_COMPRESS_QUALITY,
                   scale: int = globs.DEFAULT_COMPRESS_SCALE) -> Dict[str, Union[str, int]]:
    """Re-encode an image as a palette PNG.

    Like ``pngquant --skip-if-larger``, the input is returned unchanged when
    it is not resized and quantizing would not make it smaller.

    Args:
        image: Image to compress.
        quality: 0-100, higher keeps more colors.
        scale: Output size in percent of the input size, 1-100.

    Returns:
        {'base64', 'width', 'height', 'size_bytes'} of the result.
    """
    if not 1 <= int(scale) <= 100:
        raise ValueError("scale must be between 1 and 100, got {}".format(scale))

    original_bytes = _encoded_bytes(image)
    img = to_rgba(image)
    compressed = compress_png(img, quality, int(scale))
    data = encode_png(compressed, optimize=True)

    if int(scale) == 100 and len(data) >= len(original_bytes):
        logger.info("Compressed image is not smaller (%d >= %d bytes), keeping the original",
                    len(data), len(original_bytes))
        data = original_bytes

    return {
        "base64": to_data_url(data),
        "width": compressed.width,
        "height": compressed.height,
        "size_bytes": len(data),
    }


def get_image_size(image: ImageSource) -> int:
    """Return the encoded size of an image in bytes."""
    return len(_encoded_bytes(image))


def _encoded_bytes(image: ImageSource) -> bytes:
    if isinstance(image, str):
        return decode_base64(image)
    if isinstance(image, (bytes, bytearray)):
        return bytes(image)
    return encode_png(to_rgba(image))

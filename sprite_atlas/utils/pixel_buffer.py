import numpy as np
from PIL import Image

from ..type_annotations import Size

# A 'pixel buffer' is a uint8 numpy array, viewed in the 3D shape
# (height, width, 4), used to store RGBA image pixels.

pixel_dtype = np.uint8
channels = 4


def new_pixel_buffer(size: Size) -> np.ndarray:
    """Create a new fully transparent RGBA pixel buffer.

    :return: a new pixel buffer ndarray of shape (height, width, 4)
    """
    width, height = size
    return np.zeros((height, width, channels), dtype=pixel_dtype)


def get_pixel_buffer(image: Image.Image) -> np.ndarray:
    """Create a new pixel buffer filled with the pixels of the specified image.

    The image is converted to RGBA first if needed.

    :return: a new pixel buffer containing a copy of the image's pixels"""
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    return np.array(image, dtype=pixel_dtype)


def pixel_buffer_to_image(buffer: np.ndarray) -> Image.Image:
    return Image.fromarray(buffer, "RGBA")


def pixel_buffer_paste(target_buffer: np.ndarray, source_buffer: np.ndarray, corner) -> None:
    """Copy pixels from a source pixel buffer into the target pixel buffer.

    The corner is the (left, upper) pixel of the target where the top left
    pixel of the source goes, using Pillow's coordinate system. Pixels are
    copied verbatim, alpha included, with no blending.

    Unlike Pillow's paste, a source that does not fit entirely inside the
    target is not clipped: an IndexError is raised and the target is left
    untouched.
    """
    if len(source_buffer.shape) != 3 or source_buffer.shape[2] != target_buffer.shape[2]:
        raise TypeError("source buffer could not be parsed for pasting")

    left, upper = corner
    source_height, source_width = source_buffer.shape[:2]
    right = left + source_width
    lower = upper + source_height
    buffer_height, buffer_width = target_buffer.shape[:2]

    if left < 0 or upper < 0 or right > buffer_width or lower > buffer_height:
        raise IndexError(
            "box {} does not fit into a {}x{} buffer".format((left, upper, right, lower), buffer_width, buffer_height)
        )

    target_buffer[upper:lower, left:right] = source_buffer

"""Global constants and configuration for sprite-atlas.

This module contains the fixed limits of the atlas packing engine, the
defaults used by the preprocessing operators, and the process-wide Pillow
settings. It provides consistent access to these values across the
package and establishes library-wide image handling behaviour.
"""

from PIL import Image

# Very large sprite sheets are legitimate input, the decompression bomb
# check would reject them.
Image.MAX_IMAGE_PIXELS = None

resampling = Image.Resampling.LANCZOS

DATA_URL_PREFIX = "data:image/png;base64,"

ATLAS_IMAGE_NAME = "atlas.png"

START_BIN_SIZE = 256
MAX_BIN_SIZE = 4096
FALLBACK_MAX_BIN_SIZE = 2048

SCALE_FACTORS = (1.0, 0.9, 0.8, 0.7, 0.6, 0.5, 0.4, 0.3, 0.25, 0.2)

FRAME_PIVOT = (0.5, 0.5)

# Tolerance is 0-100, the largest RGB distance is sqrt(3 * 255^2) ~= 442
TOLERANCE_SCALE = 4.42

DEFAULT_COMPRESS_QUALITY = 80
DEFAULT_COMPRESS_SCALE = 100


class PackerTypes:
    """Names of the available rectangle packing strategies.

    These constants select an implementation from the packer registry in
    ``sprite_atlas.utils.packers``. They are the values accepted by
    ``AtlasSettings.packer_type`` and by the ``--packer`` CLI option.
    """

    SMALLEST_SECTION = "SMALLEST_SECTION"
    MAX_RECTS = "MAX_RECTS"
    BINARY_TREE = "BINARY_TREE"


DEFAULT_PACKER = PackerTypes.SMALLEST_SECTION

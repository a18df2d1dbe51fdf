"""Atlas packing engine for sprite-atlas.

This module provides the entry point of the atlas packing engine. It
orchestrates the whole build, from validating the sprites to encoding the
final atlas, and delegates each step to the functions in ``atlas_ops``.

Usage example:
    output = pack_atlas([SpriteInput('hero_idle_0', png_bytes, 0, -12)], padding=2)
    output.save('build/atlas')
"""

import logging
from typing import Optional, Sequence

from ...settings import AtlasSettings
from ...utils.images import encode_png
from .atlas_ops import (
    composite,
    decode_sprites,
    dump_manifest,
    find_packing,
    get_atlas_size,
    get_frames,
    get_manifest,
    validate_sprites,
)
from .atlas_types import AtlasOutput, PackingRequest, SpriteInput

logger = logging.getLogger(__name__)


def build_atlas(request: PackingRequest, settings: Optional[AtlasSettings] = None) -> AtlasOutput:
    """Pack the requested sprites into one atlas image plus manifest.

    The build runs these steps:
    1. Rejecting empty input and duplicate names.
    2. Decoding every sprite to RGBA.
    3. Searching bin sizes, downscaling the sprites if nothing fits.
    4. Compositing the canvas at its tight bounding box.
    5. Building the frame manifest.
    6. Encoding the canvas as PNG.

    Args:
        request: Sprites and padding.
        settings: Bin limits, scale ladder and packer selection. Defaults
            to ``AtlasSettings()``.

    Returns:
        The encoded atlas and its manifest.

    Raises:
        EmptyInput: If no sprites were supplied.
        DuplicateSpriteName: If two sprites share a name.
        DecodeError: If a sprite image cannot be decoded.
        PackingInfeasible: If the sprites fit at no scale factor.
        CompositionError: If the packer produced an inconsistent placement.
        EncodeError: If the canvas cannot be encoded.
    """
    settings = settings or AtlasSettings()

    validate_sprites(request.sprites)
    decoded = decode_sprites(request.sprites)

    result = find_packing(decoded, request.padding, settings)
    atlas_size = get_atlas_size(result.placement)
    canvas = composite(result, request.padding, atlas_size)

    frames = get_frames(decoded, result, request.padding)
    manifest = get_manifest(frames, settings.image_name, atlas_size, result.scale)
    image = encode_png(canvas)

    logger.info(
        "Packed %d sprites into a %dx%d atlas (bin %d, scale %s)",
        len(decoded), atlas_size[0], atlas_size[1], result.bin_size, result.scale,
    )
    return AtlasOutput(
        image=image,
        json=dump_manifest(manifest),
        size=atlas_size,
        scale=result.scale,
        frame_names=tuple(frames),
    )


def pack_atlas(sprites: Sequence[SpriteInput], padding: int = 0,
               settings: Optional[AtlasSettings] = None) -> AtlasOutput:
    """Shortcut for ``build_atlas(PackingRequest(sprites, padding), settings)``."""
    return build_atlas(PackingRequest(tuple(sprites), padding), settings)

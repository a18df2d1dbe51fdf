"""Core operations of the atlas packing engine.

This module implements the steps of an atlas build: validating and decoding
the sprites, searching for the smallest square bin that holds every padded
sprite, falling back to uniformly downscaled sprites when no bin is large
enough, compositing the canvas and building the frame manifest.

Every function works on values local to one call; nothing is cached
between builds.

Typical usage example:
    decoded = decode_sprites(request.sprites)
    result = find_packing(decoded, request.padding, AtlasSettings())
    size = get_atlas_size(result.placement)
    canvas = composite(result, request.padding, size)
    manifest = get_manifest(get_frames(decoded, result, request.padding), 'atlas.png', size, result.scale)
"""

import json
import logging
from collections import OrderedDict
from typing import Iterator, List, Optional, Sequence, Tuple

from PIL import Image

from ... import globs
from ...errors import CompositionError, DuplicateSpriteName, EmptyInput, PackingInfeasible
from ...settings import AtlasSettings
from ...type_annotations import (
    DecodedSprite,
    FrameDescriptor,
    Manifest,
    Placement,
    RectsToPlace,
    Size,
)
from ...utils import packers
from ...utils.images import resize, round_half_away, scaled_size, to_rgba
from ...utils.pixel_buffer import (
    get_pixel_buffer,
    new_pixel_buffer,
    pixel_buffer_paste,
    pixel_buffer_to_image,
)
from .atlas_types import PackResult, SpriteInput

logger = logging.getLogger(__name__)


def validate_sprites(sprites: Sequence[SpriteInput]) -> None:
    """Reject inputs the engine cannot turn into a manifest.

    Raises:
        EmptyInput: If no sprites were supplied.
        DuplicateSpriteName: If two sprites share a name.
    """
    if not sprites:
        raise EmptyInput("No images to pack")

    seen = set()
    for sprite in sprites:
        if sprite.name in seen:
            raise DuplicateSpriteName("Duplicate sprite name: {!r}".format(sprite.name))
        seen.add(sprite.name)


def decode_sprites(sprites: Sequence[SpriteInput]) -> List[DecodedSprite]:
    """Decode every sprite image to RGBA, keeping the input order.

    Raises:
        DecodeError: If any sprite image cannot be decoded.
    """
    decoded = []
    for sprite in sprites:
        img = to_rgba(sprite.image)
        decoded.append((sprite.name, img, int(sprite.offset_x), int(sprite.offset_y)))
    return decoded


def get_rects(images: Sequence[Image.Image], padding: int) -> RectsToPlace:
    """Build the padded rectangles to place, ids are the sprite indices."""
    padding_both_sides = padding * 2
    return [
        (idx, img.width + padding_both_sides, img.height + padding_both_sides)
        for idx, img in enumerate(images)
    ]


def candidate_bin_sizes(start_size: int, ceiling: int) -> Iterator[int]:
    """Yield start_size, doubling, up to and including ceiling."""
    bin_size = start_size
    while bin_size <= ceiling:
        yield bin_size
        bin_size *= 2


def search_bin_size(rects: RectsToPlace, start_size: int, ceiling: int,
                    packer_type: str = globs.DEFAULT_PACKER) -> Optional[Tuple[int, Placement]]:
    """Find the smallest candidate square bin the packer fills successfully.

    Args:
        rects: Padded (id, width, height) rectangles in sprite order.
        start_size: First candidate side length.
        ceiling: Largest candidate side length.
        packer_type: Name of the packer strategy.

    Returns:
        (bin_size, placement) for the first feasible size, or None once
        every size up to the ceiling has failed.
    """
    packer = packers.get_packer(packer_type)
    largest_side = max((max(w, h) for _, w, h in rects), default=0)

    for bin_size in candidate_bin_sizes(start_size, ceiling):
        if largest_side > bin_size:
            logger.debug("Skipping %dx%d bin, a rectangle side is %d", bin_size, bin_size, largest_side)
            continue

        placement = packer.pack(rects, bin_size)
        if placement is not None:
            logger.debug("Packed %d rectangles into a %dx%d bin", len(rects), bin_size, bin_size)
            return bin_size, placement
        logger.debug("%d rectangles do not fit into a %dx%d bin", len(rects), bin_size, bin_size)

    return None


def scale_sprites(decoded: Sequence[DecodedSprite], scale: float
                  ) -> Tuple[Tuple[Image.Image, ...], Tuple[Tuple[int, int], ...]]:
    """Resize every sprite and its offset by one uniform factor.

    Sizes are rounded to the nearest pixel and kept at least 1 px per axis,
    offsets are rounded independently. At scale 1.0 sprites are untouched.

    Returns:
        (images, offsets) in sprite order.
    """
    if scale == 1.0:
        return (
            tuple(img for _, img, _, _ in decoded),
            tuple((offset_x, offset_y) for _, _, offset_x, offset_y in decoded),
        )

    images = tuple(resize(img, scaled_size(img.size, scale)) for _, img, _, _ in decoded)
    offsets = tuple(
        (round_half_away(offset_x * scale), round_half_away(offset_y * scale))
        for _, _, offset_x, offset_y in decoded
    )
    return images, offsets


def find_packing(decoded: Sequence[DecodedSprite], padding: int, settings: AtlasSettings) -> PackResult:
    """Search bin sizes at each scale factor until one packing succeeds.

    Args:
        decoded: Decoded sprites in input order.
        padding: Pixels reserved on every side of every sprite.
        settings: Bin limits, scale ladder and packer selection.

    Returns:
        The packing, with the accepted scale and the scaled sprite data.

    Raises:
        PackingInfeasible: If no scale factor yields a packing.
    """
    for scale in settings.scale_factors:
        ceiling = settings.ceiling_for(scale)
        images, offsets = scale_sprites(decoded, scale)
        rects = get_rects(images, padding)

        found = search_bin_size(rects, settings.start_size, ceiling, settings.packer_type)
        if found is None:
            logger.info("No bin up to %dx%d fits the sprites at scale %s", ceiling, ceiling, scale)
            continue

        bin_size, placement = found
        _check_placement(placement, len(decoded))
        if scale != 1.0:
            logger.warning("Sprites downscaled to %s to fit a %dx%d atlas", scale, bin_size, bin_size)
        return PackResult(scale, bin_size, placement, images, offsets)

    raise PackingInfeasible(
        "Images too large to pack into {0}x{0} even at scale {1}".format(
            settings.fallback_max_size, settings.scale_factors[-1]
        )
    )


def _check_placement(placement: Placement, count: int) -> None:
    if sorted(placement) != list(range(count)):
        raise CompositionError(
            "Packer placed {} of {} sprites: {}".format(len(placement), count, sorted(placement))
        )


def get_atlas_size(placement: Placement) -> Size:
    """Calculate the tight bounding box of all placed padded rectangles."""
    max_x = 0
    max_y = 0
    for x, y, w, h in placement.values():
        max_x = max(max_x, x + w)
        max_y = max(max_y, y + h)
    return max_x, max_y


def composite(result: PackResult, padding: int, atlas_size: Size) -> Image.Image:
    """Copy every sprite verbatim into a transparent canvas of atlas_size.

    Raises:
        CompositionError: If a sprite would be copied outside the canvas.
    """
    buffer = new_pixel_buffer(atlas_size)

    for idx, (x, y, _, _) in result.placement.items():
        img = result.images[idx]
        try:
            pixel_buffer_paste(buffer, get_pixel_buffer(img), (x + padding, y + padding))
        except IndexError as e:
            raise CompositionError(
                "Sprite {} does not fit the {}x{} canvas: {}".format(idx, atlas_size[0], atlas_size[1], e)
            ) from e

    return pixel_buffer_to_image(buffer)


def get_frames(decoded: Sequence[DecodedSprite], result: PackResult, padding: int
               ) -> "OrderedDict[str, FrameDescriptor]":
    """Build the frame descriptor of every sprite, ordered by name."""
    frames = {}
    for idx, (x, y, _, _) in result.placement.items():
        name = decoded[idx][0]
        w, h = result.images[idx].size
        offset_x, offset_y = result.offsets[idx]
        frames[name] = {
            "frame": {"x": x + padding, "y": y + padding, "w": w, "h": h},
            "rotated": False,
            "trimmed": False,
            "spriteSourceSize": {"x": 0, "y": 0, "w": w, "h": h},
            "sourceSize": {"w": w, "h": h},
            "pivot": {"x": globs.FRAME_PIVOT[0], "y": globs.FRAME_PIVOT[1]},
            "offset": {"x": offset_x, "y": offset_y},
        }
    return OrderedDict(sorted(frames.items()))


def get_manifest(frames: "OrderedDict[str, FrameDescriptor]", image_name: str, atlas_size: Size,
                 scale: float) -> Manifest:
    return {
        "frames": frames,
        "meta": {
            "image": image_name,
            "size": {"w": atlas_size[0], "h": atlas_size[1]},
            "scale": float(scale),
        },
    }


def dump_manifest(manifest: Manifest) -> str:
    return json.dumps(manifest, indent=2, ensure_ascii=False)

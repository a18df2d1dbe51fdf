"""Package initialization for the atlas packing engine.

This package contains the core of sprite-atlas: capacity search, scale
fallback, canvas composition and manifest generation.
"""

from .atlas_types import AtlasOutput, PackingRequest, PackResult, SpriteInput
from .packer import build_atlas, pack_atlas

__all__ = ["AtlasOutput", "PackResult", "PackingRequest", "SpriteInput", "build_atlas", "pack_atlas"]

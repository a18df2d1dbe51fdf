"""sprite-atlas: 2D sprite asset preparation and texture atlas packing.

This package loads sprite images, removes chroma-keyed backgrounds, slices
sheets along grid lines, and packs many sprites into a single texture atlas
with a Phaser-style JSON frame manifest. When sprites do not fit the largest
allowed atlas, they are uniformly downscaled until they do.

MIT License

Copyright (c) 2026 sprite-atlas contributors

Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in all
copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
SOFTWARE.
"""

import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

from .errors import (  # noqa: E402
    AtlasError,
    CompositionError,
    DecodeError,
    DuplicateSpriteName,
    EmptyInput,
    EncodeError,
    PackingInfeasible,
)
from .operators.atlas import AtlasOutput, PackingRequest, SpriteInput, build_atlas, pack_atlas  # noqa: E402
from .settings import AtlasSettings  # noqa: E402

__all__ = [
    "AtlasError",
    "AtlasOutput",
    "AtlasSettings",
    "CompositionError",
    "DecodeError",
    "DuplicateSpriteName",
    "EmptyInput",
    "EncodeError",
    "PackingInfeasible",
    "PackingRequest",
    "SpriteInput",
    "build_atlas",
    "pack_atlas",
]

"""Type annotations for sprite-atlas.

This module defines custom type hints used throughout the package. It
centralizes the tuple and dictionary shapes shared by the packers, the
atlas engine and the manifest emitter to avoid repetition.
"""

from typing import Any, Dict, List, Tuple, Union

from PIL import Image

# Width and height in pixels
Size = Tuple[int, int]

# x, y, width, height in pixels
Box = Tuple[int, int, int, int]

# Rectangle handed to a packer: id, width, height
RectToPlace = Tuple[int, int, int]
RectsToPlace = List[RectToPlace]

# Packer result, one box per rectangle id
Placement = Dict[int, Box]

# Anything the codec adapter accepts as an image
ImageSource = Union[Image.Image, bytes, bytearray, str]

# Decoded sprite carried through the engine: name, image, offset x, offset y
DecodedSprite = Tuple[str, Image.Image, int, int]

# Serialized manifest pieces
FrameRect = Dict[str, int]
FrameDescriptor = Dict[str, Any]
Manifest = Dict[str, Dict[str, Any]]

# Chroma key color: {'r', 'g', 'b', 'tolerance'}
ColorToRemove = Dict[str, int]

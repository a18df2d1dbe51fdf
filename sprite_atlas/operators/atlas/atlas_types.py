from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from PIL import Image

from ... import globs
from ...type_annotations import ImageSource, Placement, Size
from ...utils.images import to_data_url


@dataclass(frozen=True)
class SpriteInput:
    """One sprite handed to the packing engine.

    ``image`` may be a decoded PIL image or an encoded buffer (bytes, base64
    text or a data URL). The offsets are the sprite's anchor offset in
    full resolution pixels.
    """

    name: str
    image: ImageSource
    offset_x: int = 0
    offset_y: int = 0


@dataclass(frozen=True)
class PackingRequest:
    sprites: Tuple[SpriteInput, ...]
    padding: int = 0

    def __post_init__(self) -> None:
        # Any sequence is accepted and stored as a tuple
        object.__setattr__(self, "sprites", tuple(self.sprites))
        if isinstance(self.padding, bool) or not isinstance(self.padding, int):
            raise ValueError("padding must be an integer, got {!r}".format(self.padding))
        if self.padding < 0:
            raise ValueError("padding must be non-negative, got {}".format(self.padding))


@dataclass
class PackResult:
    """Successful outcome of the capacity search and scale fallback.

    Attributes:
        scale: The scale factor that made packing feasible.
        bin_size: The candidate bin side length that was accepted.
        placement: Padded rectangle per sprite index.
        images: The sprites' images at ``scale``, by sprite index.
        offsets: The sprites' offsets at ``scale``, by sprite index.
    """

    scale: float
    bin_size: int
    placement: Placement
    images: Tuple[Image.Image, ...]
    offsets: Tuple[Tuple[int, int], ...]


@dataclass(frozen=True)
class AtlasOutput:
    """The composited atlas and its manifest.

    Attributes:
        image: PNG encoded canvas.
        json: Manifest text.
        size: Canvas (width, height).
        scale: Scale factor applied to every sprite.
    """

    image: bytes
    json: str
    size: Size = (0, 0)
    scale: float = 1.0
    frame_names: Tuple[str, ...] = field(default=())

    @property
    def image_base64(self) -> str:
        """The canvas as a PNG ``data:`` URL."""
        return to_data_url(self.image)

    def save(self, directory, image_name: Optional[str] = None, json_name: Optional[str] = None):
        """Write the atlas image and manifest into ``directory``.

        Returns:
            The (image path, json path) written.
        """
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        image_path = directory / (image_name or globs.ATLAS_IMAGE_NAME)
        json_path = directory / (json_name or Path(image_path.name).with_suffix(".json").name)
        image_path.write_bytes(self.image)
        json_path.write_text(self.json, encoding="utf-8")
        return image_path, json_path

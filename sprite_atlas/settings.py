"""Per-call tunables of the atlas packing engine."""

from dataclasses import dataclass
from typing import Tuple

from . import globs


@dataclass(frozen=True)
class AtlasSettings:
    """Configuration for one atlas build.

    Attributes:
        start_size: First candidate bin side length.
        max_size: Largest bin side length tried at full resolution.
        fallback_max_size: Largest bin side length tried once sprites are
            downscaled.
        scale_factors: Scale factors tried in order, strictly decreasing and
            starting at 1.0.
        packer_type: Name of the rectangle packer to use.
        image_name: Image reference written into the manifest.
    """

    start_size: int = globs.START_BIN_SIZE
    max_size: int = globs.MAX_BIN_SIZE
    fallback_max_size: int = globs.FALLBACK_MAX_BIN_SIZE
    scale_factors: Tuple[float, ...] = globs.SCALE_FACTORS
    packer_type: str = globs.DEFAULT_PACKER
    image_name: str = globs.ATLAS_IMAGE_NAME

    def __post_init__(self) -> None:
        if self.start_size < 1:
            raise ValueError("start_size must be positive, got {}".format(self.start_size))
        if self.max_size < self.start_size:
            raise ValueError(
                "max_size {} is smaller than start_size {}".format(self.max_size, self.start_size)
            )
        if self.fallback_max_size < self.start_size:
            raise ValueError(
                "fallback_max_size {} is smaller than start_size {}".format(
                    self.fallback_max_size, self.start_size
                )
            )
        if not self.scale_factors:
            raise ValueError("scale_factors must not be empty")
        if self.scale_factors[0] != 1.0:
            raise ValueError("scale_factors must start at 1.0")
        if any(later >= earlier for earlier, later in zip(self.scale_factors, self.scale_factors[1:])):
            raise ValueError("scale_factors must be strictly decreasing: {}".format(self.scale_factors))
        if self.scale_factors[-1] <= 0:
            raise ValueError("scale_factors must be positive")

    def ceiling_for(self, scale: float) -> int:
        """Return the largest bin side length allowed at ``scale``."""
        return self.max_size if scale == 1.0 else self.fallback_max_size

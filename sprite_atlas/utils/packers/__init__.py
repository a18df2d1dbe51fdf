from typing import Optional

from ...globs import DEFAULT_PACKER, PackerTypes
from ...type_annotations import Placement, RectsToPlace
from .binary_tree_bin_packer import BinaryTreeBinPacker
from .max_rects_bin_packer import MaxRectsBinPacker
from .section_packer import SectionBinPacker

packers = {
    PackerTypes.SMALLEST_SECTION: SectionBinPacker,
    PackerTypes.MAX_RECTS: MaxRectsBinPacker,
    PackerTypes.BINARY_TREE: BinaryTreeBinPacker,
}


def get_packer(packer_type: str = DEFAULT_PACKER):
    try:
        return packers[packer_type]()
    except KeyError:
        raise ValueError(
            "Unknown packer type {!r}, expected one of {}".format(packer_type, ", ".join(sorted(packers)))
        ) from None


def pack(rects: RectsToPlace, bin_size: int, packer_type: str = DEFAULT_PACKER) -> Optional[Placement]:
    return get_packer(packer_type).pack(rects, bin_size)

import itertools

import pytest

from sprite_atlas.globs import PackerTypes
from sprite_atlas.utils import packers
from sprite_atlas.utils.packers.binary_tree_bin_packer import BinaryTreeBinPacker
from sprite_atlas.utils.packers.max_rects_bin_packer import (
    HEURISTICS,
    MaxRectsBinPacker,
)
from sprite_atlas.utils.packers.section_packer import SectionBinPacker

from .conftest import boxes_overlap

ALL_PACKERS = [PackerTypes.SMALLEST_SECTION, PackerTypes.MAX_RECTS, PackerTypes.BINARY_TREE]

MIXED_RECTS = [
    (idx, w, h)
    for idx, (w, h) in enumerate(
        [(64, 64), (32, 100), (100, 20), (16, 16), (48, 80), (80, 48), (8, 120), (120, 8), (30, 30), (30, 30)]
    )
]


def assert_valid(placement, rects, bin_size):
    assert sorted(placement) == sorted(rect_id for rect_id, _, _ in rects)
    sizes = {rect_id: (w, h) for rect_id, w, h in rects}
    for rect_id, (x, y, w, h) in placement.items():
        assert (w, h) == sizes[rect_id]
        assert 0 <= x and 0 <= y
        assert x + w <= bin_size and y + h <= bin_size
    for a, b in itertools.combinations(placement.values(), 2):
        assert not boxes_overlap(a, b)


@pytest.mark.parametrize("packer_type", ALL_PACKERS)
def test_every_packer_places_mixed_rects(packer_type):
    placement = packers.pack(MIXED_RECTS, 256, packer_type)

    assert placement is not None
    assert_valid(placement, MIXED_RECTS, 256)


@pytest.mark.parametrize("packer_type", ALL_PACKERS)
def test_every_packer_reports_failure_with_none(packer_type):
    assert packers.pack([(0, 300, 10)], 256, packer_type) is None


@pytest.mark.parametrize("packer_type", ALL_PACKERS)
def test_every_packer_is_deterministic(packer_type):
    first = packers.pack(MIXED_RECTS, 256, packer_type)
    second = packers.pack(MIXED_RECTS, 256, packer_type)

    assert first == second


def test_unknown_packer_type():
    with pytest.raises(ValueError, match="Unknown packer type"):
        packers.get_packer("SKYLINE")


def test_section_packer_places_into_smallest_section():
    placement = SectionBinPacker().pack([(0, 104, 104), (1, 54, 54), (2, 34, 34)], 256)

    assert placement == {
        0: (0, 0, 104, 104),
        1: (0, 104, 54, 54),
        2: (54, 104, 34, 34),
    }


def test_section_packer_inserts_largest_first():
    placement = SectionBinPacker().pack([(0, 10, 10), (1, 50, 50)], 256)

    assert placement[1][:2] == (0, 0)


def test_section_packer_keeps_input_order_for_equal_areas():
    placement = SectionBinPacker().pack([(0, 10, 10), (1, 10, 10)], 256)

    assert placement[0] == (0, 0, 10, 10)
    assert placement[1] == (0, 10, 10, 10)


def test_section_packer_fills_bin_exactly():
    rects = [(idx, 128, 128) for idx in range(4)]
    placement = SectionBinPacker().pack(rects, 256)

    assert_valid(placement, rects, 256)
    assert SectionBinPacker().pack(rects + [(4, 1, 1)], 256) is None


def test_section_split_prefers_larger_leftover():
    from sprite_atlas.utils.packers.section_packer import Section

    sections = Section(0, 0, 104, 152).split(54, 54)

    assert [(s.x, s.y, s.w, s.h) for s in sections] == [(0, 54, 104, 98), (54, 0, 50, 54)]


def test_binary_tree_rejects_growth_beyond_bin():
    rects = [(0, 200, 200), (1, 200, 200)]

    assert BinaryTreeBinPacker().pack(rects, 256) is None
    assert BinaryTreeBinPacker().pack(rects, 512) == {0: (0, 0, 200, 200), 1: (200, 0, 200, 200)}


def test_binary_tree_empty_input():
    assert BinaryTreeBinPacker().pack([], 256) == {}


@pytest.mark.parametrize("heuristic", HEURISTICS)
def test_max_rects_heuristics(heuristic):
    placement = MaxRectsBinPacker(heuristic=heuristic).pack(MIXED_RECTS, 256)

    assert placement is not None
    assert_valid(placement, MIXED_RECTS, 256)


def test_max_rects_unknown_heuristic():
    with pytest.raises(ValueError):
        MaxRectsBinPacker(heuristic="CP")


def test_max_rects_fills_bin_exactly():
    rects = [(idx, 64, 64) for idx in range(16)]

    assert_valid(MaxRectsBinPacker().pack(rects, 256), rects, 256)
    assert MaxRectsBinPacker().pack(rects + [(16, 1, 1)], 256) is None

"""Smallest-section bin packing for a fixed square bin.

The bin is tracked as a list of free sections. Rectangles are inserted
largest area first; each one goes into the top left corner of the smallest
free section that can contain it, and the rest of that section is split in
two (guillotine split). Of the two possible splits the one leaving the
larger section as large as possible is kept.

The heuristic is deterministic: equal areas keep the caller's order and
equal sections prefer the most recently created one, so identical input
always produces identical placements.

Typical usage example:
    packer = SectionBinPacker()
    placement = packer.pack([(0, 100, 100), (1, 50, 50)], 256)
    # {0: (0, 0, 100, 100), 1: (0, 100, 50, 50)} or None if it does not fit
"""

import logging
from typing import List, Optional, Tuple

from ...type_annotations import Box, Placement, RectsToPlace

logger = logging.getLogger(__name__)


class Section:
    """A free rectangular region of the bin.

    Attributes:
        x: Left edge.
        y: Top edge.
        w: Width.
        h: Height.
    """

    __slots__ = ("x", "y", "w", "h")

    def __init__(self, x: int, y: int, w: int, h: int) -> None:
        self.x = x
        self.y = y
        self.w = w
        self.h = h

    @property
    def area(self) -> int:
        return self.w * self.h

    def can_contain(self, w: int, h: int) -> bool:
        return w <= self.w and h <= self.h

    def split(self, w: int, h: int) -> List["Section"]:
        """Split the space left after placing a w x h rectangle at the corner.

        Two guillotine cuts are possible:
        1. Vertical first: a full height section on the right and a section
           below the rectangle as wide as the rectangle.
        2. Horizontal first: a section on the right as tall as the
           rectangle and a full width section below.

        The cut whose smaller leftover is smaller wins, which keeps the
        larger leftover as large as possible. Empty leftovers are dropped.

        Args:
            w: Width of the placed rectangle.
            h: Height of the placed rectangle.

        Returns:
            The non-empty leftover sections, largest first.
        """
        vertical = (
            Section(self.x + w, self.y, self.w - w, self.h),
            Section(self.x, self.y + h, w, self.h - h),
        )
        horizontal = (
            Section(self.x + w, self.y, self.w - w, h),
            Section(self.x, self.y + h, self.w, self.h - h),
        )
        chosen = min((vertical, horizontal), key=_split_score)
        return sorted(
            (section for section in chosen if section.area > 0),
            key=lambda section: section.area,
            reverse=True,
        )

    def __repr__(self) -> str:
        return "Section(x={}, y={}, w={}, h={})".format(self.x, self.y, self.w, self.h)


def _split_score(sections: Tuple[Section, Section]) -> Tuple[int, int]:
    smaller, larger = sorted(section.area for section in sections)
    return smaller, -larger


class SectionBinPacker:
    """Largest-volume-first, smallest-containing-section packer.

    Attributes:
        sections: Free sections of the current attempt, oldest first.
    """

    def __init__(self) -> None:
        self.sections = []

    def pack(self, rects: RectsToPlace, bin_size: int) -> Optional[Placement]:
        """Try to place every rectangle into a bin_size x bin_size bin.

        Args:
            rects: (id, width, height) tuples in the caller's order.
            bin_size: Side length of the square bin.

        Returns:
            A mapping id -> (x, y, w, h) when every rectangle fits, otherwise
            None.
        """
        self.sections = [Section(0, 0, bin_size, bin_size)]
        placement = {}

        # sorted() is stable, equal areas keep the input order
        ordered = sorted(rects, key=lambda rect: rect[1] * rect[2], reverse=True)

        for rect_id, w, h in ordered:
            box = self._insert(w, h)
            if box is None:
                logger.debug(
                    "Rectangle %s (%dx%d) does not fit into a %dx%d bin",
                    rect_id, w, h, bin_size, bin_size,
                )
                return None
            placement[rect_id] = box

        return placement

    def _insert(self, w: int, h: int) -> Optional[Box]:
        best_index = self._find_section(w, h)
        if best_index is None:
            return None

        section = self.sections.pop(best_index)
        self.sections.extend(section.split(w, h))
        return section.x, section.y, w, h

    def _find_section(self, w: int, h: int) -> Optional[int]:
        """Return the index of the smallest section containing w x h.

        Ties go to the most recently created section.
        """
        best_index = None
        best_area = None
        for index, section in enumerate(self.sections):
            if not section.can_contain(w, h):
                continue
            if best_area is None or section.area <= best_area:
                best_index = index
                best_area = section.area
        return best_index

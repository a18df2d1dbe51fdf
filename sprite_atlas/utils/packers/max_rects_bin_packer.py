"""
MIT License

Copyright (c) 2017 Yi

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

Typical usage:
    packer = MaxRectsBinPacker(heuristic=HEURISTIC_BEST_SHORT_SIDE_FIT)
    placement = packer.pack([(0, 100, 200), (1, 150, 100)], 512)
"""

import logging
from typing import List, Optional, Tuple

from ...type_annotations import Placement, RectsToPlace

logger = logging.getLogger(__name__)

# Heuristic constants
HEURISTIC_BEST_SHORT_SIDE_FIT = "BSSF"
HEURISTIC_BEST_LONG_SIDE_FIT = "BLSF"
HEURISTIC_BEST_AREA_FIT = "BAF"
HEURISTIC_BOTTOM_LEFT_RULE = "BL"

HEURISTICS = (
    HEURISTIC_BEST_SHORT_SIDE_FIT,
    HEURISTIC_BEST_LONG_SIDE_FIT,
    HEURISTIC_BEST_AREA_FIT,
    HEURISTIC_BOTTOM_LEFT_RULE,
)


class Rectangle:
    """Represents a rectangle with position and dimensions.

    Attributes:
        left: The x-coordinate of the left edge.
        top: The y-coordinate of the top edge.
        width: The width of the rectangle.
        height: The height of the rectangle.
        right: The x-coordinate of the right edge.
        bottom: The y-coordinate of the bottom edge.
    """

    __slots__ = ("left", "top", "width", "height", "right", "bottom")

    def __init__(self, left: int, top: int, width: int, height: int) -> None:
        self.left = left
        self.top = top
        self.width = width
        self.height = height
        self.right = left + width
        self.bottom = top + height

    @property
    def area(self) -> int:
        return self.width * self.height

    def contains(self, other_rect: "Rectangle") -> bool:
        """Checks if this rectangle completely contains another rectangle."""
        return (
            other_rect.left >= self.left
            and other_rect.right <= self.right
            and other_rect.top >= self.top
            and other_rect.bottom <= self.bottom
        )

    def intersects(self, other_rect: "Rectangle") -> bool:
        return not (
            other_rect.left >= self.right
            or other_rect.right <= self.left
            or other_rect.top >= self.bottom
            or other_rect.bottom <= self.top
        )

    def __repr__(self) -> str:
        return "[Rect(left:{}, top:{}, w:{}, h:{})]".format(self.left, self.top, self.width, self.height)


class MaxRectsBinPacker:
    """Implements the MaxRects algorithm for packing rectangles into one fixed bin.

    The free space is kept as a list of maximal, possibly overlapping, free
    rectangles. Every placement splits each free rectangle it touches into
    up to four maximal pieces, and free rectangles contained in another one
    are pruned.

    Attributes:
        heuristic: Placement scoring rule, one of ``HEURISTICS``.
        verbose: If True, logs every placement at DEBUG level.
        free_rectangles: Free spaces of the current attempt.
    """

    def __init__(self, heuristic: str = HEURISTIC_BEST_SHORT_SIDE_FIT, verbose: bool = False) -> None:
        if heuristic not in HEURISTICS:
            raise ValueError("Unknown MaxRects heuristic: {}".format(heuristic))
        self.heuristic = heuristic
        self.verbose = verbose
        self.free_rectangles = []

    def pack(self, rects: RectsToPlace, bin_size: int) -> Optional[Placement]:
        """Packs rectangles, largest area first, into a bin_size x bin_size bin.

        Args:
            rects: (id, width, height) tuples.
            bin_size: Side length of the square bin.

        Returns:
            A mapping id -> (x, y, w, h), or None if a rectangle cannot be placed.
        """
        self.free_rectangles = [Rectangle(0, 0, bin_size, bin_size)]
        placement = {}

        for rect_id, w, h in sorted(rects, key=lambda rect: rect[1] * rect[2], reverse=True):
            node = self._find_position(w, h)
            if node is None:
                logger.debug("[%s] no free rectangle for %s (%dx%d)", self.heuristic, rect_id, w, h)
                return None

            self._place(node)
            placement[rect_id] = (node.left, node.top, w, h)

            if self.verbose:
                logger.debug(
                    "[%s] placed %s at %r, free rects: %d",
                    self.heuristic, rect_id, node, len(self.free_rectangles),
                )

        return placement

    def _find_position(self, width: int, height: int) -> Optional[Rectangle]:
        best_node = None
        best_score = None

        for free_rect in self.free_rectangles:
            if free_rect.width < width or free_rect.height < height:
                continue
            score = self._score(free_rect, width, height)
            if best_score is None or score < best_score:
                best_score = score
                best_node = Rectangle(free_rect.left, free_rect.top, width, height)

        return best_node

    def _score(self, free_rect: Rectangle, width: int, height: int) -> Tuple[int, int]:
        """Calculate the (primary, secondary) score, lower is better."""
        leftover_horiz = free_rect.width - width
        leftover_vert = free_rect.height - height
        short_side = min(leftover_horiz, leftover_vert)
        long_side = max(leftover_horiz, leftover_vert)

        if self.heuristic == HEURISTIC_BEST_LONG_SIDE_FIT:
            return long_side, short_side
        if self.heuristic == HEURISTIC_BEST_AREA_FIT:
            return free_rect.area - width * height, short_side
        if self.heuristic == HEURISTIC_BOTTOM_LEFT_RULE:
            return free_rect.top + height, free_rect.left
        return short_side, long_side

    def _place(self, node: Rectangle) -> None:
        new_free = []
        for free_rect in self.free_rectangles:
            if free_rect.intersects(node):
                new_free.extend(_split_free_rect(free_rect, node))
            else:
                new_free.append(free_rect)
        self.free_rectangles = _prune_free_list(new_free)


def _split_free_rect(free_rect: Rectangle, used: Rectangle) -> List[Rectangle]:
    """Split a free rectangle around a used one into maximal free pieces."""
    pieces = []

    if used.left > free_rect.left:
        pieces.append(Rectangle(free_rect.left, free_rect.top, used.left - free_rect.left, free_rect.height))
    if used.right < free_rect.right:
        pieces.append(Rectangle(used.right, free_rect.top, free_rect.right - used.right, free_rect.height))
    if used.top > free_rect.top:
        pieces.append(Rectangle(free_rect.left, free_rect.top, free_rect.width, used.top - free_rect.top))
    if used.bottom < free_rect.bottom:
        pieces.append(Rectangle(free_rect.left, used.bottom, free_rect.width, free_rect.bottom - used.bottom))

    return pieces


def _prune_free_list(free_rects: List[Rectangle]) -> List[Rectangle]:
    """Drop free rectangles contained in another one, keeping the first of equal ones."""
    pruned = []
    for i, rect in enumerate(free_rects):
        redundant = False
        for j, other in enumerate(free_rects):
            if i == j or not other.contains(rect):
                continue
            # Identical rectangles contain each other, keep the earliest
            if rect.contains(other) and i < j:
                continue
            redundant = True
            break
        if not redundant:
            pruned.append(rect)
    return pruned

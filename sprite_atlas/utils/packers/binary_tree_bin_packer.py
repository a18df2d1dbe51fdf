"""Growing binary tree bin packing, bounded by a square bin.

The tree starts at the size of the first rectangle and grows right or down
whenever a rectangle does not fit, keeping the result roughly square. The
packing is rejected as soon as the grown tree no longer fits the requested
bin.

Original algorithm by Jake Gordon
https://github.com/jakesgordon/bin-packing

Copyright (c) 2011, 2012, 2013, 2014, 2015, 2016 Jake Gordon and contributors

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

Typical usage example:
    packer = BinaryTreeBinPacker()
    placement = packer.pack([(0, 100, 200), (1, 150, 100)], 512)
"""

import logging
from typing import Optional, Tuple

from ...type_annotations import Placement, RectToPlace, RectsToPlace

logger = logging.getLogger(__name__)


class Node:
    """A region of the tree; once used it owns a right and a down child."""

    __slots__ = ("x", "y", "w", "h", "used", "right", "down")

    def __init__(self, x: int, y: int, w: int, h: int) -> None:
        self.x = x
        self.y = y
        self.w = w
        self.h = h
        self.used = False
        self.right = None
        self.down = None

    def find(self, w: int, h: int) -> Optional["Node"]:
        """Depth first search for a free node of at least w x h, right side first."""
        if self.used:
            return self.right.find(w, h) or self.down.find(w, h)
        if w <= self.w and h <= self.h:
            return self
        return None

    def occupy(self, w: int, h: int) -> "Node":
        """Mark the top left w x h of this node as taken and split off the rest."""
        self.used = True
        self.down = Node(self.x, self.y + h, self.w, self.h - h)
        self.right = Node(self.x + w, self.y, self.w - w, h)
        return self


class BinaryTreeBinPacker:
    """Growing binary tree packer bounded by a square bin.

    Attributes:
        root: Root node of the current attempt.
    """

    def __init__(self) -> None:
        self.root = None

    def pack(self, rects: RectsToPlace, bin_size: int) -> Optional[Placement]:
        """Pack all rectangles, failing once the tree outgrows the bin.

        Args:
            rects: (id, width, height) tuples.
            bin_size: Side length of the square bin.

        Returns:
            A mapping id -> (x, y, w, h), or None if the rectangles need more
            room than bin_size x bin_size.
        """
        placement = {}
        if not rects:
            return placement

        ordered = sorted(rects, key=_size_sorting, reverse=True)
        _, first_w, first_h = ordered[0]
        self.root = Node(0, 0, first_w, first_h)

        for rect_id, w, h in ordered:
            node = self.root.find(w, h)
            fit = node.occupy(w, h) if node else self._grow(w, h)
            if fit is None or self.root.w > bin_size or self.root.h > bin_size:
                logger.debug("Binary tree outgrew a %dx%d bin at rectangle %s", bin_size, bin_size, rect_id)
                return None
            placement[rect_id] = (fit.x, fit.y, w, h)

        return placement

    def _grow(self, w: int, h: int) -> Optional[Node]:
        """Extend the root to the right or downwards, whichever stays squarer."""
        root = self.root
        fits_right = h <= root.h
        fits_down = w <= root.w

        prefer_right = fits_right and root.h >= root.w + w
        prefer_down = fits_down and root.w >= root.h + h

        if prefer_right or (fits_right and not prefer_down):
            grown = Node(0, 0, root.w + w, root.h)
            grown.down = root
            grown.right = Node(root.w, 0, w, root.h)
        elif fits_down:
            grown = Node(0, 0, root.w, root.h + h)
            grown.down = Node(0, root.h, root.w, h)
            grown.right = root
        else:
            return None

        grown.used = True
        self.root = grown
        node = grown.find(w, h)
        return node.occupy(w, h) if node else None


def _size_sorting(rect: RectToPlace) -> Tuple[int, int, int]:
    # max side, then area, then width
    _, w, h = rect
    return max(w, h), w * h, w

# blind_cutter/free_space.py
# Free-space bookkeeping for one sheet:
# - first-fit lookup over free rectangles (list order, not area order)
# - guillotine split of the used rectangle into "right" and "top" remainders
# - subsumption pruning (drop rectangles fully contained in another)
#
# Pruning is NOT a geometric merge: two adjacent rectangles that could form a
# larger one stay separate. Fragmentation over many placements is accepted.

from __future__ import annotations

from typing import List, Optional, Tuple

from .types import FreeRect


class FreeSpaceLimitError(ValueError):
    """Raised when a sheet accumulates more free rectangles than allowed."""


class FreeSpaceTracker:
    def __init__(self, rects: List[FreeRect], kerf: int = 0, max_rects: Optional[int] = None):
        self.rects = rects
        self.kerf = int(kerf)
        self.max_rects = max_rects

    def find_first_fit(self, width: int, length: int) -> Optional[Tuple[int, bool]]:
        """
        Return (rect_index, rotated) of the first rectangle that takes the panel.
        Un-rotated is tried first; rotation only for non-square panels.
        """
        for i, rect in enumerate(self.rects):
            if rect.fits(width, length, self.kerf):
                return i, False
            if width != length and rect.fits(length, width, self.kerf):
                return i, True
        return None

    def place(self, index: int, width: int, length: int) -> FreeRect:
        """
        Consume rectangle `index` for a panel of the given on-sheet size placed at its
        origin. Returns the consumed rectangle.
        """
        rect = self.rects.pop(index)
        kerf_w = width + self.kerf
        kerf_l = length + self.kerf

        right = FreeRect(rect.x + kerf_w, rect.y, rect.width - kerf_w, rect.length)
        if right.width > 0:
            self.rects.append(right)

        top = FreeRect(rect.x, rect.y + kerf_l, kerf_w, rect.length - kerf_l)
        if top.length > 0:
            self.rects.append(top)

        self.prune()

        if self.max_rects is not None and len(self.rects) > self.max_rects:
            raise FreeSpaceLimitError(
                f"Free rectangle count {len(self.rects)} exceeds limit {self.max_rects}"
            )
        return rect

    def prune(self) -> None:
        """Remove every rectangle contained in another one (keeps one of exact duplicates)."""
        rects = self.rects
        kept: List[FreeRect] = []
        for i, r in enumerate(rects):
            contained = False
            for j, other in enumerate(rects):
                if i == j or not other.contains(r):
                    continue
                # identical rectangles: keep the first occurrence, never drop both copies.
                # Intentional: layouts differ from a packer that discards both.
                if other == r and j > i:
                    continue
                contained = True
                break
            if not contained:
                kept.append(r)
        self.rects[:] = kept

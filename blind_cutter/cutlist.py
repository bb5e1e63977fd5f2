# blind_cutter/cutlist.py
# Cut list: one numbered entry per placed panel, in the order sheets were opened
# and panels were placed on each sheet (not sorted by position).

from __future__ import annotations

from typing import Iterable, List

from .types import CutEntry, Sheet


def generate_cut_list(sheets: Iterable[Sheet]) -> List[CutEntry]:
    cuts: List[CutEntry] = []
    for sheet in sheets:
        for pl in sheet.placements:
            cuts.append(
                CutEntry(
                    cut_number=len(cuts) + 1,
                    sheet_id=sheet.sheet_id,
                    x=pl.x,
                    y=pl.y,
                    width=pl.width,
                    length=pl.length,
                    rotated=pl.rotated,
                    label=pl.label,
                    ref=pl.ref,
                )
            )
    return cuts


def format_cut(c: CutEntry) -> str:
    """Short operator-facing line, e.g. '#3 S1 (0,2250) 1472x2250 R Kitchen'."""
    rot = " R" if c.rotated else ""
    return f"#{c.cut_number} S{c.sheet_id} ({c.x},{c.y}) {c.width}x{c.length}{rot} {c.label}"

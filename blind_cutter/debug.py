# blind_cutter/debug.py
# Debug / inspection helpers:
# - pretty-print placements, cut list and bar groups
# - quick text summaries for the CLI

from __future__ import annotations

from typing import Iterable

from .cutlist import format_cut
from .fabrication import tube_cut_width
from .linear_stock import LinearStockResult
from .types import PackResult, PlacedPanel, Sheet


def print_placements(placements: Iterable[PlacedPanel]) -> None:
    for p in placements:
        print(
            f"  {p.label[:24]:24s} "
            f"x={p.x:5d} y={p.y:5d} w={p.width:5d} l={p.length:5d} "
            f"{'R' if p.rotated else ' '}"
        )


def print_sheet(sheet: Sheet) -> None:
    print(f"=== Sheet {sheet.sheet_id} ({sheet.stock_width}x{sheet.stock_length}) ===")
    print(
        f"Panels: {len(sheet.placements)}  Used: {sheet.used_area:,} mm²  "
        f"Waste: {sheet.wasted_area:,} mm²  Efficiency: {sheet.efficiency}%"
    )
    print_placements(sheet.placements)


def print_pack_result(res: PackResult, *, cut_list: bool = False) -> None:
    st = res.statistics
    print(
        f"Sheets: {st.used_stock_sheets} x {st.stock_dimensions}  "
        f"Panels: {st.total_cuts}/{st.total_panels}  "
        f"Efficiency: {st.efficiency}%  Waste: {st.waste_percentage}%  "
        f"Fabric needed: {st.total_fabric_needed:,} mm"
    )
    for sh in res.sheets:
        print_sheet(sh)
    if cut_list:
        print("-- Cut list --")
        for c in res.cuts:
            print(f"  {format_cut(c)}")
    for p in res.unplaced:
        print(f"  NOT PLACED: {p.label} {p.width}x{p.length}")


def print_bar_result(res: LinearStockResult) -> None:
    for g in res.groups:
        print(f"=== Bottom rail {g.bar_type} / {g.bar_colour} ===")
        for it in g.items:
            print(f"  {it.location[:24]:24s} width={it.original_width:5d} cut={tube_cut_width(it.original_width):5d}")
        print(
            f"  Total {g.total_width:,} mm  Base {g.base_quantity} + wastage {g.wastage} "
            f"= {g.final_quantity} -> {g.pieces_to_deduct} piece(s) of {g.stock_length} mm"
        )
    print(f"Total bar pieces: {res.total_pieces_needed}")

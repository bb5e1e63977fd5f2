# blind_cutter/solver_guillotine.py
# First-fit-decreasing guillotine packer for fabric panels.
#
# Every panel goes into the FIRST opened sheet (creation order) and the FIRST free
# rectangle (list order) where it fits, un-rotated before rotated. New sheets are
# opened on demand. A panel larger than the stock in both orientations is dropped:
# it consumes no sheet and the only trace is a warning + PackResult.unplaced
# (statistics show total_cuts < total_panels).
#
# Deterministic: same ordered input -> identical placements.

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .config import DEFAULTS
from .cutlist import generate_cut_list
from .free_space import FreeSpaceLimitError, FreeSpaceTracker
from .logger import get_logger
from .metrics import compute_job_statistics, update_sheet_metrics
from .types import (
    PackResult,
    PanelRequest,
    PlacedPanel,
    Sheet,
    StockSpec,
    UnitPanel,
    effective_dims,
    expand_panels,
    sort_panels,
)


class PackingLimitError(ValueError):
    """Input exceeds the panel count or free rectangle ceiling."""


@dataclass(frozen=True)
class PackerParams:
    max_unit_panels: int = DEFAULTS.max_unit_panels
    max_free_rects: int = DEFAULTS.max_free_rects


def _try_place(sheet: Sheet, panel: UnitPanel, kerf: int, params: PackerParams) -> bool:
    tracker = FreeSpaceTracker(sheet.free_rects, kerf=kerf, max_rects=params.max_free_rects)
    hit = tracker.find_first_fit(panel.width, panel.length)
    if hit is None:
        return False

    index, rotated = hit
    w, l = effective_dims(panel, rotated)
    rect = sheet.free_rects[index]

    sheet.placements.append(
        PlacedPanel(
            x=rect.x,
            y=rect.y,
            width=w,
            length=l,
            rotated=rotated,
            uid=panel.uid,
            label=panel.label,
            ref=panel.ref,
            original_width=panel.original_width,
            original_drop=panel.original_drop,
        )
    )
    try:
        tracker.place(index, w, l)
    except FreeSpaceLimitError as e:
        raise PackingLimitError(f"Sheet {sheet.sheet_id}: {e}") from e

    update_sheet_metrics(sheet)
    return True


def pack_panels(
    stock: StockSpec,
    panels: Iterable[UnitPanel],
    params: Optional[PackerParams] = None,
) -> Tuple[List[Sheet], List[UnitPanel]]:
    """
    Pack already-sorted unit panels. Returns (sheets, unplaced).
    """
    params = params or PackerParams()
    log = get_logger()

    sheets: List[Sheet] = []
    unplaced: List[UnitPanel] = []

    for panel in panels:
        placed = False
        for sheet in sheets:
            if _try_place(sheet, panel, stock.kerf, params):
                placed = True
                break
        if placed:
            continue

        fresh = Sheet(sheet_id=len(sheets) + 1, stock_width=stock.stock_width, stock_length=stock.stock_length)
        if _try_place(fresh, panel, stock.kerf, params):
            sheets.append(fresh)
        else:
            unplaced.append(panel)
            log.warn(
                f"Panel too large for stock sheet {stock.label()}: "
                f"{panel.label} {panel.width}x{panel.length} (uid={panel.uid}) dropped"
            )

    return sheets, unplaced


def solve_guillotine(
    stock: StockSpec,
    requests: List[PanelRequest],
    params: Optional[PackerParams] = None,
) -> PackResult:
    """
    Expand -> sort -> pack -> statistics -> cut list for one stock configuration.
    """
    params = params or PackerParams()

    units = expand_panels(requests)
    if len(units) > params.max_unit_panels:
        get_logger().error(f"{len(units)} panels exceed the limit of {params.max_unit_panels}")
        raise PackingLimitError(f"Too many panels: {len(units)} > {params.max_unit_panels}")

    sheets, unplaced = pack_panels(stock, sort_panels(units), params=params)

    stats = compute_job_statistics(stock, sheets, requests)
    cuts = generate_cut_list(sheets)

    return PackResult(stock=stock, sheets=sheets, statistics=stats, cuts=cuts, unplaced=unplaced)

# blind_cutter/metrics.py
# Metrics for fabric cutting:
# - per-sheet used / wasted area and efficiency (updated after each placement)
# - job totals across all sheets: waste %, efficiency %, fabric consumption
#
# Percentages are rounded on exact fractions (half-to-even), so for any job with
# at least one sheet efficiency + waste_percentage == 100.

from __future__ import annotations

from fractions import Fraction
from typing import Iterable, List

from .types import JobStatistics, PanelRequest, Sheet, StockSpec


def percent(part: int, whole: int) -> int:
    """round(part / whole * 100) on exact arithmetic; 0 for an empty whole."""
    if whole <= 0:
        return 0
    return round(Fraction(part * 100, whole))


def update_sheet_metrics(sheet: Sheet) -> None:
    """
    Recompute used/wasted area and efficiency from the sheet's placements (in-place).
    Keeps used_area + wasted_area == stock area.
    """
    used = 0
    for pl in sheet.placements:
        used += pl.area
    total = sheet.total_area
    if used > total:
        # Overlaps could cause this too, but should be prevented upstream.
        raise ValueError(f"Sheet {sheet.sheet_id}: used area {used} > stock area {total}")
    sheet.used_area = used
    sheet.wasted_area = total - used
    sheet.efficiency = percent(used, total)


def compute_total_cut_length(sheets: Iterable[Sheet]) -> int:
    """Sum of placed panel perimeters (every panel edge is cut once per panel)."""
    total = 0
    for sheet in sheets:
        for pl in sheet.placements:
            total += 2 * pl.width + 2 * pl.length
    return total


def compute_job_statistics(
    stock: StockSpec,
    sheets: List[Sheet],
    requests: Iterable[PanelRequest],
) -> JobStatistics:
    """
    Aggregate metrics across sheets of one job.
    total_panels counts requested quantities (before any panel was dropped).
    """
    total_stock_area = len(sheets) * stock.area
    total_used = sum(s.used_area for s in sheets)
    total_wasted = total_stock_area - total_used

    return JobStatistics(
        used_stock_sheets=len(sheets),
        stock_dimensions=stock.label(),
        total_used_area=total_used,
        total_wasted_area=total_wasted,
        waste_percentage=percent(total_wasted, total_stock_area),
        efficiency=percent(total_used, total_stock_area),
        total_cuts=sum(len(s.placements) for s in sheets),
        total_panels=sum(r.qty for r in requests),
        total_fabric_needed=len(sheets) * stock.stock_length,
        total_cut_length=compute_total_cut_length(sheets),
    )

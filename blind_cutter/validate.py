# blind_cutter/validate.py
# Validation utilities:
# - check placements fit within the stock sheet
# - check no-overlap per sheet
# - check area bookkeeping (used + wasted == stock area) and job statistics
#
# Useful both during development and to sanity-check packer output.

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .types import PackResult, Sheet, check_no_overlap


@dataclass(frozen=True)
class ValidationIssue:
    level: str   # "ERROR" or "WARN"
    message: str
    sheet_id: Optional[int] = None
    uid: Optional[str] = None


def validate_sheet(sheet: Sheet) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    W, L = sheet.stock_width, sheet.stock_length

    for pl in sheet.placements:
        if pl.width <= 0 or pl.length <= 0:
            issues.append(
                ValidationIssue("ERROR", f"Non-positive size {pl.width}x{pl.length}", sheet.sheet_id, pl.uid)
            )
        if pl.x < 0 or pl.y < 0 or pl.right() > W or pl.bottom() > L:
            issues.append(
                ValidationIssue(
                    "ERROR",
                    f"Placement out of stock bounds: x={pl.x}, y={pl.y}, "
                    f"w={pl.width}, l={pl.length}, stock={W}x{L}",
                    sheet.sheet_id,
                    pl.uid,
                )
            )

    for r in sheet.free_rects:
        if r.width <= 0 or r.length <= 0 or r.right() > W or r.bottom() > L:
            issues.append(ValidationIssue("ERROR", f"Invalid free rectangle {r}", sheet.sheet_id))

    if sheet.used_area + sheet.wasted_area != sheet.total_area:
        issues.append(
            ValidationIssue(
                "ERROR",
                f"Area mismatch: used {sheet.used_area} + wasted {sheet.wasted_area} != {sheet.total_area}",
                sheet.sheet_id,
            )
        )

    try:
        check_no_overlap([sheet])
    except ValueError as e:
        issues.append(ValidationIssue("ERROR", str(e), sheet.sheet_id))

    return issues


def validate_pack_result(res: PackResult) -> List[ValidationIssue]:
    """
    Validate all sheets and the job statistics.
    Returns a list of issues (empty if OK). Dropped panels are a WARN here:
    whether they are fatal is the caller's decision.
    """
    issues: List[ValidationIssue] = []
    for sheet in res.sheets:
        issues.extend(validate_sheet(sheet))

    st = res.statistics
    if st.total_fabric_needed != len(res.sheets) * res.stock.stock_length:
        issues.append(ValidationIssue("ERROR", "total_fabric_needed != sheets * stock_length"))
    if res.sheets and st.efficiency + st.waste_percentage != 100:
        issues.append(
            ValidationIssue("ERROR", f"efficiency {st.efficiency} + waste {st.waste_percentage} != 100")
        )
    if st.total_cuts != len(res.cuts):
        issues.append(ValidationIssue("ERROR", f"{len(res.cuts)} cut entries for {st.total_cuts} placements"))
    if st.total_cuts < st.total_panels:
        issues.append(
            ValidationIssue("WARN", f"{st.total_panels - st.total_cuts} of {st.total_panels} panels not placed")
        )
    return issues


def raise_on_errors(issues: List[ValidationIssue]) -> None:
    errs = [i for i in issues if i.level.upper() == "ERROR"]
    if errs:
        msg = "\n".join(f"[{e.level}] sheet={e.sheet_id} panel={e.uid} :: {e.message}" for e in errs)
        raise ValueError("Validation failed:\n" + msg)

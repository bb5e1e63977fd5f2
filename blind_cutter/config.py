# blind_cutter/config.py
# Centralized defaults and configuration helpers.
# Keeps "magic numbers" (roll width, bar stock length, fabrication allowances) in one place.

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from .types import StockSpec


@dataclass(frozen=True)
class Defaults:
    # Fabric roll width is fixed for roller blinds; length depends on the roll in stock
    stock_width: int = 3000
    default_stock_length: int = 10000
    # Hard cap on the length of a single sheet, whatever the roll holds
    max_stock_length: int = 10000

    # Fabric is cut with a knife; no kerf by default (mm)
    default_kerf: int = 0
    max_kerf: int = 50

    # Bottom-rail bar stock (supplier length, mm) and cutting/defect buffer
    bar_stock_length: int = 5800
    bar_wastage_rate: float = 0.10

    # Ordered blind -> fabrication panel
    width_deduction: int = 28
    drop_allowance: int = 150
    tube_deduction: int = 28

    # Ceilings against pathological inputs
    max_unit_panels: int = 5000
    max_free_rects: int = 20000


DEFAULTS = Defaults()


# Fabric cut width deduction per control (mm). Unknown controls use Defaults.width_deduction.
MOTOR_WIDTH_DEDUCTIONS: Dict[str, int] = {
    # Winders
    "Acmeda winder-29mm": 28,
    "TBS winder-32mm": 28,
    # Automate motors
    "Automate 1.1NM Li-Ion Quiet Motor": 29,
    "Automate 0.7NM Li-Ion Quiet Motor": 29,
    "Automate 2NM Li-Ion Quiet Motor": 29,
    "Automate 3NM Li-Ion Motor": 29,
    "Automate E6 6NM Motor": 29,
    # Alpha battery motors
    "Alpha 1NM Battery Motor": 30,
    "Alpha 2NM Battery Motor": 30,
    "Alpha 3NM Battery Motor": 30,
    # Alpha AC motors
    "Alpha AC 3NM Motor": 35,
    "Alpha AC 5NM Motor": 35,
}


def make_default_stock(
    *,
    stock_width: Optional[int] = None,
    stock_length: Optional[int] = None,
    kerf: Optional[int] = None,
) -> StockSpec:
    """
    Convenience factory for a standard fabric roll sheet.
    """
    return StockSpec(
        stock_width=int(stock_width if stock_width is not None else DEFAULTS.stock_width),
        stock_length=int(stock_length if stock_length is not None else DEFAULTS.default_stock_length),
        kerf=int(kerf if kerf is not None else DEFAULTS.default_kerf),
    )


def capped_stock_length(available: Optional[int]) -> int:
    """
    Sheet length for a fabric group: available roll length capped at max_stock_length.
    A missing or non-positive roll length falls back to the default length.
    """
    if available is None or available <= 0:
        return DEFAULTS.default_stock_length
    return min(int(available), DEFAULTS.max_stock_length)


def int_in_range(v: float | int, lo: int, hi: int, name: str = "value") -> int:
    """Round to int and check lo <= x <= hi; out-of-range values raise instead of being clamped."""
    x = int(round(float(v)))
    if x < lo or x > hi:
        raise ValueError(f"{name} must be within {lo}..{hi}, got {v}")
    return x


# blind_cutter/linear_stock.py
# Bottom-rail (bar) stock aggregation.
#
# Bars are not nested individually: all bars sharing (type, colour) are summed by
# their ORIGINAL ordered width, divided by the supplier stock length, a flat 10%
# wastage buffer is added, and the result is rounded UP to whole stock pieces.
# The buffer is always applied, so an exact 5800 mm still needs ceil(1.1) = 2 pieces.
#
# Quantities are computed on exact fractions; the float fields on BarGroup are
# rounded to 3 decimals for display only and never feed pieces_to_deduct.

from __future__ import annotations

import math
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Any, Dict, Iterable, List, Tuple

from .config import DEFAULTS


@dataclass(frozen=True)
class BarItem:
    location: str
    original_width: int
    bar_type: str
    bar_colour: str
    ref: Any = None

    def __post_init__(self):
        if self.original_width < 0:
            raise ValueError(f"original_width must be >= 0 for {self.location}: {self.original_width}")

    @property
    def key(self) -> Tuple[str, str]:
        return (self.bar_type, self.bar_colour)


@dataclass(frozen=True)
class BarGroup:
    bar_type: str
    bar_colour: str
    items: List[BarItem]
    total_width: int
    base_quantity: float     # display value, 3 decimals
    wastage: float           # display value, 3 decimals
    final_quantity: float    # display value, 3 decimals
    pieces_to_deduct: int
    stock_length: int

    @property
    def key(self) -> Tuple[str, str]:
        return (self.bar_type, self.bar_colour)

    def item_key(self) -> str:
        return f"{self.bar_type} - {self.bar_colour}"


@dataclass(frozen=True)
class LinearStockResult:
    groups: List[BarGroup] = field(default_factory=list)
    total_pieces_needed: int = 0


def _display(q: Fraction) -> float:
    return round(float(q), 3)


def pieces_needed(total_width: int, stock_length: int, wastage_rate: Fraction) -> Tuple[Fraction, Fraction, Fraction, int]:
    """
    Returns (base, wastage, final, pieces) for one group; exact values.
    """
    base = Fraction(total_width, stock_length)
    wastage = base * wastage_rate
    final = base + wastage
    return base, wastage, final, math.ceil(final)


def group_bars(items: Iterable[BarItem]) -> Dict[Tuple[str, str], List[BarItem]]:
    """Exact-match grouping on (type, colour); keys keep first-seen order."""
    groups: Dict[Tuple[str, str], List[BarItem]] = {}
    for it in items:
        groups.setdefault(it.key, []).append(it)
    return groups


def aggregate_bars(items: Iterable[BarItem]) -> LinearStockResult:
    """
    One BarGroup per distinct (bar_type, bar_colour) with non-zero total width,
    plus the grand total of stock pieces.
    """
    stock_length = DEFAULTS.bar_stock_length
    # exact decimal reading of the configured rate (0.10 -> 1/10)
    rate = Fraction(str(DEFAULTS.bar_wastage_rate))

    out: List[BarGroup] = []
    total_pieces = 0

    for (bar_type, bar_colour), members in group_bars(items).items():
        total_width = sum(m.original_width for m in members)
        if total_width == 0:
            continue

        base, wastage, final, pieces = pieces_needed(total_width, stock_length, rate)

        out.append(
            BarGroup(
                bar_type=bar_type,
                bar_colour=bar_colour,
                items=list(members),
                total_width=total_width,
                base_quantity=_display(base),
                wastage=_display(wastage),
                final_quantity=_display(final),
                pieces_to_deduct=pieces,
                stock_length=stock_length,
            )
        )
        total_pieces += pieces

    return LinearStockResult(groups=out, total_pieces_needed=total_pieces)

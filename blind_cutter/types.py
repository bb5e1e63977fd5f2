# blind_cutter/types.py
# Core data structures for fabric panel cutting (guillotine, first-fit decreasing).
# Keep this file dependency-light so it can be imported everywhere.

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Tuple


# ----------------------------
# Inputs
# ----------------------------

@dataclass(frozen=True)
class StockSpec:
    """Stock sheet (one length of fabric roll) in millimeters."""
    stock_width: int
    stock_length: int
    kerf: int = 0

    def __post_init__(self):
        if self.stock_width <= 0 or self.stock_length <= 0:
            raise ValueError(f"Invalid stock size: {self.stock_width}x{self.stock_length}")
        if self.kerf < 0:
            raise ValueError(f"kerf must be >= 0, got {self.kerf}")

    @property
    def area(self) -> int:
        return self.stock_width * self.stock_length

    def label(self) -> str:
        return f"{self.stock_width}x{self.stock_length}"


@dataclass(frozen=True)
class PanelRequest:
    """A requested fabric panel (fabrication dimensions) with quantity."""
    width: int
    length: int
    qty: int = 1
    label: str = ""

    # Ordered (pre-fabrication) dimensions, kept for reporting only
    original_width: Optional[int] = None
    original_drop: Optional[int] = None

    # Opaque caller reference (order item id); never interpreted
    ref: Any = None

    def __post_init__(self):
        if self.width <= 0 or self.length <= 0:
            raise ValueError(f"Invalid panel size for {self.display_label()}: {self.width}x{self.length}")
        if self.qty <= 0:
            raise ValueError(f"qty must be >= 1 for {self.display_label()}")

    def display_label(self) -> str:
        return self.label or f"{self.width}x{self.length}"


@dataclass(frozen=True)
class UnitPanel:
    """A single panel instance (expanded from qty)."""
    uid: str              # unique id, e.g. "0-2" (request index - instance)
    width: int
    length: int
    label: str
    source_index: int
    rotated: bool = False
    original_width: Optional[int] = None
    original_drop: Optional[int] = None
    ref: Any = None

    @property
    def area(self) -> int:
        return self.width * self.length


def expand_panels(requests: Iterable[PanelRequest]) -> List[UnitPanel]:
    """Expand qty into unit panels (stable order)."""
    out: List[UnitPanel] = []
    for idx, req in enumerate(requests):
        for k in range(req.qty):
            out.append(
                UnitPanel(
                    uid=f"{idx}-{k}",
                    width=req.width,
                    length=req.length,
                    label=req.display_label(),
                    source_index=idx,
                    original_width=req.original_width,
                    original_drop=req.original_drop,
                    ref=req.ref,
                )
            )
    return out


def sort_panels(panels: Iterable[UnitPanel]) -> List[UnitPanel]:
    """
    First-fit-decreasing order: largest area first, ties by longest side.
    sorted() is stable, so equal panels keep their expansion order.
    """
    return sorted(panels, key=lambda p: (p.area, max(p.width, p.length)), reverse=True)


# ----------------------------
# Sheet state / outputs
# ----------------------------

@dataclass(frozen=True)
class FreeRect:
    """Available region of a sheet; origin top-left, y runs along the roll."""
    x: int
    y: int
    width: int
    length: int

    def right(self) -> int:
        return self.x + self.width

    def bottom(self) -> int:
        return self.y + self.length

    def contains(self, other: "FreeRect") -> bool:
        return (
            other.x >= self.x
            and other.y >= self.y
            and other.right() <= self.right()
            and other.bottom() <= self.bottom()
        )

    def fits(self, width: int, length: int, kerf: int = 0) -> bool:
        return width + kerf <= self.width and length + kerf <= self.length


@dataclass(frozen=True)
class PlacedPanel:
    """Panel placed on a sheet; width/length are the on-sheet (possibly rotated) size."""
    x: int
    y: int
    width: int
    length: int
    rotated: bool
    uid: str
    label: str
    ref: Any = None
    original_width: Optional[int] = None
    original_drop: Optional[int] = None

    @property
    def area(self) -> int:
        return self.width * self.length

    def right(self) -> int:
        return self.x + self.width

    def bottom(self) -> int:
        return self.y + self.length


@dataclass
class Sheet:
    """One opened stock sheet: placements in insertion order + running area totals."""
    sheet_id: int
    stock_width: int
    stock_length: int
    placements: List[PlacedPanel] = field(default_factory=list)
    free_rects: List[FreeRect] = field(default_factory=list)
    used_area: int = 0
    wasted_area: int = 0
    efficiency: int = 0

    def __post_init__(self):
        if not self.free_rects and not self.placements:
            self.free_rects = [FreeRect(0, 0, self.stock_width, self.stock_length)]
        self.wasted_area = self.total_area - self.used_area

    @property
    def total_area(self) -> int:
        return self.stock_width * self.stock_length


@dataclass(frozen=True)
class CutEntry:
    """One numbered line of the cut list."""
    cut_number: int
    sheet_id: int
    x: int
    y: int
    width: int
    length: int
    rotated: bool
    label: str
    ref: Any = None


@dataclass(frozen=True)
class JobStatistics:
    used_stock_sheets: int
    stock_dimensions: str
    total_used_area: int
    total_wasted_area: int
    waste_percentage: int
    efficiency: int
    total_cuts: int
    total_panels: int
    total_fabric_needed: int   # mm of roll consumed (whole sheets)
    total_cut_length: int

    @property
    def dropped_panels(self) -> int:
        return self.total_panels - self.total_cuts


@dataclass
class PackResult:
    """Full packing result for one job (one fabric group)."""
    stock: StockSpec
    sheets: List[Sheet]
    statistics: JobStatistics
    cuts: List[CutEntry]
    unplaced: List[UnitPanel] = field(default_factory=list)

    def num_sheets(self) -> int:
        return len(self.sheets)

    @property
    def all_placed(self) -> bool:
        return not self.unplaced and self.statistics.total_cuts == self.statistics.total_panels


# ----------------------------
# Helper utilities
# ----------------------------

def effective_dims(panel: UnitPanel, rotated: bool) -> Tuple[int, int]:
    if rotated:
        return panel.length, panel.width
    return panel.width, panel.length


def check_no_overlap(sheets: List[Sheet]) -> None:
    """
    Simple validator: raise if any two placements on the same sheet overlap.
    This is useful for unit tests and sanity checks.
    """
    for sheet in sheets:
        pls = sheet.placements
        for i in range(len(pls)):
            a = pls[i]
            for j in range(i + 1, len(pls)):
                b = pls[j]
                # overlap if rectangles intersect with positive area
                if a.x < b.right() and a.right() > b.x and a.y < b.bottom() and a.bottom() > b.y:
                    raise ValueError(
                        f"Overlap on sheet {sheet.sheet_id}: {a.uid} ({a.x},{a.y},{a.right()},{a.bottom()}) "
                        f"with {b.uid} ({b.x},{b.y},{b.right()},{b.bottom()})"
                    )

# blind_cutter/results.py
# Result objects of one order optimization run.
#
# Fabric and bar results are explicit tagged types (kind = "fabric" / "bar") so the
# persisted payload can be read back without guessing its shape. The payload carries
# RESULT_SCHEMA_VERSION; bump it when a field changes meaning.

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, List, Optional, Tuple, Union

from .linear_stock import BarGroup, LinearStockResult
from .types import PackResult

RESULT_SCHEMA_VERSION = 1

CATEGORY_FABRIC = "FABRIC"
CATEGORY_BOTTOM_BAR = "BOTTOM_BAR"


class UnfulfillableOrderError(ValueError):
    """Some panels could not be placed on the available stock."""


@dataclass(frozen=True)
class FabricKey:
    material: str
    fabric_type: str
    fabric_colour: str

    def as_tuple(self) -> Tuple[str, str, str]:
        return (self.material, self.fabric_type, self.fabric_colour)

    def text(self) -> str:
        return " | ".join(self.as_tuple())


@dataclass(frozen=True)
class FabricGroupResult:
    kind: ClassVar[str] = "fabric"

    key: FabricKey
    stock_length: int              # sheet length used for this group (capped roll length)
    available_length: Optional[int]
    pack: PackResult
    refs: List[Any] = field(default_factory=list)

    @property
    def fabric_needed(self) -> int:
        return self.pack.statistics.total_fabric_needed


@dataclass(frozen=True)
class BarGroupResult:
    kind: ClassVar[str] = "bar"

    group: BarGroup

    @property
    def pieces_to_deduct(self) -> int:
        return self.group.pieces_to_deduct


GroupResult = Union[FabricGroupResult, BarGroupResult]


@dataclass(frozen=True)
class InventoryRequirement:
    category: str
    item_key: str
    quantity_needed: int   # mm for fabric, whole pieces for bars


@dataclass(frozen=True)
class AvailabilityResult:
    requirement: InventoryRequirement
    available: int
    sufficient: bool


@dataclass
class OrderOptimization:
    order_id: str
    fabric_groups: List[FabricGroupResult]
    bars: LinearStockResult
    requirements: List[InventoryRequirement]
    availability: List[AvailabilityResult] = field(default_factory=list)
    duplicate_refs: List[Any] = field(default_factory=list)
    schema_version: int = RESULT_SCHEMA_VERSION

    @property
    def groups(self) -> List[GroupResult]:
        """All results, fabric first, in one tagged list."""
        out: List[GroupResult] = list(self.fabric_groups)
        out.extend(BarGroupResult(group=g) for g in self.bars.groups)
        return out

    @property
    def total_panels(self) -> int:
        return sum(g.pack.statistics.total_panels for g in self.fabric_groups)

    @property
    def total_cuts(self) -> int:
        return sum(g.pack.statistics.total_cuts for g in self.fabric_groups)

    @property
    def fulfillable(self) -> bool:
        return self.total_cuts == self.total_panels

    @property
    def stock_sufficient(self) -> bool:
        return all(a.sufficient for a in self.availability)

    def ensure_fulfillable(self) -> None:
        if self.fulfillable:
            return
        dropped = []
        for g in self.fabric_groups:
            for p in g.pack.unplaced:
                dropped.append(f"{g.key.text()}: {p.label} {p.width}x{p.length}")
        raise UnfulfillableOrderError(
            f"Order {self.order_id}: {self.total_panels - self.total_cuts} panel(s) do not fit the stock:\n"
            + "\n".join(dropped)
        )

# blind_cutter/orchestrator.py
# Order-level optimization:
# - group fabric line items by (material, fabric type, colour); one packing job per group
# - per group: sheet length = available roll length capped at 10 m, width fixed at 3 m
# - ordered sizes -> fabric panel sizes via FabricationPolicy (originals kept on placements)
# - one bar aggregation over all items that carry a bottom rail type + colour
# - inventory requirements (fabric mm per group, bar pieces per group) -> availability checker
#
# Async only at the edges: roll lookups are awaited BEFORE the synchronous packing core,
# availability + persistence AFTER it. Runs share nothing, so several orders can be
# optimized concurrently (optimize_orders).

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

from .config import DEFAULTS, capped_stock_length, make_default_stock
from .fabrication import FabricationPolicy
from .linear_stock import BarItem, LinearStockResult, aggregate_bars
from .logger import get_logger
from .results import (
    CATEGORY_BOTTOM_BAR,
    CATEGORY_FABRIC,
    AvailabilityResult,
    FabricGroupResult,
    FabricKey,
    InventoryRequirement,
    OrderOptimization,
)
from .solver_guillotine import PackerParams, solve_guillotine
from .types import PanelRequest
from .utils import order_result_to_dict


@dataclass(frozen=True)
class LineItem:
    """One blind of an order (ordered, pre-fabrication dimensions)."""
    ref: Any
    location: str
    width: int
    drop: int
    qty: int = 1
    material: str = ""
    fabric_type: str = ""
    fabric_colour: str = ""
    chain_or_motor: Optional[str] = None
    bottom_rail_type: Optional[str] = None
    bottom_rail_colour: Optional[str] = None

    def __post_init__(self):
        if self.width <= 0 or self.drop <= 0:
            raise ValueError(f"Invalid blind size for {self.location}: {self.width}x{self.drop}")
        if self.qty <= 0:
            raise ValueError(f"qty must be >= 1 for {self.location}")
        # every blind is cut from a roll
        if not self.fabric_type.strip():
            raise ValueError(f"Missing fabric type for {self.location}")

    @property
    def fabric_key(self) -> FabricKey:
        return FabricKey(self.material, self.fabric_type, self.fabric_colour)

    @property
    def has_bar(self) -> bool:
        return bool(self.bottom_rail_type) and bool(self.bottom_rail_colour)


# ----------------------------
# Collaborators (implemented outside the core)
# ----------------------------

class RollLengthLookup(Protocol):
    async def __call__(self, key: FabricKey) -> Optional[int]: ...


class AvailabilityChecker(Protocol):
    async def __call__(self, requirements: Sequence[InventoryRequirement]) -> List[AvailabilityResult]: ...


class PersistenceSink(Protocol):
    async def __call__(self, payload: Dict[str, Any]) -> None: ...


# ----------------------------
# Pure helpers
# ----------------------------

def group_fabric_items(items: Iterable[LineItem]) -> Dict[FabricKey, List[LineItem]]:
    """Exact-match grouping on fabric identity; first-seen order."""
    groups: Dict[FabricKey, List[LineItem]] = {}
    for it in items:
        groups.setdefault(it.fabric_key, []).append(it)
    return groups


def build_panel_requests(items: Iterable[LineItem], policy: FabricationPolicy) -> List[PanelRequest]:
    out: List[PanelRequest] = []
    for it in items:
        out.append(
            PanelRequest(
                width=policy.fabric_width(it.width, it.chain_or_motor),
                length=policy.fabric_length(it.drop),
                qty=it.qty,
                label=it.location or f"{it.width}x{it.drop}",
                original_width=it.width,
                original_drop=it.drop,
                ref=it.ref,
            )
        )
    return out


def build_bar_items(items: Iterable[LineItem]) -> List[BarItem]:
    """One bar per blind (qty expanded), measured by the ordered width."""
    out: List[BarItem] = []
    for it in items:
        if not it.has_bar:
            continue
        for _ in range(it.qty):
            out.append(
                BarItem(
                    location=it.location,
                    original_width=it.width,
                    bar_type=str(it.bottom_rail_type),
                    bar_colour=str(it.bottom_rail_colour),
                    ref=it.ref,
                )
            )
    return out


def detect_duplicate_fabrics(items: Iterable[LineItem]) -> List[Any]:
    """
    Refs of items whose (fabric type, colour) pair, case-insensitive, appears on
    more than one line of the order.
    """
    seen: Dict[Tuple[str, str], List[Any]] = {}
    for it in items:
        seen.setdefault((it.fabric_type.lower(), it.fabric_colour.lower()), []).append(it.ref)
    out: List[Any] = []
    for refs in seen.values():
        if len(refs) > 1:
            out.extend(refs)
    return out


def build_requirements(
    fabric_groups: Iterable[FabricGroupResult],
    bars: LinearStockResult,
) -> List[InventoryRequirement]:
    reqs: List[InventoryRequirement] = []
    for fg in fabric_groups:
        reqs.append(
            InventoryRequirement(
                category=CATEGORY_FABRIC,
                item_key=fg.key.text(),
                quantity_needed=fg.fabric_needed,
            )
        )
    for bg in bars.groups:
        reqs.append(
            InventoryRequirement(
                category=CATEGORY_BOTTOM_BAR,
                item_key=bg.item_key(),
                quantity_needed=bg.pieces_to_deduct,
            )
        )
    return reqs


# ----------------------------
# Orchestrator
# ----------------------------

class OptimizationOrchestrator:
    def __init__(
        self,
        roll_lookup: RollLengthLookup,
        availability_checker: Optional[AvailabilityChecker] = None,
        persistence_sink: Optional[PersistenceSink] = None,
        *,
        policy: Optional[FabricationPolicy] = None,
        stock_width: int = DEFAULTS.stock_width,
        kerf: int = DEFAULTS.default_kerf,
        packer_params: Optional[PackerParams] = None,
    ) -> None:
        self.roll_lookup = roll_lookup
        self.availability_checker = availability_checker
        self.persistence_sink = persistence_sink
        self.policy = policy or FabricationPolicy()
        self.stock_width = int(stock_width)
        self.kerf = int(kerf)
        self.packer_params = packer_params or PackerParams()

    def run_core(
        self,
        order_id: str,
        items: Sequence[LineItem],
        roll_lengths: Dict[FabricKey, Optional[int]],
    ) -> OrderOptimization:
        """
        Synchronous part: pack every fabric group, aggregate bars, build requirements.
        No I/O; roll_lengths must already be resolved.
        """
        log = get_logger()
        fabric_groups: List[FabricGroupResult] = []

        for key, members in group_fabric_items(items).items():
            available = roll_lengths.get(key)
            if available is None or available <= 0:
                log.warn(f"No roll length for {key.text()}; using {DEFAULTS.default_stock_length} mm")
            stock = make_default_stock(
                stock_width=self.stock_width,
                stock_length=capped_stock_length(available),
                kerf=self.kerf,
            )
            pack = solve_guillotine(stock, build_panel_requests(members, self.policy), params=self.packer_params)
            st = pack.statistics
            log.info(
                f"{order_id} {key.text()}: {st.total_cuts}/{st.total_panels} panels on "
                f"{st.used_stock_sheets} sheet(s) {st.stock_dimensions}, efficiency {st.efficiency}%"
            )
            fabric_groups.append(
                FabricGroupResult(
                    key=key,
                    stock_length=stock.stock_length,
                    available_length=available,
                    pack=pack,
                    refs=[m.ref for m in members],
                )
            )

        bars = aggregate_bars(build_bar_items(items))
        if bars.groups:
            log.info(f"{order_id} bars: {len(bars.groups)} group(s), {bars.total_pieces_needed} piece(s)")

        result = OrderOptimization(
            order_id=order_id,
            fabric_groups=fabric_groups,
            bars=bars,
            requirements=build_requirements(fabric_groups, bars),
            duplicate_refs=detect_duplicate_fabrics(items),
        )
        if not result.fulfillable:
            log.error(
                f"{order_id}: only {result.total_cuts} of {result.total_panels} panels fit the stock; "
                f"a larger stock configuration is needed"
            )
        return result

    async def _lookup_rolls(self, items: Sequence[LineItem]) -> Dict[FabricKey, Optional[int]]:
        keys = list(group_fabric_items(items).keys())
        lengths = await asyncio.gather(*(self.roll_lookup(k) for k in keys))
        return dict(zip(keys, lengths))

    async def optimize(self, order_id: str, items: Sequence[LineItem]) -> OrderOptimization:
        roll_lengths = await self._lookup_rolls(items)

        result = self.run_core(order_id, items, roll_lengths)

        if self.availability_checker is not None:
            result.availability = list(await self.availability_checker(result.requirements))
            short = [a for a in result.availability if not a.sufficient]
            for a in short:
                get_logger().warn(
                    f"{order_id}: insufficient {a.requirement.category} '{a.requirement.item_key}': "
                    f"need {a.requirement.quantity_needed}, have {a.available}"
                )

        if self.persistence_sink is not None:
            await self.persistence_sink(order_result_to_dict(result))

        return result

    async def optimize_orders(self, orders: Dict[str, Sequence[LineItem]]) -> List[OrderOptimization]:
        """Independent runs, one per order, awaited together."""
        return list(await asyncio.gather(*(self.optimize(oid, items) for oid, items in orders.items())))

# blind_cutter/test_orchestrator.py
# Order-level tests: fabric grouping, roll-length capping, fabrication sizes,
# inventory requirements and the persisted payload.

from __future__ import annotations

import asyncio

import pytest

from blind_cutter.fabrication import FabricationPolicy
from blind_cutter.inventory import InMemoryInventory
from blind_cutter.orchestrator import LineItem, OptimizationOrchestrator, detect_duplicate_fabrics
from blind_cutter.results import CATEGORY_BOTTOM_BAR, CATEGORY_FABRIC, FabricKey, UnfulfillableOrderError

VISTA = "Blockout | Vista | White"


def _item(ref, width, drop, **kw):
    base = dict(
        location=f"Room {ref}",
        material="Blockout",
        fabric_type="Vista",
        fabric_colour="White",
        bottom_rail_type="D30",
        bottom_rail_colour="Anodised",
    )
    base.update(kw)
    return LineItem(ref=ref, width=width, drop=drop, **base)


def _inventory(rolls=None, fabric=30000, bars=4):
    return InMemoryInventory(
        rolls={VISTA: 25000} if rolls is None else rolls,
        stock={CATEGORY_FABRIC: {VISTA: fabric}, CATEGORY_BOTTOM_BAR: {"D30 - Anodised": bars}},
    )


def test_single_group_end_to_end() -> None:
    inv = _inventory()
    payloads = []

    async def sink(payload):
        payloads.append(payload)

    orch = OptimizationOrchestrator(inv.roll_length, inv.check, sink)
    res = asyncio.run(orch.optimize("SO-1", [_item(1, 1500, 2100), _item(2, 1500, 2100)]))

    assert len(res.fabric_groups) == 1
    fg = res.fabric_groups[0]
    assert fg.key == FabricKey("Blockout", "Vista", "White")
    # roll of 25 m is capped to a 10 m sheet; width is fixed
    assert fg.available_length == 25000
    assert fg.stock_length == 10000
    assert fg.pack.stock.stock_width == 3000
    assert fg.pack.num_sheets() == 1
    assert fg.fabric_needed == 10000
    assert fg.refs == [1, 2]

    placements = fg.pack.sheets[0].placements
    assert [(pl.width, pl.length) for pl in placements] == [(1472, 2250), (1472, 2250)]
    assert [(pl.original_width, pl.original_drop) for pl in placements] == [(1500, 2100), (1500, 2100)]
    assert sorted(pl.ref for pl in placements) == [1, 2]

    assert [(r.category, r.item_key, r.quantity_needed) for r in res.requirements] == [
        (CATEGORY_FABRIC, VISTA, 10000),
        (CATEGORY_BOTTOM_BAR, "D30 - Anodised", 1),
    ]
    assert [a.sufficient for a in res.availability] == [True, True]
    assert res.stock_sufficient
    assert res.fulfillable

    assert len(payloads) == 1
    payload = payloads[0]
    assert payload["schema_version"] == 1
    assert payload["order_id"] == "SO-1"
    assert [g["kind"] for g in payload["groups"]] == ["fabric", "bar"]
    assert payload["groups"][1]["items"][0]["tube_cut_width"] == 1472
    assert payload["totals"]["fulfillable"] is True


def test_short_roll_sets_sheet_length() -> None:
    inv = _inventory(rolls={VISTA: 6000})
    res = asyncio.run(OptimizationOrchestrator(inv.roll_length).optimize("SO-2", [_item(1, 1500, 2100)]))
    fg = res.fabric_groups[0]
    assert fg.stock_length == 6000
    assert fg.fabric_needed == 6000
    assert res.availability == []


def test_missing_roll_falls_back_to_default_length() -> None:
    inv = _inventory(rolls={})
    res = asyncio.run(OptimizationOrchestrator(inv.roll_length).optimize("SO-3", [_item(1, 1500, 2100)]))
    fg = res.fabric_groups[0]
    assert fg.available_length is None
    assert fg.stock_length == 10000


def test_groups_split_by_fabric_identity() -> None:
    items = [
        _item(1, 1500, 2100),
        _item(2, 1200, 1800, fabric_colour="Grey"),
        _item(3, 900, 1500, material="Screen"),
        _item(4, 1000, 1000, bottom_rail_type=None),
    ]
    inv = _inventory(rolls={VISTA: 9000})
    res = asyncio.run(OptimizationOrchestrator(inv.roll_length, inv.check).optimize("SO-4", items))

    assert [fg.key.text() for fg in res.fabric_groups] == [
        VISTA,
        "Blockout | Vista | Grey",
        "Screen | Vista | White",
    ]
    assert [fg.refs for fg in res.fabric_groups] == [[1, 4], [2], [3]]
    assert [fg.stock_length for fg in res.fabric_groups] == [9000, 10000, 10000]

    # bars span all fabric groups; item 4 has no rail
    assert len(res.bars.groups) == 1
    assert [it.ref for it in res.bars.groups[0].items] == [1, 2, 3]
    assert res.bars.groups[0].total_width == 1500 + 1200 + 900

    # unknown stock counts as zero on hand
    short = [a for a in res.availability if not a.sufficient]
    assert [a.requirement.item_key for a in short] == ["Blockout | Vista | Grey", "Screen | Vista | White"]


def test_insufficient_stock_is_reported() -> None:
    inv = _inventory(fabric=5000, bars=0)
    res = asyncio.run(OptimizationOrchestrator(inv.roll_length, inv.check).optimize("SO-5", [_item(1, 1500, 2100)]))
    assert [(a.available, a.sufficient) for a in res.availability] == [(5000, False), (0, False)]
    assert not res.stock_sufficient


def test_unfulfillable_order() -> None:
    inv = _inventory(rolls={VISTA: 4000})
    items = [_item(1, 1500, 4000), _item(2, 1500, 2000)]
    res = asyncio.run(OptimizationOrchestrator(inv.roll_length).optimize("SO-6", items))

    fg = res.fabric_groups[0]
    assert res.total_panels == 2
    assert res.total_cuts == 1
    assert not res.fulfillable
    assert [p.ref for p in fg.pack.unplaced] == [1]
    with pytest.raises(UnfulfillableOrderError):
        res.ensure_fulfillable()


def test_qty_expands_panels_and_bars() -> None:
    inv = _inventory()
    res = asyncio.run(OptimizationOrchestrator(inv.roll_length).optimize("SO-7", [_item(1, 1000, 1000, qty=3)]))
    assert res.total_panels == 3
    assert res.total_cuts == 3
    assert res.bars.groups[0].total_width == 3000
    assert len(res.bars.groups[0].items) == 3


def test_motor_table_changes_width() -> None:
    inv = _inventory()
    orch = OptimizationOrchestrator(inv.roll_length, policy=FabricationPolicy.with_motor_table())
    items = [_item(1, 1500, 2100, chain_or_motor="Alpha AC 5NM Motor"), _item(2, 1500, 2100, chain_or_motor="Chain")]
    res = asyncio.run(orch.optimize("SO-8", items))
    widths = {pl.ref: pl.width for sh in res.fabric_groups[0].pack.sheets for pl in sh.placements}
    assert widths == {1: 1465, 2: 1472}


def test_duplicate_fabrics() -> None:
    items = [
        _item(1, 1500, 2100),
        _item(2, 1500, 2100, material="Screen", fabric_type="vista", fabric_colour="WHITE"),
        _item(3, 1500, 2100, fabric_colour="Grey"),
    ]
    assert detect_duplicate_fabrics(items) == [1, 2]

    inv = _inventory()
    res = asyncio.run(OptimizationOrchestrator(inv.roll_length).optimize("SO-9", items))
    assert res.duplicate_refs == [1, 2]


def test_tagged_groups() -> None:
    inv = _inventory()
    res = asyncio.run(OptimizationOrchestrator(inv.roll_length).optimize("SO-10", [_item(1, 1500, 2100)]))
    assert [g.kind for g in res.groups] == ["fabric", "bar"]
    assert res.groups[1].pieces_to_deduct == 1


def test_optimize_orders_runs_independently() -> None:
    inv = _inventory()
    orch = OptimizationOrchestrator(inv.roll_length, inv.check)
    orders = {
        "A": [_item(1, 1500, 2100)],
        "B": [_item(1, 2500, 2900, qty=2)],
    }
    results = asyncio.run(orch.optimize_orders(orders))

    assert [r.order_id for r in results] == ["A", "B"]
    assert results[0].fabric_groups[0].pack.statistics.total_panels == 1
    assert results[1].fabric_groups[0].pack.statistics.total_panels == 2

    # rerunning from scratch gives the same plan
    again = asyncio.run(orch.optimize("B", orders["B"]))
    assert again.fabric_groups[0].pack.cuts == results[1].fabric_groups[0].pack.cuts


def test_collaborator_errors_propagate() -> None:
    async def broken_lookup(key):
        raise RuntimeError("inventory service down")

    with pytest.raises(RuntimeError):
        asyncio.run(OptimizationOrchestrator(broken_lookup).optimize("SO-11", [_item(1, 1500, 2100)]))


def test_item_without_fabric_is_rejected() -> None:
    with pytest.raises(ValueError):
        _item(1, 1500, 2100, fabric_type="")
    with pytest.raises(ValueError):
        _item(1, 1500, 2100, fabric_type="   ")

    # every accepted item is packed and counted
    items = [_item(1, 1500, 2100), _item(2, 1200, 1800, material="", fabric_colour="")]
    inv = _inventory()
    res = asyncio.run(OptimizationOrchestrator(inv.roll_length).optimize("SO-12", items))
    assert res.total_panels == 2
    assert sum(len(fg.refs) for fg in res.fabric_groups) == 2


def test_invalid_line_items() -> None:
    with pytest.raises(ValueError):
        _item(1, 0, 2100)
    with pytest.raises(ValueError):
        _item(1, 1500, 2100, qty=0)
    with pytest.raises(ValueError):
        FabricationPolicy().fabric_width(28)

# blind_cutter/utils.py
# Small utilities used across the project:
# - timing context manager
# - JSON export for results (versioned, tagged by kind)
#
# Keeps dependencies minimal (stdlib only).

from __future__ import annotations

import json
import time
from contextlib import contextmanager
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any, Dict, Iterator

from .fabrication import tube_cut_width
from .linear_stock import BarGroup
from .results import BarGroupResult, OrderOptimization
from .types import PackResult


@contextmanager
def timer(label: str = "timer") -> Iterator[Dict[str, float]]:
    """
    Usage:
      with timer("optimize") as t:
          ...
      print(t["seconds"])
    """
    t0 = time.perf_counter()
    payload: Dict[str, float] = {}
    try:
        yield payload
    finally:
        payload["seconds"] = time.perf_counter() - t0


def to_jsonable(obj: Any) -> Any:
    """Convert dataclasses and other objects to JSON-serializable structures."""
    if is_dataclass(obj) and not isinstance(obj, type):
        return to_jsonable(asdict(obj))
    if isinstance(obj, dict):
        return {str(k): to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_jsonable(x) for x in obj]
    if isinstance(obj, Path):
        return str(obj)
    return obj


def pack_result_to_dict(res: PackResult) -> Dict[str, Any]:
    """
    Sheets (without free-rectangle state), statistics and the cut list.
    """
    return {
        "stock": {
            "stock_width": res.stock.stock_width,
            "stock_length": res.stock.stock_length,
            "kerf": res.stock.kerf,
        },
        "sheets": [
            {
                "sheet_id": sh.sheet_id,
                "used_area": sh.used_area,
                "wasted_area": sh.wasted_area,
                "efficiency": sh.efficiency,
                "panels": [
                    {
                        "uid": pl.uid,
                        "label": pl.label,
                        "x": pl.x,
                        "y": pl.y,
                        "width": pl.width,
                        "length": pl.length,
                        "rotated": bool(pl.rotated),
                        "original_width": pl.original_width,
                        "original_drop": pl.original_drop,
                        "ref": to_jsonable(pl.ref),
                    }
                    for pl in sh.placements
                ],
            }
            for sh in res.sheets
        ],
        "statistics": to_jsonable(res.statistics),
        "cuts": [to_jsonable(c) for c in res.cuts],
        "unplaced": [
            {"uid": p.uid, "label": p.label, "width": p.width, "length": p.length, "ref": to_jsonable(p.ref)}
            for p in res.unplaced
        ],
    }


def bar_group_to_dict(g: BarGroup) -> Dict[str, Any]:
    return {
        "bar_type": g.bar_type,
        "bar_colour": g.bar_colour,
        "items": [
            {
                "location": it.location,
                "original_width": it.original_width,
                "tube_cut_width": tube_cut_width(it.original_width),
                "ref": to_jsonable(it.ref),
            }
            for it in g.items
        ],
        "total_width": g.total_width,
        "base_quantity": g.base_quantity,
        "wastage": g.wastage,
        "final_quantity": g.final_quantity,
        "pieces_to_deduct": g.pieces_to_deduct,
        "stock_length": g.stock_length,
    }


def order_result_to_dict(res: OrderOptimization) -> Dict[str, Any]:
    """
    Versioned payload: every group entry is tagged with its kind ("fabric" / "bar").
    """
    groups = []
    for fg in res.fabric_groups:
        groups.append(
            {
                "kind": fg.kind,
                "fabric": {
                    "material": fg.key.material,
                    "fabric_type": fg.key.fabric_type,
                    "fabric_colour": fg.key.fabric_colour,
                },
                "item_key": fg.key.text(),
                "available_length": fg.available_length,
                "stock_length": fg.stock_length,
                "refs": to_jsonable(fg.refs),
                "optimization": pack_result_to_dict(fg.pack),
            }
        )
    for bg in res.bars.groups:
        entry = bar_group_to_dict(bg)
        entry["kind"] = BarGroupResult.kind
        entry["item_key"] = bg.item_key()
        groups.append(entry)

    return {
        "schema_version": res.schema_version,
        "order_id": res.order_id,
        "groups": groups,
        "totals": {
            "total_panels": res.total_panels,
            "total_cuts": res.total_cuts,
            "fulfillable": res.fulfillable,
            "total_bar_pieces": res.bars.total_pieces_needed,
        },
        "requirements": [to_jsonable(r) for r in res.requirements],
        "availability": [
            {
                "category": a.requirement.category,
                "item_key": a.requirement.item_key,
                "quantity_needed": a.requirement.quantity_needed,
                "available": a.available,
                "sufficient": a.sufficient,
            }
            for a in res.availability
        ],
        "duplicate_refs": to_jsonable(res.duplicate_refs),
    }


def save_result_json(res: OrderOptimization, path: str | Path, *, indent: int = 2) -> None:
    """Save an order result into JSON for debugging/integration."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = order_result_to_dict(res)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=indent, default=str)

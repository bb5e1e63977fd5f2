# blind_cutter/io_json.py
# Load an order job from JSON into LineItems + inventory snapshot + settings.
#
# Expected JSON shape:
# {
#   "order_id": "SO-1001",
#   "items": [{"id": 1, "location": "Living", "width": 1500, "drop": 2100,
#              "material": "Blockout", "fabric_type": "Vista", "fabric_colour": "White",
#              "chain_or_motor": "Acmeda winder-29mm",
#              "bottom_rail_type": "D30", "bottom_rail_colour": "Anodised"}, ...],
#   "rolls": {"Blockout | Vista | White": 25000},
#   "inventory": {"FABRIC": {"Blockout | Vista | White": 30000}, "BOTTOM_BAR": {"D30 - Anodised": 4}},
#   "settings": {"kerf": 0, "stock_width": 3000, "motor_deductions": false}
# }
# camelCase keys (fabricType, bottomRailColour, ...) are accepted as well.

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import DEFAULTS, int_in_range
from .inventory import InMemoryInventory
from .orchestrator import LineItem


@dataclass(frozen=True)
class OrderJob:
    order_id: str
    items: List[LineItem]
    inventory: InMemoryInventory
    kerf: int = DEFAULTS.default_kerf
    stock_width: int = DEFAULTS.stock_width
    motor_deductions: bool = False


def _pick(d: Dict[str, Any], *names: str, default: Any = None) -> Any:
    for n in names:
        if n in d and d[n] is not None:
            return d[n]
    return default


def _opt_str(v: Any) -> Optional[str]:
    if v is None:
        return None
    s = str(v).strip()
    return s or None


def parse_line_item(it: Dict[str, Any], index: int) -> LineItem:
    ref = _pick(it, "id", "order_item_id", "orderItemId", default=index + 1)
    return LineItem(
        ref=ref,
        location=str(_pick(it, "location", "name", default=f"Item {index + 1}")),
        width=int(float(_pick(it, "width", "width_mm", "widthMm"))),
        drop=int(float(_pick(it, "drop", "drop_mm", "dropMm"))),
        qty=int(_pick(it, "qty", "count", "quantity", default=1)),
        material=str(_pick(it, "material", "roll", default="")).strip(),
        fabric_type=str(_pick(it, "fabric_type", "fabricType", default="")).strip(),
        fabric_colour=str(_pick(it, "fabric_colour", "fabricColour", "fabricColor", default="")).strip(),
        chain_or_motor=_opt_str(_pick(it, "chain_or_motor", "chainOrMotor")),
        bottom_rail_type=_opt_str(_pick(it, "bottom_rail_type", "bottomRailType")),
        bottom_rail_colour=_opt_str(_pick(it, "bottom_rail_colour", "bottomRailColour", "bottomRailColor")),
    )


def load_order_json(path: str | Path) -> OrderJob:
    """
    Load an order job from JSON.
    - "items" is required; "width"/"drop" are ordered (pre-fabrication) sizes.
    - "rolls" maps fabric identity text to available roll length (mm).
    - "inventory" maps category -> item key -> quantity on hand.
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)

    raw_items = data.get("items") or []
    if not raw_items:
        raise ValueError("JSON missing 'items'.")

    items: List[LineItem] = []
    for i, it in enumerate(raw_items):
        if _pick(it, "width", "width_mm", "widthMm") is None or _pick(it, "drop", "drop_mm", "dropMm") is None:
            raise ValueError(f"Item missing width/drop: {it}")
        items.append(parse_line_item(it, i))

    settings = data.get("settings") or {}
    kerf = int_in_range(settings.get("kerf", DEFAULTS.default_kerf), 0, DEFAULTS.max_kerf, "settings.kerf")
    stock_width = int(settings.get("stock_width", DEFAULTS.stock_width))

    inventory = InMemoryInventory(rolls=data.get("rolls") or {}, stock=data.get("inventory") or {})

    return OrderJob(
        order_id=str(data.get("order_id") or path.stem),
        items=items,
        inventory=inventory,
        kerf=kerf,
        stock_width=stock_width,
        motor_deductions=bool(settings.get("motor_deductions", False)),
    )

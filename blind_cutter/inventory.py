# blind_cutter/inventory.py
# In-memory stand-in for the inventory service (roll lengths + stock levels).
# Used by the JSON runner and tests; production wires the orchestrator to the real
# inventory lookups instead.
#
# Keys are matched case-insensitively:
#   rolls:  "material | fabric type | colour" -> available roll length (mm)
#   stock:  category -> {item_key -> quantity on hand}

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from .results import AvailabilityResult, FabricKey, InventoryRequirement


def _norm(s: str) -> str:
    return " ".join(s.lower().split())


class InMemoryInventory:
    def __init__(
        self,
        rolls: Optional[Dict[str, int]] = None,
        stock: Optional[Dict[str, Dict[str, int]]] = None,
    ) -> None:
        self._rolls = {_norm(k): int(v) for k, v in (rolls or {}).items()}
        self._stock = {
            cat.upper(): {_norm(k): int(v) for k, v in items.items()}
            for cat, items in (stock or {}).items()
        }

    async def roll_length(self, key: FabricKey) -> Optional[int]:
        return self._rolls.get(_norm(key.text()))

    def on_hand(self, category: str, item_key: str) -> int:
        return self._stock.get(category.upper(), {}).get(_norm(item_key), 0)

    async def check(self, requirements: Sequence[InventoryRequirement]) -> List[AvailabilityResult]:
        out: List[AvailabilityResult] = []
        for req in requirements:
            have = self.on_hand(req.category, req.item_key)
            out.append(AvailabilityResult(requirement=req, available=have, sufficient=have >= req.quantity_needed))
        return out

# blind_cutter/fabrication.py
# Ordered blind size -> fabric panel size.
#
#   fabric cut width = ordered width - width deduction (room for tube / control hardware)
#   fabric length    = ordered drop + drop allowance (roll wrap + bottom rail pocket)
#
# The deduction is a fixed policy constant by default; passing a motor table makes it
# depend on the item's control (winders 28, Automate 29, Alpha battery 30, Alpha AC 35).

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from .config import DEFAULTS, MOTOR_WIDTH_DEDUCTIONS


@dataclass(frozen=True)
class FabricationPolicy:
    width_deduction: int = DEFAULTS.width_deduction
    drop_allowance: int = DEFAULTS.drop_allowance
    motor_deductions: Dict[str, int] = field(default_factory=dict)

    @classmethod
    def with_motor_table(cls) -> "FabricationPolicy":
        return cls(motor_deductions=dict(MOTOR_WIDTH_DEDUCTIONS))

    def deduction_for(self, chain_or_motor: Optional[str]) -> int:
        if chain_or_motor and chain_or_motor in self.motor_deductions:
            return self.motor_deductions[chain_or_motor]
        return self.width_deduction

    def fabric_width(self, ordered_width: int, chain_or_motor: Optional[str] = None) -> int:
        w = int(ordered_width) - self.deduction_for(chain_or_motor)
        if w <= 0:
            raise ValueError(
                f"Ordered width {ordered_width} leaves no fabric after deduction "
                f"({self.deduction_for(chain_or_motor)} mm)"
            )
        return w

    def fabric_length(self, ordered_drop: int) -> int:
        if ordered_drop <= 0:
            raise ValueError(f"Invalid drop: {ordered_drop}")
        return int(ordered_drop) + self.drop_allowance


def tube_cut_width(ordered_width: int) -> int:
    """Bottom rail / tube cut width shown on the tube worksheet (always width - 28)."""
    return int(ordered_width) - DEFAULTS.tube_deduction

# blind_cutter/__init__.py
"""
Blind cutting optimizer (fabric rolls + bottom rail bar stock).

- First-fit-decreasing guillotine packing of fabric panels onto roll sheets
  (rotation, kerf, free-rectangle subsumption pruning)
- Job statistics (efficiency, waste, nominal fabric consumption) + numbered cut list
- Bottom rail aggregation per (type, colour) with a 10% wastage buffer
- Order orchestration: fabric grouping, roll-length capped sheets, inventory requirements
"""

from .types import (
    StockSpec,
    PanelRequest,
    UnitPanel,
    expand_panels,
    sort_panels,
    FreeRect,
    PlacedPanel,
    Sheet,
    CutEntry,
    JobStatistics,
    PackResult,
)

from .free_space import FreeSpaceTracker, FreeSpaceLimitError

from .metrics import (
    percent,
    update_sheet_metrics,
    compute_job_statistics,
)

from .cutlist import generate_cut_list

from .solver_guillotine import (
    PackerParams,
    PackingLimitError,
    pack_panels,
    solve_guillotine,
)

from .linear_stock import (
    BarItem,
    BarGroup,
    LinearStockResult,
    aggregate_bars,
)

from .fabrication import FabricationPolicy, tube_cut_width

from .results import (
    RESULT_SCHEMA_VERSION,
    CATEGORY_FABRIC,
    CATEGORY_BOTTOM_BAR,
    FabricKey,
    FabricGroupResult,
    BarGroupResult,
    InventoryRequirement,
    AvailabilityResult,
    OrderOptimization,
    UnfulfillableOrderError,
)

from .orchestrator import (
    LineItem,
    OptimizationOrchestrator,
)

from .inventory import InMemoryInventory

__all__ = [
    # types
    "StockSpec",
    "PanelRequest",
    "UnitPanel",
    "expand_panels",
    "sort_panels",
    "FreeRect",
    "PlacedPanel",
    "Sheet",
    "CutEntry",
    "JobStatistics",
    "PackResult",
    # packing
    "FreeSpaceTracker",
    "FreeSpaceLimitError",
    "PackerParams",
    "PackingLimitError",
    "pack_panels",
    "solve_guillotine",
    # metrics
    "percent",
    "update_sheet_metrics",
    "compute_job_statistics",
    "generate_cut_list",
    # bars
    "BarItem",
    "BarGroup",
    "LinearStockResult",
    "aggregate_bars",
    # orders
    "FabricationPolicy",
    "tube_cut_width",
    "RESULT_SCHEMA_VERSION",
    "CATEGORY_FABRIC",
    "CATEGORY_BOTTOM_BAR",
    "FabricKey",
    "FabricGroupResult",
    "BarGroupResult",
    "InventoryRequirement",
    "AvailabilityResult",
    "OrderOptimization",
    "UnfulfillableOrderError",
    "LineItem",
    "OptimizationOrchestrator",
    "InMemoryInventory",
]

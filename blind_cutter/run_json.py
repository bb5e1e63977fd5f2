# blind_cutter/run_json.py
# Runner for an order job JSON: optimize fabric + bottom rails, print the plan,
# check stock, optionally export JSON / PNG.
#
# Usage:
#   python -m blind_cutter --job order.json
#   python -m blind_cutter --job order.json --out out/ --png out/plan.png --cut_list
#
# Exit code 2 when some panel does not fit the stock (the order cannot be cut as is).

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path
from typing import List, Optional

from .debug import print_bar_result, print_pack_result
from .fabrication import FabricationPolicy
from .io_json import load_order_json
from .logger import set_enabled
from .orchestrator import OptimizationOrchestrator
from .plotting import PlotStyle, save_pack_png
from .utils import save_result_json, timer
from .validate import raise_on_errors, validate_pack_result


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Blind fabric + bottom rail cutting optimizer (order JSON).")
    p.add_argument("--job", type=str, required=True, help="Path to order JSON (items/rolls/inventory/settings)")
    p.add_argument("--kerf", type=int, default=-1, help="Override kerf (mm). -1 = use JSON settings")
    p.add_argument("--motor_deductions", action="store_true", help="Use motor-specific fabric width deductions")
    p.add_argument("--cut_list", action="store_true", help="Print the numbered cut list per fabric group")

    # Output
    p.add_argument("--out", type=str, default="", help="Output directory for the JSON result (optional)")
    p.add_argument("--prefix", type=str, default="", help="Export filename prefix (default: order id)")
    p.add_argument("--png", type=str, default="", help="Save sheet layouts as PNG (one file per fabric group)")
    p.add_argument("--no_labels", action="store_true", help="Hide panel labels in PNG")
    p.add_argument("--quiet", action="store_true", help="Silence [CUT] diagnostics")
    return p


def main(argv: Optional[List[str]] = None) -> None:
    args = build_argparser().parse_args(argv)
    set_enabled(not args.quiet)

    job_path = Path(args.job)
    if not job_path.exists():
        raise SystemExit(f"Job JSON not found: {job_path}")

    job = load_order_json(job_path)
    kerf = job.kerf if int(args.kerf) < 0 else int(args.kerf)
    policy = FabricationPolicy.with_motor_table() if (args.motor_deductions or job.motor_deductions) else FabricationPolicy()

    orchestrator = OptimizationOrchestrator(
        job.inventory.roll_length,
        job.inventory.check,
        policy=policy,
        stock_width=job.stock_width,
        kerf=kerf,
    )

    with timer("optimize") as t:
        res = asyncio.run(orchestrator.optimize(job.order_id, job.items))

    for fg in res.fabric_groups:
        raise_on_errors(validate_pack_result(fg.pack))

    print(f"Order: {res.order_id}  ({len(job.items)} line items, {t['seconds']:.3f} s)")
    print(f"Kerf: {kerf} mm  Width deduction: {policy.width_deduction} mm  Drop allowance: {policy.drop_allowance} mm")

    for fg in res.fabric_groups:
        avail = f"{fg.available_length:,} mm" if fg.available_length else "unknown"
        print(f"\n##### Fabric {fg.key.text()}  (roll {avail}, sheet length {fg.stock_length:,} mm)")
        print_pack_result(fg.pack, cut_list=args.cut_list)

    if res.bars.groups:
        print()
        print_bar_result(res.bars)

    if res.duplicate_refs:
        print(f"\nSame fabric on several lines: items {', '.join(str(r) for r in res.duplicate_refs)}")

    print("\nStock check:")
    for a in res.availability:
        flag = "OK " if a.sufficient else "LOW"
        req = a.requirement
        print(f"  [{flag}] {req.category:10s} {req.item_key:40s} need {req.quantity_needed:>8,}  have {a.available:>8,}")

    prefix = args.prefix.strip() or res.order_id

    if args.out.strip():
        outp = Path(args.out.strip())
        outp.mkdir(parents=True, exist_ok=True)
        save_result_json(res, outp / f"{prefix}.json")
        print(f"Exported JSON to: {outp}")

    if args.png.strip():
        png = Path(args.png.strip())
        style = PlotStyle(show_labels=not args.no_labels)
        for i, fg in enumerate(res.fabric_groups, start=1):
            if not fg.pack.sheets:
                continue
            target = png if len(res.fabric_groups) == 1 else png.with_name(f"{png.stem}_{i}{png.suffix}")
            save_pack_png(fg.pack, str(target), style=style)
            print(f"Cutting layout saved to: {target}")

    if not res.fulfillable:
        print(f"\n{res.total_panels - res.total_cuts} panel(s) do not fit the stock sheet.")
        raise SystemExit(2)


if __name__ == "__main__":
    main()

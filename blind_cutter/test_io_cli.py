# blind_cutter/test_io_cli.py
# JSON job loading, result export, validation and the command line runner.

from __future__ import annotations

import json

import matplotlib

matplotlib.use("Agg")

import pytest

from blind_cutter.config import capped_stock_length, int_in_range, make_default_stock
from blind_cutter.fabrication import FabricationPolicy, tube_cut_width
from blind_cutter.io_json import load_order_json
from blind_cutter.logger import set_enabled
from blind_cutter.plotting import plot_pack_result, save_pack_png
from blind_cutter.run_json import main
from blind_cutter.solver_guillotine import solve_guillotine
from blind_cutter.types import PanelRequest, StockSpec
from blind_cutter.validate import ValidationIssue, raise_on_errors, validate_pack_result

JOB = {
    "order_id": "SO-1001",
    "items": [
        {
            "id": 11,
            "location": "Living",
            "width": 1500,
            "drop": 2100,
            "material": "Blockout",
            "fabricType": "Vista",
            "fabricColour": "White",
            "chainOrMotor": "Acmeda winder-29mm",
            "bottomRailType": "D30",
            "bottomRailColour": "Anodised",
        },
        {
            "id": 12,
            "location": "Bed 1",
            "width": 1200,
            "drop": 1800,
            "qty": 2,
            "material": "Blockout",
            "fabric_type": "Vista",
            "fabric_colour": "White",
            "bottom_rail_type": "D30",
            "bottom_rail_colour": "Anodised",
        },
    ],
    "rolls": {"blockout | vista | white": 25000},
    "inventory": {"FABRIC": {"Blockout | Vista | White": 30000}, "BOTTOM_BAR": {"D30 - Anodised": 4}},
    "settings": {"kerf": 0},
}


def _write_job(tmp_path, job=JOB):
    p = tmp_path / "order.json"
    p.write_text(json.dumps(job), encoding="utf-8")
    return p


def test_config_helpers() -> None:
    assert capped_stock_length(25000) == 10000
    assert capped_stock_length(4000) == 4000
    assert capped_stock_length(None) == 10000
    assert capped_stock_length(0) == 10000
    assert int_in_range(12, 0, 50) == 12
    assert int_in_range(2.6, 0, 50) == 3
    with pytest.raises(ValueError):
        int_in_range(80, 0, 50)
    with pytest.raises(ValueError):
        int_in_range(-3, 0, 50)
    stock = make_default_stock()
    assert (stock.stock_width, stock.stock_length, stock.kerf) == (3000, 10000, 0)


def test_fabrication_policy() -> None:
    policy = FabricationPolicy()
    assert policy.fabric_width(1500) == 1472
    assert policy.fabric_length(2100) == 2250
    assert policy.fabric_width(1500, "Alpha AC 3NM Motor") == 1472

    motors = FabricationPolicy.with_motor_table()
    assert motors.deduction_for("Acmeda winder-29mm") == 28
    assert motors.deduction_for("Automate E6 6NM Motor") == 29
    assert motors.deduction_for("Alpha 2NM Battery Motor") == 30
    assert motors.deduction_for("Alpha AC 3NM Motor") == 35
    assert motors.deduction_for(None) == 28
    assert tube_cut_width(1500) == 1472

    with pytest.raises(ValueError):
        policy.fabric_length(0)


def test_load_order_json(tmp_path) -> None:
    job = load_order_json(_write_job(tmp_path))

    assert job.order_id == "SO-1001"
    assert [it.ref for it in job.items] == [11, 12]
    first = job.items[0]
    assert (first.fabric_type, first.fabric_colour, first.chain_or_motor) == ("Vista", "White", "Acmeda winder-29mm")
    assert first.has_bar
    assert job.items[1].qty == 2
    assert job.kerf == 0
    assert job.stock_width == 3000
    assert not job.motor_deductions


def test_load_order_json_requires_items(tmp_path) -> None:
    with pytest.raises(ValueError):
        load_order_json(_write_job(tmp_path, {"order_id": "x", "items": []}))
    with pytest.raises(ValueError):
        load_order_json(_write_job(tmp_path, {"items": [{"width": 1000}]}))


def test_load_order_json_rejects_bad_items_and_settings(tmp_path) -> None:
    no_fabric = dict(JOB["items"][1])
    del no_fabric["fabric_type"]
    with pytest.raises(ValueError):
        load_order_json(_write_job(tmp_path, dict(JOB, items=[no_fabric])))

    for kerf in (-1, 51):
        with pytest.raises(ValueError):
            load_order_json(_write_job(tmp_path, dict(JOB, settings={"kerf": kerf})))

    assert load_order_json(_write_job(tmp_path, dict(JOB, settings={"kerf": 3}))).kerf == 3


def test_validate_flags_dropped_panels_as_warning() -> None:
    res = solve_guillotine(StockSpec(1000, 1000), [PanelRequest(500, 500), PanelRequest(2000, 2000)])
    issues = validate_pack_result(res)
    assert [i.level for i in issues] == ["WARN"]
    raise_on_errors(issues)

    with pytest.raises(ValueError):
        raise_on_errors([ValidationIssue("ERROR", "broken", sheet_id=1)])


def test_validate_detects_area_mismatch() -> None:
    res = solve_guillotine(StockSpec(1000, 1000), [PanelRequest(500, 500)])
    res.sheets[0].wasted_area += 1
    assert any(i.level == "ERROR" for i in validate_pack_result(res))


def test_plot_pack_result(tmp_path) -> None:
    res = solve_guillotine(StockSpec(3000, 10000), [PanelRequest(1472, 2250, qty=3, label="Living")])
    fig = plot_pack_result(res)
    assert len(fig.axes) == 1

    out = tmp_path / "plan.png"
    save_pack_png(res, str(out))
    assert out.exists() and out.stat().st_size > 0

    empty = solve_guillotine(StockSpec(1000, 1000), [PanelRequest(2000, 2000)])
    with pytest.raises(ValueError):
        plot_pack_result(empty)


def test_cli_exports_json_and_png(tmp_path, capsys) -> None:
    out_dir = tmp_path / "out"
    png = tmp_path / "plan.png"
    try:
        main(["--job", str(_write_job(tmp_path)), "--out", str(out_dir), "--png", str(png), "--cut_list", "--quiet"])
    finally:
        set_enabled(True)

    payload = json.loads((out_dir / "SO-1001.json").read_text(encoding="utf-8"))
    assert payload["schema_version"] == 1
    assert [g["kind"] for g in payload["groups"]] == ["fabric", "bar"]
    assert payload["totals"]["total_panels"] == 3
    assert all(a["sufficient"] for a in payload["availability"])
    assert png.exists()

    printed = capsys.readouterr().out
    assert "Order: SO-1001" in printed
    assert "#1 S1" in printed


def test_cli_exits_when_panels_do_not_fit(tmp_path) -> None:
    job = dict(JOB)
    job["items"] = [dict(JOB["items"][0], width=3500, drop=9900)]
    with pytest.raises(SystemExit) as exc:
        try:
            main(["--job", str(_write_job(tmp_path, job)), "--quiet"])
        finally:
            set_enabled(True)
    assert exc.value.code == 2

"""
Agent tool functions for the Drilling Cost Planner assistant.

Each function takes a session_state dict as its first parameter for sharing
data between tool calls (demo data, scenario store, last results). All
functions return plain dicts (JSON-serializable).
"""

import sys
from dataclasses import fields
from pathlib import Path

_REPO_ROOT = Path(__file__).resolve().parent.parent
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from engine.budget import annual_cash_flow, build_budget_details
from engine.calculator import calculate_well_program
from engine.scenarios import ScenarioStore, compare_scenarios as compare_scenario_rows
from engine.types import Adjustment, AdjustmentType, SimulationParams
from utils import data_loader
from utils.formatting import format_dollar

# Parameters the assistant may change through ``overrides``.
OVERRIDABLE_PARAMS = {
    f.name for f in fields(SimulationParams) if f.name not in ("adjustments", "user_notes")
}


def new_session(data: dict = None) -> dict:
    """Fresh session state over the given (or demo) program, catalog and schedule."""
    data = data or data_loader.load_demo_data()
    return {
        "program": data["program"],
        "catalog": data["catalog"],
        "wells": data["wells"],
        "store": ScenarioStore(),
        "results": {},
    }


def _find_well(session_state: dict, well_id: str):
    return next((w for w in session_state["wells"] if w.id == well_id), None)


def _params_dict(params: SimulationParams) -> dict:
    data = {name: getattr(params, name) for name in sorted(OVERRIDABLE_PARAMS)}
    data["adjustments"] = {
        line_id: {"type": adj.type.value, "value": adj.value}
        for line_id, adj in params.adjustments.items()
    }
    return data


# ---------------------------------------------------------------------------
# 1. WELLS
# ---------------------------------------------------------------------------


def list_wells(session_state: dict, well_type: str = "all") -> dict:
    """List wells in the activity schedule, optionally filtered by well type."""
    wells = session_state["wells"]
    if well_type != "all":
        wells = [w for w in wells if w.type == well_type]
    return {
        "wells": [
            {
                "well_id": w.id,
                "name": w.name,
                "well_type": w.type,
                "rig": w.equipment,
                "start_date": w.start_date.isoformat(),
                "done": w.done,
            }
            for w in wells
        ],
        "count": len(wells),
        "well_types": sorted({w.type for w in session_state["wells"]}),
    }


# ---------------------------------------------------------------------------
# 2. CALCULATE
# ---------------------------------------------------------------------------


def calculate_well(session_state: dict, well_id: str, overrides: dict = None) -> dict:
    """Run the engine for a well's working configuration.

    Args:
        session_state: Session dict from new_session.
        well_id: Well to calculate.
        overrides: Optional parameter changes (e.g. {"td_isolation": 2600,
            "is_directional": True}). They become the well's working config.

    Returns:
        dict with totals, per-line results, warnings and the parameters used,
        or {"error": "..."} for an unknown well or parameter.
    """
    well = _find_well(session_state, well_id)
    if well is None:
        return {"error": f"Well {well_id} not found"}

    store = session_state["store"]
    params = store.params_for(well)
    if overrides:
        unknown = sorted(set(overrides) - OVERRIDABLE_PARAMS)
        if unknown:
            return {"error": f"Unknown parameters: {', '.join(unknown)}"}
        params = params.updated(**overrides)
        store.set_params(well.id, params)

    result = calculate_well_program(session_state["program"], params, session_state["catalog"])
    session_state["results"][well.id] = result

    return {
        "well_id": well.id,
        "well_name": well.name,
        "total_time_days": round(result.total_time_days, 2),
        "total_cost": round(result.total_cost, 2),
        "total_cost_display": format_dollar(result.total_cost),
        "final_depth": result.time_curve[-1].depth,
        "lines": [
            {
                "id": rl.id,
                "phase": rl.phase,
                "activity": rl.activity,
                "type": rl.type.value,
                "duration_hours": round(rl.calculated_duration, 2),
                "cost": round(rl.calculated_cost, 2),
                "days_from_spud": round(rl.days_from_spud, 2),
                "cumulative_days": round(rl.cumulative_time, 2),
            }
            for rl in result.lines
        ],
        "warnings": list(result.warnings),
        "params": _params_dict(params),
    }


def set_adjustment(session_state: dict, well_id: str, line_id: str,
                   adjustment_type: str, value: float) -> dict:
    """Set (or clear, with adjustment_type "NONE") a line adjustment on a well."""
    well = _find_well(session_state, well_id)
    if well is None:
        return {"error": f"Well {well_id} not found"}
    if line_id not in {line.id for line in session_state["program"]}:
        return {"error": f"Line {line_id} not in program"}

    store = session_state["store"]
    if adjustment_type == "NONE":
        adjustment = None
    else:
        try:
            adjustment = Adjustment(AdjustmentType(adjustment_type), float(value))
        except ValueError:
            return {"error": f"Unknown adjustment type: {adjustment_type}"}

    params = store.params_for(well).with_adjustment(line_id, adjustment)
    store.set_params(well.id, params)
    session_state["results"].pop(well.id, None)
    return {"well_id": well.id, "params": _params_dict(params)}


def get_cost_summary(session_state: dict, well_id: str, group: str = "all") -> dict:
    """AFE-style cost summary of the last calculation of a well.

    Runs the calculation first if the well has not been calculated yet.
    """
    if well_id not in session_state["results"]:
        calc = calculate_well(session_state, well_id)
        if "error" in calc:
            return calc
    result = session_state["results"][well_id]

    rows = result.cost_summary
    if group != "all":
        rows = [r for r in rows if r.group == group]

    by_group: dict = {}
    for r in rows:
        by_group[r.group] = by_group.get(r.group, 0) + r.total

    return {
        "rows": [
            {
                "group": r.group,
                "item": r.item,
                "description": r.description,
                "unit": r.unit,
                "price": r.price,
                "quantity": round(r.quantity, 3),
                "total": round(r.total, 2),
            }
            for r in rows
        ],
        "by_group": {g: round(t, 2) for g, t in by_group.items()},
        "total": round(sum(r.total for r in rows), 2),
    }


# ---------------------------------------------------------------------------
# 3. SCENARIOS
# ---------------------------------------------------------------------------


def save_scenario(session_state: dict, well_id: str, name: str) -> dict:
    """Snapshot a well's working configuration as a named scenario."""
    well = _find_well(session_state, well_id)
    if well is None:
        return {"error": f"Well {well_id} not found"}
    store = session_state["store"]
    scenario = store.save(well.id, name, store.params_for(well))
    return {
        "scenario_id": scenario.id,
        "well_id": scenario.well_id,
        "name": scenario.name,
        "created_at": scenario.created_at.isoformat(timespec="seconds"),
        "scenario_count": len(store),
    }


def load_scenario(session_state: dict, scenario_id: str) -> dict:
    """Make a saved scenario the working configuration of its well again."""
    store = session_state["store"]
    try:
        scenario = store.get(scenario_id)
    except KeyError:
        return {"error": f"Scenario {scenario_id} not found"}
    params = store.load(scenario.id)
    session_state["results"].pop(scenario.well_id, None)
    return {
        "scenario_id": scenario.id,
        "well_id": scenario.well_id,
        "name": scenario.name,
        "params": _params_dict(params),
    }


def compare_scenarios(session_state: dict, well_id: str = "all") -> dict:
    """Estimated cost and days for every saved scenario (optionally one well's)."""
    store = session_state["store"]
    scenarios = store.list(None if well_id == "all" else well_id)
    rows = compare_scenario_rows(
        scenarios, session_state["wells"], session_state["program"], session_state["catalog"],
    )
    for row in rows:
        row["estimated_cost"] = round(row["estimated_cost"], 2)
        row["estimated_days"] = round(row["estimated_days"], 2)

    cheapest = min(rows, key=lambda r: r["estimated_cost"]) if rows else None
    return {
        "scenarios": rows,
        "count": len(rows),
        "cheapest": cheapest["scenario_id"] if cheapest else None,
    }


# ---------------------------------------------------------------------------
# 4. ANNUAL BUDGET
# ---------------------------------------------------------------------------


def get_annual_budget(session_state: dict, scenario_ids: list = None,
                      inflation: float = 0, efficiency: float = 0) -> dict:
    """Monthly cash flow for the selected scenarios (all saved ones by default)."""
    store = session_state["store"]
    if scenario_ids is None:
        scenario_ids = [s.id for s in store.list()]
    selected = store.select_for_budget(scenario_ids)
    if not selected:
        return {"error": "No scenarios selected. Save at least one scenario first."}

    details = build_budget_details(
        selected, session_state["wells"], session_state["program"], session_state["catalog"],
    )
    cash_flow = annual_cash_flow(details, inflation=inflation, efficiency=efficiency)
    session_state["budget"] = cash_flow

    return {
        "year": cash_flow["year"],
        "months": [
            {"name": m["name"], "cost": round(m["cost"], 2), "cumulative": round(m["cumulative"], 2)}
            for m in cash_flow["months"]
        ],
        "total_budget": round(cash_flow["total_budget"], 2),
        "total_budget_display": format_dollar(cash_flow["total_budget"]),
        "well_count": len(cash_flow["wells"]),
    }

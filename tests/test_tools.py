"""Tests for agent tools over the demo session."""

import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
from agent.tools import (
    calculate_well,
    compare_scenarios,
    get_annual_budget,
    get_cost_summary,
    list_wells,
    load_scenario,
    new_session,
    save_scenario,
    set_adjustment,
)

WELL_ID = "PC-4030"


@pytest.fixture
def session():
    return new_session()


class TestListWells:

    def test_lists_schedule(self, session):
        result = list_wells(session)
        assert result["count"] == 25
        assert result["wells"][0]["well_id"] == WELL_ID
        assert result["wells"][0]["start_date"] == "2026-01-01"

    def test_filter_by_type(self, session):
        result = list_wells(session, "NOC BTC")
        assert result["count"] == 1
        assert result["wells"][0]["well_type"] == "NOC BTC"
        assert "Convencional" in result["well_types"]


class TestCalculateWell:

    def test_returns_totals_and_lines(self, session):
        result = calculate_well(session, WELL_ID)
        assert result["total_time_days"] > 0
        assert result["total_cost"] > 0
        assert len(result["lines"]) == 18
        assert result["final_depth"] == 2200
        assert result["params"]["equipment_type"] == "H-202"
        json.dumps(result)

    def test_unknown_well(self, session):
        assert "error" in calculate_well(session, "NOPE")

    def test_unknown_override(self, session):
        result = calculate_well(session, WELL_ID, {"mud_weight": 12})
        assert result == {"error": "Unknown parameters: mud_weight"}

    def test_overrides_become_working_config(self, session):
        calculate_well(session, WELL_ID, {"td_isolation": 2600})
        result = calculate_well(session, WELL_ID)
        assert result["final_depth"] == 2600
        assert result["params"]["td_isolation"] == 2600

    def test_offline_bop_drops_line(self, session):
        result = calculate_well(session, WELL_ID, {"is_offline_bop": True})
        assert "8" not in [line["id"] for line in result["lines"]]


class TestSetAdjustment:

    def test_rop_adjustment(self, session):
        base = calculate_well(session, WELL_ID)
        set_adjustment(session, WELL_ID, "1", "ABSOLUTE_VALUE", 5)
        adjusted = calculate_well(session, WELL_ID)
        guide = next(line for line in adjusted["lines"] if line["id"] == "1")
        assert guide["duration_hours"] == pytest.approx(20)
        assert adjusted["total_time_days"] < base["total_time_days"]

    def test_clear_adjustment(self, session):
        set_adjustment(session, WELL_ID, "3", "PERCENTAGE_TIME", 50)
        result = set_adjustment(session, WELL_ID, "3", "NONE", 0)
        assert result["params"]["adjustments"] == {}

    def test_bad_inputs(self, session):
        assert "error" in set_adjustment(session, WELL_ID, "99", "ABSOLUTE_VALUE", 5)
        assert "error" in set_adjustment(session, WELL_ID, "1", "SIDEWAYS", 5)
        assert "error" in set_adjustment(session, "NOPE", "1", "ABSOLUTE_VALUE", 5)


class TestCostSummary:

    def test_groups_add_up(self, session):
        result = get_cost_summary(session, WELL_ID)
        assert set(result["by_group"]) == {"02.01 EQUIPO", "02.02 SERVICIOS", "02.03 MATERIALES"}
        assert sum(result["by_group"].values()) == pytest.approx(result["total"], abs=0.05)

    def test_group_filter(self, session):
        result = get_cost_summary(session, WELL_ID, "02.03 MATERIALES")
        assert {row["group"] for row in result["rows"]} == {"02.03 MATERIALES"}

    def test_unknown_well(self, session):
        assert "error" in get_cost_summary(session, "NOPE")


class TestScenarioTools:

    def test_save_and_compare(self, session):
        save_scenario(session, WELL_ID, "Base")
        calculate_well(session, WELL_ID, {"is_directional": True})
        save_scenario(session, WELL_ID, "Directional")
        result = compare_scenarios(session)
        assert result["count"] == 2
        cheapest = next(r for r in result["scenarios"] if r["scenario_id"] == result["cheapest"])
        assert cheapest["scenario_name"] == "Base"

    def test_compare_filters_by_well(self, session):
        save_scenario(session, WELL_ID, "Base")
        save_scenario(session, "PCx-4034", "Other")
        assert compare_scenarios(session, "PCx-4034")["count"] == 1

    def test_budget_requires_scenarios(self, session):
        assert "error" in get_annual_budget(session)

    def test_budget(self, session):
        save_scenario(session, WELL_ID, "Base")
        save_scenario(session, "PCx-4034", "Base")
        result = get_annual_budget(session, inflation=5)
        assert result["year"] == 2026
        assert len(result["months"]) == 12
        assert result["well_count"] == 2
        assert result["total_budget"] == pytest.approx(result["months"][-1]["cumulative"], abs=0.05)


class TestCachedResults:

    def test_cost_summary_follows_adjustment(self, session):
        calculate_well(session, WELL_ID)
        set_adjustment(session, WELL_ID, "10", "ABSOLUTE_VALUE", 30)
        summary = get_cost_summary(session, WELL_ID)
        fresh = calculate_well(session, WELL_ID)
        assert summary["total"] == pytest.approx(fresh["total_cost"], abs=0.05)

    def test_cost_summary_follows_loaded_scenario(self, session):
        saved = save_scenario(session, WELL_ID, "Shallow")
        calculate_well(session, WELL_ID, {"td_isolation": 3000})
        load_scenario(session, saved["scenario_id"])
        summary = get_cost_summary(session, WELL_ID)
        assert calculate_well(session, WELL_ID)["final_depth"] == 2200
        assert summary["total"] == pytest.approx(
            calculate_well(session, WELL_ID)["total_cost"], abs=0.05)


class TestLoadScenario:

    def test_restores_working_config(self, session):
        saved = save_scenario(session, WELL_ID, "Base")
        set_adjustment(session, WELL_ID, "1", "ABSOLUTE_VALUE", 5)
        calculate_well(session, WELL_ID, {"is_directional": True})
        result = load_scenario(session, saved["scenario_id"])
        assert result["well_id"] == WELL_ID
        assert result["params"]["is_directional"] is False
        assert result["params"]["adjustments"] == {}

    def test_unknown_scenario(self, session):
        assert "error" in load_scenario(session, "ghost")

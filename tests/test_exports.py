"""Tests for CSV / Excel exports and the risk narrative."""

import io
import json
import sys
from pathlib import Path
from types import SimpleNamespace

import anthropic
import httpx
import pytest
from openpyxl import load_workbook

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
from agent.risk_summary import analyze_risk, summarize_for_prompt
from engine.budget import annual_cash_flow, build_budget_details
from engine.calculator import calculate_well_program
from engine.scenarios import ScenarioStore
from engine.types import SimulationParams
from utils.data_loader import load_demo_data
from utils.excel_export import (
    CSV_BOM,
    LINE_EXPORT_HEADERS,
    generate_budget_workbook,
    generate_program_csv,
    generate_program_workbook,
)
from utils.formatting import format_days, format_dollar, format_musd


@pytest.fixture(scope="module")
def demo():
    return load_demo_data()


@pytest.fixture(scope="module")
def result(demo):
    return calculate_well_program(demo["program"], SimulationParams(), demo["catalog"])


class TestProgramCsv:

    def test_bom_and_headers(self, result):
        csv_text = generate_program_csv(result)
        assert csv_text.startswith(CSV_BOM)
        header = csv_text[len(CSV_BOM):].splitlines()[0]
        assert header.split(",")[:3] == LINE_EXPORT_HEADERS[:3]

    def test_one_row_per_line(self, result):
        rows = generate_program_csv(result).strip().splitlines()
        assert len(rows) == 1 + len(result.lines)


class TestWorkbooks:

    def test_program_sheets(self, result):
        wb = load_workbook(io.BytesIO(generate_program_workbook(result)))
        assert wb.sheetnames == ["Program", "AFE Summary", "Time Curve", "Net Curve", "Warnings"]
        assert wb["Program"].max_row == 1 + len(result.lines)
        assert wb["Program"]["A1"].value == "ID"

    def test_warnings_sheet_lists_misses(self, demo):
        res = calculate_well_program(demo["program"], SimulationParams(equipment_type="H-205"),
                                     demo["catalog"])
        wb = load_workbook(io.BytesIO(generate_program_workbook(res)))
        values = [row[0].value for row in wb["Warnings"].iter_rows(min_row=2)]
        assert "Missing Cost Item: EQUIPO / H-205 / TARIFA A" in values

    def test_budget_workbook(self, demo):
        store = ScenarioStore()
        well = demo["wells"][0]
        scenario = store.save(well.id, "Base", store.params_for(well))
        details = build_budget_details([scenario], demo["wells"], demo["program"], demo["catalog"])
        wb = load_workbook(io.BytesIO(generate_budget_workbook(annual_cash_flow(details))))
        assert wb.sheetnames == ["Cash Flow", "Wells"]
        assert wb["Cash Flow"].max_row == 13
        assert wb["Wells"]["A2"].value == well.name

    def test_empty_budget_workbook(self):
        wb = load_workbook(io.BytesIO(generate_budget_workbook(annual_cash_flow([], year=2026))))
        assert wb["Wells"]["A1"].value == "Note"


class TestFormatting:

    def test_format_dollar(self):
        assert format_dollar(1_430_000) == "$1.4M"
        assert format_dollar(127_000) == "$127.0K"
        assert format_dollar(0) == "$0"

    def test_format_days_and_musd(self):
        assert format_days(11.84) == "11.8 d"
        assert format_musd(2_350_000) == "2.35M USD"


class FakeMessages:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.prompt = None

    def create(self, **kwargs):
        self.prompt = kwargs["messages"][0]["content"]
        if self.error:
            raise self.error
        return SimpleNamespace(content=[SimpleNamespace(type="text", text=self.text)])


class TestRiskSummary:

    def test_prompt_summary(self, result):
        summary = summarize_for_prompt(result)
        assert summary["maxDepth"] == 2200
        assert summary["totalCost"] == format_musd(result.total_cost)
        assert len(summary["activities"]) == len(result.lines)
        assert summary["activities"][1]["duration"] == "24.0 hrs"

    def test_analyze_risk_uses_client(self, result):
        messages = FakeMessages(text="1. Stuck pipe")
        text = analyze_risk(result, client=SimpleNamespace(messages=messages))
        assert text == "1. Stuck pipe"
        data = messages.prompt.split("Data: ", 1)[1]
        assert json.loads(data)["maxDepth"] == 2200

    def test_empty_response(self, result):
        messages = FakeMessages(text="")
        assert analyze_risk(result, client=SimpleNamespace(messages=messages)) == "No analysis generated."

    def test_missing_key(self, result, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        with pytest.raises(RuntimeError, match="API Key is missing"):
            analyze_risk(result)

    def test_api_error_wrapped(self, result):
        error = anthropic.APIConnectionError(request=httpx.Request("POST", "https://api.anthropic.com"))
        messages = FakeMessages(error=error)
        with pytest.raises(RuntimeError, match="Failed to contact AI service"):
            analyze_risk(result, client=SimpleNamespace(messages=messages))

"""Excel / CSV export of a well program and of the annual budget."""

import io

import pandas as pd
from openpyxl.styles import Alignment, Font, PatternFill

from engine.types import SimulationResult


HEADER_FILL = PatternFill(start_color="1E3A8A", end_color="1E3A8A", fill_type="solid")
HEADER_FONT = Font(bold=True, color="FFFFFF", size=11)
DOLLAR_FMT = '#,##0.00'
DAYS_FMT = '0.00'

LINE_EXPORT_HEADERS = [
    "ID", "Phase", "Activity", "Duration (hrs)", "Cost (USD)",
    "Days From Spud", "Total Cum. Days", "Cumulative Cost (USD)",
]

# UTF-8 BOM so Excel opens accented phase names correctly.
CSV_BOM = "\ufeff"


def _style_header(ws):
    """Apply the header style to the first row of a worksheet."""
    for cell in ws[1]:
        cell.fill = HEADER_FILL
        cell.font = HEADER_FONT
        cell.alignment = Alignment(horizontal="center")


def _auto_width(ws):
    """Auto-fit column widths (approximate)."""
    for col in ws.columns:
        max_len = 0
        col_letter = col[0].column_letter
        for cell in col:
            val = str(cell.value) if cell.value is not None else ""
            max_len = max(max_len, len(val))
        ws.column_dimensions[col_letter].width = min(max_len + 3, 60)


def _apply_format(ws, cols, fmt):
    """Apply a number format to the given columns (1-indexed)."""
    for row in ws.iter_rows(min_row=2, max_row=ws.max_row):
        for col_idx in cols:
            cell = row[col_idx - 1]
            if isinstance(cell.value, (int, float)):
                cell.number_format = fmt


def _write_sheet(writer, df: pd.DataFrame, name: str, dollar_cols=(), day_cols=()):
    df.to_excel(writer, sheet_name=name, index=False)
    ws = writer.sheets[name]
    _style_header(ws)
    _apply_format(ws, dollar_cols, DOLLAR_FMT)
    _apply_format(ws, day_cols, DAYS_FMT)
    _auto_width(ws)


def line_export_rows(result: SimulationResult) -> list:
    """Per-line export rows, numbers rounded to two decimals."""
    return [
        [
            rl.id,
            rl.phase,
            rl.activity,
            round(rl.calculated_duration, 2),
            round(rl.calculated_cost, 2),
            round(rl.days_from_spud, 2),
            round(rl.cumulative_time, 2),
            round(rl.cumulative_cost, 2),
        ]
        for rl in result.lines
    ]


def generate_program_csv(result: SimulationResult) -> str:
    """Line-item CSV (with BOM) of a well program."""
    df = pd.DataFrame(line_export_rows(result), columns=LINE_EXPORT_HEADERS)
    return CSV_BOM + df.to_csv(index=False, float_format="%.2f")


def generate_program_workbook(result: SimulationResult) -> bytes:
    """Well program as an Excel workbook (bytes).

    Sheets:
    1. Program     - per-line durations, costs and cumulatives
    2. AFE Summary - aggregated cost rows by group
    3. Time Curve  - depth / time / cost points
    4. Net Curve   - same, mobilization removed
    5. Warnings
    """
    output = io.BytesIO()

    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df_lines = pd.DataFrame(line_export_rows(result), columns=LINE_EXPORT_HEADERS)
        _write_sheet(writer, df_lines, "Program", dollar_cols=[5, 8], day_cols=[4, 6, 7])

        df_afe = result.cost_summary_frame()
        df_afe.columns = ["Group", "Item", "Description", "Unit", "Price", "Quantity", "Total"]
        _write_sheet(writer, df_afe, "AFE Summary", dollar_cols=[5, 7])

        for name, net in (("Time Curve", False), ("Net Curve", True)):
            df_curve = result.curve_frame(net=net)
            df_curve.columns = ["Days", "Depth (m)", "Cost (USD)", "Activity"]
            _write_sheet(writer, df_curve, name, dollar_cols=[3], day_cols=[1])

        if result.warnings:
            df_warn = pd.DataFrame({"Warning": list(result.warnings)})
        else:
            df_warn = pd.DataFrame({"Note": ["No catalog warnings"]})
        _write_sheet(writer, df_warn, "Warnings")

    return output.getvalue()


def generate_budget_workbook(cash_flow: dict) -> bytes:
    """Annual budget (output of ``annual_cash_flow``) as an Excel workbook."""
    output = io.BytesIO()

    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df_months = pd.DataFrame(cash_flow["months"])
        df_months.columns = ["Month", "Cost (USD)", "Cumulative (USD)"]
        _write_sheet(writer, df_months, "Cash Flow", dollar_cols=[2, 3])

        if cash_flow["wells"]:
            df_wells = pd.DataFrame(cash_flow["wells"])
            df_wells = df_wells[["well_name", "scenario_name", "rig", "start_date",
                                 "duration_days", "adjusted_cost", "in_year_cost"]]
            df_wells.columns = ["Well", "Scenario", "Rig", "Start", "Days",
                                "Adjusted Cost (USD)", "In-Year Cost (USD)"]
            _write_sheet(writer, df_wells, "Wells", dollar_cols=[6, 7], day_cols=[5])
        else:
            _write_sheet(writer, pd.DataFrame({"Note": ["No wells in budget"]}), "Wells")

    return output.getvalue()

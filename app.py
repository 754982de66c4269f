"""Streamlit UI for the Drilling Cost Planner."""

import logging
import os
import sys
from pathlib import Path

# Ensure repo root is on path
sys.path.insert(0, str(Path(__file__).resolve().parent))

import pandas as pd
import streamlit as st
from dotenv import load_dotenv

from agent.orchestrator import (
    AgentOrchestrator,
    ClarifyEvent,
    DoneEvent,
    ErrorEvent,
    TextEvent,
    ToolCallEvent,
)
from agent.risk_summary import analyze_risk
from agent.tools import new_session
from engine.budget import annual_cash_flow, build_budget_details
from engine.calculator import calculate_well_program
from engine.scenarios import compare_scenarios
from engine.types import Adjustment, AdjustmentType, LineType
from utils.data_loader import load_uploaded_files
from utils.excel_export import (
    generate_budget_workbook,
    generate_program_csv,
    generate_program_workbook,
)
from utils.formatting import format_days, format_dollar

load_dotenv()

logging.basicConfig(
    level=os.environ.get("DRILLPLAN_LOG_LEVEL", "WARNING").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------

st.set_page_config(
    page_title="Drilling Cost Planner",
    page_icon="🛢️",
    layout="wide",
    initial_sidebar_state="expanded",
)

RATE_LINE_TYPES = {LineType.DRILLING, LineType.CASING, LineType.TRIPPING}

# ---------------------------------------------------------------------------
# Session state initialization
# ---------------------------------------------------------------------------

if "planner" not in st.session_state:
    st.session_state.planner = None  # session dict from agent.tools.new_session
if "messages" not in st.session_state:
    st.session_state.messages = []
if "api_messages" not in st.session_state:
    st.session_state.api_messages = []
if "pending_question" not in st.session_state:
    st.session_state.pending_question = None
if "risk_text" not in st.session_state:
    st.session_state.risk_text = ""

# ---------------------------------------------------------------------------
# Data bootstrap
# ---------------------------------------------------------------------------

if st.session_state.planner is None:
    st.title("Drilling Cost Planner")
    st.caption("Load the activity schedule, efficiency and cost files, or use the demo data.")
    activity_file = st.file_uploader("Activity schedule", type=["xlsx", "csv"])
    efficiency_file = st.file_uploader("Efficiency / program", type=["xlsx", "csv"])
    cost_file = st.file_uploader("Cost catalog", type=["xlsx", "csv"])
    col_a, col_b = st.columns(2)
    if col_a.button("Process files", disabled=not (activity_file or efficiency_file or cost_file)):
        st.session_state.planner = new_session(
            load_uploaded_files(activity_file, efficiency_file, cost_file)
        )
        st.rerun()
    if col_b.button("Use demo data", type="primary"):
        st.session_state.planner = new_session()
        st.rerun()
    st.stop()

planner = st.session_state.planner
store = planner["store"]
wells = planner["wells"]
program = planner["program"]
catalog = planner["catalog"]
wells_by_id = {w.id: w for w in wells}

# ---------------------------------------------------------------------------
# Sidebar: well selection and parameters
# ---------------------------------------------------------------------------

with st.sidebar:
    st.title("Drilling Cost Planner")
    well_id = st.selectbox(
        "Well", [w.id for w in wells], key="well_id",
        format_func=lambda wid: f"{wells_by_id[wid].name} ({wells_by_id[wid].type})",
    )
    well = wells_by_id[well_id]
    params = store.params_for(well)

    st.subheader("Depths & move")
    td_guide = st.number_input("TD Guide (m)", 100, 1500, int(params.td_guide), step=10)
    td_isolation = st.number_input("TD Isolation (m)", int(td_guide), 4000,
                                   max(int(params.td_isolation), int(td_guide)), step=10)
    dtm = st.number_input("DTM (km)", 0, 500, int(params.dtm))
    trailer_hours = st.number_input("Trailer hours", 0.0, 100.0, float(params.trailer_hours))

    st.subheader("Options")
    is_first_well = st.checkbox("First well (mobilization)", params.is_first_well)
    is_offline_bop = st.checkbox("BOP tested offline", params.is_offline_bop)
    is_no_logging = st.checkbox("No logging", params.is_no_logging)
    is_directional = st.checkbox("Directional", params.is_directional)
    has_geo = st.checkbox("Geological control", params.has_geological_control)
    user_notes = st.text_area("Notes", params.user_notes)

    params = params.updated(
        td_guide=td_guide,
        td_isolation=td_isolation,
        dtm=dtm,
        trailer_hours=trailer_hours,
        is_first_well=is_first_well,
        is_offline_bop=is_offline_bop,
        is_no_logging=is_no_logging,
        is_directional=is_directional,
        has_geological_control=has_geo,
        user_notes=user_notes,
    )

    with st.expander("Line adjustments"):
        for line in program:
            current = params.adjustment_for(line.id)
            if line.type in RATE_LINE_TYPES:
                label = f"{line.id}. {line.activity[:30]} (+m/h)"
                value = st.number_input(label, -50.0, 50.0,
                                        current.value if current else 0.0, key=f"adj_{well.id}_{line.id}")
                adj = Adjustment(AdjustmentType.ABSOLUTE_VALUE, value) if value else None
            else:
                label = f"{line.id}. {line.activity[:30]} (% time)"
                value = st.slider(label, -50, 100,
                                  int(current.value) if current else 0, key=f"adj_{well.id}_{line.id}")
                adj = Adjustment(AdjustmentType.PERCENTAGE_TIME, value) if value else None
            params = params.with_adjustment(line.id, adj)

    store.set_params(well.id, params)

result = calculate_well_program(program, params, catalog)

tab_single, tab_scenarios, tab_budget, tab_agent = st.tabs(
    ["Single Well Analysis", "Scenario Planning", "Annual Budget", "Assistant"]
)

# ---------------------------------------------------------------------------
# Single well
# ---------------------------------------------------------------------------

with tab_single:
    st.header(f"{well.name} · {well.equipment} · {well.type}")
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Total time", format_days(result.total_time_days))
    c2.metric("Total cost", format_dollar(result.total_cost))
    c3.metric("Final depth", f"{result.time_curve[-1].depth:,.0f} m")
    c4.metric("Warnings", len(result.warnings))

    for warning in result.warnings:
        st.warning(warning)

    chart_mode = st.radio("Curve", ["total", "net", "both"], horizontal=True)
    curves = []
    if chart_mode in ("total", "both"):
        curves.append(result.curve_frame().assign(curve="Total"))
    if chart_mode in ("net", "both"):
        curves.append(result.curve_frame(net=True).assign(curve="Net of DTM"))
    curve_df = pd.concat(curves)
    curve_df["depth"] = -curve_df["depth"]
    st.line_chart(curve_df, x="time", y="depth", color="curve")

    st.subheader("Program")
    st.dataframe(result.lines_frame(), use_container_width=True, hide_index=True)

    st.subheader("AFE summary")
    st.dataframe(result.cost_summary_frame(), use_container_width=True, hide_index=True)

    d1, d2 = st.columns(2)
    d1.download_button(
        "Program (CSV)", generate_program_csv(result),
        file_name=f"{well.id}_Drilling_Program.csv", mime="text/csv",
    )
    d2.download_button(
        "Program (Excel)", generate_program_workbook(result),
        file_name=f"{well.id}_Drilling_Program.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )

    st.subheader("Save scenario")
    scenario_name = st.text_input("Scenario name")
    if st.button("Save scenario"):
        if not scenario_name.strip():
            st.error("Please enter a name for this scenario")
        else:
            store.save(well.id, scenario_name.strip(), params)
            st.success("Scenario saved")

    st.subheader("Risk analysis")
    if st.button("Analyze risks"):
        try:
            st.session_state.risk_text = analyze_risk(result)
        except RuntimeError as e:
            st.error(str(e))
    if st.session_state.risk_text:
        st.markdown(st.session_state.risk_text)

# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------

def _scenario_label(rows, scenario_id):
    return next((f"{r['well_name']} / {r['scenario_name']}"
                 for r in rows if r["scenario_id"] == scenario_id), "")


def _load_scenario(scenario_id):
    """Restore a scenario and reset the widgets that hold its well's old values."""
    store.load(scenario_id)
    well_id = store.get(scenario_id).well_id
    for line in program:
        st.session_state.pop(f"adj_{well_id}_{line.id}", None)
    st.session_state["well_id"] = well_id
    st.session_state.risk_text = ""
    logger.info("Loaded scenario %s into well %s", scenario_id, well_id)


with tab_scenarios:
    st.header("Scenario Management")
    rows = compare_scenarios(store.list(), wells, program, catalog)
    if not rows:
        st.info("No scenarios saved yet. Save one from the Single Well Analysis tab.")
    else:
        df = pd.DataFrame(rows)
        df.insert(0, "include", [r["scenario_id"] in {s.id for s in store.budget_scenarios()}
                                 for r in rows])
        table = df.drop(columns=["scenario_id", "well_id"])
        edited = st.data_editor(
            table,
            hide_index=True,
            disabled=[c for c in table.columns if c != "include"],
            use_container_width=True,
        )
        selected_ids = [r["scenario_id"] for r, inc in zip(rows, edited["include"]) if inc]
        if st.button(f"Send to Annual Budget ({len(selected_ids)})", disabled=not selected_ids):
            store.select_for_budget(selected_ids)
            st.success("Budget selection updated")

        to_load = st.selectbox("Load scenario", [""] + [r["scenario_id"] for r in rows],
                               format_func=lambda sid: _scenario_label(rows, sid))
        st.button("Load", disabled=not to_load, on_click=_load_scenario, args=(to_load,))

        to_delete = st.selectbox("Delete scenario", [""] + [r["scenario_id"] for r in rows],
                                 format_func=lambda sid: _scenario_label(rows, sid))
        if to_delete and st.button("Delete"):
            store.delete(to_delete)
            st.rerun()

# ---------------------------------------------------------------------------
# Annual budget
# ---------------------------------------------------------------------------

with tab_budget:
    st.header("Annual Budget Review")
    budget_scenarios = store.budget_scenarios()
    if not budget_scenarios:
        st.info("No scenarios selected. Use the Scenario Planning tab to build the budget.")
    else:
        b1, b2 = st.columns(2)
        inflation = b1.slider("Inflation impact (%)", 0, 20, 0)
        efficiency = b2.slider("Efficiency gain (%)", 0, 30, 0)

        details = build_budget_details(budget_scenarios, wells, program, catalog)
        cash_flow = annual_cash_flow(details, inflation=inflation, efficiency=efficiency)

        st.metric(f"Total budget {cash_flow['year']}", format_dollar(cash_flow["total_budget"]))
        months_df = pd.DataFrame(cash_flow["months"]).set_index("name")
        st.bar_chart(months_df["cost"])
        st.line_chart(months_df["cumulative"])
        st.dataframe(pd.DataFrame(cash_flow["wells"]), use_container_width=True, hide_index=True)
        st.download_button(
            "Budget (Excel)", generate_budget_workbook(cash_flow),
            file_name=f"annual_budget_{cash_flow['year']}.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )

# ---------------------------------------------------------------------------
# Assistant
# ---------------------------------------------------------------------------


def _run_agent():
    """Run the agent and process events."""
    api_key = os.environ.get("ANTHROPIC_API_KEY")
    if not api_key:
        st.error("ANTHROPIC_API_KEY not set. Create a .env file with your key.")
        return

    model = os.environ.get("DRILLPLAN_MODEL", "claude-sonnet-4-6")
    agent = AgentOrchestrator(api_key=api_key, model=model, session_state=planner)

    full_response = ""
    with st.chat_message("assistant"):
        response_container = st.empty()
        for event in agent.run(st.session_state.api_messages):
            if isinstance(event, ToolCallEvent):
                st.caption(f"🔧 {event.tool_name}")
            elif isinstance(event, TextEvent):
                full_response += event.text
                response_container.markdown(full_response + "▌")
            elif isinstance(event, ClarifyEvent):
                st.session_state.pending_question = {
                    "question": event.question,
                    "options": event.options,
                    "tool_use_id": event.tool_use_id,
                }
            elif isinstance(event, DoneEvent):
                response_container.markdown(full_response)
            elif isinstance(event, ErrorEvent):
                st.error(f"Error: {event.message}")

    if full_response:
        st.session_state.messages.append({"role": "assistant", "content": full_response})


with tab_agent:
    for msg in st.session_state.messages:
        with st.chat_message(msg["role"]):
            st.markdown(msg["content"])

    pq = st.session_state.pending_question
    if pq:
        st.markdown(f"**🤔 {pq['question']}**")
        choice = st.radio("Select an option:", pq["options"], key="clarify_radio")
        if st.button("Continue", type="primary"):
            st.session_state.api_messages.append({
                "role": "user",
                "content": [{"type": "tool_result", "tool_use_id": pq["tool_use_id"],
                             "content": choice}],
            })
            st.session_state.messages.append({"role": "user", "content": choice})
            st.session_state.pending_question = None
            _run_agent()

    if prompt := st.chat_input("Ask about a well, scenario or the budget..."):
        st.session_state.messages.append({"role": "user", "content": prompt})
        st.session_state.api_messages.append({"role": "user", "content": prompt})
        with st.chat_message("user"):
            st.markdown(prompt)
        _run_agent()

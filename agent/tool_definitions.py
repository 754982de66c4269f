"""Claude API tool schemas for the Drilling Cost Planner assistant.

These definitions are sent to the Claude API as the `tools` parameter.
The `session_state` parameter is NOT included; it's injected by the
orchestrator when dispatching tool calls.
"""

_WELL_ID = {
    "type": "string",
    "description": "Well ID from the activity schedule (e.g., 'PC-4030').",
}

TOOL_DEFINITIONS = [
    {
        "name": "list_wells",
        "description": (
            "List the wells of the yearly activity schedule with their well type, "
            "rig and planned start date."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "well_type": {
                    "type": "string",
                    "description": (
                        "Well type to filter by, e.g. 'Convencional', "
                        "'NOC Premium + DwC', 'NOC BTC', or 'all'."
                    ),
                }
            },
            "required": [],
        },
    },
    {
        "name": "calculate_well",
        "description": (
            "Calculate the drilling program of a well: per-activity durations and "
            "costs, total days, total cost and catalog warnings. Optional overrides "
            "change the well's working configuration."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "well_id": _WELL_ID,
                "overrides": {
                    "type": "object",
                    "description": (
                        "Parameter changes. Keys: td_guide, td_isolation (m), dtm (km), "
                        "trailer_hours, equipment_type, well_type, is_first_well, "
                        "is_offline_bop, is_no_logging, is_directional, "
                        "has_geological_control."
                    ),
                },
            },
            "required": ["well_id"],
        },
    },
    {
        "name": "set_adjustment",
        "description": (
            "Adjust one program line of a well. ABSOLUTE_VALUE adds to the line's "
            "rate (ROP / running speed, m/h); PERCENTAGE_TIME scales a fixed "
            "duration by a percentage. NONE clears the adjustment."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "well_id": _WELL_ID,
                "line_id": {
                    "type": "string",
                    "description": "Program line ID ('0' to '17').",
                },
                "adjustment_type": {
                    "type": "string",
                    "enum": ["ABSOLUTE_VALUE", "PERCENTAGE_TIME", "NONE"],
                },
                "value": {
                    "type": "number",
                    "description": "Rate delta (m/h) or time percentage.",
                },
            },
            "required": ["well_id", "line_id", "adjustment_type", "value"],
        },
    },
    {
        "name": "get_cost_summary",
        "description": (
            "AFE-style cost summary of a well: charges aggregated by group "
            "(02.01 EQUIPO, 02.02 SERVICIOS, 02.03 MATERIALES), item and price."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "well_id": _WELL_ID,
                "group": {
                    "type": "string",
                    "enum": ["all", "02.01 EQUIPO", "02.02 SERVICIOS", "02.03 MATERIALES"],
                },
            },
            "required": ["well_id"],
        },
    },
    {
        "name": "save_scenario",
        "description": "Save the well's current working configuration as a named scenario.",
        "input_schema": {
            "type": "object",
            "properties": {
                "well_id": _WELL_ID,
                "name": {"type": "string", "description": "Scenario name."},
            },
            "required": ["well_id", "name"],
        },
    },
    {
        "name": "load_scenario",
        "description": (
            "Restore a saved scenario as its well's working configuration, "
            "replacing the current parameters and adjustments."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "scenario_id": {
                    "type": "string",
                    "description": "Scenario ID from compare_scenarios.",
                },
            },
            "required": ["scenario_id"],
        },
    },
    {
        "name": "compare_scenarios",
        "description": (
            "Compare saved scenarios: rig, directional flag, estimated cost and days."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "well_id": {
                    "type": "string",
                    "description": "Restrict to one well, or 'all'.",
                }
            },
            "required": [],
        },
    },
    {
        "name": "get_annual_budget",
        "description": (
            "Monthly cash flow of the selected scenarios for the campaign year. "
            "Costs are spread linearly by day from each well's start date."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "scenario_ids": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Scenarios to include. Omit for all saved scenarios.",
                },
                "inflation": {
                    "type": "number",
                    "description": "Inflation impact, percent (0-20).",
                    "minimum": 0,
                    "maximum": 20,
                },
                "efficiency": {
                    "type": "number",
                    "description": "Efficiency gain, percent (0-30).",
                    "minimum": 0,
                    "maximum": 30,
                },
            },
            "required": [],
        },
    },
    {
        "name": "ask_user_question",
        "description": (
            "Pause and ask the user a clarifying question with a fixed set of "
            "options, e.g. before saving a scenario or building the budget."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "question": {"type": "string"},
                "options": {
                    "type": "array",
                    "items": {"type": "string"},
                },
            },
            "required": ["question", "options"],
        },
    },
]

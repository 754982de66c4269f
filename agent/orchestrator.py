"""Tool-use loop between Claude and the planner's engine tools."""

import json
import logging
from dataclasses import dataclass, field
from typing import Generator, List, Optional

import anthropic

from agent.prompts import SYSTEM_PROMPT
from agent.tool_definitions import TOOL_DEFINITIONS
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

logger = logging.getLogger(__name__)

CLARIFY_TOOL = "ask_user_question"

MAX_TURNS = 15
MAX_RESULT_CHARS = 50_000


# ---------------------------------------------------------------------------
# Tool dispatch
# ---------------------------------------------------------------------------

TOOL_FUNCTIONS = {
    "list_wells": lambda state, **kw: list_wells(state, kw.get("well_type", "all")),
    "calculate_well": lambda state, **kw: calculate_well(
        state, kw["well_id"], kw.get("overrides")
    ),
    "set_adjustment": lambda state, **kw: set_adjustment(
        state, kw["well_id"], kw["line_id"], kw["adjustment_type"], kw.get("value", 0)
    ),
    "get_cost_summary": lambda state, **kw: get_cost_summary(
        state, kw["well_id"], kw.get("group", "all")
    ),
    "save_scenario": lambda state, **kw: save_scenario(state, kw["well_id"], kw["name"]),
    "load_scenario": lambda state, **kw: load_scenario(state, kw["scenario_id"]),
    "compare_scenarios": lambda state, **kw: compare_scenarios(state, kw.get("well_id", "all")),
    "get_annual_budget": lambda state, **kw: get_annual_budget(
        state, kw.get("scenario_ids"), kw.get("inflation", 0), kw.get("efficiency", 0)
    ),
}


def dispatch_tool(name: str, input_args: dict, session_state: dict) -> str:
    """Run one tool and serialize its result; failures come back as {"error": ...}."""
    fn = TOOL_FUNCTIONS.get(name)
    if fn is None:
        return json.dumps({"error": f"Unknown tool: {name}"})
    try:
        payload = fn(session_state, **input_args)
    except Exception as e:
        logger.exception("Tool %s failed", name)
        payload = {"error": str(e)}
    text = json.dumps(payload, default=str)
    if len(text) > MAX_RESULT_CHARS:
        logger.warning("Truncating %s result (%d chars)", name, len(text))
        text = text[:MAX_RESULT_CHARS] + '..."}'
    return text


# ---------------------------------------------------------------------------
# Events yielded to the UI / CLI
# ---------------------------------------------------------------------------

@dataclass
class TextEvent:
    text: str
    type: str = "text"


@dataclass
class ToolCallEvent:
    tool_name: str
    tool_input: dict = field(default_factory=dict)
    type: str = "tool_call"


@dataclass
class ToolResultEvent:
    tool_name: str
    result_preview: str = ""
    type: str = "tool_result"


@dataclass
class DoneEvent:
    full_response: str = ""
    type: str = "done"


@dataclass
class ErrorEvent:
    message: str = ""
    type: str = "error"


@dataclass
class ClarifyEvent:
    """Pause: the caller must answer with a tool_result for ``tool_use_id``."""
    question: str
    options: list
    tool_use_id: str
    type: str = "clarify"


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------

class AgentOrchestrator:
    """Drive the planner assistant over a shared session.

    The session (program, catalog, wells, scenario store) lives on the
    orchestrator, so a scenario saved in one turn is visible in the next.
    Pass ``client`` to substitute the Anthropic client.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "claude-sonnet-4-6",
        session_state: Optional[dict] = None,
        client=None,
        max_turns: int = MAX_TURNS,
    ):
        self.client = client or anthropic.Anthropic(api_key=api_key)
        self.model = model
        self.session_state = session_state if session_state is not None else new_session()
        self.max_turns = max_turns

    def _stream_reply(self, messages: list) -> Generator:
        """Stream one model reply as TextEvents; returns the final message."""
        with self.client.messages.stream(
            model=self.model,
            max_tokens=8192,
            system=SYSTEM_PROMPT,
            tools=TOOL_DEFINITIONS,
            messages=messages,
        ) as stream:
            for chunk in stream.text_stream:
                yield TextEvent(text=chunk)
            return stream.get_final_message()

    def _run_tools(self, tool_calls: List) -> Generator:
        """Execute tool calls; returns the tool_result blocks for the next user turn."""
        blocks = []
        for call in tool_calls:
            logger.debug("Tool call %s %s", call.name, call.input)
            output = dispatch_tool(call.name, call.input, self.session_state)
            yield ToolResultEvent(tool_name=call.name, result_preview=output[:200])
            blocks.append({"type": "tool_result", "tool_use_id": call.id, "content": output})
        return blocks

    def run(self, messages: list) -> Generator:
        """Continue the conversation in ``messages`` (Claude API format), yielding events.

        ``messages`` is extended in place with the assistant replies and
        tool results.
        """
        for _ in range(self.max_turns):
            try:
                reply = yield from self._stream_reply(messages)
            except anthropic.APIError as e:
                logger.error("Claude API error: %s", e)
                yield ErrorEvent(message=f"API error: {e}")
                return

            messages.append({"role": "assistant", "content": reply.content})

            tool_calls = [block for block in reply.content if block.type == "tool_use"]
            for call in tool_calls:
                yield ToolCallEvent(tool_name=call.name, tool_input=call.input)

            if not tool_calls:
                text = "".join(block.text for block in reply.content if block.type == "text")
                yield DoneEvent(full_response=text)
                return

            question = next((c for c in tool_calls if c.name == CLARIFY_TOOL), None)
            if question is not None:
                yield ClarifyEvent(
                    question=question.input.get("question", ""),
                    options=question.input.get("options", []),
                    tool_use_id=question.id,
                )
                return

            results = yield from self._run_tools(tool_calls)
            messages.append({"role": "user", "content": results})

        yield ErrorEvent(message="Exceeded maximum tool-use turns")

#!/usr/bin/env python3
"""CLI for talking to the Drilling Cost Planner assistant interactively."""

import logging
import os
import sys
from pathlib import Path

# Ensure repo root is on path
sys.path.insert(0, str(Path(__file__).resolve().parent))

from dotenv import load_dotenv

from agent.orchestrator import (
    AgentOrchestrator,
    ClarifyEvent,
    ErrorEvent,
    TextEvent,
    ToolCallEvent,
)

load_dotenv()

logging.basicConfig(
    level=os.environ.get("DRILLPLAN_LOG_LEVEL", "WARNING").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

_USE_ASCII = os.environ.get("DRILLPLAN_ASCII", "").strip() == "1"

# tool name -> (emoji, ascii)
_ICONS = {
    "list_wells": ("📋", "[wells]"),
    "calculate_well": ("🧮", "[calc]"),
    "set_adjustment": ("🎚️", "[adj]"),
    "get_cost_summary": ("💰", "[afe]"),
    "save_scenario": ("💾", "[save]"),
    "load_scenario": ("📂", "[load]"),
    "compare_scenarios": ("⚖️", "[compare]"),
    "get_annual_budget": ("📅", "[budget]"),
    None: ("🔧", "[>]"),
}


def _icon(tool_name: str) -> str:
    emoji, ascii_icon = _ICONS.get(tool_name, _ICONS[None])
    return ascii_icon if _USE_ASCII else emoji


def _ask(event: ClarifyEvent) -> str:
    print(f"\n\n  ? {event.question}")
    for i, option in enumerate(event.options, 1):
        print(f"    {i}. {option}")
    choice = input("  Choice> ").strip()
    if choice.isdigit() and 1 <= int(choice) <= len(event.options):
        choice = event.options[int(choice) - 1]
    return choice


def _run_turn(agent: AgentOrchestrator, messages: list):
    """Stream one user turn, resuming after each clarifying question."""
    resume = True
    while resume:
        resume = False
        for event in agent.run(messages):
            if isinstance(event, ToolCallEvent):
                print(f"  {_icon(event.tool_name)} Calling {event.tool_name}...", flush=True)
            elif isinstance(event, TextEvent):
                print(event.text, end="", flush=True)
            elif isinstance(event, ClarifyEvent):
                messages.append({
                    "role": "user",
                    "content": [{
                        "type": "tool_result",
                        "tool_use_id": event.tool_use_id,
                        "content": _ask(event),
                    }],
                })
                resume = True
            elif isinstance(event, ErrorEvent):
                err_icon = "[X]" if _USE_ASCII else "❌"
                print(f"\n{err_icon} Error: {event.message}")


def main():
    api_key = os.environ.get("ANTHROPIC_API_KEY")
    if not api_key:
        print("Error: ANTHROPIC_API_KEY not set. Copy .env.example to .env and add your key.")
        sys.exit(1)

    model = os.environ.get("DRILLPLAN_MODEL", "claude-sonnet-4-6")
    agent = AgentOrchestrator(api_key=api_key, model=model)
    messages = []

    print("=" * 60)
    print("  Drilling Cost Planner - CLI")
    print("  Type 'quit' or 'exit' to stop.")
    print("=" * 60)
    print()

    while True:
        try:
            user_input = input("You> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nGoodbye!")
            break

        if not user_input:
            continue
        if user_input.lower() in ("quit", "exit"):
            print("Goodbye!")
            break

        messages.append({"role": "user", "content": user_input})

        print()
        _run_turn(agent, messages)
        print("\n")


if __name__ == "__main__":
    main()

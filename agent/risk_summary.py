"""Narrative risk summary of a calculated well program."""

import json
import logging
import os

import anthropic

from agent.prompts import RISK_ANALYSIS_PROMPT
from engine.types import SimulationResult
from utils.formatting import format_musd

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-6"


def summarize_for_prompt(result: SimulationResult) -> dict:
    """Compact view of a result for the risk prompt."""
    return {
        "totalDays": f"{result.total_time_days:.1f}",
        "totalCost": format_musd(result.total_cost),
        "maxDepth": result.time_curve[-1].depth if result.time_curve else 0,
        "activities": [
            {
                "activity": rl.activity,
                "duration": f"{rl.calculated_duration:.1f} hrs",
                "cost": round(rl.calculated_cost),
            }
            for rl in result.lines
        ],
    }


def analyze_risk(result: SimulationResult, api_key: str = None,
                 model: str = None, client=None) -> str:
    """Ask the model for the top operational risks and one cost optimization.

    Raises:
        RuntimeError: no API key is configured, or the API call failed.
    """
    if client is None:
        api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        if not api_key:
            raise RuntimeError("API Key is missing. Please set ANTHROPIC_API_KEY.")
        client = anthropic.Anthropic(api_key=api_key)

    prompt = RISK_ANALYSIS_PROMPT.format(data=json.dumps(summarize_for_prompt(result)))

    try:
        response = client.messages.create(
            model=model or os.environ.get("DRILLPLAN_MODEL", DEFAULT_MODEL),
            max_tokens=1024,
            messages=[{"role": "user", "content": prompt}],
        )
    except anthropic.APIError as e:
        logger.error("Risk analysis API error: %s", e)
        raise RuntimeError("Failed to contact AI service.") from e

    text = "".join(block.text for block in response.content if block.type == "text")
    return text or "No analysis generated."

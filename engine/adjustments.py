"""Directional penalty and user overrides applied to rates and durations."""

from typing import Optional

from engine.constants import DIRECTIONAL_ROP_PENALTY, MIN_EFFECTIVE_RATE
from engine.types import Adjustment, AdjustmentType


def apply_adjustment(base_value: float, adjustment: Optional[Adjustment],
                     is_time: bool, is_directional: bool) -> float:
    """Return the effective rate (``is_time=False``) or duration (``is_time=True``).

    Rates on directional wells take the directional penalty before any user
    adjustment. ABSOLUTE_VALUE only adjusts rates and PERCENTAGE_TIME only
    adjusts durations; a mismatched adjustment is ignored.
    """
    value = base_value
    if not is_time and is_directional:
        value = value * DIRECTIONAL_ROP_PENALTY

    if adjustment is None:
        return value

    if is_time and adjustment.type is AdjustmentType.PERCENTAGE_TIME:
        return value * (1 + adjustment.value / 100)
    if not is_time and adjustment.type is AdjustmentType.ABSOLUTE_VALUE:
        return max(MIN_EFFECTIVE_RATE, value + adjustment.value)
    return value

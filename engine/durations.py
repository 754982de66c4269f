"""Duration engines. Every engine returns hours.

A line missing the numeric parameter its engine needs yields 0 hours.
"""

from typing import Optional

from engine.adjustments import apply_adjustment
from engine.types import ActivityLine, Adjustment, LineType


def fixed_time(line: ActivityLine, adj: Optional[Adjustment], is_directional: bool) -> float:
    """MOVING, FLAT_TIME, CEMENTING and LOGGING lines: base duration, adjusted."""
    return apply_adjustment(line.base_duration_hours or 0, adj, True, is_directional)


def proportional_time(line: ActivityLine, distance: float,
                      adj: Optional[Adjustment], is_directional: bool) -> float:
    """DRILLING (distance / ROP) and CASING (distance / joints-per-hour * joint length)."""
    if line.type is LineType.DRILLING and line.rop:
        effective_rop = apply_adjustment(line.rop, adj, False, is_directional)
        return distance / effective_rop

    if line.type is LineType.CASING and line.casing_speed and line.pipe_length:
        meters_per_hour = line.casing_speed * line.pipe_length
        effective_speed = apply_adjustment(meters_per_hour, adj, False, is_directional)
        return distance / effective_speed

    return 0.0


def tripping_time(line: ActivityLine, depth: float,
                  adj: Optional[Adjustment], is_directional: bool) -> float:
    """Trips in/out of hole: depth over the aggregate maneuver speed."""
    if not line.tripping_speed:
        return 0.0
    effective_speed = apply_adjustment(line.tripping_speed, adj, False, is_directional)
    return depth / effective_speed

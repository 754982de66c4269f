"""Program calculator: runs the duration and cost engines over a drilling
program and derives the depth/time/cost curves and the AFE cost summary.

The main pass is a fold over the applicable lines carrying an immutable
``_Accumulator``; ``calculate_well_program`` is the only entry point.
"""

import logging
from dataclasses import dataclass, replace
from functools import reduce
from typing import Callable, Dict, Iterable, List, NamedTuple, Sequence, Tuple

from engine.constants import NO_LOGGING_EXTRA_LINE_ID
from engine.costs import CatalogLike, CostContext, as_catalog, compute_line_cost, is_mobilization_line
from engine.durations import fixed_time, proportional_time, tripping_time
from engine.types import (
    ActivityLine,
    CostRow,
    CurvePoint,
    LineType,
    ResultLine,
    Section,
    SimulationParams,
    SimulationResult,
)

logger = logging.getLogger(__name__)

ORIGIN = CurvePoint(time=0.0, depth=0.0, cost=0.0, activity="Start")


# ---------------------------------------------------------------------------
# Filtering and mobilization pre-pass
# ---------------------------------------------------------------------------

def filter_program(program: Iterable[ActivityLine], params: SimulationParams) -> List[ActivityLine]:
    """Drop offline-capable lines (offline BOP test) and logging lines (no logging)."""
    active = []
    for line in program:
        if params.is_offline_bop and line.is_offline_capable:
            continue
        if params.is_no_logging and (line.type is LineType.LOGGING
                                     or line.id == NO_LOGGING_EXTRA_LINE_ID):
            continue
        active.append(line)
    return active


def mobilization_hours(lines: Iterable[ActivityLine], params: SimulationParams) -> float:
    return sum(
        fixed_time(line, params.adjustment_for(line.id), params.is_directional)
        for line in lines
        if is_mobilization_line(line)
    )


def target_depth_for(line: ActivityLine, params: SimulationParams) -> float:
    if line.section is Section.GUIDE:
        return params.td_guide
    if line.section is Section.ISOLATION:
        return params.td_isolation
    return 0.0


# ---------------------------------------------------------------------------
# Duration dispatch
# ---------------------------------------------------------------------------

class LineMotion(NamedTuple):
    """Duration of a line and what it does to the bit depth."""
    duration_hours: float
    depth_start: float
    depth_end: float
    section_meters: float


def _fixed_motion(line, params, target_depth, bit_depth) -> LineMotion:
    hours = fixed_time(line, params.adjustment_for(line.id), params.is_directional)
    return LineMotion(hours, bit_depth, bit_depth, 0.0)


def _drilling_motion(line, params, target_depth, bit_depth) -> LineMotion:
    # Isolation drills out from the guide shoe; guide drills from surface.
    start = params.td_guide if line.section is Section.ISOLATION else 0.0
    end = target_depth
    meters = max(0.0, end - start)
    hours = proportional_time(line, meters, params.adjustment_for(line.id), params.is_directional)
    return LineMotion(hours, start, end, meters)


def _casing_motion(line, params, target_depth, bit_depth) -> LineMotion:
    # Casing is run from surface to the section TD.
    hours = proportional_time(line, target_depth, params.adjustment_for(line.id), params.is_directional)
    return LineMotion(hours, bit_depth, bit_depth, target_depth)


def _tripping_motion(line, params, target_depth, bit_depth) -> LineMotion:
    hours = tripping_time(line, target_depth, params.adjustment_for(line.id), params.is_directional)
    return LineMotion(hours, bit_depth, bit_depth, 0.0)


MotionModel = Callable[[ActivityLine, SimulationParams, float, float], LineMotion]

DURATION_MODELS: Dict[LineType, MotionModel] = {
    LineType.MOVING: _fixed_motion,
    LineType.FLAT_TIME: _fixed_motion,
    LineType.CEMENTING: _fixed_motion,
    LineType.LOGGING: _fixed_motion,
    LineType.DRILLING: _drilling_motion,
    LineType.CASING: _casing_motion,
    LineType.TRIPPING: _tripping_motion,
}


# ---------------------------------------------------------------------------
# Main pass
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class _Accumulator:
    cumulative_time_hours: float = 0.0
    cumulative_cost: float = 0.0
    current_bit_depth: float = 0.0
    result_lines: Tuple[ResultLine, ...] = ()
    curve_points: Tuple[CurvePoint, ...] = (ORIGIN,)
    cost_rows: Tuple[CostRow, ...] = ()
    warnings: Tuple[str, ...] = ()


def _step(acc: _Accumulator, line: ActivityLine, params: SimulationParams,
          catalog, total_mob_hours: float) -> _Accumulator:
    target_depth = target_depth_for(line, params)
    motion = DURATION_MODELS[line.type](line, params, target_depth, acc.current_bit_depth)
    duration = motion.duration_hours

    line_cost = compute_line_cost(
        line,
        duration / 24,
        params,
        CostContext(target_depth=target_depth, section_meters=motion.section_meters),
        catalog,
    )

    bit_depth = motion.depth_end if line.type is LineType.DRILLING else acc.current_bit_depth
    start_time_hours = acc.cumulative_time_hours
    start_cost = acc.cumulative_cost
    end_time_hours = start_time_hours + duration
    end_cost = start_cost + line_cost.total_cost

    days_from_spud = 0.0
    if not is_mobilization_line(line):
        days_from_spud = (end_time_hours - total_mob_hours) / 24

    result_line = ResultLine(
        line=line,
        calculated_duration=duration,
        calculated_cost=line_cost.total_cost,
        cumulative_time=end_time_hours / 24,
        days_from_spud=days_from_spud,
        cumulative_cost=end_cost,
        depth_start=motion.depth_start,
        depth_end=bit_depth,
    )

    # Drilling slopes from section start to end; everything else is flat.
    if line.type is LineType.DRILLING:
        curve_start, curve_end = motion.depth_start, motion.depth_end
    else:
        curve_start = curve_end = bit_depth

    points = (
        CurvePoint(start_time_hours / 24, curve_start, start_cost, f"{line.activity} (Start)"),
        CurvePoint(end_time_hours / 24, curve_end, end_cost, line.activity),
    )

    return replace(
        acc,
        cumulative_time_hours=end_time_hours,
        cumulative_cost=end_cost,
        current_bit_depth=bit_depth,
        result_lines=acc.result_lines + (result_line,),
        curve_points=acc.curve_points + points,
        cost_rows=acc.cost_rows + line_cost.rows,
        warnings=acc.warnings + line_cost.warnings,
    )


# ---------------------------------------------------------------------------
# Curve and summary derivation
# ---------------------------------------------------------------------------

def net_curve(curve: Sequence[CurvePoint], mobilization_days: float) -> Tuple[CurvePoint, ...]:
    """Shift the curve left by the mobilization time, dropping the mobilization phase."""
    return tuple(
        replace(point, time=max(0.0, point.time - mobilization_days), dashed=True)
        for point in curve
        if point.time >= mobilization_days
    )


def aggregate_cost_rows(rows: Iterable[CostRow]) -> Tuple[CostRow, ...]:
    """Collapse rows sharing (group, item, description, price); sort by group then item."""
    merged: Dict[tuple, CostRow] = {}
    for row in rows:
        key = (row.group, row.item, row.description, row.price)
        existing = merged.get(key)
        if existing is None:
            merged[key] = row
        else:
            merged[key] = replace(
                existing,
                quantity=existing.quantity + row.quantity,
                total=existing.total + row.total,
            )
    return tuple(sorted(merged.values(), key=lambda r: (r.group, r.item)))


def calculate_well_program(program: Iterable[ActivityLine], params: SimulationParams,
                           catalog: CatalogLike) -> SimulationResult:
    """Compute the time and cost schedule of one well.

    Args:
        program: The drilling program template, in execution order.
        params: Well configuration.
        catalog: Cost catalog entries.

    Returns:
        SimulationResult with per-line results, totals, the total and net
        depth/time/cost curves, the aggregated cost summary and the
        deduplicated catalog-miss warnings.
    """
    catalog = as_catalog(catalog)
    active_lines = filter_program(program, params)
    total_mob_hours = mobilization_hours(active_lines, params)

    acc = reduce(
        lambda a, line: _step(a, line, params, catalog, total_mob_hours),
        active_lines,
        _Accumulator(),
    )

    warnings = tuple(dict.fromkeys(acc.warnings))
    result = SimulationResult(
        lines=acc.result_lines,
        total_time_days=acc.cumulative_time_hours / 24,
        total_cost=acc.cumulative_cost,
        time_curve=acc.curve_points,
        time_curve_net=net_curve(acc.curve_points, total_mob_hours / 24),
        cost_summary=aggregate_cost_rows(acc.cost_rows),
        warnings=warnings,
    )

    logger.debug(
        "Calculated %d lines for %s/%s: %.2f days, %.2f USD",
        len(result.lines), params.equipment_type, params.well_type,
        result.total_time_days, result.total_cost,
    )
    if warnings:
        logger.info("Calculation finished with %d catalog warnings", len(warnings))
    return result

"""Annual budget roll-up: monthly cash flow of the wells selected for the year.

Each well's engine result is scaled by the global inflation / efficiency
drivers and its cost spread linearly by day from the well's start date.
"""

import logging
from datetime import date, timedelta
from typing import Iterable, List, Optional

from engine.calculator import calculate_well_program
from engine.costs import CatalogLike
from engine.types import ActivityLine, Scenario, Well

logger = logging.getLogger(__name__)

MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
          "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def build_budget_details(scenarios: Iterable[Scenario], wells: Iterable[Well],
                         program: List[ActivityLine], catalog: CatalogLike) -> List[dict]:
    """Run the engine for each budget scenario, ordered by the well's start date.

    Scenarios whose well is not in the schedule are kept with ``well=None``
    and sorted last; the cash flow skips them.
    """
    wells_by_id = {w.id: w for w in wells}
    details = []
    for scenario in scenarios:
        well = wells_by_id.get(scenario.well_id)
        result = calculate_well_program(program, scenario.params, catalog)
        details.append({"well": well, "scenario": scenario, "result": result})
    details.sort(key=lambda d: (d["well"] is None, d["well"].start_date if d["well"] else date.max))
    return details


def allocate_by_day(start_date: date, total_cost: float, duration_days: float,
                    year: int) -> List[float]:
    """Spread ``total_cost`` evenly over ``duration_days`` starting at ``start_date``.

    Returns twelve monthly amounts for ``year``. Days outside the year are
    dropped; a trailing fractional day gets its fractional share.
    """
    monthly = [0.0] * 12
    if duration_days <= 0:
        return monthly

    daily_cost = total_cost / duration_days
    whole_days = int(duration_days)
    shares = [(start_date + timedelta(days=i), daily_cost) for i in range(whole_days)]
    remainder = duration_days - whole_days
    if remainder > 0:
        shares.append((start_date + timedelta(days=whole_days), daily_cost * remainder))

    for day, amount in shares:
        if day.year == year:
            monthly[day.month - 1] += amount
    return monthly


def annual_cash_flow(details: Iterable[dict], inflation: float = 0,
                     efficiency: float = 0, year: Optional[int] = None) -> dict:
    """Monthly cash flow for the budget year.

    Args:
        details: Output of ``build_budget_details``.
        inflation: Inflation impact, percent (scales cost up).
        efficiency: Efficiency gain, percent (scales cost and duration down).
        year: Budget year; defaults to the year of the earliest well start.

    Returns:
        dict with "months" (name, cost, cumulative), "total_budget",
        "year" and per-well "wells" rows.
    """
    details = [d for d in details if d["well"] is not None]
    if year is None:
        year = min((d["well"].start_date.year for d in details), default=date.today().year)

    monthly = [0.0] * 12
    wells = []
    for d in details:
        well, result = d["well"], d["result"]
        adjusted_cost = result.total_cost * (1 + inflation / 100) * (1 - efficiency / 100)
        duration_days = result.total_time_days * (1 - efficiency / 100)
        if duration_days <= 0:
            logger.info("Skipping well %s: zero duration", well.id)
            continue

        allocation = allocate_by_day(well.start_date, adjusted_cost, duration_days, year)
        monthly = [a + b for a, b in zip(monthly, allocation)]
        wells.append({
            "well_id": well.id,
            "well_name": well.name,
            "scenario_name": d["scenario"].name,
            "start_date": well.start_date.isoformat(),
            "rig": d["scenario"].params.equipment_type,
            "adjusted_cost": adjusted_cost,
            "duration_days": duration_days,
            "in_year_cost": sum(allocation),
        })

    months = []
    cumulative = 0.0
    for name, cost in zip(MONTHS, monthly):
        cumulative += cost
        months.append({"name": name, "cost": cost, "cumulative": cumulative})

    return {
        "year": year,
        "months": months,
        "total_budget": cumulative,
        "wells": wells,
    }

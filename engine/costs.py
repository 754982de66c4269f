"""Cost engine: prices one program line against the catalog.

Stages run in a fixed order (rig rate, mobilization/DTM, services, casing
materials) and rows are appended in that order. A catalog miss adds a
warning and charges nothing for that item.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

from engine.catalog import CatalogQuery, CostCatalog
from engine.constants import (
    CASING_SUBCATEGORY,
    CONVENTIONAL_WELL_TYPE,
    DAYS_PER_MONTH,
    DTM_EXCESS_ITEM,
    DTM_EXCESS_THRESHOLD_KM,
    DTM_SHORT_ITEM,
    DTM_TRAILER_EXCESS_ITEM,
    DTM_TRAILER_SHORT_ITEM,
    GEOLOGICAL_CONTROL_SUBCATEGORY,
    GUIDE_CASING_LINE_ID,
    GUIDE_CASING_SIZE,
    ISOLATION_CASING_LINE_ID,
    ITEMS_RATE_A,
    ITEMS_RATE_B,
    K55_GRADE,
    K55_MAX_DEPTH,
    MOBILIZATION_ITEM,
    MOBILIZATION_LINE_ID,
    N80_LTC_GRADE,
    N80_SPLIT_LENGTH,
    N80_TBL_GRADE,
    RATE_A_ITEM,
    RATE_B_ITEM,
)
from engine.types import (
    ActivityLine,
    Category,
    CostCatalogItem,
    CostRow,
    LineType,
    SimulationParams,
    Unit,
)

CatalogLike = Union[CostCatalog, Iterable[CostCatalogItem]]


@dataclass(frozen=True)
class CostContext:
    target_depth: float
    section_meters: float


@dataclass(frozen=True)
class LineCost:
    total_cost: float
    rows: Tuple[CostRow, ...]
    warnings: Tuple[str, ...]


def as_catalog(catalog: CatalogLike) -> CostCatalog:
    return catalog if isinstance(catalog, CostCatalog) else CostCatalog(catalog)


def is_mobilization_line(line: ActivityLine) -> bool:
    return line.id == MOBILIZATION_LINE_ID or line.type is LineType.MOVING


def rate_class_item(line_id: str) -> Optional[str]:
    """Catalog item name of the rig hourly rate for this line, if it has one."""
    if line_id in ITEMS_RATE_A:
        return RATE_A_ITEM
    if line_id in ITEMS_RATE_B:
        return RATE_B_ITEM
    return None


# ---------------------------------------------------------------------------
# Service quantity rules, one per unit
# ---------------------------------------------------------------------------

ServiceRule = Callable[[CostCatalogItem, ActivityLine, float, CostContext], Optional[float]]


def _per_day(svc, line, days, context):
    return days


def _per_meter(svc, line, days, context):
    if line.type is LineType.DRILLING and svc.is_whitelisted(line.id):
        return context.section_meters
    return None


def _per_unit(svc, line, days, context):
    return 1 if svc.is_whitelisted(line.id) else None


def _per_month(svc, line, days, context):
    if is_mobilization_line(line):
        return None
    return days / DAYS_PER_MONTH


def _not_charged(svc, line, days, context):
    return None


SERVICE_QUANTITY_RULES: Dict[Unit, ServiceRule] = {
    Unit.DAY: _per_day,
    Unit.METER: _per_meter,
    Unit.UNIT: _per_unit,
    Unit.MONTH: _per_month,
    Unit.KM: _not_charged,
    Unit.HOUR: _not_charged,
}


def service_applies(svc: CostCatalogItem, line: ActivityLine, params: SimulationParams) -> bool:
    """Line whitelist, directional and geological-control filters for a service."""
    if not svc.applies_to_line(line.id):
        return False
    if svc.required_for_dir and not params.is_directional:
        return False
    if svc.excluded_for_dir and params.is_directional:
        return False
    if svc.subcategory == GEOLOGICAL_CONTROL_SUBCATEGORY and not params.has_geological_control:
        return False
    return True


# ---------------------------------------------------------------------------
# Line cost
# ---------------------------------------------------------------------------

def compute_line_cost(line: ActivityLine, duration_days: float, params: SimulationParams,
                      context: CostContext, catalog: CatalogLike) -> LineCost:
    """Price one program line.

    Args:
        line: Template line being priced.
        duration_days: Computed duration of the line, in days.
        params: Well configuration (rig, well type, flags, DTM inputs).
        context: Target depth of the line's section and meters drilled/cased.
        catalog: Cost catalog entries.

    Returns:
        LineCost with the line total, itemized rows and catalog-miss warnings.
    """
    catalog = as_catalog(catalog)
    rows: List[CostRow] = []
    warnings: List[str] = []
    hours = duration_days * 24
    rig = params.equipment_type

    def add_cost(entry: CostCatalogItem, qty: float):
        rows.append(CostRow(
            group=entry.category.group,
            item=entry.subcategory,
            description=entry.item,
            unit=entry.unit.value,
            price=entry.cost,
            quantity=qty,
            total=entry.cost * qty,
        ))

    def charge_equipment(item: str, unit: Unit, qty: float, warning: str):
        entry = catalog.find(CatalogQuery(
            category=Category.EQUIPMENT, unit=unit, item=item, equipment_type=rig,
        ))
        if entry is None:
            warnings.append(warning)
        else:
            add_cost(entry, qty)

    # --- 1. Rig hourly rate (02.01) ---
    rate_item = rate_class_item(line.id)
    if rate_item:
        charge_equipment(rate_item, Unit.HOUR, hours,
                         f"Missing Cost Item: EQUIPO / {rig} / {rate_item}")

    # --- 2. Mobilization / DTM (02.01) ---
    if is_mobilization_line(line):
        if params.is_first_well:
            charge_equipment(MOBILIZATION_ITEM, Unit.UNIT, 1,
                             f"Missing: EQUIPO / {rig} / {MOBILIZATION_ITEM}")
        else:
            charge_equipment(DTM_SHORT_ITEM, Unit.UNIT, 1,
                             f"Missing: EQUIPO / {rig} / {DTM_SHORT_ITEM}")
            charge_equipment(DTM_TRAILER_SHORT_ITEM, Unit.HOUR, params.trailer_hours,
                             f"Missing: EQUIPO / {rig} / {DTM_TRAILER_SHORT_ITEM}")

        if not params.is_first_well and params.dtm > DTM_EXCESS_THRESHOLD_KM:
            charge_equipment(DTM_EXCESS_ITEM, Unit.KM, params.dtm - DTM_EXCESS_THRESHOLD_KM,
                             f"Missing: EQUIPO / {rig} / {DTM_EXCESS_ITEM}")
            charge_equipment(DTM_TRAILER_EXCESS_ITEM, Unit.HOUR, params.trailer_hours,
                             f"Missing: EQUIPO / {rig} / {DTM_TRAILER_EXCESS_ITEM}")

    # --- 3. Services (02.02) ---
    for svc in catalog.by_category(Category.SERVICES):
        if not service_applies(svc, line, params):
            continue
        qty = SERVICE_QUANTITY_RULES[svc.unit](svc, line, duration_days, context)
        if qty is not None:
            add_cost(svc, qty)

    # --- 4. Casing materials (02.03) ---
    if line.type is LineType.CASING:
        if line.id == GUIDE_CASING_LINE_ID:
            casing = catalog.find_first(
                CatalogQuery(category=Category.MATERIALS, subcategory=CASING_SUBCATEGORY,
                             item_contains=GUIDE_CASING_SIZE, well_type=params.well_type),
                CatalogQuery(category=Category.MATERIALS, item_contains=GUIDE_CASING_SIZE),
            )
            if casing is not None:
                add_cost(casing, context.section_meters)
            else:
                warnings.append(f"Missing Material: {GUIDE_CASING_SIZE} Casing for {params.well_type}")

        # Isolation string is priced once, on the running line.
        if line.id == ISOLATION_CASING_LINE_ID:
            _charge_isolation_string(params, catalog, add_cost, warnings)

    return LineCost(
        total_cost=sum(row.total for row in rows),
        rows=tuple(rows),
        warnings=tuple(warnings),
    )


def _charge_isolation_string(params: SimulationParams, catalog: CostCatalog,
                             add_cost, warnings: List[str]):
    td = params.td_isolation

    def grade(name: str) -> Optional[CostCatalogItem]:
        # Materials only; an unrestricted item search could pick up a service
        # whose name contains the grade.
        return catalog.find(CatalogQuery(category=Category.MATERIALS, item_contains=name))

    if CONVENTIONAL_WELL_TYPE not in params.well_type:
        premium = grade(N80_TBL_GRADE)
        if premium is not None:
            add_cost(premium, td)
        else:
            warnings.append("Missing Material: TBL N80 Casing")
        return

    if td <= K55_MAX_DEPTH:
        k55 = grade(K55_GRADE)
        if k55 is not None:
            add_cost(k55, td)
        else:
            warnings.append("Missing Material: K55 Casing")
        return

    n80 = grade(N80_LTC_GRADE)
    k55 = grade(K55_GRADE)
    if n80 is not None and k55 is not None:
        add_cost(n80, N80_SPLIT_LENGTH)
        add_cost(k55, td - N80_SPLIT_LENGTH)
    else:
        warnings.append("Missing Material: N80/K55 Combined String")

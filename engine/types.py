"""Domain types for the drilling time & cost engine.

All reference data (program template, cost catalog) and results are frozen
dataclasses so a calculation pass can never mutate what it was given.
"""

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import Mapping, Optional, Tuple

import pandas as pd


class LineType(str, Enum):
    DRILLING = "DRILLING"
    FLAT_TIME = "FLAT_TIME"
    LOGGING = "LOGGING"
    CASING = "CASING"
    MOVING = "MOVING"
    TRIPPING = "TRIPPING"  # "Maniobras": depth / speed
    CEMENTING = "CEMENTING"


class Section(str, Enum):
    GUIDE = "GUIDE"
    ISOLATION = "ISOLATION"


class Category(str, Enum):
    EQUIPMENT = "EQUIPO"
    SERVICES = "SERVICIOS"
    MATERIALS = "MATERIALES"

    @property
    def group(self) -> str:
        """AFE group label used in the cost summary."""
        return _GROUP_LABELS[self]


_GROUP_LABELS = {
    Category.EQUIPMENT: "02.01 EQUIPO",
    Category.SERVICES: "02.02 SERVICIOS",
    Category.MATERIALS: "02.03 MATERIALES",
}


class Unit(str, Enum):
    DAY = "DIA"
    UNIT = "UNI"
    KM = "KM"
    METER = "MTS"
    MONTH = "MES"
    HOUR = "HS"


class AdjustmentType(str, Enum):
    ABSOLUTE_VALUE = "ABSOLUTE_VALUE"    # added to a rate / speed
    PERCENTAGE_TIME = "PERCENTAGE_TIME"  # scales a duration


@dataclass(frozen=True)
class Adjustment:
    type: AdjustmentType
    value: float

    @classmethod
    def absolute(cls, delta: float) -> "Adjustment":
        return cls(AdjustmentType.ABSOLUTE_VALUE, delta)

    @classmethod
    def percentage(cls, pct: float) -> "Adjustment":
        return cls(AdjustmentType.PERCENTAGE_TIME, pct)


@dataclass(frozen=True)
class ActivityLine:
    """One row of the drilling program template."""
    id: str
    phase: str
    activity: str
    type: LineType
    base_duration_hours: Optional[float] = None
    rop: Optional[float] = None             # m/h
    casing_speed: Optional[float] = None    # joints/h
    pipe_length: Optional[float] = None     # m/joint
    tripping_speed: Optional[float] = None  # m/h
    section: Optional[Section] = None
    is_offline_capable: bool = False


@dataclass(frozen=True)
class CostCatalogItem:
    """A priced catalog entry plus the filters that decide where it applies."""
    category: Category
    subcategory: str
    item: str
    unit: Unit
    cost: float
    equipment_type: Optional[str] = None
    well_type: Optional[str] = None
    required_for_dir: bool = False
    excluded_for_dir: bool = False
    apply_to_lines: Optional[Tuple[str, ...]] = None

    def applies_to_line(self, line_id: str) -> bool:
        """True when the entry has no line whitelist or lists ``line_id``."""
        return self.apply_to_lines is None or line_id in self.apply_to_lines

    def is_whitelisted(self, line_id: str) -> bool:
        """True only when the entry explicitly lists ``line_id``."""
        return self.apply_to_lines is not None and line_id in self.apply_to_lines


@dataclass(frozen=True)
class SimulationParams:
    """Per-well configuration.

    ``adjustments`` maps a template line id to its user adjustment. Treat it
    as read-only; use ``with_adjustment`` to derive a changed copy.
    """
    td_guide: float = 600
    td_isolation: float = 2200
    dtm: float = 120              # km
    trailer_hours: float = 10
    equipment_type: str = "H-202"
    is_first_well: bool = False
    well_type: str = "Convencional"
    is_offline_bop: bool = False
    is_no_logging: bool = False
    is_directional: bool = False
    has_geological_control: bool = False
    adjustments: Mapping[str, Adjustment] = field(default_factory=dict)
    user_notes: str = ""

    def adjustment_for(self, line_id: str) -> Optional[Adjustment]:
        return self.adjustments.get(line_id)

    def updated(self, **changes) -> "SimulationParams":
        return replace(self, **changes)

    def with_adjustment(self, line_id: str, adjustment: Optional[Adjustment]) -> "SimulationParams":
        """Return a copy with ``line_id``'s adjustment set, or cleared when None."""
        adjustments = dict(self.adjustments)
        if adjustment is None:
            adjustments.pop(line_id, None)
        else:
            adjustments[line_id] = adjustment
        return replace(self, adjustments=adjustments)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CostRow:
    """One itemized charge; also the shape of an aggregated AFE row."""
    group: str        # e.g. "02.01 EQUIPO"
    item: str         # catalog subcategory, e.g. "H-202"
    description: str  # catalog item, e.g. "TARIFA A"
    unit: str
    price: float
    quantity: float
    total: float


@dataclass(frozen=True)
class ResultLine:
    line: ActivityLine
    calculated_duration: float  # hours
    calculated_cost: float
    cumulative_time: float      # days, including mobilization
    days_from_spud: float       # days, construction only
    cumulative_cost: float
    depth_start: float
    depth_end: float

    @property
    def id(self) -> str:
        return self.line.id

    @property
    def phase(self) -> str:
        return self.line.phase

    @property
    def activity(self) -> str:
        return self.line.activity

    @property
    def type(self) -> LineType:
        return self.line.type


@dataclass(frozen=True)
class CurvePoint:
    time: float   # days
    depth: float  # m
    cost: float
    activity: str
    dashed: bool = False


@dataclass(frozen=True)
class SimulationResult:
    lines: Tuple[ResultLine, ...]
    total_time_days: float
    total_cost: float
    time_curve: Tuple[CurvePoint, ...]
    time_curve_net: Tuple[CurvePoint, ...]
    cost_summary: Tuple[CostRow, ...]
    warnings: Tuple[str, ...]

    def lines_frame(self) -> pd.DataFrame:
        return pd.DataFrame([
            {
                "id": rl.id,
                "phase": rl.phase,
                "activity": rl.activity,
                "type": rl.type.value,
                "duration_hours": rl.calculated_duration,
                "cost": rl.calculated_cost,
                "days_from_spud": rl.days_from_spud,
                "cumulative_days": rl.cumulative_time,
                "cumulative_cost": rl.cumulative_cost,
                "depth_start": rl.depth_start,
                "depth_end": rl.depth_end,
            }
            for rl in self.lines
        ])

    def cost_summary_frame(self) -> pd.DataFrame:
        columns = ["group", "item", "description", "unit", "price", "quantity", "total"]
        return pd.DataFrame(
            [{c: getattr(row, c) for c in columns} for row in self.cost_summary],
            columns=columns,
        )

    def curve_frame(self, net: bool = False) -> pd.DataFrame:
        points = self.time_curve_net if net else self.time_curve
        return pd.DataFrame(
            [{"time": p.time, "depth": p.depth, "cost": p.cost, "activity": p.activity}
             for p in points],
            columns=["time", "depth", "cost", "activity"],
        )


# ---------------------------------------------------------------------------
# Schedule / scenarios
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Well:
    id: str
    name: str
    type: str        # "Pozo tipo", e.g. "Convencional"
    start_date: date
    equipment: str   # rig, e.g. "H-202"
    done: bool = False


@dataclass(frozen=True)
class Scenario:
    """Frozen snapshot of a well's parameters."""
    id: str
    well_id: str
    name: str
    created_at: datetime
    params: SimulationParams

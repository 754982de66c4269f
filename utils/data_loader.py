"""Data Loader for the Drilling Cost Planner.

Three bundled demo sources:
- program_template.csv: the drilling program (activity lines 0-17)
- cost_catalog.csv: rig rates, services and casing materials
- activity_schedule.csv: the wells of the yearly campaign

CSV reads are cached with functools.lru_cache so repeated calculations
don't re-read from disk.  We use lru_cache (not @st.cache_data) because this
module is also imported by the CLI and tests.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

import pandas as pd

from engine.catalog import CostCatalog
from engine.types import (
    ActivityLine,
    Category,
    CostCatalogItem,
    LineType,
    Section,
    Unit,
    Well,
)

DATA_DIR = Path(__file__).resolve().parent.parent / "data"

logger = logging.getLogger(__name__)


def _opt(value):
    """NaN / empty cells become None."""
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    return value


def _opt_float(value) -> Optional[float]:
    value = _opt(value)
    return None if value is None else float(value)


@lru_cache(maxsize=1)
def _read_program_template() -> pd.DataFrame:
    return pd.read_csv(DATA_DIR / "program_template.csv", dtype={"id": str})


@lru_cache(maxsize=1)
def _read_cost_catalog() -> pd.DataFrame:
    return pd.read_csv(DATA_DIR / "cost_catalog.csv", dtype={"apply_to_lines": str})


@lru_cache(maxsize=1)
def _read_activity_schedule() -> pd.DataFrame:
    return pd.read_csv(DATA_DIR / "activity_schedule.csv", parse_dates=["start_date"])


def program_from_frame(df: pd.DataFrame) -> List[ActivityLine]:
    """Build template lines from a program DataFrame (one row per line)."""
    lines = []
    for _, row in df.iterrows():
        section = _opt(row["section"])
        lines.append(ActivityLine(
            id=str(row["id"]),
            phase=row["phase"],
            activity=row["activity"],
            type=LineType(row["type"]),
            base_duration_hours=_opt_float(row["base_duration_hours"]),
            rop=_opt_float(row["rop"]),
            casing_speed=_opt_float(row["casing_speed"]),
            pipe_length=_opt_float(row["pipe_length"]),
            tripping_speed=_opt_float(row["tripping_speed"]),
            section=Section(section) if section else None,
            is_offline_capable=bool(row["is_offline_capable"]),
        ))
    return lines


def catalog_from_frame(df: pd.DataFrame) -> CostCatalog:
    """Build the cost catalog from a DataFrame; apply_to_lines is pipe-separated."""
    items = []
    for _, row in df.iterrows():
        lines = _opt(row["apply_to_lines"])
        items.append(CostCatalogItem(
            category=Category(row["category"]),
            subcategory=row["subcategory"],
            item=row["item"],
            unit=Unit(row["unit"]),
            cost=float(row["cost"]),
            equipment_type=_opt(row["equipment_type"]),
            well_type=_opt(row["well_type"]),
            required_for_dir=bool(row["required_for_dir"]),
            excluded_for_dir=bool(row["excluded_for_dir"]),
            apply_to_lines=tuple(str(lines).split("|")) if lines else None,
        ))
    return CostCatalog(items)


def schedule_from_frame(df: pd.DataFrame) -> List[Well]:
    return [
        Well(
            id=str(row["id"]),
            name=str(row["name"]),
            type=row["type"],
            start_date=pd.Timestamp(row["start_date"]).date(),
            equipment=row["equipment"],
            done=bool(row["done"]),
        )
        for _, row in df.iterrows()
    ]


def load_program_template() -> List[ActivityLine]:
    return program_from_frame(_read_program_template())


def load_cost_catalog() -> CostCatalog:
    return catalog_from_frame(_read_cost_catalog())


def load_activity_schedule() -> List[Well]:
    return schedule_from_frame(_read_activity_schedule())


def load_demo_data() -> dict:
    """Program template, cost catalog and activity schedule from the bundled CSVs."""
    return {
        "program": load_program_template(),
        "catalog": load_cost_catalog(),
        "wells": load_activity_schedule(),
    }


def load_uploaded_files(activity_file=None, efficiency_file=None, cost_file=None) -> dict:
    """Upload hook. Spreadsheet parsing is not implemented; returns the demo data."""
    names = [getattr(f, "name", None) for f in (activity_file, efficiency_file, cost_file)]
    if any(names):
        logger.info("Uploaded files received (not parsed, using demo data): %s",
                    ", ".join(str(n) for n in names if n))
    return load_demo_data()


def clear_caches():
    """Clear all data caches. Useful for testing or data refresh."""
    _read_program_template.cache_clear()
    _read_cost_catalog.cache_clear()
    _read_activity_schedule.cache_clear()

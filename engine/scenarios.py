"""In-memory scenario registry and per-well working configurations."""

import copy
import logging
import uuid
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from engine.calculator import calculate_well_program
from engine.constants import DEFAULT_PARAMS
from engine.costs import CatalogLike
from engine.types import ActivityLine, Scenario, SimulationParams, Well

logger = logging.getLogger(__name__)


def default_params_for_well(well: Well) -> SimulationParams:
    """Defaults with the well type and rig synced from the schedule."""
    return DEFAULT_PARAMS.updated(
        well_type=well.type,
        equipment_type=well.equipment or DEFAULT_PARAMS.equipment_type,
        user_notes="",
    )


class ScenarioStore:
    """Saved scenarios, the working configuration per well, and the budget selection."""

    def __init__(self):
        self._scenarios: Dict[str, Scenario] = {}
        self._well_configs: Dict[str, SimulationParams] = {}
        self._budget_ids: List[str] = []

    # --- working configurations ---

    def params_for(self, well: Well) -> SimulationParams:
        """The cached configuration for ``well``, or fresh defaults."""
        return self._well_configs.get(well.id) or default_params_for_well(well)

    def set_params(self, well_id: str, params: SimulationParams):
        self._well_configs[well_id] = params

    # --- scenarios ---

    def save(self, well_id: str, name: str, params: SimulationParams) -> Scenario:
        """Snapshot ``params`` as a named scenario and cache them as the well's config."""
        scenario = Scenario(
            id=str(uuid.uuid4()),
            well_id=well_id,
            name=name,
            created_at=datetime.now(),
            params=copy.deepcopy(params),
        )
        self._scenarios[scenario.id] = scenario
        self._well_configs[well_id] = params
        logger.debug("Saved scenario %r for well %s", name, well_id)
        return scenario

    def get(self, scenario_id: str) -> Scenario:
        return self._scenarios[scenario_id]

    def list(self, well_id: Optional[str] = None) -> List[Scenario]:
        scenarios = list(self._scenarios.values())
        if well_id is not None:
            scenarios = [s for s in scenarios if s.well_id == well_id]
        return scenarios

    def delete(self, scenario_id: str):
        self._scenarios.pop(scenario_id, None)
        if scenario_id in self._budget_ids:
            self._budget_ids.remove(scenario_id)

    def load(self, scenario_id: str) -> SimulationParams:
        """Make a scenario the working configuration of its well again."""
        scenario = self.get(scenario_id)
        params = copy.deepcopy(scenario.params)
        self._well_configs[scenario.well_id] = params
        return params

    # --- budget selection ---

    def select_for_budget(self, scenario_ids: Iterable[str]) -> List[Scenario]:
        ids = [sid for sid in scenario_ids if sid in self._scenarios]
        self._budget_ids = ids
        return self.budget_scenarios()

    def budget_scenarios(self) -> List[Scenario]:
        return [self._scenarios[sid] for sid in self._budget_ids]

    def __len__(self) -> int:
        return len(self._scenarios)


def compare_scenarios(scenarios: Iterable[Scenario], wells: Iterable[Well],
                      program: List[ActivityLine], catalog: CatalogLike) -> List[dict]:
    """One engine run per scenario; rows for the scenario comparison table."""
    well_names = {w.id: w.name for w in wells}
    rows = []
    for scenario in scenarios:
        result = calculate_well_program(program, scenario.params, catalog)
        rows.append({
            "scenario_id": scenario.id,
            "well_id": scenario.well_id,
            "well_name": well_names.get(scenario.well_id, "Unknown"),
            "scenario_name": scenario.name,
            "rig": scenario.params.equipment_type,
            "directional": scenario.params.is_directional,
            "estimated_cost": result.total_cost,
            "estimated_days": result.total_time_days,
            "warning_count": len(result.warnings),
        })
    return rows

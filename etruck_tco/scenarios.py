"""
Saved scenarios and side-by-side comparison.

Storage is behind the ScenarioStore interface; the manager recomputes
results through the calculator whenever a scenario's inputs change.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Dict, List, Optional

import pandas as pd

from .calculator import TCOCalculator, compute_tco
from .models import CalculationResults, CalculatorInputs, check_inputs

logger = logging.getLogger(__name__)

MAX_SELECTED = 4


@dataclass(frozen=True)
class Scenario:
    """A named snapshot of inputs and the results computed from them."""

    id: str
    name: str
    created_at: str
    inputs: CalculatorInputs
    results: CalculationResults


class ScenarioStore(ABC):
    """Key-value storage for scenarios."""

    @abstractmethod
    def list(self) -> List[Scenario]:
        """All scenarios in insertion order."""

    @abstractmethod
    def get(self, scenario_id: str) -> Optional[Scenario]:
        pass

    @abstractmethod
    def save(self, scenario: Scenario) -> None:
        pass

    @abstractmethod
    def update(self, scenario: Scenario) -> None:
        pass

    @abstractmethod
    def delete(self, scenario_id: str) -> None:
        pass


class InMemoryScenarioStore(ScenarioStore):
    """Scenario store backed by a dict."""

    def __init__(self):
        self._scenarios: Dict[str, Scenario] = {}

    def list(self) -> List[Scenario]:
        return list(self._scenarios.values())

    def get(self, scenario_id: str) -> Optional[Scenario]:
        return self._scenarios.get(scenario_id)

    def save(self, scenario: Scenario) -> None:
        self._scenarios[scenario.id] = scenario

    def update(self, scenario: Scenario) -> None:
        if scenario.id not in self._scenarios:
            raise KeyError(scenario.id)
        self._scenarios[scenario.id] = scenario

    def delete(self, scenario_id: str) -> None:
        self._scenarios.pop(scenario_id, None)


class ScenarioManager:
    """Save, edit and compare scenarios."""

    def __init__(self, store: Optional[ScenarioStore] = None,
                 calculator: Optional[TCOCalculator] = None):
        self.store = store if store is not None else InMemoryScenarioStore()
        self.calculator = calculator
        self._selected: List[str] = []

    @property
    def vehicles(self):
        return (self.calculator or TCOCalculator()).vehicles

    @property
    def scenarios(self) -> List[Scenario]:
        return self.store.list()

    @property
    def selected_ids(self) -> List[str]:
        return list(self._selected)

    def _get(self, scenario_id: str) -> Scenario:
        scenario = self.store.get(scenario_id)
        if scenario is None:
            raise KeyError(f"Scenario not found: {scenario_id}")
        return scenario

    def save_scenario(self, name: str, inputs: CalculatorInputs) -> Scenario:
        check_inputs(inputs, self.vehicles)
        scenario = Scenario(
            id=str(uuid.uuid4()),
            name=name,
            created_at=datetime.now(timezone.utc).isoformat(),
            inputs=inputs,
            results=compute_tco(inputs, self.calculator),
        )
        self.store.save(scenario)
        logger.info("Saved scenario %r (%s)", name, scenario.id)
        return scenario

    def update_scenario(self, scenario_id: str, name: Optional[str] = None,
                        inputs: Optional[CalculatorInputs] = None) -> Scenario:
        """Rename and/or change inputs; results are recomputed only for new inputs."""
        scenario = self._get(scenario_id)
        if name is not None:
            scenario = replace(scenario, name=name)
        if inputs is not None:
            check_inputs(inputs, self.vehicles)
            scenario = replace(scenario, inputs=inputs, results=compute_tco(inputs, self.calculator))
        self.store.update(scenario)
        logger.info("Updated scenario %s", scenario_id)
        return scenario

    def delete_scenario(self, scenario_id: str) -> None:
        self.store.delete(scenario_id)
        if scenario_id in self._selected:
            self._selected.remove(scenario_id)
        logger.info("Deleted scenario %s", scenario_id)

    def duplicate_scenario(self, scenario_id: str, new_name: Optional[str] = None) -> Scenario:
        original = self._get(scenario_id)
        return self.save_scenario(new_name or f"{original.name} (copy)", original.inputs)

    def recalculate_scenario(self, scenario_id: str) -> Scenario:
        scenario = self._get(scenario_id)
        scenario = replace(scenario, results=compute_tco(scenario.inputs, self.calculator))
        self.store.update(scenario)
        return scenario

    def toggle_selection(self, scenario_id: str) -> bool:
        """
        Select or deselect a scenario for comparison.

        Returns:
            Whether the scenario is selected afterwards; selection is refused
            once MAX_SELECTED scenarios are selected.
        """
        if scenario_id in self._selected:
            self._selected.remove(scenario_id)
            return False
        if len(self._selected) < MAX_SELECTED:
            self._get(scenario_id)
            self._selected.append(scenario_id)
            return True
        return False

    def clear_selection(self) -> None:
        self._selected = []

    def selected_scenarios(self) -> List[Scenario]:
        return [s for s in self.store.list() if s.id in self._selected]

    def compare(self, scenario_ids: Optional[List[str]] = None) -> pd.DataFrame:
        """
        Headline figures per scenario, one row each.

        Args:
            scenario_ids: Scenarios to compare, defaults to the current selection
        """
        if scenario_ids is None:
            scenarios = self.selected_scenarios()
        else:
            scenarios = [self._get(sid) for sid in scenario_ids]

        rows = []
        for s in scenarios:
            rows.append({
                'Scenario': s.name,
                'Vehicle Class': s.inputs.vehicle_class,
                'Fleet Size': s.inputs.fleet_size,
                'Usage Years': s.inputs.usage_years,
                **s.results.summary(),
            })
        df = pd.DataFrame(rows)
        if not df.empty:
            df = df.set_index('Scenario')
        return df

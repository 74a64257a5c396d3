from dataclasses import replace

import pytest

from etruck_tco.calculator import TCOCalculator, compute_tco
from etruck_tco.constants import VEHICLE_DATA
from etruck_tco.exceptions import InvalidInputError, UnknownReferenceKeyError
from etruck_tco.scenarios import MAX_SELECTED, InMemoryScenarioStore, ScenarioManager


@pytest.fixture
def manager():
    return ScenarioManager(InMemoryScenarioStore())


def test_save_computes_results(manager, default_inputs):
    scenario = manager.save_scenario("Baseline", default_inputs)
    assert scenario.results == compute_tco(default_inputs)
    assert manager.scenarios == [scenario]
    assert scenario.created_at


def test_save_rejects_invalid_inputs(manager, default_inputs):
    with pytest.raises(InvalidInputError):
        manager.save_scenario("Broken", replace(default_inputs, fleet_size=0))
    assert manager.scenarios == []


def test_rename_keeps_results(manager, default_inputs):
    scenario = manager.save_scenario("Baseline", default_inputs)
    renamed = manager.update_scenario(scenario.id, name="Base case")
    assert renamed.name == "Base case"
    assert renamed.results is scenario.results


def test_new_inputs_recompute_results(manager, default_inputs):
    scenario = manager.save_scenario("Baseline", default_inputs)
    updated = manager.update_scenario(scenario.id, inputs=replace(default_inputs, fleet_size=10))
    assert updated.results.fleet.diesel_tco == pytest.approx(scenario.results.fleet.diesel_tco * 10)
    assert manager.store.get(scenario.id) == updated


def test_duplicate(manager, default_inputs):
    original = manager.save_scenario("Baseline", default_inputs)
    copy = manager.duplicate_scenario(original.id)
    assert copy.name == "Baseline (copy)"
    assert copy.id != original.id
    assert copy.inputs == original.inputs
    assert manager.duplicate_scenario(original.id, "Variant").name == "Variant"


def test_recalculate(manager, default_inputs):
    scenario = manager.save_scenario("Baseline", default_inputs)
    assert manager.recalculate_scenario(scenario.id).results == scenario.results


def test_selection_is_capped(manager, default_inputs):
    ids = [manager.save_scenario(f"S{i}", default_inputs).id for i in range(MAX_SELECTED + 1)]
    for scenario_id in ids[:MAX_SELECTED]:
        assert manager.toggle_selection(scenario_id)
    assert not manager.toggle_selection(ids[-1])
    assert manager.selected_ids == ids[:MAX_SELECTED]

    assert not manager.toggle_selection(ids[0])
    assert ids[0] not in manager.selected_ids
    manager.clear_selection()
    assert manager.selected_scenarios() == []


def test_delete_deselects(manager, default_inputs):
    scenario = manager.save_scenario("Baseline", default_inputs)
    manager.toggle_selection(scenario.id)
    manager.delete_scenario(scenario.id)
    assert manager.scenarios == []
    assert manager.selected_ids == []
    with pytest.raises(KeyError):
        manager.duplicate_scenario(scenario.id)


def test_compare(manager, default_inputs):
    small = manager.save_scenario("Small", replace(default_inputs, vehicle_class="N1"))
    large = manager.save_scenario("Large", default_inputs)
    manager.toggle_selection(small.id)
    manager.toggle_selection(large.id)

    df = manager.compare()
    assert list(df.index) == ["Small", "Large"]
    assert df.loc["Large", "Total Savings"] == pytest.approx(large.results.fleet.savings)
    assert df.loc["Small", "Vehicle Class"] == "N1"
    assert manager.compare([]).empty


def test_custom_vehicle_class_through_calculator(default_inputs):
    calculator = TCOCalculator({**VEHICLE_DATA, "N3X": VEHICLE_DATA["N3"]})
    manager = ScenarioManager(calculator=calculator)
    scenario = manager.save_scenario("Custom", replace(default_inputs, vehicle_class="N3X"))
    assert scenario.results == compute_tco(default_inputs)
    # Without the calculator the bundled table applies
    with pytest.raises(UnknownReferenceKeyError):
        ScenarioManager().save_scenario("Custom", scenario.inputs)

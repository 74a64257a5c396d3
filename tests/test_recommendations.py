from dataclasses import replace

import pytest

from etruck_tco.calculator import compute_tco
from etruck_tco.models import CalculatorInputs
from etruck_tco.recommendations import generate_recommendations, get_top_cost_driver


def _ids(inputs):
    return [r.id for r in generate_recommendations(inputs, compute_tco(inputs))]


def test_default_recommendations(default_inputs, default_results):
    recommendations = generate_recommendations(default_inputs, default_results)
    assert [r.id for r in recommendations] == [
        'quick-breakeven', 'high-roi', 'co2-savings', 'regulatory-change', 'thg-quote',
    ]
    assert recommendations[0].type == 'success'
    assert '34 months' in recommendations[0].description
    assert recommendations[-1].type == 'info'
    assert '2.505 €' in recommendations[-1].description


def test_truncated_in_evaluation_order(default_inputs):
    inputs = replace(default_inputs, fleet_size=5, depot_charging_share=0.5)
    ids = _ids(inputs)
    assert ids == [
        'increase-depot-charging', 'consider-infrastructure', 'high-roi', 'co2-savings', 'regulatory-change',
    ]
    assert 'thg-quote' not in ids


def test_depot_charging_estimate_uses_fixed_consumption(default_inputs):
    inputs = replace(default_inputs, vehicle_class='N1', depot_charging_share=0.5)
    tip = next(r for r in generate_recommendations(inputs, compute_tco(inputs))
               if r.id == 'increase-depot-charging')
    # (0.55 - 0.25) * 1200 * 120 * 0.2, regardless of vehicle class
    assert tip.type == 'tip'
    assert '8.640 €' in tip.description


def test_no_break_even_warning():
    inputs = CalculatorInputs(
        vehicle_class='N1', annual_mileage=20000, highway_share=0.05,
        depot_charging_share=1.0, diesel_price=1.0, electricity_price=10.0, usage_years=4,
    )
    recommendations = generate_recommendations(inputs, compute_tco(inputs))
    assert recommendations[0].id == 'long-breakeven'
    assert recommendations[0].type == 'warning'
    # Usage ends 2030, benefits still apply
    assert 'regulatory-change' not in [r.id for r in recommendations]


def test_dc_charger_suggestion(default_inputs):
    inputs = replace(default_inputs, include_infrastructure=True)
    assert 'dc-charger' in _ids(inputs)
    assert 'dc-charger' not in _ids(replace(inputs, dc_charging=True))
    assert 'dc-charger' not in _ids(replace(inputs, annual_mileage=100000))


def test_thg_reminder_always_last(default_inputs):
    inputs = replace(default_inputs, usage_years=2, vehicle_class='N1', annual_mileage=20000)
    ids = _ids(inputs)
    assert len(ids) <= 5
    assert ids[-1] == 'thg-quote'


def test_top_cost_driver(default_inputs):
    assert get_top_cost_driver(default_inputs) == {'parameter': 'toll savings', 'impact': 'high'}
    city = replace(default_inputs, highway_share=0.0, depot_charging_share=0.4)
    assert get_top_cost_driver(city)['parameter'] == 'electricity price'
    depot = replace(city, depot_charging_share=0.9)
    assert get_top_cost_driver(depot)['parameter'] == 'annual mileage'


def test_depot_charging_tip_threshold_is_exclusive(default_inputs):
    assert 'increase-depot-charging' in _ids(replace(default_inputs, depot_charging_share=0.59))
    assert 'increase-depot-charging' not in _ids(replace(default_inputs, depot_charging_share=0.6))


def test_infrastructure_hint_needs_five_vehicles(default_inputs):
    assert 'consider-infrastructure' not in _ids(replace(default_inputs, fleet_size=4))
    assert 'consider-infrastructure' in _ids(replace(default_inputs, fleet_size=5))


def test_small_van_misses_roi_and_co2_thresholds(default_inputs):
    inputs = replace(default_inputs, vehicle_class='N1', usage_years=2, annual_mileage=20000)
    results = compute_tco(inputs)
    # 14300 savings on 56250 investment; 12.67 t diesel CO2 in total
    assert results.roi == pytest.approx(25.42, abs=0.01)
    assert results.co2_savings < 100
    ids = [r.id for r in generate_recommendations(inputs, results)]
    assert 'high-roi' not in ids
    assert 'co2-savings' not in ids
    assert ids == ['quick-breakeven', 'thg-quote']

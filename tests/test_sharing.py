from dataclasses import replace

import pytest

from etruck_tco.constants import VEHICLE_DATA
from etruck_tco.exceptions import InvalidInputError, UnknownReferenceKeyError
from etruck_tco.models import CalculatorInputs
from etruck_tco.sharing import decode_share_query, encode_share_query


def test_encode(default_inputs):
    query = encode_share_query(default_inputs)
    assert query == ("fleet=1&profile=custom&vehicle=N3&mileage=120000&years=8"
                     "&highway=0.8&depot=0.7&diesel=1.45&electricity=0.25")


def test_shared_inputs_survive_a_round_trip(default_inputs):
    inputs = replace(default_inputs, fleet_size=12, vehicle_class="N2", usage_profile="kep",
                     annual_mileage=20000, highway_share=0.05, depot_charging_share=1.0)
    assert decode_share_query(encode_share_query(inputs)) == inputs


def test_decode_full_url_overlays_base():
    base = CalculatorInputs(include_infrastructure=True, dc_charging=True)
    inputs = decode_share_query("https://example.com/calculator?fleet=3&years=6&utm=x", base)
    assert inputs.fleet_size == 3
    assert inputs.usage_years == 6
    assert inputs.dc_charging
    assert inputs.diesel_price == base.diesel_price


def test_decode_rejects_unknown_vehicle():
    with pytest.raises(UnknownReferenceKeyError):
        decode_share_query("vehicle=N9")


def test_decode_rejects_unparseable_and_invalid_values():
    with pytest.raises(InvalidInputError):
        decode_share_query("fleet=abc")
    with pytest.raises(InvalidInputError):
        decode_share_query("depot=1.5")


@pytest.mark.parametrize("query", ["mileage=inf", "diesel=nan", "electricity=-inf", "highway=inf"])
def test_decode_rejects_non_finite_values(query):
    with pytest.raises(InvalidInputError):
        decode_share_query(query)


def test_decode_against_custom_vehicle_table():
    vehicles = {**VEHICLE_DATA, "N3X": VEHICLE_DATA["N3"]}
    assert decode_share_query("vehicle=N3X", vehicles=vehicles).vehicle_class == "N3X"

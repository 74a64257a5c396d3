"""
Encode calculator inputs as a shareable URL query and decode them back.
"""

from dataclasses import replace
from typing import Mapping, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit

from .constants import VEHICLE_DATA, VehicleProfile
from .exceptions import InvalidInputError
from .models import CalculatorInputs, check_inputs

# Query key -> (input field, parser)
QUERY_FIELDS = {
    'fleet': ('fleet_size', int),
    'profile': ('usage_profile', str),
    'vehicle': ('vehicle_class', str),
    'mileage': ('annual_mileage', float),
    'years': ('usage_years', int),
    'highway': ('highway_share', float),
    'depot': ('depot_charging_share', float),
    'diesel': ('diesel_price', float),
    'electricity': ('electricity_price', float),
}


def _number_text(value) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def encode_share_query(inputs: CalculatorInputs) -> str:
    """Query string holding the shareable subset of the inputs."""
    return urlencode({key: _number_text(getattr(inputs, name))
                      for key, (name, _) in QUERY_FIELDS.items()})


def decode_share_query(query: str, base: Optional[CalculatorInputs] = None,
                       vehicles: Mapping[str, VehicleProfile] = VEHICLE_DATA) -> CalculatorInputs:
    """
    Overlay the values in a query string (or full URL) on base inputs.

    The vehicle class is checked against vehicles, e.g. a calculator's table.

    Raises:
        InvalidInputError: a value cannot be parsed or is out of domain
        UnknownReferenceKeyError: unknown vehicle class or usage profile
    """
    if '?' in query or '://' in query:
        query = urlsplit(query).query

    changes = {}
    errors = []
    for key, value in parse_qsl(query):
        if key not in QUERY_FIELDS or not value:
            continue
        name, parser = QUERY_FIELDS[key]
        try:
            changes[name] = parser(value)
        except ValueError:
            errors.append(f"Cannot parse {key}={value!r}")
    if errors:
        raise InvalidInputError(errors)

    return check_inputs(replace(base or CalculatorInputs(), **changes), vehicles)

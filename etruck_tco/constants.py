"""
Reference data for the diesel vs. electric truck TCO model.

Vehicle classes, usage profiles, infrastructure unit costs and the regulatory
constants used by the calculator. All amounts are in EUR.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from .exceptions import UnknownReferenceKeyError


@dataclass(frozen=True)
class VehicleProfile:
    """Technical and economic parameters for one vehicle class."""

    diesel_consumption: float  # L/100km
    electric_consumption: float  # kWh/100km
    diesel_purchase: float
    electric_purchase: float  # gross, before subsidy
    thg_quote: float  # annual THG credit
    maintenance_diesel: float  # EUR/km
    maintenance_electric: float  # EUR/km
    insurance_diesel: float  # EUR/year
    insurance_electric: float  # EUR/year
    diesel_tax: float  # EUR/year, diesel vehicle tax
    name: str = ""
    specs: str = ""


@dataclass(frozen=True)
class UsageProfile:
    """Driving pattern template."""

    name: str
    annual_mileage: float
    highway_share: float
    depot_charging_share: float
    description: str = ""


VEHICLE_CLASSES = ("N1", "N2", "N3")
USAGE_PROFILE_TYPES = ("kep", "nahverkehr", "fernverkehr", "custom")
CUSTOM_PROFILE = "custom"

VEHICLE_DATA: Mapping[str, VehicleProfile] = MappingProxyType({
    "N1": VehicleProfile(
        diesel_consumption=12,
        electric_consumption=28,
        diesel_purchase=45000,
        electric_purchase=75000,
        thg_quote=225,
        maintenance_diesel=0.08,
        maintenance_electric=0.05,
        insurance_diesel=2500,
        insurance_electric=2375,
        diesel_tax=556,
        name="N1 - Van",
        specs="up to 3.5 t",
    ),
    "N2": VehicleProfile(
        diesel_consumption=22,
        electric_consumption=100,
        diesel_purchase=95000,
        electric_purchase=180000,
        thg_quote=1545,
        maintenance_diesel=0.12,
        maintenance_electric=0.08,
        insurance_diesel=5000,
        insurance_electric=4750,
        diesel_tax=914,
        name="N2 - Distribution truck",
        specs="3.5 - 12 t",
    ),
    "N3": VehicleProfile(
        diesel_consumption=32,
        electric_consumption=120,
        diesel_purchase=120000,
        electric_purchase=350000,
        thg_quote=2505,
        maintenance_diesel=0.15,
        maintenance_electric=0.10,
        insurance_diesel=8000,
        insurance_electric=7500,
        diesel_tax=1681,
        name="N3 - Tractor unit",
        specs="over 12 t",
    ),
})

USAGE_PROFILES: Mapping[str, UsageProfile] = MappingProxyType({
    "kep": UsageProfile("Parcel / courier", 20000, 0.05, 1.0, "~80 km/day, urban"),
    "nahverkehr": UsageProfile("Regional distribution", 50000, 0.4, 0.8, "~200 km/day, regional"),
    "fernverkehr": UsageProfile("Long haul", 150000, 0.9, 0.4, "~600 km/day, long distance"),
    "custom": UsageProfile("Custom", 120000, 0.8, 0.7, "Own values"),
})

INFRASTRUCTURE_COSTS: Mapping[str, float] = MappingProxyType({
    "ac_charger": 8000,
    "dc_charger": 50000,
    "grid_upgrade": 30000,
})

REGULATORY_DATES: Mapping[str, int] = MappingProxyType({
    "current_year": 2026,
    "tax_exemption_ends": 2030,
    "toll_exemption_ends": 2031,
})

TOLL_RATE_DIESEL = 0.348  # EUR/km
TOLL_RATE_ELECTRIC = 0.19  # EUR/km once the exemption has ended
ELECTRIC_TAX_SHARE = 0.25  # of the diesel tax, once the exemption has ended

CO2_FACTOR_DIESEL = 2.64  # kg CO2 per liter
CO2_FACTOR_ELECTRICITY = 0.38  # kg CO2 per kWh, German grid mix

PUBLIC_CHARGING_PRICE = 0.55  # EUR/kWh

ELECTRIC_SUBSIDY_RATE = 0.25
DIESEL_RESIDUAL_RATE = 0.15
ELECTRIC_RESIDUAL_RATE = 0.20

# Charging points suggested per vehicle when infrastructure is planned
CHARGING_POINTS_PER_VEHICLE = 0.3

DEFAULT_INPUTS = MappingProxyType({
    "fleet_size": 1,
    "usage_profile": "custom",
    "vehicle_class": "N3",
    "annual_mileage": 120000,
    "usage_years": 8,
    "highway_share": 0.8,
    "depot_charging_share": 0.7,
    "diesel_price": 1.45,
    "electricity_price": 0.25,
    "include_infrastructure": False,
    "charging_points": 1,
    "dc_charging": False,
    "grid_upgrade": False,
})


@dataclass(frozen=True)
class SensitivityParameter:
    """A parameter tracked by the tornado analysis."""

    key: str
    label: str
    min: float
    max: float
    step: float
    unit: str
    absolute_step: float = 0.0  # perturb by +/- this instead of +/-20%


SENSITIVITY_PARAMETERS = (
    SensitivityParameter("electricity_price", "Electricity price", 0.15, 0.45, 0.01, "EUR/kWh"),
    SensitivityParameter("diesel_price", "Diesel price", 1.20, 2.00, 0.05, "EUR/L"),
    SensitivityParameter("annual_mileage", "Annual mileage", 50000, 200000, 10000, "km"),
    SensitivityParameter("usage_years", "Usage period", 4, 12, 1, "years"),
    SensitivityParameter("depot_charging_share", "Depot charging share", 0.3, 1.0, 0.1, "%",
                         absolute_step=0.2),
)


def get_vehicle_profile(vehicle_class: str,
                        vehicles: Mapping[str, VehicleProfile] = VEHICLE_DATA) -> VehicleProfile:
    """Look up a vehicle class, raising UnknownReferenceKeyError if absent."""
    try:
        return vehicles[vehicle_class]
    except (KeyError, TypeError):
        raise UnknownReferenceKeyError("vehicle class", vehicle_class) from None


def get_usage_profile(profile: str,
                      profiles: Mapping[str, UsageProfile] = USAGE_PROFILES) -> UsageProfile:
    """Look up a usage profile, raising UnknownReferenceKeyError if absent."""
    try:
        return profiles[profile]
    except (KeyError, TypeError):
        raise UnknownReferenceKeyError("usage profile", profile) from None


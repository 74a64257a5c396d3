"""
Data models for TCO calculations.
"""

import logging
import math
from dataclasses import dataclass, asdict, fields, replace
from typing import Dict, List, Mapping, Sequence

import pandas as pd

from .constants import (
    CHARGING_POINTS_PER_VEHICLE,
    CUSTOM_PROFILE,
    DEFAULT_INPUTS,
    VEHICLE_DATA,
    VehicleProfile,
    get_usage_profile,
    get_vehicle_profile,
)
from .exceptions import InvalidInputError

logger = logging.getLogger(__name__)

# Fields a usage profile overwrites; editing one by hand reverts the tag to custom
PROFILE_FIELDS = ("annual_mileage", "highway_share", "depot_charging_share")


@dataclass(frozen=True)
class CalculatorInputs:
    """Complete parameter set for one TCO computation."""

    fleet_size: int = DEFAULT_INPUTS["fleet_size"]
    usage_profile: str = DEFAULT_INPUTS["usage_profile"]
    vehicle_class: str = DEFAULT_INPUTS["vehicle_class"]
    annual_mileage: float = DEFAULT_INPUTS["annual_mileage"]  # km/year
    usage_years: int = DEFAULT_INPUTS["usage_years"]
    highway_share: float = DEFAULT_INPUTS["highway_share"]
    depot_charging_share: float = DEFAULT_INPUTS["depot_charging_share"]
    diesel_price: float = DEFAULT_INPUTS["diesel_price"]  # EUR/L
    electricity_price: float = DEFAULT_INPUTS["electricity_price"]  # EUR/kWh
    include_infrastructure: bool = DEFAULT_INPUTS["include_infrastructure"]
    charging_points: int = DEFAULT_INPUTS["charging_points"]
    dc_charging: bool = DEFAULT_INPUTS["dc_charging"]
    grid_upgrade: bool = DEFAULT_INPUTS["grid_upgrade"]

    @classmethod
    def from_dict(cls, data: Mapping,
                  vehicles: Mapping[str, VehicleProfile] = VEHICLE_DATA) -> "CalculatorInputs":
        """
        Build validated inputs from a mapping, e.g. form state or a stored scenario.

        Missing fields take their default value.

        Raises:
            InvalidInputError: unknown field names or out-of-domain values
            UnknownReferenceKeyError: unknown vehicle class or usage profile
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidInputError([f"Unknown input field: {name}" for name in unknown])
        inputs = cls(**dict(data))
        check_inputs(inputs, vehicles)
        return inputs

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class DieselCosts:
    """Per-vehicle cost breakdown for the diesel truck."""

    purchase: float
    annual_total: float
    energy: float
    toll: float
    maintenance: float
    insurance: float
    tax: float
    tco: float
    cost_per_km: float


@dataclass(frozen=True)
class ElectricCosts:
    """Per-vehicle cost breakdown for the electric truck."""

    purchase: float
    net_purchase: float
    annual_total: float
    energy: float
    toll: float
    maintenance: float
    insurance: float
    thg_quote: float  # negative, reduces cost
    tax_total: float  # fleet total once the tax exemption has ended
    toll_total: float  # fleet total once the toll exemption has ended
    tco: float
    cost_per_km: float


@dataclass(frozen=True)
class FleetResults:
    diesel_tco: float
    electric_tco: float
    investment: float
    savings: float


@dataclass(frozen=True)
class InfrastructureResults:
    cost: float
    per_vehicle: float


@dataclass(frozen=True)
class CalculationResults:
    """Complete TCO comparison results."""

    diesel: DieselCosts
    electric: ElectricCosts
    fleet: FleetResults
    infrastructure: InfrastructureResults
    savings: float  # per vehicle
    annual_savings: float
    break_even_years: float  # math.inf when electric is not cheaper to run
    payback_months: float
    roi: float  # percent
    co2_savings: float  # tonnes, fleet
    diesel_co2: float  # tonnes, fleet

    @property
    def has_break_even(self) -> bool:
        return math.isfinite(self.break_even_years)

    def summary(self) -> Dict:
        """Return summary of TCO comparison."""
        return {
            'Diesel TCO (fleet)': self.fleet.diesel_tco,
            'Electric TCO (fleet)': self.fleet.electric_tco,
            'Total Savings': self.fleet.savings,
            'Investment': self.fleet.investment,
            'Annual Savings': self.annual_savings,
            'Break-even (years)': self.break_even_years,
            'Payback (months)': self.payback_months,
            'ROI (%)': self.roi,
            'CO2 Savings (t)': self.co2_savings,
        }


@dataclass(frozen=True)
class AmortizationDataPoint:
    """Cumulative fleet cost of both drivetrains at the end of a year."""

    year: int
    label: str
    diesel: float
    electric: float


@dataclass(frozen=True)
class SensitivityResult:
    """One row of the tornado analysis."""

    parameter: str
    label: str
    low_value: float
    high_value: float
    low_tco: float
    high_tco: float
    impact_percent: float


@dataclass(frozen=True)
class Recommendation:
    id: str
    type: str  # success, warning, info or tip
    title: str
    description: str
    icon: str


def _is_integral(value) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def validate_inputs(inputs: CalculatorInputs) -> List[str]:
    """
    Validate that all inputs are within their domain.

    Returns:
        List of validation errors (empty if all OK)
    """
    errors = []

    if not _is_integral(inputs.fleet_size) or inputs.fleet_size < 1:
        errors.append(f"Fleet size must be an integer >= 1, got {inputs.fleet_size!r}")
    if not _is_integral(inputs.usage_years) or inputs.usage_years < 1:
        errors.append(f"Usage years must be an integer >= 1, got {inputs.usage_years!r}")
    if not _is_integral(inputs.charging_points) or inputs.charging_points < 1:
        errors.append(f"Charging points must be an integer >= 1, got {inputs.charging_points!r}")

    for name in ("annual_mileage", "diesel_price", "electricity_price"):
        value = getattr(inputs, name)
        if (isinstance(value, bool) or not isinstance(value, (int, float))
                or not math.isfinite(value) or not value > 0):
            errors.append(f"{name} must be positive, got {value!r}")

    for name in ("highway_share", "depot_charging_share"):
        value = getattr(inputs, name)
        if (isinstance(value, bool) or not isinstance(value, (int, float))
                or not math.isfinite(value) or not 0 <= value <= 1):
            errors.append(f"{name} must be a fraction in [0, 1], got {value!r}")

    for name in ("include_infrastructure", "dc_charging", "grid_upgrade"):
        if not isinstance(getattr(inputs, name), bool):
            errors.append(f"{name} must be a boolean")

    return errors


def check_inputs(inputs: CalculatorInputs,
                 vehicles: Mapping[str, VehicleProfile] = VEHICLE_DATA) -> CalculatorInputs:
    """
    Reject inputs outside their domain before any computation.

    Raises:
        UnknownReferenceKeyError: vehicle class or usage profile not in the tables
        InvalidInputError: any other domain violation
    """
    get_vehicle_profile(inputs.vehicle_class, vehicles)
    get_usage_profile(inputs.usage_profile)

    errors = validate_inputs(inputs)
    if errors:
        logger.warning("Rejected calculator inputs: %s", "; ".join(errors))
        raise InvalidInputError(errors)
    return inputs


def apply_profile(inputs: CalculatorInputs, profile: str) -> CalculatorInputs:
    """Apply a named usage profile's defaults; 'custom' only changes the tag."""
    usage = get_usage_profile(profile)
    if profile == CUSTOM_PROFILE:
        return replace(inputs, usage_profile=CUSTOM_PROFILE)
    return replace(
        inputs,
        usage_profile=profile,
        annual_mileage=usage.annual_mileage,
        highway_share=usage.highway_share,
        depot_charging_share=usage.depot_charging_share,
    )


def suggested_charging_points(fleet_size: int) -> int:
    return max(1, math.ceil(fleet_size * CHARGING_POINTS_PER_VEHICLE))


def update_inputs(inputs: CalculatorInputs,
                  vehicles: Mapping[str, VehicleProfile] = VEHICLE_DATA, **changes) -> CalculatorInputs:
    """
    Return a validated copy of inputs with the given fields changed.

    A manual edit of a profile-controlled field reverts the profile tag to
    custom. With infrastructure included, the charging point count follows
    the fleet size unless the call sets charging_points itself. Vehicle classes
    are checked against vehicles.
    """
    if "usage_profile" in changes:
        raise InvalidInputError(["Use apply_profile to change the usage profile"])

    updated = replace(inputs, **changes)
    if any(getattr(updated, name) != getattr(inputs, name) for name in PROFILE_FIELDS):
        updated = replace(updated, usage_profile=CUSTOM_PROFILE)

    sizing_changed = ("fleet_size" in changes or "include_infrastructure" in changes)
    explicit_points = "charging_points" in changes
    if (updated.include_infrastructure and sizing_changed and not explicit_points
            and _is_integral(updated.fleet_size)):
        updated = replace(updated, charging_points=suggested_charging_points(updated.fleet_size))

    return check_inputs(updated, vehicles)


def amortization_to_dataframe(points: Sequence[AmortizationDataPoint]) -> pd.DataFrame:
    """Convert an amortization series to a DataFrame indexed by year."""
    data = [{
        'Year': p.year,
        'Label': p.label,
        'Diesel': p.diesel,
        'Electric': p.electric,
        'Difference': p.diesel - p.electric,
    } for p in points]
    return pd.DataFrame(data, columns=['Year', 'Label', 'Diesel', 'Electric', 'Difference']).set_index('Year')


def sensitivity_to_dataframe(rows: Sequence[SensitivityResult]) -> pd.DataFrame:
    """Convert tornado rows to a DataFrame, keeping their ranking order."""
    columns = ['Parameter', 'Label', 'Low Value', 'High Value', 'Low TCO', 'High TCO', 'Impact (%)']
    data = [{
        'Parameter': r.parameter,
        'Label': r.label,
        'Low Value': r.low_value,
        'High Value': r.high_value,
        'Low TCO': r.low_tco,
        'High TCO': r.high_tco,
        'Impact (%)': r.impact_percent,
    } for r in rows]
    return pd.DataFrame(data, columns=columns)

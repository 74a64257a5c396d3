"""
TCO Calculator - Core calculation engine.
Implements the diesel vs. electric truck cost model.
"""

import logging
import math
from typing import List, Mapping, Optional

from .constants import (
    CO2_FACTOR_DIESEL,
    CO2_FACTOR_ELECTRICITY,
    DIESEL_RESIDUAL_RATE,
    ELECTRIC_RESIDUAL_RATE,
    ELECTRIC_SUBSIDY_RATE,
    ELECTRIC_TAX_SHARE,
    INFRASTRUCTURE_COSTS,
    PUBLIC_CHARGING_PRICE,
    REGULATORY_DATES,
    TOLL_RATE_DIESEL,
    TOLL_RATE_ELECTRIC,
    VEHICLE_DATA,
    VehicleProfile,
    get_vehicle_profile,
)
from .loader import DataLoader
from .models import (
    AmortizationDataPoint,
    CalculationResults,
    CalculatorInputs,
    DieselCosts,
    ElectricCosts,
    FleetResults,
    InfrastructureResults,
)

logger = logging.getLogger(__name__)


def years_with_exemption(usage_years: float, exemption_ends: int,
                         current_year: int = REGULATORY_DATES["current_year"]) -> float:
    """Years of the usage period still covered by an exemption."""
    return min(usage_years, max(0, exemption_ends - current_year))


def infrastructure_cost(inputs: CalculatorInputs) -> float:
    """Charging infrastructure cost for the whole fleet."""
    if not inputs.include_infrastructure:
        return 0.0
    unit_cost = INFRASTRUCTURE_COSTS["dc_charger"] if inputs.dc_charging else INFRASTRUCTURE_COSTS["ac_charger"]
    grid = INFRASTRUCTURE_COSTS["grid_upgrade"] if inputs.grid_upgrade else 0
    return inputs.charging_points * unit_cost + grid


def blended_electricity_price(inputs: CalculatorInputs) -> float:
    """Average price over depot and public charging."""
    return (inputs.electricity_price * inputs.depot_charging_share
            + PUBLIC_CHARGING_PRICE * (1 - inputs.depot_charging_share))


class TCOCalculator:
    """Calculate total cost of ownership for diesel and electric trucks."""

    def __init__(self, vehicles: Mapping[str, VehicleProfile] = VEHICLE_DATA):
        """
        Initialize calculator with reference data.

        Args:
            vehicles: Vehicle class table, defaults to the bundled one
        """
        self.vehicles = vehicles

    @classmethod
    def from_excel(cls, excel_path: str) -> "TCOCalculator":
        """Build a calculator from a reference workbook (see loader.DataLoader)."""
        return cls(DataLoader(excel_path).vehicles)

    def calculate(self, inputs: CalculatorInputs) -> CalculationResults:
        """
        Calculate TCO for the diesel vs. electric comparison.

        Inputs are assumed validated (see models.check_inputs).

        Args:
            inputs: CalculatorInputs with calculation parameters

        Returns:
            CalculationResults with complete comparison
        """
        vd = get_vehicle_profile(inputs.vehicle_class, self.vehicles)
        fleet_size = inputs.fleet_size
        mileage = inputs.annual_mileage
        years = inputs.usage_years

        # === DIESEL ===
        diesel_energy = (mileage / 100) * vd.diesel_consumption * inputs.diesel_price
        diesel_toll = mileage * inputs.highway_share * TOLL_RATE_DIESEL
        diesel_maintenance = mileage * vd.maintenance_diesel
        diesel_tax = vd.diesel_tax
        diesel_annual_total = (diesel_energy + diesel_toll + diesel_maintenance
                               + vd.insurance_diesel + diesel_tax)

        # === ELECTRIC ===
        electric_energy = (mileage / 100) * vd.electric_consumption * blended_electricity_price(inputs)
        electric_maintenance = mileage * vd.maintenance_electric
        electric_annual_total = (electric_energy + electric_maintenance
                                 + vd.insurance_electric - vd.thg_quote)

        # Tax and toll once the exemptions have ended; fleet totals
        tax_years = years - years_with_exemption(years, REGULATORY_DATES["tax_exemption_ends"])
        toll_years = years - years_with_exemption(years, REGULATORY_DATES["toll_exemption_ends"])
        electric_tax_total = diesel_tax * ELECTRIC_TAX_SHARE * tax_years
        electric_toll_total = mileage * inputs.highway_share * TOLL_RATE_ELECTRIC * toll_years

        electric_net_purchase = vd.electric_purchase * (1 - ELECTRIC_SUBSIDY_RATE)
        infra_cost = infrastructure_cost(inputs)

        diesel_residual = vd.diesel_purchase * DIESEL_RESIDUAL_RATE
        electric_residual = vd.electric_purchase * ELECTRIC_RESIDUAL_RATE

        # === TCO PER VEHICLE ===
        diesel_tco = vd.diesel_purchase + diesel_annual_total * years - diesel_residual
        electric_tco = (
            electric_net_purchase + electric_annual_total * years
            + electric_tax_total / fleet_size + electric_toll_total / fleet_size
            - electric_residual + infra_cost / fleet_size
        )

        # === FLEET ===
        fleet_diesel_tco = diesel_tco * fleet_size
        fleet_electric_tco = electric_tco * fleet_size
        fleet_investment = electric_net_purchase * fleet_size + infra_cost

        # Break-even on operating cost difference only
        annual_savings = diesel_annual_total - electric_annual_total
        purchase_diff = electric_net_purchase - vd.diesel_purchase + infra_cost / fleet_size
        break_even_years = purchase_diff / annual_savings if annual_savings > 0 else math.inf
        break_even_years = max(0.0, break_even_years)

        # CO2 in tonnes per vehicle over the usage period
        diesel_co2 = (mileage / 100) * vd.diesel_consumption * CO2_FACTOR_DIESEL * years / 1000
        electric_co2 = (mileage / 100) * vd.electric_consumption * CO2_FACTOR_ELECTRICITY * years / 1000

        roi = (fleet_diesel_tco - fleet_electric_tco) / fleet_investment * 100

        logger.debug(
            "TCO %s x%d: diesel=%.2f electric=%.2f break-even=%s",
            inputs.vehicle_class, fleet_size, fleet_diesel_tco, fleet_electric_tco, break_even_years,
        )

        return CalculationResults(
            diesel=DieselCosts(
                purchase=vd.diesel_purchase,
                annual_total=diesel_annual_total,
                energy=diesel_energy,
                toll=diesel_toll,
                maintenance=diesel_maintenance,
                insurance=vd.insurance_diesel,
                tax=diesel_tax,
                tco=diesel_tco,
                cost_per_km=diesel_annual_total / mileage,
            ),
            electric=ElectricCosts(
                purchase=vd.electric_purchase,
                net_purchase=electric_net_purchase,
                annual_total=electric_annual_total,
                energy=electric_energy,
                toll=0.0,
                maintenance=electric_maintenance,
                insurance=vd.insurance_electric,
                thg_quote=-vd.thg_quote,
                tax_total=electric_tax_total,
                toll_total=electric_toll_total,
                tco=electric_tco,
                cost_per_km=electric_annual_total / mileage,
            ),
            fleet=FleetResults(
                diesel_tco=fleet_diesel_tco,
                electric_tco=fleet_electric_tco,
                investment=fleet_investment,
                savings=fleet_diesel_tco - fleet_electric_tco,
            ),
            infrastructure=InfrastructureResults(
                cost=infra_cost,
                per_vehicle=infra_cost / fleet_size,
            ),
            savings=diesel_tco - electric_tco,
            annual_savings=annual_savings,
            break_even_years=break_even_years,
            payback_months=break_even_years * 12,
            roi=roi,
            co2_savings=(diesel_co2 - electric_co2) * fleet_size,
            diesel_co2=diesel_co2 * fleet_size,
        )

    @staticmethod
    def amortization(inputs: CalculatorInputs,
                     results: CalculationResults) -> List[AmortizationDataPoint]:
        """
        Cumulative fleet cost per year, year 0 through usage_years.

        Args:
            inputs: Inputs the results were computed from
            results: CalculationResults for those inputs

        Returns:
            usage_years + 1 data points
        """
        fleet_size = inputs.fleet_size
        points = []
        for year in range(int(inputs.usage_years) + 1):
            points.append(AmortizationDataPoint(
                year=year,
                label="Start" if year == 0 else f"Year {year}",
                diesel=(results.diesel.purchase + results.diesel.annual_total * year) * fleet_size,
                electric=((results.electric.net_purchase + results.electric.annual_total * year) * fleet_size
                          + results.infrastructure.cost),
            ))
        return points


_default_calculator = TCOCalculator()


def compute_tco(inputs: CalculatorInputs, calculator: Optional[TCOCalculator] = None) -> CalculationResults:
    """Compute the full result set for validated inputs."""
    return (calculator or _default_calculator).calculate(inputs)


def generate_amortization(inputs: CalculatorInputs,
                          results: CalculationResults) -> List[AmortizationDataPoint]:
    """Year-by-year cumulative fleet cost series for charting."""
    return TCOCalculator.amortization(inputs, results)


if __name__ == "__main__":
    inputs = CalculatorInputs()
    results = compute_tco(inputs)

    print("=" * 72)
    print(f"TCO COMPARISON: {inputs.vehicle_class}, {inputs.usage_years} years, fleet of {inputs.fleet_size}")
    print("=" * 72)
    print(f"\n{'Year':<8} {'Diesel':>14} {'Electric':>14} {'Difference':>14}")
    print("-" * 52)
    for point in generate_amortization(inputs, results):
        print(f"{point.label:<8} {point.diesel:>14,.0f} {point.electric:>14,.0f} "
              f"{point.diesel - point.electric:>14,.0f}")
    print("-" * 52)
    for label, value in results.summary().items():
        print(f"{label:<24} {value:>16,.2f}")

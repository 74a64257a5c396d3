"""
Advisory rules evaluated against a calculation.
"""

import math
from typing import Dict, List

from .calculator import blended_electricity_price
from .constants import PUBLIC_CHARGING_PRICE, REGULATORY_DATES, TOLL_RATE_DIESEL
from .formatting import format_number
from .models import CalculationResults, CalculatorInputs, Recommendation

MAX_RECOMMENDATIONS = 5

# Rough heuristics, independent of the selected vehicle class
ESTIMATE_CONSUMPTION = 120  # kWh/100km
DEPOT_SHARE_INCREASE = 0.2


def generate_recommendations(inputs: CalculatorInputs,
                             results: CalculationResults) -> List[Recommendation]:
    """
    Evaluate the advisory rules in priority order.

    Several rules may fire; only the first five in evaluation order are kept.
    """
    recommendations = []

    if results.break_even_years < 3:
        recommendations.append(Recommendation(
            id='quick-breakeven',
            type='success',
            title='Quick break-even',
            description=(f"With a break-even of only {results.payback_months:.0f} months, "
                         "now is an ideal time to switch."),
            icon='TrendingDown',
        ))
    elif results.break_even_years > inputs.usage_years:
        recommendations.append(Recommendation(
            id='long-breakeven',
            type='warning',
            title='No break-even within usage period',
            description='Consider a longer usage period or review your electricity costs.',
            icon='AlertTriangle',
        ))

    if inputs.depot_charging_share < 0.6:
        # rounds half up
        potential_savings = math.floor(
            (PUBLIC_CHARGING_PRICE - inputs.electricity_price)
            * (inputs.annual_mileage / 100) * ESTIMATE_CONSUMPTION * DEPOT_SHARE_INCREASE
            + 0.5
        )
        recommendations.append(Recommendation(
            id='increase-depot-charging',
            type='tip',
            title='More depot charging',
            description=(f"+20% depot charging could save about "
                         f"{format_number(potential_savings)} € per year."),
            icon='Battery',
        ))

    if inputs.fleet_size >= 5 and not inputs.include_infrastructure:
        recommendations.append(Recommendation(
            id='consider-infrastructure',
            type='info',
            title='Plan charging infrastructure',
            description='With 5+ vehicles, own charging infrastructure almost always pays off.',
            icon='Plug',
        ))

    if inputs.annual_mileage > 100000 and inputs.include_infrastructure and not inputs.dc_charging:
        recommendations.append(Recommendation(
            id='dc-charger',
            type='info',
            title='DC fast charging recommended',
            description='At high mileage, DC charging increases vehicle availability.',
            icon='Zap',
        ))

    if results.roi > 50:
        recommendations.append(Recommendation(
            id='high-roi',
            type='success',
            title='High ROI',
            description=f"{results.roi:.0f}% ROI over {inputs.usage_years} years - an attractive investment.",
            icon='TrendingUp',
        ))

    if results.co2_savings > 100:
        recommendations.append(Recommendation(
            id='co2-savings',
            type='success',
            title='Significant CO2 reduction',
            description=f"{results.co2_savings:.0f} tonnes less CO2 - good for CSR reporting.",
            icon='Leaf',
        ))

    usage_end_year = REGULATORY_DATES['current_year'] + inputs.usage_years
    if usage_end_year > REGULATORY_DATES['tax_exemption_ends']:
        recommendations.append(Recommendation(
            id='regulatory-change',
            type='warning',
            title='Benefits are expiring',
            description=(f"Vehicle tax exemption ends {REGULATORY_DATES['tax_exemption_ends']}, "
                         f"toll exemption {REGULATORY_DATES['toll_exemption_ends']}. Already included."),
            icon='Clock',
        ))

    recommendations.append(Recommendation(
        id='thg-quote',
        type='info',
        title="Don't forget the THG quota",
        description=(f"Up to {format_number(abs(results.electric.thg_quote))} € per vehicle "
                     "and year through THG trading."),
        icon='Euro',
    ))

    return recommendations[:MAX_RECOMMENDATIONS]


def get_top_cost_driver(inputs: CalculatorInputs) -> Dict[str, str]:
    """Name the parameter that dominates the electric TCO, by a quick heuristic."""
    energy_cost = ((inputs.annual_mileage / 100) * ESTIMATE_CONSUMPTION
                   * blended_electricity_price(inputs) * inputs.usage_years)
    toll_savings = inputs.annual_mileage * inputs.highway_share * TOLL_RATE_DIESEL * inputs.usage_years

    if toll_savings > energy_cost * 0.5:
        return {'parameter': 'toll savings', 'impact': 'high'}
    if inputs.depot_charging_share < 0.5:
        return {'parameter': 'electricity price', 'impact': 'very high'}
    return {'parameter': 'annual mileage', 'impact': 'moderate'}

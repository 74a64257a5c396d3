"""
E-Truck TCO - Total cost of ownership of diesel vs. electric trucks.

A Python package for comparing the total cost of ownership of diesel and
electric truck fleets, with break-even, ROI, CO2, sensitivity analysis
and advisory recommendations.
"""

from .calculator import TCOCalculator, compute_tco, generate_amortization
from .exceptions import InvalidInputError, TCOError, UnknownReferenceKeyError
from .models import CalculationResults, CalculatorInputs, check_inputs
from .recommendations import generate_recommendations
from .sensitivity import analyze_sensitivity

__version__ = "0.1.0"
__all__ = [
    "TCOCalculator",
    "CalculatorInputs",
    "CalculationResults",
    "compute_tco",
    "generate_amortization",
    "analyze_sensitivity",
    "generate_recommendations",
    "check_inputs",
    "TCOError",
    "InvalidInputError",
    "UnknownReferenceKeyError",
]

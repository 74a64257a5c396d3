"""
Sensitivity (tornado) analysis of the fleet electric TCO.

Each tracked parameter is moved down and up independently, the full TCO is
recomputed, and parameters are ranked by the larger of the two relative
changes.
"""

import logging
from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

from .calculator import TCOCalculator, compute_tco
from .constants import SENSITIVITY_PARAMETERS, SensitivityParameter
from .models import CalculatorInputs, SensitivityResult

logger = logging.getLogger(__name__)

RELATIVE_STEP = 0.2


def perturbation_range(param: SensitivityParameter, base_value: float) -> Tuple[float, float]:
    """Low and high values for a parameter, clamped to its domain."""
    if param.absolute_step:
        low = base_value - param.absolute_step
        high = base_value + param.absolute_step
    else:
        low = base_value * (1 - RELATIVE_STEP)
        high = base_value * (1 + RELATIVE_STEP)
    return (min(param.max, max(param.min, low)),
            min(param.max, max(param.min, high)))


def analyze_sensitivity(base_inputs: CalculatorInputs,
                        calculator: Optional[TCOCalculator] = None,
                        parameters: Sequence[SensitivityParameter] = SENSITIVITY_PARAMETERS,
                        ) -> List[SensitivityResult]:
    """
    Rank parameters by their impact on the fleet electric TCO.

    Args:
        base_inputs: Validated baseline inputs
        calculator: Calculator to use, defaults to the bundled reference data
        parameters: Tracked parameters, in declaration order

    Returns:
        One SensitivityResult per parameter, sorted by descending impact.
        Ties keep declaration order.
    """
    base_tco = compute_tco(base_inputs, calculator).fleet.electric_tco

    results = []
    for param in parameters:
        low_value, high_value = perturbation_range(param, getattr(base_inputs, param.key))

        low_tco = compute_tco(replace(base_inputs, **{param.key: low_value}), calculator).fleet.electric_tco
        high_tco = compute_tco(replace(base_inputs, **{param.key: high_value}), calculator).fleet.electric_tco

        impact_low = (low_tco - base_tco) / base_tco * 100
        impact_high = (high_tco - base_tco) / base_tco * 100

        results.append(SensitivityResult(
            parameter=param.key,
            label=param.label,
            low_value=low_value,
            high_value=high_value,
            low_tco=low_tco,
            high_tco=high_tco,
            impact_percent=max(abs(impact_low), abs(impact_high)),
        ))

    # sorted() is stable with reverse=True
    ranked = sorted(results, key=lambda r: r.impact_percent, reverse=True)
    logger.debug("Sensitivity ranking: %s", [r.parameter for r in ranked])
    return ranked

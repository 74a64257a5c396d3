"""
Calculator session: current inputs plus derived views, recomputed on change.
"""

import logging
from typing import Callable, List, Optional

from .calculator import TCOCalculator, compute_tco, generate_amortization
from .models import (
    AmortizationDataPoint,
    CalculationResults,
    CalculatorInputs,
    Recommendation,
    SensitivityResult,
    apply_profile,
    check_inputs,
    update_inputs,
)
from .recommendations import generate_recommendations
from .sensitivity import analyze_sensitivity

logger = logging.getLogger(__name__)

Listener = Callable[[CalculatorInputs, CalculationResults], None]


class CalculatorSession:
    """
    Hold the current inputs and serve the derived views.

    Views are memoized on the inputs value; any change recomputes them and
    notifies subscribers with the new inputs and results.
    """

    def __init__(self, inputs: Optional[CalculatorInputs] = None,
                 calculator: Optional[TCOCalculator] = None):
        self.calculator = calculator or TCOCalculator()
        self._inputs = check_inputs(inputs or CalculatorInputs(), self.calculator.vehicles)
        self._listeners: List[Listener] = []
        self._cache = {}

    @property
    def inputs(self) -> CalculatorInputs:
        return self._inputs

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def _view(self, name: str, build):
        key = (name, self._inputs)
        if key not in self._cache:
            self._cache[key] = build()
        return self._cache[key]

    @property
    def results(self) -> CalculationResults:
        return self._view('results', lambda: compute_tco(self._inputs, self.calculator))

    @property
    def amortization(self) -> List[AmortizationDataPoint]:
        return self._view('amortization', lambda: generate_amortization(self._inputs, self.results))

    @property
    def recommendations(self) -> List[Recommendation]:
        return self._view('recommendations', lambda: generate_recommendations(self._inputs, self.results))

    @property
    def sensitivity(self) -> List[SensitivityResult]:
        return self._view('sensitivity', lambda: analyze_sensitivity(self._inputs, self.calculator))

    def _set(self, inputs: CalculatorInputs):
        if inputs == self._inputs:
            return
        self._inputs = inputs
        self._cache = {}
        logger.debug("Inputs changed: %s", inputs)
        results = self.results
        for listener in list(self._listeners):
            listener(inputs, results)

    def set_input(self, name: str, value):
        self._set(update_inputs(self._inputs, self.calculator.vehicles, **{name: value}))

    def set_inputs(self, **changes):
        self._set(update_inputs(self._inputs, self.calculator.vehicles, **changes))

    def apply_profile(self, profile: str):
        self._set(check_inputs(apply_profile(self._inputs, profile), self.calculator.vehicles))

    def reset(self):
        self._set(CalculatorInputs())

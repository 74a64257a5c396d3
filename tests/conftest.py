import matplotlib

matplotlib.use("Agg")

import pytest

from etruck_tco.calculator import compute_tco
from etruck_tco.models import CalculatorInputs


@pytest.fixture
def default_inputs():
    """N3 tractor, one vehicle, 120,000 km/year over 8 years, no infrastructure."""
    return CalculatorInputs()


@pytest.fixture
def default_results(default_inputs):
    return compute_tco(default_inputs)

import math

from etruck_tco.formatting import format_currency, format_number, format_percent


def test_format_currency():
    assert format_currency(1234567.89) == "1.234.568 €"
    assert format_currency(-2505) == "-2.505 €"
    assert format_currency(0) == "0 €"


def test_format_number():
    assert format_number(2505) == "2.505"
    assert format_number(0.34) == "0,34"
    assert format_number(1234.5678) == "1.234,568"
    assert format_number(1234.5, decimals=2) == "1.234,50"
    assert format_number(math.inf) == "∞"


def test_format_percent():
    assert format_percent(98.8994) == "98.9%"


def test_formatting_does_not_touch_results(default_results):
    before = default_results.fleet.electric_tco
    format_currency(default_results.fleet.electric_tco)
    assert default_results.fleet.electric_tco == before

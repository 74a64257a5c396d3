"""
Display formatting in German locale conventions.

These only produce strings; numeric results are never rounded in place.
"""

import math
from typing import Optional


def _to_german(text: str) -> str:
    # 1,234,567.89 -> 1.234.567,89
    return text.replace(",", "_").replace(".", ",").replace("_", ".")


def format_number(value: float, decimals: Optional[int] = None) -> str:
    """Group thousands with '.', decimal comma; up to 3 decimals by default."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "-∞" if value < 0 else "∞"
    if decimals is None:
        text = f"{value:,.3f}".rstrip("0").rstrip(".")
        if text in ("-0", ""):
            text = "0"
    else:
        text = f"{value:,.{decimals}f}"
    return _to_german(text)


def format_currency(value: float) -> str:
    """Whole euros, e.g. 1.234.567 €."""
    return f"{format_number(value, 0)} €"


def format_percent(value: float) -> str:
    return f"{value:.1f}%"

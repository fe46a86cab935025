# lead_econ/formatting.py
from __future__ import annotations

from .currencies import get_currency


def format_currency(value: float, code: str) -> str:
    """
    '$1,234.50', '-€80.00', '¥12,000'. Decimal places follow the currency (JPY has none).
    """
    cur = get_currency(code)
    amount = round(float(value), cur.decimals)
    sign = "-" if amount < 0 else ""
    return f"{sign}{cur.symbol}{abs(amount):,.{cur.decimals}f}"


def format_number(value: float, decimals: int = 0) -> str:
    amount = round(float(value), decimals)
    if amount == 0:
        amount = 0.0  # no "-0"
    return f"{amount:,.{decimals}f}"


def format_percent(value: float, decimals: int = 1) -> str:
    return f"{format_number(value, decimals)}%"

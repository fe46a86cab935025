# lead_econ/currencies.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class Currency:
    code: str
    name: str
    symbol: str
    decimals: int = 2


CURRENCIES: Dict[str, Currency] = {
    "USD": Currency("USD", "US Dollar",         symbol="$"),
    "EUR": Currency("EUR", "Euro",              symbol="€"),
    "GBP": Currency("GBP", "British Pound",     symbol="£"),
    "JPY": Currency("JPY", "Japanese Yen",      symbol="¥", decimals=0),
    "AUD": Currency("AUD", "Australian Dollar", symbol="A$"),
    "CAD": Currency("CAD", "Canadian Dollar",   symbol="C$"),
    "CHF": Currency("CHF", "Swiss Franc",       symbol="CHF "),
    "INR": Currency("INR", "Indian Rupee",      symbol="₹"),
}

DEFAULT_CURRENCY = "USD"


def get_currency(code: str) -> Currency:
    """
    Look up a currency by code (case-insensitive).
    Raises KeyError for codes outside the registry.
    """
    key = str(code).strip().upper()
    if key not in CURRENCIES:
        raise KeyError(f"Unknown currency: {code}. Use one of {sorted(CURRENCIES)}.")
    return CURRENCIES[key]


def display_name(code: str) -> str:
    """Label used in currency pickers, e.g. 'US Dollar ($)'."""
    cur = get_currency(code)
    return f"{cur.name} ({cur.symbol.strip()})"

# lead_econ/dates.py
from __future__ import annotations

import calendar
from datetime import date
from typing import Callable, Optional, Tuple

# Anything returning the current date. Tests pass a fixed lambda instead of the wall clock.
DateProvider = Callable[[], date]


def system_today() -> date:
    return date.today()


def days_in_month(d: date) -> int:
    return calendar.monthrange(d.year, d.month)[1]


def month_defaults(today: Optional[DateProvider] = None) -> Tuple[int, int]:
    """
    Return (day_of_month, total_days_in_month) for the provider's current date.
    """
    provider = today or system_today
    current = provider()
    return current.day, days_in_month(current)

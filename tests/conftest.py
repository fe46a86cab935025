from __future__ import annotations

from datetime import date

import pytest

from lead_econ.cpl import CPLInputs
from lead_econ.lvr import LVRInputs


@pytest.fixture()
def cpl_inputs() -> CPLInputs:
    """Revenue 1000, 50% margin, 20% close rate, 20% target margin, cost 50."""
    return CPLInputs(
        currency="USD",
        average_revenue=1000,
        gross_margin_percent=50,
        conversion_rate_percent=20,
        target_profit_margin_percent=20,
        expected_cost_per_lead=50,
    )


@pytest.fixture()
def lvr_inputs() -> LVRInputs:
    """100 leads last month, 60 by day 15 of a 30-day month, 10% conversion, LTV 500."""
    return LVRInputs(
        currency="USD",
        last_month_leads=100,
        this_month_leads=60,
        day_of_month=15,
        total_days_in_month=30,
        conversion_rate_percent=10,
        ltv=500,
    )


@pytest.fixture()
def fixed_today():
    """Date provider pinned to 10 Feb 2024 (leap year, 29 days)."""
    return lambda: date(2024, 2, 10)

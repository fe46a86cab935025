# lead_econ/lvr.py
from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Iterable, Optional

import numpy as np
import pandas as pd

from .currencies import DEFAULT_CURRENCY
from .errors import LVRPreconditionError


@dataclass(frozen=True)
class LVRInputs:
    """
    Lead counts for the previous full month and the month so far.
    day_of_month / total_days_in_month are supplied by the caller (see dates.month_defaults).
    """
    last_month_leads: float
    this_month_leads: float
    day_of_month: int
    total_days_in_month: int
    conversion_rate_percent: float
    ltv: float
    monthly_lead_goal: Optional[float] = None
    currency: str = DEFAULT_CURRENCY


@dataclass(frozen=True)
class LVRResults:
    lvr_percent: float
    daily_rate: float
    projected_leads: float
    projected_lvr_percent: float
    last_month_customers: float
    this_month_customers: float
    projected_customers: float
    last_month_revenue: float
    this_month_revenue: float
    projected_revenue: float
    leads_gap: Optional[float] = None
    daily_leads_needed: Optional[float] = None

    @property
    def goal_met(self) -> Optional[bool]:
        """None without a goal; True when the projection meets or beats it."""
        if self.leads_gap is None:
            return None
        return self.leads_gap <= 0

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["goal_met"] = self.goal_met
        return out


def compute_lvr(inputs: LVRInputs) -> LVRResults:
    """
    Lead velocity and end-of-month forecast:
      lvr            = (this - last) / last * 100
      daily_rate     = this / day_of_month
      projected      = daily_rate * total_days_in_month
      projected_lvr  = (projected - last) / last * 100
      customers      = leads * conversion_rate   (last / this / projected)
      revenue        = customers * ltv

    With a goal:
      leads_gap = goal - projected
      daily_leads_needed = (goal - this) / days_remaining, only when leads_gap > 0
      and days_remaining > 0.

    Raises LVRPreconditionError when last_month_leads or day_of_month is zero.
    """
    last = inputs.last_month_leads
    this = inputs.this_month_leads

    if last == 0 or inputs.day_of_month == 0:
        raise LVRPreconditionError()

    cr = inputs.conversion_rate_percent / 100

    lvr_percent = (this - last) / last * 100
    daily_rate = this / inputs.day_of_month
    projected = daily_rate * inputs.total_days_in_month
    projected_lvr_percent = (projected - last) / last * 100

    last_customers = last * cr
    this_customers = this * cr
    projected_customers = projected * cr

    leads_gap: Optional[float] = None
    daily_needed: Optional[float] = None
    goal = inputs.monthly_lead_goal
    if goal is not None:
        leads_gap = goal - projected
        days_remaining = inputs.total_days_in_month - inputs.day_of_month
        if leads_gap > 0 and days_remaining > 0:
            daily_needed = (goal - this) / days_remaining

    return LVRResults(
        lvr_percent=lvr_percent,
        daily_rate=daily_rate,
        projected_leads=projected,
        projected_lvr_percent=projected_lvr_percent,
        last_month_customers=last_customers,
        this_month_customers=this_customers,
        projected_customers=projected_customers,
        last_month_revenue=last_customers * inputs.ltv,
        this_month_revenue=this_customers * inputs.ltv,
        projected_revenue=projected_customers * inputs.ltv,
        leads_gap=leads_gap,
        daily_leads_needed=daily_needed,
    )


def lvr_goal_grid(inputs: LVRInputs, goals: Iterable[float]) -> pd.DataFrame:
    """
    Evaluate several monthly lead goals against the same month-to-date numbers.
    Returns a DataFrame sorted by goal ascending.
    """
    goal_values = np.unique(np.asarray(list(goals), dtype=float))
    rows = []

    for g in goal_values:
        res = compute_lvr(replace(inputs, monthly_lead_goal=float(g)))
        rows.append({
            "monthly_lead_goal": float(g),
            "projected_leads": float(res.projected_leads),
            "leads_gap": float(res.leads_gap),
            "daily_leads_needed": res.daily_leads_needed,
            "goal_met": bool(res.goal_met),
        })

    columns = ["monthly_lead_goal", "projected_leads", "leads_gap", "daily_leads_needed", "goal_met"]
    return pd.DataFrame(rows, columns=columns)

# lead_econ/cpl.py
from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Iterable, Tuple

import numpy as np
import pandas as pd

from .currencies import DEFAULT_CURRENCY
from .tiers import TIERS, tier_price


@dataclass(frozen=True)
class CPLInputs:
    """
    Client sales economics. Money in one currency, percentages as whole numbers (25 == 25%).
    """
    average_revenue: float
    gross_margin_percent: float
    conversion_rate_percent: float
    expected_cost_per_lead: float
    target_profit_margin_percent: float = 0.0
    currency: str = DEFAULT_CURRENCY


@dataclass(frozen=True)
class TierPrice:
    name: str
    price: float
    agency_profit: float
    client_profit: float


@dataclass(frozen=True)
class CPLResults:
    profit_per_sale: float
    profit_per_lead: float  # break-even max CPL
    max_cpl_target: float
    expected_cost_per_lead: float
    is_viable: bool
    safe: TierPrice
    balanced: TierPrice
    aggressive: TierPrice

    @property
    def tiers(self) -> Tuple[TierPrice, TierPrice, TierPrice]:
        return (self.safe, self.balanced, self.aggressive)

    @property
    def markup_room(self) -> float:
        return self.max_cpl_target - self.expected_cost_per_lead

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["markup_room"] = self.markup_room
        return out


def _price_tier(name: str, expected_cost_per_lead: float, max_cpl_target: float, profit_per_lead: float) -> TierPrice:
    price = tier_price(TIERS[name], expected_cost_per_lead, max_cpl_target)
    return TierPrice(
        name=name,
        price=price,
        agency_profit=price - expected_cost_per_lead,
        client_profit=profit_per_lead - price,
    )


def compute_cpl(inputs: CPLInputs) -> CPLResults:
    """
    Maximum price an agency can charge per lead, plus three pricing tiers:
      profit_per_sale = average_revenue * gross_margin
      profit_per_lead = profit_per_sale * conversion_rate        (break-even max CPL)
      max_cpl_target  = profit_per_lead * (1 - target_profit_margin)
      is_viable       = expected_cost_per_lead <= max_cpl_target

    Tier prices: safe = min(cost * 1.2, max), balanced = min(cost * 1.5, max),
    aggressive = max. agency_profit = price - cost, client_profit = profit_per_lead - price.

    Inputs are expected to be validated already (finite, >= 0). No rounding is applied.
    """
    gross_margin = inputs.gross_margin_percent / 100
    close_rate = inputs.conversion_rate_percent / 100
    target_margin = (inputs.target_profit_margin_percent or 0) / 100

    profit_per_sale = inputs.average_revenue * gross_margin
    profit_per_lead = profit_per_sale * close_rate
    max_cpl_target = profit_per_lead * (1 - target_margin)
    cost = inputs.expected_cost_per_lead

    return CPLResults(
        profit_per_sale=profit_per_sale,
        profit_per_lead=profit_per_lead,
        max_cpl_target=max_cpl_target,
        expected_cost_per_lead=cost,
        is_viable=cost <= max_cpl_target,
        safe=_price_tier("safe", cost, max_cpl_target, profit_per_lead),
        balanced=_price_tier("balanced", cost, max_cpl_target, profit_per_lead),
        aggressive=_price_tier("aggressive", cost, max_cpl_target, profit_per_lead),
    )


def tiers_to_frame(results: CPLResults) -> pd.DataFrame:
    """One row per pricing tier, in safe -> aggressive order."""
    return pd.DataFrame([
        {
            "tier": t.name,
            "label": TIERS[t.name].label,
            "price": float(t.price),
            "agency_profit": float(t.agency_profit),
            "client_profit": float(t.client_profit),
        }
        for t in results.tiers
    ])


def cpl_sensitivity_grid(inputs: CPLInputs, conversion_rates: Iterable[float]) -> pd.DataFrame:
    """
    Re-run the CPL engine for each conversion rate (whole-number percent).
    Shows how much the client's affordable CPL moves when their close rate improves.
    Returns a DataFrame sorted by conversion rate ascending; duplicate rates collapse.
    """
    rates = np.unique(np.asarray(list(conversion_rates), dtype=float))
    rows = []

    for cr in rates:
        res = compute_cpl(replace(inputs, conversion_rate_percent=float(cr)))
        rows.append({
            "conversion_rate_percent": float(cr),
            "profit_per_lead": float(res.profit_per_lead),
            "max_cpl_target": float(res.max_cpl_target),
            "is_viable": bool(res.is_viable),
            "safe_price": float(res.safe.price),
            "balanced_price": float(res.balanced.price),
            "aggressive_price": float(res.aggressive.price),
        })

    columns = [
        "conversion_rate_percent", "profit_per_lead", "max_cpl_target", "is_viable",
        "safe_price", "balanced_price", "aggressive_price",
    ]
    return pd.DataFrame(rows, columns=columns)

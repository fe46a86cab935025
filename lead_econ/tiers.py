# lead_econ/tiers.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class PricingTier:
    """
    Markup policy for the price an agency sells a lead at.

    markup is the multiplier applied to the agency's own cost per lead.
    None means "charge the full max CPL target" (no markup cap).
    Every tier is clamped to the client's max CPL target.
    """
    name: str
    label: str
    markup: Optional[float]


TIERS: Dict[str, PricingTier] = {
    "safe":       PricingTier("safe",       label="Low markup",     markup=1.2),
    "balanced":   PricingTier("balanced",   label="Healthy margin", markup=1.5),
    "aggressive": PricingTier("aggressive", label="Max price",      markup=None),
}

RECOMMENDED_TIER = "balanced"


def tier_price(tier: PricingTier, expected_cost_per_lead: float, max_cpl_target: float) -> float:
    if tier.markup is None:
        return max_cpl_target
    return min(expected_cost_per_lead * tier.markup, max_cpl_target)

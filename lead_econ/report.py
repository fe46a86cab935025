# lead_econ/report.py
"""
Turns engine results into display-ready blocks (strings already formatted).

Both summaries share one shape so the API and the CLI can render them the same way:
  {
    "headline": str,
    "message": str,
    "sections": [{"title": str, "rows": [[label, value], ...]}, ...],
    "pricing_table": [...] | None,   # CPL only
    "goal_progress": {...} | None,   # LVR only
    "guidance": [str, ...],
  }
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .cpl import CPLInputs, CPLResults
from .formatting import format_currency, format_number, format_percent
from .lvr import LVRInputs, LVRResults
from .tiers import RECOMMENDED_TIER, TIERS

# Fraction of the max CPL target suggested as a cost goal when the model is not viable.
COST_TARGET_FACTOR = 0.8


def _section(title: str, rows: List[List[str]]) -> Dict[str, Any]:
    return {"title": title, "rows": rows}


# -----------------------
# CPL
# -----------------------
def _cpl_message(inputs: CPLInputs, results: CPLResults) -> str:
    money = lambda v: format_currency(v, inputs.currency)  # noqa: E731
    has_target = (inputs.target_profit_margin_percent or 0) > 0

    if results.is_viable:
        why = "while keeping their target profit margin" if has_target else "to break even"
        return (
            f"The client can afford up to {money(results.max_cpl_target)} per lead {why}. "
            f"Your expected cost of {money(results.expected_cost_per_lead)} fits within this budget."
        )
    why = "to maintain their margins" if has_target else "to break even"
    return (
        f"The client can only afford {money(results.max_cpl_target)} per lead {why}, "
        f"but your expected cost is {money(results.expected_cost_per_lead)}."
    )


def cpl_summary(inputs: CPLInputs, results: CPLResults) -> Dict[str, Any]:
    money = lambda v: format_currency(v, inputs.currency)  # noqa: E731

    snapshot = [
        ["Avg Revenue", money(inputs.average_revenue)],
        ["Profit Per Sale", f"{money(results.profit_per_sale)} ({format_number(inputs.gross_margin_percent, 0)}% margin)"],
        ["Close Rate", format_percent(inputs.conversion_rate_percent, 0)],
        ["Profit Per Lead", money(results.profit_per_lead)],
    ]

    max_rows = [["Break Even Max CPL", money(results.profit_per_lead)]]
    if (inputs.target_profit_margin_percent or 0) > 0:
        max_rows.append([
            f"Max CPL with Target Profit ({format_percent(inputs.target_profit_margin_percent, 0)})",
            money(results.max_cpl_target),
        ])

    assumptions = [
        ["Expected Cost Per Lead", money(results.expected_cost_per_lead)],
        ["Room for markup", money(results.markup_room)],
    ]

    pricing_table: Optional[List[Dict[str, str]]] = None
    if results.is_viable:
        pricing_table = [
            {
                "strategy": t.name.capitalize(),
                "note": TIERS[t.name].label,
                "price": money(t.price),
                "agency_profit": money(t.agency_profit),
                "client_profit": money(t.client_profit),
            }
            for t in results.tiers
        ]
        recommended = getattr(results, RECOMMENDED_TIER)
        guidance = [
            f"Recommendation: Start with the {RECOMMENDED_TIER.capitalize()} price of {money(recommended.price)}.",
            f"Room to move: You have {money(results.markup_room)} of total margin to play with.",
            "Leverage: If you improve the client's conversion rate, their max affordable CPL jumps significantly.",
        ]
    else:
        guidance = [
            f"Critical Issue: Your expected cost ({money(results.expected_cost_per_lead)}) "
            "is higher than the client's maximum budget.",
            f"Option 1: Get your CPL down to at least {money(results.max_cpl_target * COST_TARGET_FACTOR)}.",
            "Option 2: Increase average revenue per sale.",
        ]

    return {
        "headline": "The Economics Work" if results.is_viable else "The Model is Not Viable",
        "message": _cpl_message(inputs, results),
        "sections": [
            _section("Client Economics Snapshot", snapshot),
            _section("Max Cost Per Lead (Client)", max_rows),
            _section("Agency Assumptions", assumptions),
        ],
        "pricing_table": pricing_table,
        "goal_progress": None,
        "guidance": guidance,
    }


# -----------------------
# LVR
# -----------------------
def goal_progress(results: LVRResults) -> Optional[Dict[str, Any]]:
    """
    Progress vs. target message. None when no goal was given.
    """
    if results.leads_gap is None:
        return None

    if results.goal_met:
        message = f"You are on track to exceed your goal by {format_number(abs(results.leads_gap))} leads."
    else:
        message = f"You are projected to miss your goal by {format_number(results.leads_gap)} leads."
        if results.daily_leads_needed:
            message += (
                f" You need to average {format_number(results.daily_leads_needed, 1)} leads per day "
                "for the rest of the month to catch up."
            )
    return {"on_track": bool(results.goal_met), "message": message}


def lvr_summary(inputs: LVRInputs, results: LVRResults) -> Dict[str, Any]:
    money = lambda v: format_currency(v, inputs.currency)  # noqa: E731
    growing = results.projected_lvr_percent >= 0

    snapshot = [
        ["Leads Last Month", format_number(inputs.last_month_leads)],
        ["Leads This Month (so far)", format_number(inputs.this_month_leads)],
        ["Current LVR", format_percent(results.lvr_percent)],
    ]
    forecast = [
        ["Projected Leads", format_number(results.projected_leads)],
        ["Projected LVR", format_percent(results.projected_lvr_percent)],
        ["Projected Customers", format_number(results.projected_customers, 1)],
    ]
    revenue = [
        ["Last Month Rev", money(results.last_month_revenue)],
        ["This Month Rev", money(results.this_month_revenue)],
        ["Projected Rev", money(results.projected_revenue)],
    ]

    progress = goal_progress(results)
    guidance = [progress["message"]] if progress else []

    return {
        "headline": "Advanced LVR Analysis",
        "message": (
            f"Projected to finish the month at {format_number(results.projected_leads)} leads "
            f"({'up' if growing else 'down'} {format_percent(abs(results.projected_lvr_percent))} on last month)."
        ),
        "sections": [
            _section("Lead Velocity Snapshot", snapshot),
            _section("End-of-Month Forecast", forecast),
            _section(
                f"Conversion & Revenue Impact (based on {format_percent(inputs.conversion_rate_percent, 0)} conversion)",
                revenue,
            ),
        ],
        "pricing_table": None,
        "goal_progress": progress,
        "guidance": guidance,
    }


def render_text(summary: Dict[str, Any]) -> str:
    lines = [summary["headline"], "=" * len(summary["headline"]), summary["message"]]

    for section in summary["sections"]:
        lines.append("")
        lines.append(f"--- {section['title']} ---")
        width = max(len(label) for label, _ in section["rows"])
        for label, value in section["rows"]:
            lines.append(f"  {label.ljust(width)}  {value}")

    if summary.get("pricing_table"):
        lines.append("")
        lines.append("--- Recommended Lead Pricing Breakdown ---")
        lines.append(f"  {'Strategy':<12}{'Price':>14}{'Agency Profit':>16}{'Client Profit':>16}")
        for row in summary["pricing_table"]:
            lines.append(
                f"  {row['strategy']:<12}{row['price']:>14}{row['agency_profit']:>16}{row['client_profit']:>16}"
            )

    if summary.get("guidance"):
        lines.append("")
        lines.extend(f"* {g}" for g in summary["guidance"])

    return "\n".join(lines)

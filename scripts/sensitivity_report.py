# scripts/sensitivity_report.py
from __future__ import annotations

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).resolve().parents[1]
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import argparse
import logging
from typing import List, Optional

import numpy as np
import pandas as pd

from lead_econ.config import get_settings
from lead_econ.collector import collect_cpl_inputs, collect_lvr_inputs
from lead_econ.cpl import CPLInputs, compute_cpl, cpl_sensitivity_grid, tiers_to_frame
from lead_econ.errors import InputValidationError
from lead_econ.logging_utils import configure_logging
from lead_econ.lvr import LVRInputs, lvr_goal_grid

logger = logging.getLogger("sensitivity_report")


def build_tables(cpl_inputs: CPLInputs, lvr_inputs: LVRInputs, conversion_rates: List[float], goals: List[float]):
    tiers = tiers_to_frame(compute_cpl(cpl_inputs))
    cpl_grid = cpl_sensitivity_grid(cpl_inputs, conversion_rates)
    goal_grid = lvr_goal_grid(lvr_inputs, goals)
    return tiers, cpl_grid, goal_grid


def save_outputs(out_dir: Path, tiers: pd.DataFrame, cpl_grid: pd.DataFrame, goal_grid: pd.DataFrame) -> List[Path]:
    out_dir.mkdir(parents=True, exist_ok=True)

    paths = [
        out_dir / "cpl_tiers.csv",
        out_dir / "cpl_sensitivity.csv",
        out_dir / "lvr_goals.csv",
    ]
    for df, path in zip([tiers, cpl_grid, goal_grid], paths):
        df.to_csv(path, index=False)
    return paths


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Write CPL pricing and LVR goal scenario tables to CSV.")
    parser.add_argument("--currency", default=None)
    parser.add_argument("--average-revenue", type=float, default=1000.0)
    parser.add_argument("--gross-margin", type=float, default=50.0)
    parser.add_argument("--conversion-rate", type=float, default=20.0)
    parser.add_argument("--target-margin", type=float, default=20.0)
    parser.add_argument("--cost-per-lead", type=float, default=50.0)
    parser.add_argument("--last-month-leads", type=float, default=100.0)
    parser.add_argument("--this-month-leads", type=float, default=60.0)
    parser.add_argument("--day", type=int, default=15)
    parser.add_argument("--days-in-month", type=int, default=30)
    parser.add_argument("--ltv", type=float, default=500.0)
    parser.add_argument("--out-dir", default=None, help="Defaults to LEAD_ECON_OUTPUT_DIR (outputs/tables).")
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings.log_level)
    out_dir = Path(args.out_dir) if args.out_dir else settings.output_dir

    try:
        cpl_inputs = collect_cpl_inputs({
            "currency": args.currency,
            "average_revenue": args.average_revenue,
            "gross_margin_percent": args.gross_margin,
            "conversion_rate_percent": args.conversion_rate,
            "target_profit_margin_percent": args.target_margin,
            "expected_cost_per_lead": args.cost_per_lead,
        }, default_currency=settings.default_currency)
        lvr_inputs = collect_lvr_inputs({
            "currency": args.currency,
            "last_month_leads": args.last_month_leads,
            "this_month_leads": args.this_month_leads,
            "day_of_month": args.day,
            "total_days_in_month": args.days_in_month,
            "conversion_rate_percent": args.conversion_rate,
            "ltv": args.ltv,
        }, default_currency=settings.default_currency)
    except InputValidationError as e:
        parser.error(str(e))
    currency = cpl_inputs.currency

    # 0.5x .. 2x the current close rate, and goals around last month's volume
    conversion_rates = list(np.round(np.linspace(0.5, 2.0, 7) * args.conversion_rate, 2))
    goals = list(np.round(np.linspace(0.75, 1.5, 7) * args.last_month_leads))

    logger.info("Building scenario tables (currency=%s)", currency)
    tiers, cpl_grid, goal_grid = build_tables(cpl_inputs, lvr_inputs, conversion_rates, goals)
    paths = save_outputs(out_dir, tiers, cpl_grid, goal_grid)

    print("\n=== CPL PRICING TIERS ===")
    print(tiers.to_string(index=False))
    print("\n=== CPL vs CONVERSION RATE ===")
    print(cpl_grid.to_string(index=False))
    print("\n=== LVR GOAL SCENARIOS ===")
    print(goal_grid.to_string(index=False))

    print("\nSaved outputs to:")
    for p in paths:
        print(f"  {p}")


if __name__ == "__main__":
    main()

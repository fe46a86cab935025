# scripts/run_calculator.py
"""
Step-by-step calculator in the terminal.

Asks the same questions as the web wizard, one at a time (press Enter to skip
optional ones), then prints the result summary.

  python scripts/run_calculator.py cpl
  python scripts/run_calculator.py lvr --json
"""

from __future__ import annotations

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).resolve().parents[1]
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import argparse
import json
import logging

from lead_econ.collector import CalculatorSession, cpl_session, lvr_session
from lead_econ.config import get_settings
from lead_econ.cpl import compute_cpl
from lead_econ.currencies import CURRENCIES, display_name
from lead_econ.errors import PreconditionError
from lead_econ.logging_utils import configure_logging
from lead_econ.lvr import compute_lvr
from lead_econ.report import cpl_summary, lvr_summary, render_text

logger = logging.getLogger("run_calculator")


def ask_all(session: CalculatorSession) -> None:
    while not session.is_complete:
        q = session.current_question
        if q.kind == "currency":
            print("Currencies: " + ", ".join(f"{c} = {display_name(c)}" for c in CURRENCIES))
        raw = input(f"{session.prompt()} > ")
        if not session.submit(raw):
            print(f"  {session.error}")


def main() -> int:
    parser = argparse.ArgumentParser(description="Cost-per-lead and lead-velocity calculators.")
    parser.add_argument("tool", choices=["cpl", "lvr"], help="Which calculator to run.")
    parser.add_argument("--json", action="store_true", help="Print raw results as JSON instead of the summary.")
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings.log_level)

    if args.tool == "cpl":
        session = cpl_session(default_currency=settings.default_currency)
    else:
        session = lvr_session(default_currency=settings.default_currency)

    try:
        ask_all(session)
    except (EOFError, KeyboardInterrupt):
        print()
        logger.info("Cancelled")
        return 1

    inputs = session.inputs()
    try:
        if args.tool == "cpl":
            results = compute_cpl(inputs)
            summary = cpl_summary(inputs, results)
        else:
            results = compute_lvr(inputs)
            summary = lvr_summary(inputs, results)
    except PreconditionError as e:
        print(f"[error] {e}")
        return 2

    if args.json:
        print(json.dumps(results.to_dict(), indent=2))
    else:
        print()
        print(render_text(summary))
    return 0


if __name__ == "__main__":
    sys.exit(main())

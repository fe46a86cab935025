"""
tests/test_run_calculator.py

Interactive CLI wizard driven with scripted answers (input() and argv patched).
"""

from __future__ import annotations

import importlib.util
import json
from pathlib import Path

import pytest

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "run_calculator.py"

# currency, revenue, margin, close rate, target margin, cost per lead
CPL_ANSWERS = ["", "1000", "50", "20", "20", "50"]

# currency, last month, this month, day, days in month, conversion, ltv, goal
LVR_ANSWERS = ["", "100", "60", "15", "30", "10", "500", "150"]


def _load_script():
    spec = importlib.util.spec_from_file_location("run_calculator", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture()
def run(monkeypatch):
    """Run main() with the given argv and answers; returns (exit code, prompts seen)."""
    calculator = _load_script()

    def _run(argv, answers):
        remaining = iter(answers)
        prompts = []

        def fake_input(prompt=""):
            prompts.append(prompt)
            try:
                return next(remaining)
            except StopIteration:
                raise EOFError from None

        monkeypatch.setattr("builtins.input", fake_input)
        monkeypatch.setattr("sys.argv", ["run_calculator.py", *argv])
        return calculator.main(), prompts

    return _run


# ---------------------------------------------------------------------------
# CPL
# ---------------------------------------------------------------------------


class TestCPLWizard:
    def test_summary(self, run, capsys) -> None:
        code, prompts = run(["cpl"], CPL_ANSWERS)
        out = capsys.readouterr().out
        assert code == 0
        assert len(prompts) == 6
        assert "Currencies: USD = US Dollar ($)" in out
        assert "The Economics Work" in out
        assert "Recommended Lead Pricing Breakdown" in out

    def test_invalid_answer_is_asked_again(self, run, capsys) -> None:
        answers = ["", "abc", *CPL_ANSWERS[1:]]
        code, prompts = run(["cpl"], answers)
        out = capsys.readouterr().out
        assert code == 0
        assert "  Please use numbers only." in out
        assert prompts[1] == prompts[2]
        assert len(prompts) == 7

    def test_json(self, run, capsys) -> None:
        code, _ = run(["cpl", "--json"], CPL_ANSWERS)
        out = capsys.readouterr().out
        assert code == 0
        results = json.loads(out[out.index("{"):])
        assert results["max_cpl_target"] == pytest.approx(80)
        assert results["is_viable"] is True


# ---------------------------------------------------------------------------
# LVR
# ---------------------------------------------------------------------------


class TestLVRWizard:
    def test_summary(self, run, capsys) -> None:
        code, _ = run(["lvr"], LVR_ANSWERS)
        out = capsys.readouterr().out
        assert code == 0
        assert "Advanced LVR Analysis" in out
        assert "miss your goal by 30 leads" in out

    def test_zero_day_exits_2(self, run, capsys) -> None:
        answers = list(LVR_ANSWERS)
        answers[3] = "0"
        code, _ = run(["lvr"], answers)
        assert code == 2
        assert "[error] Last month's leads and day of month cannot be zero." in capsys.readouterr().out


# ---------------------------------------------------------------------------
# Cancel
# ---------------------------------------------------------------------------


def test_eof_cancels(run) -> None:
    code, prompts = run(["cpl"], CPL_ANSWERS[:2])
    assert code == 1
    assert len(prompts) == 3

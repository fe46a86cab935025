"""
tests/test_lvr.py

LVR forecasting engine: worked scenarios, goal handling and zero-divisor guard.
"""

from __future__ import annotations

from dataclasses import replace

import pandas as pd
import pytest

from lead_econ.errors import LVRPreconditionError, PreconditionError
from lead_econ.lvr import LVRInputs, compute_lvr, lvr_goal_grid


class TestScenario:
    def test_velocity_and_projection(self, lvr_inputs: LVRInputs) -> None:
        res = compute_lvr(lvr_inputs)
        assert res.lvr_percent == pytest.approx(-40)
        assert res.daily_rate == pytest.approx(4)
        assert res.projected_leads == pytest.approx(120)
        assert res.projected_lvr_percent == pytest.approx(20)

    def test_customers_and_revenue(self, lvr_inputs: LVRInputs) -> None:
        res = compute_lvr(lvr_inputs)
        assert res.last_month_customers == pytest.approx(10)
        assert res.this_month_customers == pytest.approx(6)
        assert res.projected_customers == pytest.approx(12)
        assert res.last_month_revenue == pytest.approx(5000)
        assert res.this_month_revenue == pytest.approx(3000)
        assert res.projected_revenue == pytest.approx(6000)

    def test_no_goal_leaves_gap_absent(self, lvr_inputs: LVRInputs) -> None:
        res = compute_lvr(lvr_inputs)
        assert res.leads_gap is None
        assert res.daily_leads_needed is None
        assert res.goal_met is None

    def test_idempotent(self, lvr_inputs: LVRInputs) -> None:
        assert compute_lvr(lvr_inputs) == compute_lvr(lvr_inputs)


class TestGoal:
    def test_goal_behind_pace(self, lvr_inputs: LVRInputs) -> None:
        res = compute_lvr(replace(lvr_inputs, monthly_lead_goal=150))
        assert res.leads_gap == pytest.approx(30)
        assert res.daily_leads_needed == pytest.approx(6)
        assert res.goal_met is False

    def test_goal_already_met(self, lvr_inputs: LVRInputs) -> None:
        res = compute_lvr(replace(lvr_inputs, monthly_lead_goal=100))
        assert res.leads_gap == pytest.approx(-20)
        assert res.daily_leads_needed is None
        assert res.goal_met is True

    def test_goal_exactly_on_projection(self, lvr_inputs: LVRInputs) -> None:
        res = compute_lvr(replace(lvr_inputs, monthly_lead_goal=120))
        assert res.leads_gap == pytest.approx(0)
        assert res.daily_leads_needed is None
        assert res.goal_met is True

    def test_last_day_of_month_has_no_daily_pace(self, lvr_inputs: LVRInputs) -> None:
        res = compute_lvr(replace(lvr_inputs, day_of_month=30, this_month_leads=90, monthly_lead_goal=150))
        assert res.leads_gap == pytest.approx(60)
        assert res.daily_leads_needed is None

    def test_day_past_month_end_has_no_daily_pace(self, lvr_inputs: LVRInputs) -> None:
        res = compute_lvr(replace(lvr_inputs, day_of_month=31, this_month_leads=31, monthly_lead_goal=500))
        assert res.leads_gap > 0
        assert res.daily_leads_needed is None

    def test_zero_goal_is_a_goal(self, lvr_inputs: LVRInputs) -> None:
        res = compute_lvr(replace(lvr_inputs, monthly_lead_goal=0))
        assert res.leads_gap == pytest.approx(-120)
        assert res.goal_met is True


class TestPreconditions:
    @pytest.mark.parametrize("field", ["last_month_leads", "day_of_month"])
    def test_zero_divisor_rejected(self, lvr_inputs: LVRInputs, field: str) -> None:
        with pytest.raises(LVRPreconditionError) as exc:
            compute_lvr(replace(lvr_inputs, **{field: 0}))
        assert str(exc.value) == "Last month's leads and day of month cannot be zero."

    def test_error_is_zero_division_class(self, lvr_inputs: LVRInputs) -> None:
        with pytest.raises(ZeroDivisionError):
            compute_lvr(replace(lvr_inputs, last_month_leads=0))
        with pytest.raises(PreconditionError):
            compute_lvr(replace(lvr_inputs, day_of_month=0))

    def test_error_is_not_a_validation_error(self, lvr_inputs: LVRInputs) -> None:
        with pytest.raises(LVRPreconditionError) as exc:
            compute_lvr(replace(lvr_inputs, last_month_leads=0))
        assert not isinstance(exc.value, ValueError)

    def test_zero_this_month_is_fine(self, lvr_inputs: LVRInputs) -> None:
        res = compute_lvr(replace(lvr_inputs, this_month_leads=0))
        assert res.lvr_percent == pytest.approx(-100)
        assert res.projected_leads == 0


class TestGoalGrid:
    def test_grid_rows(self, lvr_inputs: LVRInputs) -> None:
        df = lvr_goal_grid(lvr_inputs, [150, 100, 100])
        assert isinstance(df, pd.DataFrame)
        assert df["monthly_lead_goal"].tolist() == [100, 150]
        assert df["leads_gap"].tolist() == pytest.approx([-20, 30])
        assert df["goal_met"].tolist() == [True, False]

    def test_grid_daily_pace_missing_when_met(self, lvr_inputs: LVRInputs) -> None:
        df = lvr_goal_grid(lvr_inputs, [100, 150])
        assert pd.isna(df.loc[0, "daily_leads_needed"])
        assert df.loc[1, "daily_leads_needed"] == pytest.approx(6)

    def test_grid_propagates_precondition(self, lvr_inputs: LVRInputs) -> None:
        with pytest.raises(LVRPreconditionError):
            lvr_goal_grid(replace(lvr_inputs, last_month_leads=0), [100])

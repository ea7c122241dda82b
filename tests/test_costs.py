"""Tests for plan cost calculation and the final cost pass."""

from datetime import date

import pytest

from flowplan.costs import CostFinalizer, PlanCostBreakdown, PlanCostCalculator
from flowplan.models import DayRecord, WorkingCalendar


@pytest.fixture
def calculator(make_params):
    return PlanCostCalculator(make_params())


class TestPlanCostCalculator:
    """Tests for PlanCostCalculator."""

    def test_weighted_unit_cost(self, make_params):
        assert make_params().weighted_unit_cost == pytest.approx(644.85)

    def test_holding_cost(self, calculator):
        assert calculator.holding_cost(365) == pytest.approx(644.85 * 0.25)

    def test_negative_inventory_has_no_holding_cost(self, calculator):
        assert calculator.holding_cost(-50) == 0.0

    def test_overtime_labor_cost(self, calculator):
        # 2h * 8 employees * $25/h * 50% premium
        assert calculator.overtime_labor_cost(2.0) == pytest.approx(200.0)

    def test_overtime_cost_includes_prorated_overhead(self, calculator):
        # All 365 days work, so daily overhead + SG&A is 600000 / 365
        expected = 200.0 + (600_000 / 365) * 2.0 / 10.0
        assert calculator.overtime_cost(2.0) == pytest.approx(expected)

    def test_no_working_days_no_overhead(self, make_params):
        params = make_params(calendar=WorkingCalendar(year=2025))
        assert PlanCostCalculator(params).overtime_cost(2.0) == pytest.approx(200.0)

    def test_calculate(self, calculator):
        records = [
            DayRecord(day_index=0, date=date(2025, 1, 1), is_working_day=True,
                      holding_cost=10.0, operating_hours=10.0),
            DayRecord(day_index=1, date=date(2025, 1, 2), is_working_day=True,
                      holding_cost=5.0, operating_hours=13.0, overtime_hours=3.0,
                      is_exception_day=True, exception_cost=750.0),
        ]

        breakdown = calculator.calculate(records)

        assert breakdown.total_holding_cost == pytest.approx(15.0)
        assert breakdown.total_exception_cost == pytest.approx(750.0)
        assert breakdown.overtime_hours == pytest.approx(3.0)
        assert breakdown.overtime_labor_cost == pytest.approx(300.0)
        assert breakdown.total_cost == pytest.approx(765.0)

    def test_overtime_on_short_day_counted(self, calculator):
        # 6h of standard production plus 3h overtime stays under the 10h day
        records = [
            DayRecord(day_index=0, date=date(2025, 1, 1), is_working_day=True,
                      operating_hours=9.0, overtime_hours=3.0, is_exception_day=True),
        ]

        assert calculator.calculate(records).overtime_hours == pytest.approx(3.0)


class TestPlanCostBreakdown:
    """Tests for PlanCostBreakdown."""

    def test_str(self):
        breakdown = PlanCostBreakdown(total_holding_cost=1000.0, total_exception_cost=250.5, overtime_hours=2.0)
        assert str(breakdown) == "Plan Cost: $1,250.50 (holding $1,000.00, exception $250.50, 2.0h OT)"


class TestCostFinalizer:
    """Tests for CostFinalizer."""

    def test_reduction_days_are_not_working_days(self, make_params, weekday_calendar):
        params = make_params(calendar=weekday_calendar)
        records = [
            DayRecord(day_index=0, date=date(2025, 1, 1), is_working_day=True, is_reduction_day=True),
            DayRecord(day_index=1, date=date(2025, 1, 2), is_working_day=True),
            DayRecord(day_index=3, date=date(2025, 1, 4), is_working_day=True),
        ]

        CostFinalizer(params).finalize(records)

        assert [r.is_working_day for r in records] == [False, True, False]

    def test_holding_cost_recomputed(self, make_params):
        params = make_params()
        record = DayRecord(day_index=0, date=date(2025, 1, 1), is_working_day=True,
                           inventory_end=365, holding_cost=0.0)

        CostFinalizer(params).finalize([record])

        assert record.holding_cost == pytest.approx(PlanCostCalculator(params).holding_cost(365))

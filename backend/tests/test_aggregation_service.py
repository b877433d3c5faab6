"""
Earnings & fund aggregation tests, including the first-fortnight scenario.
"""

import pytest

from quinzena.domain import AdvanceEntry, AppSettings, ExpenseEntry, Period, TimeEntry
from quinzena.services.aggregation_service import (
    build_period_report,
    category_series,
    daily_series,
    summarize_period,
)
from quinzena.services.entry_service import build_time_entry


JAN_1 = Period(
    id="2025-1-1",
    label="1ª Quinzena janeiro/2025",
    start_date="2025-01-01",
    end_date="2025-01-15",
)


def _entry(date, earnings, total=8.0, overtime=0.0):
    return TimeEntry(
        user_id=1,
        date=date,
        start_time="09:00",
        lunch_start_time="12:00",
        lunch_end_time="13:00",
        end_time="18:00",
        total_hours=total,
        regular_hours=total - overtime,
        overtime_hours=overtime,
        earnings=earnings,
    )


def _expense(date, amount, category="Almoço"):
    return ExpenseEntry(user_id=1, date=date, amount=amount, category=category)


class TestFirstFortnightScenario:
    """Jan 1-15 2025: one regular day, one holiday, one expense, one advance."""

    @pytest.fixture
    def report(self):
        settings = AppSettings(user_id=1, hourly_rate=10, overtime_rate=15, expense_fund=100)
        regular = build_time_entry(
            user_id=1,
            data={
                "date": "2025-01-08",
                "start_time": "09:00",
                "lunch_start_time": "12:00",
                "lunch_end_time": "13:00",
                "end_time": "18:00",
                "is_holiday": False,
            },
            hourly_rate=10,
            overtime_rate=15,
            daily_limit=8,
        )
        holiday = build_time_entry(
            user_id=1,
            data={
                "date": "2025-01-06",
                "start_time": "10:00",
                "lunch_start_time": "12:00",
                "lunch_end_time": "13:00",
                "end_time": "15:00",
                "is_holiday": True,
            },
            hourly_rate=10,
            overtime_rate=15,
            daily_limit=8,
        )
        # Outside the period; must not count
        later = _entry("2025-01-20", earnings=999)

        return build_period_report(
            JAN_1,
            [regular, holiday, later],
            [_expense("2025-01-08", 20)],
            [AdvanceEntry(user_id=1, date="2025-01-10", amount=30)],
            settings,
        )

    def test_entries_priced(self, report):
        regular, holiday = sorted(report.entries, key=lambda e: e.date, reverse=True)
        assert (regular.total_hours, regular.regular_hours, regular.overtime_hours) == (8, 8, 0)
        assert regular.earnings == 80
        assert (holiday.total_hours, holiday.regular_hours, holiday.overtime_hours) == (4, 0, 4)
        assert holiday.earnings == 60

    def test_summary(self, report):
        summary = report.summary
        assert summary.total_earnings == 140
        assert summary.total_overtime == 4
        assert summary.total_hours == 12
        assert summary.total_expenses == 20
        assert summary.total_advances == 30
        assert summary.net_earnings == 110
        assert summary.total_fund == 100
        assert summary.fund_balance == 80
        assert not summary.is_over_budget

    def test_series_reconcile_with_totals(self, report):
        assert sum(p.earnings for p in report.daily) == pytest.approx(report.summary.total_earnings)
        assert sum(p.value for p in report.categories) == pytest.approx(report.summary.total_expenses)


class TestSummarize:
    def test_empty_input(self):
        summary = summarize_period([], [], [], AppSettings(user_id=1))
        assert summary.total_hours == 0
        assert summary.total_earnings == 0
        assert summary.fund_balance == 0
        assert summary.net_earnings == 0
        assert daily_series([], []) == []
        assert category_series([]) == []

    def test_over_budget_and_negative_net(self):
        summary = summarize_period(
            [_entry("2025-01-02", earnings=50)],
            [_expense("2025-01-02", 120)],
            [AdvanceEntry(user_id=1, date="2025-01-03", amount=70)],
            AppSettings(user_id=1, expense_fund=100),
        )
        assert summary.fund_balance == -20
        assert summary.is_over_budget
        assert summary.net_earnings == -20
        assert summary.to_dict()["is_over_budget"] is True

    def test_fund_is_fixed_per_period(self):
        settings = AppSettings(user_id=1, expense_fund=100)
        summary = summarize_period([], [], [], settings)
        assert summary.total_fund == 100
        assert summary.fund_balance == 100

    def test_totals_are_rounded(self):
        entries = [_entry(f"2025-01-0{i}", earnings=0.1) for i in range(1, 4)]
        assert summarize_period(entries, [], [], None).total_earnings == 0.3


class TestSeries:
    def test_daily_sorted_numerically_and_sparse(self):
        points = daily_series(
            [_entry("2025-01-10", 20), _entry("2025-01-02", 10)],
            [_expense("2025-01-09", 5), _expense("2025-01-10", 7)],
        )
        assert [p.day for p in points] == ["02", "09", "10"]
        assert [(p.earnings, p.expenses) for p in points] == [(10, 0), (0, 5), (20, 7)]

    def test_daily_orders_by_day_value_not_text(self):
        points = daily_series([_entry("2025-01-16", 1), _entry("2025-01-31", 1), _entry("2025-01-17", 1)], [])
        assert [p.day for p in points] == ["16", "17", "31"]

    def test_categories_sorted_descending(self):
        points = category_series([
            _expense("2025-01-02", 5, "Almoço"),
            _expense("2025-01-03", 30, "Combustível"),
            _expense("2025-01-04", 10, "Almoço"),
            _expense("2025-01-05", 1, "Diversos"),
        ])
        assert [(p.name, p.value) for p in points] == [
            ("Combustível", 30),
            ("Almoço", 15),
            ("Diversos", 1),
        ]

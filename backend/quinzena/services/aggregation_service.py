# Overview: Reduces a period's entries, expenses and advances into totals and chart series.

"""
Earnings & Fund Aggregator

- Gross earnings are the sum of the stored per-entry earnings.
- Net receivable = gross earnings - advances (may be negative).
- Fund balance = fixed per-period fund - expenses (negative means over budget).

Every reduction accepts empty input and returns zeros / empty series.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Sequence

from ..domain import AdvanceEntry, AppSettings, ExpenseEntry, Period, TimeEntry
from .period_service import filter_by_period
from .time_calculator import round2


@dataclass(frozen=True)
class PeriodSummary:
    total_hours: float
    total_overtime: float
    total_earnings: float
    total_expenses: float
    total_advances: float
    total_fund: float
    fund_balance: float
    net_earnings: float

    @property
    def is_over_budget(self) -> bool:
        return self.fund_balance < 0

    def to_dict(self) -> dict:
        data = asdict(self)
        data["is_over_budget"] = self.is_over_budget
        return data


@dataclass
class DailyPoint:
    day: str
    earnings: float = 0.0
    expenses: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class CategoryPoint:
    name: str
    value: float

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class PeriodReport:
    """Everything the API, exporters and narrative client need for one period."""
    period: Period
    settings: AppSettings
    entries: list[TimeEntry]
    expenses: list[ExpenseEntry]
    advances: list[AdvanceEntry]
    summary: PeriodSummary
    daily: list[DailyPoint] = field(default_factory=list)
    categories: list[CategoryPoint] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "period": self.period.to_dict(),
            "settings": self.settings.to_dict(),
            "entries": [e.to_dict() for e in self.entries],
            "expenses": [e.to_dict() for e in self.expenses],
            "advances": [a.to_dict() for a in self.advances],
            "summary": self.summary.to_dict(),
            "daily": [p.to_dict() for p in self.daily],
            "categories": [c.to_dict() for c in self.categories],
        }


def summarize_period(
    entries: Sequence[TimeEntry],
    expenses: Sequence[ExpenseEntry],
    advances: Sequence[AdvanceEntry],
    settings: AppSettings | None,
) -> PeriodSummary:
    total_hours = sum(e.total_hours for e in entries)
    total_overtime = sum(e.overtime_hours or 0 for e in entries)
    total_earnings = sum(e.earnings for e in entries)
    total_expenses = sum(e.amount for e in expenses)
    total_advances = sum(a.amount for a in advances)
    total_fund = (settings.expense_fund if settings else 0) or 0

    return PeriodSummary(
        total_hours=round2(total_hours),
        total_overtime=round2(total_overtime),
        total_earnings=round2(total_earnings),
        total_expenses=round2(total_expenses),
        total_advances=round2(total_advances),
        total_fund=round2(total_fund),
        fund_balance=round2(total_fund - total_expenses),
        net_earnings=round2(total_earnings - total_advances),
    )


def _day_of(iso_date: str) -> str:
    return iso_date.split("-")[2]


def daily_series(
    entries: Sequence[TimeEntry],
    expenses: Sequence[ExpenseEntry],
) -> list[DailyPoint]:
    """Per-day earnings/expenses, sparse, ordered by numeric day of month."""
    days: dict[str, DailyPoint] = {}

    for entry in entries:
        day = _day_of(entry.date)
        days.setdefault(day, DailyPoint(day=day)).earnings += entry.earnings

    for expense in expenses:
        day = _day_of(expense.date)
        days.setdefault(day, DailyPoint(day=day)).expenses += expense.amount

    points = sorted(days.values(), key=lambda p: int(p.day))
    for point in points:
        point.earnings = round2(point.earnings)
        point.expenses = round2(point.expenses)
    return points


def category_series(expenses: Sequence[ExpenseEntry]) -> list[CategoryPoint]:
    totals: dict[str, float] = {}
    for expense in expenses:
        totals[expense.category] = totals.get(expense.category, 0) + expense.amount
    points = [CategoryPoint(name=name, value=round2(value)) for name, value in totals.items()]
    points.sort(key=lambda p: p.value, reverse=True)
    return points


def build_period_report(
    period: Period,
    entries: Sequence[TimeEntry],
    expenses: Sequence[ExpenseEntry],
    advances: Sequence[AdvanceEntry],
    settings: AppSettings,
) -> PeriodReport:
    period_entries = filter_by_period(entries, period)
    period_expenses = filter_by_period(expenses, period)
    period_advances = filter_by_period(advances, period)

    return PeriodReport(
        period=period,
        settings=settings,
        entries=period_entries,
        expenses=period_expenses,
        advances=period_advances,
        summary=summarize_period(period_entries, period_expenses, period_advances, settings),
        daily=daily_series(period_entries, period_expenses),
        categories=category_series(period_expenses),
    )

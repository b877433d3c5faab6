# Overview: Bi-weekly period catalog, current-period lookup and date-range filtering.

"""
Period Service

Each month yields two periods: day 1-15 and day 16 to the month's last day.
Dates are zero-padded ISO strings, so range checks are string comparisons.
"""

from __future__ import annotations

import calendar
from datetime import date
from typing import Iterable, Sequence, TypeVar

from ..domain import Period

DEFAULT_START_YEAR = 2025
DEFAULT_END_YEAR = 2026

# When today is outside the generated catalog the second-to-last period is selected.
FALLBACK_PERIOD_OFFSET = 2

MONTH_NAMES = (
    "janeiro", "fevereiro", "março", "abril", "maio", "junho",
    "julho", "agosto", "setembro", "outubro", "novembro", "dezembro",
)

T = TypeVar("T")


class PeriodNotFoundError(LookupError):
    """Raised when a period id is not part of the catalog."""
    pass


def generate_periods(
    start_year: int = DEFAULT_START_YEAR,
    end_year: int = DEFAULT_END_YEAR,
) -> list[Period]:
    periods: list[Period] = []
    for year in range(start_year, end_year + 1):
        for month in range(1, 13):
            month_name = MONTH_NAMES[month - 1]
            last_day = calendar.monthrange(year, month)[1]
            periods.append(Period(
                id=f"{year}-{month}-1",
                label=f"1ª Quinzena {month_name}/{year}",
                start_date=f"{year}-{month:02d}-01",
                end_date=f"{year}-{month:02d}-15",
            ))
            periods.append(Period(
                id=f"{year}-{month}-2",
                label=f"2ª Quinzena {month_name}/{year}",
                start_date=f"{year}-{month:02d}-16",
                end_date=f"{year}-{month:02d}-{last_day:02d}",
            ))
    return periods


def current_period_index(periods: Sequence[Period], today: date | str | None = None) -> int:
    if today is None:
        today = date.today()
    today_str = today.isoformat() if isinstance(today, date) else str(today)
    for idx, period in enumerate(periods):
        if period.contains(today_str):
            return idx
    return len(periods) - FALLBACK_PERIOD_OFFSET


def find_period(periods: Iterable[Period], period_id: str) -> Period:
    for period in periods:
        if period.id == period_id:
            return period
    raise PeriodNotFoundError(f"Unknown period: {period_id}")


def resolve_period(
    periods: Sequence[Period],
    period_id: str | None,
    today: date | str | None = None,
) -> Period:
    """Selected period by id, or the current one when no id is given."""
    if period_id:
        return find_period(periods, period_id)
    return periods[current_period_index(periods, today)]


def _item_date(item) -> str:
    if isinstance(item, dict):
        return item["date"]
    return item.date


def filter_by_period(items: Iterable[T], period: Period) -> list[T]:
    return [
        item for item in items
        if period.contains(_item_date(item))
    ]


def catalog_for_app(app) -> list[Period]:
    """Catalog for the configured year span, generated once per app."""
    periods = app.extensions.get("period_catalog")
    if periods is None:
        periods = generate_periods(
            app.config.get("PERIOD_START_YEAR", DEFAULT_START_YEAR),
            app.config.get("PERIOD_END_YEAR", DEFAULT_END_YEAR),
        )
        app.extensions["period_catalog"] = periods
    return periods

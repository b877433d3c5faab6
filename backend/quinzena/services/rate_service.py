# Overview: Re-prices every stored time entry after a rate change.

"""
Rate Reapplication

POLICY: a rate change is retroactive. Every entry of the user, in every
period, is re-split from its stored total_hours and re-priced with the new
rates; the rate in effect when the entry was created is not kept.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from ..domain import DEFAULT_DAILY_LIMIT, TimeEntry
from .time_calculator import compute_earnings, round2, split_hours


def reprice_entry(
    entry: TimeEntry,
    regular_rate: float,
    overtime_rate: float,
    daily_limit: float = DEFAULT_DAILY_LIMIT,
) -> TimeEntry:
    breakdown = split_hours(entry.total_hours, daily_limit, bool(entry.is_holiday))
    regular_hours = round2(breakdown.regular_hours)
    overtime_hours = round2(breakdown.overtime_hours)
    return replace(
        entry,
        regular_hours=regular_hours,
        overtime_hours=overtime_hours,
        earnings=round2(compute_earnings(regular_hours, overtime_hours, regular_rate, overtime_rate)),
    )


def reapply_rates(
    entries: Iterable[TimeEntry],
    regular_rate: float,
    overtime_rate: float,
    daily_limit: float = DEFAULT_DAILY_LIMIT,
) -> list[TimeEntry]:
    """Return re-priced copies; the input entries are left untouched."""
    return [reprice_entry(e, regular_rate, overtime_rate, daily_limit) for e in entries]

# Overview: Pure shift arithmetic; clock times to net hours and the regular/overtime split.

"""
Time Calculator

All clock times are wall-clock "HH:MM" values on the same calendar day.

INVALID INPUT: net_duration() does not raise on a bad ordering. It returns 0,
and callers must refuse to persist an entry whose net duration is <= 0.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from ..domain import DEFAULT_DAILY_LIMIT

MINUTES_PER_HOUR = 60


@dataclass(frozen=True)
class HoursBreakdown:
    regular_hours: float
    overtime_hours: float


def parse_clock(value: str | None) -> int | None:
    """
    Parse "HH:MM" into minutes since midnight.

    - None / "" -> None
    - malformed or out of range -> ValueError
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    hours_raw, sep, minutes_raw = text.partition(":")
    if not sep or not hours_raw.isdigit() or not minutes_raw.isdigit():
        raise ValueError(f"Invalid time: {value}")
    hours, minutes = int(hours_raw), int(minutes_raw)
    if hours > 23 or minutes > 59:
        raise ValueError(f"Invalid time: {value}")
    return hours * MINUTES_PER_HOUR + minutes


def net_duration(
    start: str | None,
    lunch_start: str | None,
    lunch_end: str | None,
    dinner_start: str | None,
    dinner_end: str | None,
    end: str | None,
) -> float:
    """
    Net worked hours for one shift, breaks excluded. Not rounded.

    The dinner block only counts when both dinner times are present; a single
    missing counterpart voids it. Returns 0 when a required time is missing
    or the times are out of order.
    """
    start_m = parse_clock(start)
    lunch_start_m = parse_clock(lunch_start)
    lunch_end_m = parse_clock(lunch_end)
    dinner_start_m = parse_clock(dinner_start)
    dinner_end_m = parse_clock(dinner_end)
    end_m = parse_clock(end)

    if start_m is None or lunch_start_m is None or lunch_end_m is None or end_m is None:
        return 0

    if lunch_start_m < start_m or lunch_end_m < lunch_start_m:
        return 0

    total_minutes = lunch_start_m - start_m

    if dinner_start_m is not None and dinner_end_m is not None:
        if dinner_start_m < lunch_end_m or dinner_end_m < dinner_start_m or end_m < dinner_end_m:
            return 0
        total_minutes += dinner_start_m - lunch_end_m
        total_minutes += end_m - dinner_end_m
    else:
        if end_m < lunch_end_m:
            return 0
        total_minutes += end_m - lunch_end_m

    return total_minutes / MINUTES_PER_HOUR


def hours_breakdown(total_hours: float, daily_limit: float = DEFAULT_DAILY_LIMIT) -> HoursBreakdown:
    return HoursBreakdown(
        regular_hours=min(total_hours, daily_limit),
        overtime_hours=max(0, total_hours - daily_limit),
    )


def split_hours(total_hours: float, daily_limit: float, is_holiday: bool) -> HoursBreakdown:
    """Holiday/weekend shifts are paid entirely as overtime."""
    if is_holiday:
        return HoursBreakdown(regular_hours=0, overtime_hours=total_hours)
    return hours_breakdown(total_hours, daily_limit)


def compute_earnings(
    regular_hours: float,
    overtime_hours: float,
    hourly_rate: float,
    overtime_rate: float,
) -> float:
    return regular_hours * hourly_rate + overtime_hours * overtime_rate


def round2(value: float) -> float:
    """Round half-up to 2 decimals. Used for every stored hour and money field."""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def is_weekend(iso_date: str) -> bool:
    return date.fromisoformat(iso_date).weekday() >= 5

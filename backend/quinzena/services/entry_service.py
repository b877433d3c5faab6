# Overview: Service-layer operations for time entries, expenses and advances.

"""
Entry Service

WHY: Entries are created here and nowhere else, so the per-user rules hold
for every caller (HTTP, CLI, tests):
- one time entry per user per date
- a shift whose net duration is <= 0 is never stored
- derived hours and earnings are computed once, with the user's current
  rates, and stored rounded to 2 decimals

Mutation pattern: saves upsert only the records that changed; removal goes
through the repository delete_* calls.
"""

from __future__ import annotations

from ..domain import EXPENSE_CATEGORIES, AdvanceEntry, ExpenseEntry, Period, TimeEntry
from ..repositories import FinancialRepository, get_repository
from ..validation import (
    ConflictError,
    PayloadPolicy,
    ValidationError,
    coerce_bool,
    coerce_clock,
    coerce_iso_date,
    coerce_number,
    coerce_optional_text,
    coerce_text,
    enforce_positive_amount,
    validate_payload,
)
from .period_service import filter_by_period
from .time_calculator import compute_earnings, is_weekend, net_duration, round2, split_hours


class EntryError(ValueError):
    """Raised for invalid entry operations."""
    pass


class EntryNotFoundError(EntryError):
    pass


TIME_ENTRY_POLICY = PayloadPolicy(
    fields={
        "date": coerce_iso_date,
        "start_time": coerce_clock,
        "lunch_start_time": coerce_clock,
        "lunch_end_time": coerce_clock,
        "dinner_start_time": coerce_clock,
        "dinner_end_time": coerce_clock,
        "end_time": coerce_clock,
        "description": coerce_text,
        "is_holiday": coerce_bool,
    },
    required_on_create={"date", "start_time", "lunch_start_time", "lunch_end_time", "end_time"},
    nullable={"dinner_start_time", "dinner_end_time", "is_holiday"},
)

EXPENSE_POLICY = PayloadPolicy(
    fields={
        "date": coerce_iso_date,
        "amount": coerce_number,
        "category": coerce_text,
        "description": coerce_text,
        "ag_number": coerce_optional_text,
    },
    required_on_create={"date", "amount", "category"},
    nullable={"ag_number"},
)

ADVANCE_POLICY = PayloadPolicy(
    fields={
        "date": coerce_iso_date,
        "amount": coerce_number,
        "description": coerce_optional_text,
    },
    required_on_create={"date", "amount"},
    nullable={"description"},
)


def _repo(repo: FinancialRepository | None) -> FinancialRepository:
    return repo if repo is not None else get_repository()


def _by_date(items: list) -> list:
    return sorted(items, key=lambda item: item.date)


# =============================================================================
# TIME ENTRIES
# =============================================================================


def build_time_entry(*, user_id: int, data: dict, hourly_rate: float, overtime_rate: float, daily_limit: float) -> TimeEntry:
    """
    Compute the stored figures for a validated shift.

    Raises EntryError when the times are out of order.
    """
    total = net_duration(
        data["start_time"],
        data["lunch_start_time"],
        data["lunch_end_time"],
        data.get("dinner_start_time"),
        data.get("dinner_end_time"),
        data["end_time"],
    )
    if total <= 0:
        raise EntryError(
            "Invalid times. Check the sequence: start <= lunch <= dinner <= end"
        )

    is_holiday = data.get("is_holiday")
    if is_holiday is None:
        is_holiday = is_weekend(data["date"])

    total_hours = round2(total)
    breakdown = split_hours(total_hours, daily_limit, is_holiday)
    regular_hours = round2(breakdown.regular_hours)
    overtime_hours = round2(breakdown.overtime_hours)

    # A lone dinner time voids the dinner block; don't store half of it
    has_dinner = bool(data.get("dinner_start_time") and data.get("dinner_end_time"))

    return TimeEntry(
        user_id=user_id,
        date=data["date"],
        start_time=data["start_time"],
        lunch_start_time=data["lunch_start_time"],
        lunch_end_time=data["lunch_end_time"],
        dinner_start_time=data.get("dinner_start_time") if has_dinner else None,
        dinner_end_time=data.get("dinner_end_time") if has_dinner else None,
        end_time=data["end_time"],
        description=data.get("description", ""),
        is_holiday=is_holiday,
        total_hours=total_hours,
        regular_hours=regular_hours,
        overtime_hours=overtime_hours,
        earnings=round2(compute_earnings(regular_hours, overtime_hours, hourly_rate, overtime_rate)),
    )


def create_time_entry(*, user_id: int, payload: dict, repo: FinancialRepository | None = None) -> TimeEntry:
    repo = _repo(repo)
    data = validate_payload(payload=payload, policy=TIME_ENTRY_POLICY, partial=False)

    entries = repo.get_time_entries(user_id)
    if any(entry.date == data["date"] for entry in entries):
        raise ConflictError(
            "An entry already exists for this date. Delete it before adding a new one."
        )

    settings = repo.get_settings(user_id)
    entry = build_time_entry(
        user_id=user_id,
        data=data,
        hourly_rate=settings.hourly_rate,
        overtime_rate=settings.overtime_rate,
        daily_limit=settings.daily_limit,
    )

    repo.save_time_entries([entry], user_id)
    return entry


def list_time_entries(*, user_id: int, period: Period | None = None, repo: FinancialRepository | None = None) -> list[TimeEntry]:
    entries = _repo(repo).get_time_entries(user_id)
    if period is not None:
        entries = filter_by_period(entries, period)
    return _by_date(entries)


def delete_time_entry(*, user_id: int, entry_id: str, repo: FinancialRepository | None = None) -> None:
    repo = _repo(repo)
    if not any(entry.id == entry_id for entry in repo.get_time_entries(user_id)):
        raise EntryNotFoundError("Time entry not found")
    repo.delete_time_entry(entry_id)


# =============================================================================
# EXPENSES
# =============================================================================


def create_expense(*, user_id: int, payload: dict, repo: FinancialRepository | None = None) -> ExpenseEntry:
    repo = _repo(repo)
    data = validate_payload(payload=payload, policy=EXPENSE_POLICY, partial=False)
    enforce_positive_amount(data)
    if data["category"] not in EXPENSE_CATEGORIES:
        raise ValidationError(
            f"category must be one of: {', '.join(EXPENSE_CATEGORIES)}"
        )

    expense = ExpenseEntry(
        user_id=user_id,
        date=data["date"],
        amount=round2(data["amount"]),
        category=data["category"],
        description=data.get("description", ""),
        ag_number=data.get("ag_number"),
    )
    repo.save_expenses([expense], user_id)
    return expense


def list_expenses(
    *,
    user_id: int,
    period: Period | None = None,
    category: str | None = None,
    ag_number: str | None = None,
    repo: FinancialRepository | None = None,
) -> list[ExpenseEntry]:
    """Category is an exact match; ag_number a case-insensitive substring."""
    expenses = _repo(repo).get_expenses(user_id)
    if period is not None:
        expenses = filter_by_period(expenses, period)
    if category:
        expenses = [e for e in expenses if e.category == category]
    if ag_number:
        needle = ag_number.lower()
        expenses = [e for e in expenses if e.ag_number and needle in e.ag_number.lower()]
    return _by_date(expenses)


def delete_expense(*, user_id: int, expense_id: str, repo: FinancialRepository | None = None) -> None:
    repo = _repo(repo)
    if not any(e.id == expense_id for e in repo.get_expenses(user_id)):
        raise EntryNotFoundError("Expense not found")
    repo.delete_expense(expense_id)


# =============================================================================
# ADVANCES
# =============================================================================


def create_advance(*, user_id: int, payload: dict, repo: FinancialRepository | None = None) -> AdvanceEntry:
    repo = _repo(repo)
    data = validate_payload(payload=payload, policy=ADVANCE_POLICY, partial=False)
    enforce_positive_amount(data)

    advance = AdvanceEntry(
        user_id=user_id,
        date=data["date"],
        amount=round2(data["amount"]),
        description=data.get("description"),
    )
    repo.save_advances([advance], user_id)
    return advance


def list_advances(*, user_id: int, period: Period | None = None, repo: FinancialRepository | None = None) -> list[AdvanceEntry]:
    advances = _repo(repo).get_advances(user_id)
    if period is not None:
        advances = filter_by_period(advances, period)
    return _by_date(advances)


def delete_advance(*, user_id: int, advance_id: str, repo: FinancialRepository | None = None) -> None:
    repo = _repo(repo)
    if not any(a.id == advance_id for a in repo.get_advances(user_id)):
        raise EntryNotFoundError("Advance not found")
    repo.delete_advance(advance_id)

# Overview: Plain domain records shared by services, repositories and exporters.

"""
Domain records

Dates are ISO "YYYY-MM-DD" strings and clock times "HH:MM" strings, so period
membership can be decided with plain string comparison. Hours and money are
floats already rounded to 2 decimals when stored.
"""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, field, fields


EXPENSE_CATEGORIES = (
    "Pequeno Almoço",
    "Almoço",
    "Jantar",
    "Combustível",
    "Transporte",
    "Diversos",
)

DEFAULT_DAILY_LIMIT = 8.0


def new_id() -> str:
    return str(uuid.uuid4())


def _from_mapping(cls, data: dict):
    names = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in data.items() if k in names})


@dataclass
class TimeEntry:
    """One work shift with its stored, already-rounded pay figures."""
    user_id: int
    date: str
    start_time: str
    lunch_start_time: str
    lunch_end_time: str
    end_time: str
    dinner_start_time: str | None = None
    dinner_end_time: str | None = None
    description: str = ""
    is_holiday: bool = False
    total_hours: float = 0.0
    regular_hours: float = 0.0
    overtime_hours: float = 0.0
    earnings: float = 0.0
    id: str = field(default_factory=new_id)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "TimeEntry":
        return _from_mapping(cls, data)


@dataclass
class ExpenseEntry:
    user_id: int
    date: str
    amount: float
    category: str
    description: str = ""
    ag_number: str | None = None
    id: str = field(default_factory=new_id)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "ExpenseEntry":
        return _from_mapping(cls, data)


@dataclass
class AdvanceEntry:
    user_id: int
    date: str
    amount: float
    description: str | None = None
    id: str = field(default_factory=new_id)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "AdvanceEntry":
        return _from_mapping(cls, data)


@dataclass
class AppSettings:
    """Per-user pay configuration. expense_fund is a fixed base per period."""
    user_id: int
    hourly_rate: float = 0.0
    overtime_rate: float = 8.0
    daily_limit: float = DEFAULT_DAILY_LIMIT
    currency: str = "EUR"
    user_name: str = "Colaborador"
    expense_fund: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "AppSettings":
        return _from_mapping(cls, data)


def default_settings(user_id: int) -> AppSettings:
    return AppSettings(user_id=user_id)


@dataclass(frozen=True)
class Period:
    """A half-month pay window; start_date and end_date are inclusive."""
    id: str
    label: str
    start_date: str
    end_date: str

    def contains(self, iso_date: str) -> bool:
        return self.start_date <= iso_date <= self.end_date

    def to_dict(self) -> dict:
        return asdict(self)

# Overview: Persistence port for the financial collections (settings, time entries, expenses, advances).

"""
Financial Repository (port)

Two interchangeable implementations exist: SQL (Flask-SQLAlchemy) and a
local JSON store. One is chosen per application; their contents are never
merged or reconciled.

CONTRACT:
- get_*(user_id) returns only that user's records.
- save_*(items, user_id) upserts the given records by id in one call; records
  not passed are left alone (removal only through delete_*).
- delete_*(id) removes a single record; unknown ids are a no-op.
- get_settings() never returns None; missing settings resolve to defaults.
"""

from __future__ import annotations

from ..domain import AdvanceEntry, AppSettings, ExpenseEntry, TimeEntry


class RepositoryError(Exception):
    """Raised when a write to the backing store fails."""
    pass


class FinancialRepository:
    name = "abstract"

    # Settings
    def get_settings(self, user_id: int) -> AppSettings:
        raise NotImplementedError

    def get_all_settings(self) -> list[AppSettings]:
        raise NotImplementedError

    def save_settings(self, settings: AppSettings) -> None:
        raise NotImplementedError

    # Time entries
    def get_time_entries(self, user_id: int) -> list[TimeEntry]:
        raise NotImplementedError

    def get_all_time_entries(self) -> list[TimeEntry]:
        raise NotImplementedError

    def save_time_entries(self, entries: list[TimeEntry], user_id: int) -> None:
        raise NotImplementedError

    def delete_time_entry(self, entry_id: str) -> None:
        raise NotImplementedError

    # Expenses
    def get_expenses(self, user_id: int) -> list[ExpenseEntry]:
        raise NotImplementedError

    def get_all_expenses(self) -> list[ExpenseEntry]:
        raise NotImplementedError

    def save_expenses(self, expenses: list[ExpenseEntry], user_id: int) -> None:
        raise NotImplementedError

    def delete_expense(self, expense_id: str) -> None:
        raise NotImplementedError

    # Advances
    def get_advances(self, user_id: int) -> list[AdvanceEntry]:
        raise NotImplementedError

    def get_all_advances(self) -> list[AdvanceEntry]:
        raise NotImplementedError

    def save_advances(self, advances: list[AdvanceEntry], user_id: int) -> None:
        raise NotImplementedError

    def delete_advance(self, advance_id: str) -> None:
        raise NotImplementedError

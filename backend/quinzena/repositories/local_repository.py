# Overview: Local JSON-file implementation of the financial repository.

"""
Local Financial Repository

One JSON document holds flat lists under fixed keys; each list mixes all
users and is filtered by user_id on read. Writes go to a temp file that
replaces the document, so a reader never sees a half-written file.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path

from ..domain import (
    DEFAULT_DAILY_LIMIT,
    AdvanceEntry,
    AppSettings,
    ExpenseEntry,
    TimeEntry,
    default_settings,
)
from .base import FinancialRepository, RepositoryError

SETTINGS_KEY = "settings"
TIME_ENTRIES_KEY = "timeEntries"
EXPENSES_KEY = "expenseEntries"
ADVANCES_KEY = "advances"


def _time_entry_from_stored(data: dict) -> TimeEntry:
    # Older documents may lack the derived hour fields; use the default split
    total = data.get("total_hours") or 0
    data = dict(data)
    data["is_holiday"] = bool(data.get("is_holiday") or False)
    if data.get("regular_hours") is None:
        data["regular_hours"] = min(total, DEFAULT_DAILY_LIMIT)
    if data.get("overtime_hours") is None:
        data["overtime_hours"] = max(0, total - DEFAULT_DAILY_LIMIT)
    return TimeEntry.from_dict(data)


class LocalFinancialRepository(FinancialRepository):
    name = "local"

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._lock = threading.Lock()

    # -- document I/O ----------------------------------------------------

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with self.path.open(encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, ValueError) as e:
            raise RepositoryError(f"Cannot read local store {self.path}") from e
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".quinzena-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise RepositoryError(f"Cannot write local store {self.path}") from e

    def _list(self, key: str) -> list[dict]:
        items = self._read().get(key, [])
        return items if isinstance(items, list) else []

    def _upsert_user_items(self, key: str, items: list, user_id: int) -> None:
        with self._lock:
            data = self._read()
            current = data.get(key, [])
            if not isinstance(current, list):
                current = []
            incoming = {}
            for item in items:
                payload = item.to_dict()
                payload["user_id"] = user_id
                incoming[payload["id"]] = payload
            # Records keep their position; unseen ids are appended
            merged = [incoming.pop(item.get("id"), item) for item in current]
            data[key] = merged + list(incoming.values())
            self._write(data)

    def _delete_item(self, key: str, item_id: str) -> None:
        with self._lock:
            data = self._read()
            current = data.get(key, [])
            if not isinstance(current, list):
                return
            data[key] = [item for item in current if item.get("id") != item_id]
            self._write(data)

    # -- settings --------------------------------------------------------

    def get_settings(self, user_id: int) -> AppSettings:
        for item in self._list(SETTINGS_KEY):
            if item.get("user_id") == user_id:
                return AppSettings.from_dict(item)
        return default_settings(user_id)

    def get_all_settings(self) -> list[AppSettings]:
        return [AppSettings.from_dict(item) for item in self._list(SETTINGS_KEY)]

    def save_settings(self, settings: AppSettings) -> None:
        with self._lock:
            data = self._read()
            current = data.get(SETTINGS_KEY, [])
            if not isinstance(current, list):
                current = []
            others = [item for item in current if item.get("user_id") != settings.user_id]
            data[SETTINGS_KEY] = others + [settings.to_dict()]
            self._write(data)

    # -- time entries ----------------------------------------------------

    def get_time_entries(self, user_id: int) -> list[TimeEntry]:
        return [
            _time_entry_from_stored(item)
            for item in self._list(TIME_ENTRIES_KEY)
            if item.get("user_id") == user_id
        ]

    def get_all_time_entries(self) -> list[TimeEntry]:
        return [_time_entry_from_stored(item) for item in self._list(TIME_ENTRIES_KEY)]

    def save_time_entries(self, entries: list[TimeEntry], user_id: int) -> None:
        self._upsert_user_items(TIME_ENTRIES_KEY, entries, user_id)

    def delete_time_entry(self, entry_id: str) -> None:
        self._delete_item(TIME_ENTRIES_KEY, entry_id)

    # -- expenses --------------------------------------------------------

    def get_expenses(self, user_id: int) -> list[ExpenseEntry]:
        return [
            ExpenseEntry.from_dict(item)
            for item in self._list(EXPENSES_KEY)
            if item.get("user_id") == user_id
        ]

    def get_all_expenses(self) -> list[ExpenseEntry]:
        return [ExpenseEntry.from_dict(item) for item in self._list(EXPENSES_KEY)]

    def save_expenses(self, expenses: list[ExpenseEntry], user_id: int) -> None:
        self._upsert_user_items(EXPENSES_KEY, expenses, user_id)

    def delete_expense(self, expense_id: str) -> None:
        self._delete_item(EXPENSES_KEY, expense_id)

    # -- advances --------------------------------------------------------

    def get_advances(self, user_id: int) -> list[AdvanceEntry]:
        return [
            AdvanceEntry.from_dict(item)
            for item in self._list(ADVANCES_KEY)
            if item.get("user_id") == user_id
        ]

    def get_all_advances(self) -> list[AdvanceEntry]:
        return [AdvanceEntry.from_dict(item) for item in self._list(ADVANCES_KEY)]

    def save_advances(self, advances: list[AdvanceEntry], user_id: int) -> None:
        self._upsert_user_items(ADVANCES_KEY, advances, user_id)

    def delete_advance(self, advance_id: str) -> None:
        self._delete_item(ADVANCES_KEY, advance_id)

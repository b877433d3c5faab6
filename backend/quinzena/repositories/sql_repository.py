# Overview: Flask-SQLAlchemy implementation of the financial repository.

"""
SQL Financial Repository

READS: a connectivity failure (OperationalError) is logged and surfaces as an
empty collection / default settings. Callers cannot tell that apart from a
user with no data.

WRITES: every save/delete is one transaction; failures roll back and raise
RepositoryError. Saves only upsert the records they are given, so an empty
read followed by a save never removes stored rows. The (user_id, date)
unique constraint still rejects a second time entry for a day when the
duplicate check ran on an empty read.
"""

from __future__ import annotations

from flask import current_app
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from ..domain import AdvanceEntry, AppSettings, ExpenseEntry, TimeEntry, default_settings
from ..extensions import db
from ..models import AdvanceRecord, ExpenseRecord, TimeEntryRecord, UserSettings
from .base import FinancialRepository, RepositoryError


class SqlFinancialRepository(FinancialRepository):
    name = "sql"

    # -- helpers ---------------------------------------------------------

    def _load(self, model, user_id: int | None) -> list:
        try:
            query = db.session.query(model)
            if user_id is not None:
                query = query.filter_by(user_id=user_id)
            rows = query.order_by(model.date.asc()).all()
        except OperationalError:
            db.session.rollback()
            current_app.logger.exception("Failed to load %s", model.__tablename__)
            return []
        return [row.to_domain() for row in rows]

    def _upsert(self, model, items: list, user_id: int) -> None:
        try:
            for item in items:
                record = model.from_domain(item)
                record.user_id = user_id
                db.session.merge(record)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.exception("Failed to save %s", model.__tablename__)
            raise RepositoryError(f"Failed to save {model.__tablename__}") from e

    def _delete(self, model, record_id: str) -> None:
        try:
            db.session.query(model).filter_by(id=record_id).delete(synchronize_session=False)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.exception("Failed to delete from %s", model.__tablename__)
            raise RepositoryError(f"Failed to delete from {model.__tablename__}") from e

    # -- settings --------------------------------------------------------

    def get_settings(self, user_id: int) -> AppSettings:
        try:
            row = db.session.query(UserSettings).filter_by(user_id=user_id).first()
        except OperationalError:
            db.session.rollback()
            current_app.logger.exception("Failed to load settings")
            return default_settings(user_id)
        return row.to_domain() if row else default_settings(user_id)

    def get_all_settings(self) -> list[AppSettings]:
        try:
            rows = db.session.query(UserSettings).order_by(UserSettings.user_id.asc()).all()
        except OperationalError:
            db.session.rollback()
            current_app.logger.exception("Failed to load settings")
            return []
        return [row.to_domain() for row in rows]

    def save_settings(self, settings: AppSettings) -> None:
        try:
            row = db.session.query(UserSettings).filter_by(user_id=settings.user_id).first()
            if row is None:
                row = UserSettings()
                db.session.add(row)
            row.apply(settings)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.exception("Failed to save settings")
            raise RepositoryError("Failed to save settings") from e

    # -- time entries ----------------------------------------------------

    def get_time_entries(self, user_id: int) -> list[TimeEntry]:
        return self._load(TimeEntryRecord, user_id)

    def get_all_time_entries(self) -> list[TimeEntry]:
        return self._load(TimeEntryRecord, None)

    def save_time_entries(self, entries: list[TimeEntry], user_id: int) -> None:
        self._upsert(TimeEntryRecord, entries, user_id)

    def delete_time_entry(self, entry_id: str) -> None:
        self._delete(TimeEntryRecord, entry_id)

    # -- expenses --------------------------------------------------------

    def get_expenses(self, user_id: int) -> list[ExpenseEntry]:
        return self._load(ExpenseRecord, user_id)

    def get_all_expenses(self) -> list[ExpenseEntry]:
        return self._load(ExpenseRecord, None)

    def save_expenses(self, expenses: list[ExpenseEntry], user_id: int) -> None:
        self._upsert(ExpenseRecord, expenses, user_id)

    def delete_expense(self, expense_id: str) -> None:
        self._delete(ExpenseRecord, expense_id)

    # -- advances --------------------------------------------------------

    def get_advances(self, user_id: int) -> list[AdvanceEntry]:
        return self._load(AdvanceRecord, user_id)

    def get_all_advances(self) -> list[AdvanceEntry]:
        return self._load(AdvanceRecord, None)

    def save_advances(self, advances: list[AdvanceEntry], user_id: int) -> None:
        self._upsert(AdvanceRecord, advances, user_id)

    def delete_advance(self, advance_id: str) -> None:
        self._delete(AdvanceRecord, advance_id)

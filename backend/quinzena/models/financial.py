from __future__ import annotations

from ..extensions import db
from ..domain import AdvanceEntry, AppSettings, ExpenseEntry, TimeEntry


# Financial rows are keyed by owner id only (no FK): the same collections can
# live in the local JSON store, where no users table exists.

class UserSettings(db.Model):
    """Per-user pay configuration (one row per user)."""
    __tablename__ = "settings"
    __table_args__ = (
        db.UniqueConstraint("user_id", name="uq_settings_user"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, nullable=False, index=True)

    hourly_rate = db.Column(db.Float, nullable=False, default=0)
    overtime_rate = db.Column(db.Float, nullable=False, default=8)
    daily_limit = db.Column(db.Float, nullable=False, default=8)
    currency = db.Column(db.String(3), nullable=False, default="EUR")
    user_name = db.Column(db.String(120), nullable=False, default="Colaborador")
    expense_fund = db.Column(db.Float, nullable=False, default=0)

    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    def to_domain(self) -> AppSettings:
        return AppSettings(
            user_id=self.user_id,
            hourly_rate=self.hourly_rate,
            overtime_rate=self.overtime_rate,
            daily_limit=self.daily_limit,
            currency=self.currency,
            user_name=self.user_name,
            expense_fund=self.expense_fund,
        )

    def apply(self, settings: AppSettings) -> None:
        self.user_id = settings.user_id
        self.hourly_rate = settings.hourly_rate
        self.overtime_rate = settings.overtime_rate
        self.daily_limit = settings.daily_limit
        self.currency = settings.currency
        self.user_name = settings.user_name
        self.expense_fund = settings.expense_fund


class TimeEntryRecord(db.Model):
    """
    One work shift.

    total/regular/overtime hours and earnings are stored, not recomputed on
    read; only a rate change rewrites them (see rate_service).
    """
    __tablename__ = "time_entries"
    __table_args__ = (
        db.UniqueConstraint("user_id", "date", name="uq_time_entries_user_date"),
        db.Index("ix_time_entries_user_date", "user_id", "date"),
    )

    id = db.Column(db.String(36), primary_key=True)
    user_id = db.Column(db.Integer, nullable=False, index=True)

    # ISO YYYY-MM-DD
    date = db.Column(db.String(10), nullable=False)

    # Clock times HH:MM
    start_time = db.Column(db.String(5), nullable=False)
    lunch_start_time = db.Column(db.String(5), nullable=False)
    lunch_end_time = db.Column(db.String(5), nullable=False)
    dinner_start_time = db.Column(db.String(5), nullable=True)
    dinner_end_time = db.Column(db.String(5), nullable=True)
    end_time = db.Column(db.String(5), nullable=False)

    description = db.Column(db.Text, nullable=False, default="")
    is_holiday = db.Column(db.Boolean, nullable=False, default=False)

    total_hours = db.Column(db.Float, nullable=False, default=0)
    regular_hours = db.Column(db.Float, nullable=False, default=0)
    overtime_hours = db.Column(db.Float, nullable=False, default=0)
    earnings = db.Column(db.Float, nullable=False, default=0)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    def to_domain(self) -> TimeEntry:
        return TimeEntry(
            id=self.id,
            user_id=self.user_id,
            date=self.date,
            start_time=self.start_time,
            lunch_start_time=self.lunch_start_time,
            lunch_end_time=self.lunch_end_time,
            dinner_start_time=self.dinner_start_time,
            dinner_end_time=self.dinner_end_time,
            end_time=self.end_time,
            description=self.description or "",
            is_holiday=bool(self.is_holiday),
            total_hours=self.total_hours,
            regular_hours=self.regular_hours,
            overtime_hours=self.overtime_hours,
            earnings=self.earnings,
        )

    @classmethod
    def from_domain(cls, entry: TimeEntry) -> "TimeEntryRecord":
        return cls(**entry.to_dict())


class ExpenseRecord(db.Model):
    """A withdrawal against the expense fund. Never mutated."""
    __tablename__ = "expenses"
    __table_args__ = (
        db.Index("ix_expenses_user_date", "user_id", "date"),
    )

    id = db.Column(db.String(36), primary_key=True)
    user_id = db.Column(db.Integer, nullable=False, index=True)
    date = db.Column(db.String(10), nullable=False)
    amount = db.Column(db.Float, nullable=False)
    category = db.Column(db.String(64), nullable=False)
    description = db.Column(db.Text, nullable=False, default="")

    # Optional external reference ("AG" number)
    ag_number = db.Column(db.String(64), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    def to_domain(self) -> ExpenseEntry:
        return ExpenseEntry(
            id=self.id,
            user_id=self.user_id,
            date=self.date,
            amount=self.amount,
            category=self.category,
            description=self.description or "",
            ag_number=self.ag_number,
        )

    @classmethod
    def from_domain(cls, expense: ExpenseEntry) -> "ExpenseRecord":
        return cls(**expense.to_dict())


class AdvanceRecord(db.Model):
    """A salary advance, deducted from gross earnings."""
    __tablename__ = "advances"
    __table_args__ = (
        db.Index("ix_advances_user_date", "user_id", "date"),
    )

    id = db.Column(db.String(36), primary_key=True)
    user_id = db.Column(db.Integer, nullable=False, index=True)
    date = db.Column(db.String(10), nullable=False)
    amount = db.Column(db.Float, nullable=False)
    description = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    def to_domain(self) -> AdvanceEntry:
        return AdvanceEntry(
            id=self.id,
            user_id=self.user_id,
            date=self.date,
            amount=self.amount,
            description=self.description,
        )

    @classmethod
    def from_domain(cls, advance: AdvanceEntry) -> "AdvanceRecord":
        return cls(**advance.to_dict())

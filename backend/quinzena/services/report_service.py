# Overview: Loads a user's collections and builds the period report.

from __future__ import annotations

from ..domain import Period
from ..repositories import FinancialRepository, get_repository
from .aggregation_service import PeriodReport, build_period_report


def load_period_report(*, user_id: int, period: Period, repo: FinancialRepository | None = None) -> PeriodReport:
    repo = repo if repo is not None else get_repository()
    return build_period_report(
        period,
        repo.get_time_entries(user_id),
        repo.get_expenses(user_id),
        repo.get_advances(user_id),
        repo.get_settings(user_id),
    )

# Overview: CSV rendering of entries, period summaries and the full database.

from __future__ import annotations

import csv
import io
from typing import Iterable, Sequence

from ..domain import AppSettings, ExpenseEntry, TimeEntry
from ..extensions import db
from ..formatters import format_currency, format_date, format_hours
from ..models import User
from ..repositories import FinancialRepository, get_repository
from .aggregation_service import PeriodReport


def _cell(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def rows_to_csv(rows: Sequence[dict]) -> str:
    """
    Header from the first row's keys; fields containing a comma, quote or
    newline are quoted. Empty input gives "".
    """
    if not rows:
        return ""
    headers = list(rows[0].keys())
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow([_cell(row.get(h)) for h in headers])
    return buffer.getvalue().rstrip("\n")


def time_entries_csv(entries: Iterable[TimeEntry]) -> str:
    return rows_to_csv([
        {
            "Data": e.date,
            "Entrada": e.start_time,
            "SaidaAlmoco": e.lunch_start_time,
            "VoltaAlmoco": e.lunch_end_time,
            "SaidaJantar": e.dinner_start_time or "",
            "VoltaJantar": e.dinner_end_time or "",
            "Saida": e.end_time,
            "TotalHoras": e.total_hours,
            "HorasNormais": e.regular_hours,
            "HorasExtras": e.overtime_hours,
            "ValorGanho": e.earnings,
            "FeriadoFDS": "SIM" if e.is_holiday else "NAO",
            "Descricao": e.description,
        }
        for e in entries
    ])


def expenses_csv(expenses: Iterable[ExpenseEntry], currency: str = "EUR") -> str:
    return rows_to_csv([
        {
            "Data": format_date(e.date),
            "AG": e.ag_number or "",
            "Categoria": e.category,
            "Descricao": e.description,
            "Valor": format_currency(e.amount, currency),
        }
        for e in expenses
    ])


def period_report_csv(report: PeriodReport, settings: AppSettings) -> str:
    summary = report.summary
    currency = settings.currency
    period = report.period

    rows = [
        {"Campo": "Colaborador", "Valor": settings.user_name},
        {"Campo": "Periodo", "Valor": period.label},
        {"Campo": "Inicio", "Valor": format_date(period.start_date)},
        {"Campo": "Fim", "Valor": format_date(period.end_date)},
        {"Campo": "HorasTotais", "Valor": format_hours(summary.total_hours)},
        {"Campo": "HorasExtras", "Valor": format_hours(summary.total_overtime)},
        {"Campo": "ValorBruto", "Valor": format_currency(summary.total_earnings, currency)},
        {"Campo": "Adiantamentos", "Valor": format_currency(summary.total_advances, currency)},
        {"Campo": "ValorLiquido", "Valor": format_currency(summary.net_earnings, currency)},
        {"Campo": "FundoDespesas", "Valor": format_currency(summary.total_fund, currency)},
        {"Campo": "TotalDespesas", "Valor": format_currency(summary.total_expenses, currency)},
        {"Campo": "SaldoFundo", "Valor": format_currency(summary.fund_balance, currency)},
    ]
    return rows_to_csv(rows)


def export_database(repo: FinancialRepository | None = None) -> dict[str, str]:
    """
    File name -> CSV text for every collection, all users included.
    Password hashes are never exported; empty collections are omitted.
    """
    repo = repo if repo is not None else get_repository()

    users = [
        {
            "id": u.id,
            "name": u.name,
            "username": u.username,
            "role": u.role,
            "is_active": u.is_active,
            "is_first_login": u.is_first_login,
        }
        for u in db.session.query(User).order_by(User.id.asc()).all()
    ]

    files = {
        "db_users.csv": rows_to_csv(users),
        "db_settings.csv": rows_to_csv([s.to_dict() for s in repo.get_all_settings()]),
        "db_time_entries.csv": rows_to_csv([e.to_dict() for e in repo.get_all_time_entries()]),
        "db_expenses.csv": rows_to_csv([e.to_dict() for e in repo.get_all_expenses()]),
        "db_advances.csv": rows_to_csv([a.to_dict() for a in repo.get_all_advances()]),
    }
    return {name: content for name, content in files.items() if content}

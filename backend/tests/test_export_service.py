"""
CSV export tests.

Verifies:
- Header row comes from the first record; commas and quotes are escaped
- Time entry export uses SIM/NAO for the holiday flag
- Period summary export is formatted for the user's currency
- Database export never contains password hashes
"""

from quinzena.domain import AdvanceEntry, AppSettings, ExpenseEntry, Period, TimeEntry
from quinzena.formatters import NBSP
from quinzena.repositories import SqlFinancialRepository
from quinzena.services import export_service
from quinzena.services.aggregation_service import build_period_report


PERIOD = Period(id="2025-1-1", label="1ª Quinzena janeiro/2025", start_date="2025-01-01", end_date="2025-01-15")


def _entry(**overrides):
    data = dict(
        user_id=1,
        date="2025-01-02",
        start_time="09:00",
        lunch_start_time="12:00",
        lunch_end_time="13:00",
        end_time="18:00",
        total_hours=8,
        regular_hours=8,
        overtime_hours=0,
        earnings=80,
    )
    data.update(overrides)
    return TimeEntry(**data)


class TestRowsToCsv:
    def test_empty(self):
        assert export_service.rows_to_csv([]) == ""

    def test_header_and_quoting(self):
        text = export_service.rows_to_csv([
            {"a": "plain", "b": 'say "hi"', "c": "x,y"},
            {"a": None, "b": True, "c": 2.0},
        ])
        assert text.split("\n") == [
            "a,b,c",
            'plain,"say ""hi""","x,y"',
            ",true,2",
        ]

    def test_keys_follow_first_row(self):
        text = export_service.rows_to_csv([{"a": 1}, {"a": 2, "extra": 3}])
        assert text == "a\n1\n2"


class TestTimeEntriesCsv:
    def test_columns_and_holiday_flag(self):
        text = export_service.time_entries_csv([
            _entry(description="Obra, Lisboa"),
            _entry(date="2025-01-04", is_holiday=True, regular_hours=0, overtime_hours=8, earnings=120),
        ])
        header, first, second = text.split("\n")

        assert header.startswith("Data,Entrada,SaidaAlmoco,VoltaAlmoco,SaidaJantar,VoltaJantar,Saida")
        assert header.endswith("FeriadoFDS,Descricao")
        assert first == '2025-01-02,09:00,12:00,13:00,,,18:00,8,8,0,80,NAO,"Obra, Lisboa"'
        assert second.endswith(",SIM,")


class TestExpensesCsv:
    def test_formats_date_and_amount(self):
        expense = ExpenseEntry(user_id=1, date="2025-01-05", amount=12.5, category="Almoço", ag_number="AG-7")
        text = export_service.expenses_csv([expense], "EUR")
        assert text.split("\n")[1] == f'05/01/2025,AG-7,Almoço,,"€{NBSP}12,50"'


class TestPeriodReportCsv:
    def test_summary_rows(self):
        settings = AppSettings(user_id=1, hourly_rate=10, expense_fund=100, currency="BRL", user_name="Ana Silva")
        report = build_period_report(
            PERIOD,
            [_entry()],
            [ExpenseEntry(user_id=1, date="2025-01-05", amount=20, category="Almoço")],
            [AdvanceEntry(user_id=1, date="2025-01-06", amount=30)],
            settings,
        )

        rows = export_service.period_report_csv(report, settings).split("\n")

        assert rows[0] == "Campo,Valor"
        assert "Colaborador,Ana Silva" in rows
        assert "Inicio,01/01/2025" in rows
        assert 'HorasTotais,"8,00h"' in rows
        assert f'ValorLiquido,"R${NBSP}50,00"' in rows
        assert f'SaldoFundo,"R${NBSP}80,00"' in rows


class TestExportDatabase:
    def test_all_collections_without_password_hashes(self, db_session, admin_user, regular_user):
        repo = SqlFinancialRepository()
        repo.save_settings(AppSettings(user_id=regular_user.id, hourly_rate=10))
        repo.save_time_entries([_entry(user_id=regular_user.id)], regular_user.id)

        files = export_service.export_database(repo)

        assert set(files) == {"db_users.csv", "db_settings.csv", "db_time_entries.csv"}
        users = files["db_users.csv"]
        assert "password" not in users
        assert "ADM" in users and "ana" in users
        assert files["db_time_entries.csv"].count("\n") == 1

    def test_empty_collections_are_omitted(self, db_session, admin_user):
        files = export_service.export_database(SqlFinancialRepository())
        assert list(files) == ["db_users.csv"]

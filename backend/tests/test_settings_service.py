import tempfile
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest import mock

from quinzena.repositories import LocalFinancialRepository, RepositoryError
from quinzena.services import entry_service
from quinzena.services import settings_service
from quinzena.validation import ValidationError


SHIFT = {
    "date": "2025-01-08",
    "start_time": "09:00",
    "lunch_start_time": "12:00",
    "lunch_end_time": "13:00",
    "end_time": "19:00",
}


class SettingsServiceTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.repo = LocalFinancialRepository(Path(self.tmp.name) / "store.json")

    def tearDown(self):
        self.tmp.cleanup()

    def test_defaults(self):
        settings = settings_service.get_settings(user_id=1, repo=self.repo)
        self.assertEqual(settings.hourly_rate, 0)
        self.assertEqual(settings.overtime_rate, 8)
        self.assertEqual(settings.daily_limit, 8)
        self.assertEqual(settings.currency, "EUR")
        self.assertEqual(settings.user_name, "Colaborador")
        self.assertEqual(settings.expense_fund, 0)

    def test_partial_update(self):
        settings_service.update_settings(user_id=1, changes={"expense_fund": 100}, repo=self.repo)
        updated = settings_service.update_settings(user_id=1, changes={"currency": "brl"}, repo=self.repo)
        self.assertEqual(updated.expense_fund, 100)
        self.assertEqual(updated.currency, "BRL")
        self.assertEqual(self.repo.get_settings(1), updated)

    def test_rate_change_reprices_all_entries(self):
        entry_service.create_time_entry(user_id=1, payload=SHIFT, repo=self.repo)
        entry_service.create_time_entry(user_id=1, payload=dict(SHIFT, date="2024-03-04"), repo=self.repo)
        entry_service.create_time_entry(user_id=2, payload=SHIFT, repo=self.repo)

        settings_service.update_settings(
            user_id=1,
            changes={"hourly_rate": 10, "overtime_rate": 15},
            repo=self.repo,
        )

        # 9h each: 8 regular + 1 overtime, in every period
        self.assertEqual([e.earnings for e in self.repo.get_time_entries(1)], [95, 95])
        # Another user's entries keep their prices
        self.assertEqual([e.earnings for e in self.repo.get_time_entries(2)], [8])

    def test_failed_reprice_keeps_old_rates(self):
        entry_service.create_time_entry(user_id=1, payload=SHIFT, repo=self.repo)
        before = self.repo.get_settings(1)

        with mock.patch.object(
            self.repo, "save_time_entries", side_effect=RepositoryError("Failed to save timeEntries"),
        ):
            with self.assertRaises(RepositoryError):
                settings_service.update_settings(user_id=1, changes={"hourly_rate": 20}, repo=self.repo)

        self.assertEqual(self.repo.get_settings(1), before)
        self.assertEqual([e.earnings for e in self.repo.get_time_entries(1)], [8])

    def test_limit_change_alone_does_not_reprice(self):
        entry_service.create_time_entry(user_id=1, payload=SHIFT, repo=self.repo)
        settings_service.update_settings(user_id=1, changes={"daily_limit": 6}, repo=self.repo)
        entry = self.repo.get_time_entries(1)[0]
        self.assertEqual(entry.overtime_hours, 1)

    def test_rejects_negative_rates(self):
        with self.assertRaises(ValidationError):
            settings_service.update_settings(user_id=1, changes={"hourly_rate": -1}, repo=self.repo)

    def test_rejects_non_positive_limit(self):
        with self.assertRaises(ValidationError):
            settings_service.update_settings(user_id=1, changes={"daily_limit": 0}, repo=self.repo)

    def test_rejects_bad_currency(self):
        with self.assertRaises(ValidationError):
            settings_service.update_settings(user_id=1, changes={"currency": "EURO"}, repo=self.repo)

    def test_rejects_unknown_field(self):
        with self.assertRaises(ValidationError):
            settings_service.update_settings(user_id=1, changes={"theme": "dark"}, repo=self.repo)

    def test_sync_user_name(self):
        user = SimpleNamespace(id=1, name="Ana Silva")
        settings_service.sync_user_name(user, repo=self.repo)
        self.assertEqual(self.repo.get_settings(1).user_name, "Ana Silva")

"""Tests for the dashboard session."""
import json
import shutil
import tempfile
import unittest
from datetime import datetime, timedelta
from decimal import Decimal
from pathlib import Path

from brokeagain.analytics import BudgetLevel, Trend
from brokeagain.config import get_settings
from brokeagain.dashboard import BudgetSession
from brokeagain.expenses.models import Category
from brokeagain.llm import ReceiptExtractor, SpendingAdvisor
from brokeagain.storage import BUDGET_LIMIT_KEY, EXPENSES_KEY, BudgetRepository, MemoryStore
from brokeagain.utils.exceptions import ExtractionError, ValidationError

from fakes import FakeClient, fast_settings

NOW = datetime(2025, 9, 15, 12, 0)


class TestBudgetSession(unittest.TestCase):
    """Test BudgetSession functionality."""

    def setUp(self):
        """Set up test fixtures."""
        self.store = MemoryStore()
        self.session = BudgetSession(BudgetRepository(self.store), clock=lambda: NOW)
        self.session.load()

    def test_empty_session_snapshot(self):
        snapshot = self.session.snapshot()

        self.assertEqual(snapshot.metrics.total, Decimal(0))
        self.assertIsNone(snapshot.forecast)
        self.assertEqual(snapshot.budget.remaining, Decimal(2000))
        self.assertEqual(snapshot.budget.level, BudgetLevel.OK)
        self.assertEqual(snapshot.category_shares, [])
        self.assertEqual(snapshot.suggestions, [])

    def test_default_limit_comes_from_settings(self):
        self.assertEqual(self.session.budget_limit, get_settings().default_budget_limit)

        custom = BudgetSession(BudgetRepository(MemoryStore()), default_limit=Decimal("750"))
        custom.load()
        self.assertEqual(custom.budget_limit, Decimal("750"))

    def test_add_expense_persists_and_recomputes(self):
        self.session.add_expense("25", "Food", "groceries", date=NOW - timedelta(days=1))
        self.session.add_expense("15", "Nonsense")

        stored = json.loads(self.store.get(EXPENSES_KEY))
        self.assertEqual(len(stored), 2)
        self.assertEqual(stored[1]["category"], "Other")

        snapshot = self.session.snapshot()
        self.assertEqual(snapshot.metrics.total, Decimal("40"))
        self.assertEqual(snapshot.metrics.last_week, Decimal("40"))
        self.assertEqual(snapshot.forecast.trend, Trend.STABLE)
        self.assertEqual(snapshot.forecast.confidence, 44)

    def test_add_expense_rejects_non_positive(self):
        with self.assertRaises(ValidationError):
            self.session.add_expense("0", "Food")
        self.assertIsNone(self.store.get(EXPENSES_KEY))

    def test_reload_restores_state(self):
        self.session.add_expense("10", "Food")
        self.session.set_budget_limit("500")

        reloaded = BudgetSession(BudgetRepository(self.store), clock=lambda: NOW)
        reloaded.load()

        self.assertEqual(len(reloaded.ledger), 1)
        self.assertEqual(reloaded.budget_limit, Decimal("500"))
        self.assertEqual(reloaded.snapshot().budget.percentage, Decimal("2"))

    def test_set_budget_limit_validation(self):
        for bad in ("0", "-10", "abc"):
            with self.assertRaises(ValidationError):
                self.session.set_budget_limit(bad)
        self.assertIsNone(self.store.get(BUDGET_LIMIT_KEY))

    def test_clear(self):
        self.session.add_expense("10", "Food")
        self.session.clear()

        self.assertEqual(self.store.get(EXPENSES_KEY), "[]")
        self.assertEqual(self.session.snapshot().metrics.total, Decimal(0))

    def test_suggestions_only_when_requested_and_configured(self):
        client = FakeClient(lambda prompt: "Buy in bulk.")
        session = BudgetSession(
            BudgetRepository(self.store),
            advisor=SpendingAdvisor(client, fast_settings()),
            clock=lambda: NOW
        )
        session.load()
        session.add_expense("30", "Food")

        self.assertEqual(session.snapshot().suggestions, [])
        suggestions = session.snapshot(with_suggestions=True).suggestions
        self.assertEqual([s.category for s in suggestions], [Category.FOOD])


class TestReceiptUpload(unittest.TestCase):
    """Test receipt upload through the session."""

    def setUp(self):
        self.test_dir = Path(tempfile.mkdtemp())
        self.image = self.test_dir / "receipt.png"
        self.image.write_bytes(b"\x89PNG fake")
        self.store = MemoryStore()

    def tearDown(self):
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def _session(self, response):
        client = FakeClient(lambda contents: response)
        session = BudgetSession(
            BudgetRepository(self.store),
            extractor=ReceiptExtractor(client, fast_settings()),
            clock=lambda: NOW
        )
        session.load()
        return session

    def test_upload_previews_then_commits(self):
        session = self._session('[{"description": "Milk", "amount": 2.4, "category": "Food"}]')

        result = session.upload_receipt(self.image)
        self.assertEqual(len(session.ledger), 0)

        session.add_extracted(result.expenses)
        snapshot = session.snapshot()
        self.assertEqual(snapshot.metrics.this_month, Decimal("2.4"))
        self.assertEqual(snapshot.expenses[0].date, NOW)

    def test_upload_without_extractor(self):
        session = BudgetSession(BudgetRepository(self.store), clock=lambda: NOW)
        with self.assertRaises(ExtractionError):
            session.upload_receipt(self.image)

    def test_upload_rejects_non_image(self):
        session = self._session("[]")
        document = self.test_dir / "notes.txt"
        document.write_text("hello")

        with self.assertRaises(ExtractionError):
            session.upload_receipt(document)

    def test_failed_upload_adds_nothing(self):
        session = self._session("not json")

        with self.assertRaises(ExtractionError):
            session.upload_receipt(self.image)
        self.assertIsNone(self.store.get(EXPENSES_KEY))


if __name__ == "__main__":
    unittest.main()

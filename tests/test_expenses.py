"""Tests for expense records and the ledger."""
import unittest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from brokeagain.expenses import Category, Expense, ExpenseLedger
from brokeagain.utils.exceptions import ValidationError


class TestCategory(unittest.TestCase):

    def test_known_names(self):
        self.assertIs(Category.normalize("Healthcare"), Category.HEALTHCARE)
        self.assertIs(Category.normalize(Category.FOOD), Category.FOOD)

    def test_unknown_falls_back_to_other(self):
        for value in ("Groceries", "food", "", None, 42):
            self.assertIs(Category.normalize(value), Category.OTHER)


class TestExpense(unittest.TestCase):

    def test_create_assigns_unique_ids(self):
        first = Expense.create("5", "Food")
        second = Expense.create("5", "Food")
        self.assertNotEqual(first.id, second.id)

    def test_create_normalizes_fields(self):
        expense = Expense.create(12.5, "Snacks", "  chips  ", date=datetime(2025, 1, 2))

        self.assertEqual(expense.amount, Decimal("12.5"))
        self.assertIs(expense.category, Category.OTHER)
        self.assertEqual(expense.description, "chips")

    def test_create_defaults_date_to_now(self):
        now = datetime(2025, 6, 1, 8)
        self.assertEqual(Expense.create("1", "Food", now=now).date, now)

    def test_rejects_bad_amounts(self):
        for amount in ("0", "-3", "abc", "nan", True, None):
            with self.assertRaises(ValidationError):
                Expense.create(amount, "Food")

    def test_aware_dates_become_local_naive(self):
        aware = datetime(2025, 1, 2, 12, tzinfo=timezone(timedelta(hours=3)))
        expense = Expense.create("1", "Food", date=aware)

        self.assertIsNone(expense.date.tzinfo)
        self.assertEqual(expense.date, aware.astimezone().replace(tzinfo=None))

    def test_dict_round_trip_keeps_identity(self):
        expense = Expense.create("9.99", "Utilities", "power", date=datetime(2025, 2, 3, 4, 5))
        restored = Expense.from_dict(expense.to_dict())
        self.assertEqual(restored, expense)

    def test_expense_is_immutable(self):
        expense = Expense.create("1", "Food")
        with self.assertRaises(AttributeError):
            expense.amount = Decimal("2")


class TestExpenseLedger(unittest.TestCase):

    def test_append_and_snapshot(self):
        ledger = ExpenseLedger()
        first = Expense.create("1", "Food")
        ledger.add(first)
        ledger.add_many([Expense.create("2", "Food"), Expense.create("3", "Other")])

        snapshot = ledger.snapshot()
        self.assertEqual(len(ledger), 3)
        self.assertIs(snapshot[0], first)
        self.assertIsInstance(snapshot, tuple)

    def test_duplicate_id_rejects_whole_batch(self):
        existing = Expense.create("1", "Food")
        ledger = ExpenseLedger([existing])

        with self.assertRaises(ValidationError):
            ledger.add_many([Expense.create("2", "Food"), existing])
        self.assertEqual(len(ledger), 1)

    def test_clear(self):
        ledger = ExpenseLedger([Expense.create("1", "Food")])
        ledger.clear()
        self.assertEqual(ledger.snapshot(), ())


if __name__ == "__main__":
    unittest.main()

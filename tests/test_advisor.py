"""Tests for per-category saving suggestions."""
import unittest
from datetime import datetime, timedelta
from decimal import Decimal

from brokeagain.expenses.models import Category, Expense
from brokeagain.llm.advisor import SpendingAdvisor

from fakes import FakeClient, fast_settings

START = datetime(2025, 8, 1)


def build_expenses():
    expenses = []
    for i in range(12):
        expenses.append(Expense.create("10", "Food", f"lunch {i}", date=START + timedelta(days=i)))
    expenses.append(Expense.create("200", "Utilities", "power", date=START))
    expenses.append(Expense.create("50", "Transportation", "", date=START))
    expenses.append(Expense.create("5", "Healthcare", "plasters", date=START))
    return expenses


class TestSpendingAdvisor(unittest.TestCase):
    """Test SpendingAdvisor functionality."""

    def test_empty_expenses(self):
        client = FakeClient(lambda prompt: "unused")
        advisor = SpendingAdvisor(client, fast_settings())

        self.assertEqual(advisor.suggest([]), [])
        self.assertEqual(client.models.calls, [])

    def test_top_three_categories_in_rank_order(self):
        client = FakeClient(lambda prompt: "  Cook at home.  ")
        advisor = SpendingAdvisor(client, fast_settings())

        suggestions = advisor.suggest(build_expenses())

        self.assertEqual(
            [s.category for s in suggestions],
            [Category.UTILITIES, Category.FOOD, Category.TRANSPORTATION]
        )
        self.assertEqual(suggestions[0].amount, Decimal("200"))
        self.assertEqual(suggestions[0].percentage, "53.3")
        self.assertEqual(suggestions[1].tip, "Cook at home.")
        self.assertEqual(len(client.models.calls), 3)

    def test_failure_in_one_category_does_not_block_others(self):
        def respond(prompt):
            if "on Food." in prompt:
                return RuntimeError("model overloaded")
            return "Switch providers."

        advisor = SpendingAdvisor(FakeClient(respond), fast_settings())
        suggestions = {s.category: s for s in advisor.suggest(build_expenses())}

        food = suggestions[Category.FOOD]
        self.assertTrue(food.fallback)
        self.assertEqual(
            food.tip,
            "You spent $120.00 on Food. Look for ways to optimize. (Tip generation failed)"
        )
        self.assertEqual(suggestions[Category.UTILITIES].tip, "Switch providers.")
        self.assertFalse(suggestions[Category.UTILITIES].fallback)

    def test_empty_answer_gets_generic_tip(self):
        advisor = SpendingAdvisor(FakeClient(lambda prompt: ""), fast_settings())
        suggestions = advisor.suggest([Expense.create("8", "Entertainment", "movie")])

        self.assertEqual(
            suggestions[0].tip,
            "Review your Entertainment spending for savings opportunities."
        )
        self.assertEqual(suggestions[0].percentage, "100.0")

    def test_prompt_lists_ten_most_recent(self):
        advisor = SpendingAdvisor(FakeClient(lambda prompt: "ok"), fast_settings())
        food = [e for e in build_expenses() if e.category is Category.FOOD]

        prompt = advisor.build_prompt(Category.FOOD, Decimal("120"), "32.0", food)

        self.assertIn("spent $120.00 (32.0% of my total spending) on Food.", prompt)
        self.assertNotIn("lunch 1\n", prompt)
        self.assertIn("- $10.00: lunch 2", prompt)
        self.assertIn("- $10.00: lunch 11", prompt)
        self.assertEqual(prompt.count("- $10.00:"), 10)

    def test_missing_description_placeholder(self):
        advisor = SpendingAdvisor(FakeClient(lambda prompt: "ok"), fast_settings())
        prompt = advisor.build_prompt(
            Category.TRANSPORTATION, Decimal("50"), "13.3",
            [Expense.create("50", "Transportation", "")]
        )
        self.assertIn("- $50.00: No description", prompt)


if __name__ == "__main__":
    unittest.main()

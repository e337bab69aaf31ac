"""Persistence collaborators."""
from .store import KeyValueStore, MemoryStore, SQLiteStore
from .repository import BudgetRepository, StoredExpense, EXPENSES_KEY, BUDGET_LIMIT_KEY

__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "SQLiteStore",
    "BudgetRepository",
    "StoredExpense",
    "EXPENSES_KEY",
    "BUDGET_LIMIT_KEY",
]

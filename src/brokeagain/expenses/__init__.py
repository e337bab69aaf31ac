"""Expense records and the session ledger."""
from .models import Category, Expense
from .ledger import ExpenseLedger

__all__ = ["Category", "Expense", "ExpenseLedger"]

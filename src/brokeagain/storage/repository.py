"""Loads and saves the expense collection and budget limit."""
import json
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import List, Sequence, Union

from pydantic import BaseModel, Field, ValidationError

from brokeagain.expenses.models import Category, Expense, to_amount, to_local_naive
from brokeagain.utils.logger import get_logger
from .store import KeyValueStore

logger = get_logger()

EXPENSES_KEY = "budget-expenses"
BUDGET_LIMIT_KEY = "budget-limit"


class StoredExpense(BaseModel):
    """Pydantic schema for a persisted expense record."""
    id: Union[str, int, float]
    amount: float = Field(gt=0, allow_inf_nan=False)
    category: str = Category.OTHER.value
    description: str = ""
    date: datetime

    def to_expense(self) -> Expense:
        return Expense(
            id=str(self.id),
            amount=to_amount(self.amount),
            category=Category.normalize(self.category),
            description=self.description or "",
            date=to_local_naive(self.date)
        )


class BudgetRepository:
    """Reads and writes the two dashboard blobs."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def load_expenses(self) -> List[Expense]:
        """Load stored expenses; corrupt blobs start fresh."""
        raw = self.store.get(EXPENSES_KEY)
        if not raw:
            return []

        try:
            records = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Stored expenses are not valid JSON, starting fresh: {e}")
            return []

        if not isinstance(records, list):
            logger.warning("Stored expenses are not a list, starting fresh")
            return []

        expenses = []
        seen_ids = set()
        for record in records:
            try:
                expense = StoredExpense.model_validate(record).to_expense()
            except ValidationError as e:
                logger.warning(f"Skipping malformed stored expense: {e.error_count()} errors")
                continue
            if expense.id in seen_ids:
                logger.warning(f"Skipping stored expense with duplicate id {expense.id}")
                continue
            seen_ids.add(expense.id)
            expenses.append(expense)

        logger.info(f"Loaded {len(expenses)} expenses")
        return expenses

    def save_expenses(self, expenses: Sequence[Expense]) -> None:
        self.store.set(EXPENSES_KEY, json.dumps([expense.to_dict() for expense in expenses]))
        logger.debug(f"Saved {len(expenses)} expenses")

    def load_budget_limit(self, default: Decimal) -> Decimal:
        raw = self.store.get(BUDGET_LIMIT_KEY)
        if raw is None:
            return default
        try:
            limit = Decimal(raw.strip())
        except InvalidOperation:
            logger.warning(f"Stored budget limit '{raw}' is not a number, using {default}")
            return default
        if not limit.is_finite() or limit <= 0:
            logger.warning(f"Stored budget limit '{raw}' is out of range, using {default}")
            return default
        return limit

    def save_budget_limit(self, limit: Decimal) -> None:
        self.store.set(BUDGET_LIMIT_KEY, str(limit))

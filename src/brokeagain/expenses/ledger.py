"""Append-only expense collection."""
from typing import Iterable, Iterator, List, Set, Tuple

from brokeagain.utils.exceptions import ValidationError
from brokeagain.utils.logger import get_logger
from .models import Expense

logger = get_logger()


class ExpenseLedger:
    """Ordered, append-only collection of expenses owned by the session."""

    def __init__(self, expenses: Iterable[Expense] = ()):
        self._expenses: List[Expense] = []
        self._ids: Set[str] = set()
        self.add_many(expenses)

    def add(self, expense: Expense) -> None:
        """Append one expense."""
        self.add_many([expense])

    def add_many(self, expenses: Iterable[Expense]) -> None:
        """Append a batch; the whole batch is rejected on a duplicate id."""
        batch = list(expenses)
        batch_ids = [expense.id for expense in batch]
        duplicates = (set(batch_ids) & self._ids) or {i for i in batch_ids if batch_ids.count(i) > 1}
        if duplicates:
            raise ValidationError(f"Duplicate expense ids: {sorted(duplicates)}")

        self._expenses.extend(batch)
        self._ids.update(batch_ids)
        if batch:
            logger.debug(f"Ledger appended {len(batch)} expenses (now {len(self._expenses)})")

    def clear(self) -> None:
        """Drop every record."""
        self._expenses = []
        self._ids = set()
        logger.info("Ledger cleared")

    def snapshot(self) -> Tuple[Expense, ...]:
        """Immutable view for the analytics engine."""
        return tuple(self._expenses)

    def __len__(self) -> int:
        return len(self._expenses)

    def __iter__(self) -> Iterator[Expense]:
        return iter(self.snapshot())

"""Dashboard session: owns the expense collection and recomputes views.

Every change persists the full collection and the next snapshot recomputes
metrics and forecast from scratch against it; nothing is updated
incrementally.
"""
import mimetypes
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence, Tuple

from brokeagain.analytics import (
    Aggregator,
    BudgetStatus,
    CategoryShare,
    Forecast,
    Forecaster,
    Metrics,
    MonthlyBreakdown,
)
from brokeagain.config.settings import get_settings
from brokeagain.expenses.models import Expense
from brokeagain.expenses.ledger import ExpenseLedger
from brokeagain.llm.advisor import SpendingAdvisor, Suggestion
from brokeagain.llm.extractor import ExtractionResult, ReceiptExtractor
from brokeagain.storage.repository import BudgetRepository
from brokeagain.utils.exceptions import ExtractionError, ValidationError
from brokeagain.utils.logger import get_logger, set_session_context

logger = get_logger()


@dataclass(frozen=True)
class DashboardSnapshot:
    """Everything the presentation layer renders, computed at one instant."""
    now: datetime
    expenses: Tuple[Expense, ...]
    metrics: Metrics
    forecast: Optional[Forecast]
    budget: BudgetStatus
    category_shares: List[CategoryShare]
    monthly: MonthlyBreakdown
    suggestions: List[Suggestion] = field(default_factory=list)


class BudgetSession:
    """Host-side glue between storage, LLM collaborators and analytics."""

    def __init__(
        self,
        repository: BudgetRepository,
        extractor: Optional[ReceiptExtractor] = None,
        advisor: Optional[SpendingAdvisor] = None,
        default_limit: Optional[Decimal] = None,
        clock: Callable[[], datetime] = datetime.now
    ):
        self.repository = repository
        self.extractor = extractor
        self.advisor = advisor
        if default_limit is None:
            default_limit = get_settings().default_budget_limit
        self.default_limit = default_limit
        self.clock = clock

        self.session_id = uuid.uuid4().hex[:8]
        self.ledger = ExpenseLedger()
        self.budget_limit = default_limit
        self.aggregator = Aggregator()
        self.forecaster = Forecaster()

    def load(self) -> None:
        """Load the persisted collection and budget limit."""
        set_session_context(self.session_id)
        self.ledger = ExpenseLedger(self.repository.load_expenses())
        self.budget_limit = self.repository.load_budget_limit(self.default_limit)
        logger.info(f"Session loaded {len(self.ledger)} expenses, limit {self.budget_limit}")

    def add_expense(
        self,
        amount: Any,
        category: Any,
        description: str = "",
        date: Optional[datetime] = None
    ) -> Expense:
        """Manual entry; raises ValidationError for non-positive amounts."""
        expense = Expense.create(amount, category, description, date=date, now=self.clock())
        self._commit([expense])
        logger.info(f"Added {expense.category.value} expense of {expense.amount}")
        return expense

    def add_extracted(self, expenses: Sequence[Expense]) -> int:
        """Commit a confirmed extraction preview."""
        self._commit(expenses)
        logger.info(f"Added {len(expenses)} extracted expenses")
        return len(expenses)

    def upload_receipt(self, image_path: Path) -> ExtractionResult:
        """Run extraction on an image file; the result is a preview, not committed."""
        if self.extractor is None:
            raise ExtractionError("Gemini API key is not set. Cannot process bill image.")

        image_path = Path(image_path)
        mime_type, _ = mimetypes.guess_type(image_path.name)
        if not mime_type or not mime_type.startswith("image/"):
            raise ExtractionError(f"Unsupported file type: {image_path.name}")

        try:
            image_bytes = image_path.read_bytes()
        except OSError as e:
            raise ExtractionError(f"Upload error: {e}") from e

        return self.extractor.extract(image_bytes, mime_type, now=self.clock())

    def clear(self) -> None:
        """Replace the collection with an empty one."""
        self.ledger.clear()
        self.repository.save_expenses([])

    def set_budget_limit(self, limit: Any) -> Decimal:
        try:
            value = Decimal(str(limit))
        except InvalidOperation:
            raise ValidationError(f"Budget limit must be numeric, got {limit!r}")
        if not value.is_finite() or value <= 0:
            raise ValidationError(f"Budget limit must be positive, got {limit!r}")

        self.repository.save_budget_limit(value)
        self.budget_limit = value
        logger.info(f"Budget limit set to {value}")
        return value

    def snapshot(self, with_suggestions: bool = False) -> DashboardSnapshot:
        """Recompute every view from the current collection."""
        now = self.clock()
        expenses = self.ledger.snapshot()

        metrics = self.aggregator.aggregate(expenses, now)
        suggestions: List[Suggestion] = []
        if with_suggestions and self.advisor is not None:
            suggestions = self.advisor.suggest(expenses)

        return DashboardSnapshot(
            now=now,
            expenses=expenses,
            metrics=metrics,
            forecast=self.forecaster.forecast(expenses),
            budget=self.aggregator.budget_status(metrics, self.budget_limit),
            category_shares=self.aggregator.category_shares(metrics),
            monthly=self.aggregator.monthly_breakdown(expenses),
            suggestions=suggestions
        )

    def _commit(self, expenses: Sequence[Expense]) -> None:
        updated = ExpenseLedger(self.ledger.snapshot())
        updated.add_many(expenses)
        self.repository.save_expenses(updated.snapshot())
        self.ledger = updated

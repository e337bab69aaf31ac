"""Derived analytics outputs."""
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Dict, Tuple

from brokeagain.expenses.models import Category


class Trend(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class BudgetLevel(str, Enum):
    OK = "ok"
    WARNING = "warning"
    CRITICAL = "critical"


@dataclass(frozen=True)
class Metrics:
    """Summary totals over the expense collection."""
    total: Decimal = Decimal(0)
    this_month: Decimal = Decimal(0)
    last_week: Decimal = Decimal(0)
    category_totals: Dict[Category, Decimal] = field(default_factory=dict)


@dataclass(frozen=True)
class Forecast:
    """Short-horizon spending prediction."""
    daily_average: Decimal
    monthly_prediction: Decimal
    trend: Trend
    confidence: int


@dataclass(frozen=True)
class CategoryShare:
    category: Category
    amount: Decimal
    percentage: Decimal


@dataclass(frozen=True)
class MonthTotal:
    month: str  # YYYY-MM
    total: Decimal
    count: int


@dataclass(frozen=True)
class MonthlyBreakdown:
    """Per-month totals with the highest and average month."""
    months: Tuple[MonthTotal, ...] = ()
    highest_month: Decimal = Decimal(0)
    average_month: Decimal = Decimal(0)
    expense_count: int = 0


@dataclass(frozen=True)
class BudgetStatus:
    """Current month spend against the monthly limit."""
    limit: Decimal
    spent: Decimal
    remaining: Decimal
    percentage: Decimal
    level: BudgetLevel

"""Spending analytics engine."""
from .models import (
    BudgetLevel,
    BudgetStatus,
    CategoryShare,
    Forecast,
    Metrics,
    MonthlyBreakdown,
    MonthTotal,
    Trend,
)
from .aggregator import Aggregator, aggregate
from .forecaster import Forecaster, forecast

__all__ = [
    "Aggregator",
    "aggregate",
    "Forecaster",
    "forecast",
    "BudgetLevel",
    "BudgetStatus",
    "CategoryShare",
    "Forecast",
    "Metrics",
    "MonthlyBreakdown",
    "MonthTotal",
    "Trend",
]

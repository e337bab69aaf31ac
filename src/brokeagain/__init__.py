"""Broke-Again: spending analytics and forecasting for a personal budget dashboard."""
from .analytics import Aggregator, Forecaster, aggregate, forecast
from .expenses import Category, Expense, ExpenseLedger

__version__ = "0.1.0"

__all__ = [
    "Aggregator",
    "Forecaster",
    "aggregate",
    "forecast",
    "Category",
    "Expense",
    "ExpenseLedger",
]

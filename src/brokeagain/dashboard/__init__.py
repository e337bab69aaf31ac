"""Dashboard host session."""
from .session import BudgetSession, DashboardSnapshot

__all__ = ["BudgetSession", "DashboardSnapshot"]

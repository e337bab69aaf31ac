"""Expense aggregation module."""
from collections import defaultdict
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Dict, List, Sequence

from brokeagain.expenses.models import Category, Expense
from brokeagain.utils.logger import get_logger
from .models import (
    BudgetLevel,
    BudgetStatus,
    CategoryShare,
    Metrics,
    MonthlyBreakdown,
    MonthTotal,
)

logger = get_logger()

HUNDRED = Decimal(100)
WARNING_PERCENTAGE = Decimal(75)
CRITICAL_PERCENTAGE = Decimal(90)


class Aggregator:
    """Aggregates expenses into summary metrics."""

    def aggregate(self, expenses: Sequence[Expense], now: datetime) -> Metrics:
        """
        Compute totals for the dashboard.

        Args:
            expenses: Expense snapshot (never mutated)
            now: Reference instant for the month and 7-day windows

        Returns:
            Metrics object
        """
        week_ago = now - timedelta(days=7)

        total = Decimal(0)
        this_month = Decimal(0)
        last_week = Decimal(0)
        category_totals: Dict[Category, Decimal] = defaultdict(Decimal)

        for expense in expenses:
            total += expense.amount
            category_totals[expense.category] += expense.amount

            if expense.date.year == now.year and expense.date.month == now.month:
                this_month += expense.amount
            if week_ago <= expense.date <= now:
                last_week += expense.amount

        logger.debug(
            f"Aggregated {len(expenses)} expenses into {len(category_totals)} categories"
        )

        return Metrics(
            total=total,
            this_month=this_month,
            last_week=last_week,
            category_totals=dict(category_totals)
        )

    @staticmethod
    def category_shares(metrics: Metrics) -> List[CategoryShare]:
        """Per-category percentage of total spend, largest first."""
        shares = [
            CategoryShare(
                category=category,
                amount=amount,
                percentage=(amount / metrics.total * HUNDRED) if metrics.total else Decimal(0)
            )
            for category, amount in metrics.category_totals.items()
        ]
        return sorted(shares, key=lambda share: share.amount, reverse=True)

    @staticmethod
    def monthly_breakdown(expenses: Sequence[Expense]) -> MonthlyBreakdown:
        """Group expenses by calendar month."""
        if not expenses:
            return MonthlyBreakdown()

        totals: Dict[str, Decimal] = defaultdict(Decimal)
        counts: Dict[str, int] = defaultdict(int)
        for expense in expenses:
            key = expense.date.strftime("%Y-%m")
            totals[key] += expense.amount
            counts[key] += 1

        months = tuple(
            MonthTotal(month=key, total=totals[key], count=counts[key])
            for key in sorted(totals)
        )
        month_totals = [month.total for month in months]

        return MonthlyBreakdown(
            months=months,
            highest_month=max(month_totals),
            average_month=sum(month_totals, Decimal(0)) / len(month_totals),
            expense_count=len(expenses)
        )

    @staticmethod
    def budget_status(metrics: Metrics, limit: Decimal) -> BudgetStatus:
        """Compare this month's spend against the monthly limit."""
        spent = metrics.this_month
        percentage = spent / limit * HUNDRED if limit > 0 else Decimal(0)

        if percentage > CRITICAL_PERCENTAGE:
            level = BudgetLevel.CRITICAL
        elif percentage > WARNING_PERCENTAGE:
            level = BudgetLevel.WARNING
        else:
            level = BudgetLevel.OK

        return BudgetStatus(
            limit=limit,
            spent=spent,
            remaining=limit - spent,
            percentage=percentage,
            level=level
        )


def aggregate(expenses: Sequence[Expense], now: datetime) -> Metrics:
    """Module-level shortcut for Aggregator().aggregate."""
    return Aggregator().aggregate(expenses, now)

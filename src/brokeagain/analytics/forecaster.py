"""Short-horizon linear spending forecast."""
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple

from brokeagain.expenses.models import Expense
from brokeagain.utils.logger import get_logger
from .models import Forecast, Trend

logger = get_logger()

DAYS_PER_MONTH = 30
TREND_WEIGHT = Decimal("0.3")
RISE_FACTOR = Decimal("1.1")
FALL_FACTOR = Decimal("0.9")
DENOMINATOR_EPSILON = 0.0001

SINGLE_DAY_CONFIDENCE = 30
FLAT_CONFIDENCE = 40
MAX_CONFIDENCE = 85


class Forecaster:
    """Predicts daily and 30-day spend from day-bucketed history."""

    def forecast(self, expenses: Sequence[Expense]) -> Optional[Forecast]:
        """
        Forecast spending from the full expense history.

        Args:
            expenses: Expense snapshot (never mutated)

        Returns:
            Forecast, or None when there is no history
        """
        if not expenses:
            return None

        daily_totals = self.bucket_by_day(expenses)
        days = sorted(daily_totals)
        n = len(days)

        if n < 2:
            # divides by record count, not day count
            total = sum((expense.amount for expense in expenses), Decimal(0))
            daily_average = total / len(expenses)
            return Forecast(
                daily_average=daily_average,
                monthly_prediction=daily_average * DAYS_PER_MONTH,
                trend=Trend.STABLE,
                confidence=SINGLE_DAY_CONFIDENCE
            )

        first_day, last_day = days[0], days[-1]
        days_between = max(1, (last_day - first_day).days + 1)

        points: List[Tuple[int, Decimal]] = [
            ((day - first_day).days, daily_totals[day]) for day in days
        ]

        sum_x = sum(x for x, _ in points)
        sum_xx = sum(x * x for x, _ in points)
        denominator = n * sum_xx - sum_x * sum_x

        if abs(denominator) < DENOMINATOR_EPSILON:
            daily_average = sum((y for _, y in points), Decimal(0)) / n
            return Forecast(
                daily_average=daily_average,
                monthly_prediction=daily_average * DAYS_PER_MONTH,
                trend=Trend.STABLE,
                confidence=FLAT_CONFIDENCE
            )

        avg_daily_historical = sum(daily_totals.values(), Decimal(0)) / days_between
        predicted_daily = avg_daily_historical
        trend = Trend.STABLE

        if n >= 3:
            (first_x, first_y), (last_x, last_y) = points[0], points[-1]
            slope = (last_y - first_y) / max(1, last_x - first_x)
            predicted_daily = max(Decimal(0), avg_daily_historical + slope * TREND_WEIGHT)
            trend = self._trend_label(points)

        forecast = Forecast(
            daily_average=predicted_daily,
            monthly_prediction=predicted_daily * DAYS_PER_MONTH,
            trend=trend,
            confidence=min(MAX_CONFIDENCE, 30 + n * 5 + days_between * 2)
        )
        logger.debug(
            f"Forecast over {n} days spanning {days_between}: "
            f"{forecast.daily_average:.2f}/day, {forecast.trend.value}"
        )
        return forecast

    @staticmethod
    def bucket_by_day(expenses: Sequence[Expense]) -> Dict[date, Decimal]:
        """Sum amounts per calendar day, ignoring time of day."""
        daily_totals: Dict[date, Decimal] = defaultdict(Decimal)
        for expense in expenses:
            daily_totals[expense.date.date()] += expense.amount
        return dict(daily_totals)

    @staticmethod
    def _trend_label(points: List[Tuple[int, Decimal]]) -> Trend:
        """Compare early and late average daily spend; odd counts favour the second half."""
        split = len(points) // 2
        first_half = [y for _, y in points[:split]]
        second_half = [y for _, y in points[split:]]

        first_avg = sum(first_half, Decimal(0)) / len(first_half)
        second_avg = sum(second_half, Decimal(0)) / len(second_half)

        if second_avg > first_avg * RISE_FACTOR:
            return Trend.INCREASING
        if second_avg < first_avg * FALL_FACTOR:
            return Trend.DECREASING
        return Trend.STABLE


def forecast(expenses: Sequence[Expense]) -> Optional[Forecast]:
    """Module-level shortcut for Forecaster().forecast."""
    return Forecaster().forecast(expenses)

"""Per-category money-saving tips from Gemini."""
import concurrent.futures
from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Sequence

from google import genai

from brokeagain.config.settings import AppSettings
from brokeagain.expenses.models import Category, Expense
from brokeagain.utils.logger import get_logger
from brokeagain.utils.retry import retry_with_backoff
from .gemini import generate_text

logger = get_logger()


@dataclass(frozen=True)
class Suggestion:
    category: Category
    amount: Decimal
    percentage: str  # one decimal place, e.g. "42.5"
    tip: str
    fallback: bool = False


class SpendingAdvisor:
    """Asks the model for one saving tip per top spending category."""

    def __init__(self, client: genai.Client, settings: AppSettings):
        self.client = client
        self.settings = settings
        self.model_name = settings.llm_model_name
        self._generate = retry_with_backoff(
            max_retries=settings.llm_max_retries,
            initial_delay=settings.llm_initial_delay_seconds,
            backoff_factor=settings.llm_backoff_factor
        )(self._generate_once)

    def suggest(self, expenses: Sequence[Expense]) -> List[Suggestion]:
        """Generate tips for the top categories, one independent call each."""
        if not expenses:
            return []

        totals: Dict[Category, Decimal] = defaultdict(Decimal)
        by_category: Dict[Category, List[Expense]] = defaultdict(list)
        for expense in expenses:
            totals[expense.category] += expense.amount
            by_category[expense.category].append(expense)

        total_spent = sum(totals.values(), Decimal(0))
        ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
        top = ranked[:self.settings.suggestion_top_categories]

        with concurrent.futures.ThreadPoolExecutor(max_workers=self.settings.suggestion_max_workers) as executor:
            futures = [
                executor.submit(
                    self._suggest_for_category,
                    category,
                    amount,
                    f"{amount / total_spent * 100:.1f}",
                    by_category[category]
                )
                for category, amount in top
            ]
            suggestions = [future.result() for future in futures]

        failed = sum(1 for s in suggestions if s.fallback)
        logger.info(f"Generated {len(suggestions)} suggestions ({failed} fallbacks)")
        return suggestions

    def _suggest_for_category(
        self,
        category: Category,
        amount: Decimal,
        percentage: str,
        category_expenses: List[Expense]
    ) -> Suggestion:
        """Single category call with its own fallback."""
        prompt = self.build_prompt(category, amount, percentage, category_expenses)
        try:
            tip = self._generate(prompt).strip()
        except Exception as e:
            logger.error(f"Suggestion generation error for {category.value}: {e}")
            return Suggestion(
                category=category,
                amount=amount,
                percentage=percentage,
                tip=(
                    f"You spent ${amount:.2f} on {category.value}. "
                    "Look for ways to optimize. (Tip generation failed)"
                ),
                fallback=True
            )

        return Suggestion(
            category=category,
            amount=amount,
            percentage=percentage,
            tip=tip or f"Review your {category.value} spending for savings opportunities."
        )

    def build_prompt(
        self,
        category: Category,
        amount: Decimal,
        percentage: str,
        category_expenses: List[Expense]
    ) -> str:
        recent = category_expenses[-self.settings.suggestion_recent_expenses:]
        details = "\n".join(
            f"- ${e.amount:.2f}: {e.description or 'No description'}" for e in recent
        )
        return (
            f"I'm tracking my budget and spent ${amount:.2f} ({percentage}% of my total spending) "
            f"on {category.value}.\n\n"
            f"Recent {category.value} expenses:\n{details}\n\n"
            "Give me ONE personalized money-saving tip based on these expenses. "
            "Be specific, practical, and mention estimated savings. Keep it to 2-3 sentences."
        )

    def _generate_once(self, prompt: str) -> str:
        return generate_text(
            self.client, self.model_name, prompt, self.settings.llm_suggestion_max_tokens
        )

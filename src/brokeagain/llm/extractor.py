"""Receipt extraction using Gemini vision."""
import json
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional

from google import genai
from google.genai import types
from pydantic import BaseModel, ValidationError, field_validator

from brokeagain.config.settings import AppSettings
from brokeagain.expenses.models import Category, Expense
from brokeagain.utils.exceptions import ExtractionError
from brokeagain.utils.logger import get_logger
from brokeagain.utils.retry import retry_with_backoff
from .gemini import generate_text

logger = get_logger()

EXTRACTION_PROMPT = (
    "Extract all items and prices from this receipt/bill image. "
    "Return ONLY valid JSON array. Each object must have: "
    '"description" (string), "amount" (number), '
    '"category" (one of: ' + ", ".join(c.value for c in Category) + "). "
    'Example: [{"description":"Coffee","amount":5.50,"category":"Food"}]'
)


class ReceiptItem(BaseModel):
    """Pydantic schema for one extracted receipt line."""
    description: Any = None
    amount: Any
    category: Any = None

    @field_validator("amount")
    @classmethod
    def _amount_is_number(cls, value):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("amount must be a number")
        try:
            finite = Decimal(str(value)).is_finite()
        except InvalidOperation:
            finite = False
        if not finite:
            raise ValueError("amount must be finite")
        return value


@dataclass
class RejectedItem:
    index: int
    raw: Any
    reason: str


@dataclass
class ExtractionResult:
    """Validated expenses from one upload plus the rejected candidates."""
    expenses: List[Expense] = field(default_factory=list)
    rejected: List[RejectedItem] = field(default_factory=list)


class ReceiptExtractor:
    """Turns a receipt image into validated expense candidates."""

    def __init__(self, client: genai.Client, settings: AppSettings):
        self.client = client
        self.settings = settings
        self.model_name = settings.llm_model_name
        self._generate = retry_with_backoff(
            max_retries=settings.llm_max_retries,
            initial_delay=settings.llm_initial_delay_seconds,
            backoff_factor=settings.llm_backoff_factor
        )(self._generate_once)

    def extract(self, image_bytes: bytes, mime_type: str, now: Optional[datetime] = None) -> ExtractionResult:
        """
        Extract expenses from a receipt image.

        Args:
            image_bytes: Raw image content
            mime_type: Image MIME type (image/jpeg, image/png, ...)
            now: Date stamped on every extracted expense

        Returns:
            ExtractionResult with at least one valid expense

        Raises:
            ExtractionError: model failure, unparseable output or nothing valid
        """
        now = now or datetime.now()
        logger.info(f"Sending {len(image_bytes)} byte {mime_type} image to {self.model_name}")

        try:
            response_text = self._generate(image_bytes, mime_type)
        except ExtractionError:
            raise
        except Exception as e:
            logger.error(f"Receipt extraction call failed: {e}")
            raise ExtractionError(f"Error processing image: {e}") from e

        try:
            candidates = self.parse_response(response_text)
        except ExtractionError as e:
            raise ExtractionError(f"Error processing image: {e}") from e

        result = self.validate_candidates(candidates, now)

        if not result.expenses:
            raise ExtractionError(
                "No valid expenses found in the image. Please try a clearer photo of the receipt."
            )

        logger.info(
            f"Extracted {len(result.expenses)} expenses ({len(result.rejected)} rejected)"
        )
        return result

    def _generate_once(self, image_bytes: bytes, mime_type: str) -> str:
        return generate_text(
            self.client,
            self.model_name,
            [types.Part.from_bytes(data=image_bytes, mime_type=mime_type), EXTRACTION_PROMPT],
            self.settings.llm_extraction_max_tokens
        )

    @staticmethod
    def parse_response(response_text: str) -> List[Any]:
        """Strip markdown fences and parse the JSON array."""
        cleaned = response_text.replace("```json", "").replace("```", "").strip()

        try:
            data = json.loads(cleaned)
        except ValueError as e:
            logger.error(f"Failed to parse JSON response: {e}")
            raise ExtractionError(
                f"AI failed to return valid JSON. Response received: {response_text[:100]}..."
            )

        if not isinstance(data, list):
            raise ExtractionError("AI returned an object, expected an array.")

        return data

    def validate_candidates(self, candidates: List[Any], now: datetime) -> ExtractionResult:
        """Apply per-item rules; invalid items are rejected individually."""
        result = ExtractionResult()
        max_amount = self.settings.extraction_max_amount
        max_length = self.settings.extraction_description_max_length

        for index, raw in enumerate(candidates):
            try:
                item = ReceiptItem.model_validate(raw)
            except ValidationError as e:
                result.rejected.append(RejectedItem(index, raw, e.errors()[0]["msg"]))
                continue

            amount = Decimal(str(item.amount))
            if not 0 < amount < max_amount:
                result.rejected.append(
                    RejectedItem(index, raw, f"amount {item.amount} outside (0, {max_amount})")
                )
                continue

            if len(result.expenses) >= self.settings.extraction_max_items:
                result.rejected.append(RejectedItem(index, raw, "item limit reached"))
                continue

            description = str(item.description) if item.description else "Item"
            result.expenses.append(Expense.create(
                amount=amount,
                category=Category.normalize(item.category),
                description=description[:max_length],
                date=now
            ))

        for rejected in result.rejected:
            logger.debug(f"Rejected receipt item {rejected.index}: {rejected.reason}")

        return result

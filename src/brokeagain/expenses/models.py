"""Expense record data models."""
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, Optional

from brokeagain.utils.exceptions import ValidationError


class Category(str, Enum):
    """Closed set of spending categories."""
    FOOD = "Food"
    TRANSPORTATION = "Transportation"
    UTILITIES = "Utilities"
    ENTERTAINMENT = "Entertainment"
    HEALTHCARE = "Healthcare"
    OTHER = "Other"

    @classmethod
    def normalize(cls, value: Any) -> "Category":
        """Map a raw category name onto the closed set, falling back to Other."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


def to_amount(value: Any) -> Decimal:
    """Coerce a raw amount into a positive Decimal."""
    if isinstance(value, bool):
        raise ValidationError(f"Amount must be numeric, got {value!r}")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Amount must be numeric, got {value!r}")
    if not amount.is_finite() or amount <= 0:
        raise ValidationError(f"Amount must be positive, got {value!r}")
    return amount


def to_local_naive(value: datetime) -> datetime:
    """Convert aware datetimes to naive local time."""
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


@dataclass(frozen=True)
class Expense:
    """A single dated, categorized expense."""
    amount: Decimal
    category: Category
    date: datetime
    description: str = ""
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @classmethod
    def create(
        cls,
        amount: Any,
        category: Any,
        description: str = "",
        date: Optional[datetime] = None,
        now: Optional[datetime] = None
    ) -> "Expense":
        """Validate raw input and build a new record with a fresh id."""
        when = date or now or datetime.now()
        return cls(
            amount=to_amount(amount),
            category=Category.normalize(category),
            date=to_local_naive(when),
            description=(description or "").strip()
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for the JSON expense blob."""
        return {
            "id": self.id,
            "amount": float(self.amount),
            "category": self.category.value,
            "description": self.description,
            "date": self.date.isoformat()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Expense":
        """Rebuild a stored record, keeping its id."""
        try:
            when = datetime.fromisoformat(str(data["date"]).replace("Z", "+00:00"))
            return cls(
                id=str(data["id"]),
                amount=to_amount(data["amount"]),
                category=Category.normalize(data.get("category")),
                date=to_local_naive(when),
                description=data.get("description") or ""
            )
        except (KeyError, ValueError) as e:
            raise ValidationError(f"Malformed expense record: {e}")

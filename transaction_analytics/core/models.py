# transaction_analytics/core/models.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict

REQUIRED_FIELDS = ("id", "title", "description", "price", "category", "sold", "dateOfSale")


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 sale timestamp and normalise it to UTC.

    Naive timestamps are taken to already be in UTC.
    """
    parsed = datetime.fromisoformat(str(value).strip())
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


_SOLD_STRINGS = {"true": True, "false": False}


def parse_sold(value: Any) -> bool:
    """Accept JSON booleans or the strings "true" / "false"."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in _SOLD_STRINGS:
        return _SOLD_STRINGS[value.strip().lower()]
    raise ValueError(f"Invalid sold flag: {value!r}")


@dataclass
class Transaction:
    id: int
    title: str
    description: str
    price: float
    category: str
    sold: bool
    date_of_sale: datetime
    document: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Transaction":
        """Build a transaction from a feed record, keeping the record verbatim."""
        if not isinstance(document, dict):
            raise ValueError(f"Transaction record must be an object, got {type(document).__name__}")
        missing = [name for name in REQUIRED_FIELDS if name not in document]
        if missing:
            raise ValueError(f"Missing {', '.join(missing)} in transaction record: {document}")
        return cls(
            id=int(document["id"]),
            title=str(document["title"]),
            description=str(document["description"]),
            price=float(document["price"]),
            category=str(document["category"]),
            sold=parse_sold(document["sold"]),
            date_of_sale=parse_timestamp(document["dateOfSale"]),
            document=dict(document),
        )

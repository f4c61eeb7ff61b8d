from __future__ import annotations

import functools
import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

import anyio

from transaction_analytics.store import TransactionStore

DEFAULT_PER_PAGE = 10

_NUMERIC_PREFIX = re.compile(
    r"^\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))"
)


@dataclass(frozen=True)
class PriceRange:
    minimum: int
    maximum: int | None = None

    @property
    def label(self) -> str:
        upper = "above" if self.maximum is None else str(self.maximum)
        return f"{self.minimum} - {upper}"


PRICE_RANGES: tuple[PriceRange, ...] = (
    PriceRange(0, 100),
    PriceRange(101, 200),
    PriceRange(201, 300),
    PriceRange(301, 400),
    PriceRange(401, 500),
    PriceRange(501, 600),
    PriceRange(601, 700),
    PriceRange(701, 800),
    PriceRange(801, 900),
    PriceRange(901),
)


def parse_price_term(term: str | None) -> float:
    """Return the price a search term is compared against.

    The leading numeric part of the term is used (``"12abc"`` gives 12);
    terms without one compare against 0.
    """
    if not term:
        return 0.0
    match = _NUMERIC_PREFIX.match(term)
    if not match:
        return 0.0
    text = match.group(1)
    if text.lstrip("+-") == "Infinity":
        value = -math.inf if text.startswith("-") else math.inf
    else:
        value = float(text)
    return value or 0.0


def list_transactions(
    store: TransactionStore,
    month: int,
    search: str | None = None,
    page: int = 1,
    per_page: int = DEFAULT_PER_PAGE,
) -> Dict[str, Any]:
    """Return one page of a month's transactions, optionally filtered by ``search``.

    ``search`` matches a case-insensitive substring of the title or the
    description, or a price equal to the term's numeric value.
    """
    page = int(page)
    per_page = int(per_page)
    search = search or None
    search_price = parse_price_term(search) if search else None

    transactions = store.find(
        month,
        search,
        search_price,
        offset=(page - 1) * per_page,
        limit=per_page,
    )
    total = store.count(month, search, search_price)
    return {
        "transactions": transactions,
        "total": total,
        "page": page,
        "perPage": per_page,
        "totalPages": math.ceil(total / per_page),
    }


def transaction_statistics(store: TransactionStore, month: int) -> Dict[str, Any]:
    """Total sale amount and sold / not sold counts for a month."""
    return {
        "totalSaleAmount": store.sum_price(month),
        "totalSoldItems": store.count(month, sold=True),
        "totalNotSoldItems": store.count(month, sold=False),
    }


def price_range_histogram(store: TransactionStore, month: int) -> List[Dict[str, Any]]:
    """Count a month's transactions in each of the fixed price ranges.

    The first range includes its lower bound; every later range starts just
    above the previous range's maximum so fractional prices land in exactly
    one range.
    """
    rows: List[Dict[str, Any]] = []
    previous_max: int | None = None
    for price_range in PRICE_RANGES:
        if previous_max is None:
            count = store.count(month, price_from=price_range.minimum, price_to=price_range.maximum)
        else:
            count = store.count(month, price_above=previous_max, price_to=price_range.maximum)
        rows.append({"range": price_range.label, "count": count})
        previous_max = price_range.maximum
    return rows


def category_breakdown(store: TransactionStore, month: int) -> List[Dict[str, Any]]:
    return [
        {"category": category, "count": count}
        for category, count in store.count_by_category(month)
    ]


async def combined_data(
    store: TransactionStore,
    month: int,
    search: str | None = None,
    page: int = 1,
    per_page: int = DEFAULT_PER_PAGE,
) -> Dict[str, Any]:
    """Run the four dashboard queries concurrently and join their results.

    A failure in any query cancels the others and propagates.
    """
    calls: Dict[str, Callable[[], Any]] = {
        "transactions": functools.partial(
            list_transactions, store, month, search=search, page=page, per_page=per_page
        ),
        "statistics": functools.partial(transaction_statistics, store, month),
        "barChartData": functools.partial(price_range_histogram, store, month),
        "pieChartData": functools.partial(category_breakdown, store, month),
    }
    results: Dict[str, Any] = {}

    async def _run(key: str, call: Callable[[], Any]) -> None:
        results[key] = await anyio.to_thread.run_sync(call)

    async with anyio.create_task_group() as tg:
        for key, call in calls.items():
            tg.start_soon(_run, key, call)

    return {key: results[key] for key in calls}

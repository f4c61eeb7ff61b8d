# transaction_analytics/importer.py
from __future__ import annotations

import http.client
import json
import logging
import urllib.error
import urllib.request
from typing import Any, List

from transaction_analytics.core.models import Transaction
from transaction_analytics.store import TransactionStore

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class FeedError(RuntimeError):
    """Raised when the transaction feed cannot be fetched or understood."""


def fetch_feed(url: str, timeout: float = DEFAULT_TIMEOUT) -> List[Any]:
    """Download the transaction feed and return its JSON array."""
    if not url:
        raise FeedError("No transaction feed URL configured")

    try:
        req = urllib.request.Request(url, method="GET")
    except ValueError as exc:
        raise FeedError(f"Invalid transaction feed URL {url!r}: {exc}") from exc
    req.add_header("Accept", "application/json")
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            payload = json.load(resp)
    except (urllib.error.URLError, TimeoutError, http.client.HTTPException) as exc:
        raise FeedError(f"Could not fetch transaction feed from {url}: {exc}") from exc
    except ValueError as exc:
        # JSONDecodeError and UnicodeDecodeError
        raise FeedError(f"Transaction feed at {url} did not return JSON") from exc

    if not isinstance(payload, list):
        raise FeedError(
            f"Transaction feed at {url} returned {type(payload).__name__}, expected a list"
        )
    return payload


def initialize_database(
    store: TransactionStore,
    feed_url: str,
    timeout: float = DEFAULT_TIMEOUT,
) -> int:
    """Replace the store contents with the records from ``feed_url``.

    Returns the number of records stored.
    """
    documents = fetch_feed(feed_url, timeout=timeout)
    logger.info("Fetched %d record(s) from %s", len(documents), feed_url)
    transactions = [Transaction.from_document(doc) for doc in documents]
    return store.replace_all(transactions)

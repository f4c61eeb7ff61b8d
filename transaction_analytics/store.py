from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Dict, Iterable, List, Tuple

from transaction_analytics.core.models import Transaction

logger = logging.getLogger(__name__)


def _contains_ci(haystack: str | None, needle: str | None) -> int:
    if haystack is None or needle is None:
        return 0
    return int(needle.casefold() in haystack.casefold())


def _init_db(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS transactions (
            seq INTEGER PRIMARY KEY AUTOINCREMENT,
            id INTEGER NOT NULL,
            title TEXT NOT NULL,
            description TEXT NOT NULL,
            price REAL NOT NULL,
            category TEXT NOT NULL,
            sold INTEGER NOT NULL,
            date_of_sale TEXT NOT NULL,
            document TEXT NOT NULL
        )
        """
    )
    conn.commit()


def _build_filters(
    month: int,
    search: str | None = None,
    search_price: float | None = None,
    sold: bool | None = None,
    price_from: float | None = None,
    price_above: float | None = None,
    price_to: float | None = None,
) -> Tuple[str, List[Any]]:
    """Return a WHERE clause and its parameters.

    ``price_from`` and ``price_to`` are inclusive bounds, ``price_above`` is
    exclusive.
    """
    conditions: List[str] = ["CAST(strftime('%m', date_of_sale) AS INTEGER) = ?"]
    params: List[Any] = [int(month)]
    if search:
        conditions.append(
            "(contains_ci(title, ?) OR contains_ci(description, ?) OR price = ?)"
        )
        params.extend([search, search, float(search_price or 0.0)])
    if sold is not None:
        conditions.append("sold = ?")
        params.append(int(sold))
    if price_from is not None:
        conditions.append("price >= ?")
        params.append(float(price_from))
    if price_above is not None:
        conditions.append("price > ?")
        params.append(float(price_above))
    if price_to is not None:
        conditions.append("price <= ?")
        params.append(float(price_to))
    return " WHERE " + " AND ".join(conditions), params


class TransactionStore:
    """Document store for sale transactions backed by a SQLite file.

    Each record is kept verbatim as a JSON document alongside the columns
    the month, search and price filters run against. Connections are opened
    per call, so one handle can be shared by concurrent queries.
    """

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = str(db_path)

    def __repr__(self) -> str:
        return f"TransactionStore({self.db_path!r})"

    def _connect(self) -> sqlite3.Connection:
        path = Path(self.db_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(path)
        conn.create_function("contains_ci", 2, _contains_ci, deterministic=True)
        _init_db(conn)
        return conn

    def replace_all(self, transactions: Iterable[Transaction]) -> int:
        """Delete every stored record and insert ``transactions`` in order.

        Both steps share one SQLite transaction; if the insert fails the
        previous contents are kept.
        """
        rows = [
            (
                tx.id,
                tx.title,
                tx.description,
                tx.price,
                tx.category,
                int(tx.sold),
                tx.date_of_sale.replace(tzinfo=None).isoformat(timespec="seconds"),
                json.dumps(tx.document),
            )
            for tx in transactions
        ]
        conn = self._connect()
        try:
            with conn:
                conn.execute("DELETE FROM transactions")
                conn.executemany(
                    """
                    INSERT INTO transactions
                    (id, title, description, price, category, sold, date_of_sale, document)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    rows,
                )
        finally:
            conn.close()
        logger.info("Replaced store contents with %d transaction(s) in %s", len(rows), self.db_path)
        return len(rows)

    def find(
        self,
        month: int,
        search: str | None = None,
        search_price: float | None = None,
        offset: int = 0,
        limit: int | None = None,
    ) -> List[Dict[str, Any]]:
        """Return stored documents for ``month`` in insertion order."""
        where, params = _build_filters(month, search, search_price)
        query = f"SELECT document FROM transactions{where} ORDER BY seq"
        if limit is not None:
            query += " LIMIT ? OFFSET ?"
            params.extend([int(limit), int(offset)])
        elif offset:
            query += " LIMIT -1 OFFSET ?"
            params.append(int(offset))
        conn = self._connect()
        try:
            rows = conn.execute(query, params).fetchall()
        finally:
            conn.close()
        return [json.loads(row[0]) for row in rows]

    def count(
        self,
        month: int,
        search: str | None = None,
        search_price: float | None = None,
        sold: bool | None = None,
        price_from: float | None = None,
        price_above: float | None = None,
        price_to: float | None = None,
    ) -> int:
        where, params = _build_filters(
            month,
            search,
            search_price,
            sold=sold,
            price_from=price_from,
            price_above=price_above,
            price_to=price_to,
        )
        conn = self._connect()
        try:
            row = conn.execute(f"SELECT COUNT(*) FROM transactions{where}", params).fetchone()
        finally:
            conn.close()
        return int(row[0] or 0)

    def sum_price(self, month: int) -> float:
        where, params = _build_filters(month)
        conn = self._connect()
        try:
            row = conn.execute(
                f"SELECT COALESCE(SUM(price), 0.0) FROM transactions{where}", params
            ).fetchone()
        finally:
            conn.close()
        return float(row[0] or 0.0)

    def count_by_category(self, month: int) -> List[Tuple[str, int]]:
        where, params = _build_filters(month)
        conn = self._connect()
        try:
            rows = conn.execute(
                f"""
                SELECT category, COUNT(*) AS count
                FROM transactions
                {where}
                GROUP BY category
                ORDER BY category
                """,
                params,
            ).fetchall()
        finally:
            conn.close()
        return [(row[0], int(row[1])) for row in rows]

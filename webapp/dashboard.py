from __future__ import annotations

import calendar
from typing import Any, Dict, List

from transaction_analytics.core.models import parse_timestamp

DEFAULT_MONTH = 3

MONTH_OPTIONS = [(number, calendar.month_name[number]) for number in range(1, 13)]

BAR_COLOR = "rgba(75, 192, 192, 0.6)"
PIE_PALETTE = ["#FF6384", "#36A2EB", "#FFCE56", "#4BC0C0", "#9966FF", "#FF9F40"]


def format_money(amount: float | None) -> str:
    return f"${float(amount or 0.0):.2f}"


def format_row(document: Dict[str, Any]) -> Dict[str, Any]:
    """Shape a stored transaction document into a table row."""
    date_of_sale = document.get("dateOfSale")
    return {
        "id": document.get("id"),
        "title": document.get("title", ""),
        "description": document.get("description", ""),
        "price": format_money(document.get("price")),
        "category": document.get("category", ""),
        "sold": "Yes" if document.get("sold") else "No",
        "dateOfSale": parse_timestamp(date_of_sale).date().isoformat() if date_of_sale else "",
    }


def pagination(page: int, total_pages: int) -> Dict[str, Any]:
    return {
        "page": page,
        "totalPages": total_pages,
        "hasPrevious": page > 1,
        "hasNext": page < total_pages,
    }


def bar_chart_config(rows: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "labels": [row["range"] for row in rows],
        "datasets": [
            {
                "label": "Number of Items",
                "data": [row["count"] for row in rows],
                "backgroundColor": BAR_COLOR,
            }
        ],
    }


def pie_chart_config(rows: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "labels": [row["category"] for row in rows],
        "datasets": [
            {
                "data": [row["count"] for row in rows],
                "backgroundColor": [PIE_PALETTE[i % len(PIE_PALETTE)] for i in range(len(rows))],
            }
        ],
    }


def build_view(
    payload: Dict[str, Any] | None,
    month: int = DEFAULT_MONTH,
    search: str = "",
    error: str | None = None,
) -> Dict[str, Any]:
    """Build the dashboard view-model from a combined-data payload.

    A missing payload (failed fetch) renders an empty dashboard.
    """
    payload = payload or {}
    listing = payload.get("transactions") or {}
    statistics = payload.get("statistics") or {}
    page = int(listing.get("page", 1))
    total_pages = int(listing.get("totalPages", 0))
    return {
        "state": {"month": month, "search": search, "page": page},
        "rows": [format_row(doc) for doc in listing.get("transactions", [])],
        "pagination": pagination(page, total_pages),
        "statistics": {
            "totalSaleAmount": format_money(statistics.get("totalSaleAmount")),
            "totalSoldItems": statistics.get("totalSoldItems", 0),
            "totalNotSoldItems": statistics.get("totalNotSoldItems", 0),
        },
        "barChart": bar_chart_config(payload.get("barChartData") or []),
        "pieChart": pie_chart_config(payload.get("pieChartData") or []),
        "error": error,
    }

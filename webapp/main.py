from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict

from fastapi import APIRouter, Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from transaction_analytics import importer, queries
from transaction_analytics.config import load_config
from transaction_analytics.store import TransactionStore
from webapp import dashboard

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).with_name("templates")
STATIC_DIR = Path(__file__).with_name("static")

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

api = APIRouter(prefix="/api")


def get_store(request: Request) -> TransactionStore:
    return request.app.state.store


def get_config(request: Request) -> Dict[str, object]:
    return request.app.state.config


def _error_response(message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=500)


@api.get("/initialize-db")
def initialize_db(
    store: TransactionStore = Depends(get_store),
    config: Dict[str, object] = Depends(get_config),
):
    try:
        count = importer.initialize_database(
            store,
            str(config.get("api_url") or ""),
            timeout=float(config.get("feed_timeout") or importer.DEFAULT_TIMEOUT),
        )
    except Exception:
        logger.exception("Database initialization failed")
        return _error_response("Error initializing database")
    return {"message": "Database initialized successfully", "count": count}


@api.get("/transactions")
def list_transactions(
    month: int = Query(..., ge=1, le=12),
    search: str | None = None,
    page: int = Query(1, ge=1),
    per_page: int = Query(queries.DEFAULT_PER_PAGE, ge=1, alias="perPage"),
    store: TransactionStore = Depends(get_store),
):
    try:
        return queries.list_transactions(store, month, search=search, page=page, per_page=per_page)
    except Exception:
        logger.exception("Listing transactions failed for month=%s", month)
        return _error_response("Error fetching transactions")


@api.get("/statistics")
def statistics(
    month: int = Query(..., ge=1, le=12),
    store: TransactionStore = Depends(get_store),
):
    try:
        return queries.transaction_statistics(store, month)
    except Exception:
        logger.exception("Statistics failed for month=%s", month)
        return _error_response("Error fetching statistics")


@api.get("/bar-chart")
def bar_chart(
    month: int = Query(..., ge=1, le=12),
    store: TransactionStore = Depends(get_store),
):
    try:
        return queries.price_range_histogram(store, month)
    except Exception:
        logger.exception("Bar chart failed for month=%s", month)
        return _error_response("Error fetching bar chart data")


@api.get("/pie-chart")
def pie_chart(
    month: int = Query(..., ge=1, le=12),
    store: TransactionStore = Depends(get_store),
):
    try:
        return queries.category_breakdown(store, month)
    except Exception:
        logger.exception("Pie chart failed for month=%s", month)
        return _error_response("Error fetching pie chart data")


@api.get("/combined-data")
async def combined_data(
    month: int = Query(..., ge=1, le=12),
    search: str | None = None,
    page: int = Query(1, ge=1),
    per_page: int = Query(queries.DEFAULT_PER_PAGE, ge=1, alias="perPage"),
    store: TransactionStore = Depends(get_store),
):
    try:
        return await queries.combined_data(store, month, search=search, page=page, per_page=per_page)
    except Exception:
        logger.exception("Combined data failed for month=%s", month)
        return _error_response("Error fetching combined data")


async def index(
    request: Request,
    month: int = Query(dashboard.DEFAULT_MONTH, ge=1, le=12),
    search: str = "",
    page: int = Query(1, ge=1),
    store: TransactionStore = Depends(get_store),
):
    payload = None
    error = None
    try:
        payload = await queries.combined_data(store, month, search=search, page=page)
    except Exception:
        logger.exception("Dashboard render failed for month=%s", month)
        error = "Error fetching combined data"
    view = dashboard.build_view(payload, month=month, search=search, error=error)
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "view": view,
            "months": dashboard.MONTH_OPTIONS,
        },
    )


def create_app(
    config: Dict[str, object] | None = None,
    store: TransactionStore | None = None,
) -> FastAPI:
    """Build the API and dashboard app around an explicit store handle."""
    config = config if config is not None else load_config()
    app = FastAPI(title="Transaction Analytics")
    app.state.config = config
    app.state.store = store or TransactionStore(str(config["db_path"]))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.get("cors_origins") or []),
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.include_router(api)
    app.add_api_route("/", index, methods=["GET"], include_in_schema=False)
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
    return app

"""Pytest configuration and shared fixtures for the Range Pager tests."""

import bisect
import logging
from typing import Any, Dict, List, Optional

import pytest
from fastapi import FastAPI, Request, Response
from fastapi.testclient import TestClient

from rangepager.helpers import CurrentPaginationConfig, paginator
from rangepager.main import create_app
from rangepager.pagination import NumericKey, PaginationConfig, ResolvedPage


logging.getLogger("asyncio").setLevel(logging.WARNING)

ITEMS: List[int] = list(range(1000))

# Fixed-width hex prefix keeps the keys in lexicographic order
WIDGET_KEYS: List[str] = [f"{i:08x}-0000-4000-8000-000000000000" for i in range(50)]

WIDGET_CONFIG = PaginationConfig(
    accepted_sort_fields=("id", "name"),
    default_max_limit=10,
    max_limit_ceiling=25
)


def widget_start(page: ResolvedPage) -> int:
    if isinstance(page.first, NumericKey):
        return page.first.value
    return bisect.bisect_left(WIDGET_KEYS, page.first.value)


def widget_boundaries(page: ResolvedPage) -> Optional[Dict[str, Any]]:
    """Report the keys found around the requested widget window."""
    if isinstance(page.first, NumericKey):
        return None

    start = widget_start(page)
    window = WIDGET_KEYS[start:start + page.limit]
    following = WIDGET_KEYS[start + page.limit:start + 2 * page.limit]

    return {
        "last": window[-1] if window else None,
        "next_first": following[0] if following else None,
        "next_last": following[-1] if following else None
    }


@pytest.fixture
def pagination_config() -> PaginationConfig:
    """Default config: sort by id, 200 items per page."""
    return PaginationConfig()


@pytest.fixture
def app() -> FastAPI:
    """App with two sample collection endpoints.

    ``/items`` pages through integers by offset; ``/widgets`` is keyed by
    UUID-like tokens and reports its boundaries back to the paginator.
    """
    app = create_app()

    @app.get("/items")
    async def list_items(
        request: Request,
        response: Response,
        config: CurrentPaginationConfig
    ) -> Dict[str, Any]:
        query = paginator(request, response, len(ITEMS), config=config)
        start = int(query.first)
        return {
            "items": ITEMS[start:start + query.limit],
            "query": query.model_dump()
        }

    @app.get("/widgets")
    async def list_widgets(request: Request, response: Response) -> Dict[str, Any]:
        fetched: Dict[str, List[str]] = {}

        def boundaries(page: ResolvedPage) -> Optional[Dict[str, Any]]:
            start = widget_start(page)
            fetched["items"] = WIDGET_KEYS[start:start + page.limit]
            return widget_boundaries(page)

        query = paginator(
            request,
            response,
            len(WIDGET_KEYS),
            config=WIDGET_CONFIG,
            boundaries=boundaries
        )
        return {"items": fetched["items"], "query": query.model_dump()}

    return app


@pytest.fixture
def widget_keys() -> List[str]:
    """Sorted keys behind the /widgets endpoint."""
    return list(WIDGET_KEYS)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Test client for the sample app."""
    return TestClient(app)

"""Tests for exception handlers."""

import json

import pytest
from unittest.mock import Mock
from fastapi import FastAPI, Request, HTTPException
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from rangepager.errors.handlers import (
    problem_detail_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    general_exception_handler,
    register_exception_handlers
)
from rangepager.errors.problem_details import (
    ProblemDetailException,
    MalformedRangeError,
    UnsupportedSortFieldError
)


class TestExceptionHandlers:
    """Test exception handlers."""

    @pytest.fixture
    def mock_request(self):
        """Create mock request."""
        request = Mock(spec=Request)
        request.url.path = "/items"
        request.method = "GET"
        return request

    @pytest.mark.asyncio
    async def test_malformed_range_handler(self, mock_request):
        """Malformed ranges become 416 problem responses."""
        response = await problem_detail_exception_handler(mock_request, MalformedRangeError("id"))

        assert response.status_code == 416
        assert response.headers["Content-Type"] == "application/problem+json"
        assert json.loads(response.body)["instance"] == "/items"

    @pytest.mark.asyncio
    async def test_unsupported_sort_field_handler(self, mock_request):
        """Rejected sort fields keep the Accept-Ranges header."""
        exc = UnsupportedSortFieldError("name", ["id"])

        response = await problem_detail_exception_handler(mock_request, exc)

        assert response.status_code == 416
        assert response.headers["Accept-Ranges"] == "id"

    @pytest.mark.asyncio
    async def test_http_exception_handler_fastapi(self, mock_request):
        """Test FastAPI HTTPException handler."""
        exc = HTTPException(status_code=404, detail="Not found")

        response = await http_exception_handler(mock_request, exc)

        assert response.status_code == 404
        assert json.loads(response.body)["title"] == "Not Found"

    @pytest.mark.asyncio
    async def test_http_exception_handler_416_title(self, mock_request):
        """416 gets its proper title."""
        exc = StarletteHTTPException(status_code=416, detail="No")

        response = await http_exception_handler(mock_request, exc)

        assert json.loads(response.body)["title"] == "Range Not Satisfiable"

    @pytest.mark.asyncio
    async def test_http_exception_handler_headers(self, mock_request):
        """Exception headers are copied onto the response."""
        exc = HTTPException(status_code=405, detail="No", headers={"Allow": "GET"})

        response = await http_exception_handler(mock_request, exc)

        assert response.headers["Allow"] == "GET"

    @pytest.mark.asyncio
    async def test_validation_exception_handler(self, mock_request):
        """Validation errors are summarized in the detail."""
        exc = RequestValidationError([
            {"loc": ("query", "count"), "msg": "Input should be a valid integer", "type": "int_parsing"}
        ])

        response = await validation_exception_handler(mock_request, exc)
        body = json.loads(response.body)

        assert response.status_code == 422
        assert body["detail"] == "Validation failed: query -> count: Input should be a valid integer"

    @pytest.mark.asyncio
    async def test_general_exception_handler(self, mock_request):
        """Unexpected errors hide their details."""
        response = await general_exception_handler(mock_request, RuntimeError("secret"))
        body = json.loads(response.body)

        assert response.status_code == 500
        assert "secret" not in body["detail"]


class TestRegisterExceptionHandlers:
    """Test register_exception_handlers."""

    def test_handlers_registered(self):
        """All handlers are registered on the app."""
        app = FastAPI()
        register_exception_handlers(app)

        assert app.exception_handlers[ProblemDetailException] is problem_detail_exception_handler
        assert app.exception_handlers[HTTPException] is http_exception_handler
        assert app.exception_handlers[StarletteHTTPException] is http_exception_handler
        assert app.exception_handlers[RequestValidationError] is validation_exception_handler
        assert app.exception_handlers[Exception] is general_exception_handler

"""Tests for error handling and Problem Details implementation."""

import json

from fastapi import Request
from unittest.mock import Mock

from rangepager.errors.problem_details import (
    ProblemDetail,
    ProblemDetailException,
    RangeNotSatisfiableError,
    MalformedRangeError,
    UnsupportedSortFieldError,
    create_problem_response
)


class TestProblemDetail:
    """Test ProblemDetail model."""

    def test_problem_detail_defaults(self):
        """Test ProblemDetail with default values."""
        problem = ProblemDetail(title="Test Error", status=400)

        assert problem.type == "about:blank"
        assert problem.title == "Test Error"
        assert problem.status == 400
        assert problem.detail is None
        assert problem.instance is None

    def test_problem_detail_extra_fields(self):
        """Test ProblemDetail allows extra fields."""
        problem = ProblemDetail(title="Test Error", status=416, accept_ranges=["id"])
        assert problem.accept_ranges == ["id"]


class TestProblemDetailException:
    """Test ProblemDetailException base class."""

    def test_basic_exception(self):
        """Test basic exception creation."""
        exc = ProblemDetailException(status=400, title="Test Error", detail="Test detail")

        assert exc.status == 400
        assert exc.title == "Test Error"
        assert exc.detail == "Test detail"
        assert exc.type_uri == "about:blank"
        assert exc.instance is None
        assert str(exc) == "Test detail"

    def test_str_falls_back_to_title(self):
        """Without detail the title is the message."""
        assert str(ProblemDetailException(status=500, title="Broken")) == "Broken"

    def test_to_problem_detail_with_request(self):
        """The request path becomes the instance."""
        request = Mock(spec=Request)
        request.url.path = "/items"

        problem = RangeNotSatisfiableError("Bad input").to_problem_detail(request)

        assert problem.instance == "/items"
        assert problem.status == 416

    def test_to_response(self):
        """Responses use the problem+json media type."""
        response = RangeNotSatisfiableError().to_response()
        body = json.loads(response.body)

        assert response.status_code == 416
        assert response.headers["Content-Type"] == "application/problem+json"
        assert body == {
            "type": "about:blank",
            "title": "Range Not Satisfiable",
            "status": 416,
            "detail": "Range not satisfiable"
        }


class TestRangeErrors:
    """Test 416 errors."""

    def test_range_not_satisfiable(self):
        """Plain 416 without accepted ranges."""
        exc = RangeNotSatisfiableError()
        response = exc.to_response()

        assert exc.status == 416
        assert exc.title == "Range Not Satisfiable"
        assert response.status_code == 416
        assert "Accept-Ranges" not in response.headers

    def test_malformed_range(self):
        """Malformed range errors carry the header value."""
        exc = MalformedRangeError("id")
        body = json.loads(exc.to_response().body)

        assert isinstance(exc, RangeNotSatisfiableError)
        assert exc.range_header == "id"
        assert body["status"] == 416
        assert body["range_header"] == "id"
        assert "Malformed Range header" in body["detail"]

    def test_malformed_range_advertises_accept_ranges(self):
        """Malformed range responses still advertise the accepted sort fields."""
        exc = MalformedRangeError("id", accept_ranges=("id", "name"))
        response = exc.to_response()
        body = json.loads(response.body)

        assert response.status_code == 416
        assert response.headers["Accept-Ranges"] == "id,name"
        assert body["accept_ranges"] == ["id", "name"]

    def test_unsupported_sort_field(self):
        """Unsupported sort fields advertise the accepted ones."""
        exc = UnsupportedSortFieldError("name", ("id", "created_at"))
        response = exc.to_response()
        body = json.loads(response.body)

        assert exc.sort_by == "name"
        assert response.status_code == 416
        assert response.headers["Accept-Ranges"] == "id,created_at"
        assert body["accept_ranges"] == ["id", "created_at"]
        assert body["sort_by"] == "name"
        assert "'name'" in body["detail"]


class TestCreateProblemResponse:
    """Test create_problem_response."""

    def test_with_extensions(self):
        """Extensions are included in the body."""
        request = Mock(spec=Request)
        request.url.path = "/widgets"

        response = create_problem_response(
            status=422, title="Validation Error", detail="Bad", request=request, field="max"
        )
        body = json.loads(response.body)

        assert response.status_code == 422
        assert body["instance"] == "/widgets"
        assert body["field"] == "max"

"""Problem Details (RFC 9457) implementation for the Range Pager API."""

from typing import Optional, Dict, Any, Iterable
from pydantic import BaseModel, Field
from fastapi import Request
from fastapi.responses import JSONResponse


class ProblemDetail(BaseModel):
    """Problem Details as defined in RFC 9457."""

    type: str = Field(default="about:blank", description="A URI reference that identifies the problem type")
    title: str = Field(description="A short, human-readable summary of the problem type")
    status: int = Field(description="The HTTP status code")
    detail: Optional[str] = Field(default=None, description="A human-readable explanation specific to this occurrence")
    instance: Optional[str] = Field(default=None, description="A URI reference that identifies the specific occurrence")

    # Allow additional properties for extensions
    model_config = {"extra": "allow"}


class ProblemDetailException(Exception):
    """Base exception for Problem Details responses."""

    def __init__(
        self,
        status: int,
        title: str,
        detail: Optional[str] = None,
        type_uri: str = "about:blank",
        instance: Optional[str] = None,
        **extensions: Any
    ):
        self.status = status
        self.title = title
        self.detail = detail
        self.type_uri = type_uri
        self.instance = instance
        self.extensions = extensions
        super().__init__(detail or title)

    def to_problem_detail(self, request: Optional[Request] = None) -> ProblemDetail:
        """Convert to ProblemDetail model."""
        instance = self.instance
        if instance is None and request:
            instance = str(request.url.path)

        problem = ProblemDetail(
            type=self.type_uri,
            title=self.title,
            status=self.status,
            detail=self.detail,
            instance=instance
        )

        for key, value in self.extensions.items():
            setattr(problem, key, value)

        return problem

    def to_response(self, request: Optional[Request] = None) -> JSONResponse:
        """Convert to JSONResponse with Problem Details format."""
        problem = self.to_problem_detail(request)
        return JSONResponse(
            status_code=self.status,
            content=problem.model_dump(exclude_none=True),
            headers={"Content-Type": "application/problem+json"}
        )


class RangeNotSatisfiableError(ProblemDetailException):
    """416 Range Not Satisfiable error.

    Carries the accepted sort fields so the response can advertise them
    in an ``Accept-Ranges`` header, like a successful response would.
    """

    def __init__(
        self,
        detail: str = "Range not satisfiable",
        accept_ranges: Optional[Iterable[str]] = None,
        **extensions: Any
    ):
        if accept_ranges is not None:
            extensions["accept_ranges"] = list(accept_ranges)
        super().__init__(
            status=416,
            title="Range Not Satisfiable",
            detail=detail,
            **extensions
        )

    def to_response(self, request: Optional[Request] = None) -> JSONResponse:
        """Convert to JSONResponse with Accept-Ranges header."""
        response = super().to_response(request)
        if self.extensions.get("accept_ranges"):
            response.headers["Accept-Ranges"] = ",".join(self.extensions["accept_ranges"])
        return response


class MalformedRangeError(RangeNotSatisfiableError):
    """The Range header does not match the range grammar."""

    def __init__(
        self,
        range_header: str,
        accept_ranges: Optional[Iterable[str]] = None,
        **extensions: Any
    ):
        self.range_header = range_header
        super().__init__(
            detail=f"Malformed Range header: {range_header!r}",
            accept_ranges=accept_ranges,
            range_header=range_header,
            **extensions
        )


class UnsupportedSortFieldError(RangeNotSatisfiableError):
    """The requested sort field is not one of the accepted ranges."""

    def __init__(self, sort_by: str, accept_ranges: Iterable[str], **extensions: Any):
        self.sort_by = sort_by
        accepted = list(accept_ranges)
        super().__init__(
            detail=f"Unsupported sort field '{sort_by}', expected one of: {', '.join(accepted)}",
            accept_ranges=accepted,
            sort_by=sort_by,
            **extensions
        )


def create_problem_response(
    status: int,
    title: str,
    detail: Optional[str] = None,
    type_uri: str = "about:blank",
    instance: Optional[str] = None,
    request: Optional[Request] = None,
    **extensions: Any
) -> JSONResponse:
    """Create a Problem Details response."""
    if instance is None and request:
        instance = str(request.url.path)

    problem = ProblemDetail(
        type=type_uri,
        title=title,
        status=status,
        detail=detail,
        instance=instance
    )

    for key, value in extensions.items():
        setattr(problem, key, value)

    return JSONResponse(
        status_code=status,
        content=problem.model_dump(exclude_none=True),
        headers={"Content-Type": "application/problem+json"}
    )

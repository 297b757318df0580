"""Error handling module for the Range Pager API."""

from .problem_details import (
    ProblemDetail,
    ProblemDetailException,
    RangeNotSatisfiableError,
    MalformedRangeError,
    UnsupportedSortFieldError,
    create_problem_response
)
from .handlers import register_exception_handlers

__all__ = [
    "ProblemDetail",
    "ProblemDetailException",
    "RangeNotSatisfiableError",
    "MalformedRangeError",
    "UnsupportedSortFieldError",
    "create_problem_response",
    "register_exception_handlers"
]

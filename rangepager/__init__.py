"""Range-header pagination for collection endpoints."""

from .pagination import (
    NumericKey,
    OpaqueKey,
    PaginationConfig,
    PageQuery,
    PageResult,
    ResolvedPage,
    build_range,
    paginate,
    parse_range,
    resolve
)
from .errors import MalformedRangeError, UnsupportedSortFieldError, RangeNotSatisfiableError

__all__ = [
    "NumericKey",
    "OpaqueKey",
    "PaginationConfig",
    "PageQuery",
    "PageResult",
    "ResolvedPage",
    "build_range",
    "paginate",
    "parse_range",
    "resolve",
    "MalformedRangeError",
    "UnsupportedSortFieldError",
    "RangeNotSatisfiableError"
]

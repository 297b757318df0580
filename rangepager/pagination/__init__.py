"""Pagination module for Range-header pagination."""

from .keys import (
    Key,
    NumericKey,
    OpaqueKey,
    parse_key
)
from .range_header import (
    RangeRequest,
    parse_range,
    build_range
)
from .paginator import (
    PaginationConfig,
    Boundaries,
    BoundariesSource,
    PageQuery,
    ResolvedPage,
    PageResult,
    resolve,
    render,
    finalize,
    paginate
)

__all__ = [
    "Key",
    "NumericKey",
    "OpaqueKey",
    "parse_key",
    "RangeRequest",
    "parse_range",
    "build_range",
    "PaginationConfig",
    "Boundaries",
    "BoundariesSource",
    "PageQuery",
    "ResolvedPage",
    "PageResult",
    "resolve",
    "render",
    "finalize",
    "paginate"
]

"""Pagination window computation for Range-header pagination.

The pipeline is pure: defaults, then caller boundaries, then the parsed
request are merged into a ``ResolvedPage``; the page is validated, its
window computed and finally rendered into response headers. Nothing is
mutated along the way, every stage returns a new frozen model.
"""

import logging
from typing import Optional, Callable, Dict, Tuple, Union, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .keys import Key, NumericKey, parse_key, key_value
from .range_header import RangeRequest, parse_range, build_range, encode_args
from ..config import Settings, get_settings
from ..errors.problem_details import UnsupportedSortFieldError


logger = logging.getLogger(__name__)

STATUS_OK = 200
STATUS_PARTIAL_CONTENT = 206


def normalize_sort_field(sort_by: str) -> str:
    """Sort fields compare case-insensitively."""
    return sort_by.strip().lower()


class PaginationConfig(BaseModel):
    """Per-endpoint pagination defaults and the sort field whitelist."""

    model_config = ConfigDict(frozen=True)

    accepted_sort_fields: Tuple[str, ...] = Field(default=("id",), description="Sort fields clients may request")
    default_sort_field: str = Field(default="id", description="Sort field used when the client sends none")
    default_first: int = Field(default=0, ge=0, description="Offset used when no Range header is sent")
    default_max_limit: int = Field(default=200, ge=1, description="Page size used when the client sends no max")
    max_limit_ceiling: Optional[int] = Field(default=None, ge=1, description="Upper bound for a client-supplied max")
    default_args: Dict[str, str] = Field(default_factory=dict, description="Extra args merged under the request's args")

    @field_validator("accepted_sort_fields", mode="before")
    @classmethod
    def normalize_accepted(cls, v):
        if isinstance(v, str):
            v = v.split(",")
        fields = []
        for field in v:
            field = normalize_sort_field(str(field))
            if field and field not in fields:
                fields.append(field)
        if not fields:
            raise ValueError("At least one accepted sort field is required")
        return tuple(fields)

    @field_validator("default_sort_field")
    @classmethod
    def normalize_default(cls, v):
        v = normalize_sort_field(v)
        if not v:
            raise ValueError("Default sort field must not be empty")
        return v

    @field_validator("default_args", mode="before")
    @classmethod
    def stringify_default_args(cls, v):
        args = {str(key): str(value) for key, value in dict(v).items()}
        # Args are rendered as comma separated key=value pairs
        encode_args(args)
        return args

    @model_validator(mode="after")
    def validate_ceiling(self):
        if self.max_limit_ceiling is not None and self.max_limit_ceiling < self.default_max_limit:
            raise ValueError("max_limit_ceiling must not be below default_max_limit")
        return self

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **overrides: Any) -> "PaginationConfig":
        """Build a config from application settings, with per-endpoint overrides."""
        settings = settings or get_settings()
        values = {
            "accepted_sort_fields": settings.accepted_sort_fields,
            "default_sort_field": settings.default_sort_field,
            "default_first": settings.default_first,
            "default_max_limit": settings.default_page_size,
            "max_limit_ceiling": settings.max_page_size,
        }
        values.update(overrides)
        return cls(**values)


class Boundaries(BaseModel):
    """Window boundaries reported back by the caller.

    Needed for opaque keys: only the data store knows which key follows
    the last one returned.
    """

    model_config = ConfigDict(frozen=True)

    last: Optional[Key] = None
    next_first: Optional[Key] = None
    next_last: Optional[Key] = None

    @field_validator("last", "next_first", "next_last", mode="before")
    @classmethod
    def coerce_key(cls, v):
        if v is None:
            return None
        return parse_key(v)


class PageQuery(BaseModel):
    """What the caller needs to fetch a page from its data store."""

    model_config = ConfigDict(frozen=True)

    sort_by: str
    first: Union[int, str]
    limit: int


class ResolvedPage(BaseModel):
    """A validated pagination window."""

    model_config = ConfigDict(frozen=True)

    sort_by: str
    first: Key
    last: Optional[Key] = None
    next_first: Optional[Key] = None
    next_last: Optional[Key] = None
    limit: int
    total_count: int
    args: Dict[str, str] = Field(default_factory=dict)
    accepted_sort_fields: Tuple[str, ...] = ("id",)

    @property
    def will_paginate(self) -> bool:
        return self.total_count > self.limit

    @property
    def status_code(self) -> int:
        return STATUS_PARTIAL_CONTENT if self.will_paginate else STATUS_OK

    @property
    def query(self) -> PageQuery:
        return PageQuery(sort_by=self.sort_by, first=key_value(self.first), limit=self.limit)

    def with_boundaries(
        self,
        last: Optional[Union[Key, int, str]] = None,
        next_first: Optional[Union[Key, int, str]] = None,
        next_last: Optional[Union[Key, int, str]] = None
    ) -> "ResolvedPage":
        """Return a copy with the given boundaries filled in.

        Boundaries left as None keep their current value.
        """
        supplied = Boundaries(last=last, next_first=next_first, next_last=next_last)
        update = {
            name: getattr(supplied, name)
            for name in ("last", "next_first", "next_last")
            if getattr(supplied, name) is not None
        }
        return self.model_copy(update=update)


class PageResult(BaseModel):
    """Outcome of a pagination call."""

    model_config = ConfigDict(frozen=True)

    page: ResolvedPage
    query: PageQuery
    headers: Dict[str, str]
    status_code: int


BoundariesSource = Union[
    Boundaries,
    Dict[str, Any],
    Callable[[ResolvedPage], Optional[Union[Boundaries, Dict[str, Any]]]]
]


def coerce_limit(raw: Optional[str], config: PaginationConfig) -> int:
    """Turn the ``max`` argument into an effective page size.

    Unusable values fall back to the configured default; values above the
    ceiling are clamped to it.
    """
    try:
        limit = int(raw)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring non-integer max={raw!r}, using {config.default_max_limit}")
        return config.default_max_limit

    if limit < 1:
        logger.warning(f"Ignoring non-positive max={raw!r}, using {config.default_max_limit}")
        return config.default_max_limit

    if config.max_limit_ceiling is not None and limit > config.max_limit_ceiling:
        logger.debug(f"Clamping max={limit} to {config.max_limit_ceiling}")
        return config.max_limit_ceiling

    return limit


def compute_window(
    first: Key,
    last: Optional[Key],
    next_first: Optional[Key],
    next_last: Optional[Key],
    limit: int,
    count: int
) -> Tuple[Optional[Key], Optional[Key], Optional[Key]]:
    """Fill in the window for numeric offsets.

    Supplied boundaries are kept. Opaque keys are returned untouched.
    """
    if not isinstance(first, NumericKey):
        return last, next_first, next_last

    if last is None:
        last = first + limit

    if next_first is None and isinstance(last, NumericKey):
        next_first = last + 1

    if next_last is None and isinstance(next_first, NumericKey):
        next_last = NumericKey(value=min(next_first.value + limit, count - 1))

    return last, next_first, next_last


def resolve(
    parsed: Optional[RangeRequest],
    count: int,
    config: PaginationConfig,
    boundaries: Optional[Boundaries] = None
) -> ResolvedPage:
    """Merge a parsed range with defaults and compute its window.

    Args:
        parsed: Parsed Range header, or None when absent
        count: Total number of items matching the caller's query
        config: Endpoint pagination config
        boundaries: Window boundaries already known to the caller

    Returns:
        The resolved page

    Raises:
        UnsupportedSortFieldError: If the sort field is not accepted
    """
    sort_by = config.default_sort_field
    first: Key = NumericKey(value=config.default_first)
    args = {**config.default_args, "max": str(config.default_max_limit)}
    boundaries = boundaries or Boundaries()
    last = boundaries.last

    if parsed is not None:
        if parsed.sort_by:
            sort_by = parsed.sort_by
        first = parsed.first
        if parsed.last is not None:
            last = parsed.last
        args.update(parsed.args)

    sort_by = normalize_sort_field(sort_by)
    if sort_by not in config.accepted_sort_fields:
        logger.info(f"Rejecting unsupported sort field '{sort_by}'")
        raise UnsupportedSortFieldError(sort_by, config.accepted_sort_fields)

    limit = coerce_limit(args.get("max"), config)
    args["max"] = str(limit)

    last, next_first, next_last = compute_window(
        first, last, boundaries.next_first, boundaries.next_last, limit, count
    )

    page = ResolvedPage(
        sort_by=sort_by,
        first=first,
        last=last,
        next_first=next_first,
        next_last=next_last,
        limit=limit,
        total_count=count,
        args=args,
        accepted_sort_fields=config.accepted_sort_fields
    )
    logger.debug(
        f"Resolved page {sort_by} {first}..{last} of {count} (limit {limit})",
        extra={"sort_by": sort_by, "limit": limit, "total_count": count}
    )
    return page


def render(page: ResolvedPage) -> Dict[str, str]:
    """Render response headers for a resolved page."""
    headers = {"Accept-Ranges": ",".join(page.accepted_sort_fields)}

    if not page.will_paginate:
        return headers

    headers["Content-Range"] = build_range(
        page.sort_by, page.first, page.last, page.args, total_count=page.total_count
    )

    if page.next_first is not None:
        headers["Next-Range"] = build_range(
            page.sort_by, page.next_first, page.next_last, page.args
        )
    else:
        logger.debug("Next-Range omitted, next window not resolved")

    return headers


def finalize(page: ResolvedPage) -> PageResult:
    """Render a resolved page into a result."""
    return PageResult(
        page=page,
        query=page.query,
        headers=render(page),
        status_code=page.status_code
    )


def as_boundaries(value: Optional[Union[Boundaries, Dict[str, Any]]]) -> Optional[Boundaries]:
    if value is None or isinstance(value, Boundaries):
        return value
    return Boundaries(**value)


def paginate(
    raw_range: Optional[str],
    count: int,
    config: Optional[PaginationConfig] = None,
    boundaries: Optional[BoundariesSource] = None
) -> PageResult:
    """Run the whole pipeline for one request.

    ``boundaries`` is either known up front, or a callable that receives
    the resolved page and returns the boundaries it found while fetching
    it (or None). Boundaries returned by the callable take precedence over
    computed ones.

    Args:
        raw_range: Value of the Range request header, or None
        count: Total number of items matching the caller's query
        config: Endpoint pagination config, defaults to the app settings
        boundaries: Window boundaries, or a callable producing them

    Returns:
        Query descriptor, response headers and status code

    Raises:
        MalformedRangeError: If the Range header cannot be parsed
        UnsupportedSortFieldError: If the sort field is not accepted
    """
    if config is None:
        config = PaginationConfig.from_settings()

    parsed = parse_range(raw_range, accept_ranges=config.accepted_sort_fields)

    if callable(boundaries):
        page = resolve(parsed, count, config)
        supplied = as_boundaries(boundaries(page))
        if supplied is not None:
            page = page.with_boundaries(supplied.last, supplied.next_first, supplied.next_last)
    else:
        page = resolve(parsed, count, config, as_boundaries(boundaries))

    return finalize(page)

"""FastAPI helpers for Range-header pagination in route handlers."""

import logging
from typing import Annotated, Optional

from fastapi import Depends, Request, Response

from .config import get_settings
from .pagination import BoundariesSource, PageQuery, PaginationConfig, paginate


logger = logging.getLogger(__name__)

RANGE_HEADER = "Range"
PAGINATION_HEADERS = ["Accept-Ranges", "Content-Range", "Next-Range"]


def get_pagination_config() -> PaginationConfig:
    """Get the pagination config built from application settings."""
    return PaginationConfig.from_settings(get_settings())


CurrentPaginationConfig = Annotated[PaginationConfig, Depends(get_pagination_config)]


def paginator(
    request: Request,
    response: Response,
    count: int,
    config: Optional[PaginationConfig] = None,
    boundaries: Optional[BoundariesSource] = None
) -> PageQuery:
    """Paginate a collection endpoint.

    Reads the ``Range`` header, sets ``Accept-Ranges``, ``Content-Range``
    and ``Next-Range`` on the response along with a 200 or 206 status, and
    returns what the handler needs to fetch the page.

    Args:
        request: FastAPI request object
        response: FastAPI response object for adding headers
        count: Total number of items matching the handler's query
        config: Endpoint pagination config, defaults to the app settings
        boundaries: Window boundaries, or a callable receiving the resolved
            page and returning the boundaries found while fetching it

    Returns:
        Sort field, first key and limit for the data fetch

    Raises:
        MalformedRangeError: If the Range header cannot be parsed
        UnsupportedSortFieldError: If the sort field is not accepted
    """
    result = paginate(
        request.headers.get(RANGE_HEADER),
        count,
        config=config or get_pagination_config(),
        boundaries=boundaries
    )

    for name, value in result.headers.items():
        response.headers[name] = value
    response.status_code = result.status_code

    logger.debug(
        f"Paginated {request.url.path}: {result.status_code}",
        extra={"path": str(request.url.path), "headers": result.headers}
    )
    return result.query

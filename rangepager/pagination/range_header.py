"""Range header grammar: parsing inbound ``Range`` and rendering ``Content-Range``/``Next-Range``.

Header values look like::

    id 0..200/1000; max=200,order=asc
    ^  ^ ^   ^      ^
    |  | |   |      args (comma separated, split on the first '=')
    |  | |   count suffix (Content-Range only, ignored when parsed)
    |  | last key (optional, may be empty: "id 0..")
    |  first key (decimal offset or opaque token such as a UUID)
    sort field (may be empty, then the default applies)
"""

import logging
import re
from typing import Optional, Dict, Iterable, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field

from .keys import Key, parse_key
from ..errors.problem_details import MalformedRangeError


logger = logging.getLogger(__name__)

RANGE_PATTERN = re.compile(
    r"\A(?P<sort_by>\S*)\s+"
    r"(?P<first>[0-9a-fA-F-]+)"
    r"(?:\.\.(?P<last>[0-9a-fA-F-]*))?"
    r"(?:/(?P<count>[0-9]+))?"
    r"(?:;\s*(?P<args>.*))?\Z"
)

ARGS_SEPARATOR = re.compile(r"\s*,\s*")


class RangeRequest(BaseModel):
    """A parsed ``Range`` header."""

    model_config = ConfigDict(frozen=True)

    sort_by: Optional[str] = Field(default=None, description="Requested sort field, None when omitted")
    first: Key = Field(description="First key of the requested window")
    last: Optional[Key] = Field(default=None, description="Last key, when the client sent a closed range")
    args: Dict[str, str] = Field(default_factory=dict, description="Extra arguments such as max")


def parse_args(raw_args: str) -> Dict[str, str]:
    """Parse ``key=value,key2=value2`` into a mapping.

    Values may contain '=' themselves; only the first one separates key
    from value. A pair without '=' maps to an empty value.

    Raises:
        ValueError: If a pair has an empty key
    """
    args: Dict[str, str] = {}

    for pair in ARGS_SEPARATOR.split(raw_args.strip()):
        if not pair:
            continue

        key, _, value = pair.partition("=")
        key = key.strip()
        if not key:
            raise ValueError(f"Range argument without a name: {pair!r}")

        args[key] = value.strip()

    return args


def parse_range(
    raw: Optional[str],
    accept_ranges: Optional[Iterable[str]] = None
) -> Optional[RangeRequest]:
    """Parse a ``Range`` header value.

    Args:
        raw: The header value, or None when the header is absent
        accept_ranges: Accepted sort fields, advertised on rejection

    Returns:
        The parsed request, or None when no range was requested

    Raises:
        MalformedRangeError: If the value does not match the range grammar
    """
    if raw is None or not raw.strip():
        return None

    match = RANGE_PATTERN.match(raw.rstrip())
    if not match:
        logger.info(f"Rejecting malformed Range header: {raw!r}")
        raise MalformedRangeError(raw, accept_ranges=accept_ranges)

    try:
        args = parse_args(match.group("args")) if match.group("args") else {}
        first = parse_key(match.group("first"))
        last = parse_key(match.group("last")) if match.group("last") else None
    except ValueError as e:
        logger.info(f"Rejecting malformed Range header {raw!r}: {e}")
        raise MalformedRangeError(raw, accept_ranges=accept_ranges) from e

    return RangeRequest(
        sort_by=match.group("sort_by") or None,
        first=first,
        last=last,
        args=args
    )


def encode_args(args: Optional[Mapping[str, object]]) -> str:
    """Render args as ``key=value`` pairs joined by commas.

    Raises:
        ValueError: If a key or value would not parse back unchanged
    """
    if not args:
        return ""

    pairs = []
    for key, value in args.items():
        key, value = str(key), str(value)
        if not key.strip() or "=" in key or "," in key:
            raise ValueError(f"Range argument name cannot be encoded: {key!r}")
        if "," in value:
            raise ValueError(f"Range argument value for {key!r} must not contain ',': {value!r}")
        pairs.append(f"{key}={value}")

    return ",".join(pairs)


def build_range(
    sort_by: str,
    first: Optional[Union[Key, int, str]] = None,
    last: Optional[Union[Key, int, str]] = None,
    args: Optional[Mapping[str, object]] = None,
    total_count: Optional[int] = None
) -> str:
    """Render a range in header form.

    ``total_count`` is only passed for ``Content-Range``. An unknown
    ``last`` renders as an open range (``id 5..``), which ``parse_range``
    accepts back.
    """
    value = sort_by

    if first is not None:
        value += f" {first}..{'' if last is None else last}"

    if total_count is not None:
        value += f"/{total_count}"

    encoded = encode_args(args)
    if encoded:
        value += f"; {encoded}"

    return value

"""Range keys: numeric offsets and opaque cursor tokens."""

import re
from typing import Union

from pydantic import BaseModel, ConfigDict, Field


NUMERIC_TOKEN = re.compile(r"\A[0-9]+\Z")


class NumericKey(BaseModel):
    """Offset key. Window boundaries can be computed arithmetically."""

    model_config = ConfigDict(frozen=True)

    # next_last is count - 1 for an empty collection
    value: int = Field(description="Zero-based offset into the collection")

    def __add__(self, other: int) -> "NumericKey":
        return NumericKey(value=self.value + other)

    def __str__(self) -> str:
        return str(self.value)


class OpaqueKey(BaseModel):
    """Cursor key such as a UUID. Its successor is only known to the data store."""

    model_config = ConfigDict(frozen=True)

    value: str = Field(min_length=1, description="Opaque sortable token")

    def __str__(self) -> str:
        return self.value


Key = Union[NumericKey, OpaqueKey]


def parse_key(token: Union[Key, int, str]) -> Key:
    """Turn a wire token (or a caller-supplied value) into a key.

    Tokens made only of decimal digits are offsets; everything else,
    including hex ids and UUIDs, is opaque.

    Args:
        token: Header token, integer offset, or an existing key

    Returns:
        NumericKey or OpaqueKey

    Raises:
        ValueError: If the token is empty or a negative integer
    """
    if isinstance(token, (NumericKey, OpaqueKey)):
        return token

    # bool is an int subclass but never a valid offset
    if isinstance(token, bool):
        raise ValueError(f"Invalid range key: {token!r}")

    if isinstance(token, int):
        if token < 0:
            raise ValueError(f"Range offset must not be negative: {token}")
        return NumericKey(value=token)

    token = str(token).strip()
    if not token:
        raise ValueError("Range key must not be empty")

    if NUMERIC_TOKEN.match(token):
        return NumericKey(value=int(token))

    return OpaqueKey(value=token)


def key_value(key: Key) -> Union[int, str]:
    """Plain value of a key, as handed to data-store queries."""
    return key.value

"""Coercion of evaluated values to text tokens."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from typing import Any

DEFAULT_NA = "NA"


def is_missing(value: Any) -> bool:
    """True for values rendered with the NA marker (None and NaN)."""
    return value is None or (isinstance(value, float) and math.isnan(value))


def is_scalar(value: Any) -> bool:
    """Strings, bytes and mappings render as one token even though iterable."""
    return isinstance(value, (str, bytes, bytearray, Mapping)) or not isinstance(
        value, Iterable
    )


def to_token(value: Any, na: str = DEFAULT_NA) -> str:
    if is_missing(value):
        return na
    return str(value)


def to_tokens(value: Any, na: str = DEFAULT_NA) -> list[str]:
    """Convert a value to a list of tokens; iterables give one token per item.

    Examples:
        >>> to_tokens(5)
        ['5']
        >>> to_tokens(range(3))
        ['0', '1', '2']
        >>> to_tokens([1, None], na="-")
        ['1', '-']
    """
    if is_scalar(value):
        return [to_token(value, na)]
    return [to_token(item, na) for item in value]

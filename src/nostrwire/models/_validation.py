"""Shared validation helpers for frozen dataclass models.

Private module -- not part of the public API. Used by ``__post_init__``
methods and mutators in sibling model modules. Every helper raises
[InvalidFieldError][nostrwire.core.exceptions.InvalidFieldError] naming the
offending field, which lets the versioning layer translate a failure into
a precise [Why][nostrwire.versioned.why.Why] reason.
"""

from __future__ import annotations

import string
from typing import Any

from nostrwire.core.exceptions import InvalidFieldError


U32_MAX = 0xFFFF_FFFF

_HEX_DIGITS = frozenset(string.hexdigits)


def validate_instance(value: Any, expected: type | tuple[type, ...], name: str) -> None:
    """Raise if *value* is not an instance of *expected*."""
    if not isinstance(value, expected):
        names = (
            " or ".join(t.__name__ for t in expected)
            if isinstance(expected, tuple)
            else expected.__name__
        )
        raise InvalidFieldError(name, f"must be {names}, got {type(value).__name__}")


def validate_int(value: Any, name: str) -> None:
    """Raise if *value* is not an ``int`` (``bool`` excluded)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidFieldError(name, f"must be an int, got {type(value).__name__}")


def validate_timestamp(value: Any, name: str) -> None:
    """Raise if *value* is not a non-negative ``int``."""
    validate_int(value, name)
    if value < 0:
        raise InvalidFieldError(name, "must be non-negative")


def validate_u32(value: Any, name: str) -> None:
    """Raise if *value* does not fit in an unsigned 32-bit integer."""
    validate_int(value, name)
    if not 0 <= value <= U32_MAX:
        raise InvalidFieldError(name, f"must be in 0..{U32_MAX}, got {value}")


def validate_str(value: Any, name: str) -> None:
    """Raise if *value* is not a ``str`` that UTF-8 can encode.

    JSON escapes can smuggle lone surrogates (``"\\ud800"``) into a decoded
    string; such a value has no canonical byte form and is rejected.
    """
    if not isinstance(value, str):
        raise InvalidFieldError(name, f"must be a str, got {type(value).__name__}")
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as e:
        raise InvalidFieldError(name, f"not encodable as UTF-8: {e.reason}") from e


def validate_str_not_empty(value: Any, name: str) -> None:
    """Raise if *value* is not a non-empty ``str``."""
    validate_str(value, name)
    if not value:
        raise InvalidFieldError(name, "must not be empty")


def normalize_hex(value: Any, length: int, name: str) -> str:
    """Return *value* as lowercase hex after checking it encodes *length* bytes.

    Raises:
        InvalidFieldError: If *value* is not a string of ``2 * length`` hex digits.
    """
    validate_str(value, name)
    if len(value) != 2 * length or not _HEX_DIGITS.issuperset(value):
        raise InvalidFieldError(name, f"must be {2 * length} hex characters")
    return value.lower()


def validate_tag_letter(value: Any, name: str = "letter") -> None:
    """Raise if *value* is not a single ASCII letter (filter tag key)."""
    validate_str(value, name)
    if len(value) != 1 or value not in string.ascii_letters:
        raise InvalidFieldError(name, f"must be a single ASCII letter, got {value!r}")

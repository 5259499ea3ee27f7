"""
Declarative, lenient field parsing for NIP documents.

Documents such as NIP-11 relay information come from arbitrary servers and
are frequently non-conformant. A model declares a
[FieldSpec][nostrwire.nips.parsing.FieldSpec] naming which keys are expected
to hold which JSON type; [parse_fields()][nostrwire.nips.parsing.parse_fields]
keeps the values that match and silently drops the rest, so one bad field
never costs the whole document.

Note:
    ``bool`` is a subclass of ``int`` in Python; integer fields reject it
    explicitly so ``true`` is never read as ``1``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any


_DROP: Any = object()


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _as_int(value: Any) -> Any:
    return value if _is_int(value) else _DROP


def _as_bool(value: Any) -> Any:
    return value if isinstance(value, bool) else _DROP


def _as_str(value: Any) -> Any:
    return value if isinstance(value, str) else _DROP


def _as_list(predicate: Callable[[Any], bool]) -> Callable[[Any], Any]:
    def parse(value: Any) -> Any:
        if not isinstance(value, list):
            return _DROP
        kept = [item for item in value if predicate(item)]
        return kept or _DROP

    return parse


_PARSERS: dict[str, Callable[[Any], Any]] = {
    "int_fields": _as_int,
    "bool_fields": _as_bool,
    "str_fields": _as_str,
    "str_list_fields": _as_list(lambda item: isinstance(item, str)),
    "int_list_fields": _as_list(_is_int),
}


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """Expected JSON type of each known key.

    Keys listed in no set are ignored by
    [parse_fields()][nostrwire.nips.parsing.parse_fields].

    Attributes:
        int_fields: Integers (``bool`` excluded).
        bool_fields: Booleans.
        str_fields: Strings.
        str_list_fields: Lists of strings; other elements are filtered out and
            an empty result drops the key.
        int_list_fields: Lists of integers, filtered the same way.
    """

    int_fields: frozenset[str] = field(default_factory=frozenset)
    bool_fields: frozenset[str] = field(default_factory=frozenset)
    str_fields: frozenset[str] = field(default_factory=frozenset)
    str_list_fields: frozenset[str] = field(default_factory=frozenset)
    int_list_fields: frozenset[str] = field(default_factory=frozenset)

    def parser_for(self, key: str) -> Callable[[Any], Any] | None:
        for attr, parser in _PARSERS.items():
            if key in getattr(self, attr):
                return parser
        return None


def parse_fields(data: dict[str, Any], spec: FieldSpec) -> dict[str, Any]:
    """Return the entries of *data* whose values match *spec*.

    Examples:
        ```python
        spec = FieldSpec(int_fields=frozenset({"max_limit"}))
        parse_fields({"max_limit": "10", "other": 1}, spec)   # {}
        parse_fields({"max_limit": 10}, spec)                 # {'max_limit': 10}
        ```
    """
    result: dict[str, Any] = {}
    for key, value in data.items():
        parser = spec.parser_for(key)
        if parser is None:
            continue
        parsed = parser(value)
        if parsed is not _DROP:
            result[key] = parsed
    return result


__all__ = ["FieldSpec", "parse_fields"]

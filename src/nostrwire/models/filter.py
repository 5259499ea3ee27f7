"""
Subscription filters and single-event matching (NIP-01 ``REQ`` filters).

A [Filter][nostrwire.models.filter.Filter] is built incrementally with set-like
mutators and evaluated against one event at a time with
[matches()][nostrwire.models.filter.Filter.matches]. Every dimension is
optional: an empty ``ids``/``authors``/``kinds`` list or an absent bound
means "no constraint", never "matches nothing".

Collections are insertion-ordered lists. Adding a value that is already
present does nothing; deleting swaps the last element into the freed slot,
so element order is not preserved across deletions.

Examples:
    ```python
    f = Filter()
    f.add_event_kind(EventKind(KnownKind.TEXT_NOTE))
    f.add_tag_value("t", "nostr")
    f.since = 1_700_000_000
    f.to_dict()    # {'kinds': [1], '#t': ['nostr'], 'since': 1700000000}
    f.matches(event)
    ```

See Also:
    [FilterConfig][nostrwire.core.config.FilterConfig]: Application-level
        switch for tag matching.
    [ClientReq][nostrwire.models.messages.ClientReq]: Carries filters on the wire.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from nostrwire.core.config import FilterConfig
from nostrwire.core.exceptions import InvalidFieldError

from ._validation import normalize_hex, validate_int, validate_tag_letter, validate_timestamp
from .event import Event
from .keys import Id, PublicKey
from .kind import EventKind


def _hex_of(value: Id | PublicKey | str, name: str) -> str:
    if isinstance(value, (Id, PublicKey)):
        return value.as_hex()
    return normalize_hex(value, 32, name)


def _swap_remove(values: list[Any], value: Any) -> None:
    try:
        index = values.index(value)
    except ValueError:
        return
    values[index] = values[-1]
    values.pop()


@dataclass(slots=True)
class Filter:
    """Mutable subscription filter.

    Attributes:
        ids: Event ids as lowercase hex.
        authors: Author public keys as lowercase hex.
        kinds: Exact event kinds.
        tags: Single ASCII letter -> accepted first values of tags with that name.
        since: Inclusive lower bound on ``created_at``.
        until: Inclusive upper bound on ``created_at``.
        limit: Maximum number of stored events a relay should return.

    Note:
        Assigning the attributes directly bypasses normalization; prefer the
        ``add_*``/``set_*`` mutators or
        [from_dict()][nostrwire.models.filter.Filter.from_dict].
    """

    ids: list[str] = field(default_factory=list)
    authors: list[str] = field(default_factory=list)
    kinds: list[EventKind] = field(default_factory=list)
    tags: dict[str, list[str]] = field(default_factory=dict)
    since: int | None = None
    until: int | None = None
    limit: int | None = None

    # -- mutators --------------------------------------------------------------

    def add_id(self, id: Id | str) -> None:
        value = _hex_of(id, "id")
        if value not in self.ids:
            self.ids.append(value)

    def del_id(self, id: Id | str) -> None:
        _swap_remove(self.ids, _hex_of(id, "id"))

    def add_author(self, pubkey: PublicKey | str) -> None:
        value = _hex_of(pubkey, "pubkey")
        if value not in self.authors:
            self.authors.append(value)

    def del_author(self, pubkey: PublicKey | str) -> None:
        _swap_remove(self.authors, _hex_of(pubkey, "pubkey"))

    def add_event_kind(self, kind: EventKind) -> None:
        if kind not in self.kinds:
            self.kinds.append(kind)

    def del_event_kind(self, kind: EventKind) -> None:
        _swap_remove(self.kinds, kind)

    def add_tag_value(self, letter: str, value: str) -> None:
        validate_tag_letter(letter)
        values = self.tags.setdefault(letter, [])
        if value not in values:
            values.append(value)

    def del_tag_value(self, letter: str, value: str) -> None:
        """Remove *value*; the letter disappears once its last value is gone."""
        values = self.tags.get(letter)
        if values is None:
            return
        _swap_remove(values, value)
        if not values:
            del self.tags[letter]

    def set_tag_values(self, letter: str, values: list[str]) -> None:
        """Replace all values for *letter* (duplicates collapse, empty clears)."""
        validate_tag_letter(letter)
        unique = list(dict.fromkeys(values))
        if unique:
            self.tags[letter] = unique
        else:
            self.tags.pop(letter, None)

    def clear_tag_values(self, letter: str) -> None:
        self.tags.pop(letter, None)

    # -- matching --------------------------------------------------------------

    def matches(
        self,
        event: Event,
        *,
        match_tags: bool = True,
        config: FilterConfig | None = None,
    ) -> bool:
        """Return True if *event* satisfies every constrained dimension.

        Tag constraints require, for each letter, at least one event tag with
        that name whose first value is in the filter's set (AND across
        letters, OR within one). They are skipped when ``match_tags`` is False.
        A *config* overrides ``match_tags`` with its own setting.
        """
        if config is not None:
            match_tags = config.match_tags
        if self.ids and event.id.as_hex() not in self.ids:
            return False
        if self.authors and event.pubkey.as_hex() not in self.authors:
            return False
        if self.kinds and event.kind not in self.kinds:
            return False
        if self.since is not None and event.created_at < self.since:
            return False
        if self.until is not None and event.created_at > self.until:
            return False
        if match_tags:
            for letter, wanted in self.tags.items():
                if not wanted:
                    continue
                if not any(value in wanted for value in event.tag_values(letter)):
                    return False
        return True

    # -- JSON ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the NIP-01 object, omitting empty and absent fields."""
        out: dict[str, Any] = {}
        if self.ids:
            out["ids"] = list(self.ids)
        if self.authors:
            out["authors"] = list(self.authors)
        if self.kinds:
            out["kinds"] = [k.value for k in self.kinds]
        for letter in sorted(self.tags):
            if self.tags[letter]:
                out[f"#{letter}"] = list(self.tags[letter])
        if self.since is not None:
            out["since"] = self.since
        if self.until is not None:
            out["until"] = self.until
        if self.limit is not None:
            out["limit"] = self.limit
        return out

    @classmethod
    def from_dict(cls, data: Any) -> Filter:
        """Parse a NIP-01 filter object.

        Missing keys default to empty/absent. Only keys of the exact form
        ``#<letter>`` populate ``tags``; other unknown keys are ignored.

        Raises:
            InvalidFieldError: If a present field has the wrong type or value.
        """
        if not isinstance(data, dict):
            raise InvalidFieldError("filter", f"must be a JSON object, got {type(data).__name__}")
        f = cls()
        for item in _list_of(data, "ids"):
            f.add_id(item)
        for item in _list_of(data, "authors"):
            f.add_author(item)
        for item in _list_of(data, "kinds"):
            f.add_event_kind(EventKind(item))
        for key, raw in data.items():
            if _is_tag_key(key):
                values = _list_of(data, key)
                for value in values:
                    if not isinstance(value, str):
                        raise InvalidFieldError(key, f"values must be strings, got {raw!r}")
                f.set_tag_values(key[1], values)
        for name in ("since", "until"):
            if data.get(name) is not None:
                validate_timestamp(data[name], name)
                setattr(f, name, data[name])
        if data.get("limit") is not None:
            validate_int(data["limit"], "limit")
            if data["limit"] < 0:
                raise InvalidFieldError("limit", "must be non-negative")
            f.limit = data["limit"]
        return f

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def from_json(cls, raw: str | bytes) -> Filter:
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise InvalidFieldError("filter", f"invalid JSON: {e}") from e
        return cls.from_dict(data)


def _list_of(data: dict[str, Any], key: str) -> list[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise InvalidFieldError(key, f"must be a list, got {type(value).__name__}")
    return value


def _is_tag_key(key: str) -> bool:
    if len(key) != 2:  # noqa: PLR2004
        return False
    return key[0] == "#" and key[1].isascii() and key[1].isalpha()

"""
Event tags: ordered string fields with a name and positional values.

A [Tag][nostrwire.models.tag.Tag] is stored exactly as it appears on the
wire, an ordered tuple of strings. The first field is the tag name and must
be non-empty; everything after it is positional. Unknown tag shapes
round-trip unchanged because nothing is ever reinterpreted or dropped.

Typed constructors (``new_*``) and parsers (``parse_*``) cover the tags the
protocol gives meaning to. Parsers raise
[InvalidFieldError][nostrwire.core.exceptions.InvalidFieldError] when the
tag does not have the expected name or shape.

Examples:
    ```python
    tag = Tag.new_event(event_id, "wss://relay.example", "reply")
    tag.to_list()       # ['e', '<hex>', 'wss://relay.example', 'reply']
    tag.parse_event()   # (Id(...), 'wss://relay.example', 'reply')
    Tag(("x", "a", "b", "c")).trailing(1)   # ('a', 'b', 'c')
    ```

See Also:
    [Event][nostrwire.models.event.Event]: Carries a tuple of tags.
    [Filter][nostrwire.models.filter.Filter]: Matches ``#<letter>`` constraints
        against tag names and first values.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from nostrwire.core.exceptions import InvalidFieldError

from ._validation import validate_str
from .keys import Id, PublicKey
from .kind import EventKind
from .pointers import NAddr


@dataclass(frozen=True, slots=True)
class Tag:
    """Immutable tag.

    Attributes:
        fields: All fields, name first. Lists are accepted and stored as a tuple.

    Raises:
        InvalidFieldError: If the tag is empty, the name is empty, or a field
            is not a string.
    """

    fields: tuple[str, ...]

    def __post_init__(self) -> None:
        if isinstance(self.fields, str):
            raise InvalidFieldError("tag", "fields must be a sequence, not a string")
        fields = tuple(self.fields)
        for value in fields:
            validate_str(value, "tag")
        if not fields or not fields[0]:
            raise InvalidFieldError("tag_name", "tag name must not be empty")
        object.__setattr__(self, "fields", fields)

    def __len__(self) -> int:
        return len(self.fields)

    @property
    def tagname(self) -> str:
        return self.fields[0]

    @property
    def value(self) -> str | None:
        """The first positional value, or ``None`` for a bare name."""
        return self.get(1)

    def get(self, index: int) -> str | None:
        """Return the field at *index*, or ``None`` if the tag is shorter."""
        if index < len(self.fields):
            return self.fields[index]
        return None

    def trailing(self, start: int) -> tuple[str, ...]:
        """Return the fields from position *start* to the end (may be empty)."""
        return self.fields[start:]

    def to_list(self) -> list[str]:
        return list(self.fields)

    @classmethod
    def from_list(cls, raw: Any) -> Tag:
        """Build a tag from a decoded JSON array.

        Raises:
            InvalidFieldError: If *raw* is not a list of strings with a name.
        """
        if not isinstance(raw, list):
            raise InvalidFieldError("tag", f"must be a list, got {type(raw).__name__}")
        return cls(tuple(raw))

    # -- constructors ----------------------------------------------------------

    @classmethod
    def _build(cls, name: str, *values: str | None) -> Tag:
        # Optional positions become "" while a later one is set, trailing Nones are cut
        trimmed = list(values)
        while trimmed and trimmed[-1] is None:
            trimmed.pop()
        return cls((name, *("" if v is None else v for v in trimmed)))

    @classmethod
    def new_event(cls, id: Id, hint: str | None = None, marker: str | None = None) -> Tag:
        return cls._build("e", id.as_hex(), hint, marker)

    @classmethod
    def new_pubkey(
        cls, pubkey: PublicKey, hint: str | None = None, petname: str | None = None
    ) -> Tag:
        return cls._build("p", pubkey.as_hex(), hint, petname)

    @classmethod
    def new_address(cls, naddr: NAddr, marker: str | None = None) -> Tag:
        """Build an ``a`` tag; the first relay of *naddr*, if any, becomes the hint."""
        hint = naddr.relays[0] if naddr.relays else None
        return cls._build("a", naddr.as_coordinate(), hint, marker)

    @classmethod
    def new_quote(cls, id: Id, hint: str | None = None) -> Tag:
        return cls._build("q", id.as_hex(), hint)

    @classmethod
    def new_hashtag(cls, hashtag: str) -> Tag:
        return cls(("t", hashtag))

    @classmethod
    def new_subject(cls, subject: str) -> Tag:
        return cls(("subject", subject))

    @classmethod
    def new_identifier(cls, d: str) -> Tag:
        return cls(("d", d))

    @classmethod
    def new_kind(cls, kind: EventKind) -> Tag:
        return cls(("k", str(kind.value)))

    @classmethod
    def new_relay(cls, url: str, marker: str | None = None) -> Tag:
        return cls._build("r", url, marker)

    @classmethod
    def new_content_warning(cls, reason: str | None = None) -> Tag:
        return cls._build("content-warning", reason)

    # -- parsers ---------------------------------------------------------------

    def _expect(self, name: str, min_len: int = 2) -> None:
        if self.tagname != name:
            raise InvalidFieldError("tag", f"expected a {name!r} tag, got {self.tagname!r}")
        if len(self.fields) < min_len:
            raise InvalidFieldError("tag", f"{name!r} tag is missing its value")

    def _optional(self, index: int) -> str | None:
        value = self.get(index)
        return value or None

    def parse_event(self) -> tuple[Id, str | None, str | None]:
        """Return ``(id, hint, marker)`` from an ``e`` tag."""
        self._expect("e")
        return Id.from_hex(self.fields[1]), self._optional(2), self._optional(3)

    def parse_pubkey(self) -> tuple[PublicKey, str | None, str | None]:
        """Return ``(pubkey, hint, petname)`` from a ``p`` tag."""
        self._expect("p")
        return PublicKey.from_hex(self.fields[1]), self._optional(2), self._optional(3)

    def parse_address(self) -> tuple[NAddr, str | None]:
        """Return ``(naddr, marker)`` from an ``a`` tag.

        The hint, when present, becomes the single relay of the pointer.
        """
        self._expect("a")
        hint = self._optional(2)
        naddr = NAddr.from_coordinate(self.fields[1], (hint,) if hint else ())
        return naddr, self._optional(3)

    def parse_quote(self) -> tuple[Id, str | None]:
        """Return ``(id, hint)`` from a ``q`` tag."""
        self._expect("q")
        return Id.from_hex(self.fields[1]), self._optional(2)

    def parse_hashtag(self) -> str:
        self._expect("t")
        return self.fields[1]

    def parse_subject(self) -> str:
        self._expect("subject")
        return self.fields[1]

    def parse_identifier(self) -> str:
        self._expect("d")
        return self.fields[1]

    def parse_kind(self) -> EventKind:
        self._expect("k")
        raw = self.fields[1]
        if not (raw.isascii() and raw.isdigit()):
            raise InvalidFieldError("kind", f"not a number: {raw!r}")
        return EventKind(int(raw))

    def parse_relay(self) -> tuple[str, str | None]:
        """Return ``(url, marker)`` from an ``r`` tag. The URL is not validated."""
        self._expect("r")
        return self.fields[1], self._optional(2)

    def parse_content_warning(self) -> str | None:
        """Return the reason of a ``content-warning`` tag, if one is given."""
        self._expect("content-warning", min_len=1)
        return self._optional(1)


def tags_from_json(raw: Any) -> tuple[Tag, ...]:
    """Convert a decoded JSON array of arrays into tags.

    Raises:
        InvalidFieldError: If *raw* is not a list or an entry is not a valid tag.
    """
    if not isinstance(raw, list):
        raise InvalidFieldError("tags", f"must be a list, got {type(raw).__name__}")
    return tuple(Tag.from_list(item) for item in raw)


def tags_to_json(tags: Iterable[Tag]) -> list[list[str]]:
    return [tag.to_list() for tag in tags]


# ---------------------------------------------------------------------------
# Tag list helpers
# ---------------------------------------------------------------------------


def _position(tags: list[Tag], predicate: Any) -> int | None:
    for i, tag in enumerate(tags):
        try:
            if predicate(tag):
                return i
        except InvalidFieldError:
            continue
    return None


def _append(tags: list[Tag], tag: Tag) -> int:
    tags.append(tag)
    return len(tags) - 1


def add_pubkey_to_tags(tags: list[Tag], pubkey: PublicKey, hint: str | None = None) -> int:
    """Add a ``p`` tag unless one for *pubkey* exists; return its index."""
    found = _position(tags, lambda t: t.tagname == "p" and t.parse_pubkey()[0] == pubkey)
    if found is not None:
        return found
    return _append(tags, Tag.new_pubkey(pubkey, hint))


def add_event_to_tags(
    tags: list[Tag],
    id: Id,
    hint: str | None = None,
    marker: str | None = None,
    *,
    use_quote: bool = False,
) -> int:
    """Add a reference to event *id* unless one exists; return its index.

    A ``mention`` with ``use_quote`` is written as a NIP-18 ``q`` tag;
    every other reference is an ``e`` tag carrying the marker.
    """
    if marker == "mention" and use_quote:
        found = _position(tags, lambda t: t.tagname == "q" and t.parse_quote()[0] == id)
        if found is not None:
            return found
        return _append(tags, Tag.new_quote(id, hint))

    found = _position(tags, lambda t: t.tagname == "e" and t.parse_event()[0] == id)
    if found is not None:
        return found
    return _append(tags, Tag.new_event(id, hint, marker))


def add_addr_to_tags(tags: list[Tag], naddr: NAddr, marker: str | None = None) -> int:
    """Add an ``a`` tag unless one for the same address exists; return its index."""
    found = _position(tags, lambda t: t.tagname == "a" and t.parse_address()[0] == naddr)
    if found is not None:
        return found
    return _append(tags, Tag.new_address(naddr, marker))


def add_subject_to_tags_if_missing(tags: list[Tag], subject: str) -> int:
    """Add a ``subject`` tag unless any exists; return the index of the subject tag."""
    found = _position(tags, lambda t: t.tagname == "subject")
    if found is not None:
        return found
    return _append(tags, Tag.new_subject(subject))

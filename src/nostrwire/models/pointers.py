"""
Pointer values referencing events, addresses and profiles.

Pointers pair identity fields with relay hints. Hints are connectivity
metadata, not identity: two pointers naming the same target with different
hints are equal and hash the same. Equality and hashing are therefore
written out explicitly over the identity fields instead of relying on the
generated dataclass methods.

The bech32/TLV text form of each pointer lives in
[nostrwire.nips.nip19][]; this module is pure data.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from nostrwire.core.exceptions import InvalidFieldError

from ._validation import validate_instance, validate_str
from .keys import Id, PublicKey
from .kind import EventKind


def _freeze_relays(relays: Any) -> tuple[str, ...]:
    if isinstance(relays, str):
        raise InvalidFieldError("relays", "must be a sequence of URLs, not a single string")
    frozen = tuple(relays)
    for relay in frozen:
        validate_str(relay, "relays")
    return frozen


@dataclass(frozen=True, slots=True, eq=False)
class NAddr:
    """Address of a (parameterized) replaceable event.

    Attributes:
        d: The ``d`` tag of the target event, or ``""`` for plain replaceable kinds.
        kind: Kind of the target event.
        author: Public key of the target event's author.
        relays: Relay URLs where the event may be found (not part of identity).

    Examples:
        ```python
        a = NAddr("hello", EventKind(30023), author, relays=("wss://a.example",))
        b = NAddr("hello", EventKind(30023), author)
        a == b            # True
        hash(a) == hash(b)  # True
        ```
    """

    d: str
    kind: EventKind
    author: PublicKey
    relays: tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        validate_str(self.d, "d")
        object.__setattr__(self, "relays", _freeze_relays(self.relays))
        validate_instance(self.kind, EventKind, "kind")
        validate_instance(self.author, PublicKey, "author")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NAddr):
            return NotImplemented
        return self.d == other.d and self.kind == other.kind and self.author == other.author

    def __hash__(self) -> int:
        return hash((self.d, self.kind, self.author))

    def as_coordinate(self) -> str:
        """Return ``"<kind>:<author hex>:<d>"``, the value of an ``a`` tag."""
        return f"{self.kind.value}:{self.author.as_hex()}:{self.d}"

    @classmethod
    def from_coordinate(cls, value: str, relays: tuple[str, ...] = ()) -> NAddr:
        """Parse an ``a`` tag value.

        The ``d`` part may itself contain colons; only the first two
        separators are significant.

        Raises:
            InvalidFieldError: If the value is not ``kind:pubkey:d``.
        """
        validate_str(value, "a")
        parts = value.split(":", 2)
        if len(parts) != 3:  # noqa: PLR2004 - kind, pubkey, d
            raise InvalidFieldError("a", f"expected kind:pubkey:d, got {value!r}")
        kind_str, author_hex, d = parts
        if not (kind_str.isascii() and kind_str.isdigit()):
            raise InvalidFieldError("kind", f"not a number: {kind_str!r}")
        return cls(
            d=d,
            relays=relays,
            kind=EventKind(int(kind_str)),
            author=PublicKey.from_hex(author_hex),
        )


@dataclass(frozen=True, slots=True, eq=False)
class NEvent:
    """Pointer to a specific event by id, with optional hints.

    Identity is the event ``id`` alone; relays, author and kind are hints.
    """

    id: Id
    relays: tuple[str, ...] = field(default=())
    author: PublicKey | None = None
    kind: EventKind | None = None

    def __post_init__(self) -> None:
        validate_instance(self.id, Id, "id")
        object.__setattr__(self, "relays", _freeze_relays(self.relays))
        if self.author is not None:
            validate_instance(self.author, PublicKey, "author")
        if self.kind is not None:
            validate_instance(self.kind, EventKind, "kind")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NEvent):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass(frozen=True, slots=True, eq=False)
class NProfile:
    """Pointer to a profile (public key) with relay hints.

    Identity is the ``pubkey`` alone.
    """

    pubkey: PublicKey
    relays: tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        validate_instance(self.pubkey, PublicKey, "pubkey")
        object.__setattr__(self, "relays", _freeze_relays(self.relays))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NProfile):
            return NotImplemented
        return self.pubkey == other.pubkey

    def __hash__(self) -> int:
        return hash(self.pubkey)

"""
Events at the three stages of their life: unsigned, hashed, signed.

* [PreEvent][nostrwire.models.event.PreEvent] -- the author's draft: pubkey,
  timestamp, kind, tags and content.
* [Rumor][nostrwire.models.event.Rumor] -- a draft with its id computed but
  no signature (NIP-59 gift-wrap payloads travel in this form).
* [Event][nostrwire.models.event.Event] -- the signed wire event.

All three are frozen dataclasses validated in ``__post_init__`` and share the
NIP-01 JSON object layout. ``from_dict`` is strict: every field is required
and checked, and failures raise
[InvalidFieldError][nostrwire.core.exceptions.InvalidFieldError] naming the
offending field.

See Also:
    [serialize_for_id()][nostrwire.models.identity.serialize_for_id]: The
        canonical bytes behind every id.
    [KeysSigner][nostrwire.utils.signer.KeysSigner]: Turns a ``PreEvent`` into
        an ``Event``.
    [EVENT_CHAIN][nostrwire.versioned.event.EVENT_CHAIN]: Normalizes historical
        event records into ``Event``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from nostrwire.core.exceptions import InvalidFieldError

from ._validation import validate_instance, validate_str, validate_timestamp
from .identity import compute_id, serialize_for_id
from .keys import Id, PublicKey, Signature
from .kind import EventKind
from .tag import Tag, tags_from_json, tags_to_json


def _freeze_tags(tags: Any) -> tuple[Tag, ...]:
    if isinstance(tags, str):
        raise InvalidFieldError("tags", "must be a sequence of Tag, not a string")
    frozen = tuple(tags)
    for tag in frozen:
        validate_instance(tag, Tag, "tags")
    return frozen


def _validate_draft(obj: Any) -> None:
    validate_instance(obj.pubkey, PublicKey, "pubkey")
    validate_timestamp(obj.created_at, "created_at")
    validate_instance(obj.kind, EventKind, "kind")
    object.__setattr__(obj, "tags", _freeze_tags(obj.tags))
    validate_str(obj.content, "content")


def _require(data: Any, *keys: str) -> None:
    if not isinstance(data, dict):
        raise InvalidFieldError("event", f"must be a JSON object, got {type(data).__name__}")
    for key in keys:
        if key not in data:
            raise InvalidFieldError(key, "missing")


def _draft_fields(data: dict[str, Any]) -> dict[str, Any]:
    return {
        "pubkey": PublicKey.from_hex(data["pubkey"]),
        "created_at": data["created_at"],
        "kind": EventKind(data["kind"]),
        "tags": tags_from_json(data["tags"]),
        "content": data["content"],
    }


def _loads(raw: str | bytes) -> Any:
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidFieldError("event", f"invalid JSON: {e}") from e


@dataclass(frozen=True, slots=True)
class PreEvent:
    """Unsigned event draft.

    Attributes:
        pubkey: Author public key.
        created_at: Unix timestamp in seconds (non-negative).
        kind: Event kind.
        tags: Tags in wire order.
        content: Arbitrary text (possibly encrypted).
    """

    pubkey: PublicKey
    created_at: int
    kind: EventKind
    tags: tuple[Tag, ...]
    content: str

    def __post_init__(self) -> None:
        _validate_draft(self)

    def canonical_bytes(self) -> bytes:
        """Return the bytes that are hashed into the event id."""
        return serialize_for_id(self.pubkey, self.created_at, self.kind, self.tags, self.content)

    def compute_id(self) -> Id:
        return compute_id(self.pubkey, self.created_at, self.kind, self.tags, self.content)

    def to_rumor(self) -> Rumor:
        """Hash the draft into an unsigned [Rumor][nostrwire.models.event.Rumor]."""
        return Rumor(
            id=self.compute_id(),
            pubkey=self.pubkey,
            created_at=self.created_at,
            kind=self.kind,
            tags=self.tags,
            content=self.content,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "pubkey": self.pubkey.as_hex(),
            "created_at": self.created_at,
            "kind": self.kind.value,
            "tags": tags_to_json(self.tags),
            "content": self.content,
        }

    @classmethod
    def from_dict(cls, data: Any) -> PreEvent:
        _require(data, "pubkey", "created_at", "kind", "tags", "content")
        return cls(**_draft_fields(data))

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def from_json(cls, raw: str | bytes) -> PreEvent:
        return cls.from_dict(_loads(raw))


@dataclass(frozen=True, slots=True)
class Rumor:
    """Event with an id but no signature.

    The id is taken as given; use [has_valid_id()][nostrwire.models.event.Rumor.has_valid_id]
    to check it against the content.
    """

    id: Id
    pubkey: PublicKey
    created_at: int
    kind: EventKind
    tags: tuple[Tag, ...]
    content: str

    def __post_init__(self) -> None:
        validate_instance(self.id, Id, "id")
        _validate_draft(self)

    def canonical_bytes(self) -> bytes:
        return serialize_for_id(self.pubkey, self.created_at, self.kind, self.tags, self.content)

    def has_valid_id(self) -> bool:
        computed = compute_id(self.pubkey, self.created_at, self.kind, self.tags, self.content)
        return computed == self.id

    def to_pre_event(self) -> PreEvent:
        return PreEvent(self.pubkey, self.created_at, self.kind, self.tags, self.content)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id.as_hex(),
            "pubkey": self.pubkey.as_hex(),
            "created_at": self.created_at,
            "kind": self.kind.value,
            "tags": tags_to_json(self.tags),
            "content": self.content,
        }

    @classmethod
    def from_dict(cls, data: Any) -> Rumor:
        _require(data, "id", "pubkey", "created_at", "kind", "tags", "content")
        return cls(id=Id.from_hex(data["id"]), **_draft_fields(data))

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def from_json(cls, raw: str | bytes) -> Rumor:
        return cls.from_dict(_loads(raw))


@dataclass(frozen=True, slots=True)
class Event:
    """Signed Nostr event.

    Construction validates field types and lengths only. Whether ``id``
    matches the content is checked by
    [has_valid_id()][nostrwire.models.event.Event.has_valid_id]; whether
    ``sig`` is a valid signature is the signer's business
    ([verify_event()][nostrwire.utils.signer.verify_event]).

    Examples:
        ```python
        event = Event.from_json(raw)
        event.kind.is_replaceable()
        event.to_dict()["tags"]   # [['e', '...'], ['p', '...']]
        ```
    """

    id: Id
    pubkey: PublicKey
    created_at: int
    kind: EventKind
    tags: tuple[Tag, ...]
    content: str
    sig: Signature

    def __post_init__(self) -> None:
        validate_instance(self.id, Id, "id")
        _validate_draft(self)
        validate_instance(self.sig, Signature, "sig")

    def canonical_bytes(self) -> bytes:
        return serialize_for_id(self.pubkey, self.created_at, self.kind, self.tags, self.content)

    def has_valid_id(self) -> bool:
        computed = compute_id(self.pubkey, self.created_at, self.kind, self.tags, self.content)
        return computed == self.id

    def to_rumor(self) -> Rumor:
        """Drop the signature."""
        return Rumor(self.id, self.pubkey, self.created_at, self.kind, self.tags, self.content)

    def to_pre_event(self) -> PreEvent:
        return PreEvent(self.pubkey, self.created_at, self.kind, self.tags, self.content)

    def tag_values(self, name: str) -> list[str]:
        """Return the first value of every tag called *name*, in order."""
        return [tag.fields[1] for tag in self.tags if tag.tagname == name and len(tag) > 1]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id.as_hex(),
            "pubkey": self.pubkey.as_hex(),
            "created_at": self.created_at,
            "kind": self.kind.value,
            "tags": tags_to_json(self.tags),
            "content": self.content,
            "sig": self.sig.as_hex(),
        }

    @classmethod
    def from_dict(cls, data: Any) -> Event:
        """Build an event from a decoded NIP-01 JSON object.

        Raises:
            InvalidFieldError: If a field is missing or invalid; ``field``
                names it.
        """
        _require(data, "id", "pubkey", "created_at", "kind", "tags", "content", "sig")
        return cls(
            id=Id.from_hex(data["id"]),
            sig=Signature.from_hex(data["sig"]),
            **_draft_fields(data),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def from_json(cls, raw: str | bytes) -> Event:
        return cls.from_dict(_loads(raw))

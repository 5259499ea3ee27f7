"""
Event kind taxonomy: named protocol kinds plus open numeric ranges.

[EventKind][nostrwire.models.kind.EventKind] is a single value type over the
whole unsigned 32-bit space. Every number maps to exactly one variant:

* a named [KnownKind][nostrwire.models.constants.KnownKind] when the number
  is in the protocol table (named numbers always win over ranges);
* otherwise the [KindRange][nostrwire.models.constants.KindRange] that
  contains it (job request, job result, replaceable, ephemeral);
* otherwise ``KindRange.OTHER``.

The variant is derived from the number, so ``EventKind.from_u32(n).to_u32()
== n`` for every ``n`` and equality is plain numeric equality.

See Also:
    [Filter][nostrwire.models.filter.Filter]: Matches kinds by exact equality.
    [decode_naddr()][nostrwire.nips.nip19.decode_naddr]: Requires a replaceable kind.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from nostrwire.core.exceptions import InvalidFieldError

from ._validation import validate_u32
from .constants import (
    EPHEMERAL_RANGE,
    JOB_REQUEST_RANGE,
    JOB_RESULT_RANGE,
    PARAMETERIZED_REPLACEABLE_RANGE,
    REPLACEABLE_RANGE,
    KindRange,
    KnownKind,
)


_KNOWN_BY_NUMBER: dict[int, KnownKind] = {k.value: k for k in KnownKind}

_FEED_DISPLAYABLE = frozenset(
    {
        KnownKind.TEXT_NOTE,
        KnownKind.ENCRYPTED_DIRECT_MESSAGE,
        KnownKind.REPOST,
        KnownKind.DM_CHAT,
        KnownKind.GENERIC_REPOST,
        KnownKind.CHANNEL_MESSAGE,
        KnownKind.FILE_METADATA,
        KnownKind.LIVE_CHAT_MESSAGE,
        KnownKind.COMMUNITY_POST,
        KnownKind.LONG_FORM_CONTENT,
        KnownKind.DRAFT_LONG_FORM_CONTENT,
    }
)

_AUGMENTS_FEED = frozenset(
    {
        KnownKind.EVENT_DELETION,
        KnownKind.REACTION,
        KnownKind.TIMESTAMP,
        KnownKind.LABEL,
        KnownKind.REPORTING,
        KnownKind.ZAP,
    }
)

_DIRECT_MESSAGE = frozenset(
    {
        KnownKind.ENCRYPTED_DIRECT_MESSAGE,
        KnownKind.DM_CHAT,
        KnownKind.GIFT_WRAP,
    }
)

# Job request/result ranges are also encrypted; see contents_are_encrypted()
_ENCRYPTED_CONTENT = frozenset(
    {
        KnownKind.ENCRYPTED_DIRECT_MESSAGE,
        KnownKind.MUTE_LIST,
        KnownKind.PIN_LIST,
        KnownKind.BOOKMARK_LIST,
        KnownKind.COMMUNITY_LIST,
        KnownKind.PUBLIC_CHATS_LIST,
        KnownKind.BLOCKED_RELAYS_LIST,
        KnownKind.SEARCH_RELAYS_LIST,
        KnownKind.INTERESTS_LIST,
        KnownKind.USER_EMOJI_LIST,
        KnownKind.WALLET_REQUEST,
        KnownKind.WALLET_RESPONSE,
        KnownKind.NOSTR_CONNECT,
    }
)


def _in(value: int, bounds: tuple[int, int]) -> bool:
    return bounds[0] <= value <= bounds[1]


def _classify(value: int) -> tuple[KnownKind | None, KindRange | None]:
    known = _KNOWN_BY_NUMBER.get(value)
    if known is not None:
        return known, None
    if _in(value, JOB_REQUEST_RANGE):
        return None, KindRange.JOB_REQUEST
    if _in(value, JOB_RESULT_RANGE):
        return None, KindRange.JOB_RESULT
    if _in(value, REPLACEABLE_RANGE):
        return None, KindRange.REPLACEABLE
    if _in(value, EPHEMERAL_RANGE):
        return None, KindRange.EPHEMERAL
    return None, KindRange.OTHER


@dataclass(frozen=True, slots=True, order=True)
class EventKind:
    """Immutable event kind over the full ``u32`` space.

    Construct from any integer (including a
    [KnownKind][nostrwire.models.constants.KnownKind] member); the variant is
    derived once in ``__post_init__``.

    Attributes:
        value: The wire number, ``0 <= value <= 2**32 - 1``.
        known: The named kind, or ``None`` for range variants.
        range: The open range variant, or ``None`` for named kinds.

    Raises:
        InvalidFieldError: If *value* is not an int in the ``u32`` range.

    Examples:
        ```python
        EventKind.from_u32(10002).known    # KnownKind.RELAY_LIST
        EventKind.from_u32(15000).range    # KindRange.REPLACEABLE
        EventKind(KnownKind.TEXT_NOTE) == EventKind(1)  # True
        ```
    """

    value: int
    known: KnownKind | None = field(default=None, init=False, compare=False, repr=False)
    range: KindRange | None = field(default=None, init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        validate_u32(self.value, "kind")
        value = int(self.value)
        known, kind_range = _classify(value)
        object.__setattr__(self, "value", value)
        object.__setattr__(self, "known", known)
        object.__setattr__(self, "range", kind_range)

    def __repr__(self) -> str:
        if self.known is not None:
            return f"EventKind.{self.known.name}"
        assert self.range is not None  # noqa: S101  # Always set in __post_init__
        return f"EventKind.{self.range.name}({self.value})"

    def __int__(self) -> int:
        return self.value

    def __index__(self) -> int:
        return self.value

    @classmethod
    def from_u32(cls, value: int) -> EventKind:
        """Classify a wire integer. Total over ``0..2**32 - 1``."""
        return cls(value)

    def to_u32(self) -> int:
        """Return the wire integer (exact inverse of ``from_u32``)."""
        return self.value

    @classmethod
    def iter_known(cls) -> Iterator[EventKind]:
        """Iterate over the named kinds in declaration order.

        Each call returns a fresh iterator over the same process-wide table;
        range variants are never produced.
        """
        return iter(_WELL_KNOWN_KINDS)

    # -- numeric classification ------------------------------------------------

    def is_job_request(self) -> bool:
        return _in(self.value, JOB_REQUEST_RANGE)

    def is_job_result(self) -> bool:
        return _in(self.value, JOB_RESULT_RANGE)

    def is_replaceable(self) -> bool:
        """True for replaceable kinds, parameterized ones included.

        Metadata and contact lists are replaceable by protocol rule; every
        number in 10000-19999 or 30000-39999 is replaceable by range.
        """
        if self.known in (KnownKind.METADATA, KnownKind.CONTACT_LIST):
            return True
        return _in(self.value, REPLACEABLE_RANGE) or _in(
            self.value, PARAMETERIZED_REPLACEABLE_RANGE
        )

    def is_ephemeral(self) -> bool:
        return _in(self.value, EPHEMERAL_RANGE)

    def is_parameterized_replaceable(self) -> bool:
        return _in(self.value, PARAMETERIZED_REPLACEABLE_RANGE)

    # -- policy tables -----------------------------------------------------------

    def is_feed_related(self) -> bool:
        return self.is_feed_displayable() or self.augments_feed_related()

    def is_feed_displayable(self) -> bool:
        return self.known in _FEED_DISPLAYABLE

    def augments_feed_related(self) -> bool:
        return self.known in _AUGMENTS_FEED

    def is_direct_message_related(self) -> bool:
        return self.known in _DIRECT_MESSAGE

    def contents_are_encrypted(self) -> bool:
        """True if the content is expected to be encrypted (or empty)."""
        if self.range in (KindRange.JOB_REQUEST, KindRange.JOB_RESULT):
            return True
        return self.known in _ENCRYPTED_CONTENT


_WELL_KNOWN_KINDS: tuple[EventKind, ...] = tuple(EventKind(k) for k in KnownKind)


@dataclass(frozen=True, slots=True)
class EventKindOrRange:
    """A single kind or an inclusive ``[start, end]`` kind range.

    Used by NIP-11 retention entries, where ``kinds`` mixes plain numbers
    and two-element ranges.
    """

    start: EventKind
    end: EventKind | None = None

    def __post_init__(self) -> None:
        if self.end is not None and self.end.value < self.start.value:
            raise InvalidFieldError(
                "kinds", f"range end {self.end.value} is before start {self.start.value}"
            )

    def contains(self, kind: EventKind) -> bool:
        if self.end is None:
            return kind == self.start
        return self.start.value <= kind.value <= self.end.value

    @classmethod
    def from_json(cls, raw: Any) -> EventKindOrRange:
        """Parse ``1`` or ``[10000, 19999]``.

        Raises:
            InvalidFieldError: If the value is neither an int nor a pair of ints.
        """
        if isinstance(raw, list):
            if len(raw) != 2:  # noqa: PLR2004 - [start, end] pair
                raise InvalidFieldError("kinds", f"range must have 2 elements, got {len(raw)}")
            return cls(EventKind(raw[0]), EventKind(raw[1]))
        return cls(EventKind(raw))

    def to_json(self) -> int | list[int]:
        if self.end is None:
            return self.start.value
        return [self.start.value, self.end.value]

"""Frozen value types for Nostr entities, with zero I/O.

The models layer sits directly on [nostrwire.core][] (exceptions and the
structured logger). Every immutable model is a
``@dataclass(frozen=True, slots=True)`` validated in ``__post_init__``, so an
invalid instance never escapes its constructor. The one mutable model is
[Filter][nostrwire.models.filter.Filter], which callers build incrementally.

Attributes:
    EventKind: Total classification of ``u32`` kind numbers into named kinds
        ([KnownKind][nostrwire.models.constants.KnownKind]) and open ranges
        ([KindRange][nostrwire.models.constants.KindRange]).
    Id, PublicKey, PrivateKey, Signature: Fixed-width binary values with hex
        conversion.
    Tag: Ordered string fields with typed constructors and parsers.
    PreEvent, Rumor, Event: The unsigned, hashed and signed stages of an event.
    Filter: Subscription predicate with set-like mutators.
    NAddr, NEvent, NProfile: Pointers whose equality ignores relay hints.
    Metadata: Kind-0 profile content.
    RelayUrl, RelayList: Validated relay URLs and NIP-65 relay lists.

See Also:
    [nostrwire.nips.nip19][]: Text encoding of pointers and keys.
    [nostrwire.versioned][]: Upgrade of historical shapes into these models.
"""

from .constants import (
    EPHEMERAL_RANGE,
    JOB_REQUEST_RANGE,
    JOB_RESULT_RANGE,
    PARAMETERIZED_REPLACEABLE_RANGE,
    REPLACEABLE_RANGE,
    SIGNABLE_KIND_MAX,
    KindRange,
    KnownKind,
    NetworkType,
)
from .event import Event, PreEvent, Rumor
from .filter import Filter
from .identity import compute_id, serialize_for_id
from .keys import Id, PrivateKey, PublicKey, Signature
from .kind import EventKind, EventKindOrRange
from .messages import (
    ClientAuth,
    ClientClose,
    ClientCount,
    ClientEvent,
    ClientMessage,
    ClientReq,
    RelayAuth,
    RelayClosed,
    RelayCount,
    RelayEose,
    RelayEvent,
    RelayMessage,
    RelayNotice,
    RelayOk,
    parse_client_message,
    parse_relay_message,
)
from .metadata import Metadata
from .pointers import NAddr, NEvent, NProfile
from .relay import RelayList, RelayUrl, RelayUsage
from .tag import (
    Tag,
    add_addr_to_tags,
    add_event_to_tags,
    add_pubkey_to_tags,
    add_subject_to_tags_if_missing,
    tags_from_json,
    tags_to_json,
)


__all__ = [
    "EPHEMERAL_RANGE",
    "JOB_REQUEST_RANGE",
    "JOB_RESULT_RANGE",
    "PARAMETERIZED_REPLACEABLE_RANGE",
    "REPLACEABLE_RANGE",
    "SIGNABLE_KIND_MAX",
    "ClientAuth",
    "ClientClose",
    "ClientCount",
    "ClientEvent",
    "ClientMessage",
    "ClientReq",
    "Event",
    "EventKind",
    "EventKindOrRange",
    "Filter",
    "Id",
    "KindRange",
    "KnownKind",
    "Metadata",
    "NAddr",
    "NEvent",
    "NProfile",
    "NetworkType",
    "PreEvent",
    "PrivateKey",
    "PublicKey",
    "RelayAuth",
    "RelayClosed",
    "RelayCount",
    "RelayEose",
    "RelayEvent",
    "RelayList",
    "RelayMessage",
    "RelayNotice",
    "RelayOk",
    "RelayUrl",
    "RelayUsage",
    "Rumor",
    "Signature",
    "Tag",
    "add_addr_to_tags",
    "add_event_to_tags",
    "add_pubkey_to_tags",
    "add_subject_to_tags_if_missing",
    "compute_id",
    "parse_client_message",
    "parse_relay_message",
    "serialize_for_id",
    "tags_from_json",
    "tags_to_json",
]

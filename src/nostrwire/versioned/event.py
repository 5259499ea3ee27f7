"""
Historical event, pre-event and rumor shapes.

Version 1 records carry ``TagV1`` tags and an optional ``ots``
(OpenTimestamps attestation) field that was later removed from events.
Version 2 records switch to ``TagV2`` tags and drop ``ots``. The canonical
shapes are [Event][nostrwire.models.event.Event],
[PreEvent][nostrwire.models.event.PreEvent] and
[Rumor][nostrwire.models.event.Rumor].

Upgrading to the canonical shape is where ids, keys, signatures, kinds and
timestamps are first validated, so a corrupt V1 record fails with the
specific [Why][nostrwire.versioned.why.Why] of its first bad field.
"""

from __future__ import annotations

from typing import Any

from pydantic import StrictInt

from nostrwire.models.event import Event, PreEvent, Rumor
from nostrwire.models.keys import Id, PublicKey, Signature
from nostrwire.models.kind import EventKind

from .chain import Step, VersionChain, VersionedRecord
from .tag import TagV1Wire, TagV2Wire, tag_to_v2, tag_v1_to_v2, tag_v2_to_tag, tag_v2_to_v1


class PreEventV1(VersionedRecord):
    pubkey: str
    created_at: StrictInt
    kind: StrictInt
    tags: list[TagV1Wire] = []
    content: str
    ots: str | None = None


class PreEventV2(VersionedRecord):
    pubkey: str
    created_at: StrictInt
    kind: StrictInt
    tags: list[TagV2Wire] = []
    content: str


class RumorV1(PreEventV1):
    id: str


class RumorV2(PreEventV2):
    id: str


class EventV1(RumorV1):
    sig: str


class EventV2(RumorV2):
    sig: str


# ---------------------------------------------------------------------------
# Shared field moves
# ---------------------------------------------------------------------------


def _up_v1(record: PreEventV1) -> dict[str, Any]:
    fields = record.model_dump(exclude={"tags", "ots"})
    fields["tags"] = [tag_v1_to_v2(t) for t in record.tags]
    return fields


def _down_v2(record: PreEventV2) -> dict[str, Any]:
    fields = record.model_dump(exclude={"tags"})
    fields["tags"] = [tag_v2_to_v1(t) for t in record.tags]
    return fields


def _to_canonical(record: PreEventV2) -> dict[str, Any]:
    return {
        "pubkey": PublicKey.from_hex(record.pubkey),
        "created_at": record.created_at,
        "kind": EventKind(record.kind),
        "tags": tuple(tag_v2_to_tag(t) for t in record.tags),
        "content": record.content,
    }


def _from_canonical(value: PreEvent | Rumor | Event) -> dict[str, Any]:
    return {
        "pubkey": value.pubkey.as_hex(),
        "created_at": value.created_at,
        "kind": value.kind.value,
        "tags": [tag_to_v2(t) for t in value.tags],
        "content": value.content,
    }


# ---------------------------------------------------------------------------
# Pre-events
# ---------------------------------------------------------------------------


def pre_event_v2_to_canonical(record: PreEventV2) -> PreEvent:
    return PreEvent(**_to_canonical(record))


def pre_event_to_v2(value: PreEvent) -> PreEventV2:
    return PreEventV2(**_from_canonical(value))


PRE_EVENT_CHAIN: VersionChain[PreEvent] = VersionChain(
    "pre_event",
    PreEvent,
    PreEvent.from_dict,
    [
        Step(PreEventV1, lambda r: PreEventV2(**_up_v1(r)), lambda r: PreEventV1(**_down_v2(r))),
        Step(PreEventV2, pre_event_v2_to_canonical, pre_event_to_v2),
    ],
)


# ---------------------------------------------------------------------------
# Rumors
# ---------------------------------------------------------------------------


def rumor_v2_to_canonical(record: RumorV2) -> Rumor:
    return Rumor(id=Id.from_hex(record.id), **_to_canonical(record))


def rumor_to_v2(value: Rumor) -> RumorV2:
    return RumorV2(id=value.id.as_hex(), **_from_canonical(value))


RUMOR_CHAIN: VersionChain[Rumor] = VersionChain(
    "rumor",
    Rumor,
    Rumor.from_dict,
    [
        Step(RumorV1, lambda r: RumorV2(**_up_v1(r)), lambda r: RumorV1(**_down_v2(r))),
        Step(RumorV2, rumor_v2_to_canonical, rumor_to_v2),
    ],
)


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


def event_v1_to_v2(record: EventV1) -> EventV2:
    return EventV2(**_up_v1(record))


def event_v2_to_v1(record: EventV2) -> EventV1:
    return EventV1(**_down_v2(record))


def event_v2_to_canonical(record: EventV2) -> Event:
    return Event(
        id=Id.from_hex(record.id),
        sig=Signature.from_hex(record.sig),
        **_to_canonical(record),
    )


def event_to_v2(value: Event) -> EventV2:
    return EventV2(id=value.id.as_hex(), sig=value.sig.as_hex(), **_from_canonical(value))


EVENT_CHAIN: VersionChain[Event] = VersionChain(
    "event",
    Event,
    Event.from_dict,
    [
        Step(EventV1, event_v1_to_v2, event_v2_to_v1),
        Step(EventV2, event_v2_to_canonical, event_to_v2),
    ],
)

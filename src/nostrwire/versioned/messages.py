"""
Historical relay and client message shapes.

Relay to client:

```text
V1         EVENT  OK (message optional)  EOSE  NOTICE
V2         + AUTH, OK message mandatory
V3         + CLOSED
canonical  + COUNT
```

Client to relay:

```text
V1         EVENT  REQ  CLOSE
V2         + AUTH
canonical  + COUNT
```

Each record is one flat model with optional slots for every element any of
its message types can carry; the JSON array form is mapped onto those slots
by a per-version layout table. A type the version never had is rejected as
``Why.UNKNOWN_MESSAGE_TYPE``, and downgrading a message the older version
cannot express fails as ``Why.UNREPRESENTABLE``.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BeforeValidator, PlainSerializer, StrictBool
from pydantic_core import PydanticCustomError

from nostrwire.core.exceptions import InvalidFieldError
from nostrwire.models.filter import Filter
from nostrwire.models.keys import Id
from nostrwire.models.messages import (
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

from .chain import Step, VersionChain, VersionedRecord, unrepresentable
from .event import (
    EventV1,
    EventV2,
    event_to_v2,
    event_v1_to_v2,
    event_v2_to_canonical,
    event_v2_to_v1,
)


# A layout lists slot names after the type and how many are required.
# A final "*name" slot collects every remaining element.
Layout = tuple[tuple[str, ...], int]


class _MessageRecord(VersionedRecord):
    type: str


# ---------------------------------------------------------------------------
# Array form
# ---------------------------------------------------------------------------


def message_from_array(layouts: dict[str, Layout], data: Any) -> Any:
    """Map a message array onto record slots using the version's *layouts*.

    Dicts only have their ``type`` checked; anything else is left to the
    record's own validation.
    """
    if isinstance(data, list):
        if not data or not isinstance(data[0], str):
            raise ValueError("a message must start with its type")
        msg_type, values = data[0], data[1:]
    elif isinstance(data, dict):
        msg_type, values = data.get("type"), None
    else:
        return data

    layout = layouts.get(msg_type) if isinstance(msg_type, str) else None
    if layout is None:
        raise PydanticCustomError(
            "unknown_message_type",
            "message type {type} did not exist in this version",
            {"type": repr(msg_type)},
        )
    if values is None:
        return data

    names, required = layout
    fields: dict[str, Any] = {"type": msg_type}
    if names and names[-1].startswith("*"):
        fixed = names[:-1]
        if len(values) < required:
            raise ValueError(f"{msg_type} needs at least {required} elements")
        fields.update(zip(fixed, values, strict=False))
        fields[names[-1][1:]] = values[len(fixed) :]
        return fields
    if not required <= len(values) <= len(names):
        raise ValueError(f"{msg_type} takes {required} to {len(names)} elements")
    fields.update(zip(names, values, strict=False))
    return fields


def message_to_list(layouts: dict[str, Layout], record: _MessageRecord) -> list[Any]:
    names, _ = layouts[record.type]
    out: list[Any] = [record.type]
    for name in names:
        if name.startswith("*"):
            out.extend(getattr(record, name[1:]) or [])
            continue
        value = getattr(record, name)
        if value is None:
            break
        if isinstance(value, VersionedRecord):
            value = value.model_dump(mode="json", exclude_none=True)
        out.append(value)
    return out


def _wire(record: type[_MessageRecord], layouts: dict[str, Layout]) -> Any:
    def load(data: Any) -> Any:
        return message_from_array(layouts, data)

    def dump(value: _MessageRecord) -> list[Any]:
        return message_to_list(layouts, value)

    return Annotated[record, BeforeValidator(load), PlainSerializer(dump)]


def _need(record: _MessageRecord, name: str) -> Any:
    value = getattr(record, name, None)
    if value is None:
        raise InvalidFieldError(name, "missing")
    return value


def _unknown_type(record: _MessageRecord) -> InvalidFieldError:
    return InvalidFieldError("type", f"unknown message type {record.type!r}")


# ---------------------------------------------------------------------------
# Relay -> client
# ---------------------------------------------------------------------------


_RELAY_V1: dict[str, Layout] = {
    "EVENT": (("subscription_id", "event"), 2),
    "OK": (("event_id", "accepted", "message"), 2),
    "EOSE": (("subscription_id",), 1),
    "NOTICE": (("message",), 1),
}
_RELAY_V2: dict[str, Layout] = {
    **_RELAY_V1,
    "OK": (("event_id", "accepted", "message"), 3),
    "AUTH": (("challenge",), 1),
}
_RELAY_V3: dict[str, Layout] = {**_RELAY_V2, "CLOSED": (("subscription_id", "message"), 2)}


class RelayMessageV1(_MessageRecord):
    subscription_id: str | None = None
    event: EventV1 | None = None
    event_id: str | None = None
    accepted: StrictBool | None = None
    message: str | None = None


class RelayMessageV2(_MessageRecord):
    subscription_id: str | None = None
    event: EventV2 | None = None
    event_id: str | None = None
    accepted: StrictBool | None = None
    message: str | None = None
    challenge: str | None = None


class RelayMessageV3(RelayMessageV2):
    """Version 3 adds the ``CLOSED`` message; its layout lives in ``_RELAY_V3``."""


def relay_v1_to_v2(record: RelayMessageV1) -> RelayMessageV2:
    fields = record.model_dump(exclude={"event"}, exclude_none=True)
    if record.type == "OK" and record.message is None:
        fields["message"] = ""
    if record.event is not None:
        fields["event"] = event_v1_to_v2(record.event)
    return RelayMessageV2(**fields)


def relay_v2_to_v1(record: RelayMessageV2) -> RelayMessageV1:
    if record.type not in _RELAY_V1:
        raise unrepresentable(f"{record.type} did not exist in version 1")
    fields = record.model_dump(exclude={"event", "challenge"}, exclude_none=True)
    if record.event is not None:
        fields["event"] = event_v2_to_v1(record.event)
    return RelayMessageV1(**fields)


def relay_v2_to_v3(record: RelayMessageV2) -> RelayMessageV3:
    fields = record.model_dump(exclude={"event"}, exclude_none=True)
    return RelayMessageV3(**fields, event=record.event)


def relay_v3_to_v2(record: RelayMessageV3) -> RelayMessageV2:
    if record.type not in _RELAY_V2:
        raise unrepresentable(f"{record.type} did not exist in version 2")
    fields = record.model_dump(exclude={"event"}, exclude_none=True)
    return RelayMessageV2(**fields, event=record.event)


def relay_v3_to_canonical(record: RelayMessageV3) -> RelayMessage:
    if record.type == "EVENT":
        event = event_v2_to_canonical(_need(record, "event"))
        return RelayEvent(_need(record, "subscription_id"), event)
    if record.type == "OK":
        return RelayOk(
            Id.from_hex(_need(record, "event_id")),
            _need(record, "accepted"),
            _need(record, "message"),
        )
    if record.type == "EOSE":
        return RelayEose(_need(record, "subscription_id"))
    if record.type == "CLOSED":
        return RelayClosed(_need(record, "subscription_id"), record.message or "")
    if record.type == "NOTICE":
        return RelayNotice(_need(record, "message"))
    if record.type == "AUTH":
        return RelayAuth(_need(record, "challenge"))
    raise _unknown_type(record)


def relay_canonical_to_v3(message: RelayMessage) -> RelayMessageV3:
    if isinstance(message, RelayCount):
        raise unrepresentable("COUNT did not exist before the current version")
    if isinstance(message, RelayEvent):
        return RelayMessageV3(
            type="EVENT", subscription_id=message.subscription_id, event=event_to_v2(message.event)
        )
    if isinstance(message, RelayOk):
        return RelayMessageV3(
            type="OK",
            event_id=message.event_id.as_hex(),
            accepted=message.accepted,
            message=message.message,
        )
    if isinstance(message, RelayEose):
        return RelayMessageV3(type="EOSE", subscription_id=message.subscription_id)
    if isinstance(message, RelayClosed):
        return RelayMessageV3(
            type="CLOSED", subscription_id=message.subscription_id, message=message.message
        )
    if isinstance(message, RelayNotice):
        return RelayMessageV3(type="NOTICE", message=message.message)
    return RelayMessageV3(type="AUTH", challenge=message.challenge)


RELAY_MESSAGE_CHAIN: VersionChain[RelayMessage] = VersionChain(
    "relay_message",
    (RelayEvent, RelayOk, RelayEose, RelayClosed, RelayNotice, RelayAuth, RelayCount),
    parse_relay_message,
    [
        Step(
            RelayMessageV1,
            relay_v1_to_v2,
            relay_v2_to_v1,
            wire=_wire(RelayMessageV1, _RELAY_V1),
        ),
        Step(
            RelayMessageV2,
            relay_v2_to_v3,
            relay_v3_to_v2,
            wire=_wire(RelayMessageV2, _RELAY_V2),
        ),
        Step(
            RelayMessageV3,
            relay_v3_to_canonical,
            relay_canonical_to_v3,
            wire=_wire(RelayMessageV3, _RELAY_V3),
        ),
    ],
)


# ---------------------------------------------------------------------------
# Client -> relay
# ---------------------------------------------------------------------------


_CLIENT_V1: dict[str, Layout] = {
    "EVENT": (("event",), 1),
    "REQ": (("subscription_id", "*filters"), 2),
    "CLOSE": (("subscription_id",), 1),
}
_CLIENT_V2: dict[str, Layout] = {**_CLIENT_V1, "AUTH": (("event",), 1)}


class ClientMessageV1(_MessageRecord):
    subscription_id: str | None = None
    event: EventV1 | None = None
    filters: list[dict[str, Any]] | None = None


class ClientMessageV2(_MessageRecord):
    subscription_id: str | None = None
    event: EventV2 | None = None
    filters: list[dict[str, Any]] | None = None


def client_v1_to_v2(record: ClientMessageV1) -> ClientMessageV2:
    fields = record.model_dump(exclude={"event"}, exclude_none=True)
    if record.event is not None:
        fields["event"] = event_v1_to_v2(record.event)
    return ClientMessageV2(**fields)


def client_v2_to_v1(record: ClientMessageV2) -> ClientMessageV1:
    if record.type not in _CLIENT_V1:
        raise unrepresentable(f"{record.type} did not exist in version 1")
    fields = record.model_dump(exclude={"event"}, exclude_none=True)
    if record.event is not None:
        fields["event"] = event_v2_to_v1(record.event)
    return ClientMessageV1(**fields)


def client_v2_to_canonical(record: ClientMessageV2) -> ClientMessage:
    if record.type == "REQ":
        filters = tuple(Filter.from_dict(f) for f in _need(record, "filters"))
        return ClientReq(_need(record, "subscription_id"), filters)
    if record.type == "CLOSE":
        return ClientClose(_need(record, "subscription_id"))
    if record.type not in _CLIENT_V2:
        raise _unknown_type(record)
    event = event_v2_to_canonical(_need(record, "event"))
    return ClientAuth(event) if record.type == "AUTH" else ClientEvent(event)


def client_canonical_to_v2(message: ClientMessage) -> ClientMessageV2:
    if isinstance(message, ClientCount):
        raise unrepresentable("COUNT did not exist before the current version")
    if isinstance(message, ClientReq):
        return ClientMessageV2(
            type="REQ",
            subscription_id=message.subscription_id,
            filters=[f.to_dict() for f in message.filters],
        )
    if isinstance(message, ClientClose):
        return ClientMessageV2(type="CLOSE", subscription_id=message.subscription_id)
    return ClientMessageV2(type=message.TYPE, event=event_to_v2(message.event))


CLIENT_MESSAGE_CHAIN: VersionChain[ClientMessage] = VersionChain(
    "client_message",
    (ClientEvent, ClientReq, ClientClose, ClientAuth, ClientCount),
    parse_client_message,
    [
        Step(
            ClientMessageV1,
            client_v1_to_v2,
            client_v2_to_v1,
            wire=_wire(ClientMessageV1, _CLIENT_V1),
        ),
        Step(
            ClientMessageV2,
            client_v2_to_canonical,
            client_canonical_to_v2,
            wire=_wire(ClientMessageV2, _CLIENT_V2),
        ),
    ],
)

"""
NIP-01 protocol messages exchanged between clients and relays.

Every message is a JSON array whose first element names its type. Each
variant is a small frozen dataclass with ``to_list()``/``to_json()``;
[parse_relay_message()][nostrwire.models.messages.parse_relay_message] and
[parse_client_message()][nostrwire.models.messages.parse_client_message]
dispatch on the type string.

Relay to client: ``EVENT``, ``OK``, ``EOSE``, ``CLOSED``, ``NOTICE``,
``AUTH``, ``COUNT``. Client to relay: ``EVENT``, ``REQ``, ``CLOSE``,
``AUTH``, ``COUNT``.

See Also:
    [RELAY_MESSAGE_CHAIN][nostrwire.versioned.messages.RELAY_MESSAGE_CHAIN]:
        Historical message shapes that upgrade into these classes.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, ClassVar

from nostrwire.core.exceptions import InvalidFieldError

from ._validation import validate_instance, validate_int, validate_str
from .event import Event
from .filter import Filter
from .keys import Id


def _dumps(value: list[Any]) -> str:
    return json.dumps(value, ensure_ascii=False)


def _filters(raw: list[Any], message: str) -> tuple[Filter, ...]:
    if not raw:
        raise InvalidFieldError(message, "at least one filter is required")
    return tuple(Filter.from_dict(item) for item in raw)


def _freeze_filters(obj: Any) -> None:
    filters = tuple(obj.filters)
    for f in filters:
        validate_instance(f, Filter, "filters")
    object.__setattr__(obj, "filters", filters)


# ---------------------------------------------------------------------------
# Relay -> client
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RelayEvent:
    """An event delivered for subscription ``subscription_id``."""

    TYPE: ClassVar[str] = "EVENT"

    subscription_id: str
    event: Event

    def __post_init__(self) -> None:
        validate_str(self.subscription_id, "subscription_id")
        validate_instance(self.event, Event, "event")

    def to_list(self) -> list[Any]:
        return [self.TYPE, self.subscription_id, self.event.to_dict()]

    def to_json(self) -> str:
        return _dumps(self.to_list())


@dataclass(frozen=True, slots=True)
class RelayOk:
    """Acceptance or rejection of a published event (NIP-20)."""

    TYPE: ClassVar[str] = "OK"

    event_id: Id
    accepted: bool
    message: str = ""

    def __post_init__(self) -> None:
        validate_instance(self.event_id, Id, "event_id")
        validate_instance(self.accepted, bool, "accepted")
        validate_str(self.message, "message")

    def to_list(self) -> list[Any]:
        return [self.TYPE, self.event_id.as_hex(), self.accepted, self.message]

    def to_json(self) -> str:
        return _dumps(self.to_list())


@dataclass(frozen=True, slots=True)
class RelayEose:
    """End of stored events for a subscription."""

    TYPE: ClassVar[str] = "EOSE"

    subscription_id: str

    def __post_init__(self) -> None:
        validate_str(self.subscription_id, "subscription_id")

    def to_list(self) -> list[Any]:
        return [self.TYPE, self.subscription_id]

    def to_json(self) -> str:
        return _dumps(self.to_list())


@dataclass(frozen=True, slots=True)
class RelayClosed:
    """The relay ended a subscription, with a machine-readable prefix in ``message``."""

    TYPE: ClassVar[str] = "CLOSED"

    subscription_id: str
    message: str = ""

    def __post_init__(self) -> None:
        validate_str(self.subscription_id, "subscription_id")
        validate_str(self.message, "message")

    def to_list(self) -> list[Any]:
        return [self.TYPE, self.subscription_id, self.message]

    def to_json(self) -> str:
        return _dumps(self.to_list())


@dataclass(frozen=True, slots=True)
class RelayNotice:
    TYPE: ClassVar[str] = "NOTICE"

    message: str

    def __post_init__(self) -> None:
        validate_str(self.message, "message")

    def to_list(self) -> list[Any]:
        return [self.TYPE, self.message]

    def to_json(self) -> str:
        return _dumps(self.to_list())


@dataclass(frozen=True, slots=True)
class RelayAuth:
    """NIP-42 authentication challenge."""

    TYPE: ClassVar[str] = "AUTH"

    challenge: str

    def __post_init__(self) -> None:
        validate_str(self.challenge, "challenge")

    def to_list(self) -> list[Any]:
        return [self.TYPE, self.challenge]

    def to_json(self) -> str:
        return _dumps(self.to_list())


@dataclass(frozen=True, slots=True)
class RelayCount:
    """NIP-45 count result."""

    TYPE: ClassVar[str] = "COUNT"

    subscription_id: str
    count: int

    def __post_init__(self) -> None:
        validate_str(self.subscription_id, "subscription_id")
        validate_int(self.count, "count")
        if self.count < 0:
            raise InvalidFieldError("count", "must be non-negative")

    def to_list(self) -> list[Any]:
        return [self.TYPE, self.subscription_id, {"count": self.count}]

    def to_json(self) -> str:
        return _dumps(self.to_list())


RelayMessage = (
    RelayEvent | RelayOk | RelayEose | RelayClosed | RelayNotice | RelayAuth | RelayCount
)


# ---------------------------------------------------------------------------
# Client -> relay
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ClientEvent:
    """Publish an event."""

    TYPE: ClassVar[str] = "EVENT"

    event: Event

    def __post_init__(self) -> None:
        validate_instance(self.event, Event, "event")

    def to_list(self) -> list[Any]:
        return [self.TYPE, self.event.to_dict()]

    def to_json(self) -> str:
        return _dumps(self.to_list())


@dataclass(frozen=True, slots=True)
class ClientReq:
    """Open a subscription. Filters are OR-ed together by the relay."""

    TYPE: ClassVar[str] = "REQ"

    subscription_id: str
    filters: tuple[Filter, ...]

    def __post_init__(self) -> None:
        validate_str(self.subscription_id, "subscription_id")
        _freeze_filters(self)

    def matches(self, event: Event, *, match_tags: bool = True) -> bool:
        return any(f.matches(event, match_tags=match_tags) for f in self.filters)

    def to_list(self) -> list[Any]:
        return [self.TYPE, self.subscription_id, *(f.to_dict() for f in self.filters)]

    def to_json(self) -> str:
        return _dumps(self.to_list())


@dataclass(frozen=True, slots=True)
class ClientClose:
    TYPE: ClassVar[str] = "CLOSE"

    subscription_id: str

    def __post_init__(self) -> None:
        validate_str(self.subscription_id, "subscription_id")

    def to_list(self) -> list[Any]:
        return [self.TYPE, self.subscription_id]

    def to_json(self) -> str:
        return _dumps(self.to_list())


@dataclass(frozen=True, slots=True)
class ClientAuth:
    """NIP-42 signed authentication event (kind 22242)."""

    TYPE: ClassVar[str] = "AUTH"

    event: Event

    def __post_init__(self) -> None:
        validate_instance(self.event, Event, "event")

    def to_list(self) -> list[Any]:
        return [self.TYPE, self.event.to_dict()]

    def to_json(self) -> str:
        return _dumps(self.to_list())


@dataclass(frozen=True, slots=True)
class ClientCount:
    """NIP-45 count request."""

    TYPE: ClassVar[str] = "COUNT"

    subscription_id: str
    filters: tuple[Filter, ...]

    def __post_init__(self) -> None:
        validate_str(self.subscription_id, "subscription_id")
        _freeze_filters(self)

    def to_list(self) -> list[Any]:
        return [self.TYPE, self.subscription_id, *(f.to_dict() for f in self.filters)]

    def to_json(self) -> str:
        return _dumps(self.to_list())


ClientMessage = ClientEvent | ClientReq | ClientClose | ClientAuth | ClientCount


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _as_array(raw: Any) -> list[Any]:
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise InvalidFieldError("message", f"invalid JSON: {e}") from e
    if not isinstance(raw, list) or not raw:
        raise InvalidFieldError("message", "must be a non-empty JSON array")
    if not isinstance(raw[0], str):
        raise InvalidFieldError("type", "message type must be a string")
    return raw


def _arity(raw: list[Any], minimum: int, maximum: int | None = None) -> None:
    if len(raw) < minimum or (maximum is not None and len(raw) > maximum):
        raise InvalidFieldError("message", f"{raw[0]} has the wrong number of elements")


def _relay_event(raw: list[Any]) -> RelayEvent:
    _arity(raw, 3, 3)
    return RelayEvent(raw[1], Event.from_dict(raw[2]))


def _relay_ok(raw: list[Any]) -> RelayOk:
    _arity(raw, 3, 4)
    return RelayOk(Id.from_hex(raw[1]), raw[2], raw[3] if len(raw) > 3 else "")  # noqa: PLR2004


def _relay_eose(raw: list[Any]) -> RelayEose:
    _arity(raw, 2, 2)
    return RelayEose(raw[1])


def _relay_closed(raw: list[Any]) -> RelayClosed:
    _arity(raw, 2, 3)
    return RelayClosed(raw[1], raw[2] if len(raw) > 2 else "")  # noqa: PLR2004


def _relay_notice(raw: list[Any]) -> RelayNotice:
    _arity(raw, 2, 2)
    return RelayNotice(raw[1])


def _relay_auth(raw: list[Any]) -> RelayAuth:
    _arity(raw, 2, 2)
    return RelayAuth(raw[1])


def _relay_count(raw: list[Any]) -> RelayCount:
    _arity(raw, 3, 3)
    body = raw[2]
    if not isinstance(body, dict) or "count" not in body:
        raise InvalidFieldError("count", "COUNT result must be an object with a count")
    return RelayCount(raw[1], body["count"])


_RELAY_PARSERS: dict[str, Callable[[list[Any]], RelayMessage]] = {
    "EVENT": _relay_event,
    "OK": _relay_ok,
    "EOSE": _relay_eose,
    "CLOSED": _relay_closed,
    "NOTICE": _relay_notice,
    "AUTH": _relay_auth,
    "COUNT": _relay_count,
}


def _client_event(raw: list[Any]) -> ClientEvent:
    _arity(raw, 2, 2)
    return ClientEvent(Event.from_dict(raw[1]))


def _client_req(raw: list[Any]) -> ClientReq:
    _arity(raw, 3)
    return ClientReq(raw[1], _filters(raw[2:], "REQ"))


def _client_close(raw: list[Any]) -> ClientClose:
    _arity(raw, 2, 2)
    return ClientClose(raw[1])


def _client_auth(raw: list[Any]) -> ClientAuth:
    _arity(raw, 2, 2)
    return ClientAuth(Event.from_dict(raw[1]))


def _client_count(raw: list[Any]) -> ClientCount:
    _arity(raw, 3)
    return ClientCount(raw[1], _filters(raw[2:], "COUNT"))


_CLIENT_PARSERS: dict[str, Callable[[list[Any]], ClientMessage]] = {
    "EVENT": _client_event,
    "REQ": _client_req,
    "CLOSE": _client_close,
    "AUTH": _client_auth,
    "COUNT": _client_count,
}


def parse_relay_message(raw: str | bytes | list[Any]) -> RelayMessage:
    """Parse a relay-to-client message from JSON text or a decoded array.

    Raises:
        InvalidFieldError: If the message is malformed or its type is unknown
            (``field == "type"``).
    """
    array = _as_array(raw)
    parser = _RELAY_PARSERS.get(array[0])
    if parser is None:
        raise InvalidFieldError("type", f"unknown relay message type {array[0]!r}")
    return parser(array)


def parse_client_message(raw: str | bytes | list[Any]) -> ClientMessage:
    """Parse a client-to-relay message from JSON text or a decoded array.

    Raises:
        InvalidFieldError: If the message is malformed or its type is unknown
            (``field == "type"``).
    """
    array = _as_array(raw)
    parser = _CLIENT_PARSERS.get(array[0])
    if parser is None:
        raise InvalidFieldError("type", f"unknown client message type {array[0]!r}")
    return parser(array)

"""
Unit tests for versioned.messages module.

Tests:
- Relay message versions: OK message default, AUTH, CLOSED, COUNT
- Client message versions: REQ filters, AUTH, COUNT
- Downgrades to versions that cannot express a message type
- Failure reasons for unknown types and bad arity
"""

from typing import Any

import pytest

from nostrwire.core.exceptions import VersionIncompatibleError
from nostrwire.models import Event, Filter, Id
from nostrwire.models.messages import (
    ClientAuth,
    ClientClose,
    ClientCount,
    ClientEvent,
    ClientReq,
    RelayAuth,
    RelayClosed,
    RelayCount,
    RelayEose,
    RelayEvent,
    RelayNotice,
    RelayOk,
)
from nostrwire.versioned import (
    CLIENT_MESSAGE_CHAIN,
    RELAY_MESSAGE_CHAIN,
    ClientMessageV1,
    RelayMessageV1,
    RelayMessageV3,
    Why,
)


EVENT_ID = "5df64b33303d62afc799bdc36d178c07b2e1f0d824f31b7dc812219440affab6"


def _why(chain: Any, version: int, data: Any) -> Why:
    with pytest.raises(VersionIncompatibleError) as exc_info:
        chain.decode(version, data)
    return exc_info.value.why


# ============================================================================
# Relay Message Tests
# ============================================================================


class TestRelayRecords:
    """Tests for the relay message records."""

    def test_latest_version(self) -> None:
        assert RELAY_MESSAGE_CHAIN.latest_version == 4

    def test_v1_array_layout(self) -> None:
        record = RELAY_MESSAGE_CHAIN.load(1, ["OK", EVENT_ID, False])
        assert isinstance(record, RelayMessageV1)
        assert record.event_id == EVENT_ID
        assert record.accepted is False
        assert record.message is None
        assert RELAY_MESSAGE_CHAIN.dump(record) == ["OK", EVENT_ID, False]

    def test_v3_closed(self) -> None:
        record = RELAY_MESSAGE_CHAIN.load(3, ["CLOSED", "sub", "auth-required: x"])
        assert isinstance(record, RelayMessageV3)
        assert RELAY_MESSAGE_CHAIN.dump(record) == ["CLOSED", "sub", "auth-required: x"]


class TestRelayUpgrade:
    """Tests for decoding historical relay messages."""

    def test_ok_without_message(self) -> None:
        message = RELAY_MESSAGE_CHAIN.decode(1, ["OK", EVENT_ID, True])
        assert message == RelayOk(Id.from_hex(EVENT_ID), True, "")

    def test_ok_with_message(self) -> None:
        message = RELAY_MESSAGE_CHAIN.decode(3, ["OK", EVENT_ID, False, "blocked: spam"])
        assert message == RelayOk(Id.from_hex(EVENT_ID), False, "blocked: spam")

    def test_event(self, event_dict: dict[str, Any]) -> None:
        message = RELAY_MESSAGE_CHAIN.decode(1, ["EVENT", "sub", event_dict])
        assert message == RelayEvent("sub", Event.from_dict(event_dict))

    def test_eose_and_notice(self) -> None:
        assert RELAY_MESSAGE_CHAIN.decode(1, ["EOSE", "sub"]) == RelayEose("sub")
        assert RELAY_MESSAGE_CHAIN.decode(2, ["NOTICE", "hi"]) == RelayNotice("hi")

    def test_auth_from_v2(self) -> None:
        assert RELAY_MESSAGE_CHAIN.decode(2, ["AUTH", "challenge"]) == RelayAuth("challenge")

    def test_closed_from_v3(self) -> None:
        assert RELAY_MESSAGE_CHAIN.decode(3, ["CLOSED", "sub", "bye"]) == RelayClosed("sub", "bye")

    def test_count_latest(self) -> None:
        message = RELAY_MESSAGE_CHAIN.decode(4, ["COUNT", "sub", {"count": 7}])
        assert message == RelayCount("sub", 7)

    @pytest.mark.parametrize(
        ("version", "data"),
        [
            (1, ["AUTH", "challenge"]),
            (2, ["CLOSED", "sub", "bye"]),
            (3, ["COUNT", "sub", {"count": 1}]),
            (4, ["BOGUS"]),
            (1, {"type": "AUTH", "challenge": "c"}),
        ],
    )
    def test_unknown_type(self, version: int, data: Any) -> None:
        assert _why(RELAY_MESSAGE_CHAIN, version, data) is Why.UNKNOWN_MESSAGE_TYPE

    def test_constructed_record_with_unknown_type(self) -> None:
        with pytest.raises(VersionIncompatibleError) as exc_info:
            RELAY_MESSAGE_CHAIN.upgrade(RelayMessageV3(type="BOGUS"))
        assert exc_info.value.why is Why.UNKNOWN_MESSAGE_TYPE

    @pytest.mark.parametrize(
        ("version", "data"),
        [
            (2, ["OK", EVENT_ID, True]),
            (1, ["EOSE"]),
            (1, ["NOTICE", "a", "b"]),
            (1, []),
            (1, "OK"),
            (2, ["OK", EVENT_ID, "true", "x"]),
        ],
    )
    def test_malformed(self, version: int, data: Any) -> None:
        assert _why(RELAY_MESSAGE_CHAIN, version, data) is Why.MALFORMED_RECORD

    def test_object_form_missing_slot(self) -> None:
        assert _why(RELAY_MESSAGE_CHAIN, 1, {"type": "EOSE"}) is Why.MISSING_FIELD

    def test_invalid_event_id(self) -> None:
        assert _why(RELAY_MESSAGE_CHAIN, 1, ["OK", "abc", True]) is Why.INVALID_ID

    def test_invalid_nested_signature(self, event_dict: dict[str, Any]) -> None:
        bad = {**event_dict, "sig": "00"}
        assert _why(RELAY_MESSAGE_CHAIN, 1, ["EVENT", "s", bad]) is Why.INVALID_SIGNATURE


class TestRelayDowngrade:
    """Tests for projecting relay messages onto older versions."""

    def test_ok_to_v1_keeps_message(self) -> None:
        record = RELAY_MESSAGE_CHAIN.downgrade(RelayOk(Id.from_hex(EVENT_ID), True, ""), 1)
        assert RELAY_MESSAGE_CHAIN.dump(record) == ["OK", EVENT_ID, True, ""]

    def test_event_to_v1(self, event_dict: dict[str, Any]) -> None:
        message = RelayEvent("sub", Event.from_dict(event_dict))
        record = RELAY_MESSAGE_CHAIN.downgrade(message, 1)
        assert RELAY_MESSAGE_CHAIN.dump(record) == ["EVENT", "sub", event_dict]
        assert RELAY_MESSAGE_CHAIN.upgrade(record) == message

    def test_auth_to_v2(self) -> None:
        record = RELAY_MESSAGE_CHAIN.downgrade(RelayAuth("c"), 2)
        assert RELAY_MESSAGE_CHAIN.dump(record) == ["AUTH", "c"]

    @pytest.mark.parametrize(
        ("message", "version"),
        [
            (RelayCount("sub", 3), 3),
            (RelayCount("sub", 3), 1),
            (RelayClosed("sub", "bye"), 2),
            (RelayAuth("c"), 1),
        ],
    )
    def test_unrepresentable(self, message: Any, version: int) -> None:
        with pytest.raises(VersionIncompatibleError) as exc_info:
            RELAY_MESSAGE_CHAIN.downgrade(message, version)
        assert exc_info.value.why is Why.UNREPRESENTABLE
        assert exc_info.value.entity == "relay_message"


# ============================================================================
# Client Message Tests
# ============================================================================


class TestClientUpgrade:
    """Tests for decoding historical client messages."""

    def test_latest_version(self) -> None:
        assert CLIENT_MESSAGE_CHAIN.latest_version == 3

    def test_req_collects_filters(self) -> None:
        record = CLIENT_MESSAGE_CHAIN.load(1, ["REQ", "sub", {"kinds": [1]}, {"#t": ["x"]}])
        assert isinstance(record, ClientMessageV1)
        assert record.filters == [{"kinds": [1]}, {"#t": ["x"]}]

        message = CLIENT_MESSAGE_CHAIN.upgrade(record)
        assert isinstance(message, ClientReq)
        assert message.subscription_id == "sub"
        assert message.filters == (
            Filter.from_dict({"kinds": [1]}),
            Filter.from_dict({"#t": ["x"]}),
        )

    def test_close(self) -> None:
        assert CLIENT_MESSAGE_CHAIN.decode(1, ["CLOSE", "sub"]) == ClientClose("sub")

    def test_event(self, event_dict: dict[str, Any]) -> None:
        message = CLIENT_MESSAGE_CHAIN.decode(1, ["EVENT", event_dict])
        assert message == ClientEvent(Event.from_dict(event_dict))

    def test_auth_from_v2(self, event_dict: dict[str, Any]) -> None:
        message = CLIENT_MESSAGE_CHAIN.decode(2, ["AUTH", event_dict])
        assert message == ClientAuth(Event.from_dict(event_dict))

    def test_count_latest(self) -> None:
        message = CLIENT_MESSAGE_CHAIN.decode(3, ["COUNT", "sub", {"kinds": [1]}])
        assert isinstance(message, ClientCount)

    def test_auth_in_v1(self, event_dict: dict[str, Any]) -> None:
        assert _why(CLIENT_MESSAGE_CHAIN, 1, ["AUTH", event_dict]) is Why.UNKNOWN_MESSAGE_TYPE

    def test_count_in_v2(self) -> None:
        assert _why(CLIENT_MESSAGE_CHAIN, 2, ["COUNT", "s", {}]) is Why.UNKNOWN_MESSAGE_TYPE

    def test_req_without_filter(self) -> None:
        assert _why(CLIENT_MESSAGE_CHAIN, 1, ["REQ", "sub"]) is Why.MALFORMED_RECORD

    def test_req_filter_not_object(self) -> None:
        assert _why(CLIENT_MESSAGE_CHAIN, 1, ["REQ", "sub", "x"]) is Why.MALFORMED_RECORD

    def test_req_invalid_filter(self) -> None:
        assert _why(CLIENT_MESSAGE_CHAIN, 2, ["REQ", "sub", {"limit": -1}]) is Why.INVALID_FIELD


class TestClientDowngrade:
    """Tests for projecting client messages onto older versions."""

    def test_req_to_v1(self) -> None:
        message = ClientReq("sub", (Filter.from_dict({"kinds": [1]}),))
        record = CLIENT_MESSAGE_CHAIN.downgrade(message, 1)
        assert CLIENT_MESSAGE_CHAIN.dump(record) == ["REQ", "sub", {"kinds": [1]}]

    def test_event_to_v1(self, event_dict: dict[str, Any]) -> None:
        message = ClientEvent(Event.from_dict(event_dict))
        record = CLIENT_MESSAGE_CHAIN.downgrade(message, 1)
        assert CLIENT_MESSAGE_CHAIN.dump(record) == ["EVENT", event_dict]

    def test_auth_to_v2(self, event_dict: dict[str, Any]) -> None:
        record = CLIENT_MESSAGE_CHAIN.downgrade(ClientAuth(Event.from_dict(event_dict)), 2)
        assert CLIENT_MESSAGE_CHAIN.dump(record) == ["AUTH", event_dict]

    def test_auth_to_v1(self, event_dict: dict[str, Any]) -> None:
        with pytest.raises(VersionIncompatibleError) as exc_info:
            CLIENT_MESSAGE_CHAIN.downgrade(ClientAuth(Event.from_dict(event_dict)), 1)
        assert exc_info.value.why is Why.UNREPRESENTABLE

    def test_count_to_v2(self) -> None:
        message = ClientCount("sub", (Filter(),))
        with pytest.raises(VersionIncompatibleError) as exc_info:
            CLIENT_MESSAGE_CHAIN.downgrade(message, 2)
        assert exc_info.value.why is Why.UNREPRESENTABLE

"""
Unit tests for models.relay module.

Tests:
- RelayUrl normalization (scheme, host, default port, slashes)
- Network detection for clearnet and overlay networks
- Rejection of local addresses, other schemes, queries and fragments
- RelayList parsing of NIP-65 ``r`` tags and rendering back to tags
"""

from collections.abc import Callable

import pytest

from nostrwire.core.exceptions import InvalidFieldError
from nostrwire.models.constants import NetworkType
from nostrwire.models.event import Event
from nostrwire.models.relay import RelayList, RelayUrl, RelayUsage


# ============================================================================
# RelayUrl Tests
# ============================================================================


class TestRelayUrl:
    """Tests for RelayUrl."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("WSS://Relay.Example.com:443/", "wss://relay.example.com"),
            ("ws://relay.example.com:80", "ws://relay.example.com"),
            ("wss://relay.example.com:8080", "wss://relay.example.com:8080"),
            ("wss://relay.example.com//nostr//", "wss://relay.example.com/nostr"),
            ("  wss://relay.example.com  ", "wss://relay.example.com"),
        ],
    )
    def test_normalization(self, raw: str, expected: str) -> None:
        assert RelayUrl(raw).url == expected

    def test_components(self) -> None:
        relay = RelayUrl("wss://relay.example.com:8080/path")
        assert relay.scheme == "wss"
        assert relay.host == "relay.example.com"
        assert relay.port == 8080
        assert relay.path == "/path"
        assert str(relay) == "wss://relay.example.com:8080/path"

    @pytest.mark.parametrize(
        ("raw", "network"),
        [
            ("wss://relay.example.com", NetworkType.CLEARNET),
            ("wss://8.8.8.8", NetworkType.CLEARNET),
            ("ws://abcdef.onion", NetworkType.TOR),
            ("ws://relay.i2p", NetworkType.I2P),
            ("ws://relay.loki", NetworkType.LOKI),
        ],
    )
    def test_network(self, raw: str, network: NetworkType) -> None:
        assert RelayUrl(raw).network == network

    def test_ipv6_host(self) -> None:
        relay = RelayUrl("wss://[2606:4700::1]")
        assert relay.host == "2606:4700::1"
        assert relay.url == "wss://[2606:4700::1]"

    @pytest.mark.parametrize(
        "raw",
        [
            "https://relay.example.com",
            "relay.example.com",
            "wss://localhost",
            "wss://127.0.0.1",
            "wss://192.168.1.10",
            "wss://[::1]",
            "wss://intranet",
            "wss://relay.example.com/?x=1",
            "wss://relay.example.com/#frag",
            "wss://relay\x00.example.com",
        ],
    )
    def test_rejected(self, raw: str) -> None:
        with pytest.raises(InvalidFieldError) as exc_info:
            RelayUrl(raw)
        assert exc_info.value.field == "url"

    def test_non_string(self) -> None:
        with pytest.raises(InvalidFieldError):
            RelayUrl(None)  # type: ignore[arg-type]

    def test_equality_is_by_value(self) -> None:
        assert RelayUrl("wss://relay.example.com") == RelayUrl("wss://relay.example.com")

    def test_detect_network_unknown(self) -> None:
        assert RelayUrl.detect_network("") == NetworkType.UNKNOWN
        assert RelayUrl.detect_network("-bad-.example") == NetworkType.UNKNOWN


# ============================================================================
# RelayList Tests
# ============================================================================


class TestRelayList:
    """Tests for RelayList."""

    def test_from_event(self, make_event: Callable[..., Event]) -> None:
        event = make_event(
            kind=10002,
            content="",
            tags=[
                ["r", "wss://read.example.com", "read"],
                ["r", "wss://write.example.com/", "write"],
                ["r", "wss://both.example.com"],
                ["r", "wss://localhost"],
                ["p", "ignored"],
                ["r"],
            ],
        )
        relays = RelayList.from_event(event)
        assert relays.relays == {
            "wss://read.example.com": RelayUsage.READ,
            "wss://write.example.com": RelayUsage.WRITE,
            "wss://both.example.com": RelayUsage.BOTH,
        }
        assert relays.read_relays() == ["wss://read.example.com", "wss://both.example.com"]
        assert relays.write_relays() == ["wss://write.example.com", "wss://both.example.com"]

    def test_duplicate_markers_merge(self, make_event: Callable[..., Event]) -> None:
        event = make_event(
            kind=10002,
            tags=[["r", "wss://a.example.com", "read"], ["r", "wss://a.example.com", "write"]],
        )
        assert RelayList.from_event(event).relays == {"wss://a.example.com": RelayUsage.BOTH}

    def test_wrong_kind(self, make_event: Callable[..., Event]) -> None:
        with pytest.raises(InvalidFieldError) as exc_info:
            RelayList.from_event(make_event(kind=1))
        assert exc_info.value.field == "kind"

    def test_to_tags(self) -> None:
        relays = RelayList(
            {"wss://a.example.com": RelayUsage.READ, "wss://b.example.com": RelayUsage.BOTH}
        )
        assert [t.to_list() for t in relays.to_tags()] == [
            ["r", "wss://a.example.com", "read"],
            ["r", "wss://b.example.com"],
        ]

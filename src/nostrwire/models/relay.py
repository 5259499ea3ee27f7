"""
Validated relay URLs and NIP-65 relay lists.

[RelayUrl][nostrwire.models.relay.RelayUrl] parses, normalizes and validates
a WebSocket relay URL (``ws://`` or ``wss://``) and detects the network it
lives on (clearnet, Tor, I2P, Lokinet). Local and private addresses are
rejected.

Relay *hints* inside tags and pointers are deliberately left as unchecked
strings: a peer's bad hint must not make the surrounding value undecodable.
Only code that is about to connect somewhere needs a ``RelayUrl``.

[RelayList][nostrwire.models.relay.RelayList] reads the ``r`` tags of a
kind-10002 event into a mapping of relay URL to
[RelayUsage][nostrwire.models.relay.RelayUsage].
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from ipaddress import IPv4Network, IPv6Network, ip_address, ip_network
from typing import Any, ClassVar

from rfc3986 import uri_reference
from rfc3986.exceptions import UnpermittedComponentError, ValidationError
from rfc3986.validators import Validator

from nostrwire.core.exceptions import InvalidFieldError
from nostrwire.core.logger import Logger

from ._validation import validate_instance, validate_str
from .constants import KnownKind, NetworkType
from .event import Event
from .tag import Tag


_logger = Logger("nostrwire.relay")


@dataclass(frozen=True, slots=True)
class RelayUrl:
    """Immutable, normalized relay URL.

    Normalization lowercases scheme and host, collapses duplicate slashes,
    strips a trailing slash and drops the port when it is the scheme default.

    Attributes:
        url: Fully normalized URL including scheme.
        network: Detected [NetworkType][nostrwire.models.constants.NetworkType].
        scheme: ``ws`` or ``wss``.
        host: Hostname or IP address (brackets stripped for IPv6).
        port: Explicit non-default port, or ``None``.
        path: Path component, or ``None``.

    Raises:
        InvalidFieldError: If the URL is malformed, uses another scheme, has a
            query or fragment, or points at a local/private address.

    Examples:
        ```python
        RelayUrl("WSS://Relay.Example.com:443/").url   # 'wss://relay.example.com'
        RelayUrl("ws://abc.onion").network              # NetworkType.TOR
        ```
    """

    raw_url: str = field(repr=False)

    url: str = field(init=False)
    network: NetworkType = field(init=False)
    scheme: str = field(init=False)
    host: str = field(init=False)
    port: int | None = field(init=False)
    path: str | None = field(init=False)

    _DEFAULT_PORTS: ClassVar[dict[str, int]] = {"ws": 80, "wss": 443}

    _NETWORK_TLDS: ClassVar[dict[str, NetworkType]] = {
        ".onion": NetworkType.TOR,
        ".i2p": NetworkType.I2P,
        ".loki": NetworkType.LOKI,
    }

    # IANA special-purpose registries (IPv4 and IPv6)
    _LOCAL_NETWORKS: ClassVar[tuple[IPv4Network | IPv6Network, ...]] = (
        ip_network("0.0.0.0/8"),
        ip_network("10.0.0.0/8"),
        ip_network("100.64.0.0/10"),
        ip_network("127.0.0.0/8"),
        ip_network("169.254.0.0/16"),
        ip_network("172.16.0.0/12"),
        ip_network("192.0.0.0/24"),
        ip_network("192.0.2.0/24"),
        ip_network("192.168.0.0/16"),
        ip_network("198.18.0.0/15"),
        ip_network("198.51.100.0/24"),
        ip_network("203.0.113.0/24"),
        ip_network("224.0.0.0/4"),
        ip_network("240.0.0.0/4"),
        ip_network("::1/128"),
        ip_network("::/128"),
        ip_network("::ffff:0:0/96"),
        ip_network("2001:db8::/32"),
        ip_network("fc00::/7"),
        ip_network("fe80::/10"),
        ip_network("ff00::/8"),
    )

    def __post_init__(self) -> None:
        validate_str(self.raw_url, "url")
        if "\x00" in self.raw_url:
            raise InvalidFieldError("url", "contains null bytes")

        scheme, host, port, path = self._parse(self.raw_url)
        network = self.detect_network(host)
        if network == NetworkType.LOCAL:
            raise InvalidFieldError("url", f"local address not allowed: {host!r}")
        if network == NetworkType.UNKNOWN:
            raise InvalidFieldError("url", f"invalid host: {host!r}")

        formatted_host = f"[{host}]" if ":" in host else host
        port_part = f":{port}" if port is not None else ""
        object.__setattr__(self, "url", f"{scheme}://{formatted_host}{port_part}{path or ''}")
        object.__setattr__(self, "network", network)
        object.__setattr__(self, "scheme", scheme)
        object.__setattr__(self, "host", host)
        object.__setattr__(self, "port", port)
        object.__setattr__(self, "path", path)

    def __str__(self) -> str:
        return self.url

    @classmethod
    def detect_network(cls, host: str) -> NetworkType:
        """Classify a hostname: overlay TLDs first, then local IPs, then DNS names."""
        if not host:
            return NetworkType.UNKNOWN

        bare = host.lower().strip("[]")
        for tld, network in cls._NETWORK_TLDS.items():
            if bare.endswith(tld):
                return network

        if bare in ("localhost", "localhost.localdomain"):
            return NetworkType.LOCAL

        try:
            ip = ip_address(bare)
        except ValueError:
            pass
        else:
            is_local = any(ip in net for net in cls._LOCAL_NETWORKS)
            return NetworkType.LOCAL if is_local else NetworkType.CLEARNET

        if "." not in bare:
            return NetworkType.UNKNOWN
        labels = bare.split(".")
        valid = all(
            label and not label.startswith("-") and not label.endswith("-") for label in labels
        )
        return NetworkType.CLEARNET if valid else NetworkType.UNKNOWN

    @classmethod
    def _parse(cls, raw: str) -> tuple[str, str, int | None, str | None]:
        uri = uri_reference(raw.strip()).normalize()
        validator = (
            Validator()
            .require_presence_of("scheme", "host")
            .allow_schemes("ws", "wss")
            .check_validity_of("scheme", "host", "port", "path")
        )
        try:
            validator.validate(uri)
        except UnpermittedComponentError:
            raise InvalidFieldError("url", "scheme must be ws or wss") from None
        except ValidationError as e:
            raise InvalidFieldError("url", f"invalid URL: {e}") from None

        if uri.query:
            raise InvalidFieldError("url", f"must not contain a query string: ?{uri.query}")
        if uri.fragment:
            raise InvalidFieldError("url", f"must not contain a fragment: #{uri.fragment}")

        scheme = uri.scheme
        host = uri.host.strip("[]")
        port = int(uri.port) if uri.port else None
        if port == cls._DEFAULT_PORTS[scheme]:
            port = None

        path = uri.path or ""
        while "//" in path:
            path = path.replace("//", "/")
        return scheme, host, port, path.rstrip("/") or None


class RelayUsage(StrEnum):
    """How the author of a relay list uses a relay (NIP-65 marker)."""

    READ = "read"
    WRITE = "write"
    BOTH = "both"


@dataclass(frozen=True, slots=True)
class RelayList:
    """Parsed NIP-65 relay list.

    Attributes:
        relays: Normalized URL -> usage, in first-seen order.
    """

    relays: dict[str, RelayUsage] = field(default_factory=dict, hash=False)

    def read_relays(self) -> list[str]:
        return [url for url, usage in self.relays.items() if usage != RelayUsage.WRITE]

    def write_relays(self) -> list[str]:
        return [url for url, usage in self.relays.items() if usage != RelayUsage.READ]

    @classmethod
    def from_event(cls, event: Event) -> RelayList:
        """Read the ``r`` tags of a kind-10002 event.

        Invalid URLs are skipped. A URL listed twice with different markers
        is merged into ``BOTH``.

        Raises:
            InvalidFieldError: If *event* is not a relay list event.
        """
        validate_instance(event, Event, "event")
        if event.kind.known != KnownKind.RELAY_LIST:
            raise InvalidFieldError("kind", f"expected a relay list event, got {event.kind!r}")

        relays: dict[str, RelayUsage] = {}
        for tag in event.tags:
            if tag.tagname != "r" or len(tag) < 2:  # noqa: PLR2004 - name + url
                continue
            raw_url, marker = tag.parse_relay()
            try:
                url = RelayUrl(raw_url).url
            except InvalidFieldError as e:
                _logger.debug("relay_list_url_skipped", url=raw_url, error=str(e))
                continue
            usage = _usage_from_marker(marker)
            previous = relays.get(url)
            relays[url] = usage if previous in (None, usage) else RelayUsage.BOTH
        return cls(relays)

    def to_tags(self) -> list[Tag]:
        """Render as ``r`` tags; ``BOTH`` is written without a marker."""
        return [
            Tag.new_relay(url, None if usage == RelayUsage.BOTH else usage.value)
            for url, usage in self.relays.items()
        ]


def _usage_from_marker(marker: Any) -> RelayUsage:
    if marker == "read":
        return RelayUsage.READ
    if marker == "write":
        return RelayUsage.WRITE
    return RelayUsage.BOTH

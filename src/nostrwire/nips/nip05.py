"""
NIP-05 DNS-based identifiers.

An identifier ``name@domain`` maps to a public key through the JSON document
the domain serves at ``https://<domain>/.well-known/nostr.json?name=<name>``:

```json
{"names": {"bob": "<pubkey hex>"}, "relays": {"<pubkey hex>": ["wss://..."]}}
```

[Nip05Address][nostrwire.nips.nip05.Nip05Address] parses and formats the
identifier; [Nip05Document][nostrwire.nips.nip05.Nip05Document] validates the
document. Fetching it is left to the caller.

Examples:
    ```python
    address = Nip05Address.parse("bob@example.com")
    address.well_known_url()   # 'https://example.com/.well-known/nostr.json?name=bob'
    doc = Nip05Document.from_untrusted(fetched_json)
    doc.verifies(address, event.pubkey)
    ```
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from pydantic import field_validator
from rfc3986 import uri_reference
from rfc3986.exceptions import ValidationError
from rfc3986.validators import Validator

from nostrwire.core.exceptions import InvalidFieldError
from nostrwire.models._validation import validate_str
from nostrwire.models.keys import PublicKey

from .base import BaseData


ROOT_NAME = "_"

_NAME_RE = re.compile(r"^[a-z0-9._-]+$")
_HEX_PUBKEY_RE = re.compile(r"^[0-9a-f]{64}$")


@dataclass(frozen=True, slots=True)
class Nip05Address:
    """A ``name@domain`` identifier, normalized to lowercase.

    A bare domain stands for the root name ``_``.
    """

    name: str
    domain: str

    def __post_init__(self) -> None:
        validate_str(self.name, "name")
        validate_str(self.domain, "domain")
        if not _NAME_RE.match(self.name):
            raise InvalidFieldError("name", f"only a-z 0-9 - _ . allowed: {self.name!r}")
        uri = uri_reference(f"https://{self.domain}")
        validator = Validator().require_presence_of("host").check_validity_of("host")
        try:
            validator.validate(uri)
        except ValidationError as e:
            raise InvalidFieldError("domain", f"invalid domain: {e}") from None
        if uri.host != self.domain or uri.port or uri.path or uri.userinfo:
            raise InvalidFieldError("domain", f"not a bare domain name: {self.domain!r}")

    def __str__(self) -> str:
        return f"{self.name}@{self.domain}"

    @classmethod
    def parse(cls, text: str) -> Nip05Address:
        """Parse ``name@domain`` or a bare ``domain`` (any case).

        Raises:
            InvalidFieldError: If the name or domain is malformed.
        """
        validate_str(text, "nip05")
        name, sep, domain = text.strip().lower().rpartition("@")
        return cls(name if sep else ROOT_NAME, domain)

    def display(self) -> str:
        """The form clients show: the bare domain for the root name."""
        return self.domain if self.name == ROOT_NAME else str(self)

    def well_known_url(self) -> str:
        return f"https://{self.domain}/.well-known/nostr.json?name={self.name}"


def _check_names(value: dict[str, str] | None) -> dict[str, str] | None:
    for name, pubkey in (value or {}).items():
        if not _HEX_PUBKEY_RE.match(pubkey):
            raise ValueError(f"names[{name!r}] must be 64 lowercase hex characters")
    return value


def _check_relays(value: dict[str, list[str]] | None) -> dict[str, list[str]] | None:
    for pubkey in value or {}:
        if not _HEX_PUBKEY_RE.match(pubkey):
            raise ValueError(f"relays key {pubkey!r} must be 64 lowercase hex characters")
    return value


class Nip05Document(BaseData):
    """The ``nostr.json`` document a domain serves."""

    names: dict[str, str] | None = None
    relays: dict[str, list[str]] | None = None

    @field_validator("names")
    @classmethod
    def check_names(cls, value: dict[str, str] | None) -> dict[str, str] | None:
        return _check_names(value)

    @field_validator("relays")
    @classmethod
    def check_relays(cls, value: dict[str, list[str]] | None) -> dict[str, list[str]] | None:
        return _check_relays(value)

    @classmethod
    def parse(cls, data: Any) -> dict[str, Any]:
        if not isinstance(data, dict):
            return {}
        result: dict[str, Any] = {}
        if isinstance(data.get("names"), dict):
            names = {
                name: pubkey
                for name, pubkey in data["names"].items()
                if isinstance(pubkey, str) and _HEX_PUBKEY_RE.match(pubkey)
            }
            if names:
                result["names"] = names
        if isinstance(data.get("relays"), dict):
            relays = {
                pubkey: [url for url in urls if isinstance(url, str)]
                for pubkey, urls in data["relays"].items()
                if _HEX_PUBKEY_RE.match(pubkey) and isinstance(urls, list)
            }
            if relays:
                result["relays"] = relays
        return result

    def pubkey_for(self, name: str) -> PublicKey | None:
        """The key published for *name* (case-insensitive), if any."""
        pubkey = (self.names or {}).get(name.lower())
        return PublicKey.from_hex(pubkey) if pubkey is not None else None

    def relays_for(self, pubkey: PublicKey) -> list[str]:
        return list((self.relays or {}).get(pubkey.as_hex(), ()))

    def verifies(self, address: Nip05Address, pubkey: PublicKey) -> bool:
        """True if the document maps *address*'s name to *pubkey*."""
        return self.pubkey_for(address.name) == pubkey

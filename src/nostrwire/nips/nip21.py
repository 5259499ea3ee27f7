"""
NIP-21 ``nostr:`` references inside free text.

Scans content for ``nostr:<bech32>`` URIs (and, separately, bare bech32
identifiers) and decodes each candidate with
[parse_bech32()][nostrwire.nips.nip19.codecs.parse_bech32]. Candidates that
fail to decode are skipped. ``nsec`` is never reported: NIP-21 forbids
secret keys in URIs.

Examples:
    ```python
    for start, end, ref in find_nostr_urls(note.content):
        print(note.content[start:end], ref.prefix)
    ```
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from typing import NamedTuple

from nostrwire.core.exceptions import CodecError
from nostrwire.core.logger import Logger

from .nip19 import NostrBech32, Prefix, parse_bech32


_logger = Logger("nostrwire.nip21")

_PREFIXES = "|".join(p.value for p in Prefix if p is not Prefix.NSEC)
_BECH32_BODY = "1[qpzry9x8gf2tvdw0s3jn54khce6mua7l]{6,}"

_NOSTR_URL_RE = re.compile(rf"nostr:((?:{_PREFIXES}){_BECH32_BODY})", re.IGNORECASE)
_BARE_RE = re.compile(rf"\b((?:{_PREFIXES}){_BECH32_BODY})\b", re.IGNORECASE)


class Span(NamedTuple):
    """A decoded reference and where it sits in the text (``text[start:end]``)."""

    start: int
    end: int
    value: NostrBech32


def _scan(pattern: re.Pattern[str], text: str) -> Iterator[Span]:
    for match in pattern.finditer(text):
        candidate = match.group(1)
        try:
            value = parse_bech32(candidate)
        except CodecError as e:
            _logger.debug("nostr_reference_skipped", candidate=candidate, error=str(e))
            continue
        yield Span(match.start(), match.end(), value)


def find_nostr_urls(text: str) -> Iterator[Span]:
    """Yield every decodable ``nostr:<bech32>`` URI; spans include the scheme."""
    return _scan(_NOSTR_URL_RE, text)


def find_bech32(text: str) -> Iterator[Span]:
    """Yield every decodable bare bech32 identifier, with or without a scheme."""
    return _scan(_BARE_RE, text)


def to_nostr_url(value: NostrBech32) -> str:
    """Render *value* as a ``nostr:`` URI.

    Raises:
        ValueError: If *value* is a secret key.
    """
    if value.prefix is Prefix.NSEC:
        raise ValueError("secret keys must not be shared as nostr: URIs")
    return f"nostr:{value.to_bech32()}"

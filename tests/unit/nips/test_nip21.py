"""
Unit tests for nips.nip21 module.

Tests:
- find_nostr_urls() spans and decoded values
- find_bech32() for bare identifiers
- Undecodable candidates and secret keys are skipped
- to_nostr_url() rendering
"""

import pytest

from nostrwire.models.keys import PrivateKey, PublicKey
from nostrwire.nips.nip19 import NostrBech32, Prefix, encode_nsec
from nostrwire.nips.nip21 import find_bech32, find_nostr_urls, to_nostr_url


NPUB = "npub10elfcs4fr0l0r8af98jlmgdh9c8tcxjvz9qkw038js35mp4dma8qzvjptg"
NPUB_HEX = "7e7e9c42a91bfef19fa929e5fda1b72e0ebc1a4c1141673e2794234d86addf4e"


class TestFindNostrUrls:
    """Tests for find_nostr_urls()."""

    def test_span_includes_scheme(self) -> None:
        text = f"hello nostr:{NPUB} bye"
        spans = list(find_nostr_urls(text))
        assert len(spans) == 1
        span = spans[0]
        assert text[span.start : span.end] == f"nostr:{NPUB}"
        assert span.value == NostrBech32(Prefix.NPUB, PublicKey.from_hex(NPUB_HEX))

    def test_bare_identifier_ignored(self) -> None:
        assert list(find_nostr_urls(f"see {NPUB}")) == []

    def test_bad_checksum_skipped(self) -> None:
        broken = NPUB[:-1] + ("q" if NPUB[-1] != "q" else "p")
        assert list(find_nostr_urls(f"nostr:{broken} nostr:{NPUB}"))[0].value.prefix is Prefix.NPUB
        assert len(list(find_nostr_urls(f"nostr:{broken}"))) == 0

    def test_nsec_never_reported(self) -> None:
        nsec = encode_nsec(PrivateKey(b"\x01" * 32))
        assert list(find_nostr_urls(f"nostr:{nsec}")) == []


class TestFindBech32:
    """Tests for find_bech32()."""

    def test_bare_and_prefixed(self) -> None:
        text = f"{NPUB} and nostr:{NPUB}"
        spans = list(find_bech32(text))
        assert len(spans) == 2
        assert all(text[s.start : s.end] == NPUB for s in spans)


class TestToNostrUrl:
    """Tests for to_nostr_url()."""

    def test_render(self) -> None:
        value = NostrBech32(Prefix.NPUB, PublicKey.from_hex(NPUB_HEX))
        assert to_nostr_url(value) == f"nostr:{NPUB}"

    def test_secret_key_rejected(self) -> None:
        with pytest.raises(ValueError, match="secret"):
            to_nostr_url(NostrBech32(Prefix.NSEC, PrivateKey(b"\x01" * 32)))

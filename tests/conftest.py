"""
Pytest configuration and shared fixtures for nostrwire tests.

Provides:
- Known-valid public keys (x-only secp256k1 points)
- An event factory producing events with correct ids and placeholder signatures
- Logging configured at DEBUG so leniency logs are exercised
"""

import logging
from collections.abc import Callable
from typing import Any

import pytest

from nostrwire.models import Event, EventKind, PreEvent, PublicKey, Signature, Tag


PUBKEY_HEX = "3bf0c63fcb93463407af97a5e5ee64fa883d107ef9e558472c4eb9aaaefa459d"
OTHER_PUBKEY_HEX = "82341f882b6eabcd2ba7f1ef90aad961cf074af15b9ef44a09f9d2a8fbfbe6a2"


# ============================================================================
# Logging Configuration
# ============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_logging() -> None:
    """Configure logging for tests."""
    logging.basicConfig(level=logging.DEBUG)


# ============================================================================
# Key Fixtures
# ============================================================================


@pytest.fixture
def pubkey_hex() -> str:
    return PUBKEY_HEX


@pytest.fixture
def pubkey() -> PublicKey:
    return PublicKey.from_hex(PUBKEY_HEX)


@pytest.fixture
def other_pubkey() -> PublicKey:
    return PublicKey.from_hex(OTHER_PUBKEY_HEX)


# ============================================================================
# Event Fixtures
# ============================================================================


@pytest.fixture
def make_event(pubkey: PublicKey) -> Callable[..., Event]:
    """Factory for events with a correct id and a placeholder signature."""

    def _make(
        kind: int = 1,
        created_at: int = 1_700_000_000,
        tags: list[list[str]] | None = None,
        content: str = "hello",
        author: PublicKey | None = None,
    ) -> Event:
        draft = PreEvent(
            pubkey=author or pubkey,
            created_at=created_at,
            kind=EventKind(kind),
            tags=tuple(Tag(tuple(t)) for t in tags or ()),
            content=content,
        )
        rumor = draft.to_rumor()
        return Event(
            id=rumor.id,
            pubkey=rumor.pubkey,
            created_at=rumor.created_at,
            kind=rumor.kind,
            tags=rumor.tags,
            content=rumor.content,
            sig=Signature(b"\x01" * 64),
        )

    return _make


@pytest.fixture
def event_dict(make_event: Callable[..., Event]) -> dict[str, Any]:
    """A NIP-01 event object with one ``e`` and one ``p`` tag."""
    return make_event(
        tags=[
            [
                "e",
                "5df64b33303d62afc799bdc36d178c07b2e1f0d824f31b7dc812219440affab6",
                "wss://r.example",
            ],
            ["p", OTHER_PUBKEY_HEX],
        ]
    ).to_dict()

"""
Canonical signable serialization of an event.

The event id is the SHA-256 of the compact JSON array
``[0, <pubkey hex>, <created_at>, <kind>, <tags>, <content>]`` (NIP-01).
The byte sequence must be identical on every platform, so it is produced
with fixed separators, literal non-ASCII characters and integer-only
numbers; nothing here depends on locale.

Signing the id is the job of a [Signer][nostrwire.utils.signer.Signer].
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Iterable

from .keys import Id, PublicKey
from .kind import EventKind
from .tag import Tag, tags_to_json


def serialize_for_id(
    pubkey: PublicKey,
    created_at: int,
    kind: EventKind,
    tags: Iterable[Tag],
    content: str,
) -> bytes:
    """Return the UTF-8 bytes whose SHA-256 is the event id.

    Examples:
        ```python
        serialize_for_id(pk, 1700000000, EventKind(1), [], "hi")
        # b'[0,"<pubkey hex>",1700000000,1,[],"hi"]'
        ```
    """
    payload = [0, pubkey.as_hex(), created_at, kind.value, tags_to_json(tags), content]
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def compute_id(
    pubkey: PublicKey,
    created_at: int,
    kind: EventKind,
    tags: Iterable[Tag],
    content: str,
) -> Id:
    """Hash the canonical serialization into an event [Id][nostrwire.models.keys.Id]."""
    digest = hashlib.sha256(serialize_for_id(pubkey, created_at, kind, tags, content)).digest()
    return Id(digest)

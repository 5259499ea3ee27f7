"""NIP-specific encodings and documents built on [nostrwire.models][].

Attributes:
    nip05: ``name@domain`` identifiers and the ``nostr.json`` document.
    nip11: Relay information document models with lenient parsing.
    nip19: Bech32 text forms of keys, ids and pointers (TLV codec).
    nip21: ``nostr:`` references embedded in free text.
    nip26: Delegated event signing (conditions, tokens, delegation tags).
    base: [BaseData][nostrwire.nips.base.BaseData], the frozen pydantic base
        for NIP documents.
    parsing: [FieldSpec][nostrwire.nips.parsing.FieldSpec] and
        [parse_fields()][nostrwire.nips.parsing.parse_fields].
"""

from .base import BaseData
from .nip05 import Nip05Address, Nip05Document
from .nip11 import Fee, RelayFees, RelayInformationDocument, RelayLimitation, RelayRetention
from .nip19 import NostrBech32, Prefix, parse_bech32
from .nip21 import Span, find_bech32, find_nostr_urls, to_nostr_url
from .nip26 import (
    DelegationConditions,
    EventDelegation,
    create_delegation,
    delegation_token,
)
from .parsing import FieldSpec, parse_fields


__all__ = [
    "BaseData",
    "DelegationConditions",
    "EventDelegation",
    "Fee",
    "FieldSpec",
    "Nip05Address",
    "Nip05Document",
    "NostrBech32",
    "Prefix",
    "RelayFees",
    "RelayInformationDocument",
    "RelayLimitation",
    "RelayRetention",
    "Span",
    "create_delegation",
    "delegation_token",
    "find_bech32",
    "find_nostr_urls",
    "parse_bech32",
    "parse_fields",
    "to_nostr_url",
]

r"""nostrwire -- Nostr protocol types, codecs and historical wire shapes.

Pure, synchronous value types for the Nostr protocol: event kinds, tags,
events, filters, relay messages, NIP-19 identifiers, NIP-11 documents,
NIP-05 identifiers and NIP-26 delegations, plus upgrade chains that
normalize historical wire shapes.

Imports flow strictly downward:

```text
           utils          signer capability (nostr-sdk), key loading
          /     \
   versioned    nips      historical shapes | NIP-05, 11, 19, 21, 26
          \     /
          models          frozen value types (zero I/O)
             |
           core           exceptions, logging, configuration
```

Note:
    Top-level imports (``from nostrwire import Event``) are resolved lazily
    on first access. Importing from subpackages is equivalent::

        from nostrwire.models import Event, Filter
        from nostrwire.nips.nip19 import decode_naddr
"""

import importlib
from importlib.metadata import version as _get_version


__version__ = _get_version("nostrwire")

__all__ = [
    "EVENT_CHAIN",
    "Event",
    "EventKind",
    "Filter",
    "Id",
    "KeysSigner",
    "KnownKind",
    "Logger",
    "Metadata",
    "NAddr",
    "NEvent",
    "NProfile",
    "NostrWireConfig",
    "NostrWireError",
    "PreEvent",
    "PublicKey",
    "RelayInformationDocument",
    "RelayUrl",
    "Rumor",
    "Signature",
    "Tag",
    "VersionChain",
    "Why",
    "parse_bech32",
    "parse_client_message",
    "parse_relay_message",
]

_LAZY_IMPORTS: dict[str, tuple[str, str]] = {
    "Logger": ("nostrwire.core", "Logger"),
    "NostrWireConfig": ("nostrwire.core", "NostrWireConfig"),
    "NostrWireError": ("nostrwire.core", "NostrWireError"),
    "Event": ("nostrwire.models", "Event"),
    "EventKind": ("nostrwire.models", "EventKind"),
    "Filter": ("nostrwire.models", "Filter"),
    "Id": ("nostrwire.models", "Id"),
    "KnownKind": ("nostrwire.models", "KnownKind"),
    "Metadata": ("nostrwire.models", "Metadata"),
    "NAddr": ("nostrwire.models", "NAddr"),
    "NEvent": ("nostrwire.models", "NEvent"),
    "NProfile": ("nostrwire.models", "NProfile"),
    "PreEvent": ("nostrwire.models", "PreEvent"),
    "PublicKey": ("nostrwire.models", "PublicKey"),
    "RelayUrl": ("nostrwire.models", "RelayUrl"),
    "Rumor": ("nostrwire.models", "Rumor"),
    "Signature": ("nostrwire.models", "Signature"),
    "Tag": ("nostrwire.models", "Tag"),
    "parse_client_message": ("nostrwire.models", "parse_client_message"),
    "parse_relay_message": ("nostrwire.models", "parse_relay_message"),
    "RelayInformationDocument": ("nostrwire.nips", "RelayInformationDocument"),
    "parse_bech32": ("nostrwire.nips", "parse_bech32"),
    "EVENT_CHAIN": ("nostrwire.versioned", "EVENT_CHAIN"),
    "VersionChain": ("nostrwire.versioned", "VersionChain"),
    "Why": ("nostrwire.versioned", "Why"),
    "KeysSigner": ("nostrwire.utils", "KeysSigner"),
}


def __getattr__(name: str) -> object:
    if name in _LAZY_IMPORTS:
        module_path, attr_name = _LAZY_IMPORTS[name]
        module = importlib.import_module(module_path)
        value = getattr(module, attr_name)
        globals()[name] = value
        return value
    raise AttributeError(f"module 'nostrwire' has no attribute {name!r}")


def __dir__() -> list[str]:
    return __all__

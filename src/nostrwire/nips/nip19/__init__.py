"""NIP-19 bech32-encoded identifiers.

Implements [NIP-19](https://github.com/nostr-protocol/nips/blob/master/19.md):
human-readable, checksummed text forms of keys, event ids and pointers.

```text
bech32.encode(prefix, payload)        checksummed radix-32 wrapping
  +-- raw payloads                    note, npub, nsec, ncryptsec, lnurl
  +-- tlv.encode_tlv(fields)          (type, length, value) sequences
        +-- naddr                     d, relays, kind, author
        +-- nevent                    id, relays, author?, kind?
        +-- nprofile                  pubkey, relays
        +-- nrelay                    relay url
```

Decoding always checks the prefix first and raises
[PrefixMismatchError][nostrwire.core.exceptions.PrefixMismatchError] when it
differs from the one the caller asked for. Use
[parse_bech32()][nostrwire.nips.nip19.codecs.parse_bech32] when the kind is
not known in advance.

Examples:
    ```python
    from nostrwire.nips.nip19 import decode_naddr, encode_naddr

    text = encode_naddr(naddr)     # 'naddr1...'
    decode_naddr(text) == naddr    # True (relay hints are not compared)
    ```
"""

from . import bech32, tlv
from .codecs import (
    CODECS,
    LNURL,
    NADDR,
    NCRYPTSEC,
    NEVENT,
    NOTE,
    NPROFILE,
    NPUB,
    NRELAY,
    NSEC,
    Codec,
    NostrBech32,
    Prefix,
    TlvCodec,
    decode_lnurl,
    decode_naddr,
    decode_ncryptsec,
    decode_nevent,
    decode_note,
    decode_nprofile,
    decode_npub,
    decode_nrelay,
    decode_nsec,
    encode_lnurl,
    encode_naddr,
    encode_ncryptsec,
    encode_nevent,
    encode_note,
    encode_nprofile,
    encode_npub,
    encode_nrelay,
    encode_nsec,
    parse_bech32,
)
from .tlv import TlvField, decode_text, encode_tlv, iter_tlv


__all__ = [
    "CODECS",
    "LNURL",
    "NADDR",
    "NCRYPTSEC",
    "NEVENT",
    "NOTE",
    "NPROFILE",
    "NPUB",
    "NRELAY",
    "NSEC",
    "Codec",
    "NostrBech32",
    "Prefix",
    "TlvCodec",
    "TlvField",
    "bech32",
    "decode_lnurl",
    "decode_naddr",
    "decode_ncryptsec",
    "decode_nevent",
    "decode_note",
    "decode_nprofile",
    "decode_npub",
    "decode_nrelay",
    "decode_nsec",
    "decode_text",
    "encode_lnurl",
    "encode_naddr",
    "encode_ncryptsec",
    "encode_nevent",
    "encode_note",
    "encode_nprofile",
    "encode_npub",
    "encode_nrelay",
    "encode_nsec",
    "encode_tlv",
    "iter_tlv",
    "parse_bech32",
    "tlv",
]

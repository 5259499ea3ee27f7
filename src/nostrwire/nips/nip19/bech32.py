"""
Checksummed radix-32 text wrapping for NIP-19 identifiers.

Uses the BIP-173 checksum primitives from the ``bech32`` package but not its
``bech32_encode``/``bech32_decode`` helpers: those cap strings at 90
characters, and TLV identifiers (``nprofile``, ``naddr``...) with several
relay hints are routinely longer.
"""

from __future__ import annotations

from bech32 import CHARSET, bech32_hrp_expand, bech32_polymod, convertbits

from nostrwire.core.exceptions import Bech32Error, PrefixMismatchError


_CHECKSUM_LENGTH = 6
_CHARSET_INDEX = {c: i for i, c in enumerate(CHARSET)}


def _checksum(prefix: str, data5: list[int]) -> list[int]:
    polymod = bech32_polymod([*bech32_hrp_expand(prefix), *data5, 0, 0, 0, 0, 0, 0]) ^ 1
    return [(polymod >> 5 * (5 - i)) & 31 for i in range(_CHECKSUM_LENGTH)]


def encode(prefix: str, data: bytes) -> str:
    """Wrap *data* in a bech32 string with human-readable part *prefix*.

    Examples:
        ```python
        encode("note", bytes(32))   # 'note1qqqq...'
        ```
    """
    data5 = convertbits(list(data), 8, 5, True)
    return prefix + "1" + "".join(CHARSET[d] for d in data5 + _checksum(prefix, data5))


def split(text: str) -> tuple[str, bytes]:
    """Decode any bech32 string into ``(prefix, payload bytes)``.

    Raises:
        Bech32Error: On mixed case, characters outside the charset, a missing
            separator, a bad checksum or non-zero padding.
    """
    if text.lower() != text and text.upper() != text:
        raise Bech32Error("mixed-case bech32 string")
    text = text.lower()
    sep = text.rfind("1")
    if sep < 1 or sep + _CHECKSUM_LENGTH + 1 > len(text):
        raise Bech32Error("missing separator or checksum")
    prefix = text[:sep]
    if any(ord(c) < 33 or ord(c) > 126 for c in prefix):  # noqa: PLR2004 - printable ASCII
        raise Bech32Error("prefix contains non-printable characters")
    try:
        data5 = [_CHARSET_INDEX[c] for c in text[sep + 1 :]]
    except KeyError as e:
        raise Bech32Error(f"invalid bech32 character {e.args[0]!r}") from e
    if bech32_polymod([*bech32_hrp_expand(prefix), *data5]) != 1:
        raise Bech32Error("checksum mismatch")
    payload = convertbits(data5[:-_CHECKSUM_LENGTH], 5, 8, False)
    if payload is None:
        raise Bech32Error("invalid padding")
    return prefix, bytes(payload)


def decode(text: str, expected: str) -> bytes:
    """Decode *text* and require its prefix to equal *expected*.

    Raises:
        Bech32Error: If *text* is not valid bech32.
        PrefixMismatchError: If the prefix differs from *expected*.
    """
    prefix, payload = split(text)
    if prefix != expected:
        raise PrefixMismatchError(expected, prefix)
    return payload

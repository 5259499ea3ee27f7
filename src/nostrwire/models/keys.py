"""
Fixed-width binary value types: event ids, keys and signatures.

Each type is a frozen wrapper over ``bytes`` of a fixed length with hex
conversions. Lengths are enforced at construction; curve-point validity of
a [PublicKey][nostrwire.models.keys.PublicKey] is checked only on request
(``verify=True``) because it costs a call into libsecp256k1 (through coincurve).

See Also:
    [decode_naddr()][nostrwire.nips.nip19.decode_naddr]: Decodes authors with
        ``verify=True`` and drops invalid ones.
    [serialize_for_id()][nostrwire.models.identity.serialize_for_id]: Uses the
        lowercase hex form of the author key.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Self

from coincurve import PublicKeyXOnly

from nostrwire.core.exceptions import InvalidFieldError, NumericRangeError

from ._validation import normalize_hex, validate_instance


@dataclass(frozen=True, slots=True, repr=False)
class _FixedBytes:
    """Base for fixed-length byte values. Subclasses set ``LENGTH`` and ``FIELD``."""

    LENGTH: ClassVar[int] = 32
    FIELD: ClassVar[str] = "bytes"

    data: bytes

    def __post_init__(self) -> None:
        validate_instance(self.data, bytes, self.FIELD)
        if len(self.data) != self.LENGTH:
            raise NumericRangeError(self.FIELD, self.LENGTH, len(self.data))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.as_hex()})"

    def __str__(self) -> str:
        return self.as_hex()

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        return cls(bytes(data))

    @classmethod
    def from_hex(cls, value: str) -> Self:
        """Parse a hex string of exactly ``2 * LENGTH`` digits (any case).

        Raises:
            InvalidFieldError: If *value* is not valid hex of the right length.
        """
        return cls(bytes.fromhex(normalize_hex(value, cls.LENGTH, cls.FIELD)))

    def as_bytes(self) -> bytes:
        return self.data

    def as_hex(self) -> str:
        """Lowercase hex, the only form used on the wire."""
        return self.data.hex()


@dataclass(frozen=True, slots=True, repr=False)
class Id(_FixedBytes):
    """32-byte event id (SHA-256 of the canonical serialization)."""

    LENGTH: ClassVar[int] = 32
    FIELD: ClassVar[str] = "id"

    def leading_zero_bits(self) -> int:
        """Count leading zero bits, the NIP-13 proof-of-work difficulty."""
        bits = 0
        for byte in self.data:
            if byte == 0:
                bits += 8
                continue
            return bits + 8 - byte.bit_length()
        return bits


@dataclass(frozen=True, slots=True, repr=False)
class PublicKey(_FixedBytes):
    """32-byte x-only secp256k1 public key."""

    LENGTH: ClassVar[int] = 32
    FIELD: ClassVar[str] = "pubkey"

    @classmethod
    def from_bytes(cls, data: bytes, *, verify: bool = False) -> Self:
        """Build a key from raw bytes, optionally checking it is a curve point.

        Raises:
            NumericRangeError: If *data* is not 32 bytes long.
            InvalidFieldError: If ``verify`` is set and the bytes are not a
                valid x-only public key.
        """
        key = cls(bytes(data))
        if verify:
            key.verify()
        return key

    @classmethod
    def from_hex(cls, value: str, *, verify: bool = False) -> Self:
        key = cls(bytes.fromhex(normalize_hex(value, cls.LENGTH, cls.FIELD)))
        if verify:
            key.verify()
        return key

    def verify(self) -> None:
        """Raise ``InvalidFieldError`` unless the key is a valid curve point."""
        try:
            PublicKeyXOnly(self.data)
        except ValueError as e:
            raise InvalidFieldError(self.FIELD, f"not a valid x-only public key: {e}") from e


@dataclass(frozen=True, slots=True, repr=False)
class PrivateKey(_FixedBytes):
    """32-byte secp256k1 secret key. Its ``repr`` never shows the key."""

    LENGTH: ClassVar[int] = 32
    FIELD: ClassVar[str] = "private_key"

    def __repr__(self) -> str:
        return "PrivateKey(<redacted>)"

    def __str__(self) -> str:
        return "<redacted>"


@dataclass(frozen=True, slots=True, repr=False)
class Signature(_FixedBytes):
    """64-byte Schnorr signature."""

    LENGTH: ClassVar[int] = 64
    FIELD: ClassVar[str] = "sig"

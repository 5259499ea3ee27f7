"""
Generic type-length-value field encoding used inside NIP-19 identifiers.

Each field is one type byte, one length byte and ``length`` value bytes.
Because the length is a single byte, no value may exceed 255 bytes; this is
a capacity limit of the format itself.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import NamedTuple

from nostrwire.core.exceptions import MalformedTextError, StructuralTlvError


MAX_VALUE_LENGTH = 255


class TlvField(NamedTuple):
    """One decoded field.

    Attributes:
        type: Field type code.
        value: Raw value bytes.
        position: Offset of the field header in the payload.
    """

    type: int
    value: bytes
    position: int


def encode_tlv(fields: Iterable[tuple[int, bytes]]) -> bytes:
    """Concatenate ``(type, value)`` pairs into a TLV payload.

    Raises:
        StructuralTlvError: If a value is longer than 255 bytes or a type code
            does not fit in a byte.
    """
    out = bytearray()
    for field_type, value in fields:
        if not 0 <= field_type <= MAX_VALUE_LENGTH:
            raise StructuralTlvError(f"TLV type {field_type} does not fit in one byte")
        if len(value) > MAX_VALUE_LENGTH:
            raise StructuralTlvError(
                f"TLV value of type {field_type} is {len(value)} bytes, "
                f"max {MAX_VALUE_LENGTH}",
                position=len(out),
            )
        out.append(field_type)
        out.append(len(value))
        out += value
    return bytes(out)


def iter_tlv(data: bytes) -> Iterator[TlvField]:
    """Yield the fields of *data* in arrival order.

    Scanning stops once fewer than two bytes remain, so a single trailing
    byte is ignored.

    Raises:
        StructuralTlvError: If a declared length overruns the buffer.
    """
    pos = 0
    while pos + 2 <= len(data):
        field_type = data[pos]
        length = data[pos + 1]
        start = pos + 2
        if start + length > len(data):
            raise StructuralTlvError(
                f"TLV field of type {field_type} declares {length} bytes, "
                f"only {len(data) - start} remain",
                position=pos,
            )
        yield TlvField(field_type, data[start : start + length], pos)
        pos = start + length


def decode_text(value: bytes, name: str) -> str:
    """Decode a textual field as strict UTF-8.

    Raises:
        MalformedTextError: If *value* is not valid UTF-8.
    """
    try:
        return value.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedTextError(f"{name} is not valid UTF-8: {e.reason}", value) from e

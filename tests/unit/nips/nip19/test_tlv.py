"""
Unit tests for nips.nip19.tlv module.

Tests:
- encode_tlv() layout and capacity limits
- iter_tlv() field order, positions and overruns
- decode_text() strict UTF-8
"""

import pytest

from nostrwire.core.exceptions import MalformedTextError, StructuralTlvError
from nostrwire.nips.nip19.tlv import MAX_VALUE_LENGTH, TlvField, decode_text, encode_tlv, iter_tlv


class TestEncodeTlv:
    """Tests for encode_tlv()."""

    def test_layout(self) -> None:
        assert encode_tlv([(0, b"ab"), (1, b"")]) == b"\x00\x02ab\x01\x00"

    def test_max_length_value(self) -> None:
        payload = encode_tlv([(0, b"x" * MAX_VALUE_LENGTH)])
        assert payload[1] == 255

    def test_value_too_long(self) -> None:
        with pytest.raises(StructuralTlvError) as exc_info:
            encode_tlv([(0, b"x"), (1, b"x" * 256)])
        assert exc_info.value.position == 3

    def test_type_too_large(self) -> None:
        with pytest.raises(StructuralTlvError):
            encode_tlv([(256, b"")])


class TestIterTlv:
    """Tests for iter_tlv()."""

    def test_fields_in_arrival_order(self) -> None:
        data = b"\x03\x01z\x00\x02ab"
        assert list(iter_tlv(data)) == [TlvField(3, b"z", 0), TlvField(0, b"ab", 3)]

    def test_empty(self) -> None:
        assert list(iter_tlv(b"")) == []

    def test_single_trailing_byte_ignored(self) -> None:
        assert list(iter_tlv(b"\x00\x01a\x07")) == [TlvField(0, b"a", 0)]

    def test_overrun(self) -> None:
        with pytest.raises(StructuralTlvError) as exc_info:
            list(iter_tlv(b"\x00\x01a\x01\x05ab"))
        assert exc_info.value.position == 3


class TestDecodeText:
    """Tests for decode_text()."""

    def test_utf8(self) -> None:
        assert decode_text("café".encode(), "d") == "café"

    def test_invalid_utf8(self) -> None:
        with pytest.raises(MalformedTextError) as exc_info:
            decode_text(b"\xff\xfe", "relay")
        assert exc_info.value.raw == b"\xff\xfe"
        assert "relay" in str(exc_info.value)

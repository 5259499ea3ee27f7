"""
Concrete NIP-19 identifier codecs.

Every identifier kind is one [Codec][nostrwire.nips.nip19.codecs.Codec]
instance bound to a fixed [Prefix][nostrwire.nips.nip19.codecs.Prefix]. TLV
shapes (``naddr``, ``nevent``, ``nprofile``, ``nrelay``) subclass
[TlvCodec][nostrwire.nips.nip19.codecs.TlvCodec] and only describe how a value
maps to fields; raw shapes (``note``, ``npub``, ``nsec``, ``ncryptsec``,
``lnurl``) wrap their bytes directly.

Decoding follows one leniency policy for every TLV shape:

* fields may arrive in any order;
* unknown field types are skipped;
* a malformed embedded author key is dropped, not fatal;
* textual fields must be valid UTF-8 and fixed-width fields must have their
  exact width.

Both tolerated cases are logged at debug level on ``nostrwire.nip19``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, ClassVar, Generic, TypeVar

from nostrwire.core.exceptions import (
    InvalidFieldError,
    NumericRangeError,
    PrefixMismatchError,
    SemanticTlvError,
    StructuralTlvError,
)
from nostrwire.core.logger import Logger
from nostrwire.models.keys import Id, PrivateKey, PublicKey
from nostrwire.models.kind import EventKind
from nostrwire.models.pointers import NAddr, NEvent, NProfile

from . import bech32
from .tlv import TlvField, decode_text, encode_tlv, iter_tlv


_logger = Logger("nostrwire.nip19")

T = TypeVar("T")

_KIND_LENGTH = 4


class Prefix(StrEnum):
    """Registered human-readable prefixes, one per identifier kind."""

    LNURL = "lnurl"
    NADDR = "naddr"
    NCRYPTSEC = "ncryptsec"
    NEVENT = "nevent"
    NOTE = "note"
    NPROFILE = "nprofile"
    NPUB = "npub"
    NRELAY = "nrelay"
    NSEC = "nsec"


class Codec(ABC, Generic[T]):
    """Encode values of one kind to bech32 text and back."""

    prefix: ClassVar[Prefix]

    def encode(self, value: T) -> str:
        return bech32.encode(self.prefix, self.to_payload(value))

    def decode(self, text: str) -> T:
        """Decode *text*, which must carry exactly this codec's prefix.

        Raises:
            CodecError: A subclass describing what is wrong with *text*.
        """
        return self.from_payload(bech32.decode(text, self.prefix))

    @abstractmethod
    def to_payload(self, value: T) -> bytes: ...

    @abstractmethod
    def from_payload(self, payload: bytes) -> T: ...


class TlvCodec(Codec[T]):
    """Codec whose payload is a sequence of TLV fields."""

    def to_payload(self, value: T) -> bytes:
        return encode_tlv(self.to_fields(value))

    def from_payload(self, payload: bytes) -> T:
        return self.from_fields(iter_tlv(payload))

    @abstractmethod
    def to_fields(self, value: T) -> Iterable[tuple[int, bytes]]: ...

    @abstractmethod
    def from_fields(self, fields: Iterator[TlvField]) -> T: ...

    def skip_unknown(self, field: TlvField) -> None:
        _logger.debug(
            "tlv_unknown_field_skipped",
            prefix=self.prefix.value,
            field_type=field.type,
            position=field.position,
        )


def _decode_kind(value: bytes) -> EventKind:
    if len(value) != _KIND_LENGTH:
        raise NumericRangeError("kind", _KIND_LENGTH, len(value))
    return EventKind(int.from_bytes(value, "big"))


def _encode_kind(kind: EventKind) -> bytes:
    return kind.value.to_bytes(_KIND_LENGTH, "big")


def _decode_author(codec: TlvCodec[Any], field: TlvField) -> PublicKey | None:
    try:
        return PublicKey.from_bytes(field.value, verify=True)
    except (NumericRangeError, InvalidFieldError) as e:
        _logger.debug(
            "tlv_author_dropped",
            prefix=codec.prefix.value,
            position=field.position,
            error=str(e),
        )
        return None


def _missing(prefix: Prefix, name: str) -> StructuralTlvError:
    return StructuralTlvError(f"{prefix.value} is missing its {name} field", field=name)


# ---------------------------------------------------------------------------
# TLV shapes
# ---------------------------------------------------------------------------


class NAddrCodec(TlvCodec[NAddr]):
    """``naddr``: 0 = d tag, 1 = relay (repeatable), 2 = author, 3 = kind.

    Encoding writes d, relays, kind, author in that order.
    """

    prefix = Prefix.NADDR

    def to_fields(self, value: NAddr) -> Iterable[tuple[int, bytes]]:
        yield 0, value.d.encode("utf-8")
        for relay in value.relays:
            yield 1, relay.encode("utf-8")
        yield 3, _encode_kind(value.kind)
        yield 2, value.author.as_bytes()

    def from_fields(self, fields: Iterator[TlvField]) -> NAddr:
        d: str | None = None
        relays: list[str] = []
        kind: EventKind | None = None
        author: PublicKey | None = None

        for field in fields:
            if field.type == 0:
                d = decode_text(field.value, "d")
            elif field.type == 1:
                relays.append(decode_text(field.value, "relay"))
            elif field.type == 2:  # noqa: PLR2004
                author = _decode_author(self, field) or author
            elif field.type == 3:  # noqa: PLR2004
                kind = _decode_kind(field.value)
            else:
                self.skip_unknown(field)

        if d is None:
            raise _missing(self.prefix, "d")
        if kind is None:
            raise _missing(self.prefix, "kind")
        if author is None:
            raise _missing(self.prefix, "author")
        if not kind.is_replaceable():
            raise SemanticTlvError(f"naddr kind {kind.value} is not replaceable")
        return NAddr(d, kind, author, relays=tuple(relays))


class NEventCodec(TlvCodec[NEvent]):
    """``nevent``: 0 = id, 1 = relay (repeatable), 2 = author, 3 = kind."""

    prefix = Prefix.NEVENT

    def to_fields(self, value: NEvent) -> Iterable[tuple[int, bytes]]:
        yield 0, value.id.as_bytes()
        for relay in value.relays:
            yield 1, relay.encode("utf-8")
        if value.author is not None:
            yield 2, value.author.as_bytes()
        if value.kind is not None:
            yield 3, _encode_kind(value.kind)

    def from_fields(self, fields: Iterator[TlvField]) -> NEvent:
        event_id: Id | None = None
        relays: list[str] = []
        author: PublicKey | None = None
        kind: EventKind | None = None

        for field in fields:
            if field.type == 0:
                event_id = Id.from_bytes(field.value)
            elif field.type == 1:
                relays.append(decode_text(field.value, "relay"))
            elif field.type == 2:  # noqa: PLR2004
                author = _decode_author(self, field) or author
            elif field.type == 3:  # noqa: PLR2004
                kind = _decode_kind(field.value)
            else:
                self.skip_unknown(field)

        if event_id is None:
            raise _missing(self.prefix, "id")
        return NEvent(event_id, tuple(relays), author, kind)


class NProfileCodec(TlvCodec[NProfile]):
    """``nprofile``: 0 = public key, 1 = relay (repeatable)."""

    prefix = Prefix.NPROFILE

    def to_fields(self, value: NProfile) -> Iterable[tuple[int, bytes]]:
        yield 0, value.pubkey.as_bytes()
        for relay in value.relays:
            yield 1, relay.encode("utf-8")

    def from_fields(self, fields: Iterator[TlvField]) -> NProfile:
        pubkey: PublicKey | None = None
        relays: list[str] = []

        for field in fields:
            if field.type == 0:
                pubkey = PublicKey.from_bytes(field.value)
            elif field.type == 1:
                relays.append(decode_text(field.value, "relay"))
            else:
                self.skip_unknown(field)

        if pubkey is None:
            raise _missing(self.prefix, "pubkey")
        return NProfile(pubkey, tuple(relays))


class NRelayCodec(TlvCodec[str]):
    """``nrelay`` (deprecated by NIP-19 but still seen): 0 = relay URL."""

    prefix = Prefix.NRELAY

    def to_fields(self, value: str) -> Iterable[tuple[int, bytes]]:
        yield 0, value.encode("utf-8")

    def from_fields(self, fields: Iterator[TlvField]) -> str:
        url: str | None = None
        for field in fields:
            if field.type == 0:
                if url is None:
                    url = decode_text(field.value, "relay")
            else:
                self.skip_unknown(field)
        if url is None:
            raise _missing(self.prefix, "relay")
        return url


# ---------------------------------------------------------------------------
# Raw shapes
# ---------------------------------------------------------------------------


class NoteCodec(Codec[Id]):
    prefix = Prefix.NOTE

    def to_payload(self, value: Id) -> bytes:
        return value.as_bytes()

    def from_payload(self, payload: bytes) -> Id:
        return Id.from_bytes(payload)


class NpubCodec(Codec[PublicKey]):
    prefix = Prefix.NPUB

    def to_payload(self, value: PublicKey) -> bytes:
        return value.as_bytes()

    def from_payload(self, payload: bytes) -> PublicKey:
        return PublicKey.from_bytes(payload)


class NsecCodec(Codec[PrivateKey]):
    prefix = Prefix.NSEC

    def to_payload(self, value: PrivateKey) -> bytes:
        return value.as_bytes()

    def from_payload(self, payload: bytes) -> PrivateKey:
        return PrivateKey.from_bytes(payload)


class NcryptsecCodec(Codec[bytes]):
    """``ncryptsec``: NIP-49 encrypted private key, carried as opaque bytes."""

    prefix = Prefix.NCRYPTSEC

    def to_payload(self, value: bytes) -> bytes:
        return bytes(value)

    def from_payload(self, payload: bytes) -> bytes:
        return payload


class LnurlCodec(Codec[str]):
    """``lnurl``: an LNURL-pay URL (LUD-01)."""

    prefix = Prefix.LNURL

    def to_payload(self, value: str) -> bytes:
        return value.encode("utf-8")

    def from_payload(self, payload: bytes) -> str:
        return decode_text(payload, "lnurl")


NADDR = NAddrCodec()
NEVENT = NEventCodec()
NPROFILE = NProfileCodec()
NRELAY = NRelayCodec()
NOTE = NoteCodec()
NPUB = NpubCodec()
NSEC = NsecCodec()
NCRYPTSEC = NcryptsecCodec()
LNURL = LnurlCodec()

CODECS: dict[Prefix, Codec[Any]] = {
    codec.prefix: codec
    for codec in (NADDR, NEVENT, NPROFILE, NRELAY, NOTE, NPUB, NSEC, NCRYPTSEC, LNURL)
}


# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------


def encode_naddr(value: NAddr) -> str:
    return NADDR.encode(value)


def decode_naddr(text: str) -> NAddr:
    """Decode an ``naddr`` string.

    Raises:
        PrefixMismatchError: If *text* is not an ``naddr``.
        StructuralTlvError: If a field overruns the payload or d, kind or
            author is missing.
        MalformedTextError: If the d tag or a relay is not valid UTF-8.
        NumericRangeError: If the kind field is not exactly 4 bytes.
        SemanticTlvError: If the kind is not replaceable.
    """
    return NADDR.decode(text)


def encode_nevent(value: NEvent) -> str:
    return NEVENT.encode(value)


def decode_nevent(text: str) -> NEvent:
    return NEVENT.decode(text)


def encode_nprofile(value: NProfile) -> str:
    return NPROFILE.encode(value)


def decode_nprofile(text: str) -> NProfile:
    return NPROFILE.decode(text)


def encode_nrelay(url: str) -> str:
    return NRELAY.encode(url)


def decode_nrelay(text: str) -> str:
    return NRELAY.decode(text)


def encode_note(value: Id) -> str:
    return NOTE.encode(value)


def decode_note(text: str) -> Id:
    return NOTE.decode(text)


def encode_npub(value: PublicKey) -> str:
    return NPUB.encode(value)


def decode_npub(text: str) -> PublicKey:
    return NPUB.decode(text)


def encode_nsec(value: PrivateKey) -> str:
    return NSEC.encode(value)


def decode_nsec(text: str) -> PrivateKey:
    return NSEC.decode(text)


def encode_ncryptsec(value: bytes) -> str:
    return NCRYPTSEC.encode(value)


def decode_ncryptsec(text: str) -> bytes:
    return NCRYPTSEC.decode(text)


def encode_lnurl(url: str) -> str:
    return LNURL.encode(url)


def decode_lnurl(text: str) -> str:
    return LNURL.decode(text)


# ---------------------------------------------------------------------------
# Dispatch by prefix
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class NostrBech32:
    """Any decoded NIP-19 identifier.

    Attributes:
        prefix: Which kind of identifier this is.
        value: The decoded value; its type follows from ``prefix``
            (``NAddr``, ``NEvent``, ``NProfile``, ``Id``, ``PublicKey``,
            ``PrivateKey``, ``bytes`` or ``str``).
    """

    prefix: Prefix
    value: Any

    def to_bech32(self) -> str:
        return CODECS[self.prefix].encode(self.value)


def parse_bech32(text: str) -> NostrBech32:
    """Decode an identifier of any registered kind.

    Raises:
        Bech32Error: If *text* is not valid bech32.
        PrefixMismatchError: If the prefix is not a registered one
            (``expected`` lists the registered prefixes).
        CodecError: Any failure of the selected codec.
    """
    prefix, payload = bech32.split(text)
    try:
        known = Prefix(prefix)
    except ValueError:
        raise PrefixMismatchError("|".join(p.value for p in Prefix), prefix) from None
    return NostrBech32(known, CODECS[known].from_payload(payload))

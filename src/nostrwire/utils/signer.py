"""
Signing, verification and content encryption through nostr-sdk.

nostrwire never implements the cryptography itself. It produces the
canonical bytes ([serialize_for_id()][nostrwire.models.identity.serialize_for_id])
and hands them to an external capability described by the
[Signer][nostrwire.utils.signer.Signer] protocol.
[KeysSigner][nostrwire.utils.signer.KeysSigner] is the implementation backed
by an in-memory ``nostr_sdk.Keys``.

Note:
    nostr-sdk stores kinds as 16-bit numbers, so events with a kind above
    65535 cannot be signed here even though
    [EventKind][nostrwire.models.kind.EventKind] represents them.

Examples:
    ```python
    from nostr_sdk import Keys

    signer = KeysSigner(Keys.generate())
    draft = PreEvent(signer.public_key(), 1700000000, EventKind(1), (), "hello")
    event = signer.sign_event(draft)
    verify_event(event)   # True
    ```
"""

from __future__ import annotations

from enum import StrEnum
from typing import Protocol, runtime_checkable

from coincurve import PrivateKey as CurvePrivateKey
from nostr_sdk import Event as NostrEvent
from nostr_sdk import EventBuilder, Keys, Kind, Nip44Version, NostrSdkError, Timestamp
from nostr_sdk import PublicKey as NostrPublicKey
from nostr_sdk import Tag as NostrTag
from nostr_sdk import nip04_decrypt, nip04_encrypt, nip44_decrypt, nip44_encrypt

from nostrwire.core.config import NostrWireConfig
from nostrwire.core.exceptions import SignerError
from nostrwire.core.logger import Logger
from nostrwire.models.constants import SIGNABLE_KIND_MAX
from nostrwire.models.event import Event, PreEvent
from nostrwire.models.keys import PublicKey, Signature

from .keys import load_keys_from_env


_logger = Logger("nostrwire.signer")


class ContentEncryptionAlgorithm(StrEnum):
    """Direct-message content encryption schemes."""

    NIP04 = "nip04"
    NIP44_V2 = "nip44_v2"


@runtime_checkable
class Signer(Protocol):
    """The external capability the core relies on for cryptography."""

    def public_key(self) -> PublicKey: ...

    def sign_event(self, pre_event: PreEvent) -> Event: ...

    def encrypt(
        self, other: PublicKey, plaintext: str, algorithm: ContentEncryptionAlgorithm
    ) -> str: ...

    def decrypt(
        self, other: PublicKey, ciphertext: str, algorithm: ContentEncryptionAlgorithm
    ) -> str: ...


class KeysSigner:
    """[Signer][nostrwire.utils.signer.Signer] backed by ``nostr_sdk.Keys``.

    Raises:
        SignerError: From every operation when nostr-sdk refuses or fails.
    """

    def __init__(self, keys: Keys) -> None:
        self._keys = keys
        self._public_key = PublicKey.from_hex(keys.public_key().to_hex())

    def __repr__(self) -> str:
        return f"KeysSigner({self._public_key.as_hex()})"

    @classmethod
    def from_env(cls, env_var: str = "PRIVATE_KEY") -> KeysSigner:
        """Build a signer from the key in *env_var* (``ConfigurationError`` if unusable)."""
        return cls(load_keys_from_env(env_var))

    @classmethod
    def from_config(cls, config: NostrWireConfig) -> KeysSigner:
        """Build a signer from the variable named by ``config.keys_env``."""
        return cls.from_env(config.keys_env)

    def public_key(self) -> PublicKey:
        return self._public_key

    def sign_event(self, pre_event: PreEvent) -> Event:
        """Hash and sign *pre_event*.

        The id is computed locally and must agree with the one nostr-sdk
        derives; a disagreement means the canonical serialization differs
        and is reported as an error rather than producing an event other
        clients would reject.

        Raises:
            SignerError: If the draft belongs to another key, its kind is
                not signable, or nostr-sdk fails.
        """
        if pre_event.pubkey != self._public_key:
            raise SignerError(
                f"draft is authored by {pre_event.pubkey.as_hex()}, signer holds "
                f"{self._public_key.as_hex()}"
            )
        if pre_event.kind.value > SIGNABLE_KIND_MAX:
            raise SignerError(f"kind {pre_event.kind.value} exceeds {SIGNABLE_KIND_MAX}")

        expected_id = pre_event.compute_id()
        try:
            builder = (
                EventBuilder(Kind(pre_event.kind.value), pre_event.content)
                .tags([NostrTag.parse(tag.to_list()) for tag in pre_event.tags])
                .custom_created_at(Timestamp.from_secs(pre_event.created_at))
            )
            signed = builder.finalize(self._keys)
        except NostrSdkError as e:
            raise SignerError(f"nostr-sdk failed to sign: {e}") from e

        event = Event.from_json(signed.as_json())
        if event.id != expected_id:
            raise SignerError(
                f"id mismatch: computed {expected_id.as_hex()}, nostr-sdk produced "
                f"{event.id.as_hex()}"
            )
        _logger.debug("event_signed", id=event.id.as_hex(), kind=event.kind.value)
        return event

    def sign_schnorr(self, message: bytes) -> Signature:
        """BIP-340 signature over a 32-byte *message* digest.

        Raises:
            SignerError: If *message* is not 32 bytes.
        """
        secret = bytes.fromhex(self._keys.secret_key().to_hex())
        try:
            return Signature(CurvePrivateKey(secret).sign_schnorr(message))
        except ValueError as e:
            raise SignerError(f"schnorr signing failed: {e}") from e

    def encrypt(
        self,
        other: PublicKey,
        plaintext: str,
        algorithm: ContentEncryptionAlgorithm = ContentEncryptionAlgorithm.NIP44_V2,
    ) -> str:
        secret = self._keys.secret_key()
        try:
            peer = NostrPublicKey.parse(other.as_hex())
            if algorithm is ContentEncryptionAlgorithm.NIP04:
                return nip04_encrypt(secret, peer, plaintext)
            return nip44_encrypt(secret, peer, plaintext, Nip44Version.V2)
        except NostrSdkError as e:
            raise SignerError(f"{algorithm.value} encryption failed: {e}") from e

    def decrypt(
        self,
        other: PublicKey,
        ciphertext: str,
        algorithm: ContentEncryptionAlgorithm = ContentEncryptionAlgorithm.NIP44_V2,
    ) -> str:
        secret = self._keys.secret_key()
        try:
            peer = NostrPublicKey.parse(other.as_hex())
            if algorithm is ContentEncryptionAlgorithm.NIP04:
                return nip04_decrypt(secret, peer, ciphertext)
            return nip44_decrypt(secret, peer, ciphertext)
        except NostrSdkError as e:
            raise SignerError(f"{algorithm.value} decryption failed: {e}") from e


def verify_event(event: Event) -> bool:
    """Check the id and signature of *event* with nostr-sdk.

    Never raises: anything nostr-sdk cannot parse or verify is ``False``.
    """
    if not event.has_valid_id():
        return False
    try:
        return NostrEvent.from_json(event.to_json()).verify_signature()
    except NostrSdkError as e:
        _logger.debug("event_verification_failed", id=event.id.as_hex(), error=str(e))
        return False

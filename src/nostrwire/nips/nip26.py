"""
NIP-26 delegated event signing.

A delegator authorizes another key (the delegatee) to publish on its behalf
by signing a *delegation token*:

```text
sha256("nostr:delegation:<delegatee pubkey hex>:<conditions>")
```

The delegatee carries the grant in a ``delegation`` tag on each event it
publishes:

```text
["delegation", <delegator pubkey hex>, <conditions>, <token signature hex>]
```

Conditions are ``&``-joined clauses limiting which events the grant covers:
``kind=<n>`` (repeatable, any listed kind), ``created_at><t>`` and
``created_at<<t>`` (strict bounds). The signature covers the exact
conditions text, so it is stored verbatim alongside the parsed clauses.

Examples:
    ```python
    conditions = DelegationConditions.build(
        kinds=[EventKind(1)], created_after=1_700_000_000, created_before=1_710_000_000
    )
    delegation = create_delegation(delegator_signer, delegatee_pubkey, conditions)
    tags = [delegation.to_tag()]
    ...
    EventDelegation.from_event(event).validates(event)   # True
    ```
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol

from coincurve import PublicKeyXOnly

from nostrwire.core.exceptions import InvalidFieldError
from nostrwire.core.logger import Logger
from nostrwire.models._validation import validate_instance, validate_str, validate_timestamp
from nostrwire.models.event import Event
from nostrwire.models.keys import PublicKey, Signature
from nostrwire.models.kind import EventKind
from nostrwire.models.tag import Tag


DELEGATION_TAG = "delegation"
_TOKEN_PREFIX = "nostr:delegation:"

_logger = Logger("nostrwire.nip26")


def _parse_number(raw: str, name: str) -> int:
    if not (raw.isascii() and raw.isdigit()):
        raise InvalidFieldError(name, f"not a number: {raw!r}")
    return int(raw)


@dataclass(frozen=True, slots=True)
class DelegationConditions:
    """Parsed delegation conditions, keeping the signed text.

    Attributes:
        text: The conditions string exactly as signed.
        kinds: Kinds the grant covers; empty means every kind.
        created_after: Exclusive lower bound on ``created_at``.
        created_before: Exclusive upper bound on ``created_at``.
    """

    text: str
    kinds: tuple[EventKind, ...] = field(init=False, compare=False)
    created_after: int | None = field(init=False, compare=False)
    created_before: int | None = field(init=False, compare=False)

    def __post_init__(self) -> None:
        validate_str(self.text, "conditions")
        kinds: list[EventKind] = []
        after: int | None = None
        before: int | None = None
        for clause in self.text.split("&") if self.text else ():
            if clause.startswith("kind="):
                kind = EventKind(_parse_number(clause[5:], "kind"))
                if kind not in kinds:
                    kinds.append(kind)
            elif clause.startswith("created_at>"):
                if after is not None:
                    raise InvalidFieldError("conditions", "created_at> given twice")
                after = _parse_number(clause[11:], "created_at")
            elif clause.startswith("created_at<"):
                if before is not None:
                    raise InvalidFieldError("conditions", "created_at< given twice")
                before = _parse_number(clause[11:], "created_at")
            else:
                raise InvalidFieldError("conditions", f"unknown clause {clause!r}")
        object.__setattr__(self, "kinds", tuple(kinds))
        object.__setattr__(self, "created_after", after)
        object.__setattr__(self, "created_before", before)

    def __str__(self) -> str:
        return self.text

    @classmethod
    def build(
        cls,
        *,
        kinds: Iterable[EventKind] = (),
        created_after: int | None = None,
        created_before: int | None = None,
    ) -> DelegationConditions:
        """Compose the conditions text from its parts: kinds first, then the bounds."""
        parts: list[str] = []
        for kind in kinds:
            validate_instance(kind, EventKind, "kind")
            parts.append(f"kind={kind.value}")
        if created_after is not None:
            validate_timestamp(created_after, "created_at")
            parts.append(f"created_at>{created_after}")
        if created_before is not None:
            validate_timestamp(created_before, "created_at")
            parts.append(f"created_at<{created_before}")
        return cls("&".join(parts))

    def allows(self, kind: EventKind, created_at: int) -> bool:
        if self.kinds and kind not in self.kinds:
            return False
        if self.created_after is not None and created_at <= self.created_after:
            return False
        if self.created_before is not None and created_at >= self.created_before:
            return False
        return True


def delegation_token(delegatee: PublicKey, conditions: DelegationConditions) -> bytes:
    """The 32-byte digest the delegator signs."""
    text = f"{_TOKEN_PREFIX}{delegatee.as_hex()}:{conditions.text}"
    return hashlib.sha256(text.encode("utf-8")).digest()


@dataclass(frozen=True, slots=True)
class EventDelegation:
    """A signed delegation grant as carried in a ``delegation`` tag."""

    delegator: PublicKey
    conditions: DelegationConditions
    sig: Signature

    def __post_init__(self) -> None:
        validate_instance(self.delegator, PublicKey, "delegator")
        validate_instance(self.conditions, DelegationConditions, "conditions")
        validate_instance(self.sig, Signature, "sig")

    @classmethod
    def from_tag(cls, tag: Tag) -> EventDelegation:
        """Parse a ``["delegation", pubkey, conditions, sig]`` tag.

        Raises:
            InvalidFieldError: If the tag is not a delegation tag or a field
                is malformed.
        """
        if tag.tagname != DELEGATION_TAG:
            raise InvalidFieldError(
                "delegation", f"expected a 'delegation' tag, got {tag.tagname!r}"
            )
        if len(tag) < 4:  # noqa: PLR2004 - name, pubkey, conditions, sig
            raise InvalidFieldError("delegation", "tag needs pubkey, conditions and sig")
        return cls(
            delegator=PublicKey.from_hex(tag.fields[1]),
            conditions=DelegationConditions(tag.fields[2]),
            sig=Signature.from_hex(tag.fields[3]),
        )

    @classmethod
    def from_event(cls, event: Event) -> EventDelegation | None:
        """The grant in *event*'s first ``delegation`` tag, if it has one."""
        for tag in event.tags:
            if tag.tagname == DELEGATION_TAG:
                return cls.from_tag(tag)
        return None

    def to_tag(self) -> Tag:
        return Tag(
            (DELEGATION_TAG, self.delegator.as_hex(), self.conditions.text, self.sig.as_hex())
        )

    def verify(self, delegatee: PublicKey) -> bool:
        """Check the token signature for *delegatee*. Never raises."""
        token = delegation_token(delegatee, self.conditions)
        try:
            return PublicKeyXOnly(self.delegator.data).verify(self.sig.data, token)
        except ValueError as e:
            _logger.debug(
                "delegation_verification_failed", delegator=self.delegator.as_hex(), error=str(e)
            )
            return False

    def validates(self, event: Event) -> bool:
        """True if the grant is signed for *event*'s author and covers it."""
        return self.conditions.allows(event.kind, event.created_at) and self.verify(event.pubkey)


class SchnorrSigner(Protocol):
    def public_key(self) -> PublicKey: ...

    def sign_schnorr(self, message: bytes) -> Signature: ...


def create_delegation(
    delegator: SchnorrSigner, delegatee: PublicKey, conditions: DelegationConditions
) -> EventDelegation:
    """Sign a grant letting *delegatee* publish under *conditions*."""
    sig = delegator.sign_schnorr(delegation_token(delegatee, conditions))
    return EventDelegation(delegator.public_key(), conditions, sig)

"""nostrwire exception hierarchy.

Provides typed exceptions for every failure a boundary-facing decode can
report, so callers can tell a structural problem in a peer's bytes apart
from a well-formed value that violates a protocol rule.

Exception hierarchy:

```text
NostrWireError (base -- never raised directly)
├── ConfigurationError        -- config validation, missing keys, bad YAML
├── InvalidFieldError         -- a model field violates its invariant (also a ValueError)
├── CodecError                -- NIP-19 text and TLV failures
│   ├── Bech32Error           -- bad charset, mixed case, checksum, padding
│   ├── PrefixMismatchError   -- human-readable prefix differs from the expected one
│   ├── StructuralTlvError    -- field overruns the buffer, required field missing
│   ├── SemanticTlvError      -- well-formed TLV with a meaningless value
│   ├── MalformedTextError    -- invalid UTF-8 in a textual field
│   └── NumericRangeError     -- fixed-width numeric field has the wrong length
├── VersionIncompatibleError  -- a historical shape cannot reach the canonical one
└── SignerError               -- the external signer capability failed
```

Tolerated failures (unknown TLV field types, a malformed author key inside
an ``naddr``) are absorbed by the codec and never raised.

See Also:
    [nostrwire.nips.nip19][]: Raises the
        [CodecError][nostrwire.core.exceptions.CodecError] family.
    [nostrwire.versioned][]: Raises
        [VersionIncompatibleError][nostrwire.core.exceptions.VersionIncompatibleError].
"""

from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from nostrwire.versioned.why import Why


class NostrWireError(Exception):
    """Base exception for all nostrwire errors.

    Never raised directly -- always use a specific subclass.
    """


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ConfigurationError(NostrWireError):
    """Invalid or missing configuration (YAML, env vars)."""


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class InvalidFieldError(NostrWireError, ValueError):
    """A model field failed validation during construction.

    Subclasses ``ValueError`` so callers that only know the standard
    library contract still catch it.

    Attributes:
        field: Name of the offending field (``"id"``, ``"pubkey"``, ``"kind"``...).
        message: What is wrong with it (``"missing"`` when absent).
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


# ---------------------------------------------------------------------------
# Codec
# ---------------------------------------------------------------------------


class CodecError(NostrWireError):
    """Base for bech32 and TLV encoding/decoding failures."""


class Bech32Error(CodecError):
    """The text is not a valid checksummed bech32 string."""


class PrefixMismatchError(CodecError):
    """The human-readable prefix differs from the one the decoder expects.

    Attributes:
        expected: Prefix required by the decode operation.
        actual: Prefix found in the input.
    """

    def __init__(self, expected: str, actual: str) -> None:
        super().__init__(f"expected prefix {expected!r}, got {actual!r}")
        self.expected = expected
        self.actual = actual


class StructuralTlvError(CodecError):
    """The TLV byte stream is structurally broken.

    Raised when a declared length overruns the remaining buffer, when a
    value is too long to encode, or when a required field is absent.

    Attributes:
        position: Byte offset of the offending field header, if known.
        field: Name of the missing required field, if that is the cause.
    """

    def __init__(
        self,
        message: str,
        *,
        position: int | None = None,
        field: str | None = None,
    ) -> None:
        super().__init__(message)
        self.position = position
        self.field = field


class SemanticTlvError(CodecError):
    """Well-formed TLV whose decoded meaning violates a protocol rule."""


class MalformedTextError(CodecError):
    """A textual TLV field is not valid UTF-8.

    Attributes:
        raw: The undecodable bytes.
    """

    def __init__(self, message: str, raw: bytes) -> None:
        super().__init__(message)
        self.raw = raw


class NumericRangeError(CodecError):
    """A fixed-width numeric or key field has the wrong byte length.

    Attributes:
        expected: Required length in bytes.
        actual: Length found in the input.
    """

    def __init__(self, name: str, expected: int, actual: int) -> None:
        super().__init__(f"{name} must be {expected} bytes, got {actual}")
        self.expected = expected
        self.actual = actual


# ---------------------------------------------------------------------------
# Versioning
# ---------------------------------------------------------------------------


class VersionIncompatibleError(NostrWireError):
    """A historical record cannot be normalized to (or from) the canonical shape.

    Attributes:
        entity: Name of the versioned entity family (``"event"``, ``"tag"``...).
        why: The [Why][nostrwire.versioned.why.Why] reason.
        detail: Free-form context for logs and test assertions.
    """

    def __init__(self, entity: str, why: Why, detail: str = "") -> None:
        message = f"{entity}: {why.value}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)
        self.entity = entity
        self.why = why
        self.detail = detail


# ---------------------------------------------------------------------------
# Signer
# ---------------------------------------------------------------------------


class SignerError(NostrWireError):
    """The external signing or encryption capability failed."""

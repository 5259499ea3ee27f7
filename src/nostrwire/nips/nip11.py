"""
NIP-11 relay information document models.

Typed pydantic models for the JSON document a relay serves at its HTTP
endpoint (``Accept: application/nostr+json``): identification, server
limitations, retention policies and fee schedules. Fetching the document is
out of scope; these models only validate and reshape it.

Documents from the wild are parsed with ``from_untrusted()``, which keeps
every well-typed field and drops the rest. ``from_dict()`` is strict.

See Also:
    [nostrwire.versioned.nip11][]: Older document shapes and their upgrade
        into [RelayInformationDocument][nostrwire.nips.nip11.RelayInformationDocument].
"""

from __future__ import annotations

import re
from typing import Any, ClassVar

from pydantic import ConfigDict, Field, StrictBool, StrictInt, field_validator

from nostrwire.models.kind import EventKind, EventKindOrRange

from .base import BaseData
from .parsing import FieldSpec


_HEX_PUBKEY_RE = re.compile(r"^[0-9a-f]{64}$")

KindRangePair = tuple[StrictInt, StrictInt]


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_pubkey(value: str | None) -> str | None:
    if value is not None and not _HEX_PUBKEY_RE.match(value):
        raise ValueError("must be 64 lowercase hex characters")
    return value


class RelayLimitation(BaseData):
    """Server-imposed limits. Every field is optional."""

    max_message_length: StrictInt | None = None
    max_subscriptions: StrictInt | None = None
    max_filters: StrictInt | None = None
    max_limit: StrictInt | None = None
    max_subid_length: StrictInt | None = None
    max_event_tags: StrictInt | None = None
    max_content_length: StrictInt | None = None
    min_pow_difficulty: StrictInt | None = None
    auth_required: StrictBool | None = None
    payment_required: StrictBool | None = None
    restricted_writes: StrictBool | None = None
    created_at_lower_limit: StrictInt | None = None
    created_at_upper_limit: StrictInt | None = None
    default_limit: StrictInt | None = None

    _FIELD_SPEC: ClassVar[FieldSpec] = FieldSpec(
        int_fields=frozenset(
            {
                "max_message_length",
                "max_subscriptions",
                "max_filters",
                "max_limit",
                "max_subid_length",
                "max_event_tags",
                "max_content_length",
                "min_pow_difficulty",
                "created_at_lower_limit",
                "created_at_upper_limit",
                "default_limit",
            }
        ),
        bool_fields=frozenset({"auth_required", "payment_required", "restricted_writes"}),
    )


class RelayRetention(BaseData):
    """One retention policy entry.

    ``kinds`` mixes plain kind numbers and ``[start, end]`` ranges; an entry
    without ``kinds`` applies to every kind. ``time`` is in seconds; a
    ``time`` or ``count`` of ``0`` means the kinds are not stored at all.
    """

    kinds: list[StrictInt | KindRangePair] | None = None
    time: StrictInt | None = None
    count: StrictInt | None = None

    @classmethod
    def parse(cls, data: Any) -> dict[str, Any]:
        if not isinstance(data, dict):
            return {}
        result: dict[str, Any] = {}

        if isinstance(data.get("kinds"), list):
            kinds: list[int | tuple[int, int]] = []
            for item in data["kinds"]:
                if _is_int(item):
                    kinds.append(item)
                elif (
                    isinstance(item, list)
                    and len(item) == 2  # noqa: PLR2004 - [start, end] pair
                    and all(_is_int(bound) for bound in item)
                ):
                    kinds.append((item[0], item[1]))
            if kinds:
                result["kinds"] = kinds

        for key in ("time", "count"):
            if _is_int(data.get(key)):
                result[key] = data[key]
        return result

    def kind_ranges(self) -> list[EventKindOrRange]:
        """``kinds`` as [EventKindOrRange][nostrwire.models.kind.EventKindOrRange] values.

        Raises:
            InvalidFieldError: If a number is outside ``u32`` or a range is
                reversed.
        """
        return [
            EventKindOrRange.from_json(list(k) if isinstance(k, tuple) else k)
            for k in self.kinds or ()
        ]

    def applies_to(self, kind: EventKind) -> bool:
        if not self.kinds:
            return True
        return any(r.contains(kind) for r in self.kind_ranges())


class Fee(BaseData):
    """A single admission, subscription or publication fee."""

    amount: StrictInt | None = None
    unit: str | None = None
    period: StrictInt | None = None
    kinds: list[StrictInt] | None = None

    _FIELD_SPEC: ClassVar[FieldSpec] = FieldSpec(
        int_fields=frozenset({"amount", "period"}),
        str_fields=frozenset({"unit"}),
        int_list_fields=frozenset({"kinds"}),
    )


class RelayFees(BaseData):
    """Fee schedule grouped by category."""

    admission: list[Fee] | None = None
    subscription: list[Fee] | None = None
    publication: list[Fee] | None = None

    @classmethod
    def parse(cls, data: Any) -> dict[str, Any]:
        if not isinstance(data, dict):
            return {}
        result: dict[str, Any] = {}
        for key in ("admission", "subscription", "publication"):
            if isinstance(data.get(key), list):
                entries = [e for e in (Fee.parse(raw) for raw in data[key]) if e]
                if entries:
                    result[key] = entries
        return result


class RelayInformationDocument(BaseData):
    """A complete NIP-11 document.

    The relay's own key is published under the JSON key ``self``, which is a
    reserved name in Python methods; the model stores it as ``self_pubkey``
    and serializes it back under its alias.

    Examples:
        ```python
        doc = RelayInformationDocument.from_untrusted(
            {"name": "relay", "supported_nips": [1, "11"], "limitation": {"max_limit": 500}}
        )
        doc.supported_nips          # [1]
        doc.limitation.max_limit    # 500
        ```
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str | None = None
    description: str | None = None
    banner: str | None = None
    icon: str | None = None
    pubkey: str | None = None
    self_pubkey: str | None = Field(default=None, alias="self")
    contact: str | None = None
    software: str | None = None
    version: str | None = None

    privacy_policy: str | None = None
    terms_of_service: str | None = None
    posting_policy: str | None = None
    payments_url: str | None = None

    supported_nips: list[StrictInt] | None = None
    limitation: RelayLimitation = Field(default_factory=RelayLimitation)
    retention: list[RelayRetention] | None = None
    fees: RelayFees = Field(default_factory=RelayFees)

    relay_countries: list[str] | None = None
    language_tags: list[str] | None = None
    tags: list[str] | None = None

    _FIELD_SPEC: ClassVar[FieldSpec] = FieldSpec(
        str_fields=frozenset(
            {
                "name",
                "description",
                "banner",
                "icon",
                "pubkey",
                "self",
                "contact",
                "software",
                "version",
                "privacy_policy",
                "terms_of_service",
                "posting_policy",
                "payments_url",
            }
        ),
        int_list_fields=frozenset({"supported_nips"}),
        str_list_fields=frozenset({"relay_countries", "language_tags", "tags"}),
    )

    @field_validator("pubkey", "self_pubkey")
    @classmethod
    def check_pubkey_hex(cls, value: str | None) -> str | None:
        return _check_pubkey(value)

    @classmethod
    def parse(cls, data: Any) -> dict[str, Any]:
        if not isinstance(data, dict):
            return {}
        result = super().parse(data)
        for key in ("pubkey", "self"):
            if key in result and not _HEX_PUBKEY_RE.match(result[key]):
                del result[key]

        limitation = RelayLimitation.parse(data.get("limitation"))
        if limitation:
            result["limitation"] = limitation
        if isinstance(data.get("retention"), list):
            entries = [e for e in (RelayRetention.parse(raw) for raw in data["retention"]) if e]
            if entries:
                result["retention"] = entries
        fees = RelayFees.parse(data.get("fees"))
        if fees:
            result["fees"] = fees
        return result

    def retention_for(self, kind: EventKind) -> RelayRetention | None:
        """The first retention entry that applies to *kind*, if any."""
        for entry in self.retention or ():
            if entry.applies_to(kind):
                return entry
        return None

    def to_dict(self) -> dict[str, Any]:
        """Serialize using ``self`` rather than ``self_pubkey``; unset fields are omitted."""
        data = self.model_dump(exclude_none=True, by_alias=True, mode="json")
        for key in ("limitation", "fees"):
            if not data.get(key):
                data.pop(key, None)
        return data

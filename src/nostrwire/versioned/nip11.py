"""
Historical NIP-11 relay information document shapes.

* ``RelayInformationDocumentV1`` -- the original identification fields and
  ``supported_nips``.
* ``RelayInformationDocumentV2`` -- adds server limitations
  (``RelayLimitationV1``), retention, fees, content-filtering lists and the
  posting and payments URLs.
* [RelayInformationDocument][nostrwire.nips.nip11.RelayInformationDocument]
  -- canonical: adds ``banner``, ``icon``, ``privacy_policy``,
  ``terms_of_service``, ``self`` and the newer limitation fields.

Upgrading validates with the canonical model's strict ``from_dict()``, so a
bad ``pubkey`` is reported as ``Why.INVALID_PUBLIC_KEY``.
"""

from __future__ import annotations

from pydantic import StrictBool, StrictInt

from nostrwire.nips.nip11 import RelayFees, RelayInformationDocument, RelayRetention

from .chain import Step, VersionChain, VersionedRecord


class RelayInformationDocumentV1(VersionedRecord):
    name: str | None = None
    description: str | None = None
    pubkey: str | None = None
    contact: str | None = None
    supported_nips: list[StrictInt] | None = None
    software: str | None = None
    version: str | None = None


class RelayLimitationV1(VersionedRecord):
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


class RelayInformationDocumentV2(RelayInformationDocumentV1):
    limitation: RelayLimitationV1 | None = None
    retention: list[RelayRetention] | None = None
    fees: RelayFees | None = None
    relay_countries: list[str] | None = None
    language_tags: list[str] | None = None
    tags: list[str] | None = None
    posting_policy: str | None = None
    payments_url: str | None = None


def nip11_v1_to_v2(record: RelayInformationDocumentV1) -> RelayInformationDocumentV2:
    return RelayInformationDocumentV2(**record.model_dump(exclude_none=True))


def nip11_v2_to_v1(record: RelayInformationDocumentV2) -> RelayInformationDocumentV1:
    return RelayInformationDocumentV1.model_validate(record.model_dump(exclude_none=True))


def nip11_v2_to_canonical(record: RelayInformationDocumentV2) -> RelayInformationDocument:
    return RelayInformationDocument.from_dict(record.model_dump(exclude_none=True))


def nip11_to_v2(value: RelayInformationDocument) -> RelayInformationDocumentV2:
    return RelayInformationDocumentV2.model_validate(value.to_dict())


RELAY_INFORMATION_CHAIN: VersionChain[RelayInformationDocument] = VersionChain(
    "relay_information",
    RelayInformationDocument,
    RelayInformationDocument.from_dict,
    [
        Step(RelayInformationDocumentV1, nip11_v1_to_v2, nip11_v2_to_v1),
        Step(RelayInformationDocumentV2, nip11_v2_to_canonical, nip11_to_v2),
    ],
)

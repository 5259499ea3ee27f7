"""
Historical profile metadata shape.

``MetadataV1`` knew four keys (``name``, ``about``, ``picture``, ``nip05``)
and kept everything else as pydantic extras. The canonical
[Metadata][nostrwire.models.metadata.Metadata] promotes the later NIP-24 and
lightning keys to attributes; downgrading moves them back into the extras,
so no data is lost in either direction.
"""

from __future__ import annotations

from pydantic import ConfigDict

from nostrwire.models.metadata import Metadata

from .chain import Step, VersionChain, VersionedRecord


class MetadataV1(VersionedRecord):
    model_config = ConfigDict(frozen=True, extra="allow")

    name: str | None = None
    about: str | None = None
    picture: str | None = None
    nip05: str | None = None


def metadata_v1_to_canonical(record: MetadataV1) -> Metadata:
    return Metadata.from_dict(record.model_dump(exclude_none=True))


def metadata_to_v1(value: Metadata) -> MetadataV1:
    return MetadataV1.model_validate(value.to_dict())


METADATA_CHAIN: VersionChain[Metadata] = VersionChain(
    "metadata",
    Metadata,
    Metadata.from_dict,
    [Step(MetadataV1, metadata_v1_to_canonical, metadata_to_v1)],
)

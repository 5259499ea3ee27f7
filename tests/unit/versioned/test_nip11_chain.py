"""
Unit tests for versioned.nip11 module.

Tests:
- Decoding V1 and V2 relay information documents
- Downgrading drops fields the target version never had
- Failure reasons for invalid keys and malformed lists
"""

import pytest

from nostrwire.core.exceptions import VersionIncompatibleError
from nostrwire.nips.nip11 import RelayInformationDocument
from nostrwire.versioned import (
    RELAY_INFORMATION_CHAIN,
    RelayInformationDocumentV1,
    RelayInformationDocumentV2,
    Why,
)


PUBKEY = "3bf0c63fcb93463407af97a5e5ee64fa883d107ef9e558472c4eb9aaaefa459d"


@pytest.fixture
def document() -> RelayInformationDocument:
    return RelayInformationDocument.from_dict(
        {
            "name": "relay",
            "banner": "https://r.example/banner.png",
            "pubkey": PUBKEY,
            "self": PUBKEY,
            "supported_nips": [1, 11, 42],
            "limitation": {"max_limit": 500, "restricted_writes": True},
            "retention": [{"kinds": [1], "time": 3600}],
            "posting_policy": "https://r.example/policy",
        }
    )


class TestUpgrade:
    """Tests for decoding historical documents."""

    def test_latest_version(self) -> None:
        assert RELAY_INFORMATION_CHAIN.latest_version == 3

    def test_v1(self) -> None:
        doc = RELAY_INFORMATION_CHAIN.decode(
            1, {"name": "relay", "pubkey": PUBKEY, "supported_nips": [1, 11]}
        )
        assert isinstance(doc, RelayInformationDocument)
        assert doc.name == "relay"
        assert doc.pubkey == PUBKEY
        assert doc.supported_nips == [1, 11]

    def test_v1_ignores_later_fields(self) -> None:
        doc = RELAY_INFORMATION_CHAIN.decode(1, {"name": "relay", "banner": "x"})
        assert doc.banner is None

    def test_v2_limitation(self) -> None:
        doc = RELAY_INFORMATION_CHAIN.decode(
            2, {"limitation": {"max_limit": 10, "restricted_writes": True}}
        )
        assert doc.limitation.max_limit == 10
        assert doc.limitation.restricted_writes is None

    def test_v2_retention(self) -> None:
        doc = RELAY_INFORMATION_CHAIN.decode(2, {"retention": [{"kinds": [1], "count": 10}]})
        assert doc.retention is not None
        assert doc.retention[0].count == 10

    @pytest.mark.parametrize("version", [1, 2, 3])
    def test_invalid_pubkey(self, version: int) -> None:
        with pytest.raises(VersionIncompatibleError) as exc_info:
            RELAY_INFORMATION_CHAIN.decode(version, {"pubkey": "not-a-key"})
        assert exc_info.value.why is Why.INVALID_PUBLIC_KEY

    @pytest.mark.parametrize("version", [1, 3])
    def test_non_integer_nips(self, version: int) -> None:
        with pytest.raises(VersionIncompatibleError) as exc_info:
            RELAY_INFORMATION_CHAIN.decode(version, {"supported_nips": ["1"]})
        assert exc_info.value.why is Why.MALFORMED_RECORD


class TestDowngrade:
    """Tests for projecting documents onto older versions."""

    def test_to_v2(self, document: RelayInformationDocument) -> None:
        record = RELAY_INFORMATION_CHAIN.downgrade(document, 2)
        assert isinstance(record, RelayInformationDocumentV2)
        assert record.limitation is not None
        assert record.limitation.max_limit == 500
        assert record.posting_policy == "https://r.example/policy"
        assert "banner" not in RELAY_INFORMATION_CHAIN.dump(record)
        assert "restricted_writes" not in RELAY_INFORMATION_CHAIN.dump(record)["limitation"]

    def test_to_v1(self, document: RelayInformationDocument) -> None:
        record = RELAY_INFORMATION_CHAIN.downgrade(document, 1)
        assert isinstance(record, RelayInformationDocumentV1)
        assert RELAY_INFORMATION_CHAIN.dump(record) == {
            "name": "relay",
            "pubkey": PUBKEY,
            "supported_nips": [1, 11, 42],
        }

    def test_v1_upgrades_to_subset(self, document: RelayInformationDocument) -> None:
        doc = RELAY_INFORMATION_CHAIN.upgrade(RELAY_INFORMATION_CHAIN.downgrade(document, 1))
        assert doc.name == document.name
        assert doc.supported_nips == document.supported_nips
        assert doc.limitation.max_limit is None

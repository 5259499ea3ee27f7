"""
Unit tests for versioned.tag module.

Tests:
- TagV1 and TagV2 array forms (chain load and dump)
- Upgrading historical tags into canonical Tag values
- Downgrading drops fields the target cannot express
- Failure reasons for malformed records
"""

import pytest

from nostrwire.core.exceptions import VersionIncompatibleError
from nostrwire.models.tag import Tag
from nostrwire.versioned import TAG_CHAIN, TagV1, TagV2, Why


EVENT_ID = "5df64b33303d62afc799bdc36d178c07b2e1f0d824f31b7dc812219440affab6"


class TestRecords:
    """Tests for the historical tag records."""

    def test_v1_from_array(self) -> None:
        tag = TAG_CHAIN.load(1, ["e", EVENT_ID, "", "reply"])
        assert tag == TagV1(name="e", value=EVENT_ID, hint="", marker="reply")
        assert TAG_CHAIN.dump(tag) == ["e", EVENT_ID, "", "reply"]

    def test_v1_trailing_none_trimmed(self) -> None:
        assert TAG_CHAIN.dump(TagV1(name="e", value=EVENT_ID)) == ["e", EVENT_ID]

    def test_v1_middle_none_is_empty(self) -> None:
        assert TAG_CHAIN.dump(TagV1(name="e", value=EVENT_ID, marker="root")) == [
            "e",
            EVENT_ID,
            "",
            "root",
        ]

    def test_v2_trailing(self) -> None:
        tag = TAG_CHAIN.load(2, ["x", "a", "b", "c", "d", "e"])
        assert tag.trailing == ["d", "e"]
        assert TAG_CHAIN.dump(tag) == ["x", "a", "b", "c", "d", "e"]

    def test_v2_trailing_keeps_positions(self) -> None:
        record = TagV2(name="x", value="a", trailing=["z"])
        assert TAG_CHAIN.dump(record) == ["x", "a", "", "", "z"]

    def test_load_latest_is_unknown(self) -> None:
        with pytest.raises(VersionIncompatibleError) as exc_info:
            TAG_CHAIN.load(3, ["t", "x"])
        assert exc_info.value.why is Why.UNKNOWN_VERSION

    def test_dump_canonical_is_unknown(self) -> None:
        with pytest.raises(VersionIncompatibleError) as exc_info:
            TAG_CHAIN.dump(Tag(("t", "x")))
        assert exc_info.value.why is Why.UNKNOWN_VERSION

    def test_record_fields(self) -> None:
        assert set(TagV2.model_fields) == {"name", "value", "hint", "marker", "trailing"}


class TestUpgrade:
    """Tests for decoding historical tags."""

    def test_v1(self) -> None:
        assert TAG_CHAIN.decode(1, ["e", EVENT_ID, "wss://r.example"]) == Tag(
            ("e", EVENT_ID, "wss://r.example")
        )

    def test_v1_object_form(self) -> None:
        assert TAG_CHAIN.decode(1, {"name": "t", "value": "nostr"}) == Tag(("t", "nostr"))

    def test_v2_long_tag(self) -> None:
        raw = ["imeta", "url x", "m y", "dim z", "alt w"]
        assert TAG_CHAIN.decode(2, raw).to_list() == raw

    def test_latest(self) -> None:
        assert TAG_CHAIN.decode(3, ["t", "x"]) == Tag(("t", "x"))

    def test_v1_too_long(self) -> None:
        with pytest.raises(VersionIncompatibleError) as exc_info:
            TAG_CHAIN.decode(1, ["a", "b", "c", "d", "e"])
        assert exc_info.value.why is Why.MALFORMED_RECORD

    @pytest.mark.parametrize("version", [1, 2, 3])
    def test_empty_name(self, version: int) -> None:
        with pytest.raises(VersionIncompatibleError) as exc_info:
            TAG_CHAIN.decode(version, ["", "x"])
        assert exc_info.value.why is Why.EMPTY_TAG_NAME

    def test_non_string_value(self) -> None:
        with pytest.raises(VersionIncompatibleError) as exc_info:
            TAG_CHAIN.decode(2, ["t", 5])
        assert exc_info.value.why is Why.MALFORMED_RECORD

    def test_upgrade_record(self) -> None:
        assert TAG_CHAIN.upgrade(TagV1(name="t", value="x")) == Tag(("t", "x"))


class TestDowngrade:
    """Tests for projecting canonical tags onto old versions."""

    def test_to_v2_keeps_everything(self) -> None:
        tag = Tag(("x", "a", "b", "c", "d"))
        record = TAG_CHAIN.downgrade(tag, 2)
        assert isinstance(record, TagV2)
        assert record.trailing == ["d"]
        assert TAG_CHAIN.upgrade(record) == tag

    def test_to_v1_drops_trailing(self) -> None:
        record = TAG_CHAIN.downgrade(Tag(("x", "a", "b", "c", "d")), 1)
        assert isinstance(record, TagV1)
        assert TAG_CHAIN.dump(record) == ["x", "a", "b", "c"]

    def test_short_tag(self) -> None:
        assert TAG_CHAIN.dump(TAG_CHAIN.downgrade(Tag(("t", "x")), 1)) == ["t", "x"]

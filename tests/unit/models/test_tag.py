"""
Unit tests for models.tag module.

Tests:
- Tag construction and validation
- Typed constructors (trailing optional positions)
- Typed parsers and their failure modes
- JSON conversion helpers
- Idempotent tag list helpers (add_*_to_tags)
"""

import pytest

from nostrwire.core.exceptions import InvalidFieldError
from nostrwire.models.keys import Id, PublicKey
from nostrwire.models.kind import EventKind
from nostrwire.models.pointers import NAddr
from nostrwire.models.tag import (
    Tag,
    add_addr_to_tags,
    add_event_to_tags,
    add_pubkey_to_tags,
    add_subject_to_tags_if_missing,
    tags_from_json,
    tags_to_json,
)


EVENT_ID = "5df64b33303d62afc799bdc36d178c07b2e1f0d824f31b7dc812219440affab6"
PUBKEY = "3bf0c63fcb93463407af97a5e5ee64fa883d107ef9e558472c4eb9aaaefa459d"


# ============================================================================
# Construction Tests
# ============================================================================


class TestConstruction:
    """Tests for Tag construction."""

    def test_from_list(self) -> None:
        tag = Tag.from_list(["t", "nostr"])
        assert tag.fields == ("t", "nostr")
        assert tag.tagname == "t"
        assert tag.value == "nostr"
        assert len(tag) == 2

    def test_bare_name(self) -> None:
        tag = Tag(("content-warning",))
        assert tag.value is None
        assert tag.get(5) is None

    def test_trailing(self) -> None:
        tag = Tag(("e", EVENT_ID, "", "reply", "extra"))
        assert tag.trailing(3) == ("reply", "extra")
        assert tag.trailing(9) == ()

    def test_list_input_is_frozen(self) -> None:
        tag = Tag(["t", "x"])  # type: ignore[arg-type]
        assert tag.fields == ("t", "x")

    def test_lone_surrogate_field(self) -> None:
        with pytest.raises(InvalidFieldError) as exc_info:
            Tag(("t", "\ud800"))
        assert exc_info.value.field == "tag"
        assert hash(tag) == hash(Tag(("t", "x")))

    def test_empty_tag(self) -> None:
        with pytest.raises(InvalidFieldError) as exc_info:
            Tag(())
        assert exc_info.value.field == "tag_name"

    def test_empty_name(self) -> None:
        with pytest.raises(InvalidFieldError) as exc_info:
            Tag(("", "value"))
        assert exc_info.value.field == "tag_name"

    def test_non_string_field(self) -> None:
        with pytest.raises(InvalidFieldError):
            Tag(("t", 1))  # type: ignore[arg-type]

    def test_string_rejected(self) -> None:
        with pytest.raises(InvalidFieldError):
            Tag("tag")  # type: ignore[arg-type]

    def test_from_list_non_list(self) -> None:
        with pytest.raises(InvalidFieldError):
            Tag.from_list("t")


# ============================================================================
# Constructor and Parser Tests
# ============================================================================


class TestTypedTags:
    """Tests for the typed constructors and parsers."""

    def test_event_tag_without_hint(self) -> None:
        tag = Tag.new_event(Id.from_hex(EVENT_ID))
        assert tag.to_list() == ["e", EVENT_ID]

    def test_event_tag_marker_without_hint(self) -> None:
        tag = Tag.new_event(Id.from_hex(EVENT_ID), marker="root")
        assert tag.to_list() == ["e", EVENT_ID, "", "root"]
        assert tag.parse_event() == (Id.from_hex(EVENT_ID), None, "root")

    def test_pubkey_tag(self) -> None:
        tag = Tag.new_pubkey(PublicKey.from_hex(PUBKEY), "wss://r.example", "bob")
        assert tag.parse_pubkey() == (PublicKey.from_hex(PUBKEY), "wss://r.example", "bob")

    def test_address_tag(self) -> None:
        naddr = NAddr("post", EventKind(30023), PublicKey.from_hex(PUBKEY), ("wss://r.example",))
        tag = Tag.new_address(naddr, "root")
        assert tag.to_list() == ["a", f"30023:{PUBKEY}:post", "wss://r.example", "root"]
        parsed, marker = tag.parse_address()
        assert parsed == naddr
        assert parsed.relays == ("wss://r.example",)
        assert marker == "root"

    def test_quote_tag(self) -> None:
        tag = Tag.new_quote(Id.from_hex(EVENT_ID), "wss://r.example")
        assert tag.parse_quote() == (Id.from_hex(EVENT_ID), "wss://r.example")

    def test_simple_tags(self) -> None:
        assert Tag.new_hashtag("nostr").parse_hashtag() == "nostr"
        assert Tag.new_subject("hi").parse_subject() == "hi"
        assert Tag.new_identifier("").parse_identifier() == ""
        assert Tag.new_kind(EventKind(30023)).parse_kind() == EventKind(30023)
        assert Tag.new_relay("wss://r.example", "read").parse_relay() == ("wss://r.example", "read")

    def test_content_warning(self) -> None:
        assert Tag.new_content_warning().parse_content_warning() is None
        assert Tag.new_content_warning("spoiler").parse_content_warning() == "spoiler"

    def test_wrong_tag_name(self) -> None:
        with pytest.raises(InvalidFieldError, match="expected a 'p' tag"):
            Tag(("e", EVENT_ID)).parse_pubkey()

    def test_missing_value(self) -> None:
        with pytest.raises(InvalidFieldError, match="missing its value"):
            Tag(("t",)).parse_hashtag()

    def test_bad_kind(self) -> None:
        with pytest.raises(InvalidFieldError) as exc_info:
            Tag(("k", "abc")).parse_kind()
        assert exc_info.value.field == "kind"

    def test_non_ascii_digit_kind(self) -> None:
        with pytest.raises(InvalidFieldError) as exc_info:
            Tag(("k", "²")).parse_kind()
        assert exc_info.value.field == "kind"

    def test_bad_event_id(self) -> None:
        with pytest.raises(InvalidFieldError):
            Tag(("e", "nothex")).parse_event()


# ============================================================================
# JSON Helper Tests
# ============================================================================


class TestJsonHelpers:
    """Tests for tags_from_json() and tags_to_json()."""

    def test_round_trip(self) -> None:
        raw = [["e", EVENT_ID], ["t", "nostr"]]
        assert tags_to_json(tags_from_json(raw)) == raw

    def test_not_a_list(self) -> None:
        with pytest.raises(InvalidFieldError) as exc_info:
            tags_from_json({"e": EVENT_ID})
        assert exc_info.value.field == "tags"

    def test_bad_entry(self) -> None:
        with pytest.raises(InvalidFieldError):
            tags_from_json([["e", EVENT_ID], []])


# ============================================================================
# Tag List Helper Tests
# ============================================================================


class TestTagListHelpers:
    """Tests for the idempotent add_*_to_tags helpers."""

    def test_add_pubkey_idempotent(self) -> None:
        tags: list[Tag] = [Tag(("t", "x"))]
        pubkey = PublicKey.from_hex(PUBKEY)
        assert add_pubkey_to_tags(tags, pubkey) == 1
        assert add_pubkey_to_tags(tags, pubkey, "wss://r.example") == 1
        assert len(tags) == 2

    def test_add_event_skips_malformed_tags(self) -> None:
        tags = [Tag(("e", "garbage"))]
        assert add_event_to_tags(tags, Id.from_hex(EVENT_ID), marker="reply") == 1
        assert tags[1].to_list() == ["e", EVENT_ID, "", "reply"]

    def test_add_event_existing(self) -> None:
        tags = [Tag.new_event(Id.from_hex(EVENT_ID))]
        assert add_event_to_tags(tags, Id.from_hex(EVENT_ID), marker="root") == 0
        assert len(tags) == 1

    def test_add_mention_as_quote(self) -> None:
        tags: list[Tag] = []
        index = add_event_to_tags(tags, Id.from_hex(EVENT_ID), marker="mention", use_quote=True)
        assert tags[index].tagname == "q"
        again = add_event_to_tags(tags, Id.from_hex(EVENT_ID), marker="mention", use_quote=True)
        assert again == index
        assert len(tags) == 1

    def test_add_addr_ignores_relays(self) -> None:
        author = PublicKey.from_hex(PUBKEY)
        tags: list[Tag] = []
        add_addr_to_tags(tags, NAddr("x", EventKind(30023), author, ("wss://a.example",)))
        assert add_addr_to_tags(tags, NAddr("x", EventKind(30023), author)) == 0
        assert len(tags) == 1

    def test_add_subject_if_missing(self) -> None:
        tags = [Tag(("subject", "first"))]
        assert add_subject_to_tags_if_missing(tags, "second") == 0
        assert tags[0].parse_subject() == "first"
        assert add_subject_to_tags_if_missing([], "new") == 0

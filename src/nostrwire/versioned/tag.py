"""
Historical tag shapes.

* ``TagV1`` -- exactly four slots: name, value, relay hint, marker. Longer
  tags could not be represented.
* ``TagV2`` -- the four slots plus a ``trailing`` list for any further
  fields.
* [Tag][nostrwire.models.tag.Tag] -- canonical: one ordered tuple of fields.

On the wire both shapes are JSON arrays. ``TagV1Wire`` and ``TagV2Wire``
attach the array conversions below to the records, so a nested
``list[TagV1Wire]`` field reads and writes arrays as well.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BeforeValidator, PlainSerializer

from nostrwire.models.tag import Tag

from .chain import Step, VersionChain, VersionedRecord


_SLOTS = ("name", "value", "hint", "marker")


class TagV1(VersionedRecord):
    name: str
    value: str | None = None
    hint: str | None = None
    marker: str | None = None


class TagV2(VersionedRecord):
    name: str
    value: str | None = None
    hint: str | None = None
    marker: str | None = None
    trailing: list[str] = []


# ---------------------------------------------------------------------------
# Array form
# ---------------------------------------------------------------------------


def _slot_values(tag: TagV1 | TagV2, *, keep_empty: bool) -> list[str]:
    values = [tag.value, tag.hint, tag.marker]
    if not keep_empty:
        while values and values[-1] is None:
            values.pop()
    return ["" if v is None else v for v in values]


def tag_v1_from_array(data: Any) -> Any:
    if not isinstance(data, list):
        return data
    if len(data) > len(_SLOTS):
        raise ValueError(f"a version 1 tag has at most {len(_SLOTS)} fields")
    return dict(zip(_SLOTS, data, strict=False))


def tag_v1_to_list(tag: TagV1) -> list[str]:
    return [tag.name, *_slot_values(tag, keep_empty=False)]


def tag_v2_from_array(data: Any) -> Any:
    if not isinstance(data, list):
        return data
    head = dict(zip(_SLOTS, data, strict=False))
    head["trailing"] = data[len(_SLOTS) :]
    return head


def tag_v2_to_list(tag: TagV2) -> list[str]:
    return [tag.name, *_slot_values(tag, keep_empty=bool(tag.trailing)), *tag.trailing]


TagV1Wire = Annotated[TagV1, BeforeValidator(tag_v1_from_array), PlainSerializer(tag_v1_to_list)]
TagV2Wire = Annotated[TagV2, BeforeValidator(tag_v2_from_array), PlainSerializer(tag_v2_to_list)]


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------


def tag_v1_to_v2(tag: TagV1) -> TagV2:
    return TagV2(name=tag.name, value=tag.value, hint=tag.hint, marker=tag.marker)


def tag_v2_to_v1(tag: TagV2) -> TagV1:
    return TagV1(name=tag.name, value=tag.value, hint=tag.hint, marker=tag.marker)


def tag_v2_to_tag(tag: TagV2) -> Tag:
    return Tag(tuple(tag_v2_to_list(tag)))


def tag_to_v2(tag: Tag) -> TagV2:
    return TagV2(
        name=tag.tagname,
        value=tag.get(1),
        hint=tag.get(2),
        marker=tag.get(3),
        trailing=list(tag.trailing(len(_SLOTS))),
    )


TAG_CHAIN: VersionChain[Tag] = VersionChain(
    "tag",
    Tag,
    Tag.from_list,
    [
        Step(TagV1, tag_v1_to_v2, tag_v2_to_v1, wire=TagV1Wire),
        Step(TagV2, tag_v2_to_tag, tag_to_v2, wire=TagV2Wire),
    ],
)

"""Reasons a versioned record cannot be upgraded or downgraded."""

from __future__ import annotations

from enum import StrEnum


class Why(StrEnum):
    """Which invariant of the target shape could not be established.

    Carried by
    [VersionIncompatibleError][nostrwire.core.exceptions.VersionIncompatibleError]
    so callers can tell an old-but-valid record from a corrupt one.
    """

    UNKNOWN_VERSION = "unknown_version"
    MALFORMED_RECORD = "malformed_record"
    EMPTY_TAG_NAME = "empty_tag_name"
    INVALID_ID = "invalid_id"
    INVALID_PUBLIC_KEY = "invalid_public_key"
    INVALID_SIGNATURE = "invalid_signature"
    KIND_OUT_OF_RANGE = "kind_out_of_range"
    NEGATIVE_TIMESTAMP = "negative_timestamp"
    UNKNOWN_MESSAGE_TYPE = "unknown_message_type"
    MISSING_FIELD = "missing_field"
    UNREPRESENTABLE = "unrepresentable"
    INVALID_FIELD = "invalid_field"


FIELD_REASONS: dict[str, Why] = {
    "id": Why.INVALID_ID,
    "event_id": Why.INVALID_ID,
    "pubkey": Why.INVALID_PUBLIC_KEY,
    "author": Why.INVALID_PUBLIC_KEY,
    "self": Why.INVALID_PUBLIC_KEY,
    "self_pubkey": Why.INVALID_PUBLIC_KEY,
    "sig": Why.INVALID_SIGNATURE,
    "kind": Why.KIND_OUT_OF_RANGE,
    "created_at": Why.NEGATIVE_TIMESTAMP,
    "tag_name": Why.EMPTY_TAG_NAME,
    "type": Why.UNKNOWN_MESSAGE_TYPE,
    "unrepresentable": Why.UNREPRESENTABLE,
}
"""Field name of a failed validation -> the reason reported for it."""

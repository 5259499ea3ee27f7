"""Shared constants for the models layer.

Holds the protocol-assigned kind table and the other enumerations used by
more than one model module. Keeping them here avoids circular imports
between [kind][nostrwire.models.kind], [tag][nostrwire.models.tag] and
[relay][nostrwire.models.relay].

See Also:
    [EventKind][nostrwire.models.kind.EventKind]: The total ``u32`` kind value
        type built on top of [KnownKind][nostrwire.models.constants.KnownKind].
"""

from __future__ import annotations

from enum import IntEnum, StrEnum


class KnownKind(IntEnum):
    """Named Nostr event kinds with their protocol-assigned numbers.

    Declaration order is part of the contract: it is the order produced by
    [EventKind.iter_known()][nostrwire.models.kind.EventKind.iter_known].
    The numbers are an interop table and must never change.
    """

    METADATA = 0  # NIP-01
    TEXT_NOTE = 1  # NIP-01
    RECOMMEND_RELAY = 2
    CONTACT_LIST = 3  # NIP-02
    ENCRYPTED_DIRECT_MESSAGE = 4  # NIP-04
    EVENT_DELETION = 5  # NIP-09
    REPOST = 6  # NIP-18
    REACTION = 7  # NIP-25
    BADGE_AWARD = 8  # NIP-58
    SEAL = 13  # NIP-59
    DM_CHAT = 14  # NIP-17
    GENERIC_REPOST = 16  # NIP-18
    CHANNEL_CREATION = 40  # NIP-28
    CHANNEL_METADATA = 41
    CHANNEL_MESSAGE = 42
    CHANNEL_HIDE_MESSAGE = 43
    CHANNEL_MUTE_USER = 44
    PUBLIC_CHAT_RESERVED_45 = 45
    PUBLIC_CHAT_RESERVED_46 = 46
    PUBLIC_CHAT_RESERVED_47 = 47
    PUBLIC_CHAT_RESERVED_48 = 48
    PUBLIC_CHAT_RESERVED_49 = 49
    TIMESTAMP = 1040  # NIP-03
    GIFT_WRAP = 1059  # NIP-59
    FILE_METADATA = 1063  # NIP-94
    LIVE_CHAT_MESSAGE = 1311  # NIP-53
    PROBLEM_TRACKER = 1971
    REPORTING = 1984  # NIP-56
    LABEL = 1985  # NIP-32
    COMMUNITY_POST = 4549  # NIP-72
    COMMUNITY_POST_APPROVAL = 4550  # NIP-72
    JOB_FEEDBACK = 7000  # NIP-90
    ZAP_GOAL = 9041  # NIP-75
    ZAP_REQUEST = 9734  # NIP-57
    ZAP = 9735  # NIP-57
    HIGHLIGHTS = 9802  # NIP-84
    MUTE_LIST = 10_000  # NIP-51
    PIN_LIST = 10_001
    RELAY_LIST = 10_002  # NIP-65
    BOOKMARK_LIST = 10_003
    COMMUNITY_LIST = 10_004
    PUBLIC_CHATS_LIST = 10_005
    BLOCKED_RELAYS_LIST = 10_006
    SEARCH_RELAYS_LIST = 10_007
    INTERESTS_LIST = 10_015
    USER_EMOJI_LIST = 10_030
    WALLET_INFO = 13_194  # NIP-47
    AUTH = 22_242  # NIP-42
    WALLET_REQUEST = 23_194  # NIP-47
    WALLET_RESPONSE = 23_195
    NOSTR_CONNECT = 24_133  # NIP-46
    HTTP_AUTH = 27_235  # NIP-98
    FOLLOW_SETS = 30_000  # NIP-51
    GENERIC_SETS = 30_001
    RELAY_SETS = 30_002
    BOOKMARK_SETS = 30_003
    CURATION_SETS = 30_004
    PROFILE_BADGES = 30_008  # NIP-58
    BADGE_DEFINITION = 30_009
    INTEREST_SETS = 30_015
    CREATE_UPDATE_STALL = 30_017  # NIP-15
    CREATE_UPDATE_PRODUCT = 30_018
    LONG_FORM_CONTENT = 30_023  # NIP-23
    DRAFT_LONG_FORM_CONTENT = 30_024
    EMOJI_SETS = 30_030
    APP_SPECIFIC_DATA = 30_078  # NIP-78
    LIVE_EVENT = 30_311  # NIP-53
    USER_STATUS = 30_315  # NIP-38
    CLASSIFIED_LISTING = 30_402  # NIP-99
    DRAFT_CLASSIFIED_LISTING = 30_403
    DATE_BASED_CALENDAR_EVENT = 31_922  # NIP-52
    TIME_BASED_CALENDAR_EVENT = 31_923
    CALENDAR = 31_924
    CALENDAR_EVENT_RSVP = 31_925
    HANDLER_RECOMMENDATION = 31_989  # NIP-89
    HANDLER_INFORMATION = 31_990
    COMMUNITY_DEFINITION = 34_550  # NIP-72


class KindRange(StrEnum):
    """Open numeric ranges for kinds that have no name in the table.

    Attributes:
        JOB_REQUEST: 5000-5999 (NIP-90).
        JOB_RESULT: 6000-6999 (NIP-90).
        REPLACEABLE: 10000-19999, relay-specific replaceable events.
        EPHEMERAL: 20000-29999, relayed but never stored.
        OTHER: Every other unnamed number.
    """

    JOB_REQUEST = "job_request"
    JOB_RESULT = "job_result"
    REPLACEABLE = "replaceable"
    EPHEMERAL = "ephemeral"
    OTHER = "other"


# Inclusive numeric bounds of the open ranges
JOB_REQUEST_RANGE = (5_000, 5_999)
JOB_RESULT_RANGE = (6_000, 6_999)
REPLACEABLE_RANGE = (10_000, 19_999)
EPHEMERAL_RANGE = (20_000, 29_999)
PARAMETERIZED_REPLACEABLE_RANGE = (30_000, 39_999)

# Largest kind number that nostr-sdk can sign (its Kind is a u16)
SIGNABLE_KIND_MAX = 65_535


class NetworkType(StrEnum):
    """Network classification of a relay URL.

    ``LOCAL`` and ``UNKNOWN`` exist for detection only; a successfully
    constructed [RelayUrl][nostrwire.models.relay.RelayUrl] is never one of them.
    """

    CLEARNET = "clearnet"
    TOR = "tor"
    I2P = "i2p"
    LOKI = "loki"
    LOCAL = "local"
    UNKNOWN = "unknown"

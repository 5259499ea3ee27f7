"""Historical wire shapes and their upgrade chains.

Every entity the protocol has changed over time gets a
[VersionChain][nostrwire.versioned.chain.VersionChain] from its oldest record
shape to the canonical model in [nostrwire.models][] (or
[nostrwire.nips.nip11][]). Decoding any known version yields the canonical
value or a [VersionIncompatibleError][nostrwire.core.exceptions.VersionIncompatibleError]
carrying a [Why][nostrwire.versioned.why.Why]; never a partial result.

Examples:
    ```python
    from nostrwire.versioned import EVENT_CHAIN, RELAY_MESSAGE_CHAIN

    event = EVENT_CHAIN.decode(1, {"id": ..., "tags": [["e", "..."]], "ots": "..."})
    RELAY_MESSAGE_CHAIN.downgrade(RelayCount("sub", 3), 3)   # Why.UNREPRESENTABLE
    ```
"""

from .chain import Step, VersionChain, VersionedRecord
from .event import (
    EVENT_CHAIN,
    PRE_EVENT_CHAIN,
    RUMOR_CHAIN,
    EventV1,
    EventV2,
    PreEventV1,
    PreEventV2,
    RumorV1,
    RumorV2,
)
from .messages import (
    CLIENT_MESSAGE_CHAIN,
    RELAY_MESSAGE_CHAIN,
    ClientMessageV1,
    ClientMessageV2,
    RelayMessageV1,
    RelayMessageV2,
    RelayMessageV3,
)
from .metadata import METADATA_CHAIN, MetadataV1
from .nip11 import (
    RELAY_INFORMATION_CHAIN,
    RelayInformationDocumentV1,
    RelayInformationDocumentV2,
    RelayLimitationV1,
)
from .tag import TAG_CHAIN, TagV1, TagV2
from .why import Why


__all__ = [
    "CLIENT_MESSAGE_CHAIN",
    "EVENT_CHAIN",
    "METADATA_CHAIN",
    "PRE_EVENT_CHAIN",
    "RELAY_INFORMATION_CHAIN",
    "RELAY_MESSAGE_CHAIN",
    "RUMOR_CHAIN",
    "TAG_CHAIN",
    "ClientMessageV1",
    "ClientMessageV2",
    "EventV1",
    "EventV2",
    "MetadataV1",
    "PreEventV1",
    "PreEventV2",
    "RelayInformationDocumentV1",
    "RelayInformationDocumentV2",
    "RelayLimitationV1",
    "RelayMessageV1",
    "RelayMessageV2",
    "RelayMessageV3",
    "RumorV1",
    "RumorV2",
    "Step",
    "TagV1",
    "TagV2",
    "VersionChain",
    "VersionedRecord",
    "Why",
]

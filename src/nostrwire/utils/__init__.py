"""Adapters to the external cryptographic capability (nostr-sdk).

Attributes:
    keys: Private key loading from environment variables, as a function and
        as a pydantic model.
    signer: The [Signer][nostrwire.utils.signer.Signer] protocol, the
        ``nostr_sdk.Keys``-backed implementation and event verification.

Examples:
    ```python
    from nostrwire.utils import KeysSigner, verify_event
    ```
"""

from .keys import ENV_PRIVATE_KEY, KeysConfig, load_keys_from_env
from .signer import ContentEncryptionAlgorithm, KeysSigner, Signer, verify_event


__all__ = [
    "ENV_PRIVATE_KEY",
    "ContentEncryptionAlgorithm",
    "KeysConfig",
    "KeysSigner",
    "Signer",
    "load_keys_from_env",
    "verify_event",
]

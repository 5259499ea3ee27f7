"""Signing key loading from the environment.

Accepts ``nsec1`` (bech32) and 64-character hex private keys. Keys never
come from configuration files: the config only names the environment
variable (``keys_env``) that holds the key.

Warning:
    The returned ``nostr_sdk.Keys`` holds the private key in memory. Do not
    serialize or log it.

Examples:
    ```python
    import os

    os.environ["PRIVATE_KEY"] = "nsec1..."  # pragma: allowlist secret
    signer = KeysSigner(load_keys_from_env("PRIVATE_KEY"))
    ```
"""

from __future__ import annotations

import os
from typing import Any

from nostr_sdk import Keys, NostrSdkError
from pydantic import BaseModel, ConfigDict, Field, model_validator

from nostrwire.core.exceptions import ConfigurationError


ENV_PRIVATE_KEY = "PRIVATE_KEY"  # pragma: allowlist secret


def load_keys_from_env(env_var: str = ENV_PRIVATE_KEY) -> Keys:
    """Parse the private key held in environment variable *env_var*.

    Raises:
        ConfigurationError: If the variable is unset, empty or not a valid
            private key. The key itself never appears in the message.
    """
    value = os.getenv(env_var)
    if not value:
        raise ConfigurationError(
            f"{env_var} environment variable is required. Generate one with: openssl rand -hex 32"
        )
    try:
        return Keys.parse(value)
    except NostrSdkError as e:
        raise ConfigurationError(f"{env_var} does not hold a valid private key") from e


class KeysConfig(BaseModel):
    """Loads ``keys`` from the variable named by ``keys_env`` during validation.

    Attributes:
        keys_env: Environment variable name for the private key.
        keys: The loaded ``nostr_sdk.Keys``.

    Warning:
        ``keys`` is a live private key; never dump this model.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    keys_env: str = Field(default=ENV_PRIVATE_KEY, min_length=1)
    keys: Keys

    @model_validator(mode="before")
    @classmethod
    def _load_keys_from_env(cls, data: Any) -> Any:
        if isinstance(data, dict) and "keys" not in data:
            data = {**data, "keys": load_keys_from_env(data.get("keys_env", ENV_PRIVATE_KEY))}
        return data

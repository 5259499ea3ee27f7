"""Declarative configuration for applications embedding nostrwire.

All settings are pydantic v2 models with defaults, so an empty YAML file
(or no file at all) yields a usable configuration.

```yaml
logging:
  level: DEBUG
  json_output: false
filters:
  match_tags: true
keys_env: NOSTR_PRIVATE_KEY
```

See Also:
    [load_yaml()][nostrwire.core.yaml.load_yaml]: Safe YAML loader used by
        [NostrWireConfig.from_yaml()][nostrwire.core.config.NostrWireConfig.from_yaml].
    [KeysConfig][nostrwire.utils.keys.KeysConfig]: Loads signing keys from
        the environment variable named by ``keys_env``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Self

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ConfigurationError
from .yaml import load_yaml


LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingConfig(BaseModel):
    """Root logger settings applied by ``setup_logging()``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    level: LogLevel = Field(default="INFO", description="Root log level")
    json_output: bool = Field(default=False, description="Emit JSON log records")


class FilterConfig(BaseModel):
    """Filter engine policy.

    Attributes:
        match_tags: Evaluate the ``#<letter>`` tag dimension in
            [Filter.matches()][nostrwire.models.filter.Filter.matches].
            When False only ids, authors, kinds and the time window are checked.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    match_tags: bool = Field(default=True, description="Evaluate tag constraints")


class NostrWireConfig(BaseModel):
    """Top-level configuration document."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    filters: FilterConfig = Field(default_factory=FilterConfig)
    keys_env: str = Field(
        default="PRIVATE_KEY",  # pragma: allowlist secret
        min_length=1,
        description="Environment variable holding the signing key",
    )

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> Self:
        """Load and validate a configuration file.

        Raises:
            ConfigurationError: If the file is missing, is not valid YAML, or
                does not satisfy the schema.
        """
        try:
            data = load_yaml(config_path)
        except (FileNotFoundError, TypeError, yaml.YAMLError) as e:
            raise ConfigurationError(str(e)) from e

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration in {config_path}: {e}") from e

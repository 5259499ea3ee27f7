"""Ambient infrastructure shared by every nostrwire layer.

Attributes:
    exceptions: The [NostrWireError][nostrwire.core.exceptions.NostrWireError]
        hierarchy, including the codec and versioning error families.
    logger: Structured key=value / JSON logging wrapper over stdlib ``logging``.
    yaml: Safe YAML loading.
    config: pydantic configuration models.
"""

from .config import FilterConfig, LoggingConfig, NostrWireConfig
from .exceptions import (
    Bech32Error,
    CodecError,
    ConfigurationError,
    InvalidFieldError,
    MalformedTextError,
    NostrWireError,
    NumericRangeError,
    PrefixMismatchError,
    SemanticTlvError,
    SignerError,
    StructuralTlvError,
    VersionIncompatibleError,
)
from .logger import Logger, StructuredFormatter, format_kv_pairs, setup_logging
from .yaml import load_yaml


__all__ = [
    "Bech32Error",
    "CodecError",
    "ConfigurationError",
    "FilterConfig",
    "InvalidFieldError",
    "Logger",
    "LoggingConfig",
    "MalformedTextError",
    "NostrWireConfig",
    "NostrWireError",
    "NumericRangeError",
    "PrefixMismatchError",
    "SemanticTlvError",
    "SignerError",
    "StructuralTlvError",
    "StructuredFormatter",
    "VersionIncompatibleError",
    "format_kv_pairs",
    "load_yaml",
    "setup_logging",
]

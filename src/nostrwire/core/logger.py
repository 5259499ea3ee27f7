"""
Structured logging with key=value and JSON output support.

Wraps the standard library ``logging`` module so that every message can
carry structured context (``prefix="naddr"``, ``field_type=7``...) rendered
either as human-readable key=value pairs or as a JSON object.

nostrwire is a library: its modules only *emit* records, always at
``debug`` level, and never install handlers. Applications that want the
structured output call [setup_logging()][nostrwire.core.logger.setup_logging]
once at startup.

Examples:
    ```python
    from nostrwire.core.logger import Logger, setup_logging

    setup_logging("DEBUG")
    logger = Logger("nostrwire.nip19")
    logger.debug("tlv_unknown_field_skipped", prefix="naddr", field_type=7)
    # Output: debug nostrwire.nip19 tlv_unknown_field_skipped prefix=naddr field_type=7
    ```
"""

from __future__ import annotations

import datetime
import json
import logging
from typing import Any, ClassVar

from .config import LoggingConfig


def format_kv_pairs(
    kwargs: dict[str, Any],
    max_value_length: int | None = 1000,
    prefix: str = " ",
) -> str:
    """Format a dictionary as space-separated key=value pairs.

    Values longer than ``max_value_length`` are truncated; values that are
    empty or contain whitespace, ``=`` or quotes are escaped and quoted.

    Args:
        kwargs: Key-value pairs to format.
        max_value_length: Maximum characters per value before truncation.
            Pass None to disable truncation.
        prefix: String prepended to the output (default: single space).

    Returns:
        Formatted string, e.g. ``' d=hello relays=2'``, or ``""`` when
        *kwargs* is empty.
    """
    if not kwargs:
        return ""

    parts = []
    for k, v in kwargs.items():
        s = _truncate(str(v), max_value_length)
        if not s or " " in s or "=" in s or '"' in s or "'" in s:
            escaped = s.replace("\\", "\\\\").replace('"', '\\"')
            parts.append(f'{k}="{escaped}"')
        else:
            parts.append(f"{k}={s}")

    return prefix + " ".join(parts)


def _truncate(s: str, max_value_length: int | None) -> str:
    if max_value_length and len(s) > max_value_length:
        return s[:max_value_length] + f"...<truncated {len(s) - max_value_length} chars>"
    return s


class StructuredFormatter(logging.Formatter):
    """Formats log records as ``level name message key=value ...``.

    Reads structured data from the ``structured_kv`` extra attached by
    [Logger][nostrwire.core.logger.Logger]. Records emitted through plain
    ``logging.getLogger()`` calls are rendered with the same prefix. With
    ``json_output=True`` every record becomes one JSON object instead.
    """

    def __init__(self, *, json_output: bool = False) -> None:
        super().__init__()
        self.json_output = json_output

    def format(self, record: logging.LogRecord) -> str:
        extra: dict[str, Any] = getattr(record, "structured_kv", {})
        if self.json_output:
            data = {
                "timestamp": datetime.datetime.fromtimestamp(
                    record.created, datetime.UTC
                ).isoformat(),
                "level": record.levelname.lower(),
                "logger": record.name,
                "message": record.getMessage(),
                **extra,
            }
            return json.dumps(data, default=str)
        base = f"{record.levelname.lower()} {record.name} {record.getMessage()}"
        if extra:
            base += format_kv_pairs(extra)
        return base


class Logger:
    """Structured logger that appends keyword arguments as extra fields.

    Mirrors the standard logging API with an added ``**kwargs`` parameter on
    every level method.

    Examples:
        ```python
        logger = Logger("nostrwire.versioned")
        logger.debug("version_upgraded", entity="event", source=1, target=2)
        ```
    """

    _DEFAULT_MAX_VALUE_LENGTH: ClassVar[int] = 1000

    def __init__(
        self,
        name: str,
        *,
        json_output: bool = False,
        max_value_length: int | None = None,
    ) -> None:
        """Initialize a structured logger.

        Args:
            name: Logger name, passed to ``logging.getLogger(name)``.
            json_output: If True, emit JSON objects instead of key=value pairs.
            max_value_length: Maximum character length for individual values
                before truncation. Defaults to 1000.
        """
        if max_value_length is None:
            max_value_length = self._DEFAULT_MAX_VALUE_LENGTH
        self._logger = logging.getLogger(name)
        self._json_output = json_output
        self._max_value_length = max_value_length

    @property
    def name(self) -> str:
        return self._logger.name

    def is_enabled_for(self, level: int) -> bool:
        """Return True if a record at *level* would be emitted."""
        return self._logger.isEnabledFor(level)

    def _format_json(self, msg: str, level: str, kwargs: dict[str, Any]) -> str:
        record = {
            "timestamp": datetime.datetime.now(datetime.UTC).isoformat(),
            "level": level,
            "logger": self._logger.name,
            "message": msg,
            **kwargs,
        }
        return json.dumps(record, default=str)

    def _make_extra(self, kwargs: dict[str, Any]) -> dict[str, Any]:
        if not kwargs:
            return {}
        truncated = {
            k: _truncate(str(v), self._max_value_length)
            if not isinstance(v, bool | int | float)
            else v
            for k, v in kwargs.items()
        }
        return {"structured_kv": truncated}

    def _log(self, level: int, msg: str, kwargs: dict[str, Any], *, exc_info: bool = False) -> None:
        if not self._logger.isEnabledFor(level):
            return
        if self._json_output:
            name = logging.getLevelName(level).lower()
            self._logger.log(level, self._format_json(msg, name, kwargs), exc_info=exc_info)
        else:
            self._logger.log(level, msg, extra=self._make_extra(kwargs), exc_info=exc_info)

    def debug(self, msg: str, **kwargs: Any) -> None:
        """Log a DEBUG level message with optional key=value pairs."""
        self._log(logging.DEBUG, msg, kwargs)

    def info(self, msg: str, **kwargs: Any) -> None:
        """Log an INFO level message with optional key=value pairs."""
        self._log(logging.INFO, msg, kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        """Log a WARNING level message with optional key=value pairs."""
        self._log(logging.WARNING, msg, kwargs)

    def error(self, msg: str, **kwargs: Any) -> None:
        """Log an ERROR level message with optional key=value pairs."""
        self._log(logging.ERROR, msg, kwargs)

    def exception(self, msg: str, **kwargs: Any) -> None:
        """Log an ERROR level message with the current exception traceback."""
        self._log(logging.ERROR, msg, kwargs, exc_info=True)


def setup_logging(config: LoggingConfig | str = "INFO") -> None:
    """Configure the root logger with structured formatting.

    Installs a [StructuredFormatter][nostrwire.core.logger.StructuredFormatter]
    on a new root ``StreamHandler``. Intended for applications and test
    harnesses; the library itself never calls it.

    Args:
        config: A [LoggingConfig][nostrwire.core.config.LoggingConfig], or
            just a standard level name (``"DEBUG"``, ``"INFO"``...).
    """
    if isinstance(config, str):
        config = LoggingConfig(level=config.upper())
    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter(json_output=config.json_output))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, config.level))

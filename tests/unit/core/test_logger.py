"""
Unit tests for core.logger module.

Tests:
- format_kv_pairs() quoting, escaping and truncation
- StructuredFormatter rendering of structured_kv extras
- Logger level methods, JSON output and level gating
- setup_logging() root handler installation
"""

import json
import logging

import pytest

from nostrwire.core.config import LoggingConfig
from nostrwire.core.logger import Logger, StructuredFormatter, format_kv_pairs, setup_logging


# ============================================================================
# format_kv_pairs Tests
# ============================================================================


class TestFormatKvPairs:
    """Tests for format_kv_pairs() utility function."""

    def test_empty_dict(self) -> None:
        assert format_kv_pairs({}) == ""

    def test_simple_values(self) -> None:
        assert format_kv_pairs({"prefix": "naddr", "field_type": 7}) == " prefix=naddr field_type=7"

    def test_value_with_space_is_quoted(self) -> None:
        assert format_kv_pairs({"error": "bad input"}) == ' error="bad input"'

    def test_empty_value_is_quoted(self) -> None:
        assert format_kv_pairs({"d": ""}) == ' d=""'

    def test_quotes_are_escaped(self) -> None:
        assert format_kv_pairs({"msg": 'say "hi"'}) == ' msg="say \\"hi\\""'

    def test_truncation(self) -> None:
        result = format_kv_pairs({"k": "x" * 20}, max_value_length=5)
        assert result == ' k="xxxxx...<truncated 15 chars>"'

    def test_truncation_disabled(self) -> None:
        assert format_kv_pairs({"k": "x" * 20}, max_value_length=None) == " k=" + "x" * 20

    def test_custom_prefix(self) -> None:
        assert format_kv_pairs({"a": 1}, prefix="") == "a=1"


# ============================================================================
# StructuredFormatter Tests
# ============================================================================


class TestStructuredFormatter:
    """Tests for StructuredFormatter."""

    def _record(self, **extra: object) -> logging.LogRecord:
        record = logging.LogRecord("nostrwire.test", logging.DEBUG, __file__, 1, "event", (), None)
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_plain_record(self) -> None:
        assert StructuredFormatter().format(self._record()) == "debug nostrwire.test event"

    def test_structured_record(self) -> None:
        record = self._record(structured_kv={"entity": "tag", "source": 1})
        expected = "debug nostrwire.test event entity=tag source=1"
        assert StructuredFormatter().format(record) == expected

    def test_json_record(self) -> None:
        record = self._record(structured_kv={"entity": "tag", "source": 1})
        payload = json.loads(StructuredFormatter(json_output=True).format(record))
        assert payload["level"] == "debug"
        assert payload["logger"] == "nostrwire.test"
        assert payload["message"] == "event"
        assert payload["entity"] == "tag"
        assert payload["source"] == 1
        assert "timestamp" in payload


# ============================================================================
# Logger Tests
# ============================================================================


class TestLogger:
    """Tests for the Logger wrapper."""

    def test_name(self) -> None:
        assert Logger("nostrwire.x").name == "nostrwire.x"

    def test_debug_attaches_structured_kv(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="nostrwire.x"):
            Logger("nostrwire.x").debug("tlv_unknown_field_skipped", field_type=7)
        record = caplog.records[-1]
        assert record.getMessage() == "tlv_unknown_field_skipped"
        assert record.structured_kv == {"field_type": 7}

    def test_long_values_are_truncated(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="nostrwire.x"):
            Logger("nostrwire.x", max_value_length=3).debug("m", value="abcdef")
        assert caplog.records[-1].structured_kv["value"].startswith("abc...")

    def test_json_output(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="nostrwire.json"):
            Logger("nostrwire.json", json_output=True).info("started", version="1")
        payload = json.loads(caplog.records[-1].getMessage())
        assert payload["level"] == "info"
        assert payload["logger"] == "nostrwire.json"
        assert payload["message"] == "started"
        assert payload["version"] == "1"

    def test_disabled_level_emits_nothing(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="nostrwire.quiet"):
            Logger("nostrwire.quiet").debug("hidden")
        assert not [r for r in caplog.records if r.name == "nostrwire.quiet"]

    def test_exception_includes_traceback(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR, logger="nostrwire.err"):
            try:
                raise RuntimeError("boom")
            except RuntimeError:
                Logger("nostrwire.err").exception("failed")
        assert caplog.records[-1].exc_info is not None


class TestSetupLogging:
    """Tests for setup_logging()."""

    def test_installs_structured_handler(self) -> None:
        before = list(logging.root.handlers)
        level = logging.root.level
        try:
            setup_logging("warning")
            added = [h for h in logging.root.handlers if h not in before]
            assert len(added) == 1
            assert isinstance(added[0].formatter, StructuredFormatter)
            assert logging.root.level == logging.WARNING
        finally:
            for handler in logging.root.handlers:
                if handler not in before:
                    logging.root.removeHandler(handler)
            logging.root.setLevel(level)

    def test_honors_logging_config(self) -> None:
        before = list(logging.root.handlers)
        level = logging.root.level
        try:
            setup_logging(LoggingConfig(level="ERROR", json_output=True))
            added = [h for h in logging.root.handlers if h not in before]
            assert len(added) == 1
            formatter = added[0].formatter
            assert isinstance(formatter, StructuredFormatter)
            assert formatter.json_output is True
            assert logging.root.level == logging.ERROR
        finally:
            for handler in logging.root.handlers:
                if handler not in before:
                    logging.root.removeHandler(handler)
            logging.root.setLevel(level)

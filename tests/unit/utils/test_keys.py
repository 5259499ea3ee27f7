"""
Unit tests for utils.keys module.

Tests:
- load_keys_from_env() with nsec and hex keys
- Missing, empty and invalid values
- KeysConfig loading keys during validation
"""

import pytest
from nostr_sdk import Keys

from nostrwire.core.exceptions import ConfigurationError
from nostrwire.utils import ENV_PRIVATE_KEY, KeysConfig, load_keys_from_env


NSEC = "nsec1vl029mgpspedva04g90vltkh6fvh240zqtv9k0t9af8935ke9laqsnlfe5"  # pragma: allowlist secret
SECRET_HEX = (
    "67dea2ed018072d675f5415ecfaed7d2597555e202d85b3d65ea4e58d2d92ffa"  # pragma: allowlist secret
)
PUBKEY_HEX = "7e7e9c42a91bfef19fa929e5fda1b72e0ebc1a4c1141673e2794234d86addf4e"


class TestLoadKeysFromEnv:
    """Tests for load_keys_from_env()."""

    @pytest.mark.parametrize("value", [NSEC, SECRET_HEX])
    def test_valid(self, monkeypatch: pytest.MonkeyPatch, value: str) -> None:
        monkeypatch.setenv(ENV_PRIVATE_KEY, value)
        keys = load_keys_from_env()
        assert isinstance(keys, Keys)
        assert keys.public_key().to_hex() == PUBKEY_HEX

    def test_custom_variable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RELAY_KEY", SECRET_HEX)
        assert load_keys_from_env("RELAY_KEY").public_key().to_hex() == PUBKEY_HEX

    def test_unset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(ENV_PRIVATE_KEY, raising=False)
        with pytest.raises(ConfigurationError, match="PRIVATE_KEY environment variable"):
            load_keys_from_env()

    def test_empty(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(ENV_PRIVATE_KEY, "")
        with pytest.raises(ConfigurationError):
            load_keys_from_env()

    def test_invalid_value_not_echoed(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(ENV_PRIVATE_KEY, "not-a-secret-key")
        with pytest.raises(ConfigurationError) as exc_info:
            load_keys_from_env()
        assert "not-a-secret-key" not in str(exc_info.value)


class TestKeysConfig:
    """Tests for KeysConfig."""

    def test_default_variable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(ENV_PRIVATE_KEY, NSEC)
        config = KeysConfig()
        assert config.keys_env == ENV_PRIVATE_KEY
        assert config.keys.public_key().to_hex() == PUBKEY_HEX

    def test_named_variable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CUSTOM_KEY", SECRET_HEX)
        config = KeysConfig(keys_env="CUSTOM_KEY")
        assert config.keys.public_key().to_hex() == PUBKEY_HEX

    def test_explicit_keys_skip_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(ENV_PRIVATE_KEY, raising=False)
        keys = Keys.generate()
        assert KeysConfig(keys=keys).keys is keys

    def test_missing_variable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("ABSENT_KEY", raising=False)
        with pytest.raises(ConfigurationError):
            KeysConfig(keys_env="ABSENT_KEY")

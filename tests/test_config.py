"""Tests for enode_client.config -- ENODE_* settings and credential sources."""

from __future__ import annotations

from pathlib import Path

import pydantic
import pytest

from enode_client.config import ClientSettings, load_settings, resolve_credential
from enode_client.exceptions import ConfigError


BASE_ENV = {"ENODE_CLIENT_ID": "id-from-env", "ENODE_CLIENT_SECRET": "secret-from-env"}


# ---------------------------------------------------------------------------
# resolve_credential
# ---------------------------------------------------------------------------


class TestResolveCredential:
    def test_env_source(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MY_ENODE_SECRET", "s3cret")
        assert resolve_credential("env:MY_ENODE_SECRET") == "s3cret"

    def test_env_source_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("MY_ENODE_SECRET", raising=False)
        with pytest.raises(ConfigError, match="MY_ENODE_SECRET"):
            resolve_credential("env:MY_ENODE_SECRET")

    def test_file_source_strips_whitespace(self, tmp_path: Path) -> None:
        secret_file = tmp_path / "secret"
        secret_file.write_text("  s3cret\n", encoding="utf-8")
        assert resolve_credential(f"file:{secret_file}") == "s3cret"

    def test_file_source_missing(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Credential file not found"):
            resolve_credential(f"file:{tmp_path / 'nope'}")

    def test_literal(self) -> None:
        assert resolve_credential("plain-value") == "plain-value"


# ---------------------------------------------------------------------------
# load_settings
# ---------------------------------------------------------------------------


class TestLoadSettings:
    def test_from_environment(self) -> None:
        settings = load_settings(environ=BASE_ENV)
        assert settings.client_id == "id-from-env"
        assert settings.client_secret.get_secret_value() == "secret-from-env"
        assert settings.environment == "sandbox"
        assert settings.auto_refresh is False
        assert settings.timeout == 30.0

    def test_overrides_win(self) -> None:
        settings = load_settings(
            {"client_id": "cli-id", "environment": "production"}, environ=BASE_ENV
        )
        assert settings.client_id == "cli-id"
        assert settings.environment == "production"

    def test_none_overrides_ignored(self) -> None:
        settings = load_settings({"client_id": None, "timeout": None}, environ=BASE_ENV)
        assert settings.client_id == "id-from-env"
        assert settings.timeout == 30.0

    @pytest.mark.parametrize("value,expected", [("true", True), ("1", True), ("off", False)])
    def test_auto_refresh_flag(self, value: str, expected: bool) -> None:
        env = {**BASE_ENV, "ENODE_AUTO_REFRESH": value}
        assert load_settings(environ=env).auto_refresh is expected

    def test_timeout_from_environment(self) -> None:
        env = {**BASE_ENV, "ENODE_TIMEOUT": "5.5"}
        assert load_settings(environ=env).timeout == 5.5

    def test_url_environment(self) -> None:
        env = {**BASE_ENV, "ENODE_ENVIRONMENT": "http://localhost:8080"}
        assert load_settings(environ=env).environment == "http://localhost:8080"

    def test_secret_source_resolved(self, tmp_path: Path) -> None:
        secret_file = tmp_path / "secret"
        secret_file.write_text("from-file", encoding="utf-8")
        env = {**BASE_ENV, "ENODE_CLIENT_SECRET": f"file:{secret_file}"}
        assert load_settings(environ=env).client_secret.get_secret_value() == "from-file"

    @pytest.mark.parametrize("missing", ["ENODE_CLIENT_ID", "ENODE_CLIENT_SECRET"])
    def test_missing_credentials(self, missing: str) -> None:
        env = {k: v for k, v in BASE_ENV.items() if k != missing}
        with pytest.raises(ConfigError, match=missing):
            load_settings(environ=env)

    def test_unknown_environment(self) -> None:
        env = {**BASE_ENV, "ENODE_ENVIRONMENT": "staging"}
        with pytest.raises(ConfigError, match="Unknown environment"):
            load_settings(environ=env)

    @pytest.mark.parametrize("timeout", ["0", "-1", "soon"])
    def test_invalid_timeout(self, timeout: str) -> None:
        env = {**BASE_ENV, "ENODE_TIMEOUT": timeout}
        with pytest.raises(ConfigError, match="Invalid client settings"):
            load_settings(environ=env)

    def test_settings_frozen(self) -> None:
        settings = ClientSettings(client_id="a", client_secret="b")
        with pytest.raises(pydantic.ValidationError):
            settings.client_id = "c"

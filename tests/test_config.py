"""Unit tests for environment-driven settings."""

from pathlib import Path

import pytest

from docket.config import DEFAULT_DB_PATH, Settings, load_settings

ENV_VARS = (
    "DOCKET_DB_PATH",
    "DOCKET_WEBHOOK_URL",
    "WORKFLOW_MODE",
    "DOCKET_REQUEST_TIMEOUT",
    "DOCKET_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for env in ENV_VARS:
        monkeypatch.delenv(env, raising=False)


class TestLoadSettings:
    def test_defaults(self):
        settings = load_settings()
        assert settings.db_path == DEFAULT_DB_PATH
        assert settings.workflow_mode == "mock"
        assert settings.webhook_url is None
        assert settings.request_timeout == 60
        assert settings.log_level == "INFO"

    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DOCKET_DB_PATH", str(tmp_path / "x.db"))
        monkeypatch.setenv("WORKFLOW_MODE", "live")
        monkeypatch.setenv("DOCKET_WEBHOOK_URL", "https://hooks.test/analyze")
        monkeypatch.setenv("DOCKET_REQUEST_TIMEOUT", "15")
        monkeypatch.setenv("DOCKET_LOG_LEVEL", "DEBUG")
        settings = load_settings()
        assert settings.db_path == Path(tmp_path / "x.db")
        assert settings.workflow_mode == "live"
        assert settings.webhook_url == "https://hooks.test/analyze"
        assert settings.request_timeout == 15
        assert settings.log_level == "DEBUG"

    def test_invalid_value_falls_back_alone(self, monkeypatch):
        monkeypatch.setenv("WORKFLOW_MODE", "turbo")
        monkeypatch.setenv("DOCKET_REQUEST_TIMEOUT", "30")
        settings = load_settings()
        assert settings.workflow_mode == "mock"
        assert settings.request_timeout == 30

    @pytest.mark.parametrize("value", ["0", "-5", "soon"])
    def test_invalid_timeout(self, monkeypatch, value):
        monkeypatch.setenv("DOCKET_REQUEST_TIMEOUT", value)
        assert load_settings().request_timeout == 60

    def test_empty_variable_ignored(self, monkeypatch):
        monkeypatch.setenv("WORKFLOW_MODE", "")
        assert load_settings().workflow_mode == "mock"


class TestSettingsInit:
    def test_field_names_accepted(self):
        settings = Settings(workflow_mode="live", webhook_url="https://hooks.test/analyze")
        assert settings.workflow_mode == "live"
        assert settings.webhook_url == "https://hooks.test/analyze"

    def test_keyword_beats_environment(self, monkeypatch):
        monkeypatch.setenv("WORKFLOW_MODE", "live")
        assert Settings(workflow_mode="mock").workflow_mode == "mock"

"""
Unit tests for environment-driven settings.
"""

from pathlib import Path

import pytest

from pses_session.errors import SessionConfigError
from pses_session.utils import config
from pses_session.utils.config import (
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_SESSIONS_DIR,
    Settings,
    get_settings,
    get_unique_session_id,
)


class TestFromEnv:
    """Test Settings.from_env."""

    def test_defaults(self):
        settings = Settings.from_env({})
        assert settings.sessions_dir == DEFAULT_SESSIONS_DIR
        assert settings.session_id is None
        assert settings.poll_interval == DEFAULT_POLL_INTERVAL == 0.5
        assert settings.max_attempts == DEFAULT_MAX_ATTEMPTS == 50
        assert settings.log_level == "INFO"

    def test_default_sessions_dir_beside_package(self):
        assert DEFAULT_SESSIONS_DIR.name == "sessions"
        assert (DEFAULT_SESSIONS_DIR.parent / "pses_session").is_dir()

    def test_overrides(self, tmp_path):
        settings = Settings.from_env({
            "VSCODE_PID": "8080",
            "PSES_SESSIONS_DIR": str(tmp_path),
            "PSES_POLL_INTERVAL": "0.25",
            "PSES_MAX_ATTEMPTS": "4",
            "PSES_LOGLEVEL": "debug",
        })
        assert settings.session_id == "8080"
        assert settings.sessions_dir == tmp_path
        assert settings.poll_interval == 0.25
        assert settings.max_attempts == 4
        assert settings.log_level == "debug"
        assert settings.session_file_path == tmp_path / "PSES-VSCode-8080"

    @pytest.mark.parametrize("env", [
        {"PSES_POLL_INTERVAL": "fast"},
        {"PSES_MAX_ATTEMPTS": "1.5"},
        {"PSES_MAX_ATTEMPTS": "0"},
        {"PSES_POLL_INTERVAL": "-1"},
        {"PSES_POLL_INTERVAL": "0"},
    ])
    def test_invalid_values(self, env):
        with pytest.raises(SessionConfigError):
            Settings.from_env(env)

    def test_zero_interval_rejected(self, tmp_path):
        with pytest.raises(SessionConfigError, match="poll_interval"):
            Settings(sessions_dir=tmp_path, poll_interval=0.0)

    def test_blank_values_use_defaults(self):
        settings = Settings.from_env({"PSES_POLL_INTERVAL": " ", "PSES_SESSIONS_DIR": ""})
        assert settings.poll_interval == DEFAULT_POLL_INTERVAL
        assert settings.sessions_dir == DEFAULT_SESSIONS_DIR


class TestSessionId:

    def test_reads_vscode_pid(self):
        assert get_unique_session_id({"VSCODE_PID": "1234"}) == "1234"

    @pytest.mark.parametrize("env", [{}, {"VSCODE_PID": ""}, {"VSCODE_PID": "  "}])
    def test_missing(self, env):
        assert get_unique_session_id(env) is None

    def test_session_file_path_requires_id(self, tmp_path):
        settings = Settings(sessions_dir=tmp_path)
        with pytest.raises(SessionConfigError, match="VSCODE_PID"):
            settings.session_file_path

    def test_process_environment(self, monkeypatch):
        monkeypatch.setenv("VSCODE_PID", "777")
        assert get_unique_session_id() == "777"


class TestGetSettings:

    def test_cached(self, monkeypatch):
        monkeypatch.setenv("VSCODE_PID", "1")
        first = get_settings()
        monkeypatch.setenv("VSCODE_PID", "2")
        assert get_settings() is first
        assert first.session_id == "1"

    def test_reset(self, monkeypatch):
        monkeypatch.setenv("VSCODE_PID", "1")
        get_settings()
        monkeypatch.setattr(config, "_settings", None)
        monkeypatch.setenv("VSCODE_PID", "2")
        assert get_settings().session_id == "2"

    def test_sessions_dir_is_path(self):
        assert isinstance(Settings(sessions_dir="somewhere").sessions_dir, Path)

"""Shared pytest fixtures and configuration."""

import logging

import pytest

from pses_session.paths import resolve_session_file_path
from pses_session.rendezvous import SessionFile
from pses_session.session import SessionDetails
from pses_session.utils import config


class FakeClock:
    """
    Stand-in for asyncio.sleep that advances a virtual clock instantly.

    ``on_sleep`` (if set) runs after each pause with the number of pauses
    so far, letting a test play the backend's part at a chosen tick.
    """

    def __init__(self):
        self.now = 0.0
        self.sleeps = []
        self.on_sleep = None

    async def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds
        if self.on_sleep is not None:
            self.on_sleep(len(self.sleeps))


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Isolate tests from the developer's environment, cached settings and CLI logging."""
    for name in ("VSCODE_PID", "PSES_SESSIONS_DIR", "PSES_POLL_INTERVAL",
                 "PSES_MAX_ATTEMPTS", "PSES_LOGLEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config, "_settings", None)
    yield
    pkg_logger = logging.getLogger("pses_session")
    for handler in list(pkg_logger.handlers):
        pkg_logger.removeHandler(handler)
    pkg_logger.setLevel(logging.NOTSET)


@pytest.fixture
def sessions_dir(tmp_path):
    return tmp_path / "sessions"


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def session_file(sessions_dir, fake_clock):
    """SessionFile with the default 50 x 0.5s budget on a virtual clock."""
    return SessionFile(
        resolve_session_file_path(sessions_dir, "1234"),
        sleep=fake_clock.sleep,
    )


@pytest.fixture
def started_details():
    return SessionDetails(
        status="started",
        reason="",
        backend_version="7.2",
        channel="stable",
        language_service_port=12345,
        debug_service_port=12346,
    )

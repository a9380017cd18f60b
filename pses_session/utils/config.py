import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from ..errors import SessionConfigError
from ..paths import resolve_session_file_path

# Sessions live beside the installed package, like the extension's ../sessions
_PACKAGE_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_SESSIONS_DIR = _PACKAGE_ROOT.parent / "sessions"

# 500ms x 50 attempts gives the backend 25 seconds to publish its session file
DEFAULT_POLL_INTERVAL = 0.5
DEFAULT_MAX_ATTEMPTS = 50

SESSION_ID_ENV = "VSCODE_PID"


def _float_env(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise SessionConfigError(f"{name} must be a number, got {raw!r}") from None


def _int_env(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise SessionConfigError(f"{name} must be an integer, got {raw!r}") from None


def get_unique_session_id(environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """
    Return the id identifying the current editor session.

    The editor exports its process id as VSCODE_PID on every platform, so
    both the language and debug servers get a stable session file name.
    """
    env = os.environ if environ is None else environ
    value = env.get(SESSION_ID_ENV, "").strip()
    return value or None


@dataclass
class Settings:
    sessions_dir: Path = DEFAULT_SESSIONS_DIR
    session_id: Optional[str] = None
    poll_interval: float = DEFAULT_POLL_INTERVAL
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    log_level: str = "INFO"

    def __post_init__(self):
        self.sessions_dir = Path(self.sessions_dir)
        if self.poll_interval <= 0:
            raise SessionConfigError(f"poll_interval must be > 0, got {self.poll_interval}")
        if self.max_attempts < 1:
            raise SessionConfigError(f"max_attempts must be >= 1, got {self.max_attempts}")

    @property
    def session_file_path(self) -> Path:
        if not self.session_id:
            raise SessionConfigError(
                f"No session id available; set {SESSION_ID_ENV} or pass one explicitly"
            )
        return resolve_session_file_path(self.sessions_dir, self.session_id)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from PSES_* environment variables (and VSCODE_PID)."""
        env = os.environ if environ is None else environ
        sessions_dir = env.get("PSES_SESSIONS_DIR", "").strip()
        return cls(
            sessions_dir=Path(sessions_dir) if sessions_dir else DEFAULT_SESSIONS_DIR,
            session_id=get_unique_session_id(env),
            poll_interval=_float_env(env, "PSES_POLL_INTERVAL", DEFAULT_POLL_INTERVAL),
            max_attempts=_int_env(env, "PSES_MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS),
            log_level=env.get("PSES_LOGLEVEL", "INFO"),
        )


# Process-wide instance, built on first use
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the process-wide Settings, read from the environment once.

    Returns:
        Settings singleton
    """
    global _settings

    if _settings is None:
        _settings = Settings.from_env()

    return _settings

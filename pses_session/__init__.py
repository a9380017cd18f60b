"""Session file rendezvous between an editor client and a PowerShell Editor Services backend."""

from .errors import (
    BackendExitedError,
    DirectoryCreationError,
    SessionConfigError,
    SessionError,
    SessionFileNotFoundError,
    SessionFileParseError,
    SessionFileReadError,
    SessionFileTimeout,
    SessionWaitCancelled,
)
from .paths import resolve_pipe_address, resolve_session_file_path
from .rendezvous import DeleteResult, SessionFile
from .session import STATUS_FAILED, STATUS_STARTED, SessionDetails
from .utils.config import Settings, get_settings

__version__ = "0.1.0"

__all__ = [
    "BackendExitedError",
    "DeleteResult",
    "DirectoryCreationError",
    "STATUS_FAILED",
    "STATUS_STARTED",
    "SessionConfigError",
    "SessionDetails",
    "SessionError",
    "SessionFile",
    "SessionFileNotFoundError",
    "SessionFileParseError",
    "SessionFileReadError",
    "SessionFileTimeout",
    "SessionWaitCancelled",
    "Settings",
    "get_settings",
    "resolve_pipe_address",
    "resolve_session_file_path",
]

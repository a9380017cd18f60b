"""Exception types raised by the session rendezvous components."""


class SessionError(Exception):
    """Base class for all pses_session errors."""


class SessionConfigError(SessionError):
    """Configuration is missing or invalid (e.g. no session id)."""


class DirectoryCreationError(SessionError):
    """The sessions directory could not be created."""

    def __init__(self, directory, message: str):
        super().__init__(message)
        self.directory = directory


class SessionFileNotFoundError(SessionError, FileNotFoundError):
    """The session file does not exist (yet)."""


class SessionFileParseError(SessionError, ValueError):
    """The session file exists but does not hold valid session details."""


class SessionFileTimeout(SessionError, TimeoutError):
    """The backend did not publish its session file within the wait budget."""

    def __init__(self, message: str, *, attempts: int = 0, poll_interval: float = 0.0):
        super().__init__(message)
        self.attempts = attempts
        self.poll_interval = poll_interval


class SessionWaitCancelled(SessionError):
    """A pending wait was aborted by its caller."""


class BackendExitedError(SessionError):
    """The watched backend process exited before publishing its session file."""

    def __init__(self, pid: int, message: str):
        super().__init__(message)
        self.pid = pid


class SessionFileReadError(SessionError):
    """The session file exists but could not be read (e.g. it is a directory)."""

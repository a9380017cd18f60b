"""
Session file rendezvous between the editor client and the backend.

The backend writes its connection details to a well-known session file
once its listeners are bound; the client polls for that file with a
bounded number of attempts. Absence of the file is the normal state
while the backend is still starting.
"""

import asyncio
import enum
import errno
import logging
import os
import tempfile
from contextlib import suppress
from pathlib import Path
from typing import TYPE_CHECKING, Awaitable, Callable, Optional, Union

import psutil

from .errors import (
    BackendExitedError,
    DirectoryCreationError,
    SessionFileNotFoundError,
    SessionFileParseError,
    SessionFileReadError,
    SessionFileTimeout,
    SessionWaitCancelled,
)
from .session import SessionDetails
from .utils.config import DEFAULT_MAX_ATTEMPTS, DEFAULT_POLL_INTERVAL

if TYPE_CHECKING:
    from .utils.config import Settings

log = logging.getLogger(__name__)

TIMEOUT_MESSAGE = "Timed out waiting for session file to appear."


class DeleteResult(enum.Enum):
    DELETED = "deleted"
    NOT_FOUND = "not_found"
    FAILED = "failed"

    @property
    def ok(self) -> bool:
        return self is not DeleteResult.FAILED


def _process_alive(pid: int) -> bool:
    try:
        proc = psutil.Process(pid)
        return proc.is_running() and proc.status() != psutil.STATUS_ZOMBIE
    except (psutil.NoSuchProcess, psutil.ZombieProcess):
        return False
    except psutil.AccessDenied:
        # Exists but belongs to someone else; treat as alive
        return True


class SessionFile:
    """
    One session file and the operations both sides perform on it.

    Args:
        path: Session file path (see paths.resolve_session_file_path)
        poll_interval: Seconds between wait_for() ticks
        max_attempts: Number of wait_for() ticks before giving up
        sleep: Coroutine used to pause between ticks (injectable for tests)
    """

    def __init__(
        self,
        path: Union[str, Path],
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.path = Path(path)
        self.poll_interval = poll_interval
        self.max_attempts = max_attempts
        self._sleep = sleep

    @classmethod
    def from_settings(cls, settings: "Settings", **kwargs) -> "SessionFile":
        kwargs.setdefault("poll_interval", settings.poll_interval)
        kwargs.setdefault("max_attempts", settings.max_attempts)
        return cls(settings.session_file_path, **kwargs)

    @property
    def directory(self) -> Path:
        return self.path.parent

    def __repr__(self) -> str:
        return f"SessionFile({str(self.path)!r})"

    def ensure_directory(self) -> None:
        """Create the sessions directory if needed; an existing one is fine."""
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except FileExistsError as e:
            # exist_ok only covers directories; a file in the way is fatal
            raise DirectoryCreationError(
                self.directory, f"{self.directory} exists and is not a directory"
            ) from e
        except OSError as e:
            raise DirectoryCreationError(
                self.directory, f"Failed to create sessions directory {self.directory}: {e}"
            ) from e

    def write(self, details: SessionDetails) -> None:
        """Publish ``details``, replacing any previous content."""
        self.ensure_directory()
        # Write atomically (unique temp file + rename) so pollers never see a partial file
        f = tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=self.directory,
            prefix=f".{self.path.name}.",
            suffix=".tmp",
            delete=False,
        )
        temp_file = Path(f.name)
        try:
            with f:
                f.write(details.to_json())
            temp_file.replace(self.path)
        except BaseException:
            with suppress(OSError):
                temp_file.unlink()
            raise
        log.info("Wrote session file %s (status=%s)", self.path, details.status)

    def exists(self) -> bool:
        return self.path.is_file() and os.access(self.path, os.R_OK)

    def read(self) -> SessionDetails:
        """Read and parse the session file once."""
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise SessionFileNotFoundError(
                errno.ENOENT, "Session file not found", str(self.path)
            ) from None
        except UnicodeDecodeError as e:
            raise SessionFileParseError(f"session file is not valid UTF-8: {e}") from e
        except OSError as e:
            raise SessionFileReadError(f"Failed to read session file {self.path}: {e}") from e
        return SessionDetails.from_json(text)

    def delete(self) -> DeleteResult:
        """Remove the session file. Never raises; the outcome is returned instead."""
        try:
            self.path.unlink()
        except FileNotFoundError:
            return DeleteResult.NOT_FOUND
        except OSError as e:
            log.warning("Failed to delete session file %s: %s", self.path, e)
            return DeleteResult.FAILED
        log.debug("Deleted session file %s", self.path)
        return DeleteResult.DELETED

    async def _pause(self, interval: float, cancel_event: Optional[asyncio.Event]) -> None:
        if cancel_event is None:
            await self._sleep(interval)
            return
        # Whichever finishes first wins; the other task is cancelled
        sleep_task = asyncio.ensure_future(self._sleep(interval))
        cancel_task = asyncio.ensure_future(cancel_event.wait())
        try:
            await asyncio.wait({sleep_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for t in (sleep_task, cancel_task):
                if not t.done():
                    t.cancel()
                    with suppress(asyncio.CancelledError):
                        await t
        if sleep_task.done() and not sleep_task.cancelled():
            sleep_task.result()

    async def wait_for(
        self,
        *,
        poll_interval: Optional[float] = None,
        max_attempts: Optional[int] = None,
        cancel_event: Optional[asyncio.Event] = None,
        backend_pid: Optional[int] = None,
    ) -> SessionDetails:
        """
        Wait for the backend to publish its session file.

        Each attempt checks for the file and returns its parsed content as
        soon as it is there; otherwise it pauses ``poll_interval`` seconds.
        A file that fails to parse is retried on the next attempt, since
        the backend may still be writing it.

        Args:
            poll_interval: Override the instance's interval for this wait
            max_attempts: Override the instance's attempt count for this wait
            cancel_event: Setting this event aborts the wait
            backend_pid: Fail early if this process exits before publishing

        Returns:
            SessionDetails read from the session file

        Raises:
            SessionFileTimeout: Attempts exhausted without finding the file
            SessionFileParseError: Attempts exhausted and the file never parsed
            SessionWaitCancelled: cancel_event was set
            BackendExitedError: backend_pid exited while waiting
        """
        interval = self.poll_interval if poll_interval is None else poll_interval
        attempts = self.max_attempts if max_attempts is None else max_attempts
        last_parse_error: Optional[SessionFileParseError] = None

        log.debug(
            "Waiting for session file %s (%d attempts, %.3fs apart)",
            self.path, attempts, interval,
        )
        for attempt in range(1, attempts + 1):
            if cancel_event is not None and cancel_event.is_set():
                raise SessionWaitCancelled(f"Wait for {self.path} cancelled")

            if self.exists():
                try:
                    details = self.read()
                except SessionFileNotFoundError:
                    # Removed between the check and the read
                    pass
                except SessionFileParseError as e:
                    last_parse_error = e
                    log.debug("Attempt %d: session file not parseable yet: %s", attempt, e)
                else:
                    log.info(
                        "Found session file %s after %d attempt(s) (status=%s)",
                        self.path, attempt, details.status,
                    )
                    return details
            else:
                last_parse_error = None
                if backend_pid is not None and not _process_alive(backend_pid):
                    raise BackendExitedError(
                        backend_pid,
                        f"Backend process {backend_pid} exited before writing its session file",
                    )
                log.debug("Attempt %d/%d: session file not present", attempt, attempts)

            await self._pause(interval, cancel_event)

        if cancel_event is not None and cancel_event.is_set():
            raise SessionWaitCancelled(f"Wait for {self.path} cancelled")
        if last_parse_error is not None:
            log.warning("Session file %s never became valid: %s", self.path, last_parse_error)
            raise last_parse_error
        log.warning("%s (%s, %d attempts)", TIMEOUT_MESSAGE, self.path, attempts)
        raise SessionFileTimeout(TIMEOUT_MESSAGE, attempts=attempts, poll_interval=interval)

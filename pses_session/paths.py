"""Session file and pipe address resolution.

Both ends of a session compute these paths independently, so nothing
here may depend on state other than its arguments. None of these
functions touch the filesystem.
"""

import os
import sys
import tempfile
from pathlib import Path
from typing import Optional, Union

SESSION_FILE_PREFIX = "PSES-VSCode-"

WINDOWS_PIPE_PREFIX = "\\\\.\\pipe\\"

# Matches System.IO.Pipes.PipeStream on Unix in .NET (corefx), which places
# its domain socket files under <tmp>/.dotnet/corefx/pipe/<name>
UNIX_PIPE_SEGMENTS = (".dotnet", "corefx", "pipe")


def is_windows_platform(platform: Optional[str] = None) -> bool:
    """True for sys.platform style names of the Windows family ("win32", "windows")."""
    name = (platform if platform is not None else sys.platform).lower()
    return name.startswith("win")


def resolve_session_file_path(sessions_dir: Union[str, Path], session_id: str) -> Path:
    """Return ``<sessions_dir>/PSES-VSCode-<session_id>`` as an absolute path."""
    session_id = str(session_id).strip() if session_id is not None else ""
    if not session_id:
        raise ValueError("session_id must be a non-empty string")
    return Path(os.path.abspath(sessions_dir)) / f"{SESSION_FILE_PREFIX}{session_id}"


def resolve_pipe_address(
    pipe_name: str,
    platform: Optional[str] = None,
    tmpdir: Optional[str] = None,
) -> str:
    """
    Return the address a named pipe called ``pipe_name`` lives at.

    Args:
        pipe_name: Logical pipe name, a single path segment
        platform: sys.platform style name (defaults to the running one)
        tmpdir: Temp directory for Unix pipes (defaults to tempfile.gettempdir())

    Returns:
        ``\\\\.\\pipe\\<name>`` on Windows, ``<tmp>/.dotnet/corefx/pipe/<name>`` elsewhere
    """
    if not pipe_name:
        raise ValueError("pipe_name must be a non-empty string")
    if "/" in pipe_name or "\\" in pipe_name:
        raise ValueError(f"pipe_name must be a single segment, got {pipe_name!r}")

    if is_windows_platform(platform):
        return WINDOWS_PIPE_PREFIX + pipe_name

    base = tmpdir if tmpdir is not None else tempfile.gettempdir()
    return os.path.join(os.path.abspath(base), *UNIX_PIPE_SEGMENTS, pipe_name)

"""Platform detection for the pipe address convention.

The backend picks its pipe transport from the OS it runs on; the client
has to agree without asking, so both derive it from the platform here.
"""

import logging
import platform
import sys
import tempfile

from ..paths import UNIX_PIPE_SEGMENTS, WINDOWS_PIPE_PREFIX, is_windows_platform

logger = logging.getLogger(__name__)

# Platform detection
IS_MACOS = platform.system() == "Darwin"
IS_LINUX = platform.system() == "Linux"
IS_WINDOWS = is_windows_platform(sys.platform)


def pipe_family(platform_name: str = None) -> str:
    """Return "windows" for named pipes, "unix" for domain socket files."""
    return "windows" if is_windows_platform(platform_name) else "unix"


def get_platform_info():
    """
    Get platform details relevant to session discovery.

    Returns:
        dict: OS, interpreter and pipe convention in use
    """
    family = pipe_family()
    if family == "windows":
        pipe_root = WINDOWS_PIPE_PREFIX
    else:
        pipe_root = "/".join((tempfile.gettempdir(), *UNIX_PIPE_SEGMENTS))
    return {
        "platform": platform.system(),
        "platform_release": platform.release(),
        "sys_platform": sys.platform,
        "python_version": platform.python_version(),
        "is_macos": IS_MACOS,
        "is_linux": IS_LINUX,
        "is_windows": IS_WINDOWS,
        "pipe_family": family,
        "pipe_root": pipe_root,
    }


def log_platform_info():
    """Log the platform and the pipe convention at startup."""
    info = get_platform_info()

    logger.info("OS: %s %s (%s)", info["platform"], info["platform_release"], info["sys_platform"])
    logger.info("Python: %s", info["python_version"])
    logger.info("Pipe convention: %s under %s", info["pipe_family"], info["pipe_root"])
    if not (IS_WINDOWS or IS_LINUX or IS_MACOS):
        logger.warning("Unrecognised platform %s; assuming Unix domain sockets", info["platform"])

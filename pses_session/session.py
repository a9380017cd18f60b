"""Session details published by the backend in its session file.

The wire format is a flat JSON object using the camelCase keys the
PowerShell Editor Services host writes.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .errors import SessionFileParseError

STATUS_STARTED = "started"
STATUS_FAILED = "failed"

# attribute name -> wire key
_WIRE_KEYS = {
    "status": "status",
    "reason": "reason",
    "backend_version": "powerShellVersion",
    "channel": "channel",
    "language_service_port": "languageServicePort",
    "debug_service_port": "debugServicePort",
}


def _port(data: Dict[str, Any], key: str, required: bool) -> Optional[int]:
    value = data.get(key)
    if value is None:
        if required:
            raise SessionFileParseError(f"missing {key!r} in started session")
        return None
    # bool is an int subclass, but "true" is never a valid port
    if isinstance(value, bool) or not isinstance(value, int):
        raise SessionFileParseError(f"{key!r} must be an integer, got {value!r}")
    return value


def _text(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise SessionFileParseError(f"{key!r} must be a string, got {value!r}")
    return value


@dataclass
class SessionDetails:
    """
    Connection details for one editor session.

    Attributes:
        status: Backend state, "started" or "failed"
        reason: Diagnostic text when status is not "started"
        backend_version: PowerShell version the backend runs on
        channel: Build channel, e.g. "stable" or "preview"
        language_service_port: Pipe suffix or port for the language service
        debug_service_port: Pipe suffix or port for the debug service
    """
    status: str
    reason: str = ""
    backend_version: str = ""
    channel: str = ""
    language_service_port: Optional[int] = None
    debug_service_port: Optional[int] = None

    @property
    def is_started(self) -> bool:
        return self.status == STATUS_STARTED

    @classmethod
    def started(
        cls,
        language_service_port: int,
        debug_service_port: int,
        backend_version: str = "",
        channel: str = "",
    ) -> "SessionDetails":
        return cls(
            status=STATUS_STARTED,
            backend_version=backend_version,
            channel=channel,
            language_service_port=language_service_port,
            debug_service_port=debug_service_port,
        )

    @classmethod
    def failed(cls, reason: str, backend_version: str = "", channel: str = "") -> "SessionDetails":
        return cls(
            status=STATUS_FAILED,
            reason=reason,
            backend_version=backend_version,
            channel=channel,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire dictionary (camelCase keys)."""
        return {wire: getattr(self, attr) for attr, wire in _WIRE_KEYS.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SessionDetails":
        """Create SessionDetails from a wire dictionary, validating its structure."""
        if not isinstance(data, dict):
            raise SessionFileParseError(
                f"session details must be a JSON object, got {type(data).__name__}"
            )
        status = data.get("status")
        if not isinstance(status, str) or not status:
            raise SessionFileParseError(f"'status' must be a non-empty string, got {status!r}")

        # Ports are only guaranteed once the backend reports it has started
        required = status == STATUS_STARTED
        return cls(
            status=status,
            reason=_text(data, "reason"),
            backend_version=_text(data, "powerShellVersion"),
            channel=_text(data, "channel"),
            language_service_port=_port(data, "languageServicePort", required),
            debug_service_port=_port(data, "debugServicePort", required),
        )

    def to_json(self) -> str:
        """Serialize to compact JSON text."""
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_json(cls, text: str) -> "SessionDetails":
        """Deserialize from JSON text."""
        if not text or not text.strip():
            raise SessionFileParseError("session file is empty")
        try:
            data = json.loads(text)
        except (ValueError, RecursionError) as e:
            # RecursionError: pathologically nested arrays or objects
            raise SessionFileParseError(f"session file is not valid JSON: {e}") from e
        return cls.from_dict(data)

import argparse
import asyncio
import dataclasses
import json
import logging

from .core.logging_setup import setup_logger
from .errors import SessionError
from .io.platform_abstraction import get_platform_info, log_platform_info
from .paths import resolve_pipe_address
from .rendezvous import SessionFile
from .session import SessionDetails
from .utils.config import Settings, get_settings

log = logging.getLogger(__name__)


def _print_json(obj):
    print(json.dumps(obj, indent=2))


def _settings(args) -> Settings:
    """Environment settings with command line overrides applied."""
    s = get_settings()
    overrides = {}
    if args.sessions_dir:
        overrides["sessions_dir"] = args.sessions_dir
    if args.session_id:
        overrides["session_id"] = args.session_id
    return dataclasses.replace(s, **overrides) if overrides else s


def _session_file(args) -> SessionFile:
    return SessionFile.from_settings(_settings(args))


# ---------- commands ----------

def cmd_paths(args):
    s = _settings(args)
    result = {"sessions_dir": str(s.sessions_dir)}
    if s.session_id:
        result["session_file"] = str(s.session_file_path)
    result["pipes"] = {
        name: resolve_pipe_address(name, platform=args.platform) for name in (args.pipe or [])
    }
    _print_json(result)


def cmd_wait(args):
    sf = _session_file(args)
    log.info("Waiting for session file %s", sf.path)
    details = asyncio.run(
        sf.wait_for(
            poll_interval=args.interval,
            max_attempts=args.attempts,
            backend_pid=args.backend_pid,
        )
    )
    _print_json(details.to_dict())


def cmd_read(args):
    _print_json(_session_file(args).read().to_dict())


def cmd_write(args):
    sf = _session_file(args)
    details = SessionDetails(
        status=args.status,
        reason=args.reason,
        backend_version=args.version,
        channel=args.channel,
        language_service_port=args.language_port,
        debug_service_port=args.debug_port,
    )
    # Validate the same way a reader will before publishing
    SessionDetails.from_dict(details.to_dict())
    sf.write(details)
    print(f"Wrote → {sf.path}")


def cmd_delete(args):
    sf = _session_file(args)
    result = sf.delete()
    print(f"[delete] {sf.path}: {result.value}")
    if not result.ok:
        raise SystemExit(1)


def cmd_info(args):
    log_platform_info()
    _print_json(get_platform_info())


# ---------- arg parsing ----------

def build_parser():
    ap = argparse.ArgumentParser(
        prog="pses-session",
        description="Session file rendezvous with a PowerShell Editor Services backend",
    )
    ap.add_argument("--sessions-dir", help="directory holding session files (env: PSES_SESSIONS_DIR)")
    ap.add_argument("--session-id", help="editor session id (env: VSCODE_PID)")
    ap.add_argument("--log-level", help="log level (env: PSES_LOGLEVEL)")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p = sub.add_parser("paths", help="Print the session file path and pipe addresses")
    p.add_argument("--pipe", action="append", help="pipe name to resolve (repeatable)")
    p.add_argument("--platform", help='sys.platform style name, e.g. "win32" or "linux"')
    p.set_defaults(func=cmd_paths)

    w = sub.add_parser("wait", help="Wait for the backend to publish its session file")
    w.add_argument("--interval", type=float, help="seconds between checks (default 0.5)")
    w.add_argument("--attempts", type=int, help="number of checks before giving up (default 50)")
    w.add_argument("--backend-pid", type=int, help="stop waiting if this process exits")
    w.set_defaults(func=cmd_wait)

    r = sub.add_parser("read", help="Print the current session details")
    r.set_defaults(func=cmd_read)

    wr = sub.add_parser("write", help="Publish a session file (acts as the backend)")
    wr.add_argument("--status", default="started")
    wr.add_argument("--reason", default="")
    wr.add_argument("--version", default="", help="backend PowerShell version")
    wr.add_argument("--channel", default="")
    wr.add_argument("--language-port", type=int)
    wr.add_argument("--debug-port", type=int)
    wr.set_defaults(func=cmd_write)

    d = sub.add_parser("delete", help="Remove the session file")
    d.set_defaults(func=cmd_delete)

    i = sub.add_parser("info", help="Show platform and pipe convention")
    i.set_defaults(func=cmd_info)

    return ap


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        setup_logger(args.log_level or get_settings().log_level)
        args.func(args)
    except (SessionError, ValueError) as e:
        raise SystemExit(f"[pses-session] {e}")


if __name__ == "__main__":
    main()

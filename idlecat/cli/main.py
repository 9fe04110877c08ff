"""
idlecat: copy stdin to stdout, running commands when the stream goes idle,
becomes active again, or ends.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from pydantic import ValidationError

from idlecat.core.hooks.executor import ShellCommandExecutor
from idlecat.core.logging_ import setup_logging
from idlecat.core.monitor.activity_monitor import ActivityMonitor, MonitorIOError
from idlecat.shared.config import (
    DEFAULT_ACTIVE_TO_IDLE_THRESHOLD,
    DEFAULT_IDLE_TIMEOUT,
    DEFAULT_IDLE_TO_ACTIVE_THRESHOLD,
    AppConfig,
)
from idlecat.shared.store import ConfigError, ConfigStore

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_IO_ERROR = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="idlecat",
        description="Pass stdin through to stdout and run commands on idle/active transitions.",
    )
    parser.add_argument("-t", "--idle-timeout", type=float, metavar="SECONDS",
                        help=f"seconds of silence before the stream counts as idle (default: {DEFAULT_IDLE_TIMEOUT})")
    parser.add_argument("-i", "--idle-to-active", type=float, metavar="SECONDS", dest="idle_to_active_threshold",
                        help=f"minimum idle time before COMMAND -I runs (default: {DEFAULT_IDLE_TO_ACTIVE_THRESHOLD})")
    parser.add_argument("-a", "--active-to-idle", type=float, metavar="SECONDS", dest="active_to_idle_threshold",
                        help=f"minimum active time before COMMAND -A runs (default: {DEFAULT_ACTIVE_TO_IDLE_THRESHOLD})")
    parser.add_argument("-I", "--on-active", metavar="COMMAND", dest="idle_to_active_command",
                        help="command to run on transition from idle to active")
    parser.add_argument("-A", "--on-idle", metavar="COMMAND", dest="active_to_idle_command",
                        help="command to run on transition from active to idle")
    parser.add_argument("-E", "--on-eof", metavar="COMMAND", dest="eof_command",
                        help="command to run on end of input")
    parser.add_argument("-c", "--config", metavar="PATH",
                        help="JSON config file (default: $XDG_CONFIG_HOME/idlecat/config.json if present)")
    parser.add_argument("--log-file", metavar="PATH", help="also log to a rotating file")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="log transitions to stderr (-vv for debug)")
    return parser


def load_config(args: argparse.Namespace) -> AppConfig:
    """Defaults < config file < command line."""
    base = ConfigStore(args.config).load()

    overrides = {
        key: getattr(args, key)
        for key in (
            "idle_timeout",
            "idle_to_active_threshold",
            "active_to_idle_threshold",
            "idle_to_active_command",
            "active_to_idle_command",
            "eof_command",
            "log_file",
        )
        if getattr(args, key) is not None
    }
    return AppConfig.model_validate({**base.model_dump(), **overrides})


def _describe(err: ValidationError) -> str:
    parts = []
    for e in err.errors():
        field = ".".join(str(p) for p in e["loc"]) or "config"
        parts.append(f"{field.replace('_', ' ')}: {e['msg']}")
    return "; ".join(parts)


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.config is not None and not os.path.exists(args.config):
        parser.error(f"config file not found: {args.config}")

    try:
        cfg = load_config(args)
    except ConfigError as e:
        parser.error(str(e))
    except ValidationError as e:
        parser.error(_describe(e))

    setup_logging(args.verbose, cfg.log_file)

    stdin_fd = sys.stdin.fileno()
    was_blocking = os.get_blocking(stdin_fd)
    os.set_blocking(stdin_fd, False)
    try:
        monitor = ActivityMonitor(cfg.to_monitor_config(), ShellCommandExecutor())
        monitor.run()
    except MonitorIOError as e:
        log.error(f"Fatal I/O error: {e}")
        sys.exit(EXIT_IO_ERROR)
    finally:
        os.set_blocking(stdin_fd, was_blocking)

    sys.exit(EXIT_OK)


if __name__ == "__main__":
    main()

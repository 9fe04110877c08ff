from __future__ import annotations

import logging
import subprocess
from typing import Protocol

log = logging.getLogger(__name__)


class CommandExecutor(Protocol):
    def run(self, command: str) -> None:
        ...


class ShellCommandExecutor:
    """Runs hook commands through the host shell and waits for them.

    The child inherits our stdin/stdout/stderr. Its exit status is logged,
    never raised: a failing hook must not stop the relay.
    """

    def run(self, command: str) -> None:
        log.debug(f"Running hook: {command}")
        try:
            result = subprocess.run(command, shell=True)
        except OSError:
            log.exception(f"Failed to run hook: {command}")
            return

        if result.returncode != 0:
            log.warning(f"Hook exited with status {result.returncode}: {command}")

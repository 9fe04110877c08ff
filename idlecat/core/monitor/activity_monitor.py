"""
Stream activity monitor: relays stdin to stdout and fires hooks on
IDLE <-> ACTIVE transitions and on end-of-stream.

Single-threaded. The only suspension points are the bounded select on the
input and the (synchronous) hook commands.
"""

from __future__ import annotations

import logging
import os
import select
import sys
import time
from dataclasses import replace
from typing import Callable, List, Optional

from idlecat.core.hooks.executor import CommandExecutor
from .transitions import hook_for, initial_state, observe_data, observe_eof, observe_tick
from .types import MonitorConfig, MonitorState, Transition

log = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 1.0
READ_SIZE = 4096


class MonitorIOError(Exception):
    """Unrecoverable failure of the select/read/write path."""

    def __init__(self, operation: str, cause: OSError) -> None:
        super().__init__(f"{operation}: {cause.strerror or cause}")
        self.operation = operation
        self.cause = cause


class ActivityMonitor:
    def __init__(
        self,
        config: MonitorConfig,
        executor: CommandExecutor,
        clock: Callable[[], float] = time.monotonic,
        input_fd: Optional[int] = None,
        output_fd: Optional[int] = None,
        poll_interval: float = POLL_INTERVAL_SECONDS,
        read_size: int = READ_SIZE,
    ) -> None:
        self._cfg = config
        self._executor = executor
        self._clock = clock
        self._in = sys.stdin.fileno() if input_fd is None else input_fd
        self._out = sys.stdout.fileno() if output_fd is None else output_fd
        self._poll_interval = poll_interval
        self._read_size = read_size

        self._state = initial_state(self._clock())

        self._transition_cbs: List[Callable[[Transition], None]] = []
        self._eof_cbs: List[Callable[[], None]] = []

    def on_transition(self, cb: Callable[[Transition], None]) -> None:
        self._transition_cbs.append(cb)

    def on_eof(self, cb: Callable[[], None]) -> None:
        self._eof_cbs.append(cb)

    def get_state(self) -> MonitorState:
        return replace(self._state)

    @property
    def finished(self) -> bool:
        return self._state.eof

    def run(self) -> None:
        """Relay until end-of-input. Raises MonitorIOError on fatal I/O errors."""
        log.info(
            f"Monitoring input (idle timeout {self._cfg.idle_timeout}s, "
            f"idle->active {self._cfg.idle_to_active_threshold}s, "
            f"active->idle {self._cfg.active_to_idle_threshold}s)"
        )
        while not self._state.eof:
            self.step()

    def step(self) -> None:
        """One iteration of the polling loop."""
        readable = self._wait_readable()
        now = self._clock()

        if readable:
            data = self._read()
            if data is None:
                log.debug("Input not actually ready, treating tick as empty")
            elif data:
                self._write_all(data)
                self._state, transition = observe_data(self._state, self._cfg, now)
                if transition is not None:
                    self._handle(transition)
            else:
                self._handle_eof()

        # Runs on the EOF tick too; run() stops once eof is set.
        self._state, transition = observe_tick(self._state, self._cfg, now)
        if transition is not None:
            self._handle(transition)

    def _wait_readable(self) -> bool:
        try:
            rfds, _, _ = select.select([self._in], [], [], self._poll_interval)
        except OSError as e:
            raise MonitorIOError("select", e) from e
        return bool(rfds)

    def _read(self) -> Optional[bytes]:
        """Returns the bytes read (b"" at EOF), or None if the read would block."""
        try:
            return os.read(self._in, self._read_size)
        except BlockingIOError:
            return None
        except OSError as e:
            raise MonitorIOError("read", e) from e

    def _write_all(self, data: bytes) -> None:
        view = memoryview(data)
        written = 0
        while written < len(view):
            try:
                written += os.write(self._out, view[written:])
            except InterruptedError:
                continue
            except OSError as e:
                raise MonitorIOError("write", e) from e

    def _handle(self, transition: Transition) -> None:
        command = hook_for(transition, self._cfg)
        log.info(
            f"{transition.source} -> {transition.target} after {transition.dwell:.1f}s"
            + (" (hook)" if command else "")
        )
        if command:
            self._executor.run(command)
        for cb in self._transition_cbs:
            cb(transition)

    def _handle_eof(self) -> None:
        self._state = observe_eof(self._state)
        log.info("End of input")
        if self._cfg.eof_command:
            self._executor.run(self._cfg.eof_command)
        for cb in self._eof_cbs:
            cb()

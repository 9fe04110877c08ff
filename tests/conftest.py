import os

import pytest

from idlecat.core.monitor.types import MonitorConfig

# Bound at import so tests that monkeypatch os.write don't affect feeding.
_real_write = os.write


class FakeClock:
    """Manually advanced clock for driving the monitor with synthetic time."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingExecutor:
    """Stands in for the shell: remembers every command it is asked to run."""

    def __init__(self) -> None:
        self.commands = []

    def run(self, command: str) -> None:
        self.commands.append(command)


class Pipe:
    """os.pipe() pair with a non-blocking read end."""

    def __init__(self) -> None:
        self.r, self.w = os.pipe()
        os.set_blocking(self.r, False)

    def feed(self, data: bytes) -> None:
        _real_write(self.w, data)

    def close_writer(self) -> None:
        if self.w is not None:
            os.close(self.w)
            self.w = None

    def drain(self) -> bytes:
        chunks = []
        while True:
            try:
                chunk = os.read(self.r, 65536)
            except BlockingIOError:
                break
            if not chunk:
                break
            chunks.append(chunk)
        return b"".join(chunks)

    def close(self) -> None:
        self.close_writer()
        if self.r is not None:
            os.close(self.r)
            self.r = None


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def executor():
    return RecordingExecutor()


@pytest.fixture
def monitor_config():
    """idle_timeout=2, idle->active 5s, active->idle 3s, all hooks set."""
    return MonitorConfig(
        idle_timeout=2,
        idle_to_active_threshold=5,
        active_to_idle_threshold=3,
        idle_to_active_command="on-active",
        active_to_idle_command="on-idle",
        eof_command="on-eof",
    )


@pytest.fixture
def stdin_pipe():
    p = Pipe()
    yield p
    p.close()


@pytest.fixture
def stdout_pipe():
    p = Pipe()
    yield p
    p.close()

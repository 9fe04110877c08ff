from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

Phase = Literal["IDLE", "ACTIVE"]


@dataclass(frozen=True)
class MonitorConfig:
    idle_timeout: float  # seconds
    idle_to_active_threshold: float  # seconds
    active_to_idle_threshold: float  # seconds
    idle_to_active_command: Optional[str] = None
    active_to_idle_command: Optional[str] = None
    eof_command: Optional[str] = None


@dataclass
class MonitorState:
    phase: Phase = "IDLE"
    phase_entered_at: float = 0.0
    last_data_at: float = 0.0
    eof: bool = False


@dataclass(frozen=True)
class Transition:
    """A single phase change.

    ``dwell`` is how long the stream stayed in ``source``; ``qualifies`` is
    whether that dwell met the threshold configured for leaving ``source``.
    """
    source: Phase
    target: Phase
    at: float
    dwell: float
    qualifies: bool

"""
Pure transition rules for the IDLE/ACTIVE stream state machine.

Every function takes an explicit ``now`` and returns a new state plus the
transition it caused (if any). Nothing here reads a clock or runs a command.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional, Tuple

from .types import MonitorConfig, MonitorState, Transition


def initial_state(now: float) -> MonitorState:
    return MonitorState(phase="IDLE", phase_entered_at=now, last_data_at=now, eof=False)


def observe_data(
    state: MonitorState, cfg: MonitorConfig, now: float
) -> Tuple[MonitorState, Optional[Transition]]:
    """
    Data arrived at ``now``: leave IDLE if we were in it.

    The idle duration is measured before ``last_data_at`` is refreshed, so the
    transition sees how long the previous phase lasted rather than zero.
    """
    transition: Optional[Transition] = None

    if state.phase == "IDLE":
        idle_duration = now - state.phase_entered_at
        transition = Transition(
            source="IDLE",
            target="ACTIVE",
            at=now,
            dwell=idle_duration,
            qualifies=idle_duration >= cfg.idle_to_active_threshold,
        )
        state = replace(state, phase="ACTIVE", phase_entered_at=now)

    return replace(state, last_data_at=now), transition


def observe_tick(
    state: MonitorState, cfg: MonitorConfig, now: float
) -> Tuple[MonitorState, Optional[Transition]]:
    """Time passed: drop back to IDLE once silence reaches the idle timeout."""
    if state.phase != "ACTIVE":
        return state, None

    silence = now - state.last_data_at
    if silence < cfg.idle_timeout:
        return state, None

    # Includes the trailing silence that triggered the change.
    active_duration = now - state.phase_entered_at
    transition = Transition(
        source="ACTIVE",
        target="IDLE",
        at=now,
        dwell=active_duration,
        qualifies=active_duration >= cfg.active_to_idle_threshold,
    )
    return replace(state, phase="IDLE", phase_entered_at=now), transition


def observe_eof(state: MonitorState) -> MonitorState:
    return replace(state, eof=True)


def hook_for(transition: Transition, cfg: MonitorConfig) -> Optional[str]:
    if not transition.qualifies:
        return None
    if transition.target == "ACTIVE":
        return cfg.idle_to_active_command
    return cfg.active_to_idle_command

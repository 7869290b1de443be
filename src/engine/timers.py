"""Buff countdown and post-expiry countdown arithmetic.

The buff cycle is 60s. While the buff is up the icon counts the remaining
seconds down in green. Once it drops, a stale remaining value above 50s opens a
short red countdown (at most 10s) before the white "Bash" prompt takes over.
The red countdown advances a fixed 0.2s per evaluation, independent of how
much real time passed between evaluations.
"""

from __future__ import annotations

from dataclasses import replace

from src.models.reminder import EngineState

BUFF_CYCLE_SECONDS = 60.0
BASH_THRESHOLD_SECONDS = 50.0
POST_EXPIRY_WINDOW_SECONDS = 10.0
POST_EXPIRY_STEP_SECONDS = 0.2
REMINDER_COOLDOWN_MS = 1000.0


def cleared(state: EngineState) -> EngineState:
    """Return state with both countdown fields reset to 0."""
    if state.remaining_buff_seconds == 0 and state.cooldown_display_seconds == 0:
        return state
    return replace(state, remaining_buff_seconds=0.0, cooldown_display_seconds=0.0)


def with_buff_remaining(state: EngineState, seconds: float) -> EngineState:
    return replace(state, remaining_buff_seconds=max(0.0, float(seconds)))


def bash_window_open(state: EngineState) -> bool:
    return state.remaining_buff_seconds <= BASH_THRESHOLD_SECONDS


def in_post_expiry_window(state: EngineState) -> bool:
    return (
        state.remaining_buff_seconds > BASH_THRESHOLD_SECONDS
        and state.cooldown_display_seconds <= POST_EXPIRY_WINDOW_SECONDS
    )


def advance_post_expiry(state: EngineState) -> tuple[EngineState, float]:
    """Recompute the red countdown from the stale remaining time and step it once.

    Returns (new_state, value_to_display).
    """
    cooldown = POST_EXPIRY_WINDOW_SECONDS - (BUFF_CYCLE_SECONDS - state.remaining_buff_seconds)
    remaining = max(0.0, state.remaining_buff_seconds - POST_EXPIRY_STEP_SECONDS)
    new_state = replace(
        state,
        remaining_buff_seconds=remaining,
        cooldown_display_seconds=cooldown,
    )
    return new_state, cooldown - POST_EXPIRY_STEP_SECONDS


def reminder_gate(state: EngineState, now_ms: float) -> tuple[EngineState, bool]:
    """Open the 1s reminder gate if it has elapsed. Returns (state, fired)."""
    if now_ms - state.last_reminder_ms < REMINDER_COOLDOWN_MS:
        return state, False
    return replace(state, last_reminder_ms=now_ms), True


def format_buff_seconds(seconds: float) -> str:
    return str(int(max(0.0, seconds)))


def format_post_expiry(seconds: float) -> str:
    return f"{seconds:.1f}"

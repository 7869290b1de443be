"""Condition engine: settings + engine state + live facts -> visual directive.

Rules are checked in order and the first one that applies decides the
directive. Pure: the input state is never mutated, a new one is returned.
"""

from __future__ import annotations

from typing import Optional

from src.engine import timers
from src.models.reminder import (
    COLOR_GREEN,
    COLOR_RED,
    COLOR_WHITE,
    HIDDEN,
    DisplayMode,
    EngineState,
    Evaluation,
    LiveFacts,
    ReminderSettings,
    VisualDirective,
)

BASH_TEXT = "Bash"
BANNER_TEXT = ">>> HUNTSMAN WARMASK MISSING! <<<"


def should_hide_for_context(settings: ReminderSettings, in_combat: bool, camera_in_ui_mode: bool) -> bool:
    """Locked icon while the cursor is up, or out of combat without show_outside_combat."""
    if settings.lock_position and camera_in_ui_mode:
        return True
    return not in_combat and not settings.show_outside_combat


def evaluate(
    settings: ReminderSettings,
    state: EngineState,
    facts: Optional[LiveFacts],
) -> Evaluation:
    """Run one pass of the reminder rules. Never raises."""
    if facts is None:
        return Evaluation(HIDDEN, state, fired=False)

    if not settings.enabled:
        return Evaluation(HIDDEN, timers.cleared(state), fired=False)
    if not facts.has_target_equipped:
        return Evaluation(HIDDEN, timers.cleared(state), fired=False)
    if should_hide_for_context(settings, facts.is_in_combat, facts.camera_in_ui_mode):
        return Evaluation(HIDDEN, timers.cleared(state), fired=False)

    if settings.toggle_warning:
        if facts.buff_active:
            return Evaluation(HIDDEN, state, fired=False)
        directive = VisualDirective(DisplayMode.BANNER, BANNER_TEXT, COLOR_RED)
    else:
        directive, state = _icon_directive(settings, state, facts)

    state, fired = timers.reminder_gate(state, facts.now_ms)
    return Evaluation(directive, state, fired=fired)


def _icon_directive(
    settings: ReminderSettings,
    state: EngineState,
    facts: LiveFacts,
) -> tuple[VisualDirective, EngineState]:
    if facts.buff_active:
        state = timers.with_buff_remaining(state, facts.buff_remaining_seconds)
        if settings.toggle_timer:
            text = timers.format_buff_seconds(state.remaining_buff_seconds)
            return VisualDirective(DisplayMode.BUFF_COUNTDOWN, text, COLOR_GREEN), state
        return VisualDirective(DisplayMode.BUFF_COUNTDOWN, "", COLOR_GREEN), timers.cleared(state)

    if (facts.is_in_combat or settings.show_outside_combat) and timers.bash_window_open(state):
        return VisualDirective(DisplayMode.BASH, BASH_TEXT, COLOR_WHITE), timers.cleared(state)

    if timers.in_post_expiry_window(state):
        state, shown = timers.advance_post_expiry(state)
        return VisualDirective(DisplayMode.POST_EXPIRY, timers.format_post_expiry(shown), COLOR_RED), state

    return HIDDEN, timers.cleared(state)

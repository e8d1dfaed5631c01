"""Celebration decisions for flexstreak.

Given today's evaluation plus streak/history context, decide whether a
celebration fires and which trigger explains it. Rules are checked in a
fixed priority order and the first match wins:

1. first_completion   at least minimum success with no earlier success on record
2. comeback           at least minimum success after a quiet stretch of 7 entries
3. streak_milestone   full success on a milestone streak length
4. weekly_goal        streak is a positive multiple of 7
5. monthly_goal       streak is a positive multiple of 30
6. consistency_boost  partial success while on a streak of 3+
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Sequence

from flexstreak.models import (
    Cadence,
    CelebrationDecision,
    CelebrationMoment,
    CelebrationTrigger,
    SuccessEvaluation,
)

STREAK_MILESTONES = frozenset({3, 7, 14, 21, 30, 60, 100})
COMEBACK_WINDOW = 7

NO_CELEBRATION = CelebrationDecision()


def decide_celebration(
    evaluation: SuccessEvaluation,
    current_streak: int,
    is_first_ever: bool,
    is_comeback: bool,
) -> CelebrationDecision:
    """Pick the single trigger (if any) for today's completion.

    current_streak already includes today.
    """
    trigger: CelebrationTrigger | None = None

    if is_first_ever and evaluation.is_any_success:
        trigger = CelebrationTrigger.FIRST_COMPLETION
    elif is_comeback and evaluation.is_any_success:
        trigger = CelebrationTrigger.COMEBACK
    elif evaluation.is_full_success and current_streak in STREAK_MILESTONES:
        trigger = CelebrationTrigger.STREAK_MILESTONE
    elif current_streak >= 7 and evaluation.counts_for_streak and current_streak % 7 == 0:
        trigger = CelebrationTrigger.WEEKLY_GOAL
    elif current_streak >= 30 and evaluation.counts_for_streak and current_streak % 30 == 0:
        trigger = CelebrationTrigger.MONTHLY_GOAL
    elif evaluation.is_partial_success and current_streak >= 3:
        trigger = CelebrationTrigger.CONSISTENCY_BOOST

    if trigger is None:
        return NO_CELEBRATION
    return CelebrationDecision(should_celebrate=True, trigger=trigger)


def celebration_context(
    history: Sequence[SuccessEvaluation],
    today: SuccessEvaluation,
) -> tuple[int, bool, bool]:
    """Derive (current_streak, is_first_ever, is_comeback) from prior evaluations.

    history is ordered most-recent-first and excludes today's entry.
    """
    is_first_ever = not any(ev.is_any_success for ev in history)

    recent = history[:COMEBACK_WINDOW]
    older = history[COMEBACK_WINDOW:]
    is_comeback = not any(ev.is_any_success for ev in recent) and any(ev.is_any_success for ev in older)

    streak = 0
    for ev in history:
        if not ev.counts_for_streak:
            break
        streak += 1
    if today.counts_for_streak:
        streak += 1

    return streak, is_first_ever, is_comeback


# ── Celebration copy ──────────────────────────────────────────


CELEBRATION_TITLES: Mapping[CelebrationTrigger, str] = MappingProxyType({
    CelebrationTrigger.FIRST_COMPLETION: "First Success!",
    CelebrationTrigger.STREAK_MILESTONE: "Streak Achievement!",
    CelebrationTrigger.WEEKLY_GOAL: "Weekly Champion!",
    CelebrationTrigger.MONTHLY_GOAL: "Monthly Hero!",
    CelebrationTrigger.COMEBACK: "Welcome Back!",
    CelebrationTrigger.CONSISTENCY_BOOST: "Keep Going!",
})

CELEBRATION_MESSAGES: Mapping[CelebrationTrigger, str] = MappingProxyType({
    CelebrationTrigger.FIRST_COMPLETION: (
        'You completed "{name}" for the first time! Every journey starts with a single step.'
    ),
    CelebrationTrigger.STREAK_MILESTONE: (
        '{streak} in a row with "{name}"! You\'re building powerful habits.'
    ),
    CelebrationTrigger.WEEKLY_GOAL: (
        'You\'ve hit your weekly target for "{name}". Consistency is everything!'
    ),
    CelebrationTrigger.MONTHLY_GOAL: (
        'Amazing! You\'ve achieved your monthly goal for "{name}".'
    ),
    CelebrationTrigger.COMEBACK: (
        'Great to see you back with "{name}". Progress is about persistence, not perfection.'
    ),
    CelebrationTrigger.CONSISTENCY_BOOST: (
        'You\'re showing great consistency with "{name}". Small steps lead to big results!'
    ),
})

CELEBRATION_TYPES: Mapping[CelebrationTrigger, str] = MappingProxyType({
    CelebrationTrigger.FIRST_COMPLETION: "confetti",
    CelebrationTrigger.STREAK_MILESTONE: "sparkles",
    CelebrationTrigger.WEEKLY_GOAL: "badges",
    CelebrationTrigger.MONTHLY_GOAL: "confetti",
    CelebrationTrigger.COMEBACK: "gentle",
    CelebrationTrigger.CONSISTENCY_BOOST: "gentle",
})


_PERIOD_UNITS = {
    Cadence.DAILY: "day",
    Cadence.WEEKLY: "week",
    Cadence.MONTHLY: "month",
}


def _streak_label(streak: int, cadence: Cadence) -> str:
    unit = _PERIOD_UNITS[cadence]
    return f"{streak} {unit}" if streak == 1 else f"{streak} {unit}s"


def build_celebration_moment(
    decision: CelebrationDecision,
    entity_name: str,
    streak: int = 0,
    entity_id: str = "",
    entity_type: str = "habit",
    cadence: Cadence = Cadence.DAILY,
) -> CelebrationMoment | None:
    """Attach title/message/type copy to a positive decision."""
    if not decision.should_celebrate or decision.trigger is None:
        return None
    trigger = decision.trigger
    milestone = None
    if trigger is CelebrationTrigger.STREAK_MILESTONE:
        milestone = f"{streak} {_PERIOD_UNITS[cadence]} streak"
    return CelebrationMoment(
        trigger=trigger,
        title=CELEBRATION_TITLES[trigger],
        message=CELEBRATION_MESSAGES[trigger].format(name=entity_name, streak=_streak_label(streak, cadence)),
        celebration_type=CELEBRATION_TYPES[trigger],
        milestone=milestone,
        entity_id=entity_id,
        entity_type=entity_type,
    )

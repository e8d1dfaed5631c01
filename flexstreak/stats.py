"""Per-trackable statistics and celebration checks.

Combines the evaluator, streak calculator, rate aggregator and momentum
scorer over one trackable's completion history. Pure: callers load the
definition and records and hand them in.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Iterable

from flexstreak.celebrations import build_celebration_moment, celebration_context, decide_celebration
from flexstreak.criteria import evaluate
from flexstreak.models import (
    CelebrationDecision,
    CelebrationMoment,
    CompletionRecord,
    SuccessEvaluation,
    TrackableDefinition,
)
from flexstreak.momentum import momentum
from flexstreak.rates import aggregate_rate, success_distribution
from flexstreak.streaks import RECENT_ENTRIES_LIMIT, compute_streak

HISTORY_WINDOW = 30


def _sorted_newest_first(completions: Iterable[CompletionRecord]) -> list[CompletionRecord]:
    by_date = {c.date: c for c in completions}
    return sorted(by_date.values(), key=lambda c: c.date, reverse=True)


def evaluate_record(definition: TrackableDefinition, record: CompletionRecord) -> SuccessEvaluation:
    return evaluate(record.actual_count, definition.target_count, definition.success_criteria)


def trackable_stats(
    definition: TrackableDefinition,
    completions: Iterable[CompletionRecord],
    today: date | None = None,
) -> dict[str, Any]:
    """Streaks, rates, momentum and tier distribution for one trackable."""
    records = _sorted_newest_first(completions)
    streak = compute_streak(definition, records, today=today)

    evaluations = [evaluate_record(definition, r) for r in records]
    rates = aggregate_rate(
        (r.actual_count, definition.target_count, definition.success_criteria) for r in records
    )
    window = evaluations[:RECENT_ENTRIES_LIMIT][::-1]  # oldest -> newest

    return {
        "trackableId": definition.id,
        **streak.to_dict(),
        "rates": rates.to_dict(),
        "momentum": momentum(window),
        "successDistribution": success_distribution(evaluations),
    }


def check_celebration(
    definition: TrackableDefinition,
    completions: Iterable[CompletionRecord],
    actual_count: int,
    today: date | None = None,
) -> tuple[SuccessEvaluation, CelebrationDecision, CelebrationMoment | None]:
    """Evaluate a new count for today and decide whether to celebrate it.

    Prior records dated today are ignored so re-logging a day does not count
    it twice.
    """
    if today is None:
        today = date.today()
    evaluation = evaluate(actual_count, definition.target_count, definition.success_criteria)

    prior = [r for r in _sorted_newest_first(completions) if r.date < today][:HISTORY_WINDOW]
    history = [evaluate_record(definition, r) for r in prior]
    streak, is_first_ever, is_comeback = celebration_context(history, evaluation)

    decision = decide_celebration(evaluation, streak, is_first_ever, is_comeback)
    moment = build_celebration_moment(
        decision,
        entity_name=definition.name or definition.id,
        streak=streak,
        entity_id=definition.id,
        cadence=definition.cadence,
    )
    return evaluation, decision, moment

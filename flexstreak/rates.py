"""Completion-rate aggregation with partial credit."""

from __future__ import annotations

from typing import Any, Iterable, Sequence

from flexstreak.criteria import evaluate
from flexstreak.models import CompletionRateSummary, SuccessEvaluation, SuccessTier
from flexstreak.rounding import round_percent

TIER_CREDIT = {
    SuccessTier.FULL: 1.0,
    SuccessTier.PARTIAL: 0.7,
    SuccessTier.MINIMUM: 0.4,
    SuccessTier.NONE: 0.0,
}


def _evaluate_entry(entry: Sequence[Any]) -> SuccessEvaluation:
    actual, target = entry[0], entry[1]
    criteria = entry[2] if len(entry) > 2 else None
    return evaluate(actual, target, criteria)


def aggregate_rate(
    entries: Iterable[Sequence[Any]],
    include_partial: bool = True,
) -> CompletionRateSummary:
    """Aggregate (actual_count, target_count[, criteria]) tuples into completion rates.

    Full successes earn 1.0 credit; with include_partial, partial earns 0.7
    and minimum 0.4 towards the flexible rate.
    """
    evaluations = [_evaluate_entry(e) for e in entries]
    if not evaluations:
        return CompletionRateSummary()

    full = 0
    partial = 0
    weighted = 0.0
    for ev in evaluations:
        tier = ev.tier
        if tier is SuccessTier.FULL:
            full += 1
            weighted += TIER_CREDIT[tier]
        elif tier is not SuccessTier.NONE:
            partial += 1
            if include_partial:
                weighted += TIER_CREDIT[tier]

    n = len(evaluations)
    return CompletionRateSummary(
        full_completion_rate=round_percent(full / n * 100),
        flexible_completion_rate=round_percent(weighted / n * 100),
        total_completions=full,
        partial_completions=partial,
    )


def success_distribution(evaluations: Iterable[SuccessEvaluation]) -> dict[str, int]:
    """Count evaluations per success tier."""
    counts = {tier.value: 0 for tier in SuccessTier}
    for ev in evaluations:
        counts[ev.tier.value] += 1
    return counts

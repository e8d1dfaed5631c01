"""Recency-weighted momentum score (0-100)."""

from __future__ import annotations

from typing import Sequence

from flexstreak.models import SuccessEvaluation, SuccessTier
from flexstreak.rounding import round_percent

TIER_SCORES = {
    SuccessTier.FULL: 100,
    SuccessTier.PARTIAL: 70,
    SuccessTier.MINIMUM: 40,
    SuccessTier.NONE: 0,
}

DECAY = 0.9


def momentum(evaluations: Sequence[SuccessEvaluation]) -> int:
    """Score a window of evaluations ordered oldest -> newest.

    The newest entry has weight 1; each step back multiplies the weight by 0.9.
    """
    n = len(evaluations)
    if n == 0:
        return 0
    weighted_sum = 0.0
    weight_sum = 0.0
    for i, ev in enumerate(evaluations):
        weight = DECAY ** (n - 1 - i)
        weighted_sum += TIER_SCORES[ev.tier] * weight
        weight_sum += weight
    return round_percent(weighted_sum / weight_sum)

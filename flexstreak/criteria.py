"""Success criteria parsing and evaluation for flexstreak.

A completion is classified into one tier (full / partial / minimum / none)
according to the trackable's criteria variant:

- exact: full when the target is met, nothing else counts.
- minimum: anything from the minimum count up to the target is partial.
- flexible: >=70% of target is partial, the minimum count up to that is minimum.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import yaml

from flexstreak.models import (
    ExactCriteria,
    FlexibleCriteria,
    MinimumCriteria,
    SuccessCriteria,
    SuccessEvaluation,
)
from flexstreak.rounding import round_percent

logger = logging.getLogger(__name__)

DEFAULT_CRITERIA = ExactCriteria()

_CRITERIA_TYPES = {
    "exact": ExactCriteria,
    "minimum": MinimumCriteria,
    "flexible": FlexibleCriteria,
}


# ── Parsing ───────────────────────────────────────────────────


def _load_document(payload: str) -> Any:
    text = payload.strip()
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        pass
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError:
        return None


def parse_success_criteria(payload: Any) -> SuccessCriteria | None:
    """Parse a stored criteria document into a criteria variant.

    Accepts a dict, a JSON/YAML string, an existing variant or None.
    Anything malformed returns None so the caller falls back to exact criteria.
    """
    if payload is None:
        return None
    if isinstance(payload, (ExactCriteria, MinimumCriteria, FlexibleCriteria)):
        return payload
    if isinstance(payload, str):
        payload = _load_document(payload)
    if not isinstance(payload, dict):
        logger.debug("Ignoring success criteria payload of type %s", type(payload).__name__)
        return None

    kind = payload.get("criteria", payload.get("kind"))
    cls = _CRITERIA_TYPES.get(str(kind).strip().lower()) if kind is not None else None
    if cls is None:
        logger.debug("Unknown success criteria kind: %r", kind)
        return None

    allow = payload.get("allowPartialStreaks", payload.get("allow_partial_streaks", False))
    if not isinstance(allow, bool):
        logger.debug("allowPartialStreaks must be boolean, got %r", allow)
        return None

    if cls is ExactCriteria:
        return ExactCriteria(allow_partial_streaks=allow)

    minimum = payload.get("minimumCount", payload.get("minimum_count"))
    if minimum is not None:
        if isinstance(minimum, bool) or not isinstance(minimum, int) or minimum < 0:
            logger.debug("minimumCount must be a non-negative integer, got %r", minimum)
            return None
        # 0 means "derive from target"
        minimum = minimum or None
    return cls(minimum_count=minimum, allow_partial_streaks=allow)


# ── Evaluation ────────────────────────────────────────────────


def _percentage(actual_count: float, target_count: float) -> int:
    return round_percent(min(actual_count / target_count * 100, 100))


def evaluate(
    actual_count: float,
    target_count: float,
    criteria: SuccessCriteria | dict[str, Any] | str | None = None,
) -> SuccessEvaluation:
    """Classify one completion against its target.

    Zero or negative counts and targets yield an all-false evaluation at 0%.
    """
    if criteria is None or isinstance(criteria, (dict, str)):
        criteria = parse_success_criteria(criteria) or DEFAULT_CRITERIA

    if target_count <= 0 or actual_count <= 0:
        return SuccessEvaluation()

    percentage = _percentage(actual_count, target_count)
    full = actual_count >= target_count
    partial = False
    minimum_tier = False

    if isinstance(criteria, MinimumCriteria):
        minimum = criteria.minimum_count or max(1, int(target_count) // 2)
        partial = minimum <= actual_count < target_count
    elif isinstance(criteria, FlexibleCriteria):
        minimum = criteria.minimum_count or max(1, int(target_count) * 3 // 10)
        partial_threshold = int(target_count) * 7 // 10
        partial = partial_threshold <= actual_count < target_count
        minimum_tier = minimum <= actual_count < partial_threshold

    counts = full or (criteria.allow_partial_streaks and (partial or minimum_tier))
    return SuccessEvaluation(
        is_full_success=full,
        is_partial_success=partial,
        is_minimum_success=minimum_tier,
        counts_for_streak=counts,
        success_percentage=percentage,
    )


def evaluate_task_success(is_completed: bool, partial_completion: float | None = None) -> SuccessEvaluation:
    """Evaluate a one-off task: done, or a 0-100 partial completion percentage."""
    if is_completed:
        return SuccessEvaluation(
            is_full_success=True,
            counts_for_streak=True,
            success_percentage=100,
        )
    if not partial_completion or partial_completion <= 0:
        return SuccessEvaluation()

    pct = min(partial_completion, 100)
    partial = pct >= 70
    minimum_tier = 30 <= pct < 70
    return SuccessEvaluation(
        is_partial_success=partial,
        is_minimum_success=minimum_tier,
        counts_for_streak=partial or minimum_tier,
        success_percentage=round_percent(pct),
    )

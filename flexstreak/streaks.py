"""Cadence-aware streak calculation for flexstreak.

Walks backward from today in cadence-sized steps (day, week, calendar
month) down to the trackable's start date. Each step is either met
(count >= target) or missed. The current streak is alive only while every
step since today has been met; the first miss kills it for good, while the
longest streak keeps being tracked across the rest of the walk.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Iterable, Iterator

from dateutil.relativedelta import relativedelta

from flexstreak.models import (
    Cadence,
    CompletionRecord,
    RecentEntry,
    StreakState,
    TrackableDefinition,
)
from flexstreak.rounding import round_half_up

RECENT_ENTRIES_LIMIT = 30

# Approximate period lengths for the expected-occurrence denominator
_PERIOD_DAYS = {
    Cadence.WEEKLY: 7,
    Cadence.MONTHLY: 30,
}


def walk_back(cadence: Cadence, today: date, start_date: date) -> Iterator[date]:
    """Yield today, then each earlier cadence step, stopping before start_date.

    Monthly steps are taken as whole months from today (clamped to month end),
    so Mar 31 walks to Feb 28/29, Jan 31, Dec 31.
    """
    step = 0
    while True:
        if cadence is Cadence.MONTHLY:
            current = today - relativedelta(months=step)
        elif cadence is Cadence.WEEKLY:
            current = today - timedelta(weeks=step)
        else:
            current = today - timedelta(days=step)
        if current < start_date:
            return
        yield current
        step += 1


def expected_occurrences(cadence: Cadence, start_date: date, today: date) -> int:
    """Number of periods expected between start_date and today, inclusive."""
    days_since_start = (today - start_date).days + 1
    period = _PERIOD_DAYS.get(cadence)
    if period is None:
        return days_since_start
    return days_since_start // period + 1


def _latest_by_date(completions: Iterable[CompletionRecord | dict[str, Any]]) -> dict[date, CompletionRecord]:
    by_date: dict[date, CompletionRecord] = {}
    for rec in completions:
        if not isinstance(rec, CompletionRecord):
            rec = CompletionRecord.from_dict(rec)
        by_date[rec.date] = rec  # last write wins
    return by_date


def compute_streak(
    definition: TrackableDefinition,
    completions: Iterable[CompletionRecord | dict[str, Any]],
    today: date | None = None,
) -> StreakState:
    """Compute current/longest streaks and completion rate for one trackable.

    The success criteria are not applied here: a period is met only when its
    recorded count reaches the target.
    """
    if today is None:
        today = date.today()
    target = definition.target_count

    by_date = _latest_by_date(completions)
    counts = {d.isoformat(): rec.actual_count for d, rec in by_date.items()}

    def met(count: int) -> bool:
        return target > 0 and count >= target

    current_streak = 0
    longest_streak = 0
    temp_streak = 0
    still_contiguous = True

    for day in walk_back(definition.cadence, today, definition.start_date):
        if met(counts.get(day.isoformat(), 0)):
            temp_streak += 1
            if still_contiguous:
                current_streak += 1
        else:
            still_contiguous = False
            longest_streak = max(longest_streak, temp_streak)
            temp_streak = 0

    longest_streak = max(longest_streak, temp_streak)

    total_completions = sum(1 for count in counts.values() if met(count))

    expected = expected_occurrences(definition.cadence, definition.start_date, today)
    completion_rate = round_half_up(total_completions / expected * 100, 2) if expected > 0 else 0.0

    recent = sorted(by_date.values(), key=lambda r: r.date, reverse=True)[:RECENT_ENTRIES_LIMIT]
    recent_entries = [
        RecentEntry(date=r.date, actual_count=r.actual_count, completed=met(r.actual_count))
        for r in recent
    ]

    return StreakState(
        current_streak=current_streak,
        longest_streak=longest_streak,
        total_completions=total_completions,
        completion_rate=completion_rate,
        recent_entries=recent_entries,
    )

"""Typed dataclasses for the flexstreak data model.

All models use from_dict/to_dict for JSON/YAML serialization.
camelCase in JSON is mapped to snake_case in Python.
Unknown keys are ignored; missing keys use defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Union


def parse_date(value: Any) -> date | None:
    """Coerce a date, datetime or ISO string ('2026-02-10' or '2026-02-10T..') to a date."""
    if isinstance(value, date):
        # datetime is a subclass of date
        return value if type(value) is date else value.date()
    if isinstance(value, str) and value.strip():
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


# ── Enums ─────────────────────────────────────────────────────


class Cadence(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @classmethod
    def parse(cls, value: Any) -> Cadence:
        """Unknown or missing cadences fall back to daily."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.DAILY


class SuccessTier(str, Enum):
    FULL = "full"
    PARTIAL = "partial"
    MINIMUM = "minimum"
    NONE = "none"


class CelebrationTrigger(str, Enum):
    FIRST_COMPLETION = "first_completion"
    COMEBACK = "comeback"
    STREAK_MILESTONE = "streak_milestone"
    WEEKLY_GOAL = "weekly_goal"
    MONTHLY_GOAL = "monthly_goal"
    CONSISTENCY_BOOST = "consistency_boost"


# ── Success criteria (one frozen dataclass per variant) ──────


@dataclass(frozen=True)
class ExactCriteria:
    """Must meet or exceed the target; no partial tiers."""

    allow_partial_streaks: bool = False
    kind: str = field(default="exact", init=False)

    def to_dict(self) -> dict[str, Any]:
        return {"criteria": self.kind, "allowPartialStreaks": self.allow_partial_streaks}


@dataclass(frozen=True)
class MinimumCriteria:
    """A count between the minimum and the target is a partial success."""

    minimum_count: int | None = None
    allow_partial_streaks: bool = False
    kind: str = field(default="minimum", init=False)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"criteria": self.kind, "allowPartialStreaks": self.allow_partial_streaks}
        if self.minimum_count is not None:
            d["minimumCount"] = self.minimum_count
        return d


@dataclass(frozen=True)
class FlexibleCriteria:
    """Three tiers: full, partial (>=70% of target) and minimum."""

    minimum_count: int | None = None
    allow_partial_streaks: bool = False
    kind: str = field(default="flexible", init=False)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"criteria": self.kind, "allowPartialStreaks": self.allow_partial_streaks}
        if self.minimum_count is not None:
            d["minimumCount"] = self.minimum_count
        return d


SuccessCriteria = Union[ExactCriteria, MinimumCriteria, FlexibleCriteria]


# ── Trackables & completions ──────────────────────────────────


@dataclass(frozen=True)
class TrackableDefinition:
    id: str = ""
    name: str = ""
    target_count: int = 1
    cadence: Cadence = Cadence.DAILY
    start_date: date = field(default_factory=date.today)
    success_criteria: SuccessCriteria | None = None
    # Raw criteria payload as stored; kept so malformed documents survive a round trip
    criteria_payload: Any = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> TrackableDefinition:
        from flexstreak.criteria import parse_success_criteria

        if not d or not isinstance(d, dict):
            return cls()
        payload = d.get("successCriteria", d.get("success_criteria"))
        try:
            target = int(d.get("targetCount", d.get("target_count", 1)))
        except (TypeError, ValueError):
            target = 1
        return cls(
            id=str(d.get("id", "")),
            name=str(d.get("name", "")),
            target_count=target,
            cadence=Cadence.parse(d.get("cadence", d.get("frequency", "daily"))),
            start_date=parse_date(d.get("startDate", d.get("start_date"))) or date.today(),
            success_criteria=parse_success_criteria(payload),
            criteria_payload=payload,
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "targetCount": self.target_count,
            "cadence": self.cadence.value,
            "startDate": self.start_date.isoformat(),
        }
        if self.success_criteria is not None:
            d["successCriteria"] = self.success_criteria.to_dict()
        elif self.criteria_payload is not None:
            d["successCriteria"] = self.criteria_payload
        return d


@dataclass
class CompletionRecord:
    date: date
    actual_count: int = 0
    notes: str = ""

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> CompletionRecord:
        try:
            count = int(d.get("actualCount", d.get("count", 0)) or 0)
        except (TypeError, ValueError):
            count = 0
        return cls(
            date=parse_date(d.get("date")) or date.min,
            actual_count=count,
            notes=str(d.get("notes", "") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"date": self.date.isoformat(), "actualCount": self.actual_count}
        if self.notes:
            d["notes"] = self.notes
        return d


# ── Derived results ───────────────────────────────────────────


@dataclass(frozen=True)
class SuccessEvaluation:
    is_full_success: bool = False
    is_partial_success: bool = False
    is_minimum_success: bool = False
    counts_for_streak: bool = False
    success_percentage: int = 0

    @property
    def tier(self) -> SuccessTier:
        if self.is_full_success:
            return SuccessTier.FULL
        if self.is_partial_success:
            return SuccessTier.PARTIAL
        if self.is_minimum_success:
            return SuccessTier.MINIMUM
        return SuccessTier.NONE

    @property
    def is_any_success(self) -> bool:
        """Reached at least the minimum tier."""
        return self.tier is not SuccessTier.NONE

    def to_dict(self) -> dict[str, Any]:
        return {
            "isFullSuccess": self.is_full_success,
            "isPartialSuccess": self.is_partial_success,
            "isMinimumSuccess": self.is_minimum_success,
            "countsForStreak": self.counts_for_streak,
            "successPercentage": self.success_percentage,
            "tier": self.tier.value,
        }


@dataclass(frozen=True)
class CompletionRateSummary:
    full_completion_rate: int = 0
    flexible_completion_rate: int = 0
    total_completions: int = 0
    partial_completions: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "fullCompletionRate": self.full_completion_rate,
            "flexibleCompletionRate": self.flexible_completion_rate,
            "totalCompletions": self.total_completions,
            "partialCompletions": self.partial_completions,
        }


@dataclass(frozen=True)
class RecentEntry:
    date: date
    actual_count: int
    completed: bool

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.date.isoformat(), "actualCount": self.actual_count, "completed": self.completed}


@dataclass
class StreakState:
    current_streak: int = 0
    longest_streak: int = 0
    total_completions: int = 0
    completion_rate: float = 0.0
    recent_entries: list[RecentEntry] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "currentStreak": self.current_streak,
            "longestStreak": self.longest_streak,
            "totalCompletions": self.total_completions,
            "completionRate": self.completion_rate,
            "recentEntries": [e.to_dict() for e in self.recent_entries],
        }


@dataclass(frozen=True)
class CelebrationDecision:
    should_celebrate: bool = False
    trigger: CelebrationTrigger | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "shouldCelebrate": self.should_celebrate,
            "trigger": self.trigger.value if self.trigger else None,
        }


@dataclass(frozen=True)
class CelebrationMoment:
    trigger: CelebrationTrigger
    title: str
    message: str
    celebration_type: str  # confetti, sparkles, badges, gentle
    milestone: str | None = None
    entity_id: str = ""
    entity_type: str = "habit"

    def to_dict(self) -> dict[str, Any]:
        return {
            "trigger": self.trigger.value,
            "title": self.title,
            "message": self.message,
            "celebrationType": self.celebration_type,
            "milestone": self.milestone,
            "entityId": self.entity_id,
            "entityType": self.entity_type,
        }

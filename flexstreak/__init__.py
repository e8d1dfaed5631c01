"""flexstreak — flexible success & streak analytics for habit tracking.

Public API re-exports for convenient imports:
    from flexstreak import evaluate, compute_streak, decide_celebration, ...
"""

# Models
from flexstreak.models import (
    Cadence,
    SuccessTier,
    CelebrationTrigger,
    ExactCriteria,
    MinimumCriteria,
    FlexibleCriteria,
    SuccessCriteria,
    TrackableDefinition,
    CompletionRecord,
    SuccessEvaluation,
    CompletionRateSummary,
    RecentEntry,
    StreakState,
    CelebrationDecision,
    CelebrationMoment,
)

# Engine
from flexstreak.criteria import (
    evaluate,
    evaluate_task_success,
    parse_success_criteria,
)
from flexstreak.rates import aggregate_rate, success_distribution
from flexstreak.streaks import compute_streak
from flexstreak.celebrations import (
    decide_celebration,
    celebration_context,
    build_celebration_moment,
)
from flexstreak.momentum import momentum

# Composition
from flexstreak.stats import trackable_stats, check_celebration

"""
Scoring engine: weighted scores, quadrant and session totals, grade, profile

Submodules that work on stored session rows (record, ranking, dashboard)
are imported directly from their modules.
"""

from kraljic_sim.scoring.calculator import (
    aggregate_quadrant,
    compute_weighted,
    determine_grade,
    optimal_score,
    score_session,
)
from kraljic_sim.scoring.models import (
    DashboardResult,
    DimensionProfile,
    EventResult,
    Grade,
    QuadrantResult,
    RankSummary,
    RawScore,
    SessionScore,
    WeightedScore,
)
from kraljic_sim.scoring.profile import build_profile

__all__ = [
    "DashboardResult",
    "DimensionProfile",
    "EventResult",
    "Grade",
    "QuadrantResult",
    "RankSummary",
    "RawScore",
    "SessionScore",
    "WeightedScore",
    "aggregate_quadrant",
    "build_profile",
    "compute_weighted",
    "determine_grade",
    "optimal_score",
    "score_session",
]

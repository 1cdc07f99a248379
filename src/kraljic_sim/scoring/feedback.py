"""
Learning Feedback - what each quadrant result says about the participant

Shown next to the quadrant cards on the results page: which steps went well,
how much of the quadrant's primary dimension was captured, and how close the
participant came to the best path the scenario allows.
"""

from kraljic_sim.kernel.scoring_policy import ScoringPolicy, default_scoring_policy
from kraljic_sim.quadrants.registry import get_quadrant
from kraljic_sim.scoring.models import FeedbackLevel, QuadrantFeedback, QuadrantResult, round_half_up


def primary_level(percent: float, policy: ScoringPolicy = default_scoring_policy) -> FeedbackLevel:
    if percent >= policy.primary_dimension_strong_percent:
        return FeedbackLevel.STRONG
    if percent >= policy.primary_dimension_moderate_percent:
        return FeedbackLevel.MODERATE
    return FeedbackLevel.WEAK


def normalize_to_achievable(total: float, achievable_max: float) -> int:
    """Total as a whole percentage of the best reachable total, capped at 100"""
    if achievable_max <= 0:
        return 0
    return min(100, int(round_half_up(total / achievable_max * 100, 0)))


def build_quadrant_feedback(
    result: QuadrantResult,
    achievable_max: float | None = None,
    policy: ScoringPolicy = default_scoring_policy,
) -> QuadrantFeedback:
    """
    Learning feedback for one quadrant

    A step is "high" when its weighted value reaches step_strength_ratio of
    the maximum raw value (3.5 of 5 by default). The primary dimension is the
    one the quadrant weights most heavily.

    Args:
        result: Aggregated quadrant result
        achievable_max: Best total the scenario content allows, if known
        policy: Scoring policy

    Returns:
        QuadrantFeedback
    """
    high_steps: list[int] = []
    low_steps: list[int] = []
    for index, score in enumerate(result.step_scores):
        if score.weighted / policy.max_raw_score >= policy.step_strength_ratio:
            high_steps.append(index)
        else:
            low_steps.append(index)

    primary = get_quadrant(result.quadrant).weights.primary_dimension()
    primary_total = sum(score.raw.get(primary) for score in result.step_scores)
    primary_max = policy.steps_per_quadrant * policy.max_raw_score
    primary_percent = round_half_up(100 * primary_total / primary_max, 1) if primary_max else 0.0

    achievable_percent = None
    if achievable_max is not None:
        achievable_percent = normalize_to_achievable(result.total_weighted, achievable_max)

    return QuadrantFeedback(
        quadrant=result.quadrant,
        high_steps=high_steps,
        low_steps=low_steps,
        primary_dimension=primary,
        primary_total=primary_total,
        primary_max=primary_max,
        primary_percent=primary_percent,
        level=primary_level(primary_percent, policy),
        achievable_max=achievable_max,
        achievable_percent=achievable_percent,
    )

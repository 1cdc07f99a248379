"""
Score Calculator - weighted scores, quadrant totals, session totals and grade

These are pure functions over explicit inputs. They never read the store or
any global state, so the same numbers come out whether the submissions were
loaded from SQLite or from a participant's local cache.

Fun fact: Kraljic's original matrix used "profit impact" and "supply risk"
as axes - our three dimensions are the lenses a buyer uses to act on them.
"""

from collections.abc import Sequence

from kraljic_sim.kernel.errors import InvalidSubmission
from kraljic_sim.kernel.scoring_policy import ScoringPolicy, default_scoring_policy
from kraljic_sim.quadrants.models import DIMENSION_ORDER, QuadrantDefinition, QuadrantId
from kraljic_sim.quadrants.registry import get_quadrant
from kraljic_sim.scoring.models import (
    Grade,
    QuadrantResult,
    RawScore,
    SessionScore,
    WeightedScore,
    round_half_up,
)

WEIGHTED_PRECISION = 4
TOTAL_PRECISION = 2
PERCENT_PRECISION = 1


def _resolve(quadrant: QuadrantId | QuadrantDefinition | str) -> QuadrantDefinition:
    if isinstance(quadrant, QuadrantDefinition):
        return quadrant
    return get_quadrant(quadrant)


def compute_weighted(
    raw: RawScore,
    quadrant: QuadrantId | QuadrantDefinition | str,
    policy: ScoringPolicy = default_scoring_policy,
) -> WeightedScore:
    """
    Collapse a raw (ce, ss, sv) triple into one weighted scalar

    Formula: weighted = ce*w_ce + ss*w_ss + sv*w_sv

    Because the weights sum to 1, the result always lies between the smallest
    and the largest raw value.

    Args:
        raw: Raw score triple
        quadrant: Quadrant whose weights apply
        policy: Scoring policy (raw score range)

    Returns:
        WeightedScore carrying the raw triple and the weighted value

    Raises:
        RawScoreOutOfRange: If any raw value is outside the policy range

    Example:
        >>> compute_weighted(RawScore(ce=2, ss=4, sv=3), QuadrantId.BOTTLENECK).weighted
        3.3
    """
    definition = _resolve(quadrant)
    weighted = 0.0
    for dimension in DIMENSION_ORDER:
        value = raw.get(dimension)
        policy.check_raw_value(dimension.value, value)
        weighted += value * definition.weights.get(dimension)

    return WeightedScore(raw=raw, weighted=round_half_up(weighted, WEIGHTED_PRECISION))


def optimal_score(
    quadrant: QuadrantId | QuadrantDefinition | str,
    policy: ScoringPolicy = default_scoring_policy,
) -> float:
    """
    Theoretical best quadrant total: every step at the maximum raw value

    Computed from the weights rather than assumed, so it stays correct if the
    weight semantics ever change. With weights summing to 1, four steps and a
    maximum raw value of 5 it is 20 for every quadrant.
    """
    definition = _resolve(quadrant)
    per_step = sum(
        policy.max_raw_score * definition.weights.get(dimension)
        for dimension in DIMENSION_ORDER
    )
    return round_half_up(policy.steps_per_quadrant * per_step, WEIGHTED_PRECISION)


def aggregate_quadrant(
    step_scores: Sequence[WeightedScore],
    quadrant: QuadrantId | QuadrantDefinition | str,
    choice_ids: Sequence[str] | None = None,
    policy: ScoringPolicy = default_scoring_policy,
) -> QuadrantResult:
    """
    Sum a quadrant's step scores and compare against the optimal total

    Fewer steps than the policy's steps_per_quadrant is a partial playthrough
    and is scored over whatever exists; an empty quadrant scores 0 and 0%.

    Args:
        step_scores: Weighted scores ordered by step index
        quadrant: Quadrant being aggregated
        choice_ids: Chosen option ids, parallel to step_scores
        policy: Scoring policy

    Returns:
        QuadrantResult with total (2dp) and percent of optimal (1dp)

    Raises:
        InvalidSubmission: If there are more step scores than steps, or
            choice_ids does not line up with step_scores
    """
    definition = _resolve(quadrant)
    scores = list(step_scores)
    choices = list(choice_ids) if choice_ids is not None else []

    if len(scores) > policy.steps_per_quadrant:
        raise InvalidSubmission(
            "step_scores",
            f"{len(scores)} scores for {definition.quadrant_id.value}, "
            f"at most {policy.steps_per_quadrant} steps exist",
        )
    if choice_ids is not None and len(choices) != len(scores):
        raise InvalidSubmission(
            "choice_ids", f"expected {len(scores)} choice ids, got {len(choices)}"
        )

    total = round_half_up(sum(s.weighted for s in scores), TOTAL_PRECISION)
    optimal = optimal_score(definition, policy)
    percent = round_half_up(100 * total / optimal, PERCENT_PRECISION) if optimal > 0 else 0.0

    return QuadrantResult(
        quadrant=definition.quadrant_id,
        step_scores=scores,
        total_weighted=total,
        choice_ids=choices,
        optimal_score=optimal,
        percent_of_optimal=percent,
    )


def determine_grade(
    final_score: float, policy: ScoringPolicy = default_scoring_policy
) -> Grade:
    """
    Map a final score onto the canonical grade bands

    Default bands: >= 70 Excellent, >= 55 Good, >= 40 Fair, otherwise Poor.
    """
    thresholds = policy.grade_thresholds
    if final_score >= thresholds.excellent:
        return Grade.EXCELLENT
    if final_score >= thresholds.good:
        return Grade.GOOD
    if final_score >= thresholds.fair:
        return Grade.FAIR
    return Grade.POOR


def score_session(
    quadrant_results: Sequence[QuadrantResult],
    event_scores: Sequence[WeightedScore | None],
    policy: ScoringPolicy = default_scoring_policy,
) -> SessionScore:
    """
    Combine Layer 1 quadrant totals and Layer 2 event responses

    layer1 = sum of quadrant totals, layer2 = sum of event weighted values
    (an unanswered event contributes 0), final = layer1 + layer2, each rounded
    to 2 decimals.

    Args:
        quadrant_results: One result per quadrant
        event_scores: One event response score per quadrant (None if unanswered)
        policy: Scoring policy (grade bands)

    Returns:
        SessionScore with grade
    """
    layer1 = round_half_up(
        sum(result.total_weighted for result in quadrant_results), TOTAL_PRECISION
    )
    layer2 = round_half_up(
        sum(score.weighted for score in event_scores if score is not None),
        TOTAL_PRECISION,
    )
    final = round_half_up(layer1 + layer2, TOTAL_PRECISION)

    return SessionScore(
        layer1=layer1,
        layer2=layer2,
        final=final,
        grade=determine_grade(final, policy),
    )

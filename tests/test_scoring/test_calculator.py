"""
Tests for the score calculator

Covers weighted scores, quadrant aggregation, session totals and grading,
including the worked examples used in class.
"""

from itertools import product

import pydantic
import pytest

from kraljic_sim.kernel.errors import InvalidSubmission, RawScoreOutOfRange
from kraljic_sim.kernel.scoring_policy import GradeThresholds, ScoringPolicy
from kraljic_sim.quadrants.models import QuadrantId
from kraljic_sim.quadrants.registry import QUADRANT_ORDER, get_quadrant
from kraljic_sim.scoring.calculator import (
    aggregate_quadrant,
    compute_weighted,
    determine_grade,
    optimal_score,
    score_session,
)
from kraljic_sim.scoring.models import Grade, QuadrantResult, RawScore, round_half_up
from tests.helpers import score


# =============================================================================
# Weighted Score
# =============================================================================


def test_bottleneck_weighted_example() -> None:
    """2*0.20 + 4*0.50 + 3*0.30 = 3.3"""
    result = compute_weighted(RawScore(ce=2, ss=4, sv=3), QuadrantId.BOTTLENECK)

    assert result.weighted == pytest.approx(3.3)
    assert result.raw == RawScore(ce=2, ss=4, sv=3)


def test_weighted_accepts_string_quadrant() -> None:
    result = compute_weighted(RawScore(ce=5, ss=1, sv=1), "leverage")
    assert result.weighted == pytest.approx(5 * 0.5 + 0.2 + 0.3)


@pytest.mark.parametrize("quadrant", QUADRANT_ORDER)
def test_weighted_lies_between_min_and_max_raw(quadrant: QuadrantId) -> None:
    """Weights sum to 1, so the weighted value never leaves the raw range"""
    for ce, ss, sv in product(range(1, 6), repeat=3):
        weighted = compute_weighted(RawScore(ce=ce, ss=ss, sv=sv), quadrant).weighted
        assert min(ce, ss, sv) - 1e-9 <= weighted <= max(ce, ss, sv) + 1e-9


def test_weighted_is_dot_product_of_raw_and_weights() -> None:
    raw = RawScore(ce=4, ss=2, sv=5)
    for quadrant in QUADRANT_ORDER:
        w = get_quadrant(quadrant).weights
        expected = 4 * w.ce + 2 * w.ss + 5 * w.sv
        assert compute_weighted(raw, quadrant).weighted == pytest.approx(expected)


def test_raw_score_rejects_out_of_range_values() -> None:
    with pytest.raises(pydantic.ValidationError):
        RawScore(ce=0, ss=3, sv=3)

    with pytest.raises(pydantic.ValidationError):
        RawScore(ce=3, ss=6, sv=3)


def test_calculator_rejects_unvalidated_out_of_range_raw() -> None:
    raw = RawScore.model_construct(ce=3, ss=3, sv=7)

    with pytest.raises(RawScoreOutOfRange) as exc_info:
        compute_weighted(raw, QuadrantId.STRATEGIC)

    assert exc_info.value.dimension == "sv"
    assert exc_info.value.value == 7


# =============================================================================
# Quadrant Aggregation
# =============================================================================


@pytest.mark.parametrize("quadrant", QUADRANT_ORDER)
def test_optimal_score_is_twenty_for_every_quadrant(quadrant: QuadrantId) -> None:
    assert optimal_score(quadrant) == pytest.approx(20.0)


def test_optimal_score_follows_policy() -> None:
    policy = ScoringPolicy(steps_per_quadrant=3)
    assert optimal_score(QuadrantId.LEVERAGE, policy) == pytest.approx(15.0)


def test_aggregate_four_steps_example() -> None:
    """[3.3, 3.8, 3.5, 3.9] -> 14.5 of 20 = 72.5%"""
    scores = [score(3.3), score(3.8), score(3.5), score(3.9)]

    result = aggregate_quadrant(scores, QuadrantId.BOTTLENECK)

    assert result.total_weighted == 14.5
    assert result.optimal_score == pytest.approx(20.0)
    assert result.percent_of_optimal == 72.5
    assert result.step_count == 4


def test_aggregate_empty_quadrant_scores_zero() -> None:
    result = aggregate_quadrant([], QuadrantId.NONCRITICAL)

    assert result.total_weighted == 0.0
    assert result.percent_of_optimal == 0.0
    assert result.step_scores == []


def test_aggregate_partial_quadrant() -> None:
    result = aggregate_quadrant([score(4.0), score(3.0)], QuadrantId.LEVERAGE)

    assert result.total_weighted == 7.0
    assert result.percent_of_optimal == 35.0


def test_aggregate_is_idempotent() -> None:
    scores = [score(3.3), score(3.8), score(3.5)]
    first = aggregate_quadrant(scores, QuadrantId.STRATEGIC, choice_ids=["a", "b", "c"])
    second = aggregate_quadrant(scores, QuadrantId.STRATEGIC, choice_ids=["a", "b", "c"])
    assert first == second


def test_aggregate_rejects_too_many_steps() -> None:
    with pytest.raises(InvalidSubmission):
        aggregate_quadrant([score(3.0)] * 5, QuadrantId.BOTTLENECK)


def test_aggregate_rejects_misaligned_choice_ids() -> None:
    with pytest.raises(InvalidSubmission) as exc_info:
        aggregate_quadrant([score(3.0), score(4.0)], QuadrantId.BOTTLENECK, choice_ids=["only-one"])
    assert exc_info.value.field == "choice_ids"


def test_aggregate_keeps_choice_ids() -> None:
    result = aggregate_quadrant(
        [score(3.0), score(4.0)],
        QuadrantId.LEVERAGE,
        choice_ids=["leverage_step1_B", "leverage_step2_C"],
    )
    assert result.choice_ids == ["leverage_step1_B", "leverage_step2_C"]


def test_round_half_up_handles_float_noise() -> None:
    assert round_half_up(3.3 + 3.8 + 3.5 + 3.9, 2) == 14.5
    assert round_half_up(2.675, 2) == 2.68
    assert round_half_up(0.05, 1) == 0.1


# =============================================================================
# Session Score & Grade
# =============================================================================


def _quadrant_total(quadrant: QuadrantId, total: float) -> QuadrantResult:
    return QuadrantResult(
        quadrant=quadrant,
        total_weighted=total,
        optimal_score=20.0,
        percent_of_optimal=round_half_up(total * 5, 1),
    )


def test_session_score_example() -> None:
    """layer1 55.0 + layer2 12.8 = 67.8 -> Good"""
    results = [
        _quadrant_total(q, total)
        for q, total in zip(QUADRANT_ORDER, [14.5, 13.0, 15.0, 12.5])
    ]
    events = [score(3.3), score(3.0), score(4.0), score(2.5)]

    session = score_session(results, events)

    assert session.layer1 == 55.0
    assert session.layer2 == 12.8
    assert session.final == 67.8
    assert session.grade == Grade.GOOD


def test_session_score_missing_events_contribute_zero() -> None:
    results = [_quadrant_total(q, 10.0) for q in QUADRANT_ORDER]

    session = score_session(results, [score(4.0), None, None, score(3.0)])

    assert session.layer1 == 40.0
    assert session.layer2 == 7.0
    assert session.final == 47.0
    assert session.grade == Grade.FAIR


def test_session_score_with_nothing_is_poor() -> None:
    session = score_session([], [])
    assert session.final == 0.0
    assert session.grade == Grade.POOR


@pytest.mark.parametrize(
    "final,expected",
    [
        (100.0, Grade.EXCELLENT),
        (70.0, Grade.EXCELLENT),
        (69.99, Grade.GOOD),
        (55.0, Grade.GOOD),
        (54.99, Grade.FAIR),
        (40.0, Grade.FAIR),
        (39.99, Grade.POOR),
        (0.0, Grade.POOR),
    ],
)
def test_grade_bands(final: float, expected: Grade) -> None:
    assert determine_grade(final) == expected


def test_grade_is_monotone_in_final_score() -> None:
    previous = Grade.POOR
    for tenth in range(0, 1001):
        grade = determine_grade(tenth / 10)
        assert grade.rank >= previous.rank
        previous = grade


def test_grade_uses_policy_thresholds() -> None:
    policy = ScoringPolicy(grade_thresholds=GradeThresholds(excellent=90, good=80, fair=60))
    assert determine_grade(85.0, policy) == Grade.GOOD
    assert determine_grade(75.0, policy) == Grade.FAIR

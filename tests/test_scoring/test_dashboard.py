"""
Tests for dashboard assembly, learning feedback and the export payload
"""

from datetime import datetime, timezone

from kraljic_sim.content.store import StaticContentStore
from kraljic_sim.quadrants.models import Dimension, QuadrantId
from kraljic_sim.quadrants.registry import QUADRANT_ORDER
from kraljic_sim.scoring.calculator import aggregate_quadrant, compute_weighted
from kraljic_sim.scoring.dashboard import build_dashboard
from kraljic_sim.scoring.export import build_export_payload
from kraljic_sim.scoring.feedback import build_quadrant_feedback, normalize_to_achievable
from kraljic_sim.scoring.models import FeedbackLevel, Grade, RankSummary, RawScore
from tests.helpers import make_record, score


# =============================================================================
# Dashboard
# =============================================================================


def test_dashboard_totals_and_canonical_order() -> None:
    record = make_record("s-1", 4.375, event_weighted=3.0)

    dashboard = build_dashboard(record)

    assert dashboard.layer1_score == 70.0
    assert dashboard.layer2_score == 12.0
    assert dashboard.final_score == 82.0
    assert dashboard.grade == Grade.EXCELLENT
    assert [q.quadrant for q in dashboard.quadrant_results] == list(QUADRANT_ORDER)
    assert [e.quadrant for e in dashboard.event_results] == list(QUADRANT_ORDER)
    assert dashboard.quadrant(QuadrantId.LEVERAGE).percent_of_optimal == 87.5
    assert dashboard.dimension_profile.step_count == 16
    assert dashboard.rank is None
    assert dashboard.completed is False


def test_dashboard_for_session_with_nothing_answered() -> None:
    dashboard = build_dashboard(make_record("empty", None))

    assert dashboard.final_score == 0.0
    assert dashboard.grade == Grade.POOR
    assert all(q.total_weighted == 0.0 for q in dashboard.quadrant_results)
    assert all(e.score is None and e.weighted == 0.0 for e in dashboard.event_results)


def test_dashboard_carries_rank() -> None:
    rank = RankSummary(before=3, after=1, total=5)
    dashboard = build_dashboard(make_record("s-1", 4.0), rank=rank)
    assert dashboard.rank == rank


def test_dashboard_feedback_uses_content_best_path() -> None:
    dashboard = build_dashboard(make_record("s-1", 3.5), content_store=StaticContentStore())

    bottleneck = dashboard.feedback[0]
    assert bottleneck.quadrant == QuadrantId.BOTTLENECK
    assert bottleneck.achievable_max == 15.6
    # 14.0 of 15.6
    assert bottleneck.achievable_percent == 90


# =============================================================================
# Learning Feedback
# =============================================================================


def test_feedback_splits_high_and_low_steps() -> None:
    result = aggregate_quadrant(
        [score(3.3), score(3.5), score(4.1), score(2.0)], QuadrantId.BOTTLENECK
    )

    feedback = build_quadrant_feedback(result)

    assert feedback.high_steps == [1, 2]
    assert feedback.low_steps == [0, 3]
    assert feedback.achievable_percent is None


def test_feedback_primary_dimension_level() -> None:
    # Leverage weighs cost efficiency most
    steps = [
        compute_weighted(RawScore(ce=5, ss=2, sv=4), QuadrantId.LEVERAGE),
        compute_weighted(RawScore(ce=4, ss=3, sv=3), QuadrantId.LEVERAGE),
        compute_weighted(RawScore(ce=4, ss=3, sv=4), QuadrantId.LEVERAGE),
        compute_weighted(RawScore(ce=3, ss=4, sv=4), QuadrantId.LEVERAGE),
    ]

    feedback = build_quadrant_feedback(aggregate_quadrant(steps, QuadrantId.LEVERAGE))

    assert feedback.primary_dimension == Dimension.CE
    assert feedback.primary_total == 16
    assert feedback.primary_max == 20
    assert feedback.primary_percent == 80.0
    assert feedback.level == FeedbackLevel.STRONG


def test_feedback_weak_primary_dimension() -> None:
    steps = [compute_weighted(RawScore(ce=4, ss=1, sv=3), QuadrantId.BOTTLENECK)] * 4

    feedback = build_quadrant_feedback(aggregate_quadrant(steps, QuadrantId.BOTTLENECK))

    assert feedback.primary_dimension == Dimension.SS
    assert feedback.primary_percent == 20.0
    assert feedback.level == FeedbackLevel.WEAK


def test_normalize_to_achievable() -> None:
    assert normalize_to_achievable(14.5, 15.6) == 93
    assert normalize_to_achievable(15.6, 15.6) == 100
    assert normalize_to_achievable(17.0, 15.6) == 100
    assert normalize_to_achievable(0.0, 15.6) == 0
    assert normalize_to_achievable(5.0, 0.0) == 0


# =============================================================================
# Export Payload
# =============================================================================


def test_export_payload_shape() -> None:
    dashboard = build_dashboard(make_record("s-9", 4.0, participant_name="Kim"))
    submitted_at = datetime(2025, 3, 10, 10, 30, tzinfo=timezone.utc)

    payload = build_export_payload(dashboard, submitted_at)

    assert payload["sessionId"] == "s-9"
    assert payload["participantName"] == "Kim"
    assert payload["layer1Score"] == 64.0
    assert payload["grade"] == "Good"
    assert payload["profileType"] == "ce"
    assert payload["submittedAt"] == "2025-03-10T10:30:00+00:00"
    assert len(payload["quadrants"]) == 4

    bottleneck = payload["quadrants"][0]
    assert bottleneck["quadrant"] == "bottleneck"
    assert bottleneck["nameKo"] == "병목"
    assert bottleneck["totalWeighted"] == 16.0
    assert bottleneck["rawCe"] == 12
    assert bottleneck["rawSs"] == 12
    assert bottleneck["rawSv"] == 12
    assert bottleneck["choices"] == [f"bottleneck_step{n}_A" for n in range(1, 5)]

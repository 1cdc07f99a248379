"""
Dashboard Assembler - one session's stored rows to its results page

Recomputed from scratch on every request; nothing derived is ever persisted.
"""

from kraljic_sim.content.store import ContentStore
from kraljic_sim.kernel.logging import get_logger
from kraljic_sim.kernel.metrics import dashboards_served_total
from kraljic_sim.kernel.scoring_policy import ScoringPolicy, default_scoring_policy
from kraljic_sim.scoring.feedback import build_quadrant_feedback
from kraljic_sim.scoring.models import DashboardResult, RankSummary
from kraljic_sim.scoring.profile import build_profile
from kraljic_sim.scoring.record import score_record
from kraljic_sim.session.models import SessionRecord

logger = get_logger(__name__)


def build_dashboard(
    record: SessionRecord,
    rank: RankSummary | None = None,
    content_store: ContentStore | None = None,
    policy: ScoringPolicy = default_scoring_policy,
) -> DashboardResult:
    """
    Assemble the full results page for one session

    Args:
        record: The session with all of its stored rows
        rank: Rank summary, computed separately against all sessions
        content_store: When given, feedback includes the achievable best
        policy: Scoring policy

    Returns:
        DashboardResult with quadrants and events in canonical order
    """
    quadrant_results, event_results, score = score_record(record, policy)

    feedback = [
        build_quadrant_feedback(
            result,
            achievable_max=content_store.achievable_max(result.quadrant) if content_store else None,
            policy=policy,
        )
        for result in quadrant_results
    ]

    dashboard = DashboardResult(
        session_id=record.session.session_id,
        participant_name=record.session.participant_name,
        layer1_score=score.layer1,
        layer2_score=score.layer2,
        final_score=score.final,
        grade=score.grade,
        quadrant_results=quadrant_results,
        event_results=event_results,
        dimension_profile=build_profile(quadrant_results),
        rank=rank,
        completed=record.session.is_completed,
        feedback=feedback,
    )

    dashboards_served_total.labels(grade=score.grade.value).inc()
    logger.debug(
        "Dashboard built",
        session_id=dashboard.session_id,
        final_score=dashboard.final_score,
        grade=dashboard.grade.value,
    )
    return dashboard

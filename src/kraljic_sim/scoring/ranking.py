"""
Rank Calculator - where a participant stands among everyone who played

Ranks are computed twice: once on the Layer 1 score alone ("before" the
disruptive event) and once on the final score ("after"). The difference is
what the event round did to the participant's standing.

Ordering: score descending, then created_at ascending (the earlier session
wins a tie), then session_id ascending. Every qualifying session therefore
gets a distinct position.
"""

from collections.abc import Sequence

from kraljic_sim.kernel.logging import get_logger
from kraljic_sim.kernel.metrics import rank_computations_total
from kraljic_sim.kernel.scoring_policy import ScoringPolicy, default_scoring_policy
from kraljic_sim.scoring.models import LeaderboardEntry, RankSummary, SessionScore
from kraljic_sim.scoring.record import score_record
from kraljic_sim.session.models import Session, SessionRecord

logger = get_logger(__name__)


def _qualifying(records: Sequence[SessionRecord]) -> list[SessionRecord]:
    # A session with no Layer 1 submission has nothing to rank
    return [record for record in records if record.submissions]


def _score_all(
    records: Sequence[SessionRecord], policy: ScoringPolicy
) -> list[tuple[Session, SessionScore]]:
    scored = []
    for record in _qualifying(records):
        _, _, score = score_record(record, policy)
        scored.append((record.session, score))
    return scored


def _position(ordered: list[tuple[Session, SessionScore]], session_id: str) -> int:
    for index, (session, _) in enumerate(ordered):
        if session.session_id == session_id:
            return index + 1
    raise ValueError(f"Session {session_id} is not in the ranking")


def compute_rank(
    target_session_id: str,
    records: Sequence[SessionRecord],
    policy: ScoringPolicy = default_scoring_policy,
) -> RankSummary | None:
    """
    Rank one session before and after the event round

    Args:
        target_session_id: Session to rank
        records: Every session to rank against (the target included)
        policy: Scoring policy (minimum number of ranked sessions)

    Returns:
        RankSummary, or None when fewer than policy.min_ranked_sessions
        sessions qualify or the target itself has no submissions
    """
    scored = _score_all(records, policy)
    ids = {session.session_id for session, _ in scored}

    if len(scored) < policy.min_ranked_sessions or target_session_id not in ids:
        rank_computations_total.labels(outcome="omitted").inc()
        logger.debug(
            "Rank omitted",
            session_id=target_session_id,
            qualifying_sessions=len(scored),
        )
        return None

    by_layer1 = sorted(
        scored, key=lambda item: (-item[1].layer1, item[0].created_at, item[0].session_id)
    )
    by_final = sorted(
        scored, key=lambda item: (-item[1].final, item[0].created_at, item[0].session_id)
    )

    rank_computations_total.labels(outcome="ranked").inc()
    return RankSummary(
        before=_position(by_layer1, target_session_id),
        after=_position(by_final, target_session_id),
        total=len(scored),
    )


def build_leaderboard(
    records: Sequence[SessionRecord],
    policy: ScoringPolicy = default_scoring_policy,
) -> list[LeaderboardEntry]:
    """Qualifying sessions ordered by final score with the same tie-breaks as compute_rank"""
    scored = _score_all(records, policy)
    scored.sort(key=lambda item: (-item[1].final, item[0].created_at, item[0].session_id))
    return [
        LeaderboardEntry(
            session_id=session.session_id,
            participant_name=session.participant_name,
            layer1=score.layer1,
            final=score.final,
            grade=score.grade,
        )
        for session, score in scored
    ]

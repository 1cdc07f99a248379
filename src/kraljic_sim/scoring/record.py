"""
Record Scoring - stored rows to quadrant results, event results and totals

Shared by the dashboard and the rank calculator so that a session is scored
the same way whether it is the one being viewed or one it is ranked against.
"""

from collections.abc import Iterable

from kraljic_sim.kernel.scoring_policy import ScoringPolicy, default_scoring_policy
from kraljic_sim.quadrants.registry import QUADRANT_ORDER
from kraljic_sim.scoring.calculator import aggregate_quadrant, score_session
from kraljic_sim.scoring.dedup import latest_event_submissions, latest_submissions
from kraljic_sim.scoring.models import EventResult, QuadrantResult, SessionScore
from kraljic_sim.session.models import EventSubmission, SessionRecord, Submission


def quadrant_results_for(
    submissions: Iterable[Submission],
    policy: ScoringPolicy = default_scoring_policy,
) -> list[QuadrantResult]:
    """De-duplicate submissions and aggregate all four quadrants in canonical order"""
    by_quadrant: dict = {quadrant: [] for quadrant in QUADRANT_ORDER}
    for submission in latest_submissions(submissions):
        by_quadrant[submission.quadrant].append(submission)

    results = []
    for quadrant in QUADRANT_ORDER:
        rows = sorted(by_quadrant[quadrant], key=lambda s: s.step)
        results.append(
            aggregate_quadrant(
                [row.score for row in rows],
                quadrant,
                choice_ids=[row.choice_id for row in rows],
                policy=policy,
            )
        )
    return results


def event_results_for(events: Iterable[EventSubmission]) -> list[EventResult]:
    """One event result per quadrant in canonical order (empty when unanswered)"""
    latest = latest_event_submissions(events)
    results = []
    for quadrant in QUADRANT_ORDER:
        event = latest.get(quadrant)
        if event is None:
            results.append(EventResult(quadrant=quadrant))
        else:
            results.append(
                EventResult(quadrant=quadrant, choice_id=event.choice_id, score=event.score)
            )
    return results


def score_record(
    record: SessionRecord, policy: ScoringPolicy = default_scoring_policy
) -> tuple[list[QuadrantResult], list[EventResult], SessionScore]:
    """Score one stored session end to end"""
    quadrant_results = quadrant_results_for(record.submissions, policy)
    event_results = event_results_for(record.events)
    score = score_session(
        quadrant_results, [result.score for result in event_results], policy
    )
    return quadrant_results, event_results, score

"""
Latest-wins selection over append-only rows

The store never overwrites a submission, so a step answered twice (a retried
request, a double click, a resumed session) leaves two rows. The most recently
confirmed choice is the one that counts: greatest timestamp, then greatest
row id for rows written within the same instant.
"""

from collections.abc import Iterable

from kraljic_sim.quadrants.models import QuadrantId
from kraljic_sim.session.models import EventSubmission, Submission


def _recency(row: Submission | EventSubmission) -> tuple:
    # Rows without a storage id (client cache) rank by timestamp alone
    return (row.timestamp, row.row_id if row.row_id is not None else -1)


def latest_submissions(submissions: Iterable[Submission]) -> list[Submission]:
    """
    Keep one submission per (quadrant, step), the most recent

    Returns:
        Surviving submissions ordered by quadrant value then step
    """
    latest: dict[tuple[QuadrantId, int], Submission] = {}
    for submission in submissions:
        key = (submission.quadrant, submission.step)
        current = latest.get(key)
        if current is None or _recency(submission) >= _recency(current):
            latest[key] = submission

    return sorted(latest.values(), key=lambda s: (s.quadrant.value, s.step))


def latest_event_submissions(events: Iterable[EventSubmission]) -> dict[QuadrantId, EventSubmission]:
    """Keep one event response per quadrant, the most recent"""
    latest: dict[QuadrantId, EventSubmission] = {}
    for event in events:
        current = latest.get(event.quadrant)
        if current is None or _recency(event) >= _recency(current):
            latest[event.quadrant] = event
    return latest

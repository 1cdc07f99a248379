"""
Test helpers for building session rows without touching the store
"""

from datetime import datetime, timedelta, timezone

from kraljic_sim.quadrants.models import QuadrantId
from kraljic_sim.quadrants.registry import QUADRANT_ORDER
from kraljic_sim.scoring.models import RawScore, WeightedScore
from kraljic_sim.session.models import EventSubmission, Session, SessionRecord, Submission

BASE_TIME = datetime(2025, 3, 10, 9, 0, 0, tzinfo=timezone.utc)


def score(weighted: float, ce: int = 3, ss: int = 3, sv: int = 3) -> WeightedScore:
    """WeightedScore with an explicit weighted value (raw triple is decorative)"""
    return WeightedScore(raw=RawScore(ce=ce, ss=ss, sv=sv), weighted=weighted)


def make_submission(
    session_id: str,
    quadrant: QuadrantId,
    step: int,
    weighted: float,
    *,
    choice_id: str | None = None,
    timestamp: datetime | None = None,
    row_id: int | None = None,
    raw: tuple[int, int, int] = (3, 3, 3),
) -> Submission:
    return Submission(
        row_id=row_id,
        session_id=session_id,
        quadrant=quadrant,
        step=step,
        choice_id=choice_id or f"{quadrant.value}_step{step + 1}_A",
        score=score(weighted, *raw),
        timestamp=timestamp or BASE_TIME,
    )


def make_event(
    session_id: str,
    quadrant: QuadrantId,
    weighted: float,
    *,
    timestamp: datetime | None = None,
    row_id: int | None = None,
) -> EventSubmission:
    return EventSubmission(
        row_id=row_id,
        session_id=session_id,
        quadrant=quadrant,
        choice_id=f"event_{quadrant.value}_A",
        score=score(weighted),
        timestamp=timestamp or BASE_TIME,
    )


def make_record(
    session_id: str,
    step_weighted: float | None,
    *,
    event_weighted: float | None = None,
    created_offset_minutes: int = 0,
    participant_name: str | None = None,
) -> SessionRecord:
    """
    Session whose 16 Layer 1 steps all carry the same weighted value

    layer1 = 16 * step_weighted, layer2 = 4 * event_weighted. A None
    step_weighted gives a session with no submissions at all.
    """
    created_at = BASE_TIME + timedelta(minutes=created_offset_minutes)
    submissions = []
    if step_weighted is not None:
        submissions = [
            make_submission(session_id, quadrant, step, step_weighted, timestamp=created_at)
            for quadrant in QUADRANT_ORDER
            for step in range(4)
        ]
    events = []
    if event_weighted is not None:
        events = [
            make_event(session_id, quadrant, event_weighted, timestamp=created_at)
            for quadrant in QUADRANT_ORDER
        ]
    return SessionRecord(
        session=Session(
            session_id=session_id,
            participant_name=participant_name or f"Participant {session_id}",
            created_at=created_at,
        ),
        submissions=submissions,
        events=events,
    )

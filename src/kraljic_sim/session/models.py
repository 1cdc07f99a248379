"""
Session Models - persisted rows of a participant playthrough

A Session is created when a participant starts, Submissions are appended as
each Layer 1 step is confirmed, and EventSubmissions are appended (together
with the completion time) when the event round is submitted. Nothing is ever
updated in place or deleted.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from kraljic_sim.quadrants.models import QuadrantId
from kraljic_sim.scoring.models import WeightedScore


class Session(BaseModel):
    """One participant playthrough"""

    session_id: str = Field(..., min_length=1)
    participant_name: str = Field(..., min_length=1)
    created_at: datetime
    completed_at: datetime | None = Field(
        default=None, description="Set exactly once, when the event round is submitted"
    )

    model_config = {"frozen": True}

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None


class Submission(BaseModel):
    """One confirmed Layer 1 choice for (session, quadrant, step)"""

    row_id: int | None = Field(default=None, description="Storage row id (insertion order)")
    session_id: str
    quadrant: QuadrantId
    step: int = Field(..., ge=0, description="Zero-based step index")
    choice_id: str
    score: WeightedScore
    timestamp: datetime

    model_config = {"frozen": True}


class EventSubmission(BaseModel):
    """One Layer 2 event response for (session, quadrant)"""

    row_id: int | None = None
    session_id: str
    quadrant: QuadrantId
    choice_id: str
    score: WeightedScore
    timestamp: datetime

    model_config = {"frozen": True}


class SessionRecord(BaseModel):
    """
    A session together with all of its stored rows

    This is the explicit input the scoring functions work on - it can be
    loaded from the SQLite store or assembled from a client-side cache.
    """

    session: Session
    submissions: list[Submission] = Field(default_factory=list)
    events: list[EventSubmission] = Field(default_factory=list)

    model_config = {"frozen": True}

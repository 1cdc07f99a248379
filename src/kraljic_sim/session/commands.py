"""
Session Commands

Commands express a participant's intention to start, answer or finish a
playthrough. Shape validation happens here; rules that need the store or the
content catalog are checked by the handlers.
"""

from pydantic import BaseModel, Field, field_validator

from kraljic_sim.quadrants.models import QuadrantId
from kraljic_sim.scoring.models import RawScore


class CreateSession(BaseModel):
    """
    Start a new playthrough

    session_id may be omitted, in which case the handler generates one.
    """

    session_id: str | None = Field(default=None, min_length=1)
    participant_name: str = Field(..., description="Display name on the leaderboard")

    @field_validator("participant_name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("participant_name must not be empty")
        return value


class RecordSubmission(BaseModel):
    """
    Confirm one Layer 1 choice

    raw_score and weighted are optional echoes of what the client displayed.
    The content catalog is authoritative; an echo that disagrees is rejected.
    """

    session_id: str = Field(..., min_length=1)
    quadrant: QuadrantId
    step: int = Field(..., ge=0, description="Zero-based step index")
    choice_id: str = Field(..., min_length=1)
    raw_score: RawScore | None = None
    weighted: float | None = None


class EventResponseSpec(BaseModel):
    """One quadrant's answer in the event round"""

    quadrant: QuadrantId
    choice_id: str = Field(..., min_length=1)
    raw_score: RawScore | None = None
    weighted: float | None = None


class RecordEventResponses(BaseModel):
    """Submit the event round and complete the session"""

    session_id: str = Field(..., min_length=1)
    responses: list[EventResponseSpec] = Field(..., min_length=1)

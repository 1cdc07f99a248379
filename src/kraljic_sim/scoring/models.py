"""
Scoring Models - raw and weighted scores and every derived result

Everything here is a frozen value object. Derived results (QuadrantResult,
DimensionProfile, DashboardResult) are never persisted; they are recomputed
from stored submissions on every request.
"""

from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from pydantic import BaseModel, Field

from kraljic_sim.quadrants.models import Dimension, QuadrantId


def round_half_up(value: float, places: int) -> float:
    """
    Round to a fixed number of decimals, halves away from zero

    Goes through the shortest decimal representation so that float noise
    such as 14.499999999999998 still rounds to 14.5.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


class RawScore(BaseModel):
    """Raw (ce, ss, sv) triple attached to a content choice, each in [1, 5]"""

    ce: int = Field(..., ge=1, le=5, description="Cost efficiency")
    ss: int = Field(..., ge=1, le=5, description="Supply stability")
    sv: int = Field(..., ge=1, le=5, description="Strategic value")

    model_config = {"frozen": True}

    def get(self, dimension: Dimension) -> int:
        return getattr(self, dimension.value)

    def as_dict(self) -> dict[str, int]:
        return {"ce": self.ce, "ss": self.ss, "sv": self.sv}


class WeightedScore(BaseModel):
    """
    Raw score plus its quadrant-weighted scalar

    Invariant: weighted == ce*w_ce + ss*w_ss + sv*w_sv for the quadrant the
    score was computed for.
    """

    raw: RawScore
    weighted: float = Field(..., description="Dot product of raw triple and quadrant weights")

    model_config = {"frozen": True}


class Grade(str, Enum):
    """Final grade, ordered Poor < Fair < Good < Excellent"""

    POOR = "Poor"
    FAIR = "Fair"
    GOOD = "Good"
    EXCELLENT = "Excellent"

    @property
    def rank(self) -> int:
        """Position in the canonical ordering (Poor = 0)"""
        return list(Grade).index(self)


class QuadrantResult(BaseModel):
    """Layer 1 outcome for one quadrant"""

    quadrant: QuadrantId
    step_scores: list[WeightedScore] = Field(
        default_factory=list, description="One score per step, ordered by step index"
    )
    total_weighted: float
    choice_ids: list[str] = Field(default_factory=list)
    optimal_score: float
    percent_of_optimal: float

    model_config = {"frozen": True}

    @property
    def step_count(self) -> int:
        return len(self.step_scores)


class EventResult(BaseModel):
    """Layer 2 outcome for one quadrant (None fields when unanswered)"""

    quadrant: QuadrantId
    choice_id: str | None = None
    score: WeightedScore | None = None

    model_config = {"frozen": True}

    @property
    def weighted(self) -> float:
        return self.score.weighted if self.score else 0.0


class SessionScore(BaseModel):
    """Layer 1 + Layer 2 totals and the resulting grade"""

    layer1: float
    layer2: float
    final: float
    grade: Grade

    model_config = {"frozen": True}


class DimensionStat(BaseModel):
    total: int = Field(ge=0)
    average: float = Field(ge=0.0)

    model_config = {"frozen": True}


class ProfileType(str, Enum):
    """Participant tendency, named after the strongest dimension"""

    COST_FOCUSED = "cost_focused"
    STABILITY_FOCUSED = "stability_focused"
    STRATEGY_FOCUSED = "strategy_focused"

    @classmethod
    def from_dimension(cls, dimension: Dimension) -> "ProfileType":
        return {
            Dimension.CE: cls.COST_FOCUSED,
            Dimension.SS: cls.STABILITY_FOCUSED,
            Dimension.SV: cls.STRATEGY_FOCUSED,
        }[dimension]


class DimensionProfile(BaseModel):
    """Raw per-dimension totals across every Layer 1 step of a session"""

    ce: DimensionStat
    ss: DimensionStat
    sv: DimensionStat
    strongest: Dimension
    weakest: Dimension
    step_count: int = Field(ge=0)
    profile_type: ProfileType

    model_config = {"frozen": True}

    def stat(self, dimension: Dimension) -> DimensionStat:
        return getattr(self, dimension.value)


class RankDirection(str, Enum):
    UP = "up"
    DOWN = "down"
    SAME = "same"


class RankSummary(BaseModel):
    """Ordinal position before (Layer 1 only) and after (final) the event round"""

    before: int = Field(ge=1)
    after: int = Field(ge=1)
    total: int = Field(ge=1)

    model_config = {"frozen": True}

    @property
    def movement(self) -> int:
        """Positive when the event round moved the participant up"""
        return self.before - self.after

    @property
    def direction(self) -> RankDirection:
        if self.movement > 0:
            return RankDirection.UP
        if self.movement < 0:
            return RankDirection.DOWN
        return RankDirection.SAME


class FeedbackLevel(str, Enum):
    STRONG = "strong"
    MODERATE = "moderate"
    WEAK = "weak"


class QuadrantFeedback(BaseModel):
    """Per-quadrant learning feedback shown next to the quadrant result"""

    quadrant: QuadrantId
    high_steps: list[int] = Field(default_factory=list)
    low_steps: list[int] = Field(default_factory=list)
    primary_dimension: Dimension
    primary_total: int
    primary_max: int
    primary_percent: float
    level: FeedbackLevel
    achievable_max: float | None = Field(
        default=None, description="Best total reachable with the scenario's choices"
    )
    achievable_percent: int | None = None

    model_config = {"frozen": True}


class LeaderboardEntry(BaseModel):
    session_id: str
    participant_name: str
    layer1: float
    final: float
    grade: Grade

    model_config = {"frozen": True}


class DashboardResult(BaseModel):
    """Everything the results page shows for one session"""

    session_id: str
    participant_name: str
    layer1_score: float
    layer2_score: float
    final_score: float
    grade: Grade
    quadrant_results: list[QuadrantResult]
    event_results: list[EventResult]
    dimension_profile: DimensionProfile
    rank: RankSummary | None = None
    completed: bool = False
    feedback: list[QuadrantFeedback] = Field(default_factory=list)

    model_config = {"frozen": True}

    def quadrant(self, quadrant: QuadrantId) -> QuadrantResult:
        """Result for one quadrant"""
        for result in self.quadrant_results:
            if result.quadrant == quadrant:
                return result
        raise KeyError(quadrant)

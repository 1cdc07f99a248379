"""
Scoring Policy - the tunable constants of the scoring engine

Every place that needs a grade band, a step count or the raw score range reads
it from here, so the thresholds cannot drift apart between call sites.
"""

from pydantic import BaseModel, Field, model_validator

from kraljic_sim.kernel.errors import RawScoreOutOfRange


class GradeThresholds(BaseModel):
    """
    Minimum final score for each grade above Poor

    Canonical banding: final >= 70 Excellent, >= 55 Good, >= 40 Fair, else Poor.
    """

    excellent: float = Field(default=70.0, ge=0.0)
    good: float = Field(default=55.0, ge=0.0)
    fair: float = Field(default=40.0, ge=0.0)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_descending(self) -> "GradeThresholds":
        """Bands must be strictly descending or the grade stops being monotone"""
        if not (self.excellent > self.good > self.fair):
            raise ValueError(
                f"Grade thresholds must be strictly descending: "
                f"excellent={self.excellent}, good={self.good}, fair={self.fair}"
            )
        return self


class ScoringPolicy(BaseModel):
    """
    Parameters of the scoring engine

    The defaults reproduce the classroom simulation: four steps per quadrant,
    raw scores from 1 to 5, and a rank shown once at least two participants
    have played.
    """

    policy_version: str = Field(
        default="1.0",
        description="Policy version for tracking changes over time",
    )

    grade_thresholds: GradeThresholds = Field(
        default_factory=GradeThresholds,
        description="Single canonical grade banding applied to every final score",
    )

    steps_per_quadrant: int = Field(
        default=4,
        ge=1,
        description="Number of Layer 1 steps in each quadrant scenario",
    )

    min_raw_score: int = Field(default=1, ge=0)
    max_raw_score: int = Field(default=5, ge=1)

    min_ranked_sessions: int = Field(
        default=2,
        ge=1,
        description="Minimum qualifying sessions before a rank is reported",
    )

    step_strength_ratio: float = Field(
        default=0.70,
        gt=0.0,
        le=1.0,
        description="weighted / max_raw_score at or above which a step counts as strong",
    )

    primary_dimension_strong_percent: float = Field(default=75.0, ge=0.0, le=100.0)
    primary_dimension_moderate_percent: float = Field(default=50.0, ge=0.0, le=100.0)

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "description": "Scoring constants for the Kraljic practice simulation"
        },
    }

    @model_validator(mode="after")
    def validate_ranges(self) -> "ScoringPolicy":
        if self.min_raw_score > self.max_raw_score:
            raise ValueError("min_raw_score must not exceed max_raw_score")
        if self.primary_dimension_moderate_percent > self.primary_dimension_strong_percent:
            raise ValueError("moderate primary-dimension threshold must not exceed strong")
        return self

    def check_raw_value(self, dimension: str, value: float) -> None:
        """
        Reject a raw dimension value outside [min_raw_score, max_raw_score]

        Raises:
            RawScoreOutOfRange: If value is out of range
        """
        if value < self.min_raw_score or value > self.max_raw_score:
            raise RawScoreOutOfRange(
                dimension, value, self.min_raw_score, self.max_raw_score
            )


# Default global policy instance
default_scoring_policy = ScoringPolicy()

"""
Content Models - scenarios, steps, choices and the disruptive event

Content is read-only reference data: every choice carries a fixed raw score
triple that the scoring engine looks up when a participant confirms it.
"""

from pydantic import BaseModel, Field, model_validator

from kraljic_sim.quadrants.models import QuadrantId
from kraljic_sim.scoring.models import RawScore

CHOICES_PER_STEP = 3


class ChoiceFeedback(BaseModel):
    """Explanation shown after a choice is confirmed"""

    result: str = ""
    tradeoff: str = ""
    theory_connection: str = ""

    model_config = {"frozen": True}


class Choice(BaseModel):
    choice_id: str = Field(..., min_length=1, description="e.g. bottleneck_step1_A")
    label: str
    title: str
    description: str = ""
    scores: RawScore
    feedback: ChoiceFeedback = Field(default_factory=ChoiceFeedback)

    model_config = {"frozen": True}


class Step(BaseModel):
    """One decision point of a quadrant scenario"""

    step_index: int = Field(..., ge=0, description="Zero-based step index")
    title: str
    situation: str
    choices: list[Choice] = Field(..., min_length=CHOICES_PER_STEP, max_length=CHOICES_PER_STEP)

    model_config = {"frozen": True}

    def find_choice(self, choice_id: str) -> Choice | None:
        return next((c for c in self.choices if c.choice_id == choice_id), None)

    def best_choice(self, weights) -> Choice:
        """Choice with the highest weighted value under the given weights"""
        return max(
            self.choices,
            key=lambda c: c.scores.ce * weights.ce + c.scores.ss * weights.ss + c.scores.sv * weights.sv,
        )


class ScenarioContent(BaseModel):
    """Layer 1 scenario for one quadrant"""

    quadrant: QuadrantId
    company_name: str
    item_name: str
    briefing: str
    steps: list[Step]

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_step_indices(self) -> "ScenarioContent":
        indices = [step.step_index for step in self.steps]
        if indices != list(range(len(self.steps))):
            raise ValueError(f"Steps of {self.quadrant.value} must be indexed 0..n-1, got {indices}")
        return self


class EventShock(BaseModel):
    name: str
    description: str
    timeframe: str

    model_config = {"frozen": True}


class EventResponseContent(BaseModel):
    """How the disruptive event hits one quadrant's item, with response options"""

    quadrant: QuadrantId
    situation: str
    choices: list[Choice] = Field(..., min_length=CHOICES_PER_STEP, max_length=CHOICES_PER_STEP)

    model_config = {"frozen": True}

    def find_choice(self, choice_id: str) -> Choice | None:
        return next((c for c in self.choices if c.choice_id == choice_id), None)


class EventContent(BaseModel):
    """Layer 2 disruptive event: one response set per quadrant"""

    title: str
    description: str
    shocks: list[EventShock] = Field(default_factory=list)
    responses: list[EventResponseContent]

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_one_response_per_quadrant(self) -> "EventContent":
        quadrants = [r.quadrant for r in self.responses]
        if len(set(quadrants)) != len(quadrants):
            raise ValueError("Event content must have at most one response set per quadrant")
        return self

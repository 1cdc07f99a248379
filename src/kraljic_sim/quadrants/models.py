"""
Quadrant Models - the four Kraljic item categories and their weightings

Each quadrant weighs the three scoring dimensions differently; a choice that is
excellent for a leverage item (cost first) can be mediocre for a bottleneck
item (supply stability first).
"""

from enum import Enum

from pydantic import BaseModel, Field, model_validator

from kraljic_sim.kernel.errors import InvalidQuadrantWeights

WEIGHT_SUM_TOLERANCE = 1e-6


class QuadrantId(str, Enum):
    """
    Kraljic matrix quadrants

    BOTTLENECK: high supply risk, low profit impact
    LEVERAGE: low supply risk, high profit impact
    STRATEGIC: high supply risk, high profit impact
    NONCRITICAL: low supply risk, low profit impact
    """

    BOTTLENECK = "bottleneck"
    LEVERAGE = "leverage"
    STRATEGIC = "strategic"
    NONCRITICAL = "noncritical"


class Dimension(str, Enum):
    """
    Scoring dimensions

    Declaration order (CE, SS, SV) is also the tie-break priority wherever
    dimensions are ranked against each other.
    """

    CE = "ce"  # cost efficiency
    SS = "ss"  # supply stability
    SV = "sv"  # strategic value


DIMENSION_ORDER: tuple[Dimension, ...] = (Dimension.CE, Dimension.SS, Dimension.SV)


class Level(str, Enum):
    """Supply risk / profit impact level"""

    HIGH = "HIGH"
    LOW = "LOW"


class DimensionWeights(BaseModel):
    """
    Weight of each dimension within a quadrant

    Weights are non-negative and sum to 1.0, which keeps every weighted score
    inside the raw score range.
    """

    ce: float = Field(..., description="Cost efficiency weight")
    ss: float = Field(..., description="Supply stability weight")
    sv: float = Field(..., description="Strategic value weight")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_weights(self) -> "DimensionWeights":
        values = {"ce": self.ce, "ss": self.ss, "sv": self.sv}
        if any(v < 0 for v in values.values()):
            raise InvalidQuadrantWeights(values)
        if abs(sum(values.values()) - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise InvalidQuadrantWeights(values)
        return self

    def get(self, dimension: Dimension) -> float:
        """Weight for one dimension"""
        return getattr(self, dimension.value)

    def primary_dimension(self) -> Dimension:
        """Dimension with the largest weight (ties resolved CE > SS > SV)"""
        best = DIMENSION_ORDER[0]
        for dimension in DIMENSION_ORDER[1:]:
            if self.get(dimension) > self.get(best):
                best = dimension
        return best


class QuadrantDefinition(BaseModel):
    """Static definition of one quadrant"""

    quadrant_id: QuadrantId
    name_en: str
    name_ko: str
    supply_risk: Level
    profit_impact: Level
    core_dilemma: str
    weights: DimensionWeights

    model_config = {"frozen": True}

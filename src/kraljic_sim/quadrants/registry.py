"""
Quadrant Registry - static table of the four quadrant definitions

Defined once at import time and never mutated.
"""

from kraljic_sim.quadrants.models import (
    DimensionWeights,
    Level,
    QuadrantDefinition,
    QuadrantId,
)

QUADRANT_ORDER: tuple[QuadrantId, ...] = (
    QuadrantId.BOTTLENECK,
    QuadrantId.LEVERAGE,
    QuadrantId.STRATEGIC,
    QuadrantId.NONCRITICAL,
)

QUADRANT_REGISTRY: dict[QuadrantId, QuadrantDefinition] = {
    QuadrantId.BOTTLENECK: QuadrantDefinition(
        quadrant_id=QuadrantId.BOTTLENECK,
        name_en="Bottleneck",
        name_ko="병목",
        supply_risk=Level.HIGH,
        profit_impact=Level.LOW,
        core_dilemma="How much to invest in securing a low-cost item",
        weights=DimensionWeights(ce=0.20, ss=0.50, sv=0.30),
    ),
    QuadrantId.LEVERAGE: QuadrantDefinition(
        quadrant_id=QuadrantId.LEVERAGE,
        name_en="Leverage",
        name_ko="레버리지",
        supply_risk=Level.LOW,
        profit_impact=Level.HIGH,
        core_dilemma="Aggressive cost reduction vs supplier relationship",
        weights=DimensionWeights(ce=0.50, ss=0.20, sv=0.30),
    ),
    QuadrantId.STRATEGIC: QuadrantDefinition(
        quadrant_id=QuadrantId.STRATEGIC,
        name_en="Strategic",
        name_ko="전략",
        supply_risk=Level.HIGH,
        profit_impact=Level.HIGH,
        core_dilemma="Deepening the partnership vs avoiding lock-in",
        weights=DimensionWeights(ce=0.20, ss=0.30, sv=0.50),
    ),
    QuadrantId.NONCRITICAL: QuadrantDefinition(
        quadrant_id=QuadrantId.NONCRITICAL,
        name_en="Non-critical",
        name_ko="일상(비핵심)",
        supply_risk=Level.LOW,
        profit_impact=Level.LOW,
        core_dilemma="Streamlining administration vs risk of neglect",
        weights=DimensionWeights(ce=0.50, ss=0.15, sv=0.35),
    ),
}


def get_quadrant(quadrant: QuadrantId | str) -> QuadrantDefinition:
    """
    Look up a quadrant definition

    Args:
        quadrant: Quadrant id or its string value

    Raises:
        ValueError: If the identifier is not one of the four quadrants
    """
    return QUADRANT_REGISTRY[QuadrantId(quadrant)]

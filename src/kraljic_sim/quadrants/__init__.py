"""
Quadrants - the Kraljic matrix categories and their dimension weights
"""

from kraljic_sim.quadrants.models import (
    DIMENSION_ORDER,
    Dimension,
    DimensionWeights,
    Level,
    QuadrantDefinition,
    QuadrantId,
)
from kraljic_sim.quadrants.registry import QUADRANT_ORDER, QUADRANT_REGISTRY, get_quadrant

__all__ = [
    "DIMENSION_ORDER",
    "Dimension",
    "DimensionWeights",
    "Level",
    "QuadrantDefinition",
    "QuadrantId",
    "QUADRANT_ORDER",
    "QUADRANT_REGISTRY",
    "get_quadrant",
]

"""Inventory practice calculators"""

from kraljic_sim.inventory.calculator import (
    SERVICE_LEVEL_Z,
    EOQResult,
    economic_order_quantity,
    eoq_summary,
    reorder_point,
    safety_stock,
    z_for_service_level,
)

__all__ = [
    "EOQResult",
    "SERVICE_LEVEL_Z",
    "economic_order_quantity",
    "eoq_summary",
    "reorder_point",
    "safety_stock",
    "z_for_service_level",
]

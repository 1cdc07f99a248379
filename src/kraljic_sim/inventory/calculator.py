"""
Inventory Calculators - EOQ, safety stock and reorder point

Practice tools shown next to the scenarios. The formulas are the textbook
ones; every function returns None instead of raising when an input makes
the formula meaningless (zero or negative demand, lead time, cost).
"""

import math

from pydantic import BaseModel

# Service level -> one-sided z value
SERVICE_LEVEL_Z: dict[str, float] = {
    "90%": 1.28,
    "95%": 1.65,
    "97.5%": 1.96,
    "99%": 2.33,
    "99.9%": 3.09,
}


class EOQResult(BaseModel):
    """Economic order quantity with the figures derived from it"""

    quantity: float
    orders_per_year: float
    annual_cost: float

    model_config = {"frozen": True}


def economic_order_quantity(
    annual_demand: float, order_cost: float, holding_cost: float
) -> float | None:
    """EOQ = sqrt(2 * D * S / H)"""
    if annual_demand <= 0 or order_cost <= 0 or holding_cost <= 0:
        return None
    return math.sqrt(2 * annual_demand * order_cost / holding_cost)


def eoq_summary(
    annual_demand: float, order_cost: float, holding_cost: float
) -> EOQResult | None:
    """
    EOQ plus orders per year and total annual ordering + holding cost

    Example:
        D=10000, S=50000, H=200 gives EOQ ~2236.1 and ~4.5 orders per year.
    """
    quantity = economic_order_quantity(annual_demand, order_cost, holding_cost)
    if quantity is None:
        return None
    orders = annual_demand / quantity
    return EOQResult(
        quantity=quantity,
        orders_per_year=orders,
        annual_cost=orders * order_cost + quantity / 2 * holding_cost,
    )


def safety_stock(z: float, demand_std_dev: float, lead_time: float) -> float | None:
    """Safety stock = z * sigma_d * sqrt(L)"""
    if z <= 0 or demand_std_dev <= 0 or lead_time <= 0:
        return None
    return z * demand_std_dev * math.sqrt(lead_time)


def reorder_point(
    daily_demand: float, lead_time: float, safety_stock: float = 0.0
) -> float | None:
    """ROP = d * L + safety stock"""
    if daily_demand <= 0 or lead_time <= 0:
        return None
    return daily_demand * lead_time + safety_stock


def z_for_service_level(service_level: str) -> float:
    """
    Raises:
        KeyError: If the service level is not in the table
    """
    return SERVICE_LEVEL_Z[service_level]

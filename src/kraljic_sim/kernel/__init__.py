"""
Kernel - shared infrastructure for the simulation

Errors, logging, metrics, retry, time and id providers, and the scoring
policy. Nothing in the kernel knows about quadrants or sessions.
"""

from kraljic_sim.kernel.errors import (
    KraljicError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from kraljic_sim.kernel.ids import IdFactory, generate_session_id
from kraljic_sim.kernel.scoring_policy import ScoringPolicy
from kraljic_sim.kernel.time import RealTimeProvider, TestTimeProvider, TimeProvider

__all__ = [
    # IDs
    "IdFactory",
    "generate_session_id",
    # Time
    "TimeProvider",
    "RealTimeProvider",
    "TestTimeProvider",
    # Policy
    "ScoringPolicy",
    # Errors
    "KraljicError",
    "ValidationError",
    "NotFoundError",
    "PersistenceError",
]

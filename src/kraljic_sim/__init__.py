"""
Kraljic Practice Simulation - scoring and session engine

Teaches the Kraljic purchasing portfolio matrix: participants work through
four quadrant scenarios and a disruptive event, and get a weighted score,
a grade, a dimension profile and a rank against everyone else who played.

Fun fact: the matrix sorts purchases by just two questions - how much does
this item affect profit, and how hard is it to get?
"""

from kraljic_sim.simulation import KraljicSimulation

__version__ = "0.1.0"
__all__ = ["KraljicSimulation", "__version__"]

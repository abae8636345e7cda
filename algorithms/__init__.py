"""
algorithms/
-----------
Path engine.  Public API:

    from algorithms import compute_trace, dijkstra
    from algorithms import VisitStep, UpdateStep, PathStep, FrontierEntry
"""

from algorithms.step     import Step, VisitStep, UpdateStep, PathStep, FrontierEntry
from algorithms.frontier import Frontier
from algorithms.dijkstra import dijkstra, compute_trace

__all__ = [
    "Step",
    "VisitStep",
    "UpdateStep",
    "PathStep",
    "FrontierEntry",
    "Frontier",
    "dijkstra",
    "compute_trace",
]

"""Exception types raised by the planning workflow.

Only two seams catch these: the shipment scheduler converts solver problems
into a fallback schedule, and the annual plan workflow converts everything
else into an error descriptor that keeps partial results.
"""

from typing import Optional


class PlanningError(Exception):
    """Base class for planning failures."""


class ParameterValidationError(PlanningError):
    """Required simulation parameters are missing or invalid."""


class SolverUnavailableError(PlanningError):
    """No MILP solver could be created or loaded."""


class DemandConflictError(PlanningError):
    """
    Shortfall that remains after all three resolution tiers.

    Attributes:
        day_index: 0-based day where the shortfall occurred
        shortfall: Units that could not be supplied
    """

    def __init__(self, day_index: int, shortfall: float, message: Optional[str] = None):
        self.day_index = day_index
        self.shortfall = shortfall
        super().__init__(
            message or f"Demand Conflict Day {day_index + 1}: Short by {shortfall:.0f}"
        )

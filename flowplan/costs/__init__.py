"""Cost calculation module.

Key components:
- PlanCostBreakdown: Annual cost totals
- PlanCostCalculator: Holding and reactive overtime costs
- CostFinalizer: Final working-day flags and holding costs per day
"""

from .cost_breakdown import PlanCostBreakdown
from .cost_calculator import PlanCostCalculator
from .cost_finalizer import CostFinalizer

__all__ = [
    "PlanCostBreakdown",
    "PlanCostCalculator",
    "CostFinalizer",
]

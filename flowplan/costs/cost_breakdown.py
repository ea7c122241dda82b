"""Cost breakdown data model for an annual plan."""

from dataclasses import dataclass


@dataclass
class PlanCostBreakdown:
    """
    Annual cost totals of a simulated plan.

    Attributes:
        total_holding_cost: Sum of daily holding costs
        total_exception_cost: Sum of overtime and prorated overhead on exception days
        overtime_hours: Reactive overtime hours added across all days
        overtime_labor_cost: Overtime premium paid on those hours
    """
    total_holding_cost: float = 0.0
    total_exception_cost: float = 0.0
    overtime_hours: float = 0.0
    overtime_labor_cost: float = 0.0

    @property
    def total_cost(self) -> float:
        """Holding plus exception cost."""
        return self.total_holding_cost + self.total_exception_cost

    def __str__(self) -> str:
        """String representation."""
        return (
            f"Plan Cost: ${self.total_cost:,.2f} "
            f"(holding ${self.total_holding_cost:,.2f}, "
            f"exception ${self.total_exception_cost:,.2f}, {self.overtime_hours:.1f}h OT)"
        )

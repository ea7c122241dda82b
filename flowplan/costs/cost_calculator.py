"""Cost calculator for holding and reactive overtime costs.

Holding cost is charged on ending inventory valued at the weighted average
unit cost. Overtime added retroactively costs the labor premium plus the
share of daily overhead and SG&A the extra hours consume.
"""

from typing import List

from flowplan.models.day_record import DayRecord
from flowplan.models.simulation_parameters import SimulationParameters
from .cost_breakdown import PlanCostBreakdown


class PlanCostCalculator:
    """
    Calculates daily and annual plan costs.

    Example:
        calculator = PlanCostCalculator(params)
        breakdown = calculator.calculate(records)
        print(f"Holding cost: ${breakdown.total_holding_cost:,.2f}")
    """

    def __init__(self, params: SimulationParameters):
        """
        Initialize cost calculator.

        Args:
            params: Simulation parameters with cost rates
        """
        self.params = params
        self._unit_cost = params.weighted_unit_cost

    def holding_cost(self, inventory_end: float) -> float:
        """
        Holding cost of one day's ending inventory.

        Negative inventory carries no cost.
        """
        return max(0.0, inventory_end) * self._unit_cost * self.params.daily_holding_rate

    def overtime_labor_cost(self, hours: float) -> float:
        """Premium paid to the line for ``hours`` of overtime."""
        params = self.params
        return hours * params.employee_count * params.labor_rate * params.overtime_premium

    def overtime_cost(self, hours: float) -> float:
        """
        Exception cost of ``hours`` of reactive overtime.

        Overtime premium plus daily overhead and SG&A prorated over the
        standard operating day.
        """
        params = self.params
        daily_fixed = params.daily_mfg_overhead + params.daily_sga_expenses
        return self.overtime_labor_cost(hours) + daily_fixed * hours / params.standard_operating_hours

    def calculate(self, records: List[DayRecord]) -> PlanCostBreakdown:
        """
        Aggregate the costs recorded on the day records.

        Args:
            records: Simulated day records

        Returns:
            PlanCostBreakdown
        """
        breakdown = PlanCostBreakdown()

        for record in records:
            breakdown.total_holding_cost += record.holding_cost
            breakdown.total_exception_cost += record.exception_cost
            breakdown.overtime_hours += record.overtime_hours

        breakdown.overtime_labor_cost = self.overtime_labor_cost(breakdown.overtime_hours)
        return breakdown

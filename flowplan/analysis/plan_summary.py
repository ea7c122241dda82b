"""Summary metrics of a simulated annual plan.

Aggregates the day records into the headline figures shown next to the
daily plan: average inventory and its valuation, holding and exception
costs, counts of overtime (exception) and removed (reduction) days, and
the overtime stress factor derived from the exception-day share.
"""

from typing import List, Optional
import math

from pydantic import BaseModel, ConfigDict, Field

from flowplan.costs.cost_calculator import PlanCostCalculator
from flowplan.models.day_record import DayRecord
from flowplan.models.simulation_parameters import SimulationParameters

DEFAULT_STRESS_CV = 0.15

# Logistic curve mapping the effective exception-day ratio to stress
STRESS_STEEPNESS = 20.0
STRESS_MIDPOINT = 0.20


def overtime_stress(records: List[DayRecord], cv: float = DEFAULT_STRESS_CV) -> float:
    """
    Overtime stress factor of a plan, between 0 and 1.

    The share of exception days is amplified by the demand variation
    ``cv`` (clamped at 0) and passed through a logistic curve centred on a
    20% effective ratio. A plan without exception days has no stress.

    Args:
        records: Simulated day records
        cv: Coefficient of variation of demand

    Returns:
        Stress factor in [0, 1]
    """
    exception_days = sum(1 for r in records if r.is_exception_day)
    if exception_days == 0:
        return 0.0

    effective_ratio = exception_days / len(records) * (1 + max(0.0, cv))
    return 1.0 / (1.0 + math.exp(-STRESS_STEEPNESS * (effective_ratio - STRESS_MIDPOINT)))


class PlanSummary(BaseModel):
    """
    Headline metrics of one plan.

    Attributes:
        average_inventory: Mean ending inventory over the year
        inventory_valuation: Average inventory valued at the weighted unit cost
        total_holding_cost: Sum of daily holding costs
        total_exception_cost: Sum of reactive overtime costs
        exception_days: Days with overtime added
        reduction_days: Days with standard production removed
        total_production: Units produced
        total_shipped: Units shipped
        total_scheduled: Units scheduled to ship after deferrals
        overtime_hours: Reactive overtime hours added by Tier 3
        deferred_shipments: Days whose shipment was deferred
        overtime_stress: Logistic stress factor of the exception-day share
        schedule_status: Shipment schedule status ("optimal" or "fallback_<reason>")
        peak_demand: Solved peak daily load (-1 for a fallback schedule)
    """
    average_inventory: float = Field(default=0.0, ge=0)
    inventory_valuation: float = Field(default=0.0, ge=0)
    total_holding_cost: float = Field(default=0.0, ge=0)
    total_exception_cost: float = Field(default=0.0, ge=0)
    exception_days: int = Field(default=0, ge=0)
    reduction_days: int = Field(default=0, ge=0)
    total_production: float = 0.0
    total_shipped: float = 0.0
    total_scheduled: float = 0.0
    overtime_hours: float = 0.0
    deferred_shipments: int = Field(default=0, ge=0)
    overtime_stress: float = Field(default=0.0, ge=0, le=1)
    schedule_status: Optional[str] = None
    peak_demand: Optional[float] = None

    model_config = ConfigDict(frozen=True)

    @property
    def fill_rate(self) -> float:
        """Fraction of scheduled units shipped (1.0 when nothing is scheduled)."""
        if self.total_scheduled <= 0:
            return 1.0
        return self.total_shipped / self.total_scheduled

    @classmethod
    def summarize(
        cls,
        records: List[DayRecord],
        params: SimulationParameters,
        schedule_status: Optional[str] = None,
        peak_demand: Optional[float] = None,
        stress_cv: float = DEFAULT_STRESS_CV,
    ) -> "PlanSummary":
        """
        Build the summary from day records.

        Args:
            records: Simulated day records
            params: Simulation parameters of the run
            schedule_status: Shipment schedule status
            peak_demand: Peak daily load from the shipment schedule
            stress_cv: Demand variation used for the overtime stress factor

        Returns:
            PlanSummary
        """
        costs = PlanCostCalculator(params).calculate(records)
        days = len(records)
        average_inventory = sum(max(0.0, r.inventory_end) for r in records) / days if days else 0.0

        return cls(
            average_inventory=average_inventory,
            inventory_valuation=average_inventory * params.weighted_unit_cost,
            total_holding_cost=costs.total_holding_cost,
            total_exception_cost=costs.total_exception_cost,
            exception_days=sum(1 for r in records if r.is_exception_day),
            reduction_days=sum(1 for r in records if r.is_reduction_day),
            total_production=sum(r.production for r in records),
            total_shipped=sum(r.actual_shipment_qty for r in records),
            total_scheduled=sum(r.scheduled_shipment_qty for r in records),
            overtime_hours=costs.overtime_hours,
            deferred_shipments=sum(1 for r in records if r.shipment_deferred),
            overtime_stress=overtime_stress(records, stress_cv),
            schedule_status=schedule_status,
            peak_demand=peak_demand,
        )

    def __str__(self) -> str:
        """String representation."""
        return (
            f"Plan summary: avg inventory {self.average_inventory:,.1f} "
            f"(${self.inventory_valuation:,.0f}), holding ${self.total_holding_cost:,.2f}, "
            f"exception ${self.total_exception_cost:,.2f}, "
            f"{self.exception_days} overtime days, {self.reduction_days} removed days"
        )

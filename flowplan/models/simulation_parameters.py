"""Simulation parameters for one annual planning run."""

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from flowplan.exceptions import ParameterValidationError
from .demand_source import DemandSource
from .product_variant import ProductVariant, weighted_average_unit_cost
from .working_calendar import WorkingCalendar


def default_product_variants() -> list[ProductVariant]:
    """Standard three-model build mix."""
    return [
        ProductVariant(name="super", unit_cost=375.0, build_ratio=0.33),
        ProductVariant(name="ultra", unit_cost=590.0, build_ratio=0.33),
        ProductVariant(name="mega", unit_cost=960.0, build_ratio=0.34),
    ]


class SimulationParameters(BaseModel):
    """
    Immutable inputs of one simulation run.

    Attributes:
        demand_sources: Recurring shipment obligations
        working_calendar: Resolved working-day calendar
        standard_operating_hours: Standard hours per working day
        employee_count: Employees on the line
        labor_rate: Hourly labor cost per employee ($/hour)
        holding_cost_rate: Annual inventory holding rate (0.25 = 25%)
        annual_mfg_overhead: Annual manufacturing overhead ($)
        annual_sga_expenses: Annual SG&A expenses ($)
        product_variants: Unit costs and build-ratio mix
        target_daily_production: Units planned per standard working day
        max_standard_production: Units the line can build in standard hours
        overtime_premium: Premium paid on overtime hours (0.5 = 50%)
        deferral_window_days: Number of opening days whose short shipments may be deferred
        deferral_lookahead_days: Days searched forward for a deferral target
        shortfall_tolerance: Units of shortfall treated as resolved
    """
    demand_sources: list[DemandSource] = Field(default_factory=list)
    working_calendar: WorkingCalendar
    standard_operating_hours: float = Field(default=15.0, gt=0)
    employee_count: int = Field(default=8, ge=0)
    labor_rate: float = Field(default=25.0, ge=0)
    holding_cost_rate: float = Field(default=0.25, ge=0)
    annual_mfg_overhead: float = Field(default=250_000.0, ge=0)
    annual_sga_expenses: float = Field(default=350_000.0, ge=0)
    product_variants: list[ProductVariant] = Field(default_factory=default_product_variants)
    target_daily_production: float = Field(..., gt=0)
    max_standard_production: float = Field(..., gt=0)
    overtime_premium: float = Field(default=0.5, ge=0)
    deferral_window_days: int = Field(default=7, ge=0)
    deferral_lookahead_days: int = Field(default=6, ge=0)
    shortfall_tolerance: float = Field(default=0.01, gt=0)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def build(cls, **data: Any) -> "SimulationParameters":
        """
        Validate parameters, raising the planning error type.

        Raises:
            ParameterValidationError: If a required field is missing or invalid
        """
        try:
            return cls(**data)
        except ValidationError as e:
            raise ParameterValidationError(str(e)) from e

    @property
    def production_per_standard_hour(self) -> float:
        """Units built per standard operating hour."""
        return self.max_standard_production / self.standard_operating_hours

    @property
    def daily_holding_rate(self) -> float:
        """Holding cost rate per calendar day."""
        return self.holding_cost_rate / 365.0

    @property
    def daily_mfg_overhead(self) -> float:
        """Manufacturing overhead per working day."""
        days = self.working_calendar.num_working_days
        return self.annual_mfg_overhead / days if days > 0 else 0.0

    @property
    def daily_sga_expenses(self) -> float:
        """SG&A expenses per working day."""
        days = self.working_calendar.num_working_days
        return self.annual_sga_expenses / days if days > 0 else 0.0

    @property
    def weighted_unit_cost(self) -> float:
        """Build-ratio weighted unit cost (constant for the run)."""
        return weighted_average_unit_cost(self.product_variants)

    @property
    def max_extended_hours(self) -> float:
        """Longest day allowed when overtime is added retroactively."""
        return min(24.0, max(12.0, self.standard_operating_hours * 1.5))

    def hours_for_units(self, units: float) -> float:
        """Standard-rate hours needed to build ``units``."""
        return units / self.production_per_standard_hour

    def whole_units_for_hours(self, hours: float) -> int:
        """Whole units that fit into ``hours``."""
        return math.floor(hours * self.production_per_standard_hour)

    def standard_production(self) -> tuple[float, float]:
        """
        Tier 1 production quantity and hours for a standard working day.

        Returns:
            Tuple of (units, hours)
        """
        if self.target_daily_production > self.max_standard_production:
            return self.max_standard_production, self.standard_operating_hours
        return (
            self.target_daily_production,
            self.hours_for_units(self.target_daily_production),
        )


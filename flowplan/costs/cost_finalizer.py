"""Final cost and working-day pass over the simulated year."""

from typing import List, Optional
import logging

from flowplan.models.day_record import DayRecord
from flowplan.models.simulation_parameters import SimulationParameters
from .cost_calculator import PlanCostCalculator

logger = logging.getLogger(__name__)


class CostFinalizer:
    """
    Settles the final working-day flags and holding costs.

    Runs after the corrective passes, and also on the partial records left
    by a failed Pass 1.
    """

    def __init__(self, params: SimulationParameters, cost_calculator: Optional[PlanCostCalculator] = None):
        self.calendar = params.working_calendar
        self.costs = cost_calculator or PlanCostCalculator(params)

    def finalize(self, records: List[DayRecord]) -> None:
        """
        Recompute ``is_working_day`` and ``holding_cost`` for every record.

        Args:
            records: Day records (modified in place)
        """
        for record in records:
            record.is_working_day = self.calendar.is_working_day(record.date) and not record.is_reduction_day
            record.holding_cost = self.costs.holding_cost(record.inventory_end)

        logger.debug(f"Finalized costs for {len(records)} days")

"""
Corrective passes that remove unneeded production after Pass 1.

Pass A walks forward and removes standard production days whose output is
slack. Pass B walks backward and removes standard days to offset the
reactive overtime Pass 1 added. Both only commit a removal after re-simulating
the rest of the year with shipments fixed, so they never create a shortfall.
"""

from dataclasses import dataclass
from typing import List
import logging

from flowplan.models.day_record import DayRecord
from flowplan.models.simulation_parameters import SimulationParameters

logger = logging.getLogger(__name__)


@dataclass
class SmoothingResult:
    """
    Outcome of the corrective passes.

    Attributes:
        forward_reductions: Days removed by the forward slack pass
        backward_reductions: Days removed by the backward overtime pass
        overtime_hours_offset: Overtime hours balanced by removed days
        overtime_hours_remaining: Overtime hours left unbalanced
    """
    forward_reductions: int = 0
    backward_reductions: int = 0
    overtime_hours_offset: float = 0.0
    overtime_hours_remaining: float = 0.0

    @property
    def total_reductions(self) -> int:
        return self.forward_reductions + self.backward_reductions


def is_feasible_without(
    records: List[DayRecord],
    start: int,
    production: float,
    inventory_floor: float,
    tolerance: float = 0.01,
) -> bool:
    """
    Re-simulate from ``start`` with that day's production replaced.

    Shipments stay fixed at their actual quantities; production of every
    later day is unchanged.

    Args:
        records: Day records (not modified)
        start: First day to re-simulate
        production: Replacement production for day ``start``
        inventory_floor: Lowest ending inventory allowed
        tolerance: Slack on the floor comparison

    Returns:
        True if every shipment is still covered and inventory stays above the floor
    """
    inventory = records[start - 1].inventory_end if start > 0 else 0.0

    for i in range(start, len(records)):
        available = inventory + (production if i == start else records[i].production)
        shipped = records[i].actual_shipment_qty
        if available < shipped:
            return False
        inventory = available - shipped
        if inventory < inventory_floor - tolerance:
            return False

    return True


def propagate_inventory(records: List[DayRecord], start: int) -> None:
    """Recompute the inventory chain from ``start`` to the end of the year."""
    for i in range(start, len(records)):
        records[i].refresh_inventory(records[i - 1].inventory_end if i > 0 else 0.0)


def minimum_safe_inventory(records: List[DayRecord]) -> float:
    """Lowest opening inventory on any day that ships (0 if nothing ships)."""
    levels = [r.inventory_start for r in records if r.actual_shipment_qty > 0]
    return min(levels) if levels else 0.0


class ProductionSmoother:
    """
    Runs the forward slack pass and the backward overtime offset pass.

    Example:
        smoother = ProductionSmoother(params)
        result = smoother.smooth(records, pass_one.overtime_hours)
        print(f"Removed {result.total_reductions} production days")
    """

    def __init__(self, params: SimulationParameters):
        """
        Initialize production smoother.

        Args:
            params: Simulation parameters
        """
        self.params = params
        self.calendar = params.working_calendar
        self.tolerance = params.shortfall_tolerance

    def smooth(self, records: List[DayRecord], overtime_hours: float) -> SmoothingResult:
        """
        Run Pass A then Pass B.

        Args:
            records: Day records after a successful Pass 1 (modified in place)
            overtime_hours: Reactive overtime hours reported by Pass 1

        Returns:
            SmoothingResult
        """
        result = SmoothingResult()
        result.forward_reductions = self.remove_forward_slack(records)
        result.backward_reductions, result.overtime_hours_remaining = self.offset_overtime(records, overtime_hours)
        result.overtime_hours_offset = overtime_hours - result.overtime_hours_remaining
        logger.info(
            f"Corrective passes removed {result.forward_reductions} slack days and "
            f"{result.backward_reductions} days offsetting {result.overtime_hours_offset:.2f}h overtime"
        )
        return result

    def is_reducible(self, record: DayRecord) -> bool:
        """Standard production day that may be removed."""
        return (
            self.calendar.is_working_day(record.date)
            and not record.is_exception_day
            and not record.is_reduction_day
            and record.production > 0
            and abs(record.production - self.params.target_daily_production) < self.tolerance
        )

    def remove_forward_slack(self, records: List[DayRecord]) -> int:
        """
        Pass A: remove standard days whose production is not needed.

        Inventory may not fall below the lowest opening inventory seen on a
        shipping day in Pass 1.

        Returns:
            Number of days removed
        """
        inventory_floor = minimum_safe_inventory(records)
        removed = 0

        for i, record in enumerate(records):
            if not self.is_reducible(record):
                continue
            if not is_feasible_without(records, i, 0.0, inventory_floor, self.tolerance):
                continue

            self._remove_production(record)
            propagate_inventory(records, i)
            removed += 1

        return removed

    def offset_overtime(self, records: List[DayRecord], overtime_hours: float) -> tuple[int, float]:
        """
        Pass B: remove standard days from the end of the year to balance overtime.

        A day is removed only when its hours fit in the overtime still to
        offset.

        Args:
            records: Day records (modified in place)
            overtime_hours: Reactive overtime hours to offset

        Returns:
            Tuple of (days removed, hours left to offset)
        """
        hours_to_offset = overtime_hours
        removed = 0
        if hours_to_offset <= self.tolerance:
            return removed, hours_to_offset

        for i in range(len(records) - 1, -1, -1):
            if hours_to_offset <= self.tolerance:
                break

            record = records[i]
            if not self.is_reducible(record):
                continue
            if not is_feasible_without(records, i, 0.0, 0.0, self.tolerance):
                continue

            saved_hours = record.operating_hours
            if hours_to_offset < saved_hours:
                continue

            self._remove_production(record)
            record.add_note("Offset OT.")
            hours_to_offset -= saved_hours
            propagate_inventory(records, i)
            removed += 1

        return removed, hours_to_offset

    @staticmethod
    def _remove_production(record: DayRecord) -> None:
        record.production = 0.0
        record.operating_hours = 0.0
        record.is_reduction_day = True

"""
Daily simulation engine (Pass 1).

Walks the planning year day by day, planning standard production, deferring
early shipments that cannot be covered, and resolving shortfalls in tiers:

1. Standard production up to the target (Tier 1)
2. Flexing today's production up to the standard cap (Tier 2)
3. Reactive overtime on prior working days (Tier 3)

A shortfall left after Tier 3 is a demand conflict and ends the pass.
"""

from dataclasses import dataclass
from typing import List, Optional
import logging

from flowplan.costs.cost_calculator import PlanCostCalculator
from flowplan.exceptions import DemandConflictError
from flowplan.models.day_record import DayRecord, ShipmentDetail
from flowplan.models.simulation_parameters import SimulationParameters

logger = logging.getLogger(__name__)

# Hours of slack below which a day cannot take more overtime
MIN_OVERTIME_HOURS = 0.01


@dataclass
class PassOneResult:
    """
    Result of the first simulation pass.

    Attributes:
        overtime_hours: Reactive overtime hours added by Tier 3
        days_simulated: Days processed (365 unless a conflict stopped the pass)
        conflict: Demand conflict that terminated the pass, if any
    """
    overtime_hours: float = 0.0
    days_simulated: int = 0
    conflict: Optional[DemandConflictError] = None

    @property
    def success(self) -> bool:
        """Every day's demand was met."""
        return self.conflict is None


def apportion_shipment(details: List[ShipmentDetail], quantity: float) -> List[ShipmentDetail]:
    """
    Split a shipped quantity over scheduled details in order.

    Details are filled one at a time; the last partially fulfilled detail is
    truncated and later ones are dropped.

    Args:
        details: Scheduled shipment details
        quantity: Units actually shipped

    Returns:
        Actual shipment details summing to ``quantity``
    """
    shipped = []
    remaining = quantity
    for detail in details:
        if remaining <= 0:
            break
        take = min(detail.quantity, remaining)
        shipped.append(detail.with_quantity(take))
        remaining -= take
    return shipped


class DailySimulationEngine:
    """
    Sequential Pass 1 simulation over a list of day records.

    The records must already carry the shipment calendar written by the
    shipment scheduler.

    Example:
        engine = DailySimulationEngine(params)
        result = engine.run(records)
        if not result.success:
            print(result.conflict)
    """

    def __init__(self, params: SimulationParameters, cost_calculator: Optional[PlanCostCalculator] = None):
        """
        Initialize simulation engine.

        Args:
            params: Simulation parameters
            cost_calculator: Cost calculator (created from params if None)
        """
        self.params = params
        self.calendar = params.working_calendar
        self.costs = cost_calculator or PlanCostCalculator(params)
        self.tolerance = params.shortfall_tolerance

    def run(self, records: List[DayRecord]) -> PassOneResult:
        """
        Simulate every day in order.

        Args:
            records: Day records (modified in place)

        Returns:
            PassOneResult with the overtime hours accrued and any conflict
        """
        result = PassOneResult()

        for t in range(len(records)):
            try:
                result.overtime_hours += self.simulate_day(records, t)
            except DemandConflictError as e:
                logger.error(str(e))
                result.conflict = e
                result.days_simulated = t + 1
                return result

        result.days_simulated = len(records)
        logger.info(
            f"Pass 1 complete: {result.days_simulated} days, "
            f"{result.overtime_hours:.2f} reactive overtime hours"
        )
        return result

    def simulate_day(self, records: List[DayRecord], t: int) -> float:
        """
        Simulate day ``t``.

        Args:
            records: Day records
            t: Day index

        Returns:
            Overtime hours added on prior days

        Raises:
            DemandConflictError: If the day's shipment cannot be covered
        """
        day = records[t]
        day.inventory_start = records[t - 1].inventory_end if t > 0 else 0.0
        day.production = 0.0
        day.operating_hours = 0.0

        if day.is_working_day and not day.is_exception_day and not day.is_reduction_day:
            day.production, day.operating_hours = self.params.standard_production()

        day.inventory_available = day.inventory_start + day.production
        day.actual_shipment_qty = 0.0
        day.actual_shipment_details = []

        if (
            t < self.params.deferral_window_days
            and day.scheduled_shipment_qty > 0
            and day.inventory_available < day.scheduled_shipment_qty
        ):
            self._defer_shipment(records, t)

        overtime_hours = 0.0
        shortfall = day.scheduled_shipment_qty - day.inventory_available
        if day.scheduled_shipment_qty > 0 and shortfall > 0:
            day.demand_met = False
            shortfall = self._flex_production(day, shortfall)
            if shortfall > self.tolerance:
                shortfall, overtime_hours = self._borrow_overtime(records, t, shortfall)

            if shortfall > self.tolerance:
                day.add_note(f"CRITICAL SHORTFALL: {shortfall:.0f}u")
                day.is_exception_day = True
                self.finalize_day(day)
                raise DemandConflictError(t, shortfall)
            day.demand_met = True

        self.finalize_day(day)
        return overtime_hours

    def finalize_day(self, day: DayRecord) -> None:
        """Ship what is available and settle the day's inventory and holding cost."""
        due = day.scheduled_shipment_qty
        day.actual_shipment_qty = min(day.inventory_available, due) if due > 0 else 0.0
        day.actual_shipment_details = apportion_shipment(
            day.scheduled_shipment_details, day.actual_shipment_qty
        )
        day.inventory_end = day.inventory_available - day.actual_shipment_qty
        day.holding_cost = self.costs.holding_cost(day.inventory_end)

    def _defer_shipment(self, records: List[DayRecord], t: int) -> Optional[int]:
        """
        Move day ``t``'s whole shipment to the next working day in the lookahead.

        Returns:
            Target day index, or None if no working day was found
        """
        day = records[t]
        last_day = min(len(records) - 1, t + self.params.deferral_lookahead_days)

        for target in range(t + 1, last_day + 1):
            if not self.calendar.is_working_day(records[target].date):
                continue

            target_day = records[target]
            for detail in day.scheduled_shipment_details:
                target_day.schedule_shipment(detail)
            logger.warning(
                f"Day {t}: {day.scheduled_shipment_qty:.0f} units exceed available "
                f"{day.inventory_available:.0f}, deferred to day {target}"
            )
            day.clear_schedule()
            day.shipment_deferred = True
            day.add_note(f"Shipment deferred to day {target}.")
            return target

        return None

    def _flex_production(self, day: DayRecord, shortfall: float) -> float:
        """
        Tier 2: raise today's production toward the standard cap.

        Returns:
            Remaining shortfall
        """
        if not (
            self.calendar.is_working_day(day.date)
            and not day.is_reduction_day
            and not day.is_exception_day
        ):
            return shortfall

        params = self.params
        potential_extra = params.max_standard_production - day.production
        if potential_extra <= 0:
            return shortfall

        needed_hours = params.hours_for_units(min(shortfall, potential_extra))
        feasible_hours = min(needed_hours, params.standard_operating_hours - day.operating_hours)
        added = params.whole_units_for_hours(feasible_hours)
        if added <= 0:
            return shortfall

        day.production += added
        day.operating_hours += params.hours_for_units(added)
        day.inventory_available += added
        day.add_note(f"Flexed to max capacity (+{added}u).")
        return shortfall - added

    def _borrow_overtime(self, records: List[DayRecord], t: int, shortfall: float) -> tuple[float, float]:
        """
        Tier 3: add overtime on prior working days, nearest first.

        Each prior day touched is re-finalized together with the days between
        it and ``t`` so inventory stays consistent.

        Returns:
            Tuple of (remaining shortfall, overtime hours added)
        """
        params = self.params
        day = records[t]
        overtime_hours = 0.0

        for p in range(t - 1, -1, -1):
            if shortfall <= self.tolerance:
                break

            prior = records[p]
            if not self.calendar.is_working_day(prior.date) or prior.is_reduction_day:
                continue

            spare_hours = params.max_extended_hours - prior.operating_hours
            if spare_hours <= MIN_OVERTIME_HOURS:
                continue
            capacity = params.whole_units_for_hours(spare_hours)
            if capacity <= 0:
                continue

            added = min(shortfall, capacity)
            hours = params.hours_for_units(added)

            prior.production += added
            prior.operating_hours += hours
            prior.overtime_hours += hours
            prior.is_exception_day = True
            prior.exception_cost += self.costs.overtime_cost(hours)
            prior.add_note(f"Reactive OT: +{hours:.2f}h")
            overtime_hours += hours
            logger.debug(f"Day {t}: borrowed {added:.0f} units from day {p} ({hours:.2f}h overtime)")

            self._refinalize(records, p, t)
            day.inventory_start = records[t - 1].inventory_end
            day.inventory_available = day.inventory_start + day.production
            shortfall -= added

        return shortfall, overtime_hours

    def _refinalize(self, records: List[DayRecord], start: int, stop: int) -> None:
        """Recompute inventory and holding cost for days ``start`` .. ``stop - 1``."""
        for k in range(start, stop):
            record = records[k]
            record.refresh_inventory(records[k - 1].inventory_end if k > 0 else 0.0)
            record.holding_cost = self.costs.holding_cost(record.inventory_end)

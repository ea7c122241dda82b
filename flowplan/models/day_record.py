"""Day record data model: one simulated day of the planning year."""

from dataclasses import asdict, dataclass, field, replace
from datetime import date as Date
from typing import List

from .working_calendar import WorkingCalendar


@dataclass
class ShipmentDetail:
    """
    One source's share of a day's shipment.

    Attributes:
        source: Demand source name
        quantity: Units shipped (or scheduled) for this source
        cycle_length_days: Source cycle length
        start_day: 1-indexed start day chosen for the source
    """
    source: str
    quantity: float
    cycle_length_days: int
    start_day: int

    def with_quantity(self, quantity: float) -> "ShipmentDetail":
        """Copy of this detail with a different quantity."""
        return replace(self, quantity=quantity)


@dataclass
class DayRecord:
    """
    Production, inventory, and cost state of one day.

    Records are created fresh for every run and mutated in place by the
    scheduler, Pass 1 and the corrective passes.

    Attributes:
        day_index: 0-based day of the planning year
        date: Calendar date
        is_working_day: Calendar working day (final: and not a reduction day)
        production: Units produced
        operating_hours: Hours the line ran
        inventory_start: Units carried in from the previous day
        inventory_available: inventory_start + production
        scheduled_shipment_qty: Units scheduled to ship
        scheduled_shipment_details: Per-source breakdown of the schedule
        actual_shipment_qty: Units shipped
        actual_shipment_details: Per-source breakdown of actual shipments
        demand_met: False while (or if) a shortfall is unresolved
        inventory_end: inventory_available - actual_shipment_qty
        holding_cost: Cost of holding inventory_end for one day
        exception_cost: Overtime plus prorated overhead accrued on this day
        overtime_hours: Reactive overtime hours added to this day
        is_exception_day: Overtime production was added on this day
        is_reduction_day: Standard production was removed as slack
        shipment_deferred: Scheduled shipment moved to a later day
        exception_note: Human-readable notes on exceptions
    """
    day_index: int
    date: Date
    is_working_day: bool
    production: float = 0.0
    operating_hours: float = 0.0
    inventory_start: float = 0.0
    inventory_available: float = 0.0
    scheduled_shipment_qty: float = 0.0
    scheduled_shipment_details: List[ShipmentDetail] = field(default_factory=list)
    actual_shipment_qty: float = 0.0
    actual_shipment_details: List[ShipmentDetail] = field(default_factory=list)
    demand_met: bool = True
    inventory_end: float = 0.0
    holding_cost: float = 0.0
    exception_cost: float = 0.0
    overtime_hours: float = 0.0
    is_exception_day: bool = False
    is_reduction_day: bool = False
    shipment_deferred: bool = False
    exception_note: str = ""

    def add_note(self, message: str) -> None:
        """Append a message to the exception note."""
        self.exception_note = f"{self.exception_note}; {message}" if self.exception_note else message

    def clear_schedule(self) -> None:
        """Remove all scheduled shipments from this day."""
        self.scheduled_shipment_qty = 0.0
        self.scheduled_shipment_details = []

    def schedule_shipment(self, detail: ShipmentDetail) -> None:
        """Add a scheduled shipment."""
        self.scheduled_shipment_qty += detail.quantity
        self.scheduled_shipment_details.append(detail)

    def refresh_inventory(self, inventory_start: float) -> None:
        """Recompute the inventory chain for fixed production and shipments."""
        self.inventory_start = inventory_start
        self.inventory_available = self.inventory_start + self.production
        self.inventory_end = self.inventory_available - self.actual_shipment_qty

    def to_dict(self) -> dict:
        """Plain dictionary (dates as ISO strings) for messages and exports."""
        return {
            'day_index': self.day_index,
            'date': self.date.isoformat(),
            'is_working_day': self.is_working_day,
            'production': self.production,
            'operating_hours': self.operating_hours,
            'inventory_start': self.inventory_start,
            'inventory_available': self.inventory_available,
            'scheduled_shipment_qty': self.scheduled_shipment_qty,
            'scheduled_shipment_details': [asdict(d) for d in self.scheduled_shipment_details],
            'actual_shipment_qty': self.actual_shipment_qty,
            'actual_shipment_details': [asdict(d) for d in self.actual_shipment_details],
            'demand_met': self.demand_met,
            'inventory_end': self.inventory_end,
            'holding_cost': self.holding_cost,
            'exception_cost': self.exception_cost,
            'overtime_hours': self.overtime_hours,
            'is_exception_day': self.is_exception_day,
            'is_reduction_day': self.is_reduction_day,
            'shipment_deferred': self.shipment_deferred,
            'exception_note': self.exception_note,
        }

    def __str__(self) -> str:
        """String representation."""
        flags = []
        if self.is_exception_day:
            flags.append("exception")
        if self.is_reduction_day:
            flags.append("reduction")
        if self.shipment_deferred:
            flags.append("deferred")
        flag_str = f" [{', '.join(flags)}]" if flags else ""
        return (
            f"Day {self.day_index} ({self.date}): produced {self.production:.0f}, "
            f"shipped {self.actual_shipment_qty:.0f}/{self.scheduled_shipment_qty:.0f}, "
            f"end inventory {self.inventory_end:.0f}{flag_str}"
        )


def create_day_records(calendar: WorkingCalendar) -> List[DayRecord]:
    """
    Create fresh records for every day of the calendar's planning year.

    Args:
        calendar: Working-day calendar of the planning year

    Returns:
        List of 365 DayRecord objects
    """
    return [
        DayRecord(day_index=i, date=d, is_working_day=calendar.is_working_day(d))
        for i, d in enumerate(calendar.dates())
    ]

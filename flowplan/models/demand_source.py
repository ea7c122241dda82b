"""Demand source data model for recurring customer/city shipments."""

from typing import Optional
import logging
import math

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class DemandSource(BaseModel):
    """
    A recurring shipment obligation (a "city").

    A source ships the same quantity every ``cycle_length_days`` days,
    starting on a 1-indexed start day chosen by the shipment scheduler.

    Attributes:
        name: Destination name
        quantity: Units per shipment
        cycle_length_days: Days between repeated shipments
        preferred_start_day: Optional 1-indexed start day requested by the planner
    """
    name: str = Field(..., description="Destination name")
    quantity: float = Field(..., description="Units per shipment", gt=0)
    cycle_length_days: float = Field(
        ...,
        description="Days between repeated shipments",
        gt=0
    )
    preferred_start_day: Optional[int] = Field(
        None,
        description="Preferred 1-indexed start day within the cycle"
    )

    model_config = ConfigDict(frozen=True)

    @property
    def cycle(self) -> int:
        """Cycle length rounded half-up to whole days (at least 1)."""
        return max(1, math.floor(self.cycle_length_days + 0.5))

    @property
    def effective_preferred_day(self) -> Optional[int]:
        """
        Preferred start day if it lies within ``[1, cycle]``.

        Out-of-range preferences are ignored with a warning.
        """
        day = self.preferred_start_day
        if day is None or day <= 0:
            return None
        if day > self.cycle:
            logger.warning(
                f"Ignoring preferred start day {day} for {self.name}: "
                f"outside cycle of {self.cycle} days"
            )
            return None
        return day

    def shipment_days(self, start_day: int, horizon_days: int = 365) -> range:
        """
        0-indexed days on which this source ships for a given start day.

        Args:
            start_day: 1-indexed start day
            horizon_days: Number of days in the planning horizon

        Returns:
            Range of day indices
        """
        return range(start_day - 1, horizon_days, self.cycle)

    def __str__(self) -> str:
        """String representation."""
        preferred = f", preferred day {self.preferred_start_day}" if self.preferred_start_day else ""
        return f"{self.name}: {self.quantity:.0f} units every {self.cycle} days{preferred}"

"""Production planning module.

Shipment scheduling, the day-by-day production simulation, and the
corrective passes that remove unneeded production days.
"""

from .shipment_scheduler import (
    ShipmentScheduler,
    ShipmentScheduleResult,
    apply_start_days,
    fallback_start_day,
)
from .simulation import DailySimulationEngine, PassOneResult, apportion_shipment
from .corrective import (
    ProductionSmoother,
    SmoothingResult,
    is_feasible_without,
    minimum_safe_inventory,
    propagate_inventory,
)

__all__ = [
    "ShipmentScheduler",
    "ShipmentScheduleResult",
    "apply_start_days",
    "fallback_start_day",
    "DailySimulationEngine",
    "PassOneResult",
    "apportion_shipment",
    "ProductionSmoother",
    "SmoothingResult",
    "is_feasible_without",
    "minimum_safe_inventory",
    "propagate_inventory",
]

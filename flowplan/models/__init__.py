"""Data models for annual shipment and production planning."""

from .demand_source import DemandSource
from .product_variant import ProductVariant, weighted_average_unit_cost
from .working_calendar import (
    HORIZON_DAYS,
    WorkingCalendar,
    easter_sunday,
    horizon_dates,
    us_federal_holidays,
)
from .simulation_parameters import SimulationParameters, default_product_variants
from .day_record import DayRecord, ShipmentDetail, create_day_records

__all__ = [
    # Demand
    "DemandSource",
    # Products and costs
    "ProductVariant",
    "weighted_average_unit_cost",
    "default_product_variants",
    # Calendar
    "HORIZON_DAYS",
    "WorkingCalendar",
    "easter_sunday",
    "horizon_dates",
    "us_federal_holidays",
    # Simulation
    "SimulationParameters",
    "DayRecord",
    "ShipmentDetail",
    "create_day_records",
]

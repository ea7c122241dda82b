"""flowplan: annual shipment scheduling and production simulation.

Typical use:

    from flowplan import run_annual_plan
    from flowplan.parsers import parse_payload

    outcome = run_annual_plan(parse_payload(payload))
    print(outcome.summary)
"""

from .exceptions import (
    DemandConflictError,
    ParameterValidationError,
    PlanningError,
    SolverUnavailableError,
)
from .models import DayRecord, DemandSource, SimulationParameters, WorkingCalendar
from .workflows import PlanConfig, PlanOutcome, run_annual_plan, handle_message

__version__ = "0.1.0"

__all__ = [
    "DemandConflictError",
    "ParameterValidationError",
    "PlanningError",
    "SolverUnavailableError",
    "DayRecord",
    "DemandSource",
    "SimulationParameters",
    "WorkingCalendar",
    "PlanConfig",
    "PlanOutcome",
    "run_annual_plan",
    "handle_message",
]

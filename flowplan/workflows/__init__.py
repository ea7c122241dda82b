"""Workflows for annual planning runs.

- AnnualPlanWorkflow: schedule, simulate, correct and finalize one year
- PlanWorker / handle_message: start/complete/error message boundary
"""

from .annual_plan import (
    AnnualPlanWorkflow,
    PlanConfig,
    PlanOutcome,
    PlanStage,
    run_annual_plan,
)
from .worker import PlanWorker, handle_message

__all__ = [
    "AnnualPlanWorkflow",
    "PlanConfig",
    "PlanOutcome",
    "PlanStage",
    "run_annual_plan",
    "PlanWorker",
    "handle_message",
]

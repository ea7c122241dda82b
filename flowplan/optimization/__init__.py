"""Optimization module for shipment scheduling.

This module provides the Pyomo-based peak-load assignment model that picks a
cyclic start day for every demand source, plus the solver configuration and
the solver collaborator interface used by the shipment scheduler.
"""

from .solver_config import (
    SolverConfig,
    SolverType,
    SolverInfo,
)
from .base_model import (
    BaseOptimizationModel,
    OptimizationResult,
)
from .result_schema import (
    ShipmentAssignment,
    ShipmentScheduleSolution,
)
from .shipment_problem import (
    ShipmentProblem,
    ShipmentSolver,
    SolverOutcome,
    candidate_start_days,
    candidate_step,
    variable_name,
)
from .shipment_model import (
    PyomoShipmentSolver,
    ShipmentScheduleModel,
)

__all__ = [
    # Solver configuration
    "SolverConfig",
    "SolverType",
    "SolverInfo",
    # Base model
    "BaseOptimizationModel",
    "OptimizationResult",
    # Shipment assignment
    "ShipmentAssignment",
    "ShipmentScheduleSolution",
    "ShipmentProblem",
    "ShipmentSolver",
    "SolverOutcome",
    "candidate_start_days",
    "candidate_step",
    "variable_name",
    "PyomoShipmentSolver",
    "ShipmentScheduleModel",
]

"""Test fixtures for shipment scheduling tests."""

from .solver_fakes import (
    FailingSolver,
    FirstCandidateSolver,
    StaticSolver,
    UnavailableSolver,
    create_mock_solver_config,
    unavailable_solver_factory,
)

__all__ = [
    'FailingSolver',
    'FirstCandidateSolver',
    'StaticSolver',
    'UnavailableSolver',
    'create_mock_solver_config',
    'unavailable_solver_factory',
]

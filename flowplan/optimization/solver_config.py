"""Solver Configuration - detection and settings for Pyomo MILP solvers."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional
import logging

from pyomo.environ import SolverFactory

from flowplan.exceptions import SolverUnavailableError

logger = logging.getLogger(__name__)


class SolverType(str, Enum):
    """Supported MILP solvers, in order of preference."""
    APPSI_HIGHS = "appsi_highs"
    HIGHS = "highs"
    CBC = "cbc"
    GLPK = "glpk"


@dataclass
class SolverInfo:
    """
    Availability of one solver.

    Attributes:
        name: Pyomo solver name
        available: Solver can be created by SolverFactory
        version: Reported version (if known)
        path: Executable path (if applicable)
        tested: Availability was checked
        works: Availability check succeeded
    """
    name: str
    available: bool
    version: Optional[str] = None
    path: Optional[str] = None
    tested: bool = False
    works: bool = False

    def __str__(self) -> str:
        """String representation."""
        status = "✓ available" if self.available else "✗ unavailable"
        if self.tested:
            status += " (tested)" if self.works else " (test failed)"
        return f"{self.name.upper()}: {status}"


class SolverConfig:
    """HiGHS MIP settings plus detection of the best installed solver."""

    HIGHS_MIP_FAST = {
        'presolve': 'on',
        'parallel': 'on',
    }

    PREFERENCE_ORDER = [
        SolverType.APPSI_HIGHS,
        SolverType.HIGHS,
        SolverType.CBC,
        SolverType.GLPK,
    ]

    def __init__(self):
        self._solver_info: Dict[str, SolverInfo] = {}

    def detect_solver(self, solver_name: str) -> SolverInfo:
        """
        Check whether a solver can be created.

        Args:
            solver_name: Pyomo solver name

        Returns:
            SolverInfo (cached after the first check)
        """
        if solver_name in self._solver_info:
            return self._solver_info[solver_name]

        try:
            solver = SolverFactory(solver_name)
            available = bool(solver.available(exception_flag=False))
        except Exception as e:
            logger.debug(f"Solver {solver_name} could not be created: {e}")
            available = False

        info = SolverInfo(name=solver_name, available=available, tested=True, works=available)
        self._solver_info[solver_name] = info
        return info

    def detect_available_solvers(self) -> List[SolverInfo]:
        """Availability of every supported solver."""
        return [self.detect_solver(s.value) for s in self.PREFERENCE_ORDER]

    def get_best_available_solver(self) -> str:
        """
        Name of the most preferred installed solver.

        Raises:
            SolverUnavailableError: If no supported solver is installed
        """
        for solver_type in self.PREFERENCE_ORDER:
            if self.detect_solver(solver_type.value).available:
                return solver_type.value
        raise SolverUnavailableError(
            "No MILP solver available. Install highspy (pip install highspy) or CBC."
        )

    def create_solver(self, solver_name: Optional[str] = None, options: Optional[Dict[str, Any]] = None):
        """
        Create a legacy-interface Pyomo solver.

        Args:
            solver_name: Solver to create (None = best available)
            options: Solver options

        Returns:
            Pyomo solver instance

        Raises:
            SolverUnavailableError: If the solver is not installed
        """
        name = solver_name or self.get_best_available_solver()
        if not self.detect_solver(name).available:
            raise SolverUnavailableError(f"Solver '{name}' is not available")

        solver = SolverFactory(name)
        for key, val in (options or {}).items():
            solver.options[key] = val
        return solver


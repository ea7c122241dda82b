"""Base class for Pyomo optimization models.

Subclasses build a ConcreteModel and turn a solved model into a pydantic
solution. The base class picks the solver, maps limits onto each solver's
option names, solves without loading solutions, and only loads and extracts
values once the termination condition is acceptable.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
import logging
import math
import time

from pydantic import BaseModel, ValidationError
from pyomo.environ import ConcreteModel, Var, value
from pyomo.opt import SolverStatus, TerminationCondition

from .solver_config import SolverConfig, SolverType

logger = logging.getLogger(__name__)

# Termination conditions that leave a usable incumbent
FEASIBLE_CONDITIONS = (
    TerminationCondition.optimal,
    TerminationCondition.feasible,
    TerminationCondition.maxTimeLimit,
)

# solver -> (time limit option, relative MIP gap option)
LIMIT_OPTION_NAMES = {
    SolverType.CBC.value: ('seconds', 'ratio'),
    SolverType.GLPK.value: ('tmlim', 'mipgap'),
    SolverType.HIGHS.value: ('time_limit', 'mip_rel_gap'),
}


@dataclass
class OptimizationResult:
    """
    Outcome of one model solve.

    Attributes:
        success: A usable solution was found
        objective_value: Objective of the incumbent
        solver_status: Legacy solver status (None for APPSI solves)
        termination_condition: Termination condition in legacy terms
        solve_time_seconds: Wall time of the solve call
        solver_name: Solver used
        gap: Relative MIP gap when both bounds are known
        num_variables: Variables in the model
        num_constraints: Constraints in the model
        num_integer_vars: Binary and integer variables
        infeasibility_message: Why no solution was loaded
        metadata: Dump of the extracted solution
    """
    success: bool
    objective_value: Optional[float] = None
    solver_status: Optional[SolverStatus] = None
    termination_condition: Optional[TerminationCondition] = None
    solve_time_seconds: Optional[float] = None
    solver_name: Optional[str] = None
    gap: Optional[float] = None
    num_variables: int = 0
    num_constraints: int = 0
    num_integer_vars: int = 0
    infeasibility_message: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def is_optimal(self) -> bool:
        return self.success and self.termination_condition == TerminationCondition.optimal

    def is_feasible(self) -> bool:
        """Optimal, or stopped early with a valid incumbent."""
        return self.success and self.termination_condition in FEASIBLE_CONDITIONS

    def __str__(self) -> str:
        """String representation."""
        status = self.termination_condition or "not solved"
        text = f"OptimizationResult: {status}"
        if self.objective_value is not None:
            text += f", objective = {self.objective_value:,.2f}"
        if self.solve_time_seconds is not None:
            text += f", time = {self.solve_time_seconds:.2f}s"
        return text


def relative_gap(objective: Optional[float], bound: Optional[float]) -> Optional[float]:
    """Relative gap between incumbent and bound, None if either is unknown."""
    if objective is None or bound is None or not math.isfinite(bound) or abs(objective) <= 1e-10:
        return None
    return abs((objective - bound) / objective)


class BaseOptimizationModel(ABC):
    """
    Shared build/solve/extract workflow for Pyomo models.

    Subclasses implement build_model() and extract_solution().

    Example:
        model = ShipmentScheduleModel(problem)
        result = model.solve()
        if result.is_feasible():
            solution = model.get_solution()
    """

    def __init__(self, solver_config: Optional[SolverConfig] = None):
        """
        Initialize optimization model.

        Args:
            solver_config: Solver detection and creation (default config if None)
        """
        self.solver_config = solver_config or SolverConfig()
        self.model: Optional[ConcreteModel] = None
        self.result: Optional[OptimizationResult] = None
        self.solution: Optional[BaseModel] = None

    @abstractmethod
    def build_model(self) -> ConcreteModel:
        """Construct the Pyomo model."""

    @abstractmethod
    def extract_solution(self, model: ConcreteModel) -> BaseModel:
        """
        Read a validated solution from the solved model.

        Raises:
            ValidationError: If the values break the solution schema
        """

    def solve(
        self,
        solver_name: Optional[str] = None,
        solver_options: Optional[Dict[str, Any]] = None,
        tee: bool = False,
        time_limit_seconds: Optional[float] = None,
        mip_gap: Optional[float] = None,
    ) -> OptimizationResult:
        """
        Build the model and solve it.

        Args:
            solver_name: Solver to use (None = best available)
            solver_options: Extra options for legacy solvers
            tee: Stream solver output
            time_limit_seconds: Solve time limit (None = no limit)
            mip_gap: Relative MIP gap tolerance

        Returns:
            OptimizationResult

        Raises:
            SolverUnavailableError: If the requested (or any) solver is not installed
        """
        self.model = self.build_model()

        name = solver_name or self.solver_config.get_best_available_solver()
        if name == SolverType.APPSI_HIGHS.value:
            return self._solve_appsi_highs(tee, time_limit_seconds, mip_gap)

        options = dict(solver_options or {})
        if name == SolverType.HIGHS.value:
            options.update(SolverConfig.HIGHS_MIP_FAST)
        time_option, gap_option = LIMIT_OPTION_NAMES.get(name, (None, None))
        if time_option and time_limit_seconds is not None:
            options[time_option] = time_limit_seconds
        if gap_option and mip_gap is not None:
            options[gap_option] = mip_gap
        solver = self.solver_config.create_solver(name, options)

        started = time.time()
        results = solver.solve(self.model, tee=tee, load_solutions=False)
        result = self._legacy_result(results, name, time.time() - started)
        self.result = result

        if result.is_feasible():
            self.model.solutions.load_from(results)
            if result.objective_value is None:
                result.objective_value = value(self.model.obj)
            self._extract_into(result)
        return result

    def _solve_appsi_highs(
        self,
        tee: bool,
        time_limit_seconds: Optional[float],
        mip_gap: Optional[float],
    ) -> OptimizationResult:
        """Solve through the APPSI HiGHS interface."""
        from pyomo.contrib.appsi.base import TerminationCondition as AppsiTC
        from pyomo.contrib.appsi.solvers import Highs

        solver = Highs()
        solver.config.load_solution = False
        solver.config.stream_solver = tee
        if time_limit_seconds:
            solver.config.time_limit = time_limit_seconds
        if mip_gap is not None:
            solver.config.mip_gap = mip_gap
        for key, val in SolverConfig.HIGHS_MIP_FAST.items():
            solver.highs_options[key] = val

        started = time.time()
        results = solver.solve(self.model)
        elapsed = time.time() - started

        objective = results.best_feasible_objective
        condition = {
            AppsiTC.optimal: TerminationCondition.optimal,
            AppsiTC.infeasible: TerminationCondition.infeasible,
            AppsiTC.unbounded: TerminationCondition.unbounded,
            AppsiTC.maxTimeLimit: TerminationCondition.maxTimeLimit,
        }.get(results.termination_condition, TerminationCondition.unknown)
        success = condition == TerminationCondition.optimal or (
            condition == TerminationCondition.maxTimeLimit and objective is not None
        )

        result = OptimizationResult(
            success=success,
            objective_value=objective,
            termination_condition=condition,
            solve_time_seconds=elapsed,
            solver_name=SolverType.APPSI_HIGHS.value,
            gap=relative_gap(objective, results.best_objective_bound),
            **self._model_size(),
        )
        self.result = result

        if success:
            results.solution_loader.load_vars()
            self._extract_into(result)
        else:
            result.infeasibility_message = f"Solver failed - Termination: {results.termination_condition}"
        return result

    def _legacy_result(self, results, solver_name: str, solve_time: float) -> OptimizationResult:
        """Translate SolverFactory results (minimization: upper bound is the incumbent)."""
        status = results.solver.status
        condition = results.solver.termination_condition
        success = status in (SolverStatus.ok, SolverStatus.warning) and condition in FEASIBLE_CONDITIONS

        objective = getattr(results.problem, 'upper_bound', None)
        if objective is not None and math.isinf(objective):
            objective = None

        message = None
        if condition == TerminationCondition.infeasible:
            message = "Model is infeasible."
        elif not success:
            message = f"Solver failed - Status: {status}, Termination: {condition}"

        return OptimizationResult(
            success=success,
            objective_value=objective,
            solver_status=status,
            termination_condition=condition,
            solve_time_seconds=solve_time,
            solver_name=solver_name,
            gap=relative_gap(objective, getattr(results.problem, 'lower_bound', None)),
            infeasibility_message=message,
            **self._model_size(),
        )

    def _extract_into(self, result: OptimizationResult) -> None:
        try:
            self.solution = self.extract_solution(self.model)
        except ValidationError as ve:
            logger.error(f"Solution violates schema: {ve}")
            raise
        result.metadata.update(self.solution.model_dump(mode='json'))

    def _model_size(self) -> Dict[str, int]:
        if self.model is None:
            return {'num_variables': 0, 'num_constraints': 0, 'num_integer_vars': 0}
        return {
            'num_variables': self.model.nvariables(),
            'num_constraints': self.model.nconstraints(),
            'num_integer_vars': sum(
                1 for var in self.model.component_data_objects(Var, active=True)
                if var.is_integer() or var.is_binary()
            ),
        }

    def get_solution(self) -> Optional[BaseModel]:
        """Solution of the last solve (None if not solved or no solution)."""
        return self.solution

"""Pyomo model for the peak-load shipment assignment problem.

ShipmentScheduleModel turns a ShipmentProblem into a MILP. PyomoShipmentSolver
is the default solver collaborator of the shipment scheduler: it builds the
model, solves it with the best available solver, and reports a SolverOutcome.
"""

from typing import Dict, Optional
import logging

from pyomo.environ import (
    Binary,
    ConcreteModel,
    Constraint,
    NonNegativeReals,
    Objective,
    Set,
    Var,
    minimize,
    value,
)

from .base_model import BaseOptimizationModel, OptimizationResult
from .result_schema import ShipmentAssignment, ShipmentScheduleSolution
from .shipment_problem import PEAK_VARIABLE, ShipmentProblem, SolverOutcome, variable_name
from .solver_config import SolverConfig

logger = logging.getLogger(__name__)


class ShipmentScheduleModel(BaseOptimizationModel):
    """
    MILP choosing one start day per demand source to minimize peak daily load.

    Variables:
        x[i, d]: 1 if source i starts on candidate day d
        peak: Peak daily load Z (continuous, >= 0)

    Constraints:
        select_one[i]: exactly one candidate per source
        preferred_day[i]: preferred candidate forced to 1 (sources with a preference)
        day_load[t]: load landing on day t does not exceed peak
    """

    def __init__(self, problem: ShipmentProblem, solver_config: Optional[SolverConfig] = None):
        """
        Initialize shipment schedule model.

        Args:
            problem: Candidate sets and day load terms
            solver_config: Solver configuration
        """
        super().__init__(solver_config)
        self.problem = problem

    def build_model(self) -> ConcreteModel:
        """Build the Pyomo model."""
        problem = self.problem
        model = ConcreteModel(name="ShipmentSchedule")

        model.sources = Set(initialize=sorted(problem.candidates), ordered=True)
        model.candidates = Set(initialize=problem.candidate_keys(), dimen=2, ordered=True)
        model.days = Set(initialize=sorted(problem.day_loads), ordered=True)
        model.preferred_sources = Set(
            initialize=[i for i, d in problem.preferred.items() if d is not None],
            ordered=True,
        )

        model.x = Var(model.candidates, within=Binary)
        model.peak = Var(within=NonNegativeReals)

        def select_one_rule(m, i):
            return sum(m.x[i, d] for d in problem.candidates[i]) == 1

        model.select_one = Constraint(model.sources, rule=select_one_rule)

        def preferred_day_rule(m, i):
            return m.x[i, problem.preferred[i]] == 1

        model.preferred_day = Constraint(model.preferred_sources, rule=preferred_day_rule)

        def day_load_rule(m, t):
            return sum(q * m.x[i, d] for i, d, q in problem.day_loads[t]) - m.peak <= 0

        model.day_load = Constraint(model.days, rule=day_load_rule)

        model.obj = Objective(expr=model.peak, sense=minimize)
        return model

    def extract_solution(self, model: ConcreteModel) -> ShipmentScheduleSolution:
        """Read the selected start days and peak load."""
        values = self.variable_values(model)

        assignments = []
        for i, source in enumerate(self.problem.sources):
            start_day = self.problem.selected_start_day(i, values)
            if start_day is None:
                start_day = self.problem.preferred.get(i) or 1
            assignments.append(ShipmentAssignment(
                source_index=i,
                source=source.name,
                start_day=start_day,
                cycle_length_days=source.cycle,
                quantity=source.quantity,
            ))

        return ShipmentScheduleSolution(
            peak_demand=max(0.0, values[PEAK_VARIABLE]),
            assignments=assignments,
            num_candidates=self.problem.num_candidates,
        )

    @staticmethod
    def variable_values(model: ConcreteModel) -> Dict[str, float]:
        """Primal value per LP variable name (x_<source>_<day> and Z)."""
        values = {
            variable_name(i, d): value(model.x[i, d], exception=False) or 0.0
            for i, d in model.candidates
        }
        values[PEAK_VARIABLE] = value(model.peak, exception=False) or 0.0
        return values


class PyomoShipmentSolver:
    """
    Default solver collaborator backed by Pyomo.

    Example:
        solver = PyomoShipmentSolver(solver_name="appsi_highs")
        outcome = solver.solve(ShipmentProblem.from_sources(sources))
        if outcome.accepted:
            print(outcome.peak_demand)
    """

    def __init__(
        self,
        solver_name: Optional[str] = None,
        solver_config: Optional[SolverConfig] = None,
        time_limit_seconds: Optional[float] = None,
        mip_gap: Optional[float] = None,
        tee: bool = False,
    ):
        """
        Initialize the solver collaborator.

        Args:
            solver_name: Solver to use (None = best available)
            solver_config: Solver configuration (detection is cached per config)
            time_limit_seconds: Solve time limit (None = no limit)
            mip_gap: MIP gap tolerance
            tee: Stream solver output

        Raises:
            SolverUnavailableError: If no usable solver is installed
        """
        self.solver_config = solver_config or SolverConfig()
        self.solver_name = solver_name or self.solver_config.get_best_available_solver()
        self.time_limit_seconds = time_limit_seconds
        self.mip_gap = mip_gap
        self.tee = tee
        self.last_result: Optional[OptimizationResult] = None

    def solve(self, problem: ShipmentProblem) -> SolverOutcome:
        """
        Build and solve the model for ``problem``.

        Returns:
            SolverOutcome with status "Optimal", "Feasible", or the termination condition

        Raises:
            SolverUnavailableError: If the configured solver is not installed
        """
        model = ShipmentScheduleModel(problem, self.solver_config)
        result = model.solve(
            solver_name=self.solver_name,
            tee=self.tee,
            time_limit_seconds=self.time_limit_seconds,
            mip_gap=self.mip_gap,
        )
        self.last_result = result
        logger.info(
            f"Shipment model ({problem.num_candidates} candidates, "
            f"{len(problem.day_loads)} load constraints): {result}"
        )

        if result.is_optimal():
            status = "Optimal"
        elif result.is_feasible():
            status = "Feasible"
        else:
            status = str(result.termination_condition or "Error")

        if not result.is_feasible():
            return SolverOutcome(status=status, message=result.infeasibility_message)

        return SolverOutcome(
            status=status,
            variable_values=ShipmentScheduleModel.variable_values(model.model),
        )

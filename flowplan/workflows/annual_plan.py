"""Annual plan workflow.

Orchestrates one planning run over the 365-day horizon:

    1. Create fresh day records from the working calendar
    2. Schedule shipments (MILP with deterministic fallback)
    3. Pass 1: day-by-day simulation with tiered shortfall resolution
    4. Corrective passes: forward slack removal, backward overtime offset
    5. Finalize working-day flags and holding costs

A demand conflict stops the run after step 3 and is reported with the
partial records. Any other exception is reported as a crash tagged with the
stage it happened in.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional
import logging

from flowplan.analysis.plan_summary import DEFAULT_STRESS_CV, PlanSummary
from flowplan.costs.cost_calculator import PlanCostCalculator
from flowplan.costs.cost_finalizer import CostFinalizer
from flowplan.models.day_record import DayRecord, create_day_records
from flowplan.models.simulation_parameters import SimulationParameters
from flowplan.optimization.shipment_model import PyomoShipmentSolver
from flowplan.optimization.shipment_problem import ShipmentSolver
from flowplan.production.corrective import ProductionSmoother, SmoothingResult
from flowplan.production.shipment_scheduler import ShipmentScheduler, ShipmentScheduleResult
from flowplan.production.simulation import DailySimulationEngine, PassOneResult

logger = logging.getLogger(__name__)


class PlanStage(Enum):
    """Stage a planning run has reached."""
    INITIALIZING = "initializing"
    SCHEDULING = "scheduling"
    SIMULATING = "simulating"
    CORRECTING = "correcting"
    FINALIZING = "finalizing"
    COMPLETE = "complete"


@dataclass
class PlanConfig:
    """Configuration for a planning run.

    Attributes:
        solver_name: Solver to use (None = best available)
        solve_time_limit: Maximum solve time in seconds (None = no limit)
        mip_gap_tolerance: MIP gap tolerance (None = solver default)
        tee: Stream solver output
        stress_cv: Demand variation for the overtime stress factor
    """
    solver_name: Optional[str] = None
    solve_time_limit: Optional[float] = None
    mip_gap_tolerance: Optional[float] = None
    tee: bool = False
    stress_cv: float = DEFAULT_STRESS_CV

    def __post_init__(self):
        """Validate configuration."""
        if self.solve_time_limit is not None and self.solve_time_limit <= 0:
            raise ValueError(f"solve_time_limit must be positive, got {self.solve_time_limit}")
        if self.mip_gap_tolerance is not None and not 0 <= self.mip_gap_tolerance < 1:
            raise ValueError(f"mip_gap_tolerance must be in [0, 1), got {self.mip_gap_tolerance}")
        if self.stress_cv < 0:
            raise ValueError(f"stress_cv must be non-negative, got {self.stress_cv}")

    def create_solver(self) -> ShipmentSolver:
        """Default Pyomo solver collaborator for this configuration."""
        return PyomoShipmentSolver(
            solver_name=self.solver_name,
            time_limit_seconds=self.solve_time_limit,
            mip_gap=self.mip_gap_tolerance,
            tee=self.tee,
        )


@dataclass
class PlanOutcome:
    """Result of a planning run.

    Attributes:
        records: Day records (partial after a conflict or crash)
        error: Error message if the run did not complete
        stage: Last stage reached
        schedule: Shipment schedule result (None if scheduling was skipped)
        pass_one: Pass 1 result
        smoothing: Corrective pass result
        summary: Summary metrics (None after a crash)
    """
    records: List[DayRecord] = field(default_factory=list)
    error: Optional[str] = None
    stage: PlanStage = PlanStage.INITIALIZING
    schedule: Optional[ShipmentScheduleResult] = None
    pass_one: Optional[PassOneResult] = None
    smoothing: Optional[SmoothingResult] = None
    summary: Optional[PlanSummary] = None

    @property
    def success(self) -> bool:
        return self.error is None

    def to_message(self) -> Dict[str, Any]:
        """
        Output message of the run.

        Returns:
            {"type": "complete", "results": [...]} on success, otherwise
            {"type": "error", "message": ..., "results": [...]} (results
            omitted when no records exist)
        """
        results = [record.to_dict() for record in self.records]
        if self.error is None:
            return {"type": "complete", "results": results}

        message: Dict[str, Any] = {"type": "error", "message": self.error}
        if self.records:
            message["results"] = results
        return message


class AnnualPlanWorkflow:
    """Runs one annual planning simulation.

    Example:
        workflow = AnnualPlanWorkflow(params)
        outcome = workflow.execute()
        if outcome.success:
            print(outcome.summary)
    """

    def __init__(
        self,
        params: SimulationParameters,
        config: Optional[PlanConfig] = None,
        scheduler: Optional[ShipmentScheduler] = None,
    ):
        """Initialize workflow.

        Args:
            params: Validated simulation parameters
            config: Run configuration (solver selection and limits)
            scheduler: Shipment scheduler (built from config if None)
        """
        self.params = params
        self.config = config or PlanConfig()
        self.scheduler = scheduler or ShipmentScheduler(solver_factory=self.config.create_solver)
        self.costs = PlanCostCalculator(params)

    def execute(self) -> PlanOutcome:
        """Execute the complete run.

        Returns:
            PlanOutcome; errors are reported on the outcome, never raised
        """
        outcome = PlanOutcome()

        try:
            logger.info(
                f"Starting annual plan: {len(self.params.demand_sources)} demand sources, "
                f"{self.params.working_calendar.num_working_days} working days"
            )
            outcome.records = create_day_records(self.params.working_calendar)

            if not self.params.demand_sources:
                logger.info("No demand sources, returning an empty plan")
                outcome.stage = PlanStage.COMPLETE
                outcome.summary = self._summarize(outcome)
                return outcome

            outcome.stage = PlanStage.SCHEDULING
            outcome.schedule = self.scheduler.schedule(self.params.demand_sources, outcome.records)

            outcome.stage = PlanStage.SIMULATING
            engine = DailySimulationEngine(self.params, self.costs)
            outcome.pass_one = engine.run(outcome.records)

            if outcome.pass_one.success:
                outcome.stage = PlanStage.CORRECTING
                smoother = ProductionSmoother(self.params)
                outcome.smoothing = smoother.smooth(outcome.records, outcome.pass_one.overtime_hours)
            else:
                outcome.error = str(outcome.pass_one.conflict)

            outcome.stage = PlanStage.FINALIZING
            CostFinalizer(self.params, self.costs).finalize(outcome.records)

            if outcome.success:
                outcome.stage = PlanStage.COMPLETE
            outcome.summary = self._summarize(outcome)
            logger.info(str(outcome.summary))
            return outcome

        except Exception as e:
            logger.error(f"Crash at {outcome.stage.value}: {e}", exc_info=True)
            outcome.error = f"Worker crash: {e}"
            return outcome

    def _summarize(self, outcome: PlanOutcome) -> PlanSummary:
        schedule = outcome.schedule
        return PlanSummary.summarize(
            outcome.records,
            self.params,
            schedule_status=schedule.status if schedule else None,
            peak_demand=schedule.peak_demand if schedule else None,
            stress_cv=self.config.stress_cv,
        )


def run_annual_plan(
    params: SimulationParameters,
    config: Optional[PlanConfig] = None,
    solver: Optional[ShipmentSolver] = None,
) -> PlanOutcome:
    """
    Run one annual plan.

    Args:
        params: Validated simulation parameters
        config: Run configuration
        solver: Solver collaborator (default: Pyomo solver built from config)

    Returns:
        PlanOutcome
    """
    config = config or PlanConfig()
    scheduler = ShipmentScheduler(solver=solver, solver_factory=config.create_solver)
    return AnnualPlanWorkflow(params, config, scheduler).execute()

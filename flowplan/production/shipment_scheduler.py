"""
Shipment scheduler for choosing cyclic start days of demand sources.

The scheduler solves the peak-load assignment MILP through an injected
solver collaborator. When the solver cannot be loaded, errors, or returns
an unusable status, it falls back to a deterministic linear spread. Solver
errors never reach the caller.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence
import logging
import math
import re

from flowplan.exceptions import SolverUnavailableError
from flowplan.models.day_record import DayRecord, ShipmentDetail
from flowplan.models.demand_source import DemandSource
from flowplan.optimization.shipment_model import PyomoShipmentSolver
from flowplan.optimization.shipment_problem import ShipmentProblem, ShipmentSolver

logger = logging.getLogger(__name__)

STATUS_OPTIMAL = "optimal"
FALLBACK_PEAK_DEMAND = -1.0


@dataclass
class ShipmentScheduleResult:
    """
    Outcome of shipment scheduling.

    Attributes:
        status: "optimal" or "fallback_<reason>"
        peak_demand: Solved peak daily load, or -1 for the fallback
        start_days: Chosen 1-indexed start day per source (input order)
    """
    status: str
    peak_demand: float
    start_days: List[int] = field(default_factory=list)

    @property
    def used_fallback(self) -> bool:
        """Schedule came from the heuristic fallback."""
        return self.status.startswith("fallback_")

    def __str__(self) -> str:
        peak = "n/a" if self.used_fallback else f"{self.peak_demand:.0f}"
        return f"ShipmentSchedule: {self.status}, peak demand {peak}, {len(self.start_days)} sources"


def fallback_start_day(source: DemandSource, source_index: int, num_sources: int) -> int:
    """
    Deterministic start day used when no solver solution is available.

    Sources are spread linearly across the cycle: source ``i`` of ``n`` starts
    on ``floor((i / n) * cycle) + 1``, unless it has a valid preferred day.
    """
    preferred = source.effective_preferred_day
    if preferred is not None:
        return preferred
    ratio = source_index / max(1, num_sources)
    return math.floor(ratio * source.cycle) + 1


def apply_start_days(
    sources: Sequence[DemandSource],
    start_days: Sequence[int],
    records: List[DayRecord],
) -> None:
    """
    Reset and fill the scheduled shipments of ``records``.

    Args:
        sources: Demand sources
        start_days: 1-indexed start day per source
        records: Day records (modified in place)
    """
    for record in records:
        record.clear_schedule()

    for source, start_day in zip(sources, start_days):
        for t in source.shipment_days(start_day, len(records)):
            records[t].schedule_shipment(ShipmentDetail(
                source=source.name,
                quantity=source.quantity,
                cycle_length_days=source.cycle,
                start_day=start_day,
            ))


class ShipmentScheduler:
    """
    Chooses start days for demand sources and writes the shipment calendar.

    Example:
        scheduler = ShipmentScheduler()
        result = scheduler.schedule(sources, records)
        print(result.status, result.peak_demand)
    """

    def __init__(
        self,
        solver: Optional[ShipmentSolver] = None,
        solver_factory: Callable[[], ShipmentSolver] = PyomoShipmentSolver,
    ):
        """
        Initialize shipment scheduler.

        Args:
            solver: Solver collaborator (created from solver_factory if None)
            solver_factory: Creates the solver on first use
        """
        self._solver = solver
        self._solver_factory = solver_factory

    def schedule(self, sources: Sequence[DemandSource], records: List[DayRecord]) -> ShipmentScheduleResult:
        """
        Schedule shipments for all sources onto the day records.

        Args:
            sources: Demand sources (order drives staggering and the fallback)
            records: Day records (scheduled shipment fields are overwritten)

        Returns:
            ShipmentScheduleResult
        """
        sources = list(sources)

        try:
            solver = self._load_solver()
        except Exception as e:
            logger.warning(f"Solver could not be loaded: {e}")
            return self.run_fallback(sources, records, "solver_load_failed")

        try:
            problem = ShipmentProblem.from_sources(sources, horizon_days=len(records))
            outcome = solver.solve(problem)
        except SolverUnavailableError as e:
            logger.warning(f"Solver unavailable: {e}")
            return self.run_fallback(sources, records, "solver_load_failed")
        except Exception:
            logger.exception("Shipment model generation or solve failed")
            return self.run_fallback(sources, records, "exception_during_solve")

        if not outcome.accepted:
            status = re.sub(r"\s+", "_", outcome.status or "")
            return self.run_fallback(sources, records, f"solver_status_{status}")

        start_days = []
        for i in range(len(sources)):
            start_day = problem.selected_start_day(i, outcome.variable_values)
            if start_day is None:
                start_day = problem.preferred.get(i) or 1
            start_days.append(start_day)

        apply_start_days(sources, start_days, records)
        result = ShipmentScheduleResult(
            status=STATUS_OPTIMAL,
            peak_demand=outcome.peak_demand,
            start_days=start_days,
        )
        logger.info(str(result))
        return result

    def run_fallback(
        self,
        sources: Sequence[DemandSource],
        records: List[DayRecord],
        reason: str,
    ) -> ShipmentScheduleResult:
        """
        Apply the deterministic linear-spread schedule.

        Args:
            sources: Demand sources
            records: Day records (scheduled fields reset, then refilled)
            reason: Why the solver result was not used

        Returns:
            ShipmentScheduleResult tagged "fallback_<reason>" with peak demand -1
        """
        logger.warning(f"Using heuristic shipment schedule. Reason: {reason}")
        start_days = [
            fallback_start_day(source, i, len(sources))
            for i, source in enumerate(sources)
        ]
        apply_start_days(sources, start_days, records)
        return ShipmentScheduleResult(
            status=f"fallback_{reason}",
            peak_demand=FALLBACK_PEAK_DEMAND,
            start_days=start_days,
        )

    def _load_solver(self) -> ShipmentSolver:
        """Create the solver collaborator on first use."""
        if self._solver is None:
            self._solver = self._solver_factory()
        return self._solver

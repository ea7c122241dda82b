"""Peak-load shipment assignment problem and the solver collaborator interface.

For each demand source a start day is selected from a sampled candidate set.
A source starting on day ``d`` ships on 0-indexed days ``d-1, d-1+cycle, ...``.
The objective is the smallest peak daily load ``Z``:

    minimize    Z
    subject to  sum_d x[i, d] = 1                      for every source i
                x[i, preferred_i] = 1                  for sources with a preferred day
                sum q_i * x[i, d] - Z <= 0             for every day t (over (i, d) landing on t)
                x binary, Z >= 0
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

from flowplan.models.demand_source import DemandSource
from flowplan.models.working_calendar import HORIZON_DAYS

PEAK_VARIABLE = "Z"
ACCEPTED_STATUSES = ("Optimal", "Feasible")


def candidate_step(cycle: int) -> int:
    """
    Sampling step for candidate start days.

    Long cycles are sampled sparsely to keep the number of binaries small.
    """
    if cycle > 90:
        return 15
    if cycle > 30:
        return 7
    if cycle > 10:
        return 2
    return 1


def candidate_start_days(cycle: int, source_index: int, preferred_day: Optional[int] = None) -> List[int]:
    """
    Sampled candidate start days for one source.

    Candidates are staggered by ``(source_index * 13) mod cycle`` so sources
    with identical cycles do not sample the same days, and wrap into
    ``[1, cycle]``.

    Args:
        cycle: Source cycle length (days)
        source_index: Position of the source in the input list
        preferred_day: Valid preferred start day, always included

    Returns:
        Sorted, de-duplicated candidate start days
    """
    step = candidate_step(cycle)
    offset = (source_index * 13) % cycle

    days = set()
    for d in range(1, cycle + 1, step):
        day = d + offset
        if day > cycle:
            day = (day % cycle) or cycle
        days.add(day)

    if preferred_day is not None:
        days.add(preferred_day)

    return sorted(days)


def variable_name(source_index: int, start_day: int) -> str:
    """Name of the binary selecting ``start_day`` for a source."""
    return f"x_{source_index}_{start_day}"


@dataclass
class ShipmentProblem:
    """
    Structured description of the assignment model.

    Attributes:
        sources: Demand sources in input order
        candidates: Candidate start days per source index
        preferred: Valid preferred start day per source index (None if unset)
        day_loads: For each 0-indexed day, the (source_index, start_day, quantity)
            terms of candidates landing on that day
        horizon_days: Days in the planning horizon
    """
    sources: List[DemandSource]
    candidates: Dict[int, List[int]] = field(default_factory=dict)
    preferred: Dict[int, Optional[int]] = field(default_factory=dict)
    day_loads: Dict[int, List[Tuple[int, int, float]]] = field(default_factory=dict)
    horizon_days: int = HORIZON_DAYS

    @classmethod
    def from_sources(cls, sources: Sequence[DemandSource], horizon_days: int = HORIZON_DAYS) -> "ShipmentProblem":
        """
        Sample candidates and pre-compute the day load terms.

        Args:
            sources: Demand sources
            horizon_days: Days in the planning horizon

        Returns:
            ShipmentProblem
        """
        problem = cls(sources=list(sources), horizon_days=horizon_days)

        for i, source in enumerate(problem.sources):
            preferred = source.effective_preferred_day
            problem.preferred[i] = preferred
            problem.candidates[i] = candidate_start_days(source.cycle, i, preferred)

            for start_day in problem.candidates[i]:
                for t in source.shipment_days(start_day, horizon_days):
                    problem.day_loads.setdefault(t, []).append((i, start_day, source.quantity))

        return problem

    @property
    def num_candidates(self) -> int:
        """Number of binary decision variables."""
        return sum(len(days) for days in self.candidates.values())

    def candidate_keys(self) -> List[Tuple[int, int]]:
        """All (source_index, start_day) pairs."""
        return [(i, d) for i, days in self.candidates.items() for d in days]

    def selected_start_day(self, source_index: int, variable_values: Dict[str, float]) -> Optional[int]:
        """
        Start day whose binary is set in a primal solution.

        Args:
            source_index: Position of the source
            variable_values: Primal value per variable name

        Returns:
            First candidate with value > 0.5, or None
        """
        for start_day in self.candidates.get(source_index, []):
            if variable_values.get(variable_name(source_index, start_day), 0.0) > 0.5:
                return start_day
        return None

    def to_lp_string(self) -> str:
        """
        CPLEX LP text of the model, for inspection or text-based solvers.

        Returns:
            LP file contents
        """
        lines = ["Minimize", f" obj: 1 {PEAK_VARIABLE}", "Subject To"]

        for i, days in self.candidates.items():
            preferred = self.preferred.get(i)
            terms = " + ".join(f"1 {variable_name(i, d)}" for d in days)
            lines.append(f" c_{i}_sel: {terms} = 1")
            if preferred is not None:
                lines.append(f" c_{i}_pref: 1 {variable_name(i, preferred)} = 1")

        for t in sorted(self.day_loads):
            terms = " + ".join(f"{q:g} {variable_name(i, d)}" for i, d, q in self.day_loads[t])
            lines.append(f" d_{t}: {terms} - 1 {PEAK_VARIABLE} <= 0")

        lines.append("Bounds")
        lines.append(f" {PEAK_VARIABLE} >= 0")
        lines.append("Binary")
        lines.extend(f" {variable_name(i, d)}" for i, d in self.candidate_keys())
        lines.append("End")
        return "\n".join(lines) + "\n"


@dataclass
class SolverOutcome:
    """
    What a solver collaborator reports back.

    Attributes:
        status: Status tag ("Optimal", "Feasible", or any other solver status)
        variable_values: Primal value per variable name (binaries and "Z")
        message: Optional solver message
    """
    status: str
    variable_values: Dict[str, float] = field(default_factory=dict)
    message: Optional[str] = None

    @property
    def accepted(self) -> bool:
        """Solution can be applied."""
        return self.status in ACCEPTED_STATUSES

    @property
    def peak_demand(self) -> float:
        """Solved peak daily load."""
        return self.variable_values.get(PEAK_VARIABLE, 0.0)


class ShipmentSolver(Protocol):
    """
    Solver collaborator used by the shipment scheduler.

    Implementations own their solver lifetime. ``solve`` may raise
    ``SolverUnavailableError`` when the solver cannot be loaded; any other
    exception is treated as a failed solve.
    """

    def solve(self, problem: ShipmentProblem) -> SolverOutcome:
        ...

"""Tests for the Pyomo shipment assignment model and solver collaborator."""

from unittest.mock import Mock, patch

import pytest

from flowplan.exceptions import SolverUnavailableError
from flowplan.models import DemandSource, create_day_records
from flowplan.optimization import (
    PyomoShipmentSolver,
    ShipmentProblem,
    ShipmentScheduleModel,
    SolverConfig,
)
from flowplan.production import ShipmentScheduler
from tests.fixtures.solver_fakes import create_mock_solver_config


def _solver_available() -> bool:
    try:
        SolverConfig().get_best_available_solver()
        return True
    except SolverUnavailableError:
        return False


requires_solver = pytest.mark.skipif(not _solver_available(), reason="No MILP solver installed")


@pytest.fixture
def weekly_sources():
    """Fixture for two weekly sources of 10 and 15 units."""
    return [
        DemandSource(name="Denver", quantity=10, cycle_length_days=7),
        DemandSource(name="Phoenix", quantity=15, cycle_length_days=7),
    ]


class TestShipmentScheduleModel:
    """Tests for model structure and solution extraction."""

    def test_build_model(self, weekly_sources):
        model = ShipmentScheduleModel(ShipmentProblem.from_sources(weekly_sources)).build_model()

        assert len(model.x) == 14
        assert all(model.x[key].is_binary() for key in model.x)
        assert len(model.select_one) == 2
        assert len(model.preferred_day) == 0
        assert len(model.day_load) == 365

    def test_preferred_day_constraint(self):
        sources = [DemandSource(name="A", quantity=10, cycle_length_days=7, preferred_start_day=5)]
        model = ShipmentScheduleModel(ShipmentProblem.from_sources(sources)).build_model()

        assert list(model.preferred_sources) == [0]
        assert len(model.preferred_day) == 1

    def test_solve_with_mock_solver(self, weekly_sources):
        problem = ShipmentProblem.from_sources(weekly_sources)
        model = ShipmentScheduleModel(problem, create_mock_solver_config(problem))

        result = model.solve(solver_name="cbc")

        assert result.is_optimal()
        solution = model.get_solution()
        assert solution.start_days() == [1, 1]
        assert solution.peak_demand == 25.0
        assert result.metadata['model_type'] == "shipment_schedule"
        assert result.num_integer_vars == 14

    def test_collaborator_reports_optimal(self, weekly_sources):
        problem = ShipmentProblem.from_sources(weekly_sources)
        solver = PyomoShipmentSolver(solver_name="cbc", solver_config=create_mock_solver_config(problem))

        outcome = solver.solve(problem)

        assert outcome.status == "Optimal"
        assert outcome.accepted
        assert outcome.variable_values["x_0_1"] == 1.0
        assert outcome.variable_values["x_0_2"] == 0.0
        assert outcome.peak_demand == 25.0

    @patch("flowplan.optimization.solver_config.SolverFactory")
    def test_unknown_solver_raises(self, mock_factory, weekly_sources):
        mock_factory.return_value = Mock(**{"available.return_value": False})
        solver = PyomoShipmentSolver(solver_name="no_such_solver_xyz")

        with pytest.raises(SolverUnavailableError, match="no_such_solver_xyz"):
            solver.solve(ShipmentProblem.from_sources(weekly_sources))

    @patch("flowplan.optimization.solver_config.SolverFactory")
    def test_unknown_solver_falls_back_as_load_failure(self, mock_factory, weekly_sources, all_days_calendar):
        mock_factory.return_value = Mock(**{"available.return_value": False})
        records = create_day_records(all_days_calendar)

        result = ShipmentScheduler(solver=PyomoShipmentSolver(solver_name="no_such_solver_xyz")).schedule(
            weekly_sources, records
        )

        assert result.status == "fallback_solver_load_failed"
        assert result.peak_demand == -1


@requires_solver
class TestShipmentModelWithSolver:
    """Tests solving the assignment with an installed MILP solver."""

    def test_weekly_sources_do_not_collide(self, weekly_sources):
        outcome = PyomoShipmentSolver().solve(ShipmentProblem.from_sources(weekly_sources))

        assert outcome.accepted
        assert outcome.peak_demand == pytest.approx(15.0)

    def test_scheduler_spreads_sources(self, weekly_sources, all_days_calendar):
        records = create_day_records(all_days_calendar)

        result = ShipmentScheduler(solver=PyomoShipmentSolver()).schedule(weekly_sources, records)

        assert result.status == "optimal"
        assert result.peak_demand == pytest.approx(15.0)
        first, second = result.start_days
        assert first % 7 != second % 7
        assert max(r.scheduled_shipment_qty for r in records) == 15

    def test_preferred_day_honoured(self, all_days_calendar):
        sources = [
            DemandSource(name="A", quantity=10, cycle_length_days=7, preferred_start_day=3),
            DemandSource(name="B", quantity=10, cycle_length_days=7),
        ]
        records = create_day_records(all_days_calendar)

        result = ShipmentScheduler(solver=PyomoShipmentSolver()).schedule(sources, records)

        assert result.start_days[0] == 3
        assert result.start_days[1] != 3

"""Tests for solver detection and the shipment result schema."""

from unittest.mock import Mock, patch

import pytest
from pydantic import ValidationError

from flowplan.exceptions import SolverUnavailableError
from flowplan.optimization import SolverConfig, SolverInfo, SolverType
from flowplan.optimization.result_schema import ShipmentAssignment, ShipmentScheduleSolution


def _factory(available_names):
    """SolverFactory replacement reporting only ``available_names`` as installed."""
    def _create(name):
        solver = Mock()
        solver.available.return_value = name in available_names
        solver.options = {}
        return solver
    return _create


class TestSolverInfo:
    """Tests for SolverInfo dataclass."""

    def test_defaults(self):
        info = SolverInfo(name="cbc", available=False)

        assert info.version is None
        assert info.tested is False
        assert info.works is False

    def test_str(self):
        assert str(SolverInfo(name="cbc", available=True)) == "CBC: ✓ available"
        assert str(SolverInfo(name="glpk", available=False, tested=True)) == "GLPK: ✗ unavailable (test failed)"


class TestSolverConfig:
    """Tests for SolverConfig."""

    @patch("flowplan.optimization.solver_config.SolverFactory")
    def test_prefers_highs(self, mock_factory):
        mock_factory.side_effect = _factory({"appsi_highs", "cbc"})
        assert SolverConfig().get_best_available_solver() == SolverType.APPSI_HIGHS.value

    @patch("flowplan.optimization.solver_config.SolverFactory")
    def test_falls_back_to_cbc(self, mock_factory):
        mock_factory.side_effect = _factory({"cbc", "glpk"})
        assert SolverConfig().get_best_available_solver() == "cbc"

    @patch("flowplan.optimization.solver_config.SolverFactory")
    def test_no_solver(self, mock_factory):
        mock_factory.side_effect = _factory(set())

        with pytest.raises(SolverUnavailableError, match="No MILP solver available"):
            SolverConfig().get_best_available_solver()

    @patch("flowplan.optimization.solver_config.SolverFactory")
    def test_factory_error_means_unavailable(self, mock_factory):
        mock_factory.side_effect = RuntimeError("plugin failed to load")

        info = SolverConfig().detect_solver("highs")

        assert not info.available
        assert info.tested

    @patch("flowplan.optimization.solver_config.SolverFactory")
    def test_detection_cached(self, mock_factory):
        mock_factory.side_effect = _factory({"cbc"})
        config = SolverConfig()

        config.detect_solver("cbc")
        config.detect_solver("cbc")

        assert mock_factory.call_count == 1

    @patch("flowplan.optimization.solver_config.SolverFactory")
    def test_create_solver_with_options(self, mock_factory):
        mock_factory.side_effect = _factory({"cbc"})

        solver = SolverConfig().create_solver("cbc", {"seconds": 30})

        assert solver.options["seconds"] == 30

    @patch("flowplan.optimization.solver_config.SolverFactory")
    def test_create_unavailable_solver(self, mock_factory):
        mock_factory.side_effect = _factory({"cbc"})

        with pytest.raises(SolverUnavailableError, match="Solver 'glpk' is not available"):
            SolverConfig().create_solver("glpk")


class TestShipmentScheduleSolution:
    """Tests for the shipment result schema."""

    def test_start_days_in_source_order(self):
        solution = ShipmentScheduleSolution(
            peak_demand=25.0,
            assignments=[
                ShipmentAssignment(source_index=1, source="B", start_day=4, cycle_length_days=7, quantity=15),
                ShipmentAssignment(source_index=0, source="A", start_day=2, cycle_length_days=7, quantity=10),
            ],
        )

        assert solution.start_days() == [2, 4]
        assert solution.model_type == "shipment_schedule"

    def test_start_day_outside_cycle_rejected(self):
        with pytest.raises(ValidationError, match="exceeds cycle length"):
            ShipmentAssignment(source_index=0, source="A", start_day=8, cycle_length_days=7, quantity=10)

    def test_negative_peak_rejected(self):
        with pytest.raises(ValidationError):
            ShipmentScheduleSolution(peak_demand=-1.0)

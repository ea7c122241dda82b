"""Tests for candidate sampling and the shipment assignment problem."""

import pytest

from flowplan.models import DemandSource
from flowplan.optimization import (
    ShipmentProblem,
    SolverOutcome,
    candidate_start_days,
    candidate_step,
    variable_name,
)


@pytest.mark.parametrize("cycle,step", [
    (1, 1), (7, 1), (10, 1),
    (11, 2), (30, 2),
    (31, 7), (90, 7),
    (91, 15), (365, 15),
])
def test_candidate_step(cycle, step):
    assert candidate_step(cycle) == step


class TestCandidateStartDays:
    """Tests for sampled candidate start days."""

    def test_short_cycle_samples_every_day(self):
        assert candidate_start_days(7, 0) == [1, 2, 3, 4, 5, 6, 7]

    def test_stagger_wraps_into_cycle(self):
        # offset (1 * 13) % 20 = 13 shifts odd days onto even days
        assert candidate_start_days(20, 1) == list(range(2, 21, 2))

    def test_candidates_within_cycle(self):
        for i in range(5):
            for cycle in (3, 12, 45, 120):
                days = candidate_start_days(cycle, i)
                assert days == sorted(set(days))
                assert all(1 <= d <= cycle for d in days)

    def test_preferred_day_always_included(self):
        days = candidate_start_days(20, 0, preferred_day=4)
        assert 4 in days
        assert len(days) == 11

    def test_long_cycle_sampled_sparsely(self):
        assert candidate_start_days(120, 0) == [1, 16, 31, 46, 61, 76, 91, 106]


class TestShipmentProblem:
    """Tests for ShipmentProblem construction."""

    @pytest.fixture
    def sources(self):
        return [
            DemandSource(name="A", quantity=10, cycle_length_days=7),
            DemandSource(name="B", quantity=15, cycle_length_days=7, preferred_start_day=3),
        ]

    def test_from_sources(self, sources):
        problem = ShipmentProblem.from_sources(sources)

        assert problem.num_candidates == 14
        assert problem.preferred == {0: None, 1: 3}
        assert sorted(problem.day_loads) == list(range(365))
        # Every candidate of both sources lands somewhere in the first week
        assert len(problem.day_loads[0]) == 2

    def test_day_load_terms(self, sources):
        problem = ShipmentProblem.from_sources(sources)
        assert (0, 1, 10) in problem.day_loads[7]
        assert (1, 1, 15) in problem.day_loads[7]

    def test_selected_start_day(self, sources):
        problem = ShipmentProblem.from_sources(sources)
        values = {variable_name(0, 4): 1.0, variable_name(1, 3): 0.9}

        assert problem.selected_start_day(0, values) == 4
        assert problem.selected_start_day(1, values) == 3

    def test_selected_start_day_none_when_not_set(self, sources):
        problem = ShipmentProblem.from_sources(sources)
        assert problem.selected_start_day(0, {variable_name(0, 2): 0.4}) is None

    def test_lp_string(self, sources):
        lp = ShipmentProblem.from_sources(sources).to_lp_string()

        assert lp.startswith("Minimize\n obj: 1 Z\nSubject To\n")
        assert " c_1_pref: 1 x_1_3 = 1" in lp
        assert " d_0: 10 x_0_1 + 15 x_1_1 - 1 Z <= 0" in lp
        assert "\nBinary\n" in lp
        assert lp.endswith("End\n")


class TestSolverOutcome:
    """Tests for SolverOutcome."""

    @pytest.mark.parametrize("status,accepted", [
        ("Optimal", True),
        ("Feasible", True),
        ("Infeasible", False),
        ("Time limit reached", False),
    ])
    def test_accepted(self, status, accepted):
        assert SolverOutcome(status=status).accepted is accepted

    def test_peak_demand(self):
        assert SolverOutcome(status="Optimal", variable_values={"Z": 25.0}).peak_demand == 25.0

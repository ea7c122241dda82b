"""Pytest configuration and shared fixtures."""

import pytest

from flowplan.models import (
    DemandSource,
    SimulationParameters,
    WorkingCalendar,
    create_day_records,
    horizon_dates,
)
from flowplan.production import apply_start_days
from tests.fixtures.solver_fakes import FirstCandidateSolver

YEAR = 2025


@pytest.fixture
def all_days_calendar():
    """Fixture for a calendar where every day of 2025 is a working day."""
    return WorkingCalendar(year=YEAR, working_dates=frozenset(horizon_dates(YEAR)))


@pytest.fixture
def weekday_calendar():
    """Fixture for a Monday-Friday 2025 calendar without holidays."""
    return WorkingCalendar.weekdays(YEAR)


@pytest.fixture
def make_params(all_days_calendar):
    """
    Factory for simulation parameters.

    Defaults to a line building 100 units in a 10 hour day (10 units/hour)
    with a target of 100, so Tier 2 has no headroom and Tier 3 can add up
    to 50 units (5 hours) on a prior day.
    """
    def _make(sources=(), calendar=None, **overrides):
        data = dict(
            demand_sources=list(sources),
            working_calendar=calendar or all_days_calendar,
            standard_operating_hours=10.0,
            target_daily_production=100.0,
            max_standard_production=100.0,
        )
        data.update(overrides)
        return SimulationParameters(**data)

    return _make


@pytest.fixture
def scheduled_records():
    """
    Factory for day records with shipments placed at fixed start days.

    Bypasses the shipment scheduler so simulation tests control exactly
    which days ship.
    """
    def _make(params, start_days):
        records = create_day_records(params.working_calendar)
        apply_start_days(params.demand_sources, start_days, records)
        return records

    return _make


@pytest.fixture
def one_shot_source():
    """Factory for a source shipping once, on 0-indexed ``day``."""
    def _make(quantity, day, name="Denver"):
        return DemandSource(
            name=name,
            quantity=quantity,
            cycle_length_days=365,
            preferred_start_day=day + 1,
        )

    return _make


@pytest.fixture
def first_candidate_solver():
    """Fixture for a fake solver picking the first (or preferred) candidate."""
    return FirstCandidateSolver()


@pytest.fixture
def start_payload(weekday_calendar):
    """Fixture for a valid camelCase start payload on the 2025 weekday calendar."""
    return {
        "cities": [
            {"name": "Denver", "qty": 60, "freq": 7},
            {"name": "Phoenix", "qty": 40, "freq": 14, "chosenStartDay": 3},
        ],
        "workingDaysSchedule": sorted(d.isoformat() for d in weekday_calendar.working_dates),
        "standardOpHours": 10,
        "numEmployees": 6,
        "laborCost": 30,
        "holdingCostRate": 0.2,
        "annualMfgOverhead": 100000,
        "annualSgaExpenses": 50000,
        "superCogsVal": 400,
        "ultraCogsVal": 600,
        "mcInputVal": 1000,
        "buildRatios": {"super": 0.5, "ultra": 0.25, "mega": 0.25},
        "targetDailyProduction": 100,
        "maxStandardProduction": 120,
    }

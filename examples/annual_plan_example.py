#!/usr/bin/env python3
"""
Example: Running an Annual Plan

Builds a start payload for three demand sources, runs the plan through the
message boundary, and exports the daily plan to CSV and Excel.

Usage:
    python examples/annual_plan_example.py [output_dir]
"""

import logging
import sys
from datetime import date
from pathlib import Path

from flowplan.analysis import PlanSummary
from flowplan.exporters import export_annual_plan, export_csv
from flowplan.models import WorkingCalendar
from flowplan.parsers import parse_payload
from flowplan.workflows import PlanConfig, run_annual_plan


def build_payload(year: int) -> dict:
    """Start payload in the camelCase message format."""
    calendar = WorkingCalendar.default_for_year(year)
    return {
        "cities": [
            {"name": "Denver", "qty": 400, "freq": 7},
            {"name": "Phoenix", "qty": 650, "freq": 14, "chosenStartDay": 3},
            {"name": "Seattle", "qty": 1200, "freq": 30},
        ],
        "workingDaysSchedule": sorted(d.isoformat() for d in calendar.working_dates),
        "standardOpHours": 15,
        "numEmployees": 8,
        "laborCost": 25,
        "holdingCostRate": 0.25,
        "annualMfgOverhead": 250000,
        "annualSgaExpenses": 350000,
        "superCogsVal": 375,
        "ultraCogsVal": 590,
        "mcInputVal": 960,
        "buildRatios": {"super": 0.33, "ultra": 0.33, "mega": 0.34},
        "targetDailyProduction": 180,
        "maxStandardProduction": 220,
    }


def main():
    """Run one plan and export the results."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    output_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("output")
    output_dir.mkdir(parents=True, exist_ok=True)

    print("=" * 80)
    print("ANNUAL PLAN EXAMPLE")
    print("=" * 80)

    params = parse_payload(build_payload(date.today().year))
    outcome = run_annual_plan(params, PlanConfig(solve_time_limit=60))

    print(f"\nShipment schedule: {outcome.schedule}")
    if not outcome.success:
        print(f"\n✗ Plan failed: {outcome.error}")

    summary = outcome.summary or PlanSummary.summarize(outcome.records, params)
    print(f"\n{summary}")

    csv_path = output_dir / "annual_plan.csv"
    export_csv(outcome.records, params.standard_operating_hours, csv_path)
    xlsx_path = export_annual_plan(
        outcome.records,
        summary,
        output_dir / "annual_plan.xlsx",
        metadata={"Demand Sources": len(params.demand_sources)},
    )

    print("\nExported:")
    print(f"  CSV:   {csv_path}")
    print(f"  Excel: {xlsx_path}")
    return 0 if outcome.success else 1


if __name__ == "__main__":
    sys.exit(main())

"""Tests for CSV and Excel plan exports."""

from datetime import date

import pytest
from openpyxl import load_workbook

from flowplan.analysis import PlanSummary
from flowplan.exporters import (
    CSV_COLUMNS,
    day_type,
    export_annual_plan,
    export_csv,
    records_to_dataframe,
)
from flowplan.models import DayRecord, ShipmentDetail


@pytest.fixture
def records():
    """Fixture for one record of each day type plus a short standard day."""
    shipped = ShipmentDetail(source="Denver", quantity=60, cycle_length_days=7, start_day=1)
    return [
        DayRecord(day_index=0, date=date(2025, 1, 1), is_working_day=True,
                  production=100, operating_hours=10, inventory_end=40, holding_cost=1.234,
                  scheduled_shipment_qty=60, scheduled_shipment_details=[shipped],
                  actual_shipment_qty=60, actual_shipment_details=[shipped]),
        DayRecord(day_index=1, date=date(2025, 1, 4), is_working_day=False, inventory_end=40),
        DayRecord(day_index=2, date=date(2025, 1, 6), is_working_day=False,
                  is_reduction_day=True, inventory_end=40),
        DayRecord(day_index=3, date=date(2025, 1, 7), is_working_day=True,
                  production=130, operating_hours=13, inventory_end=170,
                  is_exception_day=True, exception_cost=512.5, exception_note="Reactive OT: +3.00h"),
        DayRecord(day_index=4, date=date(2025, 1, 8), is_working_day=True,
                  production=62.5, operating_hours=6.25, inventory_end=232.5),
    ]


class TestDayType:
    """Tests for day classification."""

    def test_day_types(self, records):
        assert [day_type(r) for r in records] == [
            "Standard", "Weekend/Holiday", "Reduction", "Overtime/Exception", "Standard",
        ]


class TestCsvExport:
    """Tests for export_csv."""

    def test_header(self, records):
        lines = export_csv(records, 10.0).splitlines()
        assert lines[0] == ",".join(CSV_COLUMNS)
        assert len(lines) == len(records) + 1

    def test_rows(self, records):
        lines = export_csv(records, 10.0).splitlines()

        assert lines[1] == "2025-01-01,Standard,10.00,100,60,40,1.23,0.00"
        assert lines[2] == "2025-01-04,Weekend/Holiday,0,0,0,40,0.00,0.00"
        assert lines[3] == "2025-01-06,Reduction,0,0,0,40,0.00,0.00"
        assert lines[4] == "2025-01-07,Overtime/Exception,13.00,130,0,170,0.00,512.50"

    def test_short_day_shows_standard_hours(self, records):
        lines = export_csv(records, 10.0).splitlines()
        assert lines[5] == "2025-01-08,Standard,10.00,62.5,0,232.5,0.00,0.00"

    def test_writes_file(self, records, tmp_path):
        path = tmp_path / "plan.csv"

        text = export_csv(records, 10.0, path)

        assert path.read_text() == text

    def test_no_records(self):
        with pytest.raises(ValueError, match="No simulation data available to export"):
            export_csv([], 10.0)


class TestRecordsToDataframe:
    """Tests for records_to_dataframe."""

    def test_frame(self, records):
        df = records_to_dataframe(records)

        assert len(df) == 5
        assert df.index.name == "date"
        assert df.iloc[0]["day_type"] == "Standard"
        assert df.iloc[0]["actual_shipment_details"] == "Denver:60"
        assert df.iloc[3]["exception_note"] == "Reactive OT: +3.00h"

    def test_empty(self):
        assert records_to_dataframe([]).empty


class TestExcelExport:
    """Tests for the formatted Excel workbook."""

    def test_workbook(self, records, tmp_path, make_params):
        summary = PlanSummary.summarize(records, make_params(), schedule_status="optimal", peak_demand=60.0)
        path = tmp_path / "plan.xlsx"

        result = export_annual_plan(records, summary, path, metadata={"Scenario": "baseline"})

        assert result == str(path)
        wb = load_workbook(path)
        assert wb.sheetnames == ["Daily Plan", "Summary"]

        daily = wb["Daily Plan"]
        assert daily.cell(row=1, column=1).value == "Date"
        assert daily.cell(row=1, column=11).value == "Notes"
        assert daily.max_row == len(records) + 1
        assert daily.cell(row=5, column=2).value == "Overtime/Exception"
        assert daily.cell(row=5, column=11).value == "Reactive OT: +3.00h"
        assert daily.cell(row=5, column=1).fill.fgColor.rgb.endswith("FFCDD2")
        assert daily.freeze_panes == "A2"

        labels = {row[0]: row[1] for row in wb["Summary"].iter_rows(min_row=2, values_only=True)}
        assert labels["Schedule Status"] == "optimal"
        assert labels["Overtime Days"] == 1
        assert labels["Scenario"] == "baseline"
        assert "Exported" in labels

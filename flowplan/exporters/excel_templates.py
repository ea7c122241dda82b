"""
Excel export template for annual plan results.

The workbook has two sheets:
1. Daily Plan - one formatted row per day, highlighted by day type
2. Summary - headline metrics and run metadata
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from flowplan.analysis.plan_summary import PlanSummary
from flowplan.models.day_record import DayRecord
from .plan_export import day_type

# Color constants
HEADER_COLOR = "1E88E5"
ALT_ROW_COLOR = "F5F5F5"
EXCEPTION_COLOR = "FFCDD2"  # Red
REDUCTION_COLOR = "FFF9C4"  # Yellow
NON_WORKING_COLOR = "E0E0E0"  # Gray

DAY_TYPE_COLORS = {
    "Overtime/Exception": EXCEPTION_COLOR,
    "Reduction": REDUCTION_COLOR,
    "Weekend/Holiday": NON_WORKING_COLOR,
}

THIN = Side(style='thin')
CELL_BORDER = Border(left=THIN, right=THIN, top=THIN, bottom=THIN)

# (header, number format)
DAILY_COLUMNS = [
    ("Date", 'ddd, mmm dd'),
    ("Day Type", None),
    ("Op Hours", '0.00'),
    ("Produced Units", '#,##0'),
    ("Scheduled", '#,##0'),
    ("Shipped", '#,##0'),
    ("Inventory Start", '#,##0'),
    ("Inventory End", '#,##0'),
    ("Holding Cost", '$#,##0.00'),
    ("Exception Cost", '$#,##0.00'),
    ("Notes", None),
]


def _fill(color: str) -> PatternFill:
    return PatternFill(start_color=color, end_color=color, fill_type='solid')


def write_header_row(worksheet, headers: List[str], row: int = 1) -> None:
    """Blue header row with white bold text."""
    for col_idx, header in enumerate(headers, 1):
        cell = worksheet.cell(row=row, column=col_idx, value=header)
        cell.font = Font(name='Calibri', size=11, bold=True, color='FFFFFF')
        cell.fill = _fill(HEADER_COLOR)
        cell.alignment = Alignment(horizontal='center', vertical='center', wrap_text=True)
        cell.border = CELL_BORDER


def fit_column_widths(worksheet, max_width: int = 50) -> None:
    """Size each column to its longest value."""
    for column in worksheet.columns:
        longest = max((len(str(cell.value)) for cell in column if cell.value is not None), default=0)
        worksheet.column_dimensions[get_column_letter(column[0].column)].width = min(longest + 2, max_width)


def _daily_row(record: DayRecord) -> List[Any]:
    return [
        record.date,
        day_type(record),
        record.operating_hours,
        record.production,
        record.scheduled_shipment_qty,
        record.actual_shipment_qty,
        record.inventory_start,
        record.inventory_end,
        record.holding_cost,
        record.exception_cost,
        record.exception_note,
    ]


def _summary_rows(summary: PlanSummary, metadata: Dict[str, Any]) -> List[tuple]:
    rows = [
        ("Average Inventory (units)", summary.average_inventory, '#,##0.0'),
        ("Inventory Valuation", summary.inventory_valuation, '$#,##0.00'),
        ("Total Holding Cost", summary.total_holding_cost, '$#,##0.00'),
        ("Total Exception Cost", summary.total_exception_cost, '$#,##0.00'),
        ("Overtime Days", summary.exception_days, '#,##0'),
        ("Removed Production Days", summary.reduction_days, '#,##0'),
        ("Total Production (units)", summary.total_production, '#,##0'),
        ("Total Shipped (units)", summary.total_shipped, '#,##0'),
        ("Overtime Hours", summary.overtime_hours, '0.00'),
        ("Deferred Shipments", summary.deferred_shipments, '#,##0'),
        ("Overtime Stress", summary.overtime_stress, '0.00'),
        ("Schedule Status", summary.schedule_status or "n/a", None),
        ("Peak Daily Load", summary.peak_demand if summary.peak_demand is not None else "n/a", '#,##0'),
    ]
    rows.extend((key, value, None) for key, value in metadata.items())
    return rows


def export_annual_plan(
    records: List[DayRecord],
    summary: PlanSummary,
    output_path: Union[str, Path],
    metadata: Optional[Dict[str, Any]] = None,
) -> str:
    """
    Export an annual plan to a formatted Excel file.

    Args:
        records: Day records
        summary: Plan summary metrics
        output_path: Path to save the Excel file
        metadata: Extra key/value rows for the Summary sheet

    Returns:
        Path to created file
    """
    wb = Workbook()
    wb.remove(wb.active)

    # Sheet 1: Daily Plan
    ws = wb.create_sheet("Daily Plan")
    write_header_row(ws, [header for header, _ in DAILY_COLUMNS])

    for row_idx, record in enumerate(records, 2):
        highlight = DAY_TYPE_COLORS.get(day_type(record))
        if highlight is None and row_idx % 2 == 1:
            highlight = ALT_ROW_COLOR

        for col_idx, (value, (_, number_format)) in enumerate(zip(_daily_row(record), DAILY_COLUMNS), 1):
            cell = ws.cell(row=row_idx, column=col_idx, value=value)
            cell.border = CELL_BORDER
            if number_format:
                cell.number_format = number_format
            if highlight:
                cell.fill = _fill(highlight)

    ws.auto_filter.ref = f"A1:{get_column_letter(len(DAILY_COLUMNS))}1"
    ws.freeze_panes = 'A2'
    fit_column_widths(ws)

    # Sheet 2: Summary
    ws2 = wb.create_sheet("Summary")
    write_header_row(ws2, ["Metric", "Value"])
    run_metadata = {"Exported": datetime.now().strftime('%Y-%m-%d %H:%M'), **(metadata or {})}

    for row_idx, (label, value, number_format) in enumerate(_summary_rows(summary, run_metadata), 2):
        ws2.cell(row=row_idx, column=1, value=label).font = Font(name='Calibri', size=10, bold=True)
        cell = ws2.cell(row=row_idx, column=2, value=value)
        if number_format and isinstance(value, (int, float)):
            cell.number_format = number_format

    fit_column_widths(ws2)

    wb.save(output_path)
    return str(output_path)

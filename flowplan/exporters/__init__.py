"""
Exporters for annual plan results.

- DataFrame and CSV exports of the daily plan
- Formatted Excel workbook with daily plan and summary sheets
"""

from .plan_export import (
    CSV_COLUMNS,
    day_type,
    export_csv,
    export_frame,
    records_to_dataframe,
)
from .excel_templates import export_annual_plan

__all__ = [
    'CSV_COLUMNS',
    'day_type',
    'export_csv',
    'export_frame',
    'records_to_dataframe',
    'export_annual_plan',
]

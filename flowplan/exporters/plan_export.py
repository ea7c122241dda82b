"""Tabular exports of simulated day records (DataFrame and CSV)."""

from pathlib import Path
from typing import List, Optional, Union

import pandas as pd

from flowplan.models.day_record import DayRecord

CSV_COLUMNS = [
    "Date",
    "Day Type",
    "Op Hours",
    "Produced Units",
    "Total Shipped",
    "Inventory End",
    "Holding Cost ($)",
    "Exception Cost ($)",
]


def day_type(record: DayRecord) -> str:
    """Day classification shown in exports."""
    if record.is_reduction_day:
        return "Reduction"
    if record.is_exception_day:
        return "Overtime/Exception"
    if not record.is_working_day:
        return "Weekend/Holiday"
    return "Standard"


def _plain_number(value: float) -> Union[int, float]:
    """Whole numbers without a trailing '.0'."""
    return int(value) if float(value).is_integer() else round(value, 6)


def records_to_dataframe(records: List[DayRecord]) -> pd.DataFrame:
    """
    One row per day with the record fields and a day type column.

    Shipment details are flattened to "source:qty" strings.

    Args:
        records: Day records

    Returns:
        DataFrame indexed by date
    """
    rows = []
    for record in records:
        row = record.to_dict()
        row["date"] = record.date
        row["day_type"] = day_type(record)
        row["scheduled_shipment_details"] = ", ".join(
            f"{d.source}:{d.quantity:g}" for d in record.scheduled_shipment_details
        )
        row["actual_shipment_details"] = ", ".join(
            f"{d.source}:{d.quantity:g}" for d in record.actual_shipment_details
        )
        rows.append(row)

    df = pd.DataFrame(rows)
    if not df.empty:
        df = df.set_index("date")
    return df


def export_frame(records: List[DayRecord], standard_operating_hours: float) -> pd.DataFrame:
    """
    Export table with the CSV column set.

    Op Hours shows at least the standard day on working days and 0 on
    reduction and non-working days. Costs are formatted to two decimals.
    """
    rows = []
    for record in records:
        if record.is_reduction_day or not record.is_working_day:
            hours = "0"
        else:
            hours = f"{max(record.operating_hours, standard_operating_hours):.2f}"

        rows.append([
            record.date.isoformat(),
            day_type(record),
            hours,
            _plain_number(record.production),
            _plain_number(record.actual_shipment_qty),
            _plain_number(record.inventory_end),
            f"{record.holding_cost:.2f}",
            f"{record.exception_cost:.2f}",
        ])

    return pd.DataFrame(rows, columns=CSV_COLUMNS, dtype=object)


def export_csv(
    records: List[DayRecord],
    standard_operating_hours: float,
    output_path: Optional[Union[str, Path]] = None,
) -> str:
    """
    Export day records as CSV.

    Args:
        records: Day records
        standard_operating_hours: Standard hours per working day
        output_path: File to write (None = return the text only)

    Returns:
        CSV text

    Raises:
        ValueError: If there are no records
    """
    if not records:
        raise ValueError("No simulation data available to export")

    csv_text = export_frame(records, standard_operating_hours).to_csv(index=False, lineterminator="\n")
    if output_path is not None:
        Path(output_path).write_text(csv_text)
    return csv_text

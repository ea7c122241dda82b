"""File parser for simulation parameters (JSON or Excel)."""

from datetime import date as Date
from pathlib import Path
from typing import Any, Dict, List
import json
import logging

import pandas as pd
from pydantic import ValidationError

from flowplan.exceptions import ParameterValidationError
from flowplan.models.demand_source import DemandSource
from flowplan.models.product_variant import ProductVariant
from flowplan.models.simulation_parameters import SimulationParameters
from flowplan.models.working_calendar import WorkingCalendar
from .payload_parser import parse_payload

logger = logging.getLogger(__name__)


class ParameterParser:
    """
    Parser for simulation parameter files.

    JSON files hold either a start payload (camelCase keys, see
    ``payload_parser``) or the SimulationParameters fields directly.

    Expected Excel format:
    - Sheet 'Parameters': columns [parameter, value]; parameter names are
      SimulationParameters fields, plus an optional 'year'
    - Sheet 'DemandSources': columns [name, quantity, cycle_length_days, preferred_start_day?]
    - Sheet 'ProductVariants' (optional): columns [name, unit_cost, build_ratio]
    - Sheet 'WorkingDays' (optional): column [date]; default calendar if absent
    """

    PAYLOAD_KEYS = {"cities", "targetDailyProduction", "maxStandardProduction"}

    def __init__(self, file_path: Path | str):
        """
        Initialize parser with a parameter file path.

        Args:
            file_path: Path to a .json, .xlsx or .xlsm file

        Raises:
            FileNotFoundError: If file does not exist
            ValueError: If the file type is not supported
        """
        self.file_path = Path(file_path)
        if not self.file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")
        if self.file_path.suffix.lower() not in [".json", ".xlsx", ".xlsm"]:
            raise ValueError(f"File must be .json, .xlsx or .xlsm: {file_path}")

    def parse(self) -> SimulationParameters:
        """
        Parse the file into validated parameters.

        Raises:
            ParameterValidationError: If the contents are invalid
        """
        if self.file_path.suffix.lower() == ".json":
            return self.parse_json()
        return self.parse_excel()

    def parse_json(self) -> SimulationParameters:
        """Parse a JSON parameter file."""
        with open(self.file_path, "r") as f:
            data = json.load(f)

        if "payload" in data:
            data = data["payload"]

        if self.PAYLOAD_KEYS & set(data):
            logger.info(f"Parsing start payload from {self.file_path.name}")
            return parse_payload(data)

        try:
            return SimulationParameters.model_validate(data)
        except ValidationError as e:
            raise ParameterValidationError(str(e)) from e

    def parse_excel(self) -> SimulationParameters:
        """Parse an Excel parameter workbook."""
        sheets = pd.ExcelFile(self.file_path, engine="openpyxl").sheet_names

        settings = self.parse_settings()
        year = int(settings.pop("year", Date.today().year))

        data: Dict[str, Any] = dict(settings)
        data["demand_sources"] = self.parse_demand_sources()
        if "ProductVariants" in sheets:
            data["product_variants"] = self.parse_product_variants()
        if "WorkingDays" in sheets:
            data["working_calendar"] = self.parse_working_days(year)
        else:
            data["working_calendar"] = WorkingCalendar.default_for_year(year)

        return SimulationParameters.build(**data)

    def _read_sheet(self, sheet_name: str, required_cols: set[str]) -> pd.DataFrame:
        df = pd.read_excel(
            self.file_path,
            sheet_name=sheet_name,
            engine="openpyxl"
        )

        if not required_cols.issubset(df.columns):
            missing = required_cols - set(df.columns)
            raise ParameterValidationError(f"Missing required columns in {sheet_name} sheet: {missing}")
        return df

    def parse_settings(self, sheet_name: str = "Parameters") -> Dict[str, float]:
        """
        Parse the parameter/value sheet.

        Returns:
            Dictionary of parameter name to value
        """
        df = self._read_sheet(sheet_name, {"parameter", "value"})

        settings = {}
        for _, row in df.iterrows():
            if pd.isna(row["parameter"]) or pd.isna(row["value"]):
                continue
            settings[str(row["parameter"]).strip()] = float(row["value"])
        return settings

    def parse_demand_sources(self, sheet_name: str = "DemandSources") -> List[DemandSource]:
        """Parse demand sources."""
        df = self._read_sheet(sheet_name, {"name", "quantity", "cycle_length_days"})

        sources = []
        for _, row in df.iterrows():
            preferred = row.get("preferred_start_day")
            try:
                sources.append(DemandSource(
                    name=str(row["name"]),
                    quantity=float(row["quantity"]),
                    cycle_length_days=float(row["cycle_length_days"]),
                    preferred_start_day=int(preferred) if preferred is not None and pd.notna(preferred) else None,
                ))
            except ValidationError as e:
                raise ParameterValidationError(f"Invalid demand source {row['name']!r}: {e}") from e
        return sources

    def parse_product_variants(self, sheet_name: str = "ProductVariants") -> List[ProductVariant]:
        """Parse product variants."""
        df = self._read_sheet(sheet_name, {"name", "unit_cost", "build_ratio"})
        try:
            return [
                ProductVariant(
                    name=str(row["name"]),
                    unit_cost=float(row["unit_cost"]),
                    build_ratio=float(row["build_ratio"]),
                )
                for _, row in df.iterrows()
            ]
        except ValidationError as e:
            raise ParameterValidationError(str(e)) from e

    def parse_working_days(self, year: int, sheet_name: str = "WorkingDays") -> WorkingCalendar:
        """Parse the working-day list of ``year``."""
        df = self._read_sheet(sheet_name, {"date"})
        dates = frozenset(
            pd.to_datetime(value).date()
            for value in df["date"]
            if pd.notna(value)
        )
        return WorkingCalendar(year=year, working_dates=dates)

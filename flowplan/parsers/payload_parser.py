"""Parser for start-message payloads.

A payload is the dictionary carried by a ``{"type": "start", "payload": ...}``
message. Keys are camelCase:

    cities                  [{name, qty, freq, chosenStartDay?}, ...]
    workingDaysSchedule     ISO dates of working days
    standardOpHours, numEmployees, laborCost, holdingCostRate,
    annualMfgOverhead, annualSgaExpenses,
    superCogsVal, ultraCogsVal, mcInputVal, buildRatios {super, ultra, mega},
    targetDailyProduction, maxStandardProduction (required)

Optional keys not listed above fall back to the parameter defaults.
"""

from datetime import date as Date
from typing import Any, Dict, List, Mapping, Optional
import logging

from pydantic import ValidationError

from flowplan.exceptions import ParameterValidationError
from flowplan.models.demand_source import DemandSource
from flowplan.models.product_variant import ProductVariant
from flowplan.models.simulation_parameters import SimulationParameters, default_product_variants
from flowplan.models.working_calendar import WorkingCalendar

logger = logging.getLogger(__name__)

DEFAULT_CYCLE_DAYS = 7

# payload key -> SimulationParameters field
SCALAR_KEYS = {
    "standardOpHours": "standard_operating_hours",
    "numEmployees": "employee_count",
    "laborCost": "labor_rate",
    "holdingCostRate": "holding_cost_rate",
    "annualMfgOverhead": "annual_mfg_overhead",
    "annualSgaExpenses": "annual_sga_expenses",
    "targetDailyProduction": "target_daily_production",
    "maxStandardProduction": "max_standard_production",
}

# variant name -> (unit cost key, build ratio key)
VARIANT_KEYS = {
    "super": ("superCogsVal", "super"),
    "ultra": ("ultraCogsVal", "ultra"),
    "mega": ("mcInputVal", "mega"),
}


def parse_demand_sources(cities: Optional[List[Mapping[str, Any]]]) -> List[DemandSource]:
    """
    Convert payload cities into demand sources.

    Cities without a positive quantity ship nothing and are skipped.

    Raises:
        ParameterValidationError: If a city entry is malformed
    """
    sources = []
    for i, city in enumerate(cities or []):
        if not isinstance(city, Mapping):
            raise ParameterValidationError(f"Invalid city entry {i}: expected an object, got {city!r}")
        try:
            qty = float(city.get("qty") or 0)
        except (TypeError, ValueError) as e:
            raise ParameterValidationError(f"Invalid city entry {i}: quantity {city.get('qty')!r}") from e
        if qty <= 0:
            logger.warning(f"Skipping city {city.get('name', i)!r}: quantity {qty} ships nothing")
            continue

        preferred = city.get("chosenStartDay")
        try:
            sources.append(DemandSource(
                name=str(city.get("name", f"source_{i}")),
                quantity=qty,
                cycle_length_days=city.get("freq") or DEFAULT_CYCLE_DAYS,
                preferred_start_day=int(preferred) if preferred not in (None, "") else None,
            ))
        except (ValidationError, TypeError, ValueError) as e:
            raise ParameterValidationError(f"Invalid city entry {i}: {e}") from e
    return sources


def parse_product_variants(payload: Mapping[str, Any]) -> List[ProductVariant]:
    """
    Unit costs and build ratios, defaulting any value the payload omits.

    Raises:
        ParameterValidationError: If buildRatios is not a mapping
    """
    defaults = {v.name: v for v in default_product_variants()}
    ratios = payload.get("buildRatios") or {}
    if not isinstance(ratios, Mapping):
        raise ParameterValidationError(f"buildRatios must map variant names to ratios, got {ratios!r}")

    variants = []
    for name, (cost_key, ratio_key) in VARIANT_KEYS.items():
        default = defaults[name]
        variants.append(ProductVariant(
            name=name,
            unit_cost=payload.get(cost_key, default.unit_cost),
            build_ratio=ratios.get(ratio_key, default.build_ratio),
        ))
    return variants


def parse_working_calendar(payload: Mapping[str, Any], year: Optional[int] = None) -> WorkingCalendar:
    """
    Working calendar from ``workingDaysSchedule``.

    Without a schedule the default calendar of ``year`` (or the current year)
    is used.
    """
    schedule = payload.get("workingDaysSchedule")
    if schedule is None:
        return WorkingCalendar.default_for_year(year or Date.today().year)
    if not schedule:
        return WorkingCalendar(year=year or Date.today().year, working_dates=frozenset())
    return WorkingCalendar.from_date_keys(schedule, year=year)


def parse_payload(payload: Mapping[str, Any], year: Optional[int] = None) -> SimulationParameters:
    """
    Validate a start payload into simulation parameters.

    Args:
        payload: camelCase payload dictionary
        year: Planning year (default: inferred from the working days)

    Returns:
        SimulationParameters

    Raises:
        ParameterValidationError: If the production caps are missing or any
            value is invalid
    """
    if payload.get("targetDailyProduction") is None or payload.get("maxStandardProduction") is None:
        raise ParameterValidationError(
            "Missing critical parameters: targetDailyProduction or maxStandardProduction."
        )

    data: Dict[str, Any] = {
        field_name: payload[key]
        for key, field_name in SCALAR_KEYS.items()
        if payload.get(key) is not None
    }

    try:
        data["working_calendar"] = parse_working_calendar(payload, year)
        data["product_variants"] = parse_product_variants(payload)
    except (ValidationError, TypeError, ValueError) as e:
        raise ParameterValidationError(str(e)) from e

    data["demand_sources"] = parse_demand_sources(payload.get("cities"))
    return SimulationParameters.build(**data)

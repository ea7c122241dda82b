"""Parsers for simulation parameters."""

from .payload_parser import parse_demand_sources, parse_payload, parse_product_variants, parse_working_calendar
from .parameter_parser import ParameterParser

__all__ = [
    "ParameterParser",
    "parse_payload",
    "parse_demand_sources",
    "parse_product_variants",
    "parse_working_calendar",
]

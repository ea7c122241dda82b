"""Product variant data model (unit cost and build-ratio mix)."""

from typing import Iterable
from pydantic import BaseModel, Field


class ProductVariant(BaseModel):
    """
    A product model built on the line.

    Attributes:
        name: Variant name (e.g., "super", "ultra", "mega")
        unit_cost: Manufacturing cost per unit ($/unit)
        build_ratio: Share of total production built as this variant
    """
    name: str = Field(..., description="Variant name")
    unit_cost: float = Field(..., description="Cost per unit ($/unit)", ge=0)
    build_ratio: float = Field(..., description="Share of production", ge=0)

    def __str__(self) -> str:
        """String representation."""
        return f"{self.name}: ${self.unit_cost:,.2f}/unit @ {self.build_ratio:.0%}"


def weighted_average_unit_cost(variants: Iterable[ProductVariant]) -> float:
    """
    Calculate the build-ratio weighted unit cost across all variants.

    Args:
        variants: Product variants

    Returns:
        Sum of unit_cost * build_ratio
    """
    return sum(v.unit_cost * v.build_ratio for v in variants)

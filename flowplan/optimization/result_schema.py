"""Pydantic schemas for shipment optimization results.

This module defines the interface contract between the shipment assignment
model and the scheduler that applies it to the day records. Invalid
solutions raise ValidationError immediately at that boundary.
"""

from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ShipmentAssignment(BaseModel):
    """Start day chosen for one demand source."""
    source_index: int = Field(..., ge=0, description="Position of the source in the input list")
    source: str = Field(..., description="Demand source name")
    start_day: int = Field(..., ge=1, description="Chosen 1-indexed start day")
    cycle_length_days: int = Field(..., ge=1, description="Source cycle length")
    quantity: float = Field(..., gt=0, description="Units per shipment")

    model_config = ConfigDict(extra="allow")

    @model_validator(mode='after')
    def start_day_within_cycle(self) -> 'ShipmentAssignment':
        """Start day must lie inside the first cycle."""
        if self.start_day > self.cycle_length_days:
            raise ValueError(
                f"start_day ({self.start_day}) exceeds cycle length ({self.cycle_length_days}) "
                f"for {self.source}"
            )
        return self


class ShipmentScheduleSolution(BaseModel):
    """Solution of the peak-load shipment assignment model."""
    model_type: Literal["shipment_schedule"] = "shipment_schedule"
    peak_demand: float = Field(..., ge=0, description="Solved peak daily load (Z)")
    assignments: List[ShipmentAssignment] = Field(default_factory=list)
    num_candidates: int = Field(default=0, ge=0, description="Binary candidate variables")

    model_config = ConfigDict(extra="allow")

    def start_days(self) -> List[int]:
        """Start day per source, in source order."""
        return [a.start_day for a in sorted(self.assignments, key=lambda a: a.source_index)]

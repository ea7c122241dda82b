"""Analysis tools for simulated plans."""

from .plan_summary import PlanSummary, overtime_stress

__all__ = ["PlanSummary", "overtime_stress"]

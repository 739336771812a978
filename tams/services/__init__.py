from . import condition, scoring, valuation
from .condition import (
    ConditionBand,
    UrgencyLevel,
    aggregate_by_asset_type,
    aggregate_by_band,
    aggregate_by_region,
    aggregate_by_urgency,
    classify_condition_index,
    deru_to_urgency,
    resolve_urgency,
)
from .scoring import summarize_components

__all__ = [
    "condition",
    "scoring",
    "valuation",
    "ConditionBand",
    "UrgencyLevel",
    "aggregate_by_asset_type",
    "aggregate_by_band",
    "aggregate_by_region",
    "aggregate_by_urgency",
    "classify_condition_index",
    "deru_to_urgency",
    "resolve_urgency",
    "summarize_components",
]

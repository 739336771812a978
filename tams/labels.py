"""Display labels and colours for condition bands and urgency levels.

Kept apart from :mod:`tams.services.condition` so presentation choices can change
without touching classification.
"""

from typing import Any, Dict, Optional

from .services.condition import ConditionBand, UrgencyLevel, classify_condition_index, normalize_urgency


BAND_COLORS: Dict[str, str] = {
    ConditionBand.EXCELLENT: "#16a34a",
    ConditionBand.GOOD: "#84cc16",
    ConditionBand.FAIR: "#f59e0b",
    ConditionBand.POOR: "#dc2626",
    ConditionBand.NOT_INSPECTED: "#9ca3af",
}

URGENCY_LABELS: Dict[str, str] = {
    UrgencyLevel.IMMEDIATE: "Immediate",
    UrgencyLevel.SHORT_TERM: "High",
    UrgencyLevel.LONG_TERM: "Medium",
    UrgencyLevel.ROUTINE: "Low",
    UrgencyLevel.MONITOR: "Monitor",
    UrgencyLevel.RECORD_ONLY: "Record only",
}

URGENCY_COLORS: Dict[str, str] = {
    UrgencyLevel.IMMEDIATE: "#b91c1c",
    UrgencyLevel.SHORT_TERM: "#ea580c",
    UrgencyLevel.LONG_TERM: "#ca8a04",
    UrgencyLevel.ROUTINE: "#2563eb",
    UrgencyLevel.MONITOR: "#0d9488",
    UrgencyLevel.RECORD_ONLY: "#6b7280",
}

UNRESOLVED_LABEL = "Not assessed"
UNRESOLVED_COLOR = "#d1d5db"


def band_color(ci: Any) -> str:
    return BAND_COLORS[classify_condition_index(ci)]


def urgency_label(value: Any) -> str:
    level: Optional[UrgencyLevel] = normalize_urgency(value)
    if level is None:
        return UNRESOLVED_LABEL
    return URGENCY_LABELS[level]


def urgency_color(value: Any) -> str:
    level = normalize_urgency(value)
    if level is None:
        return UNRESOLVED_COLOR
    return URGENCY_COLORS[level]

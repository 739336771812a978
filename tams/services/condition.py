"""Condition Index banding, urgency resolution and dashboard aggregation.

Every function in this module is pure: records go in (mappings or model
instances), small frozen dataclasses come out, and the input is never mutated.
Insufficient signal is never an error here. An asset without a usable Condition
Index lands in ``NotInspected`` and a record without a usable urgency resolves to
``None`` so it can still be listed and counted.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from django.db import models


CI_MIN = 0.0
CI_MAX = 100.0
POOR_CI_LIMIT = 40.0
UNKNOWN_LABEL = "Unknown"


class ConditionBand(models.TextChoices):
    EXCELLENT = "Excellent", "Excellent"
    GOOD = "Good", "Good"
    FAIR = "Fair", "Fair"
    POOR = "Poor", "Poor"
    NOT_INSPECTED = "NotInspected", "Not inspected"


class UrgencyLevel(models.TextChoices):
    RECORD_ONLY = "R", "Record only"
    MONITOR = "0", "Monitor"
    ROUTINE = "1", "Routine"
    LONG_TERM = "2", "Long-term repair"
    SHORT_TERM = "3", "Short-term repair"
    IMMEDIATE = "4", "Immediate"


# Display order used by every band aggregation.
BAND_ORDER: Tuple[ConditionBand, ...] = (
    ConditionBand.EXCELLENT,
    ConditionBand.GOOD,
    ConditionBand.FAIR,
    ConditionBand.POOR,
    ConditionBand.NOT_INSPECTED,
)

# Inclusive lower bounds, checked top-down.
BAND_THRESHOLDS: Tuple[Tuple[float, ConditionBand], ...] = (
    (80.0, ConditionBand.EXCELLENT),
    (60.0, ConditionBand.GOOD),
    (40.0, ConditionBand.FAIR),
    (CI_MIN, ConditionBand.POOR),
)

# Most urgent first.
URGENCY_ORDER: Tuple[UrgencyLevel, ...] = (
    UrgencyLevel.IMMEDIATE,
    UrgencyLevel.SHORT_TERM,
    UrgencyLevel.LONG_TERM,
    UrgencyLevel.ROUTINE,
    UrgencyLevel.MONITOR,
    UrgencyLevel.RECORD_ONLY,
)

URGENCY_RANK: Dict[str, int] = {
    UrgencyLevel.RECORD_ONLY: -1,
    UrgencyLevel.MONITOR: 0,
    UrgencyLevel.ROUTINE: 1,
    UrgencyLevel.LONG_TERM: 2,
    UrgencyLevel.SHORT_TERM: 3,
    UrgencyLevel.IMMEDIATE: 4,
}

HIGH_URGENCY_LEVELS = frozenset({UrgencyLevel.SHORT_TERM, UrgencyLevel.IMMEDIATE})

# Textual labels written by older inspection forms and database views.
URGENCY_LABEL_ALIASES: Dict[str, UrgencyLevel] = {
    "immediate": UrgencyLevel.IMMEDIATE,
    "critical": UrgencyLevel.IMMEDIATE,
    "high": UrgencyLevel.SHORT_TERM,
    "medium": UrgencyLevel.LONG_TERM,
    "low": UrgencyLevel.ROUTINE,
    "minor": UrgencyLevel.MONITOR,
    "routine": UrgencyLevel.MONITOR,
    "monitor": UrgencyLevel.MONITOR,
    "record only": UrgencyLevel.RECORD_ONLY,
    "record": UrgencyLevel.RECORD_ONLY,
    "r": UrgencyLevel.RECORD_ONLY,
}

# Numeric DERU score -> urgency. A score must be strictly greater than the
# first bound to reach level 4; the remaining bounds are inclusive.
DERU_IMMEDIATE_ABOVE = 120.0
DERU_THRESHOLDS: Tuple[Tuple[float, UrgencyLevel], ...] = (
    (80.0, UrgencyLevel.SHORT_TERM),
    (40.0, UrgencyLevel.LONG_TERM),
    (20.0, UrgencyLevel.ROUTINE),
    (0.0, UrgencyLevel.MONITOR),
)


# ---------------------------------------------------------------------------
# Record access helpers
# ---------------------------------------------------------------------------


def get_field(record: Any, name: str, default: Any = None) -> Any:
    """Read ``name`` from a mapping or an object, returning ``default`` when absent."""

    if record is None:
        return default
    if isinstance(record, Mapping):
        return record.get(name, default)
    return getattr(record, name, default)


def to_number(value: Any) -> Optional[float]:
    """Coerce ints, floats, decimals and numeric strings; anything else is ``None``."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip().replace(",", "")
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def clamp_ci(value: Any) -> Optional[float]:
    number = to_number(value)
    if number is None:
        return None
    return max(CI_MIN, min(CI_MAX, number))


def _label(value: Any) -> str:
    text = str(value).strip() if value is not None else ""
    return text or UNKNOWN_LABEL


def _mean(total: float, count: int) -> Optional[float]:
    return round(total / count, 2) if count else None


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def classify_condition_index(ci: Any) -> ConditionBand:
    """Return the band for a Condition Index, clamping it to [0, 100] first."""

    value = clamp_ci(ci)
    if value is None:
        return ConditionBand.NOT_INSPECTED
    for lower_bound, band in BAND_THRESHOLDS:
        if value >= lower_bound:
            return band
    return ConditionBand.POOR


def normalize_urgency(value: Any) -> Optional[UrgencyLevel]:
    """Map a numeric code, a code string or a legacy label to an urgency level."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, UrgencyLevel):
        return value

    number = to_number(value)
    if number is not None:
        if number.is_integer() and 0 <= number <= 4:
            return UrgencyLevel(str(int(number)))
        return None

    if not isinstance(value, str):
        return None
    text = value.strip()
    if text in UrgencyLevel.values:
        return UrgencyLevel(text)
    return URGENCY_LABEL_ALIASES.get(text.lower())


def deru_to_urgency(score: Any) -> Optional[UrgencyLevel]:
    """Convert a numeric DERU score to an urgency level."""

    value = to_number(score)
    if value is None or value < 0:
        return None
    if value > DERU_IMMEDIATE_ABOVE:
        return UrgencyLevel.IMMEDIATE
    for lower_bound, level in DERU_THRESHOLDS:
        if value >= lower_bound:
            return level
    return None


def urgency_from_deru_code(value: Any) -> Optional[UrgencyLevel]:
    """Extract the urgency component of a ``D-E-R-U`` composite string such as ``"3-4-3-4"``."""

    if not isinstance(value, str):
        return None
    parts = [part.strip() for part in value.split("-")]
    if len(parts) != 4 or not all(parts):
        return None
    return normalize_urgency(parts[3])


UrgencyParser = Callable[[Any], Optional[UrgencyLevel]]

# Ordered resolution chain; the first entry producing a level wins.
URGENCY_FIELD_CHAIN: Tuple[Tuple[str, UrgencyParser], ...] = (
    ("urgency_score", normalize_urgency),
    ("latest_deru", urgency_from_deru_code),
    ("latest_deru", deru_to_urgency),
    ("calculated_urgency", normalize_urgency),
    ("latest_urgency", normalize_urgency),
    ("urgency", normalize_urgency),
)


def resolve_urgency(
    record: Any, chain: Sequence[Tuple[str, UrgencyParser]] = URGENCY_FIELD_CHAIN
) -> Optional[UrgencyLevel]:
    """Resolve a record's urgency from the first usable field in ``chain``."""

    for field_name, parser in chain:
        level = parser(get_field(record, field_name))
        if level is not None:
            return level
    return None


def worst_urgency(levels: Iterable[Any]) -> Optional[UrgencyLevel]:
    worst: Optional[UrgencyLevel] = None
    for raw in levels:
        level = normalize_urgency(raw)
        if level is None:
            continue
        if worst is None or URGENCY_RANK[level] > URGENCY_RANK[worst]:
            worst = level
    return worst


def is_high_urgency(record: Any) -> bool:
    return resolve_urgency(record) in HIGH_URGENCY_LEVELS


# ---------------------------------------------------------------------------
# Aggregation results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BandCount:
    band: str
    count: int

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class UrgencyCount:
    urgency: Optional[str]
    count: int

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RegionSummary:
    region: str
    asset_count: int
    scored_count: int
    mean_ci: Optional[float]
    poor_count: int
    replacement_value: float

    @property
    def has_condition_data(self) -> bool:
        return self.mean_ci is not None

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AssetTypeSummary:
    asset_type: str
    total_assets: int
    scored_count: int
    mean_ci: Optional[float]
    critical_count: int
    total_remedial_cost: float

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class MonthlyCondition:
    month: str
    mean_ci: float
    inspection_count: int

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class InspectorPerformance:
    inspector: str
    inspection_count: int
    mean_ci: Optional[float]
    high_urgency_count: int
    total_remedial_cost: float
    first_inspection_date: Optional[str]
    last_inspection_date: Optional[str]

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ConditionStatistics:
    total_assets: int
    total_inspections: int
    mean_ci: Optional[float]
    mean_deru: Optional[float]
    total_remedial_cost: float
    immediate_count: int

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Aggregations
# ---------------------------------------------------------------------------


def aggregate_by_band(records: Iterable[Any], ci_field: str = "latest_ci") -> List[BandCount]:
    """Count records per Condition Index band; all five bands are always returned."""

    counts = {band: 0 for band in BAND_ORDER}
    for record in records:
        counts[classify_condition_index(get_field(record, ci_field))] += 1
    return [BandCount(band=band.value, count=counts[band]) for band in BAND_ORDER]


def aggregate_by_urgency(records: Iterable[Any]) -> List[UrgencyCount]:
    """Count records per resolved urgency, most urgent first, unresolved last."""

    counts: Dict[Optional[UrgencyLevel], int] = {level: 0 for level in URGENCY_ORDER}
    counts[None] = 0
    for record in records:
        counts[resolve_urgency(record)] += 1
    rows = [UrgencyCount(urgency=level.value, count=counts[level]) for level in URGENCY_ORDER]
    rows.append(UrgencyCount(urgency=None, count=counts[None]))
    return rows


def aggregate_by_region(
    records: Iterable[Any],
    region_field: str = "region",
    ci_field: str = "latest_ci",
    value_field: str = "replacement_value",
) -> List[RegionSummary]:
    """Summarise assets per region in first-seen order.

    ``mean_ci`` is ``None`` for a region without any scored asset so that "no
    data" stays distinguishable from "all assets scored 0".
    """

    buckets: Dict[str, Dict[str, float]] = {}
    for record in records:
        region = _label(get_field(record, region_field))
        bucket = buckets.setdefault(
            region, {"assets": 0, "scored": 0, "ci_total": 0.0, "poor": 0, "value": 0.0}
        )
        bucket["assets"] += 1
        ci = clamp_ci(get_field(record, ci_field))
        if ci is not None:
            bucket["scored"] += 1
            bucket["ci_total"] += ci
            if ci < POOR_CI_LIMIT:
                bucket["poor"] += 1
        bucket["value"] += to_number(get_field(record, value_field)) or 0.0

    return [
        RegionSummary(
            region=region,
            asset_count=int(bucket["assets"]),
            scored_count=int(bucket["scored"]),
            mean_ci=_mean(bucket["ci_total"], int(bucket["scored"])),
            poor_count=int(bucket["poor"]),
            replacement_value=round(bucket["value"], 2),
        )
        for region, bucket in buckets.items()
    ]


def aggregate_by_asset_type(
    records: Iterable[Any],
    type_field: str = "asset_type",
    ci_field: str = "latest_ci",
    cost_field: str = "total_remedial_cost",
) -> List[AssetTypeSummary]:
    buckets: Dict[str, Dict[str, float]] = {}
    for record in records:
        asset_type = _label(get_field(record, type_field))
        bucket = buckets.setdefault(
            asset_type, {"assets": 0, "scored": 0, "ci_total": 0.0, "critical": 0, "cost": 0.0}
        )
        bucket["assets"] += 1
        ci = clamp_ci(get_field(record, ci_field))
        if ci is not None:
            bucket["scored"] += 1
            bucket["ci_total"] += ci
        if is_high_urgency(record):
            bucket["critical"] += 1
        bucket["cost"] += to_number(get_field(record, cost_field)) or 0.0

    rows = [
        AssetTypeSummary(
            asset_type=asset_type,
            total_assets=int(bucket["assets"]),
            scored_count=int(bucket["scored"]),
            mean_ci=_mean(bucket["ci_total"], int(bucket["scored"])),
            critical_count=int(bucket["critical"]),
            total_remedial_cost=round(bucket["cost"], 2),
        )
        for asset_type, bucket in buckets.items()
    ]
    rows.sort(key=lambda row: row.total_assets, reverse=True)
    return rows


def month_key(value: Any) -> Optional[str]:
    """Return ``YYYY-MM`` for a date, datetime or ISO date string."""

    if isinstance(value, (date, datetime)):
        return f"{value.year:04d}-{value.month:02d}"
    if isinstance(value, str) and len(value) >= 7 and value[4] == "-":
        candidate = value[:7]
        if candidate[:4].isdigit() and candidate[5:7].isdigit():
            return candidate
    return None


def _iso(value: Any) -> Optional[str]:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, str) and value:
        return value
    return None


def monthly_ci_trend(
    inspections: Iterable[Any],
    date_field: str = "inspection_date",
    ci_field: str = "ci_final",
    limit: Optional[int] = None,
) -> List[MonthlyCondition]:
    """Average Condition Index per month, skipping unscored or undated inspections."""

    months: Dict[str, List[float]] = {}
    for inspection in inspections:
        key = month_key(get_field(inspection, date_field))
        ci = clamp_ci(get_field(inspection, ci_field))
        if key is None or ci is None:
            continue
        months.setdefault(key, []).append(ci)

    trend = [
        MonthlyCondition(month=key, mean_ci=round(sum(values) / len(values), 2), inspection_count=len(values))
        for key, values in sorted(months.items())
    ]
    if limit:
        trend = trend[-limit:]
    return trend


def inspector_performance(
    inspections: Iterable[Any],
    inspector_field: str = "inspector_name",
    ci_field: str = "ci_final",
    cost_field: str = "total_remedial_cost",
    date_field: str = "inspection_date",
) -> List[InspectorPerformance]:
    buckets: Dict[str, Dict[str, Any]] = {}
    for inspection in inspections:
        inspector = _label(get_field(inspection, inspector_field))
        bucket = buckets.setdefault(
            inspector,
            {"count": 0, "scored": 0, "ci_total": 0.0, "high": 0, "cost": 0.0, "first": None, "last": None},
        )
        bucket["count"] += 1
        ci = clamp_ci(get_field(inspection, ci_field))
        if ci is not None:
            bucket["scored"] += 1
            bucket["ci_total"] += ci
        if is_high_urgency(inspection):
            bucket["high"] += 1
        bucket["cost"] += to_number(get_field(inspection, cost_field)) or 0.0

        inspected_on = _iso(get_field(inspection, date_field))
        if inspected_on:
            if bucket["first"] is None or inspected_on < bucket["first"]:
                bucket["first"] = inspected_on
            if bucket["last"] is None or inspected_on > bucket["last"]:
                bucket["last"] = inspected_on

    rows = [
        InspectorPerformance(
            inspector=inspector,
            inspection_count=bucket["count"],
            mean_ci=_mean(bucket["ci_total"], bucket["scored"]),
            high_urgency_count=bucket["high"],
            total_remedial_cost=round(bucket["cost"], 2),
            first_inspection_date=bucket["first"],
            last_inspection_date=bucket["last"],
        )
        for inspector, bucket in buckets.items()
    ]
    rows.sort(key=lambda row: row.inspection_count, reverse=True)
    return rows


def condition_statistics(
    assets: Sequence[Any],
    inspections: Sequence[Any],
    ci_field: str = "ci_final",
    deru_field: str = "deru_value",
    cost_field: str = "total_remedial_cost",
) -> ConditionStatistics:
    """Headline dashboard figures over the latest asset state and the inspection history."""

    ci_values = [value for value in (clamp_ci(get_field(i, ci_field)) for i in inspections) if value is not None]
    deru_values = [value for value in (to_number(get_field(i, deru_field)) for i in inspections) if value is not None]
    total_cost = sum(to_number(get_field(i, cost_field)) or 0.0 for i in inspections)
    immediate = sum(1 for asset in assets if resolve_urgency(asset) == UrgencyLevel.IMMEDIATE)

    return ConditionStatistics(
        total_assets=len(assets),
        total_inspections=len(inspections),
        mean_ci=_mean(sum(ci_values), len(ci_values)),
        mean_deru=_mean(sum(deru_values), len(deru_values)),
        total_remedial_cost=round(total_cost, 2),
        immediate_count=immediate,
    )

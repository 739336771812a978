"""Component-level DERU scoring and inspection roll-up.

Each inspected component carries Degree (0-3, ``X`` not present), Extent (1-4)
and Relevancy (1-4) ratings; ``U`` on any rating means the component could not
be inspected. Component ratings roll up into the inspection's health, safety
and final Condition Index values.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Optional

from .condition import (
    URGENCY_RANK,
    UrgencyLevel,
    clamp_ci,
    get_field,
    to_number,
    worst_urgency,
)


UNABLE_TO_INSPECT = "U"
NOT_PRESENT = "X"
DEFAULT_REPAIR_THRESHOLD = 60

# Worst component urgency -> safety Condition Index.
SAFETY_CI_BY_URGENCY: Dict[str, int] = {
    UrgencyLevel.RECORD_ONLY: 100,
    UrgencyLevel.MONITOR: 90,
    UrgencyLevel.ROUTINE: 75,
    UrgencyLevel.LONG_TERM: 50,
    UrgencyLevel.SHORT_TERM: 25,
    UrgencyLevel.IMMEDIATE: 0,
}


def _round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _rating(value: Any) -> str:
    return str(value).strip().upper() if value is not None else ""


def _int_rating(value: str) -> Optional[int]:
    try:
        return int(value)
    except ValueError:
        return None


def component_condition_index(degree: Any, extent: Any, relevancy: Any) -> Optional[int]:
    """Condition Index (0-100) of one component from its D/E/R ratings."""

    d, e, r = _rating(degree), _rating(extent), _rating(relevancy)
    if not d or not e or not r or UNABLE_TO_INSPECT in (d, e, r):
        return None
    if d in (NOT_PRESENT, "0"):
        return 100

    d_val, e_val, r_val = _int_rating(d), _int_rating(e), _int_rating(r)
    if d_val is None or e_val is None or r_val is None:
        return None
    if not (0 <= d_val <= 3 and 1 <= e_val <= 4 and 1 <= r_val <= 4):
        return None

    penalty = 0.5 * (d_val / 3) + 0.25 * ((e_val - 1) / 3) + 0.25 * ((r_val - 1) / 3)
    ci = round(100 * (1 - penalty))
    return int(clamp_ci(ci))


def component_urgency(degree: Any, extent: Any, relevancy: Any) -> Optional[str]:
    """Urgency of one component from the D/E/R decision tree.

    Returns ``"U"`` when the component could not be inspected and ``None`` when
    the ratings are incomplete or out of range.
    """

    d, e, r = _rating(degree), _rating(extent), _rating(relevancy)
    if UNABLE_TO_INSPECT in (d, e, r):
        return UNABLE_TO_INSPECT
    if d in (NOT_PRESENT, "0"):
        return UrgencyLevel.RECORD_ONLY.value

    d_val, e_val, r_val = _int_rating(d), _int_rating(e), _int_rating(r)
    if d_val is None or e_val is None or r_val is None:
        return None
    if not (1 <= d_val <= 3 and 1 <= e_val <= 4 and 1 <= r_val <= 4):
        return None

    if r_val == 4:
        return "4"
    if d_val == 3 and e_val == 4 and r_val >= 3:
        return "4"

    if d_val == 3 and e_val >= 3 and r_val == 3:
        return "3"
    if 2 <= d_val <= 3 and e_val == 4 and r_val >= 3:
        return "3"
    if d_val == 1 and e_val == 4 and r_val == 2:
        return "3"

    if d_val == 2 and e_val == 3 and r_val == 3:
        return "2"
    if d_val == 3 and e_val <= 3 and r_val <= 3:
        return "2"
    if d_val == 1 and e_val == 3 and r_val == 2:
        return "2"
    if d_val == 1 and e_val == 2 and r_val == 3:
        return "2"
    if d_val == 2 and e_val <= 3 and r_val == 3:
        return "2"

    if d_val == 2 and e_val <= 3 and r_val <= 2:
        return "1"
    if d_val == 1 and e_val == 3 and r_val == 3:
        return "1"
    if d_val == 1 and e_val == 1 and r_val == 3:
        return "1"

    return "0"


def component_cost(ci: Optional[int], quantity: Any, rate: Any, repair_threshold: float) -> Optional[float]:
    """Remedial cost for a component whose CI is at or below the repair threshold."""

    if ci is None or ci > repair_threshold:
        return None
    return round((to_number(quantity) or 0.0) * (to_number(rate) or 0.0), 2)


def deru_value(ci: Any) -> Optional[float]:
    """DERU score for an inspection; rises as condition worsens."""

    value = clamp_ci(ci)
    if value is None:
        return None
    if value < 40:
        multiplier = 2.0
    elif value < 60:
        multiplier = 1.5
    elif value < 80:
        multiplier = 1.0
    else:
        multiplier = 0.5
    return round((100 - value) * multiplier, 2)


@dataclass(frozen=True)
class ScoredComponent:
    component_name: str
    degree: str
    extent: str
    relevancy: str
    ci: Optional[int]
    urgency: Optional[str]
    cost: Optional[float]
    remedial_work: str = ""


@dataclass(frozen=True)
class InspectionSummary:
    ci_health: Optional[int]
    ci_safety: Optional[int]
    ci_final: Optional[int]
    worst_urgency: str
    deru_value: Optional[float]
    total_remedial_cost: float
    remedial_summary: str
    overall_degree: str
    overall_extent: str
    overall_relevancy: str
    scored_components: int
    excluded_components: int
    components: List[ScoredComponent] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def score_component(component: Any, repair_threshold: float = DEFAULT_REPAIR_THRESHOLD) -> ScoredComponent:
    degree = _rating(get_field(component, "degree"))
    extent = _rating(get_field(component, "extent"))
    relevancy = _rating(get_field(component, "relevancy"))
    ci = component_condition_index(degree, extent, relevancy)
    return ScoredComponent(
        component_name=str(get_field(component, "component_name", "") or ""),
        degree=degree,
        extent=extent,
        relevancy=relevancy,
        ci=ci,
        urgency=component_urgency(degree, extent, relevancy),
        cost=component_cost(ci, get_field(component, "quantity"), get_field(component, "rate"), repair_threshold),
        remedial_work=str(get_field(component, "remedial_work", "") or "").strip(),
    )


def summarize_components(
    components: Iterable[Any], repair_threshold: float = DEFAULT_REPAIR_THRESHOLD
) -> InspectionSummary:
    """Roll component ratings up into the inspection-level scores.

    ``ci_final`` is the lower of the health CI (mean of component CIs) and the
    safety CI (derived from the worst component urgency).
    """

    scored = [score_component(component, repair_threshold) for component in components]

    cis = [component.ci for component in scored if component.ci is not None]
    ci_health = _round_half_up(Decimal(sum(cis)) / len(cis)) if cis else None

    ranked = [component for component in scored if component.urgency in URGENCY_RANK]
    worst = (worst_urgency(component.urgency for component in ranked) or UrgencyLevel.RECORD_ONLY).value
    worst_component = next((component for component in ranked if component.urgency == worst), None)

    ci_safety = SAFETY_CI_BY_URGENCY[worst]
    ci_final = min(ci_health, ci_safety) if ci_health is not None else None
    excluded = sum(
        1 for component in scored if component.degree in (NOT_PRESENT, UNABLE_TO_INSPECT)
    )

    return InspectionSummary(
        ci_health=ci_health,
        ci_safety=ci_safety,
        ci_final=ci_final,
        worst_urgency=worst,
        deru_value=deru_value(ci_final),
        total_remedial_cost=round(sum(component.cost or 0.0 for component in scored), 2),
        remedial_summary="; ".join(component.remedial_work for component in scored if component.remedial_work),
        overall_degree=worst_component.degree if worst_component else "",
        overall_extent=worst_component.extent if worst_component else "",
        overall_relevancy=worst_component.relevancy if worst_component else "",
        scored_components=len(scored) - excluded,
        excluded_components=excluded,
        components=scored,
    )

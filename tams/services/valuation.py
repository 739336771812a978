from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional


DAYS_PER_YEAR = Decimal("365.25")


def _decimal(value) -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal("0")


@dataclass(frozen=True)
class Depreciation:
    current_value: Decimal
    accumulated_depreciation: Decimal
    annual_depreciation: Decimal
    remaining_life_years: Decimal


@dataclass(frozen=True)
class ReplacementPriority:
    score: int
    category: str
    reason: str


def asset_age_years(installed_on: Optional[date], today: Optional[date] = None) -> Decimal:
    if installed_on is None:
        return Decimal("0")
    today = today or date.today()
    days = max((today - installed_on).days, 0)
    return Decimal(days) / DAYS_PER_YEAR


def asset_depreciation(
    purchase_price,
    purchase_date: date,
    useful_life_years,
    salvage_value=0,
    today: Optional[date] = None,
) -> Depreciation:
    """Straight-line depreciation of an asset as of ``today``."""

    price = _decimal(purchase_price)
    salvage = _decimal(salvage_value)
    life = _decimal(useful_life_years)
    if life <= 0:
        raise ValueError("useful_life_years must be positive")

    age = asset_age_years(purchase_date, today)
    annual = (price - salvage) / life
    accumulated = min(annual * age, price - salvage)
    current = max(price - accumulated, salvage)
    remaining = max(life - age, Decimal("0"))

    return Depreciation(
        current_value=current.quantize(Decimal("0.01")),
        accumulated_depreciation=accumulated.quantize(Decimal("0.01")),
        annual_depreciation=annual.quantize(Decimal("0.01")),
        remaining_life_years=remaining.quantize(Decimal("0.1")),
    )


def replacement_priority(
    ci,
    age_years,
    useful_life_years,
    maintenance_cost_last_12_months,
    replacement_cost,
) -> ReplacementPriority:
    """Combine condition (40%), age (30%) and maintenance cost ratio (30%) into a 0-100 score."""

    condition_score = (Decimal("100") - _decimal(ci)) * Decimal("0.4")

    life = _decimal(useful_life_years)
    age_ratio = _decimal(age_years) / life if life > 0 else Decimal("1")
    age_score = min(age_ratio, Decimal("1")) * 100 * Decimal("0.3")

    replacement = _decimal(replacement_cost)
    cost_ratio = _decimal(maintenance_cost_last_12_months) / replacement if replacement > 0 else Decimal("0")
    cost_score = min(cost_ratio * 100, Decimal("100")) * Decimal("0.3")

    score = int((condition_score + age_score + cost_score).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    if score >= 80:
        return ReplacementPriority(score, "Critical", "Poor condition, near end of life, high maintenance costs")
    if score >= 60:
        return ReplacementPriority(score, "High", "Deteriorating condition or high maintenance costs")
    if score >= 40:
        return ReplacementPriority(score, "Medium", "Aging asset requiring monitoring")
    return ReplacementPriority(score, "Low", "Good condition, within expected lifecycle")

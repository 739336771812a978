from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from django.db.models import QuerySet

from . import labels, models
from .services import dashboard


@dataclass(frozen=True)
class AssetRegisterRow:
    reference_code: str
    name: str
    asset_type: str
    status: str
    region: str
    depot: str
    road_name: str
    latitude: float | None
    longitude: float | None
    installation_date: date | None
    replacement_value: float | None
    latest_ci: float | None
    condition_band: str
    urgency: str
    latest_inspection_date: date | None


@dataclass(frozen=True)
class InspectionRegisterRow:
    reference_code: str
    asset_type: str
    inspection_date: date
    inspector_name: str
    ci_health: float | None
    ci_safety: float | None
    ci_final: float | None
    deru_value: float | None
    urgency: str
    total_remedial_cost: float
    remedial_summary: str


@dataclass(frozen=True)
class RegionSummaryRow:
    region: str
    asset_count: int
    scored_count: int
    mean_ci: float | None
    poor_count: int
    replacement_value: float


def _float(value) -> float | None:
    return float(value) if value is not None else None


def asset_register_rows(assets: Optional[QuerySet] = None) -> Sequence[AssetRegisterRow]:
    if assets is None:
        assets = models.Asset.objects.active()
    rows = []
    for asset in assets.order_by("reference_code"):
        rows.append(
            AssetRegisterRow(
                reference_code=asset.reference_code,
                name=asset.name,
                asset_type=asset.asset_type,
                status=asset.status,
                region=asset.region,
                depot=asset.depot,
                road_name=asset.road_name,
                latitude=_float(asset.latitude),
                longitude=_float(asset.longitude),
                installation_date=asset.installation_date,
                replacement_value=_float(asset.replacement_value),
                latest_ci=_float(asset.latest_ci),
                condition_band=asset.condition_band.label,
                urgency=labels.urgency_label(asset.resolved_urgency),
                latest_inspection_date=asset.latest_inspection_date,
            )
        )
    return rows


def inspection_register_rows(year: int | None = None) -> Sequence[InspectionRegisterRow]:
    inspections = models.Inspection.objects.select_related("asset").filter(asset__is_deleted=False)
    if year:
        inspections = inspections.filter(inspection_date__year=year)
    rows = []
    for inspection in inspections.order_by("asset__reference_code", "inspection_date", "id"):
        rows.append(
            InspectionRegisterRow(
                reference_code=inspection.asset.reference_code,
                asset_type=inspection.asset.asset_type,
                inspection_date=inspection.inspection_date,
                inspector_name=inspection.inspector_name,
                ci_health=_float(inspection.ci_health),
                ci_safety=_float(inspection.ci_safety),
                ci_final=_float(inspection.ci_final),
                deru_value=_float(inspection.deru_value),
                urgency=labels.urgency_label(inspection.calculated_urgency),
                total_remedial_cost=float(inspection.total_remedial_cost or 0),
                remedial_summary=inspection.remedial_summary,
            )
        )
    return rows


def region_summary_rows(assets: Optional[QuerySet] = None) -> Sequence[RegionSummaryRow]:
    return [
        RegionSummaryRow(
            region=summary.region,
            asset_count=summary.asset_count,
            scored_count=summary.scored_count,
            mean_ci=summary.mean_ci,
            poor_count=summary.poor_count,
            replacement_value=summary.replacement_value,
        )
        for summary in dashboard.region_summary(assets)
    ]

"""Database-backed dashboard queries.

Querysets are flattened with ``.values()`` and handed to the pure aggregators in
:mod:`tams.services.condition`; nothing here classifies on its own.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from django.db.models import OuterRef, QuerySet, Subquery

from ..models import Asset, Inspection
from . import condition

logger = logging.getLogger(__name__)

ASSET_FIELDS = (
    "id",
    "reference_code",
    "asset_type",
    "region",
    "latest_ci",
    "latest_urgency",
    "latest_deru",
    "replacement_value",
)

INSPECTION_FIELDS = (
    "id",
    "inspection_date",
    "inspector_name",
    "ci_final",
    "deru_value",
    "calculated_urgency",
    "total_remedial_cost",
)


def filter_assets(queryset: QuerySet, params: Mapping[str, Any]) -> QuerySet:
    """Apply the ``region``/``asset_type``/``band``/``urgency`` query filters."""

    region = params.get("region")
    if region:
        queryset = queryset.filter(region__iexact=region)
    asset_type = params.get("asset_type")
    if asset_type:
        queryset = queryset.filter(asset_type=asset_type)
    band = params.get("band")
    if band:
        queryset = queryset.in_band(band)
    urgency = params.get("urgency")
    if urgency:
        level = condition.normalize_urgency(urgency)
        if level is None:
            return queryset.none()
        matching = [
            record["id"]
            for record in queryset.values(*ASSET_FIELDS)
            if condition.resolve_urgency(record) == level
        ]
        queryset = queryset.filter(pk__in=matching)
    return queryset


def asset_records(queryset: Optional[QuerySet] = None) -> List[Dict[str, Any]]:
    """Active assets as plain dicts, with the latest inspection's remedial cost attached."""

    if queryset is None:
        queryset = Asset.objects.active()
    latest_cost = (
        Inspection.objects.filter(asset=OuterRef("pk"))
        .order_by("-inspection_date", "-id")
        .values("total_remedial_cost")[:1]
    )
    return list(queryset.annotate(total_remedial_cost=Subquery(latest_cost)).values(*ASSET_FIELDS, "total_remedial_cost"))


def inspection_records(assets: Optional[QuerySet] = None) -> List[Dict[str, Any]]:
    inspections = Inspection.objects.filter(asset__is_deleted=False)
    if assets is not None:
        inspections = inspections.filter(asset__in=assets)
    return list(inspections.order_by("inspection_date", "id").values(*INSPECTION_FIELDS))


def ci_distribution(assets: Optional[QuerySet] = None) -> List[condition.BandCount]:
    return condition.aggregate_by_band(asset_records(assets))


def region_summary(assets: Optional[QuerySet] = None) -> List[condition.RegionSummary]:
    return condition.aggregate_by_region(asset_records(assets))


def urgency_summary(assets: Optional[QuerySet] = None) -> List[condition.UrgencyCount]:
    return condition.aggregate_by_urgency(asset_records(assets))


def asset_type_summary(assets: Optional[QuerySet] = None) -> List[condition.AssetTypeSummary]:
    return condition.aggregate_by_asset_type(asset_records(assets))


def ci_trend(assets: Optional[QuerySet] = None, months: Optional[int] = None) -> List[condition.MonthlyCondition]:
    return condition.monthly_ci_trend(inspection_records(assets), limit=months)


def inspector_summary(assets: Optional[QuerySet] = None) -> List[condition.InspectorPerformance]:
    return condition.inspector_performance(inspection_records(assets))


def dashboard_statistics(assets: Optional[QuerySet] = None) -> condition.ConditionStatistics:
    records = asset_records(assets)
    inspections = inspection_records(assets)
    stats = condition.condition_statistics(records, inspections)
    logger.debug(
        "Dashboard statistics over %s assets and %s inspections", stats.total_assets, stats.total_inspections
    )
    return stats

"""REST API views for the TAMS backend."""

from __future__ import annotations

import logging
from typing import Optional

from django.db.models import QuerySet
from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.request import Request
from rest_framework.response import Response

from . import models, serializers
from .models import repair_threshold
from .services import dashboard
from .services.scoring import summarize_components

logger = logging.getLogger(__name__)


class AssetViewSet(viewsets.ModelViewSet):
    serializer_class = serializers.AssetSerializer

    def get_queryset(self) -> QuerySet[models.Asset]:
        queryset = models.Asset.objects.active().prefetch_related("work_orders")
        return dashboard.filter_assets(queryset, self.request.query_params)

    def perform_destroy(self, instance: models.Asset) -> None:
        instance.soft_delete()
        logger.info("Asset %s marked as deleted", instance.reference_code)

    @action(detail=True, methods=["get"])
    def inspections(self, request: Request, pk=None) -> Response:
        asset = self.get_object()
        inspections = asset.inspections.prefetch_related("component_scores").order_by("-inspection_date", "-id")
        serializer = serializers.InspectionSerializer(inspections, many=True)
        return Response(serializer.data)


class InspectionViewSet(viewsets.ModelViewSet):
    queryset = (
        models.Inspection.objects.select_related("asset")
        .prefetch_related("component_scores")
        .filter(asset__is_deleted=False)
    )
    serializer_class = serializers.InspectionSerializer

    def get_queryset(self):
        queryset = super().get_queryset()
        asset_id = self.request.query_params.get("asset")
        if asset_id:
            queryset = queryset.filter(asset_id=asset_id)
        return queryset

    def perform_create(self, serializer) -> None:
        user = self.request.user
        extra = {}
        if user.is_authenticated and not serializer.validated_data.get("inspector"):
            extra["inspector"] = user
            if not serializer.validated_data.get("inspector_name"):
                extra["inspector_name"] = user.get_full_name() or user.get_username()
        serializer.save(**extra)


class ComponentScoreViewSet(viewsets.ModelViewSet):
    queryset = models.ComponentScore.objects.select_related("inspection", "inspection__asset").all()
    serializer_class = serializers.ComponentScoreSerializer

    def get_queryset(self):
        queryset = super().get_queryset()
        inspection_id = self.request.query_params.get("inspection")
        if inspection_id:
            queryset = queryset.filter(inspection_id=inspection_id)
        return queryset


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------


def _filtered_assets(request: Request) -> QuerySet[models.Asset]:
    return dashboard.filter_assets(models.Asset.objects.active(), request.query_params)


def _positive_int(value: Optional[str]) -> Optional[int]:
    if value and value.isdigit() and int(value) > 0:
        return int(value)
    return None


@api_view(["GET"])
def ci_distribution(request: Request) -> Response:
    rows = dashboard.ci_distribution(_filtered_assets(request))
    return Response(serializers.BandCountSerializer(rows, many=True).data)


@api_view(["GET"])
def region_summary(request: Request) -> Response:
    rows = dashboard.region_summary(_filtered_assets(request))
    return Response(serializers.RegionSummarySerializer(rows, many=True).data)


@api_view(["GET"])
def urgency_summary(request: Request) -> Response:
    rows = dashboard.urgency_summary(_filtered_assets(request))
    return Response(serializers.UrgencyCountSerializer(rows, many=True).data)


@api_view(["GET"])
def asset_type_summary(request: Request) -> Response:
    rows = dashboard.asset_type_summary(_filtered_assets(request))
    return Response(serializers.AssetTypeSummarySerializer(rows, many=True).data)


@api_view(["GET"])
def ci_trend(request: Request) -> Response:
    months = _positive_int(request.query_params.get("months"))
    rows = dashboard.ci_trend(_filtered_assets(request), months=months)
    return Response(serializers.MonthlyConditionSerializer(rows, many=True).data)


@api_view(["GET"])
def inspector_performance(request: Request) -> Response:
    rows = dashboard.inspector_summary(_filtered_assets(request))
    return Response(serializers.InspectorPerformanceSerializer(rows, many=True).data)


@api_view(["GET"])
def dashboard_stats(request: Request) -> Response:
    stats = dashboard.dashboard_statistics(_filtered_assets(request))
    return Response(serializers.ConditionStatisticsSerializer(stats).data)


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated])
def calculation_preview(request: Request) -> Response:
    """Score a list of component ratings without saving anything."""

    serializer = serializers.CalculationPreviewSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    threshold = serializer.validated_data.get("repair_threshold", repair_threshold())
    summary = summarize_components(serializer.validated_data["components"], threshold)
    return Response(summary.as_dict(), status=status.HTTP_200_OK)

from __future__ import annotations

from django.shortcuts import get_object_or_404
from rest_framework import permissions, status, viewsets
from rest_framework.decorators import api_view, permission_classes
from rest_framework.request import Request
from rest_framework.response import Response

from tams.models import Asset

from . import models, serializers, services


class WorkOrderViewSet(viewsets.ModelViewSet):
    queryset = models.WorkOrder.objects.select_related("asset", "inspection").all()
    serializer_class = serializers.WorkOrderSerializer

    def get_queryset(self):
        queryset = super().get_queryset()
        params = self.request.query_params
        if params.get("status"):
            queryset = queryset.filter(status=params["status"])
        if params.get("batch"):
            queryset = queryset.filter(batch_reference=params["batch"])
        if params.get("asset"):
            queryset = queryset.filter(asset_id=params["asset"])
        return queryset


@api_view(["GET"])
def asset_work_orders(request: Request, asset_id: int) -> Response:
    asset = get_object_or_404(Asset.objects.active(), pk=asset_id)
    orders = asset.work_orders.select_related("inspection").order_by("-scheduled_date", "-id")
    return Response(serializers.WorkOrderSerializer(orders, many=True).data)


@api_view(["GET"])
def work_order_stats(request: Request) -> Response:
    summary = services.maintenance_status_summary(models.WorkOrder.objects.all())
    return Response(serializers.MaintenanceStatusSummarySerializer(summary).data)


@api_view(["GET"])
def work_order_cost_trend(request: Request) -> Response:
    orders = models.WorkOrder.objects.exclude(status=models.WorkOrder.Status.CANCELLED).values(
        "completed_date", "scheduled_date", "actual_cost", "estimated_cost"
    )
    rows = services.monthly_cost_trend(orders)
    return Response(serializers.MonthlyCostSerializer(rows, many=True).data)


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated])
def bulk_create_work_orders(request: Request) -> Response:
    """Fan one work order out to every selected asset under a shared batch reference."""

    serializer = serializers.BulkWorkOrderSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    fields = dict(serializer.validated_data)
    assets = fields.pop("assets")
    try:
        orders = services.bulk_create_work_orders(assets, **fields)
    except ValueError as exc:
        return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(
        {
            "batch_reference": orders[0].batch_reference,
            "created": len(orders),
            "work_orders": serializers.WorkOrderSerializer(orders, many=True).data,
        },
        status=status.HTTP_201_CREATED,
    )

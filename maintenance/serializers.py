from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from tams.models import Asset
from tams.validators import validate_completion

from . import models, services


class WorkOrderSerializer(serializers.ModelSerializer):
    asset_reference = serializers.CharField(source="asset.reference_code", read_only=True, default=None)
    effective_status = serializers.SerializerMethodField()
    cost = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = models.WorkOrder
        fields = [
            "id",
            "asset",
            "asset_reference",
            "inspection",
            "batch_reference",
            "title",
            "description",
            "maintenance_type",
            "priority",
            "status",
            "effective_status",
            "scheduled_date",
            "completed_date",
            "technician",
            "estimated_cost",
            "actual_cost",
            "cost",
            "created_at",
            "modified_at",
        ]
        read_only_fields = ("batch_reference", "created_at", "modified_at")

    def get_effective_status(self, obj):
        return services.effective_status(obj)

    def validate(self, attrs):
        instance = self.instance
        try:
            validate_completion(
                attrs.get("status", getattr(instance, "status", models.WorkOrder.Status.SCHEDULED)),
                attrs.get("scheduled_date", getattr(instance, "scheduled_date", None)),
                attrs.get("completed_date", getattr(instance, "completed_date", None)),
            )
        except DjangoValidationError as exc:
            raise serializers.ValidationError(exc.message_dict)
        return attrs


class BulkWorkOrderSerializer(serializers.Serializer):
    assets = serializers.PrimaryKeyRelatedField(
        queryset=Asset.objects.active(), many=True, allow_empty=False
    )
    title = serializers.CharField(required=False, allow_blank=True, default="")
    description = serializers.CharField(required=False, allow_blank=True, default="")
    maintenance_type = serializers.ChoiceField(
        choices=models.WorkOrder.MaintenanceType.choices, default=models.WorkOrder.MaintenanceType.REPAIR
    )
    priority = serializers.ChoiceField(
        choices=models.WorkOrder.Priority.choices, default=models.WorkOrder.Priority.MEDIUM
    )
    scheduled_date = serializers.DateField(required=False, allow_null=True)
    technician = serializers.CharField(required=False, allow_blank=True, default="")
    estimated_cost = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)


class MaintenanceStatusSummarySerializer(serializers.Serializer):
    scheduled = serializers.IntegerField()
    in_progress = serializers.IntegerField()
    completed_this_month = serializers.IntegerField()
    overdue = serializers.IntegerField()
    cancelled = serializers.IntegerField()
    total = serializers.IntegerField()


class MonthlyCostSerializer(serializers.Serializer):
    month = serializers.CharField()
    cost = serializers.FloatField()
    order_count = serializers.IntegerField()

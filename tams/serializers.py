"""Serializers for the TAMS REST API."""

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from . import labels, models, validators


def _raise_drf(exc: DjangoValidationError):
    detail = exc.message_dict if hasattr(exc, "error_dict") else exc.messages
    raise serializers.ValidationError(detail)


class AssetSerializer(serializers.ModelSerializer):
    condition_band = serializers.CharField(read_only=True)
    band_color = serializers.SerializerMethodField()
    urgency = serializers.SerializerMethodField()
    urgency_label = serializers.SerializerMethodField()
    current_value = serializers.SerializerMethodField()
    remaining_life_years = serializers.SerializerMethodField()
    replacement_priority = serializers.SerializerMethodField()

    class Meta:
        model = models.Asset
        fields = [
            "id",
            "reference_code",
            "name",
            "asset_type",
            "status",
            "latitude",
            "longitude",
            "road_name",
            "road_number",
            "region",
            "depot",
            "ward",
            "owner",
            "installation_date",
            "replacement_value",
            "useful_life_years",
            "latest_ci",
            "latest_urgency",
            "latest_deru",
            "latest_inspection_date",
            "condition_band",
            "band_color",
            "urgency",
            "urgency_label",
            "current_value",
            "remaining_life_years",
            "replacement_priority",
            "created_at",
            "modified_at",
        ]
        read_only_fields = (
            "latest_ci",
            "latest_urgency",
            "latest_deru",
            "latest_inspection_date",
            "created_at",
            "modified_at",
        )

    def get_band_color(self, obj):
        return labels.band_color(obj.latest_ci)

    def get_urgency(self, obj):
        level = obj.resolved_urgency
        return level.value if level is not None else None

    def get_urgency_label(self, obj):
        return labels.urgency_label(obj.resolved_urgency)

    def get_current_value(self, obj):
        depreciation = obj.depreciation()
        return str(depreciation.current_value) if depreciation else None

    def get_remaining_life_years(self, obj):
        depreciation = obj.depreciation()
        return str(depreciation.remaining_life_years) if depreciation else None

    def get_replacement_priority(self, obj):
        priority = obj.replacement_priority()
        if priority is None:
            return None
        return {"score": priority.score, "category": priority.category, "reason": priority.reason}

    def validate(self, attrs):
        instance = self.instance
        latitude = attrs.get("latitude", getattr(instance, "latitude", None))
        longitude = attrs.get("longitude", getattr(instance, "longitude", None))
        try:
            validators.validate_coordinates(latitude, longitude)
            validators.validate_installation_date(attrs.get("installation_date"))
        except DjangoValidationError as exc:
            _raise_drf(exc)
        return attrs


class ComponentScoreSerializer(serializers.ModelSerializer):
    class Meta:
        model = models.ComponentScore
        fields = [
            "id",
            "inspection",
            "component_name",
            "degree",
            "extent",
            "relevancy",
            "quantity",
            "quantity_unit",
            "rate",
            "remedial_work",
            "ci",
            "urgency",
            "cost",
        ]
        read_only_fields = ("ci", "urgency", "cost")

    def validate(self, attrs):
        degree = attrs.get("degree", getattr(self.instance, "degree", ""))
        extent = attrs.get("extent", getattr(self.instance, "extent", ""))
        relevancy = attrs.get("relevancy", getattr(self.instance, "relevancy", ""))
        if degree not in ("X", "0", "U") and (not extent or not relevancy):
            raise serializers.ValidationError(
                {"extent": "Extent and relevancy are required when a defect degree is recorded."}
            )
        return attrs


class InspectionSerializer(serializers.ModelSerializer):
    component_scores = ComponentScoreSerializer(many=True, read_only=True)
    asset_reference = serializers.CharField(source="asset.reference_code", read_only=True)
    condition_band = serializers.CharField(read_only=True)

    class Meta:
        model = models.Inspection
        fields = [
            "id",
            "asset",
            "asset_reference",
            "inspection_date",
            "inspector_name",
            "inspector",
            "ci_health",
            "ci_safety",
            "ci_final",
            "condition_band",
            "deru_value",
            "calculated_urgency",
            "total_remedial_cost",
            "overall_degree",
            "overall_extent",
            "overall_relevancy",
            "remedial_summary",
            "remarks",
            "component_scores",
            "created_at",
            "modified_at",
        ]
        read_only_fields = (
            "ci_health",
            "ci_safety",
            "overall_degree",
            "overall_extent",
            "overall_relevancy",
            "created_at",
            "modified_at",
        )

    def validate_inspection_date(self, value):
        try:
            validators.validate_inspection_date(value)
        except DjangoValidationError as exc:
            raise serializers.ValidationError(exc.message_dict["inspection_date"])
        return value

    def validate_ci_final(self, value):
        if value is not None and not (0 <= value <= 100):
            raise serializers.ValidationError("Condition Index must be between 0 and 100.")
        return value


class ComponentInputSerializer(serializers.Serializer):
    component_name = serializers.CharField(required=False, allow_blank=True, default="")
    degree = serializers.CharField(max_length=1)
    extent = serializers.CharField(max_length=1, required=False, allow_blank=True, default="")
    relevancy = serializers.CharField(max_length=1, required=False, allow_blank=True, default="")
    quantity = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True)
    rate = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    remedial_work = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_degree(self, value: str) -> str:
        value = value.upper()
        if value not in dict(models.ComponentScore.DEGREE_CHOICES):
            raise serializers.ValidationError("Degree must be 0-3, X or U.")
        return value


class CalculationPreviewSerializer(serializers.Serializer):
    components = ComponentInputSerializer(many=True)
    repair_threshold = serializers.IntegerField(required=False, min_value=0, max_value=100)

    def validate_components(self, value):
        if not value:
            raise serializers.ValidationError("Provide at least one component.")
        return value


# ---------------------------------------------------------------------------
# Dashboard rows
# ---------------------------------------------------------------------------


class BandCountSerializer(serializers.Serializer):
    band = serializers.CharField()
    count = serializers.IntegerField()
    color = serializers.SerializerMethodField()

    def get_color(self, obj):
        return labels.BAND_COLORS[obj.band]


class UrgencyCountSerializer(serializers.Serializer):
    urgency = serializers.CharField(allow_null=True)
    count = serializers.IntegerField()
    label = serializers.SerializerMethodField()
    color = serializers.SerializerMethodField()

    def get_label(self, obj):
        return labels.urgency_label(obj.urgency)

    def get_color(self, obj):
        return labels.urgency_color(obj.urgency)


class RegionSummarySerializer(serializers.Serializer):
    region = serializers.CharField()
    asset_count = serializers.IntegerField()
    scored_count = serializers.IntegerField()
    mean_ci = serializers.FloatField(allow_null=True)
    poor_count = serializers.IntegerField()
    replacement_value = serializers.FloatField()
    has_condition_data = serializers.BooleanField()


class AssetTypeSummarySerializer(serializers.Serializer):
    asset_type = serializers.CharField()
    total_assets = serializers.IntegerField()
    scored_count = serializers.IntegerField()
    mean_ci = serializers.FloatField(allow_null=True)
    critical_count = serializers.IntegerField()
    total_remedial_cost = serializers.FloatField()


class MonthlyConditionSerializer(serializers.Serializer):
    month = serializers.CharField()
    mean_ci = serializers.FloatField()
    inspection_count = serializers.IntegerField()


class InspectorPerformanceSerializer(serializers.Serializer):
    inspector = serializers.CharField()
    inspection_count = serializers.IntegerField()
    mean_ci = serializers.FloatField(allow_null=True)
    high_urgency_count = serializers.IntegerField()
    total_remedial_cost = serializers.FloatField()
    first_inspection_date = serializers.CharField(allow_null=True)
    last_inspection_date = serializers.CharField(allow_null=True)


class ConditionStatisticsSerializer(serializers.Serializer):
    total_assets = serializers.IntegerField()
    total_inspections = serializers.IntegerField()
    mean_ci = serializers.FloatField(allow_null=True)
    mean_deru = serializers.FloatField(allow_null=True)
    total_remedial_cost = serializers.FloatField()
    immediate_count = serializers.IntegerField()

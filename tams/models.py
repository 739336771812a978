"""Core data models for the TAMS backend.

Assets carry a read-optimised copy of their latest inspection outcome
(``latest_ci``, ``latest_urgency``, ``latest_deru``); :mod:`tams.signals` keeps
that copy in step with the inspection history.
"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from .services.condition import ConditionBand, UrgencyLevel, classify_condition_index, resolve_urgency
from .services.scoring import DEFAULT_REPAIR_THRESHOLD, InspectionSummary, score_component, summarize_components
from .services.valuation import (
    Depreciation,
    ReplacementPriority,
    asset_age_years,
    asset_depreciation,
    replacement_priority,
)
from .validators import (
    reference_code_validator,
    validate_coordinates,
    validate_inspection_date,
    validate_installation_date,
)


def repair_threshold() -> int:
    return getattr(settings, "TAMS_REPAIR_THRESHOLD_CI", DEFAULT_REPAIR_THRESHOLD)


# ---------------------------------------------------------------------------
# Asset register
# ---------------------------------------------------------------------------


class AssetQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_deleted=False)

    def in_band(self, band: str):
        """Filter by Condition Index band using the same thresholds as the classifier."""

        if band == ConditionBand.NOT_INSPECTED:
            return self.filter(latest_ci__isnull=True)
        bounds = {
            ConditionBand.EXCELLENT: (Decimal("80"), None),
            ConditionBand.GOOD: (Decimal("60"), Decimal("80")),
            ConditionBand.FAIR: (Decimal("40"), Decimal("60")),
            ConditionBand.POOR: (None, Decimal("40")),
        }.get(band)
        if bounds is None:
            return self.none()
        lower, upper = bounds
        qs = self.filter(latest_ci__isnull=False)
        if lower is not None:
            qs = qs.filter(latest_ci__gte=lower)
        if upper is not None:
            qs = qs.filter(latest_ci__lt=upper)
        return qs


class Asset(models.Model):
    class AssetType(models.TextChoices):
        SIGNAGE = "Signage", "Signage"
        GUARDRAIL = "Guardrail", "Guardrail"
        TRAFFIC_SIGNAL = "Traffic Signal", "Traffic Signal"
        GANTRY = "Gantry", "Gantry"
        FENCE = "Fence", "Fence"
        SAFETY_BARRIER = "Safety Barrier", "Safety Barrier"
        GUIDEPOST = "Guidepost", "Guidepost"
        ROAD_MARKING = "Road Marking", "Road Marking"
        RAISED_ROAD_MARKER = "Raised Road Marker", "Raised Road Marker"

    class Status(models.TextChoices):
        ACTIVE = "active", "Active"
        INACTIVE = "inactive", "Inactive"
        MAINTENANCE = "maintenance", "Under maintenance"
        DECOMMISSIONED = "decommissioned", "Decommissioned"
        PLANNED = "planned", "Planned"

    reference_code = models.CharField(max_length=50, unique=True, validators=[reference_code_validator])
    name = models.CharField(max_length=200, blank=True)
    asset_type = models.CharField(max_length=30, choices=AssetType.choices)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.ACTIVE)

    latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    road_name = models.CharField(max_length=150, blank=True)
    road_number = models.CharField(max_length=50, blank=True)

    region = models.CharField(max_length=100, blank=True)
    depot = models.CharField(max_length=100, blank=True)
    ward = models.CharField(max_length=100, blank=True)
    owner = models.CharField(max_length=150, blank=True)

    installation_date = models.DateField(null=True, blank=True)
    replacement_value = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    useful_life_years = models.PositiveSmallIntegerField(null=True, blank=True)

    latest_ci = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    latest_urgency = models.CharField(max_length=1, choices=UrgencyLevel.choices, blank=True)
    latest_deru = models.DecimalField(max_digits=6, decimal_places=2, null=True, blank=True)
    latest_inspection_date = models.DateField(null=True, blank=True)

    is_deleted = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    modified_at = models.DateTimeField(auto_now=True)

    objects = AssetQuerySet.as_manager()

    class Meta:
        ordering = ["reference_code"]

    def __str__(self) -> str:  # pragma: no cover - simple repr
        return f"{self.reference_code} ({self.asset_type})"

    def clean(self):
        validate_coordinates(self.latitude, self.longitude)
        validate_installation_date(self.installation_date)

    @property
    def condition_band(self) -> ConditionBand:
        return classify_condition_index(self.latest_ci)

    @property
    def resolved_urgency(self) -> Optional[UrgencyLevel]:
        return resolve_urgency(self)

    def latest_inspection(self) -> Optional["Inspection"]:
        return self.inspections.order_by("-inspection_date", "-id").first()

    def refresh_latest_condition(self, save: bool = True) -> Optional["Inspection"]:
        """Copy the most recent inspection's outcome onto the asset."""

        inspection = self.latest_inspection()
        if inspection is None:
            self.latest_ci = None
            self.latest_urgency = ""
            self.latest_deru = None
            self.latest_inspection_date = None
        else:
            self.latest_ci = inspection.ci_final
            self.latest_urgency = inspection.calculated_urgency or ""
            self.latest_deru = inspection.deru_value
            self.latest_inspection_date = inspection.inspection_date
        if save:
            self.save(
                update_fields=[
                    "latest_ci",
                    "latest_urgency",
                    "latest_deru",
                    "latest_inspection_date",
                    "modified_at",
                ]
            )
        return inspection

    def depreciation(self, today: Optional[date] = None) -> Optional[Depreciation]:
        if self.replacement_value is None or self.installation_date is None or not self.useful_life_years:
            return None
        return asset_depreciation(self.replacement_value, self.installation_date, self.useful_life_years, today=today)

    def maintenance_cost_last_12_months(self, today: Optional[date] = None) -> Decimal:
        """Spend on work orders completed in the twelve months up to ``today``."""

        today = today or date.today()
        window_start = today - timedelta(days=365)
        return sum(
            (
                order.cost
                for order in self.work_orders.all()
                if order.status != "Cancelled"
                and order.completed_date is not None
                and window_start < order.completed_date <= today
            ),
            Decimal("0"),
        )

    def replacement_priority(self, today: Optional[date] = None) -> Optional[ReplacementPriority]:
        if self.latest_ci is None:
            return None
        return replacement_priority(
            self.latest_ci,
            asset_age_years(self.installation_date, today),
            self.useful_life_years,
            self.maintenance_cost_last_12_months(today),
            self.replacement_value,
        )

    def soft_delete(self) -> None:
        self.is_deleted = True
        self.save(update_fields=["is_deleted", "modified_at"])


# ---------------------------------------------------------------------------
# Inspections
# ---------------------------------------------------------------------------


class Inspection(models.Model):
    asset = models.ForeignKey(Asset, on_delete=models.CASCADE, related_name="inspections")
    inspection_date = models.DateField()
    inspector_name = models.CharField(max_length=150, blank=True)
    inspector = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="tams_inspections",
    )

    ci_health = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    ci_safety = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    ci_final = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    deru_value = models.DecimalField(max_digits=6, decimal_places=2, null=True, blank=True)
    calculated_urgency = models.CharField(max_length=1, choices=UrgencyLevel.choices, blank=True)
    total_remedial_cost = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0"))

    overall_degree = models.CharField(max_length=1, blank=True)
    overall_extent = models.CharField(max_length=1, blank=True)
    overall_relevancy = models.CharField(max_length=1, blank=True)
    remedial_summary = models.TextField(blank=True)
    remarks = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    modified_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-inspection_date", "-id"]

    def __str__(self) -> str:  # pragma: no cover - simple repr
        return f"{self.asset.reference_code} @ {self.inspection_date}"

    def clean(self):
        validate_inspection_date(self.inspection_date)

    @property
    def condition_band(self) -> ConditionBand:
        return classify_condition_index(self.ci_final)

    def apply_summary(self, summary: InspectionSummary) -> None:
        def _dec(value):
            return Decimal(str(value)) if value is not None else None

        self.ci_health = _dec(summary.ci_health)
        self.ci_safety = _dec(summary.ci_safety) if summary.ci_health is not None else None
        self.ci_final = _dec(summary.ci_final)
        self.deru_value = _dec(summary.deru_value)
        self.calculated_urgency = summary.worst_urgency if summary.ci_health is not None else ""
        self.total_remedial_cost = _dec(summary.total_remedial_cost) or Decimal("0")
        self.overall_degree = summary.overall_degree
        self.overall_extent = summary.overall_extent
        self.overall_relevancy = summary.overall_relevancy
        self.remedial_summary = summary.remedial_summary

    def recalculate(self, save: bool = True) -> InspectionSummary:
        """Recompute the inspection scores from its component scores."""

        summary = summarize_components(self.component_scores.all(), repair_threshold())
        self.apply_summary(summary)
        if save:
            self.save()
        return summary


class ComponentScore(models.Model):
    DEGREE_CHOICES = [("X", "X - not present"), ("0", "0 - no defect"), ("1", "1"), ("2", "2"), ("3", "3"), ("U", "U - unable to inspect")]
    EXTENT_CHOICES = [("1", "1"), ("2", "2"), ("3", "3"), ("4", "4"), ("U", "U - unable to inspect")]
    RELEVANCY_CHOICES = EXTENT_CHOICES

    inspection = models.ForeignKey(Inspection, on_delete=models.CASCADE, related_name="component_scores")
    component_name = models.CharField(max_length=100)
    degree = models.CharField(max_length=1, choices=DEGREE_CHOICES)
    extent = models.CharField(max_length=1, choices=EXTENT_CHOICES, blank=True)
    relevancy = models.CharField(max_length=1, choices=RELEVANCY_CHOICES, blank=True)

    quantity = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    quantity_unit = models.CharField(max_length=20, default="each")
    rate = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    remedial_work = models.CharField(max_length=255, blank=True)

    ci = models.PositiveSmallIntegerField(null=True, blank=True, editable=False)
    urgency = models.CharField(max_length=1, blank=True, editable=False)
    cost = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True, editable=False)

    class Meta:
        ordering = ["inspection_id", "id"]

    def __str__(self) -> str:  # pragma: no cover - simple repr
        return f"{self.component_name}: D{self.degree} E{self.extent} R{self.relevancy}"

    def clean(self):
        if self.degree not in ("X", "0", "U") and (not self.extent or not self.relevancy):
            raise ValidationError("Extent and relevancy are required when a defect degree is recorded.")

    def save(self, *args, **kwargs):
        scored = score_component(self, repair_threshold())
        self.ci = scored.ci
        self.urgency = scored.urgency or ""
        self.cost = Decimal(str(scored.cost)) if scored.cost is not None else None
        super().save(*args, **kwargs)

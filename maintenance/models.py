from __future__ import annotations

from decimal import Decimal

from django.db import models

from tams.models import Asset, Inspection
from tams.validators import validate_completion


class WorkOrder(models.Model):
    class Status(models.TextChoices):
        SCHEDULED = "Scheduled", "Scheduled"
        IN_PROGRESS = "In Progress", "In progress"
        COMPLETED = "Completed", "Completed"
        CANCELLED = "Cancelled", "Cancelled"
        OVERDUE = "Overdue", "Overdue"

    class MaintenanceType(models.TextChoices):
        INSPECTION = "Inspection", "Inspection"
        REPAIR = "Repair", "Repair"
        REPLACEMENT = "Replacement", "Replacement"
        CLEANING = "Cleaning", "Cleaning"
        PREVENTIVE = "Preventive", "Preventive"
        EMERGENCY = "Emergency", "Emergency"

    class Priority(models.TextChoices):
        LOW = "Low", "Low"
        MEDIUM = "Medium", "Medium"
        HIGH = "High", "High"
        CRITICAL = "Critical", "Critical"

    asset = models.ForeignKey(
        Asset,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="work_orders",
    )
    inspection = models.ForeignKey(
        Inspection,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="work_orders",
    )
    batch_reference = models.CharField(max_length=40, blank=True, db_index=True)
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    maintenance_type = models.CharField(
        max_length=20, choices=MaintenanceType.choices, default=MaintenanceType.REPAIR
    )
    priority = models.CharField(max_length=10, choices=Priority.choices, default=Priority.MEDIUM)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.SCHEDULED)
    scheduled_date = models.DateField(null=True, blank=True)
    completed_date = models.DateField(null=True, blank=True)
    technician = models.CharField(max_length=150, blank=True)
    estimated_cost = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    actual_cost = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    modified_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["scheduled_date", "id"]

    def __str__(self) -> str:  # pragma: no cover - simple repr
        return self.title

    def clean(self):
        validate_completion(self.status, self.scheduled_date, self.completed_date)

    @property
    def cost(self) -> Decimal:
        """Actual cost once known, otherwise the estimate."""

        if self.actual_cost is not None:
            return self.actual_cost
        return self.estimated_cost or Decimal("0")

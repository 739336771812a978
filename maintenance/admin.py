from django.contrib import admin

from tams.admin import tams_admin_site

from .models import WorkOrder
from .services import effective_status


@admin.register(WorkOrder, site=tams_admin_site)
class WorkOrderAdmin(admin.ModelAdmin):
    list_display = (
        "title",
        "asset",
        "maintenance_type",
        "priority",
        "status",
        "effective_status_display",
        "scheduled_date",
        "completed_date",
        "estimated_cost",
        "actual_cost",
    )
    list_filter = ("status", "maintenance_type", "priority")
    search_fields = ("title", "asset__reference_code", "batch_reference", "technician")
    autocomplete_fields = ("asset",)
    readonly_fields = ("batch_reference", "created_at", "modified_at")

    @admin.display(description="Current status")
    def effective_status_display(self, obj: WorkOrder) -> str:
        return effective_status(obj)

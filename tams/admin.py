from __future__ import annotations

from django.contrib import admin
from django.contrib.admin import AdminSite

from .models import Asset, ComponentScore, Inspection


class TAMSAdminSite(AdminSite):
    site_header = "TAMS Administration"
    site_title = "TAMS Admin"
    index_title = "Traffic Asset Management"
    site_url = "/"


tams_admin_site = TAMSAdminSite(name="admin")


class ComponentScoreInline(admin.TabularInline):
    model = ComponentScore
    extra = 0
    fields = ("component_name", "degree", "extent", "relevancy", "quantity", "rate", "remedial_work", "ci", "urgency", "cost")
    readonly_fields = ("ci", "urgency", "cost")


@admin.register(Asset, site=tams_admin_site)
class AssetAdmin(admin.ModelAdmin):
    list_display = (
        "reference_code",
        "asset_type",
        "region",
        "status",
        "latest_ci",
        "condition_band_label",
        "latest_urgency",
        "latest_inspection_date",
        "is_deleted",
    )
    list_filter = ("asset_type", "status", "region", "is_deleted")
    search_fields = ("reference_code", "name", "road_name", "region", "depot")
    readonly_fields = ("latest_ci", "latest_urgency", "latest_deru", "latest_inspection_date", "created_at", "modified_at")
    actions = ("mark_deleted", "refresh_condition")

    @admin.display(description="Condition")
    def condition_band_label(self, obj: Asset) -> str:
        return obj.condition_band.label

    @admin.action(description="Mark selected assets as deleted")
    def mark_deleted(self, request, queryset):
        for asset in queryset:
            asset.soft_delete()
        self.message_user(request, f"{queryset.count()} assets marked as deleted.")

    @admin.action(description="Refresh latest condition from inspections")
    def refresh_condition(self, request, queryset):
        for asset in queryset:
            asset.refresh_latest_condition()
        self.message_user(request, f"Refreshed {queryset.count()} assets.")


@admin.register(Inspection, site=tams_admin_site)
class InspectionAdmin(admin.ModelAdmin):
    list_display = ("asset", "inspection_date", "inspector_name", "ci_final", "calculated_urgency", "total_remedial_cost")
    list_filter = ("calculated_urgency", "inspection_date")
    search_fields = ("asset__reference_code", "inspector_name")
    autocomplete_fields = ("asset",)
    readonly_fields = (
        "ci_health",
        "ci_safety",
        "overall_degree",
        "overall_extent",
        "overall_relevancy",
        "created_at",
        "modified_at",
    )
    inlines = [ComponentScoreInline]
    date_hierarchy = "inspection_date"

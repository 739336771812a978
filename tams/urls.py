"""URL configuration for the TAMS API."""

from django.urls import include, path
from rest_framework import routers
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from . import exports, views


router = routers.DefaultRouter()
router.register(r"assets", views.AssetViewSet, basename="asset")
router.register(r"inspections", views.InspectionViewSet)
router.register(r"component-scores", views.ComponentScoreViewSet)


urlpatterns = [
    path("api/", include(router.urls)),
    path("api/auth/login/", TokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("api/auth/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    path("api/dashboard/ci-distribution/", views.ci_distribution, name="dashboard_ci_distribution"),
    path("api/dashboard/regions/", views.region_summary, name="dashboard_regions"),
    path("api/dashboard/urgency-summary/", views.urgency_summary, name="dashboard_urgency_summary"),
    path("api/dashboard/asset-types/", views.asset_type_summary, name="dashboard_asset_types"),
    path("api/dashboard/ci-trend/", views.ci_trend, name="dashboard_ci_trend"),
    path(
        "api/dashboard/inspector-performance/",
        views.inspector_performance,
        name="dashboard_inspector_performance",
    ),
    path("api/dashboard/stats/", views.dashboard_stats, name="dashboard_stats"),
    path("api/calculations/preview/", views.calculation_preview, name="calculation_preview"),
    path("api/reports/<slug:name>.<slug:fmt>", exports.report_download, name="report_download"),
]

from django.urls import include, path
from rest_framework import routers

from . import views


router = routers.SimpleRouter()
router.register(r"work-orders", views.WorkOrderViewSet)


urlpatterns = [
    path("api/work-orders/stats/", views.work_order_stats, name="work_order_stats"),
    path("api/work-orders/cost-trend/", views.work_order_cost_trend, name="work_order_cost_trend"),
    path("api/work-orders/bulk/", views.bulk_create_work_orders, name="work_order_bulk"),
    path("api/assets/<int:asset_id>/work-orders/", views.asset_work_orders, name="asset_work_orders"),
    path("api/", include(router.urls)),
]

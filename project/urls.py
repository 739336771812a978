from django.urls import path, include

from tams.admin import tams_admin_site

urlpatterns = [
    path('admin/', tams_admin_site.urls),
    path('', include('maintenance.urls')),
    path('', include('tams.urls')),
]

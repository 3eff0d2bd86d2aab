"""
URL configuration for donow project.

Every app exposes a JSON API under /api/<app>/.
"""

from django.contrib import admin
from django.urls import path, include
from donow import views as donow_views

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/health/", donow_views.health, name='health'),
    path("api/auth/", include("accounts.urls")),
    path("api/projects/", include("projects.urls")),
    path("api/tasks/", include("tasks.urls")),
    path("api/timer/", include("timer.urls")),
    path("api/reports/", include("reports.urls")),
]

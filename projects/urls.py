from django.urls import path
from . import views

app_name = 'projects'

urlpatterns = [
    path('', views.project_collection, name='project_collection'),
    path('stats/', views.time_stats, name='time_stats'),
    path('<int:project_id>/', views.project_detail, name='project_detail'),
    path('<int:project_id>/actions/', views.project_actions, name='project_actions'),
]

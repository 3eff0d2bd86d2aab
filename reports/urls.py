from django.urls import path
from . import views

app_name = 'reports'

urlpatterns = [
    path('export/', views.export_report, name='export_report'),
    path('views/', views.views_collection, name='views_collection'),
    path('views/reset/', views.reset_views, name='reset_views'),
    path('views/<int:view_id>/', views.view_detail, name='view_detail'),
]

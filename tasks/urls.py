from django.urls import path
from . import views

app_name = 'tasks'

urlpatterns = [
    path('', views.task_collection, name='task_collection'),
    path('recalculate/', views.recalculate_stats, name='recalculate_stats'),
    path('<int:task_id>/', views.task_detail, name='task_detail'),
]

from django.urls import path
from . import views

app_name = 'timer'

urlpatterns = [
    path('actions/', views.list_actions, name='list_actions'),
    path('actions/<int:action_id>/', views.update_action, name='update_action'),
    path('actions/<int:action_id>/task/', views.reassign_action, name='reassign_action'),
    path('start/', views.start_timer, name='start_timer'),
    path('end/<int:action_id>/', views.end_timer, name='end_timer'),
    path('note/<int:action_id>/', views.update_note, name='update_note'),
    path('habit/', views.log_habit, name='log_habit'),
    path('delete/<int:action_id>/', views.delete_action, name='delete_action'),
    path('cleanup/', views.cleanup_actions, name='cleanup_actions'),
]

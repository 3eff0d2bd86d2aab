from django.contrib import admin
from .models import Task


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ['id', 'name', 'task_type', 'project', 'owner', 'is_default', 'total_actions', 'current_streak', 'longest_streak']
    list_filter = ['task_type', 'is_default']
    search_fields = ['name', 'project__name']
    readonly_fields = [
        'total_actions', 'total_duration', 'first_action_at', 'last_action_at',
        'current_streak', 'longest_streak', 'today_completed_count', 'created_at', 'updated_at',
    ]

    fieldsets = (
        ('Task Information', {
            'fields': ('name', 'color', 'task_type', 'project', 'owner', 'is_default', 'daily_goal')
        }),
        ('Cached Stats', {
            'fields': ('total_actions', 'total_duration', 'first_action_at', 'last_action_at')
        }),
        ('Habit Stats', {
            'fields': ('current_streak', 'longest_streak', 'today_completed_count')
        }),
        ('Audit Information', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

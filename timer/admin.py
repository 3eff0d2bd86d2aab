from django.contrib import admin
from .models import Action


@admin.register(Action)
class ActionAdmin(admin.ModelAdmin):
    list_display = ['id', 'task', 'action_type', 'user_start_time', 'user_end_time', 'duration_display', 'is_completed', 'owner']
    list_filter = ['action_type', 'is_completed', 'user_start_time']
    search_fields = ['note', 'task__name']
    readonly_fields = ['start_time', 'end_time', 'created_at', 'updated_at', 'duration_display']
    date_hierarchy = 'user_start_time'

    fieldsets = (
        ('Action Information', {
            'fields': ('task', 'action_type', 'note', 'is_completed', 'owner')
        }),
        ('Times', {
            'fields': ('user_start_time', 'user_end_time', 'duration_display', 'start_time', 'end_time')
        }),
        ('Audit Information', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def duration_display(self, obj):
        """Display duration in a human-readable format."""
        if obj.user_end_time is None:
            return "In Progress"
        hours = int(obj.duration_minutes // 60)
        minutes = int(obj.duration_minutes % 60)
        return f"{hours}h {minutes}m"
    duration_display.short_description = 'Duration'

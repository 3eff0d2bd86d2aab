from django.contrib import admin
from .models import Project


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ['id', 'name', 'is_billable', 'hourly_rate', 'monthly_budget_limit', 'owner', 'created_at']
    list_filter = ['is_billable']
    search_fields = ['name']
    readonly_fields = ['id', 'created_at', 'updated_at']

    fieldsets = (
        ('Project Information', {
            'fields': ('id', 'name', 'owner')
        }),
        ('Billing', {
            'fields': ('is_billable', 'hourly_rate', 'monthly_budget_limit')
        }),
        ('Audit Information', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

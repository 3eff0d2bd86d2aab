from django.contrib import admin
from .models import ReportView


@admin.register(ReportView)
class ReportViewAdmin(admin.ModelAdmin):
    list_display = ['name', 'export_format', 'use_24_hour', 'is_default', 'is_system', 'owner']
    list_filter = ['export_format', 'is_system', 'is_default']
    search_fields = ['name', 'description']
    readonly_fields = ['created_at', 'updated_at']

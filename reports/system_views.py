"""
Built-in report layouts shared by every user.

They are inserted by a data migration and re-created whenever the stored set
no longer matches the names below.
"""
import logging

from django.db import transaction

logger = logging.getLogger(__name__)

SYSTEM_VIEWS = [
    {
        'name': 'DaDuo',
        'fields': ['task', 'date', 'time', 'duration', 'description'],
        'export_format': 'xlsx',
        'use_24_hour': False,
        'is_default': True,
        'description': 'Task and time summary (12-hour clock)',
    },
    {
        'name': 'Bike-GV',
        'fields': ['date', 'description', 'startTime', 'endTime', 'duration', 'time'],
        'export_format': 'xlsx',
        'use_24_hour': True,
        'is_default': False,
        'description': 'Detailed time log (24-hour clock, HH:MM-HH:MM)',
    },
]

SYSTEM_VIEW_NAMES = {view['name'] for view in SYSTEM_VIEWS}


def seed_system_views(model=None, reset=False):
    """
    Make sure the built-in views exist.

    Args:
        model: ReportView class (a historical model inside migrations)
        reset: drop and re-create the system views unconditionally

    Returns:
        True if the system views were (re)created.
    """
    if model is None:
        from .models import ReportView as model

    existing = model.objects.filter(is_system=True)
    stale = existing.exclude(name__in=SYSTEM_VIEW_NAMES).exists()

    if existing.exists() and not (reset or stale):
        return False

    with transaction.atomic():
        existing.delete()
        # bulk_create skips ReportView.save(), so defaults are set directly
        model.objects.bulk_create([model(is_system=True, owner=None, **view) for view in SYSTEM_VIEWS])

    logger.info("Seeded %s system report views", len(SYSTEM_VIEWS))
    return True

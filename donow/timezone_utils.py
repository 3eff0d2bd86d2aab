from datetime import datetime

import pytz
from django.conf import settings
from django.utils import timezone


def get_user_timezone(request):
    """
    Get the user's timezone from the cookie set by JavaScript.
    Falls back to UTC if no timezone is set.
    """
    user_tz_name = request.COOKIES.get('user_timezone', 'UTC')
    try:
        return pytz.timezone(user_tz_name)
    except pytz.exceptions.UnknownTimeZoneError:
        return pytz.UTC


def get_default_timezone():
    """Timezone used outside of a request (management commands)."""
    try:
        return pytz.timezone(settings.DONOW_TIME_ZONE)
    except pytz.exceptions.UnknownTimeZoneError:
        return pytz.UTC


def get_user_today(request):
    """
    Get today's date in the user's timezone.
    Returns both the date object and timezone-aware start/end datetimes.
    """
    return local_today(get_user_timezone(request))


def local_today(user_tz):
    """Today's date plus its start/end boundaries in ``user_tz``."""
    now_in_user_tz = timezone.now().astimezone(user_tz)
    today = now_in_user_tz.date()

    today_start = user_tz.localize(datetime.combine(today, datetime.min.time()))
    today_end = user_tz.localize(datetime.combine(today, datetime.max.time()))

    return today, today_start, today_end


def local_date(value, user_tz):
    """Calendar date of an aware datetime as seen in ``user_tz``."""
    return value.astimezone(user_tz).date()

"""
Shared helpers for the JSON API views.

Every endpoint answers with ``{'success': bool, ...}``; failures carry an
``error`` message and the matching status code.
"""
import json
import logging
from datetime import datetime, timezone as dt_timezone
from functools import wraps

from django.conf import settings
from django.http import JsonResponse
from django.utils import timezone

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = 'Internal server error'


class BadRequest(ValueError):
    """Raised by the parsing helpers when request input is malformed."""


def error_response(message, status=400):
    return JsonResponse({'success': False, 'error': message}, status=status)


def server_error(exc, context=''):
    """
    Log an unexpected failure and build the 500 response.

    The raw exception message is only exposed while DEBUG is on.
    """
    logger.exception('%s: %s', context or 'Unhandled error', exc)
    message = str(exc) if settings.DEBUG else GENERIC_ERROR_MESSAGE
    return error_response(message, status=500)


def parse_json_body(request):
    """Decode a JSON object body, raising BadRequest on anything else."""
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise BadRequest('Invalid JSON')
    if not isinstance(data, dict):
        raise BadRequest('Invalid JSON')
    return data


def parse_iso_datetime(value, field_name):
    """
    Parse an ISO 8601 timestamp sent by the frontend.

    Frontend values use a Z suffix; naive values are treated as UTC.
    """
    if not value:
        raise BadRequest(f'{field_name} is required')
    try:
        parsed = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    except ValueError:
        raise BadRequest(f'Invalid date format for {field_name}')
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed, dt_timezone.utc)
    return parsed


def parse_json_bool(data, key, default=False):
    """Read a JSON boolean; strings such as "false" are rejected, not coerced."""
    value = data.get(key, default)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise BadRequest(f'{key} must be true or false')
    return value


def parse_id_list(value):
    """Split a comma separated id list from a query string."""
    if not value:
        return []
    ids = []
    for part in value.split(','):
        part = part.strip()
        if not part:
            continue
        if not part.isdigit():
            raise BadRequest(f'Invalid id: {part}')
        ids.append(int(part))
    return ids


def api_login_required(view_func):
    """Like login_required, but answers 401 JSON instead of redirecting."""
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return error_response('Authentication required', status=401)
        return view_func(request, *args, **kwargs)
    return wrapper

import logging
from datetime import timedelta

from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_GET, require_POST, require_http_methods

from donow.api import (
    BadRequest, api_login_required, error_response, parse_iso_datetime, parse_json_body, server_error,
)
from donow.ownership import require_ownership
from donow.timezone_utils import get_user_timezone
from tasks.models import Task
from .models import Action, DEFAULT_NOTE, INTERRUPTED_NOTE

logger = logging.getLogger(__name__)

# Open timers older than this are considered abandoned by the cleanup endpoint
STALE_ACTION_MINUTES = 30


def serialize_action(action):
    """Serialize an action to a dictionary for JSON responses."""
    return {
        'id': action.id,
        'task_id': action.task_id,
        'task_name': action.task.name if action.task_id else None,
        'type': action.action_type,
        'note': action.note,
        'is_completed': action.is_completed,
        'start_time': action.start_time.isoformat(),
        'end_time': action.end_time.isoformat() if action.end_time else None,
        'user_start_time': action.user_start_time.isoformat(),
        'user_end_time': action.user_end_time.isoformat() if action.user_end_time else None,
        'duration': action.duration_ms,
    }


def serialize_habit_stats(task):
    return {
        'current_streak': task.current_streak,
        'longest_streak': task.longest_streak,
        'today_completed_count': task.today_completed_count,
        'daily_goal': task.daily_goal,
    }


def _refresh_task_stats(request, task):
    task.update_stats(get_user_timezone(request))


def _get_task_for_user(user, task_id):
    """Fetch a task the user may record time against, or raise BadRequest/LookupError."""
    if task_id in (None, ''):
        raise BadRequest('task_id is required')
    try:
        task_id = int(task_id)
    except (TypeError, ValueError):
        raise BadRequest('Invalid task_id')
    task = Task.objects.visible_to(user).filter(pk=task_id).first()
    if task is None:
        raise LookupError('Task not found')
    return task


@api_login_required
@require_GET
def list_actions(request):
    """List the user's actions, newest first, optionally filtered by type or task."""
    actions = Action.objects.for_user(request.user).select_related('task')

    action_type = request.GET.get('type')
    if action_type:
        if action_type not in (Action.TYPE_POMODORO, Action.TYPE_HABIT):
            return error_response('Invalid action type')
        actions = actions.filter(action_type=action_type)

    task_id = request.GET.get('taskId')
    if task_id:
        if not task_id.isdigit():
            return error_response('Invalid taskId')
        actions = actions.filter(task_id=int(task_id))

    return JsonResponse({
        'success': True,
        'actions': [serialize_action(a) for a in actions.order_by('-start_time')],
    })


@api_login_required
@require_POST
def start_timer(request):
    """
    Start a new pomodoro session.

    Body (optional): task_id, note. Without a task the user's default task
    is used (created on demand).
    """
    try:
        data = parse_json_body(request)
        if data.get('task_id') in (None, ''):
            task = Task.objects.get_or_create_default(request.user)
        else:
            task = _get_task_for_user(request.user, data.get('task_id'))

        action = Action.objects.create(
            start_time=timezone.now(),
            note=(data.get('note') or DEFAULT_NOTE),
            task=task,
            owner=request.user,
            action_type=Action.TYPE_POMODORO,
        )
        return JsonResponse({'success': True, 'action': serialize_action(action)}, status=201)
    except BadRequest as e:
        return error_response(str(e))
    except LookupError as e:
        return error_response(str(e), status=404)
    except Exception as e:
        return server_error(e, 'Error starting timer')


@api_login_required
@require_http_methods(["PUT"])
@require_ownership(Action, 'action_id')
def end_timer(request, action_id):
    """Stop a running timer and mark the action completed."""
    action = request.owned_object
    try:
        action.end_time = timezone.now()
        action.is_completed = True
        action.save()
        _refresh_task_stats(request, action.task)
        return JsonResponse({'success': True, 'action': serialize_action(action)})
    except Exception as e:
        return server_error(e, 'Error ending timer')


@api_login_required
@require_http_methods(["PUT"])
@require_ownership(Action, 'action_id')
def update_note(request, action_id):
    """Replace the note of an action."""
    action = request.owned_object
    try:
        data = parse_json_body(request)
        note = data.get('note')
        if note is None or not isinstance(note, str):
            return error_response('Note is required')
        action.note = note
        action.save()
        _refresh_task_stats(request, action.task)
        return JsonResponse({'success': True, 'action': serialize_action(action)})
    except BadRequest as e:
        return error_response(str(e))
    except Exception as e:
        return server_error(e, 'Error updating note')


@api_login_required
@require_http_methods(["PUT"])
@require_ownership(Action, 'action_id')
def update_action(request, action_id):
    """
    Edit the user-visible times and/or note of an action.

    Body: user_start_time, user_end_time (ISO 8601), note. All optional.
    Habit actions keep start == end, so either time moves both.
    """
    action = request.owned_object
    try:
        data = parse_json_body(request)
        if 'user_start_time' in data:
            action.user_start_time = parse_iso_datetime(data['user_start_time'], 'user_start_time')
        if 'user_end_time' in data:
            action.user_end_time = parse_iso_datetime(data['user_end_time'], 'user_end_time')
        if 'note' in data:
            action.note = data['note'] or ''

        # Habit completions are instantaneous: start and end move together
        if action.action_type == Action.TYPE_HABIT:
            if 'user_start_time' in data and 'user_end_time' in data \
                    and action.user_start_time != action.user_end_time:
                return error_response('Habit actions must start and end at the same time')
            if 'user_end_time' in data:
                action.user_start_time = action.user_end_time
            else:
                action.user_end_time = action.user_start_time

        if action.user_end_time and action.user_end_time < action.user_start_time:
            return error_response('End time must be after start time')

        action.save()
        _refresh_task_stats(request, action.task)
        return JsonResponse({'success': True, 'action': serialize_action(action)})
    except BadRequest as e:
        return error_response(str(e))
    except Exception as e:
        return server_error(e, 'Error updating action')


@api_login_required
@require_http_methods(["PUT"])
@require_ownership(Action, 'action_id')
def reassign_action(request, action_id):
    """Move an action to another task; both tasks get fresh stats."""
    action = request.owned_object
    try:
        data = parse_json_body(request)
        new_task = _get_task_for_user(request.user, data.get('task_id'))
        old_task = action.task

        action.task = new_task
        action.save()

        if old_task.pk != new_task.pk:
            _refresh_task_stats(request, old_task)
        _refresh_task_stats(request, new_task)
        return JsonResponse({'success': True, 'action': serialize_action(action)})
    except BadRequest as e:
        return error_response(str(e))
    except LookupError as e:
        return error_response(str(e), status=404)
    except Exception as e:
        return server_error(e, 'Error reassigning action')


@api_login_required
@require_POST
def log_habit(request):
    """
    Record one completion of a habit task.

    Body: task_id (required), note (optional). The action is instantaneous
    (start == end) and completed immediately.
    """
    try:
        data = parse_json_body(request)
        task = _get_task_for_user(request.user, data.get('task_id'))
        if not task.is_habit:
            return error_response('Task is not a habit')

        now = timezone.now()
        action = Action.objects.create(
            start_time=now,
            end_time=now,
            user_start_time=now,
            user_end_time=now,
            note=data.get('note') or '',
            is_completed=True,
            action_type=Action.TYPE_HABIT,
            task=task,
            owner=request.user,
        )
        _refresh_task_stats(request, task)
        return JsonResponse({
            'success': True,
            'action': serialize_action(action),
            'habit_stats': serialize_habit_stats(task),
        }, status=201)
    except BadRequest as e:
        return error_response(str(e))
    except LookupError as e:
        return error_response(str(e), status=404)
    except Exception as e:
        return server_error(e, 'Error logging habit')


@api_login_required
@require_http_methods(["DELETE"])
@require_ownership(Action, 'action_id')
def delete_action(request, action_id):
    """Delete an action and recompute its task's stats."""
    action = request.owned_object
    try:
        task = action.task
        action.delete()
        _refresh_task_stats(request, task)
        return JsonResponse({'success': True})
    except Exception as e:
        return server_error(e, 'Error deleting action')


def close_stale_actions(queryset, minutes=STALE_ACTION_MINUTES, now=None):
    """
    Close actions left running for longer than ``minutes``.

    They get an end time of ``now`` and the "Interrupted" note but stay
    incomplete, so they never count towards stats. Returns the number closed.
    """
    now = now or timezone.now()
    cutoff = now - timedelta(minutes=minutes)
    return queryset.filter(end_time__isnull=True, start_time__lt=cutoff).update(
        end_time=now,
        user_end_time=now,
        note=INTERRUPTED_NOTE,
    )


@api_login_required
@require_POST
def cleanup_actions(request):
    """Close the user's abandoned timers."""
    try:
        closed = close_stale_actions(Action.objects.for_user(request.user))
        if closed:
            logger.info("Closed %s stale actions for user %s", closed, request.user.pk)
        return JsonResponse({'success': True, 'closed_count': closed})
    except Exception as e:
        return server_error(e, 'Error cleaning up actions')

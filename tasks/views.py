import logging
import re

from django.db.models import Q
from django.http import JsonResponse
from django.views.decorators.http import require_POST, require_http_methods

from donow.api import BadRequest, api_login_required, error_response, parse_json_body, server_error
from donow.ownership import require_ownership
from donow.timezone_utils import get_user_timezone
from projects.models import Project
from .models import Task, DEFAULT_DAILY_GOAL

logger = logging.getLogger(__name__)

COLOR_PATTERN = re.compile(r'^#[0-9A-Fa-f]{6}$')


def serialize_task(task):
    """Serialize a task to a dictionary for JSON responses."""
    return {
        'id': task.id,
        'name': task.name,
        'color': task.color,
        'type': task.task_type,
        'is_default': task.is_default,
        'project_id': task.project_id,
        'project_name': task.project.name if task.project_id else None,
        'daily_goal': task.daily_goal,
        'stats': {
            'total_actions': task.total_actions,
            'total_duration': int(task.total_duration.total_seconds() * 1000),
            'first_action_at': task.first_action_at.isoformat() if task.first_action_at else None,
            'last_action_at': task.last_action_at.isoformat() if task.last_action_at else None,
        },
        'habit_stats': {
            'current_streak': task.current_streak,
            'longest_streak': task.longest_streak,
            'today_completed_count': task.today_completed_count,
        },
        'created_at': task.created_at.isoformat() if task.created_at else None,
    }


def _resolve_project(user, project_id):
    if project_id in (None, ''):
        return None
    try:
        project_id = int(project_id)
    except (TypeError, ValueError):
        raise BadRequest('Invalid project_id')
    project = Project.objects.filter(pk=project_id).filter(Q(owner=user) | Q(owner__isnull=True)).first()
    if project is None:
        raise BadRequest('Project not found')
    return project


def _clean_daily_goal(value):
    if value in (None, ''):
        return None
    try:
        goal = int(value)
    except (TypeError, ValueError):
        raise BadRequest('Daily goal must be a number')
    if goal < 1:
        raise BadRequest('Daily goal must be at least 1')
    return goal


def _apply_task_fields(task, data, user):
    """Copy validated fields from a request body onto ``task``."""
    if 'name' in data:
        name = (data.get('name') or '').strip()
        if not name:
            raise BadRequest('Task name cannot be empty')
        task.name = name
    if 'color' in data:
        color = data.get('color') or ''
        if not COLOR_PATTERN.match(color):
            raise BadRequest('Color must be a hex value like #4ECDC4')
        task.color = color
    if 'type' in data:
        if data['type'] not in (Task.TYPE_PROJECT, Task.TYPE_HABIT):
            raise BadRequest('Type must be "project" or "habit"')
        task.task_type = data['type']
    if 'project_id' in data:
        task.project = _resolve_project(user, data.get('project_id'))
    if 'daily_goal' in data:
        task.daily_goal = _clean_daily_goal(data.get('daily_goal'))

    if task.is_habit and task.daily_goal is None:
        task.daily_goal = DEFAULT_DAILY_GOAL
    if not task.is_habit:
        task.daily_goal = None


@api_login_required
@require_http_methods(["GET", "POST"])
def task_collection(request):
    """GET: list the user's tasks (optional ?type=). POST: create a task."""
    if request.method == 'POST':
        return _create_task(request)

    tasks = Task.objects.filter(owner=request.user).select_related('project')
    task_type = request.GET.get('type')
    if task_type:
        if task_type not in (Task.TYPE_PROJECT, Task.TYPE_HABIT):
            return error_response('Invalid task type')
        tasks = tasks.filter(task_type=task_type)

    return JsonResponse({'success': True, 'tasks': [serialize_task(t) for t in tasks]})


def _create_task(request):
    try:
        data = parse_json_body(request)
        task = Task(owner=request.user)
        _apply_task_fields(task, data, request.user)
        task.save()
        logger.info("Created %s task %s for user %s", task.task_type, task.pk, request.user.pk)
        return JsonResponse({'success': True, 'task': serialize_task(task)}, status=201)
    except BadRequest as e:
        return error_response(str(e))
    except Exception as e:
        return server_error(e, 'Error creating task')


@api_login_required
@require_http_methods(["GET", "PUT", "DELETE"])
@require_ownership(Task, 'task_id')
def task_detail(request, task_id):
    """GET, update (PUT) or delete (DELETE) a single task."""
    task = request.owned_object

    if request.method == 'GET':
        return JsonResponse({'success': True, 'task': serialize_task(task)})

    if request.method == 'DELETE':
        return _delete_task(task)

    try:
        data = parse_json_body(request)
        was_habit = task.is_habit
        _apply_task_fields(task, data, request.user)
        task.save()
        if task.is_habit != was_habit:
            task.update_stats(get_user_timezone(request))
        return JsonResponse({'success': True, 'task': serialize_task(task)})
    except BadRequest as e:
        return error_response(str(e))
    except Exception as e:
        return server_error(e, 'Error updating task')


def _delete_task(task):
    action_count = task.actions.count()
    if action_count:
        return JsonResponse({
            'success': False,
            'error': 'Cannot delete a task that has recorded actions',
            'action_count': action_count,
        }, status=400)
    try:
        task.delete()
        return JsonResponse({'success': True})
    except Exception as e:
        return server_error(e, 'Error deleting task')


@api_login_required
@require_POST
def recalculate_stats(request):
    """Recompute cached stats for every task the user owns."""
    user_tz = get_user_timezone(request)
    updated = 0
    failed = []
    for task in Task.objects.filter(owner=request.user):
        try:
            task.update_stats(user_tz)
            updated += 1
        except Exception:
            logger.exception("Failed to recalculate stats for task %s", task.pk)
            failed.append(task.pk)

    return JsonResponse({'success': not failed, 'updated': updated, 'failed': failed})

import logging
from decimal import Decimal, InvalidOperation

from django.core.paginator import Paginator
from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_http_methods

from donow.api import (
    BadRequest, api_login_required, error_response, parse_id_list, parse_iso_datetime, parse_json_body,
    parse_json_bool, server_error,
)
from donow.ownership import require_ownership
from donow.timezone_utils import get_user_timezone
from timer.models import Action
from .models import Project
from .stats import aggregate_time_stats

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def serialize_project(project):
    """Serialize a project to a dictionary for JSON responses."""
    return {
        'id': project.id,
        'name': project.name,
        'is_billable': project.is_billable,
        'hourly_rate': float(project.hourly_rate),
        'monthly_budget_limit': float(project.monthly_budget_limit),
        'created_at': project.created_at.isoformat() if project.created_at else None,
        'updated_at': project.updated_at.isoformat() if project.updated_at else None,
    }


def _to_decimal(value, field_name):
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise BadRequest(f'{field_name} must be a number')
    if not amount.is_finite() or amount < 0:
        raise BadRequest(f'{field_name} must be zero or more')
    return amount


def clean_project_data(data):
    """
    Validate a project payload.

    Non-billable projects always store a zero rate and budget; billable
    projects must provide a valid hourly rate.
    """
    name = (data.get('name') or '').strip()
    if not name:
        raise BadRequest('Project name is required')

    is_billable = parse_json_bool(data, 'is_billable')
    hourly_rate = Decimal('0')
    monthly_budget_limit = Decimal('0')

    if is_billable:
        if data.get('hourly_rate') in (None, ''):
            raise BadRequest('Billable projects need a valid hourly rate')
        hourly_rate = _to_decimal(data['hourly_rate'], 'hourly_rate')
        if data.get('monthly_budget_limit'):
            monthly_budget_limit = _to_decimal(data['monthly_budget_limit'], 'monthly_budget_limit')

    return {
        'name': name,
        'is_billable': is_billable,
        'hourly_rate': hourly_rate,
        'monthly_budget_limit': monthly_budget_limit,
    }


@api_login_required
@require_http_methods(["GET", "POST"])
def project_collection(request):
    """GET: list the user's projects, newest first. POST: create a project."""
    if request.method == 'GET':
        projects = Project.objects.filter(owner=request.user)
        return JsonResponse({'success': True, 'projects': [serialize_project(p) for p in projects]})

    try:
        data = parse_json_body(request)
        project = Project.objects.create(owner=request.user, **clean_project_data(data))
        return JsonResponse({'success': True, 'project': serialize_project(project)}, status=201)
    except BadRequest as e:
        return error_response(str(e))
    except Exception as e:
        return server_error(e, 'Error creating project')


@api_login_required
@require_http_methods(["PUT", "DELETE"])
@require_ownership(Project, 'project_id')
def project_detail(request, project_id):
    """Update (PUT) or delete (DELETE) a project."""
    project = request.owned_object

    if request.method == 'DELETE':
        if project.tasks.exists():
            return error_response('Cannot delete a project that still has tasks')
        try:
            project.delete()
            return JsonResponse({'success': True})
        except Exception as e:
            return server_error(e, 'Error deleting project')

    try:
        data = parse_json_body(request)
        for field, value in clean_project_data(data).items():
            setattr(project, field, value)
        project.save()
        return JsonResponse({'success': True, 'project': serialize_project(project)})
    except BadRequest as e:
        return error_response(str(e))
    except Exception as e:
        return server_error(e, 'Error updating project')


@api_login_required
@require_GET
def time_stats(request):
    """
    Time statistics for the user's completed actions.

    Query params:
        startDate, endDate: ISO 8601, required
        projectIds: comma separated project ids (optional)
        taskIds: comma separated task ids (optional, overrides projectIds)

    Response keys are snake_case: total_hours, total_amount, project_stats,
    task_stats and daily_stats.
    """
    try:
        start = parse_iso_datetime(request.GET.get('startDate'), 'startDate')
        end = parse_iso_datetime(request.GET.get('endDate'), 'endDate')
        project_ids = parse_id_list(request.GET.get('projectIds'))
        task_ids = parse_id_list(request.GET.get('taskIds'))
    except BadRequest as e:
        return error_response(str(e))

    try:
        actions = (
            Action.objects.for_user(request.user)
            .completed()
            .filter(user_start_time__gte=start, user_end_time__lte=end)
            .with_task_and_project()
        )
        if task_ids:
            actions = actions.filter(task_id__in=task_ids)
        elif project_ids:
            actions = actions.filter(task__project_id__in=project_ids)

        stats = aggregate_time_stats(actions, get_user_timezone(request))
        return JsonResponse({'success': True, **stats})
    except Exception as e:
        return server_error(e, 'Error getting stats')


@api_login_required
@require_GET
@require_ownership(Project, 'project_id')
def project_actions(request, project_id):
    """
    Paginated completed actions of a project's tasks, newest first.

    Query params: page, limit, startDate/endDate (both or neither).
    """
    project = request.owned_object
    try:
        try:
            limit = int(request.GET.get('limit', DEFAULT_PAGE_SIZE))
        except ValueError:
            raise BadRequest('limit must be a number')
        if not 1 <= limit <= MAX_PAGE_SIZE:
            raise BadRequest(f'limit must be between 1 and {MAX_PAGE_SIZE}')

        actions = (
            Action.objects.completed()
            .filter(task__project=project)
            .select_related('task')
            .order_by('-user_start_time')
        )
        if request.GET.get('startDate') and request.GET.get('endDate'):
            start = parse_iso_datetime(request.GET['startDate'], 'startDate')
            end = parse_iso_datetime(request.GET['endDate'], 'endDate')
            actions = actions.filter(user_start_time__gte=start, user_start_time__lte=end)
    except BadRequest as e:
        return error_response(str(e))

    paginator = Paginator(actions, limit)
    page = paginator.get_page(request.GET.get('page', 1))

    return JsonResponse({
        'success': True,
        'actions': [
            {
                'id': action.id,
                'date': action.user_start_time.isoformat(),
                'task_name': action.task.name,
                'note': action.note,
                'start_time': action.user_start_time.isoformat(),
                'end_time': action.user_end_time.isoformat() if action.user_end_time else None,
                'duration': action.duration_ms,
            }
            for action in page.object_list
        ],
        'pagination': {
            'current_page': page.number,
            'total_pages': paginator.num_pages,
            'total_items': paginator.count,
            'has_more': page.has_next(),
        },
    })

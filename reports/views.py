import logging

from django.http import FileResponse, JsonResponse
from django.views.decorators.http import require_GET, require_POST, require_http_methods

from donow.api import (
    BadRequest, api_login_required, error_response, parse_id_list, parse_iso_datetime, parse_json_body,
    parse_json_bool, server_error,
)
from donow.ownership import require_ownership
from donow.timezone_utils import get_user_timezone
from timer.models import Action
from .export import export_filename, stage_export
from .fields import FIELDS, ReportEntry, build_report
from .models import ReportView
from .renderers import RENDERERS
from .system_views import seed_system_views

logger = logging.getLogger(__name__)


def serialize_view(view):
    """Serialize a report view to a dictionary for JSON responses."""
    return {
        'id': view.id,
        'name': view.name,
        'fields': view.fields,
        'format': view.export_format,
        'use_24_hour': view.use_24_hour,
        'is_default': view.is_default,
        'is_system': view.is_system,
        'description': view.description,
        'created_at': view.created_at.isoformat() if view.created_at else None,
    }


def _split_fields(value):
    if not value:
        return []
    return [part.strip() for part in value.split(',') if part.strip()]


def _export_options(request):
    """
    Work out format, field ids and clock style for an export.

    A saved view (``viewId``) wins over the query parameters; an unknown view
    is ignored.
    """
    export_format = request.GET.get('format', ReportView.FORMAT_XLSX)
    field_ids = _split_fields(request.GET.get('fields'))
    use_24_hour = request.GET.get('timeFormat') == '24'

    view_id = request.GET.get('viewId')
    if view_id:
        view = None
        if view_id.isdigit():
            view = ReportView.objects.visible_to(request.user).filter(pk=int(view_id)).first()
        if view is None:
            logger.warning("Report view %s not found, using query parameters", view_id)
        else:
            export_format = view.export_format or export_format
            field_ids = list(view.fields)
            use_24_hour = view.use_24_hour

    return export_format, field_ids, use_24_hour


@api_login_required
@require_GET
def export_report(request):
    """
    Download the user's completed actions as an xlsx or csv file.

    Query params:
        startDate, endDate: ISO 8601, required
        format: xlsx (default) or csv
        projectIds: comma separated project ids (optional)
        viewId: saved report view to take format/fields/clock style from
        fields: comma separated field ids (ignored when viewId resolves)
        timeFormat: "24" for the 24-hour time range
    """
    try:
        start = parse_iso_datetime(request.GET.get('startDate'), 'startDate')
        end = parse_iso_datetime(request.GET.get('endDate'), 'endDate')
        project_ids = parse_id_list(request.GET.get('projectIds'))
    except BadRequest as e:
        return error_response(str(e))

    export_format, field_ids, use_24_hour = _export_options(request)
    if export_format not in RENDERERS:
        return error_response(f'Unsupported format: {export_format}')

    try:
        actions = (
            Action.objects.for_user(request.user)
            .completed()
            .filter(user_start_time__gte=start, user_start_time__lte=end)
            .with_task_and_project()
            .order_by('user_start_time')
        )
        if project_ids:
            actions = actions.filter(task__project_id__in=project_ids)

        entries = [ReportEntry.from_action(action) for action in actions]
        if not entries:
            return error_response('No time records match the selected range', status=404)

        table = build_report(entries, field_ids, get_user_timezone(request), use_24_hour=use_24_hour)
        render, content_type = RENDERERS[export_format]
        filename = export_filename(export_format)
        handle = stage_export(render(table.columns, table.rows), filename)
        logger.info("Exporting %s rows to %s for user %s", len(entries), filename, request.user.pk)
        return FileResponse(handle, as_attachment=True, filename=filename, content_type=content_type)
    except Exception as e:
        return server_error(e, 'Error exporting report')


def clean_view_data(data):
    name = (data.get('name') or '').strip()
    if not name:
        raise BadRequest('View name is required')
    if len(name) > 50:
        raise BadRequest('View name must be 50 characters or fewer')

    fields = data.get('fields')
    if not isinstance(fields, list) or not fields:
        raise BadRequest('At least one field is required')
    if not all(isinstance(field, str) for field in fields):
        raise BadRequest('Fields must be given as field ids')
    unknown = [field for field in fields if field not in FIELDS]
    if unknown:
        raise BadRequest(f'Unknown fields: {", ".join(map(str, unknown))}')

    export_format = data.get('format', ReportView.FORMAT_XLSX)
    if export_format not in RENDERERS:
        raise BadRequest(f'Unsupported format: {export_format}')

    description = (data.get('description') or '').strip()
    if len(description) > 200:
        raise BadRequest('Description must be 200 characters or fewer')

    return {
        'name': name,
        'fields': fields,
        'export_format': export_format,
        'use_24_hour': parse_json_bool(data, 'use_24_hour'),
        'is_default': parse_json_bool(data, 'is_default'),
        'description': description,
    }


@api_login_required
@require_http_methods(["GET", "POST"])
def views_collection(request):
    """GET: system views plus the user's own. POST: save a new view."""
    if request.method == 'GET':
        try:
            seed_system_views()
            views = ReportView.objects.visible_to(request.user).order_by('-is_default', 'name')
            return JsonResponse({'success': True, 'views': [serialize_view(v) for v in views]})
        except Exception as e:
            return server_error(e, 'Error listing report views')

    try:
        data = parse_json_body(request)
        view = ReportView.objects.create(owner=request.user, is_system=False, **clean_view_data(data))
        return JsonResponse({'success': True, 'view': serialize_view(view)}, status=201)
    except BadRequest as e:
        return error_response(str(e))
    except Exception as e:
        return server_error(e, 'Error creating report view')


@api_login_required
@require_http_methods(["GET", "DELETE"])
@require_ownership(ReportView, 'view_id')
def view_detail(request, view_id):
    """GET or DELETE a report view. System views cannot be deleted."""
    view = request.owned_object

    if request.method == 'GET':
        return JsonResponse({'success': True, 'view': serialize_view(view)})

    if view.is_system:
        return error_response('System views cannot be deleted', status=403)
    try:
        view.delete()
        return JsonResponse({'success': True})
    except Exception as e:
        return server_error(e, 'Error deleting report view')


@api_login_required
@require_POST
def reset_views(request):
    """Drop and re-create the system views."""
    try:
        seed_system_views(reset=True)
        views = ReportView.objects.filter(is_system=True)
        return JsonResponse({'success': True, 'views': [serialize_view(v) for v in views]})
    except Exception as e:
        return server_error(e, 'Error resetting report views')

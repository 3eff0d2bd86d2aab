from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_GET


@require_GET
def health(request):
    """
    Liveness endpoint, also the target of the keep_alive command.
    """
    return JsonResponse({'success': True, 'status': 'ok', 'time': timezone.now().isoformat()})

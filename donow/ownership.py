"""
Resource ownership checks for views that address a single record.
"""
import logging
from functools import wraps

from .api import error_response

logger = logging.getLogger(__name__)


def require_ownership(model, id_kwarg, owner_field='owner'):
    """
    Decorator factory guarding a view by the owner of the addressed record.

    - record missing → 404
    - owner set and different from the requester → 403
    - no owner recorded (legacy rows) → allowed

    The fetched record is attached to ``request.owned_object``. Apply after
    ``api_login_required`` so ``request.user`` is always authenticated here.
    """
    owner_id_attr = f'{owner_field}_id'

    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            resource_id = kwargs.get(id_kwarg)
            if resource_id is None:
                return error_response('Resource id is required', status=400)

            obj = model.objects.filter(pk=resource_id).first()
            if obj is None:
                return error_response(f'{model._meta.verbose_name.title()} not found', status=404)

            owner_id = getattr(obj, owner_id_attr, None)
            if owner_id is not None and owner_id != request.user.pk:
                logger.warning(
                    'Ownership check failed for %s %s: owner=%s requester=%s',
                    model.__name__, resource_id, owner_id, request.user.pk,
                )
                return error_response('You do not have access to this resource', status=403)

            request.owned_object = obj
            return view_func(request, *args, **kwargs)
        return wrapper
    return decorator

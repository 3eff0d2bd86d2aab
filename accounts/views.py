"""
Session authentication endpoints.

Users sign in with their email address, which doubles as the username.
"""
import logging

from django.contrib.auth import authenticate, get_user_model, login, logout
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.http import JsonResponse
from django.views.decorators.csrf import ensure_csrf_cookie
from django.views.decorators.http import require_GET, require_POST

from donow.api import BadRequest, api_login_required, error_response, parse_json_body, server_error
from tasks.models import Task

logger = logging.getLogger(__name__)


def serialize_user(user):
    return {
        'id': user.id,
        'email': user.email,
        'name': user.first_name,
    }


def _clean_credentials(data):
    email = (data.get('email') or '').strip().lower()
    password = data.get('password') or ''
    if not email or not password:
        raise BadRequest('Email and password are required')
    try:
        validate_email(email)
    except ValidationError:
        raise BadRequest('Invalid email address')
    return email, password


@require_POST
def register(request):
    """Create an account, sign it in and set up its default task."""
    try:
        data = parse_json_body(request)
        email, password = _clean_credentials(data)
        name = (data.get('name') or '').strip()

        User = get_user_model()
        if User.objects.filter(username=email).exists():
            return error_response('Email already registered')

        user = User(username=email, email=email, first_name=name[:150])
        try:
            validate_password(password, user)
        except ValidationError as e:
            return error_response(' '.join(e.messages))
        user.set_password(password)
        user.save()

        login(request, user)
        Task.objects.get_or_create_default(user)
        logger.info("Registered user %s", user.pk)
        return JsonResponse({'success': True, 'user': serialize_user(user)}, status=201)
    except BadRequest as e:
        return error_response(str(e))
    except Exception as e:
        return server_error(e, 'Error registering user')


@require_POST
def login_view(request):
    try:
        data = parse_json_body(request)
        email, password = _clean_credentials(data)
    except BadRequest as e:
        return error_response(str(e))

    user = authenticate(request, username=email, password=password)
    if user is None:
        logger.info("Failed login for %s", email)
        return error_response('Invalid email or password', status=401)

    login(request, user)
    Task.objects.get_or_create_default(user)
    return JsonResponse({'success': True, 'user': serialize_user(user)})


@require_POST
def logout_view(request):
    logout(request)
    return JsonResponse({'success': True})


@ensure_csrf_cookie
@api_login_required
@require_GET
def me(request):
    """Current user; also hands the frontend its CSRF cookie."""
    return JsonResponse({'success': True, 'user': serialize_user(request.user)})

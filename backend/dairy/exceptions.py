"""API error types and the envelope-rendering exception handler."""

import logging

from django.conf import settings
from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler
from rest_framework_simplejwt.exceptions import InvalidToken

logger = logging.getLogger(__name__)

ValidationError = exceptions.ValidationError


class NotFoundError(exceptions.NotFound):
    default_detail = 'Resource not found'


class ConflictError(exceptions.APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Resource already exists'
    default_code = 'conflict'


class Unauthorized(exceptions.AuthenticationFailed):
    default_detail = 'Invalid username or password'


class InternalError(exceptions.APIException):
    default_detail = 'Internal server error'


def _first_message(detail):
    """Return the first human readable message inside a DRF error ``detail``."""

    if isinstance(detail, dict):
        for field, value in detail.items():
            message = _first_message(value)
            if message is None:
                continue
            if field in ('non_field_errors', 'detail'):
                return message
            return f'{field}: {message}'
        return None
    if isinstance(detail, (list, tuple)):
        for item in detail:
            message = _first_message(item)
            if message is not None:
                return message
        return None
    return str(detail)


def _unauthorized_message(exc) -> str:
    if isinstance(exc, exceptions.NotAuthenticated):
        return 'Access denied. No token provided.'
    if isinstance(exc, InvalidToken):
        return 'Invalid or expired token.'
    codes = exc.get_codes()
    # simplejwt raises with a {"detail", "code"} dict
    if isinstance(codes, dict):
        codes = codes.get('code')
    if codes in ('user_not_found', 'user_inactive'):
        return 'User no longer exists.'
    return _first_message(exc.detail) or 'Unauthorized'


def envelope_exception_handler(exc, context):
    """Render every failure as ``{"success": false, "message", "error"?}``."""

    if isinstance(exc, Http404):
        exc = NotFoundError()
    elif isinstance(exc, DjangoPermissionDenied):
        exc = exceptions.PermissionDenied()

    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.exception(
            'Unhandled error in %s', view.__class__.__name__ if view else 'request'
        )
        payload = {'success': False, 'message': InternalError.default_detail}
        if settings.DEBUG:
            payload['error'] = str(exc)
        return Response(payload, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, (exceptions.NotAuthenticated, exceptions.AuthenticationFailed)):
        payload = {'success': False, 'message': _unauthorized_message(exc)}
    elif isinstance(exc, exceptions.ValidationError):
        payload = {
            'success': False,
            'message': _first_message(exc.detail) or 'Invalid input',
            'error': exc.detail,
        }
    else:
        payload = {'success': False, 'message': _first_message(exc.detail)}

    response.data = payload
    return response

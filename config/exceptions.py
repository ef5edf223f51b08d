"""
Global exception handler for consistent API error responses.
Follows DRF convention and returns uniform structure.
"""
import logging
from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status
from django.core.exceptions import PermissionDenied, ValidationError as DjangoValidationError
from django.conf import settings

from core.exceptions import CONFLICT, INVALID, NOT_FOUND, LedgerError

logger = logging.getLogger(__name__)

LEDGER_STATUS = {
    NOT_FOUND: status.HTTP_404_NOT_FOUND,
    CONFLICT: status.HTTP_409_CONFLICT,
    INVALID: status.HTTP_400_BAD_REQUEST,
}


def _to_camel(name):
    head, *rest = name.split('_')
    return head + ''.join(part.title() for part in rest)


def ledger_error_response(exc):
    """
    { "detail": str, "code": str, <context fields in camelCase> }
    e.g. a duplicate payment carries existingPaymentId so the client can update instead.
    """
    data = {'detail': exc.message, 'code': exc.code}
    for key, value in exc.context().items():
        if value is not None:
            data[_to_camel(key)] = value
    return Response(data, status=LEDGER_STATUS.get(exc.kind, status.HTTP_400_BAD_REQUEST))


def custom_exception_handler(exc, context):
    """
    Custom exception handler that returns:
    { "detail": str, "code": str (optional), "errors": dict (optional) }
    """
    if isinstance(exc, LedgerError):
        request = context.get('request') if context else None
        logger.info('Ledger error on %s: %s (%s)', request.path if request else 'unknown', exc, exc.code)
        return ledger_error_response(exc)

    response = exception_handler(exc, context)
    if response is not None:
        data = response.data if isinstance(response.data, dict) else {'detail': str(response.data)}
        if 'detail' not in data and response.data:
            # Serializer field errors
            data = {'detail': 'Invalid input.', 'errors': response.data}
        data.setdefault('detail', _get_detail(exc))
        data.setdefault('code', _get_code(exc))
        response.data = data
        return response

    if isinstance(exc, PermissionDenied):
        return Response(
            {'detail': str(exc) or 'Permission denied', 'code': 'permission_denied'},
            status=status.HTTP_403_FORBIDDEN
        )
    if isinstance(exc, DjangoValidationError):
        return Response(
            {'detail': str(exc), 'code': 'validation_error'},
            status=status.HTTP_400_BAD_REQUEST
        )

    logger.exception('Unhandled exception: %s', exc)
    error_detail = 'An internal error occurred.'
    if settings.DEBUG:
        error_detail = f'An internal error occurred: {str(exc)}'
    # Never expose stack traces to clients
    return Response(
        {'detail': error_detail, 'code': 'internal_error'},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


def _get_detail(exc):
    if hasattr(exc, 'detail'):
        d = exc.detail
        if isinstance(d, list):
            return d[0] if d else 'Error'
        if isinstance(d, dict):
            return d.get('detail', str(d))
        return str(d)
    return str(exc)


def _get_code(exc):
    codes = {
        'AuthenticationFailed': 'invalid_credentials',
        'NotAuthenticated': 'not_authenticated',
        'NotFound': 'not_found',
        'PermissionDenied': 'permission_denied',
        'ValidationError': 'validation_error',
        'ParseError': 'parse_error',
        'MethodNotAllowed': 'method_not_allowed',
    }
    return codes.get(type(exc).__name__, 'error')

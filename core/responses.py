# core/responses.py
"""JSON shapes shared by the REST views and the exception middleware."""
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.exceptions import AcademiaException, RolePermissionError
from core.results import ErrorKind

HTTP_STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INVALID_STATE: status.HTTP_409_CONFLICT,
    ErrorKind.BUSINESS_RULE_VIOLATION: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
}


def http_status_for(error_kind):
    return HTTP_STATUS_BY_KIND.get(error_kind, status.HTTP_400_BAD_REQUEST)


def error_code_for(error_kind):
    """Same codes the matching exceptions carry."""
    if error_kind == ErrorKind.VALIDATION:
        return "VALIDATION_ERROR"
    return error_kind.name


def error_payload(code, message, details=None):
    error = {'code': code, 'message': message}
    if details:
        error['details'] = details
    return {'success': False, 'error': error}


def success_payload(data=None, message=None):
    payload = {'success': True, 'data': data}
    if message:
        payload['message'] = message
    return payload


def api_exception_handler(exc, context):
    """DRF exception handler that also renders AcademiaException."""
    response = exception_handler(exc, context)
    if response is not None and isinstance(exc, exceptions.ValidationError):
        response.data = error_payload('VALIDATION_ERROR', 'Invalid request data', response.data)
        return response
    if response is not None:
        detail = response.data.get('detail') if isinstance(response.data, dict) else None
        code = getattr(detail, 'code', None) or 'error'
        message = str(detail) if detail is not None else 'Request failed'
        details = None if detail is not None else response.data
        response.data = error_payload(code.upper(), message, details)
        return response

    if isinstance(exc, RolePermissionError):
        return Response(error_payload(exc.error_code, exc.message), status=status.HTTP_403_FORBIDDEN)
    if isinstance(exc, AcademiaException):
        message = exc.message if exc.user_friendly else "Operation failed."
        return Response(error_payload(exc.error_code, message, exc.details), status=http_status_for(exc.error_kind))
    return None

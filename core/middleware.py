# core/middleware.py
"""
Request middleware: security headers, JSON error handling and API request logging.
"""
import logging
import time

from django.conf import settings
from django.http import JsonResponse

from .exceptions import AcademiaException, RolePermissionError
from .responses import error_payload, http_status_for

logger = logging.getLogger(__name__)


# ============ SECURITY HEADERS MIDDLEWARE ============

class SecurityHeadersMiddleware:
    """Adds baseline security headers."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)
        if response is None:
            return response

        response.setdefault("X-Content-Type-Options", "nosniff")
        response.setdefault("X-Frame-Options", "DENY")
        response.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        return response


# ============ EXCEPTION HANDLING MIDDLEWARE ============

class ExceptionHandlingMiddleware:
    """Turns AcademiaException into a JSON 4xx and any other error into a logged JSON 500."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if isinstance(exception, RolePermissionError):
            logger.warning(f"Permission exception on {request.path}: {exception}")
            return JsonResponse(error_payload(exception.error_code, exception.message), status=403)

        # Business logic error
        if isinstance(exception, AcademiaException):
            logger.warning(f"Business exception on {request.path}: {exception}")
            message = exception.message if exception.user_friendly else "Operation failed."
            return JsonResponse(
                error_payload(exception.error_code, message, exception.details),
                status=http_status_for(exception.error_kind),
            )

        # System error
        logger.error(f"System exception on {request.path}: {exception}", exc_info=True)
        return JsonResponse(
            error_payload('SERVER_ERROR', "System error. Our team has been notified."),
            status=500,
        )


# ============ REQUEST LOGGING MIDDLEWARE ============

class RequestLoggingMiddleware:
    """
    Logs every workflow write (POST/PUT/PATCH/DELETE under /api/) with its
    status and duration. Reads are logged at DEBUG when DEBUG is on.
    """
    API_PREFIX = '/api/'
    WRITE_METHODS = frozenset({'POST', 'PUT', 'PATCH', 'DELETE'})

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if not request.path.startswith(self.API_PREFIX):
            return self.get_response(request)

        started = time.monotonic()
        response = self.get_response(request)
        elapsed_ms = (time.monotonic() - started) * 1000

        user = getattr(request, 'user', None)
        message = (
            f"{request.method} {request.path} -> {getattr(response, 'status_code', None)} "
            f"({elapsed_ms:.0f}ms) user={getattr(user, 'pk', None)} ip={self._client_ip(request)}"
        )
        if request.method in self.WRITE_METHODS:
            logger.info(message)
        elif settings.DEBUG:
            logger.debug(message)
        return response

    def _client_ip(self, request):
        forwarded = request.META.get('HTTP_X_FORWARDED_FOR')
        if forwarded:
            return forwarded.split(',')[0].strip()
        return request.META.get('REMOTE_ADDR', 'unknown')

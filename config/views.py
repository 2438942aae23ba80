# config/views.py
"""
Health check and JSON error handlers.
"""
from django.db import connection
from django.db.utils import OperationalError
from django.http import JsonResponse
from django.utils import timezone

from core.responses import error_payload


def health_check_view(request):
    """System health check endpoint."""
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        db_status = True
    except OperationalError:
        db_status = False

    status_code = 200 if db_status else 503

    return JsonResponse({
        'status': 'healthy' if db_status else 'unhealthy',
        'database': 'connected' if db_status else 'disconnected',
        'timestamp': timezone.now().isoformat(),
    }, status=status_code)


# ============================================================================
# ERROR HANDLERS
# ============================================================================

def handler404(request, exception):
    return JsonResponse(error_payload('NOT_FOUND', 'The resource you are looking for does not exist.'), status=404)


def handler500(request):
    return JsonResponse(error_payload('SERVER_ERROR', 'Something went wrong on our end.'), status=500)


def handler403(request, exception):
    return JsonResponse(error_payload('PERMISSION_DENIED', 'You do not have permission to access this resource.'), status=403)


def handler400(request, exception):
    return JsonResponse(error_payload('BAD_REQUEST', 'Your request could not be processed.'), status=400)

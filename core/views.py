# core/views.py
"""
Base API view for workflow endpoints.
"""
import logging

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from shared.utils import clamp_page, DEFAULT_PAGE_SIZE

from .permissions import HasWorkflowPermission, actor_for
from .responses import error_payload, error_code_for, success_payload, http_status_for

logger = logging.getLogger(__name__)


class WorkflowAPIView(APIView):
    """
    APIView with role checks and ServiceResult rendering.

    Subclasses set ``required_permission`` (a string or a dict keyed by HTTP
    method).
    """
    permission_classes = [IsAuthenticated, HasWorkflowPermission]
    required_permission = None

    def actor(self, request):
        return actor_for(request.user)

    def validated(self, serializer_class, data):
        serializer = serializer_class(data=data)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data

    def pagination(self, request):
        return clamp_page(
            request.query_params.get('page', 1),
            request.query_params.get('page_size', DEFAULT_PAGE_SIZE),
        )

    def paginated_response(self, rows, total, page, page_size, serializer_class):
        return Response(success_payload({
            'results': serializer_class(rows, many=True).data,
            'total_count': total,
            'page': page,
            'page_size': page_size,
        }))

    def result_response(self, result, serializer_class=None, success_status=status.HTTP_200_OK, message=None):
        """Render a ServiceResult; failures map their error kind to an HTTP status."""
        if not result:
            return Response(
                error_payload(error_code_for(result.error_kind), result.message, result.details),
                status=http_status_for(result.error_kind),
            )

        data = result.value
        if serializer_class is not None and data is not None:
            data = serializer_class(data).data
        return Response(success_payload(data, message), status=success_status)

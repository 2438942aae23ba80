# students/views.py
"""
Student record and enrollment history endpoints.
"""
import logging

from rest_framework.response import Response

from core.responses import success_payload
from core.views import WorkflowAPIView
from admissions.services import AdmissionWorkflowService

from .serializers import (
    StudentSerializer,
    EnrollmentHistorySerializer,
    EnrollmentStatusChangeSerializer,
    AcademicStandingSerializer,
)
from .services import StudentService, EnrollmentHistoryService

logger = logging.getLogger(__name__)


class StudentDetailView(WorkflowAPIView):
    required_permission = 'view_students'

    def get(self, request, student_id):
        student = StudentService.get_student_or_raise(student_id)
        return Response(success_payload(StudentSerializer(student).data))


class StudentHistoryView(WorkflowAPIView):
    required_permission = 'view_students'

    def get(self, request, student_id):
        StudentService.get_student_or_raise(student_id)
        page, page_size = self.pagination(request)
        rows, total = EnrollmentHistoryService.get_student_enrollment_history(student_id, page, page_size)
        return self.paginated_response(rows, total, page, page_size, EnrollmentHistorySerializer)


class EnrollmentStatusView(WorkflowAPIView):
    required_permission = 'manage_enrollment'

    def post(self, request, student_id):
        data = self.validated(EnrollmentStatusChangeSerializer, request.data)
        logger.info(f"Enrollment status change requested for student {student_id}: {data['new_status']}")
        result = AdmissionWorkflowService.change_enrollment_status(
            student_id,
            data['new_status'],
            data['reason'],
            self.actor(request),
            effective_date=data.get('effective_date'),
        )
        return self.result_response(result, StudentSerializer, message="Enrollment status updated")


class AcademicStandingView(WorkflowAPIView):
    required_permission = 'manage_academic_standing'

    def post(self, request, student_id):
        data = self.validated(AcademicStandingSerializer, request.data)
        result = AdmissionWorkflowService.update_academic_standing(
            student_id,
            data['standing'],
            self.actor(request),
            notes=data.get('notes') or None,
        )
        return self.result_response(result, StudentSerializer, message="Academic standing updated")

# admissions/views.py
"""
Admission workflow REST endpoints.

Thin wrappers: validate the request body, call AdmissionWorkflowService and
render its ServiceResult.
"""
import logging
from dataclasses import asdict
from datetime import datetime, time, timedelta

from django.utils import timezone
from django.utils.dateparse import parse_date
from rest_framework import status
from rest_framework.response import Response

from core.exceptions import NotFoundError, ValidationError, RolePermissionError
from core.permissions import PermissionChecker, StaffRole
from core.responses import success_payload
from core.views import WorkflowAPIView

from .serializers import (
    EnrollmentApplicationSerializer,
    ApplicationDetailSerializer,
    SubmitApplicationSerializer,
    ReviewSerializer,
    DocumentRequestSerializer,
    HoldSerializer,
    RemoveHoldSerializer,
    DecisionSerializer,
    EnrollmentSerializer,
    ReasonSerializer,
    DecisionReadinessSerializer,
    ApplicationEventSerializer,
)
from .services import ApplicationService, AdmissionWorkflowService
from students.serializers import StudentSerializer
from students.services import StudentService

logger = logging.getLogger(__name__)


# ============ APPLICATIONS ============

class ApplicationListView(WorkflowAPIView):
    required_permission = {'GET': 'view_applications', 'POST': 'submit_application'}

    def get(self, request):
        page, page_size = self.pagination(request)
        params = request.query_params
        academic_year = params.get('academic_year')
        rows, total = ApplicationService.search_applications(
            status=params.get('status'),
            department_name=params.get('department'),
            program=params.get('program'),
            academic_term=params.get('academic_term'),
            academic_year=int(academic_year) if academic_year and academic_year.isdigit() else None,
            search_term=params.get('q'),
            page=page,
            page_size=page_size,
        )
        return self.paginated_response(rows, total, page, page_size, EnrollmentApplicationSerializer)

    def post(self, request):
        data = dict(self.validated(SubmitApplicationSerializer, request.data))
        student_id = data.pop('student_id')
        program = data.pop('program')
        preferred_start_date = data.pop('preferred_start_date', None)

        # Students apply only for their own record
        if PermissionChecker.get_user_role(request.user) == StaffRole.STUDENT:
            if not StudentService.belongs_to_user(student_id, request.user):
                raise RolePermissionError(
                    "Students can only submit applications for their own record",
                    details={'student_id': student_id},
                )

        logger.info(f"Application submission via API for student {student_id}")
        result = AdmissionWorkflowService.submit_application(
            student_id, program, preferred_start_date, actor=self.actor(request), **data
        )
        return self.result_response(
            result,
            EnrollmentApplicationSerializer,
            success_status=status.HTTP_201_CREATED,
            message="Application submitted successfully",
        )


class ApplicationDetailView(WorkflowAPIView):
    required_permission = 'view_applications'

    def get(self, request, application_id):
        application = ApplicationService.get_application_by_id(application_id)
        if application is None:
            raise NotFoundError(f"Application with ID {application_id} not found")
        return Response(success_payload(ApplicationDetailSerializer(application).data))


class ApplicationReadinessView(WorkflowAPIView):
    required_permission = 'review_applications'

    def get(self, request, application_id):
        readiness = AdmissionWorkflowService.validate_ready_for_decision(application_id)
        return Response(success_payload(DecisionReadinessSerializer(asdict(readiness)).data))


class ApplicationTimelineView(WorkflowAPIView):
    required_permission = 'view_applications'

    def get(self, request, application_id):
        events = AdmissionWorkflowService.get_application_timeline(application_id)
        data = ApplicationEventSerializer([asdict(event) for event in events], many=True).data
        return Response(success_payload(data))


class ApplicationsRequiringAttentionView(WorkflowAPIView):
    required_permission = 'review_applications'

    def get(self, request):
        page, page_size = self.pagination(request)
        days = request.query_params.get('days_overdue')
        rows, total = AdmissionWorkflowService.get_applications_requiring_attention(
            days_overdue=int(days) if days and days.isdigit() else None,
            page=page,
            page_size=page_size,
        )
        return self.paginated_response(rows, total, page, page_size, EnrollmentApplicationSerializer)


class AdmissionStatsView(WorkflowAPIView):
    required_permission = 'view_reports'

    def get(self, request):
        today = timezone.localdate()
        start = self._parse(request.query_params.get('start_date'), today - timedelta(days=365))
        end = self._parse(request.query_params.get('end_date'), today)
        if start > end:
            raise ValidationError("start_date must not be after end_date")

        tz = timezone.get_current_timezone()
        stats = AdmissionWorkflowService.get_admission_stats(
            timezone.make_aware(datetime.combine(start, time.min), tz),
            timezone.make_aware(datetime.combine(end, time.max), tz),
            department_name=request.query_params.get('department') or None,
        )
        return Response(success_payload(stats))

    def _parse(self, value, default):
        if not value:
            return default
        parsed = parse_date(value)
        if parsed is None:
            raise ValidationError(f"Invalid date: {value}")
        return parsed


# ============ WORKFLOW ACTIONS ============

class ApplicationActionView(WorkflowAPIView):
    """POST endpoint running one workflow operation on an application."""
    serializer_class = None
    result_serializer = EnrollmentApplicationSerializer
    success_message = None

    def post(self, request, application_id):
        data = self.validated(self.serializer_class, request.data)
        result = self.perform(application_id, data, self.actor(request))
        return self.result_response(result, self.result_serializer, message=self.success_message)

    def perform(self, application_id, data, actor):
        raise NotImplementedError


class InitiateReviewView(ApplicationActionView):
    required_permission = 'review_applications'
    serializer_class = ReviewSerializer
    success_message = "Review initiated"

    def perform(self, application_id, data, actor):
        return AdmissionWorkflowService.initiate_review(application_id, actor, data.get('notes'))


class RequestDocumentsView(ApplicationActionView):
    required_permission = 'review_applications'
    serializer_class = DocumentRequestSerializer
    success_message = "Additional documents requested"

    def perform(self, application_id, data, actor):
        return AdmissionWorkflowService.request_additional_documents(
            application_id, data['documents'], actor, data.get('notes')
        )


class PlaceOnHoldView(ApplicationActionView):
    required_permission = 'review_applications'
    serializer_class = HoldSerializer
    success_message = "Application placed on hold"

    def perform(self, application_id, data, actor):
        return AdmissionWorkflowService.place_on_hold(
            application_id, data['reason'], actor, data.get('expected_resolution_date')
        )


class RemoveHoldView(ApplicationActionView):
    required_permission = 'review_applications'
    serializer_class = RemoveHoldSerializer
    success_message = "Hold removed"

    def perform(self, application_id, data, actor):
        return AdmissionWorkflowService.remove_hold(application_id, data.get('resolution_notes'), actor)


class AdmissionDecisionView(ApplicationActionView):
    required_permission = 'decide_admissions'
    serializer_class = DecisionSerializer
    success_message = "Admission decision processed successfully"

    def perform(self, application_id, data, actor):
        return AdmissionWorkflowService.process_admission_decision(
            application_id,
            data['decision'],
            data['reason'],
            actor,
            conditional_requirements=data.get('conditional_requirements'),
            enforce_readiness=data.get('enforce_readiness', False),
        )


class AdmitStudentView(ApplicationActionView):
    required_permission = 'decide_admissions'
    serializer_class = ReviewSerializer
    result_serializer = StudentSerializer
    success_message = "Student admitted"

    def perform(self, application_id, data, actor):
        return AdmissionWorkflowService.admit_student(application_id, actor)


class ProcessEnrollmentView(ApplicationActionView):
    required_permission = 'manage_enrollment'
    serializer_class = EnrollmentSerializer
    result_serializer = StudentSerializer
    success_message = "Student enrolled"

    def perform(self, application_id, data, actor):
        return AdmissionWorkflowService.process_enrollment(
            application_id,
            enrollment_date=data.get('enrollment_date'),
            academic_term=data.get('academic_term') or None,
            notes=data.get('notes') or None,
            actor=actor,
        )


class WithdrawApplicationView(ApplicationActionView):
    required_permission = 'review_applications'
    serializer_class = ReasonSerializer
    success_message = "Application withdrawn"

    def perform(self, application_id, data, actor):
        return AdmissionWorkflowService.withdraw_application(application_id, data['reason'], actor)


class ExpediteApplicationView(ApplicationActionView):
    required_permission = 'decide_admissions'
    serializer_class = ReasonSerializer
    success_message = "Application expedited"

    def perform(self, application_id, data, actor):
        return AdmissionWorkflowService.expedite_application(application_id, data['reason'], actor)

# admissions/services.py
"""
Admission services.

ApplicationService persists applications and their documents and raises for
caller misuse. AdmissionWorkflowService sequences review, decision and
enrollment across the application, the student record and the enrollment
history; its mutating operations return a ServiceResult.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional, List, Tuple, Dict, Any

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import Q, Case, When, Value, IntegerField, Count
from django.utils import timezone

# ============ SHARED IMPORTS ============
from shared.constants import (
    ApplicationStatus,
    AdmissionDecision,
    ApplicationPriority,
    EnrollmentStatus,
    AcademicStanding,
    EnrollmentEventType,
    ACTIVE_APPLICATION_STATUSES,
    PRIORITY_RANK,
    SYSTEM_ACTOR,
)
from shared.utils import paginate, DEFAULT_PAGE_SIZE

# ============ CORE IMPORTS ============
from core.decorators import workflow_operation
from core.exceptions import (
    NotFoundError,
    InvalidStateError,
    BusinessRuleViolation,
    ValidationError,
)

# ============ LOCAL IMPORTS ============
from .models import EnrollmentApplication, ApplicationDocument
from students.models import Student
from students.services import (
    StudentService,
    EnrollmentHistoryService,
    is_valid_enrollment_status_transition,
    is_valid_academic_standing,
)

logger = logging.getLogger(__name__)


DECISION_TO_STATUS = {
    AdmissionDecision.ADMITTED: ApplicationStatus.APPROVED,
    AdmissionDecision.CONDITIONALLY_ADMITTED: ApplicationStatus.APPROVED,
    AdmissionDecision.REJECTED: ApplicationStatus.REJECTED,
    AdmissionDecision.WAITLISTED: ApplicationStatus.ON_HOLD,
    AdmissionDecision.DEFERRED: ApplicationStatus.ON_HOLD,
}

DECISION_HISTORY_REASONS = {
    AdmissionDecision.ADMITTED: "Application approved for admission",
    AdmissionDecision.CONDITIONALLY_ADMITTED: "Application conditionally approved for admission",
    AdmissionDecision.REJECTED: "Application rejected",
    AdmissionDecision.WAITLISTED: "Application placed on waitlist",
    AdmissionDecision.DEFERRED: "Application deferred to next term",
}

# Enrollment status recorded in history for each decision
DECISION_TO_ENROLLMENT_STATUS = {
    AdmissionDecision.ADMITTED: EnrollmentStatus.ADMITTED,
    AdmissionDecision.CONDITIONALLY_ADMITTED: EnrollmentStatus.ADMITTED,
    AdmissionDecision.REJECTED: EnrollmentStatus.DISMISSED,
}

STATUS_CHANGE_EVENTS = {
    EnrollmentStatus.SUSPENDED: EnrollmentEventType.SUSPENDED,
    EnrollmentStatus.WITHDRAWN: EnrollmentEventType.WITHDREW,
    EnrollmentStatus.GRADUATED: EnrollmentEventType.GRADUATED,
    EnrollmentStatus.DISMISSED: EnrollmentEventType.DISMISSED,
    EnrollmentStatus.LEAVE_OF_ABSENCE: EnrollmentEventType.LEAVE_OF_ABSENCE,
}

# Optional fields accepted at submission besides program and start date
SUBMISSION_FIELDS = frozenset({
    'applicant_name',
    'email',
    'phone_number',
    'department_name',
    'academic_term',
    'academic_year',
    'priority',
    'previous_gpa',
    'previous_institution',
    'requires_financial_aid',
    'is_international_student',
})


def _actor(actor):
    return (actor or '').strip() or SYSTEM_ACTOR


def _setting(name, default):
    return getattr(settings, name, default)


# ============ APPLICATION STATUS STORE ============

class ApplicationService:
    """
    Storage and status operations for enrollment applications.
    Raises NotFoundError / InvalidStateError / BusinessRuleViolation / ValidationError.
    """

    @staticmethod
    def get_application_by_id(application_id) -> Optional[EnrollmentApplication]:
        try:
            return EnrollmentApplication.objects.select_related('applicant').get(pk=application_id)
        except (EnrollmentApplication.DoesNotExist, ValueError, TypeError):
            return None

    @staticmethod
    def get_application_for_update(application_id) -> EnrollmentApplication:
        """Fetch and row-lock an application. Must run inside a transaction."""
        try:
            return EnrollmentApplication.objects.select_for_update().get(pk=application_id)
        except (EnrollmentApplication.DoesNotExist, ValueError, TypeError):
            raise NotFoundError(
                f"Application with ID {application_id} not found",
                details={'application_id': application_id},
            )

    @staticmethod
    def has_active_application(student_id) -> bool:
        return EnrollmentApplication.objects.filter(
            applicant_id=student_id,
            status__in=ACTIVE_APPLICATION_STATUSES,
        ).exists()

    @staticmethod
    @transaction.atomic
    def submit_application(applicant: Student, **fields) -> EnrollmentApplication:
        """
        Create a SUBMITTED application for the applicant.

        Raises:
            BusinessRuleViolation: the applicant already has an active application
            ValidationError: the application data is invalid
        """
        logger.info(f"Submitting application for student {applicant.pk}")

        if ApplicationService.has_active_application(applicant.pk):
            raise BusinessRuleViolation(
                "Student already has a pending application",
                details={'student_id': applicant.pk},
            )

        application = EnrollmentApplication(
            applicant=applicant,
            status=ApplicationStatus.SUBMITTED,
            application_date=timezone.now(),
            **fields,
        )
        try:
            application.full_clean()
        except DjangoValidationError as e:
            raise ValidationError("Application data is invalid", details=e.message_dict)

        application.save()
        logger.info(f"Application {application.pk} submitted for student {applicant.pk}")
        return application

    @staticmethod
    def update_application_status(application: EnrollmentApplication, new_status, notes=None) -> EnrollmentApplication:
        if new_status not in ApplicationStatus.values:
            raise ValidationError(f"Unknown application status: {new_status}")

        old_status = application.status
        application.status = new_status
        application.append_note(notes)
        application.save(update_fields=['status', 'notes', 'priority', 'updated_at'])

        logger.info(f"Application {application.pk} status: {old_status} -> {new_status}")
        return application

    @staticmethod
    def process_admission_decision(
        application: EnrollmentApplication,
        decision,
        reason=None,
        decision_made_by=None,
        extra_notes=None,
    ) -> EnrollmentApplication:
        """Record the decision and move the application to the matching status."""
        if decision not in AdmissionDecision.values:
            raise ValidationError(f"Unknown admission decision: {decision}")
        if application.has_final_decision:
            raise InvalidStateError(
                f"Application already has a final decision: {application.get_decision_display()}",
                details={'application_id': application.pk, 'decision': application.decision},
            )

        application.decision = decision
        application.decision_date = timezone.now()
        application.decision_reason = reason or ''
        application.decision_made_by = _actor(decision_made_by)
        application.status = DECISION_TO_STATUS[AdmissionDecision(decision)]
        application.append_note(f"Decision: {application.get_decision_display()} | Reason: {reason or 'Not provided'}")
        application.append_note(extra_notes)
        application.save()

        logger.info(f"Admission decision {decision} recorded for application {application.pk}")
        return application

    # ============ DOCUMENTS ============

    @staticmethod
    def are_all_required_documents_submitted(application_id) -> bool:
        """Every required document is verified. True when nothing is required."""
        return not ApplicationDocument.objects.filter(
            application_id=application_id,
            is_required=True,
            is_verified=False,
        ).exists()

    @staticmethod
    def add_document(application_id, **fields) -> ApplicationDocument:
        application = ApplicationService.get_application_by_id(application_id)
        if application is None:
            raise NotFoundError(f"Application with ID {application_id} not found")

        document = ApplicationDocument(application=application, **fields)
        try:
            document.full_clean()
        except DjangoValidationError as e:
            raise ValidationError("Document data is invalid", details=e.message_dict)
        document.save()

        logger.info(f"Document {document.document_type} added to application {application_id}")
        return document

    @staticmethod
    def verify_document(document_id, verified_by, notes=None) -> ApplicationDocument:
        try:
            document = ApplicationDocument.objects.get(pk=document_id)
        except (ApplicationDocument.DoesNotExist, ValueError, TypeError):
            raise NotFoundError(f"Document with ID {document_id} not found")

        document.mark_verified(_actor(verified_by), notes)
        document.save()
        logger.info(f"Document {document_id} verified by {document.verified_by}")
        return document

    @staticmethod
    def get_application_documents(application_id) -> List[ApplicationDocument]:
        return list(ApplicationDocument.objects.filter(application_id=application_id))

    # ============ QUERIES ============

    @staticmethod
    def get_applications_by_student(student_id, status=None) -> List[EnrollmentApplication]:
        queryset = EnrollmentApplication.objects.filter(applicant_id=student_id)
        if status:
            queryset = queryset.filter(status=status)
        return list(queryset.order_by('-application_date', '-id'))

    @staticmethod
    def get_applications_by_status(
        status, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE
    ) -> Tuple[List[EnrollmentApplication], int]:
        queryset = (
            EnrollmentApplication.objects
            .select_related('applicant')
            .filter(status=status)
            .order_by('-application_date', '-id')
        )
        return paginate(queryset, page, page_size)

    @staticmethod
    def search_applications(
        status=None,
        department_name=None,
        program=None,
        academic_term=None,
        academic_year=None,
        search_term=None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> Tuple[List[EnrollmentApplication], int]:
        queryset = EnrollmentApplication.objects.select_related('applicant')
        if status:
            queryset = queryset.filter(status=status)
        if department_name:
            queryset = queryset.filter(department_name=department_name)
        if program:
            queryset = queryset.filter(program=program)
        if academic_term:
            queryset = queryset.filter(academic_term=academic_term)
        if academic_year is not None:
            queryset = queryset.filter(academic_year=academic_year)
        if search_term:
            queryset = queryset.filter(
                Q(applicant_name__icontains=search_term)
                | Q(email__icontains=search_term)
                | Q(program__icontains=search_term)
                | Q(applicant__student_number__iexact=search_term)
            )
        return paginate(queryset.order_by('-application_date', '-id'), page, page_size)

    @staticmethod
    def get_applications_requiring_review(
        page: int = 1, page_size: int = DEFAULT_PAGE_SIZE
    ) -> Tuple[List[EnrollmentApplication], int]:
        priority_rank = Case(
            *[When(priority=priority, then=Value(rank)) for priority, rank in PRIORITY_RANK.items()],
            default=Value(0),
            output_field=IntegerField(),
        )
        queryset = (
            EnrollmentApplication.objects
            .select_related('applicant')
            .filter(status__in=[
                ApplicationStatus.UNDER_REVIEW,
                ApplicationStatus.INCOMPLETE_DOCUMENTS,
                ApplicationStatus.SUBMITTED,
            ])
            .annotate(priority_rank=priority_rank)
            .order_by('-priority_rank', '-application_date', '-id')
        )
        return paginate(queryset, page, page_size)


# ============ WORKFLOW RESULT TYPES ============

@dataclass
class DecisionReadiness:
    is_ready: bool = False
    issues: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    all_documents_submitted: bool = False
    earliest_decision_date: Optional[datetime] = None


@dataclass
class ApplicationEvent:
    event_date: datetime
    event_type: str
    description: str
    processed_by: str = ''
    status: Optional[str] = None
    decision: Optional[str] = None


# ============ ADMISSION WORKFLOW ORCHESTRATOR ============

class AdmissionWorkflowService:
    """
    Stateless coordinator of the admission workflow.

    Each mutating operation validates the current state before writing and,
    on success, appends exactly one enrollment history row. On failure nothing
    is written and a failed ServiceResult is returned.
    """

    @staticmethod
    def _record_application_event(application, reason, notes, actor, event_type=EnrollmentEventType.APPLICATION_REVIEWED):
        return EnrollmentHistoryService.record_enrollment_event(
            student=application.applicant,
            event_type=event_type,
            new_status=EnrollmentStatus.APPLIED,
            previous_status=None,
            reason=reason,
            notes=notes,
            processed_by=actor,
            application=application,
            department_name=application.department_name,
            program=application.program,
            academic_term=application.academic_term,
            academic_year=application.academic_year,
        )

    # ============ SUBMISSION AND REVIEW ============

    @staticmethod
    @workflow_operation('submit_application')
    def submit_application(student_id, program, preferred_start_date=None, actor=None, **extra):
        """
        Submit a new application on behalf of an existing student.

        Args:
            student_id: Applicant's Student id
            program: Program applied for
            preferred_start_date: Expected enrollment date
            actor: Who submitted it; defaults to "System"
            **extra: Any of SUBMISSION_FIELDS

        Returns:
            ServiceResult wrapping the new EnrollmentApplication
        """
        logger.info(f"Submitting application for student {student_id} to {program}")

        unknown = set(extra) - SUBMISSION_FIELDS
        if unknown:
            raise ValidationError(f"Unexpected application fields: {', '.join(sorted(unknown))}")
        if not (program or '').strip():
            raise ValidationError("Program is required", details={'program': ['Program is required.']})

        # Row lock serializes concurrent submissions for the same applicant
        student = StudentService.get_student_or_raise(student_id, for_update=True)

        if student.is_enrolled:
            raise BusinessRuleViolation(
                "Student is already enrolled and cannot submit a new application",
                details={'student_id': student.pk},
            )
        # admit_student only moves APPLIED students
        if student.enrollment_status != EnrollmentStatus.APPLIED:
            raise BusinessRuleViolation(
                f"Student in {student.get_enrollment_status_display()} status cannot submit an application",
                details={'student_id': student.pk, 'enrollment_status': student.enrollment_status},
            )

        fields = {
            'applicant_name': student.full_name,
            'email': student.email,
            'phone_number': student.phone_number,
            'department_name': student.department_name,
        }
        fields.update(extra)

        application = ApplicationService.submit_application(
            student,
            program=program.strip(),
            expected_enrollment_date=preferred_start_date,
            **fields,
        )

        AdmissionWorkflowService._record_application_event(
            application,
            reason=f"Application submitted for {application.program}",
            notes=f"Submitted by {_actor(actor)}",
            actor=actor,
            event_type=EnrollmentEventType.APPLICATION_SUBMITTED,
        )

        logger.info(f"Application {application.pk} submitted successfully for student {student.pk}")
        return application

    @staticmethod
    @workflow_operation('initiate_review')
    def initiate_review(application_id, reviewer, notes=None):
        logger.info(f"Initiating review for application {application_id} by {reviewer}")

        application = ApplicationService.get_application_for_update(application_id)
        if application.status != ApplicationStatus.SUBMITTED:
            raise InvalidStateError(
                f"Cannot initiate review for application in {application.get_status_display()} status",
                details={'application_id': application.pk, 'status': application.status},
            )

        review_notes = f"Review initiated by {_actor(reviewer)}"
        if notes:
            review_notes = f"{review_notes}. {notes}"

        ApplicationService.update_application_status(application, ApplicationStatus.UNDER_REVIEW, review_notes)
        AdmissionWorkflowService._record_application_event(
            application, "Application review initiated", review_notes, reviewer,
        )

        logger.info(f"Review initiated successfully for application {application.pk}")
        return application

    @staticmethod
    @workflow_operation('request_additional_documents')
    def request_additional_documents(application_id, documents, reviewer, notes=None):
        logger.info(f"Requesting additional documents for application {application_id}")

        requested = [d.strip() for d in (documents or []) if d and d.strip()]
        if not requested:
            raise ValidationError("At least one document must be requested")

        application = ApplicationService.get_application_for_update(application_id)
        if application.is_terminal:
            raise InvalidStateError(
                f"Cannot request documents for application in {application.get_status_display()} status",
                details={'application_id': application.pk, 'status': application.status},
            )

        request_notes = f"Additional documents required: {', '.join(requested)}."
        if notes:
            request_notes = f"{request_notes} {notes}"

        ApplicationService.update_application_status(application, ApplicationStatus.INCOMPLETE_DOCUMENTS, request_notes)
        AdmissionWorkflowService._record_application_event(
            application, "Additional documents requested", request_notes, reviewer,
        )
        return application

    @staticmethod
    @workflow_operation('place_on_hold')
    def place_on_hold(application_id, reason, reviewer, expected_resolution_date=None):
        logger.info(f"Placing application {application_id} on hold: {reason}")

        if not (reason or '').strip():
            raise ValidationError("A hold reason is required")

        application = ApplicationService.get_application_for_update(application_id)
        if application.status != ApplicationStatus.UNDER_REVIEW:
            raise InvalidStateError(
                f"Cannot place application on hold from {application.get_status_display()} status",
                details={'application_id': application.pk, 'status': application.status},
            )

        hold_notes = f"Hold reason: {reason.strip()}"
        if expected_resolution_date:
            hold_notes += f" | Expected resolution: {expected_resolution_date:%Y-%m-%d}"

        ApplicationService.update_application_status(application, ApplicationStatus.ON_HOLD, hold_notes)
        AdmissionWorkflowService._record_application_event(
            application, "Application placed on hold", hold_notes, reviewer,
        )
        return application

    @staticmethod
    @workflow_operation('remove_hold')
    def remove_hold(application_id, resolution_notes, reviewer):
        logger.info(f"Removing hold from application {application_id}")

        application = ApplicationService.get_application_for_update(application_id)
        if application.status != ApplicationStatus.ON_HOLD:
            raise InvalidStateError(
                "Application is not on hold",
                details={'application_id': application.pk, 'status': application.status},
            )

        notes = f"Hold removed: {resolution_notes or 'No notes provided'}"
        ApplicationService.update_application_status(application, ApplicationStatus.UNDER_REVIEW, notes)
        AdmissionWorkflowService._record_application_event(
            application, "Hold removed from application", notes, reviewer,
        )
        return application

    @staticmethod
    @workflow_operation('expedite_application')
    def expedite_application(application_id, reason, requested_by):
        logger.info(f"Expediting application {application_id} requested by {requested_by}")

        application = ApplicationService.get_application_for_update(application_id)
        if not application.is_active:
            raise InvalidStateError(
                f"Cannot expedite application in {application.get_status_display()} status",
                details={'application_id': application.pk, 'status': application.status},
            )

        expedite_notes = f"EXPEDITED by {_actor(requested_by)}: {reason or 'No reason provided'}"
        application.priority = ApplicationPriority.URGENT
        ApplicationService.update_application_status(application, application.status, expedite_notes)
        AdmissionWorkflowService._record_application_event(
            application, "Application expedited", expedite_notes, requested_by,
        )
        return application

    @staticmethod
    @workflow_operation('withdraw_application')
    def withdraw_application(application_id, reason, actor):
        logger.info(f"Withdrawing application {application_id}")

        application = ApplicationService.get_application_for_update(application_id)
        if application.status in (ApplicationStatus.APPROVED, ApplicationStatus.REJECTED):
            raise BusinessRuleViolation(
                "Cannot withdraw an application that already has a final decision",
                details={'application_id': application.pk, 'status': application.status},
            )
        if application.is_terminal:
            raise InvalidStateError(
                f"Application is already {application.get_status_display().lower()}",
                details={'application_id': application.pk, 'status': application.status},
            )

        notes = f"Withdrawn by {_actor(actor)}: {reason or 'No reason provided'}"
        ApplicationService.update_application_status(application, ApplicationStatus.WITHDRAWN, notes)
        AdmissionWorkflowService._record_application_event(
            application, "Application withdrawn", notes, actor,
        )
        return application

    # ============ DECISION ============

    @staticmethod
    def validate_ready_for_decision(application_id) -> DecisionReadiness:
        """Report what stands between the application and a decision. Never writes."""
        logger.debug(f"Validating application {application_id} readiness for decision")

        result = DecisionReadiness()
        application = ApplicationService.get_application_by_id(application_id)
        if application is None:
            result.issues.append("Application not found")
            return result

        status_issues = {
            ApplicationStatus.SUBMITTED: "Application has not been reviewed yet",
            ApplicationStatus.INCOMPLETE_DOCUMENTS: "Application has incomplete documents",
            ApplicationStatus.ON_HOLD: "Application is currently on hold",
        }
        if application.status != ApplicationStatus.UNDER_REVIEW:
            result.issues.append(status_issues.get(
                application.status,
                f"Application is not under review (status: {application.get_status_display()})",
            ))

        result.all_documents_submitted = ApplicationService.are_all_required_documents_submitted(application.pk)
        if not result.all_documents_submitted:
            result.issues.append("Not all required documents have been submitted and verified")

        min_review_hours = _setting('ADMISSIONS_MIN_REVIEW_HOURS', 24)
        earliest = application.application_date + timedelta(hours=min_review_hours)
        if application.age < timedelta(hours=min_review_hours):
            result.issues.append(f"Application submitted less than {min_review_hours} hours ago")
            result.warnings.append(f"Consider waiting until {earliest:%Y-%m-%d %H:%M} for a decision")
            result.earliest_decision_date = earliest

        if application.has_final_decision:
            result.issues.append(f"Application already has a final decision: {application.get_decision_display()}")
        elif application.decision:
            result.warnings.append(f"Earlier decision {application.get_decision_display()} will be replaced")

        result.is_ready = not result.issues
        return result

    @staticmethod
    @workflow_operation('process_admission_decision')
    def process_admission_decision(
        application_id,
        decision,
        reason,
        decided_by,
        conditional_requirements=None,
        enforce_readiness=False,
    ):
        """
        Record an admission decision on an application under review.

        The student's enrollment status is left alone; see admit_student.
        With enforce_readiness the full readiness check must pass first.
        """
        logger.info(f"Processing admission decision for application {application_id}: {decision}")

        if decision not in AdmissionDecision.values:
            raise ValidationError(f"Unknown admission decision: {decision}")
        decision = AdmissionDecision(decision)

        application = ApplicationService.get_application_for_update(application_id)
        if application.has_final_decision:
            raise InvalidStateError(
                f"Application already has a final decision: {application.get_decision_display()}",
                details={'application_id': application.pk, 'decision': application.decision},
            )
        if application.status != ApplicationStatus.UNDER_REVIEW:
            raise InvalidStateError(
                f"Cannot record a decision for application in {application.get_status_display()} status",
                details={'application_id': application.pk, 'status': application.status},
            )

        if enforce_readiness:
            readiness = AdmissionWorkflowService.validate_ready_for_decision(application.pk)
            if not readiness.is_ready:
                raise BusinessRuleViolation(
                    f"Application is not ready for decision: {'; '.join(readiness.issues)}",
                    details={'issues': readiness.issues},
                )

        extra_notes = None
        if decision == AdmissionDecision.CONDITIONALLY_ADMITTED and conditional_requirements:
            extra_notes = f"Conditional requirements: {conditional_requirements}"

        ApplicationService.process_admission_decision(application, decision, reason, decided_by, extra_notes)

        EnrollmentHistoryService.record_enrollment_event(
            student=application.applicant,
            event_type=EnrollmentEventType.ADMISSION_DECISION,
            new_status=DECISION_TO_ENROLLMENT_STATUS.get(decision, EnrollmentStatus.APPLIED),
            previous_status=EnrollmentStatus.APPLIED,
            reason=DECISION_HISTORY_REASONS[decision],
            notes=f"Decision: {decision.label} | Reason: {reason or 'Not provided'}",
            processed_by=decided_by,
            application=application,
            department_name=application.department_name,
            program=application.program,
            academic_term=application.academic_term,
            academic_year=application.academic_year,
            metadata={'decision': decision.value},
        )

        logger.info(f"Admission decision processed successfully for application {application.pk}")
        return application

    # ============ STUDENT TRANSITIONS ============

    @staticmethod
    @workflow_operation('admit_student')
    def admit_student(application_id, actor):
        """Move the applicant from APPLIED to ADMITTED on an accepted decision."""
        application = ApplicationService.get_application_for_update(application_id)
        if not application.has_accepted_decision:
            raise InvalidStateError(
                "Cannot admit student from application without accepted admission",
                details={'application_id': application.pk, 'decision': application.decision},
            )

        student = StudentService.get_student_or_raise(application.applicant_id, for_update=True)
        if student.enrollment_status != EnrollmentStatus.APPLIED:
            raise InvalidStateError(
                "Student must be in Applied status to be admitted",
                details={'student_id': student.pk, 'enrollment_status': student.enrollment_status},
            )

        StudentService.update_enrollment_fields(student, enrollment_status=EnrollmentStatus.ADMITTED)
        EnrollmentHistoryService.record_enrollment_event(
            student=student,
            event_type=EnrollmentEventType.STATUS_CHANGED,
            new_status=EnrollmentStatus.ADMITTED,
            previous_status=EnrollmentStatus.APPLIED,
            reason=f"Student admitted to {application.program}",
            notes=f"Admission decision: {application.get_decision_display()}",
            processed_by=actor,
            application=application,
            program=application.program,
            academic_term=application.academic_term,
            academic_year=application.academic_year,
        )

        logger.info(f"Student {student.pk} admitted via application {application.pk}")
        return student

    @staticmethod
    @workflow_operation('process_enrollment')
    def process_enrollment(application_id, enrollment_date=None, academic_term=None, notes=None, actor=SYSTEM_ACTOR):
        """
        Enroll an admitted student from an accepted application.

        Sets the student to ENROLLED, copies the program across and marks the
        application APPROVED.
        """
        logger.info(f"Processing enrollment for application {application_id}")

        application = ApplicationService.get_application_for_update(application_id)
        if not application.has_accepted_decision:
            raise InvalidStateError(
                "Cannot enroll student from application without accepted admission",
                details={'application_id': application.pk, 'decision': application.decision},
            )

        student = StudentService.get_student_or_raise(application.applicant_id, for_update=True)
        if student.enrollment_status != EnrollmentStatus.ADMITTED:
            raise InvalidStateError(
                "Student must be in Admitted status to enroll",
                details={'student_id': student.pk, 'enrollment_status': student.enrollment_status},
            )

        if isinstance(enrollment_date, datetime):
            enrollment_date = enrollment_date.date()
        enrollment_date = enrollment_date or timezone.localdate()
        term = academic_term or application.academic_term

        StudentService.update_enrollment_fields(
            student,
            enrollment_status=EnrollmentStatus.ENROLLED,
            program=application.program,
            enrollment_date=enrollment_date,
        )
        enrollment_notes = f"Enrolled by {_actor(actor)} effective {enrollment_date:%Y-%m-%d}"
        if notes:
            enrollment_notes = f"{enrollment_notes}. {notes}"
        ApplicationService.update_application_status(application, ApplicationStatus.APPROVED, enrollment_notes)

        EnrollmentHistoryService.record_enrollment_event(
            student=student,
            event_type=EnrollmentEventType.ENROLLED,
            new_status=EnrollmentStatus.ENROLLED,
            previous_status=EnrollmentStatus.ADMITTED,
            reason=f"Student enrolled in {application.program}",
            notes=notes,
            processed_by=actor,
            application=application,
            department_name=application.department_name,
            program=application.program,
            academic_term=term,
            academic_year=application.academic_year,
            effective_date=timezone.make_aware(datetime.combine(enrollment_date, datetime.min.time())),
        )

        logger.info(f"Student {student.pk} enrolled in {application.program}")
        return student

    @staticmethod
    @workflow_operation('change_enrollment_status')
    def change_enrollment_status(student_id, new_status, reason, actor, effective_date=None):
        """
        Move an existing student along the enrollment status table.

        ADMITTED is reached only through admit_student and ENROLLED from
        ADMITTED only through process_enrollment.
        """
        if new_status not in EnrollmentStatus.values:
            raise ValidationError(f"Unknown enrollment status: {new_status}")
        new_status = EnrollmentStatus(new_status)

        student = StudentService.get_student_or_raise(student_id, for_update=True)
        current = student.enrollment_status

        if new_status == EnrollmentStatus.ADMITTED:
            raise InvalidStateError("Students are admitted through an accepted application")
        if current == EnrollmentStatus.ADMITTED and new_status == EnrollmentStatus.ENROLLED:
            raise InvalidStateError("Admitted students are enrolled through their accepted application")
        if not is_valid_enrollment_status_transition(current, new_status):
            raise InvalidStateError(
                f"Cannot change enrollment status from {student.get_enrollment_status_display()} to {new_status.label}",
                details={'student_id': student.pk, 'from': current, 'to': new_status.value},
            )

        if current == EnrollmentStatus.LEAVE_OF_ABSENCE and new_status == EnrollmentStatus.ENROLLED:
            event_type = EnrollmentEventType.RETURNED_FROM_LEAVE
        else:
            event_type = STATUS_CHANGE_EVENTS.get(new_status, EnrollmentEventType.STATUS_CHANGED)

        if isinstance(effective_date, datetime):
            effective_date = effective_date.date()

        graduation_date = None
        if new_status == EnrollmentStatus.GRADUATED:
            graduation_date = effective_date or timezone.localdate()

        StudentService.update_enrollment_fields(
            student,
            enrollment_status=new_status,
            actual_graduation_date=graduation_date,
        )
        EnrollmentHistoryService.record_enrollment_event(
            student=student,
            event_type=event_type,
            new_status=new_status,
            previous_status=current,
            reason=reason or f"Enrollment status changed to {new_status.label}",
            processed_by=actor,
            effective_date=(
                timezone.make_aware(datetime.combine(effective_date, datetime.min.time()))
                if effective_date else None
            ),
        )

        logger.info(f"Student {student.pk} enrollment status: {current} -> {new_status}")
        return student

    @staticmethod
    @workflow_operation('update_academic_standing')
    def update_academic_standing(student_id, standing, actor, notes=None):
        if standing not in AcademicStanding.values:
            raise ValidationError(f"Unknown academic standing: {standing}")

        student = StudentService.get_student_or_raise(student_id, for_update=True)
        if not is_valid_academic_standing(student.cumulative_gpa, standing):
            raise BusinessRuleViolation(
                f"Academic standing {standing} is not consistent with GPA {student.cumulative_gpa}",
                details={'student_id': student.pk, 'gpa': str(student.cumulative_gpa), 'standing': standing},
            )

        previous_standing = student.academic_standing
        StudentService.update_enrollment_fields(student, academic_standing=standing)
        EnrollmentHistoryService.record_enrollment_event(
            student=student,
            event_type=EnrollmentEventType.STATUS_CHANGED,
            new_status=student.enrollment_status,
            previous_status=student.enrollment_status,
            reason=f"Academic standing changed to {student.get_academic_standing_display()}",
            notes=notes,
            processed_by=actor,
            metadata={'previous_standing': previous_standing, 'new_standing': standing},
        )
        return student

    # ============ MAINTENANCE ============

    @staticmethod
    @workflow_operation('expire_stale_applications')
    def expire_stale_applications(days=None, actor=SYSTEM_ACTOR):
        """Expire SUBMITTED / INCOMPLETE_DOCUMENTS applications older than ``days``."""
        days = days if days is not None else _setting('ADMISSIONS_EXPIRY_DAYS', 180)
        if days < 1:
            raise ValidationError("Expiry threshold must be at least one day")

        cutoff = timezone.now() - timedelta(days=days)
        stale = (
            EnrollmentApplication.objects
            .select_for_update()
            .filter(
                status__in=[ApplicationStatus.SUBMITTED, ApplicationStatus.INCOMPLETE_DOCUMENTS],
                application_date__lte=cutoff,
            )
            .order_by('application_date', 'id')
        )

        expired = []
        for application in stale:
            notes = f"Expired after {days} days without a decision"
            ApplicationService.update_application_status(application, ApplicationStatus.EXPIRED, notes)
            AdmissionWorkflowService._record_application_event(
                application, "Application expired", notes, actor,
            )
            expired.append(application.pk)

        logger.info(f"Expired {len(expired)} stale applications older than {days} days")
        return expired

    # ============ REPORTING ============

    @staticmethod
    def get_applications_requiring_attention(
        days_overdue=None, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE
    ) -> Tuple[List[EnrollmentApplication], int]:
        """
        Applications stuck in the pipeline.

        SUBMITTED older than N days, UNDER_REVIEW older than N+3, ON_HOLD older
        than N+14 and every INCOMPLETE_DOCUMENTS application. Incomplete ones
        come first, then oldest first.
        """
        days_overdue = days_overdue if days_overdue is not None else _setting('ADMISSIONS_ATTENTION_DAYS', 7)
        logger.debug(f"Getting applications requiring attention with {days_overdue} days overdue threshold")

        overdue = timezone.now() - timedelta(days=days_overdue)
        queryset = (
            EnrollmentApplication.objects
            .select_related('applicant')
            .filter(
                Q(status=ApplicationStatus.SUBMITTED, application_date__lte=overdue)
                | Q(status=ApplicationStatus.UNDER_REVIEW, application_date__lte=overdue - timedelta(days=3))
                | Q(status=ApplicationStatus.INCOMPLETE_DOCUMENTS)
                | Q(status=ApplicationStatus.ON_HOLD, application_date__lte=overdue - timedelta(days=14))
            )
            .annotate(attention_rank=Case(
                When(status=ApplicationStatus.INCOMPLETE_DOCUMENTS, then=Value(1)),
                default=Value(2),
                output_field=IntegerField(),
            ))
            .order_by('attention_rank', 'application_date', 'id')
        )
        return paginate(queryset, page, page_size)

    @staticmethod
    def get_admission_stats(start_date, end_date, department_name=None) -> Dict[str, Any]:
        logger.debug(f"Getting admission statistics from {start_date} to {end_date}")

        queryset = EnrollmentApplication.objects.filter(
            application_date__gte=start_date,
            application_date__lte=end_date,
        )
        if department_name:
            queryset = queryset.filter(department_name=department_name)

        decision_counts = {
            row['decision']: row['total']
            for row in queryset.order_by().values('decision').annotate(total=Count('id'))
        }

        decided = queryset.filter(decision_date__isnull=False).values_list('application_date', 'decision_date')
        durations = [(decided_at - applied_at).total_seconds() / 86400 for applied_at, decided_at in decided]
        average_days = round(sum(durations) / len(durations), 1) if durations else None

        return {
            'total_applications': sum(decision_counts.values()),
            'admitted_count': decision_counts.get(AdmissionDecision.ADMITTED, 0),
            'conditionally_admitted_count': decision_counts.get(AdmissionDecision.CONDITIONALLY_ADMITTED, 0),
            'rejected_count': decision_counts.get(AdmissionDecision.REJECTED, 0),
            'waitlisted_count': decision_counts.get(AdmissionDecision.WAITLISTED, 0),
            'deferred_count': decision_counts.get(AdmissionDecision.DEFERRED, 0),
            'pending_count': decision_counts.get(None, 0),
            'average_processing_days': average_days,
            'department_name': department_name,
            'start_date': start_date,
            'end_date': end_date,
        }

    @staticmethod
    def get_application_timeline(application_id) -> List[ApplicationEvent]:
        """Submission, every history row for the application, then the decision; oldest first."""
        application = ApplicationService.get_application_by_id(application_id)
        if application is None:
            return []

        events = [ApplicationEvent(
            event_date=application.application_date,
            event_type=EnrollmentEventType.APPLICATION_SUBMITTED.label,
            description=f"Application submitted for {application.program} program",
            status=ApplicationStatus.SUBMITTED,
        )]

        # Submission and the current decision come from the application itself;
        # replaced waitlist or deferral decisions stay in the timeline
        def from_application(row):
            if row.event_type == EnrollmentEventType.APPLICATION_SUBMITTED:
                return True
            return (
                row.event_type == EnrollmentEventType.ADMISSION_DECISION
                and bool(application.decision_date)
                and (row.metadata or {}).get('decision') == application.decision
            )

        history = EnrollmentHistoryService.get_application_history(application.pk)
        for row in sorted(history, key=lambda h: (h.event_date, h.pk)):
            if from_application(row):
                continue
            events.append(ApplicationEvent(
                event_date=row.event_date,
                event_type=row.get_event_type_display(),
                description=row.reason or "Status change",
                processed_by=row.processed_by,
            ))

        if application.decision and application.decision_date:
            events.append(ApplicationEvent(
                event_date=application.decision_date,
                event_type="Admission Decision",
                description=(
                    f"Decision: {application.get_decision_display()} - "
                    f"{application.decision_reason or 'No reason provided'}"
                ),
                processed_by=application.decision_made_by,
                decision=application.decision,
            ))

        return sorted(events, key=lambda e: e.event_date)

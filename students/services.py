# students/services.py
"""
STUDENT SERVICES - enrollment record accessor and enrollment history recorder.

The accessor only persists fields; the transition rules it exposes as pure
helpers are enforced by admissions.services.AdmissionWorkflowService.
"""
import logging
from decimal import Decimal
from typing import Optional, Tuple, List, Dict, Any

from django.db.models import Count
from django.utils import timezone

# SHARED IMPORTS
from shared.constants import (
    EnrollmentStatus,
    AcademicStanding,
    SYSTEM_ACTOR,
)
from shared.utils import paginate, DEFAULT_PAGE_SIZE

# LOCAL IMPORTS
from core.exceptions import NotFoundError
from .models import Student, EnrollmentHistory

logger = logging.getLogger(__name__)


# ============ TRANSITION RULES ============

VALID_ENROLLMENT_TRANSITIONS = {
    EnrollmentStatus.PENDING: frozenset(),
    EnrollmentStatus.APPLIED: frozenset({EnrollmentStatus.ADMITTED, EnrollmentStatus.DISMISSED}),
    EnrollmentStatus.ADMITTED: frozenset({EnrollmentStatus.ENROLLED, EnrollmentStatus.DISMISSED}),
    EnrollmentStatus.ENROLLED: frozenset({
        EnrollmentStatus.SUSPENDED,
        EnrollmentStatus.WITHDRAWN,
        EnrollmentStatus.GRADUATED,
        EnrollmentStatus.LEAVE_OF_ABSENCE,
        EnrollmentStatus.DISMISSED,
    }),
    EnrollmentStatus.SUSPENDED: frozenset({EnrollmentStatus.ENROLLED, EnrollmentStatus.DISMISSED}),
    EnrollmentStatus.LEAVE_OF_ABSENCE: frozenset({EnrollmentStatus.ENROLLED, EnrollmentStatus.WITHDRAWN}),
    EnrollmentStatus.WITHDRAWN: frozenset(),
    EnrollmentStatus.GRADUATED: frozenset(),
    EnrollmentStatus.DISMISSED: frozenset(),
}


def is_valid_enrollment_status_transition(current_status, new_status) -> bool:
    """Unknown current statuses have no outgoing transitions."""
    return new_status in VALID_ENROLLMENT_TRANSITIONS.get(current_status, frozenset())


def is_valid_academic_standing(gpa, standing) -> bool:
    """
    Check a standing against the cumulative GPA.

    A student without a GPA can only be NEW_STUDENT; any standing not listed
    below is refused.
    """
    if gpa is None:
        return standing == AcademicStanding.NEW_STUDENT

    gpa = Decimal(str(gpa))
    rules = {
        AcademicStanding.PRESIDENTS_LIST: lambda g: g >= Decimal('3.9'),
        AcademicStanding.DEANS_LIST: lambda g: g >= Decimal('3.5'),
        AcademicStanding.GOOD: lambda g: g >= Decimal('2.0'),
        AcademicStanding.WARNING: lambda g: Decimal('1.5') <= g < Decimal('2.0'),
        AcademicStanding.PROBATION: lambda g: Decimal('1.0') <= g < Decimal('2.0'),
        AcademicStanding.ACADEMIC_SUSPENSION: lambda g: g < Decimal('1.0'),
        AcademicStanding.ACADEMIC_DISMISSAL: lambda g: g < Decimal('1.0'),
    }
    rule = rules.get(standing)
    return bool(rule and rule(gpa))


# ============ STUDENT RECORD ACCESSOR ============

class StudentService:
    """Lookup and persistence for the enrollment fields of a student."""

    @staticmethod
    def get_student_by_id(student_id) -> Optional[Student]:
        return Student.objects.filter(pk=student_id).first()

    @staticmethod
    def get_student_or_raise(student_id, for_update=False) -> Student:
        queryset = Student.objects.select_for_update() if for_update else Student.objects.all()
        try:
            return queryset.get(pk=student_id)
        except (Student.DoesNotExist, ValueError, TypeError):
            raise NotFoundError(f"Student with ID {student_id} not found")

    @staticmethod
    def belongs_to_user(student_id, user) -> bool:
        """True when the student record is linked to this login."""
        if user is None or user.pk is None:
            return False
        return Student.objects.filter(pk=student_id, user_id=user.pk).exists()

    @staticmethod
    def update_enrollment_fields(
        student: Student,
        enrollment_status: Optional[str] = None,
        academic_standing: Optional[str] = None,
        program: Optional[str] = None,
        enrollment_date=None,
        actual_graduation_date=None,
    ) -> Student:
        """
        Persist the given enrollment fields and nothing else.

        No rule is checked here; callers validate before writing.
        """
        changes = {
            'enrollment_status': enrollment_status,
            'academic_standing': academic_standing,
            'program': program,
            'enrollment_date': enrollment_date,
            'actual_graduation_date': actual_graduation_date,
        }
        update_fields = []
        for field_name, value in changes.items():
            if value is not None:
                setattr(student, field_name, value)
                update_fields.append(field_name)

        if academic_standing is not None:
            student.last_academic_review_date = timezone.now()
            update_fields.append('last_academic_review_date')

        if not update_fields:
            return student

        if enrollment_status is not None:
            # stamped by the pre_save signal
            update_fields.append('enrollment_status_date')
        update_fields.append('updated_at')
        student.save(update_fields=update_fields)

        logger.debug(f"Student {student.pk} updated: {', '.join(update_fields)}")
        return student

    @staticmethod
    def get_students_by_enrollment_status(
        enrollment_status, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE
    ) -> Tuple[List[Student], int]:
        queryset = Student.objects.filter(enrollment_status=enrollment_status).order_by('last_name', 'first_name', 'id')
        return paginate(queryset, page, page_size)


# ============ ENROLLMENT HISTORY RECORDER ============

class EnrollmentHistoryService:
    """Append-only recorder of enrollment events. There is no update or delete."""

    @staticmethod
    def record_enrollment_event(
        student: Student,
        event_type: str,
        new_status: str,
        previous_status: Optional[str] = None,
        reason: Optional[str] = None,
        notes: Optional[str] = None,
        processed_by: Optional[str] = None,
        application=None,
        department_name: Optional[str] = None,
        program: Optional[str] = None,
        academic_term: Optional[str] = None,
        academic_year: Optional[int] = None,
        effective_date=None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> EnrollmentHistory:
        """
        Append one history row describing a status change.

        Args:
            student: Student the event belongs to
            event_type: EnrollmentEventType value
            new_status / previous_status: EnrollmentStatus values
            processed_by: Actor; blank or "System" marks the row system generated
            application: Related EnrollmentApplication, if any

        Returns:
            EnrollmentHistory: the created row
        """
        logger.info(f"Recording enrollment event for student {student.pk}: {event_type}")

        actor = (processed_by or '').strip()
        history = EnrollmentHistory.objects.create(
            student=student,
            application=application,
            event_type=event_type,
            previous_status=previous_status,
            new_status=new_status,
            event_date=timezone.now(),
            effective_date=effective_date,
            academic_term=academic_term or '',
            academic_year=academic_year,
            reason=reason or '',
            notes=notes or '',
            processed_by=actor or SYSTEM_ACTOR,
            is_system_generated=actor in ('', SYSTEM_ACTOR),
            department_name=department_name if department_name is not None else student.department_name,
            program=program if program is not None else student.program,
            metadata=metadata or {},
        )

        logger.info(f"Recorded enrollment event with ID: {history.pk}")
        return history

    @staticmethod
    def _base_queryset():
        return EnrollmentHistory.objects.select_related('student', 'application').order_by('-event_date', '-id')

    @staticmethod
    def get_student_enrollment_history(
        student_id, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE
    ) -> Tuple[List[EnrollmentHistory], int]:
        """Newest first; ties on event_date fall back to insertion order."""
        logger.debug(f"Getting enrollment history for student {student_id}")
        queryset = EnrollmentHistoryService._base_queryset().filter(student_id=student_id)
        return paginate(queryset, page, page_size)

    @staticmethod
    def get_application_history(application_id) -> List[EnrollmentHistory]:
        return list(EnrollmentHistoryService._base_queryset().filter(application_id=application_id))

    @staticmethod
    def get_latest_enrollment_event(student_id) -> Optional[EnrollmentHistory]:
        return EnrollmentHistoryService._base_queryset().filter(student_id=student_id).first()

    @staticmethod
    def get_history_by_event_type(
        event_type, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE
    ) -> Tuple[List[EnrollmentHistory], int]:
        queryset = EnrollmentHistoryService._base_queryset().filter(event_type=event_type)
        return paginate(queryset, page, page_size)

    @staticmethod
    def search_history(
        student_id=None,
        event_type=None,
        status=None,
        department_name=None,
        program=None,
        academic_term=None,
        academic_year=None,
        start_date=None,
        end_date=None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> Tuple[List[EnrollmentHistory], int]:
        logger.debug("Searching enrollment history with criteria")

        queryset = EnrollmentHistoryService._base_queryset()
        if student_id is not None:
            queryset = queryset.filter(student_id=student_id)
        if event_type:
            queryset = queryset.filter(event_type=event_type)
        if status:
            queryset = queryset.filter(new_status=status)
        if department_name:
            queryset = queryset.filter(department_name=department_name)
        if program:
            queryset = queryset.filter(program=program)
        if academic_term:
            queryset = queryset.filter(academic_term=academic_term)
        if academic_year is not None:
            queryset = queryset.filter(academic_year=academic_year)
        if start_date:
            queryset = queryset.filter(event_date__gte=start_date)
        if end_date:
            queryset = queryset.filter(event_date__lte=end_date)

        return paginate(queryset, page, page_size)

    @staticmethod
    def get_enrollment_statistics(start_date, end_date) -> Dict[str, int]:
        """Count of events per event type inside the date range."""
        rows = (
            EnrollmentHistory.objects
            .filter(event_date__gte=start_date, event_date__lte=end_date)
            .order_by()
            .values('event_type')
            .annotate(total=Count('id'))
        )
        return {row['event_type']: row['total'] for row in rows}

# students/tests/test_services.py
from datetime import timedelta
from decimal import Decimal

from django.test import TestCase, override_settings
from django.utils import timezone

from core.exceptions import NotFoundError
from shared.constants import EnrollmentStatus, AcademicStanding, EnrollmentEventType
from shared.utils import clamp_page
from students.models import EnrollmentHistory
from students.services import (
    StudentService,
    EnrollmentHistoryService,
    is_valid_enrollment_status_transition,
    is_valid_academic_standing,
)
from students.tests.factories import StudentFactory


class EnrollmentTransitionRulesTest(TestCase):
    def test_allowed_transitions(self):
        allowed = [
            (EnrollmentStatus.APPLIED, EnrollmentStatus.ADMITTED),
            (EnrollmentStatus.APPLIED, EnrollmentStatus.DISMISSED),
            (EnrollmentStatus.ADMITTED, EnrollmentStatus.ENROLLED),
            (EnrollmentStatus.ENROLLED, EnrollmentStatus.SUSPENDED),
            (EnrollmentStatus.ENROLLED, EnrollmentStatus.GRADUATED),
            (EnrollmentStatus.ENROLLED, EnrollmentStatus.LEAVE_OF_ABSENCE),
            (EnrollmentStatus.SUSPENDED, EnrollmentStatus.ENROLLED),
            (EnrollmentStatus.LEAVE_OF_ABSENCE, EnrollmentStatus.WITHDRAWN),
        ]
        for current, new in allowed:
            with self.subTest(current=current, new=new):
                self.assertTrue(is_valid_enrollment_status_transition(current, new))

    def test_refused_transitions(self):
        refused = [
            (EnrollmentStatus.APPLIED, EnrollmentStatus.ENROLLED),
            (EnrollmentStatus.ENROLLED, EnrollmentStatus.ADMITTED),
            (EnrollmentStatus.SUSPENDED, EnrollmentStatus.GRADUATED),
            (EnrollmentStatus.GRADUATED, EnrollmentStatus.ENROLLED),
            (EnrollmentStatus.WITHDRAWN, EnrollmentStatus.ENROLLED),
            (EnrollmentStatus.DISMISSED, EnrollmentStatus.APPLIED),
            (EnrollmentStatus.PENDING, EnrollmentStatus.APPLIED),
            ('unknown', EnrollmentStatus.ENROLLED),
        ]
        for current, new in refused:
            with self.subTest(current=current, new=new):
                self.assertFalse(is_valid_enrollment_status_transition(current, new))


class AcademicStandingRulesTest(TestCase):
    def test_without_gpa_only_new_student(self):
        self.assertTrue(is_valid_academic_standing(None, AcademicStanding.NEW_STUDENT))
        self.assertFalse(is_valid_academic_standing(None, AcademicStanding.GOOD))

    def test_gpa_thresholds(self):
        cases = [
            ('3.95', AcademicStanding.PRESIDENTS_LIST, True),
            ('3.85', AcademicStanding.PRESIDENTS_LIST, False),
            ('3.5', AcademicStanding.DEANS_LIST, True),
            ('2.0', AcademicStanding.GOOD, True),
            ('1.99', AcademicStanding.GOOD, False),
            ('1.7', AcademicStanding.WARNING, True),
            ('1.2', AcademicStanding.PROBATION, True),
            ('2.5', AcademicStanding.PROBATION, False),
            ('0.8', AcademicStanding.ACADEMIC_SUSPENSION, True),
            ('0.8', AcademicStanding.ACADEMIC_DISMISSAL, True),
            ('3.0', AcademicStanding.NEW_STUDENT, False),
        ]
        for gpa, standing, expected in cases:
            with self.subTest(gpa=gpa, standing=standing):
                self.assertEqual(is_valid_academic_standing(Decimal(gpa), standing), expected)


class StudentServiceTest(TestCase):
    def test_lookup(self):
        student = StudentFactory()
        self.assertEqual(StudentService.get_student_by_id(student.pk), student)
        self.assertIsNone(StudentService.get_student_by_id(999999))

    def test_get_or_raise_missing(self):
        with self.assertRaises(NotFoundError):
            StudentService.get_student_or_raise(999999)

    def test_update_does_not_enforce_rules(self):
        student = StudentFactory(enrollment_status=EnrollmentStatus.GRADUATED)
        StudentService.update_enrollment_fields(student, enrollment_status=EnrollmentStatus.APPLIED)
        student.refresh_from_db()
        self.assertEqual(student.enrollment_status, EnrollmentStatus.APPLIED)

    def test_update_stamps_review_date_for_standing(self):
        student = StudentFactory(cumulative_gpa=Decimal('3.2'))
        self.assertIsNone(student.last_academic_review_date)
        StudentService.update_enrollment_fields(student, academic_standing=AcademicStanding.GOOD)
        student.refresh_from_db()
        self.assertEqual(student.academic_standing, AcademicStanding.GOOD)
        self.assertIsNotNone(student.last_academic_review_date)

    def test_update_with_nothing_is_noop(self):
        student = StudentFactory()
        before = student.updated_at
        StudentService.update_enrollment_fields(student)
        student.refresh_from_db()
        self.assertEqual(student.updated_at, before)

    def test_students_by_status(self):
        StudentFactory.create_batch(3, enrollment_status=EnrollmentStatus.ENROLLED)
        StudentFactory(enrollment_status=EnrollmentStatus.APPLIED)
        rows, total = StudentService.get_students_by_enrollment_status(EnrollmentStatus.ENROLLED, page_size=2)
        self.assertEqual(total, 3)
        self.assertEqual(len(rows), 2)


class RecordEnrollmentEventTest(TestCase):
    def setUp(self):
        self.student = StudentFactory(department_name="Mathematics", program="MATH-BS")

    def test_defaults_from_student(self):
        entry = EnrollmentHistoryService.record_enrollment_event(
            self.student,
            EnrollmentEventType.STATUS_CHANGED,
            EnrollmentStatus.ADMITTED,
            previous_status=EnrollmentStatus.APPLIED,
            processed_by="Grace Hopper",
        )
        self.assertEqual(entry.department_name, "Mathematics")
        self.assertEqual(entry.program, "MATH-BS")
        self.assertEqual(entry.processed_by, "Grace Hopper")
        self.assertFalse(entry.is_system_generated)
        self.assertEqual(entry.metadata, {})

    def test_blank_or_system_actor_is_system_generated(self):
        for actor in (None, "", "System"):
            with self.subTest(actor=actor):
                entry = EnrollmentHistoryService.record_enrollment_event(
                    self.student,
                    EnrollmentEventType.STATUS_CHANGED,
                    EnrollmentStatus.APPLIED,
                    processed_by=actor,
                )
                self.assertTrue(entry.is_system_generated)
                self.assertEqual(entry.processed_by, "System")

    def test_explicit_department_wins(self):
        entry = EnrollmentHistoryService.record_enrollment_event(
            self.student,
            EnrollmentEventType.APPLICATION_SUBMITTED,
            EnrollmentStatus.APPLIED,
            department_name="Physics",
            program="PHYS-BS",
        )
        self.assertEqual(entry.department_name, "Physics")
        self.assertEqual(entry.program, "PHYS-BS")


class EnrollmentHistoryQueryTest(TestCase):
    def setUp(self):
        self.student = StudentFactory()
        self.other = StudentFactory(department_name="History")
        for new_status in (EnrollmentStatus.APPLIED, EnrollmentStatus.ADMITTED, EnrollmentStatus.ENROLLED):
            EnrollmentHistoryService.record_enrollment_event(
                self.student, EnrollmentEventType.STATUS_CHANGED, new_status, processed_by="Registrar"
            )
        EnrollmentHistoryService.record_enrollment_event(
            self.other, EnrollmentEventType.APPLICATION_SUBMITTED, EnrollmentStatus.APPLIED
        )

    def test_student_history_newest_first(self):
        rows, total = EnrollmentHistoryService.get_student_enrollment_history(self.student.pk)
        self.assertEqual(total, 3)
        self.assertEqual(
            [row.new_status for row in rows],
            [EnrollmentStatus.ENROLLED, EnrollmentStatus.ADMITTED, EnrollmentStatus.APPLIED],
        )

    def test_latest_event(self):
        latest = EnrollmentHistoryService.get_latest_enrollment_event(self.student.pk)
        self.assertEqual(latest.new_status, EnrollmentStatus.ENROLLED)
        self.assertIsNone(EnrollmentHistoryService.get_latest_enrollment_event(999999))

    def test_history_pagination_is_clamped(self):
        rows, total = EnrollmentHistoryService.get_student_enrollment_history(self.student.pk, page=0, page_size=0)
        self.assertEqual(total, 3)
        self.assertEqual(len(rows), 3)

        rows, total = EnrollmentHistoryService.get_student_enrollment_history(self.student.pk, page=2, page_size=2)
        self.assertEqual(len(rows), 1)

    def test_by_event_type(self):
        rows, total = EnrollmentHistoryService.get_history_by_event_type(EnrollmentEventType.APPLICATION_SUBMITTED)
        self.assertEqual(total, 1)
        self.assertEqual(rows[0].student, self.other)

    def test_search(self):
        rows, total = EnrollmentHistoryService.search_history(status=EnrollmentStatus.APPLIED)
        self.assertEqual(total, 2)

        rows, total = EnrollmentHistoryService.search_history(department_name="History")
        self.assertEqual(total, 1)

        rows, total = EnrollmentHistoryService.search_history(
            student_id=self.student.pk, event_type=EnrollmentEventType.STATUS_CHANGED
        )
        self.assertEqual(total, 3)

        rows, total = EnrollmentHistoryService.search_history(start_date=timezone.now() + timedelta(days=1))
        self.assertEqual(total, 0)

    def test_statistics_by_event_type(self):
        stats = EnrollmentHistoryService.get_enrollment_statistics(
            timezone.now() - timedelta(days=1), timezone.now() + timedelta(days=1)
        )
        self.assertEqual(stats[EnrollmentEventType.STATUS_CHANGED], 3)
        self.assertEqual(stats[EnrollmentEventType.APPLICATION_SUBMITTED], 1)
        self.assertEqual(EnrollmentHistory.objects.count(), 4)


class ClampPageTest(TestCase):
    def test_out_of_range_values(self):
        self.assertEqual(clamp_page(0, 0), (1, 10))
        self.assertEqual(clamp_page(-3, 25), (1, 25))
        self.assertEqual(clamp_page('x', None), (1, 10))

    @override_settings(ADMISSIONS_MAX_PAGE_SIZE=50)
    def test_page_size_capped(self):
        self.assertEqual(clamp_page(2, 500), (2, 50))

# students/tests/test_models.py
from datetime import timedelta

from django.test import TestCase
from django.utils import timezone

from core.exceptions import InvalidStateError
from shared.constants import EnrollmentStatus, EnrollmentEventType
from students.models import Student, EnrollmentHistory
from students.tests.factories import StudentFactory


class StudentModelTest(TestCase):
    def test_full_name(self):
        student = StudentFactory(first_name="Ada", last_name="Lovelace")
        self.assertEqual(student.full_name, "Ada Lovelace")
        self.assertIn("Ada Lovelace", str(student))

    def test_status_date_stamped_on_create(self):
        student = StudentFactory()
        self.assertIsNotNone(student.enrollment_status_date)

    def test_status_date_moves_only_when_status_changes(self):
        student = StudentFactory()
        stamped = timezone.now() - timedelta(days=10)
        Student.objects.filter(pk=student.pk).update(enrollment_status_date=stamped)
        student.refresh_from_db()

        student.phone_number = "555-000-0000"
        student.save()
        student.refresh_from_db()
        self.assertEqual(student.enrollment_status_date, stamped)

        student.enrollment_status = EnrollmentStatus.ADMITTED
        student.save()
        student.refresh_from_db()
        self.assertGreater(student.enrollment_status_date, stamped)


class EnrollmentHistoryModelTest(TestCase):
    def setUp(self):
        self.student = StudentFactory()
        self.entry = EnrollmentHistory.objects.create(
            student=self.student,
            event_type=EnrollmentEventType.APPLICATION_SUBMITTED,
            new_status=EnrollmentStatus.APPLIED,
        )

    def test_row_cannot_be_saved_twice(self):
        self.entry.reason = "rewritten"
        with self.assertRaises(InvalidStateError):
            self.entry.save()

    def test_row_cannot_be_deleted(self):
        with self.assertRaises(InvalidStateError):
            self.entry.delete()
        self.assertTrue(EnrollmentHistory.objects.filter(pk=self.entry.pk).exists())

    def test_bulk_update_and_delete_refused(self):
        with self.assertRaises(InvalidStateError):
            EnrollmentHistory.objects.filter(student=self.student).update(reason="x")
        with self.assertRaises(InvalidStateError):
            EnrollmentHistory.objects.filter(student=self.student).delete()

    def test_ties_on_event_date_newest_insert_first(self):
        moment = timezone.now()
        first = EnrollmentHistory.objects.create(
            student=self.student,
            event_type=EnrollmentEventType.ADMISSION_DECISION,
            previous_status=EnrollmentStatus.APPLIED,
            new_status=EnrollmentStatus.APPLIED,
            event_date=moment,
        )
        second = EnrollmentHistory.objects.create(
            student=self.student,
            event_type=EnrollmentEventType.STATUS_CHANGED,
            previous_status=EnrollmentStatus.APPLIED,
            new_status=EnrollmentStatus.ADMITTED,
            event_date=moment,
        )
        rows = list(EnrollmentHistory.objects.filter(event_date=moment))
        self.assertEqual(rows, [second, first])

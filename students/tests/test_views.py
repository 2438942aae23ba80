# students/tests/test_views.py
from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from core.permissions import StaffRole
from core.tests.factories import UserFactory
from shared.constants import EnrollmentStatus, AcademicStanding
from students.models import EnrollmentHistory
from students.tests.factories import StudentFactory


class StudentEndpointTest(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(user=UserFactory(roles=[StaffRole.REGISTRAR]))
        self.student = StudentFactory(enrollment_status=EnrollmentStatus.ENROLLED, cumulative_gpa=Decimal('2.40'))

    def test_detail(self):
        response = self.client.get(reverse('students:student_detail', args=[self.student.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['data']['student_number'], self.student.student_number)

    def test_detail_missing(self):
        response = self.client.get(reverse('students:student_detail', args=[999999]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.json()['error']['code'], 'NOT_FOUND')

    def test_status_change_and_history(self):
        response = self.client.post(
            reverse('students:student_status', args=[self.student.pk]),
            {'new_status': EnrollmentStatus.SUSPENDED, 'reason': 'Conduct review'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.content)
        self.assertEqual(response.json()['data']['enrollment_status'], EnrollmentStatus.SUSPENDED)

        response = self.client.get(reverse('students:student_history', args=[self.student.pk]))
        data = response.json()['data']
        self.assertEqual(data['total_count'], 1)
        self.assertEqual(data['results'][0]['new_status'], EnrollmentStatus.SUSPENDED)

    def test_invalid_transition_conflicts(self):
        response = self.client.post(
            reverse('students:student_status', args=[self.student.pk]),
            {'new_status': EnrollmentStatus.APPLIED, 'reason': 'Reset'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertFalse(EnrollmentHistory.objects.filter(student=self.student).exists())

    def test_standing(self):
        response = self.client.post(
            reverse('students:student_standing', args=[self.student.pk]),
            {'standing': AcademicStanding.GOOD},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.content)

        response = self.client.post(
            reverse('students:student_standing', args=[self.student.pk]),
            {'standing': AcademicStanding.DEANS_LIST},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)

    def test_reviewer_cannot_change_status(self):
        self.client.force_authenticate(user=UserFactory(roles=[StaffRole.REVIEWER]))
        response = self.client.post(
            reverse('students:student_status', args=[self.student.pk]),
            {'new_status': EnrollmentStatus.SUSPENDED, 'reason': 'Conduct review'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

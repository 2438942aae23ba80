# students/models.py
"""
Student enrollment record and its append-only enrollment history.
"""
import logging

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.core.validators import MinValueValidator, MaxValueValidator

# LOCAL IMPORTS
from core.exceptions import InvalidStateError

# SHARED IMPORTS
from shared.constants import (
    EnrollmentStatus,
    AcademicStanding,
    EnrollmentEventType,
    SYSTEM_ACTOR,
)

logger = logging.getLogger(__name__)


class Student(models.Model):
    """
    A student's identity plus the enrollment-relevant subset of their record.
    Status fields are mutated only through the admissions workflow.
    """
    student_number = models.CharField(max_length=20, unique=True, db_index=True)
    first_name = models.CharField(max_length=150)
    last_name = models.CharField(max_length=150)
    email = models.EmailField()
    phone_number = models.CharField(max_length=20, blank=True)

    # Academic placement
    program = models.CharField(max_length=100, blank=True)
    department_name = models.CharField(max_length=100, blank=True)

    # Login that owns this record, when the student has one
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='student_record',
    )

    enrollment_status = models.CharField(
        max_length=20,
        choices=EnrollmentStatus.choices,
        default=EnrollmentStatus.APPLIED,
    )
    academic_standing = models.CharField(
        max_length=30,
        choices=AcademicStanding.choices,
        default=AcademicStanding.NEW_STUDENT,
    )
    cumulative_gpa = models.DecimalField(
        max_digits=3,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0), MaxValueValidator(4)],
    )

    # Dates
    enrollment_status_date = models.DateTimeField(null=True, blank=True)
    enrollment_date = models.DateField(null=True, blank=True)
    actual_graduation_date = models.DateField(null=True, blank=True)
    last_academic_review_date = models.DateTimeField(null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'students_student'
        verbose_name = 'Student'
        verbose_name_plural = 'Students'
        indexes = [
            models.Index(fields=['enrollment_status']),
            models.Index(fields=['academic_standing']),
            models.Index(fields=['department_name']),
            models.Index(fields=['last_name', 'first_name']),
        ]
        ordering = ['last_name', 'first_name']

    def __str__(self):
        return f"{self.full_name} ({self.student_number})"

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_enrolled(self):
        return self.enrollment_status == EnrollmentStatus.ENROLLED


class EnrollmentHistoryQuerySet(models.QuerySet):
    """History rows can be read and created, never rewritten in bulk."""

    def update(self, **kwargs):
        raise InvalidStateError("Enrollment history is append-only and cannot be updated.")

    def delete(self):
        raise InvalidStateError("Enrollment history is append-only and cannot be deleted.")


class EnrollmentHistory(models.Model):
    """
    Immutable audit record of one enrollment or application status transition.
    """
    student = models.ForeignKey(Student, on_delete=models.PROTECT, related_name='enrollment_history')
    application = models.ForeignKey(
        'admissions.EnrollmentApplication',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='enrollment_history',
    )

    event_type = models.CharField(max_length=30, choices=EnrollmentEventType.choices)
    previous_status = models.CharField(max_length=20, choices=EnrollmentStatus.choices, null=True, blank=True)
    new_status = models.CharField(max_length=20, choices=EnrollmentStatus.choices)
    event_date = models.DateTimeField(default=timezone.now, db_index=True)
    effective_date = models.DateTimeField(null=True, blank=True)

    academic_term = models.CharField(max_length=20, blank=True)
    academic_year = models.PositiveIntegerField(null=True, blank=True)

    reason = models.CharField(max_length=1000, blank=True)
    notes = models.TextField(max_length=2000, blank=True)
    processed_by = models.CharField(max_length=100, default=SYSTEM_ACTOR)
    is_system_generated = models.BooleanField(default=False)

    department_name = models.CharField(max_length=100, blank=True)
    program = models.CharField(max_length=100, blank=True)
    metadata = models.JSONField(default=dict, blank=True)

    objects = EnrollmentHistoryQuerySet.as_manager()

    class Meta:
        db_table = 'students_enrollment_history'
        verbose_name = 'Enrollment History'
        verbose_name_plural = 'Enrollment History'
        indexes = [
            models.Index(fields=['student', 'event_date']),
            models.Index(fields=['event_type']),
            models.Index(fields=['application']),
            models.Index(fields=['department_name']),
            models.Index(fields=['academic_term', 'academic_year']),
        ]
        ordering = ['-event_date', '-id']

    def __str__(self):
        return f"{self.student_id}: {self.previous_status or '-'} -> {self.new_status} ({self.event_type})"

    def save(self, *args, **kwargs):
        if self.pk is not None and not self._state.adding:
            raise InvalidStateError("Enrollment history is append-only and cannot be updated.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise InvalidStateError("Enrollment history is append-only and cannot be deleted.")

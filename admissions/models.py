# admissions/models.py
from django.db import models
from django.utils import timezone
from django.core.exceptions import ValidationError
import logging

# SHARED IMPORTS
from shared.constants import (
    ApplicationStatus,
    AdmissionDecision,
    ApplicationPriority,
    ACTIVE_APPLICATION_STATUSES,
    TERMINAL_APPLICATION_STATUSES,
    ACCEPTED_DECISIONS,
    FINAL_DECISIONS,
    SYSTEM_ACTOR,
)

logger = logging.getLogger(__name__)


class EnrollmentApplication(models.Model):
    """
    A student's request for admission to a program.

    Tracked independently of the student's enrollment status; the workflow
    service moves it through review, decision and enrollment.
    """
    applicant = models.ForeignKey(
        'students.Student',
        on_delete=models.PROTECT,
        related_name='applications',
    )

    # Applicant details captured at submission time
    applicant_name = models.CharField(max_length=200)
    email = models.EmailField()
    phone_number = models.CharField(max_length=20, blank=True)

    # Target
    program = models.CharField(max_length=100)
    department_name = models.CharField(max_length=100)
    academic_term = models.CharField(max_length=20, blank=True)
    academic_year = models.PositiveIntegerField(null=True, blank=True)
    expected_enrollment_date = models.DateField(null=True, blank=True)

    # Status tracking
    application_date = models.DateTimeField(default=timezone.now, db_index=True)
    status = models.CharField(
        max_length=30,
        choices=ApplicationStatus.choices,
        default=ApplicationStatus.SUBMITTED,
    )
    priority = models.CharField(
        max_length=10,
        choices=ApplicationPriority.choices,
        default=ApplicationPriority.NORMAL,
    )

    # Decision
    decision = models.CharField(max_length=30, choices=AdmissionDecision.choices, null=True, blank=True)
    decision_date = models.DateTimeField(null=True, blank=True)
    decision_reason = models.CharField(max_length=1000, blank=True)
    decision_made_by = models.CharField(max_length=100, blank=True)

    # Newline separated review journal, only ever appended to
    notes = models.TextField(blank=True)

    # Background
    previous_gpa = models.DecimalField(max_digits=3, decimal_places=2, null=True, blank=True)
    previous_institution = models.CharField(max_length=200, blank=True)
    requires_financial_aid = models.BooleanField(default=False)
    is_international_student = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'admissions_enrollment_application'
        verbose_name = 'Enrollment Application'
        verbose_name_plural = 'Enrollment Applications'
        indexes = [
            models.Index(fields=['status']),
            models.Index(fields=['applicant', 'status']),
            models.Index(fields=['department_name', 'program']),
            models.Index(fields=['academic_term', 'academic_year']),
        ]
        ordering = ['-application_date', '-id']

    def __str__(self):
        return f"{self.applicant_name} - {self.program} ({self.get_status_display()})"

    def clean(self):
        """Validate application data."""
        errors = {}

        if not (self.applicant_name or '').strip():
            errors['applicant_name'] = 'Applicant name is required.'
        if not (self.program or '').strip():
            errors['program'] = 'Program is required.'
        if not (self.department_name or '').strip():
            errors['department_name'] = 'Department is required.'
        if not self.email or '@' not in self.email:
            errors['email'] = 'A valid email address is required.'
        if self.previous_gpa is not None and not (0 <= self.previous_gpa <= 4):
            errors['previous_gpa'] = 'GPA must be between 0.00 and 4.00.'

        if errors:
            raise ValidationError(errors)

    @property
    def is_active(self):
        return self.status in ACTIVE_APPLICATION_STATUSES

    @property
    def is_terminal(self):
        return self.status in TERMINAL_APPLICATION_STATUSES

    @property
    def has_accepted_decision(self):
        return self.decision in ACCEPTED_DECISIONS

    @property
    def has_final_decision(self):
        return self.decision in FINAL_DECISIONS

    @property
    def age(self):
        return timezone.now() - self.application_date

    def append_note(self, line):
        """Add a line to the review journal. Existing lines are never rewritten."""
        line = (line or '').strip()
        if not line:
            return
        self.notes = f"{self.notes}\n{line}" if self.notes else line


class ApplicationDocument(models.Model):
    """A document uploaded in support of an application."""
    application = models.ForeignKey(
        EnrollmentApplication,
        on_delete=models.CASCADE,
        related_name='documents',
    )
    document_type = models.CharField(max_length=50)
    file_name = models.CharField(max_length=255)
    file_path = models.CharField(max_length=500, blank=True)
    file_size = models.PositiveBigIntegerField(default=0)
    mime_type = models.CharField(max_length=100, blank=True)
    upload_date = models.DateTimeField(default=timezone.now)

    is_required = models.BooleanField(default=False)
    is_verified = models.BooleanField(default=False)
    verification_date = models.DateTimeField(null=True, blank=True)
    verified_by = models.CharField(max_length=100, blank=True)
    notes = models.CharField(max_length=500, blank=True)

    class Meta:
        db_table = 'admissions_application_document'
        verbose_name = 'Application Document'
        verbose_name_plural = 'Application Documents'
        ordering = ['upload_date', 'id']

    def __str__(self):
        state = 'verified' if self.is_verified else 'pending'
        return f"{self.document_type}: {self.file_name} ({state})"

    def mark_verified(self, verified_by=None, notes=None):
        self.is_verified = True
        self.verification_date = timezone.now()
        self.verified_by = verified_by or SYSTEM_ACTOR
        if notes:
            self.notes = notes

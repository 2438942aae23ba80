# shared/constants/choices.py
"""
Status vocabularies shared by the students and admissions apps.

Kept dependency-free (Django models only) so both apps can import them
without importing each other.
"""
from django.db import models


class ApplicationStatus(models.TextChoices):
    SUBMITTED = 'submitted', 'Submitted'
    UNDER_REVIEW = 'under_review', 'Under Review'
    INCOMPLETE_DOCUMENTS = 'incomplete_documents', 'Incomplete Documents'
    ON_HOLD = 'on_hold', 'On Hold'
    APPROVED = 'approved', 'Approved'
    REJECTED = 'rejected', 'Rejected'
    WITHDRAWN = 'withdrawn', 'Withdrawn'
    EXPIRED = 'expired', 'Expired'


# An applicant may hold at most one application in these states
ACTIVE_APPLICATION_STATUSES = frozenset({
    ApplicationStatus.SUBMITTED,
    ApplicationStatus.UNDER_REVIEW,
    ApplicationStatus.ON_HOLD,
    ApplicationStatus.INCOMPLETE_DOCUMENTS,
})

TERMINAL_APPLICATION_STATUSES = frozenset({
    ApplicationStatus.APPROVED,
    ApplicationStatus.REJECTED,
    ApplicationStatus.WITHDRAWN,
    ApplicationStatus.EXPIRED,
})


class AdmissionDecision(models.TextChoices):
    ADMITTED = 'admitted', 'Admitted'
    CONDITIONALLY_ADMITTED = 'conditionally_admitted', 'Conditionally Admitted'
    WAITLISTED = 'waitlisted', 'Waitlisted'
    REJECTED = 'rejected', 'Rejected'
    DEFERRED = 'deferred', 'Deferred'


ACCEPTED_DECISIONS = frozenset({
    AdmissionDecision.ADMITTED,
    AdmissionDecision.CONDITIONALLY_ADMITTED,
})

# Waitlisted and deferred applications can be decided again after review resumes
FINAL_DECISIONS = ACCEPTED_DECISIONS | {AdmissionDecision.REJECTED}


class ApplicationPriority(models.TextChoices):
    LOW = 'low', 'Low'
    NORMAL = 'normal', 'Normal'
    HIGH = 'high', 'High'
    URGENT = 'urgent', 'Urgent'


PRIORITY_RANK = {
    ApplicationPriority.LOW: 0,
    ApplicationPriority.NORMAL: 1,
    ApplicationPriority.HIGH: 2,
    ApplicationPriority.URGENT: 3,
}


class EnrollmentStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    APPLIED = 'applied', 'Applied'
    ADMITTED = 'admitted', 'Admitted'
    ENROLLED = 'enrolled', 'Enrolled'
    SUSPENDED = 'suspended', 'Suspended'
    WITHDRAWN = 'withdrawn', 'Withdrawn'
    GRADUATED = 'graduated', 'Graduated'
    DISMISSED = 'dismissed', 'Dismissed'
    LEAVE_OF_ABSENCE = 'leave_of_absence', 'Leave of Absence'


class AcademicStanding(models.TextChoices):
    GOOD = 'good', 'Good Standing'
    PROBATION = 'probation', 'Academic Probation'
    ACADEMIC_SUSPENSION = 'academic_suspension', 'Academic Suspension'
    WARNING = 'warning', 'Academic Warning'
    DEANS_LIST = 'deans_list', "Dean's List"
    PRESIDENTS_LIST = 'presidents_list', "President's List"
    ACADEMIC_DISMISSAL = 'academic_dismissal', 'Academic Dismissal'
    NEW_STUDENT = 'new_student', 'New Student'


class EnrollmentEventType(models.TextChoices):
    APPLICATION_SUBMITTED = 'application_submitted', 'Application Submitted'
    APPLICATION_REVIEWED = 'application_reviewed', 'Application Reviewed'
    ADMISSION_DECISION = 'admission_decision', 'Admission Decision'
    ENROLLED = 'enrolled', 'Enrolled'
    STATUS_CHANGED = 'status_changed', 'Status Changed'
    GRADUATED = 'graduated', 'Graduated'
    WITHDREW = 'withdrew', 'Withdrew'
    SUSPENDED = 'suspended', 'Suspended'
    DISMISSED = 'dismissed', 'Dismissed'
    LEAVE_OF_ABSENCE = 'leave_of_absence', 'Leave of Absence'
    RETURNED_FROM_LEAVE = 'returned_from_leave', 'Returned from Leave'


SYSTEM_ACTOR = 'System'

# shared/constants/__init__.py
from .choices import (
    ApplicationStatus,
    AdmissionDecision,
    ApplicationPriority,
    EnrollmentStatus,
    AcademicStanding,
    EnrollmentEventType,
    ACTIVE_APPLICATION_STATUSES,
    TERMINAL_APPLICATION_STATUSES,
    ACCEPTED_DECISIONS,
    FINAL_DECISIONS,
    PRIORITY_RANK,
    SYSTEM_ACTOR,
)

__all__ = [
    'ApplicationStatus',
    'AdmissionDecision',
    'ApplicationPriority',
    'EnrollmentStatus',
    'AcademicStanding',
    'EnrollmentEventType',
    'ACTIVE_APPLICATION_STATUSES',
    'TERMINAL_APPLICATION_STATUSES',
    'ACCEPTED_DECISIONS',
    'FINAL_DECISIONS',
    'PRIORITY_RANK',
    'SYSTEM_ACTOR',
]

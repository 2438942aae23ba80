# core/permissions.py
"""
ROLE PERMISSION SYSTEM
======================

Staff roles come from Django auth groups. Every workflow permission is
checked through PermissionChecker against a closed role table; anything not
listed is denied.
"""

import enum
import logging
from typing import Optional

from rest_framework.permissions import BasePermission

logger = logging.getLogger(__name__)


class StaffRole(str, enum.Enum):
    ADMIN = 'admin'
    REGISTRAR = 'registrar'
    ADMISSIONS_OFFICER = 'admissions_officer'
    REVIEWER = 'reviewer'
    STUDENT = 'student'


# Most privileged first; a user in several groups gets the first match
ROLE_PRECEDENCE = (
    StaffRole.ADMIN,
    StaffRole.REGISTRAR,
    StaffRole.ADMISSIONS_OFFICER,
    StaffRole.REVIEWER,
    StaffRole.STUDENT,
)

ROLE_PERMISSIONS = {
    StaffRole.ADMIN: frozenset({'*'}),
    StaffRole.REGISTRAR: frozenset({
        'view_applications',
        'submit_application',
        'view_students',
        'manage_enrollment',
        'manage_academic_standing',
        'view_reports',
    }),
    StaffRole.ADMISSIONS_OFFICER: frozenset({
        'view_applications',
        'submit_application',
        'review_applications',
        'decide_admissions',
        'view_students',
        'view_reports',
    }),
    StaffRole.REVIEWER: frozenset({
        'view_applications',
        'review_applications',
        'view_students',
    }),
    StaffRole.STUDENT: frozenset({
        'submit_application',
    }),
}


class PermissionChecker:
    """Single place where role permissions are decided."""

    @staticmethod
    def has_permission(role, permission: str) -> bool:
        if not role or not permission:
            return False
        try:
            role = StaffRole(role)
        except ValueError:
            logger.warning(f"Unknown role {role!r} denied {permission}")
            return False

        granted = ROLE_PERMISSIONS.get(role, frozenset())
        return '*' in granted or permission in granted

    @staticmethod
    def get_user_role(user) -> Optional[StaffRole]:
        """Resolve the most privileged role from the user's groups."""
        if not user or not user.is_authenticated:
            return None
        if user.is_superuser:
            return StaffRole.ADMIN

        group_names = set(user.groups.values_list('name', flat=True))
        for role in ROLE_PRECEDENCE:
            if role.value in group_names:
                return role
        return None


def actor_for(user) -> str:
    """Name recorded as the actor on enrollment history."""
    if not user or not user.is_authenticated:
        return 'System'
    return user.get_full_name().strip() or user.get_username()


class HasWorkflowPermission(BasePermission):
    """
    DRF permission reading ``required_permission`` from the view.

    The attribute may be a string, or a dict keyed by HTTP method. A view that
    names no permission for the method is denied.
    """
    message = "You don't have permission to perform this action."

    def has_permission(self, request, view):
        required = getattr(view, 'required_permission', None)
        if isinstance(required, dict):
            required = required.get(request.method)

        role = PermissionChecker.get_user_role(request.user)
        allowed = PermissionChecker.has_permission(role, required)
        if not allowed:
            logger.info(
                f"Permission denied - User: {getattr(request.user, 'pk', None)}, "
                f"Role: {role.value if role else None}, Permission: {required}"
            )
        return allowed

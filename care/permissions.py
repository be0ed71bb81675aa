"""
Custom permission classes for role based access control.

Every route is gated on exactly one role; the role comes from the
authenticated user (see ``care.authentication``).
"""
from rest_framework.permissions import BasePermission

from .models import User


class _RolePermission(BasePermission):
    role: str = ''
    message = 'User role is not authorized to access this route'

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and getattr(user, "role", None) == self.role)


class IsPatientRole(_RolePermission):
    """Allow access only to users with the patient role."""
    role = User.ROLE_PATIENT


class IsDoctorRole(_RolePermission):
    """Allow access only to doctors."""
    role = User.ROLE_DOCTOR


class IsTriageRole(_RolePermission):
    """Allow access only to triage staff."""
    role = User.ROLE_TRIAGE


class IsAdminRole(_RolePermission):
    """Allow access only to clinic administrators."""
    role = User.ROLE_ADMIN

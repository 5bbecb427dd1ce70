"""
Role based permission classes used by the route table.
"""
from rest_framework.permissions import BasePermission, SAFE_METHODS

from .models import Role


class RoleRequired(BasePermission):
    """Allow access only to authenticated users whose role is in ``roles``."""
    roles: frozenset[str] = frozenset()
    message = 'Your role is not allowed to perform this action'

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and getattr(user, "role", None) in self.roles)


class IsAdmin(RoleRequired):
    """Only administrators."""
    roles = frozenset({Role.ADMIN})


class IsDentist(RoleRequired):
    """Only dentists."""
    roles = frozenset({Role.DENTIST})


class IsFrontDesk(RoleRequired):
    """Administrators and secretaries (patient registration)."""
    roles = frozenset({Role.ADMIN, Role.SECRETARY})


class ReadOnly(BasePermission):
    """Allow read‑only access (GET, HEAD, OPTIONS)."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return request.method in SAFE_METHODS

"""Custom DRF permissions for the client portal."""
from rest_framework.permissions import SAFE_METHODS, BasePermission


class IsAdmin(BasePermission):
    """Allow access to agency administrators (role ADMIN)."""

    def has_permission(self, request, view):
        return request.user.is_authenticated and request.user.role == 'ADMIN'


class IsStaffMember(BasePermission):
    """Allow access to agency staff (ADMIN or MANAGER)."""

    def has_permission(self, request, view):
        return request.user.is_authenticated and request.user.role in ('ADMIN', 'MANAGER')


class IsPortalUser(BasePermission):
    """Any active authenticated user: agency staff or client."""

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_active)


class IsAdminOrReadOnly(BasePermission):
    """Portal users may read; only administrators may write."""

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return IsPortalUser().has_permission(request, view)
        return IsAdmin().has_permission(request, view)

"""
Permissions for the studio API
"""
from rest_framework import permissions


class IsStudioStaff(permissions.BasePermission):
    """
    Read access for any authenticated user; writes (registering, updating or
    deleting payments, enrolling, catalogue changes) require a staff user.
    """

    def has_permission(self, request, view):
        if not (request.user and request.user.is_authenticated):
            return False
        if request.method in permissions.SAFE_METHODS:
            return True
        return bool(request.user.is_staff)

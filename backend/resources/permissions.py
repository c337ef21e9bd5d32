from rest_framework.permissions import BasePermission

from accounts.models import UserRole


class IsStudent(BasePermission):
    message = 'Only students can upload resource photos.'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.role == UserRole.STUDENT)

"""
Role checks for the dashboard.

An *active editor* is an approved, non-banned editor, or any admin. Only
active editors write content; editors may only modify what they authored.
"""
from rest_framework.permissions import BasePermission, SAFE_METHODS


def is_admin(user):
    if not user or not user.is_authenticated or not user.is_active:
        return False
    return user.is_superuser or getattr(user, 'role', None) == 'admin'


def is_active_editor(user):
    if not user or not user.is_authenticated or not user.is_active:
        return False
    if getattr(user, 'banned_at', None) is not None:
        return False
    return is_admin(user) or (user.role == 'editor' and user.is_approved)


def can_modify(user, obj):
    """Admins modify anything, active editors only rows they authored"""
    if is_admin(user):
        return True
    return is_active_editor(user) and getattr(obj, 'author_id', None) == user.pk


class IsAdminRole(BasePermission):
    message = 'Administrator access required.'

    def has_permission(self, request, view):
        return is_admin(request.user)


class IsActiveEditor(BasePermission):
    message = 'Your account must be approved by an administrator before you can do this.'

    def has_permission(self, request, view):
        return is_active_editor(request.user)


class IsActiveEditorOrReadOnly(BasePermission):
    message = 'Your account must be approved by an administrator before you can do this.'

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        return is_active_editor(request.user)

# emr_core/common/permissions.py

from __future__ import annotations

from django.core.exceptions import ObjectDoesNotExist
from rest_framework.permissions import BasePermission

ROLE_ADMIN = "ADMIN"
ROLE_USER = "USER"

ROLES = (ROLE_USER, ROLE_ADMIN)

# Dashboard panels a non-admin user can be granted individually
DASHBOARD_PERMISSIONS = (
    "VIEW_DEMOGRAPHICS",
    "VIEW_CONTACT",
    "VIEW_INSURANCE",
    "VIEW_EMERGENCY_CONTACTS",
    "VIEW_IMMUNIZATIONS",
    "VIEW_ALLERGIES",
    "VIEW_MEDICATIONS",
    "VIEW_SOCIAL_HISTORY",
    "VIEW_PAST_CONDITIONS",
    "VIEW_VITALS",
    "VIEW_ASSESSMENT",
    "VIEW_RECORDS",
    "VIEW_NOTES",
    "VIEW_FAMILY_HISTORY",
    "VIEW_CARE_PLANS",
)


def _profile(user):
    try:
        return user.emr_profile
    except (AttributeError, ObjectDoesNotExist):
        return None


def user_role(user) -> str | None:
    """
    Superuser is treated as admin.
    Everyone else reads their role off UserProfile (USER when missing).
    """
    if not user or not getattr(user, "is_authenticated", False):
        return None
    if getattr(user, "is_superuser", False):
        return ROLE_ADMIN

    profile = _profile(user)
    if profile is None:
        return ROLE_USER
    return profile.role or ROLE_USER


def is_emr_admin(user) -> bool:
    return user_role(user) == ROLE_ADMIN


def user_permissions(user) -> list[str]:
    """
    Effective dashboard permissions. Admins implicitly hold all of them.
    Unknown stored values are ignored.
    """
    if is_emr_admin(user):
        return list(DASHBOARD_PERMISSIONS)

    profile = _profile(user)
    stored = (profile.permissions if profile else None) or []
    return [p for p in DASHBOARD_PERMISSIONS if p in set(stored)]


class IsEmrAdmin(BasePermission):
    message = "Admin access required."

    def has_permission(self, request, view) -> bool:
        return is_emr_admin(request.user)


class HasDashboardPermission(BasePermission):
    """
    Checks view.required_dashboard_permission (a DASHBOARD_PERMISSIONS entry).
    Views without one are allowed through.
    """
    message = "You do not have permission to perform this action."

    def has_permission(self, request, view) -> bool:
        user = request.user
        if not user or not getattr(user, "is_authenticated", False):
            return False

        required = getattr(view, "required_dashboard_permission", None)
        if not required:
            return True
        return required in user_permissions(user)

# emr_core/iam/services/profile.py
from __future__ import annotations

import copy
import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework.exceptions import PermissionDenied, ValidationError

from emr_core.common.permissions import DASHBOARD_PERMISSIONS
from emr_core.iam.models import UserProfile, UserRole

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8

DEFAULT_PREFERENCES = {
    "notifications": {
        "email": True,
        "push": True,
        "sms": False,
        "systemUpdates": True,
        "patientUpdates": True,
        "emergencyAlerts": True,
        "shiftReminders": True,
    },
    "privacy": {
        "profileVisibility": "team",
        "showOnlineStatus": True,
        "allowDirectMessages": True,
        "shareActivity": False,
    },
    "appearance": {
        "theme": "system",
        "fontSize": "medium",
        "compactMode": False,
        "sidebarCollapsed": False,
    },
    "clinical": {
        "defaultNoteTemplate": "SOAP",
        "autoSave": True,
        "autoSaveInterval": 30,
        "showPatientPhotos": True,
        "enableVoiceNotes": True,
        "enableDictation": False,
    },
}


def get_profile(user) -> UserProfile:
    profile, _ = UserProfile.objects.get_or_create(user=user)
    return profile


def effective_preferences(profile: UserProfile) -> dict:
    """
    Stored preferences layered over the defaults, one group deep.
    """
    merged = copy.deepcopy(DEFAULT_PREFERENCES)
    for key, value in (profile.preferences or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key].update(value)
        else:
            merged[key] = value
    return merged


class ProfileService:
    """
    Self-service mutations for the signed-in user.
    """

    @staticmethod
    @transaction.atomic
    def update_profile(*, user, first_name=None, last_name=None, email=None):
        fields = []
        if first_name is not None:
            user.first_name = first_name.strip()
            fields.append("first_name")
        if last_name is not None:
            user.last_name = last_name.strip()
            fields.append("last_name")
        if email is not None:
            email = email.strip()
            User = get_user_model()
            if email and User.objects.filter(email__iexact=email).exclude(pk=user.pk).exists():
                raise ValidationError({"detail": "This email is already in use."})
            user.email = email
            fields.append("email")

        if fields:
            user.save(update_fields=fields)
        return user

    @staticmethod
    @transaction.atomic
    def change_password(*, user, current_password: str, new_password: str) -> None:
        if not current_password or not new_password:
            raise ValidationError({"detail": "Current password and new password are required"})
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError({"detail": f"New password must be at least {MIN_PASSWORD_LENGTH} characters long"})
        if not user.has_usable_password():
            raise ValidationError({"detail": "Password change not available for this account"})
        if not user.check_password(current_password):
            raise ValidationError({"detail": "Current password is incorrect"})

        user.set_password(new_password)
        user.save(update_fields=["password"])

    @staticmethod
    @transaction.atomic
    def set_preferences(*, user, preferences) -> dict:
        if not isinstance(preferences, dict):
            raise ValidationError({"detail": "Invalid preferences data"})

        profile = UserProfile.objects.select_for_update().get(pk=get_profile(user).pk)
        profile.preferences = preferences
        profile.save(update_fields=["preferences", "updated_at"])
        return effective_preferences(profile)


class AdminUserService:
    """
    Role and permission management (admin only, enforced at the API layer).
    """

    @staticmethod
    @transaction.atomic
    def set_role(*, user, role: str) -> UserProfile:
        if role not in UserRole.values:
            raise ValidationError({"detail": "Invalid role. Must be USER or ADMIN"})

        profile = UserProfile.objects.select_for_update().get(pk=get_profile(user).pk)
        if profile.role != role:
            profile.role = role
            profile.save(update_fields=["role", "updated_at"])
            logger.info("User %s role set to %s", user.pk, role)
        return profile

    @staticmethod
    @transaction.atomic
    def set_permissions(*, user, permissions) -> UserProfile:
        if not isinstance(permissions, list) or not all(isinstance(p, str) for p in permissions):
            raise ValidationError({"detail": "permissions must be an array of strings"})

        unknown = sorted({p for p in permissions if p not in DASHBOARD_PERMISSIONS})
        if unknown:
            raise ValidationError({"detail": "Unknown permissions.", "unknown": unknown})

        # de-duplicate, keep canonical order
        wanted = set(permissions)
        profile = UserProfile.objects.select_for_update().get(pk=get_profile(user).pk)
        profile.permissions = [p for p in DASHBOARD_PERMISSIONS if p in wanted]
        profile.save(update_fields=["permissions", "updated_at"])
        return profile

    @staticmethod
    @transaction.atomic
    def bootstrap_admin(*, user, debug: bool) -> UserProfile:
        """
        First-admin escape hatch for development databases.
        """
        if not debug:
            raise PermissionDenied("This endpoint is only available in development")

        if UserProfile.objects.filter(role=UserRole.ADMIN).exists():
            raise ValidationError({"detail": "Admin users already exist"})

        profile = UserProfile.objects.select_for_update().get(pk=get_profile(user).pk)
        profile.role = UserRole.ADMIN
        profile.save(update_fields=["role", "updated_at"])
        logger.warning("Bootstrapped first admin: user %s", user.pk)
        return profile

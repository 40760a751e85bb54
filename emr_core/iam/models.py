# emr_core/iam/models.py
import uuid

from django.conf import settings
from django.db import models

from emr_core.common.permissions import ROLE_ADMIN, ROLE_USER


class UserRole(models.TextChoices):
    USER = ROLE_USER, "User"
    ADMIN = ROLE_ADMIN, "Admin"


class UserProfile(models.Model):
    """
    EMR user profile anchored to Django's AUTH_USER_MODEL.
    Users are global; tenants are chosen by subdomain per request.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="emr_profile")
    role = models.CharField(max_length=16, choices=UserRole.choices, default=UserRole.USER, db_index=True)

    # Dashboard panels granted to a USER (admins implicitly hold all)
    permissions = models.JSONField(default=list, blank=True)
    preferences = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "iam_user_profile"

    def __str__(self) -> str:
        return f"{self.user.get_username()} ({self.role})"

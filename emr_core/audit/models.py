# emr_core/audit/models.py
from django.conf import settings
from django.db import models


class ActionType(models.TextChoices):
    VIEW = "VIEW", "View"
    CREATE = "CREATE", "Create"
    UPDATE = "UPDATE", "Update"
    DELETE = "DELETE", "Delete"
    LOGIN = "LOGIN", "Login"
    LOGOUT = "LOGOUT", "Logout"
    AI_REQUEST = "AI_REQUEST", "AI request"
    ADMIN = "ADMIN", "Admin"


class UserActionLog(models.Model):
    """
    Append-only record of what a user did, from where.
    Shown to admins per user; never edited.
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="action_logs",
        null=True,
        blank=True,
    )
    tenant_id = models.UUIDField(null=True, blank=True, db_index=True)

    action = models.CharField(max_length=16, choices=ActionType.choices, db_index=True)
    resource = models.CharField(max_length=128, db_index=True)  # e.g. "patient", "ai.parse_notes"
    resource_id = models.CharField(max_length=128, blank=True, default="")
    success = models.BooleanField(default=True)

    method = models.CharField(max_length=16, blank=True, default="")
    route = models.CharField(max_length=512, blank=True, default="")
    ip = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.TextField(blank=True, default="")

    metadata = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = "audit_user_action_log"
        indexes = [
            models.Index(fields=["user", "created_at"], name="audit_log_user_created_idx"),
            models.Index(fields=["action", "created_at"], name="audit_log_action_created_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.action} {self.resource} ({'ok' if self.success else 'failed'})"

# emr_core/tenants/models.py
import uuid

from django.db import models


class Tenant(models.Model):
    """
    A hospital using the EMR, addressed by its own subdomain.
    Root of all scoping in the system.
    NOT a TenantScopedModel (it *is* the tenant).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    subdomain = models.SlugField(max_length=63, unique=True)
    hospital_name = models.CharField(max_length=200)

    # flexible, avoids schema churn (branding, onboarding notes, etc.)
    metadata = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "tenants_tenant"
        ordering = ["created_at"]

    def __str__(self) -> str:
        return f"{self.hospital_name} ({self.subdomain})"

# emr_core/tenants/services.py
from __future__ import annotations

import logging
from typing import Optional

from django.db import IntegrityError, transaction
from rest_framework.exceptions import ValidationError

from emr_core.tenants.domain import is_valid_subdomain
from emr_core.tenants.models import Tenant

logger = logging.getLogger(__name__)

SUBDOMAIN_TAKEN_MSG = "This subdomain is already taken."


class TenantService:
    """
    All Tenant mutations live here (write-model boundary).
    """

    @staticmethod
    def create(
        *,
        subdomain: str,
        hospital_name: str,
        metadata: Optional[dict] = None,
    ) -> Tenant:
        subdomain = (subdomain or "").strip().lower()
        hospital_name = (hospital_name or "").strip()

        if not subdomain:
            raise ValidationError({"subdomain": "Subdomain is required"})
        if not is_valid_subdomain(subdomain):
            raise ValidationError({"subdomain": "Use letters, numbers, and dashes only"})
        if not hospital_name:
            raise ValidationError({"hospital_name": "Hospital name is required"})
        if len(hospital_name) > 200:
            raise ValidationError({"hospital_name": "Hospital name is too long"})

        if Tenant.objects.filter(subdomain=subdomain).exists():
            raise ValidationError({"detail": SUBDOMAIN_TAKEN_MSG})

        try:
            with transaction.atomic():
                obj = Tenant.objects.create(
                    subdomain=subdomain,
                    hospital_name=hospital_name,
                    metadata=metadata or {},
                )
        except IntegrityError:
            # lost a race with a concurrent create
            raise ValidationError({"detail": SUBDOMAIN_TAKEN_MSG})

        logger.info("Provisioned tenant %s (%s)", obj.subdomain, obj.id)
        return obj

    @staticmethod
    @transaction.atomic
    def update_metadata(*, tenant: Tenant, metadata: dict) -> Tenant:
        if metadata is None or not isinstance(metadata, dict):
            raise ValidationError({"metadata": "Must be a JSON object."})

        t = Tenant.objects.select_for_update().get(id=tenant.id)
        t.metadata = metadata
        t.save(update_fields=["metadata", "updated_at"])
        return t

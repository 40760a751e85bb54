# emr_core/tenants/selectors.py
from __future__ import annotations

from typing import Optional
from uuid import UUID

from django.db.models import QuerySet

from emr_core.tenants.models import Tenant


def tenant_qs() -> QuerySet[Tenant]:
    return Tenant.objects.all()


def get_tenant(*, tenant_id: UUID) -> Tenant:
    return Tenant.objects.get(id=tenant_id)


def get_tenant_by_subdomain_or_none(*, subdomain: str) -> Optional[Tenant]:
    return Tenant.objects.filter(subdomain=subdomain).first()


def get_fallback_tenant() -> Optional[Tenant]:
    # Non-production convenience: the oldest tenant stands in for "any tenant"
    return Tenant.objects.order_by("created_at", "id").first()

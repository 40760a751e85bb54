# emr_core/common/scope.py
from __future__ import annotations

import logging
from typing import Optional

from django.conf import settings
from rest_framework.exceptions import NotFound

from emr_core.tenants.domain import extract_subdomain, hostname_from_host_header
from emr_core.tenants.models import Tenant
from emr_core.tenants.selectors import get_fallback_tenant, get_tenant_by_subdomain_or_none

logger = logging.getLogger(__name__)

NO_TENANT_MSG = "No tenant found"

_UNRESOLVED = object()


def _host_header(request) -> str:
    # raw header: request.get_host() would reject hosts outside ALLOWED_HOSTS
    return request.META.get("HTTP_X_FORWARDED_HOST") or request.META.get("HTTP_HOST") or ""


def resolve_tenant(request) -> Optional[Tenant]:
    """
    Returns the tenant addressed by the request's Host, or None.
    Raises nothing (pure resolver).
    """
    hostname = hostname_from_host_header(_host_header(request))
    subdomain = extract_subdomain(hostname)

    if subdomain:
        return get_tenant_by_subdomain_or_none(subdomain=subdomain)

    if getattr(settings, "EMR_TENANT_FALLBACK_ENABLED", False):
        tenant = get_fallback_tenant()
        if tenant is not None:
            logger.debug("No subdomain on %r, falling back to tenant %s", hostname, tenant.subdomain)
        return tenant

    return None


def current_tenant(request) -> Optional[Tenant]:
    """
    Middleware-attached tenant when present, otherwise resolved on demand
    (DRF test requests built without the middleware).
    """
    django_request = getattr(request, "_request", request)
    tenant = getattr(django_request, "tenant", _UNRESOLVED)
    if tenant is _UNRESOLVED:
        tenant = resolve_tenant(django_request)
        django_request.tenant = tenant
        django_request.tenant_id = tenant.id if tenant else None
    return tenant


def require_tenant(request) -> Tenant:
    tenant = current_tenant(request)
    if tenant is None:
        raise NotFound(NO_TENANT_MSG)
    return tenant

# emr_core/common/middleware.py
from __future__ import annotations

import logging

from django.utils.deprecation import MiddlewareMixin

from emr_core.common.api.exceptions import ensure_request_id
from emr_core.common.scope import resolve_tenant

logger = logging.getLogger(__name__)


class TenantResolutionMiddleware(MiddlewareMixin):
    """
    Resolves the tenant for every request from its Host header.

    Behavior:
      - <sub>.localhost[:port] and <sub>.<EMR_ROOT_DOMAIN> -> Tenant(subdomain=<sub>) or None
      - no subdomain -> oldest tenant when EMR_TENANT_FALLBACK_ENABLED, else None
      - never rejects a request; views that need a tenant call require_tenant()
      - attaches request.tenant, request.tenant_id and a request_id
    """

    PUBLIC_PATH_PREFIXES = (
        "/admin/",
        "/api/docs/",
        "/api/schema/",
        "/static/",
    )

    def process_request(self, request):
        ensure_request_id(request)
        request.tenant = None
        request.tenant_id = None

        path = getattr(request, "path", "") or ""
        if any(path.startswith(p) for p in self.PUBLIC_PATH_PREFIXES):
            return None

        tenant = resolve_tenant(request)
        request.tenant = tenant
        request.tenant_id = tenant.id if tenant else None
        return None

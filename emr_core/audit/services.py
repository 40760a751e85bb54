# emr_core/audit/services.py
from __future__ import annotations

import ipaddress
import logging
from typing import Any, Dict, Optional

from emr_core.audit.models import ActionType, UserActionLog

logger = logging.getLogger(__name__)


def client_ip(request) -> Optional[str]:
    """
    First X-Forwarded-For entry, else X-Real-IP, else REMOTE_ADDR.
    Values that are not IP addresses are dropped.
    """
    if request is None:
        return None

    meta = request.META
    raw = meta.get("HTTP_X_FORWARDED_FOR") or meta.get("HTTP_X_REAL_IP") or meta.get("REMOTE_ADDR") or ""
    first = raw.split(",")[0].strip()
    if not first:
        return None
    try:
        ipaddress.ip_address(first)
    except ValueError:
        return None
    return first


class AuditService:
    """
    Central action-log writer.
    Persists into UserActionLog (append-only).
    """

    @staticmethod
    def log_action(
        *,
        request=None,
        action: str,
        resource: str,
        resource_id: Any = None,
        success: bool = True,
        user=None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> UserActionLog:
        if action not in ActionType.values:
            raise ValueError(f"Unknown action type: {action}")

        if user is None and request is not None:
            user = getattr(request, "user", None)
        if user is not None and not getattr(user, "is_authenticated", False):
            user = None

        clean_metadata = {k: v for k, v in (metadata or {}).items() if v is not None}

        entry = UserActionLog.objects.create(
            user=user,
            tenant_id=getattr(request, "tenant_id", None) if request is not None else None,
            action=action,
            resource=resource,
            resource_id="" if resource_id is None else str(resource_id),
            success=success,
            method=(getattr(request, "method", "") or "") if request is not None else "",
            route=(getattr(request, "path", "") or "")[:512] if request is not None else "",
            ip=client_ip(request),
            user_agent=request.META.get("HTTP_USER_AGENT", "") if request is not None else "",
            metadata=clean_metadata,
        )

        if not success:
            logger.info("Action failed: %s %s %s", action, resource, entry.resource_id)
        return entry

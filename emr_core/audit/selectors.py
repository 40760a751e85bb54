# emr_core/audit/selectors.py
from __future__ import annotations

from django.db.models import QuerySet

from emr_core.audit.models import UserActionLog

DEFAULT_LOG_LIMIT = 20
MAX_LOG_LIMIT = 100


def action_log_qs() -> QuerySet[UserActionLog]:
    return UserActionLog.objects.select_related("user").order_by("-created_at", "-id")


def clamp_log_limit(raw) -> int:
    """
    ?limit= parsing: default 20, clamped to [1, 100]; garbage -> default.
    """
    try:
        n = int(raw) if raw not in (None, "") else DEFAULT_LOG_LIMIT
    except (TypeError, ValueError):
        n = DEFAULT_LOG_LIMIT
    return max(1, min(n, MAX_LOG_LIMIT))


def list_user_actions(*, user_id: int, limit: int = DEFAULT_LOG_LIMIT) -> list[UserActionLog]:
    return list(action_log_qs().filter(user_id=user_id)[:limit])

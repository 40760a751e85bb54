# emr_core/audit/api/views.py
from __future__ import annotations

from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import mixins, viewsets
from rest_framework.permissions import IsAuthenticated

from emr_core.audit.api.filters import UserActionLogFilter
from emr_core.audit.api.serializers import UserActionLogSerializer
from emr_core.audit.selectors import action_log_qs
from emr_core.common.permissions import IsEmrAdmin


@extend_schema_view(
    list=extend_schema(tags=["Audit"], operation_id="v1_audit_actions_list"),
)
class UserActionLogViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """
    Admin-only browse of the action log, newest first.
    Filters: action, resource, success, user, since.
    """
    permission_classes = [IsAuthenticated, IsEmrAdmin]

    serializer_class = UserActionLogSerializer
    filterset_class = UserActionLogFilter
    ordering_fields = ["created_at"]
    search_fields = ["resource", "resource_id", "route"]

    def get_queryset(self):
        return action_log_qs()

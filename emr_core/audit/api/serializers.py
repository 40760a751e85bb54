# emr_core/audit/api/serializers.py
from rest_framework import serializers

from emr_core.audit.models import UserActionLog


class UserActionLogSerializer(serializers.ModelSerializer):
    # null when the user has since been deleted
    user_id = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = UserActionLog
        fields = [
            "id",
            "user_id",
            "tenant_id",
            "action",
            "resource",
            "resource_id",
            "success",
            "method",
            "route",
            "ip",
            "user_agent",
            "metadata",
            "created_at",
        ]
        read_only_fields = fields

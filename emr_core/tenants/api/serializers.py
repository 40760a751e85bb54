# emr_core/tenants/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from emr_core.tenants.domain import tenant_url
from emr_core.tenants.models import Tenant


class TenantSerializer(serializers.ModelSerializer):
    url = serializers.SerializerMethodField()

    class Meta:
        model = Tenant
        fields = [
            "id",
            "subdomain",
            "hospital_name",
            "url",
            "metadata",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_url(self, obj: Tenant) -> str:
        return tenant_url(obj.subdomain)


class TenantCreateSerializer(serializers.Serializer):
    subdomain = serializers.RegexField(
        r"^[A-Za-z0-9-]+$",
        max_length=63,
        error_messages={"invalid": "Use letters, numbers, and dashes only"},
    )
    hospital_name = serializers.CharField(max_length=200)
    metadata = serializers.JSONField(required=False, default=dict)

    def validate_subdomain(self, value: str) -> str:
        return value.lower()


class TenantMetadataUpdateSerializer(serializers.Serializer):
    metadata = serializers.JSONField()

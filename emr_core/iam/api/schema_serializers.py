# emr_core/iam/api/schema_serializers.py
from __future__ import annotations

from rest_framework import serializers

from emr_core.common.permissions import DASHBOARD_PERMISSIONS, ROLES


class LoginRequestSerializer(serializers.Serializer):
    # either username or email
    username = serializers.CharField(required=False)
    email = serializers.EmailField(required=False)
    password = serializers.CharField()


class DetailResponseSerializer(serializers.Serializer):
    detail = serializers.CharField()


class MeUserSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    username = serializers.CharField(allow_null=True, required=False)
    email = serializers.EmailField(allow_null=True, required=False, allow_blank=True)
    first_name = serializers.CharField(allow_blank=True, required=False)
    last_name = serializers.CharField(allow_blank=True, required=False)
    is_superuser = serializers.BooleanField()


class TenantMiniSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    subdomain = serializers.CharField()
    hospital_name = serializers.CharField()


class MeResponseSerializer(serializers.Serializer):
    user = MeUserSerializer()
    role = serializers.ChoiceField(choices=ROLES)
    permissions = serializers.ListField(child=serializers.CharField())
    preferences = serializers.DictField()
    tenant = TenantMiniSerializer(allow_null=True)


class ProfileUpdateSerializer(serializers.Serializer):
    first_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    last_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)


class PasswordChangeSerializer(serializers.Serializer):
    current_password = serializers.CharField(required=False, allow_blank=True, default="")
    new_password = serializers.CharField(required=False, allow_blank=True, default="")


class RoleUpdateSerializer(serializers.Serializer):
    role = serializers.CharField()


class PermissionsSerializer(serializers.Serializer):
    permissions = serializers.ListField(child=serializers.ChoiceField(choices=DASHBOARD_PERMISSIONS))


class AdminUserSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    username = serializers.CharField()
    email = serializers.CharField(allow_blank=True)
    first_name = serializers.CharField(allow_blank=True)
    last_name = serializers.CharField(allow_blank=True)
    is_active = serializers.BooleanField()
    role = serializers.CharField()
    permissions = serializers.ListField(child=serializers.CharField())
    date_joined = serializers.DateTimeField()
    last_login = serializers.DateTimeField(allow_null=True)

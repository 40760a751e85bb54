# emr_core/iam/api/me.py

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from emr_core.audit.models import ActionType
from emr_core.audit.services import AuditService
from emr_core.common.permissions import user_permissions, user_role
from emr_core.common.scope import current_tenant
from emr_core.iam.api.schema_serializers import (
    DetailResponseSerializer,
    MeResponseSerializer,
    MeUserSerializer,
    PasswordChangeSerializer,
    ProfileUpdateSerializer,
)
from emr_core.iam.services.profile import ProfileService, effective_preferences, get_profile


def _user_payload(user) -> dict:
    return {
        "id": user.id,
        "username": getattr(user, "username", None),
        "email": getattr(user, "email", None),
        "first_name": getattr(user, "first_name", ""),
        "last_name": getattr(user, "last_name", ""),
        "is_superuser": bool(getattr(user, "is_superuser", False)),
    }


class MeView(APIView):
    """
    Who am I: user, role, effective dashboard permissions, preferences,
    and the tenant this request resolved to (null when none).
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: MeResponseSerializer}, tags=["IAM"])
    def get(self, request):
        tenant = current_tenant(request)
        profile = get_profile(request.user)

        return Response(
            {
                "user": _user_payload(request.user),
                "role": user_role(request.user),
                "permissions": user_permissions(request.user),
                "preferences": effective_preferences(profile),
                "tenant": (
                    {"id": str(tenant.id), "subdomain": tenant.subdomain, "hospital_name": tenant.hospital_name}
                    if tenant
                    else None
                ),
            },
            status=status.HTTP_200_OK,
        )


class MeProfileView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=ProfileUpdateSerializer, responses={200: MeUserSerializer}, tags=["IAM"])
    def patch(self, request):
        ser = ProfileUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        user = ProfileService.update_profile(user=request.user, **ser.validated_data)
        AuditService.log_action(
            request=request,
            action=ActionType.UPDATE,
            resource="profile",
            resource_id=user.pk,
            metadata={"fields": sorted(ser.validated_data)},
        )
        return Response(_user_payload(user), status=status.HTTP_200_OK)


class MePasswordView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=PasswordChangeSerializer, responses={200: DetailResponseSerializer}, tags=["IAM"])
    def put(self, request):
        ser = PasswordChangeSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        ProfileService.change_password(
            user=request.user,
            current_password=ser.validated_data["current_password"],
            new_password=ser.validated_data["new_password"],
        )
        AuditService.log_action(request=request, action=ActionType.UPDATE, resource="password", resource_id=request.user.pk)
        return Response({"detail": "Password updated successfully"}, status=status.HTTP_200_OK)


class MePreferencesView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: dict}, tags=["IAM"])
    def get(self, request):
        return Response(effective_preferences(get_profile(request.user)), status=status.HTTP_200_OK)

    @extend_schema(request=dict, responses={200: dict}, tags=["IAM"])
    def put(self, request):
        preferences = ProfileService.set_preferences(user=request.user, preferences=request.data)
        return Response(
            {"detail": "Preferences updated successfully", "preferences": preferences},
            status=status.HTTP_200_OK,
        )

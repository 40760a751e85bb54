# emr_core/iam/api/admin_users.py

from __future__ import annotations

from django.conf import settings
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from emr_core.audit.api.serializers import UserActionLogSerializer
from emr_core.audit.models import ActionType
from emr_core.audit.selectors import clamp_log_limit, list_user_actions
from emr_core.audit.services import AuditService
from emr_core.common.api.pagination import paginate
from emr_core.common.permissions import IsEmrAdmin, user_permissions, user_role
from emr_core.iam.api.schema_serializers import AdminUserSerializer, PermissionsSerializer, RoleUpdateSerializer
from emr_core.iam.selectors import get_user_or_404, user_qs
from emr_core.iam.services.profile import AdminUserService


def admin_user_payload(user) -> dict:
    return {
        "id": user.id,
        "username": user.get_username(),
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "is_active": user.is_active,
        "role": user_role(user),
        "permissions": user_permissions(user),
        "date_joined": user.date_joined,
        "last_login": user.last_login,
    }


class _AdminUserRowSerializer(AdminUserSerializer):
    def to_representation(self, instance):
        return super().to_representation(admin_user_payload(instance))


class AdminUserListView(APIView):
    permission_classes = [IsAuthenticated, IsEmrAdmin]

    @extend_schema(responses={200: AdminUserSerializer(many=True)}, tags=["Admin"])
    def get(self, request):
        return paginate(request, user_qs(), _AdminUserRowSerializer)


class AdminUserRoleView(APIView):
    permission_classes = [IsAuthenticated, IsEmrAdmin]

    @extend_schema(request=RoleUpdateSerializer, responses={200: AdminUserSerializer}, tags=["Admin"])
    def post(self, request, user_id):
        user = get_user_or_404(user_id=user_id)
        ser = RoleUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        AdminUserService.set_role(user=user, role=ser.validated_data["role"])
        user = get_user_or_404(user_id=user.pk)
        AuditService.log_action(
            request=request,
            action=ActionType.ADMIN,
            resource="user.role",
            resource_id=user.pk,
            metadata={"role": ser.validated_data["role"]},
        )
        return Response({"success": True, "user": admin_user_payload(user)}, status=status.HTTP_200_OK)


class AdminUserPermissionsView(APIView):
    permission_classes = [IsAuthenticated, IsEmrAdmin]

    @extend_schema(responses={200: PermissionsSerializer}, tags=["Admin"])
    def get(self, request, user_id):
        user = get_user_or_404(user_id=user_id)
        return Response({"permissions": user_permissions(user)}, status=status.HTTP_200_OK)

    @extend_schema(request=PermissionsSerializer, responses={200: PermissionsSerializer}, tags=["Admin"])
    def put(self, request, user_id):
        user = get_user_or_404(user_id=user_id)
        permissions = request.data.get("permissions") if isinstance(request.data, dict) else None

        profile = AdminUserService.set_permissions(user=user, permissions=permissions)
        AuditService.log_action(
            request=request,
            action=ActionType.ADMIN,
            resource="user.permissions",
            resource_id=user.pk,
            metadata={"permissions": profile.permissions},
        )
        return Response(
            {"success": True, "user": {"id": user.pk, "permissions": profile.permissions}},
            status=status.HTTP_200_OK,
        )


class AdminUserLogsView(APIView):
    permission_classes = [IsAuthenticated, IsEmrAdmin]

    @extend_schema(
        tags=["Admin"],
        responses={200: UserActionLogSerializer(many=True)},
        parameters=[
            OpenApiParameter(
                name="limit",
                type=OpenApiTypes.INT,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Max records to return (default 20, clamped to 1..100).",
            ),
        ],
    )
    def get(self, request, user_id):
        user = get_user_or_404(user_id=user_id)
        limit = clamp_log_limit(request.query_params.get("limit"))
        logs = list_user_actions(user_id=user.pk, limit=limit)
        return Response({"logs": UserActionLogSerializer(logs, many=True).data}, status=status.HTTP_200_OK)


class AdminBootstrapView(APIView):
    """
    Development only: promote the caller to ADMIN while no admin exists.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(request=None, responses={200: AdminUserSerializer}, tags=["Admin"])
    def post(self, request):
        AdminUserService.bootstrap_admin(user=request.user, debug=settings.DEBUG)
        user = get_user_or_404(user_id=request.user.pk)
        AuditService.log_action(request=request, action=ActionType.ADMIN, resource="admin.bootstrap", resource_id=request.user.pk)
        return Response(
            {
                "success": True,
                "message": "You have been promoted to admin",
                "user": admin_user_payload(user),
            },
            status=status.HTTP_200_OK,
        )

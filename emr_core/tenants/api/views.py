# emr_core/tenants/api/views.py
from __future__ import annotations

from uuid import UUID

from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from emr_core.audit.models import ActionType
from emr_core.audit.services import AuditService
from emr_core.common.permissions import IsEmrAdmin
from emr_core.common.scope import require_tenant
from emr_core.tenants.api.serializers import (
    TenantCreateSerializer,
    TenantMetadataUpdateSerializer,
    TenantSerializer,
)
from emr_core.tenants.models import Tenant
from emr_core.tenants.selectors import get_tenant, tenant_qs
from emr_core.tenants.services import TenantService


def _get_or_404(pk) -> Tenant:
    try:
        return get_tenant(tenant_id=UUID(str(pk)))
    except (ValueError, Tenant.DoesNotExist):
        raise NotFound("Tenant not found")


@extend_schema_view(
    list=extend_schema(tags=["Tenants"], operation_id="v1_tenants_list", responses={200: TenantSerializer(many=True)}),
    retrieve=extend_schema(tags=["Tenants"], operation_id="v1_tenants_retrieve", responses={200: TenantSerializer}),
    create=extend_schema(tags=["Tenants"], operation_id="v1_tenants_create", request=TenantCreateSerializer, responses={201: TenantSerializer}),
    current=extend_schema(tags=["Tenants"], operation_id="v1_tenants_current", responses={200: TenantSerializer}),
    set_metadata=extend_schema(tags=["Tenants"], operation_id="v1_tenants_set_metadata", request=TenantMetadataUpdateSerializer, responses={200: TenantSerializer}),
)
class TenantViewSet(viewsets.ViewSet):
    """
    Tenant provisioning (admin) and the tenant resolved for this request.
    Routing is centralized in emr_core/api/urls.py.
    """

    permission_classes = [IsAuthenticated, IsEmrAdmin]

    # ✅ critical for drf-spectacular
    serializer_class = TenantSerializer
    queryset = Tenant.objects.none()

    def get_permissions(self):
        if self.action == "current":
            return [IsAuthenticated()]
        return super().get_permissions()

    def list(self, request):
        qs = tenant_qs().order_by("-created_at")[:300]
        return Response(TenantSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    def retrieve(self, request, pk=None):
        return Response(TenantSerializer(_get_or_404(pk)).data, status=status.HTTP_200_OK)

    def create(self, request):
        ser = TenantCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        t = TenantService.create(
            subdomain=ser.validated_data["subdomain"],
            hospital_name=ser.validated_data["hospital_name"],
            metadata=ser.validated_data.get("metadata") or {},
        )
        AuditService.log_action(
            request=request,
            action=ActionType.ADMIN,
            resource="tenant",
            resource_id=t.id,
            metadata={"subdomain": t.subdomain},
        )
        return Response(TenantSerializer(t).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["get"], url_path="current")
    def current(self, request):
        return Response(TenantSerializer(require_tenant(request)).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["post"], url_path="set-metadata")
    def set_metadata(self, request, pk=None):
        ser = TenantMetadataUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        t = TenantService.update_metadata(tenant=_get_or_404(pk), metadata=ser.validated_data["metadata"])
        return Response(TenantSerializer(t).data, status=status.HTTP_200_OK)

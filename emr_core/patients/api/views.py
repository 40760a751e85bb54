# emr_core/patients/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from emr_core.audit.models import ActionType
from emr_core.audit.services import AuditService
from emr_core.common.api.pagination import paginate
from emr_core.common.permissions import HasDashboardPermission, IsEmrAdmin
from emr_core.common.scope import require_tenant
from emr_core.patients.api.serializers import (
    PatientCreateSerializer,
    PatientImportResponseSerializer,
    PatientImportSerializer,
    PatientSerializer,
    PatientUpdateSerializer,
)
from emr_core.patients.models import Patient
from emr_core.patients.selectors import get_patient_or_404, patient_record, search_patients
from emr_core.patients.services import PatientService


@extend_schema_view(
    list=extend_schema(
        tags=["Patients"],
        parameters=[
            OpenApiParameter(name="q", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(
                name="type",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=False,
                enum=["id", "name"],
                description="id = MRN substring, name = any name part (default).",
            ),
        ],
        responses={200: PatientSerializer(many=True)},
    ),
    create=extend_schema(tags=["Patients"], request=PatientCreateSerializer, responses={201: PatientSerializer}),
    retrieve=extend_schema(tags=["Patients"], responses={200: OpenApiTypes.OBJECT}),
    partial_update=extend_schema(tags=["Patients"], request=PatientUpdateSerializer, responses={200: PatientSerializer}),
    destroy=extend_schema(tags=["Patients"], responses={204: None}),
)
class PatientViewSet(viewsets.ViewSet):
    """
    Patients of the tenant resolved from the request host, addressed by MRN.
    """
    permission_classes = [IsAuthenticated]
    lookup_field = "mrn"
    lookup_value_regex = "[^/]+"

    # ✅ these two lines fix spectacular + path param typing
    serializer_class = PatientSerializer
    queryset = Patient.objects.none()

    def get_permissions(self):
        if self.action == "retrieve":
            return [IsAuthenticated(), HasDashboardPermission()]
        if self.action == "destroy":
            return [IsAuthenticated(), IsEmrAdmin()]
        return super().get_permissions()

    @property
    def required_dashboard_permission(self):
        return "VIEW_DEMOGRAPHICS" if self.action == "retrieve" else None

    def list(self, request):
        tenant = require_tenant(request)
        qs = search_patients(
            tenant_id=tenant.id,
            q=request.query_params.get("q", ""),
            search_type=request.query_params.get("type", "name"),
        )
        return paginate(request, qs, PatientSerializer)

    def create(self, request):
        tenant = require_tenant(request)

        ser = PatientCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        try:
            patient = PatientService.create_patient(tenant_id=tenant.id, **ser.validated_data)
        except ValueError as e:
            raise DRFValidationError({"detail": str(e)})

        AuditService.log_action(request=request, action=ActionType.CREATE, resource="patient", resource_id=patient.mrn)
        return Response(PatientSerializer(patient).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, mrn=None):
        tenant = require_tenant(request)
        patient = get_patient_or_404(tenant_id=tenant.id, mrn=mrn)

        AuditService.log_action(request=request, action=ActionType.VIEW, resource="patient", resource_id=patient.mrn)
        return Response(patient_record(patient=patient), status=status.HTTP_200_OK)

    def partial_update(self, request, mrn=None):
        tenant = require_tenant(request)
        patient = get_patient_or_404(tenant_id=tenant.id, mrn=mrn)

        ser = PatientUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        try:
            patient = PatientService.update_patient(patient=patient, data=ser.validated_data)
        except ValueError as e:
            raise DRFValidationError({"detail": str(e)})

        AuditService.log_action(
            request=request,
            action=ActionType.UPDATE,
            resource="patient",
            resource_id=patient.mrn,
            metadata={"updated_fields": sorted(ser.validated_data.keys())},
        )
        return Response(PatientSerializer(patient).data, status=status.HTTP_200_OK)

    def destroy(self, request, mrn=None):
        tenant = require_tenant(request)
        patient = get_patient_or_404(tenant_id=tenant.id, mrn=mrn)

        PatientService.delete_patient(patient=patient)
        AuditService.log_action(request=request, action=ActionType.DELETE, resource="patient", resource_id=mrn)
        return Response(status=status.HTTP_204_NO_CONTENT)


class PatientImportView(APIView):
    """
    Files a reviewed extraction result into a patient record (created if new).
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(request=PatientImportSerializer, responses={200: PatientImportResponseSerializer}, tags=["Patients"])
    def post(self, request):
        tenant = require_tenant(request)

        ser = PatientImportSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        result = dict(ser.validated_data)
        mrn = result.pop("patientId")

        summary = PatientService.import_extraction(tenant_id=tenant.id, mrn=mrn, result=result)
        AuditService.log_action(
            request=request,
            action=ActionType.CREATE if summary.created else ActionType.UPDATE,
            resource="patient.import",
            resource_id=mrn,
            metadata={"counts": summary.counts},
        )
        return Response(
            {
                "success": True,
                "created": summary.created,
                "patient": PatientSerializer(summary.patient).data,
                "counts": summary.counts,
            },
            status=status.HTTP_200_OK,
        )

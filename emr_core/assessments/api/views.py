# emr_core/assessments/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from emr_core.assessments.api.serializers import AssessmentSaveResponseSerializer
from emr_core.assessments.selectors import assessment_map
from emr_core.assessments.services import AssessmentService
from emr_core.audit.models import ActionType
from emr_core.audit.services import AuditService
from emr_core.common.permissions import HasDashboardPermission
from emr_core.common.scope import require_tenant
from emr_core.patients.selectors import get_patient_or_404


class PatientAssessmentView(APIView):
    """
    Body-part assessment of one patient as {"left-lung": "clear", ...}.
    """
    permission_classes = [IsAuthenticated, HasDashboardPermission]
    required_dashboard_permission = "VIEW_ASSESSMENT"

    def _patient(self, request, mrn):
        tenant = require_tenant(request)
        return get_patient_or_404(tenant_id=tenant.id, mrn=mrn)

    @extend_schema(responses={200: OpenApiTypes.OBJECT}, tags=["Assessments"])
    def get(self, request, mrn):
        patient = self._patient(request, mrn)
        data = assessment_map(patient=patient)

        AuditService.log_action(request=request, action=ActionType.VIEW, resource="assessment", resource_id=patient.mrn)
        return Response(data, status=status.HTTP_200_OK)

    @extend_schema(request=OpenApiTypes.OBJECT, responses={200: AssessmentSaveResponseSerializer}, tags=["Assessments"])
    def post(self, request, mrn):
        patient = self._patient(request, mrn)
        written = AssessmentService.save(patient=patient, entries=request.data)

        AuditService.log_action(
            request=request,
            action=ActionType.UPDATE,
            resource="assessment",
            resource_id=patient.mrn,
            metadata={"notes_written": written, "keys": sorted(request.data.keys())},
        )
        return Response({"success": True, "notesCreated": written}, status=status.HTTP_200_OK)

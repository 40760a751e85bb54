# emr_core/extraction/api/views.py
from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from emr_core.audit.models import ActionType
from emr_core.audit.services import AuditService
from emr_core.common.scope import require_tenant
from emr_core.extraction.api.serializers import (
    CategorizeNotesRequestSerializer,
    ClinicalSearchRequestSerializer,
    ParseNotesRequestSerializer,
    ScanIdRequestSerializer,
    ScanIdResponseSerializer,
)
from emr_core.extraction.schemas import (
    CategorizationResultSchema,
    ClinicalSearchResultSchema,
    MedicalExtractionResultSchema,
)
from emr_core.extraction.services import ExtractionService
from emr_core.patients.selectors import get_patient_or_404, patient_record


def _body(request) -> dict:
    return request.data if isinstance(request.data, dict) else {}


class _AIView(APIView):
    """
    Every call lands in the action log as AI_REQUEST, failed ones included.
    """
    permission_classes = [IsAuthenticated]
    resource = ""

    def run(self, request, fn, *, metadata=None):
        try:
            result = fn()
        except APIException as exc:
            AuditService.log_action(
                request=request,
                action=ActionType.AI_REQUEST,
                resource=self.resource,
                success=False,
                metadata={**(metadata or {}), "error": getattr(exc, "default_code", None)},
            )
            raise

        AuditService.log_action(request=request, action=ActionType.AI_REQUEST, resource=self.resource, metadata=metadata)
        return Response(result, status=status.HTTP_200_OK)


class ParseNotesView(_AIView):
    resource = "ai.parse-notes"

    @extend_schema(request=ParseNotesRequestSerializer, responses={200: MedicalExtractionResultSchema}, tags=["AI"])
    def post(self, request):
        notes = _body(request).get("notes")
        return self.run(
            request,
            lambda: ExtractionService.parse_notes(notes=notes),
            metadata={"length": len(notes) if isinstance(notes, str) else None},
        )


class CategorizeNotesView(_AIView):
    resource = "ai.categorize-notes"

    @extend_schema(request=CategorizeNotesRequestSerializer, responses={200: CategorizationResultSchema}, tags=["AI"])
    def post(self, request):
        text = _body(request).get("text")
        return self.run(
            request,
            lambda: ExtractionService.categorize_notes(text=text),
            metadata={"length": len(text) if isinstance(text, str) else None},
        )


class ClinicalSearchView(_AIView):
    resource = "ai.clinical-search"

    @extend_schema(request=ClinicalSearchRequestSerializer, responses={200: ClinicalSearchResultSchema}, tags=["AI"])
    def post(self, request):
        body = _body(request)
        query = body.get("query")
        mrn = body.get("patient_mrn")

        def search():
            patient_data = body.get("patientData")
            if mrn:
                tenant = require_tenant(request)
                patient = get_patient_or_404(tenant_id=tenant.id, mrn=str(mrn))
                patient_data = patient_record(patient=patient)
            return ExtractionService.clinical_search(
                query=query,
                patient_data=patient_data if isinstance(patient_data, dict) else None,
            )

        return self.run(request, search, metadata={"patient_mrn": mrn})


class ScanIdView(_AIView):
    resource = "ai.scan-id"

    @extend_schema(request=ScanIdRequestSerializer, responses={200: ScanIdResponseSerializer}, tags=["AI"])
    def post(self, request):
        image = _body(request).get("image")
        return self.run(request, lambda: ExtractionService.scan_id(image=image))

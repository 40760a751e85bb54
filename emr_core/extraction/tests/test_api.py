import json

import pytest
from django.apps import apps

from emr_core.audit.models import ActionType, UserActionLog
from emr_core.common.api.exceptions import UpstreamUnavailable
from emr_core.tests.helpers import on_tenant

pytestmark = pytest.mark.django_db

PARSE_URL = "/api/v1/ai/parse-notes/"


def _fenced(payload):
    return "```json\n" + json.dumps(payload) + "\n```"


def test_parse_notes_returns_validated_and_normalized(api_client, tenant, fake_llm):
    fake_llm.queue(
        _fenced(
            {
                "demographics": {"name": "Kevin Gao"},
                "vitals": {"weight": "80", "height": "1.75", "temperature": "100.4"},
                "pastConditions": [{"date": "2020-06-01", "bodyPart": "left wrist", "notes": "fracture"}],
                "confidenceNote": "ignored",
            }
        )
    )

    resp = api_client.post(PARSE_URL, {"notes": "Patient is 176 lbs, 5'9\", temp 38C"}, format="json", **on_tenant(tenant))

    assert resp.status_code == 200, resp.data
    assert resp.data["vitals"]["bmi"] == "26.1"
    condition = resp.data["pastConditions"][0]
    assert condition["bodyPart"] == "LEFT WRIST"
    assert condition["notes"].startswith("[") and condition["notes"].endswith("] fracture")
    assert "confidenceNote" not in resp.data

    assert len(fake_llm.calls) == 1
    assert "Patient is 176 lbs" in fake_llm.calls[0]["prompt"]

    log = UserActionLog.objects.get(action=ActionType.AI_REQUEST)
    assert log.resource == "ai.parse-notes"
    assert log.success is True
    assert log.tenant_id == tenant.id


def test_oversized_notes_rejected_without_model_call(api_client, fake_llm):
    resp = api_client.post(PARSE_URL, {"notes": "x" * 10_001}, format="json")

    assert resp.status_code == 400
    assert resp.data["error"]["message"] == "Notes too long. Maximum 10,000 characters allowed."
    assert fake_llm.calls == []
    assert UserActionLog.objects.get(action=ActionType.AI_REQUEST).success is False


def test_oversized_notes_report_limits_as_integers(api_client, fake_llm):
    resp = api_client.post(PARSE_URL, {"notes": "x" * 10_001}, format="json")

    details = resp.data["error"]["details"]
    assert details == {"max_length": 10_000, "length": 10_001}
    assert isinstance(details["max_length"], int)


@pytest.fixture
def unconfigured_model(settings):
    settings.GOOGLE_GENERATIVE_AI_API_KEY = ""
    handle = apps.get_app_config("extraction").client_handle
    handle.close()
    yield handle
    handle.close()


def test_input_checked_before_model_configuration(api_client, unconfigured_model):
    resp = api_client.post(PARSE_URL, {"notes": "x" * 10_001}, format="json")

    assert resp.status_code == 400
    assert resp.data["error"]["message"] == "Notes too long. Maximum 10,000 characters allowed."
    assert UserActionLog.objects.get(action=ActionType.AI_REQUEST).success is False


def test_invalid_image_checked_before_model_configuration(api_client, unconfigured_model):
    resp = api_client.post("/api/v1/ai/scan-id/", {"image": "not base64!!"}, format="json")

    assert resp.status_code == 400
    assert resp.data["error"]["message"] == "Invalid image format"


def test_missing_notes_rejected_without_model_call(api_client, fake_llm):
    resp = api_client.post(PARSE_URL, {}, format="json")

    assert resp.status_code == 400
    assert fake_llm.calls == []


def test_unparsable_output_is_502_with_raw_output(api_client, fake_llm):
    fake_llm.queue("Sorry, I can't help with that.")

    resp = api_client.post(PARSE_URL, {"notes": "BP 120/80"}, format="json")

    assert resp.status_code == 502
    err = resp.data["error"]
    assert err["code"] == "upstream_parse_failure"
    assert err["details"]["raw_output"] == "Sorry, I can't help with that."


def test_wrong_shape_is_422_with_issues(api_client, fake_llm):
    fake_llm.queue(json.dumps({"vitals": {"heartRate": 72}}))

    resp = api_client.post(PARSE_URL, {"notes": "HR 72"}, format="json")

    assert resp.status_code == 422
    assert resp.data["error"]["code"] == "upstream_schema_violation"
    assert "vitals" in resp.data["error"]["details"]["issues"]


def test_model_unavailable_is_502_and_not_retried(api_client, fake_llm):
    fake_llm.queue(UpstreamUnavailable())

    resp = api_client.post(PARSE_URL, {"notes": "HR 72"}, format="json")

    assert resp.status_code == 502
    assert resp.data["error"]["code"] == "upstream_unavailable"
    assert len(fake_llm.calls) == 1


def test_categorize_notes(api_client, fake_llm):
    fake_llm.queue(
        json.dumps(
            {
                "categories": [{"category": "vitals", "extractedText": "BP 120/80", "confidence": 0.9}],
                "summary": "Routine visit",
                "keyFindings": ["Normal blood pressure"],
            }
        )
    )

    resp = api_client.post("/api/v1/ai/categorize-notes/", {"text": "BP 120/80"}, format="json")

    assert resp.status_code == 200, resp.data
    assert resp.data["summary"] == "Routine visit"
    assert resp.data["categories"][0]["confidence"] == 0.9


def _search_reply():
    return json.dumps(
        {
            "summary": "Puncture wound",
            "relevantConditions": [],
            "warnings": [{"warning": "No tetanus record", "severity": "warning", "basedOn": "immunizations"}],
        }
    )


def test_clinical_search_loads_patient_record(api_client, tenant, patient, fake_llm):
    fake_llm.queue(_search_reply())

    resp = api_client.post(
        "/api/v1/ai/clinical-search/",
        {"query": "stepped on a nail", "patient_mrn": patient.mrn},
        format="json",
        **on_tenant(tenant),
    )

    assert resp.status_code == 200, resp.data
    assert resp.data["warnings"][0]["severity"] == "warning"
    assert '"patientId": "MRN-TEST-001"' in fake_llm.calls[0]["prompt"]


def test_clinical_search_unknown_patient_is_404(api_client, tenant, fake_llm):
    resp = api_client.post(
        "/api/v1/ai/clinical-search/",
        {"query": "chest pain", "patient_mrn": "nope"},
        format="json",
        **on_tenant(tenant),
    )

    assert resp.status_code == 404
    assert fake_llm.calls == []


def test_clinical_search_query_too_long(api_client, fake_llm):
    resp = api_client.post("/api/v1/ai/clinical-search/", {"query": "q" * 501}, format="json")

    assert resp.status_code == 400
    assert fake_llm.calls == []


def test_scan_id_success_passes_image(api_client, fake_llm):
    fake_llm.queue(json.dumps({"name": "KEVIN K GAO", "confidence": 0.95, "additional_info": {"id_number": "12345"}}))

    resp = api_client.post("/api/v1/ai/scan-id/", {"image": "data:image/png;base64,aGVsbG8="}, format="json")

    assert resp.status_code == 200, resp.data
    assert resp.data == {
        "success": True,
        "name": "KEVIN K GAO",
        "confidence": 0.95,
        "additional_info": {"id_number": "12345"},
    }
    image = fake_llm.calls[0]["images"][0]
    assert image.mime_type == "image/png"
    assert image.data == b"hello"


def test_scan_id_low_confidence(api_client, fake_llm):
    fake_llm.queue(json.dumps({"name": "Unable to extract", "confidence": 0}))

    resp = api_client.post("/api/v1/ai/scan-id/", {"image": "aGVsbG8="}, format="json")

    assert resp.status_code == 200
    assert resp.data["success"] is False
    assert resp.data["confidence"] == 0


def test_scan_id_invalid_base64(api_client, fake_llm):
    resp = api_client.post("/api/v1/ai/scan-id/", {"image": "not base64 !!!"}, format="json")

    assert resp.status_code == 400
    assert fake_llm.calls == []


def test_ai_endpoints_require_authentication(client):
    resp = client.post(PARSE_URL, {"notes": "x"}, content_type="application/json")
    assert resp.status_code == 401

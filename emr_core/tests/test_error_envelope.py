import pytest
from rest_framework.exceptions import ValidationError

from emr_core.common.api.exceptions import (
    RAW_OUTPUT_PREVIEW_CHARS,
    InputTooLong,
    UpstreamParseFailure,
    UpstreamSchemaViolation,
    UpstreamUnavailable,
    api_exception_handler,
)


def test_validation_detail_becomes_message():
    resp = api_exception_handler(InputTooLong(message="Notes too long.", max_length=10, length=12), {"request": None})

    assert resp.status_code == 400
    err = resp.data["error"]
    assert err["code"] == "validation_error"
    assert err["message"] == "Notes too long."
    assert err["details"] == {"max_length": 10, "length": 12}
    assert err["request_id"]


def test_plain_validation_detail_becomes_message():
    resp = api_exception_handler(ValidationError({"detail": "Query is required"}), {"request": None})

    assert resp.status_code == 400
    assert resp.data["error"]["message"] == "Query is required"
    assert resp.data["error"]["details"] is None


def test_parse_failure_carries_truncated_raw_output():
    raw = "x" * (RAW_OUTPUT_PREVIEW_CHARS + 500)
    resp = api_exception_handler(UpstreamParseFailure(raw_output=raw, reason="No JSON"), {"request": None})

    assert resp.status_code == 502
    err = resp.data["error"]
    assert err["code"] == "upstream_parse_failure"
    assert len(err["details"]["raw_output"]) == RAW_OUTPUT_PREVIEW_CHARS
    assert err["details"]["reason"] == "No JSON"


def test_schema_violation_is_422_with_issues():
    resp = api_exception_handler(UpstreamSchemaViolation(issues={"summary": ["Expected a string."]}), {"request": None})

    assert resp.status_code == 422
    assert resp.data["error"]["code"] == "upstream_schema_violation"
    assert resp.data["error"]["details"]["issues"] == {"summary": ["Expected a string."]}


def test_upstream_unavailable_is_502():
    resp = api_exception_handler(UpstreamUnavailable(), {"request": None})

    assert resp.status_code == 502
    assert resp.data["error"]["code"] == "upstream_unavailable"
    assert resp.data["error"]["details"] is None


def test_unhandled_error_is_generic_500():
    resp = api_exception_handler(RuntimeError("db password is hunter2"), {"request": None})

    assert resp.status_code == 500
    err = resp.data["error"]
    assert err["code"] == "server_error"
    assert "hunter2" not in err["message"]
    assert err["details"] is None


@pytest.mark.django_db
def test_unauthenticated_request_uses_envelope(client):
    resp = client.get("/api/v1/me/")

    assert resp.status_code == 401
    assert resp.json()["error"]["code"] == "not_authenticated"

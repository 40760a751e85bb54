import json

import pytest

from emr_core.common.api.exceptions import UpstreamParseFailure, UpstreamSchemaViolation
from emr_core.extraction.schemas import (
    CategorizationResultSchema,
    ClinicalSearchResultSchema,
    IdScanResultSchema,
    MedicalExtractionResultSchema,
)
from emr_core.extraction.validation import extract_json_object, parse_model_output, validate_model_output


def test_extract_json_object_strips_fences_and_chatter():
    text = 'Sure! Here it is:\n```json\n{"allergies": "none"}\n```\nAnything else?'
    assert extract_json_object(text) == '{"allergies": "none"}'


def test_no_object_is_parse_failure():
    with pytest.raises(UpstreamParseFailure) as exc:
        parse_model_output("I could not read those notes.")
    assert exc.value.raw_output == "I could not read those notes."


def test_broken_json_is_parse_failure():
    with pytest.raises(UpstreamParseFailure):
        parse_model_output('{"allergies": "none",}')


def test_unknown_keys_are_dropped():
    data = validate_model_output(json.dumps({"allergies": "none", "mood": "great"}), MedicalExtractionResultSchema)
    assert dict(data) == {"allergies": "none"}


@pytest.mark.parametrize(
    "payload",
    [
        {"vitals": {"heartRate": 72}},
        {"dnr": "true"},
        {"dnr": 1},
        {"medications": {"name": "Lisinopril"}},
        {"medications": [{"name": "Lisinopril"}, {"dosage": "10mg"}]},
        {"allergies": None},
        {"pastConditions": [{"bodyPart": "HEAD"}]},
    ],
)
def test_medical_extraction_is_strict(payload):
    with pytest.raises(UpstreamSchemaViolation):
        validate_model_output(json.dumps(payload), MedicalExtractionResultSchema)


def test_medical_extraction_valid_nested():
    payload = {
        "demographics": {"name": "Kevin Gao", "dob": "1995-03-15"},
        "vitals": {"heartRate": "72", "bloodType": "O+"},
        "medications": [{"name": "Lisinopril", "dosage": "10mg"}],
        "dnr": False,
    }
    data = validate_model_output(json.dumps(payload), MedicalExtractionResultSchema)

    assert data["demographics"]["name"] == "Kevin Gao"
    assert data["medications"][0]["dosage"] == "10mg"
    assert data["dnr"] is False


def _categorization(confidence):
    return json.dumps(
        {
            "categories": [{"category": "vitals", "extractedText": "BP 120/80", "confidence": confidence}],
            "summary": "Routine visit",
            "keyFindings": ["Normal BP"],
        }
    )


def test_categorization_confidence_rules():
    data = validate_model_output(_categorization(0.9), CategorizationResultSchema)
    assert data["categories"][0]["confidence"] == 0.9

    for bad in ("0.9", 1.5, -0.1, True):
        with pytest.raises(UpstreamSchemaViolation):
            validate_model_output(_categorization(bad), CategorizationResultSchema)


def test_categorization_requires_summary():
    with pytest.raises(UpstreamSchemaViolation) as exc:
        validate_model_output(json.dumps({"categories": [], "keyFindings": []}), CategorizationResultSchema)
    assert "summary" in exc.value.issues


def test_clinical_search_enums():
    good = {
        "summary": "s",
        "relevantConditions": [
            {
                "condition": "Tetanus risk",
                "relevance": "puncture wound",
                "urgency": "high",
                "section": "immunizations",
                "dataStatus": "missing",
                "specificFindings": "No tetanus shot on record",
            }
        ],
        "warnings": [{"warning": "Penicillin allergy", "severity": "critical", "basedOn": "allergies"}],
    }
    assert validate_model_output(json.dumps(good), ClinicalSearchResultSchema)["summary"] == "s"

    good["relevantConditions"][0]["urgency"] = "urgent"
    with pytest.raises(UpstreamSchemaViolation):
        validate_model_output(json.dumps(good), ClinicalSearchResultSchema)


def test_id_scan_shape():
    data = validate_model_output('{"name": "KEVIN K GAO", "confidence": 1}', IdScanResultSchema)
    assert data["confidence"] == 1.0

    with pytest.raises(UpstreamSchemaViolation):
        validate_model_output('{"name": "KEVIN K GAO", "confidence": "high"}', IdScanResultSchema)

import pytest

from emr_core.assessments.models import AssessmentNote
from emr_core.audit.models import ActionType, UserActionLog
from emr_core.patients.models import ClinicalNote, NoteSection, NoteType
from emr_core.tests.helpers import on_tenant

pytestmark = pytest.mark.django_db


def _url(patient):
    return f"/api/v1/patients/{patient.mrn}/assessment/"


def test_save_then_fetch_round_trip(api_client, tenant, patient):
    r = api_client.post(_url(patient), {"head": "mild bruising", "left-lung": " clear "}, format="json", **on_tenant(tenant))

    assert r.status_code == 200, r.data
    assert r.data == {"success": True, "notesCreated": 2}

    got = api_client.get(_url(patient), **on_tenant(tenant))
    assert got.status_code == 200, got.data
    assert got.data == {"head": "mild bruising", "left-lung": "clear"}


def test_saving_same_value_twice_keeps_one_note(api_client, tenant, patient):
    for _ in range(2):
        r = api_client.post(_url(patient), {"heart": "regular rhythm"}, format="json", **on_tenant(tenant))
        assert r.status_code == 200, r.data

    assert AssessmentNote.objects.filter(patient=patient, body_part="HEART").count() == 1


def test_blank_value_clears_body_part(api_client, tenant, patient):
    api_client.post(_url(patient), {"head": "mild bruising"}, format="json", **on_tenant(tenant))

    r = api_client.post(_url(patient), {"head": "  "}, format="json", **on_tenant(tenant))
    assert r.status_code == 200, r.data
    assert r.data["notesCreated"] == 0

    got = api_client.get(_url(patient), **on_tenant(tenant))
    assert "head" not in got.data
    assert not AssessmentNote.objects.exists()


def test_null_value_clears_body_part(api_client, tenant, patient):
    AssessmentNote.objects.create(patient=patient, tenant_id=tenant.id, body_part="SPINE", content="straight")

    r = api_client.post(_url(patient), {"spine": None}, format="json", **on_tenant(tenant))

    assert r.status_code == 200, r.data
    assert not AssessmentNote.objects.exists()


def test_unknown_key_rejects_whole_request(api_client, tenant, patient):
    r = api_client.post(_url(patient), {"head": "ok", "tail": "wagging"}, format="json", **on_tenant(tenant))

    assert r.status_code == 400, r.data
    assert r.data["error"]["message"] == "Unknown body part keys."
    assert r.data["error"]["details"] == {"unknown": ["tail"]}
    assert not AssessmentNote.objects.exists()


def test_non_string_value_rejected(api_client, tenant, patient):
    r = api_client.post(_url(patient), {"head": 3}, format="json", **on_tenant(tenant))

    assert r.status_code == 400, r.data
    assert r.data["error"]["details"] == {"invalid": ["head"]}


def test_non_object_body_rejected(api_client, tenant, patient):
    r = api_client.post(_url(patient), ["head"], format="json", **on_tenant(tenant))

    assert r.status_code == 400, r.data


def test_section_follows_body_part(api_client, tenant, patient):
    api_client.post(
        _url(patient),
        {"head": "a", "left-wrist": "b", "heart": "c", "liver": "d"},
        format="json",
        **on_tenant(tenant),
    )

    sections = dict(AssessmentNote.objects.values_list("body_part", "section"))
    assert sections == {
        "HEAD": NoteSection.HEAD,
        "LEFT WRIST": NoteSection.ARM,
        "HEART": NoteSection.HEART,
        "LIVER": NoteSection.OTHER,
    }


def test_legacy_prefixed_notes_are_read(api_client, tenant, patient):
    ClinicalNote.objects.create(patient=patient, content="LEFT LUNG: clear to auscultation")
    ClinicalNote.objects.create(patient=patient, content="[RIGHT KNEE] not a body part")
    ClinicalNote.objects.create(patient=patient, content="[SPINE] mild scoliosis")
    ClinicalNote.objects.create(patient=patient, content="LIVER - not palpable")

    got = api_client.get(_url(patient), **on_tenant(tenant))

    assert got.status_code == 200, got.data
    assert got.data == {
        "left-lung": "clear to auscultation",
        "spine": "mild scoliosis",
        "liver": "not palpable",
    }


def test_section_tagged_note_counts_for_its_body_part(api_client, tenant, patient):
    ClinicalNote.objects.create(
        patient=patient,
        section=NoteSection.HEART,
        note_type=NoteType.PROGRESS,
        content="Hypertension follow-up",
    )

    got = api_client.get(_url(patient), **on_tenant(tenant))

    assert got.data == {"heart": "Hypertension follow-up"}


def test_newest_legacy_note_wins(api_client, tenant, patient):
    ClinicalNote.objects.create(patient=patient, content="HEAD: old")
    ClinicalNote.objects.create(patient=patient, content="HEAD: new")

    got = api_client.get(_url(patient), **on_tenant(tenant))

    assert got.data == {"head": "new"}


def test_structured_note_wins_over_legacy(api_client, tenant, patient):
    AssessmentNote.objects.create(patient=patient, tenant_id=tenant.id, body_part="HEAD", content="structured")
    ClinicalNote.objects.create(patient=patient, content="HEAD: legacy")

    got = api_client.get(_url(patient), **on_tenant(tenant))

    assert got.data == {"head": "structured"}


def test_save_retires_prefixed_notes_for_that_body_part(api_client, tenant, patient):
    ClinicalNote.objects.create(patient=patient, content="LEFT LUNG: clear")
    ClinicalNote.objects.create(patient=patient, content="[LEFT LUNG] wheeze")
    ClinicalNote.objects.create(patient=patient, content="HEAD - headache")
    progress = ClinicalNote.objects.create(
        patient=patient,
        section=NoteSection.OTHER,
        note_type=NoteType.PROGRESS,
        content="LEFT LUNG: part of a progress note",
    )

    r = api_client.post(_url(patient), {"left-lung": "crackles"}, format="json", **on_tenant(tenant))

    assert r.status_code == 200, r.data
    remaining = set(ClinicalNote.objects.values_list("content", flat=True))
    assert remaining == {"[LEFT LUNG] wheeze", "HEAD - headache", progress.content}

    got = api_client.get(_url(patient), **on_tenant(tenant))
    assert got.data == {"left-lung": "crackles", "head": "headache"}


def test_save_keeps_general_notes_that_mention_a_body_part(api_client, tenant, patient):
    general = ClinicalNote.objects.create(
        patient=patient,
        content="Heart - regular rate and rhythm, no murmurs. Follow up in 2 weeks.",
    )
    lowercase = ClinicalNote.objects.create(patient=patient, content="head - to-toe exam unremarkable")
    other_case = ClinicalNote.objects.create(patient=patient, content="Heart: see cardiology letter")

    r = api_client.post(_url(patient), {"heart": "ok", "head": None}, format="json", **on_tenant(tenant))

    assert r.status_code == 200, r.data
    remaining = set(ClinicalNote.objects.values_list("content", flat=True))
    assert {general.content, lowercase.content, other_case.content} <= remaining


def test_assessment_requires_permission(user_client, user, tenant, patient):
    assert user_client.get(_url(patient), **on_tenant(tenant)).status_code == 403

    user.emr_profile.permissions = ["VIEW_ASSESSMENT"]
    user.emr_profile.save(update_fields=["permissions"])

    assert user_client.get(_url(patient), **on_tenant(tenant)).status_code == 200


def test_unknown_patient_returns_404(api_client, tenant):
    r = api_client.get("/api/v1/patients/NOPE/assessment/", **on_tenant(tenant))

    assert r.status_code == 404
    assert r.data["error"]["message"] == "Patient not found"


def test_save_and_fetch_are_audited(api_client, tenant, patient):
    api_client.post(_url(patient), {"head": "ok"}, format="json", **on_tenant(tenant))
    api_client.get(_url(patient), **on_tenant(tenant))

    actions = list(UserActionLog.objects.filter(resource="assessment").values_list("action", flat=True))
    assert sorted(actions) == [ActionType.UPDATE, ActionType.VIEW]

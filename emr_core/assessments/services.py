# emr_core/assessments/services.py
from __future__ import annotations

import logging
from typing import Any, Mapping

from django.db import transaction
from rest_framework.exceptions import ValidationError

from emr_core.assessments.constants import body_part_for_key, section_for
from emr_core.assessments.models import AssessmentNote
from emr_core.patients.models import ClinicalNote, NoteType, Patient

logger = logging.getLogger(__name__)


def _validate_entries(entries: Any) -> dict[str, str]:
    """
    {client key -> text|None} -> {BODY PART -> stripped text}.
    Checks every key and value before anything is written.
    """
    if not isinstance(entries, Mapping):
        raise ValidationError({"detail": "Assessment data must be a JSON object."})

    unknown = sorted(str(k) for k in entries if body_part_for_key(k) is None)
    if unknown:
        raise ValidationError({"detail": "Unknown body part keys.", "unknown": unknown})

    invalid = sorted(k for k, v in entries.items() if v is not None and not isinstance(v, str))
    if invalid:
        raise ValidationError({"detail": "Assessment values must be strings or null.", "invalid": invalid})

    return {body_part_for_key(k): (v or "").strip() for k, v in entries.items()}


def _retire_legacy_notes(*, patient: Patient, body_part: str) -> int:
    """
    Deletes older free-text notes written as "<BODY PART>: text" for this body part.
    Only that exact, case-sensitive prefix is retired; "[LABEL] text" and
    "LABEL - text" notes are still read but never deleted.
    """
    prefix = f"{body_part}:"
    stale = [
        note.pk
        for note in ClinicalNote.objects.filter(
            patient=patient, note_type=NoteType.OTHER, content__startswith=prefix
        ).only("pk", "content")
        if note.content.startswith(prefix)
    ]
    if not stale:
        return 0
    deleted, _ = ClinicalNote.objects.filter(pk__in=stale).delete()
    return deleted


class AssessmentService:
    """
    Merges a client's {body part -> text} form into the stored assessment.
    """

    @staticmethod
    def save(*, patient: Patient, entries: Any) -> int:
        """
        Blank/null text clears the body part; anything else overwrites it.
        Returns how many notes were written. All or nothing.
        """
        cleaned = _validate_entries(entries)

        written = 0
        cleared = 0
        with transaction.atomic():
            for body_part, text in cleaned.items():
                _retire_legacy_notes(patient=patient, body_part=body_part)

                if not text:
                    deleted, _ = AssessmentNote.objects.filter(patient=patient, body_part=body_part).delete()
                    cleared += 1 if deleted else 0
                    continue

                AssessmentNote.objects.update_or_create(
                    patient=patient,
                    body_part=body_part,
                    defaults={
                        "tenant_id": patient.tenant_id,
                        "section": section_for(body_part),
                        "content": text,
                    },
                )
                written += 1

        logger.info("Assessment saved for patient %s: %d written, %d cleared", patient.mrn, written, cleared)
        return written

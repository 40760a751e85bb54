# emr_core/assessments/selectors.py
from __future__ import annotations

import re
from typing import Iterable

from django.db.models import Q

from emr_core.assessments.constants import ASSESSABLE_PARTS, BodyPart, key_for
from emr_core.assessments.models import AssessmentNote
from emr_core.patients.models import ClinicalNote, NoteSection, NoteType, Patient


def _label_patterns(label: str) -> tuple[re.Pattern, ...]:
    body = r"\s+".join(re.escape(word) for word in label.split(" "))
    flags = re.IGNORECASE | re.DOTALL
    return (
        re.compile(rf"^{body}:\s*(.+)", flags),
        re.compile(rf"^\[{body}\]\s*(.+)", flags),
        re.compile(rf"^{body}\s*-\s*(.+)", flags),
    )


LEGACY_PATTERNS: tuple[tuple[str, tuple[re.Pattern, ...]], ...] = tuple(
    (key_for(label), _label_patterns(label)) for label in ASSESSABLE_PARTS
)

# Notes tagged with these sections count for that body part even without a prefix
SECTION_BODY_PARTS = {
    NoteSection.HEAD: key_for(BodyPart.HEAD),
    NoteSection.HEART: key_for(BodyPart.HEART),
}


def legacy_note_qs(*, patient: Patient):
    return (
        ClinicalNote.objects.filter(patient=patient)
        .filter(Q(note_type=NoteType.OTHER) | Q(section__in=[NoteSection.HEAD, NoteSection.ARM, NoteSection.HEART]))
        .order_by("-created_at", "-id")
    )


def match_legacy_note(content: str) -> tuple[str, str] | None:
    """
    "LEFT LUNG: clear" / "[LEFT LUNG] clear" / "LEFT LUNG - clear" -> ("left-lung", "clear")
    """
    text = (content or "").strip()
    for key, patterns in LEGACY_PATTERNS:
        for pattern in patterns:
            m = pattern.match(text)
            if m and m.group(1).strip():
                return key, m.group(1).strip()
    return None


def merge_legacy_notes(result: dict[str, str], notes: Iterable[ClinicalNote]) -> dict[str, str]:
    """
    First match per body part wins; notes must arrive newest first.
    """
    for note in notes:
        hit = match_legacy_note(note.content)
        if hit:
            result.setdefault(hit[0], hit[1])
            continue

        section_key = SECTION_BODY_PARTS.get(note.section)
        if section_key and section_key not in result:
            result[section_key] = note.content
    return result


def assessment_map(*, patient: Patient) -> dict[str, str]:
    """
    {client key -> text} for a patient: structured notes first,
    then free-text notes written in the older prefixed format.
    """
    result: dict[str, str] = {}

    for note in AssessmentNote.objects.filter(patient=patient).order_by("-updated_at", "-id"):
        result.setdefault(key_for(note.body_part), note.content)

    return merge_legacy_notes(result, legacy_note_qs(patient=patient))

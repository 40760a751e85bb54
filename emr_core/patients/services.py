# emr_core/patients/services.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional
from uuid import UUID

from django.db import IntegrityError, transaction
from django.utils import timezone
from django.utils.dateparse import parse_date

from emr_core.extraction.normalizers import parse_blood_pressure, parse_number
from emr_core.patients.models import (
    AdvanceCarePlan,
    BloodType,
    ClinicalNote,
    EmergencyContact,
    FamilyHistoryCondition,
    Immunization,
    InsurancePolicy,
    Medication,
    NoteSection,
    NoteType,
    PastMedicalEvent,
    Patient,
    Sex,
    SocialHistory,
    VitalSign,
    VitalType,
)

logger = logging.getLogger(__name__)

DUPLICATE_MRN_MSG = "A patient with this MRN already exists."

EDITABLE_FIELDS = {
    "first_name",
    "last_name",
    "date_of_birth",
    "sex",
    "blood_type",
    "phone_number",
    "email",
    "address_line1",
    "address_line2",
    "city",
    "state",
    "postal_code",
    "country",
}

_BLOOD_TYPES = {label: value for value, label in BloodType.choices}


# -----------------------------
# Extraction -> record mapping
# -----------------------------

def split_name(full_name: Optional[str]) -> tuple[str, str]:
    """
    "Kevin Ketong Gao" -> ("Kevin Ketong", "Gao"); a single word is a first name.
    """
    parts = (full_name or "").split()
    if not parts:
        return "", ""
    if len(parts) == 1:
        return parts[0], ""
    return " ".join(parts[:-1]), parts[-1]


def map_sex(value: Optional[str]) -> str:
    v = (value or "").strip().lower()
    if v in ("male", "m"):
        return Sex.MALE
    if v in ("female", "f"):
        return Sex.FEMALE
    if v == "other":
        return Sex.OTHER
    return Sex.UNKNOWN


def map_blood_type(value: Optional[str]) -> Optional[str]:
    v = (value or "").strip().upper().replace(" ", "")
    if not v:
        return None
    if v in BloodType.values:
        return v
    return _BLOOD_TYPES.get(v)


def parse_loose_date(value: Any) -> Optional[date]:
    """
    ISO dates and US-style 03/15/1995; anything else is ignored.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        parsed = parse_date(text[:10])
    except ValueError:
        parsed = None
    if parsed:
        return parsed
    try:
        return datetime.strptime(text, "%m/%d/%Y").date()
    except ValueError:
        return None


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


@dataclass
class ImportSummary:
    patient: Patient
    created: bool
    counts: dict[str, int] = field(default_factory=dict)


def _vital_rows(patient: Patient, vitals: dict, recorded_at) -> list[VitalSign]:
    rows: list[VitalSign] = []

    numeric = (
        ("heartRate", VitalType.HEART_RATE, "bpm"),
        ("temperature", VitalType.TEMPERATURE, "F"),
        ("weight", VitalType.WEIGHT, "kg"),
        ("height", VitalType.HEIGHT, "m"),
        ("bmi", VitalType.BMI, ""),
    )
    for key, vital_type, unit in numeric:
        value = parse_number(vitals.get(key))
        if value is not None:
            rows.append(
                VitalSign(patient=patient, type=vital_type, unit=unit, numeric_value=value, recorded_at=recorded_at)
            )

    bp = parse_blood_pressure(vitals.get("bloodPressure"))
    if bp:
        rows.append(
            VitalSign(
                patient=patient,
                type=VitalType.BLOOD_PRESSURE,
                unit="mmHg",
                systolic=bp[0],
                diastolic=bp[1],
                recorded_at=recorded_at,
            )
        )
    return rows


class PatientService:
    @staticmethod
    @transaction.atomic
    def create_patient(*, tenant_id: UUID, mrn: str, **fields) -> Patient:
        updates = {k: v for k, v in fields.items() if k in EDITABLE_FIELDS}
        try:
            with transaction.atomic():
                patient = Patient.objects.create(tenant_id=tenant_id, mrn=mrn, **updates)
        except IntegrityError:
            # MRN uniqueness is enforced by constraint; surface readable error.
            raise ValueError(DUPLICATE_MRN_MSG)
        return patient

    @staticmethod
    @transaction.atomic
    def update_patient(*, patient: Patient, data: dict) -> Patient:
        updates = {k: v for k, v in (data or {}).items() if k in EDITABLE_FIELDS | {"mrn"}}
        for k, v in updates.items():
            setattr(patient, k, v)
        try:
            with transaction.atomic():
                patient.save()
        except IntegrityError:
            raise ValueError(DUPLICATE_MRN_MSG)
        return patient

    @staticmethod
    @transaction.atomic
    def delete_patient(*, patient: Patient) -> None:
        # related rows (notes, vitals, assessments, ...) cascade
        patient.delete()

    @staticmethod
    @transaction.atomic
    def import_extraction(*, tenant_id: UUID, mrn: str, result: dict) -> ImportSummary:
        """
        Writes a validated extraction result into the patient's record.
        The patient is matched by MRN within the tenant and created when missing;
        demographic fields are only overwritten by non-blank values.
        Clinical data (vitals, medications, notes, ...) is appended.
        """
        demographics = result.get("demographics") or {}
        vitals = result.get("vitals") or {}

        first_name, last_name = split_name(demographics.get("name"))
        profile: dict[str, Any] = {
            "first_name": first_name,
            "last_name": last_name,
            "date_of_birth": parse_loose_date(demographics.get("dob")),
            "sex": map_sex(demographics.get("sex")) if demographics.get("sex") else None,
            "blood_type": map_blood_type(vitals.get("bloodType")),
            "phone_number": _text(demographics.get("phone")),
            "address_line1": _text(demographics.get("address")),
        }
        profile = {k: v for k, v in profile.items() if v}

        patient = Patient.objects.select_for_update().filter(tenant_id=tenant_id, mrn=mrn).first()
        created = patient is None
        if created:
            patient = Patient.objects.create(tenant_id=tenant_id, mrn=mrn, **profile)
        elif profile:
            for k, v in profile.items():
                setattr(patient, k, v)
            patient.save()

        counts: dict[str, int] = {}
        now = timezone.now()

        insurance = _text(demographics.get("insurance"))
        if insurance:
            InsurancePolicy.objects.get_or_create(
                patient=patient,
                provider_name=insurance[:255],
                defaults={"policy_number": "", "is_primary": not patient.insurance_policies.exists()},
            )
            counts["insurance"] = 1

        contact = _text(demographics.get("emergencyContact"))
        if contact:
            EmergencyContact.objects.create(patient=patient, name=contact[:255])
            counts["emergencyContacts"] = 1

        social = result.get("socialHistory") or {}
        social_fields = {
            "tobacco_use": _text(social.get("smoking"))[:255],
            "drug_use": _text(social.get("drugs"))[:255],
            "alcohol_use": _text(social.get("alcohol"))[:255],
        }
        social_fields = {k: v for k, v in social_fields.items() if v}
        if social_fields:
            SocialHistory.objects.update_or_create(patient=patient, defaults=social_fields)
            counts["socialHistory"] = 1

        vital_rows = _vital_rows(patient, vitals, now)
        VitalSign.objects.bulk_create(vital_rows)
        counts["vitals"] = len(vital_rows)

        meds = [
            Medication(
                patient=patient,
                name=_text(m.get("name"))[:255],
                dose=_text(m.get("dosage"))[:128],
                frequency=_text(m.get("schedule"))[:128],
            )
            for m in result.get("medications") or []
            if _text(m.get("name"))
        ]
        Medication.objects.bulk_create(meds)
        counts["medications"] = len(meds)

        past = [
            PastMedicalEvent(
                patient=patient,
                date=parse_loose_date(c.get("date")),
                body_part=_text(c.get("bodyPart"))[:64],
                description=_text(c.get("notes")),
            )
            for c in result.get("pastConditions") or []
            if _text(c.get("notes"))
        ]
        PastMedicalEvent.objects.bulk_create(past)
        counts["pastConditions"] = len(past)

        shots = [
            Immunization(
                patient=patient,
                vaccine=_text(i.get("notes"))[:255],
                administered_on=parse_loose_date(i.get("date")),
                notes=_text(i.get("notes")),
            )
            for i in result.get("immunizations") or []
            if _text(i.get("notes"))
        ]
        Immunization.objects.bulk_create(shots)
        counts["immunizations"] = len(shots)

        family = [
            FamilyHistoryCondition(
                patient=patient,
                relation=_text(f.get("bodyPart"))[:64],
                condition=_text(f.get("notes")),
            )
            for f in result.get("familyHistory") or []
            if _text(f.get("notes"))
        ]
        FamilyHistoryCondition.objects.bulk_create(family)
        counts["familyHistory"] = len(family)

        notes = []
        general = _text(result.get("generalNotes"))
        if general:
            notes.append(general)
        allergies = _text(result.get("allergies"))
        if allergies:
            notes.append(f"Allergies: {allergies}")
        ClinicalNote.objects.bulk_create(
            [
                ClinicalNote(patient=patient, section=NoteSection.OTHER, note_type=NoteType.OTHER, content=text)
                for text in notes
            ]
        )
        counts["notes"] = len(notes)

        preventive = _text(result.get("preventiveCare"))
        dnr = result.get("dnr") is True
        if dnr or preventive:
            AdvanceCarePlan.objects.create(patient=patient, dnr=dnr, notes=preventive)
            counts["carePlans"] = 1

        logger.info(
            "Imported extraction into patient %s (%s): %s",
            patient.mrn,
            "created" if created else "updated",
            counts,
        )
        return ImportSummary(patient=patient, created=created, counts=counts)

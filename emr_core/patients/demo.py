# emr_core/patients/demo.py
"""
Demo patient for fresh development databases.
"""
from __future__ import annotations

from datetime import date, datetime, timezone
from uuid import UUID

from django.db import transaction

from emr_core.patients.models import (
    AllergySeverity,
    BloodType,
    ClinicalNote,
    NoteSection,
    NoteType,
    Patient,
    Sex,
    SocialHistory,
    VitalType,
)

DEMO_PATIENT = {
    "first_name": "Kevin",
    "last_name": "Ketong Gao",
    "date_of_birth": date(1995, 3, 15),
    "sex": Sex.MALE,
    "blood_type": BloodType.O_POS,
    "address_line1": "123 Tech Street",
    "city": "San Francisco",
    "state": "CA",
    "postal_code": "94105",
    "country": "USA",
    "phone_number": "+1-555-0123",
    "email": "kevin.gao@example.com",
}

ALLERGIES = [
    ("Penicillin", "Skin rash, hives", AllergySeverity.MODERATE, date(2023, 6, 15)),
    ("Shellfish", "Swelling, difficulty breathing", AllergySeverity.SEVERE, date(2020, 8, 10)),
    ("Peanuts", "Mild digestive upset", AllergySeverity.MILD, date(2019, 3, 22)),
]

MEDICATIONS = [
    ("Lisinopril", "10mg", "Once daily", date(2023, 1, 15), "For blood pressure management"),
    ("Vitamin D3", "2000 IU", "Once daily", date(2023, 2, 1), "Supplement for vitamin D deficiency"),
]

PAST_EVENTS = [
    (date(2018, 7, 20), "ABDOMEN", "Appendectomy - successful recovery"),
    (date(2020, 9, 15), "LEFT WRIST", "Fractured left wrist from skateboarding accident"),
    (date(2022, 1, 10), "CHEST", "COVID-19 infection, mild symptoms"),
]

FAMILY_HISTORY = [
    ("Father", "Hypertension", "Diagnosed at age 45, well controlled"),
    ("Mother", "Type 2 Diabetes", "Well controlled with medication"),
    ("Grandfather (paternal)", "Heart disease", "Had heart attack at age 68"),
]

IMMUNIZATIONS = [
    ("COVID-19 (Pfizer)", date(2021, 4, 15), "First dose"),
    ("COVID-19 Booster (Pfizer)", date(2023, 11, 15), "Updated booster"),
    ("Influenza", date(2024, 10, 1), "Annual flu shot"),
]

VITALS_AT = datetime(2024, 1, 15, tzinfo=timezone.utc)

NOTES = [
    (
        NoteSection.OTHER,
        "[2024-01-15 10:30] Patient presents for annual physical examination. Generally feeling well. No acute complaints.",
    ),
    (
        NoteSection.HEART,
        "[2023-12-20 14:45] Routine follow-up for hypertension management. Blood pressure well controlled on current medication.",
    ),
    (
        NoteSection.HEAD,
        "[2023-11-10 09:15] Patient reports occasional headaches, possibly stress-related. Advised stress management techniques.",
    ),
]


@transaction.atomic
def seed_demo_patient(*, tenant_id: UUID, mrn: str = "1") -> Patient:
    """
    Creates (or resets) the demo patient with a full set of related records.
    Running it twice leaves one copy of everything.
    """
    patient, _ = Patient.objects.update_or_create(tenant_id=tenant_id, mrn=mrn, defaults=DEMO_PATIENT)

    for related in (
        patient.allergies,
        patient.medications,
        patient.vitals,
        patient.past_medical,
        patient.immunizations,
        patient.family_history,
        patient.insurance_policies,
        patient.emergency_contacts,
        patient.notes,
    ):
        related.all().delete()

    patient.emergency_contacts.create(
        name="Sarah Gao",
        relation="Sister",
        phone="+1-555-0124",
        address="456 Family Lane, San Francisco, CA 94102",
    )
    patient.insurance_policies.create(
        provider_name="Blue Cross Blue Shield",
        policy_number="BCBS123456789",
        group_number="GRP001",
        plan_name="Premium Health Plan",
        effective_date=date(2023, 1, 1),
        is_primary=True,
    )
    for substance, reaction, severity, noted_on in ALLERGIES:
        patient.allergies.create(substance=substance, reaction=reaction, severity=severity, noted_on=noted_on)
    for name, dose, frequency, start, notes in MEDICATIONS:
        patient.medications.create(name=name, dose=dose, frequency=frequency, start_date=start, notes=notes)
    for when, body_part, description in PAST_EVENTS:
        patient.past_medical.create(date=when, body_part=body_part, description=description)
    for relation, condition, notes in FAMILY_HISTORY:
        patient.family_history.create(relation=relation, condition=condition, notes=notes)
    for vaccine, given, notes in IMMUNIZATIONS:
        patient.immunizations.create(vaccine=vaccine, administered_on=given, notes=notes)

    SocialHistory.objects.update_or_create(
        patient=patient,
        defaults={
            "tobacco_use": "Former smoker, quit 2019",
            "alcohol_use": "Social drinker, 2-3 drinks per week",
            "drug_use": "No illicit drug use",
            "occupation": "Software Engineer",
            "notes": "Active lifestyle, exercises regularly",
        },
    )

    patient.vitals.create(type=VitalType.BLOOD_PRESSURE, systolic=128, diastolic=82, unit="mmHg", recorded_at=VITALS_AT)
    for vital_type, value, unit in (
        (VitalType.HEART_RATE, 72, "bpm"),
        (VitalType.TEMPERATURE, 98.6, "F"),
        (VitalType.HEIGHT, 1.75, "m"),
        (VitalType.WEIGHT, 70, "kg"),
        (VitalType.BMI, 22.9, "kg/m2"),
    ):
        patient.vitals.create(type=vital_type, numeric_value=value, unit=unit, recorded_at=VITALS_AT)

    ClinicalNote.objects.bulk_create(
        [ClinicalNote(patient=patient, section=section, note_type=NoteType.PROGRESS, content=text) for section, text in NOTES]
    )
    return patient

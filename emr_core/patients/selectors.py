# emr_core/patients/selectors.py
from __future__ import annotations

from typing import Any
from uuid import UUID

from django.db.models import Q, QuerySet
from rest_framework.exceptions import NotFound

from emr_core.patients.models import Patient, VitalType

PATIENT_NOT_FOUND_MSG = "Patient not found"
RECENT_NOTES_LIMIT = 10


def get_patient_by_mrn(*, tenant_id: UUID, mrn: str) -> Patient:
    return Patient.objects.get(tenant_id=tenant_id, mrn=mrn)


def get_patient_or_404(*, tenant_id: UUID, mrn: str) -> Patient:
    try:
        return get_patient_by_mrn(tenant_id=tenant_id, mrn=mrn)
    except Patient.DoesNotExist:
        raise NotFound(PATIENT_NOT_FOUND_MSG)


def search_patients(
    *,
    tenant_id: UUID,
    q: str | None = None,
    search_type: str = "name",
) -> QuerySet[Patient]:
    """
    type=id   -> MRN substring
    type=name -> any whitespace-separated part in first or last name
    Case-insensitive. Empty query lists everyone in the tenant.
    """
    qs = Patient.objects.filter(tenant_id=tenant_id)

    qv = (q or "").strip()
    if qv:
        if search_type == "id":
            qs = qs.filter(mrn__icontains=qv)
        else:
            cond = Q()
            for part in qv.split():
                cond |= Q(first_name__icontains=part) | Q(last_name__icontains=part)
            qs = qs.filter(cond)

    return qs.order_by("last_name", "first_name", "mrn")


def _iso(d) -> str | None:
    return d.isoformat() if d else None


def _latest_vitals(patient: Patient) -> dict[str, Any]:
    latest: dict[str, Any] = {}
    for v in patient.vitals.order_by("-recorded_at", "-id"):
        latest.setdefault(v.type, v)

    def num(t):
        row = latest.get(t)
        return row.numeric_value if row else None

    bp = latest.get(VitalType.BLOOD_PRESSURE)
    height = num(VitalType.HEIGHT)
    weight = num(VitalType.WEIGHT)
    return {
        "bloodPressure": {"systolic": bp.systolic, "diastolic": bp.diastolic} if bp else None,
        "heartRate": num(VitalType.HEART_RATE),
        "temperature": num(VitalType.TEMPERATURE),
        "height": f"{height:g}m" if height is not None else None,
        "weight": f"{weight:g}kg" if weight is not None else None,
        "bmi": num(VitalType.BMI),
        "respiratoryRate": num(VitalType.RESPIRATION_RATE),
        "oxygenSaturation": num(VitalType.SPO2),
    }


def patient_record(*, patient: Patient) -> dict[str, Any]:
    """
    Full dashboard read-model for one patient.
    """
    policies = list(patient.insurance_policies.order_by("-is_primary", "id"))
    primary = next((p for p in policies if p.is_primary), None)
    secondary = next((p for p in policies if not p.is_primary), None)

    # RelatedObjectDoesNotExist is an AttributeError
    social = getattr(patient, "social_history", None)

    return {
        "id": str(patient.id),
        "name": patient.full_name,
        "patientId": patient.mrn,
        "dob": _iso(patient.date_of_birth),
        "sex": patient.sex,
        "bloodType": patient.get_blood_type_display() if patient.blood_type else None,
        "phone": patient.phone_number or None,
        "email": patient.email or None,
        "address": (
            {
                "line1": patient.address_line1,
                "line2": patient.address_line2 or None,
                "city": patient.city,
                "state": patient.state,
                "postalCode": patient.postal_code,
            }
            if patient.address_line1
            else None
        ),
        "insurance": {
            "primary": (
                {
                    "provider": primary.provider_name,
                    "policyNumber": primary.policy_number,
                    "groupNumber": primary.group_number or None,
                }
                if primary
                else None
            ),
            "secondary": (
                {"provider": secondary.provider_name, "policyNumber": secondary.policy_number}
                if secondary
                else None
            ),
        },
        "emergencyContacts": [
            {"name": c.name, "relationship": c.relation, "phone": c.phone}
            for c in patient.emergency_contacts.order_by("id")
        ],
        "allergies": [
            {
                "substance": a.substance,
                "reaction": a.reaction or "Unknown reaction",
                "severity": a.severity.lower(),
                "notedOn": _iso(a.noted_on),
            }
            for a in patient.allergies.filter(active=True).order_by("-noted_on", "-id")
        ],
        "medications": [
            {
                "name": m.name,
                "dose": m.dose or "Unknown dose",
                "frequency": m.frequency or "As needed",
                "active": m.active,
            }
            for m in patient.medications.filter(active=True).order_by("-start_date", "-id")
        ],
        "socialHistory": (
            {
                "tobacco": social.tobacco_use,
                "alcohol": social.alcohol_use,
                "drugs": social.drug_use,
                "occupation": social.occupation,
            }
            if social
            else None
        ),
        "pastConditions": [
            {"date": _iso(e.date) or "Unknown date", "bodyPart": e.body_part or "OTHER", "notes": e.description}
            for e in patient.past_medical.order_by("-date", "-id")
        ],
        "immunizations": [
            {"vaccine": i.vaccine, "administeredOn": _iso(i.administered_on), "notes": i.notes or None}
            for i in patient.immunizations.order_by("-administered_on", "-id")
        ],
        "familyHistory": [
            {"relation": f.relation, "condition": f.condition, "notes": f.notes or None}
            for f in patient.family_history.order_by("id")
        ],
        "vitals": _latest_vitals(patient),
        "recentNotes": [
            {"date": n.created_at.date().isoformat(), "section": n.section, "content": n.content}
            for n in patient.notes.order_by("-created_at", "-id")[:RECENT_NOTES_LIMIT]
        ],
        "carePlans": [
            {"dnr": c.dnr, "notes": c.notes or None, "createdAt": c.created_at.isoformat()}
            for c in patient.care_plans.order_by("-created_at", "-id")
        ],
    }

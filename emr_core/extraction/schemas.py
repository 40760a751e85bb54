# emr_core/extraction/schemas.py
"""
Shapes the generative model must return, as DRF serializers over strict fields.
Unknown keys are dropped; missing optional keys stay absent.
"""
from __future__ import annotations

from rest_framework import serializers

from emr_core.extraction.fields import (
    StrictBooleanField,
    StrictCharField,
    StrictChoiceField,
    confidence_field,
)


def _optional_text(**kwargs) -> StrictCharField:
    return StrictCharField(required=False, **kwargs)


# -----------------------------
# parse-notes
# -----------------------------

class DemographicsSchema(serializers.Serializer):
    name = _optional_text()
    dob = _optional_text()
    sex = _optional_text()
    address = _optional_text()
    phone = _optional_text()
    insurance = _optional_text()
    emergencyContact = _optional_text()
    patientId = _optional_text()


class VitalsSchema(serializers.Serializer):
    bloodPressure = _optional_text()
    heartRate = _optional_text()
    temperature = _optional_text()
    weight = _optional_text()
    height = _optional_text()
    bmi = _optional_text()
    bloodType = _optional_text()


class MedicationSchema(serializers.Serializer):
    name = StrictCharField()
    dosage = _optional_text()
    schedule = _optional_text()


class SocialHistorySchema(serializers.Serializer):
    smoking = _optional_text()
    drugs = _optional_text()
    alcohol = _optional_text()


class DatedBodyPartNoteSchema(serializers.Serializer):
    date = _optional_text()
    bodyPart = StrictCharField()
    notes = StrictCharField()


class ImmunizationSchema(serializers.Serializer):
    date = _optional_text()
    notes = StrictCharField()


class MedicalExtractionResultSchema(serializers.Serializer):
    demographics = DemographicsSchema(required=False)
    vitals = VitalsSchema(required=False)
    medications = MedicationSchema(many=True, required=False)
    socialHistory = SocialHistorySchema(required=False)
    pastConditions = DatedBodyPartNoteSchema(many=True, required=False)
    immunizations = ImmunizationSchema(many=True, required=False)
    # bodyPart holds the relation here ("Father")
    familyHistory = DatedBodyPartNoteSchema(many=True, required=False)
    allergies = _optional_text()
    generalNotes = _optional_text()
    dnr = StrictBooleanField(required=False)
    preventiveCare = _optional_text()


# -----------------------------
# categorize-notes
# -----------------------------

class CategorySchema(serializers.Serializer):
    category = StrictCharField()
    extractedText = StrictCharField()
    confidence = confidence_field()
    suggestions = serializers.ListField(child=StrictCharField(), required=False)


class CategorizationResultSchema(serializers.Serializer):
    categories = CategorySchema(many=True)
    summary = StrictCharField()
    keyFindings = serializers.ListField(child=StrictCharField())


# -----------------------------
# clinical-search
# -----------------------------

URGENCY_CHOICES = ("low", "medium", "high")
SECTION_CHOICES = (
    "allergies",
    "medications",
    "socialHistory",
    "pastConditions",
    "familyHistory",
    "vitals",
    "immunizations",
    "general",
)
DATA_STATUS_CHOICES = ("present", "missing", "concerning")
WARNING_SEVERITY_CHOICES = ("caution", "warning", "critical")


class RelevantConditionSchema(serializers.Serializer):
    condition = StrictCharField()
    relevance = StrictCharField()
    urgency = StrictChoiceField(choices=URGENCY_CHOICES)
    section = StrictChoiceField(choices=SECTION_CHOICES)
    dataStatus = StrictChoiceField(choices=DATA_STATUS_CHOICES)
    specificFindings = StrictCharField()


class ClinicalWarningSchema(serializers.Serializer):
    warning = StrictCharField()
    severity = StrictChoiceField(choices=WARNING_SEVERITY_CHOICES)
    basedOn = StrictCharField()


class ClinicalSearchResultSchema(serializers.Serializer):
    summary = StrictCharField()
    relevantConditions = RelevantConditionSchema(many=True)
    warnings = ClinicalWarningSchema(many=True)


# -----------------------------
# scan-id
# -----------------------------

class IdAdditionalInfoSchema(serializers.Serializer):
    id_number = _optional_text()
    date_of_birth = _optional_text()
    address = _optional_text()


class IdScanResultSchema(serializers.Serializer):
    name = StrictCharField()
    confidence = confidence_field()
    additional_info = IdAdditionalInfoSchema(required=False)

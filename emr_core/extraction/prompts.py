# emr_core/extraction/prompts.py
from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Optional

from django.conf import settings
from rest_framework.exceptions import ValidationError

from emr_core.assessments.constants import BodyPart
from emr_core.common.api.exceptions import InputTooLong
from emr_core.extraction.normalizers import iso_timestamp


def require_text(value: Any, *, missing_msg: str, too_long_msg: str, max_length: int) -> str:
    """
    Input guard that runs before any model call.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValidationError({"detail": missing_msg})
    if len(value) > max_length:
        raise InputTooLong(message=too_long_msg, max_length=max_length, length=len(value))
    return value


def require_notes(notes: Any, *, field: str = "notes") -> str:
    max_length = settings.EMR_MAX_NOTE_LENGTH
    label = "Notes" if field == "notes" else "Text"
    return require_text(
        notes,
        missing_msg=f"Invalid or missing {field} parameter",
        too_long_msg=f"{label} too long. Maximum {max_length:,} characters allowed.",
        max_length=max_length,
    )


def require_query(query: Any) -> str:
    return require_text(
        query,
        missing_msg="Query is required",
        too_long_msg="Query too long",
        max_length=settings.EMR_MAX_SEARCH_QUERY_LENGTH,
    )


MEDICAL_EXTRACTION_OUTLINE = """{
  "demographics": {"name": str, "dob": str, "sex": str, "address": str, "phone": str,
                   "insurance": str, "emergencyContact": str, "patientId": str},
  "vitals": {"bloodPressure": str, "heartRate": str, "temperature": str, "weight": str,
             "height": str, "bmi": str, "bloodType": str},
  "medications": [{"name": str, "dosage": str, "schedule": str}],
  "socialHistory": {"smoking": str, "drugs": str, "alcohol": str},
  "pastConditions": [{"date": str, "bodyPart": str, "notes": str}],
  "immunizations": [{"date": str, "notes": str}],
  "familyHistory": [{"date": str, "bodyPart": str, "notes": str}],
  "allergies": str,
  "generalNotes": str,
  "dnr": bool,
  "preventiveCare": str
}"""

PARSE_NOTES_TEMPLATE = """
You are a medical AI assistant specialized in parsing clinical notes and extracting structured EMR data.

Parse the following medical notes and extract relevant information. Be very thorough and extract as much relevant medical information as possible, even from casual or conversational language.

MEDICAL NOTES:
"{notes}"

IMPORTANT PARSING INSTRUCTIONS:
1. Extract information even from casual, conversational language
2. Interpret medical shorthand and common abbreviations
3. Infer medical context from colloquial descriptions
4. For family history, put the relationship (mother, father, etc.) in the "bodyPart" field
5. For chronic conditions, note them in pastConditions
6. Be liberal in interpretation, e.g. describe mental health history in clinical terms
7. Convert casual drug references to appropriate medical terminology
8. Extract dates even from partial information (e.g., "2017 September 5th" -> "2017-09-05")
9. CURRENT INJURIES/CONDITIONS: If the notes describe current/present injuries or conditions (e.g., "presented with", "has a wound", "is bleeding"), treat these as pastConditions with today's date ({today})
10. AUTOMATIC TIMESTAMPING: Prefix every pastConditions note with "[{now}] "
11. CURRENT ALLERGIES: If allergies are mentioned as current reactions (e.g., "allergy to poison"), include them in the allergies field
12. PROGNOSIS: Include prognosis information in the generalNotes field
13. BODY PART MAPPING: Use exactly one of these values for pastConditions bodyPart:
    {body_parts}
    - "head" -> "HEAD", "neck" -> "NECK", "chest" -> "CHEST", "heart" -> "HEART"
    - "lung/lungs" -> "LEFT LUNG" or "RIGHT LUNG"
    - "abdomen/belly/stomach area" -> "ABDOMEN"; "stomach" (organ) -> "STOMACH"; "liver" -> "LIVER"
    - "kidney" -> "LEFT KIDNEY" or "RIGHT KIDNEY"
    - "shoulder" -> "LEFT SHOULDER" or "RIGHT SHOULDER"
    - "arm" -> "LEFT ARM" or "RIGHT ARM"; "forearm" -> "LEFT FOREARM" or "RIGHT FOREARM"
    - "wrist" -> "LEFT WRIST" or "RIGHT WRIST"
    - "thigh/leg" -> "LEFT THIGH" or "RIGHT THIGH"; "shin/calf" -> "LEFT SHIN" or "RIGHT SHIN"
    - "foot/ankle" -> "LEFT FOOT" or "RIGHT FOOT"
    - "spine/back" -> "SPINE"; "pelvis/hip" -> "PELVIS"
    - If side not specified, use the general area (lungs -> "CHEST", kidneys -> "ABDOMEN") or "OTHER"
14. VITAL SIGNS STANDARDIZATION:
    - Blood Pressure: always "systolic/diastolic" in mmHg (e.g., "120/80")
    - Heart Rate: bpm as a bare number (e.g., "72" not "72 bpm")
    - Temperature: Fahrenheit with one decimal; Celsius to Fahrenheit is (C x 9/5) + 32 (37C -> 98.6, 38C -> 100.4)
    - Weight: whole kilograms as a bare number; lbs to kg is lbs / 2.20462 (154 lbs -> 70, 176 lbs -> 80)
    - Height: meters with at most 2 decimals; feet'inches to meters is (feet x 12 + inches) x 0.0254, cm to meters is cm / 100 (5'9" -> 1.75, 175cm -> 1.75, 6'0" -> 1.83)
    - BMI: if weight and height are given but BMI is not, BMI = weight(kg) / height(m)^2 rounded to 1 decimal
    - Blood Type: exact type with Rh factor (A+, A-, B+, B-, AB+, AB-, O+, O-)

Return ONLY a single JSON object with this structure. Every key is optional; omit keys with no data instead of using null. All values are strings except "dnr" (true/false):
{outline}
"""


def build_parse_notes_prompt(notes: str, captured_at: datetime) -> str:
    return PARSE_NOTES_TEMPLATE.format(
        notes=notes,
        today=captured_at.date().isoformat(),
        now=iso_timestamp(captured_at),
        body_parts=", ".join(f'"{v}"' for v in BodyPart.values),
        outline=MEDICAL_EXTRACTION_OUTLINE,
    )


CATEGORIZATION_TEMPLATE = """
Analyze the following medical text and categorize it into EMR sections. Provide confidence scores and key findings.

MEDICAL TEXT:
"{text}"

Categories to detect and analyze:
- demographics: Patient identifying information (name, DOB, address, insurance, etc.)
- vitals: Vital signs (blood pressure, heart rate, temperature, weight, height, BMI, blood type)
- medications: Current and past medications with dosages and schedules
- socialHistory: Smoking, drug use, alcohol consumption history
- pastConditions: Previous medical conditions, injuries, surgeries
- immunizations: Vaccination history
- familyHistory: Family medical history
- allergies: Known allergies and reactions
- carePlans: Treatment plans, care instructions, follow-up plans

For each detected category:
1. Extract the relevant text from the medical notes
2. Provide a confidence score (0.0 to 1.0) for how certain you are about the categorization
3. Include suggestions for additional context or interpretations if helpful

Also provide:
- A brief summary of the overall medical text content
- Key medical findings as bullet points

Return ONLY strict JSON with no extra commentary, shaped as:
{{"categories": [{{"category": str, "extractedText": str, "confidence": number, "suggestions": [str]}}],
  "summary": str, "keyFindings": [str]}}
"""


def build_categorization_prompt(text: str) -> str:
    return CATEGORIZATION_TEMPLATE.format(text=text)


CLINICAL_SEARCH_TEMPLATE = """
You are a clinical decision support AI that must analyze a patient query against their ACTUAL medical data. Be specific about what IS and ISN'T in their record.

PATIENT QUERY: "{query}"

COMPLETE PATIENT DATA:
{patient_data}

INSTRUCTIONS:
1. ANALYZE ACTUAL DATA: be specific about what this patient has or lacks; no generic recommendations.
2. For each clinical concern set dataStatus to "present" (cite the data), "missing" (not in the record) or "concerning" (present and worrying, say why).
3. BE SPECIFIC WITH FINDINGS: e.g. "No tetanus vaccination found in immunization record" rather than "check tetanus status".
4. MEDICATION ANALYSIS: drug interactions with query-related treatments, contraindications from allergies, expected medications that are missing.
5. Assign each concern a section: allergies, medications, socialHistory, pastConditions, familyHistory, vitals, immunizations or general.
6. WARNINGS MUST BE DATA-SPECIFIC and cite the data they are based on.

Return ONLY a JSON object shaped as:
{{"summary": str,
  "relevantConditions": [{{"condition": str, "relevance": str, "urgency": "low"|"medium"|"high",
                          "section": str, "dataStatus": "present"|"missing"|"concerning",
                          "specificFindings": str}}],
  "warnings": [{{"warning": str, "severity": "caution"|"warning"|"critical", "basedOn": str}}]}}
"""


def build_clinical_search_prompt(query: str, patient_data: Optional[dict]) -> str:
    rendered = json.dumps(patient_data, indent=2, default=str) if patient_data else "No patient data provided"
    return CLINICAL_SEARCH_TEMPLATE.format(query=query, patient_data=rendered)


ID_SCAN_PROMPT = """
Analyze this image of an identification document (ID card, driver's license, passport, etc.) and extract the person's full name.

Instructions:
1. Look for text that appears to be a person's name (usually prominently displayed)
2. Extract the complete name as it appears on the ID
3. Provide a confidence score (0.0 to 1.0) for how certain you are about the extraction
4. If you can see other information like ID number, date of birth, or address, include those as well
5. If the image is unclear or doesn't contain an ID, set confidence to 0 and name to "Unable to extract"

Focus on accuracy: a lower confidence is better than a wrong guess.

Return ONLY a JSON object shaped as:
{"name": str, "confidence": number,
 "additional_info": {"id_number": str, "date_of_birth": str, "address": str}}
"""


def build_id_scan_prompt() -> str:
    return ID_SCAN_PROMPT

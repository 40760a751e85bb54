# emr_core/extraction/normalizers.py
"""
Deterministic unit and vocabulary rules for extracted clinical data.

The same rules are spelled out to the model in the parse-notes prompt;
these functions re-apply them so results can be checked without the model.
"""
from __future__ import annotations

import copy
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from emr_core.assessments.constants import BodyPart

LBS_PER_KG = 2.20462
METERS_PER_INCH = 0.0254


# -----------------------------
# Units
# -----------------------------

def celsius_to_fahrenheit(celsius: float) -> float:
    return round(celsius * 9 / 5 + 32, 1)


def pounds_to_kilograms(pounds: float) -> int:
    return int(round(pounds / LBS_PER_KG))


def feet_inches_to_meters(feet: float, inches: float = 0) -> float:
    return round((feet * 12 + inches) * METERS_PER_INCH, 2)


def centimeters_to_meters(centimeters: float) -> float:
    return round(centimeters / 100, 2)


def body_mass_index(weight_kg: float, height_m: float) -> float:
    if height_m <= 0:
        raise ValueError("height must be positive")
    return round(weight_kg / (height_m ** 2), 1)


def format_blood_pressure(systolic: int, diastolic: int) -> str:
    return f"{int(systolic)}/{int(diastolic)}"


def format_number(value: float) -> str:
    """
    80.0 -> "80", 1.75 -> "1.75"
    """
    return f"{value:g}"


_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")
_BP_RE = re.compile(r"(\d{2,3})\s*[/\\]\s*(\d{2,3})")


def parse_number(text: Any) -> Optional[float]:
    """
    First number in a free-text value ("72 bpm" -> 72.0), or None.
    """
    if text is None:
        return None
    m = _NUMBER_RE.search(str(text))
    return float(m.group(0)) if m else None


def parse_blood_pressure(text: Any) -> Optional[tuple[int, int]]:
    if text is None:
        return None
    m = _BP_RE.search(str(text))
    if not m:
        return None
    return int(m.group(1)), int(m.group(2))


# -----------------------------
# Body-part vocabulary
# -----------------------------

# word -> base part; "LUNG" etc. are lateral and need a side
_PART_WORDS = {
    "head": "HEAD",
    "skull": "HEAD",
    "scalp": "HEAD",
    "neck": "NECK",
    "chest": "CHEST",
    "thorax": "CHEST",
    "rib": "CHEST",
    "ribs": "CHEST",
    "heart": "HEART",
    "cardiac": "HEART",
    "lung": "LUNG",
    "lungs": "LUNG",
    "abdomen": "ABDOMEN",
    "abdominal": "ABDOMEN",
    "belly": "ABDOMEN",
    "tummy": "ABDOMEN",
    "stomach": "STOMACH",
    "liver": "LIVER",
    "hepatic": "LIVER",
    "kidney": "KIDNEY",
    "kidneys": "KIDNEY",
    "renal": "KIDNEY",
    "shoulder": "SHOULDER",
    "shoulders": "SHOULDER",
    "forearm": "FOREARM",
    "forearms": "FOREARM",
    "arm": "ARM",
    "arms": "ARM",
    "wrist": "WRIST",
    "wrists": "WRIST",
    "thigh": "THIGH",
    "thighs": "THIGH",
    "leg": "THIGH",
    "legs": "THIGH",
    "shin": "SHIN",
    "shins": "SHIN",
    "calf": "SHIN",
    "calves": "SHIN",
    "foot": "FOOT",
    "feet": "FOOT",
    "ankle": "FOOT",
    "spine": "SPINE",
    "spinal": "SPINE",
    "back": "SPINE",
    "lumbar": "SPINE",
    "pelvis": "PELVIS",
    "pelvic": "PELVIS",
    "hip": "PELVIS",
    "hips": "PELVIS",
}

# Lateral structure mentioned without a side -> general area
_UNSIDED_FALLBACK = {
    "LUNG": BodyPart.CHEST,
    "KIDNEY": BodyPart.ABDOMEN,
}

_LATERAL = {"LUNG", "KIDNEY", "SHOULDER", "FOREARM", "ARM", "WRIST", "THIGH", "SHIN", "FOOT"}


def canonical_body_part(mention: Any) -> str:
    """
    Free-text anatomical mention -> BodyPart value.

    "left lung" -> "LEFT LUNG"; "lungs" -> "CHEST"; "sore calf" -> "OTHER" (no side);
    "stomach area" -> "ABDOMEN"; anything unrecognised -> "OTHER".
    """
    if not isinstance(mention, str):
        return BodyPart.OTHER

    text = mention.strip().lower()
    if not text:
        return BodyPart.OTHER
    if text.upper() in BodyPart.values:
        return text.upper()

    words = re.findall(r"[a-z]+", text)
    if "stomach" in words and "area" in words:
        return BodyPart.ABDOMEN

    sides = {w for w in words if w in ("left", "right")}
    side = sides.pop().upper() if len(sides) == 1 else None

    for word in words:
        part = _PART_WORDS.get(word)
        if part is None:
            continue
        if part not in _LATERAL:
            return part
        if side:
            return f"{side} {part}"
        return _UNSIDED_FALLBACK.get(part, BodyPart.OTHER)

    return BodyPart.OTHER


# -----------------------------
# Timestamps
# -----------------------------

_TIMESTAMP_PREFIX_RE = re.compile(r"^\[\d{4}-\d{2}-\d{2}T[^\]]+\]\s")


def iso_timestamp(moment: datetime) -> str:
    """
    2025-01-31T09:15:00.000Z (UTC, millisecond precision).
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def timestamp_note(note: str, captured_at: datetime) -> str:
    """
    "[<capture time>] note". Notes that already carry a prefix are left alone.
    """
    note = (note or "").strip()
    if _TIMESTAMP_PREFIX_RE.match(note):
        return note
    return f"[{iso_timestamp(captured_at)}] {note}"


# -----------------------------
# Raw-text vitals
# -----------------------------

_FLAGS = re.IGNORECASE
_NUM = r"(\d+(?:\.\d+)?)"

_WEIGHT_LBS_RE = re.compile(rf"{_NUM}\s*(?:lbs?|pounds?)\b", _FLAGS)
_WEIGHT_KG_RE = re.compile(rf"{_NUM}\s*(?:kgs?|kilograms?)\b", _FLAGS)
_HEIGHT_FT_RE = re.compile(
    r"\b(\d)\s*(?:'|’|ft\b|feet\b|foot\b)\s*(?:(\d{1,2}(?:\.\d+)?)\s*(?:\"|”|''|in\b|inches\b)?)?",
    _FLAGS,
)
_HEIGHT_CM_RE = re.compile(rf"{_NUM}\s*(?:cm|centimet(?:er|re)s?)\b", _FLAGS)
_HEIGHT_M_RE = re.compile(r"\b(\d(?:\.\d+)?)\s*(?:m|met(?:er|re)s?)\b", _FLAGS)
_TEMP_UNIT_RE = re.compile(r"\b(\d{2,3}(?:\.\d+)?)\s*(°)?\s*([CF])\b", _FLAGS)
_TEMP_PREFIX_RE = re.compile(r"\btemp(?:erature)?\b\D{0,12}?(\d{2,3}(?:\.\d+)?)(?:\s*°?\s*([CF])\b)?", _FLAGS)
_BP_CONTEXT_RE = re.compile(r"\b(?:bp|blood\s+pressure)\b\D{0,20}?(\d{2,3})\s*/\s*(\d{2,3})", _FLAGS)
_BP_MMHG_RE = re.compile(r"\b(\d{2,3})\s*/\s*(\d{2,3})\s*mm\s*hg\b", _FLAGS)
_HR_CONTEXT_RE = re.compile(r"\b(?:hr|heart\s+rate|pulse)\b\D{0,15}?(\d{2,3})", _FLAGS)
_HR_BPM_RE = re.compile(r"\b(\d{2,3})\s*(?:bpm|beats\s+per\s+minute)\b", _FLAGS)
_BMI_RE = re.compile(r"\bbmi\b\D{0,10}?(\d{1,2}(?:\.\d+)?)", _FLAGS)

# Bare temperatures at or below this are read as Celsius
CELSIUS_CEILING = 45

# Unit-only readings without a degree sign must fall in these ranges ("62 F" is an age)
BODY_TEMP_RANGE_C = (30, 45)
BODY_TEMP_RANGE_F = (90, 110)


@dataclass(frozen=True)
class ExtractedVitals:
    weight_kg: Optional[float] = None
    height_m: Optional[float] = None
    temperature_f: Optional[float] = None
    blood_pressure: Optional[str] = None
    heart_rate: Optional[int] = None
    bmi: Optional[float] = None

    def as_schema(self) -> dict[str, str]:
        """
        Same shape and string formatting as the "vitals" object of an extraction result.
        """
        out: dict[str, str] = {}
        if self.blood_pressure:
            out["bloodPressure"] = self.blood_pressure
        if self.heart_rate is not None:
            out["heartRate"] = str(self.heart_rate)
        if self.temperature_f is not None:
            out["temperature"] = format_number(self.temperature_f)
        if self.weight_kg is not None:
            out["weight"] = format_number(self.weight_kg)
        if self.height_m is not None:
            out["height"] = format_number(self.height_m)
        if self.bmi is not None:
            out["bmi"] = format_number(self.bmi)
        return out


def _weight(text: str) -> Optional[float]:
    m = _WEIGHT_LBS_RE.search(text)
    if m:
        return float(pounds_to_kilograms(float(m.group(1))))
    m = _WEIGHT_KG_RE.search(text)
    if m:
        return float(m.group(1))
    return None


def _height(text: str) -> Optional[float]:
    m = _HEIGHT_FT_RE.search(text)
    if m:
        return feet_inches_to_meters(float(m.group(1)), float(m.group(2) or 0))
    m = _HEIGHT_CM_RE.search(text)
    if m:
        return centimeters_to_meters(float(m.group(1)))
    m = _HEIGHT_M_RE.search(text)
    if m and 0.3 <= float(m.group(1)) <= 2.7:
        return round(float(m.group(1)), 2)
    return None


def _temperature(text: str) -> Optional[float]:
    m = _TEMP_PREFIX_RE.search(text)
    if m:
        value = float(m.group(1))
        unit = (m.group(2) or "").upper()
        if unit == "C" or (not unit and value <= CELSIUS_CEILING):
            return celsius_to_fahrenheit(value)
        return round(value, 1)

    for m in _TEMP_UNIT_RE.finditer(text):
        value = float(m.group(1))
        is_celsius = m.group(3).upper() == "C"
        low, high = BODY_TEMP_RANGE_C if is_celsius else BODY_TEMP_RANGE_F
        if not m.group(2) and not low <= value <= high:
            continue
        return celsius_to_fahrenheit(value) if is_celsius else round(value, 1)
    return None


def _blood_pressure(text: str) -> Optional[str]:
    m = _BP_CONTEXT_RE.search(text) or _BP_MMHG_RE.search(text)
    if m:
        return format_blood_pressure(int(m.group(1)), int(m.group(2)))
    return None


def _heart_rate(text: str) -> Optional[int]:
    m = _HR_CONTEXT_RE.search(text) or _HR_BPM_RE.search(text)
    return int(m.group(1)) if m else None


def extract_vitals(text: str) -> ExtractedVitals:
    """
    Reads vitals straight out of raw note text, already normalised:
    kg, meters, Fahrenheit, "sys/dia", bpm. BMI is derived from the
    rounded weight and height when not stated.
    """
    text = text or ""
    weight = _weight(text)
    height = _height(text)

    m = _BMI_RE.search(text)
    bmi = float(m.group(1)) if m else None
    if bmi is None and weight is not None and height:
        bmi = body_mass_index(weight, height)

    return ExtractedVitals(
        weight_kg=weight,
        height_m=height,
        temperature_f=_temperature(text),
        blood_pressure=_blood_pressure(text),
        heart_rate=_heart_rate(text),
        bmi=bmi,
    )


# -----------------------------
# Post-validation spot check
# -----------------------------

def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def finalize_extraction(result: dict[str, Any], captured_at: datetime) -> dict[str, Any]:
    """
    Applies the deterministic rules to a validated extraction result:
      - BMI filled in when weight and height are known and BMI is missing
      - past-condition body parts mapped onto the BodyPart vocabulary
      - past-condition notes carry the capture timestamp
    Returns a new dict; the input is not modified.
    """
    out = copy.deepcopy(result)

    vitals = out.get("vitals")
    if isinstance(vitals, dict) and _blank(vitals.get("bmi")):
        weight = parse_number(vitals.get("weight"))
        height = parse_number(vitals.get("height"))
        if weight and height:
            vitals["bmi"] = format_number(body_mass_index(weight, height))

    for condition in out.get("pastConditions") or []:
        condition["bodyPart"] = canonical_body_part(condition.get("bodyPart"))
        condition["notes"] = timestamp_note(condition.get("notes", ""), captured_at)

    return out

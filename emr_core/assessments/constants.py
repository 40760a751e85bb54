# emr_core/assessments/constants.py
"""
Body-part vocabulary shared by the assessment merger and the note normalizer.

Stored value / display label: "LEFT LUNG"
Client key:                   "left-lung"
"""
from __future__ import annotations

from typing import Optional

from django.db import models

from emr_core.patients.models import NoteSection


class BodyPart(models.TextChoices):
    HEAD = "HEAD", "Head"
    NECK = "NECK", "Neck"
    CHEST = "CHEST", "Chest"
    HEART = "HEART", "Heart"
    LEFT_LUNG = "LEFT LUNG", "Left lung"
    RIGHT_LUNG = "RIGHT LUNG", "Right lung"
    ABDOMEN = "ABDOMEN", "Abdomen"
    STOMACH = "STOMACH", "Stomach"
    LIVER = "LIVER", "Liver"
    LEFT_KIDNEY = "LEFT KIDNEY", "Left kidney"
    RIGHT_KIDNEY = "RIGHT KIDNEY", "Right kidney"
    LEFT_SHOULDER = "LEFT SHOULDER", "Left shoulder"
    RIGHT_SHOULDER = "RIGHT SHOULDER", "Right shoulder"
    LEFT_ARM = "LEFT ARM", "Left arm"
    RIGHT_ARM = "RIGHT ARM", "Right arm"
    LEFT_FOREARM = "LEFT FOREARM", "Left forearm"
    RIGHT_FOREARM = "RIGHT FOREARM", "Right forearm"
    LEFT_WRIST = "LEFT WRIST", "Left wrist"
    RIGHT_WRIST = "RIGHT WRIST", "Right wrist"
    LEFT_THIGH = "LEFT THIGH", "Left thigh"
    RIGHT_THIGH = "RIGHT THIGH", "Right thigh"
    LEFT_SHIN = "LEFT SHIN", "Left shin"
    RIGHT_SHIN = "RIGHT SHIN", "Right shin"
    LEFT_FOOT = "LEFT FOOT", "Left foot"
    RIGHT_FOOT = "RIGHT FOOT", "Right foot"
    SPINE = "SPINE", "Spine"
    PELVIS = "PELVIS", "Pelvis"
    OTHER = "OTHER", "Other"


# Parts a client may write to (OTHER is a normalizer fallback only)
ASSESSABLE_PARTS: tuple[str, ...] = tuple(v for v in BodyPart.values if v != BodyPart.OTHER)

_ARM_WORDS = ("ARM", "FOREARM", "SHOULDER", "WRIST")


def key_for(body_part: str) -> str:
    return body_part.lower().replace(" ", "-")


def body_part_for_key(key: str) -> Optional[str]:
    """
    "left-lung" -> "LEFT LUNG"; unknown keys -> None.
    """
    if not isinstance(key, str):
        return None
    label = key.strip().upper().replace("-", " ")
    return label if label in ASSESSABLE_PARTS else None


def section_for(body_part: str) -> str:
    if body_part == BodyPart.HEAD:
        return NoteSection.HEAD
    if body_part == BodyPart.HEART:
        return NoteSection.HEART
    if body_part.split(" ")[-1] in _ARM_WORDS:
        return NoteSection.ARM
    return NoteSection.OTHER


ASSESSMENT_KEYS: tuple[str, ...] = tuple(key_for(p) for p in ASSESSABLE_PARTS)

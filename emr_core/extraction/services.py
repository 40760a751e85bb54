# emr_core/extraction/services.py
from __future__ import annotations

import base64
import binascii
import logging
import time
from datetime import datetime
from typing import Any, Optional

from django.utils import timezone
from rest_framework.exceptions import ValidationError

from emr_core.extraction.clients import GenerativeClient, ImagePart, get_generative_client
from emr_core.extraction.normalizers import finalize_extraction
from emr_core.extraction.prompts import (
    build_categorization_prompt,
    build_clinical_search_prompt,
    build_id_scan_prompt,
    build_parse_notes_prompt,
    require_notes,
    require_query,
)
from emr_core.extraction.schemas import (
    CategorizationResultSchema,
    ClinicalSearchResultSchema,
    IdScanResultSchema,
    MedicalExtractionResultSchema,
)
from emr_core.extraction.validation import validate_model_output

logger = logging.getLogger(__name__)

ID_SCAN_MIN_CONFIDENCE = 0.3
ID_SCAN_UNREADABLE = "Unable to extract"


def decode_image(image: Any) -> ImagePart:
    """
    Base64 string or data URL ("data:image/png;base64,....") -> ImagePart.
    """
    if not isinstance(image, str) or not image.strip():
        raise ValidationError({"detail": "Invalid or missing image data"})

    mime_type = "image/jpeg"
    payload = image.strip()
    if "," in payload:
        header, payload = payload.split(",", 1)
        if header.startswith("data:"):
            mime_type = header[5:].split(";", 1)[0] or mime_type

    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError({"detail": "Invalid image format"})
    if not data:
        raise ValidationError({"detail": "Invalid image format"})
    return ImagePart(mime_type=mime_type, data=data)


def _run(kind: str, client: GenerativeClient, prompt: str, schema_class, *, input_length: int, images=None):
    started = time.monotonic()
    outcome = "error"
    try:
        raw = client.generate(prompt, images=images)
        data = validate_model_output(raw, schema_class)
        outcome = "ok"
        return data
    finally:
        logger.info(
            "AI %s: input=%d chars outcome=%s elapsed=%.2fs",
            kind,
            input_length,
            outcome,
            time.monotonic() - started,
        )


class ExtractionService:
    """
    One model call per operation. Input is checked before the call;
    output is validated before anything is returned.
    """

    @staticmethod
    def parse_notes(*, client: Optional[GenerativeClient] = None, notes: Any, captured_at: Optional[datetime] = None) -> dict:
        notes = require_notes(notes)
        captured_at = captured_at or timezone.now()

        data = _run(
            "parse-notes",
            client or get_generative_client(),
            build_parse_notes_prompt(notes, captured_at),
            MedicalExtractionResultSchema,
            input_length=len(notes),
        )
        return finalize_extraction(data, captured_at)

    @staticmethod
    def categorize_notes(*, client: Optional[GenerativeClient] = None, text: Any) -> dict:
        text = require_notes(text, field="text")
        return _run(
            "categorize-notes",
            client or get_generative_client(),
            build_categorization_prompt(text),
            CategorizationResultSchema,
            input_length=len(text),
        )

    @staticmethod
    def clinical_search(*, client: Optional[GenerativeClient] = None, query: Any, patient_data: Optional[dict] = None) -> dict:
        query = require_query(query)
        return _run(
            "clinical-search",
            client or get_generative_client(),
            build_clinical_search_prompt(query, patient_data),
            ClinicalSearchResultSchema,
            input_length=len(query),
        )

    @staticmethod
    def scan_id(*, client: Optional[GenerativeClient] = None, image: Any) -> dict:
        part = decode_image(image)
        data = _run(
            "scan-id",
            client or get_generative_client(),
            build_id_scan_prompt(),
            IdScanResultSchema,
            input_length=len(part.data),
            images=[part],
        )

        name = data["name"].strip()
        confidence = data["confidence"]
        if confidence > ID_SCAN_MIN_CONFIDENCE and name and name != ID_SCAN_UNREADABLE:
            return {
                "success": True,
                "name": name,
                "confidence": confidence,
                "additional_info": data.get("additional_info"),
            }
        return {
            "success": False,
            "error": "Unable to extract name from ID with sufficient confidence",
            "confidence": confidence,
        }

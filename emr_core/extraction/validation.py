# emr_core/extraction/validation.py
from __future__ import annotations

import json
import logging
from typing import Any, Type

from rest_framework import serializers

from emr_core.common.api.exceptions import RAW_OUTPUT_PREVIEW_CHARS, UpstreamParseFailure, UpstreamSchemaViolation

logger = logging.getLogger(__name__)


def extract_json_object(text: str) -> str:
    """
    Substring from the first "{" to the last "}".
    Drops markdown fences and chatter around the object.
    """
    text = text or ""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        logger.warning("No JSON object in model output: %r", text[:RAW_OUTPUT_PREVIEW_CHARS])
        raise UpstreamParseFailure(raw_output=text, reason="No JSON object found in model output.")
    return text[start : end + 1]


def parse_model_output(text: str) -> Any:
    candidate = extract_json_object(text)
    try:
        return json.loads(candidate)
    except json.JSONDecodeError as exc:
        logger.warning("Unparsable model output (%s): %r", exc, text[:RAW_OUTPUT_PREVIEW_CHARS])
        raise UpstreamParseFailure(raw_output=text, reason=str(exc))


def validate_model_output(text: str, schema_class: Type[serializers.Serializer]) -> dict[str, Any]:
    """
    Raw model text -> validated data for schema_class.
    Either the whole object validates or nothing is returned.
    """
    data = parse_model_output(text)
    if not isinstance(data, dict):
        raise UpstreamSchemaViolation(issues={"non_field_errors": ["Expected a JSON object."]})

    ser = schema_class(data=data)
    if not ser.is_valid():
        logger.warning("Model output failed %s: %s", schema_class.__name__, dict(ser.errors))
        raise UpstreamSchemaViolation(issues=ser.errors)
    return ser.validated_data

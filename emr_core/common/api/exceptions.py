# emr_core/common/api/exceptions.py

from __future__ import annotations

import logging
import uuid
from typing import Any

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, NotAuthenticated, NotFound, PermissionDenied, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)

# Raw model output echoed back for debugging is capped at this many characters.
RAW_OUTPUT_PREVIEW_CHARS = 2000


def ensure_request_id(request) -> str:
    """
    Ensures request has a stable request_id attribute and returns it.
    Safe to call from middleware and DRF exception handler.
    """
    rid = getattr(request, "request_id", None) if request is not None else None
    if not rid:
        rid = uuid.uuid4().hex
        if request is not None:
            setattr(request, "request_id", rid)
    return rid


def build_error_envelope(*, request=None, code: str, message: str, details: Any = None) -> dict[str, Any]:
    """
    Canonical error envelope for the EMR API.
    Reusable from Django middleware (JsonResponse) and DRF (Response).
    """
    rid = ensure_request_id(request)
    return {
        "error": {
            "code": code,
            "message": message,
            "details": details,
            "request_id": rid,
        }
    }


class InputTooLong(ValidationError):
    """
    400 for oversized text input. Limits stay integers in the details.
    """

    def __init__(self, *, message: str, max_length: int, length: int):
        super().__init__({"detail": message})
        self.detail = {"detail": self.detail["detail"], "max_length": max_length, "length": length}


class UpstreamParseFailure(APIException):
    """
    502: the generative model answered, but no valid JSON object could be read from it.
    """
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Model output could not be parsed as JSON."
    default_code = "upstream_parse_failure"

    def __init__(self, *, raw_output: str = "", reason: str | None = None):
        self.raw_output = raw_output or ""
        self.reason = reason
        super().__init__(
            detail={
                "detail": self.default_detail,
                "reason": reason,
                "raw_output": self.raw_output[:RAW_OUTPUT_PREVIEW_CHARS],
            },
            code=self.default_code,
        )


class UpstreamSchemaViolation(APIException):
    """
    422: the model returned valid JSON with the wrong shape.
    """
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_detail = "Model output does not match the expected schema."
    default_code = "upstream_schema_violation"

    def __init__(self, *, issues: Any):
        self.issues = issues
        super().__init__(
            detail={"detail": self.default_detail, "issues": issues},
            code=self.default_code,
        )


class UpstreamUnavailable(APIException):
    """
    502: the generative model call failed or timed out. Never retried.
    """
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "The AI service did not respond. Please try again."
    default_code = "upstream_unavailable"


def _code_for(exc: Exception, http_status: int) -> str:
    if isinstance(exc, ValidationError):
        return "validation_error"
    if isinstance(exc, NotAuthenticated):
        return "not_authenticated"
    if isinstance(exc, PermissionDenied):
        return "permission_denied"
    if isinstance(exc, (Http404, NotFound)):
        return "not_found"
    if isinstance(exc, APIException):
        return getattr(exc, "default_code", "api_error") or "api_error"
    if http_status >= 500:
        return "server_error"
    return "error"


def api_exception_handler(exc: Exception, context: dict[str, Any]):
    request = context.get("request")
    response = drf_exception_handler(exc, context)

    # Truly unhandled error: details stay in the server log only
    if response is None:
        rid = ensure_request_id(request)
        logger.exception("Unhandled API error (request_id=%s)", rid, exc_info=exc)
        return Response(
            build_error_envelope(
                request=request,
                code="server_error",
                message="Unexpected server error.",
                details=None,
            ),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    http_status = response.status_code
    code = _code_for(exc, http_status)

    if isinstance(exc, (UpstreamParseFailure, UpstreamUnavailable)):
        logger.warning("Upstream model failure: %s", code)

    # DRF standardizes errors into response.data
    data = response.data

    # Message + details rules:
    # 1) If {"detail": "..."} only -> message=detail, details=None
    # 2) If {"detail": "...", ...} -> message=detail, details={...without detail}
    # 3) Otherwise -> message="Request failed.", details=data
    message = "Request failed."
    details = data

    if isinstance(data, dict) and "detail" in data:
        message = str(data.get("detail"))
        rest = {k: v for k, v in data.items() if k != "detail"}
        details = rest or None

    return Response(
        build_error_envelope(
            request=request,
            code=code,
            message=message,
            details=details,
        ),
        status=http_status,
        headers=response.headers,
    )

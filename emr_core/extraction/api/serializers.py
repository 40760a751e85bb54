# emr_core/extraction/api/serializers.py
"""
Request bodies for the AI endpoints (OpenAPI only: inputs are checked by the services).
"""
from __future__ import annotations

from rest_framework import serializers


class ParseNotesRequestSerializer(serializers.Serializer):
    notes = serializers.CharField(max_length=10_000)


class CategorizeNotesRequestSerializer(serializers.Serializer):
    text = serializers.CharField(max_length=10_000)


class ClinicalSearchRequestSerializer(serializers.Serializer):
    query = serializers.CharField(max_length=500)
    patient_mrn = serializers.CharField(required=False)
    patientData = serializers.JSONField(required=False)


class ScanIdRequestSerializer(serializers.Serializer):
    image = serializers.CharField(help_text="Base64 image or data URL")


class ScanIdResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    name = serializers.CharField(required=False)
    confidence = serializers.FloatField()
    additional_info = serializers.DictField(required=False, allow_null=True)
    error = serializers.CharField(required=False)

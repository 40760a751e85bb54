# emr_core/patients/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from emr_core.extraction.fields import StrictCharField
from emr_core.extraction.schemas import MedicalExtractionResultSchema
from emr_core.patients.models import BloodType, Patient, Sex


class PatientCreateSerializer(serializers.Serializer):
    mrn = serializers.CharField(max_length=64)
    first_name = serializers.CharField(max_length=128, required=False, allow_blank=True, default="")
    last_name = serializers.CharField(max_length=128, required=False, allow_blank=True, default="")
    date_of_birth = serializers.DateField(required=False, allow_null=True)
    sex = serializers.ChoiceField(choices=Sex.choices, required=False, default=Sex.UNKNOWN)
    blood_type = serializers.ChoiceField(choices=BloodType.choices, required=False, allow_null=True)
    phone_number = serializers.CharField(max_length=32, required=False, allow_blank=True, default="")
    email = serializers.EmailField(required=False, allow_blank=True, default="")
    address_line1 = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    address_line2 = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    city = serializers.CharField(max_length=128, required=False, allow_blank=True, default="")
    state = serializers.CharField(max_length=64, required=False, allow_blank=True, default="")
    postal_code = serializers.CharField(max_length=16, required=False, allow_blank=True, default="")
    country = serializers.CharField(max_length=64, required=False, allow_blank=True, default="")


class PatientUpdateSerializer(serializers.Serializer):
    """
    Partial update contract (PATCH).
    """
    mrn = serializers.CharField(max_length=64, required=False)
    first_name = serializers.CharField(max_length=128, required=False, allow_blank=True)
    last_name = serializers.CharField(max_length=128, required=False, allow_blank=True)
    date_of_birth = serializers.DateField(required=False, allow_null=True)
    sex = serializers.ChoiceField(choices=Sex.choices, required=False)
    blood_type = serializers.ChoiceField(choices=BloodType.choices, required=False, allow_null=True)
    phone_number = serializers.CharField(max_length=32, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    address_line1 = serializers.CharField(max_length=255, required=False, allow_blank=True)
    address_line2 = serializers.CharField(max_length=255, required=False, allow_blank=True)
    city = serializers.CharField(max_length=128, required=False, allow_blank=True)
    state = serializers.CharField(max_length=64, required=False, allow_blank=True)
    postal_code = serializers.CharField(max_length=16, required=False, allow_blank=True)
    country = serializers.CharField(max_length=64, required=False, allow_blank=True)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return attrs


class PatientSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = Patient
        fields = [
            "id",
            "tenant_id",
            "mrn",
            "first_name",
            "last_name",
            "full_name",
            "date_of_birth",
            "sex",
            "blood_type",
            "phone_number",
            "email",
            "address_line1",
            "address_line2",
            "city",
            "state",
            "postal_code",
            "country",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class PatientImportSerializer(MedicalExtractionResultSchema):
    """
    A reviewed extraction result plus the MRN to file it under.
    The MRN falls back to demographics.patientId.
    """
    patientId = StrictCharField(required=False)

    def validate(self, attrs):
        mrn = (attrs.get("patientId") or (attrs.get("demographics") or {}).get("patientId") or "").strip()
        if not mrn:
            raise serializers.ValidationError({"patientId": "Patient ID is required."})
        if len(mrn) > 64:
            raise serializers.ValidationError({"patientId": "Patient ID is too long."})
        attrs["patientId"] = mrn
        return attrs


class PatientImportResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    created = serializers.BooleanField()
    patient = PatientSerializer()
    counts = serializers.DictField(child=serializers.IntegerField())

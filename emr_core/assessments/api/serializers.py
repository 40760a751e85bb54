# emr_core/assessments/api/serializers.py
from rest_framework import serializers


class AssessmentSaveResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    notesCreated = serializers.IntegerField()

# emr_core/assessments/models.py
from django.db import models

from emr_core.assessments.constants import BodyPart
from emr_core.common.models import TimeStampedModel
from emr_core.patients.models import NoteSection, Patient


class AssessmentNote(TimeStampedModel):
    """
    Current assessment text for one body part of one patient.
    At most one row per (patient, body_part); saving again overwrites it.
    """
    id = models.BigAutoField(primary_key=True)

    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name="assessment_notes")
    tenant_id = models.UUIDField(db_index=True)

    body_part = models.CharField(max_length=32, choices=BodyPart.choices)
    section = models.CharField(max_length=16, choices=NoteSection.choices, default=NoteSection.OTHER)
    content = models.TextField()

    class Meta:
        db_table = "assessments_assessment_note"
        constraints = [
            models.UniqueConstraint(fields=["patient", "body_part"], name="uq_assessment_patient_body_part"),
        ]
        indexes = [
            models.Index(fields=["patient", "updated_at"], name="assessments_patient_upd_idx"),
        ]

    @property
    def display_text(self) -> str:
        return f"{self.body_part}: {self.content}"

    def __str__(self) -> str:
        return self.display_text

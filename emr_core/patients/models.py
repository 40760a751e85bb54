# emr_core/patients/models.py
from django.db import models

from emr_core.common.models import TenantScopedModel, TimeStampedModel


class Sex(models.TextChoices):
    MALE = "MALE", "Male"
    FEMALE = "FEMALE", "Female"
    OTHER = "OTHER", "Other"
    UNKNOWN = "UNKNOWN", "Unknown"


class BloodType(models.TextChoices):
    A_POS = "A_POS", "A+"
    A_NEG = "A_NEG", "A-"
    B_POS = "B_POS", "B+"
    B_NEG = "B_NEG", "B-"
    AB_POS = "AB_POS", "AB+"
    AB_NEG = "AB_NEG", "AB-"
    O_POS = "O_POS", "O+"
    O_NEG = "O_NEG", "O-"


class AllergySeverity(models.TextChoices):
    MILD = "MILD", "Mild"
    MODERATE = "MODERATE", "Moderate"
    SEVERE = "SEVERE", "Severe"


class VitalType(models.TextChoices):
    BLOOD_PRESSURE = "BLOOD_PRESSURE", "Blood pressure"
    HEART_RATE = "HEART_RATE", "Heart rate"
    TEMPERATURE = "TEMPERATURE", "Temperature"
    WEIGHT = "WEIGHT", "Weight"
    HEIGHT = "HEIGHT", "Height"
    BMI = "BMI", "BMI"
    RESPIRATION_RATE = "RESPIRATION_RATE", "Respiration rate"
    SPO2 = "SPO2", "SpO2"


class NoteSection(models.TextChoices):
    HEAD = "HEAD", "Head"
    ARM = "ARM", "Arm"
    HEART = "HEART", "Heart"
    EXTRA = "EXTRA", "Extra"
    OTHER = "OTHER", "Other"


class NoteType(models.TextChoices):
    PROGRESS = "PROGRESS", "Progress"
    ASSESSMENT = "ASSESSMENT", "Assessment"
    PLAN = "PLAN", "Plan"
    OTHER = "OTHER", "Other"


class Patient(TenantScopedModel):
    """
    Patient record owned by one tenant. MRN is unique within the tenant.
    """
    mrn = models.CharField(max_length=64)

    first_name = models.CharField(max_length=128, blank=True)
    last_name = models.CharField(max_length=128, blank=True)
    date_of_birth = models.DateField(null=True, blank=True)
    sex = models.CharField(max_length=16, choices=Sex.choices, default=Sex.UNKNOWN)
    blood_type = models.CharField(max_length=8, choices=BloodType.choices, null=True, blank=True)

    phone_number = models.CharField(max_length=32, blank=True)
    email = models.EmailField(blank=True)
    address_line1 = models.CharField(max_length=255, blank=True)
    address_line2 = models.CharField(max_length=255, blank=True)
    city = models.CharField(max_length=128, blank=True)
    state = models.CharField(max_length=64, blank=True)
    postal_code = models.CharField(max_length=16, blank=True)
    country = models.CharField(max_length=64, blank=True)

    class Meta:
        db_table = "patients_patient"
        constraints = [
            models.UniqueConstraint(fields=["tenant_id", "mrn"], name="uq_patient_tenant_mrn"),
        ]
        indexes = [
            models.Index(fields=["tenant_id", "last_name", "first_name"], name="patients_tenant_name_idx"),
        ]

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __str__(self) -> str:
        return f"{self.full_name} ({self.mrn})"


class Allergy(TimeStampedModel):
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name="allergies")
    substance = models.CharField(max_length=255)
    reaction = models.CharField(max_length=255, blank=True)
    severity = models.CharField(max_length=16, choices=AllergySeverity.choices, default=AllergySeverity.MILD)
    noted_on = models.DateField(null=True, blank=True)
    active = models.BooleanField(default=True)

    class Meta:
        db_table = "patients_allergy"


class Medication(TimeStampedModel):
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name="medications")
    name = models.CharField(max_length=255)
    dose = models.CharField(max_length=128, blank=True)
    frequency = models.CharField(max_length=128, blank=True)
    start_date = models.DateField(null=True, blank=True)
    notes = models.TextField(blank=True)
    active = models.BooleanField(default=True)

    class Meta:
        db_table = "patients_medication"


class VitalSign(TimeStampedModel):
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name="vitals")
    type = models.CharField(max_length=32, choices=VitalType.choices)
    unit = models.CharField(max_length=16, blank=True)
    numeric_value = models.FloatField(null=True, blank=True)
    systolic = models.PositiveSmallIntegerField(null=True, blank=True)
    diastolic = models.PositiveSmallIntegerField(null=True, blank=True)
    recorded_at = models.DateTimeField(db_index=True)

    class Meta:
        db_table = "patients_vital_sign"
        indexes = [models.Index(fields=["patient", "type", "recorded_at"], name="patients_vital_type_at_idx")]


class SocialHistory(TimeStampedModel):
    patient = models.OneToOneField(Patient, on_delete=models.CASCADE, related_name="social_history")
    tobacco_use = models.CharField(max_length=255, blank=True)
    alcohol_use = models.CharField(max_length=255, blank=True)
    drug_use = models.CharField(max_length=255, blank=True)
    occupation = models.CharField(max_length=255, blank=True)
    notes = models.TextField(blank=True)

    class Meta:
        db_table = "patients_social_history"


class PastMedicalEvent(TimeStampedModel):
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name="past_medical")
    date = models.DateField(null=True, blank=True)
    body_part = models.CharField(max_length=64, blank=True)
    description = models.TextField()

    class Meta:
        db_table = "patients_past_medical_event"


class Immunization(TimeStampedModel):
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name="immunizations")
    vaccine = models.CharField(max_length=255)
    administered_on = models.DateField(null=True, blank=True)
    notes = models.TextField(blank=True)

    class Meta:
        db_table = "patients_immunization"


class FamilyHistoryCondition(TimeStampedModel):
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name="family_history")
    relation = models.CharField(max_length=64)
    condition = models.TextField()
    notes = models.TextField(blank=True)

    class Meta:
        db_table = "patients_family_history"


class InsurancePolicy(TimeStampedModel):
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name="insurance_policies")
    provider_name = models.CharField(max_length=255)
    policy_number = models.CharField(max_length=64)
    group_number = models.CharField(max_length=64, blank=True)
    plan_name = models.CharField(max_length=255, blank=True)
    effective_date = models.DateField(null=True, blank=True)
    is_primary = models.BooleanField(default=False)

    class Meta:
        db_table = "patients_insurance_policy"


class EmergencyContact(TimeStampedModel):
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name="emergency_contacts")
    name = models.CharField(max_length=255)
    relation = models.CharField(max_length=64, blank=True)
    phone = models.CharField(max_length=32, blank=True)
    address = models.CharField(max_length=255, blank=True)

    class Meta:
        db_table = "patients_emergency_contact"


class ClinicalNote(TimeStampedModel):
    """
    Free-text note. Assessment entries written before AssessmentNote existed
    live here as "<BODY PART>: text".
    """
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name="notes")
    section = models.CharField(max_length=16, choices=NoteSection.choices, default=NoteSection.OTHER)
    note_type = models.CharField(max_length=16, choices=NoteType.choices, default=NoteType.OTHER)
    content = models.TextField()

    class Meta:
        db_table = "patients_clinical_note"
        indexes = [models.Index(fields=["patient", "created_at"], name="patients_note_created_idx")]


class AdvanceCarePlan(TimeStampedModel):
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name="care_plans")
    dnr = models.BooleanField(default=False)
    notes = models.TextField(blank=True)

    class Meta:
        db_table = "patients_advance_care_plan"

# emr_core/patients/admin.py
from django.contrib import admin

from emr_core.patients.models import (
    Allergy,
    ClinicalNote,
    EmergencyContact,
    InsurancePolicy,
    Medication,
    Patient,
    VitalSign,
)


class AllergyInline(admin.TabularInline):
    model = Allergy
    extra = 0


class MedicationInline(admin.TabularInline):
    model = Medication
    extra = 0


class InsuranceInline(admin.TabularInline):
    model = InsurancePolicy
    extra = 0


class EmergencyContactInline(admin.TabularInline):
    model = EmergencyContact
    extra = 0


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = (
        "mrn",
        "first_name",
        "last_name",
        "date_of_birth",
        "sex",
        "tenant_id",
        "created_at",
    )
    list_filter = ("tenant_id", "sex")
    search_fields = ("mrn", "first_name", "last_name", "email", "phone_number")
    readonly_fields = ("created_at", "updated_at")
    ordering = ("-created_at",)
    inlines = [AllergyInline, MedicationInline, InsuranceInline, EmergencyContactInline]


@admin.register(VitalSign)
class VitalSignAdmin(admin.ModelAdmin):
    list_display = ("patient", "type", "numeric_value", "systolic", "diastolic", "unit", "recorded_at")
    list_filter = ("type",)
    raw_id_fields = ("patient",)
    ordering = ("-recorded_at",)


@admin.register(ClinicalNote)
class ClinicalNoteAdmin(admin.ModelAdmin):
    list_display = ("patient", "section", "note_type", "created_at")
    list_filter = ("section", "note_type")
    search_fields = ("patient__mrn", "content")
    raw_id_fields = ("patient",)
    readonly_fields = ("created_at", "updated_at")

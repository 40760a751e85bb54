# emr_core/assessments/admin.py
from django.contrib import admin

from emr_core.assessments.models import AssessmentNote


@admin.register(AssessmentNote)
class AssessmentNoteAdmin(admin.ModelAdmin):
    list_display = ("patient", "body_part", "section", "tenant_id", "updated_at")
    list_filter = ("section", "body_part")
    search_fields = ("patient__mrn", "content")
    raw_id_fields = ("patient",)
    readonly_fields = ("created_at", "updated_at")
    ordering = ("-updated_at",)

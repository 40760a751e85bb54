# emr_core/tenants/admin.py
from django.contrib import admin

from emr_core.tenants.models import Tenant


@admin.register(Tenant)
class TenantAdmin(admin.ModelAdmin):
    list_display = ("hospital_name", "subdomain", "created_at", "updated_at")
    list_filter = ("created_at",)
    search_fields = ("hospital_name", "subdomain")
    ordering = ("-created_at",)
    readonly_fields = ("id", "created_at", "updated_at")

    fieldsets = (
        (None, {"fields": ("id", "hospital_name", "subdomain")}),
        ("Metadata", {"fields": ("metadata",)}),
        ("Timestamps", {"fields": ("created_at", "updated_at")}),
    )

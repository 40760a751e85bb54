# emr_core/audit/admin.py
from django.contrib import admin

from emr_core.audit.models import UserActionLog


@admin.register(UserActionLog)
class UserActionLogAdmin(admin.ModelAdmin):
    list_display = (
        "action",
        "resource",
        "resource_id",
        "success",
        "user",
        "ip",
        "created_at",
    )
    list_filter = ("action", "success", "resource")
    search_fields = ("resource", "resource_id", "user__username", "route")
    readonly_fields = ("created_at",)
    ordering = ("-created_at",)

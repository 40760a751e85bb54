# emr_core/iam/admin.py
from __future__ import annotations

from django.contrib import admin

from emr_core.iam.models import UserProfile


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "role", "created_at", "updated_at")
    list_filter = ("role",)
    search_fields = ("user__username", "user__email")
    raw_id_fields = ("user",)
    ordering = ("-created_at",)

# emr_core/api/urls.py
from __future__ import annotations

from django.urls import path
from rest_framework.routers import DefaultRouter

from emr_core.assessments.api.views import PatientAssessmentView
from emr_core.audit.api.views import UserActionLogViewSet
from emr_core.extraction.api.views import CategorizeNotesView, ClinicalSearchView, ParseNotesView, ScanIdView
from emr_core.iam.api.admin_users import (
    AdminBootstrapView,
    AdminUserListView,
    AdminUserLogsView,
    AdminUserPermissionsView,
    AdminUserRoleView,
)
from emr_core.iam.api.auth import LoginView, LogoutView, RefreshView
from emr_core.iam.api.me import MePasswordView, MePreferencesView, MeProfileView, MeView
from emr_core.patients.api.views import PatientImportView, PatientViewSet
from emr_core.tenants.api.views import TenantViewSet

router = DefaultRouter()

# ViewSet-backed modules (centralized)
router.register(r"patients", PatientViewSet, basename="patients")
router.register(r"tenants", TenantViewSet, basename="tenants")
router.register(r"audit/actions", UserActionLogViewSet, basename="audit-actions")

urlpatterns = [
    # 🔐 Auth + /me
    path("auth/login/", LoginView.as_view(), name="login"),
    path("auth/refresh/", RefreshView.as_view(), name="refresh"),
    path("auth/logout/", LogoutView.as_view(), name="logout"),
    path("me/", MeView.as_view(), name="me"),
    path("me/profile/", MeProfileView.as_view(), name="me-profile"),
    path("me/password/", MePasswordView.as_view(), name="me-password"),
    path("me/preferences/", MePreferencesView.as_view(), name="me-preferences"),

    # ✅ Admin
    path("admin/users/", AdminUserListView.as_view(), name="admin-users"),
    path("admin/users/<int:user_id>/role/", AdminUserRoleView.as_view(), name="admin-user-role"),
    path("admin/users/<int:user_id>/permissions/", AdminUserPermissionsView.as_view(), name="admin-user-permissions"),
    path("admin/users/<int:user_id>/logs/", AdminUserLogsView.as_view(), name="admin-user-logs"),
    path("admin/bootstrap/", AdminBootstrapView.as_view(), name="admin-bootstrap"),

    # ✅ Patients (non-ViewSet endpoints; before the router so "import" is not read as an MRN)
    path("patients/import/", PatientImportView.as_view(), name="patient-import"),
    path("patients/<str:mrn>/assessment/", PatientAssessmentView.as_view(), name="patient-assessment"),

    # ✅ AI extraction
    path("ai/parse-notes/", ParseNotesView.as_view(), name="ai-parse-notes"),
    path("ai/categorize-notes/", CategorizeNotesView.as_view(), name="ai-categorize-notes"),
    path("ai/clinical-search/", ClinicalSearchView.as_view(), name="ai-clinical-search"),
    path("ai/scan-id/", ScanIdView.as_view(), name="ai-scan-id"),

    # Router URLs last (so explicit paths win if ever overlapping)
    *router.urls,
]

# emr_core/iam/tests/test_admin_users.py
import pytest

from emr_core.audit.services import AuditService
from emr_core.iam.models import UserProfile

pytestmark = pytest.mark.django_db


def test_admin_endpoints_reject_regular_users(user_client):
    res = user_client.get("/api/v1/admin/users/")
    assert res.status_code == 403
    assert res.data["error"]["code"] == "permission_denied"


def test_list_users_with_roles(api_client, admin_user, user):
    res = api_client.get("/api/v1/admin/users/")
    assert res.status_code == 200

    rows = {row["username"]: row for row in res.data["results"]}
    assert rows["admin"]["role"] == "ADMIN"
    assert rows["nurse"]["role"] == "USER"
    assert rows["nurse"]["permissions"] == []


def test_set_role(api_client, user):
    res = api_client.post(f"/api/v1/admin/users/{user.id}/role/", {"role": "ADMIN"}, format="json")
    assert res.status_code == 200, res.data
    assert res.data["user"]["role"] == "ADMIN"

    bad = api_client.post(f"/api/v1/admin/users/{user.id}/role/", {"role": "OWNER"}, format="json")
    assert bad.status_code == 400
    assert bad.data["error"]["message"] == "Invalid role. Must be USER or ADMIN"


def test_set_permissions(api_client, user):
    url = f"/api/v1/admin/users/{user.id}/permissions/"
    res = api_client.put(url, {"permissions": ["VIEW_VITALS", "VIEW_DEMOGRAPHICS", "VIEW_VITALS"]}, format="json")
    assert res.status_code == 200, res.data
    assert res.data["user"]["permissions"] == ["VIEW_DEMOGRAPHICS", "VIEW_VITALS"]

    assert api_client.get(url).data == {"permissions": ["VIEW_DEMOGRAPHICS", "VIEW_VITALS"]}


def test_set_permissions_validation(api_client, user):
    url = f"/api/v1/admin/users/{user.id}/permissions/"

    res = api_client.put(url, {"permissions": "VIEW_VITALS"}, format="json")
    assert res.status_code == 400
    assert res.data["error"]["message"] == "permissions must be an array of strings"

    res = api_client.put(url, {"permissions": ["VIEW_EVERYTHING"]}, format="json")
    assert res.status_code == 400
    assert res.data["error"]["details"] == {"unknown": ["VIEW_EVERYTHING"]}


def test_unknown_user_is_404(api_client):
    res = api_client.put("/api/v1/admin/users/99999/permissions/", {"permissions": []}, format="json")
    assert res.status_code == 404
    assert res.data["error"]["message"] == "User not found"


def test_user_logs_limit(api_client, user):
    for i in range(3):
        AuditService.log_action(action="VIEW", resource="patient", resource_id=i, user=user)

    res = api_client.get(f"/api/v1/admin/users/{user.id}/logs/?limit=2")
    assert res.status_code == 200
    assert [row["resource_id"] for row in res.data["logs"]] == ["2", "1"]


def test_bootstrap_only_in_debug(user_client, settings):
    settings.DEBUG = False
    res = user_client.post("/api/v1/admin/bootstrap/")
    assert res.status_code == 403


def test_bootstrap_promotes_first_admin(user_client, user, settings):
    settings.DEBUG = True
    res = user_client.post("/api/v1/admin/bootstrap/")
    assert res.status_code == 200, res.data
    assert res.data["user"]["role"] == "ADMIN"

    again = user_client.post("/api/v1/admin/bootstrap/")
    assert again.status_code == 400
    assert again.data["error"]["message"] == "Admin users already exist"


def test_profile_created_for_new_users(user):
    assert UserProfile.objects.filter(user=user, role="USER").exists()

# emr_core/iam/tests/test_auth_and_me.py
import pytest
from rest_framework.test import APIClient

from emr_core.audit.models import ActionType, UserActionLog
from emr_core.common.permissions import DASHBOARD_PERMISSIONS
from emr_core.tests.helpers import on_tenant

pytestmark = pytest.mark.django_db


def test_me_requires_auth():
    """
    Fresh APIClient: the api_client fixture is already authenticated.
    """
    c = APIClient()
    res = c.get("/api/v1/me/")
    assert res.status_code == 401


def test_login_sets_cookies_and_logs(user, settings):
    c = APIClient()
    res = c.post("/api/v1/auth/login/", {"username": "nurse", "password": "testpass123"}, format="json")
    assert res.status_code == 200, res.data

    assert settings.SIMPLE_JWT["AUTH_COOKIE"] in res.cookies
    assert settings.SIMPLE_JWT["AUTH_COOKIE_REFRESH"] in res.cookies
    assert UserActionLog.objects.filter(user=user, action=ActionType.LOGIN).exists()


def test_login_by_email(user):
    c = APIClient()
    res = c.post("/api/v1/auth/login/", {"email": "NURSE@example.com", "password": "testpass123"}, format="json")
    assert res.status_code == 200, res.data


def test_cookie_authenticates_follow_up_requests(user):
    c = APIClient()
    c.post("/api/v1/auth/login/", {"username": "nurse", "password": "testpass123"}, format="json")

    res = c.get("/api/v1/me/")
    assert res.status_code == 200
    assert res.data["user"]["id"] == user.id


def test_login_wrong_password_is_rejected(user):
    res = APIClient().post("/api/v1/auth/login/", {"username": "nurse", "password": "nope"}, format="json")
    assert res.status_code == 403
    assert res.data["error"]["code"] == "authentication_failed"


def test_me_payload(user_client, user, tenant):
    res = user_client.get("/api/v1/me/", **on_tenant(tenant))
    assert res.status_code == 200

    body = res.json()
    assert body["user"]["id"] == user.id
    assert body["role"] == "USER"
    assert body["permissions"] == []
    assert body["preferences"]["appearance"]["theme"] == "system"
    assert body["tenant"]["subdomain"] == "general"


def test_me_admin_has_every_permission(api_client):
    res = api_client.get("/api/v1/me/", HTTP_HOST="ghost.localhost")
    assert res.data["role"] == "ADMIN"
    assert res.data["permissions"] == list(DASHBOARD_PERMISSIONS)
    assert res.data["tenant"] is None


def test_update_profile(user_client, user):
    res = user_client.patch("/api/v1/me/profile/", {"first_name": " Ada ", "email": "ada@example.com"}, format="json")
    assert res.status_code == 200, res.data

    user.refresh_from_db()
    assert user.first_name == "Ada"
    assert user.email == "ada@example.com"


def test_update_profile_email_taken(user_client, admin_user):
    res = user_client.patch("/api/v1/me/profile/", {"email": "admin@example.com"}, format="json")
    assert res.status_code == 400


@pytest.mark.parametrize(
    "payload,message",
    [
        ({"current_password": "", "new_password": "longenough"}, "Current password and new password are required"),
        ({"current_password": "testpass123", "new_password": "short"}, "New password must be at least 8 characters long"),
        ({"current_password": "wrong-one", "new_password": "longenough"}, "Current password is incorrect"),
    ],
)
def test_change_password_rejections(user_client, payload, message):
    res = user_client.put("/api/v1/me/password/", payload, format="json")
    assert res.status_code == 400
    assert res.data["error"]["message"] == message


def test_change_password(user_client, user):
    res = user_client.put(
        "/api/v1/me/password/",
        {"current_password": "testpass123", "new_password": "brand-new-pass"},
        format="json",
    )
    assert res.status_code == 200

    user.refresh_from_db()
    assert user.check_password("brand-new-pass")


def test_preferences_merge_over_defaults(user_client):
    res = user_client.put("/api/v1/me/preferences/", {"appearance": {"theme": "dark"}}, format="json")
    assert res.status_code == 200

    prefs = user_client.get("/api/v1/me/preferences/").data
    assert prefs["appearance"]["theme"] == "dark"
    assert prefs["appearance"]["fontSize"] == "medium"
    assert prefs["clinical"]["autoSave"] is True


def test_preferences_must_be_object(user_client):
    res = user_client.put("/api/v1/me/preferences/", ["dark"], format="json")
    assert res.status_code == 400

# emr_core/tenants/tests/test_tenants.py
import pytest

from emr_core.audit.models import ActionType, UserActionLog
from emr_core.tenants.domain import extract_subdomain, hostname_from_host_header, is_valid_subdomain
from emr_core.tenants.models import Tenant
from emr_core.tests.helpers import on_tenant


@pytest.mark.parametrize(
    "host,expected",
    [
        ("foo.localhost:3000", "foo"),
        ("foo.localhost", "foo"),
        ("localhost:8000", None),
        ("foo.emr.test", "foo"),
        ("emr.test", None),
        ("www.emr.test", None),
        ("foo.elsewhere.com", None),
        ("", None),
    ],
)
def test_extract_subdomain(host, expected):
    assert extract_subdomain(hostname_from_host_header(host)) == expected


@pytest.mark.parametrize("value,ok", [("general", True), ("st-marys-2", True), ("-bad", False), ("bad-", False), ("UPPER", False)])
def test_subdomain_rules(value, ok):
    assert is_valid_subdomain(value) is ok


@pytest.mark.django_db
def test_create_tenant(api_client):
    res = api_client.post(
        "/api/v1/tenants/",
        {"subdomain": "St-Marys", "hospital_name": "St Mary's Hospital"},
        format="json",
    )
    assert res.status_code == 201, res.data
    assert res.data["subdomain"] == "st-marys"
    # test settings: DEBUG off -> https
    assert res.data["url"] == "https://st-marys.emr.test"

    assert Tenant.objects.filter(subdomain="st-marys").exists()
    assert UserActionLog.objects.filter(action=ActionType.ADMIN, resource="tenant").exists()


@pytest.mark.django_db
def test_duplicate_subdomain_is_400(api_client, tenant):
    res = api_client.post("/api/v1/tenants/", {"subdomain": "general", "hospital_name": "Again"}, format="json")
    assert res.status_code == 400
    assert res.data["error"]["message"] == "This subdomain is already taken."


@pytest.mark.django_db
def test_invalid_subdomain_is_400(api_client):
    res = api_client.post("/api/v1/tenants/", {"subdomain": "no spaces", "hospital_name": "X"}, format="json")
    assert res.status_code == 400
    assert res.data["error"]["code"] == "validation_error"


@pytest.mark.django_db
def test_provisioning_is_admin_only(user_client):
    res = user_client.post("/api/v1/tenants/", {"subdomain": "nope", "hospital_name": "X"}, format="json")
    assert res.status_code == 403


@pytest.mark.django_db
def test_current_tenant(user_client, tenant, other_tenant):
    res = user_client.get("/api/v1/tenants/current/", **on_tenant(other_tenant))
    assert res.status_code == 200
    assert res.data["hospital_name"] == "Northside Clinic"

    missing = user_client.get("/api/v1/tenants/current/", HTTP_HOST="ghost.localhost")
    assert missing.status_code == 404


@pytest.mark.django_db
def test_list_and_retrieve(api_client, tenant, other_tenant):
    res = api_client.get("/api/v1/tenants/")
    assert [t["subdomain"] for t in res.data] == ["northside", "general"]

    one = api_client.get(f"/api/v1/tenants/{tenant.id}/")
    assert one.status_code == 200
    assert one.data["subdomain"] == "general"

    assert api_client.get("/api/v1/tenants/not-a-uuid/").status_code == 404


@pytest.mark.django_db
def test_set_metadata(api_client, tenant):
    res = api_client.post(f"/api/v1/tenants/{tenant.id}/set-metadata/", {"metadata": {"beds": 120}}, format="json")
    assert res.status_code == 200
    tenant.refresh_from_db()
    assert tenant.metadata == {"beds": 120}

import pytest
from django.test import RequestFactory, override_settings

from emr_core.common.middleware import TenantResolutionMiddleware
from emr_core.tests.helpers import on_tenant

pytestmark = pytest.mark.django_db


def _resolve(host):
    req = RequestFactory().get("/api/v1/patients/", HTTP_HOST=host)
    TenantResolutionMiddleware(get_response=lambda r: None).process_request(req)
    return req


def test_middleware_resolves_localhost_subdomain(tenant, other_tenant):
    req = _resolve("northside.localhost:3000")
    assert req.tenant == other_tenant
    assert req.tenant_id == other_tenant.id
    assert req.request_id


def test_middleware_resolves_root_domain_subdomain(tenant, other_tenant):
    assert _resolve("northside.emr.test").tenant == other_tenant


def test_unknown_subdomain_resolves_to_none(tenant):
    req = _resolve("ghost.localhost")
    assert req.tenant is None
    assert req.tenant_id is None


def test_bare_host_falls_back_to_oldest_tenant(tenant, other_tenant):
    assert _resolve("localhost:8000").tenant == tenant
    assert _resolve("www.emr.test").tenant == tenant


@override_settings(EMR_TENANT_FALLBACK_ENABLED=False)
def test_bare_host_without_fallback_has_no_tenant(tenant):
    assert _resolve("emr.test").tenant is None


def test_docs_paths_skip_resolution(tenant):
    req = RequestFactory().get("/api/schema/", HTTP_HOST="general.localhost")
    TenantResolutionMiddleware(get_response=lambda r: None).process_request(req)
    assert req.tenant is None


def test_unknown_tenant_returns_404_envelope(api_client):
    resp = api_client.get("/api/v1/patients/", HTTP_HOST="ghost.localhost")

    assert resp.status_code == 404
    assert resp.data["error"]["code"] == "not_found"
    assert resp.data["error"]["message"] == "No tenant found"


def test_patient_of_another_tenant_is_not_visible(api_client, tenant, patient, other_tenant):
    resp = api_client.get(f"/api/v1/patients/{patient.mrn}/", **on_tenant(other_tenant))
    assert resp.status_code == 404

    resp = api_client.get(f"/api/v1/patients/{patient.mrn}/", **on_tenant(tenant))
    assert resp.status_code == 200

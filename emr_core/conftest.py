# emr_core/conftest.py
import pytest
from django.apps import apps
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from emr_core.patients.models import Patient
from emr_core.tenants.models import Tenant
from emr_core.tests.helpers import FakeGenerativeClient


@pytest.fixture
def tenant(db):
    return Tenant.objects.create(subdomain="general", hospital_name="General Hospital")


@pytest.fixture
def other_tenant(db, tenant):
    # created after `tenant`, so the no-subdomain fallback keeps picking `tenant`
    return Tenant.objects.create(subdomain="northside", hospital_name="Northside Clinic")


@pytest.fixture
def admin_user(db):
    """
    EMR admin: role ADMIN on the profile created by the post_save signal.
    """
    User = get_user_model()
    user = User.objects.create_user(username="admin", email="admin@example.com", password="testpass123")
    user.emr_profile.role = "ADMIN"
    user.emr_profile.save(update_fields=["role"])
    return user


@pytest.fixture
def user(db):
    """
    Regular user without dashboard permissions.
    """
    User = get_user_model()
    return User.objects.create_user(username="nurse", email="nurse@example.com", password="testpass123")


@pytest.fixture
def api_client(admin_user):
    c = APIClient()
    c.force_authenticate(user=admin_user)
    return c


@pytest.fixture
def user_client(user):
    c = APIClient()
    c.force_authenticate(user=user)
    return c


@pytest.fixture
def patient(db, tenant):
    return Patient.objects.create(
        tenant_id=tenant.id,
        mrn="MRN-TEST-001",
        first_name="Test",
        last_name="Patient",
    )


@pytest.fixture
def fake_llm():
    """
    Replaces the generative client for the duration of a test.
    """
    fake = FakeGenerativeClient()
    with apps.get_app_config("extraction").client_handle.use(fake):
        yield fake

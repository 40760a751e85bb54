import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from emr_core.patients.models import Patient, VitalType

pytestmark = pytest.mark.django_db


def test_seed_demo_patient_creates_full_record(tenant):
    call_command("seed_demo_patient", "--tenant", tenant.subdomain)

    patient = Patient.objects.get(tenant_id=tenant.id, mrn="1")
    assert patient.full_name == "Kevin Ketong Gao"
    assert patient.allergies.count() == 3
    assert patient.medications.count() == 2
    assert patient.immunizations.count() == 3
    assert patient.vitals.get(type=VitalType.BLOOD_PRESSURE).systolic == 128
    assert patient.social_history.occupation == "Software Engineer"


def test_seed_demo_patient_is_idempotent(tenant):
    call_command("seed_demo_patient", "--tenant", tenant.subdomain)
    call_command("seed_demo_patient", "--tenant", tenant.subdomain)

    patient = Patient.objects.get(tenant_id=tenant.id, mrn="1")
    assert patient.allergies.count() == 3
    assert patient.notes.count() == 3
    assert patient.vitals.count() == 6


def test_seed_demo_patient_unknown_tenant(db):
    with pytest.raises(CommandError):
        call_command("seed_demo_patient", "--tenant", "nowhere")

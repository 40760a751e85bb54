# emr_core/patients/management/commands/seed_demo_patient.py

from django.core.management.base import BaseCommand, CommandError

from emr_core.patients.demo import seed_demo_patient
from emr_core.tenants.selectors import get_tenant_by_subdomain_or_none


class Command(BaseCommand):
    help = "Create (or reset) the demo patient for a tenant (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--tenant", required=True, help="Tenant subdomain")
        parser.add_argument("--mrn", default="1")

    def handle(self, *args, **options):
        tenant = get_tenant_by_subdomain_or_none(subdomain=options["tenant"].strip().lower())
        if tenant is None:
            raise CommandError(f"Unknown tenant: {options['tenant']}")

        patient = seed_demo_patient(tenant_id=tenant.id, mrn=options["mrn"])
        self.stdout.write(self.style.SUCCESS(f"Seeded {patient.full_name} (MRN: {patient.mrn}) in {tenant.subdomain}"))

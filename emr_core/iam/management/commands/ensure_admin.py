# emr_core/iam/management/commands/ensure_admin.py

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from emr_core.iam.models import UserRole
from emr_core.iam.services.profile import AdminUserService


class Command(BaseCommand):
    help = "Promote an existing user to ADMIN (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("username")

    def handle(self, *args, **options):
        User = get_user_model()
        try:
            user = User.objects.get(username=options["username"])
        except User.DoesNotExist:
            raise CommandError(f"Unknown user: {options['username']}")

        AdminUserService.set_role(user=user, role=UserRole.ADMIN)
        self.stdout.write(self.style.SUCCESS(f"{user.get_username()} is ADMIN"))

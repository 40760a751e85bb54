import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

pytestmark = pytest.mark.django_db


def test_ensure_admin_promotes_user(user):
    call_command("ensure_admin", user.username)
    call_command("ensure_admin", user.username)

    user.emr_profile.refresh_from_db()
    assert user.emr_profile.role == "ADMIN"


def test_ensure_admin_unknown_user():
    with pytest.raises(CommandError):
        call_command("ensure_admin", "ghost")

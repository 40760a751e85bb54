# emr_core/iam/selectors.py
from __future__ import annotations

from django.contrib.auth import get_user_model
from django.db.models import QuerySet
from rest_framework.exceptions import NotFound


def user_qs() -> QuerySet:
    User = get_user_model()
    return User.objects.select_related("emr_profile").order_by("username")


def get_user_or_404(*, user_id) -> object:
    try:
        return user_qs().get(pk=int(user_id))
    except (TypeError, ValueError, get_user_model().DoesNotExist):
        raise NotFound("User not found")

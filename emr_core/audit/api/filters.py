# emr_core/audit/api/filters.py
import django_filters

from emr_core.audit.models import ActionType, UserActionLog


class UserActionLogFilter(django_filters.FilterSet):
    action = django_filters.ChoiceFilter(choices=ActionType.choices)
    resource = django_filters.CharFilter(field_name="resource", lookup_expr="iexact")
    success = django_filters.BooleanFilter()
    user = django_filters.NumberFilter(field_name="user_id")
    since = django_filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="gte")

    class Meta:
        model = UserActionLog
        fields = ["action", "resource", "success", "user", "since"]

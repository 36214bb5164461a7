# billing/api/filters.py

import django_filters

from billing.models import Bill


class BillFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=Bill.STATUS_CHOICES)
    table = django_filters.UUIDFilter(field_name="table_id")
    customer = django_filters.UUIDFilter(field_name="customer_id")
    opened_from = django_filters.DateFilter(field_name="opened_at", lookup_expr="date__gte")
    opened_to = django_filters.DateFilter(field_name="opened_at", lookup_expr="date__lte")

    class Meta:
        model = Bill
        fields = ["status", "table", "customer", "payment_method"]

# tables/api/views.py

"""
TABLES API

- GET    /api/tables/              list (with current open bill summary)
- GET    /api/tables/<id>/         retrieve
- PATCH  /api/tables/<id>/         admin: name / status (not OCCUPIED)
- POST   /api/tables/<id>/open/    open a bill on an AVAILABLE table
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from billing.api.errors import UUID_PATTERN, billing_error_response
from billing.serializers import BillSerializer, OpenBillInputSerializer, pricing_payload
from billing.services.bill_service import open_bill
from billing.services.exceptions import BillingError
from permissions.roles import (
    CAP_BILLS_OPERATE,
    CAP_BILLS_VIEW,
    CAP_TABLES_MANAGE,
    HasAnyCapability,
    HasCapability,
)
from tables.models import Table
from tables.serializers import TableSerializer, TableUpdateSerializer


class TableViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    viewsets.GenericViewSet,
):
    queryset = Table.objects.select_related("current_bill").order_by("code")
    serializer_class = TableSerializer
    pagination_class = None
    filterset_fields = ["status"]
    http_method_names = ["get", "patch", "post", "head", "options"]
    lookup_value_regex = UUID_PATTERN

    required_capability = None

    def get_permissions(self):
        if self.action == "partial_update":
            self.required_capability = CAP_TABLES_MANAGE
            return [IsAuthenticated(), HasCapability()]
        if self.action == "open":
            self.required_capability = CAP_BILLS_OPERATE
            return [IsAuthenticated(), HasCapability()]

        self.required_any_capabilities = {CAP_BILLS_VIEW, CAP_TABLES_MANAGE}
        return [IsAuthenticated(), HasAnyCapability()]

    def get_serializer_class(self):
        if self.action == "partial_update":
            return TableUpdateSerializer
        if self.action == "open":
            return OpenBillInputSerializer
        return TableSerializer

    def partial_update(self, request, *args, **kwargs):
        table = self.get_object()
        serializer = TableUpdateSerializer(table, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        table = serializer.save()
        return Response(TableSerializer(table).data)

    @extend_schema(
        request=OpenBillInputSerializer,
        responses={201: BillSerializer},
        description="Open a bill on an available table (auto-applies today's promotion).",
    )
    @action(detail=True, methods=["post"], url_path="open")
    def open(self, request, pk=None):
        serializer = OpenBillInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            result = open_bill(
                user=request.user,
                table_id=pk,
                adult_count=data["adult_count"],
                child_count=data.get("child_count", 0),
                customer_phone=data.get("customer_phone") or None,
                customer_name=data.get("customer_name") or None,
            )
        except BillingError as exc:
            return billing_error_response(exc)

        return Response(
            {
                "bill": BillSerializer(result.bill).data,
                "table": TableSerializer(result.table).data,
                "pricing": pricing_payload(result.pricing),
                "promotion": result.promotion.name if result.promotion else None,
            },
            status=status.HTTP_201_CREATED,
        )

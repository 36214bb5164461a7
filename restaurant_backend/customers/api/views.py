# customers/api/views.py

"""
CUSTOMER API (STAFF)

- GET   /api/customers/lookup/?phone=0812345678   customer + last 5 closed bills
- GET   /api/customers/<id>/                      customer + last 10 closed bills
- PATCH /api/customers/<id>/                      rename (customers.write)
- PATCH /api/customers/<id>/stamps/               manual stamp correction (admin)
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from billing.api.errors import UUID_PATTERN, billing_error_response
from billing.models import Bill
from billing.serializers import BillSummarySerializer
from billing.services.exceptions import BillingError, NotFoundError
from customers.models import Customer
from customers.serializers import (
    CustomerNameSerializer,
    CustomerSerializer,
    PhoneLookupSerializer,
    StampAdjustmentSerializer,
)
from customers.services import customer_service
from permissions.roles import (
    CAP_BILLS_VIEW,
    CAP_CUSTOMERS_ADJUST_STAMPS,
    CAP_CUSTOMERS_WRITE,
    HasCapability,
)

LOOKUP_RECENT_BILLS = 5
DETAIL_RECENT_BILLS = 10


def _customer_payload(customer, *, recent: int) -> dict:
    bills = Bill.objects.filter(
        customer=customer, status=Bill.STATUS_CLOSED
    ).order_by("-closed_at")[:recent]
    data = CustomerSerializer(customer).data
    data["recent_bills"] = BillSummarySerializer(bills, many=True).data
    return data


class CustomerViewSet(viewsets.GenericViewSet):
    queryset = Customer.objects.all()
    serializer_class = CustomerSerializer
    pagination_class = None
    http_method_names = ["get", "patch", "head", "options"]
    lookup_value_regex = UUID_PATTERN

    required_capability = None

    _ACTION_CAPABILITIES = {
        "partial_update": CAP_CUSTOMERS_WRITE,
        "stamps": CAP_CUSTOMERS_ADJUST_STAMPS,
    }

    def get_permissions(self):
        self.required_capability = self._ACTION_CAPABILITIES.get(self.action, CAP_BILLS_VIEW)
        return [IsAuthenticated(), HasCapability()]

    @extend_schema(
        parameters=[OpenApiParameter("phone", str, required=True)],
        responses={200: CustomerSerializer},
    )
    @action(detail=False, methods=["get"], url_path="lookup")
    def lookup(self, request):
        serializer = PhoneLookupSerializer(data={"phone": request.query_params.get("phone", "")})
        serializer.is_valid(raise_exception=True)

        try:
            customer = customer_service.find_by_phone(serializer.validated_data["phone"])
        except BillingError as exc:
            return billing_error_response(exc)

        return Response(_customer_payload(customer, recent=LOOKUP_RECENT_BILLS))

    def retrieve(self, request, pk=None):
        customer = Customer.objects.filter(pk=pk).first()
        if customer is None:
            return billing_error_response(NotFoundError("Customer not found"))
        return Response(_customer_payload(customer, recent=DETAIL_RECENT_BILLS))

    @extend_schema(request=CustomerNameSerializer, responses={200: CustomerSerializer})
    def partial_update(self, request, pk=None):
        serializer = CustomerNameSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            customer = customer_service.update_name(
                customer_id=pk, name=serializer.validated_data["name"]
            )
        except BillingError as exc:
            return billing_error_response(exc)

        return Response(CustomerSerializer(customer).data)

    @extend_schema(request=StampAdjustmentSerializer, responses={200: CustomerSerializer})
    @action(detail=True, methods=["patch"], url_path="stamps")
    def stamps(self, request, pk=None):
        serializer = StampAdjustmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            customer = customer_service.adjust_stamps(
                user=request.user,
                customer_id=pk,
                adjustment=serializer.validated_data["adjustment"],
                reason=serializer.validated_data["reason"],
            )
        except BillingError as exc:
            return billing_error_response(exc)

        return Response(CustomerSerializer(customer).data)

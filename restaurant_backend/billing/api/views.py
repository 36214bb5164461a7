# billing/api/views.py

"""
======================================================
PATH: billing/api/views.py
======================================================
BILL VIEWSET (STAFF)

- GET    /api/bills/                      list (filter: status, table, customer, dates)
- GET    /api/bills/<id>/                 retrieve
- PATCH  /api/bills/<id>/                 edit head counts / discount / customer
- POST   /api/bills/<id>/apply-promo/     apply today's promotion
- POST   /api/bills/<id>/apply-loyalty/   redeem 10 stamps for one free adult
- POST   /api/bills/<id>/pay/             settle and close
- POST   /api/bills/<id>/void/            admin cancellation
- GET    /api/bills/<id>/receipt/         print-ready totals

Security:
- read: bills.view
- mutations: bills.operate
- void: bills.void (admin)
======================================================
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import mixins, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from billing.api.errors import UUID_PATTERN, billing_error_response
from billing.api.filters import BillFilter
from billing.models import Bill
from billing.serializers import (
    BillSerializer,
    EditBillInputSerializer,
    PayBillInputSerializer,
)
from billing.services import bill_service
from billing.services.exceptions import BillingError
from billing.services.money import format_money
from configuration.models import RestaurantSettings
from customers.serializers import CustomerBriefSerializer
from permissions.roles import (
    CAP_BILLS_OPERATE,
    CAP_BILLS_VIEW,
    CAP_BILLS_VOID,
    HasCapability,
)

_EDIT_FIELDS = ("adult_count", "child_count", "discount_type", "discount_value")


class BillViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    queryset = Bill.objects.select_related(
        "table", "customer", "opened_by", "closed_by"
    ).order_by("-opened_at")
    serializer_class = BillSerializer
    filterset_class = BillFilter
    http_method_names = ["get", "patch", "post", "head", "options"]
    lookup_value_regex = UUID_PATTERN

    required_capability = None

    _ACTION_CAPABILITIES = {
        "partial_update": CAP_BILLS_OPERATE,
        "apply_promo": CAP_BILLS_OPERATE,
        "apply_loyalty": CAP_BILLS_OPERATE,
        "pay": CAP_BILLS_OPERATE,
        "void": CAP_BILLS_VOID,
    }

    def get_permissions(self):
        self.required_capability = self._ACTION_CAPABILITIES.get(self.action, CAP_BILLS_VIEW)
        return [IsAuthenticated(), HasCapability()]

    def get_serializer_class(self):
        if self.action == "partial_update":
            return EditBillInputSerializer
        if self.action == "pay":
            return PayBillInputSerializer
        return BillSerializer

    # --------------------------------------------------
    # EDIT
    # --------------------------------------------------

    @extend_schema(request=EditBillInputSerializer, responses={200: BillSerializer})
    def partial_update(self, request, pk=None):
        serializer = EditBillInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        kwargs = {field: data[field] for field in _EDIT_FIELDS if field in data}
        if "customer_id" in data:
            kwargs["customer_id"] = data["customer_id"]

        try:
            bill = bill_service.edit_bill(user=request.user, bill_id=pk, **kwargs)
        except BillingError as exc:
            return billing_error_response(exc)

        return Response(BillSerializer(bill).data)

    # --------------------------------------------------
    # PROMOTION / LOYALTY
    # --------------------------------------------------

    @extend_schema(request=None, responses={200: dict})
    @action(detail=True, methods=["post"], url_path="apply-promo")
    def apply_promo(self, request, pk=None):
        try:
            result = bill_service.apply_promotion(user=request.user, bill_id=pk)
        except BillingError as exc:
            return billing_error_response(exc)

        return Response(
            {
                "bill": BillSerializer(result.bill).data,
                "promotion_applied": result.promotion.name,
                "discount_amount": str(result.discount),
            }
        )

    @extend_schema(request=None, responses={200: dict})
    @action(detail=True, methods=["post"], url_path="apply-loyalty")
    def apply_loyalty(self, request, pk=None):
        try:
            result = bill_service.apply_loyalty(user=request.user, bill_id=pk)
        except BillingError as exc:
            return billing_error_response(exc)

        return Response(
            {
                "bill": BillSerializer(result.bill).data,
                "customer": CustomerBriefSerializer(result.customer).data,
                "free_amount": str(result.free_amount),
                "stamps_redeemed": result.stamps_redeemed,
            }
        )

    # --------------------------------------------------
    # PAY / VOID
    # --------------------------------------------------

    @extend_schema(request=PayBillInputSerializer, responses={200: dict})
    @action(detail=True, methods=["post"], url_path="pay")
    def pay(self, request, pk=None):
        serializer = PayBillInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = bill_service.pay_bill(
                user=request.user,
                bill_id=pk,
                amount=serializer.validated_data["amount"],
                payment_method=serializer.validated_data["payment_method"],
            )
        except BillingError as exc:
            return billing_error_response(exc)

        return Response(
            {
                "status": result.bill.status,
                "change": str(result.change),
                "paid_amount": str(result.paid_amount),
                "total_amount": str(result.total_amount),
                "receipt_url": f"/api/bills/{result.bill.id}/receipt/",
            }
        )

    @extend_schema(request=None, responses={200: BillSerializer})
    @action(detail=True, methods=["post"], url_path="void")
    def void(self, request, pk=None):
        try:
            bill = bill_service.void_bill(user=request.user, bill_id=pk)
        except BillingError as exc:
            return billing_error_response(exc)

        return Response(BillSerializer(bill).data)

    # --------------------------------------------------
    # RECEIPT
    # --------------------------------------------------

    @extend_schema(responses={200: dict}, description="Print-ready receipt lines.")
    @action(detail=True, methods=["get"], url_path="receipt")
    def receipt(self, request, pk=None):
        bill = self.get_object()
        settings = RestaurantSettings.load()
        currency = settings.currency

        lines = [
            {"label": f"Adults x{bill.adult_count}", "amount": format_money(bill.base_gross, currency)},
            {"label": f"Children x{bill.child_count}", "amount": format_money(0, currency)},
        ]
        if bill.promo_applied:
            lines.append(
                {
                    "label": f"Promotion {bill.promo_applied}",
                    "amount": format_money(-bill.promo_discount_gross, currency),
                }
            )
        if bill.loyalty_free_applied:
            lines.append(
                {"label": "Loyalty free adult", "amount": format_money(-bill.loyalty_free_gross, currency)}
            )
        if bill.discount_type != Bill.DISCOUNT_NONE:
            suffix = "%" if bill.discount_type == Bill.DISCOUNT_PERCENT else f" {currency}"
            lines.append({"label": f"Discount {bill.discount_value}{suffix}", "amount": None})

        change = bill.paid_amount - bill.total_gross if bill.status == Bill.STATUS_CLOSED else None

        return Response(
            {
                "bill_id": str(bill.id),
                "table": bill.table.code,
                "status": bill.status,
                "opened_at": bill.opened_at,
                "closed_at": bill.closed_at,
                "lines": lines,
                "subtotal": format_money(bill.subtotal_gross, currency),
                "vat_rate": str(bill.vat_rate),
                "vat_included": format_money(bill.vat_amount, currency),
                "total": format_money(bill.total_gross, currency),
                "paid": format_money(bill.paid_amount, currency) if change is not None else None,
                "change": format_money(change, currency) if change is not None else None,
                "payment_method": bill.payment_method,
                "prompt_pay_target": settings.prompt_pay_target,
            }
        )

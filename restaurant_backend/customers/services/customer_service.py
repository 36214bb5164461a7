# customers/services/customer_service.py

"""
CUSTOMER SERVICE

- Lookup by phone (validated local format)
- Name edits
- Manual loyalty stamp adjustments (staff corrections)

Stamp adjustments take the same row lock as bill payment / loyalty
redemption, so a correction can never interleave with an accrual.
"""

from __future__ import annotations

import logging

from django.db import transaction

from billing.services import loyalty
from billing.services.bill_service import translate_storage_errors
from billing.services.exceptions import BillValidationError, NotFoundError
from customers.models import PHONE_RE, Customer

logger = logging.getLogger(__name__)


def find_by_phone(phone: str) -> Customer:
    phone = (phone or "").strip()
    if not PHONE_RE.match(phone):
        raise BillValidationError.single("phone", "Phone must be 10 digits starting with 0")

    customer = Customer.objects.filter(phone=phone).first()
    if customer is None:
        raise NotFoundError("Customer not found")
    return customer


@translate_storage_errors
@transaction.atomic
def update_name(*, customer_id, name) -> Customer:
    customer = Customer.objects.select_for_update().filter(pk=customer_id).first()
    if customer is None:
        raise NotFoundError("Customer not found")

    customer.name = (name or "").strip() or None
    customer.save(update_fields=["name", "updated_at"])
    return customer


@translate_storage_errors
@transaction.atomic
def adjust_stamps(*, user, customer_id, adjustment: int, reason: str = "") -> Customer:
    if isinstance(adjustment, bool) or not isinstance(adjustment, int):
        raise BillValidationError.single("adjustment", "Adjustment must be a whole number")

    customer = Customer.objects.select_for_update().filter(pk=customer_id).first()
    if customer is None:
        raise NotFoundError("Customer not found")

    previous = customer.loyalty_stamps
    try:
        customer.loyalty_stamps = loyalty.adjust(previous, adjustment)
    except ValueError:
        logger.warning(
            "Stamp adjustment rejected",
            extra={"customer_id": str(customer.id), "stamps": previous, "adjustment": adjustment},
        )
        raise BillValidationError.single(
            "adjustment", f"Stamps cannot go below zero. Current: {previous}"
        )

    customer.save(update_fields=["loyalty_stamps", "updated_at"])

    logger.info(
        "Loyalty stamps adjusted",
        extra={
            "customer_id": str(customer.id),
            "previous": previous,
            "adjustment": adjustment,
            "stamps": customer.loyalty_stamps,
            "reason": reason,
            "user_id": str(getattr(user, "id", "")),
        },
    )
    return customer

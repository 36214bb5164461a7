# billing/services/bill_service.py

"""
BILL SERVICE (APPLICATION SERVICE)

Cashier actions on a table's bill:
- open_bill         AVAILABLE table -> OPEN bill + OCCUPIED table
- edit_bill         head counts / manual discount / customer (OPEN only)
- apply_promotion   today's eligible promotion (OPEN, no loyalty)
- apply_loyalty     redeem 10 stamps for one free adult (OPEN, once)
- pay_bill          OPEN -> CLOSED, table released, +1 stamp
- void_bill         OPEN -> VOID, table released, no loyalty effect

Hard rules:
- Every action runs in ONE transaction; bill, table and customer rows are
  locked with select_for_update before they are read for a decision.
- Settings are loaded per call (RestaurantSettings.load()) and passed into
  the pure calculator; nothing is cached in process memory.
- Pricing is computed by billing.services.pricing only; this module never
  does money arithmetic besides the payment change.
- "today" and "now" come from the injected clock.
- Database failures surface as StorageError after rollback; no retries here.
"""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from django.db import DatabaseError, IntegrityError, transaction

from billing.models import MAX_HEAD_COUNT, MAX_MONEY, Bill
from billing.services import loyalty
from billing.services.bill_lifecycle import ensure_open, validate_transition
from billing.services.clock import system_clock
from billing.services.exceptions import (
    AlreadyAppliedError,
    BillingError,
    BillValidationError,
    InsufficientPaymentError,
    NoCustomerError,
    NoPromotionError,
    NotFoundError,
    StorageError,
    TableOccupiedError,
)
from billing.services.money import HUNDRED, ZERO, quantize_money, to_decimal
from billing.services.pricing import (
    DISCOUNT_NONE,
    DISCOUNT_PERCENT,
    DISCOUNT_TYPES,
    PricingResult,
    compute_pricing,
)
from billing.services.promotion_selector import (
    promotion_discount,
    select_applicable_promotion,
)
from billing.services.table_occupancy import occupy, release
from configuration.models import RestaurantSettings
from customers.models import PHONE_RE, Customer
from promotions.models import Promotion
from tables.models import Table

logger = logging.getLogger(__name__)


# ============================================================
# RESULTS
# ============================================================


@dataclass(frozen=True)
class OpenBillResult:
    bill: Bill
    table: Table
    pricing: PricingResult
    promotion: Optional[Promotion]


@dataclass(frozen=True)
class ApplyPromotionResult:
    bill: Bill
    promotion: Promotion
    discount: Decimal


@dataclass(frozen=True)
class ApplyLoyaltyResult:
    bill: Bill
    customer: Customer
    free_amount: Decimal
    stamps_redeemed: int


@dataclass(frozen=True)
class PaymentResult:
    bill: Bill
    change: Decimal
    paid_amount: Decimal
    total_amount: Decimal


# ============================================================
# STORAGE ERROR TRANSLATION
# ============================================================


def translate_storage_errors(func):
    """
    Outermost wrapper: the atomic block has already rolled back when a
    DatabaseError reaches this point.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DatabaseError as exc:
            logger.exception("Bill action failed at storage layer", extra={"action": func.__name__})
            raise StorageError() from exc

    return wrapper


# ============================================================
# VALIDATION
# ============================================================


def _validate_count(field: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise BillValidationError.single(field, f"{field} must be a whole number")
    if value < 0:
        raise BillValidationError.single(field, f"{field} must be zero or more")
    if value > MAX_HEAD_COUNT:
        raise BillValidationError.single(field, f"{field} cannot exceed {MAX_HEAD_COUNT}")
    return value


def _validate_phone(phone: str) -> str:
    phone = (phone or "").strip()
    if not PHONE_RE.match(phone):
        raise BillValidationError.single(
            "customer_phone", "Phone must be 10 digits starting with 0"
        )
    return phone


def _validate_discount(discount_type: str, discount_value) -> tuple[str, Decimal]:
    if discount_type not in DISCOUNT_TYPES:
        raise BillValidationError.single("discount_type", "Invalid discount type")

    try:
        value = to_decimal(discount_value)
    except ValueError:
        raise BillValidationError.single("discount_value", "Discount value must be a number")

    if value < ZERO:
        raise BillValidationError.single("discount_value", "Discount value must be zero or more")
    if discount_type == DISCOUNT_PERCENT and value > HUNDRED:
        raise BillValidationError.single("discount_value", "Percent discount cannot exceed 100")
    if discount_type == DISCOUNT_NONE:
        value = ZERO

    return discount_type, value


# ============================================================
# INTERNAL HELPERS
# ============================================================


def _lock_bill(bill_id) -> Bill:
    bill = Bill.objects.select_for_update().filter(pk=bill_id).first()
    if bill is None:
        raise NotFoundError("Bill not found")
    return bill


def _lock_table(table_id) -> Table:
    table = Table.objects.select_for_update().filter(pk=table_id).first()
    if table is None:
        raise NotFoundError("Table not found")
    return table


def _lock_customer(customer_id) -> Customer:
    customer = Customer.objects.select_for_update().filter(pk=customer_id).first()
    if customer is None:
        raise NotFoundError("Customer not found")
    return customer


def _select_promotion(*, clock) -> Optional[Promotion]:
    now = clock.now()
    candidates = Promotion.objects.active_at(now)
    return select_applicable_promotion(candidates, clock.today_code(), now=now)


def _price(
    *,
    bill: Bill,
    promotion: Optional[Promotion],
    rounding_mode: str,
) -> PricingResult:
    base = to_decimal(bill.adult_price_gross) * bill.adult_count
    pricing = compute_pricing(
        adult_count=bill.adult_count,
        child_count=bill.child_count,
        adult_price_gross=bill.adult_price_gross,
        vat_rate=bill.vat_rate,
        discount_type=bill.discount_type,
        discount_value=bill.discount_value,
        promotion_discount=promotion_discount(promotion, base),
        loyalty_free_applied=bill.loyalty_free_applied,
        rounding_mode=rounding_mode,
    )
    _ensure_storable(pricing)
    return pricing


_STORED_AMOUNTS = (
    "base_gross",
    "promo_gross_discount",
    "loyalty_free",
    "subtotal_gross",
    "vat_amount",
    "total_gross",
)


def _ensure_storable(pricing: PricingResult):
    # every persisted amount must fit the 2dp money columns
    snap = pricing.quantized()
    for key in _STORED_AMOUNTS:
        if abs(snap[key]) > MAX_MONEY:
            raise BillValidationError.single(
                "adult_count", f"Bill {key} exceeds the largest storable amount"
            )


def _apply_snapshot(bill: Bill, pricing: PricingResult, promotion: Optional[Promotion]):
    snap = pricing.quantized()
    bill.promo_applied = promotion.key if promotion is not None else None
    bill.base_gross = snap["base_gross"]
    bill.promo_discount_gross = snap["promo_gross_discount"]
    bill.loyalty_free_gross = snap["loyalty_free"]
    bill.subtotal_gross = snap["subtotal_gross"]
    bill.vat_amount = snap["vat_amount"]
    bill.total_gross = snap["total_gross"]


PRICING_FIELDS = [
    "promo_applied",
    "base_gross",
    "promo_discount_gross",
    "loyalty_free_gross",
    "subtotal_gross",
    "vat_amount",
    "total_gross",
    "updated_at",
]


def _log_context(bill: Bill, **extra) -> dict:
    ctx = {
        "bill_id": str(bill.id),
        "table_id": str(bill.table_id),
        "customer_id": str(bill.customer_id) if bill.customer_id else None,
        "total_gross": str(bill.total_gross),
    }
    ctx.update(extra)
    return ctx


# ============================================================
# OPEN
# ============================================================


@translate_storage_errors
@transaction.atomic
def open_bill(
    *,
    user,
    table_id,
    adult_count: int,
    child_count: int = 0,
    customer_phone: Optional[str] = None,
    customer_name: Optional[str] = None,
    clock=system_clock,
) -> OpenBillResult:
    adult_count = _validate_count("adult_count", adult_count)
    child_count = _validate_count("child_count", child_count)
    phone = _validate_phone(customer_phone) if customer_phone else None

    table = _lock_table(table_id)
    if table.status != Table.STATUS_AVAILABLE:
        logger.warning(
            "Open rejected: table not available",
            extra={"table_id": str(table.id), "table_status": table.status},
        )
        raise TableOccupiedError(f"Table {table.code} is {table.status.lower()}")

    settings = RestaurantSettings.load()

    customer = None
    if phone:
        customer, created = Customer.objects.get_or_create(phone=phone)
        name = (customer_name or "").strip()
        if name and not customer.name:
            customer.name = name
            customer.save(update_fields=["name", "updated_at"])
        if created:
            logger.info("Customer created at check-in", extra={"customer_id": str(customer.id)})

    bill = Bill(
        table=table,
        customer=customer,
        status=Bill.STATUS_OPEN,
        adult_count=adult_count,
        child_count=child_count,
        adult_price_gross=settings.adult_price_gross,
        vat_rate=settings.vat_rate,
        discount_type=DISCOUNT_NONE,
        discount_value=ZERO,
        loyalty_free_applied=False,
        opened_by=user,
        opened_at=clock.now(),
    )

    promotion = _select_promotion(clock=clock)
    pricing = _price(bill=bill, promotion=promotion, rounding_mode=settings.rounding_mode)
    _apply_snapshot(bill, pricing, promotion)

    try:
        with transaction.atomic():
            bill.save()
    except IntegrityError:
        # another OPEN bill already holds this table
        raise TableOccupiedError(f"Table {table.code} already has an open bill")

    occupy(table=table, bill=bill)

    logger.info(
        "Bill opened",
        extra=_log_context(
            bill,
            adult_count=adult_count,
            child_count=child_count,
            promo_applied=bill.promo_applied,
        ),
    )
    return OpenBillResult(bill=bill, table=table, pricing=pricing, promotion=promotion)


# ============================================================
# EDIT
# ============================================================


_UNSET = object()


@translate_storage_errors
@transaction.atomic
def edit_bill(
    *,
    user,
    bill_id,
    adult_count=None,
    child_count=None,
    discount_type=None,
    discount_value=None,
    customer_id=_UNSET,
    clock=system_clock,
) -> Bill:
    """
    Re-snapshots price and VAT from the current settings.

    Promotion eligibility is re-evaluated unless a loyalty free adult was
    applied (loyalty and promotion never stack).
    customer_id=None unlinks the customer; omit it to keep the current one.
    """
    bill = _lock_bill(bill_id)
    try:
        ensure_open(bill=bill, action="update")
    except BillingError:
        logger.warning("Edit rejected", extra=_log_context(bill, status=bill.status))
        raise

    if adult_count is not None:
        bill.adult_count = _validate_count("adult_count", adult_count)
    if child_count is not None:
        bill.child_count = _validate_count("child_count", child_count)

    new_type = discount_type if discount_type is not None else bill.discount_type
    new_value = discount_value if discount_value is not None else bill.discount_value
    bill.discount_type, bill.discount_value = _validate_discount(new_type, new_value)

    if customer_id is not _UNSET:
        if customer_id is None:
            bill.customer = None
        else:
            customer = Customer.objects.filter(pk=customer_id).first()
            if customer is None:
                raise NotFoundError("Customer not found")
            bill.customer = customer

    settings = RestaurantSettings.load()
    bill.adult_price_gross = settings.adult_price_gross
    bill.vat_rate = settings.vat_rate

    promotion = None if bill.loyalty_free_applied else _select_promotion(clock=clock)
    pricing = _price(bill=bill, promotion=promotion, rounding_mode=settings.rounding_mode)
    _apply_snapshot(bill, pricing, promotion)

    bill.save(
        update_fields=[
            "adult_count",
            "child_count",
            "discount_type",
            "discount_value",
            "customer",
            "adult_price_gross",
            "vat_rate",
            *PRICING_FIELDS,
        ]
    )

    logger.info("Bill edited", extra=_log_context(bill, user_id=str(getattr(user, "id", ""))))
    return bill


# ============================================================
# APPLY PROMOTION
# ============================================================


@translate_storage_errors
@transaction.atomic
def apply_promotion(*, user, bill_id, clock=system_clock) -> ApplyPromotionResult:
    bill = _lock_bill(bill_id)
    try:
        ensure_open(bill=bill, action="apply a promotion to")
        if bill.loyalty_free_applied:
            raise AlreadyAppliedError(
                "Cannot apply promotion when loyalty free is already applied"
            )

        promotion = _select_promotion(clock=clock)
        if promotion is None:
            raise NoPromotionError("No active promotions available today")
    except BillingError as exc:
        logger.warning("Apply promotion rejected", extra=_log_context(bill, code=exc.code))
        raise

    settings = RestaurantSettings.load()
    pricing = _price(bill=bill, promotion=promotion, rounding_mode=settings.rounding_mode)
    _apply_snapshot(bill, pricing, promotion)
    bill.save(update_fields=PRICING_FIELDS)

    discount = quantize_money(pricing.promo_gross_discount)
    logger.info(
        "Promotion applied",
        extra=_log_context(
            bill,
            promo_applied=promotion.key,
            discount=str(discount),
            user_id=str(getattr(user, "id", "")),
        ),
    )
    return ApplyPromotionResult(bill=bill, promotion=promotion, discount=discount)


# ============================================================
# APPLY LOYALTY
# ============================================================


@translate_storage_errors
@transaction.atomic
def apply_loyalty(*, user, bill_id) -> ApplyLoyaltyResult:
    bill = _lock_bill(bill_id)
    try:
        ensure_open(bill=bill, action="apply loyalty to")
        if not bill.customer_id:
            raise NoCustomerError("No customer linked to this bill")
        if bill.loyalty_free_applied:
            raise AlreadyAppliedError("Loyalty free already applied")

        customer = _lock_customer(bill.customer_id)
        remaining = loyalty.redeem(customer.loyalty_stamps)
    except BillingError as exc:
        logger.warning("Apply loyalty rejected", extra=_log_context(bill, code=exc.code))
        raise

    customer.loyalty_stamps = remaining
    customer.save(update_fields=["loyalty_stamps", "updated_at"])

    bill.loyalty_free_applied = True
    settings = RestaurantSettings.load()
    pricing = _price(bill=bill, promotion=None, rounding_mode=settings.rounding_mode)
    _apply_snapshot(bill, pricing, None)
    bill.save(update_fields=["loyalty_free_applied", *PRICING_FIELDS])

    free_amount = quantize_money(pricing.loyalty_free)
    logger.info(
        "Loyalty free applied",
        extra=_log_context(
            bill,
            stamps_remaining=remaining,
            free_amount=str(free_amount),
            user_id=str(getattr(user, "id", "")),
        ),
    )
    return ApplyLoyaltyResult(
        bill=bill,
        customer=customer,
        free_amount=free_amount,
        stamps_redeemed=loyalty.REDEEM_THRESHOLD,
    )


# ============================================================
# PAY
# ============================================================


@translate_storage_errors
@transaction.atomic
def pay_bill(
    *,
    user,
    bill_id,
    amount,
    payment_method: str = Bill.PAYMENT_CASH,
    clock=system_clock,
) -> PaymentResult:
    try:
        tendered = quantize_money(amount)
    except ValueError:
        raise BillValidationError.single("amount", "Amount must be a number")
    if tendered <= ZERO:
        raise BillValidationError.single("amount", "Amount must be greater than zero")

    method = (payment_method or Bill.PAYMENT_CASH).strip().upper()
    if method not in {Bill.PAYMENT_CASH, Bill.PAYMENT_PROMPTPAY}:
        raise BillValidationError.single("payment_method", "Payment method must be CASH or PROMPTPAY")

    bill = _lock_bill(bill_id)
    try:
        validate_transition(bill=bill, target_status=Bill.STATUS_CLOSED)
        total = quantize_money(bill.total_gross)
        if tendered < total:
            raise InsufficientPaymentError(
                f"Payment amount {tendered} is less than total {total}"
            )
    except BillingError as exc:
        logger.warning("Payment rejected", extra=_log_context(bill, code=exc.code, amount=str(tendered)))
        raise

    table = _lock_table(bill.table_id)

    bill.status = Bill.STATUS_CLOSED
    bill.paid_amount = tendered
    bill.payment_method = method
    bill.closed_by = user
    bill.closed_at = clock.now()
    bill.save(
        update_fields=[
            "status",
            "paid_amount",
            "payment_method",
            "closed_by",
            "closed_at",
            "updated_at",
        ]
    )

    release(table=table, bill=bill)

    if bill.customer_id:
        customer = _lock_customer(bill.customer_id)
        stamps = loyalty.accrue(customer.loyalty_stamps, bill.loyalty_free_applied)
        if stamps != customer.loyalty_stamps:
            customer.loyalty_stamps = stamps
            customer.save(update_fields=["loyalty_stamps", "updated_at"])

    change = tendered - total
    logger.info(
        "Bill paid",
        extra=_log_context(bill, paid_amount=str(tendered), change=str(change), method=method),
    )
    return PaymentResult(bill=bill, change=change, paid_amount=tendered, total_amount=total)


# ============================================================
# VOID
# ============================================================


@translate_storage_errors
@transaction.atomic
def void_bill(*, user, bill_id, clock=system_clock) -> Bill:
    bill = _lock_bill(bill_id)
    try:
        validate_transition(bill=bill, target_status=Bill.STATUS_VOID)
    except BillingError:
        logger.warning("Void rejected", extra=_log_context(bill, status=bill.status))
        raise

    table = _lock_table(bill.table_id)

    bill.status = Bill.STATUS_VOID
    bill.closed_by = user
    bill.closed_at = clock.now()
    bill.save(update_fields=["status", "closed_by", "closed_at", "updated_at"])

    release(table=table, bill=bill)

    logger.info("Bill voided", extra=_log_context(bill, user_id=str(getattr(user, "id", ""))))
    return bill

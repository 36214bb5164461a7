# billing/models/bill.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import Q

from billing.services.pricing import DISCOUNT_AMOUNT, DISCOUNT_NONE, DISCOUNT_PERCENT

User = settings.AUTH_USER_MODEL

# largest party a single bill seats
MAX_HEAD_COUNT = 999

# largest value a max_digits=12, decimal_places=2 column holds
MAX_MONEY = Decimal("9999999999.99")


def _money_field(**kwargs):
    return models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00"), **kwargs
    )


class Bill(models.Model):
    """
    One seating at one table.

    GUARANTEES:
    - Created OPEN together with its table becoming OCCUPIED
    - Mutable only while OPEN (edit, promotion, loyalty)
    - CLOSED / VOID are terminal
    - At most one OPEN bill per table (db constraint)
    - Monetary fields hold the 2dp snapshot of the last pricing run
    """

    STATUS_OPEN = "OPEN"
    STATUS_CLOSED = "CLOSED"
    STATUS_VOID = "VOID"

    STATUS_CHOICES = [
        (STATUS_OPEN, "Open"),
        (STATUS_CLOSED, "Closed"),
        (STATUS_VOID, "Void"),
    ]

    DISCOUNT_NONE = DISCOUNT_NONE
    DISCOUNT_PERCENT = DISCOUNT_PERCENT
    DISCOUNT_AMOUNT = DISCOUNT_AMOUNT

    DISCOUNT_CHOICES = [
        (DISCOUNT_NONE, "None"),
        (DISCOUNT_PERCENT, "Percent"),
        (DISCOUNT_AMOUNT, "Amount"),
    ]

    PAYMENT_CASH = "CASH"
    PAYMENT_PROMPTPAY = "PROMPTPAY"

    PAYMENT_CHOICES = [
        (PAYMENT_CASH, "Cash"),
        (PAYMENT_PROMPTPAY, "PromptPay"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    table = models.ForeignKey(
        "tables.Table",
        on_delete=models.PROTECT,
        related_name="bills",
    )
    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="bills",
    )

    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_OPEN)

    adult_count = models.PositiveIntegerField(default=0)
    child_count = models.PositiveIntegerField(default=0)

    # Snapshots taken at open/edit time
    adult_price_gross = _money_field()
    vat_rate = models.DecimalField(max_digits=5, decimal_places=4, default=Decimal("0.07"))

    discount_type = models.CharField(
        max_length=10, choices=DISCOUNT_CHOICES, default=DISCOUNT_NONE
    )
    discount_value = _money_field()

    promo_applied = models.CharField(
        max_length=64,
        null=True,
        blank=True,
        help_text="Promotion key (denormalised, not a foreign key).",
    )
    loyalty_free_applied = models.BooleanField(default=False)

    base_gross = _money_field()
    promo_discount_gross = _money_field()
    loyalty_free_gross = _money_field()
    subtotal_gross = _money_field()
    vat_amount = _money_field()
    total_gross = _money_field()

    paid_amount = _money_field()
    payment_method = models.CharField(
        max_length=10, choices=PAYMENT_CHOICES, null=True, blank=True
    )

    opened_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="bills_opened",
    )
    closed_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="bills_closed",
    )

    opened_at = models.DateTimeField()
    closed_at = models.DateTimeField(null=True, blank=True)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-opened_at"]
        indexes = [
            models.Index(fields=["status"], name="billing_bill_status_idx"),
            models.Index(fields=["opened_at"], name="billing_bill_opened_idx"),
            models.Index(fields=["closed_at"], name="billing_bill_closed_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["table"],
                condition=Q(status="OPEN"),
                name="billing_one_open_bill_per_table",
            ),
        ]

    def __str__(self):
        return f"Bill {self.id} [{self.status}] {self.total_gross}"

    @property
    def is_open(self) -> bool:
        return self.status == self.STATUS_OPEN

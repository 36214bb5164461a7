"""
MIGRATION: CREATE Bill

Includes the partial unique constraint: one OPEN bill per table.
"""

import uuid
from decimal import Decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


def _money():
    return models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("tables", "0001_initial"),
        ("customers", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Bill",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("OPEN", "Open"), ("CLOSED", "Closed"), ("VOID", "Void")],
                        default="OPEN",
                        max_length=10,
                    ),
                ),
                ("adult_count", models.PositiveIntegerField(default=0)),
                ("child_count", models.PositiveIntegerField(default=0)),
                ("adult_price_gross", _money()),
                (
                    "vat_rate",
                    models.DecimalField(decimal_places=4, default=Decimal("0.07"), max_digits=5),
                ),
                (
                    "discount_type",
                    models.CharField(
                        choices=[("NONE", "None"), ("PERCENT", "Percent"), ("AMOUNT", "Amount")],
                        default="NONE",
                        max_length=10,
                    ),
                ),
                ("discount_value", _money()),
                (
                    "promo_applied",
                    models.CharField(
                        blank=True,
                        help_text="Promotion key (denormalised, not a foreign key).",
                        max_length=64,
                        null=True,
                    ),
                ),
                ("loyalty_free_applied", models.BooleanField(default=False)),
                ("base_gross", _money()),
                ("promo_discount_gross", _money()),
                ("loyalty_free_gross", _money()),
                ("subtotal_gross", _money()),
                ("vat_amount", _money()),
                ("total_gross", _money()),
                ("paid_amount", _money()),
                (
                    "payment_method",
                    models.CharField(
                        blank=True,
                        choices=[("CASH", "Cash"), ("PROMPTPAY", "PromptPay")],
                        max_length=10,
                        null=True,
                    ),
                ),
                ("opened_at", models.DateTimeField()),
                ("closed_at", models.DateTimeField(blank=True, null=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "table",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="bills",
                        to="tables.table",
                    ),
                ),
                (
                    "customer",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="bills",
                        to="customers.customer",
                    ),
                ),
                (
                    "opened_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="bills_opened",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "closed_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="bills_closed",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-opened_at"],
                "indexes": [
                    models.Index(fields=["status"], name="billing_bill_status_idx"),
                    models.Index(fields=["opened_at"], name="billing_bill_opened_idx"),
                    models.Index(fields=["closed_at"], name="billing_bill_closed_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("status", "OPEN")),
                        fields=("table",),
                        name="billing_one_open_bill_per_table",
                    )
                ],
            },
        ),
    ]

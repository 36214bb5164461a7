"""
MIGRATION: CREATE RestaurantSettings (SINGLETON)
"""

from decimal import Decimal

from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="RestaurantSettings",
            fields=[
                (
                    "id",
                    models.PositiveSmallIntegerField(
                        default=1, editable=False, primary_key=True, serialize=False
                    ),
                ),
                (
                    "adult_price_gross",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("299.00"),
                        help_text="Adult buffet price, VAT inclusive.",
                        max_digits=10,
                    ),
                ),
                (
                    "vat_rate",
                    models.DecimalField(
                        decimal_places=4,
                        default=Decimal("0.07"),
                        help_text="VAT as a fraction (0.07 = 7%).",
                        max_digits=5,
                    ),
                ),
                ("currency", models.CharField(default="THB", max_length=8)),
                (
                    "rounding_mode",
                    models.CharField(
                        choices=[
                            ("NONE", "None"),
                            ("UP", "Up"),
                            ("DOWN", "Down"),
                            ("NEAREST", "Nearest"),
                        ],
                        default="NONE",
                        max_length=10,
                    ),
                ),
                ("prompt_pay_target", models.CharField(blank=True, max_length=64, null=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "restaurant settings",
                "verbose_name_plural": "restaurant settings",
            },
        ),
    ]

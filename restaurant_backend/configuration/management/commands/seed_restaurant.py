# configuration/management/commands/seed_restaurant.py

from decimal import Decimal

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from configuration.models import RestaurantSettings
from promotions.models import Promotion
from tables.models import Table, table_code_for

WEEKEND_PROMOTION = {
    "key": "WEEKEND_10_OFF",
    "name": "Weekend 10% Off",
    "type": Promotion.TYPE_PERCENT,
    "value": Decimal("10"),
    "days_of_week": ["SAT", "SUN"],
    "active": True,
}


class Command(BaseCommand):
    help = "Bootstrap the restaurant: settings singleton, table pool and weekend promotion."

    def add_arguments(self, parser):
        parser.add_argument(
            "--tables",
            type=int,
            default=None,
            help="Number of tables to ensure (default: RESTAURANT_DEFAULTS['TABLE_POOL_SIZE']).",
        )
        parser.add_argument(
            "--skip-promotion",
            action="store_true",
            help="Do not create the weekend promotion.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        count = options.get("tables")
        if count is None:
            count = int(settings.RESTAURANT_DEFAULTS.get("TABLE_POOL_SIZE", 50))
        if count < 1 or count > 50:
            raise CommandError("--tables must be between 1 and 50.")

        self.stdout.write(self.style.WARNING("Seeding restaurant..."))

        # -------------------------------
        # SETTINGS
        # -------------------------------
        restaurant = RestaurantSettings.load()
        self.stdout.write(f"settings: {restaurant}")

        # -------------------------------
        # TABLES
        # -------------------------------
        created_tables = 0
        for number in range(1, count + 1):
            _, created = Table.objects.get_or_create(
                code=table_code_for(number),
                defaults={"name": f"Table {number}"},
            )
            if created:
                created_tables += 1
        self.stdout.write(f"tables created: {created_tables} (pool: {count})")

        # -------------------------------
        # PROMOTIONS
        # -------------------------------
        if not options.get("skip_promotion"):
            defaults = {k: v for k, v in WEEKEND_PROMOTION.items() if k != "key"}
            _, created = Promotion.objects.get_or_create(
                key=WEEKEND_PROMOTION["key"], defaults=defaults
            )
            label = "created" if created else "exists"
            self.stdout.write(f"promotion {label}: {WEEKEND_PROMOTION['key']}")

        self.stdout.write(self.style.SUCCESS("Restaurant seeded."))

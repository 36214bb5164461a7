# billing/tests/factories.py

from datetime import datetime
from decimal import Decimal
from zoneinfo import ZoneInfo

from django.contrib.auth import get_user_model

from billing.services.clock import FixedClock
from configuration.models import RestaurantSettings
from customers.models import Customer
from promotions.models import Promotion
from tables.models import Table, table_code_for

User = get_user_model()

BANGKOK = ZoneInfo("Asia/Bangkok")

# 2024-06-05 is a Wednesday, 2024-06-08 a Saturday
WEDNESDAY_NOON = FixedClock(datetime(2024, 6, 5, 12, 0, tzinfo=BANGKOK))
SATURDAY_NOON = FixedClock(datetime(2024, 6, 8, 12, 0, tzinfo=BANGKOK))


def make_user(role="cashier", email=None, **extra):
    return User.objects.create_user(
        email=email or f"{role}@example.com",
        password="pass1234",
        role=role,
        **extra,
    )


def make_settings(**overrides):
    obj = RestaurantSettings.load()
    for key, value in overrides.items():
        setattr(obj, key, value)
    obj.save()
    return obj


def make_table(number=1, **extra):
    return Table.objects.create(code=table_code_for(number), name=f"Table {number}", **extra)


def make_customer(phone="0812345678", stamps=0, **extra):
    return Customer.objects.create(phone=phone, loyalty_stamps=stamps, **extra)


def make_weekend_promotion(**overrides):
    data = {
        "key": "WEEKEND_10_OFF",
        "name": "Weekend 10% Off",
        "type": Promotion.TYPE_PERCENT,
        "value": Decimal("10"),
        "days_of_week": ["SAT", "SUN"],
    }
    data.update(overrides)
    return Promotion.objects.create(**data)

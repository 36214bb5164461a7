# permissions/management/commands/seed_users.py

from __future__ import annotations

from dataclasses import dataclass

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from permissions.roles import ROLE_ADMIN, ROLE_CASHIER, ROLE_READ_ONLY


@dataclass(frozen=True)
class SeedUserSpec:
    label: str
    role: str
    username: str
    email: str


SEED_USERS = [
    SeedUserSpec("Admin", ROLE_ADMIN, "admin", "admin@restaurant.local"),
    SeedUserSpec("Cashier", ROLE_CASHIER, "cashier", "cashier@restaurant.local"),
    SeedUserSpec("Viewer", ROLE_READ_ONLY, "viewer", "viewer@restaurant.local"),
]


def _upsert_user(*, User, spec: SeedUserSpec, password: str, force_password: bool) -> tuple:
    """
    Idempotent:
    - create if missing
    - realign role / staff flags if it exists
    """
    is_admin = spec.role == ROLE_ADMIN

    user = User.objects.filter(email=spec.email).first()
    created = user is None

    if created:
        user = User.objects.create_user(
            email=spec.email,
            username=spec.username,
            password=password,
            role=spec.role,
            is_staff=True,
            is_superuser=is_admin,
        )
        return user, created

    dirty = []
    if user.role != spec.role:
        user.role = spec.role
        dirty.append("role")
    if user.is_superuser != is_admin:
        user.is_superuser = is_admin
        dirty.append("is_superuser")
    if not user.is_staff:
        user.is_staff = True
        dirty.append("is_staff")
    if force_password:
        user.set_password(password)
        dirty.append("password")

    if dirty:
        user.save(update_fields=dirty)

    return user, created


class Command(BaseCommand):
    help = "Seed restaurant staff users (admin, cashier, read-only viewer)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--password",
            type=str,
            default="Pass1234!",
            help="Password for seeded users (default: Pass1234!)",
        )
        parser.add_argument(
            "--force-password",
            action="store_true",
            help="Reset the password of seeded users that already exist.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        password = options.get("password") or ""
        force_password = bool(options.get("force_password"))

        if len(password) < 6:
            raise CommandError("--password must be at least 6 characters.")

        User = get_user_model()
        created_count = 0

        for spec in SEED_USERS:
            _, created = _upsert_user(
                User=User, spec=spec, password=password, force_password=force_password
            )
            if created:
                created_count += 1
                self.stdout.write(f"created: {spec.label} <{spec.email}> ({spec.role})")
            else:
                self.stdout.write(f"exists:  {spec.label} <{spec.email}> ({spec.role})")

        self.stdout.write(f"Created users: {created_count}")

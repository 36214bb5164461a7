# permissions/tests/test_roles.py

from io import StringIO
from types import SimpleNamespace

from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase
from rest_framework.test import APIRequestFactory

from permissions.roles import (
    ALL_CAPABILITIES,
    CAP_BILLS_OPERATE,
    CAP_BILLS_VIEW,
    CAP_BILLS_VOID,
    CAP_CUSTOMERS_ADJUST_STAMPS,
    CAP_REPORTS_VIEW,
    CAP_SETTINGS_EDIT,
    HasAnyCapability,
    HasCapability,
    IsStaff,
    effective_capabilities_for,
)

User = get_user_model()


class CapabilityTests(TestCase):
    """
    GUARANTEES:
    - cashiers operate bills but cannot void or adjust stamps
    - read-only users see bills and reports only
    - anonymous users are denied everywhere
    """

    def setUp(self):
        self.factory = APIRequestFactory()
        self.admin = User.objects.create_user(email="admin@example.com", password="pass", role="admin")
        self.cashier = User.objects.create_user(email="cashier@example.com", password="pass", role="cashier")
        self.viewer = User.objects.create_user(email="viewer@example.com", password="pass", role="read_only")

    # --------------------------------------------------
    # Helpers
    # --------------------------------------------------

    def _allowed(self, user, capability):
        request = self.factory.get("/")
        request.user = user
        view = SimpleNamespace(required_capability=capability)
        return HasCapability().has_permission(request, view)

    # --------------------------------------------------
    # Role map
    # --------------------------------------------------

    def test_admin_has_everything(self):
        self.assertEqual(effective_capabilities_for(self.admin), ALL_CAPABILITIES)

    def test_cashier(self):
        self.assertTrue(self._allowed(self.cashier, CAP_BILLS_OPERATE))
        self.assertFalse(self._allowed(self.cashier, CAP_BILLS_VOID))
        self.assertFalse(self._allowed(self.cashier, CAP_CUSTOMERS_ADJUST_STAMPS))
        self.assertFalse(self._allowed(self.cashier, CAP_REPORTS_VIEW))

    def test_read_only(self):
        self.assertTrue(self._allowed(self.viewer, CAP_BILLS_VIEW))
        self.assertTrue(self._allowed(self.viewer, CAP_REPORTS_VIEW))
        self.assertFalse(self._allowed(self.viewer, CAP_BILLS_OPERATE))
        self.assertFalse(self._allowed(self.viewer, CAP_SETTINGS_EDIT))

    def test_superuser_gets_every_capability(self):
        boss = User.objects.create_user(
            email="boss@example.com", password="pass", role="read_only", is_superuser=True
        )
        self.assertTrue(self._allowed(boss, CAP_BILLS_VOID))

    def test_missing_capability_on_view_denies(self):
        self.assertFalse(self._allowed(self.admin, None))

    def test_any_capability(self):
        request = self.factory.get("/")
        request.user = self.viewer
        view = SimpleNamespace(required_any_capabilities={CAP_BILLS_VOID, CAP_REPORTS_VIEW})
        self.assertTrue(HasAnyCapability().has_permission(request, view))

    def test_anonymous_denied(self):
        request = self.factory.get("/")
        request.user = AnonymousUser()
        self.assertFalse(HasCapability().has_permission(request, SimpleNamespace(required_capability=CAP_BILLS_VIEW)))
        self.assertFalse(IsStaff().has_permission(request, None))


class SeedUsersCommandTests(TestCase):
    def test_seed_is_idempotent(self):
        call_command("seed_users", stdout=StringIO())
        call_command("seed_users", stdout=StringIO())

        self.assertEqual(User.objects.count(), 3)
        admin = User.objects.get(email="admin@restaurant.local")
        self.assertEqual(admin.role, "admin")
        self.assertTrue(admin.is_superuser)
        self.assertTrue(User.objects.get(email="cashier@restaurant.local").check_password("Pass1234!"))

    def test_force_password(self):
        call_command("seed_users", stdout=StringIO())
        call_command("seed_users", "--password", "another-secret", "--force-password", stdout=StringIO())

        self.assertTrue(User.objects.get(email="viewer@restaurant.local").check_password("another-secret"))

    def test_short_password_rejected(self):
        with self.assertRaises(CommandError):
            call_command("seed_users", "--password", "abc", stdout=StringIO())

# permissions/roles.py

from __future__ import annotations

from typing import Optional

from rest_framework.permissions import BasePermission


# =========================================================
# ROLE CONSTANTS (STAFF JOB ROLES)
# =========================================================
ROLE_ADMIN = "admin"
ROLE_CASHIER = "cashier"
ROLE_READ_ONLY = "read_only"

STAFF_ROLES = {
    ROLE_ADMIN,
    ROLE_CASHIER,
    ROLE_READ_ONLY,
}


# =========================================================
# CAPABILITIES (THE REAL PERMISSION LANGUAGE)
# =========================================================
# Views protect capabilities, not raw roles.
CAP_BILLS_VIEW = "bills.view"
CAP_BILLS_OPERATE = "bills.operate"      # open table, edit, promo, loyalty, pay
CAP_BILLS_VOID = "bills.void"

CAP_TABLES_MANAGE = "tables.manage"
CAP_CUSTOMERS_WRITE = "customers.write"
CAP_CUSTOMERS_ADJUST_STAMPS = "customers.adjust_stamps"
CAP_PROMOTIONS_MANAGE = "promotions.manage"
CAP_SETTINGS_EDIT = "settings.edit"
CAP_REPORTS_VIEW = "reports.view"

ALL_CAPABILITIES = {
    CAP_BILLS_VIEW,
    CAP_BILLS_OPERATE,
    CAP_BILLS_VOID,
    CAP_TABLES_MANAGE,
    CAP_CUSTOMERS_WRITE,
    CAP_CUSTOMERS_ADJUST_STAMPS,
    CAP_PROMOTIONS_MANAGE,
    CAP_SETTINGS_EDIT,
    CAP_REPORTS_VIEW,
}


# =========================================================
# ROLE → CAPABILITY MAP
# =========================================================
ROLE_CAPABILITIES: dict[str, set[str]] = {
    ROLE_ADMIN: {
        *ALL_CAPABILITIES,
    },
    ROLE_CASHIER: {
        CAP_BILLS_VIEW,
        CAP_BILLS_OPERATE,
        CAP_CUSTOMERS_WRITE,
        # deliberately NOT void / stamp adjustments
    },
    ROLE_READ_ONLY: {
        CAP_BILLS_VIEW,
        CAP_REPORTS_VIEW,
    },
}


# =========================================================
# Helpers
# =========================================================
def get_user_role(user) -> Optional[str]:
    return getattr(user, "role", None)


def effective_capabilities_for(user) -> set[str]:
    if getattr(user, "is_superuser", False):
        return set(ALL_CAPABILITIES)
    return set(ROLE_CAPABILITIES.get(get_user_role(user), set()))


def user_has_capability(user, capability: str) -> bool:
    return capability in effective_capabilities_for(user)


# =========================================================
# Base Role Permission (Internal Use)
# =========================================================
class BaseRolePermission(BasePermission):
    """
    Subclasses must define:
    - allowed_roles (set)
    """

    allowed_roles: set[str] = set()

    def has_permission(self, request, view):
        user = request.user

        if not user or not user.is_authenticated:
            return False

        user_role = get_user_role(user)
        if not user_role:
            return False

        return user_role in self.allowed_roles


# =========================================================
# Capability Permissions
# =========================================================
class HasCapability(BasePermission):
    """
    Require a specific capability.

    Usage:
        permission_classes = [IsAuthenticated, HasCapability]
        view.required_capability = CAP_BILLS_VOID
    """

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        required = getattr(view, "required_capability", None)
        if not required:
            # deny-by-default
            return False

        return user_has_capability(user, required)


class HasAnyCapability(BasePermission):
    """
    Require ANY capability from a set.

    Usage:
        view.required_any_capabilities = {CAP_BILLS_VIEW, CAP_REPORTS_VIEW}
    """

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        required = getattr(view, "required_any_capabilities", None)
        if not required:
            return False

        caps = effective_capabilities_for(user)
        return any(cap in caps for cap in set(required))


# =========================================================
# Role Permissions
# =========================================================
class IsStaff(BaseRolePermission):
    allowed_roles = STAFF_ROLES

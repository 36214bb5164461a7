"""
BILL LIFECYCLE DOMAIN RULES

This module defines the ONLY allowed lifecycle transitions
for Bill entities.

    OPEN ──pay──▶ CLOSED
      └───void──▶ VOID

DESIGN PRINCIPLES:
- No database writes
- No side effects
- Single source of truth
"""

from billing.models import Bill
from billing.services.exceptions import InvalidBillStateError

# ============================================================
# STATE DEFINITIONS
# ============================================================

TERMINAL_STATES = {
    Bill.STATUS_CLOSED,
    Bill.STATUS_VOID,
}

ALLOWED_TRANSITIONS = {
    Bill.STATUS_OPEN: {
        Bill.STATUS_CLOSED,
        Bill.STATUS_VOID,
    },
}


# ============================================================
# DOMAIN RULES
# ============================================================


def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def validate_transition(*, bill: Bill, target_status: str):
    if not can_transition(from_status=bill.status, to_status=target_status):
        raise InvalidBillStateError(
            f"Bill {bill.id} cannot transition from "
            f"'{bill.status}' to '{target_status}'"
        )


def ensure_open(*, bill: Bill, action: str):
    """Guard for in-place mutations (edit, promotion, loyalty)."""
    if bill.status != Bill.STATUS_OPEN:
        raise InvalidBillStateError(
            f"Cannot {action} a {bill.status.lower()} bill"
        )

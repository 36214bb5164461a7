# billing/services/loyalty.py

"""
LOYALTY LEDGER RULES (PURE)

- 10 stamps redeem one free adult price.
- Paying a bill accrues a flat +1 stamp, regardless of head count.
- A bill that redeemed a free adult does not accrue (no double-dipping).

Callers apply these exactly once, inside the transaction that commits the
corresponding bill action (apply-loyalty or pay).
"""

from __future__ import annotations

from billing.services.exceptions import InsufficientStampsError

REDEEM_THRESHOLD = 10
STAMPS_PER_PAID_BILL = 1


def can_redeem(stamps: int) -> bool:
    return int(stamps) >= REDEEM_THRESHOLD


def redeem(stamps: int) -> int:
    if not can_redeem(stamps):
        raise InsufficientStampsError(current_stamps=stamps, required=REDEEM_THRESHOLD)
    return int(stamps) - REDEEM_THRESHOLD


def accrue(stamps: int, loyalty_free_applied: bool) -> int:
    if loyalty_free_applied:
        return int(stamps)
    return int(stamps) + STAMPS_PER_PAID_BILL


def adjust(stamps: int, adjustment: int) -> int:
    """
    Manual correction by staff.

    Raises ValueError when the result would be negative.
    """
    result = int(stamps) + int(adjustment)
    if result < 0:
        raise ValueError("Stamps cannot be negative")
    return result

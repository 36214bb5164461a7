# billing/services/exceptions.py

"""
BILLING SERVICE ERRORS

Centralized domain errors for the bill lifecycle.

Each error carries:
- code: stable machine-readable identifier (API contract)
- http_status: status used by the API layer
- message: human-readable, safe to show to cashiers
"""

from __future__ import annotations


class BillingError(Exception):
    """Base exception for all billing failures."""

    code = "BILLING_ERROR"
    http_status = 400
    default_message = "Billing operation failed"

    def __init__(self, message: str | None = None, *, details=None):
        self.message = message or self.default_message
        self.details = list(details or [])
        super().__init__(self.message)


class NotFoundError(BillingError):
    """Raised when a table, bill, customer or settings record is missing."""

    code = "NOT_FOUND"
    http_status = 404
    default_message = "Resource not found"


class InvalidBillStateError(BillingError):
    """Raised when an action targets a bill that is not OPEN."""

    code = "INVALID_STATE"
    default_message = "Bill is not open"


class TableOccupiedError(BillingError):
    code = "TABLE_OCCUPIED"
    http_status = 409
    default_message = "Table is not available"


class NoPromotionError(BillingError):
    code = "NO_PROMOTION"
    default_message = "No applicable promotion for today"


class NoCustomerError(BillingError):
    code = "NO_CUSTOMER"
    default_message = "No customer linked to this bill"


class AlreadyAppliedError(BillingError):
    code = "ALREADY_APPLIED"
    default_message = "Loyalty free already applied"


class InsufficientStampsError(BillingError):
    code = "INSUFFICIENT_STAMPS"

    def __init__(self, current_stamps: int, required: int = 10):
        self.current_stamps = int(current_stamps)
        self.required = int(required)
        super().__init__(
            f"Customer needs {self.required} stamps to redeem. Current: {self.current_stamps}"
        )


class InsufficientPaymentError(BillingError):
    code = "INSUFFICIENT_PAYMENT"
    default_message = "Payment amount is less than total"


class BillValidationError(BillingError):
    """
    Malformed input.

    details is a list of {"field": ..., "message": ...} pairs.
    """

    code = "VALIDATION_ERROR"
    default_message = "Invalid input"

    @classmethod
    def single(cls, field: str, message: str) -> "BillValidationError":
        return cls(message, details=[{"field": field, "message": message}])


class StorageError(BillingError):
    """Persistent store failure; the transaction was rolled back."""

    code = "STORAGE_ERROR"
    http_status = 503
    default_message = "Storage is temporarily unavailable"

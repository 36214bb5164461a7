# billing/api/errors.py

"""
API ERROR NORMALIZATION

Every failure leaves the API as:

    {"error": {"code": "...", "message": "...", "details": [...]}}

- BillingError subclasses carry their own code / http status
- DRF validation errors become VALIDATION_ERROR with field/message pairs
- other DRF exceptions (auth, permission, 404, throttling) keep their
  status and get a stable code
- nothing else is rendered here: unexpected exceptions propagate to
  Django (500, reported to Sentry when configured)
"""

from __future__ import annotations

from django.core.exceptions import PermissionDenied
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from billing.services.exceptions import BillingError

_DRF_CODES = {
    exceptions.NotAuthenticated: "NOT_AUTHENTICATED",
    exceptions.AuthenticationFailed: "AUTHENTICATION_FAILED",
    exceptions.PermissionDenied: "PERMISSION_DENIED",
    exceptions.NotFound: "NOT_FOUND",
    exceptions.MethodNotAllowed: "METHOD_NOT_ALLOWED",
    exceptions.Throttled: "THROTTLED",
    exceptions.ParseError: "VALIDATION_ERROR",
    exceptions.UnsupportedMediaType: "UNSUPPORTED_MEDIA_TYPE",
}

# Router lookup pattern for UUID primary keys; malformed ids 404 at routing.
UUID_PATTERN = r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"


def error_response(*, code: str, message: str, http_status: int, details=None):
    """
    Canonical API error response.
    """
    return Response(
        {"error": {"code": code, "message": message, "details": list(details or [])}},
        status=http_status,
    )


def flatten_validation_errors(detail, prefix: str = "") -> list[dict]:
    out = []
    if isinstance(detail, dict):
        for key, value in detail.items():
            field = f"{prefix}.{key}" if prefix else str(key)
            out.extend(flatten_validation_errors(value, field))
    elif isinstance(detail, (list, tuple)):
        for idx, value in enumerate(detail):
            if isinstance(value, (dict, list, tuple)):
                out.extend(flatten_validation_errors(value, f"{prefix}[{idx}]" if prefix else str(idx)))
            else:
                out.append({"field": prefix or "non_field_errors", "message": str(value)})
    else:
        out.append({"field": prefix or "non_field_errors", "message": str(detail)})
    return out


def billing_error_response(exc: BillingError):
    return error_response(
        code=exc.code,
        message=exc.message,
        http_status=exc.http_status,
        details=exc.details,
    )


def api_exception_handler(exc, context):
    if isinstance(exc, BillingError):
        return billing_error_response(exc)

    if isinstance(exc, Http404):
        exc = exceptions.NotFound()
    elif isinstance(exc, PermissionDenied):
        exc = exceptions.PermissionDenied()

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, exceptions.ValidationError):
        details = flatten_validation_errors(exc.detail)
        message = details[0]["message"] if details else "Invalid input"
        return error_response(
            code="VALIDATION_ERROR",
            message=message,
            http_status=status.HTTP_400_BAD_REQUEST,
            details=details,
        )

    code = "ERROR"
    for exc_class, mapped in _DRF_CODES.items():
        if isinstance(exc, exc_class):
            code = mapped
            break

    detail = getattr(exc, "detail", None)
    message = str(detail) if detail is not None else str(exc)

    out = error_response(code=code, message=message, http_status=response.status_code)
    # keep WWW-Authenticate / Retry-After headers
    for header, value in response.items():
        out[header] = value
    return out
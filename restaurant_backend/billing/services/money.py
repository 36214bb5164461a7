# billing/services/money.py

"""
MONEY HELPERS

Rules:
- Money is always Decimal, never float.
- Inputs are coerced through str() so float literals cannot leak binary noise.
- Pure computations keep full precision; quantize() is applied only at the
  storage / presentation boundary (2dp, ROUND_HALF_UP).
"""

from __future__ import annotations

from decimal import ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_UP, Decimal, InvalidOperation

TWOPLACES = Decimal("0.01")
ONE = Decimal("1")
ZERO = Decimal("0")
HUNDRED = Decimal("100")

ROUNDING_NONE = "NONE"
ROUNDING_UP = "UP"
ROUNDING_DOWN = "DOWN"
ROUNDING_NEAREST = "NEAREST"

ROUNDING_MODES = (ROUNDING_NONE, ROUNDING_UP, ROUNDING_DOWN, ROUNDING_NEAREST)

_ROUNDING_TO_DECIMAL = {
    ROUNDING_UP: ROUND_CEILING,
    ROUNDING_DOWN: ROUND_FLOOR,
    ROUNDING_NEAREST: ROUND_HALF_UP,
}


def to_decimal(value) -> Decimal:
    if value is None or value == "":
        return ZERO
    if isinstance(value, bool):
        raise ValueError("boolean is not a money value")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError) as exc:
            raise ValueError(f"Invalid decimal value: {value!r}") from exc
    if not result.is_finite():
        raise ValueError(f"Invalid decimal value: {value!r}")
    return result


def quantize_money(value) -> Decimal:
    return to_decimal(value).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def clamp_non_negative(value: Decimal) -> Decimal:
    return value if value > ZERO else ZERO


def apply_rounding(amount: Decimal, mode: str | None) -> Decimal:
    """
    Round to a whole currency unit.

    NONE (or empty) returns the amount untouched.
    """
    if not mode or mode == ROUNDING_NONE:
        return amount
    rounding = _ROUNDING_TO_DECIMAL.get(mode)
    if rounding is None:
        raise ValueError(f"Unknown rounding mode: {mode}")
    return amount.quantize(ONE, rounding=rounding)


def format_money(amount, currency: str = "THB") -> str:
    return f"{quantize_money(amount)} {currency}"

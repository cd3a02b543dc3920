"""
Module: hub_kernel.db.types
Responsibility: Money precision and rounding helpers.  Centralizes rounding so
    that every selector and report uses identical definitions.
Architecture position: Kernel > DB.  May be imported by models/, domain/,
    and selectors/.  MUST NOT import from any of those layers.

Invariants enforced:
    - No floats anywhere.  All monetary amounts use Decimal with explicit
      precision, and round_money() is the only sanctioned rounding function.
"""

from decimal import ROUND_HALF_UP, Decimal

MONEY_DECIMAL_PLACES = 2
DEFAULT_ROUNDING = ROUND_HALF_UP

ZERO = Decimal("0")


def round_money(
    value: Decimal,
    decimal_places: int = MONEY_DECIMAL_PLACES,
    rounding: str = DEFAULT_ROUNDING,
) -> Decimal:
    """
    Round a monetary value to specified decimal places.

    This is the ONLY sanctioned rounding function for monetary values.  It is
    applied at presentation time; aggregation always works on unrounded sums.
    """
    quantize_str = "0." + "0" * decimal_places if decimal_places else "1"
    return value.quantize(Decimal(quantize_str), rounding=rounding)


def coalesce_amount(value: Decimal | int | float | str | None) -> Decimal:
    """
    Normalize a SQL SUM result to an exact Decimal.

    SUM over zero rows is NULL; that becomes Decimal("0") so downstream
    addition is always defined.  Non-Decimal driver values are converted
    through their string form to avoid binary float artifacts.
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))

"""
Amount Parsing Module

Converts raw numeric input (form fields, JSON bodies, Python numbers) into
Decimal values. NEVER keeps float for monetary values: floats are converted
through their string representation.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, getcontext
from numbers import Number
from typing import Any
import re

from .errors import AccountError, ErrorKind

# High precision for interest calculations
getcontext().prec = 28

DISPLAY_PRECISION = 2


def decimal_from_string(value: str) -> Decimal:
    """
    Safely convert string to Decimal, handling common formats

    Args:
        value: String representation of number

    Returns:
        Decimal value

    Raises:
        ValueError: If string cannot be converted to valid Decimal
    """
    if not value or not isinstance(value, str):
        raise ValueError("Value must be a non-empty string")

    # Remove currency symbols and whitespace; anything else must parse
    clean_value = re.sub(r'[\s$€£]', '', value)

    if ',' in clean_value and '.' in clean_value:
        # Both comma and dot - assume comma is thousands separator
        clean_value = clean_value.replace(',', '')
    elif ',' in clean_value and clean_value.count(',') == 1:
        parts = clean_value.split(',')
        if len(parts[1]) <= 2:  # Likely decimal separator
            clean_value = clean_value.replace(',', '.')
        else:  # Likely thousands separator
            clean_value = clean_value.replace(',', '')
    elif ',' in clean_value:
        clean_value = clean_value.replace(',', '')

    try:
        return Decimal(clean_value)
    except InvalidOperation:
        raise ValueError(f"Cannot convert '{value}' to Decimal")


def to_decimal(value: Any) -> Decimal:
    """
    Convert a raw numeric value to Decimal

    Raises:
        ValueError: If the value is not numeric
    """
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Not a numeric value: {value!r}")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("nan", "inf", "-inf", "+inf", "infinity", "-infinity"):
            return Decimal(lowered)
        return decimal_from_string(value)
    if isinstance(value, Number):
        return Decimal(str(value))
    raise ValueError(f"Not a numeric value: {value!r}")


def parse_amount(value: Any) -> Decimal:
    """
    Parse a monetary amount that must be finite and strictly positive

    Raises:
        AccountError: INVALID_AMOUNT when the value is unusable
    """
    try:
        amount = to_decimal(value)
    except ValueError:
        raise AccountError(ErrorKind.INVALID_AMOUNT, f"Invalid amount: {value!r}")

    if not amount.is_finite() or amount <= 0:
        raise AccountError(ErrorKind.INVALID_AMOUNT, f"Amount must be a positive number, got {value!r}")
    return amount


def parse_rate(value: Any) -> Decimal:
    """Parse a finite, non-negative interest rate"""
    try:
        rate = to_decimal(value)
    except ValueError:
        raise AccountError(ErrorKind.INVALID_AMOUNT, f"Invalid rate: {value!r}")

    if not rate.is_finite() or rate < 0:
        raise AccountError(ErrorKind.INVALID_AMOUNT, f"Rate must be a non-negative number, got {value!r}")
    return rate


def parse_balance(value: Any) -> Decimal:
    """Parse an opening balance (finite, zero allowed)"""
    try:
        balance = to_decimal(value)
    except ValueError:
        raise AccountError(ErrorKind.INVALID_AMOUNT, f"Invalid balance: {value!r}")

    if not balance.is_finite() or balance < 0:
        raise AccountError(ErrorKind.INVALID_AMOUNT, f"Balance must be a non-negative number, got {value!r}")
    return balance


def parse_months(value: Any, allow_zero: bool = True) -> int:
    """
    Parse a month count

    Accepts ints and integral numeric strings. Booleans, fractional values and
    negative counts are rejected.

    Raises:
        AccountError: INVALID_TERM
    """
    if isinstance(value, bool) or value is None:
        raise AccountError(ErrorKind.INVALID_TERM, f"Invalid number of months: {value!r}")

    if isinstance(value, int):
        months = value
    else:
        try:
            as_decimal = to_decimal(value)
        except ValueError:
            raise AccountError(ErrorKind.INVALID_TERM, f"Invalid number of months: {value!r}")
        if not as_decimal.is_finite() or as_decimal != as_decimal.to_integral_value():
            raise AccountError(ErrorKind.INVALID_TERM, f"Months must be a whole number, got {value!r}")
        months = int(as_decimal)

    minimum = 0 if allow_zero else 1
    if months < minimum:
        raise AccountError(ErrorKind.INVALID_TERM, f"Months must be at least {minimum}, got {value!r}")
    return months


def round_for_display(value: Decimal) -> Decimal:
    """Round to two decimal places for presentation"""
    return value.quantize(Decimal('0.1') ** DISPLAY_PRECISION, rounding=ROUND_HALF_UP)


def format_amount(value: Decimal) -> str:
    """Format for display"""
    return f"{round_for_display(value):,.{DISPLAY_PRECISION}f}"

"""Amount and currency normalization.

Airwallex money fields are sent as integers in minor units (cents). The
conversion happens exactly once, in ``to_minor_units``, when a storefront
request enters the service layer.
"""

import re
import time
import uuid
from decimal import ROUND_HALF_UP, Decimal, DecimalException, InvalidOperation
from typing import Any

from payment_proxy.models.exceptions import ValidationError

DEFAULT_CURRENCY = "USD"

_MINOR_UNIT_FACTOR = Decimal(100)
_CURRENCY_PATTERN = re.compile(r"^[A-Za-z]{3}$")


def parse_amount(raw_amount: Any) -> Decimal:
    """Parse a caller-supplied amount in major units.

    Args:
        raw_amount: Number or numeric string (e.g. ``29.99`` or ``"29.99"``)

    Returns:
        Finite, strictly positive Decimal

    Raises:
        ValidationError: If the amount is missing, non-numeric, non-finite or <= 0
    """
    # bool is an int subclass; True must not become a one-dollar charge
    if raw_amount is None or isinstance(raw_amount, bool):
        raise _invalid_amount()

    if isinstance(raw_amount, (int, float)):
        text = repr(raw_amount)
    elif isinstance(raw_amount, str):
        text = raw_amount.strip()
    else:
        raise _invalid_amount()

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise _invalid_amount() from None

    if not amount.is_finite() or amount <= 0:
        raise _invalid_amount()

    return amount


def to_minor_units(raw_amount: Any) -> int:
    """Convert a major-unit amount to integer minor units.

    Rounds half up, so ``0.125`` becomes ``13`` and ``29.99`` becomes ``2999``.

    Raises:
        ValidationError: If the amount is invalid, too large to represent or
            rounds to zero
    """
    amount = parse_amount(raw_amount)
    try:
        minor = int(
            (amount * _MINOR_UNIT_FACTOR).quantize(Decimal(1), rounding=ROUND_HALF_UP)
        )
    except DecimalException:
        # Exponent or digit count beyond the default Decimal context
        raise _invalid_amount() from None
    if minor <= 0:
        raise _invalid_amount()
    return minor


def normalize_currency(currency: str | None) -> str:
    """Upper-case a three-letter currency code, defaulting to USD."""
    if currency is None or (isinstance(currency, str) and not currency.strip()):
        return DEFAULT_CURRENCY
    if not isinstance(currency, str) or not _CURRENCY_PATTERN.match(currency.strip()):
        raise ValidationError(
            field="currency",
            message="Currency must be a three-letter ISO 4217 code",
        )
    return currency.strip().upper()


def generate_request_id(prefix: str = "pi") -> str:
    """Unique request id Airwallex uses to deduplicate resubmissions."""
    return f"{prefix}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"


def _invalid_amount() -> ValidationError:
    return ValidationError(field="amount", message="Valid amount (> 0) is required")

"""Data normalization layer.

Converts caller-supplied values to their storage form and back.
Decimal columns are persisted as exact decimal text at the column's scale,
never as binary floating point; business dates as ISO-8601 text.
"""

from datetime import date, datetime, time, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

# Scale constants for the persisted decimal columns
CURRENCY_SCALE = 2  # balances, amounts, totals
RATE_SCALE = 4  # NAV, fees, performance percentages, unit prices
QUANTITY_SCALE = 6  # fractional shares
DEFAULT_PRECISION = 15


def to_decimal(value: Any) -> Decimal:
    """Convert a caller-supplied number to an exact Decimal.

    Floats go through their shortest repr so 0.1 becomes Decimal("0.1"),
    not the binary expansion.

    Raises:
        ValueError: If value is not a finite number
    """
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Expected a number, got {value!r}")

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as e:
            raise ValueError(f"Expected a number, got {value!r}") from e
    else:
        raise ValueError(f"Expected a number, got {value!r}")

    if not result.is_finite():
        raise ValueError(f"Expected a finite number, got {value!r}")

    return result


def to_storage(value: Any, scale: int, precision: int = DEFAULT_PRECISION) -> str:
    """Convert a number to exact decimal text at a fixed scale.

    Args:
        value: Decimal, int, float or decimal string
        scale: Number of fractional digits kept (2 for currency, 4 for rates)
        precision: Total significant digits the column holds

    Returns:
        Decimal text with exactly `scale` fractional digits, e.g. "-2.3456"

    Raises:
        ValueError: If value is not a finite number or overflows the column
    """
    quantum = Decimal(1).scaleb(-scale)
    try:
        quantized = to_decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise ValueError(f"{value} exceeds numeric({precision},{scale})") from e

    integer_digits = precision - scale
    if abs(quantized) >= Decimal(10) ** integer_digits:
        raise ValueError(
            f"{value} exceeds numeric({precision},{scale}) "
            f"(max {integer_digits} integer digits)"
        )

    # Normalize negative zero so "-0.00" never reaches storage
    if quantized == 0:
        quantized = abs(quantized)

    return format(quantized, "f")


def from_storage(text: str) -> Decimal:
    """Parse stored decimal text back to an exact Decimal.

    Raises:
        ValueError: If text is not decimal text
    """
    if not isinstance(text, str):
        raise ValueError(f"Stored decimal must be text, got {type(text).__name__}")
    try:
        return Decimal(text)
    except InvalidOperation as e:
        raise ValueError(f"Invalid stored decimal: {text!r}") from e


def normalize_timestamp(value: Any) -> str:
    """Convert a datetime, date or ISO-8601 string to ISO-8601 text.

    Naive datetimes are treated as UTC.

    Raises:
        ValueError: If value cannot be interpreted as a point in time
    """
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, date):
        moment = datetime.combine(value, time.min)
    elif isinstance(value, str) and value.strip():
        try:
            moment = datetime.fromisoformat(value.strip())
        except ValueError as e:
            raise ValueError(f"Invalid ISO-8601 timestamp: {value!r}") from e
    else:
        raise ValueError(f"Expected a date or datetime, got {value!r}")

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)

    return moment.astimezone(timezone.utc).isoformat()


def parse_timestamp(text: str) -> datetime:
    """Parse ISO-8601 text written by normalize_timestamp()."""
    return datetime.fromisoformat(text)


def utc_now() -> str:
    """Current UTC time as ISO-8601 text (used for created_at/updated_at)."""
    return datetime.now(timezone.utc).isoformat()

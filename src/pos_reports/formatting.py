"""Text, number, currency and date formatting shared by every report type."""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional, Union


DEFAULT_CURRENCY = "PHP"
ELLIPSIS = "..."
NOT_AVAILABLE = "N/A"

DateLike = Union[date, datetime, str, None]

CENT = Decimal("0.01")


def to_number(value: Any) -> float:
    """Coerce a raw field to float, treating anything unparseable as zero."""
    if value is None:
        return 0.0
    try:
        if isinstance(value, (bool, int, float, Decimal)):
            number = float(value)
        else:
            number = float(str(value).replace(",", "").strip())
    except (ValueError, OverflowError):
        return 0.0
    # NaN and infinities count as missing
    if number != number or number in (float("inf"), float("-inf")):
        return 0.0
    return number


def to_decimal(value: Any) -> Decimal:
    """Coerce to a cent-exact Decimal."""
    if isinstance(value, Decimal):
        amount = value if value.is_finite() else Decimal("0")
    else:
        try:
            amount = Decimal(str(to_number(value)))
        except InvalidOperation:
            amount = Decimal("0")
    try:
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # More digits than the context precision allows
        return Decimal("0.00")


def to_text(value: Any, default: str = "") -> str:
    """Render a raw field as text, using ``default`` for None/empty values."""
    if value is None:
        return default
    text = str(value)
    return text if text else default


def format_currency(amount: Any, currency: str = DEFAULT_CURRENCY) -> str:
    """Format as ``"PHP 1,234.50"`` independent of the runtime locale."""
    return f"{currency} {to_decimal(amount):,.2f}"


def format_quantity(value: Any) -> str:
    """Integral quantities print without a decimal part."""
    number = to_number(value)
    if number.is_integer():
        return str(int(number))
    return f"{number:g}"


def truncate(text: str, max_chars: Optional[int], marker: str = ELLIPSIS) -> str:
    """Cut ``text`` to ``max_chars`` characters and append ``marker`` if it was longer."""
    if max_chars is None or len(text) <= max_chars:
        return text
    return text[:max_chars] + marker


def parse_date(value: DateLike) -> Optional[datetime]:
    """Parse a date, datetime or ISO-8601 string. Returns None if unparseable."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text[:10])
    except ValueError:
        return None


def format_date(value: DateLike) -> str:
    """Long US-style date: ``"January 5, 2024"``."""
    if value is None or value == "":
        return NOT_AVAILABLE
    parsed = parse_date(value)
    if parsed is None:
        return str(value)
    return f"{parsed.strftime('%B')} {parsed.day}, {parsed.year}"


def format_datetime(value: DateLike) -> str:
    """Long date with a short 12-hour time: ``"January 5, 2024 at 3:04 PM"``."""
    parsed = parse_date(value)
    if parsed is None:
        return format_date(value)
    hour = parsed.hour % 12 or 12
    meridiem = "AM" if parsed.hour < 12 else "PM"
    return f"{format_date(parsed)} at {hour}:{parsed.minute:02d} {meridiem}"


def format_period_text(start: DateLike, end: DateLike, granularity: str = "Daily") -> str:
    """
    Human-readable reporting period.

    Weekly ranges inside one month compress to ``"Jan 1–7, 2024"``; ranges
    crossing a month boundary spell out both months. Monthly periods show the
    month name and year of the start date. Everything else is rendered as a
    full ``start - end`` date range.
    """
    start_dt = parse_date(start)
    end_dt = parse_date(end)

    if granularity == "Weekly" and start_dt and end_dt:
        if start_dt.month != end_dt.month:
            return (
                f"{start_dt.strftime('%b')} {start_dt.day} - "
                f"{end_dt.strftime('%b')} {end_dt.day}, {end_dt.year}"
            )
        return f"{start_dt.strftime('%b')} {start_dt.day}–{end_dt.day}, {start_dt.year}"

    if granularity == "Monthly" and start_dt:
        return f"{start_dt.strftime('%B')} {start_dt.year}"

    return f"{format_date(start)} - {format_date(end)}"

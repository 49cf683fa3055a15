"""Display formatting for dashboard figures."""
from __future__ import annotations

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

THOUSAND = Decimal("1000")


def round_half_up(value: Decimal | int | float, places: int = 0) -> Decimal:
    exponent = Decimal(1).scaleb(-places)
    return Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP)


def format_integer(value: Decimal | int | float) -> str:
    return str(int(round_half_up(value)))


def format_one_decimal(value: Decimal | int | float) -> str:
    return f"{round_half_up(value, 1):.1f}"


def format_currency_without_unit(amount: Decimal) -> str:
    """Millions below 1000, otherwise billions with one decimal and no unit."""
    if amount >= THOUSAND:
        return format_one_decimal(amount / THOUSAND)
    return format_integer(amount)


def format_number(amount: Decimal) -> str:
    if amount >= THOUSAND:
        return format_one_decimal(amount / THOUSAND) + "B"
    return format_integer(amount)


def format_gigawatts(megawatts: Decimal) -> str:
    return format_one_decimal(megawatts / THOUSAND)


def format_last_updated(value: object) -> str:
    """``2024-05-01T10:15:00Z`` -> ``1 May 2024, 10:15 UTC``; unparseable input is returned as-is."""
    if not value:
        return "Unknown"
    value = str(value)
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    parsed = parsed.astimezone(timezone.utc)
    return f"{parsed.day} {parsed:%b %Y, %H:%M} UTC"

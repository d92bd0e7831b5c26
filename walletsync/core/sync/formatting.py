"""Display formatting for staking and balance values."""

from decimal import Decimal

SECONDS_PER_DAY = 86400
SECONDS_PER_HOUR = 3600
SECONDS_PER_MINUTE = 60


def _component(value: int, unit: str) -> str:
    if value > 1:
        return f"{value} {unit}s "
    return f"{value} {unit} "


def seconds_to_string(seconds: int) -> str:
    """
    Render a whole number of seconds as days, hours and minutes.

    Each non-zero component is followed by a space, so the result keeps a
    trailing space. Leftover seconds are not shown. Returns "Unknown" when
    there is nothing to show, including for negative input.

    Examples:
        seconds_to_string(90061) -> "1 day 1 hour 1 minute "
        seconds_to_string(172800) -> "2 days "
        seconds_to_string(59) -> "Unknown"
    """
    if seconds <= 0:
        return "Unknown"

    num_days = seconds // SECONDS_PER_DAY
    num_hours = (seconds % SECONDS_PER_DAY) // SECONDS_PER_HOUR
    num_minutes = ((seconds % SECONDS_PER_DAY) % SECONDS_PER_HOUR) // SECONDS_PER_MINUTE
    num_seconds = ((seconds % SECONDS_PER_DAY) % SECONDS_PER_HOUR) % SECONDS_PER_MINUTE  # noqa: F841

    date_string = ""
    if num_days > 0:
        date_string += _component(num_days, "day")
    if num_hours > 0:
        date_string += _component(num_hours, "hour")
    if num_minutes > 0:
        date_string += _component(num_minutes, "minute")

    if date_string == "":
        date_string = "Unknown"

    return date_string


def format_amount(amount: int, decimals: int = 8) -> str:
    """
    Format an amount in base units as a coin value, trimming trailing zeros.

    Examples:
        format_amount(150000000) -> "1.5"
        format_amount(0) -> "0"
    """
    if amount == 0:
        return "0"
    if decimals == 0:
        return str(amount)

    value = Decimal(amount) / Decimal(10**decimals)
    formatted = format(value, "f")
    if "." in formatted:
        formatted = formatted.rstrip("0").rstrip(".")
    return formatted

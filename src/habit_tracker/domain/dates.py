"""Canonical day keys in ``YYYY-MM-DD`` form."""

from datetime import date, datetime

SUNDAY = 6
_DATE_KEY_PARTS = 3


def format_date_key(day: date) -> str:
    """Return the zero-padded ``YYYY-MM-DD`` key for a day."""
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def parse_date_key(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` key into a date."""
    parts = value.split("-")
    if len(parts) != _DATE_KEY_PARTS or not all(part.isdigit() for part in parts):
        raise ValueError(f"Invalid date key: {value!r}")
    year, month, day = (int(part) for part in parts)
    return date(year, month, day)


def is_date_key(value: str) -> bool:
    """Return True when the value parses as a day key."""
    try:
        parse_date_key(value)
    except ValueError:
        return False
    return True


def normalize_date_key(value: object) -> str:
    """Reduce a date-like value to its ``YYYY-MM-DD`` key.

    Spreadsheet backends hand dates back either as native values or as ISO
    datetime strings (``2026-01-05T00:00:00.000Z``); only the calendar
    components are kept.
    """
    if isinstance(value, datetime):
        return format_date_key(value.date())
    if isinstance(value, date):
        return format_date_key(value)
    if isinstance(value, str):
        cleaned = value.strip()
        if "T" in cleaned:
            parsed = datetime.fromisoformat(cleaned.replace("Z", "+00:00"))
            return format_date_key(parsed.date())
        return format_date_key(parse_date_key(cleaned))
    raise ValueError(f"Unsupported date value: {value!r}")


def is_sunday(day: date) -> bool:
    """Return True when the day is a Sunday."""
    return day.weekday() == SUNDAY

# orderdesk/ordering/dates.py
"""
Date rules for order projections.

Timestamps are stored as naive UTC datetimes. The list and create views shift
them forward by one day before truncating to a calendar date: the client that
writes orders sends local midnights that arrive as the previous UTC day, and
the shift is what the front-end expects to read back.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional

from .errors import ValidationFailed

DISPLAY_OFFSET = timedelta(hours=24)
EN_GB_FORMAT = "%d/%m/%Y"


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def shifted_date(ts: Optional[datetime]) -> Optional[str]:
    """`2024-01-10T00:00:00` -> `"2024-01-11"`."""
    if ts is None:
        return None
    return (ts + DISPLAY_OFFSET).date().isoformat()


def en_gb_date(ts: Optional[datetime]) -> Optional[str]:
    """Numeric day/month/year, zero padded: `10/01/2024`."""
    if ts is None:
        return None
    return ts.strftime(EN_GB_FORMAT)


def _from_epoch_ms(ms: float) -> datetime:
    try:
        return datetime.fromtimestamp(ms / 1000, tz=timezone.utc).replace(tzinfo=None)
    except (ValueError, OverflowError, OSError) as e:
        raise ValidationFailed(f"Invalid date: {ms!r}") from e


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Normalise a client supplied date into a naive UTC datetime.

    Accepts epoch milliseconds (int/float or digit string), ISO-8601 strings
    (with or without offset / trailing Z), dates and datetimes.
    Empty values give None.
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, bool):
        raise ValidationFailed(f"Invalid date: {value!r}")
    elif isinstance(value, (int, float)):
        return _from_epoch_ms(value)
    elif isinstance(value, str):
        raw = value.strip()
        if raw.lstrip("-").isdigit():
            return _from_epoch_ms(int(raw))
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(raw)
        except ValueError as e:
            raise ValidationFailed(f"Invalid date: {value!r}") from e
    else:
        raise ValidationFailed(f"Invalid date: {value!r}")

    if dt.tzinfo is not None:
        try:
            dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
        except OverflowError as e:
            raise ValidationFailed(f"Invalid date: {value!r}") from e
    return dt


def parse_calendar_date(value: Optional[str]) -> Optional[date]:
    """Query-string dates (`2024-01-10`); anything unparsable is ignored."""
    if not value:
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None

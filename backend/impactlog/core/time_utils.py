import calendar
from datetime import date, datetime, timedelta, timezone


def start_of_week(d: date, week_starts_on: int = 0) -> date:
    """
    First day of the week containing `d`.
    `week_starts_on` follows date.weekday(): Monday = 0, Sunday = 6.
    Example: start_of_week(date(2024, 1, 3)) -> date(2024, 1, 1)
    """
    offset = (d.weekday() - week_starts_on) % 7
    return d - timedelta(days=offset)


def end_of_week(d: date, week_starts_on: int = 0) -> date:
    """Last day (inclusive) of the week containing `d`."""
    return start_of_week(d, week_starts_on) + timedelta(days=6)


def start_of_month(d: date) -> date:
    return d.replace(day=1)


def end_of_month(d: date) -> date:
    """Last calendar day of the month containing `d`."""
    last_day = calendar.monthrange(d.year, d.month)[1]
    return d.replace(day=last_day)


def within(d: date, start: date | None, end: date | None) -> bool:
    """Closed-interval membership; a missing bound is treated as open."""
    if start is not None and d < start:
        return False
    if end is not None and d > end:
        return False
    return True


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes coming back from the database."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def coerce_date(value):
    """Accept dates in the shapes older clients stored them.

    - date / 'YYYY-MM-DD' -> unchanged (pydantic handles these)
    - datetime -> its calendar date
    - full ISO datetime strings ('2024-01-08T05:00:00.000Z') -> calendar date

    Anything else is returned as-is so normal validation can reject it.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and "T" in value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        except ValueError:
            return value
    return value


def format_short(d: date) -> str:
    """'Jan 1' (no zero padding)."""
    return f"{d.strftime('%b')} {d.day}"


def format_long(d: date) -> str:
    """'Jan 1, 2024'."""
    return f"{format_short(d)}, {d.year}"

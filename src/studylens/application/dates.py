"""Calendar helpers shared by the normalizer, windows and calculators."""

import re
from collections.abc import Iterator
from datetime import date, datetime, timedelta

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
ISO_DATE_PREFIX_RE = re.compile(r"^\d{4}-\d{2}-\d{2}")


def is_iso_date(value: object) -> bool:
    """True for an exact ``YYYY-MM-DD`` string naming a real calendar day."""
    if not isinstance(value, str) or not ISO_DATE_RE.fullmatch(value):
        return False
    return parse_iso_date(value) is not None


def to_iso(d: date) -> str:
    return d.strftime("%Y-%m-%d")


def parse_iso_date(value: str) -> date | None:
    """
    Parse ``YYYY-MM-DD`` (or a timestamp starting with one).

    Returns None for anything that is not a real calendar date.
    """
    if not isinstance(value, str) or not ISO_DATE_PREFIX_RE.match(value):
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def today_of(now: datetime | date) -> date:
    """Truncate a reference timestamp to its local calendar day."""
    if isinstance(now, datetime):
        return now.date()
    return now


def day_range(start: date, count: int) -> Iterator[str]:
    """Yield ``count`` consecutive ISO dates starting at ``start``."""
    for offset in range(count):
        yield to_iso(start + timedelta(days=offset))


def week_start(now: datetime | date) -> date:
    """
    Monday of the week containing ``now``.

    Sunday belongs to the week that started six days earlier.
    """
    today = today_of(now)
    return today - timedelta(days=today.weekday())

"""Date coercion to the sitemap lastmod format (YYYY-MM-DD)."""

from datetime import date, datetime, timedelta
from email.utils import parsedate_to_datetime
from typing import Optional, Union

from seokit.errors import InvalidInputError

# Tried in order after ISO 8601
DATE_FORMATS = [
    "%Y/%m/%d",
    "%Y-%m-%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%d.%m.%Y",
    "%d %B %Y",
    "%d %b %Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d %Y",
]

RELATIVE_DAYS = {
    "now": 0,
    "today": 0,
    "yesterday": -1,
    "tomorrow": 1,
}

DateLike = Union[str, date, datetime]


def to_sitemap_date(value: Optional[DateLike]) -> Optional[str]:
    """Convert a date-like value to the sitemap format.

    Args:
        value: A date, a datetime, a parseable date string or None.

    Returns:
        Date formatted as YYYY-MM-DD, or None when value is None.

    Raises:
        InvalidInputError: If the value cannot be interpreted as a date.
    """
    if value is None:
        return None

    # datetime is a subclass of date
    if isinstance(value, date):
        return _iso_date(value)

    if not isinstance(value, str):
        raise InvalidInputError(
            f"Invalid date type: {type(value).__name__}. Expected a date or a date string"
        )

    parsed = _parse_date_string(value.strip())
    if parsed is None:
        raise InvalidInputError(
            f"Invalid date format: {value}. Expected YYYY-MM-DD or a date object"
        )

    return _iso_date(parsed)


def _iso_date(value: date) -> str:
    # isoformat always zero-pads the year to four digits
    if isinstance(value, datetime):
        return value.date().isoformat()
    return value.isoformat()


def _parse_date_string(text: str) -> Optional[date]:
    if not text:
        return None

    offset = RELATIVE_DAYS.get(text.lower())
    if offset is not None:
        return date.today() + timedelta(days=offset)

    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue

    # RFC 2822, e.g. "Mon, 01 Jan 2024 10:00:00 +0000"
    try:
        return parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        return None

"""Sitemap URL set - deduplicated entries serialized to sitemaps.org XML."""

import logging
import math
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import asdict, dataclass, replace
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional, Union

from seokit.errors import CapacityExceededError, EmptyCollectionError, InvalidInputError
from seokit.escaping import xml_escape
from seokit.sitemap.dates import DateLike, to_sitemap_date
from seokit.sitemap.url_utils import is_valid_url, normalize_url

logger = logging.getLogger(__name__)

MAX_URLS = 50_000
SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'


class ChangeFrequency(str, Enum):
    """How often a page is expected to change."""

    ALWAYS = "always"
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    NEVER = "never"

    @classmethod
    def from_string(cls, value: str) -> Optional["ChangeFrequency"]:
        """Look up a member by value, ignoring case.

        Returns:
            The matching member, or None.
        """
        try:
            return cls(value.lower())
        except ValueError:
            return None

    @classmethod
    def is_valid(cls, value: str) -> bool:
        """Check if a string names a change frequency (case-insensitive)."""
        return cls.from_string(value) is not None

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


PriorityLike = Union[float, int, Decimal, str]


@dataclass(frozen=True)
class Priority:
    """Crawler priority hint in the inclusive range 0.0 - 1.0."""

    value: Decimal

    MIN = Decimal("0.0")
    MAX = Decimal("1.0")
    STEP = Decimal("0.1")

    @classmethod
    def parse(cls, raw: PriorityLike) -> "Priority":
        """Build a priority from a number or numeric string.

        Args:
            raw: Candidate priority.

        Returns:
            Validated priority.

        Raises:
            InvalidInputError: If the value is not numeric or is out of range.
        """
        if isinstance(raw, bool):
            raise InvalidInputError(f"Priority must be a number, got {raw!r}")

        try:
            if isinstance(raw, float):
                if not math.isfinite(raw):
                    raise InvalidOperation
                # str() gives the shortest repr, so 0.85 stays 0.85
                value = Decimal(str(raw))
            elif isinstance(raw, (int, Decimal)):
                value = Decimal(raw)
            elif isinstance(raw, str):
                value = Decimal(raw.strip())
            else:
                raise InvalidOperation
        except InvalidOperation:
            raise InvalidInputError(f"Priority must be a number, got {raw!r}") from None

        if not value.is_finite():
            raise InvalidInputError(f"Priority must be a number, got {raw!r}")

        if value < cls.MIN or value > cls.MAX:
            raise InvalidInputError(
                f"Priority must be between {cls.MIN} and {cls.MAX}, got {raw}"
            )

        return cls(max(cls.MIN, min(cls.MAX, value)))

    @property
    def formatted(self) -> str:
        """Priority with exactly one decimal place, rounded half up."""
        return str(self.value.quantize(self.STEP, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class SitemapEntry:
    """One URL in a sitemap with its optional metadata."""

    loc: str
    lastmod: Optional[str] = None
    changefreq: Optional[ChangeFrequency] = None
    priority: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Return the entry as a plain dict, omitting unset fields."""
        data = asdict(self)
        if self.changefreq is not None:
            data["changefreq"] = self.changefreq.value
        return {key: value for key, value in data.items() if value is not None}


class SitemapUrlSet:
    """Ordered, deduplicated collection of sitemap entries.

    Entries are keyed by their normalized URL, so equivalent spellings of
    the same address update one entry instead of adding another. Iteration
    and output follow the order in which each key was first added.

    Not thread-safe: callers sharing a set must serialize access.
    """

    def __init__(self) -> None:
        self._entries: dict[str, SitemapEntry] = {}

    def add_url(
        self,
        loc: str,
        lastmod: Optional[DateLike] = None,
        changefreq: Optional[Union[ChangeFrequency, str]] = None,
        priority: Optional[PriorityLike] = None,
    ) -> "SitemapUrlSet":
        """Add a URL, or update the entry for an equivalent URL.

        Omitted optional fields keep their previous values on update. The
        call either fully succeeds or leaves the set untouched.

        Args:
            loc: Absolute page URL.
            lastmod: Last modification date (date, datetime or string).
            changefreq: Change frequency member or its name in any case.
            priority: Priority between 0.0 and 1.0 inclusive.

        Returns:
            The set itself, for chaining.

        Raises:
            InvalidInputError: If any argument is invalid.
            CapacityExceededError: If a new URL would exceed MAX_URLS.
        """
        if not is_valid_url(loc):
            raise InvalidInputError(f"Invalid URL: {loc!r}")

        key = normalize_url(loc)
        existing = self._entries.get(key)

        if existing is None and len(self._entries) >= MAX_URLS:
            raise CapacityExceededError(f"Sitemap cannot contain more than {MAX_URLS} URLs")

        changes: dict[str, Any] = {"loc": loc}

        if lastmod is not None:
            try:
                changes["lastmod"] = to_sitemap_date(lastmod)
            except InvalidInputError as e:
                raise InvalidInputError(f"Invalid lastmod format for URL {loc}: {e}") from e

        if changefreq is not None:
            changes["changefreq"] = _coerce_changefreq(changefreq)

        if priority is not None:
            try:
                changes["priority"] = Priority.parse(priority).formatted
            except InvalidInputError as e:
                raise InvalidInputError(f"Invalid priority for URL {loc}: {e}") from e

        if existing is None:
            self._entries[key] = SitemapEntry(**changes)
            logger.debug("Added sitemap URL %s", loc)
        else:
            # Reassigning an existing key keeps its position
            self._entries[key] = replace(existing, **changes)
            logger.debug("Updated sitemap URL %s (key %s)", loc, key)

        return self

    def add_url_with_now(
        self,
        loc: str,
        changefreq: Optional[Union[ChangeFrequency, str]] = None,
        priority: Optional[PriorityLike] = None,
    ) -> "SitemapUrlSet":
        """Add a URL with today's date as lastmod."""
        return self.add_url(loc, date.today(), changefreq, priority)

    def add_urls(self, entries: Iterable[Mapping[str, Any]]) -> "SitemapUrlSet":
        """Add several URLs in order.

        Each mapping needs a "loc" key and may carry "lastmod",
        "changefreq" and "priority". Processing stops at the first invalid
        element; elements before it stay added.

        Raises:
            InvalidInputError: If an element lacks "loc" or is invalid.
            CapacityExceededError: If the set fills up.
        """
        for data in entries:
            if not isinstance(data, Mapping) or data.get("loc") is None:
                raise InvalidInputError('URL data must contain "loc" key')

            self.add_url(
                data["loc"],
                data.get("lastmod"),
                data.get("changefreq"),
                data.get("priority"),
            )

        return self

    def has_url(self, loc: str) -> bool:
        """Check if an equivalent URL is already in the set."""
        if not is_valid_url(loc):
            return False
        return normalize_url(loc) in self._entries

    def count(self) -> int:
        return len(self._entries)

    def is_empty(self) -> bool:
        return not self._entries

    def clear(self) -> "SitemapUrlSet":
        self._entries.clear()
        return self

    def get_urls(self) -> tuple[SitemapEntry, ...]:
        """Return a snapshot of the entries in insertion order."""
        return tuple(self._entries.values())

    def generate(self) -> str:
        """Render the set as a sitemaps.org XML document.

        Returns:
            XML string.

        Raises:
            EmptyCollectionError: If no URLs were added.
        """
        if not self._entries:
            raise EmptyCollectionError("Cannot generate sitemap: no URLs added")

        lines = [
            XML_DECLARATION,
            f'<urlset xmlns="{SITEMAP_NAMESPACE}">',
        ]

        for entry in self._entries.values():
            lines.append("  <url>")
            lines.append(f"    <loc>{xml_escape(entry.loc)}</loc>")

            if entry.lastmod is not None:
                lines.append(f"    <lastmod>{xml_escape(entry.lastmod)}</lastmod>")

            if entry.changefreq is not None:
                lines.append(f"    <changefreq>{xml_escape(entry.changefreq.value)}</changefreq>")

            if entry.priority is not None:
                lines.append(f"    <priority>{xml_escape(entry.priority)}</priority>")

            lines.append("  </url>")

        lines.append("</urlset>")

        logger.debug("Generated sitemap with %d URLs", len(self._entries))
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[SitemapEntry]:
        return iter(self.get_urls())

    def __contains__(self, loc: object) -> bool:
        return isinstance(loc, str) and self.has_url(loc)


def _coerce_changefreq(value: Union[ChangeFrequency, str]) -> ChangeFrequency:
    if isinstance(value, ChangeFrequency):
        return value

    freq = ChangeFrequency.from_string(value) if isinstance(value, str) else None
    if freq is None:
        raise InvalidInputError(
            f"Invalid changefreq: {value}. Allowed values: {', '.join(ChangeFrequency.values())}"
        )
    return freq

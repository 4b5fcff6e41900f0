"""Tests for the sitemap URL set."""

from dataclasses import FrozenInstanceError
from datetime import date, datetime
from decimal import Decimal

import pytest

from seokit.errors import CapacityExceededError, EmptyCollectionError, InvalidInputError
from seokit.sitemap.urlset import (
    MAX_URLS,
    SITEMAP_NAMESPACE,
    ChangeFrequency,
    Priority,
    SitemapEntry,
    SitemapUrlSet,
)


@pytest.fixture
def urlset():
    """Return an empty URL set."""
    return SitemapUrlSet()


class TestAddUrl:
    """Tests for adding URLs."""

    @pytest.mark.parametrize("bad", ["not a url", "", "   ", "example.com", "http://"])
    def test_invalid_url_rejected(self, urlset, bad):
        """Test that malformed URLs fail and leave the set unchanged."""
        urlset.add_url("https://example.com/keep")
        with pytest.raises(InvalidInputError):
            urlset.add_url(bad)
        assert urlset.count() == 1

    def test_add_returns_self(self, urlset):
        """Test that add_url can be chained."""
        result = urlset.add_url("https://example.com/a").add_url("https://example.com/b")
        assert result is urlset
        assert urlset.count() == 2

    def test_idempotent_insertion(self, urlset):
        """Test that adding the same URL twice keeps one entry."""
        urlset.add_url("https://example.com/page")
        urlset.add_url("https://example.com/page")
        assert urlset.count() == 1

    def test_normalization_equivalence(self, urlset):
        """Test that case and trailing-slash variants collapse."""
        urlset.add_url("https://Example.com/Page/")
        urlset.add_url("https://example.com/Page")
        assert urlset.count() == 1

    def test_root_variants_collapse(self, urlset):
        """Test that the bare host and the root path are one entry."""
        urlset.add_url("https://example.com/")
        urlset.add_url("https://example.com")
        assert urlset.count() == 1

    def test_path_case_matters(self, urlset):
        """Test that path case is significant."""
        urlset.add_url("https://example.com/page")
        urlset.add_url("https://example.com/Page")
        assert urlset.count() == 2

    def test_query_order_matters(self, urlset):
        """Test that reordered query parameters are distinct URLs."""
        urlset.add_url("https://example.com/?a=1&b=2")
        urlset.add_url("https://example.com/?b=2&a=1")
        assert urlset.count() == 2

    def test_update_not_duplicate(self, urlset):
        """Test that re-adding a URL updates its entry."""
        urlset.add_url("https://example.com/x", "2024-01-01")
        urlset.add_url("https://example.com/x", "2024-02-01")
        assert urlset.count() == 1
        assert urlset.get_urls()[0].lastmod == "2024-02-01"

    def test_update_refreshes_loc(self, urlset):
        """Test that an update stores the latest spelling of the URL."""
        urlset.add_url("https://Example.com/x/")
        urlset.add_url("https://example.com/x")
        assert urlset.get_urls()[0].loc == "https://example.com/x"

    def test_update_keeps_omitted_fields(self, urlset):
        """Test that omitted optional fields keep their previous values."""
        urlset.add_url("https://example.com/x", "2024-01-01", "daily", 0.5)
        urlset.add_url("https://example.com/x", priority=0.9)

        entry = urlset.get_urls()[0]
        assert entry.lastmod == "2024-01-01"
        assert entry.changefreq is ChangeFrequency.DAILY
        assert entry.priority == "0.9"

    def test_failed_update_is_atomic(self, urlset):
        """Test that a failing update does not partially apply."""
        urlset.add_url("https://example.com/x", "2024-01-01", "daily", 0.5)

        with pytest.raises(InvalidInputError):
            urlset.add_url("https://example.com/x", "2024-03-01", "weekly", 2.0)

        entry = urlset.get_urls()[0]
        assert entry == SitemapEntry("https://example.com/x", "2024-01-01", ChangeFrequency.DAILY, "0.5")

    def test_failed_insert_leaves_set_empty(self, urlset):
        """Test that a new URL with a bad field is not inserted."""
        with pytest.raises(InvalidInputError):
            urlset.add_url("https://example.com/x", lastmod="not a date")
        assert urlset.is_empty()


class TestLastmod:
    """Tests for lastmod handling."""

    def test_date_object(self, urlset):
        """Test that date objects are formatted."""
        urlset.add_url("https://example.com/", date(2024, 3, 5))
        assert urlset.get_urls()[0].lastmod == "2024-03-05"

    def test_datetime_object(self, urlset):
        """Test that datetimes keep only the date part."""
        urlset.add_url("https://example.com/", datetime(2024, 3, 5, 23, 59))
        assert urlset.get_urls()[0].lastmod == "2024-03-05"

    def test_iso_string(self, urlset):
        """Test that ISO datetime strings are accepted."""
        urlset.add_url("https://example.com/", "2024-03-05T10:00:00Z")
        assert urlset.get_urls()[0].lastmod == "2024-03-05"

    def test_invalid_lastmod_message(self, urlset):
        """Test that the error names the URL and the cause."""
        with pytest.raises(InvalidInputError) as exc_info:
            urlset.add_url("https://example.com/page", "yesterday-ish")

        message = str(exc_info.value)
        assert "https://example.com/page" in message
        assert "yesterday-ish" in message
        assert isinstance(exc_info.value.__cause__, InvalidInputError)


class TestChangeFrequency:
    """Tests for changefreq handling."""

    def test_enum_member(self, urlset):
        """Test that enum members are stored as-is."""
        urlset.add_url("https://example.com/", changefreq=ChangeFrequency.MONTHLY)
        assert urlset.get_urls()[0].changefreq is ChangeFrequency.MONTHLY

    def test_case_insensitive_string(self, urlset):
        """Test that strings match regardless of case."""
        urlset.add_url("https://example.com/", changefreq="WEEKLY")
        assert urlset.get_urls()[0].changefreq is ChangeFrequency.WEEKLY
        assert urlset.get_urls()[0].to_dict()["changefreq"] == "weekly"

    def test_unknown_value(self, urlset):
        """Test that unknown frequencies list the allowed values."""
        with pytest.raises(InvalidInputError, match="always, hourly, daily, weekly"):
            urlset.add_url("https://example.com/", changefreq="constantly")
        assert urlset.count() == 0

    def test_surrounding_whitespace_rejected(self, urlset):
        """Test that padded frequency names are not accepted."""
        with pytest.raises(InvalidInputError, match="Invalid changefreq"):
            urlset.add_url("https://example.com/", changefreq=" weekly ")
        assert urlset.count() == 0

    def test_from_string(self):
        """Test the explicit string lookup."""
        assert ChangeFrequency.from_string("Hourly") is ChangeFrequency.HOURLY
        assert ChangeFrequency.from_string("sometimes") is None
        assert ChangeFrequency.from_string(" weekly ") is None
        assert ChangeFrequency.is_valid("NEVER")
        assert not ChangeFrequency.is_valid("")
        assert len(ChangeFrequency.values()) == 7


class TestPriority:
    """Tests for priority handling."""

    def test_boundaries(self, urlset):
        """Test that 0.0 and 1.0 are accepted."""
        urlset.add_url("https://example.com/a", priority=0.0)
        urlset.add_url("https://example.com/b", priority=1.0)
        assert [e.priority for e in urlset.get_urls()] == ["0.0", "1.0"]

    @pytest.mark.parametrize("value", [1.1, -0.1, 2, "1.01"])
    def test_out_of_range(self, urlset, value):
        """Test that values outside 0.0 - 1.0 fail."""
        with pytest.raises(InvalidInputError, match="Invalid priority"):
            urlset.add_url("https://example.com/", priority=value)
        assert urlset.count() == 0

    @pytest.mark.parametrize(
        "value,expected",
        [
            (0.85, "0.9"),
            (0.83, "0.8"),
            (0.25, "0.3"),
            (0.5, "0.5"),
            (0.96, "1.0"),
            (1, "1.0"),
            (0, "0.0"),
            ("0.45", "0.5"),
            (Decimal("0.35"), "0.4"),
        ],
    )
    def test_formatting_rounds_half_up(self, value, expected):
        """Test one-decimal formatting with round-half-up."""
        assert Priority.parse(value).formatted == expected

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), "high", True, None])
    def test_not_a_number(self, value):
        """Test that non-numeric priorities fail."""
        with pytest.raises(InvalidInputError):
            Priority.parse(value)


class TestAddUrlWithNow:
    """Tests for add_url_with_now."""

    def test_uses_today(self, urlset):
        """Test that lastmod is today's date."""
        urlset.add_url_with_now("https://example.com/", "daily", 0.8)

        entry = urlset.get_urls()[0]
        assert entry.lastmod == date.today().isoformat()
        assert entry.changefreq is ChangeFrequency.DAILY
        assert entry.priority == "0.8"


class TestAddUrls:
    """Tests for batch insertion."""

    def test_adds_in_order(self, urlset):
        """Test that all entries are added in order."""
        urlset.add_urls(
            [
                {"loc": "https://example.com/a", "priority": 0.5},
                {"loc": "https://example.com/b", "changefreq": "daily"},
                {"loc": "https://example.com/c", "lastmod": "2024-01-01"},
            ]
        )
        assert [e.loc for e in urlset.get_urls()] == [
            "https://example.com/a",
            "https://example.com/b",
            "https://example.com/c",
        ]

    def test_missing_loc(self, urlset):
        """Test that a missing loc fails."""
        with pytest.raises(InvalidInputError, match='"loc"'):
            urlset.add_urls([{"priority": 0.5}])

    def test_per_element_commit(self, urlset):
        """Test that earlier elements stay added when a later one fails."""
        with pytest.raises(InvalidInputError):
            urlset.add_urls(
                [
                    {"loc": "https://example.com/a"},
                    {"loc": "https://example.com/b"},
                    {"loc": "not a url"},
                    {"loc": "https://example.com/d"},
                ]
            )
        assert urlset.count() == 2
        assert not urlset.has_url("https://example.com/d")


class TestQueries:
    """Tests for count, has_url, clear and get_urls."""

    def test_has_url(self, urlset):
        """Test lookup through normalization."""
        urlset.add_url("https://example.com/page")
        assert urlset.has_url("HTTPS://EXAMPLE.COM/page/")
        assert not urlset.has_url("https://example.com/other")
        assert not urlset.has_url("not a url")
        assert "https://example.com/page" in urlset

    def test_count_and_empty(self, urlset):
        """Test count and is_empty."""
        assert urlset.is_empty()
        assert urlset.count() == 0
        urlset.add_url("https://example.com/")
        assert not urlset.is_empty()
        assert len(urlset) == 1

    def test_clear(self, urlset):
        """Test that clear drops everything."""
        urlset.add_url("https://example.com/a").add_url("https://example.com/b")
        assert urlset.clear() is urlset
        assert urlset.count() == 0
        assert urlset.is_empty()

    def test_get_urls_is_snapshot(self, urlset):
        """Test that callers cannot mutate internal state."""
        urlset.add_url("https://example.com/a", priority=0.5)
        snapshot = urlset.get_urls()

        assert isinstance(snapshot, tuple)
        with pytest.raises(FrozenInstanceError):
            snapshot[0].priority = "0.1"

        urlset.add_url("https://example.com/b")
        assert len(snapshot) == 1
        assert urlset.get_urls()[0].priority == "0.5"

    def test_to_dict_omits_unset(self):
        """Test the dict form of an entry."""
        entry = SitemapEntry("https://example.com/", priority="0.5")
        assert entry.to_dict() == {"loc": "https://example.com/", "priority": "0.5"}


class TestCapacity:
    """Tests for the URL ceiling."""

    @pytest.fixture
    def full_urlset(self):
        """Return a set filled to the ceiling."""
        urlset = SitemapUrlSet()
        for i in range(MAX_URLS):
            urlset.add_url(f"https://example.com/page/{i}")
        return urlset

    def test_ceiling(self, full_urlset):
        """Test that a new URL beyond the ceiling fails."""
        assert full_urlset.count() == MAX_URLS
        with pytest.raises(CapacityExceededError):
            full_urlset.add_url("https://example.com/one-too-many")
        assert full_urlset.count() == MAX_URLS

    def test_update_at_ceiling(self, full_urlset):
        """Test that updating an existing URL still works when full."""
        full_urlset.add_url("https://example.com/page/0/", priority=0.3)
        assert full_urlset.count() == MAX_URLS
        assert full_urlset.get_urls()[0].priority == "0.3"


class TestGenerate:
    """Tests for XML generation."""

    def test_empty_set(self, urlset):
        """Test that generating an empty sitemap fails."""
        with pytest.raises(EmptyCollectionError):
            urlset.generate()

    def test_single_url(self, urlset):
        """Test the exact output for one bare URL."""
        urlset.add_url("https://example.com/")
        assert urlset.generate() == (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            f'<urlset xmlns="{SITEMAP_NAMESPACE}">\n'
            "  <url>\n"
            "    <loc>https://example.com/</loc>\n"
            "  </url>\n"
            "</urlset>"
        )

    def test_field_order(self, urlset):
        """Test that optional fields follow loc in a fixed order."""
        urlset.add_url("https://example.com/", "2024-01-01", "daily", 0.8)
        xml = urlset.generate()

        assert xml.count("<url>") == 1
        assert (
            "    <loc>https://example.com/</loc>\n"
            "    <lastmod>2024-01-01</lastmod>\n"
            "    <changefreq>daily</changefreq>\n"
            "    <priority>0.8</priority>\n"
        ) in xml

    def test_insertion_order_survives_updates(self, urlset):
        """Test that updates do not move entries."""
        urlset.add_url("https://example.com/first")
        urlset.add_url("https://example.com/second")
        urlset.add_url("https://example.com/first/", priority=0.1)

        xml = urlset.generate()
        assert xml.index("/first") < xml.index("/second")
        assert xml.count("<url>") == 2

    def test_escaping(self, urlset):
        """Test that ampersands and quotes are escaped."""
        urlset.add_url("https://example.com/?a=1&b=2")
        urlset.add_url("https://example.com/it's")

        xml = urlset.generate()
        assert "<loc>https://example.com/?a=1&amp;b=2</loc>" in xml
        assert "<loc>https://example.com/it&apos;s</loc>" in xml

    def test_deterministic(self, urlset):
        """Test that identical state produces identical output."""
        urlset.add_url("https://example.com/a", "2024-01-01", "weekly", 0.5)
        urlset.add_url("https://example.com/b")
        assert urlset.generate() == urlset.generate()

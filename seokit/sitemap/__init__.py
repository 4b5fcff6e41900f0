"""Sitemap module - URL sets and sitemaps.org XML output."""

from seokit.sitemap.dates import to_sitemap_date
from seokit.sitemap.output import save_sitemap, sitemap_headers, sitemap_response
from seokit.sitemap.url_utils import is_valid_url, normalize_url, validate_url
from seokit.sitemap.urlset import (
    MAX_URLS,
    SITEMAP_NAMESPACE,
    ChangeFrequency,
    Priority,
    SitemapEntry,
    SitemapUrlSet,
)

__all__ = [
    "MAX_URLS",
    "SITEMAP_NAMESPACE",
    "ChangeFrequency",
    "Priority",
    "SitemapEntry",
    "SitemapUrlSet",
    "is_valid_url",
    "normalize_url",
    "validate_url",
    "to_sitemap_date",
    "save_sitemap",
    "sitemap_headers",
    "sitemap_response",
]

"""Sitemap output - files and HTTP responses."""

import logging
import os
import tempfile
from pathlib import Path

from fastapi.responses import Response

from seokit.errors import OutputError
from seokit.sitemap.urlset import SitemapUrlSet

logger = logging.getLogger(__name__)

SITEMAP_MEDIA_TYPE = "application/xml; charset=utf-8"
DEFAULT_CACHE_MAX_AGE = 3600


def sitemap_headers(cache_max_age: int = DEFAULT_CACHE_MAX_AGE) -> dict[str, str]:
    """Return the HTTP headers for serving a sitemap.

    Args:
        cache_max_age: Seconds clients and proxies may cache the document.

    Returns:
        Header dictionary.
    """
    return {
        "Content-Type": SITEMAP_MEDIA_TYPE,
        "Cache-Control": f"public, max-age={cache_max_age}",
    }


def save_sitemap(urlset: SitemapUrlSet, path: Path | str) -> Path:
    """Generate a sitemap and write it to a file.

    The document is written to a temporary file next to the target and
    moved into place, so readers never see a partial sitemap.

    Args:
        urlset: URL set to render.
        path: Destination file.

    Returns:
        Path of the written file.

    Raises:
        EmptyCollectionError: If the set has no URLs.
        OutputError: If the file cannot be written.
    """
    path = Path(path)
    xml = urlset.generate()

    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as f:
            tmp_name = f.name
            f.write(xml)
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise OutputError(f"Failed to save sitemap to file {path}: {e}") from e

    logger.debug("Saved sitemap with %d URLs to %s", urlset.count(), path)
    return path


def sitemap_response(
    urlset: SitemapUrlSet,
    cache_max_age: int = DEFAULT_CACHE_MAX_AGE,
) -> Response:
    """Build an HTTP response carrying the generated sitemap.

    Raises:
        EmptyCollectionError: If the set has no URLs.
    """
    headers = sitemap_headers(cache_max_age)
    return Response(
        content=urlset.generate(),
        media_type=headers.pop("Content-Type"),
        headers=headers,
    )

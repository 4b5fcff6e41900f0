"""FastAPI application serving a sitemap."""

from datetime import datetime
from typing import Any, Optional, Union

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, StrictFloat, StrictInt

from seokit import __version__
from seokit.errors import CapacityExceededError, EmptyCollectionError, InvalidInputError
from seokit.sitemap.output import DEFAULT_CACHE_MAX_AGE, sitemap_response
from seokit.sitemap.urlset import SitemapUrlSet


class UrlRequest(BaseModel):
    loc: str
    lastmod: Optional[str] = None
    changefreq: Optional[str] = None
    priority: Optional[Union[StrictFloat, StrictInt, str]] = None


def create_app(
    urlset: SitemapUrlSet | None = None,
    cache_max_age: int = DEFAULT_CACHE_MAX_AGE,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        urlset: URL set to serve. A new empty set is used if omitted.
        cache_max_age: Cache-Control max-age for /sitemap.xml.

    Returns:
        Configured application. The set is available as app.state.urlset.
    """

    app = FastAPI(
        title="seokit",
        description="Sitemap server",
        version=__version__,
    )
    app.state.urlset = urlset if urlset is not None else SitemapUrlSet()

    @app.exception_handler(InvalidInputError)
    async def invalid_input_handler(request: Request, exc: InvalidInputError):
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(CapacityExceededError)
    async def capacity_handler(request: Request, exc: CapacityExceededError):
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.get("/sitemap.xml")
    async def sitemap() -> Response:
        """Serve the generated sitemap."""
        try:
            return sitemap_response(app.state.urlset, cache_max_age)
        except EmptyCollectionError as e:
            raise HTTPException(status_code=404, detail=str(e))

    @app.get("/api/sitemap/urls")
    async def list_urls() -> dict[str, Any]:
        """List sitemap entries in insertion order."""
        entries = app.state.urlset.get_urls()
        return {
            "count": len(entries),
            "urls": [entry.to_dict() for entry in entries],
        }

    @app.post("/api/sitemap/urls")
    async def add_url(request: UrlRequest) -> dict[str, Any]:
        """Add or update a sitemap entry."""
        urlset: SitemapUrlSet = app.state.urlset
        existed = urlset.has_url(request.loc)
        urlset.add_url(request.loc, request.lastmod, request.changefreq, request.priority)
        return {
            "loc": request.loc,
            "updated": existed,
            "count": urlset.count(),
        }

    @app.delete("/api/sitemap/urls")
    async def clear_urls() -> dict[str, Any]:
        """Remove every entry."""
        app.state.urlset.clear()
        return {"count": 0}

    @app.get("/api/status")
    async def status() -> dict[str, Any]:
        """Get server status."""
        return {
            "version": __version__,
            "urls": app.state.urlset.count(),
            "timestamp": datetime.now().isoformat(),
        }

    return app


def run_server(
    host: str = "127.0.0.1",
    port: int = 8888,
    urlset: SitemapUrlSet | None = None,
    cache_max_age: int = DEFAULT_CACHE_MAX_AGE,
) -> None:
    """Run the web server."""
    import uvicorn

    app = create_app(urlset, cache_max_age)
    uvicorn.run(app, host=host, port=port)

"""Web module - FastAPI sitemap server."""

from seokit.web.app import create_app, run_server

__all__ = ["create_app", "run_server"]

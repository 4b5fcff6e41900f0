"""Head module - meta tags, Open Graph and Schema.org markup."""

from seokit.head.tags import OpenGraphType, SeoHead

__all__ = ["OpenGraphType", "SeoHead"]

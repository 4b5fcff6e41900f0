"""seokit - SEO markup helpers.

Builds page <head> markup (meta tags, Open Graph, Schema.org) and
sitemaps.org documents for server-side web applications.
"""

__version__ = "1.0.0"
__author__ = "seokit Team"

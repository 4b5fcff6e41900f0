"""Exception hierarchy shared by all seokit modules."""


class SeoKitError(Exception):
    """Base class for seokit errors."""

    pass


class InvalidInputError(SeoKitError, ValueError):
    """Exception raised when a caller supplies a malformed value."""

    pass


class CapacityExceededError(SeoKitError):
    """Exception raised when a sitemap would exceed its URL ceiling."""

    pass


class EmptyCollectionError(SeoKitError):
    """Exception raised when generating a sitemap with no URLs."""

    pass


class OutputError(SeoKitError):
    """Exception raised when a generated document cannot be written."""

    pass

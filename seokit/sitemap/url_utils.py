"""URL utilities - validation and normalization for duplicate detection."""

import re
from urllib.parse import urlsplit

from seokit.errors import InvalidInputError

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*$")
_FORBIDDEN_CHARS_RE = re.compile(r"[\s\x00-\x1f\x7f]")


def is_valid_url(url: str) -> bool:
    """Check if a string is a well-formed absolute URL.

    An absolute URL needs a scheme and a host. Whitespace, control
    characters and out-of-range ports are rejected.

    Args:
        url: String to validate.

    Returns:
        True if valid URL.
    """
    if not isinstance(url, str) or not url.strip():
        return False

    if _FORBIDDEN_CHARS_RE.search(url):
        return False

    try:
        parsed = urlsplit(url)
        # Accessing the port validates it
        parsed.port
    except ValueError:
        return False

    return bool(_SCHEME_RE.match(parsed.scheme)) and bool(parsed.hostname)


def validate_url(url: str) -> str:
    """Validate a URL, raising on failure.

    Args:
        url: URL to validate.

    Returns:
        The URL unchanged.

    Raises:
        InvalidInputError: If the URL is empty or malformed.
    """
    if not isinstance(url, str) or not url.strip():
        raise InvalidInputError("URL cannot be empty")

    if not is_valid_url(url):
        raise InvalidInputError(f"Invalid URL format: {url}")

    return url


def normalize_url(url: str) -> str:
    """Normalize a URL into a key for duplicate detection.

    - Lowercases the scheme and host
    - Keeps an explicit port
    - Removes one trailing slash from the path (except root)
    - Treats an empty path as root
    - Keeps query and fragment verbatim (parameter order matters)

    Strings that do not parse as an absolute URL are lowercased and
    stripped of one leading and one trailing slash instead.

    Args:
        url: URL to normalize.

    Returns:
        Normalized key. Not meant for display.
    """
    try:
        parsed = urlsplit(url)
        host = parsed.hostname
        port = parsed.port
    except ValueError:
        return _fallback_key(url)

    if not parsed.scheme or not host:
        return _fallback_key(url)

    scheme = parsed.scheme.lower()

    # IPv6 literals lose their brackets in .hostname
    if ":" in host:
        host = f"[{host}]"
    netloc = host if port is None else f"{host}:{port}"

    path = parsed.path
    if not path:
        path = "/"
    elif path != "/" and path.endswith("/"):
        path = path[:-1]

    normalized = f"{scheme}://{netloc}{path}"
    if parsed.query:
        normalized += f"?{parsed.query}"
    if parsed.fragment:
        normalized += f"#{parsed.fragment}"

    return normalized


def _fallback_key(url: str) -> str:
    key = url.lower()
    if key.startswith("/"):
        key = key[1:]
    if key.endswith("/"):
        key = key[:-1]
    return key

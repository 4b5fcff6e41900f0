"""HTML and XML escaping for generated markup."""

import re
from xml.sax.saxutils import escape

from markupsafe import escape as markup_escape

REPLACEMENT_CHAR = "\ufffd"

# Lone surrogates cannot be encoded as UTF-8; the rest are not allowed in XML 1.0
_INVALID_CHARS_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff\ud800-\udfff]")

_XML_QUOTE_ENTITIES = {
    '"': "&quot;",
    "'": "&apos;",
}


def substitute_invalid(value: str) -> str:
    """Replace characters that cannot be emitted with U+FFFD."""
    return _INVALID_CHARS_RE.sub(REPLACEMENT_CHAR, value)


def xml_escape(value: str) -> str:
    """Escape text for XML element content or attribute values.

    Args:
        value: Raw text.

    Returns:
        Text with &, <, >, and quotes escaped.
    """
    return escape(substitute_invalid(value), _XML_QUOTE_ENTITIES)


def html_escape(value: str) -> str:
    """Escape text for HTML element content or attribute values."""
    return str(markup_escape(substitute_invalid(value)))

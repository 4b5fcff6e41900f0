"""Page head markup - meta tags, Open Graph properties and Schema.org data."""

import json
from enum import Enum
from typing import Any, Union

from jinja2 import BaseLoader, Environment

from seokit.errors import InvalidInputError
from seokit.escaping import html_escape
from seokit.sitemap.url_utils import validate_url

TITLE_TAG = "title"
MAX_TITLE_LENGTH = 60
MAX_DESCRIPTION_LENGTH = 160
ELLIPSIS = "..."

HEAD_TEMPLATE = """\
{% for name, content in meta_tags.items() %}
{% if name == title_tag %}
<title>{{ content | html }}</title>
{% else %}
<meta name="{{ name | html }}" content="{{ content | html }}">
{% endif %}
{% endfor %}
{% for property, content in open_graph.items() %}
<meta property="{{ property | html }}" content="{{ content | html }}">
{% endfor %}
{% if schema_json %}
<script type="application/ld+json">{{ schema_json }}</script>
{% endif %}
"""


class OpenGraphType(str, Enum):
    """Supported og:type values."""

    WEBSITE = "website"
    ARTICLE = "article"
    BOOK = "book"
    PROFILE = "profile"
    MUSIC = "music.song"
    VIDEO = "video.movie"


def _build_environment() -> Environment:
    env = Environment(loader=BaseLoader(), trim_blocks=True, lstrip_blocks=True)
    env.filters["html"] = html_escape
    return env


_template = _build_environment().from_string(HEAD_TEMPLATE)


def truncate(text: str, max_length: int) -> str:
    """Shorten text to max_length characters, ending with an ellipsis."""
    if len(text) <= max_length:
        return text
    return text[: max_length - len(ELLIPSIS)] + ELLIPSIS


class SeoHead:
    """Collects head markup for a single page.

    Meta tags and Open Graph properties keep the order in which they were
    first set; setting a name again replaces its content in place.
    """

    def __init__(
        self,
        max_title_length: int = MAX_TITLE_LENGTH,
        max_description_length: int = MAX_DESCRIPTION_LENGTH,
    ):
        """Initialize an empty head.

        Args:
            max_title_length: Titles longer than this are truncated.
            max_description_length: Descriptions longer than this are truncated.
        """
        self.max_title_length = max_title_length
        self.max_description_length = max_description_length
        self._meta_tags: dict[str, str] = {}
        self._open_graph: dict[str, str] = {}
        self._schemas: list[dict[str, Any]] = []

    def add_meta_tag(self, name: str, content: str) -> "SeoHead":
        name = name.strip()
        if not name:
            raise InvalidInputError("Meta tag name cannot be empty")

        self._meta_tags[name] = content.strip()
        return self

    def add_open_graph(self, property: str, content: str) -> "SeoHead":
        """Add an Open Graph property such as og:title.

        Raises:
            InvalidInputError: If the property is empty or lacks the og: prefix.
        """
        property = property.strip()
        if not property:
            raise InvalidInputError("Open Graph property cannot be empty")

        if not property.startswith("og:"):
            raise InvalidInputError(
                f'Open Graph property must start with "og:", got "{property}"'
            )

        self._open_graph[property] = content.strip()
        return self

    def set_title(self, title: str) -> "SeoHead":
        """Set the page title, also used as og:title."""
        title = title.strip()
        if not title:
            raise InvalidInputError("Title cannot be empty")

        title = truncate(title, self.max_title_length)
        self.add_meta_tag(TITLE_TAG, title)
        self.add_open_graph("og:title", title)
        return self

    def set_description(self, description: str) -> "SeoHead":
        """Set the meta description, also used as og:description."""
        description = description.strip()
        if not description:
            raise InvalidInputError("Description cannot be empty")

        description = truncate(description, self.max_description_length)
        self.add_meta_tag("description", description)
        self.add_open_graph("og:description", description)
        return self

    def set_keywords(self, keywords: Union[str, list[str]]) -> "SeoHead":
        """Set the keywords meta tag from a string or a list of keywords."""
        if isinstance(keywords, (list, tuple)):
            items = [str(k).strip() for k in keywords if str(k).strip()]
            if not items:
                raise InvalidInputError("Keywords list cannot be empty")
            keywords = ", ".join(items)

        keywords = str(keywords).strip()
        if not keywords:
            raise InvalidInputError("Keywords cannot be empty")

        self.add_meta_tag("keywords", keywords)
        return self

    def set_image(self, url: str) -> "SeoHead":
        self.add_open_graph("og:image", validate_url(url))
        return self

    def set_url(self, url: str) -> "SeoHead":
        self.add_open_graph("og:url", validate_url(url))
        return self

    def set_type(self, og_type: Union[OpenGraphType, str] = OpenGraphType.WEBSITE) -> "SeoHead":
        """Set og:type from an OpenGraphType member or its exact value."""
        if not isinstance(og_type, OpenGraphType):
            try:
                og_type = OpenGraphType(og_type)
            except ValueError:
                raise InvalidInputError(f"Invalid Open Graph type: {og_type}") from None

        self.add_open_graph("og:type", og_type.value)
        return self

    def add_schema(self, data: dict[str, Any]) -> "SeoHead":
        """Add a Schema.org JSON-LD block.

        Raises:
            InvalidInputError: If the data is empty or has neither @context nor @type.
        """
        if not data:
            raise InvalidInputError("Schema data cannot be empty")

        if "@context" not in data and "@type" not in data:
            raise InvalidInputError('Schema.org data must contain at least "@context" or "@type"')

        self._schemas.append(data)
        return self

    def render(self) -> str:
        """Render all collected tags as HTML, one element per line."""
        schema_json = ""
        if self._schemas:
            try:
                schema_json = json.dumps(self._schemas, ensure_ascii=False, indent=4)
            except (TypeError, ValueError) as e:
                raise InvalidInputError(f"Schema data is not JSON serializable: {e}") from e
            # Keep "</script>" inside strings from closing the element
            schema_json = schema_json.replace("</", "<\\/")

        html = _template.render(
            meta_tags=self._meta_tags,
            open_graph=self._open_graph,
            schema_json=schema_json,
            title_tag=TITLE_TAG,
        )
        return html.rstrip("\n")

    @property
    def title(self) -> str | None:
        return self._meta_tags.get(TITLE_TAG)

    @property
    def description(self) -> str | None:
        return self._meta_tags.get("description")

    def clear(self) -> "SeoHead":
        self._meta_tags = {}
        self._open_graph = {}
        self._schemas = []
        return self

    def is_empty(self) -> bool:
        return not (self._meta_tags or self._open_graph or self._schemas)

"""seokit CLI - Typer-based command line interface."""

import json
import logging
from pathlib import Path
from typing import Annotated, Any, NoReturn

import typer
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from seokit import __version__
from seokit.config import get_section, load_config
from seokit.errors import InvalidInputError, SeoKitError
from seokit.head.tags import SeoHead
from seokit.sitemap.output import save_sitemap
from seokit.sitemap.url_utils import is_valid_url, normalize_url
from seokit.sitemap.urlset import SitemapUrlSet

app = typer.Typer(
    name="seokit",
    help="seokit - sitemap and head markup generator",
    add_completion=False,
    no_args_is_help=True,
)
console = Console()

ConfigOption = Annotated[Path | None, typer.Option("--config", help="Custom config file")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")]


def setup_logging(level: str) -> None:
    """Route library logging through Rich."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_settings(config_file: Path | None, verbose: bool) -> dict[str, Any]:
    try:
        config = load_config(config_file)
    except (OSError, yaml.YAMLError) as e:
        console.print(f"[red]Error loading config:[/] {escape(str(e))}")
        raise typer.Exit(1)

    level = "DEBUG" if verbose else get_section(config, "logging")["level"]
    setup_logging(level)
    return config


def _fail(error: Exception) -> NoReturn:
    console.print(f"[red]Error:[/] {escape(str(error))}")
    raise typer.Exit(1)


def load_source(path: Path) -> Any:
    """Read a YAML or JSON source file.

    Raises:
        InvalidInputError: If the file cannot be read or parsed.
    """
    try:
        with open(path, encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                return json.load(f)
            return yaml.safe_load(f)
    except OSError as e:
        raise InvalidInputError(f"Cannot read {path}: {e}") from e
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise InvalidInputError(f"Cannot parse {path}: {e}") from e


def load_url_entries(path: Path) -> list[dict[str, Any]]:
    """Load sitemap entries from a list, or from a mapping with a "urls" list."""
    data = load_source(path)
    if isinstance(data, dict):
        data = data.get("urls")

    if not isinstance(data, list):
        raise InvalidInputError(f"{path} must contain a list of URL entries")

    return data


def build_urlset(entries: list[dict[str, Any]], now: bool = False) -> SitemapUrlSet:
    """Build a URL set from entry mappings.

    Args:
        entries: Mappings with loc and optional lastmod, changefreq, priority.
        now: Use today's date for entries without a lastmod.

    Returns:
        Populated URL set.
    """
    urlset = SitemapUrlSet()
    if not now:
        return urlset.add_urls(entries)

    for data in entries:
        if isinstance(data, dict) and data.get("lastmod") is None and data.get("loc"):
            urlset.add_url_with_now(data["loc"], data.get("changefreq"), data.get("priority"))
        else:
            urlset.add_urls([data])
    return urlset


def build_head(data: dict[str, Any], head_config: dict[str, Any]) -> SeoHead:
    """Build a SeoHead from a mapping of page metadata."""
    head = SeoHead(
        max_title_length=head_config["max_title_length"],
        max_description_length=head_config["max_description_length"],
    )

    if data.get("title"):
        head.set_title(data["title"])
    if data.get("description"):
        head.set_description(data["description"])
    if data.get("keywords"):
        head.set_keywords(data["keywords"])
    for name, content in (data.get("meta") or {}).items():
        head.add_meta_tag(name, str(content))
    if data.get("url"):
        head.set_url(data["url"])
    if data.get("image"):
        head.set_image(data["image"])
    if data.get("type"):
        head.set_type(data["type"])
    for prop, content in (data.get("open_graph") or {}).items():
        head.add_open_graph(prop, str(content))

    schemas = data.get("schema") or []
    if isinstance(schemas, dict):
        schemas = [schemas]
    for schema in schemas:
        head.add_schema(schema)

    return head


@app.command()
def sitemap(
    source: Annotated[Path, typer.Argument(help="YAML or JSON file listing URL entries")],
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Output file (default from config)")
    ] = None,
    now: Annotated[
        bool, typer.Option("--now", help="Use today's date as lastmod when an entry has none")
    ] = False,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Generate sitemap.xml from a list of URL entries."""
    config = _load_settings(config_file, verbose)
    output = output or Path(get_section(config, "sitemap")["output"])

    try:
        entries = load_url_entries(source)
        urlset = build_urlset(entries, now=now)
        path = save_sitemap(urlset, output)
    except SeoKitError as e:
        _fail(e)

    table = Table(title="Sitemap Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value")
    table.add_row("Entries read", str(len(entries)))
    table.add_row("URLs written", str(urlset.count()))
    table.add_row("Duplicates merged", str(len(entries) - urlset.count()))
    table.add_row("Output", str(path))
    console.print(table)


@app.command()
def head(
    source: Annotated[Path, typer.Argument(help="YAML or JSON file with page metadata")],
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Write HTML to a file instead of stdout")
    ] = None,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Render <head> markup for a page."""
    config = _load_settings(config_file, verbose)

    try:
        data = load_source(source)
        if not isinstance(data, dict):
            raise InvalidInputError(f"{source} must contain a mapping of page metadata")
        html = build_head(data, get_section(config, "head")).render()
    except SeoKitError as e:
        _fail(e)

    if output is None:
        typer.echo(html)
        return

    try:
        output.write_text(html + "\n", encoding="utf-8")
    except OSError as e:
        _fail(e)
    console.print(f"[green]✓[/] Head markup written to {escape(str(output))}")


@app.command()
def normalize(
    urls: Annotated[list[str], typer.Argument(help="URLs to normalize")],
) -> None:
    """Show the duplicate-detection key for each URL."""
    table = Table(title="Normalized URLs")
    table.add_column("URL", style="cyan")
    table.add_column("Valid")
    table.add_column("Key")

    for url in urls:
        valid = is_valid_url(url)
        status = "[green]✓[/]" if valid else "[red]✗[/]"
        table.add_row(escape(url), status, escape(normalize_url(url)))

    console.print(table)


@app.command()
def serve(
    source: Annotated[Path, typer.Argument(help="YAML or JSON file listing URL entries")],
    host: Annotated[str, typer.Option("--host", "-h", help="Host to bind")] = "127.0.0.1",
    port: Annotated[int, typer.Option("--port", "-p", help="Port to bind")] = 8888,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Serve /sitemap.xml built from a list of URL entries."""
    config = _load_settings(config_file, verbose)

    try:
        urlset = build_urlset(load_url_entries(source))
    except SeoKitError as e:
        _fail(e)

    console.print(f"\n[bold green]Serving {urlset.count()} URLs...[/]")
    console.print(f"[bold]URL:[/] http://{host}:{port}/sitemap.xml")
    console.print("[dim]Press Ctrl+C to stop[/]\n")

    from seokit.web.app import run_server

    run_server(
        host=host,
        port=port,
        urlset=urlset,
        cache_max_age=get_section(config, "sitemap")["cache_max_age"],
    )


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"seokit v{__version__}")


if __name__ == "__main__":
    app()

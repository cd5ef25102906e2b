"""
Command-line interface for decoupled article pages.

Uses Typer to enumerate the localized article routes and to resolve and
render a single article (optionally a preview draft) against the configured
Drupal backend. Loads .env files for CMS URLs and client credentials.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import typer
import uvicorn
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from .article import resolve_article
from .config import AppConfig, load_config
from .core.errors import DecoupledArticlesError
from .core.locale import build_locales
from .core.types import PreviewData
from .paths import enumerate_paths
from .renderer import render_article, render_article_to_file
from .server import create_app
from .utils.logging import setup_logging

app = typer.Typer(add_completion=False)
console = Console()


def _load(config: Path | None, log_level: str | None) -> AppConfig:
    load_dotenv()
    cfg = load_config(str(config) if config else None)
    if log_level:
        cfg.logging.level = log_level
    return cfg


@app.command()
def paths(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
    locale: list[str] | None = typer.Option(None, "--locale", "-l", help="Configured locale to enumerate (repeatable, default all)."),
    as_json: bool = typer.Option(False, "--json", help="Print the route set as JSON."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Enumerate every article route across the configured locales."""
    cfg = _load(config, log_level)
    logger = setup_logging(cfg.logging, Path.cwd() if cfg.logging.file else None)

    try:
        result = asyncio.run(enumerate_paths(cfg, locales=locale or None, logger=logger))
    except DecoupledArticlesError as exc:
        console.print(f"[red]Path enumeration failed:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    if as_json:
        typer.echo(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
        return

    defaults = {loc.code for loc in build_locales(cfg.site.locales, cfg.site.default_locale) if loc.is_default}
    table = Table(title=f"Article routes ({len(result.paths)})")
    table.add_column("Locale")
    table.add_column("Slug")
    table.add_column("URL")
    for route in result.paths:
        prefix = "" if route.locale in defaults else f"/{route.locale}"
        table.add_row(route.locale, route.slug, f"{prefix}/articles/{route.slug}")
    console.print(table)


@app.command()
def render(
    slug: str = typer.Option(..., "--slug", "-s", help="Slug after /articles/."),
    locale: str | None = typer.Option(None, "--locale", "-l", help="Request locale (defaults to site default)."),
    preview_key: str | None = typer.Option(None, "--preview-key", help="Decoupled preview key."),
    revision: str | None = typer.Option(None, "--revision", help="Revision id to pin."),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write HTML here instead of stdout."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Resolve one article and render it to HTML.

    Args:
        slug: Article slug, may contain slashes
        locale: Locale of the request
        preview_key: Optional preview key to render the draft
        revision: Optional revision id pinned through resourceVersion
        output: Output file for the rendered page
        config: Optional path to YAML config file
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    cfg = _load(config, log_level)
    logger = setup_logging(cfg.logging, output.parent if output and cfg.logging.file else None)
    request_locale = locale or cfg.site.default_locale
    preview = None
    if preview_key or revision:
        preview = PreviewData(key=preview_key or "", resource_version_id=revision)

    try:
        page = asyncio.run(
            resolve_article(cfg, request_locale, slug, preview=preview, logger=logger)
        )
    except DecoupledArticlesError as exc:
        console.print(f"[red]Article resolution failed:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    if output is None:
        typer.echo(render_article(page.props, cfg, request_locale))
        return

    render_article_to_file(page.props, cfg, output, request_locale)
    console.print(f"Article rendered: {output}")
    console.print(f"Title: {page.props.article.title}")
    for alternate in page.props.href_lang:
        console.print(f"  hreflang {alternate.href_lang}: {alternate.href}")
    for name, value in page.headers.items():
        console.print(f"{name}: {value}")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address."),
    port: int = typer.Option(8000, "--port", "-p", help="Bind port."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Serve the article pages over HTTP."""
    cfg = _load(config, log_level)
    setup_logging(cfg.logging, Path.cwd() if cfg.logging.file else None)
    console.print(f"Serving article pages on http://{host}:{port}")
    uvicorn.run(create_app(cfg), host=host, port=port, log_level=cfg.logging.level.lower())


if __name__ == "__main__":
    app()

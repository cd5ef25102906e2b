"""Tests for the Typer CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from decoupled_articles import cli
from decoupled_articles.core.errors import NotFoundError
from decoupled_articles.core.types import (
    ArticlePage,
    ArticleProps,
    ContentItem,
    HrefAlternate,
    RouteKey,
    StaticPaths,
)

runner = CliRunner()


def _write_config(tmp_path: Path) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(
        "drupal:\n"
        "  api_base: https://cms.example.com\n"
        "site:\n"
        "  locales: [en, es]\n"
        "  origin: https://www.example.com\n"
        "logging:\n"
        "  console: false\n",
        encoding="utf-8",
    )
    return path


def test_paths_command_prints_json(monkeypatch, tmp_path):
    seen = {}

    async def fake_enumerate(cfg, **kwargs):
        seen["locales"] = cfg.site.locales
        seen["requested"] = kwargs["locales"]
        return StaticPaths(paths=[RouteKey("en", "foo"), RouteKey("es", "bar/baz")])

    monkeypatch.setattr(cli, "enumerate_paths", fake_enumerate)

    result = runner.invoke(cli.app, ["paths", "--config", str(_write_config(tmp_path)), "--json"])

    assert result.exit_code == 0, result.output
    assert seen["locales"] == ["en", "es"]
    assert seen["requested"] is None
    assert json.loads(result.output)["paths"][1] == {"params": {"slug": ["bar/baz"]}, "locale": "es"}


def test_paths_command_locale_override(monkeypatch, tmp_path):
    seen = {}

    async def fake_enumerate(cfg, **kwargs):
        seen["configured"] = list(cfg.site.locales)
        seen["requested"] = kwargs["locales"]
        return StaticPaths()

    monkeypatch.setattr(cli, "enumerate_paths", fake_enumerate)

    result = runner.invoke(
        cli.app, ["paths", "--config", str(_write_config(tmp_path)), "-l", "es", "--json"]
    )

    assert result.exit_code == 0, result.output
    assert seen["configured"] == ["en", "es"]
    assert seen["requested"] == ["es"]


def test_paths_command_table_prefixes_non_default_locales(monkeypatch, tmp_path):
    async def fake_enumerate(cfg, **kwargs):
        return StaticPaths(paths=[RouteKey("en", "foo"), RouteKey("es", "bar")])

    monkeypatch.setattr(cli, "enumerate_paths", fake_enumerate)

    result = runner.invoke(cli.app, ["paths", "--config", str(_write_config(tmp_path))])

    assert result.exit_code == 0, result.output
    assert "Article routes (2)" in result.output
    assert "/articles/foo" in result.output
    assert "/es/articles/bar" in result.output


def test_render_command_writes_html(monkeypatch, tmp_path):
    seen = {}

    async def fake_resolve(cfg, locale, slug, preview=None, **kwargs):
        seen.update(locale=locale, slug=slug, preview=preview)
        props = ArticleProps(
            article=ContentItem(id="a1", title="Hello", body={"value": "<p>Hi</p>"}),
            href_lang=[HrefAlternate("en", "https://www.example.com/en/articles/hello")],
        )
        return ArticlePage(props=props, headers={"Cache-Control": "public, s-maxage=10, stale-while-revalidate=6000"})

    monkeypatch.setattr(cli, "resolve_article", fake_resolve)
    output = tmp_path / "hello.html"

    result = runner.invoke(
        cli.app,
        [
            "render",
            "--config", str(_write_config(tmp_path)),
            "--slug", "hello",
            "--locale", "es",
            "--preview-key", "KEY",
            "--revision", "9",
            "--output", str(output),
        ],
    )

    assert result.exit_code == 0, result.output
    assert seen["locale"] == "es"
    assert seen["slug"] == "hello"
    assert seen["preview"].key == "KEY"
    assert seen["preview"].resource_version_id == "9"
    assert "<p>Hi</p>" in output.read_text(encoding="utf-8")
    assert "stale-while-revalidate=6000" in result.output


def test_render_command_exits_nonzero_on_failure(monkeypatch, tmp_path):
    async def fake_resolve(*args, **kwargs):
        raise NotFoundError("/en/articles/missing")

    monkeypatch.setattr(cli, "resolve_article", fake_resolve)

    result = runner.invoke(
        cli.app, ["render", "--config", str(_write_config(tmp_path)), "--slug", "missing"]
    )

    assert result.exit_code == 1
    assert "Article resolution failed" in result.output


def test_serve_command_runs_app_with_uvicorn(monkeypatch, tmp_path):
    seen = {}

    def fake_run(app, **kwargs):
        seen["app"] = app
        seen.update(kwargs)

    monkeypatch.setattr(cli.uvicorn, "run", fake_run)

    result = runner.invoke(
        cli.app, ["serve", "--config", str(_write_config(tmp_path)), "--port", "8081"]
    )

    assert result.exit_code == 0, result.output
    assert seen["host"] == "127.0.0.1"
    assert seen["port"] == 8081
    assert seen["log_level"] == "info"
    assert seen["app"].state.config.site.locales == ["en", "es"]
    assert {route.path for route in seen["app"].routes} >= {"/healthz", "/paths"}

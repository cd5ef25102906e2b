from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from .config import AppConfig, get_image_url
from .core.types import ArticleProps


def _environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(Path(__file__).parent / "templates")),
        autoescape=select_autoescape(["html"]),
    )


def render_article(props: ArticleProps, cfg: AppConfig, locale: str | None = None) -> str:
    """Render an article page.

    The body markup is inserted verbatim; sanitising it is the CMS's job.
    """
    template = _environment().get_template("article.html")
    article = props.article
    image_src = get_image_url(cfg) + article.image_path if article.image_path else ""

    return template.render(
        lang=locale or cfg.site.default_locale,
        site_title=cfg.site.title,
        description=cfg.site.description,
        alternates=props.href_lang,
        article=article,
        image_src=image_src,
        body=Markup(article.body_html),
    )


def render_article_to_file(props: ArticleProps, cfg: AppConfig, output_path: Path, locale: str | None = None) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_article(props, cfg, locale), encoding="utf-8")

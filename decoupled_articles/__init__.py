"""
Decoupled Articles - server-rendered article pages for a headless Drupal site.

This package fetches article content and preview drafts from a Drupal
JSON:API backend, shapes them into page props with hreflang alternates,
renders HTML, and enumerates the localized article routes.

Entry points are the CLI (`decoupled-articles paths|render`) and the
FastAPI app built by `decoupled_articles.server.create_app`.

Example:
    $ decoupled-articles render --locale en --slug hello -o out/hello.html
"""

__all__ = [
    "__version__",
    "enumerate_paths",
    "extract_slug",
    "is_multi_language",
    "resolve_article",
]
__version__ = "0.1.0"

from .article import resolve_article
from .core.locale import is_multi_language
from .paths import enumerate_paths, extract_slug

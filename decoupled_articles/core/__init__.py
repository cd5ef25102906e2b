"""
Core domain models and business logic.

This package contains data types, errors and locale rules that are
independent of the CMS transport and of rendering.
"""

from .errors import (
    DecoupledArticlesError,
    DuplicateRouteError,
    MalformedAliasError,
    NotFoundError,
    UpstreamFetchError,
)
from .locale import build_locales, is_multi_language, store_locale
from .types import (
    ArticlePage,
    ArticleProps,
    ContentItem,
    HrefAlternate,
    Locale,
    PathAlias,
    PreviewData,
    RouteKey,
    StaticPaths,
)

__all__ = [
    "ArticlePage",
    "ArticleProps",
    "ContentItem",
    "HrefAlternate",
    "Locale",
    "PathAlias",
    "PreviewData",
    "RouteKey",
    "StaticPaths",
    "DecoupledArticlesError",
    "DuplicateRouteError",
    "MalformedAliasError",
    "NotFoundError",
    "UpstreamFetchError",
    "build_locales",
    "is_multi_language",
    "store_locale",
]

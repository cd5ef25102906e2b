"""
Core data types for decoupled article pages.

This module defines the read-only, request-scoped projections of CMS state:
- Locale: A configured locale and whether it is the default
- ContentItem: An article as returned by the CMS
- PathAlias: A localized path for one article
- RouteKey: The (locale, slug) identity of a renderable page
- PreviewData: Draft override key, optionally pinning a revision
- HrefAlternate: Cross-locale URL advertisement
- ArticleProps / ArticlePage: What the resolver hands to the renderer
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Locale:
    """A configured locale.

    Attributes:
        code: Language tag such as "en" or "es"
        is_default: Whether pages in this locale are served without a prefix
    """
    code: str
    is_default: bool = False


@dataclass(frozen=True)
class PathAlias:
    """A path alias bound to one article in one locale."""
    alias: str
    langcode: str | None = None


@dataclass
class ContentItem:
    """An article fetched from the CMS.

    Attributes:
        id: Stable identifier shared by every translation of the article
        title: The article headline
        body: Rich text payload, passed through unmodified ({"value": ..., "format": ...})
        path: The canonical path alias for the locale it was fetched in
        image_path: Nested media image URL, relative to the image host
        raw: The normalized resource the item was built from
    """
    id: str
    title: str = ""
    body: dict[str, Any] | None = None
    path: PathAlias | None = None
    image_path: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def body_html(self) -> str:
        if not self.body:
            return ""
        return self.body.get("value") or ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "body": self.body,
            "path": (
                {"alias": self.path.alias, "langcode": self.path.langcode}
                if self.path
                else None
            ),
            "image_path": self.image_path,
        }


@dataclass(frozen=True)
class RouteKey:
    """The externally addressable identity of a renderable page."""
    locale: str
    slug: str

    def to_params(self) -> dict[str, Any]:
        return {"params": {"slug": [self.slug]}, "locale": self.locale}


@dataclass
class StaticPaths:
    """Complete route set for article pages.

    fallback is always False: any RouteKey outside ``paths`` is a hard miss.
    """
    paths: list[RouteKey] = field(default_factory=list)
    fallback: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "paths": [route.to_params() for route in self.paths],
            "fallback": self.fallback,
        }


@dataclass(frozen=True)
class PreviewData:
    """Preview token carried by a draft request.

    Attributes:
        key: Preview key issued by the CMS
        resource_version_id: Optional revision to pin all lookups to
    """
    key: str
    resource_version_id: str | None = None


@dataclass(frozen=True)
class HrefAlternate:
    href_lang: str
    href: str

    def to_dict(self) -> dict[str, str]:
        return {"hrefLang": self.href_lang, "href": self.href}


@dataclass
class ArticleProps:
    """Props consumed by the page renderer."""
    article: ContentItem
    href_lang: list[HrefAlternate] = field(default_factory=list)
    revalidate: int = 60

    def to_dict(self) -> dict[str, Any]:
        return {
            "article": self.article.to_dict(),
            "hrefLang": [alt.to_dict() for alt in self.href_lang],
            "revalidate": self.revalidate,
        }


@dataclass
class ArticlePage:
    """A resolved article together with the response headers to send."""
    props: ArticleProps
    headers: dict[str, str] = field(default_factory=dict)

"""
Article resolution for a single page request.

Given (locale, slug, optional preview data) this module:
1. Builds the canonical path, locale-prefixed on multi-language sites
2. Fetches the draft from the decoupled-preview endpoint when a preview key is present
3. Pins a revision through the ``resourceVersion`` parameter when one is given
4. Resolves the article by path (or returns the draft override)
5. Resolves the article's alias in every locale for hreflang alternates
6. Returns page props plus the Cache-Control header

Nothing is retried or degraded: every failure propagates to the caller.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Any

import httpx

from .config import AppConfig, cache_control_header, get_origin
from .core.errors import NotFoundError, UpstreamFetchError
from .core.locale import is_multi_language, store_locale
from .core.types import (
    ArticlePage,
    ArticleProps,
    ContentItem,
    HrefAlternate,
    PathAlias,
    PreviewData,
)
from .store import DrupalStore, get_path, normalize_document
from .utils.logging import log_event


ARTICLE_TYPE = "node--article"
MEDIA_IMAGE_INCLUDE = "field_media_image.field_media_image"
ARTICLE_FIELDS = (
    "id",
    "title",
    "body",
    "path.alias",
    "path.langcode",
    "field_media_image.field_media_image.uri.url",
)
ALTERNATE_FIELDS = ("id", "path.alias", "path.langcode")


def canonical_path(locale: str, slug: str | Sequence[str], multi_language: bool) -> str:
    """``/articles/{slug}``, prefixed with ``/{locale}`` on multi-language sites."""
    if not isinstance(slug, str):
        slug = "/".join(slug)
    path = f"/articles/{slug.strip('/')}"
    if multi_language:
        return f"/{locale}{path}"
    return path


def to_content_item(obj: dict[str, Any]) -> ContentItem:
    """Shape a normalized article resource into a ContentItem."""
    path = obj.get("path") or {}
    alias = path.get("alias")
    return ContentItem(
        id=obj["id"],
        title=obj.get("title") or "",
        body=obj.get("body"),
        path=PathAlias(alias=alias, langcode=path.get("langcode")) if alias else None,
        image_path=get_path(obj, "field_media_image.field_media_image.uri.url"),
        raw=obj,
    )


async def fetch_preview(store: DrupalStore, preview: PreviewData) -> ContentItem:
    """Fetch the draft article behind a preview key.

    Authenticates only when client credentials are configured; otherwise the
    preview request is attempted anonymously.
    """
    url = f"{store.api_root}decoupled-preview/{preview.key}?include={MEDIA_IMAGE_INCLUDE}"
    headers: dict[str, str] = {}
    if store.has_credentials:
        headers["Authorization"] = await store.get_auth_header()

    try:
        document = await store.fetch_jsonapi_endpoint(url, headers)
    except UpstreamFetchError as exc:
        if exc.status_code == 404:
            raise UpstreamFetchError(url, 404, "Unknown preview key") from exc
        raise

    normalized = normalize_document(document)
    if not isinstance(normalized, dict) or not normalized.get("id"):
        raise UpstreamFetchError(url, None, "Preview payload does not contain a single resource")
    return to_content_item(normalized)


async def resolve_content(
    store: DrupalStore,
    path: str,
    override: ContentItem | None = None,
    pinned_revision: bool = False,
) -> ContentItem:
    """Resolve the article at ``path`` unless an override item is supplied.

    A pinned revision is fetched by the override's id so the draft identity is
    kept while the ``resourceVersion`` parameter picks the revision.
    """
    if override is not None and not pinned_revision:
        return override
    if override is not None:
        obj = await store.get_object(ARTICLE_TYPE, fields=ARTICLE_FIELDS, id=override.id)
    else:
        obj = await store.get_object_by_path(ARTICLE_TYPE, path, fields=ARTICLE_FIELDS)
    return to_content_item(obj)


async def _alternate_for_locale(
    cfg: AppConfig,
    article_id: str,
    locale: str,
    multi_language: bool,
    origin: str,
    transport: httpx.AsyncBaseTransport | None,
    logger: logging.Logger | None,
) -> HrefAlternate:
    store = DrupalStore.from_config(
        cfg, locale=store_locale(locale, multi_language), transport=transport, logger=logger
    )
    obj = await store.get_object(ARTICLE_TYPE, fields=ALTERNATE_FIELDS, id=article_id)
    path = obj.get("path") or {}
    alias = path.get("alias")
    if not alias:
        raise UpstreamFetchError(
            store.api_root + f"node/article/{article_id}",
            None,
            f"No path alias in locale {locale!r}",
        )
    langcode = path.get("langcode") or locale
    return HrefAlternate(href_lang=langcode, href=f"{origin}/{langcode}{alias}")


async def resolve_alternates(
    cfg: AppConfig,
    article_id: str,
    locales: Sequence[str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    logger: logging.Logger | None = None,
) -> list[HrefAlternate]:
    """Resolve the hreflang alternates of an article, one per locale, in locale order.

    ``locales`` narrows the configured set; store scoping always follows the
    full site configuration.
    """
    multi_language = is_multi_language(cfg.site.locales)
    locales = list(locales if locales is not None else cfg.site.locales)
    origin = get_origin(cfg.site)
    alternates = await asyncio.gather(
        *(
            _alternate_for_locale(cfg, article_id, locale, multi_language, origin, transport, logger)
            for locale in locales
        )
    )
    return list(alternates)


async def resolve_article(
    cfg: AppConfig,
    locale: str,
    slug: str | Sequence[str],
    preview: PreviewData | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    logger: logging.Logger | None = None,
) -> ArticlePage:
    """Resolve props and response headers for one article page.

    Args:
        cfg: Application configuration
        locale: Locale of the incoming request
        slug: Slug (or slug segments) after /articles/
        preview: Optional preview data (draft key and pinned revision)
        transport: Optional httpx transport for the content stores
        logger: Optional logger for structured events

    Returns:
        ArticlePage with props and the Cache-Control header

    Raises:
        NotFoundError: Unknown locale, or no article at the canonical path
        UpstreamFetchError: The CMS or preview endpoint failed
    """
    locales = list(cfg.site.locales)
    if locale not in locales:
        raise NotFoundError(f"locale {locale!r}")
    multi_language = is_multi_language(locales)

    store = DrupalStore.from_config(
        cfg, locale=store_locale(locale, multi_language), transport=transport, logger=logger
    )
    path = canonical_path(locale, slug, multi_language)

    override: ContentItem | None = None
    if preview is not None and preview.key:
        override = await fetch_preview(store, preview)

    pinned_revision = bool(preview is not None and preview.resource_version_id)
    if pinned_revision:
        store.add_custom_param({"resourceVersion": f"id:{preview.resource_version_id}"})

    store.add_include([MEDIA_IMAGE_INCLUDE])
    article = await resolve_content(store, path, override=override, pinned_revision=pinned_revision)
    href_lang = await resolve_alternates(cfg, article.id, transport=transport, logger=logger)

    log_event(
        logger,
        "Article resolved",
        event="article_resolved",
        locale=locale,
        path=path,
        article_id=article.id,
        preview=override is not None,
        alternates=len(href_lang),
    )
    return ArticlePage(
        props=ArticleProps(article=article, href_lang=href_lang, revalidate=cfg.cache.revalidate),
        headers={"Cache-Control": cache_control_header(cfg.cache)},
    )

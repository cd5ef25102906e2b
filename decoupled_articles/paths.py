"""
Route enumeration for article pages.

For every configured locale the CMS is asked for all articles (id and path
alias only); each alias is reduced to its slug and emitted as a RouteKey.
Per-locale listings run concurrently and are joined fail-fast: one failing
locale fails the whole enumeration, so callers never see a partial route set.
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Sequence

import httpx

from .config import AppConfig
from .core.errors import DuplicateRouteError, MalformedAliasError, NotFoundError
from .core.locale import is_multi_language, store_locale
from .core.types import RouteKey, StaticPaths
from .store import DrupalStore, get_path
from .utils.logging import log_event, log_warning


ARTICLE_TYPE = "node--article"
LISTING_FIELDS = ("id", "path.alias")

# matches everything after /articles/
_ALIAS_RE = re.compile(r"^/articles/(.*)$")


def extract_slug(alias: str | None) -> str:
    """Return the part of an alias after the ``/articles/`` prefix.

    Raises:
        MalformedAliasError: The alias does not start with /articles/
    """
    match = _ALIAS_RE.match(alias or "")
    if match is None:
        raise MalformedAliasError(alias or "")
    return match.group(1)


async def _paths_for_locale(
    cfg: AppConfig,
    locale: str,
    multi_language: bool,
    transport: httpx.AsyncBaseTransport | None,
    logger: logging.Logger | None,
) -> list[RouteKey]:
    store = DrupalStore.from_config(
        cfg, locale=store_locale(locale, multi_language), transport=transport, logger=logger
    )
    articles = await store.get_object(ARTICLE_TYPE, fields=LISTING_FIELDS, all_pages=True)

    routes: list[RouteKey] = []
    seen: dict[str, str] = {}
    for article in articles:
        alias = get_path(article, "path.alias")
        try:
            slug = extract_slug(alias)
        except MalformedAliasError:
            if cfg.paths.strict_aliases:
                raise
            log_warning(
                logger,
                "Skipping article with malformed alias",
                event="malformed_alias_skipped",
                locale=locale,
                article_id=article.get("id"),
                alias=alias,
            )
            continue
        article_id = article.get("id") or ""
        if slug in seen:
            # same article again: overlapping pages
            if seen[slug] == article_id:
                continue
            if cfg.paths.strict_aliases:
                raise DuplicateRouteError(locale, slug, seen[slug], article_id)
            log_warning(
                logger,
                "Skipping article with duplicate slug",
                event="duplicate_slug_skipped",
                locale=locale,
                slug=slug,
                article_id=article_id,
                kept_id=seen[slug],
            )
            continue
        seen[slug] = article_id
        routes.append(RouteKey(locale=locale, slug=slug))
    return routes


async def enumerate_paths(
    cfg: AppConfig,
    locales: Sequence[str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    logger: logging.Logger | None = None,
) -> StaticPaths:
    """Build the complete article route set across all locales.

    Args:
        cfg: Application configuration
        locales: Subset of the configured locale codes to enumerate (defaults
            to all of cfg.site.locales); store scoping follows the full config
        transport: Optional httpx transport for the content stores
        logger: Optional logger for structured events

    Returns:
        StaticPaths ordered by locale (input order), then by CMS order

    Raises:
        NotFoundError: A requested locale is not configured
        DuplicateRouteError: Two articles share a slug (strict aliases only)
    """
    multi_language = is_multi_language(cfg.site.locales)
    locales = list(locales if locales is not None else cfg.site.locales)
    unknown = [locale for locale in locales if locale not in cfg.site.locales]
    if unknown:
        raise NotFoundError(f"locale {unknown[0]!r}")

    per_locale = await asyncio.gather(
        *(
            _paths_for_locale(cfg, locale, multi_language, transport, logger)
            for locale in locales
        )
    )
    paths = [route for routes in per_locale for route in routes]

    log_event(
        logger,
        "Article paths enumerated",
        event="paths_enumerated",
        locales=locales,
        total=len(paths),
    )
    return StaticPaths(paths=paths, fallback=False)

"""Exceptions raised while resolving article content."""

from __future__ import annotations


class DecoupledArticlesError(Exception):
    """Base class for every resolution failure."""


class MalformedAliasError(DecoupledArticlesError):
    """A path alias does not live under the /articles/ prefix."""

    def __init__(self, alias: str):
        super().__init__(f"Alias does not match /articles/<slug>: {alias!r}")
        self.alias = alias


class NotFoundError(DecoupledArticlesError):
    """No content item exists at the requested path or id."""

    def __init__(self, target: str):
        super().__init__(f"Content not found: {target}")
        self.target = target


class UpstreamFetchError(DecoupledArticlesError):
    """The CMS or the preview endpoint failed to answer."""

    def __init__(self, url: str, status_code: int | None = None, detail: str | None = None):
        message = f"Upstream fetch failed for {url}"
        if status_code is not None:
            message += f" (HTTP {status_code})"
        if detail:
            message += f": {detail}"
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.detail = detail


class DuplicateRouteError(DecoupledArticlesError):
    """Two different articles share one slug within a locale."""

    def __init__(self, locale: str, slug: str, first_id: str, second_id: str):
        super().__init__(
            f"Slug {slug!r} in locale {locale!r} is used by {first_id} and {second_id}"
        )
        self.locale = locale
        self.slug = slug
        self.first_id = first_id
        self.second_id = second_id

"""
Drupal JSON:API content store.

A thin async adapter over httpx for the handful of calls the article pages
need: list or fetch a resource, resolve a path alias through the
decoupled-router module, add includes/custom query parameters, and obtain an
OAuth bearer header. One store is created per locale scope per request; no
connection or object cache outlives it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

import httpx

from ..config import AppConfig, get_api_base, get_client_credentials
from ..core.errors import NotFoundError, UpstreamFetchError
from ..utils.logging import log_cms_request
from .jsonapi import normalize_document, project, sparse_fieldset


JSONAPI_ACCEPT = "application/vnd.api+json"


async def fetch_jsonapi_endpoint(
    url: str,
    headers: dict[str, str] | None = None,
    params: dict[str, str] | None = None,
    timeout: float = 20.0,
    trust_env: bool = True,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any]:
    """GET a JSON:API endpoint and return the decoded document.

    A 404 is an upstream failure like any other status here; only the path
    lookup in ``DrupalStore.get_object_by_path`` turns it into NotFoundError.

    Raises:
        UpstreamFetchError: Transport failure, non-2xx status, or invalid JSON
    """
    request_headers = {"Accept": JSONAPI_ACCEPT}
    request_headers.update(headers or {})
    try:
        async with httpx.AsyncClient(
            timeout=timeout, trust_env=trust_env, transport=transport
        ) as client:
            resp = await client.get(url, params=params, headers=request_headers)
    except httpx.HTTPError as exc:
        raise UpstreamFetchError(url, None, f"{type(exc).__name__}: {exc}") from exc

    if resp.status_code >= 400:
        raise UpstreamFetchError(url, resp.status_code, resp.text[:200])
    try:
        return resp.json()
    except ValueError as exc:
        raise UpstreamFetchError(url, resp.status_code, f"Invalid JSON: {exc}") from exc


class QueryParams:
    """Request-scoped query parameters applied to every store query."""

    def __init__(self) -> None:
        self.includes: list[str] = []
        self.custom: dict[str, str] = {}

    def add_include(self, relationships: Iterable[str]) -> None:
        for relationship in relationships:
            if relationship not in self.includes:
                self.includes.append(relationship)

    def add_custom_param(self, params: dict[str, Any]) -> None:
        self.custom.update({key: str(value) for key, value in params.items()})

    def build(self, object_name: str, fields: Iterable[str] | None = None) -> dict[str, str]:
        query: dict[str, str] = {}
        if self.includes:
            query["include"] = ",".join(self.includes)
        names = sparse_fieldset(fields) if fields is not None else []
        if names:
            query[f"fields[{object_name}]"] = ",".join(names)
        query.update(self.custom)
        return query


class DrupalStore:
    """Content store scoped to one locale of a Drupal JSON:API backend.

    Attributes:
        api_base: Site base URL without trailing slash
        default_locale: Locale prefix for JSON:API requests ("" when unscoped)
        params: Includes and custom parameters added to subsequent queries
    """

    def __init__(
        self,
        api_base: str,
        default_locale: str = "",
        client_id: str | None = None,
        client_secret: str | None = None,
        timeout: float = 20.0,
        trust_env: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.api_base = api_base.rstrip("/")
        self.default_locale = default_locale
        self.client_id = client_id
        self.client_secret = client_secret
        self.timeout = timeout
        self.trust_env = trust_env
        self.transport = transport
        self.logger = logger
        self.params = QueryParams()
        self._auth_header: str | None = None

    @classmethod
    def from_config(
        cls,
        cfg: AppConfig,
        locale: str = "",
        transport: httpx.AsyncBaseTransport | None = None,
        logger: logging.Logger | None = None,
    ) -> "DrupalStore":
        credentials = get_client_credentials(cfg.drupal)
        client_id, client_secret = credentials if credentials else (None, None)
        return cls(
            api_base=get_api_base(cfg.drupal),
            default_locale=locale,
            client_id=client_id,
            client_secret=client_secret,
            timeout=cfg.drupal.timeout_seconds,
            trust_env=cfg.drupal.trust_env,
            transport=transport,
            logger=logger,
        )

    @property
    def api_root(self) -> str:
        if self.default_locale:
            return f"{self.api_base}/{self.default_locale}/jsonapi/"
        return f"{self.api_base}/jsonapi/"

    @property
    def has_credentials(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def add_include(self, relationships: Iterable[str]) -> None:
        self.params.add_include(relationships)

    def add_custom_param(self, params: dict[str, Any]) -> None:
        self.params.add_custom_param(params)

    async def get_auth_header(self) -> str:
        """Return an OAuth2 client-credentials bearer header, fetching the token once."""
        if self._auth_header:
            return self._auth_header
        if not self.has_credentials:
            raise ValueError("Missing client credentials (set CLIENT_ID and CLIENT_SECRET)")

        url = f"{self.api_base}/oauth/token"
        data = {
            "grant_type": "client_credentials",
            "client_id": self.client_id,
            "client_secret": self.client_secret,
        }
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, trust_env=self.trust_env, transport=self.transport
            ) as client:
                resp = await client.post(url, data=data)
        except httpx.HTTPError as exc:
            raise UpstreamFetchError(url, None, f"{type(exc).__name__}: {exc}") from exc
        if resp.status_code >= 400:
            raise UpstreamFetchError(url, resp.status_code, resp.text[:200])

        token = resp.json().get("access_token")
        if not token:
            raise UpstreamFetchError(url, resp.status_code, "Token response without access_token")
        self._auth_header = f"Bearer {token}"
        return self._auth_header

    async def get_object(
        self,
        object_name: str,
        fields: Iterable[str] | None = None,
        id: str | None = None,
        all_pages: bool = False,
    ) -> Any:
        """Fetch one resource by id, or the collection of ``object_name``.

        Collections follow ``links.next`` when ``all_pages`` is set.
        """
        fields = list(fields) if fields is not None else None
        url = self.api_root + _resource_path(object_name)
        if id is not None:
            url = f"{url}/{id}"
        query = self.params.build(object_name, fields)

        document = await self._get(url, query)
        normalized = normalize_document(document)
        if id is not None:
            if normalized is None:
                raise UpstreamFetchError(url, None, f"No {object_name} resource in response")
            return project(normalized, fields)

        items = list(normalized or [])
        next_url = _next_link(document) if all_pages else None
        while next_url:
            # The next link already carries the original query string.
            document = await self._get(next_url, None)
            items.extend(normalize_document(document) or [])
            next_url = _next_link(document)
        return [project(item, fields) for item in items]

    async def get_object_by_path(
        self,
        object_name: str,
        path: str,
        fields: Iterable[str] | None = None,
    ) -> Any:
        """Resolve a path alias with decoupled-router, then fetch that resource.

        Raises:
            NotFoundError: The path is unknown, or the entity it points at is gone
            UpstreamFetchError: Any other CMS failure
        """
        url = f"{self.api_base}/router/translate-path"
        try:
            translated = await self._get(url, {"path": path, "_format": "json"})
            uuid = (translated.get("entity") or {}).get("uuid")
            if not uuid:
                raise NotFoundError(path)
            return await self.get_object(object_name, fields=fields, id=uuid)
        except UpstreamFetchError as exc:
            if exc.status_code == 404:
                raise NotFoundError(path) from exc
            raise

    async def fetch_jsonapi_endpoint(self, url: str, headers: dict[str, str] | None = None) -> dict[str, Any]:
        """GET an arbitrary JSON:API URL with this store's transport settings."""
        return await fetch_jsonapi_endpoint(
            url,
            headers=headers,
            timeout=self.timeout,
            trust_env=self.trust_env,
            transport=self.transport,
        )

    async def _get(self, url: str, params: dict[str, str] | None) -> dict[str, Any]:
        headers: dict[str, str] = {}
        if self.has_credentials:
            headers["Authorization"] = await self.get_auth_header()
        log_cms_request(self.logger, url, self.default_locale, params)
        return await fetch_jsonapi_endpoint(
            url,
            headers=headers,
            params=params,
            timeout=self.timeout,
            trust_env=self.trust_env,
            transport=self.transport,
        )


def _resource_path(object_name: str) -> str:
    """``node--article`` -> ``node/article``."""
    return object_name.replace("--", "/", 1)


def _next_link(document: dict[str, Any]) -> str | None:
    link = (document.get("links") or {}).get("next")
    if isinstance(link, dict):
        return link.get("href")
    return link or None

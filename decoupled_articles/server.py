"""
HTTP surface for article pages.

Routes:
  - GET /articles/{slug}           article in the default locale
  - GET /{locale}/articles/{slug}  article in a given locale
  - GET /paths                     the enumerated route set
  - GET /healthz                   liveness

Preview data is passed as ``preview_key`` / ``resource_version_id`` query
parameters. Missing content maps to 404; every other resolution failure is
answered with a generic 500.
"""

from __future__ import annotations

import httpx
from fastapi import APIRouter, FastAPI, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse

from .article import resolve_article
from .config import AppConfig
from .core.errors import DecoupledArticlesError, NotFoundError
from .core.types import PreviewData
from .paths import enumerate_paths
from .renderer import render_article
from .utils.logging import get_logger

router = APIRouter(tags=["Articles"])


def _preview_from_query(preview_key: str | None, resource_version_id: str | None) -> PreviewData | None:
    if not preview_key and not resource_version_id:
        return None
    return PreviewData(key=preview_key or "", resource_version_id=resource_version_id)


async def _render(request: Request, locale: str, slug: str, preview: PreviewData | None) -> HTMLResponse:
    cfg: AppConfig = request.app.state.config
    transport: httpx.AsyncBaseTransport | None = request.app.state.transport
    page = await resolve_article(
        cfg,
        locale,
        slug,
        preview=preview,
        transport=transport,
        logger=get_logger(),
    )
    html = render_article(page.props, cfg, locale)
    return HTMLResponse(content=html, headers=page.headers)


@router.get("/healthz")
async def healthz():
    return {"status": "ok"}


@router.get("/paths")
async def list_paths(request: Request):
    """Return every statically resolvable article route."""
    cfg: AppConfig = request.app.state.config
    paths = await enumerate_paths(cfg, transport=request.app.state.transport, logger=get_logger())
    return paths.to_dict()


@router.get("/articles/{slug:path}", response_class=HTMLResponse)
async def default_locale_article(
    request: Request,
    slug: str,
    preview_key: str | None = Query(None, description="Decoupled preview key"),
    resource_version_id: str | None = Query(None, description="Revision to pin"),
):
    cfg: AppConfig = request.app.state.config
    return await _render(
        request, cfg.site.default_locale, slug, _preview_from_query(preview_key, resource_version_id)
    )


@router.get("/{locale}/articles/{slug:path}", response_class=HTMLResponse)
async def localized_article(
    request: Request,
    locale: str,
    slug: str,
    preview_key: str | None = Query(None, description="Decoupled preview key"),
    resource_version_id: str | None = Query(None, description="Revision to pin"),
):
    return await _render(request, locale, slug, _preview_from_query(preview_key, resource_version_id))


async def _not_found_handler(request: Request, exc: NotFoundError):
    get_logger().warning("Article not found: %s", exc.target, extra={"event": "not_found", "url": str(request.url)})
    return PlainTextResponse("Not Found", status_code=404)


async def _resolution_error_handler(request: Request, exc: DecoupledArticlesError):
    get_logger().error(
        "Article resolution failed: %s",
        exc,
        extra={"event": "resolution_failed", "url": str(request.url), "error_type": type(exc).__name__},
    )
    return JSONResponse({"detail": "Internal Server Error"}, status_code=500)


def create_app(cfg: AppConfig, transport: httpx.AsyncBaseTransport | None = None) -> FastAPI:
    """Build the FastAPI app; ``transport`` overrides the CMS HTTP transport."""
    app = FastAPI(
        title="Decoupled Articles",
        description="Server-rendered article pages backed by Drupal JSON:API.",
        version="0.1.0",
    )
    app.state.config = cfg
    app.state.transport = transport
    app.add_exception_handler(NotFoundError, _not_found_handler)
    app.add_exception_handler(DecoupledArticlesError, _resolution_error_handler)
    app.include_router(router)
    return app

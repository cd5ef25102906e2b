"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- DrupalConfig: JSON:API backend location and client credentials
- SiteConfig: Locales, frontend origin and page metadata
- PathsConfig: Route enumeration behavior
- CacheConfig: Response caching directives
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container

Configuration is always passed explicitly; nothing here is a process-wide
singleton. Secrets and URLs fall back to environment variables through the
``get_*`` helpers at the bottom of the module.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from typing import Any

import yaml


@dataclass
class DrupalConfig:
    """Configuration for the Drupal JSON:API backend.

    Attributes:
        api_base: Base URL of the Drupal site (falls back to DRUPAL_URL)
        client_id: OAuth client id (falls back to CLIENT_ID)
        client_secret: OAuth client secret (falls back to CLIENT_SECRET)
        timeout_seconds: HTTP request timeout
        trust_env: Whether to respect system proxy settings
    """

    api_base: str | None = None
    client_id: str | None = None
    client_secret: str | None = None
    timeout_seconds: float = 20.0
    trust_env: bool = True


@dataclass
class SiteConfig:
    """Configuration for the rendered site.

    Attributes:
        locales: Ordered list of configured locale codes
        default_locale: Locale served without a URL prefix
        origin: Public frontend origin used for hreflang links (falls back to FRONTEND_URL)
        image_url: Prefix for media image URLs (falls back to IMAGE_URL, then the API base)
        title: Page title advertised in the document head
        description: Page description advertised in the document head
    """

    locales: list[str] = field(default_factory=lambda: ["en"])
    default_locale: str = "en"
    origin: str | None = None
    image_url: str | None = None
    title: str = "Decoupled Drupal Demo"
    description: str = "Articles served from a decoupled Drupal backend."


@dataclass
class PathsConfig:
    """Configuration for route enumeration.

    Attributes:
        strict_aliases: Abort enumeration on an alias outside /articles/ (skip it otherwise)
    """

    strict_aliases: bool = True


@dataclass
class CacheConfig:
    """Configuration for response caching directives.

    Attributes:
        s_maxage: Shared-cache freshness window in seconds
        stale_while_revalidate: Window in seconds during which stale pages may be served
        revalidate: Suggested revalidation interval returned with the page props
    """

    s_maxage: int = 10
    stale_while_revalidate: int = 6000
    revalidate: int = 60


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "decoupled-articles.jsonl"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    drupal: DrupalConfig = field(default_factory=DrupalConfig)
    site: SiteConfig = field(default_factory=SiteConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


DEFAULT_CONFIG = AppConfig()


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return _fromdict(_asdict(DEFAULT_CONFIG))

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return _merge_config(DEFAULT_CONFIG, raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = _asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            known = {k: v for k, v in value.items() if k in data[key]}
            data[key].update(known)
        else:
            data[key] = value
    return _fromdict(data)


def _asdict(cfg: AppConfig) -> dict[str, Any]:
    """Convert AppConfig to nested dictionary."""
    return {
        "drupal": {
            "api_base": cfg.drupal.api_base,
            "client_id": cfg.drupal.client_id,
            "client_secret": cfg.drupal.client_secret,
            "timeout_seconds": cfg.drupal.timeout_seconds,
            "trust_env": cfg.drupal.trust_env,
        },
        "site": {
            "locales": list(cfg.site.locales),
            "default_locale": cfg.site.default_locale,
            "origin": cfg.site.origin,
            "image_url": cfg.site.image_url,
            "title": cfg.site.title,
            "description": cfg.site.description,
        },
        "paths": {
            "strict_aliases": cfg.paths.strict_aliases,
        },
        "cache": {
            "s_maxage": cfg.cache.s_maxage,
            "stale_while_revalidate": cfg.cache.stale_while_revalidate,
            "revalidate": cfg.cache.revalidate,
        },
        "logging": {
            "level": cfg.logging.level,
            "console": cfg.logging.console,
            "file": cfg.logging.file,
            "format": cfg.logging.format,
            "filename": cfg.logging.filename,
        },
    }


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(
        drupal=DrupalConfig(**data["drupal"]),
        site=SiteConfig(**data["site"]),
        paths=PathsConfig(**data.get("paths", {})),
        cache=CacheConfig(**data.get("cache", {})),
        logging=LoggingConfig(**data["logging"]),
    )


def get_api_base(cfg: DrupalConfig) -> str:
    """Get the Drupal base URL from inline config or environment variable."""
    api_base = cfg.api_base or os.getenv("DRUPAL_URL")
    if not api_base:
        raise ValueError("Missing Drupal API base (set drupal.api_base or DRUPAL_URL)")
    return api_base.rstrip("/")


def get_client_credentials(cfg: DrupalConfig) -> tuple[str, str] | None:
    """Get OAuth client credentials from config or environment variables.

    Returns (client_id, client_secret) tuple if both are configured, None otherwise.
    """
    client_id = cfg.client_id or os.getenv("CLIENT_ID")
    client_secret = cfg.client_secret or os.getenv("CLIENT_SECRET")
    if client_id and client_secret:
        return (client_id, client_secret)
    return None


def get_origin(cfg: SiteConfig) -> str:
    """Get the public frontend origin from inline config or environment variable."""
    return (cfg.origin or os.getenv("FRONTEND_URL") or "").rstrip("/")


def get_image_url(cfg: AppConfig) -> str:
    """Get the media image prefix, defaulting to the Drupal base URL."""
    image_url = cfg.site.image_url or os.getenv("IMAGE_URL")
    if image_url:
        return image_url.rstrip("/")
    return get_api_base(cfg.drupal)


def cache_control_header(cfg: CacheConfig) -> str:
    """Render the Cache-Control value attached to every resolved article."""
    return f"public, s-maxage={cfg.s_maxage}, stale-while-revalidate={cfg.stale_while_revalidate}"

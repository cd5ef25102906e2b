"""
Logging for CMS requests and article resolution.

Console output goes through rich; the optional file handler writes one JSON
object per line. Records pass through ``CredentialRedactor`` before any
handler sees them: OAuth bearer tokens, client secrets and decoupled-preview
keys never reach a log sink.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from rich.logging import RichHandler

from ..config import LoggingConfig


LOGGER_NAME = "decoupled_articles"
REDACTED = "***"

_RESERVED = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}

_BEARER_RE = re.compile(r"(Bearer\s+)[A-Za-z0-9._~+/=-]+", re.IGNORECASE)
_SECRET_PARAM_RE = re.compile(r"((?:client_secret|access_token)[\"']?\s*[=:]\s*[\"']?)[^\s&\"',}]+")
_PREVIEW_KEY_RE = re.compile(r"(decoupled-preview/)[^/?\s\"']+")
_SECRET_FIELDS = {"authorization", "client_secret", "access_token", "preview_key"}


def redact(text: str) -> str:
    """Mask bearer tokens, client secrets and preview keys inside ``text``."""
    text = _BEARER_RE.sub(rf"\g<1>{REDACTED}", text)
    text = _SECRET_PARAM_RE.sub(rf"\g<1>{REDACTED}", text)
    return _PREVIEW_KEY_RE.sub(rf"\g<1>{REDACTED}", text)


class CredentialRedactor(logging.Filter):
    """Rewrites a record's message and extras so no CMS credential is logged."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = redact(record.getMessage())
        record.msg = message
        record.args = None
        for key, value in _extract_extras(record).items():
            if key.lower() in _SECRET_FIELDS and value:
                setattr(record, key, REDACTED)
            elif isinstance(value, str):
                setattr(record, key, redact(value))
        return True


def setup_logging(cfg: LoggingConfig, log_dir: Path | None = None) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    level = _level_from_string(cfg.level)
    logger.setLevel(level)
    logger.handlers = []
    logger.filters = [CredentialRedactor()]
    logger.propagate = False

    if cfg.console:
        console_handler = RichHandler(rich_tracebacks=True, show_time=False, show_level=True)
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(console_handler)

    if cfg.file and log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / cfg.filename, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(_build_file_formatter(cfg.format))
        logger.addHandler(file_handler)

    return logger


def get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def log_event(logger: logging.Logger | None, message: str, **fields: Any) -> None:
    if logger is None:
        return
    logger.info(message, extra=fields)


def log_warning(logger: logging.Logger | None, message: str, **fields: Any) -> None:
    if logger is None:
        return
    logger.warning(message, extra=fields)


def log_cms_request(logger: logging.Logger | None, url: str, locale: str, params: dict[str, str] | None = None) -> None:
    """Debug-log one outgoing JSON:API request with its store scope and query."""
    if logger is None:
        return
    logger.debug(
        "CMS request %s",
        url,
        extra={"event": "cms_request", "url": url, "locale": locale or "-", "params": dict(params or {})},
    )


class JsonlFormatter(logging.Formatter):
    """One JSON object per record: timestamp, level, event, message, then extras."""

    def format(self, record: logging.LogRecord) -> str:
        extras = _extract_extras(record)
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "event": extras.pop("event", None),
            "message": record.getMessage(),
        }
        payload.update(extras)
        if record.exc_info:
            payload["error"] = redact(self.formatException(record.exc_info))
        return json.dumps(payload, ensure_ascii=False, default=str)


def _extract_extras(record: logging.LogRecord) -> dict[str, Any]:
    return {key: value for key, value in record.__dict__.items() if key not in _RESERVED}


def _build_file_formatter(fmt: str) -> logging.Formatter:
    if fmt == "jsonl":
        return JsonlFormatter()
    return logging.Formatter("%(asctime)s %(levelname)s %(message)s")


def _level_from_string(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)

"""Tests for credential redaction and JSONL log output."""

from __future__ import annotations

import asyncio
import json

from decoupled_articles.config import LoggingConfig
from decoupled_articles.store import DrupalStore
from decoupled_articles.utils.logging import redact, setup_logging
from fake_drupal import API_BASE


def test_redact_masks_bearer_secret_and_preview_key():
    text = (
        "Authorization: Bearer abc.def-123 "
        "client_secret=s3cr3t&grant_type=client_credentials "
        f"{API_BASE}/en/jsonapi/decoupled-preview/KEY123?include=x"
    )

    redacted = redact(text)

    assert "abc.def-123" not in redacted
    assert "s3cr3t" not in redacted
    assert "KEY123" not in redacted
    assert "Bearer ***" in redacted
    assert "grant_type=client_credentials" in redacted
    assert "decoupled-preview/***?include=x" in redacted


def test_jsonl_file_log_has_event_and_no_credentials(tmp_path):
    cfg = LoggingConfig(level="DEBUG", console=False, file=True, format="jsonl", filename="run.jsonl")
    logger = setup_logging(cfg, tmp_path)

    logger.info(
        "Token fetched: Bearer tok-1",
        extra={"event": "token", "authorization": "Bearer tok-1", "url": f"{API_BASE}/jsonapi/decoupled-preview/K9"},
    )
    for handler in logger.handlers:
        handler.flush()

    record = json.loads((tmp_path / "run.jsonl").read_text(encoding="utf-8").splitlines()[0])
    assert record["event"] == "token"
    assert record["level"] == "INFO"
    assert record["message"] == "Token fetched: Bearer ***"
    assert record["authorization"] == "***"
    assert record["url"].endswith("/jsonapi/decoupled-preview/***")


def test_cms_requests_are_logged_with_store_scope(tmp_path, drupal):
    cfg = LoggingConfig(level="DEBUG", console=False, file=True, format="jsonl", filename="cms.jsonl")
    logger = setup_logging(cfg, tmp_path)
    drupal.add_article("es", "a1", "Hola", "/articles/hola")
    store = DrupalStore(API_BASE, default_locale="es", transport=drupal.transport, logger=logger)

    asyncio.run(store.get_object("node--article", fields=["id", "path.alias"]))
    for handler in logger.handlers:
        handler.flush()

    lines = (tmp_path / "cms.jsonl").read_text(encoding="utf-8").splitlines()
    record = json.loads(lines[0])
    assert record["event"] == "cms_request"
    assert record["locale"] == "es"
    assert record["url"] == f"{API_BASE}/es/jsonapi/node/article"
    assert record["params"] == {"fields[node--article]": "path"}


def test_plain_format_uses_text_lines(tmp_path):
    cfg = LoggingConfig(level="INFO", console=False, file=True, format="plain", filename="plain.log")
    logger = setup_logging(cfg, tmp_path)

    logger.warning("client_secret=hunter2")
    for handler in logger.handlers:
        handler.flush()

    line = (tmp_path / "plain.log").read_text(encoding="utf-8").strip()
    assert line.endswith("WARNING client_secret=***")

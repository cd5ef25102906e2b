from __future__ import annotations

import pytest

from decoupled_articles.config import AppConfig
from fake_drupal import API_BASE, ORIGIN, FakeDrupal


@pytest.fixture
def drupal() -> FakeDrupal:
    return FakeDrupal()


@pytest.fixture
def cfg(monkeypatch) -> AppConfig:
    for name in ("DRUPAL_URL", "CLIENT_ID", "CLIENT_SECRET", "FRONTEND_URL", "IMAGE_URL"):
        monkeypatch.delenv(name, raising=False)
    config = AppConfig()
    config.drupal.api_base = API_BASE
    config.site.origin = ORIGIN
    config.site.locales = ["en", "es"]
    config.site.default_locale = "en"
    config.logging.console = False
    return config

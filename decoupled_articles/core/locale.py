"""Locale helpers deciding how CMS lookups are scoped."""

from __future__ import annotations

from collections.abc import Sequence

from .types import Locale


def is_multi_language(locales: Sequence[str]) -> bool:
    """Return True when more than one locale is configured."""
    return len(locales) > 1


def store_locale(locale: str, multi_language: bool) -> str:
    """Locale a content store should be scoped to.

    Single-language sites address content without a locale segment.
    """
    return locale if multi_language else ""


def build_locales(codes: Sequence[str], default: str | None = None) -> list[Locale]:
    """Build Locale records, flagging the default (first code when unset)."""
    if not codes:
        return []
    default_code = default if default in codes else codes[0]
    return [Locale(code=code, is_default=code == default_code) for code in codes]

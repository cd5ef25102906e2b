"""
Shared utility functions.

This package contains utility code used across the resolver,
the CLI and the HTTP surface.
"""

from .logging import (
    CredentialRedactor,
    JsonlFormatter,
    get_logger,
    log_cms_request,
    log_event,
    log_warning,
    redact,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "log_event",
    "log_warning",
    "log_cms_request",
    "redact",
    "CredentialRedactor",
    "JsonlFormatter",
]

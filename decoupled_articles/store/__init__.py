"""
Content store access.

This package wraps the Drupal JSON:API backend: request building,
authentication, and shaping of JSON:API documents into plain dicts.
"""

from .drupal import DrupalStore, QueryParams, fetch_jsonapi_endpoint
from .jsonapi import get_path, normalize_document, project

__all__ = [
    "DrupalStore",
    "QueryParams",
    "fetch_jsonapi_endpoint",
    "get_path",
    "normalize_document",
    "project",
]

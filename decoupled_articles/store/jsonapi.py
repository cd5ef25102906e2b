"""
JSON:API document shaping.

Drupal answers with JSON:API documents where attributes and relationships
live in separate members and related resources sit in ``included``. The
helpers here flatten a document into plain nested dicts and project the
result onto the dotted field paths a caller asked for, e.g.::

    project(obj, ["id", "path.alias", "field_media_image.field_media_image.uri.url"])
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any


ResourceKey = tuple[str | None, str | None]


def normalize_document(document: dict[str, Any]) -> dict[str, Any] | list[dict[str, Any]] | None:
    """Flatten a JSON:API document into plain dicts.

    Attributes are merged next to ``id`` and ``type``; relationships are
    replaced by the matching ``included`` resources (or a bare identifier
    when the related resource was not included).
    """
    included: dict[ResourceKey, dict[str, Any]] = {
        (res.get("type"), res.get("id")): res for res in document.get("included") or []
    }
    data = document.get("data")
    if data is None:
        return None
    if isinstance(data, list):
        return [_normalize_resource(res, included, frozenset()) for res in data]
    return _normalize_resource(data, included, frozenset())


def _normalize_resource(
    resource: dict[str, Any],
    included: dict[ResourceKey, dict[str, Any]],
    seen: frozenset[ResourceKey],
) -> dict[str, Any]:
    key = (resource.get("type"), resource.get("id"))
    seen = seen | {key}
    obj: dict[str, Any] = {"id": resource.get("id"), "type": resource.get("type")}
    obj.update(resource.get("attributes") or {})
    for name, relationship in (resource.get("relationships") or {}).items():
        linkage = relationship.get("data") if isinstance(relationship, dict) else None
        obj[name] = _resolve_linkage(linkage, included, seen)
    return obj


def _resolve_linkage(
    linkage: Any,
    included: dict[ResourceKey, dict[str, Any]],
    seen: frozenset[ResourceKey],
) -> Any:
    if linkage is None:
        return None
    if isinstance(linkage, list):
        return [_resolve_linkage(item, included, seen) for item in linkage]
    key = (linkage.get("type"), linkage.get("id"))
    target = included.get(key)
    # Cycles (e.g. a file pointing back at its owner) stop at the identifier.
    if target is None or key in seen:
        return {"id": linkage.get("id"), "type": linkage.get("type")}
    return _normalize_resource(target, included, seen)


def field_tree(fields: Iterable[str]) -> dict[str, dict]:
    """Turn dotted field paths into a nested selection tree."""
    tree: dict[str, dict] = {}
    for dotted in fields:
        node = tree
        for part in dotted.split("."):
            node = node.setdefault(part, {})
    return tree


def sparse_fieldset(fields: Iterable[str]) -> list[str]:
    """Top-level field names for a JSON:API ``fields[type]`` parameter."""
    return [name for name in field_tree(fields) if name not in ("id", "type")]


def project(value: Any, fields: Iterable[str] | None) -> Any:
    """Keep only the requested dotted paths of a normalized object."""
    if fields is None:
        return value
    return _project(value, field_tree(fields))


def _project(value: Any, tree: dict[str, dict]) -> Any:
    if not tree:
        return value
    if isinstance(value, list):
        return [_project(item, tree) for item in value]
    if not isinstance(value, dict):
        return value
    selected = {"id": value["id"]} if "id" in value else {}
    for name, subtree in tree.items():
        if name in value:
            selected[name] = _project(value[name], subtree)
    return selected


def get_path(value: Any, dotted: str) -> Any:
    """Read a dotted path from a normalized object, None when any hop is missing."""
    current = value
    for part in dotted.split("."):
        if not isinstance(current, dict):
            return None
        current = current.get(part)
    return current
